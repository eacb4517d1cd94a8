"""
The Comments context.
"""
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from inkwell.core.database import count
from inkwell.core.errors import ValidationFailure
from inkwell.models import Comment, Story, User
from inkwell.services import stories


class CommentAttrs(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    body: str = Field(min_length=1, max_length=10_000)


async def get_comment(session: AsyncSession, comment_id: int) -> Comment | None:
    return await session.get(Comment, comment_id)


async def can_see_comment(session: AsyncSession, comment: Comment, viewer: User | None) -> bool:
    """A comment is visible whenever its story is."""
    story = await stories.get_story(session, comment.story_id)
    return story is not None and await stories.can_see_story(session, story, viewer)


async def get_parent(session: AsyncSession, comment: Comment) -> Comment | None:
    if comment.parent_id is None:
        return None
    return await session.get(Comment, comment.parent_id)


def comments_of(commentable: Story | Comment):
    """Statement selecting the direct comments of a story or comment."""
    if isinstance(commentable, Story):
        return Comment.by_story(commentable.id)
    return Comment.by_parent(commentable.id)


async def comment_count(session: AsyncSession, commentable: Story | Comment) -> int:
    return await count(session, comments_of(commentable))


async def insert_comment(
    session: AsyncSession, author: User, commentable: Story | Comment, attrs: dict
) -> Comment:
    try:
        data = CommentAttrs.model_validate(attrs)
    except ValidationError as exc:
        raise ValidationFailure.from_pydantic(exc) from exc

    if isinstance(commentable, Story):
        story_id, parent_id = commentable.id, None
    else:
        story_id, parent_id = commentable.story_id, commentable.id

    comment = Comment(body=data.body, author_id=author.id, story_id=story_id, parent_id=parent_id)
    session.add(comment)
    await session.commit()
    return comment


async def update_comment(session: AsyncSession, comment: Comment, attrs: dict) -> Comment:
    try:
        data = CommentAttrs.model_validate(attrs)
    except ValidationError as exc:
        raise ValidationFailure.from_pydantic(exc) from exc

    comment.body = data.body
    session.add(comment)
    await session.commit()
    return comment

