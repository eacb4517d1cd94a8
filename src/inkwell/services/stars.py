"""
The Stars context.

Stories and comments are starrable.
"""
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from inkwell.core.database import count
from inkwell.models import Comment, Star, Story, User


def _target(starrable: Story | Comment):
    if isinstance(starrable, Story):
        return Star.story_id == starrable.id
    return Star.comment_id == starrable.id


def stargazers(starrable: Story | Comment):
    """Active users who starred ``starrable``, with the time they did it."""
    stmt = select(User, Star.inserted_at).join(Star, Star.user_id == User.id)
    return User.active(stmt).where(_target(starrable))


def starred_stories(user_id: int):
    """Stories starred by the user."""
    return select(Story).join(Star, Star.story_id == Story.id).where(Star.user_id == user_id)


async def get_star(session: AsyncSession, user: User, starrable: Story | Comment) -> Star | None:
    stmt = Star.by_user(user.id).where(_target(starrable))
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def has_starred(session: AsyncSession, user: User, starrable: Story | Comment) -> bool:
    return await get_star(session, user, starrable) is not None


async def star_count(session: AsyncSession, starrable: Story | Comment) -> int:
    return await count(session, stargazers(starrable))


async def insert_star(session: AsyncSession, user: User, starrable: Story | Comment) -> Star:
    """Stars ``starrable``. Starring twice keeps the original star."""
    star = await get_star(session, user, starrable)
    if star is not None:
        return star

    if isinstance(starrable, Story):
        star = Star(user_id=user.id, story_id=starrable.id)
    else:
        star = Star(user_id=user.id, comment_id=starrable.id)
    session.add(star)
    await session.commit()
    return star


async def delete_star(session: AsyncSession, user: User, starrable: Story | Comment) -> None:
    stmt = delete(Star).where(Star.user_id == user.id, _target(starrable))
    await session.execute(stmt)
    await session.commit()
