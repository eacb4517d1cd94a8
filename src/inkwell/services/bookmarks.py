"""
The Bookmarks context.
"""
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from inkwell.models import Bookmark, Comment, Story, User


def _target(bookmarkable: Story | Comment):
    if isinstance(bookmarkable, Story):
        return Bookmark.story_id == bookmarkable.id
    return Bookmark.comment_id == bookmarkable.id


def bookmarked_stories(user_id: int):
    """Stories bookmarked by the user, keyed by the bookmark id."""
    return (
        select(Story)
        .join(Bookmark, Bookmark.story_id == Story.id)
        .where(Bookmark.user_id == user_id)
    )


async def has_bookmarked(session: AsyncSession, user: User, bookmarkable: Story | Comment) -> bool:
    stmt = select(Bookmark.id).where(Bookmark.user_id == user.id, _target(bookmarkable))
    result = await session.execute(stmt)
    return result.first() is not None


async def insert_bookmark(
    session: AsyncSession, user: User, bookmarkable: Story | Comment
) -> None:
    """Bookmarks ``bookmarkable``. Bookmarking twice is a no-op."""
    if await has_bookmarked(session, user, bookmarkable):
        return
    if isinstance(bookmarkable, Story):
        bookmark = Bookmark(user_id=user.id, story_id=bookmarkable.id)
    else:
        bookmark = Bookmark(user_id=user.id, comment_id=bookmarkable.id)
    session.add(bookmark)
    await session.commit()


async def delete_bookmark(
    session: AsyncSession, user: User, bookmarkable: Story | Comment
) -> None:
    stmt = delete(Bookmark).where(Bookmark.user_id == user.id, _target(bookmarkable))
    await session.execute(stmt)
    await session.commit()
