"""
The Follows context.

Users follow other users and publications.
"""
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from inkwell.core.database import count
from inkwell.models import Follow, Publication, User


def _target(followable: User | Publication):
    if isinstance(followable, User):
        return Follow.user_id == followable.id
    return Follow.publication_id == followable.id


def followers(followable: User | Publication):
    stmt = User.active(select(User).join(Follow, Follow.follower_id == User.id))
    return stmt.where(_target(followable))


def followees(follower_id: int):
    """Users followed by ``follower_id``."""
    stmt = User.active(select(User).join(Follow, Follow.user_id == User.id))
    return stmt.where(Follow.follower_id == follower_id)


async def has_followed(session: AsyncSession, follower: User, followable: User | Publication) -> bool:
    stmt = select(Follow.id).where(Follow.follower_id == follower.id, _target(followable))
    result = await session.execute(stmt)
    return result.first() is not None


async def follower_count(session: AsyncSession, followable: User | Publication) -> int:
    return await count(session, followers(followable))


async def insert_follow(session: AsyncSession, follower: User, followable: User | Publication) -> bool:
    """Follows ``followable``. Returns whether a new follow was created."""
    if await has_followed(session, follower, followable):
        return False
    if isinstance(followable, User):
        follow = Follow(follower_id=follower.id, user_id=followable.id)
    else:
        follow = Follow(follower_id=follower.id, publication_id=followable.id)
    session.add(follow)
    await session.commit()
    return True


async def delete_follow(session: AsyncSession, follower: User, followable: User | Publication) -> None:
    stmt = delete(Follow).where(Follow.follower_id == follower.id, _target(followable))
    await session.execute(stmt)
    await session.commit()
