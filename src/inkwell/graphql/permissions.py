"""
Viewer-based field authorization.

Capability predicates (``viewer_can_*``) answer whether the viewer may attempt
an action, state predicates (``viewer_has_*``) whether they already did it.
Guards raise instead of answering and are what mutations call. Nothing here is
cached: each field access asks the store again.
"""
from typing import TypeVar

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from inkwell.core.errors import NotFound, SelfActionConflict, Unauthenticated, Unauthorized
from inkwell.graphql.context import Context
from inkwell.models import Comment, Publication, Story, User
from inkwell.services import bookmarks, follows, publications, stars

logger = structlog.get_logger(__name__)

T = TypeVar("T")


def require_viewer(ctx: Context) -> User:
    if ctx.viewer is None:
        raise Unauthenticated()
    return ctx.viewer


def ensure_found(entity: T | None, message: str | None = None) -> T:
    if entity is None:
        raise NotFound(message)
    return entity


def ensure_owner(owner_id: int, viewer: User, action: str = "mutation") -> None:
    if owner_id != viewer.id:
        logger.warning("unauthorized_mutation", action=action, viewer_id=viewer.id, owner_id=owner_id)
        raise Unauthorized()


def ensure_not_self(target_id: int, viewer: User, message: str | None = None) -> None:
    if target_id == viewer.id:
        raise SelfActionConflict(message)


async def ensure_admin(session: AsyncSession, publication_id: int, viewer: User, action: str) -> None:
    if not await publications.is_admin(session, publication_id, viewer.id):
        logger.warning(
            "unauthorized_mutation", action=action, viewer_id=viewer.id, publication_id=publication_id
        )
        raise Unauthorized()


def viewer_can_star(viewer: User | None) -> bool:
    return viewer is not None


def viewer_can_comment(viewer: User | None) -> bool:
    return viewer is not None


def viewer_can_bookmark(viewer: User | None) -> bool:
    return viewer is not None


def viewer_can_follow(viewer: User | None, followable: User | Publication) -> bool:
    """Anyone logged in can follow, except themselves."""
    if viewer is None:
        return False
    return not (isinstance(followable, User) and followable.id == viewer.id)


def viewer_is_owner(viewer: User | None, owner_id: int) -> bool:
    return viewer is not None and viewer.id == owner_id


async def viewer_has_starred(session: AsyncSession, viewer: User | None, starrable: Story | Comment) -> bool:
    if viewer is None:
        return False
    return await stars.has_starred(session, viewer, starrable)


async def viewer_has_bookmarked(
    session: AsyncSession, viewer: User | None, bookmarkable: Story | Comment
) -> bool:
    if viewer is None:
        return False
    return await bookmarks.has_bookmarked(session, viewer, bookmarkable)


async def viewer_has_followed(
    session: AsyncSession, viewer: User | None, followable: User | Publication
) -> bool:
    if viewer is None:
        return False
    return await follows.has_followed(session, viewer, followable)


async def viewer_is_member(session: AsyncSession, viewer: User | None, publication: Publication) -> bool:
    if viewer is None:
        return False
    return await publications.is_member(session, publication.id, viewer.id)


async def viewer_can_administer(
    session: AsyncSession, viewer: User | None, publication: Publication
) -> bool:
    if viewer is None:
        return False
    return await publications.is_admin(session, publication.id, viewer.id)
