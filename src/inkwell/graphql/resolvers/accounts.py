from inkwell.graphql import permissions
from inkwell.graphql.context import Context
from inkwell.graphql.pagination import ConnectionArgs, Page, paginate
from inkwell.models import Bookmark, Follow, Notification, PublicationMembership, Star, Story, User
from inkwell.services import accounts, bookmarks, follows, notifications, publications, stars


def viewer(_, args: dict, ctx: Context) -> User | None:
    return ctx.viewer


async def user(_, args: dict, ctx: Context) -> User | None:
    async with ctx.session() as session:
        return await accounts.get_user_by_username(session, args["username"])


def is_viewer(user: User, args: dict, ctx: Context) -> bool:
    return permissions.viewer_is_owner(ctx.viewer, user.id)


def email(user: User, args: dict, ctx: Context) -> str | None:
    """Email addresses are private to their owner."""
    return user.email if is_viewer(user, args, ctx) else None


async def stories(user: User, args: ConnectionArgs, ctx: Context) -> Page:
    """All stories for the author themselves, public ones for anyone else."""
    stmt = Story.by_author(user.id)
    if not is_viewer(user, {}, ctx):
        stmt = Story.public(stmt)
    async with ctx.session() as session:
        return await paginate(session, stmt, args, key=Story.id)


async def story_count(user: User, args: dict, ctx: Context) -> int:
    async with ctx.session() as session:
        return await accounts.story_count(session, user, published_only=not is_viewer(user, args, ctx))


async def followees(user: User, args: ConnectionArgs, ctx: Context) -> Page:
    async with ctx.session() as session:
        return await paginate(session, follows.followees(user.id), args, key=Follow.id)


async def publications_of(user: User, args: ConnectionArgs, ctx: Context) -> Page:
    async with ctx.session() as session:
        stmt = publications.publications_of(user.id)
        return await paginate(session, stmt, args, key=PublicationMembership.id)


async def publication_count(user: User, args: dict, ctx: Context) -> int:
    async with ctx.session() as session:
        return await accounts.publication_count(session, user)


async def starred(user: User, args: ConnectionArgs, ctx: Context) -> Page:
    stmt = Story.public(stars.starred_stories(user.id))
    async with ctx.session() as session:
        return await paginate(session, stmt, args, key=Star.id)


async def bookmarks_of(user: User, args: ConnectionArgs, ctx: Context) -> Page | None:
    if not is_viewer(user, {}, ctx):
        return None
    async with ctx.session() as session:
        return await paginate(session, bookmarks.bookmarked_stories(user.id), args, key=Bookmark.id)


async def notifications_of(user: User, args: ConnectionArgs, ctx: Context) -> Page | None:
    if not is_viewer(user, {}, ctx):
        return None
    async with ctx.session() as session:
        stmt = notifications.notifications_of(user.id)
        return await paginate(session, stmt, args, key=Notification.id)


def starred_story_notifications(user: User, args: dict, ctx: Context) -> bool | None:
    if not is_viewer(user, args, ctx):
        return None
    return accounts.starred_story_notifications_enabled(user)


async def update_viewer(_, args: dict, ctx: Context) -> User:
    viewer = permissions.require_viewer(ctx)
    async with ctx.session() as session:
        user = await accounts.get_user_or_raise(session, viewer.id)
        return await accounts.update_user(session, user, args["input"])


async def deactivate_viewer(_, args: dict, ctx: Context) -> User:
    """Deactivates the viewer now, their account is deleted later."""
    viewer = permissions.require_viewer(ctx)
    async with ctx.session() as session:
        user = await accounts.get_user_or_raise(session, viewer.id)
        return await accounts.mark_user_for_deletion(session, user)
