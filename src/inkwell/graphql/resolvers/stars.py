"""
Starrable: stories and comments.
"""
from inkwell.graphql import permissions
from inkwell.graphql.context import Context
from inkwell.graphql.ids import NodeType, from_global_id
from inkwell.graphql.nodes import resolve_node
from inkwell.graphql.pagination import ConnectionArgs, Page, paginate
from inkwell.models import Comment, Star, Story
from inkwell.services import notifications, stars


async def stargazers(starrable: Story | Comment, args: ConnectionArgs, ctx: Context) -> Page:
    """Page rows are ``(user, starred_at)`` pairs."""
    async with ctx.session() as session:
        return await paginate(session, stars.stargazers(starrable), args, key=Star.id)


async def star_count(starrable: Story | Comment, args: dict, ctx: Context) -> int:
    async with ctx.session() as session:
        return await stars.star_count(session, starrable)


def viewer_can_star(starrable: Story | Comment, args: dict, ctx: Context) -> bool:
    return permissions.viewer_can_star(ctx.viewer)


async def viewer_has_starred(starrable: Story | Comment, args: dict, ctx: Context) -> bool:
    async with ctx.session() as session:
        return await permissions.viewer_has_starred(session, ctx.viewer, starrable)


async def _load_starrable(session, ctx: Context, global_id: str) -> Story | Comment:
    node_type, id = from_global_id(global_id, NodeType.STORY, NodeType.COMMENT)
    return permissions.ensure_found(await resolve_node(session, node_type, id, ctx.viewer))


async def star(_, args: dict, ctx: Context) -> Story | Comment:
    viewer = permissions.require_viewer(ctx)
    async with ctx.session() as session:
        starrable = await _load_starrable(session, ctx, args["starrable_id"])
        already_starred = await stars.has_starred(session, viewer, starrable)
        await stars.insert_star(session, viewer, starrable)
        if not already_starred:
            await notifications.notify_starred(session, viewer, starrable)
        return starrable


async def unstar(_, args: dict, ctx: Context) -> Story | Comment:
    viewer = permissions.require_viewer(ctx)
    async with ctx.session() as session:
        starrable = await _load_starrable(session, ctx, args["starrable_id"])
        await stars.delete_star(session, viewer, starrable)
        return starrable
