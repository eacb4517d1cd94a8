"""
Followable: users and publications.
"""
from inkwell.graphql import permissions
from inkwell.graphql.context import Context
from inkwell.graphql.ids import NodeType, from_global_id
from inkwell.graphql.nodes import resolve_node
from inkwell.graphql.pagination import ConnectionArgs, Page, paginate
from inkwell.models import Follow, Publication, User
from inkwell.services import follows, notifications


async def followers(followable: User | Publication, args: ConnectionArgs, ctx: Context) -> Page:
    async with ctx.session() as session:
        return await paginate(session, follows.followers(followable), args, key=Follow.id)


async def follower_count(followable: User | Publication, args: dict, ctx: Context) -> int:
    async with ctx.session() as session:
        return await follows.follower_count(session, followable)


def viewer_can_follow(followable: User | Publication, args: dict, ctx: Context) -> bool:
    return permissions.viewer_can_follow(ctx.viewer, followable)


async def viewer_has_followed(followable: User | Publication, args: dict, ctx: Context) -> bool:
    async with ctx.session() as session:
        return await permissions.viewer_has_followed(session, ctx.viewer, followable)


async def _load_followable(session, ctx: Context, global_id: str) -> User | Publication:
    node_type, id = from_global_id(global_id, NodeType.USER, NodeType.PUBLICATION)
    followable = await resolve_node(session, node_type, id, ctx.viewer)
    return permissions.ensure_found(followable)


async def follow(_, args: dict, ctx: Context) -> User | Publication:
    viewer = permissions.require_viewer(ctx)
    async with ctx.session() as session:
        followable = await _load_followable(session, ctx, args["followable_id"])
        if isinstance(followable, User):
            permissions.ensure_not_self(followable.id, viewer, "You can't follow yourself.")

        if await follows.insert_follow(session, viewer, followable) and isinstance(followable, User):
            await notifications.notify_followed(session, viewer, followable)
        return followable


async def unfollow(_, args: dict, ctx: Context) -> User | Publication:
    viewer = permissions.require_viewer(ctx)
    async with ctx.session() as session:
        followable = await _load_followable(session, ctx, args["followable_id"])
        await follows.delete_follow(session, viewer, followable)
        return followable
