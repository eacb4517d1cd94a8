from inkwell.graphql import permissions
from inkwell.graphql.context import Context
from inkwell.graphql.ids import NodeType, from_global_id
from inkwell.graphql.nodes import resolve_node
from inkwell.models import Comment, Notification, Publication, Story, User
from inkwell.services import accounts, notifications


async def actor(notification: Notification, args: dict, ctx: Context) -> User | None:
    if notification.actor_id is None:
        return None
    async with ctx.session() as session:
        return await accounts.get_user(session, notification.actor_id)


async def _target(node_type: NodeType, id: int | None, ctx: Context):
    if id is None:
        return None
    async with ctx.session() as session:
        return await resolve_node(session, node_type, id, ctx.viewer)


async def story(notification: Notification, args: dict, ctx: Context) -> Story | None:
    return await _target(NodeType.STORY, notification.story_id, ctx)


async def comment(notification: Notification, args: dict, ctx: Context) -> Comment | None:
    return await _target(NodeType.COMMENT, notification.comment_id, ctx)


async def publication(notification: Notification, args: dict, ctx: Context) -> Publication | None:
    return await _target(NodeType.PUBLICATION, notification.publication_id, ctx)


async def user(notification: Notification, args: dict, ctx: Context) -> User | None:
    return await _target(NodeType.USER, notification.user_id, ctx)


async def mark_as_read(_, args: dict, ctx: Context) -> Notification:
    viewer = permissions.require_viewer(ctx)
    _, id = from_global_id(args["notification_id"], NodeType.NOTIFICATION)
    async with ctx.session() as session:
        notification = permissions.ensure_found(
            await resolve_node(session, NodeType.NOTIFICATION, id, viewer),
            "Notification doesn't exist.",
        )
        return await notifications.mark_as_read(session, notification)
