"""
Comments, and the Commentable fields of stories and comments.
"""
from inkwell.core.errors import NotImplementedYet
from inkwell.graphql import permissions
from inkwell.graphql.context import Context
from inkwell.graphql.ids import NodeType, from_global_id
from inkwell.graphql.nodes import resolve_node
from inkwell.graphql.pagination import ConnectionArgs, Page, paginate
from inkwell.models import Comment, Story, User
from inkwell.services import accounts, comments, notifications, stories


async def comments_of(commentable: Story | Comment, args: ConnectionArgs, ctx: Context) -> Page:
    async with ctx.session() as session:
        return await paginate(session, comments.comments_of(commentable), args, key=Comment.id)


async def comment_count(commentable: Story | Comment, args: dict, ctx: Context) -> int:
    async with ctx.session() as session:
        return await comments.comment_count(session, commentable)


def viewer_can_comment(commentable: Story | Comment, args: dict, ctx: Context) -> bool:
    return permissions.viewer_can_comment(ctx.viewer)


async def author(comment: Comment, args: dict, ctx: Context) -> User | None:
    async with ctx.session() as session:
        return await accounts.get_user(session, comment.author_id)


async def story(comment: Comment, args: dict, ctx: Context) -> Story | None:
    async with ctx.session() as session:
        return await stories.get_story(session, comment.story_id)


async def parent(comment: Comment, args: dict, ctx: Context) -> Comment | None:
    async with ctx.session() as session:
        return await comments.get_parent(session, comment)


def viewer_can_update(comment: Comment, args: dict, ctx: Context) -> bool:
    return permissions.viewer_is_owner(ctx.viewer, comment.author_id)


def viewer_can_delete(comment: Comment, args: dict, ctx: Context) -> bool:
    return permissions.viewer_is_owner(ctx.viewer, comment.author_id)


async def create_comment(_, args: dict, ctx: Context) -> Comment:
    """Comments on a story, or replies to a comment."""
    viewer = permissions.require_viewer(ctx)
    node_type, id = from_global_id(args["commentable_id"], NodeType.STORY, NodeType.COMMENT)
    async with ctx.session() as session:
        commentable = permissions.ensure_found(await resolve_node(session, node_type, id, viewer))
        comment = await comments.insert_comment(session, viewer, commentable, args["input"])
        await notifications.notify_commented(session, viewer, comment)
        return comment


async def update_comment(_, args: dict, ctx: Context) -> Comment:
    viewer = permissions.require_viewer(ctx)
    _, id = from_global_id(args["id"], NodeType.COMMENT)
    async with ctx.session() as session:
        comment = permissions.ensure_found(
            await resolve_node(session, NodeType.COMMENT, id, viewer), "Comment doesn't exist."
        )
        permissions.ensure_owner(comment.author_id, viewer, "update_comment")
        return await comments.update_comment(session, comment, args["input"])


async def delete_comment(_, args: dict, ctx: Context) -> Comment:
    raise NotImplementedYet()
