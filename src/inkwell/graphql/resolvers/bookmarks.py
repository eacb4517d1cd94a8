"""
Bookmarkable: stories and comments.
"""
from inkwell.graphql import permissions
from inkwell.graphql.context import Context
from inkwell.graphql.ids import NodeType, from_global_id
from inkwell.graphql.nodes import resolve_node
from inkwell.models import Comment, Story
from inkwell.services import bookmarks


def viewer_can_bookmark(bookmarkable: Story | Comment, args: dict, ctx: Context) -> bool:
    return permissions.viewer_can_bookmark(ctx.viewer)


async def viewer_has_bookmarked(bookmarkable: Story | Comment, args: dict, ctx: Context) -> bool:
    async with ctx.session() as session:
        return await permissions.viewer_has_bookmarked(session, ctx.viewer, bookmarkable)


async def _load_bookmarkable(session, ctx: Context, global_id: str) -> Story | Comment:
    node_type, id = from_global_id(global_id, NodeType.STORY, NodeType.COMMENT)
    return permissions.ensure_found(await resolve_node(session, node_type, id, ctx.viewer))


async def bookmark(_, args: dict, ctx: Context) -> Story | Comment:
    viewer = permissions.require_viewer(ctx)
    async with ctx.session() as session:
        bookmarkable = await _load_bookmarkable(session, ctx, args["bookmarkable_id"])
        await bookmarks.insert_bookmark(session, viewer, bookmarkable)
        return bookmarkable


async def unbookmark(_, args: dict, ctx: Context) -> Story | Comment:
    viewer = permissions.require_viewer(ctx)
    async with ctx.session() as session:
        bookmarkable = await _load_bookmarkable(session, ctx, args["bookmarkable_id"])
        await bookmarks.delete_bookmark(session, viewer, bookmarkable)
        return bookmarkable
