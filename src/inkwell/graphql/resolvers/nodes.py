from inkwell.core.errors import InvalidReference, NotImplementedYet
from inkwell.graphql.context import Context
from inkwell.graphql.ids import from_global_id
from inkwell.graphql.nodes import resolve_node


async def node(_, args: dict, ctx: Context) -> object | None:
    """Fetches any node by global ID. Malformed IDs resolve to null, like missing nodes."""
    try:
        node_type, id = from_global_id(args["id"])
    except InvalidReference:
        return None
    async with ctx.session() as session:
        return await resolve_node(session, node_type, id, ctx.viewer)


async def search(_, args: dict, ctx: Context) -> list:
    raise NotImplementedYet()
