from inkwell.graphql.context import Context
from inkwell.graphql.pagination import ConnectionArgs, Page, paginate
from inkwell.models import Publication, Story, Tag
from inkwell.services import tags


async def tag(_, args: dict, ctx: Context) -> Tag | None:
    async with ctx.session() as session:
        return await tags.get_tag_by_title(session, args["title"].strip().lower())


async def stories(tag: Tag, args: ConnectionArgs, ctx: Context) -> Page:
    async with ctx.session() as session:
        return await paginate(session, tags.stories_tagged(tag), args, key=Story.id)


async def publications(tag: Tag, args: ConnectionArgs, ctx: Context) -> Page:
    async with ctx.session() as session:
        return await paginate(session, tags.publications_tagged(tag), args, key=Publication.id)
