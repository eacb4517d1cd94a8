from inkwell.graphql.context import Context
from inkwell.graphql.pagination import ConnectionArgs, Page, paginate
from inkwell.models import Collection, CollectionStory, User
from inkwell.services import accounts, collections


async def author(collection: Collection, args: dict, ctx: Context) -> User | None:
    async with ctx.session() as session:
        return await accounts.get_user(session, collection.author_id)


async def stories(collection: Collection, args: ConnectionArgs, ctx: Context) -> Page:
    async with ctx.session() as session:
        stmt = collections.stories_of(collection)
        return await paginate(session, stmt, args, key=CollectionStory.id)
