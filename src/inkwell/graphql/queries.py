import strawberry
from strawberry.types import Info

from inkwell.graphql.pagination import ConnectionArgs
from inkwell.graphql.resolvers import accounts, nodes, publications, stories, tags
from inkwell.graphql.types import Connection, Node, Publication, Story, Tag, User, from_model


@strawberry.type
class Query:
    @strawberry.field(description="The logged in user, null for anonymous requests")
    def viewer(self, info: Info) -> User | None:
        return from_model(accounts.viewer(None, {}, info.context))

    @strawberry.field
    async def user(self, info: Info, username: str) -> User | None:
        return from_model(await accounts.user(None, {"username": username}, info.context))

    @strawberry.field
    async def story(self, info: Info, slug: str) -> Story | None:
        return from_model(await stories.story(None, {"slug": slug}, info.context))

    @strawberry.field(description="Public stories, oldest first")
    async def stories(
        self,
        info: Info,
        first: int | None = None,
        after: str | None = None,
        last: int | None = None,
        before: str | None = None,
    ) -> Connection[Story]:
        args = ConnectionArgs(first=first, after=after, last=last, before=before)
        page = await stories.feed(None, args, info.context)
        return Connection.from_page(page, from_model)

    @strawberry.field
    async def publication(self, info: Info, name: str) -> Publication | None:
        return from_model(await publications.publication(None, {"name": name}, info.context))

    @strawberry.field
    async def tag(self, info: Info, title: str) -> Tag | None:
        return from_model(await tags.tag(None, {"title": title}, info.context))

    @strawberry.field(description="Fetches an object given its ID")
    async def node(self, info: Info, id: strawberry.ID) -> Node | None:
        return from_model(await nodes.node(None, {"id": id}, info.context))

    @strawberry.field(description="Not implemented yet")
    async def search(self, info: Info, query: str) -> list[Story] | None:
        return await nodes.search(None, {"query": query}, info.context)
