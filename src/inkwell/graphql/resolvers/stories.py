from inkwell.graphql import permissions
from inkwell.graphql.context import Context
from inkwell.graphql.ids import NodeType, from_global_id
from inkwell.graphql.pagination import ConnectionArgs, Page, paginate
from inkwell.models import Collection, Publication, Story, Tag, User
from inkwell.services import accounts, collections, publications, stories


async def story(_, args: dict, ctx: Context) -> Story | None:
    """Looks a story up by slug. Hidden stories look exactly like missing ones."""
    async with ctx.session() as session:
        story = await stories.get_story_by_slug(session, args["slug"])
        if story is None or not await stories.can_see_story(session, story, ctx.viewer):
            return None
        return story


async def feed(_, args: ConnectionArgs, ctx: Context) -> Page:
    async with ctx.session() as session:
        return await paginate(session, Story.public(), args, key=Story.id)


async def author(story: Story, args: dict, ctx: Context) -> User | None:
    async with ctx.session() as session:
        return await accounts.get_user(session, story.author_id)


async def publication(story: Story, args: dict, ctx: Context) -> Publication | None:
    if story.publication_id is None:
        return None
    async with ctx.session() as session:
        return await publications.get_publication(session, story.publication_id)


async def tags(story: Story, args: dict, ctx: Context) -> list[Tag]:
    async with ctx.session() as session:
        return await stories.get_tags(session, story)


async def collection(story: Story, args: dict, ctx: Context) -> Collection | None:
    async with ctx.session() as session:
        return await collections.get_collection_of_story(session, story)


def viewer_can_update(story: Story, args: dict, ctx: Context) -> bool:
    return permissions.viewer_is_owner(ctx.viewer, story.author_id)


def viewer_can_delete(story: Story, args: dict, ctx: Context) -> bool:
    return permissions.viewer_is_owner(ctx.viewer, story.author_id)


def _with_publication_id(attrs: dict) -> dict:
    """Swaps the publication's global ID for its primary key."""
    if attrs.get("publication_id") is None:
        return attrs
    _, publication_id = from_global_id(attrs["publication_id"], NodeType.PUBLICATION)
    return {**attrs, "publication_id": publication_id}


async def create_story(_, args: dict, ctx: Context) -> Story:
    viewer = permissions.require_viewer(ctx)
    attrs = _with_publication_id(args["input"])
    async with ctx.session() as session:
        return await stories.insert_story(session, viewer, attrs)


async def _load_own_story(session, ctx: Context, global_id: str, action: str) -> Story:
    viewer = permissions.require_viewer(ctx)
    _, id = from_global_id(global_id, NodeType.STORY)
    # Any existing story belongs to someone, drafts included: non-authors are unauthorized
    story = permissions.ensure_found(await stories.get_story(session, id), "Story doesn't exist.")
    permissions.ensure_owner(story.author_id, viewer, action)
    return story


async def update_story(_, args: dict, ctx: Context) -> Story:
    attrs = _with_publication_id(args["input"])
    async with ctx.session() as session:
        story = await _load_own_story(session, ctx, args["id"], "update_story")
        return await stories.update_story(session, story, attrs)


async def delete_story(_, args: dict, ctx: Context) -> Story:
    async with ctx.session() as session:
        story = await _load_own_story(session, ctx, args["id"], "delete_story")
        return await stories.delete_story(session, story)
