"""
The Collections context.
"""
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from inkwell.models import Collection, CollectionStory, Story


async def get_collection(session: AsyncSession, collection_id: int) -> Collection | None:
    return await session.get(Collection, collection_id)


async def get_collection_of_story(session: AsyncSession, story: Story) -> Collection | None:
    stmt = (
        select(Collection)
        .join(CollectionStory, CollectionStory.collection_id == Collection.id)
        .where(CollectionStory.story_id == story.id)
    )
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


def stories_of(collection: Collection):
    """Published stories of the collection, paginated in the order they were added."""
    stmt = select(Story).join(CollectionStory, CollectionStory.story_id == Story.id)
    return Story.published(stmt).where(CollectionStory.collection_id == collection.id)
