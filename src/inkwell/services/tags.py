"""
The Tags context.
"""
from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from inkwell.models import Publication, Story, Tag, publication_tags, story_tags, utcnow


async def get_tag(session: AsyncSession, tag_id: int) -> Tag | None:
    return await session.get(Tag, tag_id)


async def get_tag_by_title(session: AsyncSession, title: str) -> Tag | None:
    result = await session.execute(select(Tag).where(Tag.title == title))
    return result.scalar_one_or_none()


async def insert_and_get_all_tags(session: AsyncSession, titles: list[str]) -> list[Tag]:
    """
    Inserts the tags that weren't persisted yet and returns all the tags
    with the given titles.

        await insert_and_get_all_tags(session, ["programming", "python"])
        [<Tag programming>, <Tag python>]
    """
    titles = sorted({title.strip().lower() for title in titles if title.strip()})
    if not titles:
        return []

    now = utcnow()
    rows = [{"title": title, "inserted_at": now, "updated_at": now} for title in titles]

    insert = pg_insert if session.get_bind().dialect.name == "postgresql" else sqlite_insert
    await session.execute(insert(Tag).values(rows).on_conflict_do_nothing(index_elements=["title"]))

    result = await session.execute(Tag.by_titles(titles))
    return list(result.scalars().all())


def stories_tagged(tag: Tag):
    """Public stories with the tag."""
    stmt = select(Story).join(story_tags, story_tags.c.story_id == Story.id)
    return Story.public(stmt).where(story_tags.c.tag_id == tag.id)


def publications_tagged(tag: Tag):
    stmt = select(Publication).join(publication_tags, publication_tags.c.publication_id == Publication.id)
    return stmt.where(publication_tags.c.tag_id == tag.id)
