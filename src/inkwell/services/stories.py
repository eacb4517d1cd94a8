"""
The Stories context.
"""
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from inkwell.core.errors import ValidationFailure
from inkwell.models import Story, StoryAudience, StoryLicense, User
from inkwell.services import publications, tags


def to_naive_utc(value: datetime | None) -> datetime | None:
    """Columns store naive UTC, so offset-aware input is converted first."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


class StoryAttrs(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(min_length=1, max_length=300)
    content: str = Field(min_length=1)
    summary: str | None = Field(default=None, max_length=500)
    audience: StoryAudience = StoryAudience.ALL
    license: StoryLicense = StoryLicense.ALL_RIGHTS_RESERVED
    published_at: datetime | None = None
    publication_id: int | None = None
    tags: list[str] = Field(default_factory=list, max_length=10)

    naive_published_at = field_validator("published_at")(to_naive_utc)


class StoryUpdateAttrs(BaseModel):
    """Omitted fields stay as they are. Only nullable columns accept ``None``."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str | None = Field(default=None, min_length=1, max_length=300)
    content: str | None = Field(default=None, min_length=1)
    summary: str | None = Field(default=None, max_length=500)
    audience: StoryAudience | None = None
    license: StoryLicense | None = None
    published_at: datetime | None = None
    publication_id: int | None = None
    tags: list[str] | None = Field(default=None, max_length=10)

    naive_published_at = field_validator("published_at")(to_naive_utc)

    @field_validator("title", "content", "audience", "license")
    @classmethod
    def check_present(cls, value):
        if value is None:
            raise ValueError("can't be null")
        return value


async def get_story(session: AsyncSession, story_id: int) -> Story | None:
    return await session.get(Story, story_id)


async def get_story_by_slug(session: AsyncSession, slug: str) -> Story | None:
    """The unique hash is the last dash-separated part of the slug."""
    unique_hash = slug.rsplit("-", 1)[-1]
    if not unique_hash:
        return None
    result = await session.execute(select(Story).where(Story.unique_hash == unique_hash))
    return result.scalar_one_or_none()


async def can_see_story(session: AsyncSession, story: Story, viewer: User | None) -> bool:
    """
    The author can always see the story. Anyone else needs it published
    and, for member-only stories, membership of its publication.
    """
    if viewer is not None and viewer.id == story.author_id:
        return True
    if not story.is_published:
        return False
    if story.audience in (StoryAudience.ALL, StoryAudience.UNLISTED):
        return True
    if viewer is None or story.publication_id is None:
        return False
    return await publications.is_member(session, story.publication_id, viewer.id)


async def insert_story(session: AsyncSession, author: User, attrs: dict) -> Story:
    try:
        data = StoryAttrs.model_validate(attrs)
    except ValidationError as exc:
        raise ValidationFailure.from_pydantic(exc) from exc

    if data.publication_id is not None:
        await _ensure_can_write_in(session, data.publication_id, author.id)

    story = Story(
        title=data.title,
        content=data.content,
        summary=data.summary,
        audience=data.audience,
        license=data.license,
        published_at=data.published_at,
        publication_id=data.publication_id,
        author_id=author.id,
    )
    story.tags = await tags.insert_and_get_all_tags(session, data.tags)
    session.add(story)
    try:
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        raise ValidationFailure.from_integrity_error(
            exc, "publication_id", *StoryUpdateAttrs.model_fields
        ) from exc
    return story


async def update_story(session: AsyncSession, story: Story, attrs: dict) -> Story:
    try:
        data = StoryUpdateAttrs.model_validate(attrs)
    except ValidationError as exc:
        raise ValidationFailure.from_pydantic(exc) from exc

    changes = data.model_dump(exclude_unset=True)

    # A published story keeps its publication date
    if "published_at" in changes and story.is_published:
        raise ValidationFailure.on(
            "published_at",
            "Cannot change publication date after the story has been published",
        )

    publication_id = changes.get("publication_id")
    if publication_id is not None and publication_id != story.publication_id:
        await _ensure_can_write_in(session, publication_id, story.author_id)

    tag_titles = changes.pop("tags", None)
    if tag_titles is not None:
        story = await _with_tags(session, story)
        story.tags = await tags.insert_and_get_all_tags(session, tag_titles)

    for field, value in changes.items():
        setattr(story, field, value)

    session.add(story)
    try:
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        raise ValidationFailure.from_integrity_error(
            exc, "publication_id", *StoryUpdateAttrs.model_fields
        ) from exc
    return story


async def delete_story(session: AsyncSession, story: Story) -> Story:
    await session.delete(story)
    await session.commit()
    return story


async def get_tags(session: AsyncSession, story: Story) -> list:
    story = await _with_tags(session, story)
    return list(story.tags)


async def _with_tags(session: AsyncSession, story: Story) -> Story:
    stmt = select(Story).where(Story.id == story.id).options(selectinload(Story.tags))
    result = await session.execute(stmt.execution_options(populate_existing=True))
    return result.scalar_one()


async def _ensure_can_write_in(session: AsyncSession, publication_id: int, user_id: int) -> None:
    if not await publications.is_member(session, publication_id, user_id):
        raise ValidationFailure.on("publication_id", "You are not a member of that publication")
