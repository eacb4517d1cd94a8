import base64
import enum
import hashlib
import uuid
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import DateTime, Enum, ForeignKey, Select, String, Text, select
from sqlalchemy.orm import Mapped, mapped_column, relationship

from inkwell.models.base import Base, TimestampMixin, utcnow
from inkwell.models.tag import story_tags
from inkwell.utils import slugify

if TYPE_CHECKING:
    from inkwell.models.tag import Tag

UNIQUE_HASH_LENGTH = 17


class StoryAudience(enum.Enum):
    ALL = "all"
    MEMBERS = "members"
    UNLISTED = "unlisted"


class StoryLicense(enum.Enum):
    ALL_RIGHTS_RESERVED = "all_rights_reserved"
    PUBLIC_DOMAIN = "public_domain"


def generate_hash() -> str:
    digest = hashlib.sha512(uuid.uuid4().bytes).digest()
    return base64.b32encode(digest).decode("ascii")[:UNIQUE_HASH_LENGTH].lower()


class Story(TimestampMixin, Base):
    __tablename__ = "stories"

    id: Mapped[int] = mapped_column(primary_key=True)
    title: Mapped[str] = mapped_column(String(300))
    content: Mapped[str] = mapped_column(Text)
    summary: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    author_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)

    # Identifies the story inside its slug
    unique_hash: Mapped[str] = mapped_column(
        String(UNIQUE_HASH_LENGTH), unique=True, default=generate_hash
    )

    audience: Mapped[StoryAudience] = mapped_column(
        Enum(StoryAudience, native_enum=False), default=StoryAudience.ALL
    )
    license: Mapped[StoryLicense] = mapped_column(
        Enum(StoryLicense, native_enum=False), default=StoryLicense.ALL_RIGHTS_RESERVED
    )
    # NULL means draft; a future date means scheduled
    published_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    publication_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("publications.id", ondelete="SET NULL"), nullable=True, index=True
    )

    tags: Mapped[list["Tag"]] = relationship(secondary=story_tags, passive_deletes=True)

    @property
    def slug(self) -> str:
        return f"{slugify(self.title)}-{self.unique_hash}"

    @property
    def is_published(self) -> bool:
        return self.published_at is not None and self.published_at <= utcnow()

    @classmethod
    def published(cls, stmt: Select | None = None) -> Select:
        stmt = select(cls) if stmt is None else stmt
        return stmt.where(cls.published_at <= utcnow())

    @classmethod
    def public(cls, stmt: Select | None = None) -> Select:
        """Published stories visible to everyone."""
        return cls.published(stmt).where(cls.audience == StoryAudience.ALL)

    @classmethod
    def by_author(cls, author_id: int, stmt: Select | None = None) -> Select:
        stmt = select(cls) if stmt is None else stmt
        return stmt.where(cls.author_id == author_id)

    @classmethod
    def under_publication(cls, publication_id: int, stmt: Select | None = None) -> Select:
        stmt = select(cls) if stmt is None else stmt
        return stmt.where(cls.publication_id == publication_id)
