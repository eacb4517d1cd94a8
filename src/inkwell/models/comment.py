from typing import Optional

from sqlalchemy import ForeignKey, Select, Text, select
from sqlalchemy.orm import Mapped, mapped_column

from inkwell.models.base import Base, TimestampMixin


class Comment(TimestampMixin, Base):
    __tablename__ = "comments"

    id: Mapped[int] = mapped_column(primary_key=True)
    body: Mapped[str] = mapped_column(Text)
    author_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)

    # Every comment belongs to a story, replies also point at their parent
    story_id: Mapped[int] = mapped_column(ForeignKey("stories.id", ondelete="CASCADE"), index=True)
    parent_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("comments.id", ondelete="CASCADE"), nullable=True, index=True
    )

    @classmethod
    def by_story(cls, story_id: int, stmt: Select | None = None) -> Select:
        """Top-level comments of a story."""
        stmt = select(cls) if stmt is None else stmt
        return stmt.where(cls.story_id == story_id, cls.parent_id.is_(None))

    @classmethod
    def by_parent(cls, parent_id: int, stmt: Select | None = None) -> Select:
        stmt = select(cls) if stmt is None else stmt
        return stmt.where(cls.parent_id == parent_id)
