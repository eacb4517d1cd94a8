from typing import Optional

from sqlalchemy import CheckConstraint, ForeignKey, Index, Select, select
from sqlalchemy.orm import Mapped, mapped_column

from inkwell.models.base import Base, TimestampMixin


class Star(TimestampMixin, Base):
    """A user starring exactly one story or comment."""

    __tablename__ = "stars"
    __table_args__ = (
        CheckConstraint(
            "(story_id IS NULL) <> (comment_id IS NULL)", name="only_one_not_null_starrable"
        ),
        Index("stars_user_id_story_id_index", "user_id", "story_id", unique=True),
        Index("stars_user_id_comment_id_index", "user_id", "comment_id", unique=True),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"))
    story_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("stories.id", ondelete="CASCADE"), nullable=True, index=True
    )
    comment_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("comments.id", ondelete="CASCADE"), nullable=True, index=True
    )

    @classmethod
    def by_user(cls, user_id: int, stmt: Select | None = None) -> Select:
        stmt = select(cls) if stmt is None else stmt
        return stmt.where(cls.user_id == user_id)
