from typing import Optional

from sqlalchemy import CheckConstraint, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column

from inkwell.models.base import Base, TimestampMixin


class Bookmark(TimestampMixin, Base):
    """A user bookmarking exactly one story or comment."""

    __tablename__ = "bookmarks"
    __table_args__ = (
        CheckConstraint(
            "(story_id IS NULL) <> (comment_id IS NULL)", name="only_one_not_null_bookmarkable"
        ),
        Index("bookmarks_user_id_story_id_index", "user_id", "story_id", unique=True),
        Index("bookmarks_user_id_comment_id_index", "user_id", "comment_id", unique=True),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"))
    story_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("stories.id", ondelete="CASCADE"), nullable=True
    )
    comment_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("comments.id", ondelete="CASCADE"), nullable=True
    )
