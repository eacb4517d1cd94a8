from typing import Optional

from sqlalchemy import CheckConstraint, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column

from inkwell.models.base import Base, TimestampMixin


class Follow(TimestampMixin, Base):
    """A user following exactly one user or publication."""

    __tablename__ = "follows"
    __table_args__ = (
        CheckConstraint(
            "(user_id IS NULL) <> (publication_id IS NULL)", name="only_one_not_null_followable"
        ),
        CheckConstraint("follower_id <> user_id", name="cannot_follow_self"),
        Index("follows_follower_id_user_id_index", "follower_id", "user_id", unique=True),
        Index(
            "follows_follower_id_publication_id_index",
            "follower_id",
            "publication_id",
            unique=True,
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    follower_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"))
    user_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=True, index=True
    )
    publication_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("publications.id", ondelete="CASCADE"), nullable=True, index=True
    )
