import enum
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Enum, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from inkwell.models.base import Base, TimestampMixin


class NotificationAction(enum.Enum):
    STARRED = "starred"
    COMMENTED = "commented"
    FOLLOWED = "followed"
    ADDED = "added"


class Notification(TimestampMixin, Base):
    """Something an actor did that a recipient should hear about.

    Exactly one of the target columns is set for a given action.
    """

    __tablename__ = "notifications"

    id: Mapped[int] = mapped_column(primary_key=True)
    recipient_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), index=True
    )
    actor_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=True
    )
    action: Mapped[NotificationAction] = mapped_column(Enum(NotificationAction, native_enum=False))

    story_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("stories.id", ondelete="CASCADE"), nullable=True
    )
    comment_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("comments.id", ondelete="CASCADE"), nullable=True
    )
    publication_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("publications.id", ondelete="CASCADE"), nullable=True
    )
    user_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=True
    )

    read_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
