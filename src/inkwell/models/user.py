import re
from datetime import datetime
from typing import Optional

from sqlalchemy import JSON, Boolean, DateTime, Select, String, Text, select
from sqlalchemy.orm import Mapped, mapped_column

from inkwell.models.base import Base, TimestampMixin

USERNAME_PATTERN = re.compile(r"^[a-zA-Z0-9_]{1,64}$")


def default_notification_settings() -> dict:
    return {"starred_story": True}


class User(TimestampMixin, Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)
    username: Mapped[str] = mapped_column(String(64), unique=True)
    email: Mapped[str] = mapped_column(String(254), unique=True)
    unverified_email: Mapped[Optional[str]] = mapped_column(String(254), nullable=True)
    first_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    last_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    bio: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    website: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    location: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    is_admin: Mapped[bool] = mapped_column(Boolean, default=False)
    is_employee: Mapped[bool] = mapped_column(Boolean, default=False)
    deactivated_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    notification_settings: Mapped[dict] = mapped_column(
        JSON, default=default_notification_settings
    )

    @classmethod
    def active(cls, stmt: Select | None = None) -> Select:
        """Filters out deactivated users."""
        stmt = select(cls) if stmt is None else stmt
        return stmt.where(cls.deactivated_at.is_(None))

    @staticmethod
    def valid_username(username: str) -> bool:
        return bool(USERNAME_PATTERN.match(username))
