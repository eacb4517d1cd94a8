"""
The Accounts context.

Users, their profile updates, and account deactivation.
"""
import uuid

import structlog
from pydantic import BaseModel, ConfigDict, EmailStr, Field, ValidationError, field_validator
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from inkwell.core.database import count
from inkwell.core.errors import NotFound, ValidationFailure
from inkwell.core.init_settings import settings
from inkwell.models import PublicationMembership, Story, User, utcnow
from inkwell.services.jobs import USER_DELETION_QUEUE, JobQueue

logger = structlog.get_logger(__name__)


class UserAttrs(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    username: str = Field(min_length=1, max_length=64)
    email: EmailStr
    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)
    bio: str | None = None
    website: str | None = Field(default=None, max_length=500)
    location: str | None = Field(default=None, max_length=100)
    is_admin: bool = False
    is_employee: bool = False

    @field_validator("username")
    @classmethod
    def check_username(cls, value: str) -> str:
        if not User.valid_username(value):
            raise ValueError("may only contain letters, numbers and underscores")
        return value


class UserUpdateAttrs(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    username: str | None = Field(default=None, min_length=1, max_length=64)
    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)
    bio: str | None = None
    website: str | None = Field(default=None, max_length=500)
    location: str | None = Field(default=None, max_length=100)
    starred_story_notifications: bool | None = None

    @field_validator("username")
    @classmethod
    def check_username(cls, value: str | None) -> str | None:
        if value is not None and not User.valid_username(value):
            raise ValueError("may only contain letters, numbers and underscores")
        return value


async def get_user(
    session: AsyncSession, user_id: int, include_deactivated: bool = False
) -> User | None:
    """Gets a single user, `None` when it doesn't exist or is deactivated."""
    stmt = select(User).where(User.id == user_id)
    if not include_deactivated:
        stmt = User.active(stmt)
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def get_user_or_raise(session: AsyncSession, user_id: int) -> User:
    user = await get_user(session, user_id)
    if user is None:
        raise NotFound("User doesn't exist.")
    return user


async def get_user_by_username(
    session: AsyncSession, username: str, include_deactivated: bool = False
) -> User | None:
    stmt = select(User).where(User.username == username)
    if not include_deactivated:
        stmt = User.active(stmt)
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def get_user_by_email(
    session: AsyncSession, email: str, include_deactivated: bool = False
) -> User | None:
    stmt = select(User).where(User.email == email)
    if not include_deactivated:
        stmt = User.active(stmt)
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def available_username(session: AsyncSession, username: str) -> bool:
    return await get_user_by_username(session, username, include_deactivated=True) is None


async def insert_user(session: AsyncSession, attrs: dict) -> User:
    try:
        data = UserAttrs.model_validate(attrs)
    except ValidationError as exc:
        raise ValidationFailure.from_pydantic(exc) from exc

    user = User(**data.model_dump())
    session.add(user)
    try:
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        raise ValidationFailure.from_integrity_error(exc, "username") from exc
    return user


async def get_or_insert_user(session: AsyncSession, email: str, attrs: dict | None = None) -> User:
    """
    Gets the user with ``email``, inserting it when missing. Signing in to a
    deactivated account reactivates it, which cancels its pending deletion.

    The username defaults to the part before the ``@`` and falls back to
    a random one when that is taken or not a valid username.
    """
    user = await get_user_by_email(session, email, include_deactivated=True)
    if user is not None:
        if user.deactivated_at is not None:
            user = await activate_user(session, user)
        return user

    candidate = email.split("@")[0]
    if not (User.valid_username(candidate) and await available_username(session, candidate)):
        candidate = uuid.uuid4().hex
    return await insert_user(session, {**(attrs or {}), "email": email, "username": candidate})


async def update_user(session: AsyncSession, user: User, attrs: dict) -> User:
    try:
        data = UserUpdateAttrs.model_validate(attrs)
    except ValidationError as exc:
        raise ValidationFailure.from_pydantic(exc) from exc

    changes = data.model_dump(exclude_unset=True)
    starred_story = changes.pop("starred_story_notifications", None)
    if starred_story is not None:
        user.notification_settings = {**user.notification_settings, "starred_story": starred_story}

    for field, value in changes.items():
        setattr(user, field, value)

    session.add(user)
    try:
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        raise ValidationFailure.from_integrity_error(exc, "username") from exc
    return user


async def activate_user(session: AsyncSession, user: User) -> User:
    """Reactivates a user. Pending deletion jobs become no-ops."""
    user.deactivated_at = None
    session.add(user)
    await session.commit()
    return user


async def mark_user_for_deletion(session: AsyncSession, user: User) -> User:
    """
    Deactivates the user now and schedules the deletion of the account and
    all its content for later.

    Both steps commit together or not at all.
    """
    try:
        user.deactivated_at = utcnow()
        session.add(user)
        await JobQueue.enqueue_in(
            session,
            USER_DELETION_QUEUE,
            settings.ACCOUNT_DELETION_DELAY_SECONDS,
            {"user_id": user.id},
        )
        await session.commit()
    except Exception:
        await session.rollback()
        raise

    logger.info("user_marked_for_deletion", user_id=user.id)
    return user


async def delete_user(session: AsyncSession, user: User) -> None:
    await session.delete(user)
    await session.commit()


def starred_story_notifications_enabled(user: User) -> bool:
    return bool((user.notification_settings or {}).get("starred_story", True))


async def story_count(session: AsyncSession, author: User, published_only: bool = False) -> int:
    stmt = Story.published() if published_only else select(Story)
    stmt = Story.by_author(author.id, stmt)
    return await count(session, stmt)


async def publication_count(session: AsyncSession, user: User) -> int:
    return await count(session, PublicationMembership.by_member(user.id))

