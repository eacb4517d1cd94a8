"""
Per-request GraphQL context.

GraphQL resolvers execute concurrently, but SQLAlchemy async sessions don't
support concurrent operations. The context therefore carries the session
factory rather than a session, and each resolver opens its own:

    async with info.context.session() as session:
        ...

The viewer is loaded once per request from the bearer token and stays
detached from any session; services only read its columns.
"""
from datetime import datetime, timedelta, timezone

import structlog
from fastapi import Request
from jose import JWTError, jwt
from sqlalchemy.ext.asyncio import async_sessionmaker
from strawberry.fastapi import BaseContext

from inkwell.core.database import AsyncSessionLocal
from inkwell.core.init_settings import settings
from inkwell.models import User
from inkwell.services import accounts

logger = structlog.get_logger(__name__)


class Context(BaseContext):
    def __init__(self, viewer: User | None = None, session: async_sessionmaker = AsyncSessionLocal):
        super().__init__()
        self.viewer = viewer
        self.session = session


def create_access_token(user: User) -> str:
    """Token as issued by the identity provider once the OAuth handshake succeeds."""
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user.id),
        "exp": now + timedelta(minutes=settings.JWT_EXPIRE_MINUTES),
        "iat": now,
    }
    return jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> int | None:
    """User id carried by ``token``, `None` when the token is invalid or expired."""
    try:
        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
        return int(payload["sub"])
    except (JWTError, KeyError, ValueError):
        return None


def bearer_token(request: Request) -> str | None:
    scheme, _, token = request.headers.get("Authorization", "").partition(" ")
    if scheme.lower() != "bearer" or not token:
        return None
    return token.strip()


async def load_viewer(token: str | None) -> User | None:
    if token is None:
        return None
    user_id = decode_access_token(token)
    if user_id is None:
        logger.info("invalid_access_token")
        return None
    async with AsyncSessionLocal() as session:
        return await accounts.get_user(session, user_id)


async def get_context(request: Request) -> Context:
    return Context(viewer=await load_viewer(bearer_token(request)))
