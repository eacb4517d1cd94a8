"""
Async database engine and session factory.

Supports:
- Dev: SQLite with aiosqlite
- Prod: PostgreSQL with asyncpg
"""
from sqlalchemy import Select, event, func, select
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from inkwell.core.init_settings import settings


def create_engine():
    """Create async engine based on environment."""
    if settings.is_dev:
        # SQLite needs check_same_thread=False for async
        engine = create_async_engine(
            settings.async_db_url,
            echo=False,
            connect_args={"check_same_thread": False},
        )

        # Cascades on stars, comments and memberships rely on foreign keys
        @event.listens_for(engine.sync_engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        return engine

    # Production: PostgreSQL with connection pooling
    return create_async_engine(
        settings.async_db_url,
        echo=False,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_pre_ping=True,  # Verify connections before use
    )


engine = create_engine()

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def count(session: AsyncSession, stmt: Select) -> int:
    """Row count of ``stmt``, ignoring any ordering or windowing on it."""
    subquery = stmt.order_by(None).limit(None).offset(None).subquery()
    result = await session.execute(select(func.count()).select_from(subquery))
    return result.scalar_one()
