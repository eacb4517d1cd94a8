"""
Inkwell: social publishing over GraphQL.

Dev mode runs on SQLite and seeds sample data into an empty database.
Prod mode reads DATABASE_URL and CORS_ORIGINS from the environment.

Usage:
    uvicorn inkwell.main:app --reload
    python -m inkwell.main --mode prod --host 0.0.0.0 --port 8000
"""
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from inkwell.core.init_settings import settings, args
from inkwell.core.database import engine
from inkwell.core.logging import configure_logging
from inkwell.db.seed import seed_if_empty
from inkwell.graphql.schema import graphql_router
from inkwell.models import Base

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    configure_logging()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    if settings.SEED_SAMPLE_DATA and await seed_if_empty():
        logger.info("sample_data_seeded", mode=settings.ENV_MODE)

    logger.info(
        "server_starting",
        mode=settings.ENV_MODE,
        database=settings.async_db_url.split("@")[-1],
        cors_origins=settings.CORS_ORIGINS,
    )
    yield

    await engine.dispose()
    logger.info("server_stopped", mode=settings.ENV_MODE)


app = FastAPI(
    title=settings.APP_NAME,
    description="Stories, publications, comments and follows over GraphQL",
    version=settings.APP_VERSION,
    lifespan=lifespan,
    debug=settings.DEBUG,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["Authorization", "Content-Type"],
)

app.include_router(graphql_router, prefix="/graphql")


@app.get("/health")
async def health():
    return {
        "status": "ok",
        "mode": settings.ENV_MODE,
        "version": settings.APP_VERSION,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "inkwell.main:app",
        host=args.host,
        port=args.port,
        reload=settings.is_dev,
    )
