import itertools
import os
import tempfile
from datetime import timedelta

# Settings are read at import time, so the environment goes first
os.environ["APP_MODE"] = "dev"
os.environ["SQLITE_PATH"] = os.path.join(tempfile.mkdtemp(prefix="inkwell-"), "test.db")
os.environ["SEED_SAMPLE_DATA"] = "false"

import pytest
from asgi_lifespan import LifespanManager
from httpx import ASGITransport, AsyncClient

from inkwell.core.database import AsyncSessionLocal, engine
from inkwell.graphql.context import Context, create_access_token
from inkwell.main import app
from inkwell.models import (
    Base,
    Publication,
    PublicationMembership,
    PublicationRole,
    Star,
    Story,
    User,
    utcnow,
)


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
async def db():
    """Fresh tables for every test."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield AsyncSessionLocal
    await engine.dispose()


@pytest.fixture
async def session(db):
    async with db() as session:
        yield session


@pytest.fixture
async def client(db):
    """Async test client with lifespan support."""
    async with LifespanManager(app) as manager:
        async with AsyncClient(
            transport=ASGITransport(app=manager.app),
            base_url="http://test",
        ) as ac:
            yield ac


@pytest.fixture
def auth_headers():
    def _auth_headers(user: User) -> dict:
        return {"Authorization": f"Bearer {create_access_token(user)}"}

    return _auth_headers


@pytest.fixture
def gql(client, auth_headers):
    """Posts a GraphQL document, optionally as ``user``, and returns the JSON body."""

    async def _gql(query: str, variables: dict | None = None, user: User | None = None) -> dict:
        headers = auth_headers(user) if user is not None else {}
        response = await client.post(
            "/graphql", json={"query": query, "variables": variables or {}}, headers=headers
        )
        assert response.status_code == 200
        return response.json()

    return _gql


@pytest.fixture
def context():
    def _context(viewer: User | None = None) -> Context:
        return Context(viewer=viewer)

    return _context


# Factories


@pytest.fixture
def create_user(session):
    counter = itertools.count(1)

    async def _create_user(**attrs) -> User:
        n = next(counter)
        attrs.setdefault("username", f"user{n}")
        attrs.setdefault("email", f"{attrs['username']}@example.com")
        user = User(**attrs)
        session.add(user)
        await session.commit()
        return user

    return _create_user


@pytest.fixture
def create_story(session):
    counter = itertools.count(1)

    async def _create_story(author: User, **attrs) -> Story:
        n = next(counter)
        attrs.setdefault("title", f"Story number {n}")
        attrs.setdefault("content", "Once upon a time.")
        attrs.setdefault("published_at", utcnow() - timedelta(days=1))
        story = Story(author_id=author.id, **attrs)
        session.add(story)
        await session.commit()
        return story

    return _create_story


@pytest.fixture
def create_publication(session):
    counter = itertools.count(1)

    async def _create_publication(owner: User, **attrs) -> Publication:
        n = next(counter)
        attrs.setdefault("name", f"publication-{n}")
        attrs.setdefault("display_name", f"Publication {n}")
        publication = Publication(**attrs)
        session.add(publication)
        await session.flush()
        session.add(
            PublicationMembership(
                publication_id=publication.id, member_id=owner.id, role=PublicationRole.OWNER
            )
        )
        await session.commit()
        return publication

    return _create_publication


@pytest.fixture
def add_member(session):
    async def _add_member(publication: Publication, user: User, role=PublicationRole.WRITER):
        membership = PublicationMembership(publication_id=publication.id, member_id=user.id, role=role)
        session.add(membership)
        await session.commit()
        return membership

    return _add_member


@pytest.fixture
def create_star(session):
    async def _create_star(user: User, story: Story) -> Star:
        star = Star(user_id=user.id, story_id=story.id)
        session.add(star)
        await session.commit()
        return star

    return _create_star
