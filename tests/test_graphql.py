import pytest
from sqlalchemy import func, select

from inkwell.db.seed import SeedConfig, generate_follows, generate_users, seed_if_empty
from inkwell.models import PublicationMembership, PublicationRole, StoryAudience, User


@pytest.mark.anyio
async def test_health(client):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


@pytest.mark.anyio
async def test_stories_feed_lists_public_stories(gql, create_user, create_story):
    author = await create_user(username="ada")
    published = [await create_story(author) for _ in range(3)]
    await create_story(author, published_at=None)
    await create_story(author, audience=StoryAudience.MEMBERS)

    body = await gql(
        """
        query {
            stories(first: 2) {
                totalCount
                edges { node { title author { username } } }
                pageInfo { hasNextPage }
            }
        }
        """
    )

    feed = body["data"]["stories"]
    assert feed["totalCount"] == 3
    assert [edge["node"]["title"] for edge in feed["edges"]] == [s.title for s in published[:2]]
    assert feed["edges"][0]["node"]["author"] == {"username": "ada"}
    assert feed["pageInfo"]["hasNextPage"] is True


@pytest.mark.anyio
async def test_search_is_not_implemented(gql):
    body = await gql('query { search(query: "python") { title } }')

    assert body["data"]["search"] is None
    assert body["errors"][0]["extensions"]["code"] == "NOT_IMPLEMENTED"


def test_generated_users_are_unique():
    users = generate_users(50)

    assert len({u["username"] for u in users}) == 50
    assert all(User.valid_username(u["username"]) for u in users)


def test_generated_follows_never_target_the_follower():
    follows = generate_follows(list(range(1, 10)), SeedConfig(follows_per_user=(3, 3)))

    assert len(follows) == 27
    assert all(f["follower_id"] != f["user_id"] for f in follows)


@pytest.mark.anyio
async def test_seed_only_runs_on_an_empty_database(session):
    assert await seed_if_empty(SeedConfig(user_count=5, publication_count=2)) is True
    assert await seed_if_empty() is False

    users = (await session.execute(select(func.count()).select_from(User))).scalar_one()
    owners = (
        await session.execute(
            select(func.count())
            .select_from(PublicationMembership)
            .where(PublicationMembership.role == PublicationRole.OWNER)
        )
    ).scalar_one()
    assert users == 5
    assert owners == 2
