from datetime import datetime, timedelta

import pytest

from inkwell.graphql.ids import NodeType, to_global_id
from inkwell.models import Collection, CollectionStory, Story, Tag, utcnow

STORY_QUERY = """
    query Story($slug: String!) {
        story(slug: $slug) {
            id
            title
            slug
            isPublished
            author { username }
            tags { title }
        }
    }
"""

UPDATE_STORY = """
    mutation UpdateStory($id: ID!, $input: UpdateStoryInput!) {
        updateStory(id: $id, input: $input) {
            story { title summary tags { title } }
        }
    }
"""

CREATE_STORY = """
    mutation CreateStory($input: CreateStoryInput!) {
        createStory(input: $input) {
            story { id title slug isPublished tags { title } publication { name } }
        }
    }
"""


@pytest.mark.anyio
async def test_story_by_slug(gql, create_user, create_story):
    author = await create_user(username="ada")
    story = await create_story(author, title="Notes on the Analytical Engine")

    body = await gql(STORY_QUERY, {"slug": story.slug})

    assert "errors" not in body
    assert body["data"]["story"]["title"] == "Notes on the Analytical Engine"
    assert body["data"]["story"]["slug"] == f"notes-on-the-analytical-engine-{story.unique_hash}"
    assert body["data"]["story"]["author"] == {"username": "ada"}


@pytest.mark.anyio
async def test_unknown_slug_is_null_without_errors(gql):
    body = await gql(STORY_QUERY, {"slug": "nonexistent"})

    assert body == {"data": {"story": None}}


@pytest.mark.anyio
async def test_drafts_are_only_visible_to_their_author(gql, create_user, create_story):
    author = await create_user()
    reader = await create_user()
    draft = await create_story(author, published_at=None)
    scheduled = await create_story(author, published_at=utcnow() + timedelta(days=3))

    for story in (draft, scheduled):
        assert (await gql(STORY_QUERY, {"slug": story.slug}, reader))["data"]["story"] is None
        assert (await gql(STORY_QUERY, {"slug": story.slug}))["data"]["story"] is None
        mine = (await gql(STORY_QUERY, {"slug": story.slug}, author))["data"]["story"]
        assert mine["isPublished"] is False


@pytest.mark.anyio
async def test_user_stories_hide_non_public_stories_from_others(gql, create_user, create_story):
    author = await create_user(username="ada")
    reader = await create_user()
    await create_story(author)
    await create_story(author, published_at=None)

    query = 'query { user(username: "ada") { storyCount stories { totalCount } } }'

    theirs = (await gql(query, user=reader))["data"]["user"]
    mine = (await gql(query, user=author))["data"]["user"]
    assert theirs == {"storyCount": 1, "stories": {"totalCount": 1}}
    assert mine == {"storyCount": 2, "stories": {"totalCount": 2}}


@pytest.mark.anyio
async def test_create_story(gql, create_user, create_publication):
    author = await create_user()
    publication = await create_publication(author, name="the-daily-byte")

    body = await gql(
        CREATE_STORY,
        {
            "input": {
                "title": "Hello World",
                "content": "First!",
                "tags": ["Python", "python", "databases"],
                "publicationId": to_global_id(NodeType.PUBLICATION, publication.id),
            }
        },
        author,
    )

    assert "errors" not in body
    story = body["data"]["createStory"]["story"]
    assert story["title"] == "Hello World"
    assert story["slug"].startswith("hello-world-")
    assert story["isPublished"] is False
    assert sorted(tag["title"] for tag in story["tags"]) == ["databases", "python"]
    assert story["publication"] == {"name": "the-daily-byte"}


@pytest.mark.anyio
async def test_create_story_in_foreign_publication_fails(gql, create_user, create_publication):
    owner = await create_user()
    author = await create_user()
    publication = await create_publication(owner)

    body = await gql(
        CREATE_STORY,
        {
            "input": {
                "title": "Sneaky",
                "content": "Hi",
                "publicationId": to_global_id(NodeType.PUBLICATION, publication.id),
            }
        },
        author,
    )

    error = body["errors"][0]
    assert body["data"]["createStory"] is None
    assert error["extensions"]["code"] == "VALIDATION_FAILED"
    assert error["extensions"]["fields"][0]["field"] == "publication_id"


@pytest.mark.anyio
async def test_create_story_validates_input(gql, create_user):
    author = await create_user()

    body = await gql(CREATE_STORY, {"input": {"title": "   ", "content": "Body"}}, author)

    error = body["errors"][0]
    assert error["extensions"]["code"] == "VALIDATION_FAILED"
    assert [field["field"] for field in error["extensions"]["fields"]] == ["title"]


@pytest.mark.anyio
async def test_create_story_with_a_wrong_reference(gql, create_user):
    author = await create_user()

    body = await gql(
        CREATE_STORY,
        {"input": {"title": "T", "content": "C", "publicationId": to_global_id(NodeType.USER, author.id)}},
        author,
    )

    assert body["errors"][0]["extensions"]["code"] == "INVALID_REFERENCE"


@pytest.mark.anyio
async def test_update_story_by_its_author(gql, db, create_user, create_story):
    author = await create_user()
    story = await create_story(author, title="Draft title")

    body = await gql(
        UPDATE_STORY,
        {
            "id": to_global_id(NodeType.STORY, story.id),
            "input": {"title": "Final title", "summary": "Short", "tags": ["essays"]},
        },
        author,
    )

    assert "errors" not in body
    assert body["data"]["updateStory"]["story"] == {
        "title": "Final title",
        "summary": "Short",
        "tags": [{"title": "essays"}],
    }


@pytest.mark.anyio
async def test_update_story_by_someone_else_is_unauthorized(gql, db, create_user, create_story):
    author = await create_user()
    intruder = await create_user()
    story = await create_story(author, title="Original")

    body = await gql(
        UPDATE_STORY,
        {"id": to_global_id(NodeType.STORY, story.id), "input": {"title": "Defaced"}},
        intruder,
    )

    assert body["data"]["updateStory"] is None
    assert body["errors"][0]["extensions"]["code"] == "UNAUTHORIZED"
    async with db() as check:
        assert (await check.get(Story, story.id)).title == "Original"


@pytest.mark.anyio
async def test_update_missing_story_is_not_found_before_unauthorized(gql, create_user):
    intruder = await create_user()

    body = await gql(
        UPDATE_STORY, {"id": to_global_id(NodeType.STORY, 404), "input": {"title": "x"}}, intruder
    )

    assert body["errors"][0]["extensions"]["code"] == "NOT_FOUND"


@pytest.mark.anyio
async def test_published_date_cannot_move_once_published(gql, create_user, create_story):
    author = await create_user()
    story = await create_story(author)

    body = await gql(
        UPDATE_STORY,
        {
            "id": to_global_id(NodeType.STORY, story.id),
            "input": {"publishedAt": (utcnow() + timedelta(days=1)).isoformat()},
        },
        author,
    )

    error = body["errors"][0]
    assert error["extensions"]["code"] == "VALIDATION_FAILED"
    assert error["extensions"]["fields"][0]["field"] == "published_at"


@pytest.mark.anyio
async def test_delete_story(gql, db, create_user, create_story, create_star):
    author = await create_user()
    story = await create_story(author)
    await create_star(author, story)

    body = await gql(
        "mutation($id: ID!) { deleteStory(id: $id) { deletedStoryId } }",
        {"id": to_global_id(NodeType.STORY, story.id)},
        author,
    )

    assert body["data"]["deleteStory"]["deletedStoryId"] == to_global_id(NodeType.STORY, story.id)
    async with db() as check:
        assert await check.get(Story, story.id) is None


@pytest.mark.anyio
async def test_stargazers_connection(gql, create_user, create_story, create_star):
    author = await create_user()
    story = await create_story(author)
    fans = [await create_user() for _ in range(5)]
    for fan in fans:
        await create_star(fan, story)

    query = """
        query Stargazers($slug: String!, $after: String) {
            story(slug: $slug) {
                starCount
                stargazers(first: 2, after: $after) {
                    totalCount
                    edges { cursor starredAt node { username } }
                    pageInfo { hasNextPage hasPreviousPage endCursor }
                }
            }
        }
    """
    body = await gql(query, {"slug": story.slug})

    assert "errors" not in body
    result = body["data"]["story"]
    stargazers = result["stargazers"]
    assert result["starCount"] == 5
    assert len(stargazers["edges"]) == 2
    assert stargazers["totalCount"] == 5
    assert stargazers["pageInfo"]["hasNextPage"] is True
    assert stargazers["pageInfo"]["hasPreviousPage"] is False
    assert [e["node"]["username"] for e in stargazers["edges"]] == [f.username for f in fans[:2]]
    assert all(edge["starredAt"] for edge in stargazers["edges"])

    body = await gql(query, {"slug": story.slug, "after": stargazers["pageInfo"]["endCursor"]})
    second = body["data"]["story"]["stargazers"]
    assert [e["node"]["username"] for e in second["edges"]] == [f.username for f in fans[2:4]]
    assert second["pageInfo"]["hasPreviousPage"] is True


@pytest.mark.anyio
async def test_deactivated_users_leave_stargazers(gql, session, create_user, create_story, create_star):
    story = await create_story(await create_user())
    fan = await create_user()
    gone = await create_user()
    await create_star(fan, story)
    await create_star(gone, story)
    gone.deactivated_at = utcnow()
    await session.commit()

    body = await gql(
        "query($slug: String!) { story(slug: $slug) { starCount stargazers { totalCount } } }",
        {"slug": story.slug},
    )

    assert body["data"]["story"] == {"starCount": 1, "stargazers": {"totalCount": 1}}


@pytest.mark.anyio
async def test_tag_lists_public_stories(gql, session, create_user, create_story):
    author = await create_user()
    tag = Tag(title="python")
    session.add(tag)
    await session.flush()
    await create_story(author, title="Tagged", tags=[tag])
    await create_story(author, title="Tagged draft", tags=[tag], published_at=None)

    body = await gql('query { tag(title: "Python") { title stories { edges { node { title } } } } }')

    assert body["data"]["tag"] == {
        "title": "python",
        "stories": {"edges": [{"node": {"title": "Tagged"}}]},
    }


@pytest.mark.anyio
async def test_offset_published_dates_are_stored_as_utc(gql, db, create_user, create_story):
    author = await create_user()
    draft = await create_story(author, published_at=None)

    body = await gql(
        "mutation($input: CreateStoryInput!) { createStory(input: $input) { story { isPublished publishedAt } } }",
        {"input": {"title": "T", "content": "C", "publishedAt": "2020-01-01T02:00:00+02:00"}},
        author,
    )
    assert "errors" not in body
    assert body["data"]["createStory"]["story"] == {
        "isPublished": True,
        "publishedAt": "2020-01-01T00:00:00",
    }

    body = await gql(
        UPDATE_STORY,
        {"id": to_global_id(NodeType.STORY, draft.id), "input": {"publishedAt": "2999-01-01T00:00:00+00:00"}},
        author,
    )
    assert "errors" not in body
    async with db() as check:
        assert (await check.get(Story, draft.id)).published_at == datetime(2999, 1, 1)


@pytest.mark.anyio
async def test_required_story_fields_cannot_be_nulled(gql, db, create_user, create_story):
    author = await create_user()
    story = await create_story(author, title="Keep me")

    for field in ("title", "content", "audience", "license"):
        body = await gql(
            UPDATE_STORY, {"id": to_global_id(NodeType.STORY, story.id), "input": {field: None}}, author
        )

        error = body["errors"][0]
        assert body["data"]["updateStory"] is None
        assert error["extensions"]["code"] == "VALIDATION_FAILED"
        assert [f["field"] for f in error["extensions"]["fields"]] == [field]
        assert "can't be null" in error["extensions"]["fields"][0]["message"]

    async with db() as check:
        assert (await check.get(Story, story.id)).title == "Keep me"


@pytest.mark.anyio
async def test_updating_someone_elses_draft_is_unauthorized(gql, create_user, create_story):
    author = await create_user()
    intruder = await create_user()
    draft = await create_story(author, published_at=None)

    body = await gql(
        UPDATE_STORY, {"id": to_global_id(NodeType.STORY, draft.id), "input": {"title": "Mine now"}}, intruder
    )

    assert body["errors"][0]["extensions"]["code"] == "UNAUTHORIZED"


@pytest.mark.anyio
async def test_collection_lists_published_stories_in_the_order_they_were_added(
    gql, session, create_user, create_story
):
    author = await create_user(username="ada")
    first, second, third = [await create_story(author, title=f"Part {n}") for n in (1, 2, 3)]
    draft = await create_story(author, title="Unfinished", published_at=None)
    loose = await create_story(author, title="Standalone")
    collection = Collection(title="Engines", subtitle="A series", author_id=author.id)
    session.add(collection)
    await session.flush()
    for story in (third, first, draft, second):
        session.add(CollectionStory(collection_id=collection.id, story_id=story.id))
    await session.commit()

    query = """
        query($slug: String!, $after: String) {
            story(slug: $slug) {
                collection {
                    title
                    subtitle
                    author { username }
                    stories(first: 2, after: $after) {
                        totalCount
                        edges { node { title } }
                        pageInfo { hasNextPage endCursor }
                    }
                }
            }
        }
    """
    body = await gql(query, {"slug": first.slug})

    assert "errors" not in body
    collection = body["data"]["story"]["collection"]
    assert collection["title"] == "Engines"
    assert collection["subtitle"] == "A series"
    assert collection["author"] == {"username": "ada"}
    assert collection["stories"]["totalCount"] == 3
    assert [e["node"]["title"] for e in collection["stories"]["edges"]] == ["Part 3", "Part 1"]
    assert collection["stories"]["pageInfo"]["hasNextPage"] is True

    after = collection["stories"]["pageInfo"]["endCursor"]
    body = await gql(query, {"slug": first.slug, "after": after})
    rest = body["data"]["story"]["collection"]["stories"]
    assert [e["node"]["title"] for e in rest["edges"]] == ["Part 2"]
    assert rest["pageInfo"]["hasNextPage"] is False

    body = await gql(query, {"slug": loose.slug})
    assert body["data"]["story"]["collection"] is None


@pytest.mark.anyio
async def test_tag_lists_its_publications(gql, create_user):
    owner = await create_user()
    create = "mutation($input: CreatePublicationInput!) { createPublication(input: $input) { publication { name } } }"
    await gql(create, {"input": {"name": "compilers-weekly", "displayName": "CW", "tags": ["Compilers"]}}, owner)
    await gql(create, {"input": {"name": "gardening", "displayName": "G", "tags": ["plants"]}}, owner)

    body = await gql(
        'query { tag(title: "compilers") { publications { totalCount edges { node { name } } } } }'
    )

    assert body["data"]["tag"]["publications"] == {
        "totalCount": 1,
        "edges": [{"node": {"name": "compilers-weekly"}}],
    }
