import pytest

from inkwell.core.errors import NotFound, SelfActionConflict, Unauthenticated, Unauthorized
from inkwell.graphql import permissions
from inkwell.graphql.ids import NodeType, to_global_id
from inkwell.models import User

VIEWER_FLAGS_QUERY = """
    query Story($slug: String!) {
        story(slug: $slug) {
            viewerCanStar
            viewerHasStarred
            viewerCanComment
            viewerCanBookmark
            viewerHasBookmarked
            viewerCanUpdate
            author { viewerCanFollow viewerHasFollowed isViewer }
        }
    }
"""


def test_guards(context):
    viewer = User(id=1, username="ada", email="ada@example.com")

    with pytest.raises(Unauthenticated):
        permissions.require_viewer(context())
    assert permissions.require_viewer(context(viewer)) is viewer

    with pytest.raises(NotFound):
        permissions.ensure_found(None)
    assert permissions.ensure_found(viewer) is viewer

    with pytest.raises(Unauthorized):
        permissions.ensure_owner(2, viewer)
    permissions.ensure_owner(1, viewer)

    with pytest.raises(SelfActionConflict):
        permissions.ensure_not_self(1, viewer)


def test_capabilities_need_a_viewer():
    viewer = User(id=1, username="ada", email="ada@example.com")
    other = User(id=2, username="grace", email="grace@example.com")

    assert permissions.viewer_can_star(None) is False
    assert permissions.viewer_can_star(viewer) is True
    assert permissions.viewer_can_comment(None) is False
    assert permissions.viewer_can_bookmark(viewer) is True
    assert permissions.viewer_can_follow(None, other) is False
    assert permissions.viewer_can_follow(viewer, other) is True
    assert permissions.viewer_can_follow(viewer, viewer) is False


@pytest.mark.anyio
async def test_anonymous_viewer_has_nothing(gql, create_user, create_story, create_star):
    author = await create_user()
    story = await create_story(author)
    await create_star(author, story)

    body = await gql(VIEWER_FLAGS_QUERY, {"slug": story.slug})

    assert body["data"]["story"] == {
        "viewerCanStar": False,
        "viewerHasStarred": False,
        "viewerCanComment": False,
        "viewerCanBookmark": False,
        "viewerHasBookmarked": False,
        "viewerCanUpdate": False,
        "author": {"viewerCanFollow": False, "viewerHasFollowed": False, "isViewer": False},
    }


@pytest.mark.anyio
async def test_viewer_flags_follow_the_store(gql, create_user, create_story):
    author = await create_user()
    reader = await create_user()
    story = await create_story(author)
    story_id = to_global_id(NodeType.STORY, story.id)

    await gql("mutation($id: ID!) { star(starrableId: $id) { starrable { starCount } } }", {"id": story_id}, reader)
    await gql("mutation($id: ID!) { bookmark(bookmarkableId: $id) { bookmarkable { viewerHasBookmarked } } }", {"id": story_id}, reader)

    body = await gql(VIEWER_FLAGS_QUERY, {"slug": story.slug}, reader)
    flags = body["data"]["story"]
    assert flags["viewerHasStarred"] is True
    assert flags["viewerHasBookmarked"] is True
    assert flags["viewerCanUpdate"] is False
    assert flags["author"]["viewerCanFollow"] is True

    body = await gql(VIEWER_FLAGS_QUERY, {"slug": story.slug}, author)
    flags = body["data"]["story"]
    assert flags["viewerHasStarred"] is False
    assert flags["viewerCanUpdate"] is True
    assert flags["author"] == {"viewerCanFollow": False, "viewerHasFollowed": False, "isViewer": True}


@pytest.mark.anyio
async def test_mutations_need_a_viewer(gql, create_user, create_story):
    story = await create_story(await create_user())

    body = await gql(
        "mutation($id: ID!) { star(starrableId: $id) { starrable { starCount } } }",
        {"id": to_global_id(NodeType.STORY, story.id)},
    )

    assert body["data"]["star"] is None
    assert body["errors"][0]["extensions"]["code"] == "UNAUTHENTICATED"


@pytest.mark.anyio
async def test_invalid_tokens_are_anonymous(client):
    response = await client.post(
        "/graphql",
        json={"query": "query { viewer { username } }"},
        headers={"Authorization": "Bearer not-a-jwt"},
    )

    assert response.json() == {"data": {"viewer": None}}
