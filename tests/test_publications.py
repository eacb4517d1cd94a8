import pytest
from sqlalchemy import select

from inkwell.graphql.ids import NodeType, to_global_id
from inkwell.models import (
    InvitationStatus,
    PublicationInvitation,
    PublicationMembership,
    PublicationRole,
    StoryAudience,
)

CREATE_PUBLICATION = """
    mutation CreatePublication($input: CreatePublicationInput!) {
        createPublication(input: $input) {
            publication {
                name
                displayName
                owner { username }
                viewerIsAMember
                viewerCanAdminister
                tags { title }
            }
        }
    }
"""

KICK_MEMBER = """
    mutation Kick($publicationId: ID!, $memberId: ID!) {
        kickMember(publicationId: $publicationId, memberId: $memberId) {
            publication { members { totalCount } }
        }
    }
"""

SEND_INVITATION = """
    mutation Invite($publicationId: ID!, $inviteeId: ID!, $role: PublicationRole) {
        sendPublicationInvitation(publicationId: $publicationId, inviteeId: $inviteeId, role: $role) {
            invitation { id role status invitee { username } inviter { username } }
        }
    }
"""


def _ids(publication, user):
    return {
        "publicationId": to_global_id(NodeType.PUBLICATION, publication.id),
        "memberId": to_global_id(NodeType.USER, user.id),
    }


@pytest.mark.anyio
async def test_create_publication_makes_the_creator_its_owner(gql, db, create_user):
    owner = await create_user(username="grace")

    body = await gql(
        CREATE_PUBLICATION,
        {"input": {"name": "compilers-weekly", "displayName": "Compilers Weekly", "tags": ["Compilers"]}},
        owner,
    )

    assert "errors" not in body
    assert body["data"]["createPublication"]["publication"] == {
        "name": "compilers-weekly",
        "displayName": "Compilers Weekly",
        "owner": {"username": "grace"},
        "viewerIsAMember": True,
        "viewerCanAdminister": True,
        "tags": [{"title": "compilers"}],
    }
    async with db() as check:
        memberships = (await check.execute(select(PublicationMembership))).scalars().all()
    assert [(m.member_id, m.role) for m in memberships] == [(owner.id, PublicationRole.OWNER)]


@pytest.mark.anyio
async def test_publication_names_are_validated_and_unique(gql, create_user, create_publication):
    owner = await create_user()
    await create_publication(owner, name="taken")

    invalid = await gql(CREATE_PUBLICATION, {"input": {"name": "Not Valid!", "displayName": "x"}}, owner)
    taken = await gql(CREATE_PUBLICATION, {"input": {"name": "taken", "displayName": "x"}}, owner)

    for body in (invalid, taken):
        error = body["errors"][0]
        assert error["extensions"]["code"] == "VALIDATION_FAILED"
        assert error["extensions"]["fields"][0]["field"] == "name"


@pytest.mark.anyio
async def test_members_carry_their_role(gql, create_user, create_publication, add_member):
    owner = await create_user(username="owner")
    writer = await create_user(username="writer")
    publication = await create_publication(owner, name="the-journal")
    await add_member(publication, writer, PublicationRole.WRITER)

    body = await gql(
        """
        query($memberId: ID!) {
            publication(name: "the-journal") {
                members { totalCount edges { role node { username } } }
                member(memberId: $memberId) { role user { username } }
            }
        }
        """,
        {"memberId": to_global_id(NodeType.USER, writer.id)},
    )

    publication = body["data"]["publication"]
    assert publication["members"]["totalCount"] == 2
    assert publication["members"]["edges"] == [
        {"role": "OWNER", "node": {"username": "owner"}},
        {"role": "WRITER", "node": {"username": "writer"}},
    ]
    assert publication["member"] == {"role": "WRITER", "user": {"username": "writer"}}


@pytest.mark.anyio
async def test_member_only_stories_are_hidden_from_outsiders(
    gql, create_user, create_story, create_publication, add_member
):
    owner = await create_user()
    outsider = await create_user()
    publication = await create_publication(owner, name="insiders")
    await create_story(owner, publication_id=publication.id)
    await create_story(owner, publication_id=publication.id, audience=StoryAudience.MEMBERS)

    query = 'query { publication(name: "insiders") { stories { totalCount } } }'

    assert (await gql(query, user=owner))["data"]["publication"]["stories"]["totalCount"] == 2
    assert (await gql(query, user=outsider))["data"]["publication"]["stories"]["totalCount"] == 1
    assert (await gql(query))["data"]["publication"]["stories"]["totalCount"] == 1


@pytest.mark.anyio
async def test_admin_kicks_a_member(gql, create_user, create_publication, add_member):
    owner = await create_user()
    member = await create_user()
    publication = await create_publication(owner)
    await add_member(publication, member)

    body = await gql(KICK_MEMBER, _ids(publication, member), owner)

    assert "errors" not in body
    assert body["data"]["kickMember"]["publication"]["members"]["totalCount"] == 1


@pytest.mark.anyio
async def test_kicking_yourself_is_a_conflict(gql, create_user, create_publication, add_member):
    owner = await create_user()
    admin = await create_user()
    publication = await create_publication(owner)
    await add_member(publication, admin, PublicationRole.ADMIN)

    body = await gql(KICK_MEMBER, _ids(publication, admin), admin)

    assert body["data"]["kickMember"] is None
    assert body["errors"][0]["extensions"]["code"] == "SELF_ACTION_CONFLICT"


@pytest.mark.anyio
async def test_only_admins_can_kick(gql, db, create_user, create_publication, add_member):
    owner = await create_user()
    writer = await create_user()
    other = await create_user()
    publication = await create_publication(owner)
    await add_member(publication, writer)
    await add_member(publication, other)

    body = await gql(KICK_MEMBER, _ids(publication, other), writer)

    assert body["errors"][0]["extensions"]["code"] == "UNAUTHORIZED"
    async with db() as check:
        members = (await check.execute(PublicationMembership.by_publication(publication.id))).scalars().all()
    assert len(members) == 3


@pytest.mark.anyio
async def test_the_owner_cannot_be_kicked(gql, create_user, create_publication, add_member):
    owner = await create_user()
    admin = await create_user()
    publication = await create_publication(owner)
    await add_member(publication, admin, PublicationRole.ADMIN)

    body = await gql(KICK_MEMBER, _ids(publication, owner), admin)

    assert body["errors"][0]["extensions"]["code"] == "UNAUTHORIZED"


@pytest.mark.anyio
async def test_kicking_from_a_missing_publication_is_not_found(gql, create_user):
    admin = await create_user()
    member = await create_user()

    body = await gql(
        KICK_MEMBER,
        {
            "publicationId": to_global_id(NodeType.PUBLICATION, 404),
            "memberId": to_global_id(NodeType.USER, member.id),
        },
        admin,
    )

    assert body["errors"][0]["extensions"]["code"] == "NOT_FOUND"


@pytest.mark.anyio
async def test_invitation_is_accepted(gql, db, create_user, create_publication):
    owner = await create_user(username="owner")
    invitee = await create_user(username="invitee")
    publication = await create_publication(owner, name="gazette")

    body = await gql(
        SEND_INVITATION,
        {
            "publicationId": to_global_id(NodeType.PUBLICATION, publication.id),
            "inviteeId": to_global_id(NodeType.USER, invitee.id),
            "role": "EDITOR",
        },
        owner,
    )

    invitation = body["data"]["sendPublicationInvitation"]["invitation"]
    assert invitation["role"] == "EDITOR"
    assert invitation["status"] == "PENDING"
    assert invitation["invitee"] == {"username": "invitee"}
    assert invitation["inviter"] == {"username": "owner"}

    body = await gql(
        """
        mutation($id: ID!) {
            acceptPublicationInvitation(invitationId: $id) {
                invitation { status publication { name viewerIsAMember } }
            }
        }
        """,
        {"id": invitation["id"]},
        invitee,
    )

    assert body["data"]["acceptPublicationInvitation"]["invitation"] == {
        "status": "ACCEPTED",
        "publication": {"name": "gazette", "viewerIsAMember": True},
    }
    async with db() as check:
        role = (
            await check.execute(
                select(PublicationMembership.role).where(PublicationMembership.member_id == invitee.id)
            )
        ).scalar_one()
    assert role == PublicationRole.EDITOR


@pytest.mark.anyio
async def test_invitation_is_rejected_once(gql, session, create_user, create_publication):
    owner = await create_user()
    invitee = await create_user()
    publication = await create_publication(owner)
    invitation = PublicationInvitation(
        publication_id=publication.id, inviter_id=owner.id, invitee_id=invitee.id, role=PublicationRole.WRITER
    )
    session.add(invitation)
    await session.commit()
    variables = {"id": to_global_id(NodeType.PUBLICATION_INVITATION, invitation.id)}
    reject = "mutation($id: ID!) { rejectPublicationInvitation(invitationId: $id) { invitation { status } } }"

    first = await gql(reject, variables, invitee)
    again = await gql(reject, variables, invitee)

    assert first["data"]["rejectPublicationInvitation"]["invitation"]["status"] == "REJECTED"
    assert again["errors"][0]["extensions"]["code"] == "VALIDATION_FAILED"


@pytest.mark.anyio
async def test_only_the_invitee_answers_an_invitation(gql, session, create_user, create_publication):
    owner = await create_user()
    invitee = await create_user()
    stranger = await create_user()
    publication = await create_publication(owner)
    invitation = PublicationInvitation(
        publication_id=publication.id, inviter_id=owner.id, invitee_id=invitee.id
    )
    session.add(invitation)
    await session.commit()
    variables = {"id": to_global_id(NodeType.PUBLICATION_INVITATION, invitation.id)}
    accept = "mutation($id: ID!) { acceptPublicationInvitation(invitationId: $id) { invitation { status } } }"

    by_owner = await gql(accept, variables, owner)
    by_stranger = await gql(accept, variables, stranger)

    assert by_owner["errors"][0]["extensions"]["code"] == "UNAUTHORIZED"
    assert by_stranger["errors"][0]["extensions"]["code"] == "NOT_FOUND"
    await session.refresh(invitation)
    assert invitation.status == InvitationStatus.PENDING


@pytest.mark.anyio
async def test_inviting_yourself_is_a_conflict(gql, create_user, create_publication):
    owner = await create_user()
    publication = await create_publication(owner)

    body = await gql(
        SEND_INVITATION,
        {
            "publicationId": to_global_id(NodeType.PUBLICATION, publication.id),
            "inviteeId": to_global_id(NodeType.USER, owner.id),
        },
        owner,
    )

    assert body["errors"][0]["extensions"]["code"] == "SELF_ACTION_CONFLICT"


@pytest.mark.anyio
async def test_membership_invitations_are_visible_to_admins_only(
    gql, session, create_user, create_publication, add_member
):
    owner = await create_user()
    writer = await create_user()
    invitee = await create_user()
    publication = await create_publication(owner, name="private-list")
    await add_member(publication, writer)
    session.add(PublicationInvitation(publication_id=publication.id, inviter_id=owner.id, invitee_id=invitee.id))
    await session.commit()

    query = 'query { publication(name: "private-list") { membershipInvitations { totalCount } } }'

    assert (await gql(query, user=owner))["data"]["publication"]["membershipInvitations"] == {"totalCount": 1}
    assert (await gql(query, user=writer))["data"]["publication"]["membershipInvitations"] is None
    assert (await gql(query))["data"]["publication"]["membershipInvitations"] is None


@pytest.mark.anyio
@pytest.mark.parametrize("mutation", ["updatePublication", "deletePublication", "leavePublication"])
async def test_unfinished_publication_mutations(gql, create_user, create_publication, mutation):
    owner = await create_user()
    publication = await create_publication(owner)

    body = await gql(
        f"mutation($id: ID!) {{ {mutation}(id: $id) {{ publication {{ name }} }} }}",
        {"id": to_global_id(NodeType.PUBLICATION, publication.id)},
        owner,
    )

    assert body["data"][mutation] is None
    assert body["errors"][0]["extensions"]["code"] == "NOT_IMPLEMENTED"
