from inkwell.core.errors import NotImplementedYet
from inkwell.graphql import permissions
from inkwell.graphql.context import Context
from inkwell.graphql.ids import NodeType, from_global_id
from inkwell.graphql.pagination import ConnectionArgs, Page, paginate
from inkwell.models import (
    Publication,
    PublicationInvitation,
    PublicationMembership,
    PublicationRole,
    Story,
    Tag,
    User,
)
from inkwell.services import accounts, publications


async def publication(_, args: dict, ctx: Context) -> Publication | None:
    async with ctx.session() as session:
        return await publications.get_publication_by_name(session, args["name"])


async def owner(publication: Publication, args: dict, ctx: Context) -> User | None:
    async with ctx.session() as session:
        return await publications.get_publication_owner(session, publication.id)


async def members(publication: Publication, args: ConnectionArgs, ctx: Context) -> Page:
    """Page rows are ``(user, role)`` pairs."""
    async with ctx.session() as session:
        stmt = publications.members_of(publication.id)
        return await paginate(session, stmt, args, key=PublicationMembership.id)


async def member(publication: Publication, args: dict, ctx: Context) -> tuple[User, PublicationRole] | None:
    _, member_id = from_global_id(args["member_id"], NodeType.USER)
    async with ctx.session() as session:
        return await publications.get_member(session, publication.id, member_id)


async def stories(publication: Publication, args: ConnectionArgs, ctx: Context) -> Page:
    """Members see every story of the publication, everyone else the public ones."""
    stmt = Story.under_publication(publication.id)
    async with ctx.session() as session:
        if not await permissions.viewer_is_member(session, ctx.viewer, publication):
            stmt = Story.public(stmt)
        return await paginate(session, stmt, args, key=Story.id)


async def membership_invitations(
    publication: Publication, args: ConnectionArgs, ctx: Context
) -> Page | None:
    if ctx.viewer is None:
        return None
    async with ctx.session() as session:
        if not await publications.can_see_invitations(session, publication.id, ctx.viewer.id):
            return None
        stmt = publications.invitations_of(publication.id)
        return await paginate(session, stmt, args, key=PublicationInvitation.id)


async def tags(publication: Publication, args: dict, ctx: Context) -> list[Tag]:
    async with ctx.session() as session:
        return await publications.get_tags(session, publication)


async def viewer_is_a_member(publication: Publication, args: dict, ctx: Context) -> bool:
    async with ctx.session() as session:
        return await permissions.viewer_is_member(session, ctx.viewer, publication)


async def viewer_can_administer(publication: Publication, args: dict, ctx: Context) -> bool:
    async with ctx.session() as session:
        return await permissions.viewer_can_administer(session, ctx.viewer, publication)


async def invitation_publication(
    invitation: PublicationInvitation, args: dict, ctx: Context
) -> Publication | None:
    async with ctx.session() as session:
        return await publications.get_publication(session, invitation.publication_id)


async def invitee(invitation: PublicationInvitation, args: dict, ctx: Context) -> User | None:
    async with ctx.session() as session:
        return await accounts.get_user(session, invitation.invitee_id)


async def inviter(invitation: PublicationInvitation, args: dict, ctx: Context) -> User | None:
    async with ctx.session() as session:
        return await accounts.get_user(session, invitation.inviter_id)


async def create_publication(_, args: dict, ctx: Context) -> Publication:
    viewer = permissions.require_viewer(ctx)
    async with ctx.session() as session:
        return await publications.insert_publication(session, viewer, args["input"])


async def update_publication(_, args: dict, ctx: Context) -> Publication:
    raise NotImplementedYet()


async def delete_publication(_, args: dict, ctx: Context) -> Publication:
    raise NotImplementedYet()


async def leave_publication(_, args: dict, ctx: Context) -> Publication:
    raise NotImplementedYet()


async def _load_publication(session, global_id: str) -> Publication:
    _, id = from_global_id(global_id, NodeType.PUBLICATION)
    return permissions.ensure_found(
        await publications.get_publication(session, id), "Publication doesn't exist."
    )


async def kick_member(_, args: dict, ctx: Context) -> Publication:
    """Admins remove members. Nobody can kick themselves, nobody can kick the owner."""
    viewer = permissions.require_viewer(ctx)
    _, member_id = from_global_id(args["member_id"], NodeType.USER)
    async with ctx.session() as session:
        publication = await _load_publication(session, args["publication_id"])
        permissions.ensure_found(await accounts.get_user(session, member_id), "User doesn't exist.")
        await permissions.ensure_admin(session, publication.id, viewer, "kick_member")
        permissions.ensure_not_self(member_id, viewer, "You can't kick yourself.")
        await publications.kick_member(session, publication.id, member_id)
        return publication


async def send_invitation(_, args: dict, ctx: Context) -> PublicationInvitation:
    viewer = permissions.require_viewer(ctx)
    _, invitee_id = from_global_id(args["invitee_id"], NodeType.USER)
    async with ctx.session() as session:
        publication = await _load_publication(session, args["publication_id"])
        invitee = permissions.ensure_found(
            await accounts.get_user(session, invitee_id), "User doesn't exist."
        )
        await permissions.ensure_admin(session, publication.id, viewer, "send_invitation")
        permissions.ensure_not_self(invitee.id, viewer, "You can't invite yourself.")
        return await publications.insert_invitation(
            session, publication.id, viewer, invitee, args.get("role") or PublicationRole.WRITER
        )


async def _load_own_invitation(session, ctx: Context, global_id: str, action: str) -> PublicationInvitation:
    viewer = permissions.require_viewer(ctx)
    _, id = from_global_id(global_id, NodeType.PUBLICATION_INVITATION)
    invitation = await publications.get_invitation(session, id)
    if invitation is not None and not await publications.can_see_invitation(session, invitation, viewer):
        invitation = None
    invitation = permissions.ensure_found(invitation, "Invitation doesn't exist.")
    permissions.ensure_owner(invitation.invitee_id, viewer, action)
    return invitation


async def accept_invitation(_, args: dict, ctx: Context) -> PublicationInvitation:
    async with ctx.session() as session:
        invitation = await _load_own_invitation(session, ctx, args["invitation_id"], "accept_invitation")
        return await publications.accept_invitation(session, invitation)


async def reject_invitation(_, args: dict, ctx: Context) -> PublicationInvitation:
    async with ctx.session() as session:
        invitation = await _load_own_invitation(session, ctx, args["invitation_id"], "reject_invitation")
        return await publications.reject_invitation(session, invitation)
