"""
The Publications context.

Publications, their members and membership invitations.
"""
import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from inkwell.core.errors import NotFound, Unauthorized, ValidationFailure
from inkwell.models import (
    ADMIN_ROLES,
    InvitationStatus,
    Publication,
    PublicationInvitation,
    PublicationMembership,
    PublicationRole,
    User,
)
from inkwell.services import tags

logger = structlog.get_logger(__name__)


class PublicationAttrs(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(min_length=1, max_length=64)
    display_name: str = Field(min_length=1, max_length=100)
    description: str | None = None
    website: str | None = Field(default=None, max_length=500)
    tags: list[str] = Field(default_factory=list, max_length=10)

    @field_validator("name")
    @classmethod
    def check_name(cls, value: str) -> str:
        if not Publication.valid_name(value):
            raise ValueError("may only contain lowercase letters, numbers and dashes")
        return value


async def get_publication(session: AsyncSession, publication_id: int) -> Publication | None:
    return await session.get(Publication, publication_id)


async def get_publication_by_name(session: AsyncSession, name: str) -> Publication | None:
    result = await session.execute(select(Publication).where(Publication.name == name))
    return result.scalar_one_or_none()


async def get_publication_owner(session: AsyncSession, publication_id: int) -> User | None:
    stmt = (
        User.active(select(User).join(PublicationMembership, PublicationMembership.member_id == User.id))
        .where(PublicationMembership.publication_id == publication_id)
        .where(PublicationMembership.role == PublicationRole.OWNER)
    )
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def get_membership(
    session: AsyncSession, publication_id: int, member_id: int
) -> PublicationMembership | None:
    stmt = PublicationMembership.by_publication(publication_id).where(
        PublicationMembership.member_id == member_id
    )
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def get_member_role(
    session: AsyncSession, publication_id: int, member_id: int
) -> PublicationRole | None:
    membership = await get_membership(session, publication_id, member_id)
    return membership.role if membership else None


async def is_member(session: AsyncSession, publication_id: int, user_id: int) -> bool:
    return await get_membership(session, publication_id, user_id) is not None


async def is_admin(session: AsyncSession, publication_id: int, user_id: int) -> bool:
    return await get_member_role(session, publication_id, user_id) in ADMIN_ROLES


async def can_see_invitations(session: AsyncSession, publication_id: int, user_id: int) -> bool:
    """Only publication admins can see its membership invitations."""
    return await is_admin(session, publication_id, user_id)


async def insert_publication(session: AsyncSession, owner: User, attrs: dict) -> Publication:
    """Inserts a publication and makes ``owner`` its owner member, atomically."""
    try:
        data = PublicationAttrs.model_validate(attrs)
    except ValidationError as exc:
        raise ValidationFailure.from_pydantic(exc) from exc

    publication = Publication(
        name=data.name,
        display_name=data.display_name,
        description=data.description,
        website=data.website,
    )
    publication.tags = await tags.insert_and_get_all_tags(session, data.tags)
    session.add(publication)
    try:
        await session.flush()
        session.add(
            PublicationMembership(
                publication_id=publication.id,
                member_id=owner.id,
                role=PublicationRole.OWNER,
            )
        )
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        raise ValidationFailure.from_integrity_error(exc, "name") from exc
    return publication


async def kick_member(session: AsyncSession, publication_id: int, member_id: int) -> None:
    """Removes a member. The owner cannot be kicked."""
    membership = await get_membership(session, publication_id, member_id)
    if membership is None:
        raise NotFound("The user is not a member of the publication.")
    if membership.role == PublicationRole.OWNER:
        raise Unauthorized("The owner of the publication can't be kicked.")

    await session.execute(delete(PublicationMembership).where(PublicationMembership.id == membership.id))
    await session.commit()
    logger.info("publication_member_kicked", publication_id=publication_id, member_id=member_id)


async def get_invitation(session: AsyncSession, invitation_id: int) -> PublicationInvitation | None:
    return await session.get(PublicationInvitation, invitation_id)


async def can_see_invitation(
    session: AsyncSession, invitation: PublicationInvitation, viewer: User | None
) -> bool:
    """The invitee, the inviter and the publication admins can see an invitation."""
    if viewer is None:
        return False
    if viewer.id in (invitation.invitee_id, invitation.inviter_id):
        return True
    return await is_admin(session, invitation.publication_id, viewer.id)


async def insert_invitation(
    session: AsyncSession,
    publication_id: int,
    inviter: User,
    invitee: User,
    role: PublicationRole = PublicationRole.WRITER,
) -> PublicationInvitation:
    if role == PublicationRole.OWNER:
        raise ValidationFailure.on("role", "A publication can only have one owner")
    if await is_member(session, publication_id, invitee.id):
        raise ValidationFailure.on("invitee_id", "is already a member of the publication")

    invitation = PublicationInvitation(
        publication_id=publication_id,
        inviter_id=inviter.id,
        invitee_id=invitee.id,
        role=role,
    )
    session.add(invitation)
    await session.commit()
    return invitation


async def accept_invitation(
    session: AsyncSession, invitation: PublicationInvitation
) -> PublicationInvitation:
    """Marks the invitation accepted and adds the invitee as a member, atomically."""
    _ensure_pending(invitation)
    invitation.status = InvitationStatus.ACCEPTED
    session.add(invitation)
    session.add(
        PublicationMembership(
            publication_id=invitation.publication_id,
            member_id=invitation.invitee_id,
            role=invitation.role,
        )
    )
    try:
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        raise ValidationFailure.from_integrity_error(exc, "invitation_id") from exc
    return invitation


async def reject_invitation(
    session: AsyncSession, invitation: PublicationInvitation
) -> PublicationInvitation:
    _ensure_pending(invitation)
    invitation.status = InvitationStatus.REJECTED
    session.add(invitation)
    await session.commit()
    return invitation


def _ensure_pending(invitation: PublicationInvitation) -> None:
    if invitation.status != InvitationStatus.PENDING:
        raise ValidationFailure.on(
            "invitation_id", f"The invitation was already {invitation.status.value}"
        )


async def get_tags(session: AsyncSession, publication: Publication) -> list:
    stmt = (
        select(Publication)
        .where(Publication.id == publication.id)
        .options(selectinload(Publication.tags))
        .execution_options(populate_existing=True)
    )
    result = await session.execute(stmt)
    return list(result.scalar_one().tags)


def members_of(publication_id: int):
    """Active members of the publication, each with its role."""
    stmt = select(User, PublicationMembership.role).join(
        PublicationMembership, PublicationMembership.member_id == User.id
    )
    return User.active(stmt).where(PublicationMembership.publication_id == publication_id)


async def get_member(session: AsyncSession, publication_id: int, member_id: int):
    """The ``(user, role)`` pair of a member, `None` for non-members."""
    stmt = members_of(publication_id).where(User.id == member_id)
    result = await session.execute(stmt)
    return result.first()


def publications_of(member_id: int):
    """Publications the user is a member of."""
    return (
        select(Publication)
        .join(PublicationMembership, PublicationMembership.publication_id == Publication.id)
        .where(PublicationMembership.member_id == member_id)
    )


def invitations_of(publication_id: int):
    return select(PublicationInvitation).where(
        PublicationInvitation.publication_id == publication_id
    )
