import enum
import re
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Enum, ForeignKey, Select, String, Text, UniqueConstraint, select
from sqlalchemy.orm import Mapped, mapped_column, relationship

from inkwell.models.base import Base, TimestampMixin
from inkwell.models.tag import publication_tags

if TYPE_CHECKING:
    from inkwell.models.tag import Tag

PUBLICATION_NAME_PATTERN = re.compile(r"^[a-z0-9][a-z0-9-]{0,63}$")


class PublicationRole(enum.Enum):
    OWNER = "owner"
    ADMIN = "admin"
    EDITOR = "editor"
    WRITER = "writer"


ADMIN_ROLES = (PublicationRole.OWNER, PublicationRole.ADMIN)


class InvitationStatus(enum.Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class Publication(TimestampMixin, Base):
    __tablename__ = "publications"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(64), unique=True)
    display_name: Mapped[str] = mapped_column(String(100))
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    website: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    tags: Mapped[list["Tag"]] = relationship(secondary=publication_tags, passive_deletes=True)

    @staticmethod
    def valid_name(name: str) -> bool:
        return bool(PUBLICATION_NAME_PATTERN.match(name))


class PublicationMembership(TimestampMixin, Base):
    __tablename__ = "publication_memberships"
    __table_args__ = (UniqueConstraint("publication_id", "member_id"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    publication_id: Mapped[int] = mapped_column(
        ForeignKey("publications.id", ondelete="CASCADE"), index=True
    )
    member_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    role: Mapped[PublicationRole] = mapped_column(
        Enum(PublicationRole, native_enum=False), default=PublicationRole.WRITER
    )

    @classmethod
    def by_member(cls, member_id: int, stmt: Select | None = None) -> Select:
        stmt = select(cls) if stmt is None else stmt
        return stmt.where(cls.member_id == member_id)

    @classmethod
    def by_publication(cls, publication_id: int, stmt: Select | None = None) -> Select:
        stmt = select(cls) if stmt is None else stmt
        return stmt.where(cls.publication_id == publication_id)


class PublicationInvitation(TimestampMixin, Base):
    __tablename__ = "publication_invitations"

    id: Mapped[int] = mapped_column(primary_key=True)
    publication_id: Mapped[int] = mapped_column(
        ForeignKey("publications.id", ondelete="CASCADE"), index=True
    )
    invitee_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    inviter_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"))
    role: Mapped[PublicationRole] = mapped_column(
        Enum(PublicationRole, native_enum=False), default=PublicationRole.WRITER
    )
    status: Mapped[InvitationStatus] = mapped_column(
        Enum(InvitationStatus, native_enum=False), default=InvitationStatus.PENDING
    )
