"""
Relay global IDs.

A global ID is the URL-safe base64 encoding of ``"<TypeName>:<id>"``, so
``Story:12`` travels as ``U3Rvcnk6MTI=``.
"""
import base64
import binascii
import enum

from inkwell.core.errors import InvalidReference


class NodeType(enum.Enum):
    """The closed set of types reachable through ``node(id:)``."""

    USER = "User"
    STORY = "Story"
    PUBLICATION = "Publication"
    PUBLICATION_INVITATION = "PublicationInvitation"
    COLLECTION = "Collection"
    COMMENT = "Comment"
    NOTIFICATION = "Notification"
    TAG = "Tag"


def to_global_id(node_type: NodeType, id: int) -> str:
    raw = f"{node_type.value}:{id}".encode("utf-8")
    return base64.urlsafe_b64encode(raw).decode("ascii")


def from_global_id(global_id: str, *expected: NodeType) -> tuple[NodeType, int]:
    """
    Decodes a global ID into its type and primary key.

    Raises InvalidReference when the ID is malformed, names an unknown type,
    or names a type outside ``expected`` (when given).
    """
    try:
        raw = base64.urlsafe_b64decode(global_id.encode("ascii")).decode("utf-8")
        type_name, _, id_part = raw.partition(":")
        node_type = NodeType(type_name)
        id = int(id_part)
    except (binascii.Error, UnicodeError, ValueError) as exc:
        raise InvalidReference(f"{global_id!r} is not a valid ID.") from exc

    if id <= 0:
        raise InvalidReference(f"{global_id!r} is not a valid ID.")
    if expected and node_type not in expected:
        names = ", ".join(t.value for t in expected)
        raise InvalidReference(f"Expected an ID of type {names}.")
    return node_type, id
