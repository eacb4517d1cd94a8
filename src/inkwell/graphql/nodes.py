"""
Identity resolution: from ORM entities to node types and back.
"""
from sqlalchemy.ext.asyncio import AsyncSession

from inkwell import models
from inkwell.graphql.ids import NodeType
from inkwell.models import User
from inkwell.services import accounts, collections, comments, notifications, publications, stories, tags

NODE_TYPES: dict[type, NodeType] = {
    models.User: NodeType.USER,
    models.Story: NodeType.STORY,
    models.Publication: NodeType.PUBLICATION,
    models.PublicationInvitation: NodeType.PUBLICATION_INVITATION,
    models.Collection: NodeType.COLLECTION,
    models.Comment: NodeType.COMMENT,
    models.Notification: NodeType.NOTIFICATION,
    models.Tag: NodeType.TAG,
}


async def _always_visible(session, entity, viewer) -> bool:
    return True


async def _notification_visible(session, notification, viewer) -> bool:
    return notifications.can_see_notification(notification, viewer)


# Getter and visibility check per node type
LOADERS = {
    NodeType.USER: (accounts.get_user, _always_visible),
    NodeType.STORY: (stories.get_story, stories.can_see_story),
    NodeType.PUBLICATION: (publications.get_publication, _always_visible),
    NodeType.PUBLICATION_INVITATION: (publications.get_invitation, publications.can_see_invitation),
    NodeType.COLLECTION: (collections.get_collection, _always_visible),
    NodeType.COMMENT: (comments.get_comment, comments.can_see_comment),
    NodeType.NOTIFICATION: (notifications.get_notification, _notification_visible),
    NodeType.TAG: (tags.get_tag, _always_visible),
}


def resolve_type(entity: object) -> NodeType | None:
    return NODE_TYPES.get(type(entity))


async def resolve_node(
    session: AsyncSession, node_type: NodeType, id: int, viewer: User | None
) -> object | None:
    """
    Loads the entity behind ``(node_type, id)`` if the viewer may see it.

    Missing and hidden entities both resolve to `None`, so callers can't tell
    them apart.
    """
    get, can_see = LOADERS[node_type]
    entity = await get(session, id)
    if entity is None or not await can_see(session, entity, viewer):
        return None
    return entity
