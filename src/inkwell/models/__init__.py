from inkwell.models.base import Base, utcnow
from inkwell.models.user import User
from inkwell.models.tag import Tag, story_tags, publication_tags
from inkwell.models.publication import (
    Publication,
    PublicationMembership,
    PublicationInvitation,
    PublicationRole,
    InvitationStatus,
    ADMIN_ROLES,
)
from inkwell.models.story import Story, StoryAudience, StoryLicense
from inkwell.models.comment import Comment
from inkwell.models.star import Star
from inkwell.models.bookmark import Bookmark
from inkwell.models.follow import Follow
from inkwell.models.collection import Collection, CollectionStory
from inkwell.models.notification import Notification, NotificationAction
from inkwell.models.job import ScheduledJob

__all__ = [
    "Base",
    "utcnow",
    "User",
    "Tag",
    "story_tags",
    "publication_tags",
    "Publication",
    "PublicationMembership",
    "PublicationInvitation",
    "PublicationRole",
    "InvitationStatus",
    "ADMIN_ROLES",
    "Story",
    "StoryAudience",
    "StoryLicense",
    "Comment",
    "Star",
    "Bookmark",
    "Follow",
    "Collection",
    "CollectionStory",
    "Notification",
    "NotificationAction",
    "ScheduledJob",
]
