"""
The Notifications context.

Notifications are side effects of stars, comments and follows, written
right after the action that triggered them.
"""
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from inkwell.models import Comment, Notification, NotificationAction, Story, User, utcnow
from inkwell.services import accounts


async def get_notification(session: AsyncSession, notification_id: int) -> Notification | None:
    return await session.get(Notification, notification_id)


def can_see_notification(notification: Notification, viewer: User | None) -> bool:
    return viewer is not None and notification.recipient_id == viewer.id


def notifications_of(recipient_id: int):
    return select(Notification).where(Notification.recipient_id == recipient_id)


async def notify(
    session: AsyncSession,
    recipient_id: int,
    actor: User,
    action: NotificationAction,
    **target: int,
) -> Notification | None:
    """Stores a notification. Actors are never notified of their own actions."""
    if recipient_id == actor.id:
        return None
    notification = Notification(recipient_id=recipient_id, actor_id=actor.id, action=action, **target)
    session.add(notification)
    await session.commit()
    return notification


async def notify_starred(session: AsyncSession, actor: User, starrable: Story | Comment) -> None:
    """Tells the author of a story that it was starred, if they want to hear it."""
    if not isinstance(starrable, Story):
        return
    author = await accounts.get_user(session, starrable.author_id)
    if author is None or not accounts.starred_story_notifications_enabled(author):
        return
    await notify(session, author.id, actor, NotificationAction.STARRED, story_id=starrable.id)


async def notify_commented(session: AsyncSession, actor: User, comment: Comment) -> None:
    """Tells the author of the commented story or comment about the new comment."""
    if comment.parent_id is not None:
        parent = await session.get(Comment, comment.parent_id)
        recipient_id = parent.author_id if parent else None
    else:
        story = await session.get(Story, comment.story_id)
        recipient_id = story.author_id if story else None

    if recipient_id is not None:
        await notify(session, recipient_id, actor, NotificationAction.COMMENTED, comment_id=comment.id)


async def notify_followed(session: AsyncSession, actor: User, user: User) -> None:
    await notify(session, user.id, actor, NotificationAction.FOLLOWED, user_id=actor.id)


async def mark_as_read(session: AsyncSession, notification: Notification) -> Notification:
    if notification.read_at is None:
        notification.read_at = utcnow()
        session.add(notification)
        await session.commit()
    return notification
