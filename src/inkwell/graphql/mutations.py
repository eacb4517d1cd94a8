"""
Mutations, their inputs and payloads.

Payloads are nullable so that a failing mutation nulls only its own field and
reports the reason in ``errors[].extensions.code``.
"""
from datetime import datetime

import strawberry
from strawberry.types import Info

from inkwell.graphql.resolvers import (
    accounts,
    bookmarks,
    comments,
    follows,
    notifications,
    publications,
    stars,
    stories,
)
from inkwell.graphql.types import (
    Bookmarkable,
    Comment,
    Followable,
    Notification,
    Publication,
    PublicationInvitation,
    Starrable,
    Story,
    User,
    from_model,
)
from inkwell.graphql.types.enums import PublicationRole, StoryAudience, StoryLicense


def attrs_of(input) -> dict:
    """Input fields the client actually sent, keyed by their Python name."""
    return {name: value for name, value in vars(input).items() if value is not strawberry.UNSET}


# Inputs


@strawberry.input
class CreateStoryInput:
    title: str
    content: str
    summary: str | None = strawberry.UNSET
    audience: StoryAudience | None = strawberry.UNSET
    license: StoryLicense | None = strawberry.UNSET
    published_at: datetime | None = strawberry.UNSET
    publication_id: strawberry.ID | None = strawberry.UNSET
    tags: list[str] | None = strawberry.UNSET


@strawberry.input
class UpdateStoryInput:
    title: str | None = strawberry.UNSET
    content: str | None = strawberry.UNSET
    summary: str | None = strawberry.UNSET
    audience: StoryAudience | None = strawberry.UNSET
    license: StoryLicense | None = strawberry.UNSET
    published_at: datetime | None = strawberry.UNSET
    publication_id: strawberry.ID | None = strawberry.UNSET
    tags: list[str] | None = strawberry.UNSET


@strawberry.input
class CommentInput:
    body: str


@strawberry.input
class CreatePublicationInput:
    name: str
    display_name: str
    description: str | None = strawberry.UNSET
    website: str | None = strawberry.UNSET
    tags: list[str] | None = strawberry.UNSET


@strawberry.input
class UpdateViewerInput:
    username: str | None = strawberry.UNSET
    first_name: str | None = strawberry.UNSET
    last_name: str | None = strawberry.UNSET
    bio: str | None = strawberry.UNSET
    website: str | None = strawberry.UNSET
    location: str | None = strawberry.UNSET
    starred_story_notifications: bool | None = strawberry.UNSET


# Payloads


@strawberry.type
class StoryPayload:
    story: Story | None


@strawberry.type
class DeleteStoryPayload:
    deleted_story_id: strawberry.ID


@strawberry.type
class CommentPayload:
    comment: Comment | None


@strawberry.type
class StarPayload:
    starrable: Starrable | None


@strawberry.type
class BookmarkPayload:
    bookmarkable: Bookmarkable | None


@strawberry.type
class FollowPayload:
    followable: Followable | None


@strawberry.type
class PublicationPayload:
    publication: Publication | None


@strawberry.type
class PublicationInvitationPayload:
    invitation: PublicationInvitation | None


@strawberry.type
class UserPayload:
    user: User | None


@strawberry.type
class NotificationPayload:
    notification: Notification | None


@strawberry.type
class Mutation:
    # Stories

    @strawberry.mutation
    async def create_story(self, info: Info, input: CreateStoryInput) -> StoryPayload | None:
        story = await stories.create_story(None, {"input": attrs_of(input)}, info.context)
        return StoryPayload(story=from_model(story))

    @strawberry.mutation
    async def update_story(
        self, info: Info, id: strawberry.ID, input: UpdateStoryInput
    ) -> StoryPayload | None:
        story = await stories.update_story(None, {"id": id, "input": attrs_of(input)}, info.context)
        return StoryPayload(story=from_model(story))

    @strawberry.mutation
    async def delete_story(self, info: Info, id: strawberry.ID) -> DeleteStoryPayload | None:
        await stories.delete_story(None, {"id": id}, info.context)
        return DeleteStoryPayload(deleted_story_id=id)

    # Comments

    @strawberry.mutation(description="Comments on a story or replies to a comment")
    async def create_comment(
        self, info: Info, commentable_id: strawberry.ID, input: CommentInput
    ) -> CommentPayload | None:
        args = {"commentable_id": commentable_id, "input": attrs_of(input)}
        return CommentPayload(comment=from_model(await comments.create_comment(None, args, info.context)))

    @strawberry.mutation
    async def update_comment(
        self, info: Info, id: strawberry.ID, input: CommentInput
    ) -> CommentPayload | None:
        args = {"id": id, "input": attrs_of(input)}
        return CommentPayload(comment=from_model(await comments.update_comment(None, args, info.context)))

    @strawberry.mutation(description="Not implemented yet")
    async def delete_comment(self, info: Info, id: strawberry.ID) -> CommentPayload | None:
        return CommentPayload(comment=from_model(await comments.delete_comment(None, {"id": id}, info.context)))

    # Stars, bookmarks and follows

    @strawberry.mutation
    async def star(self, info: Info, starrable_id: strawberry.ID) -> StarPayload | None:
        starrable = await stars.star(None, {"starrable_id": starrable_id}, info.context)
        return StarPayload(starrable=from_model(starrable))

    @strawberry.mutation
    async def unstar(self, info: Info, starrable_id: strawberry.ID) -> StarPayload | None:
        starrable = await stars.unstar(None, {"starrable_id": starrable_id}, info.context)
        return StarPayload(starrable=from_model(starrable))

    @strawberry.mutation
    async def bookmark(self, info: Info, bookmarkable_id: strawberry.ID) -> BookmarkPayload | None:
        bookmarkable = await bookmarks.bookmark(None, {"bookmarkable_id": bookmarkable_id}, info.context)
        return BookmarkPayload(bookmarkable=from_model(bookmarkable))

    @strawberry.mutation
    async def unbookmark(self, info: Info, bookmarkable_id: strawberry.ID) -> BookmarkPayload | None:
        bookmarkable = await bookmarks.unbookmark(None, {"bookmarkable_id": bookmarkable_id}, info.context)
        return BookmarkPayload(bookmarkable=from_model(bookmarkable))

    @strawberry.mutation
    async def follow(self, info: Info, followable_id: strawberry.ID) -> FollowPayload | None:
        followable = await follows.follow(None, {"followable_id": followable_id}, info.context)
        return FollowPayload(followable=from_model(followable))

    @strawberry.mutation
    async def unfollow(self, info: Info, followable_id: strawberry.ID) -> FollowPayload | None:
        followable = await follows.unfollow(None, {"followable_id": followable_id}, info.context)
        return FollowPayload(followable=from_model(followable))

    # Publications

    @strawberry.mutation(description="Creates a publication owned by the viewer")
    async def create_publication(
        self, info: Info, input: CreatePublicationInput
    ) -> PublicationPayload | None:
        publication = await publications.create_publication(None, {"input": attrs_of(input)}, info.context)
        return PublicationPayload(publication=from_model(publication))

    @strawberry.mutation(description="Not implemented yet")
    async def update_publication(self, info: Info, id: strawberry.ID) -> PublicationPayload | None:
        publication = await publications.update_publication(None, {"id": id}, info.context)
        return PublicationPayload(publication=from_model(publication))

    @strawberry.mutation(description="Not implemented yet")
    async def delete_publication(self, info: Info, id: strawberry.ID) -> PublicationPayload | None:
        publication = await publications.delete_publication(None, {"id": id}, info.context)
        return PublicationPayload(publication=from_model(publication))

    @strawberry.mutation(description="Not implemented yet")
    async def leave_publication(self, info: Info, id: strawberry.ID) -> PublicationPayload | None:
        publication = await publications.leave_publication(None, {"id": id}, info.context)
        return PublicationPayload(publication=from_model(publication))

    @strawberry.mutation
    async def kick_member(
        self, info: Info, publication_id: strawberry.ID, member_id: strawberry.ID
    ) -> PublicationPayload | None:
        args = {"publication_id": publication_id, "member_id": member_id}
        publication = await publications.kick_member(None, args, info.context)
        return PublicationPayload(publication=from_model(publication))

    @strawberry.mutation
    async def send_publication_invitation(
        self,
        info: Info,
        publication_id: strawberry.ID,
        invitee_id: strawberry.ID,
        role: PublicationRole | None = None,
    ) -> PublicationInvitationPayload | None:
        args = {"publication_id": publication_id, "invitee_id": invitee_id, "role": role}
        invitation = await publications.send_invitation(None, args, info.context)
        return PublicationInvitationPayload(invitation=from_model(invitation))

    @strawberry.mutation
    async def accept_publication_invitation(
        self, info: Info, invitation_id: strawberry.ID
    ) -> PublicationInvitationPayload | None:
        invitation = await publications.accept_invitation(
            None, {"invitation_id": invitation_id}, info.context
        )
        return PublicationInvitationPayload(invitation=from_model(invitation))

    @strawberry.mutation
    async def reject_publication_invitation(
        self, info: Info, invitation_id: strawberry.ID
    ) -> PublicationInvitationPayload | None:
        invitation = await publications.reject_invitation(
            None, {"invitation_id": invitation_id}, info.context
        )
        return PublicationInvitationPayload(invitation=from_model(invitation))

    # Viewer

    @strawberry.mutation
    async def update_viewer(self, info: Info, input: UpdateViewerInput) -> UserPayload | None:
        user = await accounts.update_viewer(None, {"input": attrs_of(input)}, info.context)
        return UserPayload(user=from_model(user))

    @strawberry.mutation(description="Deactivates the viewer's account and schedules its deletion")
    async def deactivate_viewer(self, info: Info) -> UserPayload | None:
        user = await accounts.deactivate_viewer(None, {}, info.context)
        return UserPayload(user=from_model(user))

    @strawberry.mutation
    async def mark_notification_as_read(
        self, info: Info, notification_id: strawberry.ID
    ) -> NotificationPayload | None:
        notification = await notifications.mark_as_read(
            None, {"notification_id": notification_id}, info.context
        )
        return NotificationPayload(notification=from_model(notification))
