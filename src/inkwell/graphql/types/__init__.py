"""
GraphQL types with manual definitions for proper async support.

Each type wraps the ORM entity it was built from in a private ``_model`` and
copies its columns on construction. Everything else (relations, connections,
viewer-dependent fields) is a resolver that opens its own session, so no
relationship is ever lazy-loaded from a closed session.
"""
from datetime import datetime

import strawberry
from strawberry.types import Info

from inkwell import models
from inkwell.graphql.ids import to_global_id
from inkwell.graphql.nodes import resolve_type
from inkwell.graphql.pagination import ConnectionArgs, Page
from inkwell.graphql.resolvers import (
    accounts,
    bookmarks,
    collections,
    comments,
    follows,
    notifications,
    publications,
    stars,
    stories,
    tags,
)
from inkwell.graphql.types.connection import Connection, Edge, PageInfo
from inkwell.graphql.types.enums import (
    InvitationStatus,
    NotificationAction,
    PublicationRole,
    StoryAudience,
    StoryLicense,
)


def _nodes(page: Page | None) -> Connection | None:
    if page is None:
        return None
    return Connection.from_page(page, from_model)


# Interfaces


@strawberry.interface(description="An object with a global ID")
class Node:
    _model: strawberry.Private[object]

    @strawberry.field
    def id(self) -> strawberry.ID:
        return strawberry.ID(to_global_id(resolve_type(self._model), self._model.id))


@strawberry.interface(description="Something users can star")
class Starrable:
    @strawberry.field
    async def stargazers(
        self,
        info: Info,
        first: int | None = None,
        after: str | None = None,
        last: int | None = None,
        before: str | None = None,
    ) -> "StargazerConnection":
        args = ConnectionArgs(first=first, after=after, last=last, before=before)
        page = await stars.stargazers(self._model, args, info.context)
        return StargazerConnection.from_page(page)

    @strawberry.field
    async def star_count(self, info: Info) -> int:
        return await stars.star_count(self._model, {}, info.context)

    @strawberry.field
    def viewer_can_star(self, info: Info) -> bool:
        return stars.viewer_can_star(self._model, {}, info.context)

    @strawberry.field
    async def viewer_has_starred(self, info: Info) -> bool:
        return await stars.viewer_has_starred(self._model, {}, info.context)


@strawberry.interface(description="Something users can comment on")
class Commentable:
    @strawberry.field
    async def comments(
        self,
        info: Info,
        first: int | None = None,
        after: str | None = None,
        last: int | None = None,
        before: str | None = None,
    ) -> "Connection[Comment]":
        args = ConnectionArgs(first=first, after=after, last=last, before=before)
        return _nodes(await comments.comments_of(self._model, args, info.context))

    @strawberry.field
    async def comment_count(self, info: Info) -> int:
        return await comments.comment_count(self._model, {}, info.context)

    @strawberry.field
    def viewer_can_comment(self, info: Info) -> bool:
        return comments.viewer_can_comment(self._model, {}, info.context)


@strawberry.interface(description="Something users can bookmark")
class Bookmarkable:
    @strawberry.field
    def viewer_can_bookmark(self, info: Info) -> bool:
        return bookmarks.viewer_can_bookmark(self._model, {}, info.context)

    @strawberry.field
    async def viewer_has_bookmarked(self, info: Info) -> bool:
        return await bookmarks.viewer_has_bookmarked(self._model, {}, info.context)


@strawberry.interface(description="Something users can follow")
class Followable:
    @strawberry.field
    async def followers(
        self,
        info: Info,
        first: int | None = None,
        after: str | None = None,
        last: int | None = None,
        before: str | None = None,
    ) -> "Connection[User]":
        args = ConnectionArgs(first=first, after=after, last=last, before=before)
        return _nodes(await follows.followers(self._model, args, info.context))

    @strawberry.field
    async def follower_count(self, info: Info) -> int:
        return await follows.follower_count(self._model, {}, info.context)

    @strawberry.field
    def viewer_can_follow(self, info: Info) -> bool:
        return follows.viewer_can_follow(self._model, {}, info.context)

    @strawberry.field
    async def viewer_has_followed(self, info: Info) -> bool:
        return await follows.viewer_has_followed(self._model, {}, info.context)


# Node types


@strawberry.type
class User(Node, Followable):
    username: str
    first_name: str | None
    last_name: str | None
    bio: str | None
    website: str | None
    location: str | None
    inserted_at: datetime

    @classmethod
    def from_model(cls, user: models.User) -> "User":
        return cls(
            _model=user,
            username=user.username,
            first_name=user.first_name,
            last_name=user.last_name,
            bio=user.bio,
            website=user.website,
            location=user.location,
            inserted_at=user.inserted_at,
        )

    @strawberry.field
    def name(self) -> str:
        full_name = " ".join(part for part in (self.first_name, self.last_name) if part)
        return full_name or self.username

    @strawberry.field(description="Only visible to the user themselves")
    def email(self, info: Info) -> str | None:
        return accounts.email(self._model, {}, info.context)

    @strawberry.field
    def is_viewer(self, info: Info) -> bool:
        return accounts.is_viewer(self._model, {}, info.context)

    @strawberry.field
    def starred_story_notifications(self, info: Info) -> bool | None:
        return accounts.starred_story_notifications(self._model, {}, info.context)

    @strawberry.field
    async def stories(
        self,
        info: Info,
        first: int | None = None,
        after: str | None = None,
        last: int | None = None,
        before: str | None = None,
    ) -> "Connection[Story]":
        args = ConnectionArgs(first=first, after=after, last=last, before=before)
        return _nodes(await accounts.stories(self._model, args, info.context))

    @strawberry.field
    async def story_count(self, info: Info) -> int:
        return await accounts.story_count(self._model, {}, info.context)

    @strawberry.field
    async def followees(
        self,
        info: Info,
        first: int | None = None,
        after: str | None = None,
        last: int | None = None,
        before: str | None = None,
    ) -> "Connection[User]":
        args = ConnectionArgs(first=first, after=after, last=last, before=before)
        return _nodes(await accounts.followees(self._model, args, info.context))

    @strawberry.field
    async def publications(
        self,
        info: Info,
        first: int | None = None,
        after: str | None = None,
        last: int | None = None,
        before: str | None = None,
    ) -> "Connection[Publication]":
        args = ConnectionArgs(first=first, after=after, last=last, before=before)
        return _nodes(await accounts.publications_of(self._model, args, info.context))

    @strawberry.field
    async def publication_count(self, info: Info) -> int:
        return await accounts.publication_count(self._model, {}, info.context)

    @strawberry.field
    async def starred(
        self,
        info: Info,
        first: int | None = None,
        after: str | None = None,
        last: int | None = None,
        before: str | None = None,
    ) -> "Connection[Story]":
        args = ConnectionArgs(first=first, after=after, last=last, before=before)
        return _nodes(await accounts.starred(self._model, args, info.context))

    @strawberry.field(description="Only visible to the user themselves")
    async def bookmarks(
        self,
        info: Info,
        first: int | None = None,
        after: str | None = None,
        last: int | None = None,
        before: str | None = None,
    ) -> "Connection[Story] | None":
        args = ConnectionArgs(first=first, after=after, last=last, before=before)
        return _nodes(await accounts.bookmarks_of(self._model, args, info.context))

    @strawberry.field(description="Only visible to the user themselves")
    async def notifications(
        self,
        info: Info,
        first: int | None = None,
        after: str | None = None,
        last: int | None = None,
        before: str | None = None,
    ) -> "Connection[Notification] | None":
        args = ConnectionArgs(first=first, after=after, last=last, before=before)
        return _nodes(await accounts.notifications_of(self._model, args, info.context))


@strawberry.type
class StargazerEdge:
    node: User
    cursor: str
    starred_at: datetime


@strawberry.type
class StargazerConnection:
    edges: list[StargazerEdge]
    page_info: PageInfo
    total_count: int

    @classmethod
    def from_page(cls, page: Page) -> "StargazerConnection":
        return cls(
            edges=[
                StargazerEdge(node=User.from_model(user), cursor=cursor, starred_at=starred_at)
                for (user, starred_at), cursor in page
            ],
            page_info=PageInfo.from_page(page),
            total_count=page.total_count,
        )


@strawberry.type
class Tag(Node):
    title: str

    @classmethod
    def from_model(cls, tag: models.Tag) -> "Tag":
        return cls(_model=tag, title=tag.title)

    @strawberry.field(description="Public stories with this tag")
    async def stories(
        self,
        info: Info,
        first: int | None = None,
        after: str | None = None,
        last: int | None = None,
        before: str | None = None,
    ) -> "Connection[Story]":
        args = ConnectionArgs(first=first, after=after, last=last, before=before)
        return _nodes(await tags.stories(self._model, args, info.context))

    @strawberry.field
    async def publications(
        self,
        info: Info,
        first: int | None = None,
        after: str | None = None,
        last: int | None = None,
        before: str | None = None,
    ) -> "Connection[Publication]":
        args = ConnectionArgs(first=first, after=after, last=last, before=before)
        return _nodes(await tags.publications(self._model, args, info.context))


@strawberry.type
class Story(Node, Starrable, Commentable, Bookmarkable):
    title: str
    content: str
    summary: str | None
    slug: str
    audience: StoryAudience
    license: StoryLicense
    published_at: datetime | None
    is_published: bool
    inserted_at: datetime
    updated_at: datetime

    @classmethod
    def from_model(cls, story: models.Story) -> "Story":
        return cls(
            _model=story,
            title=story.title,
            content=story.content,
            summary=story.summary,
            slug=story.slug,
            audience=story.audience,
            license=story.license,
            published_at=story.published_at,
            is_published=story.is_published,
            inserted_at=story.inserted_at,
            updated_at=story.updated_at,
        )

    @strawberry.field
    async def author(self, info: Info) -> User | None:
        return from_model(await stories.author(self._model, {}, info.context))

    @strawberry.field
    async def publication(self, info: Info) -> "Publication | None":
        return from_model(await stories.publication(self._model, {}, info.context))

    @strawberry.field
    async def tags(self, info: Info) -> list[Tag]:
        return [Tag.from_model(tag) for tag in await stories.tags(self._model, {}, info.context)]

    @strawberry.field
    async def collection(self, info: Info) -> "Collection | None":
        return from_model(await stories.collection(self._model, {}, info.context))

    @strawberry.field
    def viewer_can_update(self, info: Info) -> bool:
        return stories.viewer_can_update(self._model, {}, info.context)

    @strawberry.field
    def viewer_can_delete(self, info: Info) -> bool:
        return stories.viewer_can_delete(self._model, {}, info.context)


@strawberry.type
class Comment(Node, Starrable, Commentable, Bookmarkable):
    body: str
    inserted_at: datetime
    updated_at: datetime

    @classmethod
    def from_model(cls, comment: models.Comment) -> "Comment":
        return cls(
            _model=comment,
            body=comment.body,
            inserted_at=comment.inserted_at,
            updated_at=comment.updated_at,
        )

    @strawberry.field
    async def author(self, info: Info) -> User | None:
        return from_model(await comments.author(self._model, {}, info.context))

    @strawberry.field
    async def story(self, info: Info) -> Story | None:
        return from_model(await comments.story(self._model, {}, info.context))

    @strawberry.field(description="The comment this one replies to")
    async def parent(self, info: Info) -> "Comment | None":
        return from_model(await comments.parent(self._model, {}, info.context))

    @strawberry.field
    def viewer_can_update(self, info: Info) -> bool:
        return comments.viewer_can_update(self._model, {}, info.context)

    @strawberry.field
    def viewer_can_delete(self, info: Info) -> bool:
        return comments.viewer_can_delete(self._model, {}, info.context)


@strawberry.type
class PublicationMember:
    user: User
    role: PublicationRole


@strawberry.type
class PublicationMemberEdge:
    node: User
    cursor: str
    role: PublicationRole


@strawberry.type
class PublicationMemberConnection:
    edges: list[PublicationMemberEdge]
    page_info: PageInfo
    total_count: int

    @classmethod
    def from_page(cls, page: Page) -> "PublicationMemberConnection":
        return cls(
            edges=[
                PublicationMemberEdge(node=User.from_model(user), cursor=cursor, role=role)
                for (user, role), cursor in page
            ],
            page_info=PageInfo.from_page(page),
            total_count=page.total_count,
        )


@strawberry.type
class Publication(Node, Followable):
    name: str
    display_name: str
    description: str | None
    website: str | None
    inserted_at: datetime

    @classmethod
    def from_model(cls, publication: models.Publication) -> "Publication":
        return cls(
            _model=publication,
            name=publication.name,
            display_name=publication.display_name,
            description=publication.description,
            website=publication.website,
            inserted_at=publication.inserted_at,
        )

    @strawberry.field
    async def owner(self, info: Info) -> User | None:
        return from_model(await publications.owner(self._model, {}, info.context))

    @strawberry.field
    async def members(
        self,
        info: Info,
        first: int | None = None,
        after: str | None = None,
        last: int | None = None,
        before: str | None = None,
    ) -> PublicationMemberConnection:
        args = ConnectionArgs(first=first, after=after, last=last, before=before)
        page = await publications.members(self._model, args, info.context)
        return PublicationMemberConnection.from_page(page)

    @strawberry.field
    async def member(self, info: Info, member_id: strawberry.ID) -> PublicationMember | None:
        found = await publications.member(self._model, {"member_id": member_id}, info.context)
        if found is None:
            return None
        user, role = found
        return PublicationMember(user=User.from_model(user), role=role)

    @strawberry.field(description="Members see every story, everyone else the public ones")
    async def stories(
        self,
        info: Info,
        first: int | None = None,
        after: str | None = None,
        last: int | None = None,
        before: str | None = None,
    ) -> Connection[Story]:
        args = ConnectionArgs(first=first, after=after, last=last, before=before)
        return _nodes(await publications.stories(self._model, args, info.context))

    @strawberry.field(description="Only visible to admins of the publication")
    async def membership_invitations(
        self,
        info: Info,
        first: int | None = None,
        after: str | None = None,
        last: int | None = None,
        before: str | None = None,
    ) -> "Connection[PublicationInvitation] | None":
        args = ConnectionArgs(first=first, after=after, last=last, before=before)
        return _nodes(await publications.membership_invitations(self._model, args, info.context))

    @strawberry.field
    async def tags(self, info: Info) -> list[Tag]:
        return [Tag.from_model(tag) for tag in await publications.tags(self._model, {}, info.context)]

    @strawberry.field
    async def viewer_is_a_member(self, info: Info) -> bool:
        return await publications.viewer_is_a_member(self._model, {}, info.context)

    @strawberry.field
    async def viewer_can_administer(self, info: Info) -> bool:
        return await publications.viewer_can_administer(self._model, {}, info.context)


@strawberry.type
class PublicationInvitation(Node):
    role: PublicationRole
    status: InvitationStatus
    inserted_at: datetime

    @classmethod
    def from_model(cls, invitation: models.PublicationInvitation) -> "PublicationInvitation":
        return cls(
            _model=invitation,
            role=invitation.role,
            status=invitation.status,
            inserted_at=invitation.inserted_at,
        )

    @strawberry.field
    async def publication(self, info: Info) -> Publication | None:
        return from_model(await publications.invitation_publication(self._model, {}, info.context))

    @strawberry.field
    async def invitee(self, info: Info) -> User | None:
        return from_model(await publications.invitee(self._model, {}, info.context))

    @strawberry.field
    async def inviter(self, info: Info) -> User | None:
        return from_model(await publications.inviter(self._model, {}, info.context))


@strawberry.type
class Collection(Node):
    title: str
    subtitle: str | None
    description: str | None

    @classmethod
    def from_model(cls, collection: models.Collection) -> "Collection":
        return cls(
            _model=collection,
            title=collection.title,
            subtitle=collection.subtitle,
            description=collection.description,
        )

    @strawberry.field
    async def author(self, info: Info) -> User | None:
        return from_model(await collections.author(self._model, {}, info.context))

    @strawberry.field(description="Published stories in the order they were added")
    async def stories(
        self,
        info: Info,
        first: int | None = None,
        after: str | None = None,
        last: int | None = None,
        before: str | None = None,
    ) -> Connection[Story]:
        args = ConnectionArgs(first=first, after=after, last=last, before=before)
        return _nodes(await collections.stories(self._model, args, info.context))


@strawberry.type
class Notification(Node):
    action: NotificationAction
    read_at: datetime | None
    inserted_at: datetime

    @classmethod
    def from_model(cls, notification: models.Notification) -> "Notification":
        return cls(
            _model=notification,
            action=notification.action,
            read_at=notification.read_at,
            inserted_at=notification.inserted_at,
        )

    @strawberry.field
    async def actor(self, info: Info) -> User | None:
        return from_model(await notifications.actor(self._model, {}, info.context))

    @strawberry.field
    async def story(self, info: Info) -> Story | None:
        return from_model(await notifications.story(self._model, {}, info.context))

    @strawberry.field
    async def comment(self, info: Info) -> Comment | None:
        return from_model(await notifications.comment(self._model, {}, info.context))

    @strawberry.field
    async def publication(self, info: Info) -> Publication | None:
        return from_model(await notifications.publication(self._model, {}, info.context))

    @strawberry.field
    async def user(self, info: Info) -> User | None:
        return from_model(await notifications.user(self._model, {}, info.context))


TYPES = {
    models.User: User,
    models.Story: Story,
    models.Publication: Publication,
    models.PublicationInvitation: PublicationInvitation,
    models.Collection: Collection,
    models.Comment: Comment,
    models.Notification: Notification,
    models.Tag: Tag,
}


def from_model(entity):
    """Wraps an ORM entity in its GraphQL type. `None` stays `None`."""
    if entity is None:
        return None
    return TYPES[type(entity)].from_model(entity)


__all__ = [
    "Node",
    "Starrable",
    "Commentable",
    "Bookmarkable",
    "Followable",
    "User",
    "Story",
    "Comment",
    "Tag",
    "Publication",
    "PublicationMember",
    "PublicationInvitation",
    "Collection",
    "Notification",
    "Connection",
    "Edge",
    "PageInfo",
    "StargazerConnection",
    "PublicationMemberConnection",
    "from_model",
]
