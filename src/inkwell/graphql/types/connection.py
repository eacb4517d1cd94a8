"""
Relay connection types.

``Connection[Story]`` is exposed as ``StoryConnection`` with ``StoryEdge``
edges. Connections whose edges carry extra data (when a user starred
something, the role of a member) get their own edge types.
"""
from typing import Callable, Generic, TypeVar

import strawberry

from inkwell.graphql.pagination import Page

NodeT = TypeVar("NodeT")


@strawberry.type
class PageInfo:
    has_next_page: bool
    has_previous_page: bool
    start_cursor: str | None
    end_cursor: str | None

    @classmethod
    def from_page(cls, page: Page) -> "PageInfo":
        return cls(
            has_next_page=page.has_next_page,
            has_previous_page=page.has_previous_page,
            start_cursor=page.start_cursor,
            end_cursor=page.end_cursor,
        )


@strawberry.type
class Edge(Generic[NodeT]):
    node: NodeT
    cursor: str


@strawberry.type
class Connection(Generic[NodeT]):
    edges: list[Edge[NodeT]]
    page_info: PageInfo
    total_count: int

    @classmethod
    def from_page(cls, page: Page, convert: Callable) -> "Connection":
        return cls(
            edges=[Edge(node=convert(row), cursor=cursor) for row, cursor in page],
            page_info=PageInfo.from_page(page),
            total_count=page.total_count,
        )
