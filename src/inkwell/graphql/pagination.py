"""
Relay connection pagination over SQLAlchemy statements.

Resolvers hand ``paginate`` an unordered ``select()`` and the integer column
that orders it. The engine windows the statement with keyset conditions on
that column, over-fetches one row to know whether more pages exist, and counts
the unwindowed statement for ``totalCount``.

Cursors are opaque to clients: the URL-safe base64 of
``"cursor:v1:<key>:<tag>"``, where ``<tag>`` is an HMAC of the key, so that a
cursor can't be forged or edited into one pointing elsewhere.
"""
import base64
import binascii
import hashlib
import hmac
from dataclasses import dataclass
from typing import Any

from sqlalchemy import Select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import InstrumentedAttribute

from inkwell.core.database import count
from inkwell.core.errors import (
    ConflictingPaginationArguments,
    InvalidCursor,
    InvalidPaginationArgument,
)
from inkwell.core.init_settings import settings

CURSOR_PREFIX = "cursor"
CURSOR_VERSION = "v1"
TAG_LENGTH = 16


@dataclass
class ConnectionArgs:
    first: int | None = None
    after: str | None = None
    last: int | None = None
    before: str | None = None

    @property
    def backward(self) -> bool:
        return self.last is not None

    def limit(self) -> int:
        """Validated page size in the paging direction."""
        if self.first is not None and self.last is not None:
            raise ConflictingPaginationArguments()
        for name, value in (("first", self.first), ("last", self.last)):
            if value is not None and value < 0:
                raise InvalidPaginationArgument(f"`{name}` can't be negative.")

        size = self.last if self.backward else self.first
        if size is None:
            size = settings.DEFAULT_PAGE_SIZE
        return min(size, settings.MAX_PAGE_SIZE)


@dataclass
class Page:
    """One window of a connection.

    ``rows`` holds the selected entity, or a tuple of the entity and the extra
    columns of the statement when it selects more than one thing.
    """

    rows: list[Any]
    cursors: list[str]
    has_next_page: bool
    has_previous_page: bool
    total_count: int

    @property
    def start_cursor(self) -> str | None:
        return self.cursors[0] if self.cursors else None

    @property
    def end_cursor(self) -> str | None:
        return self.cursors[-1] if self.cursors else None

    def __iter__(self):
        return iter(zip(self.rows, self.cursors))


def _tag(key: int) -> str:
    message = f"{CURSOR_PREFIX}:{CURSOR_VERSION}:{key}".encode("utf-8")
    digest = hmac.new(settings.CURSOR_SECRET.encode("utf-8"), message, hashlib.sha256)
    return digest.hexdigest()[:TAG_LENGTH]


def encode_cursor(key: int) -> str:
    raw = f"{CURSOR_PREFIX}:{CURSOR_VERSION}:{key}:{_tag(key)}"
    return base64.urlsafe_b64encode(raw.encode("utf-8")).decode("ascii")


def decode_cursor(cursor: str) -> int:
    try:
        raw = base64.urlsafe_b64decode(cursor.encode("ascii")).decode("utf-8")
        prefix, version, key_part, tag = raw.split(":")
        key = int(key_part)
    except (binascii.Error, UnicodeError, ValueError) as exc:
        raise InvalidCursor() from exc

    if prefix != CURSOR_PREFIX or version != CURSOR_VERSION:
        raise InvalidCursor()
    if not hmac.compare_digest(tag, _tag(key)):
        raise InvalidCursor()
    return key


async def paginate(
    session: AsyncSession,
    stmt: Select,
    args: ConnectionArgs,
    *,
    key: InstrumentedAttribute,
    count_stmt: Select | None = None,
) -> Page:
    """
    Runs one window of ``stmt`` ordered by ``key``.

    Example:
        page = await paginate(session, Story.public(), ConnectionArgs(first=10), key=Story.id)
    """
    limit = args.limit()
    after = decode_cursor(args.after) if args.after is not None else None
    before = decode_cursor(args.before) if args.before is not None else None

    total_count = await count(session, count_stmt if count_stmt is not None else stmt)

    windowed = stmt.add_columns(key).order_by(None)
    if after is not None:
        windowed = windowed.where(key > after)
    if before is not None:
        windowed = windowed.where(key < before)
    windowed = windowed.order_by(key.desc() if args.backward else key.asc()).limit(limit + 1)

    result = await session.execute(windowed)
    rows = list(result.all())
    has_more = len(rows) > limit
    rows = rows[:limit]
    if args.backward:
        rows.reverse()

    keys = [row[-1] for row in rows]
    if args.backward:
        has_next_page, has_previous_page = before is not None, has_more
    else:
        has_next_page, has_previous_page = has_more, after is not None

    return Page(
        rows=[row[0] if len(row) == 2 else tuple(row[:-1]) for row in rows],
        cursors=[encode_cursor(k) for k in keys],
        has_next_page=has_next_page,
        has_previous_page=has_previous_page,
        total_count=total_count,
    )
