"""Cursor-based pagination over lists sorted by name."""

from __future__ import annotations

import base64
import binascii
from bisect import bisect_right
from collections.abc import Sequence
from typing import Protocol, TypeVar


class _Named(Protocol):
    name: str


T = TypeVar("T", bound=_Named)


def encode_cursor(name: str) -> str:
    """Encode the name of the last item on a page as an opaque cursor."""
    return base64.b64encode(name.encode("utf-8")).decode("ascii")


def decode_cursor(cursor: str) -> str:
    """Decode a cursor back to the item name it points after.

    Raises ValueError if the cursor is not valid base64.
    """
    try:
        return base64.b64decode(cursor, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as exc:
        raise ValueError(f"invalid cursor {cursor!r}: {exc}") from exc


def paginate(
    items: Sequence[T], cursor: str | None, limit: int | None
) -> tuple[list[T], str | None]:
    """Return one page of name-sorted items and the cursor for the next page.

    The page starts after the item named by the cursor. The next cursor is
    None when no limit applies or the page came out shorter than the limit.
    """
    if limit is not None and limit < 0:
        raise ValueError(f"pagination limit must not be negative, got {limit}")
    start = 0
    if cursor:
        after = decode_cursor(cursor)
        start = bisect_right(items, after, key=lambda item: item.name)
    end = len(items) if limit is None else min(len(items), start + limit)
    page = list(items[start:end])
    if limit is not None and page and len(page) >= limit:
        return page, encode_cursor(page[-1].name)
    return page, None