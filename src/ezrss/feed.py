"""Feed body parsing: RSS/Atom bytes -> FeedItem[]."""

from __future__ import annotations

import io
from datetime import UTC, datetime
from typing import Any

import feedparser

from ezrss.exceptions import FeedParseError
from ezrss.models import FeedItem


def parse_feed(body: str | bytes) -> list[FeedItem]:
    """Parse a feed document into items, preserving document order.

    Raises FeedParseError when the document is malformed and no entry
    could be recovered from it. A well-formed feed without entries
    yields an empty list.
    """
    if isinstance(body, str):
        body = body.encode("utf-8")

    # Wrapped in a stream so feedparser never treats the body as a URL or path
    parsed = feedparser.parse(io.BytesIO(body))
    if parsed.bozo and not parsed.entries:
        reason = parsed.get("bozo_exception") or "unrecognized document"
        raise FeedParseError(f"Malformed feed: {reason}")

    return [_to_item(entry) for entry in parsed.entries]


def _to_item(entry: Any) -> FeedItem:
    enclosures = entry.get("enclosures") or []
    tags = entry.get("tags") or []
    return FeedItem(
        title=entry.get("title", ""),
        link=entry.get("link"),
        published=entry.get("published"),
        published_at=_parse_time(entry.get("published_parsed")),
        description=entry.get("summary"),
        guid=entry.get("id"),
        category=tags[0].get("term") if tags else None,
        enclosure_url=enclosures[0].get("href") if enclosures else None,
        raw_data=dict(entry),
    )


def _parse_time(value: Any) -> datetime | None:
    """Convert feedparser's UTC struct_time into an aware datetime."""
    if not value:
        return None
    return datetime(*value[:6], tzinfo=UTC)
