"""Core data models for ezrss.

FeedItem is the record every parser produces and every filter reads.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict


# ---------------------------------------------------------------------------
# Feed items
# ---------------------------------------------------------------------------

class FeedItem(BaseModel):
    """One parsed feed entry.

    Fields are read by name, either as attributes or with ``item["title"]``.
    Keys the parser saw but that have no declared field are available from
    ``raw_data`` through the same lookup.
    """

    model_config = ConfigDict(frozen=True)

    title: str = ""
    link: str | None = None
    published: str | None = None
    published_at: datetime | None = None
    description: str | None = None
    guid: str | None = None
    category: str | None = None
    enclosure_url: str | None = None
    raw_data: dict[str, Any] = {}

    def __getitem__(self, key: str) -> Any:
        if key in type(self).model_fields and key != "raw_data":
            return getattr(self, key)
        return self.raw_data[key]

    def __hash__(self) -> int:
        # raw_data holds unhashable parser output
        return hash(
            tuple(
                getattr(self, name)
                for name in type(self).model_fields
                if name != "raw_data"
            )
        )

    def get(self, key: str, default: Any = None) -> Any:
        try:
            return self[key]
        except KeyError:
            return default


# ---------------------------------------------------------------------------
# Fetch outcomes (worker -> aggregator messages)
# ---------------------------------------------------------------------------

class SubjectItems(BaseModel):
    model_config = ConfigDict(frozen=True)

    subject: str
    items: list[Any]


class SubjectFailure(BaseModel):
    model_config = ConfigDict(frozen=True)

    subject: str
    payload: str
