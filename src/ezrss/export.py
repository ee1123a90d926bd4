"""Export utilities for feed items."""

from __future__ import annotations

import json
from collections.abc import Iterable

from ezrss.models import FeedItem


def export_json(items: Iterable[FeedItem], indent: int = 2) -> str:
    """Serialize items to a JSON array, without the parser's raw data."""
    payload = [item.model_dump(mode="json", exclude={"raw_data"}) for item in items]
    return json.dumps(payload, indent=indent, ensure_ascii=False)


def export_markdown(items: Iterable[FeedItem]) -> str:
    """Generate Markdown table of items."""
    header = "| # | Title | Published | Link |"
    sep = "|---|-------|-----------|------|"
    rows = []
    for i, item in enumerate(items, 1):
        title = _escape_cell(item.title) or "-"
        published = item.published_at.date().isoformat() if item.published_at else "-"
        link = item.link or "-"
        rows.append(f"| {i} | {title} | {published} | {link} |")
    return "\n".join([header, sep] + rows)


# ---------------------------------------------------------------------------
# Private helpers
# ---------------------------------------------------------------------------

def _escape_cell(text: str) -> str:
    """Keep pipes and line breaks from splitting a table cell."""
    return " ".join(text.split()).replace("|", r"\|")
