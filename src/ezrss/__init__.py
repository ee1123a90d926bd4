"""ezrss: concurrent show search on EZRSS with lazy, composable filters."""

from __future__ import annotations

from typing import Any

from ezrss.config import SearchOptions, load_config
from ezrss.engine import Search
from ezrss.exceptions import (
    EzrssError,
    FeedParseError,
    FetchInProgressError,
    ResultSetFrozenError,
)
from ezrss.export import export_json, export_markdown
from ezrss.feed import parse_feed
from ezrss.filters import Custom, Equality, Filter, Pattern
from ezrss.models import FeedItem
from ezrss.result_set import ResultSet


def search(
    shows: str | list[str],
    options: SearchOptions | None = None,
    **opts: Any,
) -> ResultSet:
    """Shortcut for ``Search(shows, options, **opts).result_set``.

    Nothing is sent until the returned result set is read, so filters can
    be chained first:

        search(["foo", "bar"], ssl=True).where("foo", title=re.compile("08x")).all()
    """
    return Search(shows, options, **opts).result_set


__all__ = [
    "Custom",
    "Equality",
    "EzrssError",
    "FeedItem",
    "FeedParseError",
    "FetchInProgressError",
    "Filter",
    "Pattern",
    "ResultSet",
    "ResultSetFrozenError",
    "Search",
    "SearchOptions",
    "export_json",
    "export_markdown",
    "load_config",
    "parse_feed",
    "search",
]
