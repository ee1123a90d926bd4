"""Lazily fetched, filterable search results."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from typing import TYPE_CHECKING, Any

from ezrss.exceptions import ResultSetFrozenError
from ezrss.filters import Filter, expand_filters

if TYPE_CHECKING:
    from ezrss.engine import Search

logger = logging.getLogger(__name__)


class ResultSet:
    """Search results grouped by show, exposed as one filtered sequence.

    Nothing is fetched until the items are read: ``all()``, iteration or
    ``len()`` trigger the attached search once, then apply the registered
    filters and cache the flattened view.

        >>> results = Search(["foo", "bar"]).result_set
        >>> results.where("foo", title=re.compile(r"08x")).all()

    Filtering never modifies the raw per-show items. The view is rebuilt
    from them with the whole filter list, so adding a filter can only
    narrow what a later read returns.
    """

    def __init__(self, source: Search | None = None) -> None:
        self._source = source
        self._filters: list[Filter] = []
        self._results: dict[str, list[Any]] = {}
        self._view: list[Any] | None = None

    def append(self, subject: str, items: Iterable[Any]) -> ResultSet:
        """Append parsed items to the results of one show."""
        if self._source is not None and self._source.is_fetched():
            raise ResultSetFrozenError(
                f"Cannot append results for '{subject}' after the search was fetched"
            )
        self._results.setdefault(subject, []).extend(items)
        self._view = None
        return self

    def where(self, *args: Any, **fields: Any) -> ResultSet:
        """Register filters on the results.

        A leading string restricts what follows to that show, and a later
        string switches to another show. Without one, filters apply to
        every show.

            results.where(title=re.compile(r"S02"))
            results.where("foo", lambda item: item.published_at.year > 2010)
            results.where("foo", {"category": "TV"}, "bar", title="Pilot")
        """
        self._filters.extend(expand_filters(args, fields))
        self._view = None
        return self

    pick = where

    def all(self) -> list[Any]:
        """Return the filtered items, fetching them first if needed."""
        if self._source is None:
            return []
        return list(self._load())

    async def aall(self) -> list[Any]:
        """Async variant of ``all()`` for callers inside an event loop."""
        if self._source is None:
            return []
        if not self._source.is_fetched():
            await self._source.afetch()
        return list(self._filtered_view())

    def __iter__(self) -> Iterator[Any]:
        return iter(self.all())

    def __len__(self) -> int:
        return len(self.all())

    def __repr__(self) -> str:
        state = "fetched" if self._source and self._source.is_fetched() else "pending"
        return (
            f"<ResultSet {state} subjects={len(self._results)} "
            f"filters={len(self._filters)}>"
        )

    @property
    def results(self) -> dict[str, list[Any]]:
        """Unfiltered items per show, in the order shows were received."""
        return {subject: list(items) for subject, items in self._results.items()}

    @property
    def errors(self) -> dict[str, str]:
        if self._source is None:
            return {}
        return self._source.errors

    @property
    def filters(self) -> tuple[Filter, ...]:
        return tuple(self._filters)

    # ------------------------------------------------------------------
    # Lazy loading and filter application
    # ------------------------------------------------------------------

    def _load(self) -> list[Any]:
        assert self._source is not None
        if not self._source.is_fetched():
            self._source.fetch()
        return self._filtered_view()

    def _filtered_view(self) -> list[Any]:
        if self._view is None:
            self._view = self._apply_filters()
        return self._view

    def _apply_filters(self) -> list[Any]:
        """Apply every filter in registration order and flatten the result.

        Shows are visited alphabetically for unscoped filters; the output
        keeps the order in which shows were received.
        """
        logger.debug(
            "Rebuilding view: %d subjects, %d filters",
            len(self._results),
            len(self._filters),
        )
        view = {subject: list(items) for subject, items in self._results.items()}

        for flt in self._filters:
            targets = sorted(set(view)) if flt.applies_to_all() else [flt.scope]
            for subject in targets:
                if subject not in view:
                    continue
                view[subject] = [item for item in view[subject] if flt.predicate(item)]

        return [item for items in view.values() for item in items]
