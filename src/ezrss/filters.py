"""Scoped item filters.

A filter pairs a scope (one show name, or ``None`` for every show) with a
predicate. Predicates are resolved once, when the filter is registered:

- ``Pattern``: the value is a compiled regular expression, matched with
  search semantics against the field's string value.
- ``Equality``: any other value, compared with ``==``.
- ``Custom``: a caller-supplied function over one item.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Equality:
    field: str
    value: Any

    def __call__(self, item: Any) -> bool:
        return item.get(self.field) == self.value


@dataclass(frozen=True)
class Pattern:
    field: str
    pattern: re.Pattern[str]

    def __call__(self, item: Any) -> bool:
        value = item.get(self.field)
        if value is None:
            return False
        return self.pattern.search(str(value)) is not None


@dataclass(frozen=True)
class Custom:
    func: Callable[[Any], Any]

    def __call__(self, item: Any) -> bool:
        return bool(self.func(item))


Predicate = Equality | Pattern | Custom


@dataclass(frozen=True)
class Filter:
    scope: str | None
    predicate: Predicate

    def applies_to_all(self) -> bool:
        return self.scope is None


def field_predicate(field: str, value: Any) -> Predicate:
    """Resolve a field/value pair into its predicate variant."""
    if isinstance(value, re.Pattern):
        return Pattern(field, value)
    return Equality(field, value)


def expand_filters(args: Iterable[Any], fields: Mapping[str, Any]) -> list[Filter]:
    """Turn ``where()`` arguments into filters, in argument order.

    A string switches the scope for everything after it. Callables become
    custom filters, mappings expand into one filter per pair. Keyword
    ``fields`` come last and use the scope left by the positional arguments.
    """
    scope: str | None = None
    filters: list[Filter] = []

    for arg in args:
        if isinstance(arg, str):
            scope = arg
        elif isinstance(arg, Mapping):
            filters.extend(
                Filter(scope, field_predicate(key, value)) for key, value in arg.items()
            )
        elif callable(arg):
            filters.append(Filter(scope, Custom(arg)))
        else:
            raise TypeError(
                f"Unsupported filter argument of type {type(arg).__name__!r}"
            )

    filters.extend(
        Filter(scope, field_predicate(key, value)) for key, value in fields.items()
    )
    return filters
