"""Exceptions for ezrss searches."""


class EzrssError(Exception):
    """Base exception for all ezrss errors."""


class FeedParseError(EzrssError):
    """Feed body could not be parsed into items."""


class FetchInProgressError(EzrssError):
    """A fetch is already running for this search."""


class ResultSetFrozenError(EzrssError):
    """Items were appended after the search was fetched."""
