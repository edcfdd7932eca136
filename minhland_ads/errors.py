"""Exception types shared by the record store, channels and HTTP layer."""

from __future__ import annotations

from typing import Any


class AdsError(Exception):
    """Base class for all minhland-ads errors."""

    status_code = 500


class ValidationError(AdsError):
    """Missing or malformed request input."""

    status_code = 400


class ConfigurationError(AdsError):
    """A required credential or setting is missing or malformed."""

    status_code = 500


class StoreUnavailable(AdsError):
    """The tabular store could not be reached or rejected the request."""

    status_code = 500


class InvalidPosition(AdsError):
    """A row position falls outside the populated range."""

    status_code = 400

    def __init__(self, position: int, row_count: int) -> None:
        self.position = position
        self.row_count = row_count
        super().__init__(
            f"Invalid row position {position} (populated rows: {row_count})"
        )


class ChannelUnavailable(AdsError):
    """A publish channel call failed.

    payload holds whatever body the remote service returned, if any, so the
    audit trail can keep it.
    """

    def __init__(self, message: str, payload: dict[str, Any] | None = None) -> None:
        self.payload = payload
        super().__init__(message)


class PersistenceFailure(AdsError):
    """The summary row could not be written after the channels ran."""

    status_code = 500

    def __init__(self, message: str, results: dict[str, Any] | None = None) -> None:
        self.results = results or {}
        super().__init__(message)
