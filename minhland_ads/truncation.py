"""Cell length guard for values written to the sheet."""

from __future__ import annotations

ELLIPSIS = "..."

CONTENT_MAX = 1000
PHOTO_MAX = 500
STATUS_MAX = 100
ERROR_MAX = 500


def truncate(value: str, max_length: int) -> str:
    """Cap value at max_length, replacing the tail with an ellipsis.

    A truncated result is exactly max_length long, so applying the guard twice
    returns the same string.
    """
    if max_length < len(ELLIPSIS):
        raise ValueError(f"max_length must be at least {len(ELLIPSIS)}")
    if len(value) > max_length:
        return value[:max_length - len(ELLIPSIS)] + ELLIPSIS
    return value
