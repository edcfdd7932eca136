"""Publish channels and the names callers may use for them."""

from __future__ import annotations

import json
from enum import Enum
from typing import Any, Iterable

from minhland_ads.errors import ValidationError


class Channel(Enum):
    # Declaration order is the publish order.
    ARTICLE = "zalo_article"
    MESSAGE = "zalo_message"
    FEED = "facebook"
    DOCUMENT = "website"

    @property
    def label(self) -> str:
        return _LABELS[self]

    @property
    def status_field(self) -> str:
        return _STATUS_FIELDS[self]


_LABELS = {
    Channel.ARTICLE: "Zalo Article",
    Channel.MESSAGE: "Zalo Message",
    Channel.FEED: "Facebook",
    Channel.DOCUMENT: "Website",
}

_STATUS_FIELDS = {
    Channel.ARTICLE: "zalo_article_status",
    Channel.MESSAGE: "zalo_message_status",
    Channel.FEED: "facebook_post_status",
    Channel.DOCUMENT: "website_status",
}

_ALIASES = {
    "article": Channel.ARTICLE,
    "zaloarticle": Channel.ARTICLE,
    "bàiviếtzalo": Channel.ARTICLE,
    "message": Channel.MESSAGE,
    "zalomessage": Channel.MESSAGE,
    "tinnhắnzalo": Channel.MESSAGE,
    "feed": Channel.FEED,
    "facebook": Channel.FEED,
    "fanpage": Channel.FEED,
    "document": Channel.DOCUMENT,
    "website": Channel.DOCUMENT,
}


def _normalize(name: str) -> str:
    return "".join(ch for ch in name.lower() if ch not in " _-")


def parse_channel(name: str) -> Channel:
    """Resolve a channel from its value, label, enum name or a UI alias."""
    channel = _ALIASES.get(_normalize(name))
    if channel is None:
        raise ValidationError(f"Unknown channel: {name!r}")
    return channel


def parse_channels(names: Iterable[str] | str) -> list[Channel]:
    """Parse a list (or comma-separated string) of names into declared order."""
    if isinstance(names, str):
        names = [n for n in names.split(",")]
    wanted = {parse_channel(n) for n in names if n and n.strip()}
    return [c for c in Channel if c in wanted]


def join_labels(channels: Iterable[Channel]) -> str:
    return ",".join(c.label for c in channels)


def contact_text(content: str, mobile: str) -> str:
    return f"{content}\nLiên hệ: {mobile}"


def parse_error_body(body: str) -> dict[str, Any]:
    """Keep an error response body as a dict for the audit trail."""
    try:
        parsed = json.loads(body)
    except json.JSONDecodeError:
        return {"raw": body}
    return parsed if isinstance(parsed, dict) else {"raw": parsed}
