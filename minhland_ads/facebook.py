"""Facebook Page feed integration.

Posts listing text to a Page feed through the Graph API. Same live/mock
pattern as zalo.py.
"""

from __future__ import annotations

import json
import urllib.error
import urllib.request
from dataclasses import dataclass
from typing import Any

from minhland_ads.channels import contact_text, parse_error_body
from minhland_ads.errors import ChannelUnavailable


@dataclass
class FacebookConfig:
    page_id: str
    access_token: str
    api_version: str = "v14.0"
    graph_url: str = "https://graph.facebook.com"
    timeout: float = 30.0


class FacebookClient:
    """Publishes posts to a Facebook Page feed."""

    def __init__(self, config: FacebookConfig, live: bool = False) -> None:
        self.config = config
        self._live = live
        self._posted: list[dict[str, Any]] = []

    def _post_to_api(self, message: str) -> dict[str, Any]:
        url = f"{self.config.graph_url}/{self.config.api_version}/{self.config.page_id}/feed"
        data = json.dumps({"message": message}).encode("utf-8")
        req = urllib.request.Request(
            url,
            data=data,
            headers={
                "Content-Type": "application/json",
                "Authorization": f"Bearer {self.config.access_token}",
            },
            method="POST",
        )
        try:
            with urllib.request.urlopen(req, timeout=self.config.timeout) as resp:
                return json.loads(resp.read().decode("utf-8"))
        except urllib.error.HTTPError as exc:
            body = exc.read().decode("utf-8", errors="replace")
            raise ChannelUnavailable(
                f"Facebook API error {exc.code}: {body}", payload=parse_error_body(body),
            ) from exc
        except urllib.error.URLError as exc:
            raise ChannelUnavailable(f"Facebook connection error: {exc.reason}") from exc
        except TimeoutError as exc:
            raise ChannelUnavailable("Facebook request timed out") from exc

    def post_to_feed(self, message: str) -> dict[str, Any]:
        if not message.strip():
            raise ValueError("Feed post message must not be empty")

        if self._live:
            result = self._post_to_api(message)
            self._posted.append(result)
            return result

        result = {"id": f"{self.config.page_id or 'page'}_{len(self._posted) + 1:06d}"}
        self._posted.append(result)
        return result

    def format_for_feed(self, content: str, mobile: str, address: str = "") -> str:
        text = contact_text(content, mobile)
        if address:
            text = f"{text}\nĐịa chỉ: {address}"
        return text

    @staticmethod
    def post_id(result: dict[str, Any]) -> str:
        return str(result.get("id") or "N/A")

    @property
    def post_count(self) -> int:
        return len(self._posted)
