"""Zalo Official Account integration.

Covers the two Zalo channels: articles on the OA page and customer-service
messages to a single follower. Follows the same live/mock pattern as the
other channel clients; in mock mode calls are recorded locally.

Zalo answers most failures with HTTP 200 and a non-zero "error" code in the
body, so both HTTP errors and error codes are treated as failures.
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
class ZaloConfig:
    access_token: str
    api_url: str = "https://openapi.zalo.me"
    timeout: float = 30.0


@dataclass
class ZaloArticle:
    title: str
    body: str
    cover_photo_id: str = ""

    def validate(self) -> bool:
        return bool(self.title.strip()) and bool(self.body.strip())

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "title": self.title,
            "cover_type": "photo" if self.cover_photo_id else "text",
            "cover_status": "show",
            "body": [{"type": "text", "content": self.body}],
            "status": "show",
        }
        if self.cover_photo_id:
            payload["cover_photo"] = {"photo_id": self.cover_photo_id}
        return payload


class ZaloClient:
    """Client for the Zalo OA article and message APIs."""

    def __init__(self, config: ZaloConfig, live: bool = False) -> None:
        self.config = config
        self._live = live
        self._articles: list[dict[str, Any]] = []
        self._messages: list[dict[str, Any]] = []

    def _post_to_api(self, path: str, payload: dict[str, Any]) -> dict[str, Any]:
        url = f"{self.config.api_url}{path}"
        data = json.dumps(payload).encode("utf-8")
        req = urllib.request.Request(
            url,
            data=data,
            headers={
                "Content-Type": "application/json",
                "access_token": self.config.access_token,
            },
            method="POST",
        )
        try:
            with urllib.request.urlopen(req, timeout=self.config.timeout) as resp:
                result = json.loads(resp.read().decode("utf-8"))
        except urllib.error.HTTPError as exc:
            body = exc.read().decode("utf-8", errors="replace")
            raise ChannelUnavailable(
                f"Zalo API error {exc.code}: {body}", payload=parse_error_body(body),
            ) from exc
        except urllib.error.URLError as exc:
            raise ChannelUnavailable(f"Zalo connection error: {exc.reason}") from exc
        except TimeoutError as exc:
            raise ChannelUnavailable("Zalo request timed out") from exc

        if result.get("error", 0) != 0:
            raise ChannelUnavailable(
                f"Zalo error {result.get('error')}: {result.get('message', '')}",
                payload=result,
            )
        return result

    def create_article(self, article: ZaloArticle) -> dict[str, Any]:
        if not article.validate():
            raise ValueError("Article title and body must not be empty")

        if self._live:
            result = self._post_to_api("/v2.0/oa/article/create", article.to_payload())
            self._articles.append(result)
            return result

        n = len(self._articles) + 1
        result = {
            "error": 0,
            "message": "Success",
            "data": {"token": f"mock-article-token-{n}", "article_id": f"article-{n:06d}"},
        }
        self._articles.append(result)
        return result

    def send_message(self, recipient_id: str, text: str) -> dict[str, Any]:
        if not recipient_id:
            raise ValueError("Zalo message requires a recipient user id")

        if self._live:
            result = self._post_to_api("/v3.0/oa/message/cs", {
                "recipient": {"user_id": recipient_id},
                "message": {"text": text},
            })
            self._messages.append(result)
            return result

        n = len(self._messages) + 1
        result = {
            "error": 0,
            "message": "Success",
            "data": {"message_id": f"msg-{n:06d}", "user_id": recipient_id},
        }
        self._messages.append(result)
        return result

    def format_article(
        self, name: str, address: str, content: str, mobile: str, photo_id: str = "",
    ) -> ZaloArticle:
        title = f"{name} - {address}" if address else name
        return ZaloArticle(
            title=title,
            body=contact_text(content, mobile),
            cover_photo_id=photo_id,
        )

    @staticmethod
    def article_id(result: dict[str, Any]) -> str:
        return str((result.get("data") or {}).get("article_id") or "N/A")

    @staticmethod
    def message_id(result: dict[str, Any]) -> str:
        data = result.get("data") or {}
        return str(data.get("message_id") or data.get("msg_id") or "N/A")

    @property
    def article_count(self) -> int:
        return len(self._articles)

    @property
    def message_count(self) -> int:
        return len(self._messages)
