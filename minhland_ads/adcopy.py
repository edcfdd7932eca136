"""Ad copy generation from listing details.

Sends a Vietnamese prompt built from the listing fields to a text-generation
endpoint and returns the generated copy. In mock mode the copy is composed
from a fixed template.
"""

from __future__ import annotations

import json
import urllib.error
import urllib.request
from dataclasses import dataclass
from typing import Any

from minhland_ads.errors import ChannelUnavailable

MAX_LENGTH = 200
FALLBACK_TEXT = "Không thể tạo quảng cáo."
_MISSING = "Không có"

_PROMPT_FIELDS = [
    ("name", "Tên khách hàng"),
    ("mobile", "Số điện thoại"),
    ("source", "Nguồn biết tin"),
    ("type", "Loại khách hàng"),
    ("demand", "Nhu cầu"),
    ("area", "Khu vực"),
    ("price", "Giá"),
    ("product", "Sản phẩm"),
    ("transaction_status", "Tình trạng giao dịch"),
    ("note", "Ghi chú"),
]

_REQUIREMENTS = (
    "Yêu cầu:\n"
    "- Ngắn gọn, tối đa 150 từ.\n"
    "- Ngôn ngữ tự nhiên, thu hút, đúng ngữ pháp tiếng Việt.\n"
    "- Tập trung vào sản phẩm, khu vực, giá, và nhu cầu.\n"
    '- Thêm lời kêu gọi hành động (VD: "Liên hệ ngay!").'
)


@dataclass
class AdCopyConfig:
    endpoint: str = "http://localhost:8000/generate"
    timeout: float = 30.0


def build_prompt(listing: dict[str, Any]) -> str:
    lines = [
        "Tạo một bài quảng cáo bất động sản ngắn gọn, hấp dẫn dựa trên thông tin sau:",
    ]
    for key, label in _PROMPT_FIELDS:
        lines.append(f"- {label}: {listing.get(key) or _MISSING}")
    return "\n".join(lines) + "\n\n" + _REQUIREMENTS


class AdCopyClient:
    def __init__(self, config: AdCopyConfig, live: bool = False) -> None:
        self.config = config
        self._live = live
        self._generated: list[str] = []

    def _post_to_api(self, prompt: str) -> dict[str, Any]:
        data = json.dumps({"prompt": prompt, "max_length": MAX_LENGTH}).encode("utf-8")
        req = urllib.request.Request(
            self.config.endpoint,
            data=data,
            headers={"Content-Type": "application/json"},
            method="POST",
        )
        try:
            with urllib.request.urlopen(req, timeout=self.config.timeout) as resp:
                return json.loads(resp.read().decode("utf-8"))
        except urllib.error.HTTPError as exc:
            raise ChannelUnavailable(f"Ad copy service error {exc.code}") from exc
        except urllib.error.URLError as exc:
            raise ChannelUnavailable(f"Ad copy service unreachable: {exc.reason}") from exc
        except TimeoutError as exc:
            raise ChannelUnavailable("Ad copy service timed out") from exc

    def generate(self, listing: dict[str, Any]) -> str:
        prompt = build_prompt(listing)
        if self._live:
            text = str(self._post_to_api(prompt).get("text") or FALLBACK_TEXT)
        else:
            text = _mock_copy(listing)
        self._generated.append(text)
        return text

    @property
    def generated_count(self) -> int:
        return len(self._generated)


def _mock_copy(listing: dict[str, Any]) -> str:
    product = listing.get("product") or "Bất động sản"
    parts = [str(product)]
    if listing.get("area"):
        parts.append(f"tại {listing['area']}")
    if listing.get("price"):
        parts.append(f"giá {listing['price']}")
    text = " ".join(parts) + "."
    if listing.get("mobile"):
        text += f" Liên hệ ngay: {listing['mobile']}!"
    else:
        text += " Liên hệ ngay!"
    return text
