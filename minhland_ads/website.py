"""Website channel: ad pages served from the internal document store."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any

from minhland_ads.docstore import DocumentStore

ADS_COLLECTION = "ads"


@dataclass
class WebsiteAd:
    ad_id: str
    name: str
    mobile: str
    content: str
    address: str = ""
    photo: str = ""
    row_position: int | None = None
    email: str = ""
    purpose: str = ""
    timestamp: str = field(default_factory=lambda: datetime.now().isoformat())


class WebsiteClient:
    """Writes ad pages as documents keyed by ad id."""

    def __init__(self, store: DocumentStore) -> None:
        self._store = store

    def publish_ad(self, ad: WebsiteAd) -> dict[str, Any]:
        if not ad.ad_id:
            raise ValueError("Website ad requires an ad id")
        self._store.set(ADS_COLLECTION, ad.ad_id, _to_document(ad))
        return {"success": True, "adId": ad.ad_id}

    def save_document(self, ad_id: str, document: dict[str, Any]) -> None:
        """Store a raw ad document without going through publish."""
        doc = dict(document)
        doc.setdefault("createdAt", datetime.now().isoformat())
        doc["adId"] = ad_id
        self._store.set(ADS_COLLECTION, ad_id, doc)

    def get_ad(self, ad_id: str) -> dict[str, Any] | None:
        return self._store.get(ADS_COLLECTION, ad_id)

    @staticmethod
    def page_id(result: dict[str, Any]) -> str:
        return str(result.get("adId") or "N/A")

    @property
    def ad_count(self) -> int:
        return self._store.count(ADS_COLLECTION)


def _to_document(ad: WebsiteAd) -> dict[str, Any]:
    raw = asdict(ad)
    return {
        "adId": raw["ad_id"],
        "name": raw["name"],
        "mobile": raw["mobile"],
        "address": raw["address"],
        "content": raw["content"],
        "photo": raw["photo"],
        "rowIndex": raw["row_position"],
        "email": raw["email"],
        "purpose": raw["purpose"],
        "timestamp": raw["timestamp"],
    }
