"""Tests for the website ad pages."""

import pytest

from minhland_ads.docstore import DocumentStore
from minhland_ads.website import WebsiteAd, WebsiteClient


class TestWebsiteClient:
    def test_publish_ad_writes_document(self):
        client = WebsiteClient(DocumentStore())
        result = client.publish_ad(WebsiteAd(
            ad_id="AD-1", name="An", mobile="0901", content="Bán nhà", row_position=5,
        ))
        assert result == {"success": True, "adId": "AD-1"}
        doc = client.get_ad("AD-1")
        assert doc["adId"] == "AD-1"
        assert doc["rowIndex"] == 5
        assert doc["content"] == "Bán nhà"
        assert doc["timestamp"]

    def test_republish_overwrites(self):
        client = WebsiteClient(DocumentStore())
        client.publish_ad(WebsiteAd(ad_id="AD-1", name="An", mobile="1", content="v1"))
        client.publish_ad(WebsiteAd(ad_id="AD-1", name="An", mobile="1", content="v2"))
        assert client.ad_count == 1
        assert client.get_ad("AD-1")["content"] == "v2"

    def test_missing_ad_id(self):
        with pytest.raises(ValueError):
            WebsiteClient(DocumentStore()).publish_ad(WebsiteAd("", "An", "1", "c"))

    def test_save_document(self):
        client = WebsiteClient(DocumentStore())
        client.save_document("AD-2", {"adContent": "Căn hộ", "phone": "0902"})
        doc = client.get_ad("AD-2")
        assert doc["adId"] == "AD-2"
        assert doc["adContent"] == "Căn hộ"
        assert "createdAt" in doc

    def test_unknown_ad(self):
        assert WebsiteClient(DocumentStore()).get_ad("missing") is None

    def test_page_id(self):
        assert WebsiteClient.page_id({"adId": "AD-3"}) == "AD-3"
