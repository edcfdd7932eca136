"""Tests for the ad copy client."""

import json
import urllib.error
from unittest.mock import MagicMock, patch

import pytest

from minhland_ads.adcopy import FALLBACK_TEXT, AdCopyClient, AdCopyConfig, build_prompt
from minhland_ads.errors import ChannelUnavailable


def _live_response(body):
    resp = MagicMock()
    resp.read.return_value = json.dumps(body).encode("utf-8")
    resp.__enter__ = MagicMock(return_value=resp)
    resp.__exit__ = MagicMock(return_value=False)
    return resp


class TestBuildPrompt:
    def test_includes_fields_and_placeholders(self):
        prompt = build_prompt({"product": "Căn hộ", "area": "Quận 2"})
        assert "- Sản phẩm: Căn hộ" in prompt
        assert "- Khu vực: Quận 2" in prompt
        assert "- Giá: Không có" in prompt
        assert "tối đa 150 từ" in prompt


class TestAdCopyClient:
    def test_mock_copy(self):
        client = AdCopyClient(AdCopyConfig())
        text = client.generate({"product": "Nhà phố", "area": "Thủ Đức", "mobile": "0901"})
        assert text == "Nhà phố tại Thủ Đức. Liên hệ ngay: 0901!"
        assert client.generated_count == 1

    def test_live_posts_prompt(self):
        client = AdCopyClient(AdCopyConfig(endpoint="http://gen.test/generate"), live=True)
        with patch("urllib.request.urlopen", return_value=_live_response({"text": "Quảng cáo"})) as urlopen:
            assert client.generate({"product": "Đất"}) == "Quảng cáo"
        payload = json.loads(urlopen.call_args[0][0].data)
        assert payload["max_length"] == 200
        assert "Đất" in payload["prompt"]

    def test_live_empty_text_falls_back(self):
        client = AdCopyClient(AdCopyConfig(), live=True)
        with patch("urllib.request.urlopen", return_value=_live_response({})):
            assert client.generate({}) == FALLBACK_TEXT

    def test_live_unreachable(self):
        client = AdCopyClient(AdCopyConfig(), live=True)
        with patch("urllib.request.urlopen", side_effect=urllib.error.URLError("refused")):
            with pytest.raises(ChannelUnavailable):
                client.generate({})
