"""Tests for the cell length guard."""

import pytest

from minhland_ads.truncation import CONTENT_MAX, STATUS_MAX, truncate


class TestTruncate:
    def test_short_value_unchanged(self):
        assert truncate("hello", 10) == "hello"

    def test_exact_length_unchanged(self):
        assert truncate("x" * 10, 10) == "x" * 10

    def test_long_value_capped_with_ellipsis(self):
        result = truncate("x" * 1500, CONTENT_MAX)
        assert len(result) == CONTENT_MAX
        assert result.endswith("...")
        assert result[:-3] == "x" * (CONTENT_MAX - 3)

    def test_idempotent(self):
        once = truncate("Article ID: " + "9" * 200, STATUS_MAX)
        assert truncate(once, STATUS_MAX) == once

    def test_too_small_limit_rejected(self):
        with pytest.raises(ValueError):
            truncate("abc", 2)
