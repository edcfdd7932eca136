"""Tests for the sheet column layout."""

import pytest

from minhland_ads.schema import (
    COLUMN_INDEX,
    COLUMNS,
    LAST_COLUMN,
    block_range,
    column_letter,
    data_range,
    record_to_row,
    row_range,
    row_to_record,
)


class TestColumnLetter:
    def test_single_letters(self):
        assert column_letter(0) == "A"
        assert column_letter(25) == "Z"

    def test_double_letters(self):
        assert column_letter(26) == "AA"
        assert column_letter(29) == "AD"

    def test_negative_rejected(self):
        with pytest.raises(ValueError):
            column_letter(-1)


class TestLayout:
    def test_thirty_columns_ending_at_ad(self):
        assert len(COLUMNS) == 30
        assert LAST_COLUMN == "AD"

    def test_known_positions(self):
        assert COLUMN_INDEX["name"] == 0
        assert COLUMN_INDEX["ad_id"] == 17
        assert COLUMN_INDEX["photo_url"] == 21
        assert COLUMN_INDEX["email"] == 26
        assert COLUMN_INDEX["error_message"] == 29

    def test_ranges(self):
        assert data_range("Sheet1") == "Sheet1!A2:AD"
        assert row_range(5, "Sheet1") == "Sheet1!A5:AD5"
        assert block_range(3, 7, "Sheet1") == "Sheet1!A3:AD7"


class TestRowMapping:
    def test_short_row_pads_missing_fields(self):
        record = row_to_record(["An", "0901"])
        assert record["name"] == "An"
        assert record["mobile"] == "0901"
        assert record["error_message"] == ""
        assert set(record) == set(COLUMNS)

    def test_record_to_row_ignores_unknown_keys(self):
        row = record_to_row({"name": "An", "email": "a@x.vn", "bogus": "value"})
        assert len(row) == 30
        assert row[0] == "An"
        assert row[26] == "a@x.vn"
        assert "value" not in row
