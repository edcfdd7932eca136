"""Tests for row-addressed CRUD over the sheet."""

import pytest

from minhland_ads.errors import InvalidPosition
from minhland_ads.record_store import RecordStore
from minhland_ads.sheets import RAW, USER_ENTERED, SheetsClient, SheetsConfig

SHEET = "Listings"


def _store():
    client = SheetsClient(SheetsConfig())
    return RecordStore(client, sheet_name=SHEET), client


def _seed(store, *names):
    return [store.append({"name": n, "mobile": f"09{i:02d}", "email": "owner@minhland.vn"})
            for i, n in enumerate(names)]


class TestAppendAndGet:
    def test_first_append_lands_on_row_two(self):
        store, _ = _store()
        assert store.append({"name": "An"}) == 2

    def test_get_after_append(self):
        store, _ = _store()
        pos = store.append({"name": "An", "mobile": "0901", "product": "Căn hộ"})
        record = store.get(pos)
        assert record["name"] == "An"
        assert record["mobile"] == "0901"
        assert record["product"] == "Căn hộ"
        assert record["ad_id"] == ""
        assert record["row_position"] == pos

    def test_platforms_list_is_joined(self):
        store, _ = _store()
        pos = store.append({"name": "An", "platforms": ["Zalo Article", "Facebook"]})
        assert store.get(pos)["platforms"] == "Zalo Article,Facebook"

    def test_append_uses_entered_semantics(self):
        store, client = _store()
        store.append({"name": "An"})
        assert client.request_log[-1]["option"] == USER_ENTERED

    def test_oversized_cell_capped(self):
        store, _ = _store()
        pos = store.append({"name": "An", "note": "n" * 60000})
        assert len(store.get(pos)["note"]) == 50000

    @pytest.mark.parametrize("position", [0, 1, 3, 100])
    def test_get_out_of_range(self, position):
        store, _ = _store()
        store.append({"name": "An"})
        with pytest.raises(InvalidPosition):
            store.get(position)

    def test_get_on_empty_table(self):
        store, _ = _store()
        with pytest.raises(InvalidPosition):
            store.get(2)


class TestUpdate:
    def test_merge_keeps_unmentioned_fields(self):
        store, _ = _store()
        pos = store.append({"name": "An", "mobile": "0901", "area": "Quận 7"})
        store.update(pos, {"mobile": "0999"})
        record = store.get(pos)
        assert record["mobile"] == "0999"
        assert record["name"] == "An"
        assert record["area"] == "Quận 7"

    def test_unknown_keys_ignored(self):
        store, _ = _store()
        pos = store.append({"name": "An"})
        merged = store.update(pos, {"nickname": "Anh", "note": "gọi lại"})
        assert "nickname" not in merged
        assert merged["note"] == "gọi lại"

    def test_update_uses_literal_semantics(self):
        store, client = _store()
        pos = store.append({"name": "An"})
        store.update(pos, {"price": "=1+1"})
        assert client.request_log[-1]["option"] == RAW
        assert store.get(pos)["price"] == "=1+1"

    def test_update_out_of_range(self):
        store, _ = _store()
        _seed(store, "An")
        with pytest.raises(InvalidPosition):
            store.update(3, {"name": "X"})


class TestDelete:
    def test_delete_shifts_rows_up(self):
        store, _ = _store()
        _seed(store, "An", "Bình", "Chi", "Dũng")
        store.delete(3)
        names = [r["name"] for r in store.list_records()]
        assert names == ["An", "Chi", "Dũng"]
        assert store.get(3)["name"] == "Chi"
        assert store.get(4)["name"] == "Dũng"
        assert store.row_count() == 3

    def test_delete_last_row(self):
        store, _ = _store()
        _seed(store, "An", "Bình")
        store.delete(3)
        assert [r["name"] for r in store.list_records()] == ["An"]
        with pytest.raises(InvalidPosition):
            store.get(3)

    def test_delete_only_row_empties_table(self):
        store, _ = _store()
        _seed(store, "An")
        store.delete(2)
        assert store.list_records() == []

    def test_delete_out_of_range(self):
        store, _ = _store()
        _seed(store, "An")
        with pytest.raises(InvalidPosition):
            store.delete(5)

    def test_update_after_delete_targets_shifted_row(self):
        store, _ = _store()
        _seed(store, "An", "Bình")
        store.delete(2)
        store.update(2, {"mobile": "0988"})
        record = store.get(2)
        assert record["name"] == "Bình"
        assert record["mobile"] == "0988"

    def test_append_after_delete_reuses_vacated_row(self):
        store, _ = _store()
        _seed(store, "An", "Bình", "Chi")
        store.delete(2)
        assert store.append({"name": "Dũng"}) == 4


class TestQueries:
    def test_find_by_email(self):
        store, _ = _store()
        store.append({"name": "An", "email": "a@minhland.vn"})
        store.append({"name": "Bình", "email": "b@minhland.vn"})
        store.append({"name": "Chi", "email": "a@minhland.vn"})
        found = store.find_by_email("a@minhland.vn")
        assert [r["name"] for r in found] == ["An", "Chi"]
        assert [r["row_position"] for r in found] == [2, 4]

    def test_find_by_email_no_match(self):
        store, _ = _store()
        _seed(store, "An")
        assert store.find_by_email("nobody@minhland.vn") == []


def test_listing_lifecycle_scenario():
    store, _ = _store()
    pos = store.append({"name": "An", "mobile": "0901112222", "platforms": ["Feed"]})
    store.append({"name": "Bình"})

    record = store.get(pos)
    assert record["name"] == "An"
    assert record["mobile"] == "0901112222"
    assert record["platforms"] == "Feed"
    assert record["price"] == ""
    assert record["email"] == ""

    store.update(pos, {"price": "2 tỷ"})
    record = store.get(pos)
    assert record["price"] == "2 tỷ"
    assert record["name"] == "An"

    store.delete(pos)
    assert store.get(pos)["name"] == "Bình"
    with pytest.raises(InvalidPosition):
        store.get(pos + 1)
