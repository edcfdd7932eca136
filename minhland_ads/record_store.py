"""Row-addressed CRUD over the customer sheet.

A record's address is its sheet row number, not its ad_id: the sheet has no
keys, so every operation re-reads the data range to find out which positions
currently hold data. The sheet has no delete primitive either, so delete
shifts every row below the target up by one and clears the vacated last row.
Positions held by callers are stale after any delete.

Nothing here serializes writers. Two read-modify-write cycles on the same row
can interleave, and the later write wins.
"""

from __future__ import annotations

from typing import Any

from loguru import logger

from minhland_ads.errors import InvalidPosition
from minhland_ads.schema import (
    COLUMN_INDEX,
    COLUMNS,
    DEFAULT_SHEET_NAME,
    FIRST_DATA_ROW,
    MAX_CELL_LENGTH,
    block_range,
    data_range,
    record_to_row,
    row_range,
    row_to_record,
)
from minhland_ads.sheets import RAW, USER_ENTERED, SheetsClient, first_row_of
from minhland_ads.truncation import truncate


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        value = ",".join(str(v) for v in value)
    return truncate(str(value), MAX_CELL_LENGTH)


def _pad(row: list[str]) -> list[str]:
    padded = [("" if c is None else str(c)) for c in row[:len(COLUMNS)]]
    padded.extend([""] * (len(COLUMNS) - len(padded)))
    return padded


class RecordStore:
    """CRUD over the ad listing rows of one sheet."""

    def __init__(self, client: SheetsClient, sheet_name: str = DEFAULT_SHEET_NAME) -> None:
        self._client = client
        self._sheet = sheet_name

    @property
    def sheet_name(self) -> str:
        return self._sheet

    def _read_rows(self) -> list[list[str]]:
        return [_pad(r) for r in self._client.values_get(data_range(self._sheet))]

    def _locate(self, rows: list[list[str]], position: int) -> int:
        idx = position - FIRST_DATA_ROW
        if idx < 0 or idx >= len(rows):
            raise InvalidPosition(position, len(rows))
        return idx

    def append(self, record: dict[str, Any]) -> int:
        """Write a new row after the last populated one and return its position."""
        row = record_to_row({k: _cell(v) for k, v in record.items()})
        result = self._client.values_append(data_range(self._sheet), [row], USER_ENTERED)
        updated = result.get("updates", {}).get("updatedRange", "")
        if updated:
            position = first_row_of(updated)
        else:
            position = FIRST_DATA_ROW + len(self._read_rows()) - 1
        logger.info("Appended record ad_id={!r} at row {}", record.get("ad_id", ""), position)
        return position

    def get(self, position: int) -> dict[str, Any]:
        rows = self._read_rows()
        idx = self._locate(rows, position)
        record = row_to_record(rows[idx])
        record["row_position"] = position
        return record

    def update(self, position: int, partial_fields: dict[str, Any]) -> dict[str, Any]:
        """Merge the given fields over the stored row.

        Keys that are not sheet columns are ignored; columns absent from
        partial_fields keep their stored value.
        """
        rows = self._read_rows()
        idx = self._locate(rows, position)
        merged = list(rows[idx])
        for name, value in partial_fields.items():
            col = COLUMN_INDEX.get(name)
            if col is not None:
                merged[col] = _cell(value)
        self._client.values_update(row_range(position, self._sheet), [merged], RAW)
        logger.info(
            "Updated row {} fields={}", position,
            sorted(k for k in partial_fields if k in COLUMN_INDEX),
        )
        record = row_to_record(merged)
        record["row_position"] = position
        return record

    def delete(self, position: int) -> None:
        """Shift every row below position up by one and clear the last row."""
        rows = self._read_rows()
        idx = self._locate(rows, position)
        last_position = FIRST_DATA_ROW + len(rows) - 1
        shifted = rows[idx + 1:]
        if shifted:
            self._client.values_update(
                block_range(position, last_position - 1, self._sheet), shifted, RAW,
            )
        self._client.values_clear(row_range(last_position, self._sheet))
        logger.info(
            "Deleted row {} ({} rows shifted up, row {} cleared)",
            position, len(shifted), last_position,
        )

    def list_records(self) -> list[dict[str, Any]]:
        records = []
        for offset, row in enumerate(self._read_rows()):
            record = row_to_record(row)
            record["row_position"] = FIRST_DATA_ROW + offset
            records.append(record)
        return records

    def find_by_email(self, email: str) -> list[dict[str, Any]]:
        return [r for r in self.list_records() if r["email"] == email]

    def row_count(self) -> int:
        return len(self._read_rows())
