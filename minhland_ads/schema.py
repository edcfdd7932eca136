"""Column layout of the customer sheet.

The sheet is the system of record for ad listings. Keep this order stable:
rows are read and written positionally, so a column's index is its identity.
"""

from __future__ import annotations

DEFAULT_SHEET_NAME = "DS khách hàng Tinh Long"

# Row 1 holds the header; data starts on row 2.
FIRST_DATA_ROW = 2

COLUMNS: list[str] = [
    "name",                  # A
    "mobile",                # B
    "source",                # C
    "type",                  # D
    "demand",                # E
    "area",                  # F
    "price",                 # G
    "product",               # H
    "transaction_status",    # I
    "note",                  # J
    "note_history",          # K
    "first_contact",         # L
    "last_contact",          # M
    "drive_link",            # N
    "folder_created",        # O
    "folder_id",             # P
    "doc_created",           # Q
    "ad_id",                 # R
    "ad_content",            # S
    "zalo_article_status",   # T
    "zalo_message_status",   # U
    "photo_url",             # V
    "facebook_post_status",  # W
    "website_status",        # X
    "reserved_y",            # Y
    "reserved_z",            # Z
    "email",                 # AA
    "platforms",             # AB
    "purpose",               # AC
    "error_message",         # AD
]

COLUMN_INDEX: dict[str, int] = {name: i for i, name in enumerate(COLUMNS)}

STATUS_ERROR = "Error"

# Google Sheets rejects cells longer than this.
MAX_CELL_LENGTH = 50000


def column_letter(index: int) -> str:
    """Convert a 0-based column index to its A1 letter (0 -> A, 29 -> AD)."""
    if index < 0:
        raise ValueError(f"Column index must be non-negative, got {index}")
    letters = ""
    n = index + 1
    while n:
        n, rem = divmod(n - 1, 26)
        letters = chr(ord("A") + rem) + letters
    return letters


LAST_COLUMN = column_letter(len(COLUMNS) - 1)


def data_range(sheet_name: str = DEFAULT_SHEET_NAME) -> str:
    return f"{sheet_name}!A{FIRST_DATA_ROW}:{LAST_COLUMN}"


def row_range(position: int, sheet_name: str = DEFAULT_SHEET_NAME) -> str:
    return f"{sheet_name}!A{position}:{LAST_COLUMN}{position}"


def block_range(first: int, last: int, sheet_name: str = DEFAULT_SHEET_NAME) -> str:
    return f"{sheet_name}!A{first}:{LAST_COLUMN}{last}"


def empty_row() -> list[str]:
    return [""] * len(COLUMNS)


def row_to_record(row: list[str]) -> dict[str, str]:
    """Map a (possibly short) sheet row onto the column names."""
    return {name: (str(row[i]) if i < len(row) and row[i] is not None else "")
            for i, name in enumerate(COLUMNS)}


def record_to_row(record: dict[str, object]) -> list[str]:
    row = empty_row()
    for name, value in record.items():
        idx = COLUMN_INDEX.get(name)
        if idx is not None and value is not None:
            row[idx] = str(value)
    return row
