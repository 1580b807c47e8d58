"""
Table Normalizer
================

Converts the untyped payloads returned by the extraction API (or built by the
local CSV / spreadsheet parsers) into canonical :class:`Table` objects.

Accepted payload shapes:
    - a list of table-like objects
    - a ``{"tables": [...]}`` envelope
    - an SHG domain object (``shgProfile`` / ``members`` / ``balanceDetails``)
    - a single table-like object
    - JSON text encoding any of the above

Accepted row shapes inside a table-like object (``rows``, falling back to
``data``):
    - list of objects, projected through ``columns``
    - list of lists
    - list of scalars, one cell per row

The output always satisfies ``len(row) == len(table.columns)`` for every row.

Example:
    >>> normalize({"tables": [{"rows": [{"x": "1"}]}]})
    [Table(title='Table 1', columns=['x'], rows=[['1']])]

The module is pure: no I/O, no logging, no module state.
"""

import json
from collections.abc import Mapping, Sequence
from datetime import date, datetime
from enum import Enum
from typing import Any

from lekhapal.schemas.domain import Table

# SHG domain object sections
PROFILE_KEY = "shgProfile"
MEMBERS_KEY = "members"
BALANCE_KEY = "balanceDetails"
DOMAIN_KEYS = (PROFILE_KEY, MEMBERS_KEY, BALANCE_KEY)

PROFILE_TITLE = "SHG PROFILE"
MEMBERS_TITLE = "DETAILS OF MEMBERS"
BALANCE_TITLE = "BALANCE SHEET"
FIELD_VALUE_COLUMNS = ["Field", "Value"]

# (source key, column label) for member-list rows
MEMBER_FIELDS: list[tuple[str, str]] = [
    ("sNo", "S.NO."),
    ("name", "NAME"),
    ("id", "ID (IF ANY)"),
    ("dateOfJoining", "DATE OF JOINING"),
    ("dateOfLeaving", "DATE OF LEAVING"),
]

_UNDECODABLE = object()


class PayloadShape(Enum):
    """Top-level shape of a raw extraction payload."""

    TABLE_LIST = "table_list"
    TABLE_ENVELOPE = "table_envelope"
    DOMAIN_OBJECT = "domain_object"
    SINGLE_TABLE = "single_table"
    JSON_TEXT = "json_text"
    UNKNOWN = "unknown"


class RowShape(Enum):
    """Shape of the row source of one table-like object."""

    EMPTY = "empty"
    OBJECTS = "objects"
    ARRAYS = "arrays"
    SCALARS = "scalars"


# =============================================================================
# Classification
# =============================================================================


def classify_payload(raw: Any) -> PayloadShape:
    """Tag a raw payload with its shape. Domain keys win over the envelope."""
    if isinstance(raw, list):
        return PayloadShape.TABLE_LIST
    if isinstance(raw, Mapping):
        if any(raw.get(key) is not None for key in DOMAIN_KEYS):
            return PayloadShape.DOMAIN_OBJECT
        if isinstance(raw.get("tables"), list):
            return PayloadShape.TABLE_ENVELOPE
        return PayloadShape.SINGLE_TABLE
    if isinstance(raw, str):
        return PayloadShape.JSON_TEXT
    return PayloadShape.UNKNOWN


def classify_rows(rows: list[Any]) -> RowShape:
    """Tag a row list by the type of its first element."""
    if not rows:
        return RowShape.EMPTY
    first = rows[0]
    if isinstance(first, Mapping):
        return RowShape.OBJECTS
    if isinstance(first, list):
        return RowShape.ARRAYS
    return RowShape.SCALARS


# =============================================================================
# Cell / row helpers
# =============================================================================


def coerce_cell(value: Any) -> str:
    """
    Render one cell value as text.

    ``None`` becomes ``""``, booleans ``"true"``/``"false"``, integral floats
    lose their fraction (``98.0`` -> ``"98"``), nested containers become
    compact JSON.
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, datetime):
        if value.time() == datetime.min.time():
            return value.date().isoformat()
        return value.isoformat(sep=" ")
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, (Mapping, list, tuple)):
        return json.dumps(value, ensure_ascii=False, separators=(",", ":"), default=str)
    return str(value)


def synthesize_columns(width: int) -> list[str]:
    """Placeholder column names ``col1 .. colN``."""
    return [f"col{i}" for i in range(1, width + 1)]


def fit_row(row: Sequence[str], width: int) -> list[str]:
    """Pad with ``""`` or truncate trailing cells to exactly ``width`` cells."""
    if len(row) >= width:
        return list(row[:width])
    return [*row, *([""] * (width - len(row)))]


def rectangularize(table: Table) -> Table:
    """Return a copy of ``table`` whose rows all match the column count."""
    width = len(table.columns)
    return Table(
        title=table.title,
        columns=list(table.columns),
        rows=[fit_row(row, width) for row in table.rows],
    )


def _decode_json(text: str) -> Any:
    try:
        return json.loads(text)
    except (json.JSONDecodeError, ValueError):
        return _UNDECODABLE


def _as_list(value: Any) -> list[Any]:
    """Accept a list, or JSON text encoding one; anything else is empty."""
    if isinstance(value, str):
        value = _decode_json(value)
    if isinstance(value, list):
        return value
    return []


def _project(record: Any, columns: list[str]) -> list[str]:
    """Column-driven join: one cell per column, missing keys become ``""``."""
    if not isinstance(record, Mapping):
        return []
    return [coerce_cell(record.get(column)) for column in columns]


def _title(value: Any, index: int) -> str:
    title = coerce_cell(value)
    return title if title else f"Table {index + 1}"


# =============================================================================
# Normalization
# =============================================================================


def normalize(raw: Any) -> list[Table]:
    """
    Normalize any supported payload into canonical tables.

    Args:
        raw: Decoded JSON (or JSON text) from the extraction API or a parser

    Returns:
        Tables in source order. An empty list means nothing was extracted;
        tables with no columns and no rows are kept for the caller to judge.
    """
    match classify_payload(raw):
        case PayloadShape.TABLE_LIST:
            return [normalize_table(item, index) for index, item in enumerate(raw)]
        case PayloadShape.TABLE_ENVELOPE:
            return normalize(raw["tables"])
        case PayloadShape.DOMAIN_OBJECT:
            return _domain_tables(raw)
        case PayloadShape.SINGLE_TABLE:
            return [normalize_table(raw, 0)]
        case PayloadShape.JSON_TEXT:
            decoded = _decode_json(raw)
            if decoded is _UNDECODABLE:
                return []
            return normalize(decoded)
        case PayloadShape.UNKNOWN:
            return []


def normalize_table(raw_table: Any, index: int = 0) -> Table:
    """
    Normalize one table-like object.

    Args:
        raw_table: Mapping with optional ``title``, ``columns``, ``rows``/``data``
        index: Position in the source list, used for the "Table N" title

    Returns:
        Rectangular table
    """
    if not isinstance(raw_table, Mapping):
        raw_table = {}

    title = _title(raw_table.get("title"), index)
    columns = [coerce_cell(column) for column in _as_list(raw_table.get("columns"))]

    source = raw_table.get("rows")
    if source is None:
        source = raw_table.get("data")
    records = _as_list(source)

    rows: list[list[str]]
    match classify_rows(records):
        case RowShape.EMPTY:
            rows = []
        case RowShape.OBJECTS:
            if not columns:
                columns = [str(key) for key in records[0].keys()]
            rows = [_project(record, columns) for record in records]
        case RowShape.ARRAYS:
            rows = [
                [coerce_cell(cell) for cell in record] if isinstance(record, list) else []
                for record in records
            ]
        case RowShape.SCALARS:
            rows = [[coerce_cell(record)] for record in records]
            if not columns:
                columns = synthesize_columns(1)

    if not columns and rows:
        columns = synthesize_columns(max(len(row) for row in rows))

    return rectangularize(Table(title=title, columns=columns, rows=rows))


def _domain_tables(raw: Mapping[str, Any]) -> list[Table]:
    """Build the synthetic profile / members / balance tables of an SHG object."""
    tables: list[Table] = []

    profile = raw.get(PROFILE_KEY)
    if profile is not None:
        entries = profile.items() if isinstance(profile, Mapping) else []
        tables.append(
            Table(
                title=PROFILE_TITLE,
                columns=list(FIELD_VALUE_COLUMNS),
                rows=[[str(key), coerce_cell(value)] for key, value in entries],
            )
        )

    members = raw.get(MEMBERS_KEY)
    if members is not None:
        keys = [key for key, _ in MEMBER_FIELDS]
        tables.append(
            rectangularize(
                Table(
                    title=MEMBERS_TITLE,
                    columns=[label for _, label in MEMBER_FIELDS],
                    rows=[_project(member, keys) for member in _as_list(members)],
                )
            )
        )

    balance = raw.get(BALANCE_KEY)
    if balance is not None:
        entries = balance.items() if isinstance(balance, Mapping) else []
        tables.append(
            Table(
                title=BALANCE_TITLE,
                columns=list(FIELD_VALUE_COLUMNS),
                rows=[
                    [
                        str(key),
                        ", ".join(coerce_cell(item) for item in value)
                        if isinstance(value, list)
                        else coerce_cell(value),
                    ]
                    for key, value in entries
                ],
            )
        )

    return tables
