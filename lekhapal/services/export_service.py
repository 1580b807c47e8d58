"""
CSV Export Service
==================

Serializes canonical tables to CSV text.

Fields containing a comma, a double quote, CR or LF are quoted and inner
quotes doubled (RFC-4180). The header row comes first when the table has
columns. Records are joined with ``\\n`` and there is no trailing newline.
"""

import re
from collections.abc import Iterable

from lekhapal.ingest.table_normalizer import coerce_cell
from lekhapal.schemas.domain import Table

_NEEDS_QUOTING = re.compile(r'[",\r\n]')
_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9_-]")


def escape_csv_field(value: object) -> str:
    """Quote a single field when required."""
    text = coerce_cell(value)
    if _NEEDS_QUOTING.search(text):
        return '"' + text.replace('"', '""') + '"'
    return text


def _record(cells: Iterable[object]) -> str:
    line = ",".join(escape_csv_field(cell) for cell in cells)
    return line or '""'


def table_to_csv(table: Table) -> str:
    """
    Render one table as CSV text.

    A record whose only cell is empty is written as a quoted empty field so
    it is not read back as a blank line.

    Example:
        columns ["name", "note"], rows [["Devi", 'said "ok", paid']] renders as:

            name,note
            Devi,"said ""ok"", paid"
    """
    lines: list[str] = []
    if table.columns:
        lines.append(_record(table.columns))
    lines.extend(_record(row) for row in table.rows)
    return "\n".join(lines)


def export_filename(title: str | None) -> str:
    """Attachment file name derived from the table title."""
    stem = _UNSAFE_FILENAME_CHARS.sub("_", title or "") or "table"
    return f"{stem}.csv"
