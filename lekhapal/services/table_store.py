"""
Editable Table Store
====================

In-memory holder for the tables a user is editing.

Every mutation is copy-on-write: the edited row and the edited table are new
objects, untouched rows and tables keep their identity. Consumers that detect
changes by reference see exactly what changed.

Cell contents are free text; nothing is validated or formatted.
"""

from collections.abc import Iterable, Sequence
from typing import Any

from lekhapal.ingest.table_normalizer import fit_row
from lekhapal.schemas.domain import Table
from lekhapal.schemas.requests import (
    AppendRowOperation,
    RemoveRowOperation,
    RenameColumnOperation,
    SetCellOperation,
    TableEditOperation,
)
from lekhapal.utils.errors import TableEditError


class EditableTableStore:
    """
    Copy-on-write store of canonical tables.

    Example:
        store = EditableTableStore(normalize(payload))
        store.set_cell(0, 2, 1, "250")
        store.append_row(0, ["4", "Sita"])
        saved = store.pop(0)  # one-shot consumption after a save
    """

    def __init__(self, tables: Iterable[Table] = ()) -> None:
        self._tables: tuple[Table, ...] = tuple(tables)

    def __len__(self) -> int:
        return len(self._tables)

    @property
    def tables(self) -> tuple[Table, ...]:
        """Current snapshot; replaced, never mutated, on each edit."""
        return self._tables

    def get(self, table_index: int) -> Table:
        """Return one table."""
        return self._tables[self._check_table(table_index)]

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def set_cell(self, table_index: int, row_index: int, col_index: int, value: str) -> Table:
        """Replace one cell."""
        table = self.get(table_index)
        self._check_row(table, row_index)
        self._check_column(table, col_index)

        row = list(table.rows[row_index])
        row[col_index] = value
        rows = list(table.rows)
        rows[row_index] = row
        return self.replace(table_index, self._rebuild(table, rows=rows))

    def rename_column(self, table_index: int, col_index: int, name: str) -> Table:
        """Rename one column header."""
        table = self.get(table_index)
        self._check_column(table, col_index)

        columns = list(table.columns)
        columns[col_index] = name
        return self.replace(table_index, self._rebuild(table, columns=columns))

    def append_row(self, table_index: int, values: Sequence[str] | None = None) -> Table:
        """Append a row, padded or truncated to the table width."""
        table = self.get(table_index)
        row = fit_row(list(values or []), table.width)
        return self.replace(table_index, self._rebuild(table, rows=[*table.rows, row]))

    def remove_row(self, table_index: int, row_index: int) -> Table:
        """Remove one row."""
        table = self.get(table_index)
        self._check_row(table, row_index)

        rows = [row for index, row in enumerate(table.rows) if index != row_index]
        return self.replace(table_index, self._rebuild(table, rows=rows))

    def replace(self, table_index: int, table: Table) -> Table:
        """Swap in a new table object."""
        self._check_table(table_index)
        tables = list(self._tables)
        tables[table_index] = table
        self._tables = tuple(tables)
        return table

    def pop(self, table_index: int) -> Table:
        """Remove and return a table (pending list consumption after a save)."""
        table = self.get(table_index)
        self._tables = tuple(t for index, t in enumerate(self._tables) if index != table_index)
        return table

    def apply(self, operation: TableEditOperation) -> Table:
        """Apply one API edit operation."""
        match operation:
            case SetCellOperation():
                return self.set_cell(
                    operation.table_index, operation.row, operation.column, operation.value
                )
            case RenameColumnOperation():
                return self.rename_column(operation.table_index, operation.column, operation.name)
            case AppendRowOperation():
                return self.append_row(operation.table_index, operation.values)
            case RemoveRowOperation():
                return self.remove_row(operation.table_index, operation.row)
        raise TableEditError(
            message=f"Unknown edit operation: {type(operation).__name__}",
        )

    def to_payload(self) -> list[dict[str, Any]]:
        """Plain dicts for JSON storage."""
        return [table.to_payload() for table in self._tables]

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _rebuild(
        table: Table,
        columns: list[str] | None = None,
        rows: list[list[str]] | None = None,
    ) -> Table:
        # Rows keep their own list objects unless explicitly replaced
        return Table.model_construct(
            title=table.title,
            columns=columns if columns is not None else table.columns,
            rows=rows if rows is not None else table.rows,
        )

    def _check_table(self, table_index: int) -> int:
        if not 0 <= table_index < len(self._tables):
            raise TableEditError(
                message=f"Table index {table_index} out of range",
                details={"table_index": table_index, "table_count": len(self._tables)},
            )
        return table_index

    @staticmethod
    def _check_row(table: Table, row_index: int) -> None:
        if not 0 <= row_index < len(table.rows):
            raise TableEditError(
                message=f"Row index {row_index} out of range",
                details={"row_index": row_index, "row_count": len(table.rows)},
            )

    @staticmethod
    def _check_column(table: Table, col_index: int) -> None:
        if not 0 <= col_index < table.width:
            raise TableEditError(
                message=f"Column index {col_index} out of range",
                details={"col_index": col_index, "column_count": table.width},
            )
