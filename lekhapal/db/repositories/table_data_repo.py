"""
Table Data Repository
=====================

Data access layer for the table_data table.
Stores the primary table of each upload and serves it back for editing.

Follows Repository Pattern: Abstracts database operations.
Rows are normalized again on read, so values written by older clients
still come back rectangular and string-typed.
"""

from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from lekhapal.db.models import TableData
from lekhapal.ingest.table_normalizer import normalize_table
from lekhapal.schemas.domain import StoredTable, Table
from lekhapal.utils.errors import NotFoundError, PersistenceError
from lekhapal.utils.logger import get_logger

logger = get_logger(__name__)


def _to_stored(record: TableData) -> StoredTable:
    table = normalize_table(
        {"title": record.title, "columns": record.columns, "rows": record.rows}
    )
    return StoredTable(
        id=record.id,
        title=table.title,
        columns=table.columns,
        rows=table.rows,
        created_at=record.created_at,
        updated_at=record.updated_at,
    )


class TableDataRepository:
    """
    Repository for table_data operations.

    Table Schema:
        id: int (PK, returned as ``tableId``)
        title: varchar(500)
        columns: JSON list of strings
        rows: JSON list of string lists
        created_at / updated_at: timestamptz
    """

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize repository with async session.

        Args:
            session: SQLAlchemy async session
        """
        self._session = session

    async def create(self, table: Table) -> StoredTable:
        """
        Insert a table.

        Args:
            table: Canonical table

        Returns:
            Stored table with its generated id

        Raises:
            PersistenceError: If the insert fails
        """
        record = TableData(
            title=table.title,
            columns=list(table.columns),
            rows=[list(row) for row in table.rows],
        )

        try:
            self._session.add(record)
            await self._session.flush()
            await self._session.refresh(record)
        except SQLAlchemyError as e:
            logger.error("Failed to save table", title=table.title, error=str(e))
            raise PersistenceError(
                message="Failed to save table",
                details={"error": str(e)},
            ) from e

        logger.info(
            "Table saved",
            table_id=record.id,
            columns=len(table.columns),
            rows=len(table.rows),
        )
        return _to_stored(record)

    async def get(self, table_id: int) -> StoredTable:
        """
        Load a table by id.

        Raises:
            NotFoundError: If no table has this id
            PersistenceError: If the query fails
        """
        return _to_stored(await self._load(table_id))

    async def update(
        self,
        table_id: int,
        title: str | None = None,
        columns: list[Any] | None = None,
        rows: list[list[Any]] | None = None,
    ) -> StoredTable:
        """
        Replace the given fields of a stored table.

        Omitted fields keep their stored value. The result is normalized
        before it is written, so a column list that grew pads every row.

        Raises:
            NotFoundError: If no table has this id
            PersistenceError: If the update fails
        """
        record = await self._load(table_id)

        table = normalize_table(
            {
                "title": title if title is not None else record.title,
                "columns": columns if columns is not None else record.columns,
                "rows": rows if rows is not None else record.rows,
            }
        )

        try:
            record.title = table.title
            record.columns = list(table.columns)
            record.rows = [list(row) for row in table.rows]
            await self._session.flush()
            await self._session.refresh(record)
        except SQLAlchemyError as e:
            logger.error("Failed to update table", table_id=table_id, error=str(e))
            raise PersistenceError(
                message="Failed to update table",
                details={"table_id": table_id, "error": str(e)},
            ) from e

        logger.info("Table updated", table_id=table_id)
        return _to_stored(record)

    async def _load(self, table_id: int) -> TableData:
        try:
            record = await self._session.get(TableData, table_id)
        except SQLAlchemyError as e:
            raise PersistenceError(
                message="Failed to load table",
                details={"table_id": table_id, "error": str(e)},
            ) from e

        if record is None:
            raise NotFoundError(
                message=f"Table {table_id} not found",
                details={"table_id": table_id},
            )
        return record
