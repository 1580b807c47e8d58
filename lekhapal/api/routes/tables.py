"""
Table Routes
============

API endpoints for stored upload tables.

Endpoints:
- GET /table/{table_id} - Load a table
- PUT /table/{table_id} - Replace title, columns and/or rows
- PATCH /table/{table_id} - Apply cell / column / row edits
- GET /table/{table_id}/export/csv - Download as CSV
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Response

from lekhapal.api.dependencies import get_table_repository
from lekhapal.db.repositories import TableDataRepository
from lekhapal.schemas.domain import StoredTable
from lekhapal.schemas.requests import TableEditRequest, TableUpdateRequest
from lekhapal.schemas.responses import ErrorResponse, StoredTableResponse
from lekhapal.services.export_service import export_filename, table_to_csv
from lekhapal.services.table_store import EditableTableStore
from lekhapal.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter()

TableRepo = Annotated[TableDataRepository, Depends(get_table_repository)]

_NOT_FOUND = {404: {"model": ErrorResponse, "description": "Table not found"}}


def _response(stored: StoredTable) -> StoredTableResponse:
    return StoredTableResponse.model_validate(stored.model_dump())


@router.get(
    "/{table_id}",
    response_model=StoredTableResponse,
    summary="Get a stored table",
    responses=_NOT_FOUND,
)
async def get_table(table_id: int, repository: TableRepo) -> StoredTableResponse:
    """Load a table saved by an upload."""
    return _response(await repository.get(table_id))


@router.put(
    "/{table_id}",
    response_model=StoredTableResponse,
    summary="Replace table contents",
    responses={
        **_NOT_FOUND,
        400: {"model": ErrorResponse, "description": "Rows are not 2D or columns not a list"},
    },
)
async def update_table(
    table_id: int,
    body: TableUpdateRequest,
    repository: TableRepo,
) -> StoredTableResponse:
    """Replace the given fields; omitted fields keep their stored value."""
    stored = await repository.update(
        table_id,
        title=body.title,
        columns=body.columns,
        rows=body.rows,
    )
    return _response(stored)


@router.patch(
    "/{table_id}",
    response_model=StoredTableResponse,
    summary="Edit table cells",
    responses={
        **_NOT_FOUND,
        400: {"model": ErrorResponse, "description": "Edit out of range"},
    },
)
async def edit_table(
    table_id: int,
    body: TableEditRequest,
    repository: TableRepo,
) -> StoredTableResponse:
    """Apply edit operations in order, then save the result."""
    stored = await repository.get(table_id)

    store = EditableTableStore([stored.to_table()])
    for operation in body.operations:
        store.apply(operation)

    table = store.get(0)
    logger.info("Table edited", table_id=table_id, operations=len(body.operations))

    updated = await repository.update(
        table_id,
        title=table.title,
        columns=table.columns,
        rows=table.rows,
    )
    return _response(updated)


@router.get(
    "/{table_id}/export/csv",
    summary="Export a table as CSV",
    response_class=Response,
    responses={
        200: {"content": {"text/csv": {}}, "description": "CSV attachment"},
        **_NOT_FOUND,
    },
)
async def export_table_csv(table_id: int, repository: TableRepo) -> Response:
    """Download a stored table as a CSV attachment."""
    stored = await repository.get(table_id)
    filename = export_filename(stored.title)

    return Response(
        content=table_to_csv(stored.to_table()),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
