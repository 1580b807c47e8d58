"""
SHG Document Routes
===================

API endpoints for tables saved per SHG and document type.

Endpoints:
- GET /shg/{shg_id}/documents - List documents of an SHG
- PUT /shg/{shg_id}/documents/{doc_type} - Save (create or replace)
- GET /shg/{shg_id}/documents/{doc_type} - Load
- PATCH /shg/{shg_id}/documents/{doc_type} - Apply table edits
- DELETE /shg/{shg_id}/documents/{doc_type} - Delete
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status

from lekhapal.api.dependencies import get_documents_repository
from lekhapal.db.repositories import ShgDocumentsRepository
from lekhapal.schemas.domain import ShgDocument
from lekhapal.schemas.requests import DocumentSaveRequest, TableEditRequest
from lekhapal.schemas.responses import DocumentResponse, ErrorResponse
from lekhapal.services.table_store import EditableTableStore
from lekhapal.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter()

DocumentsRepo = Annotated[ShgDocumentsRepository, Depends(get_documents_repository)]

_NOT_FOUND = {404: {"model": ErrorResponse, "description": "Document not found"}}


def _response(document: ShgDocument) -> DocumentResponse:
    return DocumentResponse.model_validate(document.model_dump())


@router.get(
    "/{shg_id}/documents",
    response_model=list[DocumentResponse],
    summary="List SHG documents",
)
async def list_documents(shg_id: str, repository: DocumentsRepo) -> list[DocumentResponse]:
    """All documents saved for one SHG."""
    return [_response(document) for document in await repository.list_for_shg(shg_id)]


@router.put(
    "/{shg_id}/documents/{doc_type}",
    response_model=DocumentResponse,
    summary="Save an SHG document",
)
async def save_document(
    shg_id: str,
    doc_type: str,
    body: DocumentSaveRequest,
    repository: DocumentsRepo,
) -> DocumentResponse:
    """Create or replace the tables of one document."""
    return _response(await repository.upsert(shg_id, doc_type, body.contents))


@router.get(
    "/{shg_id}/documents/{doc_type}",
    response_model=DocumentResponse,
    summary="Get an SHG document",
    responses=_NOT_FOUND,
)
async def get_document(shg_id: str, doc_type: str, repository: DocumentsRepo) -> DocumentResponse:
    return _response(await repository.get(shg_id, doc_type))


@router.patch(
    "/{shg_id}/documents/{doc_type}",
    response_model=DocumentResponse,
    summary="Edit an SHG document",
    responses={
        **_NOT_FOUND,
        400: {"model": ErrorResponse, "description": "Edit out of range"},
    },
)
async def edit_document(
    shg_id: str,
    doc_type: str,
    body: TableEditRequest,
    repository: DocumentsRepo,
) -> DocumentResponse:
    """Apply edit operations (``table_index`` picks the table), then save."""
    document = await repository.get(shg_id, doc_type)

    store = EditableTableStore(document.contents)
    for operation in body.operations:
        store.apply(operation)

    logger.info(
        "SHG document edited",
        shg_id=shg_id,
        doc_type=doc_type,
        operations=len(body.operations),
    )
    return _response(await repository.upsert(shg_id, doc_type, store.to_payload()))


@router.delete(
    "/{shg_id}/documents/{doc_type}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete an SHG document",
    responses=_NOT_FOUND,
)
async def delete_document(shg_id: str, doc_type: str, repository: DocumentsRepo) -> Response:
    await repository.delete(shg_id, doc_type)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
