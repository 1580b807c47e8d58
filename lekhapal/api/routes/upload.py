"""
Upload Routes
=============

API endpoint for turning an uploaded file into tables.

Endpoints:
- POST /upload - Multipart ``file`` field or a JSON base64 body
"""

import json
from typing import Annotated

import pydantic
from fastapi import APIRouter, Depends, Request
from starlette.datastructures import UploadFile

from lekhapal.api.dependencies import get_upload_service
from lekhapal.schemas.requests import Base64UploadRequest
from lekhapal.schemas.responses import ErrorResponse, UploadResponse
from lekhapal.services.upload_service import UploadService, decode_base64_payload
from lekhapal.utils.errors import ValidationError
from lekhapal.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter()


async def _read_multipart(request: Request) -> tuple[bytes, str | None, str | None, str | None]:
    form = await request.form()
    upload = form.get("file")
    if not isinstance(upload, UploadFile):
        raise ValidationError(message="No file provided", details={"field": "file"})

    content = await upload.read()
    document_type = form.get("document_type")
    return (
        content,
        upload.filename,
        upload.content_type,
        document_type if isinstance(document_type, str) else None,
    )


async def _read_json(request: Request) -> tuple[bytes, str | None, str | None, str | None]:
    try:
        body = Base64UploadRequest.model_validate(await request.json())
    except json.JSONDecodeError as e:
        raise ValidationError(message="Request body is not valid JSON") from e
    except pydantic.ValidationError as e:
        raise ValidationError(
            message="Invalid upload body",
            details={"errors": e.errors(include_url=False, include_context=False)},
        ) from e

    if not body.payload:
        raise ValidationError(message="No file provided", details={"field": "data"})

    content, mime_type = decode_base64_payload(body.payload, body.name, body.type)
    return content, body.name, mime_type, body.document_type


@router.post(
    "",
    response_model=UploadResponse,
    response_model_by_alias=True,
    summary="Upload a file",
    description=(
        "Extract tables from a CSV, spreadsheet, PDF, DOCX or image. "
        "The first table is saved; all tables are returned."
    ),
    responses={
        200: {"description": "Tables extracted"},
        400: {"model": ErrorResponse, "description": "No file, malformed input or unsupported type"},
        413: {"model": ErrorResponse, "description": "File too large"},
        422: {"model": ErrorResponse, "description": "No tables found"},
        500: {"model": ErrorResponse, "description": "Parse failure or invalid model output"},
        502: {"model": ErrorResponse, "description": "Extraction API failure"},
    },
)
async def upload_file(
    request: Request,
    upload_service: Annotated[UploadService, Depends(get_upload_service)],
) -> UploadResponse:
    """
    Accept one file and return its tables.

    Multipart uploads use the ``file`` field (plus an optional
    ``document_type`` field). JSON uploads send ``data``/``file``/``base64``
    as a data URI or plain base64, with ``name``, ``type`` and
    ``document_type``.
    """
    content_type = request.headers.get("content-type", "")

    if content_type.startswith("multipart/form-data"):
        content, filename, mime_type, document_type = await _read_multipart(request)
    elif content_type.startswith("application/json"):
        content, filename, mime_type, document_type = await _read_json(request)
    else:
        raise ValidationError(
            message="No file provided",
            details={"content_type": content_type or None},
        )

    logger.debug("Upload received", filename=filename, declared_mime=mime_type)

    result = await upload_service.process_upload(
        content,
        filename,
        declared_mime=mime_type,
        document_type=document_type,
    )
    return UploadResponse(table_id=result.table_id, tables=result.tables)
