"""
Schemas Package
===============

Pydantic models for API requests, responses, and domain objects.
"""

from lekhapal.schemas.domain import DocumentType, ShgDocument, StoredTable, Table
from lekhapal.schemas.requests import (
    AppendRowOperation,
    Base64UploadRequest,
    DocumentSaveRequest,
    RemoveRowOperation,
    RenameColumnOperation,
    SetCellOperation,
    TableEditOperation,
    TableEditRequest,
    TableUpdateRequest,
)
from lekhapal.schemas.responses import (
    DocumentResponse,
    ErrorResponse,
    HealthCheckResponse,
    StoredTableResponse,
    UploadResponse,
)

__all__ = [
    # Domain
    "DocumentType",
    "ShgDocument",
    "StoredTable",
    "Table",
    # Requests
    "AppendRowOperation",
    "Base64UploadRequest",
    "DocumentSaveRequest",
    "RemoveRowOperation",
    "RenameColumnOperation",
    "SetCellOperation",
    "TableEditOperation",
    "TableEditRequest",
    "TableUpdateRequest",
    # Responses
    "DocumentResponse",
    "ErrorResponse",
    "HealthCheckResponse",
    "StoredTableResponse",
    "UploadResponse",
]
