"""
Pydantic Response Models
========================

API response schemas for the tables service.
Ensures consistent response structure across all endpoints.
"""

from datetime import datetime
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field

from lekhapal.schemas.domain import Table


class UploadResponse(BaseModel):
    """
    Response for POST /upload.

    Attributes:
        table_id: Id of the persisted first table (serialized as ``tableId``)
        tables: Every table extracted from the file
    """

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "tableId": 42,
                "tables": [
                    {"title": "members.csv", "columns": ["name", "age"], "rows": [["A", "1"]]}
                ],
            }
        },
    )

    table_id: Annotated[int, Field(alias="tableId", description="Persisted table id")]
    tables: Annotated[list[Table], Field(description="Extracted tables")]


class StoredTableResponse(BaseModel):
    """Response for the /table/{id} endpoints."""

    id: int
    title: str
    columns: list[str]
    rows: list[list[str]]
    created_at: datetime | None = None
    updated_at: datetime | None = None


class DocumentResponse(BaseModel):
    """Response for the SHG document endpoints."""

    id: int
    shg_id: str
    doc_type: str
    contents: list[Table]
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ErrorResponse(BaseModel):
    """Structured error body."""

    error: Annotated[str, Field(description="Error type")]
    message: Annotated[str, Field(description="Human-readable message")]
    detail: Annotated[dict[str, Any] | None, Field(description="Diagnostic context")] = None


class HealthCheckResponse(BaseModel):
    """Response for GET /health."""

    status: str
    version: str
    service: str
    checks: dict[str, Any] = Field(default_factory=dict)
