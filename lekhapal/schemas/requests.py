"""
Pydantic Request Models
=======================

API request schemas for the tables service.
"""

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class Base64UploadRequest(BaseModel):
    """
    JSON upload body for clients that cannot send multipart forms.

    The payload may be a ``data:<mime>;base64,<...>`` URI or plain base64.
    ``data``, ``file`` and ``base64`` are accepted aliases for the payload.
    """

    model_config = ConfigDict(
        extra="ignore",
        json_schema_extra={
            "example": {
                "data": "data:text/csv;base64,bmFtZSxhZ2UKQSwx",
                "name": "members.csv",
                "document_type": "Savings",
            }
        },
    )

    data: str | None = None
    file: str | None = None
    base64: str | None = None
    name: Annotated[str, Field(description="Original file name")] = "upload"
    type: Annotated[str | None, Field(description="Declared MIME type")] = None
    document_type: Annotated[
        str | None, Field(description="SHG document type selecting the extraction prompt")
    ] = None

    @property
    def payload(self) -> str | None:
        """First non-empty payload field."""
        return self.data or self.file or self.base64


class TableUpdateRequest(BaseModel):
    """Body for PUT /table/{id}; omitted fields are left unchanged."""

    title: str | None = None
    columns: list[Any] | None = None
    rows: list[list[Any]] | None = None


class SetCellOperation(BaseModel):
    """Replace one cell."""

    op: Literal["set_cell"]
    table_index: int = Field(default=0, ge=0)
    row: int = Field(ge=0)
    column: int = Field(ge=0)
    value: str


class RenameColumnOperation(BaseModel):
    """Rename one column header."""

    op: Literal["rename_column"]
    table_index: int = Field(default=0, ge=0)
    column: int = Field(ge=0)
    name: str


class AppendRowOperation(BaseModel):
    """Append a row (padded or truncated to the table width)."""

    op: Literal["append_row"]
    table_index: int = Field(default=0, ge=0)
    values: list[str] = Field(default_factory=list)


class RemoveRowOperation(BaseModel):
    """Remove one row."""

    op: Literal["remove_row"]
    table_index: int = Field(default=0, ge=0)
    row: int = Field(ge=0)


TableEditOperation = Annotated[
    SetCellOperation | RenameColumnOperation | AppendRowOperation | RemoveRowOperation,
    Field(discriminator="op"),
]


class TableEditRequest(BaseModel):
    """Body for PATCH endpoints: edits applied in order."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "operations": [
                    {"op": "set_cell", "row": 0, "column": 1, "value": "250"},
                    {"op": "append_row", "values": ["3", "Sita"]},
                ]
            }
        }
    )

    operations: list[TableEditOperation] = Field(min_length=1)


class DocumentSaveRequest(BaseModel):
    """
    Body for PUT /shg/{shg_id}/documents/{doc_type}.

    ``contents`` may be a table, a list of tables or any payload shape the
    normalizer accepts.
    """

    contents: Any
