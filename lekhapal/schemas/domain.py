"""
Domain Models
=============

Internal domain models representing business entities.
Used for data transfer between parsers, the normalizer, the table store
and persistence.
"""

from datetime import datetime
from enum import Enum
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field


class DocumentType(str, Enum):
    """SHG record kinds with a dedicated extraction prompt."""

    SHG_PROFILE = "SHG Profile"
    RECEIPTS = "Receipts by SHG"
    EXPENDITURE = "Expenditure by SHG"
    SAVINGS = "Savings"
    SHG_LOANS = "Loan Taken & Repayment by SHG"
    MEMBER_LOANS = "Loan Taken & Repayment by Members"
    OTHERS = "Others"


class Table(BaseModel):
    """
    Canonical table: a title, ordered column names and a grid of string cells.

    After normalization every row holds exactly ``len(columns)`` cells.
    Instances are frozen; edits go through
    :class:`lekhapal.services.table_store.EditableTableStore`, which builds
    new rows and new tables instead of mutating these lists.

    Attributes:
        title: Display title ("Table N" when the source has none)
        columns: Column names, order defines cell alignment
        rows: Rows of string cells
    """

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "title": "DETAILS OF MEMBERS",
                "columns": ["S.NO.", "NAME"],
                "rows": [["1", "Lalita"], ["2", "Meena"]],
            }
        },
    )

    title: Annotated[str, Field(description="Display title")]
    columns: Annotated[
        list[str],
        Field(default_factory=list, description="Ordered column names"),
    ]
    rows: Annotated[
        list[list[str]],
        Field(default_factory=list, description="Rows of string cells"),
    ]

    @property
    def width(self) -> int:
        """Number of columns."""
        return len(self.columns)

    @property
    def is_empty(self) -> bool:
        """True when the table has neither columns nor rows."""
        return not self.columns and not self.rows

    def to_payload(self) -> dict[str, Any]:
        """Plain dict for JSON storage and API responses."""
        return {
            "title": self.title,
            "columns": list(self.columns),
            "rows": [list(row) for row in self.rows],
        }


class StoredTable(BaseModel):
    """A table persisted by the upload flow."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    columns: list[str] = Field(default_factory=list)
    rows: list[list[str]] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def to_table(self) -> Table:
        """Drop storage metadata."""
        return Table(title=self.title, columns=self.columns, rows=self.rows)


class ShgDocument(BaseModel):
    """
    A document saved for one SHG.

    ``(shg_id, doc_type)`` is unique; saving again replaces ``contents``.
    """

    model_config = ConfigDict(from_attributes=True)

    id: int
    shg_id: str
    doc_type: str
    contents: list[Table] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None
