"""
SQLAlchemy ORM Models
=====================

Database models for stored tables and per-SHG documents.

Table contents are stored as JSON in the canonical ``{title, columns, rows}``
shape (JSONB on PostgreSQL).
"""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, Integer, String, UniqueConstraint, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

JsonType = JSON().with_variant(JSONB(), "postgresql")


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class IntPKMixin:
    """Mixin for integer primary key."""

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
        nullable=False,
    )


class TimestampMixin:
    """Mixin for created_at and updated_at timestamps."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


class TableData(Base, IntPKMixin, TimestampMixin):
    """
    A table saved by the upload flow.

    Attributes:
        id: Auto-increment identifier returned to clients as ``tableId``
        title: Table title
        columns: JSON list of column names
        rows: JSON list of rows (lists of strings)
    """

    __tablename__ = "table_data"

    title: Mapped[str] = mapped_column(String(500), nullable=False, default="Untitled")
    columns: Mapped[list[Any]] = mapped_column(JsonType, nullable=False, default=list)
    rows: Mapped[list[Any]] = mapped_column(JsonType, nullable=False, default=list)

    def __repr__(self) -> str:
        return f"<TableData(id={self.id}, title={self.title!r})>"


class ShgDocumentRecord(Base, IntPKMixin, TimestampMixin):
    """
    Tables saved for one SHG and document type.

    Attributes:
        shg_id: SHG identifier
        doc_type: Document type (e.g. "SHG Profile", "Savings")
        contents: JSON list of canonical tables
    """

    __tablename__ = "shg_documents"
    __table_args__ = (UniqueConstraint("shg_id", "doc_type", name="uq_shg_documents_shg_doc"),)

    shg_id: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    doc_type: Mapped[str] = mapped_column(String(100), nullable=False)
    contents: Mapped[list[Any]] = mapped_column(JsonType, nullable=False, default=list)

    def __repr__(self) -> str:
        return (
            f"<ShgDocumentRecord(id={self.id}, shg_id={self.shg_id!r}, "
            f"doc_type={self.doc_type!r})>"
        )
