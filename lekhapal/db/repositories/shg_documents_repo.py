"""
SHG Documents Repository
========================

Data access layer for the shg_documents table.
One row per (shg_id, doc_type); saving again replaces the contents.
"""

from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from lekhapal.db.models import ShgDocumentRecord
from lekhapal.ingest.table_normalizer import normalize
from lekhapal.schemas.domain import ShgDocument
from lekhapal.utils.errors import NotFoundError, PersistenceError
from lekhapal.utils.logger import get_logger

logger = get_logger(__name__)


def _to_document(record: ShgDocumentRecord) -> ShgDocument:
    return ShgDocument(
        id=record.id,
        shg_id=record.shg_id,
        doc_type=record.doc_type,
        contents=normalize(record.contents),
        created_at=record.created_at,
        updated_at=record.updated_at,
    )


class ShgDocumentsRepository:
    """Repository for shg_documents operations."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def upsert(self, shg_id: str, doc_type: str, contents: Any) -> ShgDocument:
        """
        Save the tables of one SHG document.

        Args:
            shg_id: SHG identifier
            doc_type: Document type label
            contents: Any payload :func:`normalize` accepts

        Returns:
            Saved document with normalized contents

        Raises:
            PersistenceError: If the write fails
        """
        payload = [table.to_payload() for table in normalize(contents)]

        try:
            record = await self._find(shg_id, doc_type)
            created = record is None
            if record is None:
                record = ShgDocumentRecord(shg_id=shg_id, doc_type=doc_type, contents=payload)
                self._session.add(record)
            else:
                record.contents = payload
            await self._session.flush()
            await self._session.refresh(record)
        except SQLAlchemyError as e:
            logger.error(
                "Failed to save SHG document", shg_id=shg_id, doc_type=doc_type, error=str(e)
            )
            raise PersistenceError(
                message="Failed to save document",
                details={"shg_id": shg_id, "doc_type": doc_type, "error": str(e)},
            ) from e

        logger.info(
            "SHG document saved",
            shg_id=shg_id,
            doc_type=doc_type,
            tables=len(payload),
            created=created,
        )
        return _to_document(record)

    async def get(self, shg_id: str, doc_type: str) -> ShgDocument:
        """
        Load one document.

        Raises:
            NotFoundError: If nothing is saved for this SHG and type
        """
        try:
            record = await self._find(shg_id, doc_type)
        except SQLAlchemyError as e:
            raise PersistenceError(
                message="Failed to load document",
                details={"shg_id": shg_id, "doc_type": doc_type, "error": str(e)},
            ) from e

        if record is None:
            raise NotFoundError(
                message=f"No {doc_type} document for SHG {shg_id}",
                details={"shg_id": shg_id, "doc_type": doc_type},
            )
        return _to_document(record)

    async def list_for_shg(self, shg_id: str) -> list[ShgDocument]:
        """All documents of one SHG, ordered by document type."""
        query = (
            select(ShgDocumentRecord)
            .where(ShgDocumentRecord.shg_id == shg_id)
            .order_by(ShgDocumentRecord.doc_type)
        )
        try:
            result = await self._session.execute(query)
        except SQLAlchemyError as e:
            raise PersistenceError(
                message="Failed to list documents",
                details={"shg_id": shg_id, "error": str(e)},
            ) from e
        return [_to_document(record) for record in result.scalars().all()]

    async def delete(self, shg_id: str, doc_type: str) -> None:
        """
        Delete one document.

        Raises:
            NotFoundError: If nothing is saved for this SHG and type
        """
        try:
            record = await self._find(shg_id, doc_type)
            if record is None:
                raise NotFoundError(
                    message=f"No {doc_type} document for SHG {shg_id}",
                    details={"shg_id": shg_id, "doc_type": doc_type},
                )
            await self._session.delete(record)
            await self._session.flush()
        except SQLAlchemyError as e:
            raise PersistenceError(
                message="Failed to delete document",
                details={"shg_id": shg_id, "doc_type": doc_type, "error": str(e)},
            ) from e

        logger.info("SHG document deleted", shg_id=shg_id, doc_type=doc_type)

    async def _find(self, shg_id: str, doc_type: str) -> ShgDocumentRecord | None:
        query = select(ShgDocumentRecord).where(
            ShgDocumentRecord.shg_id == shg_id,
            ShgDocumentRecord.doc_type == doc_type,
        )
        result = await self._session.execute(query)
        return result.scalar_one_or_none()
