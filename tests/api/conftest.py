"""
API Test Fixtures
=================

Application fixture with in-memory repositories and a mocked extraction
client wired in through dependency overrides.
"""

from datetime import datetime, timezone
from typing import Any
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from lekhapal.api.dependencies import (
    get_documents_repository,
    get_extraction_client,
    get_table_repository,
)
from lekhapal.api.main import create_app
from lekhapal.ingest.table_normalizer import normalize, normalize_table
from lekhapal.schemas.domain import ShgDocument, StoredTable, Table
from lekhapal.utils.errors import NotFoundError


class InMemoryTableRepository:
    """Dict-backed stand-in for TableDataRepository."""

    def __init__(self) -> None:
        self.tables: dict[int, StoredTable] = {}

    async def create(self, table: Table) -> StoredTable:
        table_id = len(self.tables) + 1
        now = datetime.now(timezone.utc)
        stored = StoredTable(
            id=table_id,
            title=table.title,
            columns=table.columns,
            rows=table.rows,
            created_at=now,
            updated_at=now,
        )
        self.tables[table_id] = stored
        return stored

    async def get(self, table_id: int) -> StoredTable:
        if table_id not in self.tables:
            raise NotFoundError(message=f"Table {table_id} not found")
        return self.tables[table_id]

    async def update(
        self,
        table_id: int,
        title: str | None = None,
        columns: list[Any] | None = None,
        rows: list[list[Any]] | None = None,
    ) -> StoredTable:
        current = await self.get(table_id)
        table = normalize_table(
            {
                "title": title if title is not None else current.title,
                "columns": columns if columns is not None else current.columns,
                "rows": rows if rows is not None else current.rows,
            }
        )
        stored = current.model_copy(
            update={
                "title": table.title,
                "columns": table.columns,
                "rows": table.rows,
                "updated_at": datetime.now(timezone.utc),
            }
        )
        self.tables[table_id] = stored
        return stored


class InMemoryDocumentsRepository:
    """Dict-backed stand-in for ShgDocumentsRepository."""

    def __init__(self) -> None:
        self.documents: dict[tuple[str, str], ShgDocument] = {}

    async def upsert(self, shg_id: str, doc_type: str, contents: Any) -> ShgDocument:
        existing = self.documents.get((shg_id, doc_type))
        document = ShgDocument(
            id=existing.id if existing else len(self.documents) + 1,
            shg_id=shg_id,
            doc_type=doc_type,
            contents=normalize(contents),
        )
        self.documents[(shg_id, doc_type)] = document
        return document

    async def get(self, shg_id: str, doc_type: str) -> ShgDocument:
        if (shg_id, doc_type) not in self.documents:
            raise NotFoundError(message=f"No {doc_type} document for SHG {shg_id}")
        return self.documents[(shg_id, doc_type)]

    async def list_for_shg(self, shg_id: str) -> list[ShgDocument]:
        return sorted(
            (d for (owner, _), d in self.documents.items() if owner == shg_id),
            key=lambda d: d.doc_type,
        )

    async def delete(self, shg_id: str, doc_type: str) -> None:
        await self.get(shg_id, doc_type)
        del self.documents[(shg_id, doc_type)]


@pytest.fixture
def table_repository() -> InMemoryTableRepository:
    return InMemoryTableRepository()


@pytest.fixture
def documents_repository() -> InMemoryDocumentsRepository:
    return InMemoryDocumentsRepository()


@pytest.fixture
def extraction_client() -> AsyncMock:
    """Mock extraction client returning an empty table list."""
    client = AsyncMock()
    client.extract = AsyncMock(return_value="[]")
    client.is_configured = True
    client.model = "gemini-test"
    return client


@pytest.fixture
def app(settings, table_repository, documents_repository, extraction_client):
    """Create FastAPI app instance with in-memory collaborators."""
    app = create_app(settings)
    app.dependency_overrides[get_table_repository] = lambda: table_repository
    app.dependency_overrides[get_documents_repository] = lambda: documents_repository
    app.dependency_overrides[get_extraction_client] = lambda: extraction_client
    return app


@pytest.fixture
def client(app):
    """Create FastAPI test client."""
    with TestClient(app) as client:
        yield client
