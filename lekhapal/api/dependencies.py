"""
API Dependencies
================

FastAPI dependency providers.

Collaborators are built once from the application's settings object
(stored on ``app.state``) and handed to routes through ``Depends``, so
tests can swap them with ``app.dependency_overrides``.
"""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from lekhapal.config.settings import Settings
from lekhapal.db.connection import get_session
from lekhapal.db.repositories import ShgDocumentsRepository, TableDataRepository
from lekhapal.services.extraction import GeminiExtractionClient
from lekhapal.services.upload_service import UploadService
from lekhapal.utils.errors import ConfigurationError


def get_app_settings(request: Request) -> Settings:
    """Settings the application was created with."""
    return request.app.state.settings


def get_extraction_client(request: Request) -> GeminiExtractionClient:
    """Extraction client built during startup."""
    client = getattr(request.app.state, "extraction_client", None)
    if client is None:
        raise ConfigurationError(
            message="Extraction client not initialized",
            details={"hint": "Application lifespan did not run"},
        )
    return client


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Request-scoped session, committed when the route succeeds."""
    async with get_session() as session:
        yield session


def get_table_repository(
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> TableDataRepository:
    return TableDataRepository(session)


def get_documents_repository(
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> ShgDocumentsRepository:
    return ShgDocumentsRepository(session)


def get_upload_service(
    settings: Annotated[Settings, Depends(get_app_settings)],
    extraction_client: Annotated[GeminiExtractionClient, Depends(get_extraction_client)],
    table_repository: Annotated[TableDataRepository, Depends(get_table_repository)],
) -> UploadService:
    return UploadService(extraction_client, table_repository, settings)
