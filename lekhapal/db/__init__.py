"""
Database Package
================

Async SQLAlchemy persistence for stored tables and SHG documents.

Components:
    - connection: Connection pool and session management
    - models: ORM models
    - repositories: Data access layer
"""

from lekhapal.db.connection import (
    DatabaseManager,
    close_database,
    get_session,
    health_check,
    init_database,
)
from lekhapal.db.models import Base, ShgDocumentRecord, TableData

__all__ = [
    "Base",
    "DatabaseManager",
    "ShgDocumentRecord",
    "TableData",
    "close_database",
    "get_session",
    "health_check",
    "init_database",
]
