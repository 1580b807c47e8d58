"""
Repositories Package
====================

Data access layer following Repository Pattern.
Each repository handles operations for a specific database table.

Repositories:
    - TableDataRepository: Tables saved by the upload flow
    - ShgDocumentsRepository: Per-SHG document tables
"""

from lekhapal.db.repositories.shg_documents_repo import ShgDocumentsRepository
from lekhapal.db.repositories.table_data_repo import TableDataRepository

__all__ = [
    "ShgDocumentsRepository",
    "TableDataRepository",
]
