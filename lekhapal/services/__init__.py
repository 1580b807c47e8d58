"""
Services Package
================

Business logic layer.

Components:
    - UploadService: Upload pipeline orchestration
    - EditableTableStore: Copy-on-write table editing
    - table_to_csv / export_filename: CSV export
    - extraction: Generative-AI extraction client and prompts
"""

from lekhapal.services.export_service import export_filename, table_to_csv
from lekhapal.services.table_store import EditableTableStore
from lekhapal.services.upload_service import (
    UploadResult,
    UploadService,
    decode_base64_payload,
)

__all__ = [
    "EditableTableStore",
    "UploadResult",
    "UploadService",
    "decode_base64_payload",
    "export_filename",
    "table_to_csv",
]
