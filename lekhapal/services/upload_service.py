"""
Upload Service
==============

Orchestrates the upload pipeline:
1. Reject empty or oversized payloads
2. Classify the file (CSV, spreadsheet or AI extraction)
3. Parse locally, or prompt -> extract -> clean -> normalize
4. Require at least one table with columns
5. Save the first usable table and return all of them

Steps run strictly in sequence for one upload.
"""

import base64
import binascii
import re
from typing import Any, Protocol

from lekhapal.config.settings import Settings, get_settings
from lekhapal.ingest.classifier import FileCategory, classify_file
from lekhapal.ingest.parser_factory import ParserFactory
from lekhapal.ingest.table_normalizer import normalize
from lekhapal.schemas.domain import StoredTable, Table
from lekhapal.services.extraction.cleaner import parse_extraction_response
from lekhapal.services.extraction.prompts import get_prompt
from lekhapal.utils.errors import FileSizeError, NoTablesExtractedError, ValidationError
from lekhapal.utils.logger import get_logger, human_bytes

logger = get_logger(__name__)

_DATA_URI = re.compile(r"^data:([^;,]+);base64,(.*)$", re.DOTALL)


class ExtractionClient(Protocol):
    """Anything that turns file bytes and a prompt into model text."""

    async def extract(self, content: bytes, mime_type: str, prompt: str) -> str: ...


class TableRepository(Protocol):
    """Storage for the primary table of an upload."""

    async def create(self, table: Table) -> StoredTable: ...


class UploadResult:
    """
    Result of an upload.

    Attributes:
        table_id: Id of the saved primary table
        tables: Every usable table, in source order
    """

    def __init__(self, table_id: int, tables: list[Table]) -> None:
        self.table_id = table_id
        self.tables = tables

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "tableId": self.table_id,
            "tables": [table.to_payload() for table in self.tables],
        }


def decode_base64_payload(
    payload: str,
    name: str | None = None,
    declared_type: str | None = None,
) -> tuple[bytes, str | None]:
    """
    Decode a JSON-body upload.

    Args:
        payload: ``data:<mime>;base64,<data>`` URI or plain base64
        name: Client file name, used only for error details
        declared_type: Client MIME type; a data URI's own type wins

    Returns:
        (bytes, MIME type or None)

    Raises:
        ValidationError: Payload is empty or not valid base64
    """
    text = (payload or "").strip()
    mime_type = declared_type

    match = _DATA_URI.match(text)
    if match:
        mime_type = match.group(1).strip() or declared_type
        text = match.group(2)

    # Line-wrapped base64 is common in pasted payloads
    text = re.sub(r"\s+", "", text)
    if not text:
        raise ValidationError(
            message="No file provided",
            details={"name": name},
        )

    try:
        content = base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValidationError(
            message="Malformed base64 payload",
            details={"name": name, "error": str(e)},
        ) from e

    return content, mime_type


class UploadService:
    """
    Service for turning one uploaded file into saved tables.

    Usage:
        service = UploadService(extraction_client, TableDataRepository(session))
        result = await service.process_upload(content, "members.pdf")
        print(result.table_id, len(result.tables))
    """

    def __init__(
        self,
        extraction_client: ExtractionClient,
        table_repository: TableRepository,
        settings: Settings | None = None,
    ) -> None:
        """
        Initialize upload service.

        Args:
            extraction_client: Client for the generative extraction API
            table_repository: Repository the primary table is saved to
            settings: Application settings (uses default if not provided)
        """
        self._extraction_client = extraction_client
        self._table_repository = table_repository
        self._settings = settings or get_settings()

    async def process_upload(
        self,
        content: bytes,
        filename: str | None,
        declared_mime: str | None = None,
        document_type: str | None = None,
    ) -> UploadResult:
        """
        Run the upload pipeline.

        Args:
            content: File bytes
            filename: Original file name
            declared_mime: Client-declared content type
            document_type: SHG document type, selects the extraction prompt

        Returns:
            UploadResult with the saved table id and all usable tables

        Raises:
            ValidationError: Empty payload
            FileSizeError: Payload over the configured limit
            UnsupportedFileTypeError: File matches no route
            ParsingError: Local parser failed
            UpstreamApiError: Extraction API failed
            InvalidExtractionResponseError: Extraction output is not JSON
            NoTablesExtractedError: No table with columns was found
            PersistenceError: Saving the primary table failed
        """
        self._check_size(content, filename)

        category, mime_type = classify_file(filename, content, declared_mime)

        logger.info(
            "Processing upload",
            filename=filename,
            mime_type=mime_type,
            category=category.value,
            size=human_bytes(len(content)),
            document_type=document_type,
        )

        if category is FileCategory.AI_FALLBACK:
            tables = await self._extract_tables(content, mime_type, document_type)
        else:
            tables = self._parse_locally(category, content, filename)

        empty_tables = sum(1 for table in tables if table.is_empty)
        if empty_tables:
            logger.debug("Dropping empty tables", filename=filename, empty_tables=empty_tables)

        usable = [table for table in tables if table.width]
        if not usable:
            logger.warning(
                "No tables extracted",
                filename=filename,
                category=category.value,
                raw_tables=len(tables),
            )
            raise NoTablesExtractedError(
                message="No tables found in the uploaded file",
                details={"filename": filename, "category": category.value},
            )

        stored = await self._table_repository.create(usable[0])

        logger.info(
            "Upload processed",
            filename=filename,
            table_id=stored.id,
            tables=len(usable),
        )
        return UploadResult(table_id=stored.id, tables=usable)

    def _check_size(self, content: bytes, filename: str | None) -> None:
        if not content:
            raise ValidationError(
                message="No file provided",
                details={"filename": filename},
            )

        limit = self._settings.max_file_size_bytes
        if len(content) > limit:
            raise FileSizeError(
                message=(
                    f"File too large ({human_bytes(len(content))}), "
                    f"limit is {human_bytes(limit)}"
                ),
                details={"filename": filename, "size": len(content), "limit": limit},
            )

    def _parse_locally(
        self,
        category: FileCategory,
        content: bytes,
        filename: str | None,
    ) -> list[Table]:
        kwargs: dict[str, Any] = {}
        if category is FileCategory.CSV:
            kwargs["has_header"] = self._settings.csv_has_header

        strategy = ParserFactory.create(category, **kwargs)
        return strategy.parse(content, filename)

    async def _extract_tables(
        self,
        content: bytes,
        mime_type: str,
        document_type: str | None,
    ) -> list[Table]:
        prompt = get_prompt(document_type, mime_type)
        raw_text = await self._extraction_client.extract(content, mime_type, prompt)
        payload = parse_extraction_response(raw_text)
        return normalize(payload)
