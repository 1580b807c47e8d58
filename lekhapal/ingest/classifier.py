"""
File Classifier
===============

Picks a parsing route for an uploaded file: local CSV parsing, local
spreadsheet parsing, or the generative-AI extraction fallback.

MIME detection order:
    1. File signature sniffed from the bytes (authoritative)
    2. Content type declared by the client
    3. Extension lookup

Pure classification: no I/O beyond inspecting the given buffer.
"""

import mimetypes
from enum import Enum
from pathlib import PurePath
from typing import NamedTuple

import filetype

from lekhapal.utils.errors import UnsupportedFileTypeError

CSV_MIME_TYPES = frozenset({"text/csv", "application/csv"})
SPREADSHEET_MIME_TYPES = frozenset(
    {
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        "application/vnd.ms-excel",
        "application/vnd.ms-excel.sheet.macroenabled.12",
    }
)
DOCX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
PDF_MIME_TYPE = "application/pdf"

CSV_EXTENSIONS = frozenset({"csv"})
SPREADSHEET_EXTENSIONS = frozenset({"xlsx", "xlsm", "xls"})
DOCUMENT_EXTENSIONS = frozenset({"pdf", "docx"})

# Office files sniff as plain zip archives; the extension names the real type
ZIP_MIME_TYPE = "application/zip"
EXTENSION_MIME_TYPES = {
    "csv": "text/csv",
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "xlsm": "application/vnd.ms-excel.sheet.macroenabled.12",
    "xls": "application/vnd.ms-excel",
    "pdf": PDF_MIME_TYPE,
    "docx": DOCX_MIME_TYPE,
}

SUPPORTED_HINT = "Please upload PDF, JPEG/PNG/GIF/TIFF/WEBP image, CSV or XLSX."


class FileCategory(str, Enum):
    """Parsing route for an uploaded file."""

    CSV = "csv"
    SPREADSHEET = "spreadsheet"
    AI_FALLBACK = "ai-fallback"


class Classification(NamedTuple):
    """Classifier result: route plus the MIME type sent to the extractor."""

    category: FileCategory
    mime_type: str


def file_extension(filename: str | None) -> str:
    """Lowercase extension without dot ('' when absent)."""
    if not filename:
        return ""
    return PurePath(filename).suffix.lower().lstrip(".")


def detect_mime_type(
    content: bytes | None,
    filename: str | None = None,
    declared: str | None = None,
) -> str | None:
    """
    Best-effort MIME type of an upload.

    Args:
        content: Raw file bytes (signature sniffing is skipped when None)
        filename: Original file name, used for the extension lookup
        declared: Content type reported by the client

    Returns:
        MIME type, or None when no source yields one
    """
    if content:
        sniffed = filetype.guess_mime(content)
        if sniffed:
            return sniffed

    if declared:
        declared = declared.split(";", 1)[0].strip().lower()
        if declared and declared != "application/octet-stream":
            return declared

    if filename:
        guessed, _ = mimetypes.guess_type(filename, strict=False)
        if guessed:
            return guessed

    return None


def classify_file(
    filename: str | None,
    content: bytes | None = None,
    declared_mime: str | None = None,
) -> Classification:
    """
    Classify an upload into CSV, spreadsheet or AI-extraction routes.

    Args:
        filename: Original file name
        content: File bytes, sniffed first when given
        declared_mime: Client-declared content type

    Returns:
        Classification with category and resolved MIME type

    Raises:
        UnsupportedFileTypeError: No MIME type could be determined, or it
            matches no route
    """
    mime_type = detect_mime_type(content, filename, declared_mime)
    extension = file_extension(filename)

    if not mime_type or mime_type == ZIP_MIME_TYPE:
        mime_type = EXTENSION_MIME_TYPES.get(extension, mime_type)

    if not mime_type:
        raise UnsupportedFileTypeError(
            message=f"Unsupported or unknown file type. {SUPPORTED_HINT}",
            details={"filename": filename, "declared_mime": declared_mime},
        )

    if mime_type in CSV_MIME_TYPES or extension in CSV_EXTENSIONS:
        return Classification(FileCategory.CSV, mime_type)

    if mime_type in SPREADSHEET_MIME_TYPES or extension in SPREADSHEET_EXTENSIONS:
        return Classification(FileCategory.SPREADSHEET, mime_type)

    if (
        mime_type.startswith("image/")
        or mime_type in (PDF_MIME_TYPE, DOCX_MIME_TYPE)
        or extension in DOCUMENT_EXTENSIONS
    ):
        return Classification(FileCategory.AI_FALLBACK, mime_type)

    raise UnsupportedFileTypeError(
        message=f"Unsupported file type: {mime_type}. {SUPPORTED_HINT}",
        details={"filename": filename, "mime_type": mime_type},
    )
