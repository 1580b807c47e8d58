"""
Unit Tests for the File Classifier and ParserFactory
=====================================================

Tests for MIME detection order, route selection and strategy lookup.
"""

import pytest

from lekhapal.ingest.classifier import (
    DOCX_MIME_TYPE,
    FileCategory,
    classify_file,
    detect_mime_type,
    file_extension,
)
from lekhapal.ingest.csv_strategy import CsvStrategy
from lekhapal.ingest.excel_strategy import ExcelStrategy
from lekhapal.ingest.parser_factory import ParserFactory
from lekhapal.utils.errors import UnsupportedFileTypeError

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32
PDF_BYTES = b"%PDF-1.4\n%\xe2\xe3\xcf\xd3\n1 0 obj\n<<>>\nendobj\n"


class TestFileExtension:
    """Tests for extension extraction."""

    @pytest.mark.parametrize(
        "filename,expected",
        [
            ("members.CSV", "csv"),
            ("book.final.xlsx", "xlsx"),
            ("README", ""),
            (None, ""),
            ("", ""),
        ],
    )
    def test_extension(self, filename, expected):
        assert file_extension(filename) == expected


class TestDetectMimeType:
    """Tests for the sniff -> declared -> extension order."""

    def test_signature_wins_over_declared(self):
        assert detect_mime_type(PNG_BYTES, "photo.csv", "text/csv") == "image/png"

    def test_declared_used_when_sniffing_fails(self):
        assert detect_mime_type(b"a,b\n1,2", "upload", "text/csv; charset=utf-8") == "text/csv"

    def test_octet_stream_ignored(self):
        assert (
            detect_mime_type(b"a,b\n1,2", "members.csv", "application/octet-stream")
            == "text/csv"
        )

    def test_extension_lookup(self):
        assert detect_mime_type(None, "scan.pdf") == "application/pdf"

    def test_nothing_known(self):
        assert detect_mime_type(b"plain", "noext", None) is None


class TestClassifyFile:
    """Tests for route selection."""

    def test_csv_by_extension(self):
        result = classify_file("members.csv", b"name,age\nA,1")

        assert result.category is FileCategory.CSV
        assert result.mime_type == "text/csv"

    def test_csv_by_declared_mime(self):
        result = classify_file("upload", b"name,age", declared_mime="application/csv")

        assert result.category is FileCategory.CSV

    def test_csv_extension_with_text_plain(self):
        result = classify_file("members.csv", b"a,b", declared_mime="text/plain")

        assert result.category is FileCategory.CSV

    @pytest.mark.parametrize("filename", ["book.xlsx", "book.xlsm", "legacy.xls"])
    def test_spreadsheet_by_extension(self, filename):
        assert classify_file(filename).category is FileCategory.SPREADSHEET

    def test_spreadsheet_by_declared_mime(self):
        result = classify_file(
            "upload",
            declared_mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        )

        assert result.category is FileCategory.SPREADSHEET

    def test_image_goes_to_extraction(self):
        result = classify_file("page.png", PNG_BYTES)

        assert result == (FileCategory.AI_FALLBACK, "image/png")

    def test_pdf_goes_to_extraction(self):
        result = classify_file("ledger.pdf", PDF_BYTES)

        assert result == (FileCategory.AI_FALLBACK, "application/pdf")

    def test_docx_by_extension(self):
        result = classify_file("notes.docx")

        assert result.category is FileCategory.AI_FALLBACK
        assert result.mime_type == DOCX_MIME_TYPE

    def test_zip_signature_resolved_by_extension(self):
        result = classify_file("notes.docx", b"PK\x03\x04" + b"\x00" * 64)

        assert result == (FileCategory.AI_FALLBACK, DOCX_MIME_TYPE)

    def test_unsupported_type(self):
        with pytest.raises(UnsupportedFileTypeError) as exc_info:
            classify_file("notes.txt", b"hello")

        assert exc_info.value.status_code == 400
        assert "CSV or XLSX" in exc_info.value.message

    def test_unknown_type(self):
        with pytest.raises(UnsupportedFileTypeError):
            classify_file("blob", b"\x00\x01\x02")


class TestParserFactory:
    """Tests for strategy lookup."""

    def test_create_csv(self):
        parser = ParserFactory.create(FileCategory.CSV, has_header=False)

        assert isinstance(parser, CsvStrategy)
        assert parser.has_header is False

    def test_create_spreadsheet(self):
        assert isinstance(ParserFactory.create(FileCategory.SPREADSHEET), ExcelStrategy)

    def test_for_category_accepts_string(self):
        assert isinstance(ParserFactory.for_category("csv"), CsvStrategy)

    def test_for_unknown_category(self):
        with pytest.raises(UnsupportedFileTypeError):
            ParserFactory.for_category("pptx")

    def test_extraction_category_has_no_local_parser(self):
        assert ParserFactory.is_supported(FileCategory.AI_FALLBACK) is False

        with pytest.raises(UnsupportedFileTypeError):
            ParserFactory.create(FileCategory.AI_FALLBACK)

    def test_supported_categories(self):
        assert set(ParserFactory.get_supported_categories()) >= {"csv", "spreadsheet"}
