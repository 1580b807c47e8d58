"""
Parsing Strategy Abstract Base Class
====================================

Defines the interface for local file parsing strategies.
CSV and spreadsheet parsers implement this interface; everything else goes
through the extraction API.

Follows Open/Closed Principle (SOLID-O):
- Open for extension: New file types can be added by creating new strategies
- Closed for modification: Existing strategies don't need to change
"""

from abc import ABC, abstractmethod
from typing import Any

from lekhapal.ingest.classifier import file_extension
from lekhapal.ingest.table_normalizer import normalize
from lekhapal.schemas.domain import Table


class ParsingStrategy(ABC):
    """
    Abstract base class for local parsing strategies.

    Contract:
        - Input: File bytes plus the original file name
        - Output: Canonical tables (always passed through the normalizer)
        - Errors: ParsingError wrapping the underlying decoder error; no
          partial table is ever returned on failure

    Usage:
        parser = CsvStrategy(has_header=True)
        tables = parser.parse(content, filename="members.csv")
    """

    #: Title used when the upload has no file name
    default_title: str = "Table"

    @property
    @abstractmethod
    def supported_extensions(self) -> list[str]:
        """
        Return list of supported file extensions.

        Returns:
            List of extensions (lowercase, without dot)
        """
        ...

    @abstractmethod
    def read_records(self, content: bytes) -> list[list[Any]]:
        """
        Decode the buffer into raw records (lists of cell values).

        Raises:
            ParsingError: If the buffer cannot be decoded
        """
        ...

    def parse(self, content: bytes, filename: str | None = None) -> list[Table]:
        """
        Parse a buffer into a single-table list.

        Args:
            content: File bytes
            filename: Original file name, used as the table title

        Returns:
            One-element list of canonical tables
        """
        records = self.read_records(content)
        return normalize([self.build_table(records, filename)])

    def build_table(self, records: list[list[Any]], filename: str | None) -> dict[str, Any]:
        """Header row becomes ``columns``; remaining records become ``rows``."""
        columns = records[0] if records else []
        return {
            "title": filename or self.default_title,
            "columns": columns,
            "rows": records[1:],
        }

    def can_handle(self, filename: str | None) -> bool:
        """
        Check if this strategy can handle the given file.

        Args:
            filename: File name

        Returns:
            True if file extension is supported
        """
        return file_extension(filename) in self.supported_extensions
