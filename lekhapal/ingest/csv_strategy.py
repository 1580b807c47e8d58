"""
CSV Strategy
============

Parses UTF-8 CSV buffers with pandas.

All cells are read as text (no NA conversion, no type inference), blank
lines are skipped and RFC-4180 quoting (embedded commas, doubled quotes,
newlines inside quoted fields) is honoured.

Header policy is explicit: with ``has_header=True`` the first record becomes
the column list, otherwise every record is data and the normalizer
synthesizes ``col1 .. colN``.
"""

import io
from typing import Any

import pandas as pd

from lekhapal.ingest.base_strategy import ParsingStrategy
from lekhapal.utils.errors import ParsingError
from lekhapal.utils.logger import get_logger

logger = get_logger(__name__)


class CsvStrategy(ParsingStrategy):
    """
    CSV parsing strategy.

    Example:
        >>> CsvStrategy().parse(b"name,age\\nA,1\\nB,2", filename="members.csv")
        [Table(title='members.csv', columns=['name', 'age'], rows=[['A', '1'], ['B', '2']])]
    """

    default_title = "CSV Table"

    def __init__(self, has_header: bool = True, delimiter: str = ",") -> None:
        """
        Initialize CSV strategy.

        Args:
            has_header: Treat the first record as the column header
            delimiter: Field delimiter
        """
        self._has_header = has_header
        self._delimiter = delimiter

    @property
    def has_header(self) -> bool:
        """Whether the first record is the column header."""
        return self._has_header

    @property
    def supported_extensions(self) -> list[str]:
        """Return supported file extensions."""
        return ["csv"]

    def read_records(self, content: bytes) -> list[list[Any]]:
        """
        Decode CSV bytes into records of strings.

        Raises:
            ParsingError: Invalid UTF-8, empty input or inconsistent record length
        """
        try:
            df = pd.read_csv(
                io.BytesIO(content),
                header=None,
                sep=self._delimiter,
                dtype=str,
                encoding="utf-8-sig",
                keep_default_na=False,
                na_filter=False,
                skip_blank_lines=True,
            )
        except Exception as e:
            logger.error("CSV parsing failed", error=str(e), size=len(content))
            raise ParsingError(
                message=f"CSV parse failed: {e}",
                details={"error": str(e), "error_type": type(e).__name__},
            ) from e

        records = [
            ["" if pd.isna(value) else value for value in record]
            for record in df.itertuples(index=False, name=None)
        ]
        logger.debug("CSV records read", records=len(records), width=df.shape[1])
        return records

    def build_table(self, records: list[list[Any]], filename: str | None) -> dict[str, Any]:
        """Apply the header policy."""
        if self._has_header:
            return super().build_table(records, filename)
        return {
            "title": filename or self.default_title,
            "columns": [],
            "rows": records,
        }
