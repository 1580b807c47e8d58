"""
Excel Strategy - Spreadsheet Parser
===================================

Parses .xlsx / .xlsm workbooks with openpyxl.

Only the first worksheet (index 0) is read. Other sheets are ignored; this
is a known limitation, logged whenever a workbook has more than one sheet.

Follows Strategy Pattern: Implements ParsingStrategy interface.
"""

import io
from typing import Any

from openpyxl import load_workbook

from lekhapal.ingest.base_strategy import ParsingStrategy
from lekhapal.utils.errors import ParsingError
from lekhapal.utils.logger import get_logger

logger = get_logger(__name__)


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _trim_trailing_blanks(record: list[Any]) -> list[Any]:
    end = len(record)
    while end and _is_blank(record[end - 1]):
        end -= 1
    return record[:end]


class ExcelStrategy(ParsingStrategy):
    """
    Spreadsheet parsing strategy (first sheet only).

    Each worksheet row is read as a list of cell values (computed values, not
    formulas). Fully blank rows are skipped, row 0 becomes the column header.

    Example:
        Input sheet:
        | name | age |
        | A    | 1   |
        |      |     |
        | B    | 2.0 |

        Output:
        columns = ["name", "age"]
        rows = [["A", "1"], ["B", "2"]]
    """

    default_title = "XLSX Table"

    @property
    def supported_extensions(self) -> list[str]:
        """Return supported file extensions."""
        return ["xlsx", "xlsm", "xls"]

    def read_records(self, content: bytes) -> list[list[Any]]:
        """
        Read the first worksheet into records.

        Raises:
            ParsingError: If the workbook cannot be loaded
        """
        records: list[list[Any]] = []
        try:
            wb = load_workbook(io.BytesIO(content), read_only=True, data_only=True)
            try:
                if len(wb.worksheets) > 1:
                    logger.debug(
                        "Ignoring extra worksheets",
                        used_sheet=wb.sheetnames[0],
                        ignored_sheets=wb.sheetnames[1:],
                    )

                for values in wb.worksheets[0].iter_rows(values_only=True):
                    record = _trim_trailing_blanks(list(values))
                    if record:
                        records.append(record)
            finally:
                wb.close()

            # Blank trailing header cells still own the data below them.
            if records:
                width = max(len(record) for record in records)
                records[0] = records[0] + [None] * (width - len(records[0]))
        except Exception as e:
            logger.error("Spreadsheet parsing failed", error=str(e), size=len(content))
            raise ParsingError(
                message=f"XLSX parse failed: {e}",
                details={"error": str(e), "error_type": type(e).__name__},
            ) from e

        logger.debug("Spreadsheet records read", records=len(records))
        return records
