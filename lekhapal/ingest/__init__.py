"""
Ingest Package
==============

File classification, local parsing strategies and table normalization.

Components:
    - classify_file: Routes a file to CSV, spreadsheet or AI extraction
    - normalize: Converts any raw payload into canonical tables
    - ParsingStrategy: Abstract base class for local parsers
    - CsvStrategy / ExcelStrategy: Local parsers
    - ParserFactory: Strategy selection by category
"""

from lekhapal.ingest.base_strategy import ParsingStrategy
from lekhapal.ingest.classifier import (
    Classification,
    FileCategory,
    classify_file,
    detect_mime_type,
)
from lekhapal.ingest.csv_strategy import CsvStrategy
from lekhapal.ingest.excel_strategy import ExcelStrategy
from lekhapal.ingest.parser_factory import ParserFactory
from lekhapal.ingest.table_normalizer import (
    PayloadShape,
    RowShape,
    coerce_cell,
    fit_row,
    normalize,
    normalize_table,
    rectangularize,
    synthesize_columns,
)

__all__ = [
    # Classification
    "Classification",
    "FileCategory",
    "classify_file",
    "detect_mime_type",
    # Normalization
    "PayloadShape",
    "RowShape",
    "coerce_cell",
    "fit_row",
    "normalize",
    "normalize_table",
    "rectangularize",
    "synthesize_columns",
    # Strategies
    "ParsingStrategy",
    "CsvStrategy",
    "ExcelStrategy",
    "ParserFactory",
]
