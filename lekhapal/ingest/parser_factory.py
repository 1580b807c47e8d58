"""
Parser Factory - Strategy Selection
====================================

Factory for instantiating the local parsing strategy for a file category.
Files classified as AI_FALLBACK have no local strategy and go through the
extraction client instead.

Follows Open/Closed Principle: Add new strategies without modifying this file.
"""

from typing import Any

from lekhapal.ingest.base_strategy import ParsingStrategy
from lekhapal.ingest.classifier import FileCategory
from lekhapal.ingest.csv_strategy import CsvStrategy
from lekhapal.ingest.excel_strategy import ExcelStrategy
from lekhapal.utils.errors import UnsupportedFileTypeError
from lekhapal.utils.logger import get_logger

logger = get_logger(__name__)


# Registry of available strategies
_STRATEGY_REGISTRY: dict[FileCategory, type[ParsingStrategy]] = {
    FileCategory.CSV: CsvStrategy,
    FileCategory.SPREADSHEET: ExcelStrategy,
}


class ParserFactory:
    """
    Factory for creating local parsing strategies.

    Usage:
        parser = ParserFactory.create(FileCategory.CSV, has_header=False)
        tables = parser.parse(content, filename="members.csv")
    """

    @staticmethod
    def create(category: FileCategory, **kwargs: Any) -> ParsingStrategy:
        """
        Create a parser strategy for the given category.

        Args:
            category: Classifier category
            **kwargs: Additional arguments passed to strategy constructor

        Returns:
            ParsingStrategy implementation for the category

        Raises:
            UnsupportedFileTypeError: If the category has no local strategy
        """
        strategy_class = _STRATEGY_REGISTRY.get(category)
        if not strategy_class:
            raise UnsupportedFileTypeError(
                message=f"No local parser for category: {category.value}",
                details={
                    "category": category.value,
                    "supported_categories": ParserFactory.get_supported_categories(),
                },
            )

        logger.debug(
            "Creating parser strategy",
            category=category.value,
            strategy=strategy_class.__name__,
            kwargs=kwargs,
        )

        return strategy_class(**kwargs)

    @staticmethod
    def for_category(category: FileCategory | str, **kwargs: Any) -> ParsingStrategy:
        """
        Create a parser from a category or its string value.

        Example:
            >>> ParserFactory.for_category("csv", has_header=False)

        Raises:
            UnsupportedFileTypeError: If the value names no known category
        """
        try:
            resolved = FileCategory(category)
        except ValueError as e:
            raise UnsupportedFileTypeError(
                message=f"Unknown file category: {category}",
                details={"supported_categories": ParserFactory.get_supported_categories()},
            ) from e
        return ParserFactory.create(resolved, **kwargs)

    @staticmethod
    def get_supported_categories() -> list[str]:
        """List categories with a local strategy."""
        return [category.value for category in _STRATEGY_REGISTRY]

    @staticmethod
    def is_supported(category: FileCategory) -> bool:
        """Check if a category is parsed locally."""
        return category in _STRATEGY_REGISTRY

    @staticmethod
    def register_strategy(
        category: FileCategory,
        strategy_class: type[ParsingStrategy],
    ) -> None:
        """
        Register a new parsing strategy.

        Args:
            category: Category the strategy handles
            strategy_class: ParsingStrategy subclass
        """
        _STRATEGY_REGISTRY[category] = strategy_class
        logger.info(
            "Parser strategy registered",
            category=category.value,
            strategy=strategy_class.__name__,
        )
