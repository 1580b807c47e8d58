"""
Extraction Package
==================

Generative-AI table extraction for PDFs, images and other non-tabular files.

Components:
    - GeminiExtractionClient: Calls the extraction API
    - get_prompt: Prompt selection by document type / MIME type
    - clean_extraction_response / parse_extraction_response: JSON isolation
"""

from lekhapal.services.extraction.cleaner import (
    clean_extraction_response,
    parse_extraction_response,
    strip_code_fence,
)
from lekhapal.services.extraction.gemini_client import (
    GeminiExtractionClient,
    TransientExtractionError,
)
from lekhapal.services.extraction.prompts import get_prompt

__all__ = [
    "GeminiExtractionClient",
    "TransientExtractionError",
    "clean_extraction_response",
    "get_prompt",
    "parse_extraction_response",
    "strip_code_fence",
]
