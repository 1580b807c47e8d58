"""
Extraction Prompts
==================

Prompt templates sent with each document to the extraction API.

Every prompt asks for pure JSON in one of the shapes the table normalizer
understands: a list of ``{title, columns, rows}`` objects, or an
``{"shgProfile": {...}}`` object for SHG profile pages.
"""

from lekhapal.schemas.domain import DocumentType

IMAGE_PROMPT = (
    "You are an OCR engine specialized in extracting tables from images. "
    "Return JSON with {title, columns, rows}."
)

DOCUMENT_PROMPT = (
    "You are a document parser. Extract ALL tables as JSON array with "
    "{title, columns, rows}."
)

GENERIC_TABLE_PROMPT = """You are an OCR engine that extracts **all tables** from a scanned document.
Return a STRICT JSON array of objects. Do not wrap the answer in markdown code fences.

Output format:
[
  {
    "title": "string (the heading above the table, or a descriptive title)",
    "columns": ["col1", "col2", ...],
    "rows": [
      ["row1col1", "row1col2", ...],
      ["row2col1", "row2col2", ...]
    ]
  },
  ...
]

Extraction rules:
- Every visible grid or distinct tabular section is a separate table.
- Use the heading above the table as "title" (e.g. "SHG Loan Repayment"); if there is none, write a short descriptive title.
- "columns" holds the column headers exactly as printed.
- "rows" holds one array per table row; every cell is a string.
- Keep Hindi and other non-Latin text exactly as written, do not translate.
- Write numbers plainly (60090, not "60,090").
- Use "" for blank or missing cells so each row has as many cells as there are columns.
- Return only the JSON array, no explanations."""

SHG_PROFILE_PROMPT = """You are a document parser for SHG profile pages. Extract the key-value data into one JSON object.
Return a STRICT JSON object only. Do not wrap the answer in markdown code fences.

Expected structure:
{
  "shgProfile": {
    "shgName": "string",
    "dateOfFormation": "string (DD/MM/YY or DD/MM/YYYY)",
    "meetingFrequency": "string",
    "villageName": "string",
    "gramPanchayatName": "string",
    "nameOfVo": "string",
    "nameOfClf": "string",
    "blockName": "string",
    "districtName": "string",
    "joiningDateInVo": "string (DD/MM/YY or DD/MM/YYYY)"
  }
}

Extraction rules:
- Use exactly the keys shown above.
- Join values printed across several lines into one string.
- Keep Hindi text and numbers exactly as printed.
- Use "" for any value that is missing.
- Extract only the SHG profile section.
- Return only the JSON object, no explanations."""

MEMBER_LOANS_PROMPT = """You are an OCR engine that extracts **every member's loan table** from a scanned document.
Return a STRICT JSON array of objects. Do not wrap the answer in markdown code fences.

Output format:
[
  {
    "title": "string (the member's name)",
    "columns": ["col1", "col2", ...],
    "rows": [
      ["row1col1", "row1col2", ...]
    ]
  },
  ...
]

Extraction rules:
- Each member's loan record section is a separate table, titled with the member's name.
- "columns" holds that table's column headers exactly as printed.
- "rows" holds one array of string cells per table row.
- Keep Hindi text exactly as written; write numbers plainly.
- Use "" for blank cells so each row has as many cells as there are columns.
- Return only the JSON array, no explanations."""

_PROMPTS_BY_TYPE: dict[DocumentType, str] = {
    DocumentType.SHG_PROFILE: SHG_PROFILE_PROMPT,
    DocumentType.RECEIPTS: GENERIC_TABLE_PROMPT,
    DocumentType.EXPENDITURE: GENERIC_TABLE_PROMPT,
    DocumentType.SAVINGS: GENERIC_TABLE_PROMPT,
    DocumentType.SHG_LOANS: GENERIC_TABLE_PROMPT,
    DocumentType.MEMBER_LOANS: MEMBER_LOANS_PROMPT,
    DocumentType.OTHERS: GENERIC_TABLE_PROMPT,
}


def get_prompt(document_type: str | None = None, mime_type: str | None = None) -> str:
    """
    Select the extraction prompt.

    Args:
        document_type: SHG document type; unknown values use the generic prompt
        mime_type: Upload MIME type, picks the OCR or document prompt when no
            document type is given

    Returns:
        Prompt text
    """
    if document_type:
        try:
            return _PROMPTS_BY_TYPE[DocumentType(document_type)]
        except ValueError:
            return GENERIC_TABLE_PROMPT

    if mime_type and mime_type.startswith("image/"):
        return IMAGE_PROMPT
    return DOCUMENT_PROMPT
