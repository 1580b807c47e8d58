"""
Lekhapal Tables Service
=======================

Table extraction and storage service for self-help-group (SHG) record digitization.

Features:
- Local CSV / spreadsheet parsing
- Generative-AI table extraction for PDFs and images
- Normalization of heterogeneous extraction payloads into canonical tables
- Editable table storage and CSV export

"""

__version__ = "1.0.0"
