"""
app/readers package marker.
"""

from app.readers.excel_reader import (
    EXCEL_EXTENSIONS,
    RECOGNISED_HEADERS,
    check_expected_headers,
    is_excel_filename,
    read_workbook,
    read_workbook_base64,
    read_workbook_bytes,
)

__all__ = [
    "EXCEL_EXTENSIONS",
    "RECOGNISED_HEADERS",
    "check_expected_headers",
    "is_excel_filename",
    "read_workbook",
    "read_workbook_base64",
    "read_workbook_bytes",
]
