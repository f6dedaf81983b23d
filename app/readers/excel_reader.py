"""
app/readers/excel_reader.py

Workbook reader producing raw anomaly records (header -> value mappings).

Only the first sheet is read. The first row is the header row; blank header
cells are ignored, fully blank rows are dropped and blank cells become None.
"""

from __future__ import annotations

import base64
import binascii
import io
import logging
import math
import zipfile
from collections.abc import Sequence
from typing import IO, Any

import pandas as pd
from openpyxl.utils.exceptions import InvalidFileException

from app.domain.errors import SpreadsheetReadError

logger = logging.getLogger(__name__)

# Only Office Open XML workbooks; legacy .xls (OLE2) would need the xlrd engine.
EXCEL_EXTENSIONS: tuple[str, ...] = (".xlsx",)

# At least one of these headers is expected in an anomaly export.
RECOGNISED_HEADERS: tuple[str, ...] = (
    "Num_equipement",
    "Equipment Number",
    "Numéro équipement",
    "equipment_number",
    "Description",
    "Title",
    "Titre",
    "title",
)


def is_excel_filename(filename: str) -> bool:
    return filename.strip().lower().endswith(EXCEL_EXTENSIONS)


def read_workbook(handle: IO[bytes] | str, *, filename: str | None = None) -> list[dict[str, Any]]:
    """
    Read the first sheet of a workbook into an ordered list of raw records.
    """

    if isinstance(handle, str):
        label = filename or handle
    else:
        label = filename or getattr(handle, "name", None) or "<workbook>"
    try:
        frame = pd.read_excel(handle, sheet_name=0, header=None, dtype=object, engine="openpyxl")
    except (ValueError, OSError, KeyError, zipfile.BadZipFile, InvalidFileException) as exc:
        raise SpreadsheetReadError(f"Excel processing failed for {label}: {exc}") from exc

    rows = [[_clean_cell(cell) for cell in row] for row in frame.itertuples(index=False, name=None)]
    if not rows:
        raise SpreadsheetReadError(f"Excel file is empty: {label}")

    headers = [_header_name(cell) for cell in rows[0]]
    logger.info("Excel headers file=%s headers=%s", label, [header for header in headers if header])

    records: list[dict[str, Any]] = []
    for row in rows[1:]:
        if all(cell is None for cell in row):
            continue
        record: dict[str, Any] = {}
        for position, header in enumerate(headers):
            if header is None:
                continue
            record[header] = row[position] if position < len(row) else None
        records.append(record)

    logger.info("Processed %s rows from Excel file=%s", len(records), label)
    return records


def read_workbook_bytes(content: bytes, *, filename: str = "upload.xlsx") -> list[dict[str, Any]]:
    """
    Read a workbook held in memory.
    """

    return read_workbook(io.BytesIO(content), filename=filename)


def read_workbook_base64(payload: str, *, filename: str) -> list[dict[str, Any]]:
    """
    Decode a base64 workbook upload and read it.
    """

    try:
        content = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise SpreadsheetReadError(f"Upload {filename} is not valid base64.") from exc
    return read_workbook_bytes(content, filename=filename)


def check_expected_headers(records: Sequence[dict[str, Any]]) -> bool:
    """
    Warn (never reject) when no recognised equipment/title header is present.
    """

    if not records:
        return False
    available = set(records[0].keys())
    recognised = any(header in available for header in RECOGNISED_HEADERS)
    if not recognised:
        logger.warning(
            "Excel file may not contain expected anomaly fields available=%s expected_any=%s",
            sorted(available),
            list(RECOGNISED_HEADERS),
        )
    return recognised


def _clean_cell(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, float) and math.isnan(value):
        return None
    if value is pd.NaT:
        return None
    if isinstance(value, str) and not value.strip():
        return None
    if isinstance(value, pd.Timestamp):
        return value.to_pydatetime()
    return value


def _header_name(value: Any) -> str | None:
    if value is None:
        return None
    name = str(value).strip()
    return name or None
