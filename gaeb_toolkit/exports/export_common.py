"""
Shared helpers for workbook and CSV exports.
"""

import re
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE

from ..metadata.formatting import format_filename_timestamp
from ..metadata.models import PositionType

EXCEL_SHEET_NAME_LIMIT = 31
SHEET_NAME_UNSAFE_RE = re.compile(r'[\\/:*?"<>|\[\]]')
DEFAULT_FILE_STEM = "GAEB_Export"

TYPE_DISPLAY_NAMES = {
    PositionType.TITLE: "Category",
    PositionType.POSITION: "Position",
    PositionType.TEXT: "Text",
    PositionType.CALCULATION: "Calculation",
}


@dataclass(frozen=True)
class ExportOptions:
    include_description: bool = True
    file_stem: str = DEFAULT_FILE_STEM


def type_display_name(node_type: PositionType) -> str:
    return TYPE_DISPLAY_NAMES[node_type]


def sanitize_excel_value(value):
    """
    Make a string safe for a worksheet cell.

    Control characters openpyxl refuses (a DOS EOF in legacy exports, form
    feeds) are removed, and strings openpyxl would store as formulas are
    prefixed so they stay text.
    """
    if not isinstance(value, str):
        return value
    value = ILLEGAL_CHARACTERS_RE.sub("", value)
    if value.startswith("="):
        return f"'{value}"
    return value


def safe_sheet_name(file_name: str, ordinal: Optional[int] = None) -> str:
    """
    Excel-safe sheet name for one document.

    ``ordinal`` (1-based) is given for multi-document exports and keeps
    names unique after truncation.
    """
    cleaned = SHEET_NAME_UNSAFE_RE.sub("_", file_name)[:EXCEL_SHEET_NAME_LIMIT] or "Sheet"
    if ordinal is not None:
        cleaned = f"File_{ordinal}_{cleaned}"
    return cleaned[:EXCEL_SHEET_NAME_LIMIT]


def build_export_filename(file_stem: str, extension: str, moment: Optional[datetime] = None) -> str:
    stem = "".join(c for c in (file_stem or DEFAULT_FILE_STEM) if c.isalnum() or c in (" ", "-", "_")).strip()
    stem = stem.replace(" ", "_") or DEFAULT_FILE_STEM
    return f"{stem}_{format_filename_timestamp(moment)}.{extension}"
