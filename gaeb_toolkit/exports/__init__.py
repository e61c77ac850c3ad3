"""Exports package public API."""

from .export_common import ExportOptions, safe_sheet_name, type_display_name
from .production_csv import build_production_csv, generate_production_csv
from .production_excel import build_production_workbook, generate_production_excel

__all__ = [
    "ExportOptions",
    "safe_sheet_name",
    "type_display_name",
    "build_production_csv",
    "generate_production_csv",
    "build_production_workbook",
    "generate_production_excel",
]
