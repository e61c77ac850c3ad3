"""
Excel export of parsed GAEB documents as production tracking lists.
Generates a Summary tab plus one workshop/procurement tab per document.
"""

import logging
from io import BytesIO
from typing import Any, List, Optional, Sequence, Tuple

from openpyxl import Workbook
from openpyxl.comments import Comment
from openpyxl.styles import Font, Alignment, PatternFill
from openpyxl.utils import get_column_letter

from ..metadata.formatting import format_timestamp
from ..metadata.models import ParsedDocument, PositionType
from ..parsing.format_classifier import DEFAULT_EXPORT_FORMAT
from ..system.error_handling import ExportError, handle_export_error
from ..system.version import APP_NAME
from .export_common import ExportOptions, build_export_filename, safe_sheet_name, sanitize_excel_value

logger = logging.getLogger(__name__)

# Styling constants
BANNER_FONT = Font(bold=True, size=14)
SECTION_FONT = Font(bold=True)
HEADER_FILL = PatternFill(start_color="E5E7EB", end_color="E5E7EB", fill_type="solid")
HEADER_FONT = Font(bold=True)
CATEGORY_FILL = PatternFill(start_color="DBEAFE", end_color="DBEAFE", fill_type="solid")
CATEGORY_FONT = Font(bold=True, color="1E40AF")
CENTRE_ALIGNMENT = Alignment(horizontal="center", vertical="center")
LEFT_ALIGNMENT = Alignment(horizontal="left")

SUMMARY_SHEET_NAME = "Summary"
SUMMARY_TITLE = "GAEB Produktionsliste - Übersicht"
SUMMARY_HEADERS = ["Datei", "Format", "Kategorien", "Artikel", "Gesamt Positionen", "Bearbeitet am"]
SUMMARY_TOTAL_LABEL = "GESAMT"

WORKSHOP_LABEL = "Werkstatt"
PROCUREMENT_LABEL = "Zukauf"
POSITION_HEADERS = [
    "Position", "Produkt", "Stückzahl", "zugeschnitten", "gebaut", "",
    "Produkt", "Stückzahl", "bestellt am", "geliefert", "Bemerkungen",
]
COLUMN_WIDTHS = [12, 50, 10, 12, 10, 3, 40, 10, 12, 10, 30]
PROCUREMENT_COLUMN = 6
HEADER_ROW = 5
DATA_START_ROW = 6


def build_summary_rows(documents: Sequence[ParsedDocument]) -> List[List[Any]]:
    """Rows of the Summary tab, banner and header included."""
    rows: List[List[Any]] = [[SUMMARY_TITLE], [], list(SUMMARY_HEADERS)]
    for document in documents:
        categories, items, total = document.counts()
        rows.append([
            sanitize_excel_value(document.file_name),
            document.header.detected_format or DEFAULT_EXPORT_FORMAT,
            categories,
            items,
            total,
            format_timestamp(document.processed_at),
        ])

    if len(documents) > 1:
        counts = [document.counts() for document in documents]
        rows.append([])
        rows.append([
            SUMMARY_TOTAL_LABEL,
            "",
            sum(c[0] for c in counts),
            sum(c[1] for c in counts),
            sum(c[2] for c in counts),
            "",
        ])
    return rows


def build_position_rows(document: ParsedDocument) -> List[List[Any]]:
    """Rows of one production tab: banner, zone labels, headers, then one row per node."""
    width = len(POSITION_HEADERS)
    zone_row: List[Any] = [None] * width
    zone_row[0] = WORKSHOP_LABEL
    zone_row[PROCUREMENT_COLUMN - 1] = PROCUREMENT_LABEL

    rows: List[List[Any]] = [
        [sanitize_excel_value(f"Projekt: {document.header.project_name or document.file_name}")],
        [],
        zone_row,
        [],
        list(POSITION_HEADERS),
    ]
    for node in document.positions:
        quantity = node.quantity if node.type is PositionType.POSITION and node.quantity else None
        # Manual tracking columns stay empty
        rows.append([sanitize_excel_value(node.position_number) or None, sanitize_excel_value(node.title), quantity] + [None] * (width - 3))
    return rows


def _apply_header_style(ws, row_num: int, col_count: int) -> None:
    for col in range(1, col_count + 1):
        cell = ws.cell(row=row_num, column=col)
        cell.fill = HEADER_FILL
        cell.font = HEADER_FONT
        cell.alignment = CENTRE_ALIGNMENT


def _apply_category_style(ws, row_num: int, col_count: int) -> None:
    for col in range(1, col_count + 1):
        cell = ws.cell(row=row_num, column=col)
        cell.fill = CATEGORY_FILL
        cell.font = CATEGORY_FONT
        cell.alignment = LEFT_ALIGNMENT


def _generate_summary_sheet(wb: Workbook, documents: Sequence[ParsedDocument]) -> None:
    ws = wb.create_sheet(SUMMARY_SHEET_NAME, 0)
    for row in build_summary_rows(documents):
        ws.append(row)

    ws["A1"].font = BANNER_FONT
    _apply_header_style(ws, 3, len(SUMMARY_HEADERS))
    if len(documents) > 1:
        for cell in ws[ws.max_row]:
            cell.font = SECTION_FONT

    for idx, width in enumerate([40, 12, 12, 10, 18, 22], start=1):
        ws.column_dimensions[get_column_letter(idx)].width = width


def _generate_position_sheet(
    wb: Workbook,
    document: ParsedDocument,
    sheet_name: str,
    options: ExportOptions,
) -> None:
    ws = wb.create_sheet(sheet_name)
    for row in build_position_rows(document):
        ws.append(row)

    col_count = len(POSITION_HEADERS)
    ws["A1"].font = BANNER_FONT
    ws["A1"].alignment = LEFT_ALIGNMENT
    ws.cell(row=3, column=1).font = SECTION_FONT
    ws.cell(row=3, column=PROCUREMENT_COLUMN).font = SECTION_FONT
    _apply_header_style(ws, HEADER_ROW, col_count)

    for offset, node in enumerate(document.positions):
        row_num = DATA_START_ROW + offset
        if node.type is PositionType.TITLE:
            _apply_category_style(ws, row_num, col_count)
        if options.include_description and node.description:
            ws.cell(row=row_num, column=2).comment = Comment(sanitize_excel_value(node.description), APP_NAME)

    for idx, width in enumerate(COLUMN_WIDTHS, start=1):
        ws.column_dimensions[get_column_letter(idx)].width = width
    ws.freeze_panes = f"A{DATA_START_ROW}"


def generate_production_excel(
    documents: Sequence[ParsedDocument],
    options: Optional[ExportOptions] = None,
) -> bytes:
    """Build the workbook and return its bytes."""
    options = options or ExportOptions()
    wb = Workbook()
    wb.remove(wb.active)

    _generate_summary_sheet(wb, documents)
    multiple = len(documents) > 1
    for ordinal, document in enumerate(documents, start=1):
        sheet_name = safe_sheet_name(document.file_name, ordinal if multiple else None)
        _generate_position_sheet(wb, document, sheet_name, options)

    output = BytesIO()
    wb.save(output)
    return output.getvalue()


def build_production_workbook(
    documents: Sequence[ParsedDocument],
    options: Optional[ExportOptions] = None,
) -> Tuple[str, bytes]:
    """
    Return ``(filename, xlsx_bytes)`` for the given documents.

    Any failure is raised as ExportError; no partial workbook is returned.
    """
    options = options or ExportOptions()
    try:
        payload = generate_production_excel(documents, options)
    except ExportError:
        raise
    except Exception as exc:
        logger.error("Workbook export failed: %s", exc)
        raise handle_export_error("xlsx", exc) from exc
    return build_export_filename(options.file_stem, "xlsx"), payload
