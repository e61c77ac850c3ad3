"""
Flat CSV alternative to the production workbook.
"""

import csv
import logging
from typing import Optional, Sequence, Tuple

import pandas as pd

from ..metadata.models import ParsedDocument, PositionNode
from ..system.error_handling import handle_export_error
from .export_common import ExportOptions, build_export_filename, type_display_name

logger = logging.getLogger(__name__)

CSV_COLUMNS = ["Position", "Type", "Title", "Description", "Quantity", "Unit"]
CSV_HEADER = ",".join(CSV_COLUMNS)


def _quantity_value(value: Optional[float]):
    if not value:
        return None
    return int(value) if float(value).is_integer() else value


def _position_record(node: PositionNode) -> dict:
    return {
        "Position": node.position_number,
        "Type": type_display_name(node.type),
        "Title": node.title or "",
        "Description": node.description or "",
        "Quantity": _quantity_value(node.quantity),
        "Unit": node.unit,
    }


def build_document_frame(document: ParsedDocument) -> pd.DataFrame:
    """One row per node; object dtype keeps whole quantities as integers."""
    records = [_position_record(node) for node in document.positions]
    return pd.DataFrame(records, columns=CSV_COLUMNS, dtype=object)


def _document_block(document: ParsedDocument) -> str:
    export_df = build_document_frame(document)
    # Text cells are quoted with inner quotes doubled; numbers stay bare
    csv_body = export_df.to_csv(
        index=False,
        header=False,
        lineterminator="\n",
        quoting=csv.QUOTE_NONNUMERIC,
    )
    metadata_lines = [
        f"File: {document.file_name}",
        f"Format: {document.header.detected_format or ''}",
        f"Project: {document.header.project_name or ''}",
        "",
        CSV_HEADER,
    ]
    return "\n".join(metadata_lines) + "\n" + csv_body


def generate_production_csv(documents: Sequence[ParsedDocument]) -> str:
    """One block per document, separated by a blank line."""
    return "\n".join(_document_block(document) for document in documents)


def build_production_csv(
    documents: Sequence[ParsedDocument],
    options: Optional[ExportOptions] = None,
) -> Tuple[str, str]:
    """Return ``(filename, csv_text)``; failures are raised as ExportError."""
    options = options or ExportOptions()
    try:
        content = generate_production_csv(documents)
    except Exception as exc:
        logger.error("CSV export failed: %s", exc)
        raise handle_export_error("csv", exc) from exc
    return build_export_filename(options.file_stem, "csv"), content
