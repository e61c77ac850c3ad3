"""
Read-only rendering of parsed GAEB documents.
"""

from typing import Sequence

import pandas as pd
import streamlit as st

from ..metadata.formatting import format_currency, format_quantity, format_timestamp
from ..metadata.models import ParsedDocument, PositionType
from ..system.debug_output import is_debug_enabled
from .theme import info_box, warning_box

RAW_PREVIEW_LIMIT = 1000
DESCRIPTION_PREVIEW_LIMIT = 150

TYPE_ICONS = {
    PositionType.TITLE: "📋",
    PositionType.POSITION: "📝",
    PositionType.TEXT: "📄",
    PositionType.CALCULATION: "🔢",
}


def raw_preview(document: ParsedDocument) -> str:
    """First RAW_PREVIEW_LIMIT characters of the source, with an ellipsis when cut."""
    preview = document.raw_content[:RAW_PREVIEW_LIMIT]
    if len(document.raw_content) > RAW_PREVIEW_LIMIT:
        preview += "..."
    return preview


def build_position_table(document: ParsedDocument) -> pd.DataFrame:
    """Tabular view of one document's nodes, indented by level."""
    rows = []
    for node in document.positions:
        description = ""
        if node.description and node.type is not PositionType.TITLE:
            description = node.description[:DESCRIPTION_PREVIEW_LIMIT]
        is_item = node.type is PositionType.POSITION
        rows.append({
            "": TYPE_ICONS[node.type],
            "Position": node.position_number or "",
            "Produkt": ("    " * node.level) + node.title,
            "Beschreibung": description,
            "Menge": format_quantity(node.quantity, node.unit) if is_item else "",
            "Einheitspreis": format_currency(node.unit_price) if is_item else "",
            "Gesamtpreis": format_currency(node.total_price) if is_item else "",
        })
    return pd.DataFrame(rows, columns=["", "Position", "Produkt", "Beschreibung", "Menge", "Einheitspreis", "Gesamtpreis"])


def _highlight_categories(df: pd.DataFrame, document: ParsedDocument) -> pd.DataFrame:
    styles = pd.DataFrame("", index=df.index, columns=df.columns)
    for idx, node in enumerate(document.positions):
        if node.is_category:
            styles.iloc[idx, :] = "background-color: #DBEAFE; color: #1E40AF; font-weight: bold"
    return styles


def _render_header(document: ParsedDocument) -> None:
    header = document.header
    categories, items, total = document.counts()

    col1, col2 = st.columns([2, 1])
    with col1:
        if header.project_name:
            st.markdown(f"**Projekt:** {header.project_name}")
        if header.version:
            st.markdown(f"**Version:** {header.version}")
        if header.detected_format:
            st.markdown(f"**Format:** {header.detected_format}")
        if header.description:
            st.markdown(f"**Beschreibung:** {header.description}")
    with col2:
        m1, m2, m3 = st.columns(3)
        m1.metric("Kategorien", categories)
        m2.metric("Artikel", items)
        m3.metric("Gesamt", total)


def render_document(document: ParsedDocument) -> None:
    st.subheader(document.file_name)
    st.caption(f"{document.total_positions} positions · {format_timestamp(document.processed_at)}")
    _render_header(document)

    if document.total_positions == 0:
        st.markdown(
            warning_box(
                "No positions found in this GAEB file. The file might use a format that requires additional parsing."
            ),
            unsafe_allow_html=True,
        )
        with st.expander("View raw content", expanded=False):
            st.code(raw_preview(document), language=None)
        return

    table = build_position_table(document)
    st.dataframe(
        table.style.apply(lambda _: _highlight_categories(table, document), axis=None),
        width='stretch',
        hide_index=True,
    )

    if is_debug_enabled():
        with st.expander("🔧 Parsed structure", expanded=False):
            payload = document.to_dict()
            payload.pop("raw_content", None)
            st.json(payload)


def render_documents(documents: Sequence[ParsedDocument]) -> None:
    """Render every processed document, most recent last."""
    if not documents:
        return

    total = sum(doc.total_positions for doc in documents)
    st.markdown(info_box(f"📂 Processed GAEB Files ({total} positions)"), unsafe_allow_html=True)
    for document in documents:
        with st.container(border=True):
            render_document(document)
