"""
Export controls: format choice, description toggle and lazy download buttons.
"""

import gc
from typing import Sequence

import streamlit as st

from ..exports import ExportOptions, build_production_csv, build_production_workbook
from ..metadata.models import ParsedDocument, PositionType
from ..system.error_handling import streamlit_safe_execute
from ..system.session_state import SessionStateKeys
from .theme import info_box

EXPORT_FORMATS = {
    "Excel": ("xlsx", "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"),
    "CSV": ("csv", "text/csv"),
}


def export_context_id(documents: Sequence[ParsedDocument], options: ExportOptions, format_label: str) -> str:
    """Identity of an export request; a cached payload is reused only while this is unchanged."""
    parts = [f"{doc.file_name}@{doc.processed_at}" for doc in documents]
    parts.append(f"desc={options.include_description}")
    parts.append(f"fmt={format_label}")
    return "|".join(parts)


def _build_payload(documents: Sequence[ParsedDocument], options: ExportOptions, format_label: str):
    if format_label == "CSV":
        return build_production_csv(documents, options)
    return build_production_workbook(documents, options)


def _render_export_summary(documents: Sequence[ParsedDocument], include_description: bool) -> None:
    items = sum(len(doc.nodes_of_type(PositionType.POSITION)) for doc in documents)
    categories = sum(len(doc.nodes_of_type(PositionType.TITLE)) for doc in documents)
    lines = [
        f"• {len(documents)} file(s), {categories} categories, {items} items",
        "• Summary sheet plus one production sheet per file",
    ]
    if include_description:
        lines.append("• Detailed descriptions as comments")
    st.caption("\n\n".join(lines))


def render_export_controls(documents: Sequence[ParsedDocument]) -> None:
    """Render the export panel for the processed documents."""
    if not documents:
        return

    st.subheader("Export Produktionsliste")
    col1, col2 = st.columns([1, 2])
    with col1:
        format_label = st.radio(
            "Format",
            list(EXPORT_FORMATS.keys()),
            key=SessionStateKeys.EXPORT_FORMAT,
            horizontal=True,
        )
        include_description = st.checkbox(
            "Include descriptions",
            value=True,
            key=SessionStateKeys.EXPORT_INCLUDE_DESCRIPTION,
        )
    with col2:
        _render_export_summary(documents, include_description)

    options = ExportOptions(include_description=include_description)
    extension, mime_type = EXPORT_FORMATS[format_label]
    context_id = export_context_id(documents, options, format_label)
    state_key = f"{SessionStateKeys.EXPORT_CACHE_PREFIX}{extension}"

    state = st.session_state.get(state_key, {})
    if state.get("context") != context_id:
        state = {"context": context_id, "ready": False, "filename": "", "content": None}
        st.session_state[state_key] = state

    if state.get("ready"):
        downloaded = st.download_button(
            f"⬇️ Download {format_label}",
            data=state["content"],
            file_name=state["filename"],
            mime=mime_type,
            help=f"Start Download: {state['filename']}",
            key=f"export_download_{extension}",
        )
        if downloaded:
            del st.session_state[state_key]
            gc.collect()
    elif st.button(f"Export {extension.upper()}", key=f"export_generate_{extension}"):
        with st.spinner("Exporting..."):
            result = streamlit_safe_execute(
                "build_export",
                _build_payload,
                documents,
                options,
                format_label,
            )
        if result is not None:
            filename, content = result
            st.session_state[state_key] = {
                "context": context_id,
                "ready": True,
                "filename": filename,
                "content": content,
            }
            st.rerun()

    st.markdown(
        info_box(
            "Excel-Export erstellt eine Produktionsliste mit Spalten für Werkstatt (zugeschnitten, gebaut) "
            "und Zukauf (Produkt, Stückzahl, bestellt am, geliefert)."
        ),
        unsafe_allow_html=True,
    )
