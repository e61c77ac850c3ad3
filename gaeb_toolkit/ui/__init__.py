"""Streamlit rendering helpers."""

from .export_controls import render_export_controls
from .upload_controls import process_uploads
from .viewer import render_documents

__all__ = ["process_uploads", "render_export_controls", "render_documents"]
