"""
Centralised Session State Management for the GAEB Converter

Defines canonical session state keys and the per-session document list.
"""

from typing import List, Optional, Tuple, TYPE_CHECKING
import streamlit as st

if TYPE_CHECKING:
    from ..metadata.models import ParsedDocument


class SessionStateKeys:
    """Canonical session state key definitions."""

    # Core application state
    PARSED_DOCUMENTS = "parsed_documents"
    UPLOAD_ERRORS = "upload_errors"
    PROCESSED_UPLOADS = "processed_uploads"
    UPLOADER_NONCE = "uploader_nonce"

    # User preferences
    DEBUG_MODE = "debug_mode"
    EXPORT_INCLUDE_DESCRIPTION = "pref_include_description"
    EXPORT_FORMAT = "pref_export_format"

    # Export cache keys (dynamic patterns)
    EXPORT_CACHE_PREFIX = "export_"


class DocumentStore:
    """
    Ordered list of parsed documents for one session.

    Documents are keyed by file name: publishing a name that is already
    present drops the old entry and appends the new one. Published
    documents are never mutated.
    """

    def __init__(self, documents: Optional[List["ParsedDocument"]] = None):
        self._documents: List["ParsedDocument"] = list(documents or [])

    @property
    def documents(self) -> Tuple["ParsedDocument", ...]:
        return tuple(self._documents)

    def __len__(self) -> int:
        return len(self._documents)

    def __contains__(self, file_name: str) -> bool:
        return any(doc.file_name == file_name for doc in self._documents)

    def publish(self, document: "ParsedDocument") -> None:
        self._documents = [d for d in self._documents if d.file_name != document.file_name]
        self._documents.append(document)

    def remove(self, file_name: str) -> bool:
        before = len(self._documents)
        self._documents = [d for d in self._documents if d.file_name != file_name]
        return len(self._documents) != before

    def clear(self) -> None:
        self._documents = []


def get_document_store() -> DocumentStore:
    """Return the session's DocumentStore, creating it on first access."""
    store = st.session_state.get(SessionStateKeys.PARSED_DOCUMENTS)
    if store is None:
        store = DocumentStore()
        st.session_state[SessionStateKeys.PARSED_DOCUMENTS] = store
    return store


def clear_export_state() -> None:
    """Clear export-related cache keys."""
    keys_to_remove = [
        key for key in st.session_state.keys()
        if str(key).startswith(SessionStateKeys.EXPORT_CACHE_PREFIX)
    ]
    for key in keys_to_remove:
        del st.session_state[key]


def _reset_uploader() -> None:
    # A new widget key empties the file uploader on the next run
    st.session_state[SessionStateKeys.UPLOADER_NONCE] = st.session_state.get(SessionStateKeys.UPLOADER_NONCE, 0) + 1


def remove_document(file_name: str) -> bool:
    """Remove one document and forget its upload so the same file can be added again."""
    removed = get_document_store().remove(file_name)
    st.session_state.get(SessionStateKeys.PROCESSED_UPLOADS, {}).pop(file_name, None)
    _reset_uploader()
    clear_export_state()
    return removed


def clear_all_documents() -> None:
    """Drop every parsed document along with upload bookkeeping and export caches."""
    get_document_store().clear()
    for key in (SessionStateKeys.UPLOAD_ERRORS, SessionStateKeys.PROCESSED_UPLOADS):
        if key in st.session_state:
            del st.session_state[key]
    _reset_uploader()
    clear_export_state()
