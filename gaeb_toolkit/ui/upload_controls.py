"""
Upload handling for the Streamlit shell.

Each uploaded file is parsed once per distinct content. A revised file with a
previously seen name replaces the published document.
"""

import hashlib

import streamlit as st

from ..parsing import parse_upload
from ..system.debug_output import emit_debug, emit_error
from ..system.error_handling import ErrorHandler, GAEBConverterError
from ..system.session_state import SessionStateKeys, clear_export_state, get_document_store


def content_signature(content: bytes) -> str:
    return hashlib.md5(content).hexdigest()


def process_uploads(uploaded_files) -> int:
    """Parse new or changed uploads into the session store; returns how many were published."""
    store = get_document_store()
    processed = st.session_state.setdefault(SessionStateKeys.PROCESSED_UPLOADS, {})
    errors = st.session_state.setdefault(SessionStateKeys.UPLOAD_ERRORS, [])
    error_handler = ErrorHandler()
    published = 0

    for uploaded_file in uploaded_files:
        content = uploaded_file.getvalue()
        signature = content_signature(content)
        if processed.get(uploaded_file.name) == signature:
            continue
        processed[uploaded_file.name] = signature

        try:
            document = parse_upload(content, uploaded_file.name)
        except GAEBConverterError as e:
            error_handler.handle_error(e)
            emit_error("upload", f"{uploaded_file.name}: {e.message}")
            errors.append(e)
            continue

        store.publish(document)
        published += 1
        emit_debug("upload", f"{uploaded_file.name}: {document.total_positions} positions ({signature[:8]})")

    if published:
        clear_export_state()
    return published
