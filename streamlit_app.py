import streamlit as st
from gaeb_toolkit.parsing import ACCEPTED_EXTENSIONS
from gaeb_toolkit.system.error_handling import display_error_to_user
from gaeb_toolkit.system.session_state import SessionStateKeys, clear_all_documents, get_document_store, remove_document
from gaeb_toolkit.system.version import APP_FULL_NAME, APP_DESCRIPTION, __version__
from gaeb_toolkit.ui import process_uploads, render_documents, render_export_controls
from gaeb_toolkit.ui.theme import info_box, success_box


# Page configuration
st.set_page_config(
    page_title=APP_FULL_NAME,
    page_icon="📐",
    layout="wide"
)


# Main app
def main():
    with st.sidebar:
        st.markdown(f"**{APP_FULL_NAME}**")
        st.caption(f"v{__version__}")
        st.toggle("Debug mode", key=SessionStateKeys.DEBUG_MODE)
        store = get_document_store()
        for document in store.documents:
            name_col, remove_col = st.columns([4, 1])
            name_col.caption(document.file_name)
            if remove_col.button("✖", key=f"remove_{document.file_name}", help=f"Remove {document.file_name}"):
                remove_document(document.file_name)
                st.rerun()
        if st.button("Clear all files", disabled=len(store) == 0):
            clear_all_documents()
            st.rerun()

    st.title("GAEB Produktionsliste")
    st.caption(APP_DESCRIPTION)

    uploader_key = f"gaeb_uploader_{st.session_state.get(SessionStateKeys.UPLOADER_NONCE, 0)}"
    uploaded_files = st.file_uploader(
        "Choose GAEB files",
        type=[ext.lstrip(".") for ext in ACCEPTED_EXTENSIONS],
        accept_multiple_files=True,
        help="GAEB DA XML (.x83) or legacy text exports (.d83, .p83, .gaeb)",
        key=uploader_key,
    )

    if uploaded_files:
        with st.spinner("Processing GAEB files..."):
            published = process_uploads(uploaded_files)
        if published:
            st.toast(f"{published} file(s) processed", icon="📁")

    for error in st.session_state.get(SessionStateKeys.UPLOAD_ERRORS, []):
        display_error_to_user(error, show_technical_details=True)

    documents = get_document_store().documents
    if not documents:
        st.markdown(info_box("📤 Upload one or more GAEB files to begin"), unsafe_allow_html=True)
        return

    st.markdown(success_box(f"✅ {len(documents)} file(s) ready for export"), unsafe_allow_html=True)
    render_export_controls(documents)
    st.divider()
    render_documents(documents)


if __name__ == "__main__":
    main()
