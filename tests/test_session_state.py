"""
Session State Management Testing
Tests for session state keys, the document store and cleanup helpers.
"""

import unittest

import streamlit as st

from gaeb_toolkit.metadata.models import DocumentHeader, ParsedDocument, PositionNode, PositionType
from gaeb_toolkit.system.debug_output import is_debug_enabled
from gaeb_toolkit.system.session_state import (
    DocumentStore,
    SessionStateKeys,
    clear_all_documents,
    clear_export_state,
    get_document_store,
    remove_document,
)


def _document(file_name, title="Beton"):
    return ParsedDocument.build(
        DocumentHeader(),
        [PositionNode(id="1", title=title, type=PositionType.POSITION)],
        "raw",
        file_name,
    )


class TestDocumentStore(unittest.TestCase):
    def test_publish_appends_in_order(self):
        store = DocumentStore()
        store.publish(_document("a.d83"))
        store.publish(_document("b.x83"))
        self.assertEqual([d.file_name for d in store.documents], ["a.d83", "b.x83"])
        self.assertEqual(len(store), 2)
        self.assertIn("a.d83", store)

    def test_republishing_a_name_replaces_the_entry(self):
        store = DocumentStore()
        store.publish(_document("a.d83", title="Alt"))
        store.publish(_document("b.x83"))
        store.publish(_document("a.d83", title="Neu"))
        self.assertEqual([d.file_name for d in store.documents], ["b.x83", "a.d83"])
        self.assertEqual(store.documents[-1].positions[0].title, "Neu")

    def test_remove_and_clear(self):
        store = DocumentStore([_document("a.d83"), _document("b.x83")])
        self.assertTrue(store.remove("a.d83"))
        self.assertFalse(store.remove("a.d83"))
        store.clear()
        self.assertEqual(store.documents, ())

    def test_documents_view_is_immutable(self):
        store = DocumentStore([_document("a.d83")])
        self.assertIsInstance(store.documents, tuple)


class TestSessionHelpers(unittest.TestCase):
    def test_store_is_created_once_per_session(self):
        store = get_document_store()
        self.assertIs(get_document_store(), store)
        self.assertIs(st.session_state[SessionStateKeys.PARSED_DOCUMENTS], store)

    def test_clear_export_state_keeps_preferences(self):
        st.session_state["export_xlsx"] = {"ready": True}
        st.session_state["export_csv"] = {"ready": False}
        st.session_state[SessionStateKeys.EXPORT_INCLUDE_DESCRIPTION] = False
        clear_export_state()
        self.assertNotIn("export_xlsx", st.session_state)
        self.assertNotIn("export_csv", st.session_state)
        self.assertIn(SessionStateKeys.EXPORT_INCLUDE_DESCRIPTION, st.session_state)

    def test_clear_all_documents_resets_uploads(self):
        get_document_store().publish(_document("a.d83"))
        st.session_state[SessionStateKeys.PROCESSED_UPLOADS] = {"a.d83": "abc"}
        st.session_state[SessionStateKeys.UPLOAD_ERRORS] = ["boom"]
        st.session_state["export_xlsx"] = {"ready": True}

        clear_all_documents()

        self.assertEqual(len(get_document_store()), 0)
        self.assertNotIn(SessionStateKeys.PROCESSED_UPLOADS, st.session_state)
        self.assertNotIn(SessionStateKeys.UPLOAD_ERRORS, st.session_state)
        self.assertNotIn("export_xlsx", st.session_state)
        self.assertEqual(st.session_state[SessionStateKeys.UPLOADER_NONCE], 1)

    def test_remove_document_forgets_its_upload(self):
        store = get_document_store()
        store.publish(_document("a.d83"))
        store.publish(_document("b.x83"))
        st.session_state[SessionStateKeys.PROCESSED_UPLOADS] = {"a.d83": "abc", "b.x83": "def"}
        st.session_state["export_csv"] = {"ready": True}

        self.assertTrue(remove_document("a.d83"))

        self.assertEqual([d.file_name for d in store.documents], ["b.x83"])
        self.assertEqual(st.session_state[SessionStateKeys.PROCESSED_UPLOADS], {"b.x83": "def"})
        self.assertNotIn("export_csv", st.session_state)
        self.assertEqual(st.session_state[SessionStateKeys.UPLOADER_NONCE], 1)
        self.assertFalse(remove_document("a.d83"))

    def test_debug_flag_follows_session(self):
        self.assertFalse(is_debug_enabled())
        st.session_state[SessionStateKeys.DEBUG_MODE] = True
        self.assertTrue(is_debug_enabled())


if __name__ == "__main__":
    unittest.main()
