"""
Pytest configuration shared by all test modules.
"""

import pytest
import streamlit as st


@pytest.fixture(autouse=True)
def isolated_session_state(monkeypatch):
    """
    Give every test its own plain-dict Streamlit session state.

    Code under test reads ``st.session_state`` at call time, so a dict keeps
    tests independent of a running Streamlit script context.
    """
    state = {}
    monkeypatch.setattr(st, "session_state", state)
    return state
