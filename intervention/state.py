"""
Streamlit hosting for InterventionSession.

================================================================================
HOW THIS SCRIPT WORKS (for studying)
================================================================================

Streamlit re-runs the page script top to bottom on every interaction, so a
session object created in the script body would be rebuilt (and its model
reloaded) each time. This module keeps exactly one InterventionSession per
browser session in st.session_state instead. Two browser tabs get two
sessions; nothing is shared between them.

  FUNCTIONS:
  - get_session(config=None): return this browser session's
    InterventionSession, creating it on first use. Does not initialize it;
    call .initialize() once the page is ready.
  - end_session(): destroy the stored session and remove it.

  IMPLEMENTATION NOTE: streamlit is imported inside each function so code
  that imports state.py does not break if Streamlit is not installed (e.g.
  in the review tool). Without Streamlit, get_session() hands back a fresh
  session each call and end_session() does nothing.
"""
from intervention.config import DetectionConfig
from intervention.constants import KEY_INTERVENTION_SESSION
from intervention.session import InterventionSession


def get_session(config: DetectionConfig | None = None) -> InterventionSession:
    """Return the InterventionSession for this browser session."""
    try:
        import streamlit as st
        session = st.session_state.get(KEY_INTERVENTION_SESSION)
        if session is None:
            session = InterventionSession(config)
            st.session_state[KEY_INTERVENTION_SESSION] = session
        return session
    except Exception:
        return InterventionSession(config)


def end_session() -> None:
    """Destroy and forget this browser session's InterventionSession."""
    try:
        import streamlit as st
        session = st.session_state.get(KEY_INTERVENTION_SESSION)
        if session is not None:
            session.destroy()
            del st.session_state[KEY_INTERVENTION_SESSION]
    except Exception:
        pass
