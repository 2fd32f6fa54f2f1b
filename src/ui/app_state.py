"""Session-state helpers shared by the pages."""
import streamlit as st

from src.services.booking_store import BookingStore, open_store

STORE_KEY = "booking_store"


def get_store() -> BookingStore:
    """Booking store for this browser session, loaded from disk on first use."""
    if STORE_KEY not in st.session_state:
        st.session_state[STORE_KEY] = open_store()
    return st.session_state[STORE_KEY]


def refresh_store() -> BookingStore:
    """Store with the data file's latest contents; called once per script run."""
    store = get_store()
    store.refresh()
    return store


def navigate(page: str) -> None:
    """Switch page and rerun."""
    st.session_state.current_page = page
    st.rerun()
