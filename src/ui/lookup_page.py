"""Applicant lookup page."""
import streamlit as st

from src.services.registration_service import find_registrations
from src.ui.app_state import get_store, navigate
from src.ui.html_utils import registration_card

LOOKUP_RESULTS_KEY = "lookup_results"


def render_lookup_page() -> None:
    """Let applicants find their own bookings by name and phone."""
    if st.button("← 뒤로", key="lookup_back"):
        st.session_state.pop(LOOKUP_RESULTS_KEY, None)
        navigate("home")

    st.markdown("## 신청 내역 조회")

    with st.form("lookup_form"):
        applicant = st.text_input("신청자명", placeholder="신청자명")
        phone = st.text_input("연락처", placeholder="연락처")
        submit = st.form_submit_button("조회하기", type="primary", use_container_width=True)

    if submit:
        st.session_state[LOOKUP_RESULTS_KEY] = find_registrations(get_store(), applicant, phone)

    results = st.session_state.get(LOOKUP_RESULTS_KEY)
    if results is None:
        return

    if not results:
        st.info("결과가 없습니다.")
        return

    for registration in results:
        st.markdown(registration_card(registration), unsafe_allow_html=True)
