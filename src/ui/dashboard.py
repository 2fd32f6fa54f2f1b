"""Home page and the apply flow (industry → date → form)."""
import logging

import streamlit as st

from src.models.industry import INDUSTRIES, Industry
from src.services.registration_service import register
from src.ui.app_state import get_store, navigate
from src.ui.calendar_view import MODE_APPLY, render_calendar, reset_calendar_month
from src.ui.html_utils import html_block
from src.utils.date_utils import format_date
from src.utils.exceptions import CapacityExceededError, ValidationError

logger = logging.getLogger(__name__)

SELECTED_INDUSTRY_KEY = "selected_industry"
SELECTED_DATE_KEY = "selected_date"
FEEDBACK_KEY = "dashboard_feedback"


def _show_feedback() -> None:
    """Show and clear a message left by the previous run."""
    feedback = st.session_state.pop(FEEDBACK_KEY, None)
    if feedback:
        st.success(feedback)


def _select_industry(industry: Industry) -> None:
    st.session_state[SELECTED_INDUSTRY_KEY] = industry
    st.session_state[SELECTED_DATE_KEY] = None
    reset_calendar_month()
    navigate("apply")


def render_home() -> None:
    """Render the landing page with the four industry cards."""
    _show_feedback()

    st.markdown(
        html_block(
            """
            <div style="text-align:center; margin: 24px 0 40px 0;">
                <h1 style="margin-bottom:8px;">안전교육 신청 시스템</h1>
                <p style="color:#6b7280;">산업군을 선택하여 교육을 신청하세요.</p>
            </div>
            """
        ),
        unsafe_allow_html=True,
    )

    cols = st.columns(len(INDUSTRIES), gap="medium")
    for col, industry in zip(cols, INDUSTRIES):
        with col:
            if st.button(
                f"🏗️ {industry.value}",
                key=f"home_industry_{industry.name}",
                use_container_width=True,
            ):
                _select_industry(industry)

    st.markdown("<div style='margin-bottom: 32px;'></div>", unsafe_allow_html=True)
    if st.button("🔎 교육신청 조회하기", key="home_lookup", use_container_width=True):
        navigate("lookup")


def _render_application_form(industry: Industry) -> None:
    """Form for the chosen date; registers on submit."""
    store = get_store()
    session_date = st.session_state[SELECTED_DATE_KEY]

    if st.button("← 날짜 변경", key="apply_change_date"):
        st.session_state[SELECTED_DATE_KEY] = None
        st.rerun()

    st.markdown(f"### {format_date(session_date)} 신청")
    st.caption(f"{industry.value} (잔여 {store.remaining(session_date, industry)}석)")

    with st.form("application_form", clear_on_submit=False):
        company = st.text_input("회사명", placeholder="회사명", max_chars=50)
        applicant = st.text_input("신청자명", placeholder="신청자명", max_chars=50)
        phone = st.text_input("연락처", placeholder="010-0000-0000", max_chars=50)
        submit = st.form_submit_button("신청 완료", type="primary", use_container_width=True)

    if not submit:
        return

    try:
        registration = register(store, session_date, industry, company, applicant, phone)
    except (ValidationError, CapacityExceededError) as e:
        st.error(f"❌ {e}")
        return

    logger.info("Registration %s booked for %s %s", registration.id, industry.value, session_date)
    st.session_state[FEEDBACK_KEY] = "🎉 신청이 완료되었습니다."
    st.session_state[SELECTED_DATE_KEY] = None
    navigate("home")


def render_apply_page() -> None:
    """Render the calendar, or the form once a date has been picked."""
    industry = st.session_state.get(SELECTED_INDUSTRY_KEY)
    if industry is None:
        st.error("산업군을 먼저 선택해 주세요")
        if st.button("처음으로"):
            navigate("home")
        return

    if st.session_state.get(SELECTED_DATE_KEY):
        _render_application_form(industry)
        return

    if st.button("← 처음으로", key="apply_back_home"):
        navigate("home")

    picked = render_calendar(get_store(), industry, MODE_APPLY)
    if picked is not None:
        st.session_state[SELECTED_DATE_KEY] = picked
        st.rerun()
