"""Month calendar used for picking session dates and editing capacity."""
import calendar
from datetime import date
from typing import List, Optional, Tuple

import streamlit as st

from src.models.industry import Industry
from src.services.booking_store import BookingStore
from src.utils.date_utils import format_date

WEEKDAY_LABELS = ["일", "월", "화", "수", "목", "금", "토"]

MODE_APPLY = "apply"
MODE_CAPACITY = "capacity"

CALENDAR_MONTH_KEY = "calendar_month"


def month_grid(year: int, month: int) -> List[List[Optional[date]]]:
    """
    Weeks of a month, Sunday first.

    Days outside the month are None so every week has seven cells.
    """
    cal = calendar.Calendar(firstweekday=6)
    return [
        [date(year, month, day) if day else None for day in week]
        for week in cal.monthdayscalendar(year, month)
    ]


def shift_month(year: int, month: int, delta: int) -> Tuple[int, int]:
    """Move a (year, month) pair by delta months."""
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def cell_label(day: date, remaining: int, total: int, mode: str) -> str:
    """Button label for one calendar day."""
    if mode == MODE_CAPACITY:
        return f"{day.day}\n정원 {total}"
    if remaining == 0:
        return f"{day.day}\n마감"
    return f"{day.day}\n{remaining}/{total}"


def _current_month() -> Tuple[int, int]:
    if CALENDAR_MONTH_KEY not in st.session_state:
        today = date.today()
        st.session_state[CALENDAR_MONTH_KEY] = (today.year, today.month)
    return st.session_state[CALENDAR_MONTH_KEY]


def reset_calendar_month() -> None:
    """Jump the calendar back to the current month."""
    st.session_state.pop(CALENDAR_MONTH_KEY, None)


def render_calendar(store: BookingStore, industry: Industry, mode: str) -> Optional[date]:
    """
    Render the month grid for an industry.

    In apply mode past and full days are disabled. In capacity mode
    every day is clickable and shows its total seats.

    Returns:
        The day clicked during this run, if any
    """
    year, month = _current_month()

    prev_col, title_col, next_col = st.columns([1, 4, 1], gap="small")
    with prev_col:
        if st.button("◀", key=f"cal_prev_{mode}", use_container_width=True):
            st.session_state[CALENDAR_MONTH_KEY] = shift_month(year, month, -1)
            st.rerun()
    with title_col:
        subtitle = f"{industry.value} 정원 수정" if mode == MODE_CAPACITY else industry.value
        st.markdown(
            f"<div style='text-align:center'><h3 style='margin:0'>{year}년 {month}월</h3>"
            f"<span style='color:#2563eb;font-weight:700;font-size:0.8rem'>{subtitle}</span></div>",
            unsafe_allow_html=True,
        )
    with next_col:
        if st.button("▶", key=f"cal_next_{mode}", use_container_width=True):
            st.session_state[CALENDAR_MONTH_KEY] = shift_month(year, month, 1)
            st.rerun()

    header_cols = st.columns(7, gap="small")
    for col, label in zip(header_cols, WEEKDAY_LABELS):
        col.markdown(
            f"<div style='text-align:center;color:#9ca3af;font-weight:700'>{label}</div>",
            unsafe_allow_html=True,
        )

    clicked: Optional[date] = None
    for week in month_grid(year, month):
        cols = st.columns(7, gap="small")
        for col, day in zip(cols, week):
            if day is None:
                continue
            remaining = store.remaining(day, industry)
            total = store.total_capacity(day, industry)
            disabled = mode == MODE_APPLY and (store.is_past(day) or remaining == 0)
            with col:
                if st.button(
                    cell_label(day, remaining, total, mode),
                    key=f"cal_{mode}_{industry.name}_{format_date(day)}",
                    disabled=disabled,
                    use_container_width=True,
                ):
                    clicked = day

    return clicked
