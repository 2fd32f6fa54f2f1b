"""
안전교육 신청 시스템 메인 애플리케이션
Safety Training Booking
"""
import logging
import streamlit as st

from src.ui.dashboard import render_home, render_apply_page
from src.ui.lookup_page import render_lookup_page
from src.ui.admin_panel import render_admin_panel
from src.ui.app_state import refresh_store

logger = logging.getLogger(__name__)


# Streamlit 페이지 설정
st.set_page_config(
    page_title="안전교육 신청 시스템",
    page_icon="🦺",
    layout="wide",
    initial_sidebar_state="collapsed"
)


def initialize_session_state():
    """session state 기본값을 초기화합니다."""
    if "current_page" not in st.session_state:
        st.session_state.current_page = "home"

    if "selected_industry" not in st.session_state:
        st.session_state.selected_industry = None

    if "selected_date" not in st.session_state:
        st.session_state.selected_date = None

    if "admin_action" not in st.session_state:
        st.session_state.admin_action = None

    # 다른 세션이 저장한 신청 내역을 매 실행마다 다시 읽는다
    refresh_store()


def apply_custom_css():
    """사용자 정의 CSS 스타일을 적용합니다."""
    st.markdown("""
        <style>
        .stApp {
            background: #f8fafc;
        }

        /* Streamlit 기본 요소 숨기기 */
        #MainMenu {visibility: hidden;}
        footer {visibility: hidden;}
        header, [data-testid="stHeader"] {
            visibility: hidden;
            height: 0;
        }

        [data-testid="stAppViewContainer"] > .main .block-container {
            padding-top: 1.5rem;
            max-width: 1100px;
        }

        /* 버튼 */
        .stButton > button {
            border-radius: 12px;
            font-weight: 600;
            transition: all 0.3s;
            white-space: pre-line;
        }

        .stButton > button:hover {
            transform: translateY(-2px);
            box-shadow: 0 8px 16px rgba(0, 0, 0, 0.12);
        }

        .stButton > button[kind="primary"] {
            background: #2563eb;
            color: white;
            border: none;
        }

        /* 마감·지난 날짜 */
        .stButton > button:disabled {
            background: #f9fafb;
            color: #d1d5db;
        }

        /* 입력창 */
        .stTextInput > div > div > input {
            border-radius: 8px;
        }
        </style>
    """, unsafe_allow_html=True)


def render_navigation():
    """상단 내비게이션을 렌더링합니다."""
    nav_col1, _, nav_col3 = st.columns([1, 4, 1], gap="small")

    with nav_col1:
        if st.button("🏠 처음으로", use_container_width=True, key="nav_home"):
            st.session_state.current_page = "home"
            st.session_state.selected_date = None

    with nav_col3:
        if st.button("🔒 관리자", use_container_width=True, key="nav_admin"):
            st.session_state.current_page = "admin"


def render_current_page():
    """현재 페이지 상태에 맞는 화면을 렌더링합니다."""
    try:
        if st.session_state.current_page == "home":
            render_home()

        elif st.session_state.current_page == "apply":
            render_apply_page()

        elif st.session_state.current_page == "lookup":
            render_lookup_page()

        elif st.session_state.current_page == "admin":
            render_admin_panel()

        else:
            st.error(f"알 수 없는 페이지입니다: {st.session_state.current_page}")
            if st.button("처음으로"):
                st.session_state.current_page = "home"
                st.rerun()

    except Exception as e:
        # 오류 경계
        logger.exception("Unhandled exception while rendering page")
        st.error("오류가 발생했습니다. 잠시 후 다시 시도해 주세요")

        with st.expander("🔍 오류 상세"):
            st.code(str(e))

        if st.button("처음으로"):
            st.session_state.current_page = "home"
            st.session_state.selected_date = None
            st.rerun()


def main():
    """애플리케이션 진입점."""
    try:
        initialize_session_state()
        apply_custom_css()

        render_navigation()
        render_current_page()
    except Exception as e:
        logger.exception("Unhandled exception during app execution")
        st.error("애플리케이션 오류가 발생했습니다. 페이지를 새로고침해 주세요")
        st.code(str(e))

        if st.button("🔄 새로고침"):
            st.session_state.clear()
            st.rerun()


if __name__ == "__main__":
    main()
