"""Admin panel UI: registrations, capacity, sync and export."""
import logging
import traceback

import streamlit as st

from src.models.industry import INDUSTRIES, Industry
from src.services.admin_service import (
    login_admin,
    logout_admin,
    is_admin_authenticated
)
from src.services.cloud_sync_service import get_sync_url, sync_with_remote
from src.services.export_service import build_csv, export_filename
from src.services.registration_service import (
    clear_capacity,
    delete_registration,
    registrations_for_industry,
    set_capacity,
    update_registration,
)
from src.services.sync_service import export_sync_code, import_sync_code
from src.ui.app_state import get_store
from src.ui.calendar_view import MODE_CAPACITY, render_calendar
from src.ui.html_utils import html_block, user_text
from src.utils.date_utils import format_date, format_timestamp
from src.utils.exceptions import DecodeError, SyncTransportError, ValidationError


logger = logging.getLogger(__name__)

ADMIN_MODE_KEY = "admin_mode"
ADMIN_TAB_KEY = "admin_industry"
CAPACITY_DATE_KEY = "capacity_edit_date"
SYNC_CODE_KEY = "admin_sync_code"


def _show_admin_exception(error: Exception, context: str) -> None:
    """Display error details in UI and log full traceback."""
    logger.exception("Admin panel error during %s", context)

    st.error(f"❌ {context} 실패: {error}")
    with st.expander("🔍 오류 상세"):
        st.code("".join(traceback.format_exception(type(error), error, error.__traceback__)))


def _set_feedback(level: str, message: str) -> None:
    st.session_state.admin_feedback = (level, message)


def _show_feedback() -> None:
    feedback = st.session_state.get("admin_feedback")
    if not feedback:
        return

    level, message = feedback
    if level == "success":
        st.success(message)
    elif level == "error":
        st.error(message)
    elif level == "warning":
        st.warning(message)
    else:
        st.info(message)

    del st.session_state["admin_feedback"]


def _inject_admin_styles():
    """Inject admin panel styles."""
    st.markdown(
        html_block(
            """
            <style>
            .admin-header {
                background: linear-gradient(135deg, #2563eb 0%, #7c3aed 100%);
                padding: 24px 32px;
                border-radius: 16px;
                margin-bottom: 24px;
            }
            .admin-title {
                color: #ffffff;
                font-size: 28px;
                font-weight: 700;
                margin: 0;
            }
            .admin-subtitle {
                color: rgba(255, 255, 255, 0.85);
                font-size: 14px;
                margin-top: 4px;
            }
            .login-title {
                font-size: 28px;
                font-weight: 700;
                text-align: center;
                margin-bottom: 8px;
            }
            .registration-date {
                color: #2563eb;
                font-weight: 700;
            }
            </style>
            """
        ),
        unsafe_allow_html=True,
    )


def render_login_page():
    """Render admin password gate."""
    _inject_admin_styles()

    with st.form("admin_login_form", clear_on_submit=True):
        st.markdown("<h1 class='login-title'>🔐 관리자 로그인</h1>", unsafe_allow_html=True)
        password = st.text_input("비밀번호", type="password", placeholder="비밀번호", key="admin_password_input")

        submit_col, cancel_col = st.columns(2, gap="small")
        with submit_col:
            submit = st.form_submit_button("접속", width='stretch', type="primary")
        with cancel_col:
            cancel = st.form_submit_button("돌아가기", width='stretch')

        if submit:
            success, message = login_admin(password)
            if success:
                st.rerun()
            else:
                st.error(f"❌ {message}")

        if cancel:
            st.session_state.current_page = "home"
            st.rerun()


def render_admin_panel():
    """Render admin management panel."""
    try:
        if not is_admin_authenticated():
            render_login_page()
            return

        _inject_admin_styles()
        _show_feedback()

        store = get_store()
        st.markdown(
            html_block(
                f"""
                <div class="admin-header">
                    <h1 class="admin-title">📊 신청 관리 센터</h1>
                    <div class="admin-subtitle">총 {len(store.registrations)}건 / PC·모바일 통합 관리</div>
                </div>
                """
            ),
            unsafe_allow_html=True,
        )

        col1, col2, col3, col4, col5 = st.columns(5, gap="small")
        with col1:
            if st.button("📋 신청 목록", width='stretch'):
                st.session_state[ADMIN_MODE_KEY] = "list"
        with col2:
            if st.button("🗓️ 정원 설정", width='stretch'):
                st.session_state[ADMIN_MODE_KEY] = "capacity"
        with col3:
            if st.button("🔄 기기 연동", width='stretch'):
                st.session_state[ADMIN_MODE_KEY] = "sync"
        with col4:
            st.download_button(
                "📥 엑셀(CSV) 저장",
                data=build_csv(store.registrations),
                file_name=export_filename(),
                mime="text/csv",
                width='stretch',
            )
        with col5:
            if st.button("🚪 로그아웃", width='stretch'):
                logout_admin()
                st.session_state.current_page = "home"
                st.rerun()

        mode = st.session_state.get(ADMIN_MODE_KEY, "list")
        if mode == "capacity":
            render_capacity_editor()
        elif mode == "sync":
            render_sync_panel()
        else:
            render_registration_list()
    except Exception as error:
        _show_admin_exception(error, "관리자 화면 로드")


def _industry_selector(key: str) -> Industry:
    """Radio of the four industries, remembered across pages."""
    current = st.session_state.get(ADMIN_TAB_KEY, INDUSTRIES[0])
    industry = st.radio(
        "산업군",
        options=INDUSTRIES,
        index=INDUSTRIES.index(current),
        format_func=lambda i: i.value,
        horizontal=True,
        key=key,
        label_visibility="collapsed",
    )
    st.session_state[ADMIN_TAB_KEY] = industry
    return industry


def render_registration_list():
    """Registrations of the selected industry, newest first, with edit/delete."""
    store = get_store()
    industry = _industry_selector("admin_list_industry")
    registrations = registrations_for_industry(store, industry)

    if not registrations:
        st.info("신청 내역이 없습니다.")
        return

    header = st.columns([1.2, 2, 1.2, 1.6, 1], gap="small")
    for col, label in zip(header, ["교육일자", "회사명", "신청자", "연락처", "작업"]):
        col.markdown(f"**{label}**")

    for registration in registrations:
        col1, col2, col3, col4, col5 = st.columns([1.2, 2, 1.2, 1.6, 1], gap="small")
        with col1:
            st.markdown(
                f"<span class='registration-date'>{format_date(registration.date)}</span>",
                unsafe_allow_html=True,
            )
        with col2:
            st.markdown(user_text(registration.company))
            st.caption(format_timestamp(registration.created_at, "%Y-%m-%d %H:%M"))
        with col3:
            st.text(registration.applicant)
        with col4:
            st.text(registration.phone)
        with col5:
            btn_col1, btn_col2 = st.columns(2, gap="small")
            with btn_col1:
                if st.button("✏️", key=f"edit_{registration.id}", help="수정"):
                    st.session_state.admin_action = "edit"
                    st.session_state.edit_registration_id = registration.id
            with btn_col2:
                if st.button("🗑️", key=f"delete_{registration.id}", help="삭제"):
                    st.session_state.admin_action = "delete"
                    st.session_state.delete_registration_id = registration.id

    if st.session_state.get("admin_action") == "edit":
        render_edit_form()
    elif st.session_state.get("admin_action") == "delete":
        render_delete_confirmation()


def render_edit_form():
    """Edit company/applicant/phone of one registration."""
    store = get_store()
    registration_id = st.session_state.get("edit_registration_id")
    registration = store.get(registration_id) if registration_id else None

    if registration is None:
        st.session_state.admin_action = None
        st.session_state.pop("edit_registration_id", None)
        return

    st.markdown("### 신청 정보 수정")
    st.caption(f"{format_date(registration.date)} · {registration.industry.value}")

    with st.form(f"edit_form_{registration.id}"):
        company = st.text_input("회사명", value=registration.company, max_chars=50)
        applicant = st.text_input("신청자명", value=registration.applicant, max_chars=50)
        phone = st.text_input("연락처", value=registration.phone, max_chars=50)

        cancel_col, save_col = st.columns(2, gap="small")
        with cancel_col:
            cancel = st.form_submit_button("취소", width='stretch')
        with save_col:
            save = st.form_submit_button("저장", type="primary", width='stretch')

    if cancel:
        st.session_state.admin_action = None
        st.session_state.pop("edit_registration_id", None)
        st.rerun()

    if save:
        try:
            update_registration(store, registration.id, company, applicant, phone)
        except ValidationError as e:
            st.error(f"❌ {e}")
            return

        _set_feedback("success", "✅ 수정되었습니다")
        st.session_state.admin_action = None
        st.session_state.pop("edit_registration_id", None)
        st.rerun()


def render_delete_confirmation():
    """Confirm before deleting a registration."""
    store = get_store()
    registration_id = st.session_state.get("delete_registration_id")
    registration = store.get(registration_id) if registration_id else None

    if registration is None:
        st.session_state.admin_action = None
        st.session_state.pop("delete_registration_id", None)
        return

    st.error("⚠️ 삭제한 신청은 되돌릴 수 없습니다. 삭제하시겠습니까?")
    st.markdown(f"**{user_text(registration.company)}** · {user_text(registration.applicant)}")
    st.caption(f"{format_date(registration.date)} · {registration.industry.value}")

    confirm_col, cancel_col = st.columns(2, gap="small")
    with confirm_col:
        if st.button("✅ 삭제", type="primary", width='stretch', key=f"confirm_delete_{registration.id}"):
            delete_registration(store, registration.id)
            _set_feedback("success", f"🗑️ {registration.applicant} 님의 신청을 삭제했습니다")
            st.session_state.admin_action = None
            st.session_state.pop("delete_registration_id", None)
            st.rerun()
    with cancel_col:
        if st.button("❌ 취소", width='stretch', key=f"cancel_delete_{registration.id}"):
            st.session_state.admin_action = None
            st.session_state.pop("delete_registration_id", None)
            st.rerun()


def render_capacity_editor():
    """Capacity calendar; clicking a day opens a numeric editor for it."""
    store = get_store()
    industry = _industry_selector("admin_capacity_industry")

    picked = render_calendar(store, industry, MODE_CAPACITY)
    if picked is not None:
        st.session_state[CAPACITY_DATE_KEY] = picked

    session_date = st.session_state.get(CAPACITY_DATE_KEY)
    if session_date is None:
        st.caption("날짜를 눌러 정원을 수정하세요.")
        return

    booked = store.booked_count(session_date, industry)
    st.markdown(f"### {format_date(session_date)} 정원")
    st.caption(f"{industry.value} · 현재 신청 {booked}명")

    with st.form(f"capacity_form_{industry.name}"):
        total = st.number_input(
            "정원",
            min_value=0,
            step=1,
            value=store.total_capacity(session_date, industry),
        )
        save_col, reset_col = st.columns(2, gap="small")
        with save_col:
            save = st.form_submit_button("저장", type="primary", width='stretch')
        with reset_col:
            reset = st.form_submit_button("기본값으로", width='stretch')

    if save:
        try:
            set_capacity(store, industry, session_date, int(total))
        except ValidationError as e:
            st.error(f"❌ {e}")
            return
        if int(total) < booked:
            _set_feedback("warning", f"⚠️ 정원이 현재 신청 인원({booked}명)보다 적습니다")
        else:
            _set_feedback("success", f"✅ {format_date(session_date)} 정원을 {int(total)}명으로 저장했습니다")
        st.session_state.pop(CAPACITY_DATE_KEY, None)
        st.rerun()

    if reset:
        clear_capacity(store, industry, session_date)
        _set_feedback("success", "✅ 기본 정원으로 되돌렸습니다")
        st.session_state.pop(CAPACITY_DATE_KEY, None)
        st.rerun()


def render_sync_panel():
    """Export/import sync codes and the optional shared-document sync."""
    store = get_store()

    st.markdown("### 내 연동 코드")
    st.caption("다른 기기의 관리자 화면에서 이 코드를 붙여넣으면 데이터가 합쳐집니다.")
    if st.button("연동 코드 생성하기", type="primary", width='stretch'):
        st.session_state[SYNC_CODE_KEY] = export_sync_code(store)

    code = st.session_state.get(SYNC_CODE_KEY)
    if code:
        st.code(code, language=None, wrap_lines=True)

    st.divider()
    st.markdown("### 상대 기기 코드 입력")
    with st.form("sync_import_form", clear_on_submit=True):
        foreign_code = st.text_area("연동 코드", placeholder="코드 붙여넣기", height=120)
        submit = st.form_submit_button("데이터 병합하기", type="primary", width='stretch')

    if submit:
        try:
            added = import_sync_code(store, foreign_code)
        except DecodeError as e:
            st.error(f"❌ {e}")
        else:
            st.session_state.pop(SYNC_CODE_KEY, None)
            _set_feedback("success", f"✅ 동기화 성공! 새 내역 {added}건이 추가되었습니다.")
            st.rerun()

    sync_url = get_sync_url()
    if not sync_url:
        return

    st.divider()
    st.markdown("### 서버 동기화")
    st.caption("공유 저장소의 데이터와 합친 뒤 결과를 다시 저장합니다.")
    if st.button("☁️ 지금 동기화", width='stretch'):
        with st.spinner("동기화 중..."):
            try:
                added = sync_with_remote(store, sync_url)
            except (SyncTransportError, DecodeError) as e:
                st.error(f"❌ {e}")
                return
        _set_feedback("success", f"✅ 서버 동기화 완료, 새 내역 {added}건")
        st.rerun()
