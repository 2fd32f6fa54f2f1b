"""Admin service for the password gate and session state."""
import streamlit as st
from typing import Tuple

from src.utils.env import get_setting

DEFAULT_ADMIN_PASSWORD = "1234"


def authenticate_admin(password: str) -> bool:
    """
    Check the admin password.

    Args:
        password: Password typed into the admin gate

    Returns:
        True if it equals $ADMIN_PASSWORD (default "1234")

    Security:
        - Plain equality; this is a UI gate, not an access-control boundary
        - Single shared password, no user accounts
    """
    if not password:
        return False
    return password == get_setting("ADMIN_PASSWORD", DEFAULT_ADMIN_PASSWORD)


def is_admin_authenticated() -> bool:
    """
    Check if admin is authenticated in current session.

    Returns:
        True if st.session_state['admin_authenticated'] is True
    """
    return st.session_state.get("admin_authenticated", False)


def login_admin(password: str) -> Tuple[bool, str]:
    """
    Log in admin user.

    Returns:
        Tuple of (success: bool, message: str)
        - (True, "로그인되었습니다") on success
        - (False, "비밀번호가 올바르지 않습니다") on failure
    """
    if authenticate_admin(password):
        st.session_state["admin_authenticated"] = True
        return True, "로그인되었습니다"
    else:
        return False, "비밀번호가 올바르지 않습니다"


def logout_admin() -> None:
    """Clear the admin flag from session state."""
    if "admin_authenticated" in st.session_state:
        del st.session_state["admin_authenticated"]
