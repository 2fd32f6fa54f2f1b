"""Unit tests for admin_service."""
import pytest
from unittest.mock import patch

from src.services.admin_service import (
    authenticate_admin,
    is_admin_authenticated,
    login_admin,
    logout_admin
)


class TestAuthenticateAdmin:
    """Test authenticate_admin function."""

    def test_authenticate_with_correct_password(self, monkeypatch):
        """Authentication succeeds with the configured password."""
        monkeypatch.setenv("ADMIN_PASSWORD", "testpass")

        assert authenticate_admin("testpass") is True

    def test_authenticate_with_wrong_password(self, monkeypatch):
        """Authentication fails with wrong password."""
        monkeypatch.setenv("ADMIN_PASSWORD", "testpass")

        assert authenticate_admin("wrongpass") is False

    def test_authenticate_with_empty_password(self, monkeypatch):
        """An empty password never authenticates."""
        monkeypatch.setenv("ADMIN_PASSWORD", "testpass")

        assert authenticate_admin("") is False

    def test_authenticate_uses_default_password(self, monkeypatch):
        """Without configuration the default password is 1234."""
        monkeypatch.delenv("ADMIN_PASSWORD", raising=False)

        with patch("src.services.admin_service.get_setting", side_effect=lambda key, default=None: default):
            assert authenticate_admin("1234") is True
            assert authenticate_admin("4321") is False


class TestIsAdminAuthenticated:
    """Test is_admin_authenticated function."""

    @patch('src.services.admin_service.st')
    def test_returns_true_when_authenticated(self, mock_st):
        """Test returns True when admin is authenticated."""
        mock_st.session_state.get.return_value = True

        result = is_admin_authenticated()
        assert result is True
        mock_st.session_state.get.assert_called_once_with("admin_authenticated", False)

    @patch('src.services.admin_service.st')
    def test_returns_false_when_not_authenticated(self, mock_st):
        """Test returns False when admin is not authenticated."""
        mock_st.session_state.get.return_value = False

        assert is_admin_authenticated() is False


class TestLoginAdmin:
    """Test login_admin function."""

    @patch('src.services.admin_service.authenticate_admin')
    @patch('src.services.admin_service.st')
    def test_login_success(self, mock_st, mock_auth):
        """Test successful login."""
        mock_auth.return_value = True
        mock_st.session_state = {}

        success, message = login_admin("1234")

        assert success is True
        assert message == "로그인되었습니다"
        assert mock_st.session_state["admin_authenticated"] is True

    @patch('src.services.admin_service.authenticate_admin')
    @patch('src.services.admin_service.st')
    def test_login_failure(self, mock_st, mock_auth):
        """Test failed login."""
        mock_auth.return_value = False
        mock_st.session_state = {}

        success, message = login_admin("0000")

        assert success is False
        assert message == "비밀번호가 올바르지 않습니다"
        assert "admin_authenticated" not in mock_st.session_state


class TestLogoutAdmin:
    """Test logout_admin function."""

    @patch('src.services.admin_service.st')
    def test_logout_clears_session_state(self, mock_st):
        """Test logout clears admin_authenticated from session state."""
        mock_st.session_state = {"admin_authenticated": True}

        logout_admin()

        assert "admin_authenticated" not in mock_st.session_state

    @patch('src.services.admin_service.st')
    def test_logout_when_not_authenticated(self, mock_st):
        """Test logout works even when not authenticated."""
        mock_st.session_state = {}

        logout_admin()

        assert "admin_authenticated" not in mock_st.session_state
