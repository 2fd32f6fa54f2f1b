"""Tests for HTML snippet helpers."""
from datetime import date

from src.models.industry import Industry
from src.models.registration import Registration
from src.ui.html_utils import html_block, registration_card, user_text


class TestHtmlBlock:
    """Tests for html_block."""

    def test_removes_indentation(self):
        html = html_block(
            """
                <div>
                    <span>x</span>
                </div>
            """
        )
        assert html == "<div>\n<span>x</span>\n</div>"


class TestUserText:
    """Tests for user_text escaping."""

    def test_escapes_markup(self):
        assert user_text('<b>"A&B"</b>') == "&lt;b&gt;&quot;A&amp;B&quot;&lt;/b&gt;"

    def test_none_is_empty(self):
        assert user_text(None) == ""


class TestRegistrationCard:
    """Tests for the lookup result card."""

    def test_card_contents(self):
        registration = Registration(
            id="r1",
            date=date(2024, 6, 1),
            industry=Industry.CONSTRUCTION,
            company="<script>",
            applicant="홍길동",
            phone="010-1234-5678",
            created_at=1717200000000,
        )

        html = registration_card(registration)

        assert "2024-06-01 (건설업)" in html
        assert "&lt;script&gt;" in html
        assert "<script>" not in html
        assert "홍길동 | 010-1234-5678" in html
        assert not any(line.startswith("    ") for line in html.splitlines())
