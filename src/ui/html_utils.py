"""HTML snippets rendered through st.markdown(unsafe_allow_html=True)."""
from html import escape
from textwrap import dedent

from src.models.registration import Registration
from src.utils.date_utils import format_date


def html_block(template: str) -> str:
    """
    Flatten indented HTML so Streamlit's Markdown renderer does not turn
    lines with four or more leading spaces into code blocks.
    """
    lines = dedent(template).splitlines()
    return "\n".join(line.lstrip() for line in lines).strip()


def user_text(value: str) -> str:
    """Escape applicant-entered text for embedding in HTML."""
    return escape(value or "", quote=True)


def registration_card(registration: Registration) -> str:
    """Card showing one booking in the applicant lookup results."""
    return html_block(
        f"""
        <div style="padding:16px; background:#eff6ff; border:1px solid #dbeafe;
                    border-radius:12px; margin-bottom:12px;">
            <div style="font-size:0.75rem; color:#2563eb; font-weight:700;">
                {format_date(registration.date)} ({registration.industry.value})
            </div>
            <div style="font-weight:700;">{user_text(registration.company)}</div>
            <div style="font-size:0.875rem;">{user_text(registration.applicant)} | {user_text(registration.phone)}</div>
        </div>
        """
    )
