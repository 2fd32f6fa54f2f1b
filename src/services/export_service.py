"""CSV export of registrations for spreadsheet use."""
from datetime import date
from typing import Iterable, Optional

import pandas as pd

from src.models.industry import INDUSTRIES
from src.models.registration import Registration
from src.utils.date_utils import format_date, format_timestamp

CSV_COLUMNS = ["산업군", "교육일자", "회사명", "신청자", "연락처", "신청일시"]

# BOM so Excel opens the Korean text as UTF-8
CSV_ENCODING = "utf-8-sig"


def build_csv(registrations: Iterable[Registration]) -> bytes:
    """
    Render registrations as CSV bytes.

    Rows are ordered by industry (in menu order), then session date,
    then creation time. The header row is always present.
    """
    industry_order = {industry: index for index, industry in enumerate(INDUSTRIES)}
    ordered = sorted(
        registrations,
        key=lambda r: (industry_order[r.industry], r.date, r.created_at),
    )

    rows = [
        [
            r.industry.value,
            format_date(r.date),
            r.company,
            r.applicant,
            r.phone,
            format_timestamp(r.created_at),
        ]
        for r in ordered
    ]
    df = pd.DataFrame(rows, columns=CSV_COLUMNS)
    return df.to_csv(index=False).encode(CSV_ENCODING)


def export_filename(today: Optional[date] = None) -> str:
    """Download file name, e.g. safety_training_20240601.csv."""
    today = today or date.today()
    return f"safety_training_{today.strftime('%Y%m%d')}.csv"
