"""Unit tests for export_service."""
import io
from datetime import date

import pandas as pd

from src.models.industry import Industry
from src.models.registration import Registration
from src.services.export_service import CSV_COLUMNS, build_csv, export_filename
from src.utils.date_utils import format_timestamp


def _registration(reg_id, industry, session_date, created_at, company="회사"):
    return Registration(
        id=reg_id,
        date=session_date,
        industry=industry,
        company=company,
        applicant="신청자",
        phone="010-1234-5678",
        created_at=created_at,
    )


def _read(data: bytes) -> pd.DataFrame:
    return pd.read_csv(io.BytesIO(data), encoding="utf-8-sig", dtype=str)


class TestBuildCsv:
    """Test build_csv function."""

    def test_starts_with_bom(self):
        """Excel needs the UTF-8 byte order mark to show Korean text."""
        assert build_csv([]).startswith(b"\xef\xbb\xbf")

    def test_empty_ledger_has_header_only(self):
        df = _read(build_csv([]))
        assert list(df.columns) == CSV_COLUMNS
        assert df.empty

    def test_row_fields(self):
        registration = _registration("r1", Industry.SERVICE, date(2024, 6, 1), 1717200000000, company="한빛, 주식회사")

        df = _read(build_csv([registration]))

        assert df.iloc[0].tolist() == [
            "서비스업",
            "2024-06-01",
            "한빛, 주식회사",
            "신청자",
            "010-1234-5678",
            format_timestamp(1717200000000),
        ]

    def test_rows_ordered_by_industry_date_then_creation(self):
        registrations = [
            _registration("a", Industry.PUBLIC, date(2024, 6, 1), 1),
            _registration("b", Industry.CONSTRUCTION, date(2024, 6, 3), 1),
            _registration("c", Industry.CONSTRUCTION, date(2024, 6, 1), 500),
            _registration("d", Industry.CONSTRUCTION, date(2024, 6, 1), 100),
            _registration("e", Industry.MANUFACTURING, date(2024, 5, 1), 1),
        ]
        for registration in registrations:
            registration.company = registration.id

        df = _read(build_csv(registrations))

        assert df["회사명"].tolist() == ["d", "c", "b", "e", "a"]


class TestExportFilename:
    """Test export_filename function."""

    def test_uses_given_day(self):
        assert export_filename(date(2024, 6, 1)) == "safety_training_20240601.csv"

    def test_defaults_to_today(self):
        assert export_filename() == f"safety_training_{date.today().strftime('%Y%m%d')}.csv"
