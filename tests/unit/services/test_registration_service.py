"""Unit tests for registration_service."""
import pytest
from datetime import date
from unittest.mock import MagicMock, patch

from src.models.capacity import CapacityKey
from src.models.industry import Industry
from src.models.registration import Registration
from src.services.booking_store import BookingStore
from src.services.registration_service import (
    clear_capacity,
    delete_registration,
    find_registrations,
    register,
    registrations_for_industry,
    set_capacity,
    update_registration,
)
from src.utils.exceptions import CapacityExceededError, ValidationError

JUNE_1 = date(2024, 6, 1)


@pytest.fixture
def save():
    """Recording save collaborator."""
    return MagicMock()


@pytest.fixture
def store(save):
    """Empty store wired to a mock save."""
    return BookingStore(save=save)


@pytest.fixture
def booked_store(save):
    """Store holding two construction bookings and one service booking."""
    registrations = [
        Registration(
            id="r1", date=JUNE_1, industry=Industry.CONSTRUCTION,
            company="한빛건설", applicant="홍길동", phone="010-1111-2222",
            created_at=1000,
        ),
        Registration(
            id="r2", date=date(2024, 6, 3), industry=Industry.CONSTRUCTION,
            company="대한건설", applicant="김철수", phone="010-3333-4444",
            created_at=3000,
        ),
        Registration(
            id="r3", date=JUNE_1, industry=Industry.SERVICE,
            company="서비스코", applicant="홍길동", phone="01011112222",
            created_at=2000,
        ),
    ]
    return BookingStore(registrations, save=save)


class TestRegister:
    """Test register function."""

    def test_successful_registration(self, store, save):
        """Admission appends one trimmed registration and saves."""
        registration = register(store, "2024-06-01", "건설업", " 한빛건설 ", "홍길동 ", "010-1234-5678")

        assert registration.date == JUNE_1
        assert registration.industry is Industry.CONSTRUCTION
        assert registration.company == "한빛건설"
        assert registration.applicant == "홍길동"
        assert store.registrations == [registration]
        assert store.remaining(JUNE_1, Industry.CONSTRUCTION) == 29
        save.assert_called_once()

    def test_registration_stamps_creation_time(self, store):
        """created_at comes from the current clock in milliseconds."""
        with patch("src.services.registration_service.now_millis", return_value=1717200000123):
            registration = register(store, JUNE_1, Industry.SERVICE, "A", "B", "010-1234-5678")

        assert registration.created_at == 1717200000123

    def test_ids_are_unique(self, store):
        """Every admission gets an id not used before."""
        for _ in range(20):
            register(store, JUNE_1, Industry.SERVICE, "A", "B", "010-1234-5678")

        assert len(store.ids()) == 20

    def test_colliding_id_is_regenerated(self, booked_store):
        """A generated id already in the ledger is drawn again."""
        with patch(
            "src.services.registration_service.new_registration_id",
            side_effect=["r1", "r2", "fresh"],
        ):
            registration = register(booked_store, JUNE_1, Industry.CONSTRUCTION, "A", "B", "010-1234-5678")

        assert registration.id == "fresh"

    def test_double_booking_is_allowed(self, store):
        """The same person may book the same session twice."""
        register(store, JUNE_1, Industry.CONSTRUCTION, "A", "B", "010-1234-5678")
        register(store, JUNE_1, Industry.CONSTRUCTION, "A", "B", "010-1234-5678")

        assert store.booked_count(JUNE_1, Industry.CONSTRUCTION) == 2

    def test_past_date_is_not_rejected(self, store):
        """The service does not refuse past dates."""
        registration = register(store, date(2000, 1, 1), Industry.PUBLIC, "A", "B", "010-1234-5678")
        assert registration.date == date(2000, 1, 1)

    def test_full_session_is_rejected(self, store, save):
        """No seats left raises and changes nothing."""
        store.overrides[CapacityKey(Industry.CONSTRUCTION, JUNE_1)] = 0

        with patch("src.services.registration_service.new_registration_id") as new_id:
            with pytest.raises(CapacityExceededError):
                register(store, JUNE_1, Industry.CONSTRUCTION, "A", "B", "010-1234-5678")

        new_id.assert_not_called()
        assert store.registrations == []
        save.assert_not_called()

    def test_other_industry_still_open(self, store):
        """Closing one industry leaves the others bookable."""
        store.overrides[CapacityKey(Industry.CONSTRUCTION, JUNE_1)] = 0

        register(store, JUNE_1, Industry.MANUFACTURING, "A", "B", "010-1234-5678")
        assert store.booked_count(JUNE_1, Industry.MANUFACTURING) == 1

    @pytest.mark.parametrize(
        "company, applicant, phone, message",
        [
            ("", "홍길동", "010-1234-5678", "회사명"),
            ("한빛건설", "   ", "010-1234-5678", "신청자명"),
            ("한빛건설", "홍길동", "", "연락처"),
            ("A" * 51, "홍길동", "010-1234-5678", "50자"),
            ("한빛건설", "홍길동", "전화번호", "숫자"),
            ("한빛건설", "홍길동", "123-45", "짧습니다"),
        ],
    )
    def test_invalid_fields_are_rejected(self, store, save, company, applicant, phone, message):
        """Validation failures raise ValidationError and save nothing."""
        with pytest.raises(ValidationError, match=message):
            register(store, JUNE_1, Industry.CONSTRUCTION, company, applicant, phone)

        assert store.registrations == []
        save.assert_not_called()

    def test_unknown_industry_is_rejected(self, store):
        with pytest.raises(ValidationError, match="산업군"):
            register(store, JUNE_1, "농업", "A", "B", "010-1234-5678")

    def test_bad_date_is_rejected(self, store):
        with pytest.raises(ValidationError, match="날짜"):
            register(store, "2024-02-30", Industry.CONSTRUCTION, "A", "B", "010-1234-5678")

    def test_capacity_scenario(self, store):
        """Override 5, five bookings, then the sixth is refused."""
        assert store.remaining(JUNE_1, Industry.CONSTRUCTION) == 30

        set_capacity(store, Industry.CONSTRUCTION, JUNE_1, 5)
        for i in range(5):
            register(store, JUNE_1, Industry.CONSTRUCTION, f"회사{i}", f"신청자{i}", "010-1234-5678")

        assert store.remaining(JUNE_1, Industry.CONSTRUCTION) == 0
        with pytest.raises(CapacityExceededError):
            register(store, JUNE_1, Industry.CONSTRUCTION, "회사6", "신청자6", "010-1234-5678")
        assert store.booked_count(JUNE_1, Industry.CONSTRUCTION) == 5


class TestUpdateRegistration:
    """Test update_registration function."""

    def test_updates_contact_fields_only(self, booked_store, save):
        """Company, applicant and phone change; the rest stays."""
        assert update_registration(booked_store, "r1", "새회사", "이몽룡", "010-9999-8888") is True

        updated = booked_store.get("r1")
        assert (updated.company, updated.applicant, updated.phone) == ("새회사", "이몽룡", "010-9999-8888")
        assert updated.date == JUNE_1
        assert updated.industry is Industry.CONSTRUCTION
        assert updated.created_at == 1000
        save.assert_called_once()

    def test_unknown_id_is_noop(self, booked_store, save):
        """Editing a missing id returns False and saves nothing."""
        assert update_registration(booked_store, "missing", "A", "B", "010-1234-5678") is False
        save.assert_not_called()

    def test_invalid_fields_are_rejected(self, booked_store):
        with pytest.raises(ValidationError):
            update_registration(booked_store, "r1", "", "B", "010-1234-5678")
        assert booked_store.get("r1").company == "한빛건설"


class TestDeleteRegistration:
    """Test delete_registration function."""

    def test_delete_existing(self, booked_store, save):
        assert delete_registration(booked_store, "r2") is True
        assert booked_store.get("r2") is None
        assert len(booked_store.registrations) == 2
        save.assert_called_once()

    def test_delete_is_idempotent(self, booked_store, save):
        """Deleting twice is not an error."""
        delete_registration(booked_store, "r2")
        assert delete_registration(booked_store, "r2") is False
        assert save.call_count == 1


class TestCapacityOverrides:
    """Test set_capacity and clear_capacity."""

    def test_set_capacity_upserts(self, store, save):
        set_capacity(store, "건설업", "2024-06-01", 12)
        set_capacity(store, Industry.CONSTRUCTION, JUNE_1, 8)

        assert store.overrides == {CapacityKey(Industry.CONSTRUCTION, JUNE_1): 8}
        assert save.call_count == 2

    def test_set_capacity_below_booked_count(self, booked_store):
        """Lower than the bookings is allowed and reads as zero seats."""
        set_capacity(booked_store, Industry.CONSTRUCTION, JUNE_1, 0)
        assert booked_store.remaining(JUNE_1, Industry.CONSTRUCTION) == 0

    @pytest.mark.parametrize("total", [-1, 2.5, "10", None, True])
    def test_invalid_capacity_is_rejected(self, store, save, total):
        with pytest.raises(ValidationError, match="정원"):
            set_capacity(store, Industry.CONSTRUCTION, JUNE_1, total)
        save.assert_not_called()

    def test_clear_capacity_restores_default(self, store):
        set_capacity(store, Industry.CONSTRUCTION, JUNE_1, 3)
        clear_capacity(store, Industry.CONSTRUCTION, JUNE_1)

        assert store.total_capacity(JUNE_1, Industry.CONSTRUCTION) == 30


class TestQueries:
    """Test registrations_for_industry and find_registrations."""

    def test_registrations_for_industry_newest_first(self, booked_store):
        result = registrations_for_industry(booked_store, Industry.CONSTRUCTION)
        assert [r.id for r in result] == ["r2", "r1"]

    def test_registrations_for_industry_by_date(self, booked_store):
        result = registrations_for_industry(booked_store, "건설업", session_date=JUNE_1)
        assert [r.id for r in result] == ["r1"]

    def test_find_matches_phone_digits(self, booked_store):
        """Phone numbers match regardless of hyphens."""
        result = find_registrations(booked_store, " 홍길동 ", "01011112222")
        assert [r.id for r in result] == ["r1", "r3"]

    def test_find_requires_both_fields(self, booked_store):
        assert find_registrations(booked_store, "홍길동", "") == []
        assert find_registrations(booked_store, "", "010-1111-2222") == []

    def test_find_no_match(self, booked_store):
        assert find_registrations(booked_store, "홍길동", "010-0000-0000") == []
