"""Booking ledger and capacity overrides held for one device."""
import logging
from contextlib import contextmanager
from datetime import date
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple

from src.models.capacity import CapacityKey
from src.models.industry import Industry
from src.models.registration import Registration
from src.services import capacity_service
from src.services.storage_service import JsonStateFile
from src.utils.env import get_setting

logger = logging.getLogger(__name__)

# 데이터 파일 경로
BOOKINGS_FILE = "data/bookings.json"

# 저장 파일의 최상위 키
REGISTRATIONS_KEY = "registrations"
OVERRIDES_KEY = "overrides"

SaveFunc = Callable[[Dict[str, Any]], None]


def serialize_state(
    registrations: Iterable[Registration],
    overrides: Mapping[CapacityKey, int],
) -> Dict[str, Any]:
    """Build the JSON document for a ledger and its override map."""
    return {
        REGISTRATIONS_KEY: [r.to_dict() for r in registrations],
        OVERRIDES_KEY: {
            key.to_storage_key(): total
            for key, total in overrides.items()
        },
    }


def parse_state(data: Dict[str, Any]) -> Tuple[List[Registration], Dict[CapacityKey, int]]:
    """
    Read the ledger and override map out of persisted JSON.

    Entries that no longer parse are skipped with a warning rather
    than preventing the app from starting.
    """
    registrations: List[Registration] = []
    seen_ids = set()
    for raw in data.get(REGISTRATIONS_KEY) or []:
        try:
            registration = Registration.from_dict(raw)
        except ValueError as e:
            logger.warning("Skipping unreadable registration %r: %s", raw, e)
            continue
        if registration.id in seen_ids:
            logger.warning("Skipping duplicate registration id %s", registration.id)
            continue
        seen_ids.add(registration.id)
        registrations.append(registration)

    overrides: Dict[CapacityKey, int] = {}
    for raw_key, total in (data.get(OVERRIDES_KEY) or {}).items():
        try:
            key = CapacityKey.from_storage_key(raw_key)
        except ValueError as e:
            logger.warning("Skipping unreadable capacity key %r: %s", raw_key, e)
            continue
        if isinstance(total, bool) or not isinstance(total, int) or total < 0:
            logger.warning("Skipping invalid capacity %r for %s", total, raw_key)
            continue
        overrides[key] = total

    return registrations, overrides


class BookingStore:
    """
    In-memory ledger plus capacity overrides.

    Every mutator calls the injected ``save`` with the full serialized
    state before returning, so each change is immediately durable.

    A store opened on a ``source`` file shares it with other sessions and
    processes. Its mutators then run inside ``locked()``: take the file
    lock, reload the current document, apply the change and save.
    """

    def __init__(
        self,
        registrations: Optional[List[Registration]] = None,
        overrides: Optional[Dict[CapacityKey, int]] = None,
        save: Optional[SaveFunc] = None,
        source: Optional[JsonStateFile] = None,
    ):
        self.registrations: List[Registration] = list(registrations or [])
        self.overrides: Dict[CapacityKey, int] = dict(overrides or {})
        self._source = source
        self._save = save if save is not None else source
        self._in_transaction = False

    @classmethod
    def from_state(cls, data: Dict[str, Any], save: Optional[SaveFunc] = None) -> "BookingStore":
        """Rebuild a store from persisted JSON, skipping unreadable entries."""
        registrations, overrides = parse_state(data)
        return cls(registrations, overrides, save)

    def to_state(self) -> Dict[str, Any]:
        """Serialize the ledger and override map."""
        return serialize_state(self.registrations, self.overrides)

    def persist(self) -> None:
        """
        Hand the current state to the save collaborator, if any.

        Callers that change registrations in place must do so inside
        ``locked()`` so the saved document starts from the file's latest
        contents.
        """
        if self._save is not None:
            self._save(self.to_state())

    def refresh(self) -> None:
        """Reload the ledger from the source file; no-op for detached stores."""
        if self._source is None:
            return
        self.registrations, self.overrides = parse_state(self._source.load())

    @contextmanager
    def locked(self):
        """
        Hold the source file's lock with freshly loaded state.

        Nested use inside the same block does not lock or reload again.
        Stores without a source yield immediately.
        """
        if self._source is None or self._in_transaction:
            yield self
            return

        with self._source.lock():
            self._in_transaction = True
            try:
                self.refresh()
                yield self
            finally:
                self._in_transaction = False

    # --- queries -------------------------------------------------------

    def get(self, registration_id: str) -> Optional[Registration]:
        """Find a registration by id."""
        for registration in self.registrations:
            if registration.id == registration_id:
                return registration
        return None

    def ids(self) -> set:
        return {r.id for r in self.registrations}

    def total_capacity(self, session_date: date, industry: Industry) -> int:
        return capacity_service.total_capacity(self.overrides, session_date, industry)

    def booked_count(self, session_date: date, industry: Industry) -> int:
        return capacity_service.booked_count(self.registrations, session_date, industry)

    def remaining(self, session_date: date, industry: Industry) -> int:
        return capacity_service.remaining_seats(
            self.registrations, self.overrides, session_date, industry
        )

    def is_full(self, session_date: date, industry: Industry) -> bool:
        return capacity_service.is_full(
            self.registrations, self.overrides, session_date, industry
        )

    def is_past(self, session_date: date, today: Optional[date] = None) -> bool:
        return capacity_service.is_past(session_date, today)

    # --- mutators ------------------------------------------------------

    def append(self, registration: Registration) -> None:
        """Add a registration and persist."""
        with self.locked():
            self.registrations.append(registration)
            self.persist()

    def remove(self, registration_id: str) -> bool:
        """Remove a registration by id and persist; False if absent."""
        with self.locked():
            remaining = [r for r in self.registrations if r.id != registration_id]
            if len(remaining) == len(self.registrations):
                return False
            self.registrations = remaining
            self.persist()
            return True

    def set_override(self, key: CapacityKey, total: Optional[int]) -> None:
        """Upsert an override, or drop it when total is None; then persist."""
        with self.locked():
            if total is None:
                self.overrides.pop(key, None)
            else:
                self.overrides[key] = total
            self.persist()

    def replace(
        self,
        registrations: List[Registration],
        overrides: Dict[CapacityKey, int],
    ) -> None:
        """Swap in a whole new ledger and override map, then persist once."""
        with self.locked():
            self.registrations = list(registrations)
            self.overrides = dict(overrides)
            self.persist()


def open_store(file_path: Optional[str] = None) -> BookingStore:
    """
    Load the store from disk, wired to save back to the same file.

    Args:
        file_path: Data file; defaults to $BOOKINGS_FILE or data/bookings.json
    """
    path = file_path or get_setting("BOOKINGS_FILE", BOOKINGS_FILE)
    store = BookingStore(source=JsonStateFile(path))
    store.refresh()
    logger.info(
        "Loaded %d registrations and %d capacity overrides from %s",
        len(store.registrations), len(store.overrides), path,
    )
    return store
