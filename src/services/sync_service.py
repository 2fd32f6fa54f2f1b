"""Cross-device sync codes and ledger merging.

A sync code is the booking snapshot serialized as JSON, URI-escaped the
way JavaScript's ``encodeURIComponent`` escapes, then base64 encoded.
Importing a code merges it into the local store:

* registrations are unioned by id; when both sides hold the same id the
  local copy is kept verbatim
* capacity overrides start from the foreign map and the local map is laid
  over it, so local values win on conflicting keys

The registration union is commutative in membership, the override merge
is not.
"""
import base64
import binascii
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List
from urllib.parse import quote, unquote

from src.models.capacity import CapacityKey
from src.models.registration import Registration
from src.services.booking_store import (
    OVERRIDES_KEY,
    REGISTRATIONS_KEY,
    BookingStore,
    serialize_state,
)
from src.utils.exceptions import DecodeError

logger = logging.getLogger(__name__)

SYNC_SCHEMA_VERSION = 1

# Keys written by earlier revisions of the booking page
LEGACY_REGISTRATIONS_KEY = "apps"
LEGACY_OVERRIDES_KEY = "slots"

# Characters encodeURIComponent leaves unescaped besides alphanumerics
_URI_SAFE = "-_.!~*'()"


@dataclass
class Snapshot:
    """Registrations and capacity overrides exchanged between devices."""

    registrations: List[Registration] = field(default_factory=list)
    overrides: Dict[CapacityKey, int] = field(default_factory=dict)

    @classmethod
    def of(cls, store: BookingStore) -> "Snapshot":
        return cls(list(store.registrations), dict(store.overrides))

    def to_dict(self) -> Dict[str, Any]:
        data = {"version": SYNC_SCHEMA_VERSION}
        data.update(serialize_state(self.registrations, self.overrides))
        return data


@dataclass
class MergeResult:
    """Outcome of merging a foreign snapshot into a local one."""

    registrations: List[Registration]
    overrides: Dict[CapacityKey, int]
    added: int


def snapshot_from_dict(data: Any) -> Snapshot:
    """
    Validate a decoded document and build a Snapshot.

    Accepts the current layout ({"registrations", "overrides"}) and the
    legacy one ({"apps", "slots"}).

    Raises:
        DecodeError: If the document does not have the expected shape
    """
    if not isinstance(data, dict):
        raise DecodeError("동기화 데이터 형식이 올바르지 않습니다")

    if REGISTRATIONS_KEY in data or OVERRIDES_KEY in data:
        raw_registrations = data.get(REGISTRATIONS_KEY, [])
        raw_overrides = data.get(OVERRIDES_KEY, {})
    elif LEGACY_REGISTRATIONS_KEY in data and LEGACY_OVERRIDES_KEY in data:
        raw_registrations = data[LEGACY_REGISTRATIONS_KEY]
        raw_overrides = data[LEGACY_OVERRIDES_KEY]
    else:
        raise DecodeError("동기화 데이터에 신청 내역이 없습니다")

    version = data.get("version", SYNC_SCHEMA_VERSION)
    if version != SYNC_SCHEMA_VERSION:
        raise DecodeError(f"지원하지 않는 동기화 버전입니다: {version}")

    if not isinstance(raw_registrations, list) or not isinstance(raw_overrides, dict):
        raise DecodeError("동기화 데이터 형식이 올바르지 않습니다")

    try:
        registrations = [Registration.from_dict(item) for item in raw_registrations]
        overrides = {}
        for raw_key, total in raw_overrides.items():
            if isinstance(total, bool) or not isinstance(total, int) or total < 0:
                raise ValueError(f"Invalid capacity {total!r} for {raw_key}")
            overrides[CapacityKey.from_storage_key(raw_key)] = total
    except ValueError as e:
        raise DecodeError(f"동기화 데이터를 읽을 수 없습니다: {e}") from e

    return Snapshot(registrations, overrides)


def encode_sync_code(snapshot: Snapshot) -> str:
    """Serialize a snapshot into a copy-pasteable sync code."""
    payload = json.dumps(snapshot.to_dict(), ensure_ascii=False, separators=(",", ":"))
    escaped = quote(payload, safe=_URI_SAFE)
    return base64.b64encode(escaped.encode("ascii")).decode("ascii")


def decode_sync_code(code: str) -> Snapshot:
    """
    Reverse encode_sync_code.

    Raises:
        DecodeError: If the code is not valid base64, not valid escaped
            UTF-8 JSON, or does not describe a snapshot
    """
    if not isinstance(code, str) or not code.strip():
        raise DecodeError("연동 코드를 입력해 주세요")

    compact = "".join(code.split())
    try:
        escaped = base64.b64decode(compact, validate=True).decode("ascii")
        payload = unquote(escaped, errors="strict")
        data = json.loads(payload)
    except (binascii.Error, UnicodeDecodeError, ValueError) as e:
        raise DecodeError("유효하지 않은 연동 코드입니다") from e

    return snapshot_from_dict(data)


def merge_snapshots(local: Snapshot, foreign: Snapshot) -> MergeResult:
    """
    Merge a foreign snapshot into a local one.

    Local registrations come first, in their order, followed by foreign
    registrations whose id is not already present. Overrides take the
    foreign map with the local map applied on top.
    """
    merged = list(local.registrations)
    seen_ids = {r.id for r in merged}
    added = 0
    for registration in foreign.registrations:
        if registration.id in seen_ids:
            continue
        seen_ids.add(registration.id)
        merged.append(registration)
        added += 1

    overrides = dict(foreign.overrides)
    overrides.update(local.overrides)

    return MergeResult(registrations=merged, overrides=overrides, added=added)


def apply_snapshot(store: BookingStore, foreign: Snapshot) -> int:
    """
    Merge a foreign snapshot into the store and persist.

    Returns:
        Number of registrations that were new to this device
    """
    with store.locked():
        result = merge_snapshots(Snapshot.of(store), foreign)
        store.replace(result.registrations, result.overrides)
    logger.info(
        "Merged snapshot: %d new registrations, %d overrides total",
        result.added, len(result.overrides),
    )
    return result.added


def export_sync_code(store: BookingStore) -> str:
    """Sync code for the store's current ledger and overrides."""
    return encode_sync_code(Snapshot.of(store))


def import_sync_code(store: BookingStore, code: str) -> int:
    """
    Decode a sync code from another device and merge it in.

    Returns:
        Number of registrations added

    Raises:
        DecodeError: If the code is malformed; the store is left untouched
    """
    foreign = decode_sync_code(code)
    return apply_snapshot(store, foreign)
