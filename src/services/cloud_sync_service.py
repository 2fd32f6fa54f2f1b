"""Sync through a shared JSON document endpoint.

The endpoint stores one JSON document: ``GET`` returns it, ``POST``
replaces it. There is no authentication and no server-side conflict
handling, so the last push wins.
"""
import logging
from typing import Optional

import requests

from src.services.booking_store import BookingStore
from src.services.sync_service import (
    Snapshot,
    merge_snapshots,
    snapshot_from_dict,
)
from src.utils.env import get_setting
from src.utils.exceptions import DecodeError, SyncTransportError

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 10  # seconds
JSON_HEADERS = {"Content-Type": "application/json"}


def get_sync_url() -> Optional[str]:
    """Configured shared document URL ($BOOKING_SYNC_URL), or None."""
    return get_setting("BOOKING_SYNC_URL")


def fetch_remote_snapshot(url: str, session: Optional[requests.Session] = None) -> Snapshot:
    """
    Download the shared document.

    An empty body, ``null`` or ``{}`` means nothing was pushed yet and
    yields an empty snapshot.

    Raises:
        SyncTransportError: On network failure or a non-2xx response
        DecodeError: If the document is not a booking snapshot
    """
    http = session or requests
    try:
        response = http.get(url, timeout=REQUEST_TIMEOUT)
        response.raise_for_status()
    except requests.RequestException as e:
        logger.error(f"Fetching shared booking document failed: {e}")
        raise SyncTransportError("서버와 동기화하지 못했습니다") from e

    if not response.content or not response.content.strip():
        return Snapshot()

    try:
        data = response.json()
    except ValueError as e:
        raise DecodeError("서버 데이터 형식이 올바르지 않습니다") from e

    if not data:
        return Snapshot()
    return snapshot_from_dict(data)


def push_remote_snapshot(
    url: str,
    snapshot: Snapshot,
    session: Optional[requests.Session] = None,
) -> None:
    """
    Replace the shared document with a snapshot.

    Raises:
        SyncTransportError: On network failure or a non-2xx response
    """
    http = session or requests
    try:
        response = http.post(
            url,
            json=snapshot.to_dict(),
            headers=JSON_HEADERS,
            timeout=REQUEST_TIMEOUT,
        )
        response.raise_for_status()
    except requests.RequestException as e:
        logger.error(f"Pushing shared booking document failed: {e}")
        raise SyncTransportError("서버에 저장하지 못했습니다") from e


def sync_with_remote(
    store: BookingStore,
    url: str,
    session: Optional[requests.Session] = None,
) -> int:
    """
    Pull the shared document, merge it with the store, push the result.

    The store is only replaced once both requests succeeded; local
    values win on conflicts, as with sync codes.

    Returns:
        Number of registrations pulled in from the shared document

    Raises:
        SyncTransportError: If either request fails; the store is untouched
        DecodeError: If the shared document is malformed
    """
    remote = fetch_remote_snapshot(url, session=session)
    with store.locked():
        result = merge_snapshots(Snapshot.of(store), remote)
        push_remote_snapshot(url, Snapshot(result.registrations, result.overrides), session=session)
        store.replace(result.registrations, result.overrides)
    logger.info("Synced with shared document, %d registrations added", result.added)
    return result.added
