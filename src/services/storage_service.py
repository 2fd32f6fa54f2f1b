"""JSON persistence for the booking document, with atomic writes and locking."""
import json
import logging
import os
import shutil
import sys
import tempfile
import time
from contextlib import contextmanager
from typing import Any, Callable, Dict

from src.utils.exceptions import FileWriteError

if sys.platform != "win32":
    import fcntl

logger = logging.getLogger(__name__)

LOCK_POLL_INTERVAL = 0.05  # seconds
RETRY_DELAY = 0.1  # seconds


def load_json(file_path: str, retry_count: int = 3) -> Any:
    """
    Read a UTF-8 JSON file.

    Permission errors (Windows holds files briefly while another process
    replaces them) are retried ``retry_count`` times.

    Raises:
        FileNotFoundError: If the file does not exist
        json.JSONDecodeError: If the content is not JSON
        PermissionError: If the file stays unreadable
    """
    if not os.path.exists(file_path):
        raise FileNotFoundError(f"File not found: {file_path}")

    last_error = None
    for _ in range(retry_count):
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                return json.load(f)
        except PermissionError as e:
            last_error = e
            time.sleep(RETRY_DELAY)
        except json.JSONDecodeError as e:
            raise json.JSONDecodeError(f"Malformed JSON in {file_path}: {e.msg}", e.doc, e.pos)

    raise PermissionError(f"Cannot read file after {retry_count} attempts: {file_path}") from last_error


def _replace_file(source: str, target: str, retry_count: int = 3) -> None:
    """Move ``source`` over ``target``."""
    if sys.platform != "win32":
        os.replace(source, target)
        return

    # Windows refuses to replace a file another process has open
    for attempt in range(retry_count):
        try:
            os.replace(source, target)
            return
        except PermissionError:
            if attempt == retry_count - 1:
                raise
            time.sleep(RETRY_DELAY)


def save_json(file_path: str, data: Any, backup: bool = True) -> None:
    """
    Write data as indented UTF-8 JSON, atomically.

    The document is written to a temp file in the same directory and then
    moved into place, so readers never see a half-written file. With
    ``backup`` the previous version is kept as ``<file>.backup``.

    Raises:
        FileWriteError: If the backup or the write fails
    """
    dir_path = os.path.dirname(file_path) or "."
    os.makedirs(dir_path, exist_ok=True)

    if backup and os.path.exists(file_path):
        try:
            shutil.copy2(file_path, f"{file_path}.backup")
        except OSError as e:
            raise FileWriteError(f"Failed to create backup: {e}") from e

    temp_fd, temp_path = tempfile.mkstemp(dir=dir_path, prefix=".tmp_", suffix=".json")
    try:
        with os.fdopen(temp_fd, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
            f.flush()
            os.fsync(f.fileno())
        _replace_file(temp_path, file_path)
    except (OSError, TypeError, ValueError) as e:
        if os.path.exists(temp_path):
            try:
                os.remove(temp_path)
            except OSError:
                logger.warning("Could not remove temp file %s", temp_path)
        raise FileWriteError(f"Failed to write file {file_path}: {e}") from e


def _wait_for(acquire: Callable[[], bool], file_path: str, timeout: float) -> None:
    """Poll ``acquire`` until it returns True or ``timeout`` elapses."""
    deadline = time.monotonic() + timeout
    while not acquire():
        if time.monotonic() > deadline:
            raise TimeoutError(f"Could not acquire lock on {file_path} within {timeout}s")
        time.sleep(LOCK_POLL_INTERVAL)


@contextmanager
def lock_file(file_path: str, timeout: float = 5.0):
    """
    Hold an exclusive lock for a read-modify-write of ``file_path``.

    The lock lives on a ``<file>.lock`` sidecar, never on the data file
    itself: save_json swaps in a new inode on every write, so a lock on
    the data file would not be seen by the next writer. POSIX uses flock
    on the sidecar; Windows creates it with O_EXCL and removes it on exit.
    The data file does not need to exist yet.

    Usage:
        with lock_file('data/bookings.json'):
            state = load_json('data/bookings.json')
            ...
            save_json('data/bookings.json', state)

    Raises:
        TimeoutError: If the lock is not acquired within ``timeout`` seconds
    """
    sidecar = f"{file_path}.lock"
    os.makedirs(os.path.dirname(file_path) or ".", exist_ok=True)

    if sys.platform == "win32":
        handle = {}

        def acquire() -> bool:
            try:
                handle["fd"] = os.open(sidecar, os.O_CREAT | os.O_EXCL | os.O_RDWR)
            except FileExistsError:
                return False
            return True

        _wait_for(acquire, file_path, timeout)
        try:
            yield
        finally:
            os.close(handle["fd"])
            try:
                os.remove(sidecar)
            except OSError:
                logger.warning("Could not remove lock file %s", sidecar)
        return

    with open(sidecar, "a") as locked:
        def acquire() -> bool:
            try:
                fcntl.flock(locked.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
            except BlockingIOError:
                return False
            return True

        _wait_for(acquire, file_path, timeout)
        try:
            yield
        finally:
            fcntl.flock(locked.fileno(), fcntl.LOCK_UN)


class JsonStateFile:
    """
    Persist booking state as one JSON document.

    Instances are callable so they can be handed to BookingStore as its
    ``save`` collaborator. Writers hold ``lock()`` around reload, change
    and save; the save itself does not lock.
    """

    # Long enough to cover a shared-document sync round trip
    LOCK_TIMEOUT = 15.0

    def __init__(self, file_path: str):
        self.file_path = file_path
        self.backup_path = f"{file_path}.backup"
        self._primary_corrupt = False

    def lock(self):
        """Exclusive lock shared by every process and thread using this file."""
        return lock_file(self.file_path, timeout=self.LOCK_TIMEOUT)

    def load(self) -> Dict[str, Any]:
        """
        Return the stored document, or an empty one if nothing was saved yet.

        A data file that is not valid JSON is replaced by its ``.backup``
        copy when that one reads cleanly.

        Raises:
            json.JSONDecodeError: If both the data file and its backup are unreadable
        """
        try:
            data = load_json(self.file_path)
            self._primary_corrupt = False
        except FileNotFoundError:
            logger.info("No booking data at %s, starting empty", self.file_path)
            return {}
        except json.JSONDecodeError as e:
            data = self._load_backup(e)

        if not isinstance(data, dict):
            logger.warning("Ignoring non-object booking data in %s", self.file_path)
            return {}
        return data

    def _load_backup(self, error: json.JSONDecodeError) -> Any:
        try:
            data = load_json(self.backup_path)
        except (FileNotFoundError, json.JSONDecodeError):
            logger.error("Booking data in %s is corrupt and no usable backup exists", self.file_path)
            raise error

        logger.warning(
            "Booking data in %s is corrupt (%s), recovered from %s",
            self.file_path, error.msg, self.backup_path,
        )
        self._primary_corrupt = True
        return data

    def __call__(self, state: Dict[str, Any]) -> None:
        # A corrupt data file must not overwrite the good backup
        backup = os.path.exists(self.file_path) and not self._primary_corrupt
        save_json(self.file_path, state, backup=backup)
        self._primary_corrupt = False
