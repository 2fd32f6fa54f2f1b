"""Environment configuration with optional .env fallback."""
import os
from pathlib import Path
from threading import Lock
from typing import Optional

ENV_KEYS = {"ADMIN_PASSWORD", "BOOKINGS_FILE", "BOOKING_SYNC_URL"}

_ENV_LOADED = False
_ENV_LOCK = Lock()


def load_env(env_path: str = ".env") -> None:
    """Load known settings from a .env file if present.

    Variables already present in the process environment take precedence.
    The file is read at most once per process.
    """
    global _ENV_LOADED

    if _ENV_LOADED:
        return

    with _ENV_LOCK:
        if _ENV_LOADED:
            return

        path = Path(env_path)
        if path.exists():
            for raw_line in path.read_text(encoding="utf-8").splitlines():
                line = raw_line.strip()
                if not line or line.startswith("#") or "=" not in line:
                    continue

                key, value = line.split("=", 1)
                key = key.strip()
                value = value.strip().strip('"\'')

                if key in ENV_KEYS and key not in os.environ:
                    os.environ[key] = value

        _ENV_LOADED = True


def get_setting(key: str, default: Optional[str] = None) -> Optional[str]:
    """Return a setting from the environment, loading .env on first use."""
    load_env()
    value = os.getenv(key)
    if value is None or not value.strip():
        return default
    return value.strip()


def _reset_env_cache() -> None:
    """Forget that .env was loaded (tests only)."""
    global _ENV_LOADED
    _ENV_LOADED = False
