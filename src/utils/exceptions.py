"""Custom exception classes."""


class ValidationError(Exception):
    """Raised when registration or capacity input fails validation."""
    pass


class CapacityExceededError(Exception):
    """Raised when a session has no remaining seats."""
    pass


class DecodeError(Exception):
    """Raised when a sync code or shared document cannot be decoded."""
    pass


class SyncTransportError(Exception):
    """Raised when the shared sync endpoint cannot be reached or rejects a request."""
    pass


class FileWriteError(IOError):
    """Raised when unable to write to JSON file."""
    pass
