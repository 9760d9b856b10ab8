"""Exception types raised by the settee client."""

from typing import Optional


class SetteeError(Exception):
    """Base class for all errors raised by settee."""


class ValidationError(SetteeError, ValueError):
    """An argument failed a precondition. Raised before any network activity."""


class TransportError(SetteeError, ConnectionError):
    """The connection to the server could not be opened."""

    def __init__(self, message: str, *, address: str, errno: Optional[int] = None):
        super().__init__(message)
        self.address = address
        self.errno = errno


class ProtocolError(SetteeError):
    """The server response could not be handled as HTTP."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class CouchError(ProtocolError):
    """The server answered with an error document, e.g. ``{"error": "conflict", ...}``."""

    def __init__(self, error: str, reason: str = "", status_code: Optional[int] = None):
        super().__init__(f"{error} ({reason})", status_code=status_code)
        self.error = error
        self.reason = reason
