import logging
import os
from logging import NullHandler
from pathlib import Path

logging.getLogger(__name__).addHandler(NullHandler())

try:
    from ._version import __version__
except ImportError:
    __version__ = "0.0.0"

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 5984

DEFAULT_ENV_CONFIG_FILE_PATH = (
    Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")) / "settee" / "environments.json"
)

from settee.client import CouchClient  # noqa: E402
from settee.config import AuthType, ConnectionConfig  # noqa: E402
from settee.exceptions import (  # noqa: E402
    CouchError,
    ProtocolError,
    SetteeError,
    TransportError,
    ValidationError,
)
from settee.users import UserManager  # noqa: E402

__all__ = [
    "AuthType",
    "ConnectionConfig",
    "CouchClient",
    "CouchError",
    "ProtocolError",
    "SetteeError",
    "TransportError",
    "UserManager",
    "ValidationError",
]
