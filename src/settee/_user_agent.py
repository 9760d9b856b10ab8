"""User-Agent string sent with every request."""

import sys
from typing import Optional

from settee import __version__

_PY_VERSION = f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}"


def get_user_agent(client_name: Optional[str] = None) -> str:
    """Build User-Agent string for HTTP requests.

    Args:
        client_name: Optional client name to append

    Returns:
        User-Agent string like "settee/1.0.0 python/3.11.0 MyClient"
    """
    base = f"settee/{__version__} python/{_PY_VERSION}"

    if client_name:
        return f"{base} {client_name}"
    return base
