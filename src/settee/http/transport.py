"""Opens the per-request TCP connection."""

import logging
import socket
from typing import Optional, Union

from settee.exceptions import TransportError

logger = logging.getLogger(__name__)


def open_connection(host: str, port: Union[str, int], timeout: Optional[float] = None) -> socket.socket:
    """Connect to ``host:port``. A new socket is opened for every request and never reused."""
    address = f"{host}:{port}"
    logger.debug("Connecting to %s", address)
    try:
        port_number = int(port)
    except (TypeError, ValueError) as e:
        raise TransportError(f"Error connecting to {address} - invalid port.", address=address) from e
    try:
        return socket.create_connection((host, port_number), timeout=timeout)
    except OSError as e:
        raise TransportError(
            f"Error connecting to {address} - {e.strerror or e} ({e.errno}).",
            address=address,
            errno=e.errno,
        ) from e
