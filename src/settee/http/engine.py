"""One request, one socket: build, send, parse, interpret."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Mapping, Optional

from settee.http.parser import parse_response
from settee.http.request import build_request
from settee.http.response import Response, interpret
from settee.http.transport import open_connection

if TYPE_CHECKING:
    from settee._protocols import Connection
    from settee.config import ConnectionConfig

logger = logging.getLogger(__name__)


class HttpEngine:
    """Runs blocking HTTP/1.0 transactions against the server described by ``config``.

    No connection is kept between calls and nothing is retried: any failure reaches
    the caller after the socket has been closed.
    """

    def __init__(self, config: ConnectionConfig):
        self.config = config

    def _connect(self) -> Connection:
        return open_connection(self.config.host, self.config.port, self.config.timeout)

    def request(
        self,
        method: str,
        path: str,
        body: Optional[bytes] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> Response:
        # build before connecting so that request errors never open a socket
        payload = build_request(self.config, method, path, body, headers)
        logger.debug("%s %s (%d bytes body)", method, path, len(body or b""))

        sock = self._connect()
        try:
            sock.sendall(payload)
            with sock.makefile("rb") as stream:
                parsed = parse_response(stream)
        finally:
            sock.close()

        logger.debug("%s %s -> %s", method, path, parsed.status)
        return interpret(parsed, self.config.decode)
