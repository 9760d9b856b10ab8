"""Response objects and the interpretation of parsed responses."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Optional

from settee.exceptions import CouchError
from settee.http.parser import ParsedResponse

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HttpInfo:
    version: str
    status: int
    raw: str


class ResponseHeaders(dict):
    """Response headers keyed by name, with the status line info available as ``.http``."""

    def __init__(self, http: HttpInfo, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.http = http


@dataclass
class Response:
    headers: ResponseHeaders
    body: Any

    @property
    def http(self) -> HttpInfo:
        return self.headers.http

    @property
    def status_code(self) -> int:
        return self.headers.http.status


def _try_json(text: str) -> Optional[Any]:
    try:
        return json.loads(text)
    except ValueError:
        return None


def interpret(parsed: ParsedResponse, decode: bool = True) -> Response:
    """Turn a parsed response into a :class:`Response`.

    The body is always checked for an error document, even when ``decode`` is off.

    Raises:
        CouchError: If the body is a JSON object with a non-empty ``error`` field,
            whatever the HTTP status was.
    """
    text = parsed.body.decode("utf-8", errors="replace")
    decoded = _try_json(text)

    if isinstance(decoded, dict) and decoded.get("error"):
        reason = decoded.get("reason")
        logger.debug("Server returned error document with status=%s: %s", parsed.status, decoded["error"])
        raise CouchError(str(decoded["error"]), "" if reason is None else str(reason), status_code=parsed.status)

    http = HttpInfo(version=parsed.version, status=parsed.status, raw=parsed.raw_status)
    return Response(headers=ResponseHeaders(http, parsed.headers), body=decoded if decode else text)
