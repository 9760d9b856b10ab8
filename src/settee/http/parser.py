"""Line-oriented parser for HTTP/1.0 responses.

The stream is read until the server closes it. Nothing in the response is used to
frame the body: every line after the blank header delimiter belongs to it.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import BinaryIO, Dict, Optional

from settee.exceptions import ProtocolError

STATUS_LINE = re.compile(r"^HTTP/(?P<version>\d+\.\d+)\s+(?P<status>\d+)")


class ParserState(Enum):
    HEADERS = "headers"
    BODY = "body"


@dataclass
class ParsedResponse:
    """Raw result of parsing, before the body is interpreted."""

    raw_status: Optional[str] = None
    version: Optional[str] = None
    status: Optional[int] = None
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""


class ResponseParser:
    """Two-state machine: HEADERS until the first blank line, then BODY until end of stream."""

    def __init__(self) -> None:
        self.state = ParserState.HEADERS
        self.result = ParsedResponse()
        self._body = bytearray()

    def feed_line(self, line: bytes) -> None:
        if self.state is ParserState.BODY:
            self._body += line
            return

        text = line.decode("latin-1").strip()
        if not text:
            self.state = ParserState.BODY
        elif self.result.raw_status is None:
            self._status_line(text)
        else:
            self._header_line(text)

    def _status_line(self, text: str) -> None:
        self.result.raw_status = text
        match = STATUS_LINE.match(text)
        if match is None:
            raise ProtocolError("There was a problem while handling the HTTP protocol.")
        self.result.version = match.group("version")
        self.result.status = int(match.group("status"))

    def _header_line(self, text: str) -> None:
        name, _, value = text.partition(":")
        self.result.headers[name.strip()] = value.strip()

    def finish(self) -> ParsedResponse:
        if self.result.raw_status is None:
            raise ProtocolError("There was a problem while handling the HTTP protocol.")
        self.result.body = bytes(self._body)
        return self.result


def parse_response(stream: BinaryIO) -> ParsedResponse:
    parser = ResponseParser()
    for line in iter(stream.readline, b""):
        parser.feed_line(line)
    return parser.finish()
