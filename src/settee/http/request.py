"""Builds the raw bytes of an HTTP/1.0 request."""

from __future__ import annotations

import base64
from typing import TYPE_CHECKING, Mapping, Optional

from settee.config import AuthType
from settee.exceptions import SetteeError

if TYPE_CHECKING:
    from settee.config import ConnectionConfig

METHODS = ("GET", "PUT", "POST", "DELETE", "COPY")
CONTENT_TYPE = "application/json"
HTTP_VERSION = "HTTP/1.0"

# Framing headers are always computed from the body, never taken from the caller.
FRAMING_HEADERS = ("Content-Length", "Content-Type")


def escape_path(path: str) -> str:
    """Percent-encode spaces and double quotes. Any other encoding is up to the caller."""
    return path.replace(" ", "%20").replace('"', "%22")


def basic_authorization(username: Optional[str], password: Optional[str]) -> str:
    token = base64.b64encode(f"{username or ''}:{password or ''}".encode()).decode("ascii")
    return f"Basic {token}"


def build_headers(config: ConnectionConfig, headers: Optional[Mapping[str, str]] = None) -> dict:
    """Merge caller headers with the ones the client always sends.

    Host and User-Agent overwrite caller values in place; Authorization is added when
    credentials are configured.
    """
    merged = {k: v for k, v in (headers or {}).items() if k not in FRAMING_HEADERS}
    merged["Host"] = config.address
    merged["User-Agent"] = config.user_agent

    if config.has_credentials:
        if config.auth_type == AuthType.BASIC:
            merged["Authorization"] = basic_authorization(config.username, config.password)
        else:
            # login() only accepts known types
            raise SetteeError("Unknown auth type.")

    return merged


def build_request(
    config: ConnectionConfig,
    method: str,
    path: str,
    body: Optional[bytes] = None,
    headers: Optional[Mapping[str, str]] = None,
) -> bytes:
    """Serialize one request as ``METHOD PATH HTTP/1.0\\r\\n<headers>\\r\\n[body\\r\\n]``."""
    if method not in METHODS:
        raise SetteeError(f"Unsupported HTTP method: {method}")

    lines = [f"{method} {escape_path(path)} {HTTP_VERSION}"]
    lines.extend(f"{k}: {v}" for k, v in build_headers(config, headers).items())
    head = "".join(f"{line}\r\n" for line in lines).encode("utf-8")

    if body:
        framing = f"Content-Length: {len(body)}\r\nContent-Type: {CONTENT_TYPE}\r\n\r\n".encode("ascii")
        return head + framing + body + b"\r\n"
    return head + b"\r\n"
