from __future__ import annotations

import argparse
import json
import logging
import sys

from settee.cli._output import print_body
from settee.client import CouchClient
from settee.env_config import DEFAULT_ENV_CONFIG_FILE_PATH
from settee.exceptions import SetteeError
from settee.http.request import METHODS
from settee.serde import encode_body

COMMAND = "call"

log = logging.getLogger(__name__)


def register_parser(subparsers: argparse._SubParsersAction) -> None:
    call_parser = subparsers.add_parser(
        COMMAND,
        help="Send one HTTP request to a CouchDB server",
    )
    call_parser.add_argument(
        "method",
        metavar="METHOD",
        type=str.upper,
        choices=METHODS,
        help=f"HTTP method ({', '.join(METHODS)})",
    )
    call_parser.add_argument(
        "path",
        metavar="PATH",
        help="Server path, e.g. /_all_dbs. Paths without a leading / are relative to the database.",
    )
    call_parser.add_argument("-d", "--data", help="Request body (JSON string)")
    call_parser.add_argument(
        "-H",
        "--header",
        action="append",
        dest="headers",
        metavar="HDR",
        help="Header in 'Key: Value' format (repeatable)",
    )
    call_parser.add_argument(
        "--env-config-file-path",
        default=DEFAULT_ENV_CONFIG_FILE_PATH,
        help=f"Environment config file path (default: {DEFAULT_ENV_CONFIG_FILE_PATH})",
    )
    call_parser.add_argument("--env", dest="env_name", help="Use a specific environment from the config file")
    call_parser.add_argument("--host", help="Server host (overrides the environment)")
    call_parser.add_argument("--port", help="Server port (overrides the environment)")
    call_parser.add_argument("--database", help="Database for relative paths (overrides the environment)")
    call_parser.add_argument(
        "--format",
        dest="output_format",
        choices=["json", "jsonl", "csv", "tsv", "table"],
        default="json",
        help="Output format: json (default), jsonl (one JSON object per line), csv, tsv, table (markdown)",
    )


def _parse_headers(raw: list[str] | None) -> dict[str, str] | None:
    if not raw:
        return None
    headers: dict[str, str] = {}
    for h in raw:
        if ": " not in h:
            raise ValueError(f"Invalid header format '{h}'. Expected 'Key: Value'.")
        key, value = h.split(": ", 1)
        headers[key] = value
    return headers


def _parse_body(raw: str | None) -> bytes | None:
    if not raw:
        return None
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON data: {e}") from e
    return encode_body(data)


def _create_client(parsed: argparse.Namespace) -> CouchClient:
    return CouchClient.from_env(
        parsed.env_name,
        env_config_path=parsed.env_config_file_path,
        host=parsed.host,
        port=parsed.port,
        database=parsed.database,
    )


def _resolve_path(client: CouchClient, path: str) -> str:
    if path.startswith("/"):
        return path
    if not client.database:
        raise ValueError(f"Relative path '{path}' needs a database (--database or an environment database)")
    return f"/{client.database}/{path}"


def run(parsed: argparse.Namespace) -> int:
    try:
        headers = _parse_headers(parsed.headers)
        body = _parse_body(parsed.data)
        client = _create_client(parsed)
        path = _resolve_path(client, parsed.path)
        log.debug("Calling %s %s on %s", parsed.method, path, client.config.address)
        response = client.request(parsed.method, path, body, headers)
        print_body(response.body, output_format=parsed.output_format)
        return 0 if response.status_code < 400 else 1
    except (FileNotFoundError, KeyError, ValueError, SetteeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
