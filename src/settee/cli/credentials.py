from __future__ import annotations

import argparse
import getpass
import json
import sys

from settee.credentials_parser import BasicCredentials, parse_credentials
from settee.exceptions import SetteeError
from settee.internal.credentials_store import (
    DEFAULT_PROFILE,
    clear_credentials,
    load_credentials,
    profile_uri,
    save_credentials,
)

COMMAND = "credentials"

MASK = "********"


def _add_profile_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--env",
        dest="profile",
        default=DEFAULT_PROFILE,
        metavar="ENV",
        help=f"Keyring profile, usually an environment name from environments.json (default: {DEFAULT_PROFILE})",
    )


def register_parser(subparsers: argparse._SubParsersAction) -> argparse.ArgumentParser:
    parser = subparsers.add_parser(
        COMMAND,
        help="Manage CouchDB Basic auth credentials in the system keyring",
    )
    subs = parser.add_subparsers(dest="credentials_action")

    put_p = subs.add_parser(
        "put",
        help="Store credentials, then reference them as keyring://<ENV> in environments.json",
    )
    source = put_p.add_mutually_exclusive_group(required=True)
    source.add_argument("file", metavar="FILE", nargs="?", help='JSON file with "username" and "password"')
    source.add_argument("-u", "--username", help="Username; the password is prompted for")
    _add_profile_argument(put_p)

    get_p = subs.add_parser("get", help="Show stored credentials")
    get_p.add_argument("--show-password", action="store_true", help="Print the password instead of a mask")
    _add_profile_argument(get_p)

    clear_p = subs.add_parser("clear", help="Remove stored credentials")
    _add_profile_argument(clear_p)

    return parser


def _read_credentials(parsed: argparse.Namespace) -> BasicCredentials:
    if parsed.file:
        return parse_credentials(parsed.file)
    password = getpass.getpass(f"Password for {parsed.username}: ")
    if not password:
        raise ValueError("An empty password was given.")
    return BasicCredentials(username=parsed.username, password=password)


def _run_put(parsed: argparse.Namespace) -> int:
    try:
        creds = _read_credentials(parsed)
        save_credentials(creds, parsed.profile)
    except (FileNotFoundError, KeyError, ValueError, AttributeError, SetteeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    print(f"Stored credentials for {creds.username!r}. Use \"credentials\": \"{profile_uri(parsed.profile)}\"")
    return 0


def _run_get(parsed: argparse.Namespace) -> int:
    creds = load_credentials(parsed.profile)
    if creds is None:
        print(f"No credentials stored under {profile_uri(parsed.profile)}", file=sys.stderr)
        return 1
    password = creds.password if parsed.show_password else MASK
    print(json.dumps({"username": creds.username, "password": password}, indent=2))
    return 0


def _run_clear(parsed: argparse.Namespace) -> int:
    if clear_credentials(parsed.profile):
        print(f"Removed {profile_uri(parsed.profile)}")
    else:
        print(f"Nothing stored under {profile_uri(parsed.profile)}")
    return 0


ACTIONS = {
    "put": _run_put,
    "get": _run_get,
    "clear": _run_clear,
}


def run(parsed: argparse.Namespace) -> int:
    action = ACTIONS.get(parsed.credentials_action)
    if action is None:
        return 0
    return action(parsed)
