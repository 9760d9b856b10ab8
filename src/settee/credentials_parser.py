import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from settee.internal import credentials_store

ANY_AUTH_TYPE = Union[str, os.PathLike, tuple, "BasicCredentials", dict, None]

REQUIRED_CREDENTIALS_FILE_KEYS = [
    "username",
    "password",
]


@dataclass
class BasicCredentials:
    username: str
    password: str


def parse_credentials(path: Union[str, os.PathLike, dict]) -> BasicCredentials:
    if isinstance(path, dict):
        credentials = path
    else:
        try:
            credentials = json.loads(Path(path).expanduser().read_text())
        except FileNotFoundError:
            raise FileNotFoundError(f"Could not find credentials file at {path}") from None

    if not isinstance(credentials, dict):
        raise AttributeError(f"Could not json dict from {path}")

    for k in REQUIRED_CREDENTIALS_FILE_KEYS:
        if k not in credentials:
            raise KeyError(f"Missing key {k} in credentials file")

    return BasicCredentials(
        username=credentials.get("username"),
        password=credentials.get("password"),
    )


def get_credentials_from_env() -> tuple[Optional[str], Optional[str]]:
    creds = os.getenv("SETTEE_CREDENTIALS")
    if creds:
        basic = parse_credentials(creds)
        return basic.username, basic.password

    username = os.getenv("SETTEE_USERNAME")
    password = os.getenv("SETTEE_PASSWORD")

    if username is not None and password is not None:
        return username, password

    keyring_creds = credentials_store.load_credentials()
    if keyring_creds:
        return keyring_creds.username, keyring_creds.password

    return username, password


def resolve_credentials(
    auth: ANY_AUTH_TYPE = None, username: Optional[str] = None, password: Optional[str] = None
) -> tuple[Optional[str], Optional[str]]:
    has_credentials_tuple = username is not None and password is not None

    if has_credentials_tuple:
        if auth is not None:
            raise ValueError("Choose either auth or username+password")

    elif isinstance(auth, tuple):
        if len(auth) != 2:
            raise ValueError("Credentials tuple must be tuple of (username, password)")
        username, password = auth
    elif isinstance(auth, BasicCredentials):
        username = auth.username
        password = auth.password
    elif isinstance(auth, dict):
        creds = parse_credentials(auth)
        username = creds.username
        password = creds.password
    elif isinstance(auth, (str, os.PathLike)):
        path = str(auth)
        profile = credentials_store.profile_from_uri(path)
        if profile is not None:
            keyring_creds = credentials_store.load_credentials(profile)
            if keyring_creds:
                username, password = keyring_creds.username, keyring_creds.password
            else:
                raise ValueError(
                    f"No credentials found in keyring for profile '{profile}'. "
                    f"Run 'settee credentials put --env {profile} --username <name>' to store them."
                )
        elif not path.endswith(".json"):
            raise ValueError(f"Bad auth credentials file, must be json: {path}")
        else:
            creds = parse_credentials(auth)
            username = creds.username
            password = creds.password
    elif auth is not None:
        raise ValueError(f"Unsupported auth type: {type(auth)}")

    if username is None and password is None:
        username, password = get_credentials_from_env()

    return username, password
