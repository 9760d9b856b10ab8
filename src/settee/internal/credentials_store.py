"""CouchDB Basic auth credentials kept in the system keyring.

Each profile is one keyring entry holding ``{"username": ..., "password": ...}``.
An environment in environments.json points at a profile with
``"credentials": "keyring://<profile>"``.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Optional

import keyring
from keyring.backends.fail import Keyring as FailKeyring
from keyring.errors import KeyringError

from settee.exceptions import SetteeError

if TYPE_CHECKING:
    from keyring.backend import KeyringBackend

    from settee.credentials_parser import BasicCredentials

SERVICE_NAME = "settee-credentials"
DEFAULT_PROFILE = "default"
KEYRING_URI_SCHEME = "keyring://"

log = logging.getLogger(__name__)


class KeyringUnavailableError(SetteeError, RuntimeError):
    """Credentials could not be written because no keyring backend accepts them."""


def profile_uri(profile: str) -> str:
    return f"{KEYRING_URI_SCHEME}{profile}"


def profile_from_uri(uri: str) -> Optional[str]:
    """Profile named by ``keyring://<profile>``, or None when ``uri`` is not a keyring reference.

    A bare ``keyring://`` names the default profile.
    """
    if not uri.startswith(KEYRING_URI_SCHEME):
        return None
    return uri[len(KEYRING_URI_SCHEME) :] or DEFAULT_PROFILE


def _backend() -> Optional[KeyringBackend]:
    backend = keyring.get_keyring()
    if isinstance(backend, FailKeyring):
        log.debug("No usable keyring backend")
        return None
    return backend


def load_credentials(profile: str = DEFAULT_PROFILE) -> Optional[BasicCredentials]:
    """Credentials stored under ``profile``, or None when nothing usable is stored."""
    backend = _backend()
    if backend is None:
        return None
    try:
        stored = backend.get_password(SERVICE_NAME, profile)
    except KeyringError:
        log.warning("Could not read keyring profile %s", profile, exc_info=True)
        return None
    if stored is None:
        return None

    from settee.credentials_parser import parse_credentials

    try:
        return parse_credentials(json.loads(stored))
    except (ValueError, KeyError, AttributeError):
        log.warning("Ignoring malformed credentials in keyring profile %s", profile)
        return None


def save_credentials(creds: BasicCredentials, profile: str = DEFAULT_PROFILE) -> None:
    backend = _backend()
    if backend is None:
        raise KeyringUnavailableError(
            "No usable keyring backend available. "
            "Install a keyring backend or use the SETTEE_USERNAME/SETTEE_PASSWORD environment variables instead."
        )
    payload = json.dumps({"username": creds.username, "password": creds.password})
    try:
        backend.set_password(SERVICE_NAME, profile, payload)
    except KeyringError as e:
        raise KeyringUnavailableError(f"Could not store credentials for profile '{profile}': {e}") from e
    log.debug("Stored credentials for %s in keyring profile %s", creds.username, profile)


def clear_credentials(profile: str = DEFAULT_PROFILE) -> bool:
    """Remove a profile. Returns False when there was nothing to remove."""
    backend = _backend()
    if backend is None:
        return False
    try:
        backend.delete_password(SERVICE_NAME, profile)
    except KeyringError:
        log.debug("Nothing to clear in keyring profile %s", profile)
        return False
    return True
