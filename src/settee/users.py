"""Helpers for managing CouchDB user accounts stored in the ``_users`` database."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any, Dict, Optional, Sequence

from settee.client import CouchClient
from settee.exceptions import ValidationError

if TYPE_CHECKING:
    from settee.http.response import Response

logger = logging.getLogger(__name__)

USERS_DATABASE = "_users"
USER_ID_PREFIX = "org.couchdb.user:"

# Derived from the password by the server; dropped so that it derives them again.
PASSWORD_DERIVED_FIELDS = ("iterations", "derived_key", "password_scheme", "salt")


class UserManager:
    """Create, read, update and delete user documents through a :class:`CouchClient`.

    The client's selected database is switched to ``_users`` on construction.
    """

    def __init__(self, client: CouchClient):
        if not isinstance(client, CouchClient):
            raise ValidationError("UserManager needs a CouchClient instance.")

        client.set_database(USERS_DATABASE)
        self.client = client

    @staticmethod
    def user_doc_id(user_id: str, has_prefix: bool = False) -> str:
        return user_id if has_prefix else f"{USER_ID_PREFIX}{user_id}"

    def create_user(
        self,
        user_id: str,
        password: str,
        name: Optional[str] = None,
        roles: Sequence[str] = (),
    ) -> Response:
        """Create a user. The password is hashed by the server.

        Args:
            user_id: The user's id without the ``org.couchdb.user:`` prefix
            password: The plain text password
            name: The user's name. Defaults to ``user_id``.
            roles: Role names for the user
        """
        if not isinstance(user_id, str) or not user_id:
            raise ValidationError("Invalid user id.")
        if not isinstance(password, str) or not password:
            raise ValidationError("Invalid user password.")
        if name is not None and (not isinstance(name, str) or not name):
            raise ValidationError("Invalid user name.")
        if not isinstance(roles, (list, tuple)):
            raise ValidationError("Invalid list of roles: it must be a list.")
        for position, role in enumerate(roles):
            if not isinstance(role, str) or not role:
                raise ValidationError(f"An invalid role was specified at position {position}")

        doc_id = self.user_doc_id(user_id)
        doc = {
            "_id": doc_id,
            "type": "user",
            "name": name or user_id,
            "roles": list(roles),
            "password": password,
        }
        logger.debug("Creating user %s", doc_id)
        return self.client.put(doc_id, doc)

    def get_user(self, user_id: str, has_prefix: bool = False) -> Dict[str, Any]:
        """Return the user document (the response body only)."""
        body = self.client.get(self.user_doc_id(user_id, has_prefix)).body
        if isinstance(body, str):
            body = json.loads(body)
        return body

    def change_password(self, doc: Dict[str, Any], new_password: str) -> Response:
        """Store a new password on a user document as returned by :meth:`get_user`."""
        if not doc.get("_id"):
            raise ValidationError("This does not look like a document: there is no _id.")
        if not doc.get("_rev"):
            raise ValidationError("This doc does not have a _rev.")
        if doc.get("type") != "user":
            raise ValidationError(
                "This does not look like a user or it is an admin. Change admin passwords via the server config."
            )
        if not isinstance(new_password, str) or not new_password:
            raise ValidationError("Empty or non-string passwords are not allowed.")

        updated = {k: v for k, v in doc.items() if k not in PASSWORD_DERIVED_FIELDS}
        updated["password"] = new_password
        return self.client.put(updated["_id"], updated)

    def delete_user(self, user_id: str, has_prefix: bool = False) -> Response:
        user = self.get_user(user_id, has_prefix)
        return self.client.delete(user["_id"], user["_rev"])
