"""Unit tests for the user management helpers."""

import json
import unittest
from unittest import mock

from _fake_socket import FakeSocket, http_response

from settee.client import CouchClient
from settee.exceptions import ValidationError
from settee.users import USER_ID_PREFIX, UserManager

USER_DOC = {
    "_id": "org.couchdb.user:joe",
    "_rev": "2-abc",
    "type": "user",
    "name": "joe",
    "roles": ["reader"],
    "password_scheme": "pbkdf2",
    "iterations": 10,
    "derived_key": "1a2b",
    "salt": "3c4d",
}


class UserManagerTestCase(unittest.TestCase):
    def setUp(self):
        self.client = CouchClient(database="test")
        self.users = UserManager(self.client)

    def _send(self, call, *responses):
        socks = [FakeSocket(r) for r in responses] or [FakeSocket(http_response(201, {"ok": True}))]
        with mock.patch("settee.http.engine.open_connection", side_effect=socks):
            result = call()
        return result, socks


class TestConstruction(UserManagerTestCase):
    def test_switches_to_users_database(self):
        self.assertEqual(self.client.database, "_users")

    def test_requires_client(self):
        with self.assertRaises(ValidationError):
            UserManager("not a client")

    def test_user_doc_id(self):
        self.assertEqual(UserManager.user_doc_id("joe"), f"{USER_ID_PREFIX}joe")
        self.assertEqual(UserManager.user_doc_id("org.couchdb.user:joe", has_prefix=True), "org.couchdb.user:joe")


class TestCreateUser(UserManagerTestCase):
    def test_create_user(self):
        _, (sock,) = self._send(lambda: self.users.create_user("joe", "pw", roles=["reader"]))
        self.assertEqual(sock.request_line, "PUT /_users/org.couchdb.user:joe HTTP/1.0")
        self.assertEqual(
            json.loads(sock.request_body),
            {"_id": "org.couchdb.user:joe", "type": "user", "name": "joe", "roles": ["reader"], "password": "pw"},
        )

    def test_create_user_with_name(self):
        _, (sock,) = self._send(lambda: self.users.create_user("joe", "pw", name="Joe"))
        self.assertEqual(json.loads(sock.request_body)["name"], "Joe")
        self.assertEqual(json.loads(sock.request_body)["roles"], [])

    def test_validation(self):
        invalid = [
            (("", "pw"), {}),
            (("joe", ""), {}),
            (("joe", None), {}),
            (("joe", "pw"), {"name": ""}),
            (("joe", "pw"), {"roles": "admin"}),
            (("joe", "pw"), {"roles": {"a": "admin"}}),
            (("joe", "pw"), {"roles": ["reader", ""]}),
        ]
        with mock.patch("settee.http.engine.open_connection") as connect:
            for args, kwargs in invalid:
                with self.assertRaises(ValidationError, msg=f"{args} {kwargs}"):
                    self.users.create_user(*args, **kwargs)
        connect.assert_not_called()


class TestGetUser(UserManagerTestCase):
    def test_get_user_returns_body(self):
        doc, (sock,) = self._send(lambda: self.users.get_user("joe"), http_response(200, USER_DOC))
        self.assertEqual(sock.request_line, "GET /_users/org.couchdb.user:joe HTTP/1.0")
        self.assertEqual(doc, USER_DOC)

    def test_get_user_with_prefix(self):
        _, (sock,) = self._send(
            lambda: self.users.get_user("org.couchdb.user:joe", has_prefix=True), http_response(200, USER_DOC)
        )
        self.assertEqual(sock.request_line, "GET /_users/org.couchdb.user:joe HTTP/1.0")

    def test_get_user_with_decode_off(self):
        self.client.decode(False)
        doc, _ = self._send(lambda: self.users.get_user("joe"), http_response(200, USER_DOC))
        self.assertEqual(doc, USER_DOC)


class TestChangePassword(UserManagerTestCase):
    def test_strips_derived_fields(self):
        original = dict(USER_DOC)
        _, (sock,) = self._send(lambda: self.users.change_password(original, "new-pw"))

        self.assertEqual(sock.request_line, "PUT /_users/org.couchdb.user:joe HTTP/1.0")
        sent = json.loads(sock.request_body)
        self.assertEqual(
            sent,
            {
                "_id": "org.couchdb.user:joe",
                "_rev": "2-abc",
                "type": "user",
                "name": "joe",
                "roles": ["reader"],
                "password": "new-pw",
            },
        )
        self.assertEqual(original, USER_DOC)

    def test_validation(self):
        missing_id = {k: v for k, v in USER_DOC.items() if k != "_id"}
        missing_rev = {k: v for k, v in USER_DOC.items() if k != "_rev"}
        not_user = dict(USER_DOC, type="admin")
        for doc, password in ((missing_id, "pw"), (missing_rev, "pw"), (not_user, "pw"), (USER_DOC, "")):
            with self.assertRaises(ValidationError):
                self.users.change_password(doc, password)


class TestDeleteUser(UserManagerTestCase):
    def test_reads_then_deletes_by_revision(self):
        _, (get_sock, delete_sock) = self._send(
            lambda: self.users.delete_user("joe"),
            http_response(200, USER_DOC),
            http_response(200, {"ok": True, "id": "org.couchdb.user:joe", "rev": "3-def"}),
        )
        self.assertEqual(get_sock.request_line, "GET /_users/org.couchdb.user:joe HTTP/1.0")
        self.assertEqual(delete_sock.request_line, "DELETE /_users/org.couchdb.user:joe?rev=2-abc HTTP/1.0")


if __name__ == "__main__":
    unittest.main()
