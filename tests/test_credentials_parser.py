"""Unit tests for credentials_parser module."""

import json
import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from settee.credentials_parser import (
    BasicCredentials,
    get_credentials_from_env,
    parse_credentials,
    resolve_credentials,
)

VALID_CREDENTIALS_DICT = {
    "username": "admin",
    "password": "secret",
}


def _write_credentials(data=None) -> str:
    with tempfile.NamedTemporaryFile(mode="w", suffix=".json", delete=False) as f:
        json.dump(VALID_CREDENTIALS_DICT if data is None else data, f)
        return f.name


class TestParseCredentials(unittest.TestCase):
    def test_parse_from_dict(self):
        creds = parse_credentials(VALID_CREDENTIALS_DICT)
        self.assertEqual(creds, BasicCredentials(username="admin", password="secret"))

    def test_parse_from_file(self):
        path = _write_credentials()
        try:
            creds = parse_credentials(path)
            self.assertEqual(creds.username, "admin")
            self.assertEqual(creds.password, "secret")
        finally:
            Path(path).unlink()

    def test_parse_file_not_found(self):
        with self.assertRaises(FileNotFoundError):
            parse_credentials("/nonexistent/path/creds.json")

    def test_parse_missing_key_raises(self):
        with self.assertRaises(KeyError) as ctx:
            parse_credentials({"username": "admin"})
        self.assertIn("password", str(ctx.exception))

    def test_parse_non_object_raises(self):
        path = _write_credentials(["admin", "secret"])
        try:
            with self.assertRaises(AttributeError):
                parse_credentials(path)
        finally:
            Path(path).unlink()


class TestGetCredentialsFromEnv(unittest.TestCase):
    @patch.dict(os.environ, {}, clear=True)
    @patch("settee.credentials_parser.credentials_store.load_credentials", return_value=None)
    def test_no_env_vars_returns_none(self, _):
        username, password = get_credentials_from_env()
        self.assertIsNone(username)
        self.assertIsNone(password)

    @patch.dict(os.environ, {}, clear=True)
    @patch(
        "settee.credentials_parser.credentials_store.load_credentials",
        return_value=BasicCredentials(username="kr_user", password="kr_pass"),
    )
    def test_falls_back_to_keyring(self, _):
        username, password = get_credentials_from_env()
        self.assertEqual(username, "kr_user")
        self.assertEqual(password, "kr_pass")

    @patch.dict(os.environ, {"SETTEE_USERNAME": "env_user", "SETTEE_PASSWORD": "env_pass"}, clear=True)
    @patch("settee.credentials_parser.credentials_store.load_credentials")
    def test_env_vars_take_precedence_over_keyring(self, mock_load):
        username, password = get_credentials_from_env()
        self.assertEqual(username, "env_user")
        self.assertEqual(password, "env_pass")
        mock_load.assert_not_called()

    @patch.dict(os.environ, {"SETTEE_USERNAME": "env_user", "SETTEE_PASSWORD": ""}, clear=True)
    @patch("settee.credentials_parser.credentials_store.load_credentials")
    def test_blank_password_is_a_password(self, mock_load):
        self.assertEqual(get_credentials_from_env(), ("env_user", ""))
        mock_load.assert_not_called()

    @patch.dict(os.environ, {"SETTEE_USERNAME": "env_user"}, clear=True)
    @patch("settee.credentials_parser.credentials_store.load_credentials", return_value=None)
    def test_only_username_returns_none_password(self, _):
        username, password = get_credentials_from_env()
        self.assertEqual(username, "env_user")
        self.assertIsNone(password)

    def test_settee_credentials_file(self):
        path = _write_credentials()
        try:
            with patch.dict(os.environ, {"SETTEE_CREDENTIALS": path}, clear=True):
                self.assertEqual(get_credentials_from_env(), ("admin", "secret"))
        finally:
            Path(path).unlink()

    @patch.dict(
        os.environ,
        {"SETTEE_CREDENTIALS": "/nonexistent.json", "SETTEE_USERNAME": "fallback_user"},
        clear=True,
    )
    def test_settee_credentials_takes_precedence_over_username(self):
        with self.assertRaises(FileNotFoundError):
            get_credentials_from_env()


class TestResolveCredentials(unittest.TestCase):
    def test_auth_tuple(self):
        self.assertEqual(resolve_credentials(auth=("tuple_user", "tuple_pass")), ("tuple_user", "tuple_pass"))

    def test_auth_tuple_wrong_length_raises(self):
        with self.assertRaises(ValueError) as ctx:
            resolve_credentials(auth=("only_one",))
        self.assertIn("tuple", str(ctx.exception))

    def test_explicit_username_and_password(self):
        self.assertEqual(resolve_credentials(username="u", password="p"), ("u", "p"))

    def test_auth_and_username_raises(self):
        with self.assertRaises(ValueError) as ctx:
            resolve_credentials(auth=("u", "p"), username="other", password="other")
        self.assertIn("Choose either", str(ctx.exception))

    def test_auth_file_path(self):
        path = _write_credentials()
        try:
            self.assertEqual(resolve_credentials(auth=path), ("admin", "secret"))
        finally:
            Path(path).unlink()

    def test_auth_basic_credentials(self):
        self.assertEqual(resolve_credentials(auth=BasicCredentials("u", "p")), ("u", "p"))

    def test_auth_dict(self):
        self.assertEqual(resolve_credentials(auth=VALID_CREDENTIALS_DICT), ("admin", "secret"))

    @patch.dict(os.environ, {"SETTEE_USERNAME": "env_user", "SETTEE_PASSWORD": "env_pass"}, clear=True)
    def test_falls_back_to_env(self):
        self.assertEqual(resolve_credentials(), ("env_user", "env_pass"))

    @patch.dict(os.environ, {}, clear=True)
    @patch("settee.credentials_parser.credentials_store.load_credentials", return_value=None)
    def test_no_credentials_returns_none(self, _):
        self.assertEqual(resolve_credentials(), (None, None))

    def test_auth_non_json_path_raises(self):
        with self.assertRaises(ValueError) as ctx:
            resolve_credentials(auth="/some/path/creds.yaml")
        self.assertIn("must be json", str(ctx.exception))

    def test_auth_unsupported_type_raises(self):
        with self.assertRaises(ValueError):
            resolve_credentials(auth=12345)

    @patch(
        "settee.credentials_parser.credentials_store.load_credentials",
        return_value=BasicCredentials(username="kr_user", password="kr_pass"),
    )
    def test_auth_keyring_uri(self, mock_load):
        self.assertEqual(resolve_credentials(auth="keyring://myprofile"), ("kr_user", "kr_pass"))
        mock_load.assert_called_once_with("myprofile")

    @patch("settee.credentials_parser.credentials_store.load_credentials", return_value=None)
    def test_auth_keyring_uri_not_found_raises(self, _):
        with self.assertRaises(ValueError) as ctx:
            resolve_credentials(auth="keyring://missing-profile")
        self.assertIn("missing-profile", str(ctx.exception))


if __name__ == "__main__":
    unittest.main()
