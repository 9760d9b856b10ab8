"""CouchDB document API on top of the HTTP/1.0 engine."""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING, Any, List, Mapping, Optional, Union

if TYPE_CHECKING:
    from typing import Self

from settee import DEFAULT_HOST, DEFAULT_PORT
from settee._user_agent import get_user_agent
from settee.config import AuthType, ConnectionConfig
from settee.credentials_parser import ANY_AUTH_TYPE, resolve_credentials
from settee.env_config import DEFAULT_ENV_CONFIG_FILE_PATH, load_env_config, resolve_environment
from settee.exceptions import ValidationError
from settee.http.engine import HttpEngine
from settee.http.response import Response
from settee.serde import encode_body, serialize_document

logger = logging.getLogger(__name__)

REPLICATE_PATH = "/_replicate"
ALL_DBS_PATH = "/_all_dbs"
UUIDS_PATH = "/_uuids"


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _non_empty_str(value: Any) -> bool:
    return isinstance(value, str) and bool(value)


def _check_port(port: Any) -> None:
    number = 0
    if isinstance(port, (str, int)) and not isinstance(port, bool):
        try:
            number = int(port)
        except ValueError:
            number = 0
    if not 0 < number < 65536:
        raise ValidationError(f"Invalid port {port!r}: expected an integer between 1 and 65535.")


def _all_docs_query(
    operation: str,
    include_docs: bool,
    limit: Optional[int],
    startkey: Optional[str],
    endkey: Optional[str],
) -> str:
    params = []

    if not isinstance(include_docs, bool):
        raise ValidationError(f"{operation}() expected a boolean for include_docs.")
    if include_docs:
        params.append("include_docs=true")

    if startkey is not None:
        if not isinstance(startkey, str):
            raise ValidationError(f"{operation}() expected a string for startkey.")
        params.append(f"startkey={startkey}")

    if endkey is not None:
        if not isinstance(endkey, str):
            raise ValidationError(f"{operation}() expected a string for endkey.")
        params.append(f"endkey={endkey}")

    if limit is not None:
        if not _is_int(limit) or limit < 0:
            raise ValidationError(f"{operation}() expected a non-negative integer for limit.")
        params.append(f"limit={limit}")

    return "?" + "&".join(params) if params else ""


class CouchClient:
    """Client for a CouchDB server.

    Every call opens its own connection, sends one HTTP/1.0 request, reads the response
    until the server closes the connection and returns a :class:`Response` with
    ``.headers`` (status line info under ``.headers.http``) and ``.body``.

    Example:
        client = CouchClient("127.0.0.1", 5984, database="test")
        client.put("doc1", {"a": 1}).body
        # {"ok": True, "id": "doc1", "rev": "1-..."}
    """

    def __init__(
        self,
        host: str = DEFAULT_HOST,
        port: Union[str, int] = DEFAULT_PORT,
        *,
        auth: ANY_AUTH_TYPE = None,
        database: Optional[str] = None,
        decode: bool = True,
        timeout: Optional[float] = None,
        client_name: Optional[str] = None,
    ):
        """Initialize the client.

        Args:
            host: Server host name or address
            port: Server port
            auth: Basic credentials - (username, password) tuple, BasicCredentials,
                dict, path to a credentials json file or "keyring://<profile>".
                None means no Authorization header.
            database: Database to select
            decode: Decode response bodies from JSON
            timeout: Socket timeout in seconds. None uses the socket default.
            client_name: Name added to User-Agent
        """
        _check_port(port)
        self.config = ConnectionConfig(
            host=host,
            port=port,
            timeout=timeout,
            user_agent=get_user_agent(client_name),
        )
        self._engine = HttpEngine(self.config)
        self._database: Optional[str] = None

        self.decode(decode)
        if database is not None:
            self.set_database(database)
        if auth is not None:
            username, password = resolve_credentials(auth)
            self.login(username, password)

    @classmethod
    def from_env(
        cls,
        env: Optional[str] = None,
        *,
        env_config_path: Union[str, os.PathLike] = "",
        host: Optional[str] = None,
        port: Union[str, int, None] = None,
        database: Optional[str] = None,
        **kwargs,
    ) -> Self:
        """Create a client from a named environment in the config file.

        Credentials not set on the environment are looked up in the SETTEE_* environment
        variables and the keyring.

        Args:
            env: Environment name to look up in the config file. Defaults to the
                config's default environment.
            env_config_path: Path to config file. Defaults to ~/.config/settee/environments.json.
            host: Overrides the environment's host
            port: Overrides the environment's port
            database: Overrides the environment's database
            **kwargs: Additional arguments passed to the constructor (e.g. decode, timeout).
        """
        config_file_path = env_config_path or DEFAULT_ENV_CONFIG_FILE_PATH
        resolved = resolve_environment(load_env_config(config_file_path), env)
        logger.debug("Using environment %s", resolved.name)

        kwargs["database"] = database or resolved.database
        if "auth" not in kwargs:
            username, password = resolve_credentials(resolved.credentials)
            if username is not None or password is not None:
                kwargs["auth"] = (username, password)
        return cls(host or resolved.host, port or resolved.port, **kwargs)

    # -- configuration -------------------------------------------------------

    def login(self, username: Optional[str], password: Optional[str], auth_type: AuthType = AuthType.BASIC) -> None:
        """Send credentials with every following request. Only HTTP Basic is supported."""
        if auth_type != AuthType.BASIC:
            raise ValidationError("Unknown auth type for login()")

        self.config.username = username
        self.config.password = password
        self.config.auth_type = AuthType(auth_type)

    def decode(self, decode: bool) -> None:
        """Whether response bodies are returned decoded from JSON or as raw text."""
        if not isinstance(decode, bool):
            raise ValidationError("decode() expected a boolean")
        self.config.decode = decode

    def set_database(self, name: str) -> None:
        if not isinstance(name, str):
            raise ValidationError("set_database() expected a string.")
        self._database = name

    @property
    def database(self) -> Optional[str]:
        return self._database

    def _db_path(self) -> str:
        if not self._database:
            raise ValidationError("No database specified.")
        return f"/{self._database}"

    def request(
        self,
        method: str,
        path: str,
        body: Optional[bytes] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> Response:
        """Send a raw request. ``path`` must already be query-encoded."""
        return self._engine.request(method, path, body, headers)

    # -- documents -----------------------------------------------------------

    def get(self, path: str) -> Response:
        """GET a document or any other resource below the selected database."""
        db = self._db_path()
        if not isinstance(path, str):
            raise ValidationError("get() expected a string for the path.")
        return self.request("GET", f"{db}/{path.lstrip('/')}")

    def put(self, doc_id: str, data: Any) -> Response:
        db = self._db_path()
        if not _non_empty_str(doc_id):
            raise ValidationError("put() expected a string for the doc id.")
        if data is None:
            raise ValidationError("put() needs an object for data - are you trying to use delete()?")
        doc = serialize_document(data)
        return self.request("PUT", f"{db}/{doc_id}", encode_body(doc))

    def post(self, data: Any) -> Response:
        db = self._db_path()
        if data is None:
            raise ValidationError("post() needs an object for data.")
        doc = serialize_document(data)
        return self.request("POST", db, encode_body(doc))

    def delete(self, doc_id: str, rev: str) -> Response:
        db = self._db_path()
        if not _non_empty_str(doc_id) or not _non_empty_str(rev):
            raise ValidationError("delete() expects two strings.")
        return self.request("DELETE", f"{db}/{doc_id}?rev={rev}")

    def copy(self, src_id: str, dst_id: str, dst_rev: Optional[str] = None) -> Response:
        """Copy a document server side. Give ``dst_rev`` to overwrite an existing destination."""
        db = self._db_path()
        if not _non_empty_str(src_id):
            raise ValidationError("copy() got an invalid source ID")
        if not _non_empty_str(dst_id):
            raise ValidationError("copy() got an invalid destination ID")
        if dst_rev is not None and not _non_empty_str(dst_rev):
            raise ValidationError("copy() got an invalid destination revision")

        destination = f"{dst_id}?rev={dst_rev}" if dst_rev else dst_id
        return self.request("COPY", f"{db}/{src_id}", headers={"Destination": destination})

    def bulk(self, docs: List[Any], all_or_nothing: bool = True) -> Response:
        """Write many documents with one request to ``_bulk_docs``.

        ``all_or_nothing`` is only sent when it is False.
        """
        db = self._db_path()
        if not isinstance(docs, list):
            raise ValidationError("bulk() expects a list for its first argument")
        if not isinstance(all_or_nothing, bool):
            raise ValidationError("bulk() expects a boolean for its second argument")

        payload = {} if all_or_nothing else {"all_or_nothing": False}
        payload["docs"] = [serialize_document(doc) for doc in docs]
        return self.request("POST", f"{db}/_bulk_docs", encode_body(payload))

    def get_all_docs(
        self,
        include_docs: bool = False,
        limit: Optional[int] = None,
        startkey: Optional[str] = None,
        endkey: Optional[str] = None,
    ) -> Response:
        """Query ``_all_docs``. ``startkey``/``endkey`` are sent as given (JSON-encode them yourself)."""
        db = self._db_path()
        query = _all_docs_query("get_all_docs", include_docs, limit, startkey, endkey)
        return self.request("GET", f"{db}/_all_docs{query}")

    def get_all_docs_by_seq(
        self,
        include_docs: bool = False,
        limit: Optional[int] = None,
        startkey: Optional[str] = None,
        endkey: Optional[str] = None,
    ) -> Response:
        db = self._db_path()
        query = _all_docs_query("get_all_docs_by_seq", include_docs, limit, startkey, endkey)
        return self.request("GET", f"{db}/_all_docs_by_seq{query}")

    def compact(self, view_name: Optional[str] = None) -> Response:
        """Compact the selected database, or one of its views when ``view_name`` is given."""
        db = self._db_path()
        if view_name is not None and not isinstance(view_name, str):
            raise ValidationError("compact() expected a string for the view name.")
        suffix = f"/{view_name}" if view_name else ""
        return self.request("POST", f"{db}/_compact{suffix}")

    # -- server --------------------------------------------------------------

    def get_all_databases(self) -> Response:
        return self.request("GET", ALL_DBS_PATH)

    def generate_ids(self, count: int = 10) -> Response:
        if not _is_int(count) or count < 0:
            raise ValidationError("generate_ids() expected an integer >= 0.")
        return self.request("GET", f"{UUIDS_PATH}?count={count}")

    def create_database(self, name: str) -> Response:
        if not _non_empty_str(name):
            raise ValidationError("create_database() expected a valid database name")
        return self.request("PUT", f"/{name}")

    def delete_database(self, name: str) -> Response:
        if not _non_empty_str(name):
            raise ValidationError("delete_database() expected a valid database name")
        return self.request("DELETE", f"/{name}")

    def replicate(self, source: str, target: str, continuous: bool = False) -> Response:
        if not _non_empty_str(source):
            raise ValidationError("replicate() is missing a source to replicate from.")
        if not _non_empty_str(target):
            raise ValidationError("replicate() is missing a target to replicate to.")
        if not isinstance(continuous, bool):
            raise ValidationError("replicate() expected a boolean for continuous.")

        payload = {"source": source, "target": target}
        if continuous:
            payload["continuous"] = True
        logger.debug("Replicating %s -> %s (continuous=%s)", source, target, continuous)
        return self.request("POST", REPLICATE_PATH, encode_body(payload))
