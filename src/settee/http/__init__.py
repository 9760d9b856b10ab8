"""HTTP/1.0 transaction engine: request building, transport, response parsing."""

from settee.http.engine import HttpEngine
from settee.http.response import HttpInfo, Response, ResponseHeaders

__all__ = ["HttpEngine", "HttpInfo", "Response", "ResponseHeaders"]
