"""Transports the unified API core sends requests through.

Key components:
- Transport Protocol: interface the request executor talks to
- SecretAuth: static secret header
- TransportPolicy: base URL, default headers, timeouts
- AsyncHTTPClient: httpx-backed transport
- DummyTransport: in-memory transport without network calls
"""

from .base import (
    HEADER_BUCKETS,
    SECRET_HEADER,
    HTTPResponse,
    SecretAuth,
    Transport,
    TransportPolicy,
    merge_bucket_headers,
    update_headers,
)
from .dummy import DummyResponse, DummyTransport
from .http_client import AsyncHTTPClient

__all__ = [
    # Protocol and policy
    "Transport",
    "TransportPolicy",
    "HEADER_BUCKETS",
    "merge_bucket_headers",
    "update_headers",
    # Auth
    "SecretAuth",
    "SECRET_HEADER",
    # Responses
    "HTTPResponse",
    # Implementations
    "AsyncHTTPClient",
    "DummyTransport",
    "DummyResponse",
]
