"""Transport abstractions shared by the real and the in-memory transports.

- SecretAuth: static secret header authentication
- TransportPolicy: base URL, default headers, timeouts
- HTTPResponse: library-neutral response wrapper
- Transport: protocol the request executor talks to
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Protocol, runtime_checkable

SECRET_HEADER = "x-pica-secret"

# Keys of default_headers that hold per-verb header dicts instead of values
HEADER_BUCKETS = frozenset(
    {"common", "get", "post", "put", "patch", "delete", "head", "options"}
)


@dataclass
class SecretAuth:
    """Static secret authentication.

    Sends the secret verbatim in a dedicated header on every request.
    """

    secret: str = field(default="", repr=False)
    header_name: str = SECRET_HEADER

    def is_configured(self) -> bool:
        """Check if the secret is set."""
        return bool(self.secret)

    def get_headers(self) -> Dict[str, str]:
        """Get the secret header."""
        if not self.secret:
            return {}
        return {self.header_name: self.secret}


@dataclass
class TransportPolicy:
    """Settings for a transport: where to send requests and with what defaults.

    ``default_headers`` maps header names to string values. The bucket keys in
    HEADER_BUCKETS may instead map to dicts of headers that only apply to one
    HTTP verb ("common" applies to all of them).
    """

    base_url: str = ""

    # Timeouts (seconds)
    connect_timeout: float = 10.0
    read_timeout: float = 30.0

    # Headers
    user_agent: str = "picaunified/1.0"
    default_headers: Dict[str, Any] = field(default_factory=dict)


@dataclass
class HTTPResponse:
    """Simplified HTTP response wrapper.

    Used to provide consistent interface regardless of underlying HTTP library.
    """

    status_code: int
    headers: Dict[str, str]
    body: bytes = b""
    elapsed_seconds: float = 0.0
    _decoded: Any = field(default=None, init=False, repr=False)
    _is_decoded: bool = field(default=False, init=False, repr=False)

    @property
    def ok(self) -> bool:
        """Check if status code indicates success (2xx)."""
        return 200 <= self.status_code < 300

    def json(self) -> Any:
        """Decoded body.

        None for an empty body, the parsed JSON value when the body is JSON,
        otherwise the body as text.
        """
        if not self._is_decoded:
            self._decoded = _decode_body(self.body)
            self._is_decoded = True
        return self._decoded

    @classmethod
    def from_json(
        cls,
        status_code: int,
        data: Any = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> "HTTPResponse":
        """Build a response carrying ``data`` as a JSON body."""
        body = b"" if data is None else json.dumps(data).encode("utf-8")
        response_headers = {"content-type": "application/json"} if body else {}
        response_headers.update(headers or {})
        return cls(status_code=status_code, headers=response_headers, body=body)


def _decode_body(body: bytes) -> Any:
    if not body:
        return None
    text = body.decode("utf-8", errors="replace")
    try:
        return json.loads(text)
    except ValueError:
        return text


@runtime_checkable
class Transport(Protocol):
    """Protocol every transport implements.

    ``request`` performs a single attempt. A non-2xx answer or a failure to
    get any answer raises TransportError.
    """

    @property
    def default_headers(self) -> Dict[str, Any]:
        """Headers configured on the transport (may include verb buckets)."""
        ...

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: Optional[Any] = None,
        params: Optional[Dict[str, str]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> HTTPResponse:
        """Send one request and return the response."""
        ...


def merge_bucket_headers(
    default_headers: Dict[str, Any],
    method: str,
    extra_headers: Optional[Dict[str, str]] = None,
) -> Dict[str, str]:
    """Resolve the headers a transport sends for one request.

    Order (later wins): "common" bucket, the method's bucket, string defaults,
    then ``extra_headers``.
    """
    headers: Dict[str, str] = {}
    for bucket in ("common", method.lower()):
        values = default_headers.get(bucket)
        if isinstance(values, dict):
            update_headers(headers, {k: v for k, v in values.items() if isinstance(v, str)})

    update_headers(headers, {k: v for k, v in default_headers.items() if isinstance(v, str)})

    if extra_headers:
        update_headers(headers, extra_headers)

    return headers


def update_headers(headers: Dict[str, str], updates: Mapping[str, str]) -> Dict[str, str]:
    """Apply ``updates`` to ``headers`` in place, matching names case-insensitively.

    A header whose name differs from an update only in case is removed first,
    so each name is sent once and the update's spelling is kept.
    """
    for name, value in updates.items():
        lowered = name.lower()
        for existing in [key for key in headers if key.lower() == lowered]:
            del headers[existing]
        headers[name] = value
    return headers
