"""Error hierarchy for the unified API client.

- PicaError: base for everything raised by this package
- UpstreamError: the API answered with a failure status
- NetworkError: no response was received (connection refused, DNS, timeout)
- TransportError: raised by transports, normalized away by the executor
- ConfigurationError: client cannot be built from the given settings
"""

from typing import Any, Dict, Optional


class PicaError(Exception):
    """Base exception for unified API client errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ConfigurationError(PicaError):
    """Client settings are missing or invalid."""

    pass


class UpstreamError(PicaError):
    """The API responded with a failure status.

    ``body`` is the upstream error payload exactly as decoded from the
    response, so callers see the origin service's error shape unmodified.
    """

    def __init__(
        self,
        body: Any,
        status_code: int,
        headers: Optional[Dict[str, str]] = None,
    ):
        super().__init__(
            f"Upstream request failed with status {status_code}",
            {"status_code": status_code},
        )
        self.body = body
        self.status_code = status_code
        self.headers = headers or {}


class NetworkError(PicaError):
    """The request failed before any response was received."""

    def __init__(self, message: str = "Network failure", cause: Optional[BaseException] = None):
        super().__init__(message, {"cause": type(cause).__name__ if cause else None})
        self.cause = cause


class RequestTimeoutError(NetworkError):
    """The request timed out before a response arrived."""

    pass


class TransportError(PicaError):
    """Raw failure reported by a transport.

    Carries the HTTP response when the server answered with a non-2xx status,
    or ``None`` when the request never got a response. ``timed_out`` is set
    by the transport when no response arrived in time.
    """

    def __init__(self, message: str, response: Optional[Any] = None, timed_out: bool = False):
        super().__init__(message)
        self.response = response
        self.timed_out = timed_out
