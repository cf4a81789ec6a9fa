"""In-memory transport for tests and offline development.

DummyTransport has the same surface as AsyncHTTPClient but never touches
the network. It can be configured to:
- Return canned responses per (method, path)
- Raise canned failures (with or without an upstream response)
- Delegate to a handler function for dynamic responses
- Record every call for assertions
"""

import asyncio
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple, Union

import httpx

from picaunified.errors import TransportError
from picaunified.transport.base import HTTPResponse, merge_bucket_headers

# Canned network errors of these types are reported as timeouts
TIMEOUT_ERRORS = (httpx.TimeoutException, TimeoutError, asyncio.TimeoutError)

Handler = Callable[[Dict[str, Any]], Union[HTTPResponse, Awaitable[HTTPResponse]]]


@dataclass
class DummyResponse:
    """Canned response for DummyTransport.

    ``status_code`` outside 2xx makes the call fail with the response
    attached. ``network_error`` makes the call fail with no response at all.
    """

    data: Any = None
    status_code: int = 200
    headers: Optional[Dict[str, str]] = None
    network_error: Optional[BaseException] = None
    delay_seconds: float = 0.0


class DummyTransport:
    """Transport that serves canned responses without network calls."""

    def __init__(
        self,
        default_headers: Optional[Dict[str, Any]] = None,
        handler: Optional[Handler] = None,
    ):
        """Initialize dummy transport.

        Args:
            default_headers: Default headers, including per-verb buckets
            handler: Fallback called with the recorded call for paths that
                have no canned response
        """
        self._default_headers = dict(default_headers or {})
        self._handler = handler
        self._responses: Dict[Tuple[str, str], DummyResponse] = {}
        self._call_log: List[Dict[str, Any]] = []

    @property
    def default_headers(self) -> Dict[str, Any]:
        """Default headers, including per-verb buckets."""
        return self._default_headers

    def set_response(self, method: str, path: str, response: DummyResponse) -> None:
        """Set canned response for a method and path."""
        self._responses[(method.upper(), path)] = response

    def clear_responses(self) -> None:
        """Clear all canned responses."""
        self._responses.clear()

    def get_call_log(self) -> List[Dict[str, Any]]:
        """Get log of all requests."""
        return self._call_log.copy()

    def clear_call_log(self) -> None:
        """Clear the call log."""
        self._call_log.clear()

    @property
    def last_call(self) -> Optional[Dict[str, Any]]:
        """Most recent request, or None."""
        return self._call_log[-1] if self._call_log else None

    def call_count(self, method: Optional[str] = None) -> int:
        """Count requests, optionally for one method."""
        if method is None:
            return len(self._call_log)
        return sum(1 for call in self._call_log if call["method"] == method.upper())

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: Optional[Any] = None,
        params: Optional[Dict[str, str]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> HTTPResponse:
        """Record the request and serve the configured response."""
        method = method.upper()
        call = {
            "method": method,
            "path": path,
            "json": json,
            "params": dict(params or {}),
            "headers": merge_bucket_headers(self._default_headers, method, headers),
        }
        self._call_log.append(call)

        canned = self._responses.get((method, path))
        if canned is not None:
            return await self._serve(method, path, canned)

        if self._handler is not None:
            result = self._handler(call)
            if asyncio.iscoroutine(result):
                result = await result
            return self._check(method, path, result)

        raise TransportError(f"No canned response for {method} {path}")

    async def _serve(self, method: str, path: str, canned: DummyResponse) -> HTTPResponse:
        if canned.delay_seconds > 0:
            await asyncio.sleep(canned.delay_seconds)

        if canned.network_error is not None:
            raise TransportError(
                f"{method} {path} failed",
                timed_out=isinstance(canned.network_error, TIMEOUT_ERRORS),
            ) from canned.network_error

        response = HTTPResponse.from_json(canned.status_code, canned.data, canned.headers)
        return self._check(method, path, response)

    @staticmethod
    def _check(method: str, path: str, response: HTTPResponse) -> HTTPResponse:
        if not response.ok:
            raise TransportError(f"{method} {path} returned {response.status_code}", response=response)
        return response
