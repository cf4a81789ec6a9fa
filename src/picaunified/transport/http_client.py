"""Async HTTP transport backed by httpx.

Single attempt per request: no retries, no rate limiting. A non-2xx answer
raises TransportError carrying the response; a request that never got an
answer raises TransportError with no response and the httpx exception
chained as its cause (``timed_out`` set for httpx timeouts).
"""

import logging
import time
from typing import Any, Dict, Optional

import httpx

from picaunified.errors import TransportError
from picaunified.transport.base import (
    HTTPResponse,
    SecretAuth,
    TransportPolicy,
    merge_bucket_headers,
    update_headers,
)

logger = logging.getLogger(__name__)


class AsyncHTTPClient:
    """Async HTTP client owning one httpx.AsyncClient.

    The client is shared by every request issued through it; per-request
    headers and params are built fresh and never written back.
    """

    def __init__(
        self,
        auth: Optional[SecretAuth] = None,
        policy: Optional[TransportPolicy] = None,
        http_transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize async HTTP client.

        Args:
            auth: Secret authentication added to the default headers
            policy: Base URL, default headers and timeouts
            http_transport: Optional httpx transport (e.g. httpx.MockTransport)
        """
        self.policy = policy or TransportPolicy()
        self.base_url = self.policy.base_url.rstrip("/")

        defaults: Dict[str, Any] = {"User-Agent": self.policy.user_agent}
        defaults.update(self.policy.default_headers)
        if auth:
            update_headers(defaults, auth.get_headers())
        self._default_headers = defaults

        timeout = httpx.Timeout(
            connect=self.policy.connect_timeout,
            read=self.policy.read_timeout,
            write=self.policy.read_timeout,
            pool=self.policy.connect_timeout,
        )
        self._client = httpx.AsyncClient(timeout=timeout, transport=http_transport)

    def __repr__(self) -> str:
        return f"AsyncHTTPClient(base_url={self.base_url!r})"

    @property
    def default_headers(self) -> Dict[str, Any]:
        """Default headers, including per-verb buckets."""
        return self._default_headers

    def _get_url(self, path: str) -> str:
        """Build full URL from path."""
        if path.startswith("http://") or path.startswith("https://"):
            return path
        return f"{self.base_url}/{path.lstrip('/')}"

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: Optional[Any] = None,
        params: Optional[Dict[str, str]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> HTTPResponse:
        """Make one HTTP request.

        Args:
            method: HTTP method (GET, POST, etc.)
            path: URL path (relative to base_url)
            json: JSON body to send
            params: Query parameters
            headers: Headers applied on top of the defaults

        Returns:
            HTTPResponse for a 2xx answer

        Raises:
            TransportError: On a non-2xx answer (with response) or when no
                answer was received (without response)
        """
        method = method.upper()
        url = self._get_url(path)
        request_headers = merge_bucket_headers(self._default_headers, method, headers)

        start_time = time.monotonic()
        try:
            response = await self._client.request(
                method=method,
                url=url,
                json=json,
                params=params or None,
                headers=request_headers,
            )
        except httpx.TimeoutException as e:
            raise TransportError(f"{method} {url} timed out", timed_out=True) from e
        except httpx.HTTPError as e:
            raise TransportError(f"{method} {url} failed: {type(e).__name__}") from e

        elapsed = time.monotonic() - start_time
        logger.debug(f"{method} {url} -> {response.status_code} ({int(elapsed * 1000)}ms)")

        result = HTTPResponse(
            status_code=response.status_code,
            headers=dict(response.headers),
            body=response.content,
            elapsed_seconds=elapsed,
        )
        if not result.ok:
            raise TransportError(f"{method} {url} returned {result.status_code}", response=result)
        return result

    async def aclose(self) -> None:
        """Close the underlying httpx client."""
        await self._client.aclose()

    async def __aenter__(self) -> "AsyncHTTPClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()
