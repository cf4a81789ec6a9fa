"""Request execution and response normalization.

One call per operation: compose headers and query, hand the request to the
transport, then shape the answer into an envelope dict or raise a
normalized error. No retries, no timeouts of its own, no logging.
"""

from typing import Any, Dict, Optional

from picaunified.core.headers import compose_headers
from picaunified.core.query import QueryConverter, compose_query, filter_to_query
from picaunified.errors import NetworkError, RequestTimeoutError, TransportError, UpstreamError
from picaunified.models import RequestOptions
from picaunified.transport.base import HTTPResponse, Transport

PASSTHROUGH_PREFIX = "/passthrough"

HEADERS_KEY = "headers"
STATUS_CODE_KEY = "statusCode"
PASSTHROUGH_KEY = "passthrough"
DATA_KEY = "data"


def _spread(body: Any) -> Dict[str, Any]:
    """Fields a response body contributes to a spread envelope."""
    if body is None:
        return {}
    if isinstance(body, dict):
        return dict(body)
    return {DATA_KEY: body}


class RequestExecutor:
    """Issues requests for one connection and normalizes the answers.

    Holds a reference to the shared transport plus the connection key it is
    bound to. Stateless otherwise, so one executor can serve concurrent
    calls.
    """

    def __init__(
        self,
        transport: Transport,
        connection_key: str,
        converter: QueryConverter = filter_to_query,
    ):
        self.transport = transport
        self.connection_key = connection_key
        self.converter = converter

    def __repr__(self) -> str:
        return f"RequestExecutor(connection_key={self.connection_key!r})"

    async def send(
        self,
        method: str,
        url: str,
        body: Any = None,
        options: Optional[RequestOptions] = None,
        query_params: Any = None,
        expected_status: Optional[int] = None,
    ) -> Dict[str, Any]:
        """Send a request and return a single-record envelope.

        For passthrough URLs the upstream body is nested under "passthrough";
        otherwise its fields are spread into the envelope. Either way the
        envelope carries "headers" and "statusCode".
        """
        response = await self._dispatch(method, url, body, options, query_params)

        if url.startswith(PASSTHROUGH_PREFIX):
            envelope = {PASSTHROUGH_KEY: response.json()}
        else:
            envelope = _spread(response.json())
        return self._finish(envelope, response, expected_status)

    async def send_list(
        self,
        method: str,
        url: str,
        body: Any = None,
        options: Optional[RequestOptions] = None,
        query_params: Any = None,
        expected_status: Optional[int] = None,
    ) -> Dict[str, Any]:
        """Send a request and return a list envelope.

        The body's own fields (records, cursors, ...) are always spread,
        whatever the URL.
        """
        response = await self._dispatch(method, url, body, options, query_params)
        return self._finish(_spread(response.json()), response, expected_status)

    async def _dispatch(
        self,
        method: str,
        url: str,
        body: Any,
        options: Optional[RequestOptions],
        query_params: Any,
    ) -> HTTPResponse:
        headers = compose_headers(self.transport.default_headers, self.connection_key, options)
        params = compose_query(query_params, options, self.converter)

        try:
            return await self.transport.request(
                method,
                url,
                json=body,
                params=params,
                headers=headers,
            )
        except TransportError as e:
            if e.response is not None:
                raise UpstreamError(
                    e.response.json(),
                    status_code=e.response.status_code,
                    headers=dict(e.response.headers),
                ) from None

            cause = e.__cause__
            if e.timed_out:
                raise RequestTimeoutError(f"{method} {url} timed out", cause=cause) from cause
            raise NetworkError(f"{method} {url} failed: {e}", cause=cause) from cause

    @staticmethod
    def _finish(
        envelope: Dict[str, Any],
        response: HTTPResponse,
        expected_status: Optional[int],
    ) -> Dict[str, Any]:
        envelope[HEADERS_KEY] = dict(response.headers)
        envelope[STATUS_CODE_KEY] = (
            expected_status if expected_status is not None else response.status_code
        )
        return envelope
