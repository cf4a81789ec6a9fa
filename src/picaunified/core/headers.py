"""Header composition for unified and passthrough requests."""

from typing import Any, Dict, Mapping, Optional

from picaunified.models import RequestOptions
from picaunified.transport.base import update_headers

CONNECTION_HEADER = "x-pica-connection-key"


def compose_headers(
    default_headers: Mapping[str, Any],
    connection_key: str,
    options: Optional[RequestOptions] = None,
) -> Dict[str, str]:
    """Build the header map for one request.

    Only string-valued defaults are kept; per-verb buckets hold dicts and are
    dropped here, so bucket names never appear as headers. The connection
    header always replaces a same-named default. Passthrough headers go last
    and may replace anything, the connection header included. Names are
    matched case-insensitively at every step.

    Returns a new dict; ``default_headers`` is left untouched.
    """
    headers: Dict[str, str] = {}
    update_headers(
        headers, {key: value for key, value in default_headers.items() if isinstance(value, str)}
    )
    update_headers(headers, {CONNECTION_HEADER: connection_key})

    if options and options.passthrough_headers:
        update_headers(headers, options.passthrough_headers)

    return headers
