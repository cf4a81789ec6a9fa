"""Request construction and response normalization shared by every resource."""

from .executor import PASSTHROUGH_PREFIX, RequestExecutor
from .headers import CONNECTION_HEADER, compose_headers
from .query import compose_query, filter_to_query, format_query_value, options_to_query
from .resources import UNIFIED_PREFIX, PassthroughClient, ResourceClient

__all__ = [
    "CONNECTION_HEADER",
    "PASSTHROUGH_PREFIX",
    "UNIFIED_PREFIX",
    "compose_headers",
    "compose_query",
    "filter_to_query",
    "format_query_value",
    "options_to_query",
    "RequestExecutor",
    "ResourceClient",
    "PassthroughClient",
]
