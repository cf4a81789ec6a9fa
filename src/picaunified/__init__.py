"""Async client for a connector gateway's unified REST API.

Key components:
- PicaClient: owns the transport and secret, hands out per-connection clients
- ResourceClient: create/upsert/list/get/update/count/delete on /unified/<name>
- PassthroughClient: raw calls to /passthrough/<path>
- Error hierarchy: UpstreamError, NetworkError, ...
"""

import logging
from typing import Optional

from picaunified.client import PicaClient
from picaunified.config import DEFAULT_BASE_URL, config
from picaunified.core import (
    CONNECTION_HEADER,
    PassthroughClient,
    RequestExecutor,
    ResourceClient,
    compose_headers,
    compose_query,
    filter_to_query,
)
from picaunified.errors import (
    ConfigurationError,
    NetworkError,
    PicaError,
    RequestTimeoutError,
    TransportError,
    UpstreamError,
)
from picaunified.models import ListFilter, RequestOptions, UnifiedEntity
from picaunified.registry import ResourceRegistry

__version__ = "0.1.0"


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """Attach a stream handler to the package logger.

    Args:
        level: Log level name; defaults to PICA_LOG_LEVEL

    Returns:
        The package logger
    """
    logger = logging.getLogger(__name__)
    logger.setLevel((level or config.log_level).upper())
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
        logger.addHandler(handler)
    return logger


__all__ = [
    # Client
    "PicaClient",
    "DEFAULT_BASE_URL",
    "ResourceRegistry",
    # Core
    "RequestExecutor",
    "ResourceClient",
    "PassthroughClient",
    "compose_headers",
    "compose_query",
    "filter_to_query",
    "CONNECTION_HEADER",
    # Models
    "RequestOptions",
    "ListFilter",
    "UnifiedEntity",
    # Errors
    "PicaError",
    "UpstreamError",
    "NetworkError",
    "RequestTimeoutError",
    "TransportError",
    "ConfigurationError",
    # Logging
    "configure_logging",
    "__version__",
]
