"""Client factory for the unified API.

Holds the transport and the secret for the life of the process and hands out
cheap, per-connection resource and passthrough clients.

Usage:
    async with PicaClient(secret) as pica:
        contacts = pica.resource("contacts", connection_key)
        created = await contacts.create({"firstName": "Ada"})
        raw = await pica.passthrough(connection_key).call("GET", "users/me")
"""

from typing import Any, Optional, Type

import httpx

from picaunified.config import DEFAULT_BASE_URL, Config
from picaunified.core import PassthroughClient, RequestExecutor, ResourceClient
from picaunified.core.query import QueryConverter, filter_to_query
from picaunified.errors import ConfigurationError
from picaunified.registry import ResourceRegistry
from picaunified.transport import (
    AsyncHTTPClient,
    SecretAuth,
    Transport,
    TransportPolicy,
    update_headers,
)

JSON_CONTENT_TYPE = "application/json"


class PicaClient:
    """Factory for resource and passthrough clients sharing one transport."""

    def __init__(
        self,
        secret: Optional[str] = None,
        base_url: str = DEFAULT_BASE_URL,
        *,
        connect_timeout: float = 10.0,
        read_timeout: float = 30.0,
        transport: Optional[Transport] = None,
        http_transport: Optional[httpx.AsyncBaseTransport] = None,
        registry: Type[ResourceRegistry] = ResourceRegistry,
        converter: QueryConverter = filter_to_query,
    ):
        """Initialize the client.

        Args:
            secret: API secret sent with every request
            base_url: API root
            connect_timeout: Connect timeout for the default transport
            read_timeout: Read timeout for the default transport
            transport: Pre-built transport; a given ``secret`` is written into
                its default headers, otherwise they must already carry one
            http_transport: httpx transport for the default AsyncHTTPClient
            registry: Resource name to model lookup
            converter: Filter to query-map converter

        Raises:
            ConfigurationError: If neither a secret nor a transport is given
        """
        auth = SecretAuth(secret=secret or "")

        if transport is None:
            if not auth.is_configured():
                raise ConfigurationError("A secret is required to create a PicaClient")
            policy = TransportPolicy(
                base_url=base_url,
                connect_timeout=connect_timeout,
                read_timeout=read_timeout,
                default_headers={"Content-Type": JSON_CONTENT_TYPE},
            )
            transport = AsyncHTTPClient(auth=auth, policy=policy, http_transport=http_transport)
        elif auth.is_configured():
            update_headers(transport.default_headers, auth.get_headers())

        self._transport = transport
        self.base_url = base_url
        self.registry = registry
        self.converter = converter

    @classmethod
    def from_env(cls, **kwargs: Any) -> "PicaClient":
        """Create a client from PICA_* environment variables.

        Raises:
            ConfigurationError: If PICA_SECRET is not set
        """
        settings = Config()
        if not settings.secret:
            raise ConfigurationError("PICA_SECRET is not set")
        kwargs.setdefault("connect_timeout", settings.connect_timeout)
        kwargs.setdefault("read_timeout", settings.read_timeout)
        return cls(settings.secret, settings.base_url, **kwargs)

    def __repr__(self) -> str:
        return f"PicaClient(base_url={self.base_url!r})"

    @property
    def transport(self) -> Transport:
        """The shared transport."""
        return self._transport

    def _executor(self, connection_key: str) -> RequestExecutor:
        if not connection_key:
            raise ValueError("connection_key is required")
        return RequestExecutor(self._transport, connection_key, self.converter)

    def resource(
        self,
        name: str,
        connection_key: str,
        model: Optional[Type[Any]] = None,
    ) -> ResourceClient[Any]:
        """Client for one unified resource on one connection.

        ``model`` defaults to the registry's shape for ``name``.
        """
        return ResourceClient(
            self._executor(connection_key),
            name,
            model or self.registry.model_for(name),
        )

    def passthrough(self, connection_key: str) -> PassthroughClient:
        """Client for raw passthrough calls on one connection."""
        return PassthroughClient(self._executor(connection_key))

    async def aclose(self) -> None:
        """Close the transport if it holds resources."""
        close = getattr(self._transport, "aclose", None)
        if close is not None:
            await close()

    async def __aenter__(self) -> "PicaClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()
