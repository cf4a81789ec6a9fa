"""Test configuration and fixtures."""

from typing import Any, Callable, Dict

import httpx
import pytest

from picaunified import PicaClient
from picaunified.core import RequestExecutor, ResourceClient
from picaunified.registry import ResourceRegistry
from picaunified.transport import DummyTransport

TEST_SECRET = "sk_test_secret"
TEST_CONNECTION_KEY = "live::hubspot::default::abc123"
TEST_BASE_URL = "https://api.test.local/v1"


@pytest.fixture
def default_headers() -> Dict[str, Any]:
    """Default headers mixing string values with per-verb buckets."""
    headers: Dict[str, Any] = {
        "Content-Type": "application/json",
        "x-pica-secret": TEST_SECRET,
    }
    headers.update(
        {
            "common": {"Accept": "application/json, text/plain, */*"},
            "get": {},
            "post": {"Content-Type": "application/json"},
            "put": {},
            "patch": {},
            "delete": {},
            "head": {},
        }
    )
    return headers


@pytest.fixture
def dummy_transport(default_headers) -> DummyTransport:
    """In-memory transport with secret and bucket defaults."""
    return DummyTransport(default_headers=default_headers)


@pytest.fixture
def executor(dummy_transport) -> RequestExecutor:
    """Executor bound to the test connection."""
    return RequestExecutor(dummy_transport, TEST_CONNECTION_KEY)


@pytest.fixture
def contacts(executor) -> ResourceClient:
    """Resource client for the "contacts" resource."""
    return ResourceClient(executor, "contacts")


@pytest.fixture
def make_client() -> Callable[[Callable[[httpx.Request], httpx.Response]], PicaClient]:
    """Build a PicaClient whose HTTP calls are answered by a handler."""

    def _make(handler: Callable[[httpx.Request], httpx.Response]) -> PicaClient:
        return PicaClient(
            TEST_SECRET,
            TEST_BASE_URL,
            http_transport=httpx.MockTransport(handler),
        )

    return _make


@pytest.fixture
def clean_registry():
    """Restore the resource registry after a test."""
    saved = dict(ResourceRegistry._resources)
    try:
        yield ResourceRegistry
    finally:
        ResourceRegistry._resources.clear()
        ResourceRegistry._resources.update(saved)
