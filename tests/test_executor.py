"""Tests for RequestExecutor.

Tests cover:
- Envelope shaping (spread vs passthrough nesting, list variant)
- Reported status code (expected vs actual)
- Header and query composition reaching the transport
- Error normalization (upstream body, network failures)
"""

import asyncio
import copy

import httpx
import pytest

from picaunified.core import CONNECTION_HEADER, RequestExecutor
from picaunified.errors import (
    NetworkError,
    RequestTimeoutError,
    TransportError,
    UpstreamError,
)
from picaunified.models import RequestOptions
from picaunified.transport import DummyResponse, DummyTransport, HTTPResponse

# =============================================================================
# Envelopes
# =============================================================================


class TestSingleEnvelope:
    """Tests for send()."""

    @pytest.mark.asyncio
    async def test_unified_body_spread(self, executor, dummy_transport):
        """Body fields sit at the top level next to headers and statusCode."""
        dummy_transport.set_response(
            "GET",
            "/unified/contacts/c1",
            DummyResponse(data={"id": "c1", "name": "Ada"}, headers={"x-request-id": "r1"}),
        )

        envelope = await executor.send("GET", "/unified/contacts/c1")

        assert envelope["id"] == "c1"
        assert envelope["name"] == "Ada"
        assert envelope["statusCode"] == 200
        assert envelope["headers"]["x-request-id"] == "r1"
        assert "passthrough" not in envelope

    @pytest.mark.asyncio
    async def test_passthrough_body_nested(self, executor, dummy_transport):
        """Passthrough URLs nest the body under "passthrough"."""
        dummy_transport.set_response(
            "GET", "/passthrough/users/me", DummyResponse(data={"id": "u1"})
        )

        envelope = await executor.send("GET", "/passthrough/users/me")

        assert envelope["passthrough"] == {"id": "u1"}
        assert "id" not in envelope
        assert envelope["statusCode"] == 200
        assert "headers" in envelope

    @pytest.mark.asyncio
    async def test_expected_status_reported(self, executor, dummy_transport):
        """The declared success code replaces the transport's code."""
        dummy_transport.set_response("PATCH", "/unified/contacts/c1", DummyResponse(status_code=200))

        envelope = await executor.send("PATCH", "/unified/contacts/c1", {"a": 1}, expected_status=204)

        assert envelope["statusCode"] == 204

    @pytest.mark.asyncio
    async def test_actual_status_without_expected(self, executor, dummy_transport):
        dummy_transport.set_response("POST", "/passthrough/x", DummyResponse(status_code=202))
        envelope = await executor.send("POST", "/passthrough/x")
        assert envelope["statusCode"] == 202

    @pytest.mark.asyncio
    async def test_empty_body(self, executor, dummy_transport):
        """An empty body contributes no fields."""
        dummy_transport.set_response("DELETE", "/unified/contacts/c1", DummyResponse(status_code=204))

        envelope = await executor.send("DELETE", "/unified/contacts/c1", expected_status=204)

        assert set(envelope) == {"headers", "statusCode"}

    @pytest.mark.asyncio
    async def test_non_mapping_body_under_data(self, executor, dummy_transport):
        dummy_transport.set_response("GET", "/unified/tags", DummyResponse(data=["a", "b"]))
        envelope = await executor.send("GET", "/unified/tags")
        assert envelope["data"] == ["a", "b"]

    @pytest.mark.asyncio
    async def test_envelope_fields_win_over_body(self, executor, dummy_transport):
        """headers/statusCode in the body are replaced by the envelope's own."""
        dummy_transport.set_response(
            "GET", "/unified/contacts/c1", DummyResponse(data={"statusCode": 500, "headers": "x"})
        )
        envelope = await executor.send("GET", "/unified/contacts/c1", expected_status=200)
        assert envelope["statusCode"] == 200
        assert isinstance(envelope["headers"], dict)


class TestListEnvelope:
    """Tests for send_list()."""

    @pytest.mark.asyncio
    async def test_list_fields_spread(self, executor, dummy_transport):
        dummy_transport.set_response(
            "GET",
            "/unified/contacts",
            DummyResponse(data={"rows": [{"id": "c1"}], "nextCursor": "n1"}),
        )

        envelope = await executor.send_list("GET", "/unified/contacts", expected_status=200)

        assert envelope["rows"] == [{"id": "c1"}]
        assert envelope["nextCursor"] == "n1"
        assert envelope["statusCode"] == 200
        assert "headers" in envelope

    @pytest.mark.asyncio
    async def test_list_never_nests(self, executor, dummy_transport):
        """Even for passthrough URLs the list variant spreads."""
        dummy_transport.set_response(
            "GET", "/passthrough/items", DummyResponse(data={"items": [1, 2]})
        )

        envelope = await executor.send_list("GET", "/passthrough/items")

        assert envelope["items"] == [1, 2]
        assert "passthrough" not in envelope


# =============================================================================
# Request building
# =============================================================================


class TestRequestBuilding:
    """Tests for what reaches the transport."""

    @pytest.mark.asyncio
    async def test_headers_and_query(self, executor, dummy_transport):
        dummy_transport.set_response("GET", "/unified/contacts", DummyResponse(data={}))
        options = RequestOptions(
            passthrough_headers={"X-Trace": "t1"},
            passthrough_query={"limit": "50"},
        )

        await executor.send_list("GET", "/unified/contacts", None, options, {"limit": 10, "cursor": "c"})

        call = dummy_transport.last_call
        assert call["params"] == {"limit": "50", "cursor": "c"}
        assert call["headers"][CONNECTION_HEADER] == "live::hubspot::default::abc123"
        assert call["headers"]["x-pica-secret"] == "sk_test_secret"
        assert call["headers"]["X-Trace"] == "t1"
        for bucket in ("common", "get", "post", "put", "patch", "delete", "head"):
            assert bucket not in call["headers"]

    @pytest.mark.asyncio
    async def test_body_forwarded(self, executor, dummy_transport):
        dummy_transport.set_response("POST", "/unified/contacts", DummyResponse(data={"id": "1"}))
        await executor.send("POST", "/unified/contacts", {"name": "Ada"}, expected_status=201)
        assert dummy_transport.last_call["json"] == {"name": "Ada"}

    @pytest.mark.asyncio
    async def test_transport_defaults_untouched(self, executor, dummy_transport):
        before = copy.deepcopy(dummy_transport.default_headers)
        dummy_transport.set_response("GET", "/unified/contacts", DummyResponse(data={}))
        options = RequestOptions(passthrough_headers={"Content-Type": "text/csv"})

        await executor.send("GET", "/unified/contacts", None, options)

        assert dummy_transport.default_headers == before

    def test_repr(self, executor):
        assert "abc123" in repr(executor)
        assert "sk_test_secret" not in repr(executor)


# =============================================================================
# Error normalization
# =============================================================================


class TestErrorNormalization:
    """Tests for failure translation."""

    @pytest.mark.asyncio
    async def test_upstream_body_exact(self, executor, dummy_transport):
        """The raised error carries the upstream body unmodified."""
        dummy_transport.set_response(
            "GET",
            "/unified/contacts/c1",
            DummyResponse(data={"code": "X", "message": "Y"}, status_code=404),
        )

        with pytest.raises(UpstreamError) as exc_info:
            await executor.send("GET", "/unified/contacts/c1")

        assert exc_info.value.body == {"code": "X", "message": "Y"}
        assert exc_info.value.status_code == 404
        assert not isinstance(exc_info.value, TransportError)

    @pytest.mark.asyncio
    async def test_upstream_text_body(self, default_headers):
        """Non-JSON error bodies come through as text."""

        async def handler(call):
            return HTTPResponse(502, {}, b"Bad Gateway")

        executor = RequestExecutor(DummyTransport(default_headers, handler=handler), "conn-1")
        with pytest.raises(UpstreamError) as exc_info:
            await executor.send("GET", "/unified/contacts")
        assert exc_info.value.body == "Bad Gateway"

    @pytest.mark.asyncio
    async def test_network_failure_keeps_cause(self, executor, dummy_transport):
        """No response: NetworkError with the low-level cause."""
        cause = httpx.ConnectError("connection refused")
        dummy_transport.set_response("GET", "/unified/contacts", DummyResponse(network_error=cause))

        with pytest.raises(NetworkError) as exc_info:
            await executor.send("GET", "/unified/contacts")

        assert exc_info.value.cause is cause
        assert exc_info.value.__cause__ is cause
        assert not isinstance(exc_info.value, RequestTimeoutError)

    @pytest.mark.asyncio
    async def test_timeout_failure(self, executor, dummy_transport):
        cause = httpx.ReadTimeout("too slow")
        dummy_transport.set_response("GET", "/unified/contacts", DummyResponse(network_error=cause))

        with pytest.raises(RequestTimeoutError) as exc_info:
            await executor.send("GET", "/unified/contacts")

        assert exc_info.value.cause is cause

    @pytest.mark.asyncio
    async def test_asyncio_timeout_failure(self, executor, dummy_transport):
        dummy_transport.set_response(
            "GET", "/unified/contacts", DummyResponse(network_error=asyncio.TimeoutError())
        )
        with pytest.raises(RequestTimeoutError):
            await executor.send("GET", "/unified/contacts")

    @pytest.mark.asyncio
    async def test_timeout_follows_transport_flag(self, default_headers):
        """The transport decides what counts as a timeout."""

        async def timed_out(call):
            raise TransportError("deadline passed", timed_out=True)

        async def refused(call):
            raise TransportError("refused") from ConnectionRefusedError()

        executor = RequestExecutor(DummyTransport(default_headers, handler=timed_out), "conn-1")
        with pytest.raises(RequestTimeoutError) as exc_info:
            await executor.send("GET", "/unified/contacts")
        assert exc_info.value.cause is None

        executor = RequestExecutor(DummyTransport(default_headers, handler=refused), "conn-1")
        with pytest.raises(NetworkError) as exc_info:
            await executor.send("GET", "/unified/contacts")
        assert not isinstance(exc_info.value, RequestTimeoutError)
        assert isinstance(exc_info.value.cause, ConnectionRefusedError)

    @pytest.mark.asyncio
    async def test_no_retry(self, executor, dummy_transport):
        dummy_transport.set_response("GET", "/unified/contacts", DummyResponse(status_code=503))
        with pytest.raises(UpstreamError):
            await executor.send("GET", "/unified/contacts")
        assert dummy_transport.call_count() == 1


class TestConcurrency:
    """Tests for concurrent calls through one executor."""

    @pytest.mark.asyncio
    async def test_concurrent_calls_isolated(self, dummy_transport):
        """Interleaved calls keep their own headers and bodies."""
        dummy_transport.set_response(
            "GET", "/unified/contacts/slow", DummyResponse(data={"id": "slow"}, delay_seconds=0.05)
        )
        dummy_transport.set_response(
            "GET", "/unified/contacts/fast", DummyResponse(data={"id": "fast"})
        )
        first = RequestExecutor(dummy_transport, "conn-a")
        second = RequestExecutor(dummy_transport, "conn-b")

        slow, fast = await asyncio.gather(
            first.send("GET", "/unified/contacts/slow", None, RequestOptions(passthrough_headers={"X-Call": "a"})),
            second.send("GET", "/unified/contacts/fast", None, RequestOptions(passthrough_headers={"X-Call": "b"})),
        )

        assert slow["id"] == "slow"
        assert fast["id"] == "fast"
        sent = {call["path"]: call["headers"] for call in dummy_transport.get_call_log()}
        assert sent["/unified/contacts/slow"][CONNECTION_HEADER] == "conn-a"
        assert sent["/unified/contacts/slow"]["X-Call"] == "a"
        assert sent["/unified/contacts/fast"][CONNECTION_HEADER] == "conn-b"
        assert sent["/unified/contacts/fast"]["X-Call"] == "b"
