"""Unit tests for HttpClientTransport.

Uses httpx.MockTransport to script server behaviour: SSE and JSON bodies,
unrelated ids, malformed payloads, slow responses and connection failures.
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Callable
from typing import Any

import httpx
import pytest

from example_mcp_server.client.transport import HttpClientTransport
from example_mcp_server.config import ClientConfig
from example_mcp_server.protocol.errors import (
    DecodeError,
    ProtocolError,
    RequestTimeoutError,
    TransportError,
    unwrap_response,
)

URL = "http://testserver/mcp"


def sse(*envelopes: dict[str, Any] | str) -> httpx.Response:
    """Build an SSE response with one event per envelope."""
    lines = []
    for envelope in envelopes:
        payload = envelope if isinstance(envelope, str) else json.dumps(envelope)
        lines.append(f"event: message\ndata: {payload}\n\n")
    return httpx.Response(200, headers={"content-type": "text/event-stream"}, content="".join(lines).encode())


def result(request_id: int | None, value: Any) -> dict[str, Any]:
    return {"jsonrpc": "2.0", "id": request_id, "result": value}


def echo_handler(request: httpx.Request) -> httpx.Response:
    body = json.loads(request.content)
    return sse(result(body["id"], {"method": body["method"], "params": body.get("params")}))


def make_transport(handler: Callable[[httpx.Request], Any], timeout: float = 5.0) -> HttpClientTransport:
    return HttpClientTransport(ClientConfig(base_url=URL, timeout=timeout), transport=httpx.MockTransport(handler))


# =============================================================================
# Request encoding
# =============================================================================


class TestRequestEncoding:
    """Tests for what goes on the wire."""

    @pytest.mark.asyncio
    async def test_headers_and_body(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return echo_handler(request)

        async with make_transport(handler) as transport:
            await transport.send("tools/call", {"name": "echo", "arguments": {"message": "hi"}})

        request = seen[0]
        assert request.method == "POST"
        assert str(request.url) == URL
        assert request.headers["content-type"] == "application/json"
        assert "text/event-stream" in request.headers["accept"]
        assert json.loads(request.content) == {
            "jsonrpc": "2.0",
            "id": 1,
            "method": "tools/call",
            "params": {"name": "echo", "arguments": {"message": "hi"}},
        }

    @pytest.mark.asyncio
    async def test_ids_strictly_increasing(self) -> None:
        ids: list[int] = []

        def handler(request: httpx.Request) -> httpx.Response:
            ids.append(json.loads(request.content)["id"])
            return echo_handler(request)

        async with make_transport(handler) as transport:
            for _ in range(5):
                await transport.send("ping")

        assert ids == [1, 2, 3, 4, 5]

    @pytest.mark.asyncio
    async def test_concurrent_ids_are_unique(self) -> None:
        ids: list[int] = []

        def handler(request: httpx.Request) -> httpx.Response:
            ids.append(json.loads(request.content)["id"])
            return echo_handler(request)

        async with make_transport(handler) as transport:
            responses = await asyncio.gather(*(transport.send("ping") for _ in range(10)))

        assert sorted(ids) == list(range(1, 11))
        assert sorted(r.id for r in responses) == list(range(1, 11))

    @pytest.mark.asyncio
    async def test_params_omitted_when_absent(self) -> None:
        bodies: list[dict[str, Any]] = []

        def handler(request: httpx.Request) -> httpx.Response:
            bodies.append(json.loads(request.content))
            return echo_handler(request)

        async with make_transport(handler) as transport:
            await transport.send("tools/list")

        assert "params" not in bodies[0]


# =============================================================================
# Response correlation
# =============================================================================


class TestCorrelation:
    """Tests for matching responses to requests by id."""

    @pytest.mark.asyncio
    async def test_sse_response(self) -> None:
        async with make_transport(echo_handler) as transport:
            response = await transport.send("tools/list")

        assert response.id == 1
        assert response.result == {"method": "tools/list", "params": None}
        assert transport.pending_ids == []

    @pytest.mark.asyncio
    async def test_plain_json_response(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=result(json.loads(request.content)["id"], {"ok": True}))

        async with make_transport(handler) as transport:
            response = await transport.send("ping")

        assert response.result == {"ok": True}

    @pytest.mark.asyncio
    async def test_unknown_id_discarded_then_match(self, caplog: pytest.LogCaptureFixture) -> None:
        """An unrelated event on the stream is dropped and reading continues."""

        def handler(request: httpx.Request) -> httpx.Response:
            request_id = json.loads(request.content)["id"]
            return sse(result(99, "not yours"), result(request_id, "yours"))

        with caplog.at_level(logging.WARNING):
            async with make_transport(handler) as transport:
                response = await transport.send("ping")

        assert response.result == "yours"
        assert "unknown id 99" in caplog.text

    @pytest.mark.asyncio
    async def test_only_unknown_id_times_out(self) -> None:
        """A stream carrying only unrelated ids never produces a result."""

        def handler(request: httpx.Request) -> httpx.Response:
            return sse(result(99, "not yours"))

        async with make_transport(handler) as transport:
            with pytest.raises(RequestTimeoutError) as exc_info:
                await transport.send("ping", timeout=0.1)

        assert exc_info.value.request_id == 1
        assert transport.pending_ids == []

    @pytest.mark.asyncio
    async def test_late_response_after_timeout_is_discarded(self, caplog: pytest.LogCaptureFixture) -> None:
        """Once a request times out its id is released; a late response for it is dropped."""
        calls = 0

        async def handler(request: httpx.Request) -> httpx.Response:
            nonlocal calls
            calls += 1
            request_id = json.loads(request.content)["id"]
            if calls == 1:
                await asyncio.sleep(1.0)
                return sse(result(request_id, "too late"))
            # Second stream also carries the late answer for request 1
            return sse(result(1, "too late"), result(request_id, "on time"))

        with caplog.at_level(logging.WARNING):
            async with make_transport(handler) as transport:
                with pytest.raises(RequestTimeoutError):
                    await transport.send("slow", timeout=0.05)
                response = await transport.send("fast")

        assert response.id == 2
        assert response.result == "on time"
        assert "unknown id 1" in caplog.text

    @pytest.mark.asyncio
    async def test_response_routed_to_other_waiting_request(self) -> None:
        """A response for another in-flight id resolves that request."""
        first_posted = asyncio.Event()
        release = asyncio.Event()

        async def handler(request: httpx.Request) -> httpx.Response:
            request_id = json.loads(request.content)["id"]
            if request_id == 1:
                first_posted.set()
                await release.wait()
                return sse()
            return sse(result(1, "for one"), result(2, "for two"))

        async with make_transport(handler) as transport:
            first = asyncio.create_task(transport.send("a"))
            await first_posted.wait()
            second = await transport.send("b")
            release.set()
            first_response = await first

        assert second.result == "for two"
        assert first_response.result == "for one"

    @pytest.mark.asyncio
    async def test_error_envelope_returned_not_raised(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            request_id = json.loads(request.content)["id"]
            return sse({"jsonrpc": "2.0", "id": request_id, "error": {"code": -32601, "message": "Method not found"}})

        async with make_transport(handler) as transport:
            response = await transport.send("nonexistent")

        assert response.is_error
        with pytest.raises(ProtocolError) as exc_info:
            unwrap_response(response)
        assert exc_info.value.code == -32601

    @pytest.mark.asyncio
    async def test_null_id_error_answers_posted_request(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                400, json={"jsonrpc": "2.0", "id": None, "error": {"code": -32700, "message": "Parse error"}}
            )

        async with make_transport(handler) as transport:
            response = await transport.send("ping")

        assert response.error is not None
        assert response.error.code == -32700


# =============================================================================
# Failures
# =============================================================================


class TestFailures:
    """Tests for the client error taxonomy."""

    @pytest.mark.asyncio
    async def test_connection_refused(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("Connection refused", request=request)

        async with make_transport(handler) as transport:
            with pytest.raises(TransportError, match="Connection refused"):
                await transport.send("ping")
            assert transport.pending_ids == []

    @pytest.mark.asyncio
    async def test_connect_timeout_is_transport_error(self) -> None:
        """Failing to connect in time is a connection failure, not a response timeout."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectTimeout("timed out establishing", request=request)

        async with make_transport(handler) as transport:
            with pytest.raises(TransportError, match="ConnectTimeout") as exc_info:
                await transport.send("ping")
            assert not isinstance(exc_info.value, RequestTimeoutError)
            assert transport.pending_ids == []

    @pytest.mark.asyncio
    async def test_read_timeout_is_request_timeout(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out reading", request=request)

        async with make_transport(handler) as transport:
            with pytest.raises(RequestTimeoutError):
                await transport.send("ping")

    @pytest.mark.asyncio
    async def test_empty_stream_is_transport_error(self) -> None:
        async with make_transport(lambda request: sse()) as transport:
            with pytest.raises(TransportError):
                await transport.send("ping")

    @pytest.mark.asyncio
    async def test_malformed_payload_is_decode_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return sse('{"jsonrpc":"2.0","id":1,"res')

        async with make_transport(handler) as transport:
            with pytest.raises(DecodeError):
                await transport.send("ping")

    @pytest.mark.asyncio
    async def test_http_error_without_envelope(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, text="Internal Server Error")

        async with make_transport(handler) as transport:
            with pytest.raises(TransportError, match="HTTP 500"):
                await transport.send("ping")

    @pytest.mark.asyncio
    async def test_timeout(self) -> None:
        async def handler(request: httpx.Request) -> httpx.Response:
            await asyncio.sleep(1.0)
            return echo_handler(request)

        async with make_transport(handler) as transport:
            with pytest.raises(RequestTimeoutError):
                await transport.send("ping", timeout=0.05)
            assert transport.pending_ids == []

    @pytest.mark.asyncio
    async def test_default_timeout_from_config(self) -> None:
        async def handler(request: httpx.Request) -> httpx.Response:
            await asyncio.sleep(1.0)
            return echo_handler(request)

        async with make_transport(handler, timeout=0.05) as transport:
            with pytest.raises(RequestTimeoutError) as exc_info:
                await transport.send("ping")

        assert exc_info.value.timeout == 0.05

    @pytest.mark.asyncio
    async def test_cancellation_releases_id(self) -> None:
        started = asyncio.Event()

        async def handler(request: httpx.Request) -> httpx.Response:
            started.set()
            await asyncio.sleep(10)
            return echo_handler(request)

        async with make_transport(handler) as transport:
            task = asyncio.create_task(transport.send("ping"))
            await started.wait()
            assert transport.pending_ids == [1]

            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task

            assert transport.pending_ids == []


# =============================================================================
# Notifications
# =============================================================================


class TestNotify:
    @pytest.mark.asyncio
    async def test_notification_has_no_id(self) -> None:
        bodies: list[dict[str, Any]] = []

        def handler(request: httpx.Request) -> httpx.Response:
            bodies.append(json.loads(request.content))
            return httpx.Response(202)

        async with make_transport(handler) as transport:
            await transport.notify("notifications/initialized")

        assert bodies == [{"jsonrpc": "2.0", "method": "notifications/initialized"}]

    @pytest.mark.asyncio
    async def test_rejected_notification(self) -> None:
        async with make_transport(lambda request: httpx.Response(500)) as transport:
            with pytest.raises(TransportError):
                await transport.notify("notifications/initialized")

    @pytest.mark.asyncio
    async def test_notification_does_not_consume_id(self) -> None:
        ids: list[int] = []

        def handler(request: httpx.Request) -> httpx.Response:
            body = json.loads(request.content)
            if "id" not in body:
                return httpx.Response(202)
            ids.append(body["id"])
            return echo_handler(request)

        async with make_transport(handler) as transport:
            await transport.notify("notifications/initialized")
            await transport.send("ping")

        assert ids == [1]
