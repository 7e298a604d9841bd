"""Client-side transport: request encoding and response correlation.

Each call is one HTTP POST carrying a single JSON-RPC request. The server
answers either with an SSE stream (``data: {json}`` lines) or with a plain
JSON body; both are decoded into response envelopes and routed to the
waiting caller by request id.

Architecture:
- HttpClientTransport assigns ids (1, 2, 3, ... per transport, never reused)
- A pending table maps id -> Future; a response resolves exactly one entry
- Responses for ids not in the table are logged and dropped
- Timeout or cancellation removes the id, so late responses are dropped too

Usage:
    async with HttpClientTransport(ClientConfig(base_url=url)) as transport:
        response = await transport.send("tools/call", {"name": "echo", ...})
"""

from __future__ import annotations

import asyncio
import itertools
import logging
from typing import Any

import httpx

from ..config import ClientConfig
from ..protocol.errors import DecodeError, RequestTimeoutError, TransportError
from ..protocol.sse import SSE_MEDIA_TYPE, StreamedResponseDecoder, parse_envelope
from ..protocol.types import JsonRpcNotification, JsonRpcRequest, JsonRpcResponse

logger = logging.getLogger(__name__)

ACCEPT_HEADER = f"application/json, {SSE_MEDIA_TYPE}"


class HttpClientTransport:
    """JSON-RPC over HTTP POST with SSE or JSON responses.

    Args:
        config: Client configuration (default: from environment)
        transport: Optional httpx transport, e.g. ``httpx.ASGITransport(app)``
            or ``httpx.MockTransport(handler)`` for in-process use
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config or ClientConfig.from_env()
        self._ids = itertools.count(1)
        self._pending: dict[int, asyncio.Future[JsonRpcResponse]] = {}
        self._http = httpx.AsyncClient(
            timeout=httpx.Timeout(self.config.timeout, read=None),
            headers=self.config.headers,
            transport=transport,
        )

    async def __aenter__(self) -> HttpClientTransport:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the HTTP client and fail any call still waiting."""
        for request_id, future in list(self._pending.items()):
            if not future.done():
                future.set_exception(TransportError(f"Transport closed before response to request {request_id}"))
        self._pending.clear()
        await self._http.aclose()

    @property
    def pending_ids(self) -> list[int]:
        """Ids of requests still awaiting a response."""
        return list(self._pending)

    def next_id(self) -> int:
        return next(self._ids)

    # =========================================================================
    # Requests
    # =========================================================================

    async def send(
        self,
        method: str,
        params: dict[str, Any] | None = None,
        timeout: float | None = None,
    ) -> JsonRpcResponse:
        """Send a request and wait for the response with the same id.

        Returns the response envelope as received; an error envelope is
        returned, not raised (see ``unwrap_response``).

        Raises:
            TransportError: connection failed, or dropped before any data
            RequestTimeoutError: no matching response within ``timeout``
            DecodeError: the response body could not be decoded
        """
        request = JsonRpcRequest(id=self.next_id(), method=method, params=params)
        return await self.send_request(request, timeout=timeout)

    async def send_request(self, request: JsonRpcRequest, timeout: float | None = None) -> JsonRpcResponse:
        bound = timeout if timeout is not None else self.config.timeout
        if request.id in self._pending:
            raise ValueError(f"Request id {request.id} is already in flight")

        future: asyncio.Future[JsonRpcResponse] = asyncio.get_running_loop().create_future()
        self._pending[request.id] = future
        logger.debug(f"-> {request.method} (id={request.id})")

        try:
            async with asyncio.timeout(bound):
                events = await self._post(request.to_wire(), request.id)
                if not future.done() and events == 0:
                    raise TransportError(f"Connection closed before any response to request {request.id}")
                # Unmatched events were dropped; keep waiting for our id
                return await future
        except TimeoutError as e:
            raise RequestTimeoutError(request.id, bound) from e
        except httpx.ConnectTimeout as e:
            # Never connected, so no response was lost
            raise TransportError(f"{type(e).__name__}: {e}") from e
        except httpx.TimeoutException as e:
            raise RequestTimeoutError(request.id, bound) from e
        except httpx.TransportError as e:
            raise TransportError(f"{type(e).__name__}: {e}") from e
        finally:
            self._pending.pop(request.id, None)

    async def notify(self, method: str, params: dict[str, Any] | None = None) -> None:
        """Send a notification; the server acknowledges without a body."""
        notification = JsonRpcNotification(method=method, params=params)
        try:
            response = await self._http.post(
                self.config.base_url,
                content=notification.to_wire(),
                headers={"Content-Type": "application/json", "Accept": ACCEPT_HEADER},
            )
        except httpx.TransportError as e:
            raise TransportError(f"{type(e).__name__}: {e}") from e
        if response.status_code >= 400:
            raise TransportError(f"Notification {method} rejected: HTTP {response.status_code}")
        logger.debug(f"-> {method} (notification)")

    # =========================================================================
    # Response handling
    # =========================================================================

    async def _post(self, body: bytes, request_id: int) -> int:
        """POST one request and route every decoded envelope.

        Returns the number of envelopes received. Stops reading as soon as
        the caller's own response has been resolved.
        """
        future = self._pending[request_id]
        async with self._http.stream(
            "POST",
            self.config.base_url,
            content=body,
            headers={"Content-Type": "application/json", "Accept": ACCEPT_HEADER},
        ) as response:
            content_type = response.headers.get("content-type", "")

            if content_type.startswith(SSE_MEDIA_TYPE):
                decoder = StreamedResponseDecoder(response.aiter_lines())
                while (envelope := await decoder.next_envelope()) is not None:
                    self._route(envelope, request_id)
                    if future.done():
                        break
                return decoder.events_seen

            raw = (await response.aread()).decode("utf-8", errors="replace")
            if content_type.startswith("application/json"):
                self._route(parse_envelope(raw), request_id)
                return 1

            if response.status_code >= 400:
                raise TransportError(f"HTTP {response.status_code}: {raw[:200]}")
            if raw.strip():
                raise DecodeError(f"Unexpected response content type: {content_type or 'none'}", raw)
            return 0

    def _route(self, envelope: JsonRpcResponse, request_id: int) -> None:
        """Resolve the pending call matching ``envelope.id``.

        An error envelope without an id (the server could not read the
        request) answers the request that was posted on this stream.
        """
        target = envelope.id
        if target is None and envelope.is_error:
            target = request_id

        future = self._pending.get(target) if isinstance(target, int) else None
        if future is None or future.done():
            logger.warning(f"Discarding response with unknown id {envelope.id!r}")
            return

        logger.debug(f"<- response (id={target}, error={envelope.is_error})")
        future.set_result(envelope)
