"""HTTP routes for the MCP endpoint.

Thin adapter layer that maps HTTP requests to JSON-RPC messages and
response envelopes to HTTP responses. All protocol logic lives in the
JsonRpcProcessor.

Endpoints:
- POST /mcp   - JSON-RPC request; response streamed as one SSE event when
                the client accepts text/event-stream, plain JSON otherwise
- GET  /mcp   - static info payload
- GET  /health - liveness check, plain "OK"

Encoding:
- All JSON uses UTF-8 encoding (no BOM)
- SSE streams use ``data: {json}\\n\\n`` framing
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from typing import TYPE_CHECKING, Any

from starlette.requests import Request
from starlette.responses import JSONResponse, PlainTextResponse, Response, StreamingResponse
from starlette.routing import Route

from .protocol.sse import SSE_HEADERS, SSE_MEDIA_TYPE, events_to_sse
from .protocol.types import JsonRpcErrorCode, JsonRpcResponse

if TYPE_CHECKING:
    from .config import ServerConfig
    from .mcp.server import McpServer

logger = logging.getLogger(__name__)

_BAD_REQUEST_CODES = (JsonRpcErrorCode.PARSE_ERROR, JsonRpcErrorCode.INVALID_REQUEST)


def wants_event_stream(request: Request) -> bool:
    return SSE_MEDIA_TYPE in request.headers.get("accept", "")


async def _single_event(response: JsonRpcResponse) -> AsyncIterator[JsonRpcResponse]:
    yield response


class McpHttpEndpoint:
    """Serves one McpServer over HTTP.

    The server's dispatch table is frozen before the endpoint is built and
    nothing is stored per connection, so requests are handled independently.
    """

    def __init__(self, server: McpServer, config: ServerConfig) -> None:
        self._server = server
        self._config = config
        self._processor = server.processor()

    async def post(self, request: Request) -> Response:
        """POST /mcp - JSON-RPC over HTTP."""
        body = await request.body()
        response = await self._processor.process_message(body, headers=dict(request.headers))

        if response is None:
            # Notification: accepted, nothing to return
            return Response(status_code=202)

        if wants_event_stream(request):
            return StreamingResponse(
                events_to_sse(_single_event(response)),
                media_type=SSE_MEDIA_TYPE,
                headers=SSE_HEADERS,
            )

        status_code = 200
        if response.error is not None and response.id is None and response.error.code in _BAD_REQUEST_CODES:
            status_code = 400
        return JSONResponse(response.to_wire_dict(), status_code=status_code)

    async def info(self, request: Request) -> Response:
        """GET /mcp - static info payload."""
        return JSONResponse(self.info_payload())

    async def health(self, request: Request) -> Response:
        """GET /health - liveness check."""
        return PlainTextResponse("OK")

    def info_payload(self) -> dict[str, Any]:
        server = self._server
        return {
            "name": server.info.name,
            "version": server.info.version,
            "description": self._config.description,
            "stateless": self._config.stateless,
            "endpoints": {
                "mcp": f"{self._config.mcp_path} (POST for MCP protocol)",
                "health": "/health (GET for health check)",
            },
            "tools": [f"{t.name} - {t.description}" for t in server.tools],
            "resources": [
                f"{r.descriptor.uri} - {r.descriptor.description or r.descriptor.name}"
                for r in server.resources
            ],
            "prompts": [f"{p.descriptor.name} - {p.descriptor.description}" for p in server.prompts],
            "usage": f"Send POST requests with JSON-RPC 2.0 format to {self._config.mcp_path} endpoint",
        }

    def routes(self) -> list[Route]:
        path = self._config.mcp_path
        return [
            Route(path, self.post, methods=["POST"]),
            Route(path, self.info, methods=["GET"]),
            Route("/health", self.health, methods=["GET"]),
        ]
