"""High-level MCP client.

Wraps HttpClientTransport with one method per MCP operation. Results come
back as the typed models from ``mcp.models``; error envelopes raise
ProtocolError.

Usage:
    async with McpClient(ClientConfig(base_url="http://localhost:8080/mcp")) as client:
        await client.initialize()
        result = await client.call_tool("echo", {"message": "hi"})
        print(result.first_text())
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from ..config import ClientConfig
from ..mcp.models import (
    CallToolResult,
    GetPromptResult,
    InitializeResult,
    PromptDescriptor,
    ReadResourceResult,
    ResourceDescriptor,
    ToolDescriptor,
)
from ..protocol.errors import unwrap_response
from .transport import HttpClientTransport

logger = logging.getLogger(__name__)


class McpClient:
    """MCP client over HTTP.

    Args:
        config: Client configuration (default: from environment)
        transport: Optional httpx transport passed through to the
            underlying HttpClientTransport
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config or ClientConfig.from_env()
        self.transport = HttpClientTransport(self.config, transport=transport)
        self.server_info: InitializeResult | None = None

    async def __aenter__(self) -> McpClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def close(self) -> None:
        await self.transport.aclose()

    async def request(self, method: str, params: dict[str, Any] | None = None) -> Any:
        """Send a request and return its result, raising ProtocolError on error."""
        response = await self.transport.send(method, params)
        return unwrap_response(response)

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    async def initialize(self) -> InitializeResult:
        """Perform the initialize handshake and send notifications/initialized."""
        result = await self.request(
            "initialize",
            {
                "protocolVersion": self.config.protocol_version,
                "capabilities": {},
                "clientInfo": {
                    "name": self.config.client_name,
                    "version": self.config.client_version,
                },
            },
        )
        self.server_info = InitializeResult.model_validate(result)
        await self.transport.notify("notifications/initialized")
        logger.info(
            f"Connected to {self.server_info.serverInfo.name} {self.server_info.serverInfo.version} "
            f"(protocol {self.server_info.protocolVersion})"
        )
        return self.server_info

    async def ping(self) -> None:
        await self.request("ping")

    # -------------------------------------------------------------------------
    # Tools
    # -------------------------------------------------------------------------

    async def list_tools(self) -> list[ToolDescriptor]:
        result = await self.request("tools/list")
        return [ToolDescriptor.model_validate(t) for t in result.get("tools", [])]

    async def call_tool(self, name: str, arguments: dict[str, Any] | None = None) -> CallToolResult:
        result = await self.request("tools/call", {"name": name, "arguments": arguments or {}})
        return CallToolResult.model_validate(result)

    # -------------------------------------------------------------------------
    # Resources
    # -------------------------------------------------------------------------

    async def list_resources(self) -> list[ResourceDescriptor]:
        result = await self.request("resources/list")
        return [ResourceDescriptor.model_validate(r) for r in result.get("resources", [])]

    async def read_resource(self, uri: str) -> ReadResourceResult:
        result = await self.request("resources/read", {"uri": uri})
        return ReadResourceResult.model_validate(result)

    # -------------------------------------------------------------------------
    # Prompts
    # -------------------------------------------------------------------------

    async def list_prompts(self) -> list[PromptDescriptor]:
        result = await self.request("prompts/list")
        return [PromptDescriptor.model_validate(p) for p in result.get("prompts", [])]

    async def get_prompt(self, name: str, arguments: dict[str, str] | None = None) -> GetPromptResult:
        result = await self.request("prompts/get", {"name": name, "arguments": arguments or {}})
        return GetPromptResult.model_validate(result)
