"""Unit tests for the MCP method layer."""

from __future__ import annotations

import json
from typing import Any

import pytest

from example_mcp_server.mcp.models import (
    LATEST_PROTOCOL_VERSION,
    CallToolResult,
    GetPromptResult,
    PromptArgument,
    PromptDescriptor,
    PromptMessage,
    TextContent,
)
from example_mcp_server.mcp.schema import object_schema
from example_mcp_server.mcp.server import McpServer
from example_mcp_server.protocol.dispatch import HandlerContext
from example_mcp_server.protocol.types import JsonRpcErrorCode, JsonRpcResponse


async def call(server: McpServer, method: str, params: dict[str, Any] | None = None, id: int = 1) -> JsonRpcResponse:
    message: dict[str, Any] = {"jsonrpc": "2.0", "id": id, "method": method}
    if params is not None:
        message["params"] = params
    response = await server.processor().process_message(json.dumps(message))
    assert response is not None
    return response


class ShoutTool:
    name = "shout"
    description = "Upper-cases text"
    input_schema = object_schema({"text": {"type": "string"}}, required=["text"])

    async def call(self, arguments: dict[str, Any], context: HandlerContext) -> CallToolResult:
        return CallToolResult.text(arguments["text"].upper())


class FarewellPrompt:
    descriptor = PromptDescriptor(
        name="farewell",
        arguments=[PromptArgument(name="name", required=True)],
    )

    async def render(self, arguments: dict[str, str], context: HandlerContext) -> GetPromptResult:
        return GetPromptResult(messages=[PromptMessage(content=TextContent(text=f"Bye, {arguments['name']}"))])


@pytest.fixture
def server() -> McpServer:
    server = McpServer("test-server", "0.1.0", instructions="Try the shout tool")
    server.add_tool(ShoutTool())
    server.add_prompt(FarewellPrompt())
    server.freeze()
    return server


# =============================================================================
# Lifecycle
# =============================================================================


class TestInitialize:
    """Tests for the initialize handshake."""

    @pytest.mark.asyncio
    async def test_echoes_supported_version(self, server: McpServer) -> None:
        response = await call(server, "initialize", {"protocolVersion": "2024-11-05", "clientInfo": {"name": "t"}})
        result = response.result
        assert result["protocolVersion"] == "2024-11-05"
        assert result["serverInfo"] == {"name": "test-server", "version": "0.1.0"}
        assert result["instructions"] == "Try the shout tool"

    @pytest.mark.asyncio
    async def test_unsupported_version_gets_latest(self, server: McpServer) -> None:
        response = await call(server, "initialize", {"protocolVersion": "1999-01-01"})
        assert response.result["protocolVersion"] == LATEST_PROTOCOL_VERSION

    @pytest.mark.asyncio
    async def test_capabilities(self, server: McpServer) -> None:
        capabilities = (await call(server, "initialize", {})).result["capabilities"]
        assert capabilities["tools"] == {"listChanged": True}
        assert capabilities["resources"] == {"subscribe": False, "listChanged": False}
        assert capabilities["prompts"] == {"listChanged": True}

    @pytest.mark.asyncio
    async def test_ping(self, server: McpServer) -> None:
        assert (await call(server, "ping")).result == {}

    @pytest.mark.asyncio
    async def test_initialized_notification(self, server: McpServer) -> None:
        message = json.dumps({"jsonrpc": "2.0", "method": "notifications/initialized"})
        assert await server.processor().process_message(message) is None


# =============================================================================
# Tools
# =============================================================================


class TestTools:
    @pytest.mark.asyncio
    async def test_list(self, server: McpServer) -> None:
        tools = (await call(server, "tools/list")).result["tools"]
        assert tools == [
            {
                "name": "shout",
                "description": "Upper-cases text",
                "inputSchema": {
                    "type": "object",
                    "properties": {"text": {"type": "string"}},
                    "required": ["text"],
                },
            }
        ]

    @pytest.mark.asyncio
    async def test_call(self, server: McpServer) -> None:
        response = await call(server, "tools/call", {"name": "shout", "arguments": {"text": "hi"}})
        assert response.result == {"content": [{"type": "text", "text": "HI"}]}

    @pytest.mark.asyncio
    async def test_unknown_tool(self, server: McpServer) -> None:
        response = await call(server, "tools/call", {"name": "nope", "arguments": {}})
        assert response.error is not None
        assert response.error.code == JsonRpcErrorCode.INVALID_PARAMS
        assert "nope" in response.error.message

    @pytest.mark.asyncio
    async def test_schema_checked_before_call(self, server: McpServer) -> None:
        response = await call(server, "tools/call", {"name": "shout", "arguments": {"text": 5}})
        assert response.error is not None
        assert response.error.code == JsonRpcErrorCode.INVALID_PARAMS

    @pytest.mark.asyncio
    async def test_missing_name(self, server: McpServer) -> None:
        response = await call(server, "tools/call", {"arguments": {}})
        assert response.error is not None
        assert response.error.code == JsonRpcErrorCode.INVALID_PARAMS

    @pytest.mark.asyncio
    async def test_direct_method_not_registered_by_default(self, server: McpServer) -> None:
        response = await call(server, "shout", {"text": "hi"})
        assert response.error is not None
        assert response.error.code == JsonRpcErrorCode.METHOD_NOT_FOUND

    @pytest.mark.asyncio
    async def test_direct_method(self) -> None:
        server = McpServer("s", "1", direct_tool_methods=True)
        server.add_tool(ShoutTool())
        response = await call(server, "shout", {"text": "hi"})
        assert response.result["content"][0]["text"] == "HI"


# =============================================================================
# Resources and prompts
# =============================================================================


class TestResourcesAndPrompts:
    @pytest.mark.asyncio
    async def test_empty_resources(self, server: McpServer) -> None:
        assert (await call(server, "resources/list")).result == {"resources": []}

    @pytest.mark.asyncio
    async def test_unknown_resource(self, server: McpServer) -> None:
        response = await call(server, "resources/read", {"uri": "server://missing"})
        assert response.error is not None
        assert response.error.code == JsonRpcErrorCode.RESOURCE_NOT_FOUND

    @pytest.mark.asyncio
    async def test_prompt_get(self, server: McpServer) -> None:
        response = await call(server, "prompts/get", {"name": "farewell", "arguments": {"name": "Bob"}})
        assert response.result["messages"][0]["content"]["text"] == "Bye, Bob"

    @pytest.mark.asyncio
    async def test_prompt_missing_argument(self, server: McpServer) -> None:
        response = await call(server, "prompts/get", {"name": "farewell", "arguments": {}})
        assert response.error is not None
        assert response.error.code == JsonRpcErrorCode.INVALID_PARAMS
        assert "name argument is required" in response.error.message

    @pytest.mark.asyncio
    async def test_prompt_non_string_argument(self, server: McpServer) -> None:
        response = await call(server, "prompts/get", {"name": "farewell", "arguments": {"name": 3}})
        assert response.error is not None
        assert response.error.code == JsonRpcErrorCode.INVALID_PARAMS

    @pytest.mark.asyncio
    async def test_unknown_prompt(self, server: McpServer) -> None:
        response = await call(server, "prompts/get", {"name": "nope"})
        assert response.error is not None
        assert response.error.code == JsonRpcErrorCode.INVALID_PARAMS


class TestRegistration:
    def test_frozen_server_rejects_additions(self, server: McpServer) -> None:
        with pytest.raises(RuntimeError, match="frozen"):
            server.add_tool(ShoutTool())
        with pytest.raises(RuntimeError, match="frozen"):
            server.add_prompt(FarewellPrompt())

    def test_registries(self, server: McpServer) -> None:
        assert [t.name for t in server.tools] == ["shout"]
        assert [p.descriptor.name for p in server.prompts] == ["farewell"]
        assert server.resources == []
