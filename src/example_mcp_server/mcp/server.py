"""MCP server - tools, resources and prompts over the dispatch table.

Registers the MCP method set (initialize, ping, tools/*, resources/*,
prompts/*) into a DispatchTable and routes each call to the registered
tool, resource or prompt implementation.

Architecture:
- McpTool / McpResource / McpPrompt: one implementing type per entry
- McpServer: owns the registries and the dispatch table
- Registration happens at startup; freeze() makes everything read-only

Usage:
    server = McpServer("example-mcp-server", "1.0.0")
    server.add_tool(EchoTool())
    server.freeze()

    processor = server.processor()
    response = await processor.process_message(body)
"""

from __future__ import annotations

import logging
from typing import Any, Protocol, runtime_checkable

from ..protocol.dispatch import DispatchTable, HandlerContext
from ..protocol.errors import InvalidParamsError, ResourceNotFoundError
from ..protocol.params import as_mapping, get_string
from ..protocol.processor import JsonRpcProcessor
from .models import (
    LATEST_PROTOCOL_VERSION,
    SUPPORTED_PROTOCOL_VERSIONS,
    CallToolResult,
    GetPromptResult,
    Implementation,
    InitializeResult,
    PromptDescriptor,
    ReadResourceResult,
    ResourceDescriptor,
    ServerCapabilities,
    TextResourceContents,
    ToolDescriptor,
)
from .schema import validate_arguments

logger = logging.getLogger(__name__)


@runtime_checkable
class McpTool(Protocol):
    """A callable tool."""

    @property
    def name(self) -> str: ...

    @property
    def description(self) -> str: ...

    @property
    def input_schema(self) -> dict[str, Any]: ...

    async def call(self, arguments: dict[str, Any], context: HandlerContext) -> CallToolResult: ...


@runtime_checkable
class McpResource(Protocol):
    """A readable resource identified by URI."""

    @property
    def descriptor(self) -> ResourceDescriptor: ...

    async def read(self, uri: str, context: HandlerContext) -> list[TextResourceContents]: ...


@runtime_checkable
class McpPrompt(Protocol):
    """A parameterized prompt template."""

    @property
    def descriptor(self) -> PromptDescriptor: ...

    async def render(self, arguments: dict[str, str], context: HandlerContext) -> GetPromptResult: ...


class McpServer:
    """Registry of tools, resources and prompts exposed over JSON-RPC.

    Args:
        name: Server name reported in initialize
        version: Server version reported in initialize
        instructions: Optional usage hint for clients
        direct_tool_methods: Also register each tool under its own name as a
            JSON-RPC method (e.g. ``{"method": "add", "params": {"a": 2, "b": 3}}``)
    """

    def __init__(
        self,
        name: str,
        version: str,
        *,
        instructions: str | None = None,
        direct_tool_methods: bool = False,
    ) -> None:
        self.info = Implementation(name=name, version=version)
        self.instructions = instructions
        self.direct_tool_methods = direct_tool_methods

        self._tools: dict[str, McpTool] = {}
        self._resources: dict[str, McpResource] = {}
        self._prompts: dict[str, McpPrompt] = {}

        self.dispatch = DispatchTable()
        self._register_methods()

    # =========================================================================
    # Registration
    # =========================================================================

    def _register_methods(self) -> None:
        methods = {
            "initialize": self._initialize,
            "ping": self._ping,
            "notifications/initialized": self._initialized,
            "tools/list": self._tools_list,
            "tools/call": self._tools_call,
            "resources/list": self._resources_list,
            "resources/read": self._resources_read,
            "prompts/list": self._prompts_list,
            "prompts/get": self._prompts_get,
        }
        for method, handler in methods.items():
            self.dispatch.register(method, handler)

    def _check_mutable(self, what: str) -> None:
        if self.dispatch.frozen:
            raise RuntimeError(f"Server is frozen; cannot add {what}")

    def add_tool(self, tool: McpTool) -> None:
        """Register a tool (same name overwrites)."""
        self._check_mutable(f"tool {tool.name!r}")
        self._tools[tool.name] = tool
        if self.direct_tool_methods:
            self.dispatch.register(tool.name, self._direct_tool_handler(tool))
        logger.debug(f"Registered tool: {tool.name}")

    def add_resource(self, resource: McpResource) -> None:
        """Register a resource (same URI overwrites)."""
        uri = resource.descriptor.uri
        self._check_mutable(f"resource {uri!r}")
        self._resources[uri] = resource
        logger.debug(f"Registered resource: {uri}")

    def add_prompt(self, prompt: McpPrompt) -> None:
        """Register a prompt (same name overwrites)."""
        name = prompt.descriptor.name
        self._check_mutable(f"prompt {name!r}")
        self._prompts[name] = prompt
        logger.debug(f"Registered prompt: {name}")

    def freeze(self) -> None:
        """Finish startup registration; the server becomes read-only."""
        self.dispatch.freeze()
        logger.info(
            f"{self.info.name} ready: {len(self._tools)} tools, "
            f"{len(self._resources)} resources, {len(self._prompts)} prompts"
        )

    def processor(self) -> JsonRpcProcessor:
        """Create a message processor bound to this server's dispatch table."""
        return JsonRpcProcessor(self.dispatch)

    @property
    def tools(self) -> list[McpTool]:
        return list(self._tools.values())

    @property
    def resources(self) -> list[McpResource]:
        return list(self._resources.values())

    @property
    def prompts(self) -> list[McpPrompt]:
        return list(self._prompts.values())

    def capabilities(self) -> ServerCapabilities:
        return ServerCapabilities(
            tools={"listChanged": True},
            resources={"subscribe": False, "listChanged": False},
            prompts={"listChanged": True},
        )

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def _initialize(self, context: HandlerContext, params: dict[str, Any] | None) -> InitializeResult:
        args = as_mapping(params, "params")
        requested = get_string(args, "protocolVersion", required=False)
        if requested in SUPPORTED_PROTOCOL_VERSIONS:
            version = requested
        else:
            version = LATEST_PROTOCOL_VERSION

        client_info = args.get("clientInfo") or {}
        if isinstance(client_info, dict):
            logger.info(
                f"Initialize from {client_info.get('name', 'unknown')} "
                f"{client_info.get('version', '')} (protocol {version})"
            )

        return InitializeResult(
            protocolVersion=version,
            capabilities=self.capabilities(),
            serverInfo=self.info,
            instructions=self.instructions,
        )

    async def _ping(self, context: HandlerContext, params: dict[str, Any] | None) -> dict[str, Any]:
        return {}

    async def _initialized(self, context: HandlerContext, params: dict[str, Any] | None) -> None:
        logger.debug("Client reported initialized")

    # =========================================================================
    # Tools
    # =========================================================================

    async def _tools_list(self, context: HandlerContext, params: dict[str, Any] | None) -> dict[str, Any]:
        tools = [
            ToolDescriptor(name=t.name, description=t.description, inputSchema=t.input_schema)
            for t in self._tools.values()
        ]
        return {"tools": [t.model_dump(exclude_none=True, by_alias=True) for t in tools]}

    async def _tools_call(self, context: HandlerContext, params: dict[str, Any] | None) -> CallToolResult:
        args = as_mapping(params, "params")
        name = get_string(args, "name")
        tool = self._tools.get(name)
        if tool is None:
            raise InvalidParamsError(f"Tool not found: {name}")
        return await self._call_tool(tool, args.get("arguments"), context)

    def _direct_tool_handler(self, tool: McpTool):
        async def handler(context: HandlerContext, params: dict[str, Any] | None) -> CallToolResult:
            return await self._call_tool(tool, params, context)

        return handler

    async def _call_tool(self, tool: McpTool, arguments: Any, context: HandlerContext) -> CallToolResult:
        validated = validate_arguments(tool.input_schema, arguments)
        logger.debug(f"Calling tool {tool.name} (id={context.request_id})")
        return await tool.call(validated, context)

    # =========================================================================
    # Resources
    # =========================================================================

    async def _resources_list(self, context: HandlerContext, params: dict[str, Any] | None) -> dict[str, Any]:
        return {
            "resources": [
                r.descriptor.model_dump(exclude_none=True, by_alias=True) for r in self._resources.values()
            ]
        }

    async def _resources_read(self, context: HandlerContext, params: dict[str, Any] | None) -> ReadResourceResult:
        args = as_mapping(params, "params")
        uri = get_string(args, "uri")
        resource = self._resources.get(uri)
        if resource is None:
            raise ResourceNotFoundError(f"Resource not found: {uri}")
        contents = await resource.read(uri, context)
        return ReadResourceResult(contents=contents)

    # =========================================================================
    # Prompts
    # =========================================================================

    async def _prompts_list(self, context: HandlerContext, params: dict[str, Any] | None) -> dict[str, Any]:
        return {
            "prompts": [p.descriptor.model_dump(exclude_none=True, by_alias=True) for p in self._prompts.values()]
        }

    async def _prompts_get(self, context: HandlerContext, params: dict[str, Any] | None) -> GetPromptResult:
        args = as_mapping(params, "params")
        name = get_string(args, "name")
        prompt = self._prompts.get(name)
        if prompt is None:
            raise InvalidParamsError(f"Prompt not found: {name}")

        raw = as_mapping(args.get("arguments"), "arguments")
        arguments: dict[str, str] = {}
        for key, value in raw.items():
            if not isinstance(value, str):
                raise InvalidParamsError(f"{key} must be a string")
            arguments[key] = value

        for declared in prompt.descriptor.arguments:
            if declared.required and not arguments.get(declared.name):
                raise InvalidParamsError(f"{declared.name} argument is required")

        return await prompt.render(arguments, context)
