"""Model Context Protocol method layer.

Maps the MCP method set onto the JSON-RPC dispatch table:
- initialize / ping / notifications/initialized
- tools/list, tools/call
- resources/list, resources/read
- prompts/list, prompts/get
"""

from .models import (
    LATEST_PROTOCOL_VERSION,
    SUPPORTED_PROTOCOL_VERSIONS,
    CallToolResult,
    EmbeddedResource,
    GetPromptResult,
    PromptArgument,
    PromptDescriptor,
    PromptMessage,
    ResourceDescriptor,
    TextContent,
    TextResourceContents,
)
from .schema import object_schema, validate_arguments
from .server import McpPrompt, McpResource, McpServer, McpTool

__all__ = [
    "LATEST_PROTOCOL_VERSION",
    "SUPPORTED_PROTOCOL_VERSIONS",
    "CallToolResult",
    "EmbeddedResource",
    "GetPromptResult",
    "PromptArgument",
    "PromptDescriptor",
    "PromptMessage",
    "ResourceDescriptor",
    "TextContent",
    "TextResourceContents",
    "McpServer",
    "McpTool",
    "McpResource",
    "McpPrompt",
    "object_schema",
    "validate_arguments",
]
