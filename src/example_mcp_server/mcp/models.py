"""MCP wire models for tools, resources and prompts.

Field names use camelCase to match the Model Context Protocol schema.
This is required for protocol compatibility - do not change to snake_case.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

# Newest first; the first entry is offered when the client asks for an
# unsupported version.
SUPPORTED_PROTOCOL_VERSIONS = ("2025-06-18", "2025-03-26", "2024-11-05")
LATEST_PROTOCOL_VERSION = SUPPORTED_PROTOCOL_VERSIONS[0]


class McpModel(BaseModel):
    """Base model allowing both field names and aliases on input."""

    model_config = ConfigDict(populate_by_name=True)


# =============================================================================
# Content
# =============================================================================


class TextContent(McpModel):
    type: Literal["text"] = "text"
    text: str


class TextResourceContents(McpModel):
    uri: str
    mimeType: str | None = None
    text: str
    meta: dict[str, Any] | None = Field(default=None, alias="_meta")


class EmbeddedResource(McpModel):
    type: Literal["resource"] = "resource"
    resource: TextResourceContents


Content = TextContent | EmbeddedResource


# =============================================================================
# Tools
# =============================================================================


class ToolDescriptor(McpModel):
    name: str
    description: str | None = None
    inputSchema: dict[str, Any] = Field(default_factory=lambda: {"type": "object", "properties": {}})


class CallToolResult(McpModel):
    """Result of tools/call.

    ``isError`` marks a tool-level failure reported as content, distinct
    from a protocol error object.
    """

    content: list[Content] = Field(default_factory=list)
    structuredContent: dict[str, Any] | None = None
    isError: bool | None = None

    @classmethod
    def text(cls, text: str) -> CallToolResult:
        return cls(content=[TextContent(text=text)])

    @classmethod
    def error(cls, message: str) -> CallToolResult:
        return cls(content=[TextContent(text=message)], isError=True)

    def first_text(self) -> str | None:
        for block in self.content:
            if isinstance(block, TextContent):
                return block.text
        return None


# =============================================================================
# Resources
# =============================================================================


class ResourceDescriptor(McpModel):
    uri: str
    name: str
    description: str | None = None
    mimeType: str | None = None


class ReadResourceResult(McpModel):
    contents: list[TextResourceContents] = Field(default_factory=list)


# =============================================================================
# Prompts
# =============================================================================


class PromptArgument(McpModel):
    name: str
    description: str | None = None
    required: bool = False


class PromptDescriptor(McpModel):
    name: str
    description: str | None = None
    arguments: list[PromptArgument] = Field(default_factory=list)


class PromptMessage(McpModel):
    role: Literal["user", "assistant"] = "user"
    content: TextContent


class GetPromptResult(McpModel):
    description: str | None = None
    messages: list[PromptMessage] = Field(default_factory=list)


# =============================================================================
# Lifecycle
# =============================================================================


class Implementation(McpModel):
    name: str
    version: str


class ServerCapabilities(McpModel):
    tools: dict[str, Any] | None = None
    resources: dict[str, Any] | None = None
    prompts: dict[str, Any] | None = None


class InitializeResult(McpModel):
    protocolVersion: str
    capabilities: ServerCapabilities
    serverInfo: Implementation
    instructions: str | None = None
