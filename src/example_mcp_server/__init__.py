"""Example MCP Server - JSON-RPC tools, resources and prompts over HTTP.

Modules:
- protocol: JSON-RPC envelopes, dispatch table, SSE framing, error taxonomy
- mcp: MCP method layer (McpServer) and wire models
- catalog: example tools, resources and prompts
- client: HTTP client transport and McpClient
- app / routes: Starlette application serving POST/GET /mcp and /health
"""

__version__ = "1.0.0"

from .config import ClientConfig, ServerConfig
from .mcp.server import McpServer
from .protocol.errors import (
    DecodeError,
    HandlerFault,
    McpError,
    ProtocolError,
    RequestTimeoutError,
    TransportError,
)

__all__ = [
    "__version__",
    "ClientConfig",
    "ServerConfig",
    "McpServer",
    "McpError",
    "TransportError",
    "RequestTimeoutError",
    "DecodeError",
    "ProtocolError",
    "HandlerFault",
]
