"""MCP client - HTTP transport with request/response correlation.

- HttpClientTransport: JSON-RPC send/notify over HTTP (SSE or JSON bodies)
- McpClient: one method per MCP operation, typed results
"""

from .session import McpClient
from .transport import HttpClientTransport

__all__ = [
    "HttpClientTransport",
    "McpClient",
]
