"""JSON-RPC protocol core.

Defines the request/response exchange shared by client and server:
- Envelopes: JsonRpcRequest, JsonRpcResponse, JsonRpcError
- Server: DispatchTable (method -> handler), JsonRpcProcessor (message -> response)
- Stream framing: SSE encoding and StreamedResponseDecoder
- Errors: transport, timeout, decode, protocol and handler faults
"""

from .dispatch import DispatchTable, Handler, HandlerContext
from .errors import (
    DecodeError,
    HandlerFault,
    InvalidParamsError,
    McpError,
    ProtocolError,
    RequestTimeoutError,
    ResourceNotFoundError,
    TransportError,
    unwrap_response,
)
from .processor import JsonRpcProcessor
from .sse import StreamedResponseDecoder, encode_event, parse_envelope
from .types import (
    JSONRPC_VERSION,
    JsonRpcError,
    JsonRpcErrorCode,
    JsonRpcNotification,
    JsonRpcRequest,
    JsonRpcResponse,
)

__all__ = [
    "JSONRPC_VERSION",
    "JsonRpcError",
    "JsonRpcErrorCode",
    "JsonRpcNotification",
    "JsonRpcRequest",
    "JsonRpcResponse",
    "DispatchTable",
    "Handler",
    "HandlerContext",
    "JsonRpcProcessor",
    "StreamedResponseDecoder",
    "encode_event",
    "parse_envelope",
    "McpError",
    "TransportError",
    "RequestTimeoutError",
    "DecodeError",
    "ProtocolError",
    "HandlerFault",
    "InvalidParamsError",
    "ResourceNotFoundError",
    "unwrap_response",
]
