"""Error taxonomy for the protocol exchange.

Client side (surface to callers as distinct exception types):
- TransportError: connection refused/reset, or dropped before any data
- RequestTimeoutError: no matching response within the bound
- DecodeError: a marked SSE line whose payload is not a valid envelope
- ProtocolError: well-formed envelope carrying an error object

Server side (never cross the transport boundary as exceptions):
- HandlerFault: raised by handlers, converted into an error object
- InvalidParamsError: HandlerFault for argument shape/type mismatches
"""

from __future__ import annotations

from typing import Any

from .types import JsonRpcError, JsonRpcErrorCode, JsonRpcResponse


class McpError(Exception):
    """Base class for failures surfaced to client callers."""


class TransportError(McpError, ConnectionError):
    """Connection-level failure. Not retried automatically."""


class RequestTimeoutError(McpError, TimeoutError):
    """No matching response arrived within the configured bound."""

    def __init__(self, request_id: int, timeout: float) -> None:
        super().__init__(f"Request {request_id} timed out after {timeout:g}s")
        self.request_id = request_id
        self.timeout = timeout


class DecodeError(McpError, ValueError):
    """A streamed event payload could not be parsed into an envelope."""

    def __init__(self, message: str, payload: str | None = None) -> None:
        super().__init__(message)
        self.payload = payload


class ProtocolError(McpError):
    """Well-formed response envelope carrying an error object."""

    def __init__(self, code: int, message: str, request_id: int | str | None = None) -> None:
        super().__init__(f"MCP error {code}: {message}")
        self.code = code
        self.message = message
        self.request_id = request_id

    @classmethod
    def from_error(cls, error: JsonRpcError, request_id: int | str | None = None) -> ProtocolError:
        return cls(error.code, error.message, request_id)


class HandlerFault(Exception):
    """Handler-reported failure, converted to an error object by the dispatcher."""

    default_code = JsonRpcErrorCode.HANDLER_ERROR

    def __init__(self, message: str, code: int | None = None) -> None:
        super().__init__(message)
        self.code = code if code is not None else self.default_code
        self.message = message

    def to_error(self) -> JsonRpcError:
        return JsonRpcError(code=self.code, message=self.message)


class InvalidParamsError(HandlerFault):
    """Arguments of the wrong shape or type."""

    default_code = JsonRpcErrorCode.INVALID_PARAMS


class ResourceNotFoundError(HandlerFault):
    """Requested resource URI is not registered."""

    default_code = JsonRpcErrorCode.RESOURCE_NOT_FOUND


def unwrap_response(response: JsonRpcResponse) -> Any:
    """Return the result payload, or raise ProtocolError for an error envelope."""
    if response.error is not None:
        raise ProtocolError.from_error(response.error, response.id)
    return response.result
