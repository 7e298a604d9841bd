"""JSON-RPC 2.0 envelope definitions.

Every exchange on the wire is framed by one of these envelopes:
- JsonRpcRequest: client -> server, carries an integer ``id``
- JsonRpcNotification: client -> server, no ``id`` and no response
- JsonRpcResponse: server -> client, exactly one of ``result`` or ``error``
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, model_validator

JSONRPC_VERSION = "2.0"


class JsonRpcErrorCode:
    """Standard JSON-RPC 2.0 error codes plus the application range."""

    PARSE_ERROR = -32700
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    INTERNAL_ERROR = -32603

    # Application range (-32000 .. -32099)
    HANDLER_ERROR = -32000
    RESOURCE_NOT_FOUND = -32002

    @staticmethod
    def is_application(code: int) -> bool:
        return -32099 <= code <= -32000


class JsonRpcError(BaseModel):
    """JSON-RPC 2.0 error object (code + message only)."""

    code: int
    message: str


class JsonRpcRequest(BaseModel):
    """JSON-RPC 2.0 request.

    Immutable once built; ``params`` is omitted from the wire when absent.
    """

    model_config = ConfigDict(frozen=True)

    jsonrpc: Literal["2.0"] = JSONRPC_VERSION
    id: int
    method: str
    params: dict[str, Any] | None = None

    def to_wire(self) -> bytes:
        """Serialize to UTF-8 JSON, dropping ``params`` when it is None."""
        return self.model_dump_json(exclude_none=True).encode("utf-8")


class JsonRpcNotification(BaseModel):
    """JSON-RPC 2.0 notification (no response expected)."""

    model_config = ConfigDict(frozen=True)

    jsonrpc: Literal["2.0"] = JSONRPC_VERSION
    method: str
    params: dict[str, Any] | None = None

    def to_wire(self) -> bytes:
        return self.model_dump_json(exclude_none=True).encode("utf-8")


class JsonRpcResponse(BaseModel):
    """JSON-RPC 2.0 response.

    Carries either a result or an error, never both and never neither.
    ``id`` is None only for parse errors where the request id could not
    be recovered.
    """

    jsonrpc: Literal["2.0"] = JSONRPC_VERSION
    id: int | str | None
    result: Any = None
    error: JsonRpcError | None = None

    @model_validator(mode="before")
    @classmethod
    def _exactly_one_payload(cls, data: Any) -> Any:
        if isinstance(data, dict):
            has_result = "result" in data
            has_error = data.get("error") is not None
            if has_result and has_error:
                raise ValueError("response carries both 'result' and 'error'")
            if not has_result and not has_error:
                raise ValueError("response carries neither 'result' nor 'error'")
        return data

    @property
    def is_error(self) -> bool:
        return self.error is not None

    @classmethod
    def success(cls, request_id: int | str | None, result: Any) -> JsonRpcResponse:
        return cls(id=request_id, result=result)

    @classmethod
    def failure(cls, request_id: int | str | None, code: int, message: str) -> JsonRpcResponse:
        return cls(id=request_id, error=JsonRpcError(code=code, message=message))

    def to_wire_dict(self) -> dict[str, Any]:
        """Wire form: ``result`` is always present on success (even if null)."""
        data: dict[str, Any] = {"jsonrpc": self.jsonrpc, "id": self.id}
        if self.error is not None:
            data["error"] = self.error.model_dump()
        else:
            data["result"] = self.result
        return data
