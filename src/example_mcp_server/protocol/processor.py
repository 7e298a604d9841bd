"""JSON-RPC message processor.

Transport-agnostic core of the server side: takes one raw inbound
message, feeds it to the dispatch table and produces exactly one
response envelope (or None for notifications).

No failure below this layer escapes as an exception: malformed input
becomes a parse/invalid-request error, handler faults become their
error objects, anything unexpected becomes an internal error.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from .dispatch import DispatchTable, HandlerContext
from .types import JSONRPC_VERSION, JsonRpcError, JsonRpcErrorCode, JsonRpcResponse

logger = logging.getLogger(__name__)


def _recover_id(message: dict[str, Any]) -> int | str | None:
    """Best-effort request id for error responses."""
    request_id = message.get("id")
    if isinstance(request_id, bool) or not isinstance(request_id, int | str):
        return None
    return request_id


class JsonRpcProcessor:
    """Processes JSON-RPC messages and routes them to the dispatch table.

    Stateless across requests: nothing is retained between calls, so any
    number of processors (or workers) can serve the same table.
    """

    def __init__(self, dispatch: DispatchTable) -> None:
        self._dispatch = dispatch

    @property
    def dispatch(self) -> DispatchTable:
        return self._dispatch

    async def process_message(
        self,
        data: str | bytes,
        headers: dict[str, str] | None = None,
    ) -> JsonRpcResponse | None:
        """Process an incoming JSON-RPC message.

        Returns a response for requests, None for notifications.
        """
        try:
            message = json.loads(data)
        except (json.JSONDecodeError, UnicodeDecodeError, RecursionError) as e:
            logger.warning(f"Rejecting unparseable message: {e}")
            return JsonRpcResponse.failure(None, JsonRpcErrorCode.PARSE_ERROR, f"Parse error: {e}")

        if not isinstance(message, dict):
            # Batches are not supported
            return JsonRpcResponse.failure(
                None, JsonRpcErrorCode.INVALID_REQUEST, "Request must be a JSON object"
            )

        request_id = _recover_id(message)

        if message.get("jsonrpc") != JSONRPC_VERSION:
            return JsonRpcResponse.failure(
                request_id, JsonRpcErrorCode.INVALID_REQUEST, "Invalid or missing 'jsonrpc' version"
            )

        method = message.get("method")
        if not isinstance(method, str) or not method:
            return JsonRpcResponse.failure(
                request_id, JsonRpcErrorCode.INVALID_REQUEST, "Missing 'method' field"
            )

        params = message.get("params")

        if "id" in message and request_id is None:
            return JsonRpcResponse.failure(
                None, JsonRpcErrorCode.INVALID_REQUEST, "'id' must be an integer or string"
            )

        context = HandlerContext(request_id=request_id, method=method, headers=headers or {})

        if context.is_notification:
            await self._handle_notification(method, params, context)
            return None

        if params is not None and not isinstance(params, dict):
            return JsonRpcResponse.failure(
                request_id, JsonRpcErrorCode.INVALID_PARAMS, "'params' must be an object"
            )

        try:
            outcome = await self._dispatch.invoke(method, params, context)
        except Exception as e:
            logger.exception(f"Error handling request {method} (id={request_id}): {e}")
            return JsonRpcResponse.failure(
                request_id, JsonRpcErrorCode.INTERNAL_ERROR, f"Internal error: {e}"
            )

        if isinstance(outcome, JsonRpcError):
            return JsonRpcResponse(id=request_id, error=outcome)
        return JsonRpcResponse.success(request_id, outcome)

    async def _handle_notification(
        self, method: str, params: Any, context: HandlerContext
    ) -> None:
        if method not in self._dispatch:
            logger.debug(f"Ignoring notification without handler: {method}")
            return
        try:
            outcome = await self._dispatch.invoke(
                method, params if isinstance(params, dict) else None, context
            )
        except Exception as e:
            logger.exception(f"Error handling notification {method}: {e}")
            return
        if isinstance(outcome, JsonRpcError):
            logger.warning(f"Notification {method} failed: {outcome.message}")
