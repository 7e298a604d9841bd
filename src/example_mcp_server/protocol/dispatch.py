"""Dispatch table - method name to handler.

Populated once at startup and frozen before serving, so concurrent
lookups need no locking. Handlers own the synchronization of any
shared mutable state they keep.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Iterator
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

from .errors import HandlerFault
from .types import JsonRpcError, JsonRpcErrorCode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HandlerContext:
    """Per-request context passed to every handler."""

    request_id: int | str | None
    method: str
    headers: dict[str, str] = field(default_factory=dict)

    @property
    def is_notification(self) -> bool:
        return self.request_id is None


@runtime_checkable
class Handler(Protocol):
    """A unit of logic registered against a method name.

    Returns the result payload (any JSON-serializable value or pydantic
    model), or raises HandlerFault to report an error object.
    """

    def __call__(self, context: HandlerContext, params: dict[str, Any] | None) -> Awaitable[Any] | Any: ...


class DispatchTable:
    """Maps method names to handlers.

    Usage:
        table = DispatchTable()
        table.register("ping", ping_handler)
        table.freeze()

        outcome = await table.invoke("ping", None, context)
        if isinstance(outcome, JsonRpcError):
            ...
    """

    def __init__(self) -> None:
        self._handlers: dict[str, Handler] = {}
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    def register(self, method: str, handler: Handler) -> None:
        """Register a handler. Registering the same method twice overwrites."""
        if self._frozen:
            raise RuntimeError(f"Dispatch table is frozen; cannot register {method!r}")
        if not isinstance(handler, Handler):
            raise TypeError(f"Handler for {method!r} is not callable: {handler!r}")
        if method in self._handlers:
            logger.debug(f"Overwriting handler for {method}")
        self._handlers[method] = handler

    def freeze(self) -> None:
        """Make the table read-only. Called once startup registration is complete."""
        self._frozen = True

    def __contains__(self, method: object) -> bool:
        return method in self._handlers

    def __iter__(self) -> Iterator[str]:
        return iter(self._handlers)

    def __len__(self) -> int:
        return len(self._handlers)

    async def invoke(
        self,
        method: str,
        params: dict[str, Any] | None,
        context: HandlerContext | None = None,
    ) -> Any | JsonRpcError:
        """Invoke the handler for ``method``.

        Returns the handler's result, or a JsonRpcError for unknown
        methods and handler-reported faults. Params are passed through
        unchanged; shape validation is the handler's job.

        Unexpected exceptions propagate to the caller (the transport
        adapter converts them to internal errors).
        """
        handler = self._handlers.get(method)
        if handler is None:
            return JsonRpcError(
                code=JsonRpcErrorCode.METHOD_NOT_FOUND,
                message=f"Method not found: {method}",
            )

        if context is None:
            context = HandlerContext(request_id=None, method=method)

        try:
            result = handler(context, params)
            if inspect.isawaitable(result):
                result = await result
        except HandlerFault as e:
            logger.info(f"Handler fault in {method} (id={context.request_id}): {e.message}")
            return e.to_error()

        if hasattr(result, "model_dump"):
            result = result.model_dump(exclude_none=True, by_alias=True)
        return result
