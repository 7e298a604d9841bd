"""Server-Sent Events framing for response envelopes.

Server side encodes each envelope as one event:

    data: {"jsonrpc":"2.0","id":3,"result":...}\\n\\n

Client side decodes a line stream: lines without the ``data: `` marker
(comments, ``event:`` fields, keep-alives, blank separators) are skipped,
and each marked line holds exactly one serialized envelope.
"""

from __future__ import annotations

import json
import logging
from collections.abc import AsyncIterable, AsyncIterator

from pydantic import ValidationError

from .errors import DecodeError
from .types import JsonRpcResponse

logger = logging.getLogger(__name__)

DATA_PREFIX = "data: "
SSE_MEDIA_TYPE = "text/event-stream"

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",  # Disable nginx buffering
}


def encode_event(response: JsonRpcResponse) -> bytes:
    """Frame one response envelope as a UTF-8 SSE event."""
    data = json.dumps(response.to_wire_dict(), ensure_ascii=False, separators=(",", ":"))
    return f"event: message\n{DATA_PREFIX}{data}\n\n".encode()


async def events_to_sse(responses: AsyncIterable[JsonRpcResponse]) -> AsyncIterator[bytes]:
    """Convert a stream of response envelopes to SSE bytes."""
    async for response in responses:
        yield encode_event(response)


def parse_envelope(payload: str) -> JsonRpcResponse:
    """Parse one serialized response envelope.

    Raises:
        DecodeError: payload is not JSON or not a valid response envelope
    """
    try:
        data = json.loads(payload)
    except json.JSONDecodeError as e:
        raise DecodeError(f"Malformed event payload: {e}", payload) from e
    if not isinstance(data, dict):
        raise DecodeError("Event payload is not a JSON object", payload)
    try:
        return JsonRpcResponse.model_validate(data)
    except ValidationError as e:
        raise DecodeError(f"Invalid response envelope: {e.errors()[0]['msg']}", payload) from e


class StreamedResponseDecoder:
    """Pulls response envelopes out of an SSE line stream.

    Usage:
        decoder = StreamedResponseDecoder(response.aiter_lines())
        while (envelope := await decoder.next_envelope()) is not None:
            ...

    ``next_envelope`` returns None at end of stream and raises DecodeError
    for a malformed payload; the caller decides whether to abort or keep
    reading (the decoder stays usable after an error).
    """

    def __init__(self, lines: AsyncIterable[str]) -> None:
        self._lines = lines.__aiter__()
        self._exhausted = False
        self.events_seen = 0

    @property
    def exhausted(self) -> bool:
        return self._exhausted

    async def next_envelope(self) -> JsonRpcResponse | None:
        if self._exhausted:
            return None

        async for line in self._lines:
            line = line.rstrip("\r\n")
            if not line.startswith(DATA_PREFIX):
                continue
            self.events_seen += 1
            return parse_envelope(line[len(DATA_PREFIX) :])

        self._exhausted = True
        return None

    async def __aiter__(self) -> AsyncIterator[JsonRpcResponse]:
        """Iterate envelopes, skipping (and logging) malformed payloads."""
        while True:
            try:
                envelope = await self.next_envelope()
            except DecodeError as e:
                logger.warning(f"Skipping undecodable SSE event: {e}")
                continue
            if envelope is None:
                return
            yield envelope
