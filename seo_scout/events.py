"""seo_scout.events: progress/result events, their NDJSON wire form and the
bounded in-process stream connecting the crawler to its consumer.

Wire format, one JSON object per line::

    {"type": "progress", "value": 42}
    {"type": "result", "value": {"url": ..., "statusCode": 200, ...}}
"""
from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass
from typing import Any, AsyncIterable, AsyncIterator, Dict, List, Union

from seo_scout.crawler.models import PageRecord

__all__ = [
    "ProgressEvent",
    "ResultEvent",
    "Event",
    "EventStream",
    "StreamClosedError",
    "NdjsonDecoder",
    "encode_event",
    "decode_event",
    "iter_events",
]

logger = logging.getLogger("SeoScout")


@dataclass(slots=True, frozen=True)
class ProgressEvent:
    value: int
    type: str = "progress"

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "value": self.value}


@dataclass(slots=True, frozen=True)
class ResultEvent:
    value: PageRecord
    type: str = "result"

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "value": self.value.to_dict()}


Event = Union[ProgressEvent, ResultEvent]


def encode_event(event: Event) -> bytes:
    """Serialise *event* as one newline-terminated JSON line."""
    return (json.dumps(event.to_dict(), ensure_ascii=False, separators=(",", ":")) + "\n").encode("utf-8")


def decode_event(data: Dict[str, Any]) -> Event:
    """Inverse of :func:`encode_event` for an already parsed JSON object.

    Raises ``ValueError`` for unknown types or malformed values.
    """
    kind = data.get("type")
    value = data.get("value")
    if kind == "progress" and isinstance(value, int) and not isinstance(value, bool):
        return ProgressEvent(value)
    if kind == "result" and isinstance(value, dict):
        try:
            return ResultEvent(PageRecord.from_dict(value))
        except TypeError as exc:
            raise ValueError(f"bad result payload: {exc}") from exc
    raise ValueError(f"unknown event {data!r}")


class NdjsonDecoder:
    """Reassembles newline-delimited JSON from arbitrarily split chunks.

    Transport reads may split one line across chunks or carry several lines
    at once; only complete lines are parsed. Lines that are not a JSON object
    are logged and dropped.
    """

    def __init__(self) -> None:
        self._buffer = b""
        self.dropped = 0

    def feed(self, chunk: bytes) -> List[Dict[str, Any]]:
        self._buffer += chunk
        *lines, self._buffer = self._buffer.split(b"\n")
        return [obj for obj in map(self._parse, lines) if obj is not None]

    def flush(self) -> List[Dict[str, Any]]:
        """Parse whatever is left once the transport is closed."""
        rest, self._buffer = self._buffer, b""
        obj = self._parse(rest)
        return [] if obj is None else [obj]

    def _parse(self, line: bytes) -> Dict[str, Any] | None:
        line = line.strip()
        if not line:
            return None
        try:
            obj = json.loads(line)
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            self.dropped += 1
            logger.warning("Dropping malformed event %r: %s", line[:200], exc)
            return None
        if not isinstance(obj, dict):
            self.dropped += 1
            logger.warning("Dropping non-object event %r", line[:200])
            return None
        return obj


async def iter_events(chunks: AsyncIterable[bytes]) -> AsyncIterator[Dict[str, Any]]:
    """Yield parsed event objects from an async iterable of raw chunks."""
    decoder = NdjsonDecoder()
    async for chunk in chunks:
        for obj in decoder.feed(chunk):
            yield obj
    for obj in decoder.flush():
        yield obj


class StreamClosedError(RuntimeError):
    """Raised when sending to a stream that is closed or has no consumer."""


_CLOSED = object()


class EventStream:
    """Ordered, closeable channel of events with backpressure.

    ``send`` waits while the buffer is full, so the producer advances at the
    consumer's pace. ``close`` marks the end; ``detach`` is called by a
    consumer that goes away and makes further sends fail.
    """

    def __init__(self, maxsize: int = 1) -> None:
        self._queue: asyncio.Queue[object] = asyncio.Queue(maxsize=maxsize)
        self._closed = False
        self._detached = False

    @property
    def closed(self) -> bool:
        return self._closed or self._detached

    async def send(self, event: Event) -> None:
        if self.closed:
            raise StreamClosedError("event stream is closed")
        await self._queue.put(event)

    async def close(self) -> None:
        if self.closed:
            return
        self._closed = True
        await self._queue.put(_CLOSED)

    def detach(self) -> None:
        self._detached = True
        # unblock a producer waiting on a full buffer
        while not self._queue.empty():
            self._queue.get_nowait()

    def __aiter__(self) -> EventStream:
        return self

    async def __anext__(self) -> Event:
        if self._detached:
            raise StopAsyncIteration
        item = await self._queue.get()
        if item is _CLOSED:
            raise StopAsyncIteration
        return item  # type: ignore[return-value]
