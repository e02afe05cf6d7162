"""
Server-Sent Events emitted by the assistant stream.

Each event is written as ``data: <json>\\n\\n`` where the JSON object carries
a ``type`` of ``delta``, ``action``, ``done`` or ``error``.
"""
import asyncio
import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, AsyncIterator, Dict

from .tools.actions import PendingAction

logger = logging.getLogger(__name__)


class StreamEventType(Enum):
    """Types of events emitted to the client"""
    DELTA = "delta"
    ACTION = "action"
    DONE = "done"
    ERROR = "error"


@dataclass
class StreamEvent:
    """Event emitted during an assistant stream"""
    type: StreamEventType
    data: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def delta(cls, text: str) -> 'StreamEvent':
        return cls(StreamEventType.DELTA, {'text': text})

    @classmethod
    def action(cls, action: PendingAction) -> 'StreamEvent':
        return cls(StreamEventType.ACTION, {'action': action.to_dict()})

    @classmethod
    def done(cls) -> 'StreamEvent':
        return cls(StreamEventType.DONE)

    @classmethod
    def error(cls, message: str) -> 'StreamEvent':
        return cls(StreamEventType.ERROR, {'message': message})

    def to_dict(self) -> Dict[str, Any]:
        return {'type': self.type.value, **self.data}

    def encode(self) -> str:
        return f"data: {json.dumps(self.to_dict(), default=str)}\n\n"


_END_OF_STREAM = object()


class SafeEventChannel:
    """
    Hand-off between the session producer and the HTTP response.

    Once the client has gone away the channel is closed and every later
    ``send`` is dropped without raising, so the producer can run to
    completion unaware of the disconnect.
    """

    def __init__(self):
        self._queue: asyncio.Queue = asyncio.Queue()
        self._closed = False
        self._drained = False
        self.dropped = 0

    @property
    def closed(self) -> bool:
        return self._closed

    def send(self, event: StreamEvent) -> None:
        if self._closed:
            self.dropped += 1
            return
        self._queue.put_nowait(event)

    def finish(self) -> None:
        """Producer is done; the consumer stops after draining queued events."""
        if not self._closed:
            self._queue.put_nowait(_END_OF_STREAM)

    def close(self) -> None:
        """Consumer is gone; discard anything not yet delivered."""
        if self._closed:
            return
        self._closed = True
        while not self._queue.empty():
            self._queue.get_nowait()
        if not self._drained:
            logger.info("assistant_stream_client_gone")

    async def __aiter__(self) -> AsyncIterator[StreamEvent]:
        while True:
            item = await self._queue.get()
            if item is _END_OF_STREAM:
                self._drained = True
                return
            yield item
