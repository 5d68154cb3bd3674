"""
Delivery sinks for partial transcripts.

A sink receives partial transcripts while a voice query is running and is
closed exactly once, after the last partial has been delivered.
"""

import asyncio
from typing import Any, AsyncIterator, Callable, Optional, Protocol

from houndify.exceptions import ChannelClosedError
from houndify.types import PartialTranscript


_CLOSED = object()


class PartialTranscriptSink(Protocol):
    """Anything that can receive partial transcripts."""

    async def send(self, partial: PartialTranscript) -> None:
        ...

    def close(self) -> None:
        ...


class PartialTranscriptChannel:
    """
    Async-iterable queue of partial transcripts.

    Iteration ends once the channel is closed and every queued partial has
    been read.

    Example:
        channel = PartialTranscriptChannel()

        async def show():
            async for partial in channel:
                print(partial.message)

        consumer = asyncio.create_task(show())
        body = await client.voice_search(request, channel)
        await consumer
    """

    def __init__(self) -> None:
        self._queue: asyncio.Queue = asyncio.Queue()
        self._closed = False

    @property
    def closed(self) -> bool:
        """Check if the channel is closed."""
        return self._closed

    async def send(self, partial: PartialTranscript) -> None:
        """Queue a partial transcript."""
        if self._closed:
            raise ChannelClosedError()
        self._queue.put_nowait(partial)

    def close(self) -> None:
        """Close the channel. Closing twice is a no-op."""
        if self._closed:
            return
        self._closed = True
        self._queue.put_nowait(_CLOSED)

    async def receive(self) -> Optional[PartialTranscript]:
        """Get the next partial transcript, or None once the channel is closed and empty."""
        item = await self._queue.get()
        if item is _CLOSED:
            # Leave the marker for any other reader
            self._queue.put_nowait(_CLOSED)
            return None
        return item

    def __aiter__(self) -> AsyncIterator[PartialTranscript]:
        return self

    async def __anext__(self) -> PartialTranscript:
        item = await self.receive()
        if item is None:
            raise StopAsyncIteration
        return item


PartialTranscriptHandler = Callable[[PartialTranscript], Any]


class CallbackSink:
    """
    Sink that calls a handler for every partial transcript.

    The handler may be a plain function or a coroutine function. An optional
    ``on_close`` handler runs once when the sink is closed.
    """

    def __init__(
        self,
        handler: PartialTranscriptHandler,
        on_close: Optional[Callable[[], Any]] = None,
    ) -> None:
        self._handler = handler
        self._on_close = on_close
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def send(self, partial: PartialTranscript) -> None:
        if self._closed:
            raise ChannelClosedError()
        result = self._handler(partial)
        if asyncio.iscoroutine(result):
            await result

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self._on_close:
            self._on_close()
