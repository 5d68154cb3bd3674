"""In-memory audio body for voice queries that are fed while they are sent."""

import asyncio
from typing import AsyncIterator

from houndify.exceptions import AudioPipeClosedError

_EOF = object()


class AudioPipe:
    """
    Writable audio stream usable as a ``VoiceRequest`` body.

    A producer writes chunks while the request is being sent and calls
    ``close()`` when there is no more audio. The voice query reads the chunks
    in order and ends the upload once the pipe is closed and drained.

    Example:
        pipe = AudioPipe()
        request = VoiceRequest(audio_stream=pipe, user_id="user", request_id=request_id)

        async def produce():
            for chunk in chunks:
                pipe.write(chunk)
                await asyncio.sleep(1)
            pipe.close()

        producer = asyncio.create_task(produce())
        body = await client.voice_search(request, channel)
    """

    def __init__(self) -> None:
        self._queue: asyncio.Queue = asyncio.Queue()
        self._closed = False
        self.bytes_written = 0

    @property
    def closed(self) -> bool:
        """Check if the pipe is closed for writing."""
        return self._closed

    def write(self, data: bytes) -> int:
        """
        Queue audio bytes for upload.

        Returns:
            Number of bytes written

        Raises:
            AudioPipeClosedError: If the pipe has been closed
        """
        if self._closed:
            raise AudioPipeClosedError()
        if data:
            self._queue.put_nowait(bytes(data))
            self.bytes_written += len(data)
        return len(data)

    def close(self) -> None:
        """Signal the end of the audio. Closing twice is a no-op."""
        if self._closed:
            return
        self._closed = True
        self._queue.put_nowait(_EOF)

    def __aiter__(self) -> AsyncIterator[bytes]:
        return self._chunks()

    async def _chunks(self) -> AsyncIterator[bytes]:
        while True:
            chunk = await self._queue.get()
            if chunk is _EOF:
                return
            yield chunk
