"""
Streaming response decoding for voice queries.

The Hound server answers a voice query with newline-delimited UTF-8 text
while the audio is still being uploaded. Each line is one of:

- a decimal byte count announcing the size of the next message,
- a JSON partial transcript,
- the JSON final result, after which nothing else matters.

Partial transcripts are handed to a sink by a single sender task, so a slow
sink never holds up reading the response and partials keep their order.
The sink is closed only after every dispatched partial has been delivered.
"""

import asyncio
import json
import logging
from typing import AsyncIterable, AsyncIterator, List, Optional

from pydantic import ValidationError

from houndify.channels import PartialTranscriptSink
from houndify.config import Formats
from houndify.exceptions import StreamReadError
from houndify.types import (
    FRAME_MARKER_PATTERN,
    HoundServerPartialTranscript,
    PartialTranscript,
    StreamMessage,
    StreamMessageKind,
)

logger = logging.getLogger(__name__)


def classify_line(line: str) -> StreamMessage:
    """
    Classify one stripped, non-blank line of a streaming response.

    Never raises; lines that cannot be used come back as UNRECOGNIZED with
    a reason.
    """
    if FRAME_MARKER_PATTERN.match(line):
        return StreamMessage(kind=StreamMessageKind.FRAME_LENGTH_MARKER, line=line)

    try:
        data = json.loads(line)
    except json.JSONDecodeError as e:
        return StreamMessage(kind=StreamMessageKind.UNRECOGNIZED, line=line, reason=f"invalid JSON: {e}")

    if not isinstance(data, dict) or not isinstance(data.get("Format"), str):
        return StreamMessage(kind=StreamMessageKind.UNRECOGNIZED, line=line, reason="missing Format")

    message_format = data["Format"]

    if message_format in Formats.PARTIALS:
        try:
            incoming = HoundServerPartialTranscript.model_validate(data)
        except ValidationError as e:
            return StreamMessage(
                kind=StreamMessageKind.UNRECOGNIZED,
                line=line,
                reason=f"bad partial transcript: {e.error_count()} invalid field(s)",
            )
        return StreamMessage(
            kind=StreamMessageKind.PARTIAL_TRANSCRIPT,
            line=line,
            partial=incoming.to_partial_transcript(),
        )

    if message_format == Formats.VOICE_SEARCH_RESULT:
        return StreamMessage(kind=StreamMessageKind.TERMINAL_RESULT, line=line)

    return StreamMessage(kind=StreamMessageKind.UNRECOGNIZED, line=line, reason=f"unknown Format {message_format!r}")


async def iter_lines(chunks: AsyncIterable[bytes]) -> AsyncIterator[str]:
    """Split a stream of byte chunks into stripped text lines."""
    # Pieces of the current, unfinished line
    pending: List[bytes] = []
    async for chunk in chunks:
        *lines, tail = chunk.split(b"\n")
        if lines:
            pending.append(lines[0])
            lines[0] = b"".join(pending)
            pending = []
            for raw in lines:
                yield raw.decode("utf-8", errors="replace").strip()
        if tail:
            pending.append(tail)
    if pending:
        yield b"".join(pending).decode("utf-8", errors="replace").strip()


class StreamingResponseDecoder:
    """
    Decoder for the body of a streaming voice query response.

    Usage:
        decoder = StreamingResponseDecoder(sink=channel)
        body = await decoder.decode(response.content.iter_any())
    """

    def __init__(
        self,
        sink: Optional[PartialTranscriptSink] = None,
        verbose: bool = False,
    ) -> None:
        """
        Args:
            sink: Receives partial transcripts; closed when decoding ends.
                Partials are dropped if no sink is given.
            verbose: Log every raw line
        """
        self.sink = sink
        self.verbose = verbose
        self._outbox: asyncio.Queue = asyncio.Queue()
        self.partials_dispatched = 0
        self._sink_closed = False

    async def decode(self, chunks: AsyncIterable[bytes]) -> str:
        """
        Read the stream until the final result and return it.

        Returns:
            The raw final result line. If the stream ends without one, the
            last non-blank, non-marker line; "" for an empty stream.

        Raises:
            StreamReadError: If reading fails before the end of the stream
        """
        sender = asyncio.create_task(self._send_loop())

        try:
            body = await self._read(chunks)
        except asyncio.CancelledError:
            sender.cancel()
            self.close_sink()
            raise
        except BaseException:
            await self._finish(sender)
            raise

        await self._finish(sender)
        return body

    async def _read(self, chunks: AsyncIterable[bytes]) -> str:
        lines = iter_lines(chunks)
        last_line = ""

        while True:
            try:
                line = await lines.__anext__()
            except StopAsyncIteration:
                # EOF without a final result: use the last line we saw
                return last_line
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.error(f"Error reading Houndify server response: {e}")
                raise StreamReadError(f"Error reading Houndify server response: {e}") from e

            if self.verbose:
                logger.debug(line)

            if not line:
                continue

            message = classify_line(line)

            if message.kind == StreamMessageKind.FRAME_LENGTH_MARKER:
                continue

            last_line = line

            if message.is_terminal:
                return line

            if message.kind == StreamMessageKind.PARTIAL_TRANSCRIPT:
                self._dispatch(message.partial)
            else:
                logger.warning(f"Skipping Hound server message: {message.reason}")

    def _dispatch(self, partial: PartialTranscript) -> None:
        """Hand a partial to the sender task without waiting for delivery."""
        self.partials_dispatched += 1
        self._outbox.put_nowait(partial)

    async def _send_loop(self) -> None:
        """Deliver partials to the sink one at a time, in order."""
        while True:
            partial = await self._outbox.get()
            try:
                if self.sink is not None:
                    await self.sink.send(partial)
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.error(f"Partial transcript delivery failed: {e}")
            finally:
                self._outbox.task_done()

    async def _finish(self, sender: "asyncio.Task[None]") -> None:
        """Wait for every dispatched partial, then close the sink."""
        try:
            await self._outbox.join()
        finally:
            sender.cancel()
            self.close_sink()

    def close_sink(self) -> None:
        """Close the sink once; later calls do nothing."""
        if self._sink_closed:
            return
        self._sink_closed = True
        if self.sink is not None:
            self.sink.close()
