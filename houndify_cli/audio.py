"""Pacing audio files into a running voice query."""

import asyncio
import logging
import wave

from houndify import AudioPipe, AudioPipeClosedError

logger = logging.getLogger(__name__)


def wav_bytes_per_second(path: str) -> int:
    """
    Read the average byte rate from a WAV header.

    Raises:
        wave.Error: If the file is not a PCM WAV file
        EOFError: If the header is truncated
    """
    with wave.open(path, "rb") as wav:
        return wav.getframerate() * wav.getsampwidth() * wav.getnchannels()


async def stream_file(
    path: str,
    pipe: AudioPipe,
    bytes_per_second: int,
    stop: asyncio.Event,
    interval: float = 1.0,
) -> int:
    """
    Write a file into ``pipe`` one second of audio per interval.

    The whole file is sent, header included. Stops early once ``stop`` is
    set or the pipe has been closed by the finished request, and always
    closes the pipe.

    Returns:
        Number of bytes written
    """
    written = 0
    try:
        with open(path, "rb") as f:
            while not stop.is_set():
                chunk = f.read(bytes_per_second)
                if not chunk:
                    break
                try:
                    written += pipe.write(chunk)
                except AudioPipeClosedError:
                    break
                try:
                    await asyncio.wait_for(stop.wait(), timeout=interval)
                except asyncio.TimeoutError:
                    pass
    finally:
        pipe.close()

    logger.debug(f"Streamed {written} bytes of {path}")
    return written
