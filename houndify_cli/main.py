"""Houndify CLI - Main entry point."""

import asyncio
import sys
import wave
from typing import Any, Dict, Optional

import click
from rich.console import Console
from rich.markup import escape

from houndify import (
    AudioPipe,
    CallbackSink,
    HoundifyError,
    PartialTranscript,
    TextRequest,
    VoiceRequest,
    create_request_id,
    parse_written_response,
)
from houndify.config import ENV_CLIENT_ID, ENV_CLIENT_KEY

from . import __version__
from .audio import stream_file, wav_bytes_per_second
from .client import get_client

console = Console()

DEFAULT_USER_ID = "exampleUser"


@click.group()
@click.version_option(version=__version__, prog_name="houndify")
@click.option("--id", "client_id", envvar=ENV_CLIENT_ID, help="Client ID")
@click.option("--key", "client_key", envvar=ENV_CLIENT_KEY, help="Client key")
@click.option("--user-id", default=DEFAULT_USER_ID, show_default=True, help="User ID sent with every query")
@click.option("--verbose", "-v", is_flag=True, help="Log raw server traffic")
@click.pass_context
def cli(ctx: click.Context, client_id: Optional[str], client_key: Optional[str], user_id: str, verbose: bool):
    """Houndify CLI - Ask Houndify questions by text or voice.

    \b
    Examples:
      houndify text "what time is it in london"
      echo "what is two plus two" | houndify stdin
      houndify voice question.wav --stream
    """
    ctx.ensure_object(dict)
    ctx.obj["client_id"] = client_id
    ctx.obj["client_key"] = client_key
    ctx.obj["user_id"] = user_id
    ctx.obj["verbose"] = verbose


@cli.command("text")
@click.argument("query")
@click.pass_context
def text(ctx: click.Context, query: str):
    """Run a single text query."""
    try:
        written = asyncio.run(_text_query(ctx.obj, query))
    except HoundifyError as e:
        console.print(f"[red]✗[/red] Error: {escape(str(e))}")
        sys.exit(1)

    console.print(written, markup=False)


async def _text_query(options: Dict[str, Any], query: str) -> str:
    async with get_client(options) as client:
        body = await client.text_search(_text_request(options, query))
    return parse_written_response(body)


@cli.command("stdin")
@click.pass_context
def stdin(ctx: click.Context):
    """Run text queries read line by line from stdin, keeping conversation state."""
    try:
        asyncio.run(_stdin_queries(ctx.obj, sys.stdin))
    except HoundifyError as e:
        console.print(f"[red]✗[/red] Error: {escape(str(e))}")
        sys.exit(1)


async def _stdin_queries(options: Dict[str, Any], stream) -> None:
    async with get_client(options) as client:
        client.enable_conversation_state()
        for line in stream:
            query = line.strip()
            if not query:
                continue
            try:
                body = await client.text_search(_text_request(options, query))
                console.print(parse_written_response(body), markup=False)
            except HoundifyError as e:
                console.print(f"[red]✗[/red] {escape(query)}: {escape(str(e))}")


@cli.command("voice")
@click.argument("audio_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--stream", "stream_audio", is_flag=True,
              help="Send the audio in real time and stop once the server has enough")
@click.pass_context
def voice(ctx: click.Context, audio_file: str, stream_audio: bool):
    """Run a voice query from an audio file."""
    bytes_per_second = 0
    if stream_audio:
        try:
            bytes_per_second = wav_bytes_per_second(audio_file)
        except (wave.Error, EOFError) as e:
            console.print(f"[red]✗[/red] Cannot stream {escape(audio_file)}: {escape(str(e))}")
            sys.exit(1)

    try:
        written = asyncio.run(_voice_query(ctx.obj, audio_file, bytes_per_second))
    except HoundifyError as e:
        console.print(f"[red]✗[/red] Error: {escape(str(e))}")
        sys.exit(1)

    console.print(written, markup=False)


async def _voice_query(options: Dict[str, Any], audio_file: str, bytes_per_second: int) -> str:
    stop = asyncio.Event()

    def show_partial(partial: PartialTranscript) -> None:
        if partial.message:
            console.print(f"[dim]{escape(partial.message)}[/dim]")
        if partial.safe_to_stop_audio:
            stop.set()

    sink = CallbackSink(show_partial)

    async with get_client(options) as client:
        if not bytes_per_second:
            with open(audio_file, "rb") as f:
                audio = f.read()
            body = await client.voice_search(_voice_request(options, audio), sink)
            return parse_written_response(body)

        pipe = AudioPipe()
        producer = asyncio.create_task(stream_file(audio_file, pipe, bytes_per_second, stop))
        try:
            body = await client.voice_search(_voice_request(options, pipe), sink)
        finally:
            stop.set()
            await producer

    return parse_written_response(body)


def _text_request(options: Dict[str, Any], query: str) -> TextRequest:
    return TextRequest(
        query=query,
        user_id=options["user_id"],
        request_id=create_request_id(),
    )


def _voice_request(options: Dict[str, Any], audio: Any) -> VoiceRequest:
    return VoiceRequest(
        audio_stream=audio,
        user_id=options["user_id"],
        request_id=create_request_id(),
    )


def main():
    """Main entry point for the CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()
