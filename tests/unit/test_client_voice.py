"""Unit tests for voice queries through HoundifyClient, against a local aiohttp server."""

import asyncio
import json

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer as AiohttpTestServer

from houndify import AudioPipe, CallbackSink, HoundifyClient, PartialTranscriptChannel, VoiceRequest
from houndify.exceptions import EmptyResponseError, ServerError, StreamReadError, TransportError

from tests.helpers import CLIENT_ID, CLIENT_KEY, partial_line, server_response


def voice_request(audio) -> VoiceRequest:
    return VoiceRequest(audio_stream=audio, user_id="TestUserID", request_id="TestRequestID")


async def start_server(handler) -> AiohttpTestServer:
    app = web.Application()
    app.router.add_post("/v1/audio", handler)
    server = AiohttpTestServer(app)
    await server.start_server()
    return server


def make_client(server: AiohttpTestServer, **kwargs) -> HoundifyClient:
    return HoundifyClient(CLIENT_ID, CLIENT_KEY, voice_url=str(server.make_url("/v1/audio")), **kwargs)


async def stream_lines(request: web.Request, lines) -> web.StreamResponse:
    response = web.StreamResponse()
    await response.prepare(request)
    for line in lines:
        await response.write(f"{line}\n".encode())
    await response.write_eof()
    return response


class TestVoiceSearch:
    """Tests for HoundifyClient.voice_search."""

    @pytest.mark.asyncio
    async def test_partials_and_result(self):
        """Test audio is uploaded, partials delivered and the result returned."""
        received = {}

        async def handler(request):
            received["audio"] = await request.read()
            received["headers"] = request.headers
            return await stream_lines(request, [
                "120",
                partial_line("what"),
                "130",
                partial_line("what time", duration_ms=900, done=True),
                server_response(written="It is 3pm."),
            ])

        server = await start_server(handler)
        client = make_client(server, request_info_in_body=True)
        channel = PartialTranscriptChannel()
        try:
            body = await client.voice_search(voice_request(b"RIFF....WAVEfmt "), channel)
        finally:
            await client.close()
            await server.close()

        assert body == server_response(written="It is 3pm.")
        assert received["audio"] == b"RIFF....WAVEfmt "
        assert json.loads(received["headers"]["Hound-Request-Info"])["RequestID"] == "TestRequestID"
        assert "Hound-Request-Info-Length" not in received["headers"]
        assert received["headers"]["User-Agent"] == "Houndify Python SDK"
        assert channel.closed
        assert [p.message async for p in channel] == ["what", "what time"]

    @pytest.mark.asyncio
    async def test_stop_on_safe_to_stop(self):
        """Test the producer can stop early while the response is still open."""

        async def handler(request):
            await request.content.readany()
            response = web.StreamResponse()
            await response.prepare(request)
            await response.write((partial_line("what time", SafeToStopAudio=True) + "\n").encode())
            # Keep reading until the client ends the upload
            while await request.content.readany():
                pass
            await response.write(server_response().encode())
            await response.write_eof()
            return response

        server = await start_server(handler)
        client = make_client(server)
        pipe = AudioPipe()
        stop = asyncio.Event()

        def on_partial(partial):
            if partial.safe_to_stop_audio:
                stop.set()

        async def produce():
            pipe.write(b"\x00" * 3200)
            await stop.wait()
            pipe.close()

        producer = asyncio.create_task(produce())
        try:
            body = await asyncio.wait_for(client.voice_search(voice_request(pipe), CallbackSink(on_partial)), timeout=5)
            await producer
        finally:
            await client.close()
            await server.close()

        assert body == server_response()
        assert stop.is_set()
        assert pipe.bytes_written == 3200

    @pytest.mark.asyncio
    async def test_conversation_state(self):
        """Test voice results update the conversation state."""
        async def handler(request):
            await request.read()
            return await stream_lines(request, [server_response(state={"turn": 1})])

        server = await start_server(handler)
        client = make_client(server)
        client.enable_conversation_state()
        try:
            await client.voice_search(voice_request(b"audio"))
        finally:
            await client.close()
            await server.close()

        assert client.get_conversation_state() == {"turn": 1}

    @pytest.mark.asyncio
    async def test_server_error(self):
        """Test an error status raises and still closes the sink and pipe."""
        async def handler(request):
            await request.read()
            return web.Response(status=500, text='{"ErrorMessage": "internal"}')

        server = await start_server(handler)
        client = make_client(server)
        channel = PartialTranscriptChannel()
        pipe = AudioPipe()
        pipe.write(b"audio")
        pipe.close()
        try:
            with pytest.raises(ServerError) as exc_info:
                await client.voice_search(voice_request(pipe), channel)
        finally:
            await client.close()
            await server.close()

        assert exc_info.value.status_code == 500
        assert exc_info.value.response_body == '{"ErrorMessage": "internal"}'
        assert channel.closed

    @pytest.mark.asyncio
    async def test_empty_response(self):
        """Test an empty stream raises EmptyResponseError."""
        async def handler(request):
            await request.read()
            return web.Response(status=200, body=b"")

        server = await start_server(handler)
        client = make_client(server)
        channel = PartialTranscriptChannel()
        try:
            with pytest.raises(EmptyResponseError):
                await client.voice_search(voice_request(b"audio"), channel)
        finally:
            await client.close()
            await server.close()

        assert channel.closed

    @pytest.mark.asyncio
    async def test_pipe_closed_when_request_ends(self):
        """Test a producer still writing sees the pipe closed after the result."""
        async def handler(request):
            await request.content.readany()
            return await stream_lines(request, [server_response()])

        server = await start_server(handler)
        client = make_client(server)
        pipe = AudioPipe()
        pipe.write(b"audio")
        try:
            await asyncio.wait_for(client.voice_search(voice_request(pipe)), timeout=5)
        finally:
            await client.close()
            await server.close()

        assert pipe.closed

    @pytest.mark.asyncio
    async def test_cancellation_closes_pipe_and_sink(self):
        """Test cancelling a query mid-stream closes the pipe and the sink."""
        release = asyncio.Event()

        async def handler(request):
            await request.content.readany()
            response = web.StreamResponse()
            await response.prepare(request)
            await response.write((partial_line("what") + "\n").encode())
            await release.wait()
            return response

        server = await start_server(handler)
        client = make_client(server)
        channel = PartialTranscriptChannel()
        pipe = AudioPipe()
        pipe.write(b"\x00" * 3200)
        task = asyncio.create_task(client.voice_search(voice_request(pipe), channel))
        try:
            first = await asyncio.wait_for(channel.receive(), timeout=5)
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task
        finally:
            release.set()
            await client.close()
            await server.close()

        assert first.message == "what"
        assert pipe.closed
        assert channel.closed

    @pytest.mark.asyncio
    async def test_read_timeout(self):
        """Test a stalled response raises StreamReadError after delivering what arrived."""
        release = asyncio.Event()

        async def handler(request):
            await request.content.readany()
            response = web.StreamResponse()
            await response.prepare(request)
            await response.write((partial_line("a") + "\n").encode())
            await release.wait()
            return response

        server = await start_server(handler)
        client = make_client(server, timeout=0.3)
        channel = PartialTranscriptChannel()
        pipe = AudioPipe()
        pipe.write(b"\x00" * 3200)
        try:
            with pytest.raises(StreamReadError):
                await asyncio.wait_for(client.voice_search(voice_request(pipe), channel), timeout=5)
        finally:
            release.set()
            await client.close()
            await server.close()

        assert pipe.closed
        assert channel.closed
        assert [p.message async for p in channel] == ["a"]

    @pytest.mark.asyncio
    async def test_connection_refused(self):
        """Test an unreachable server raises TransportError and closes the sink."""
        async def handler(request):
            return web.Response()

        server = await start_server(handler)
        url = str(server.make_url("/v1/audio"))
        await server.close()

        client = HoundifyClient(CLIENT_ID, CLIENT_KEY, voice_url=url)
        channel = PartialTranscriptChannel()
        try:
            with pytest.raises(TransportError):
                await client.voice_search(voice_request(b"audio"), channel)
        finally:
            await client.close()

        assert channel.closed
