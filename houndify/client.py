"""
Houndify Python SDK - Main Client

This module provides the HoundifyClient class, the entry point for text
and voice queries.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
from typing import Any, AsyncIterator, Optional

import aiohttp
import httpx

from houndify.audio import AudioPipe
from houndify.channels import PartialTranscriptSink
from houndify.config import (
    ENV_CLIENT_ID,
    ENV_CLIENT_KEY,
    ENV_TEXT_URL,
    ENV_VOICE_URL,
    ClientConfig,
    Endpoints,
)
from houndify.exceptions import (
    ConversationStateError,
    EmptyResponseError,
    HoundifyError,
    InvalidCredentialsError,
    ServerError,
    TransportError,
)
from houndify.request import AudioStream, PreparedRequest, TextRequest, VoiceRequest, build_request
from houndify.server_response import parse_conversation_state
from houndify.streaming import StreamingResponseDecoder

logger = logging.getLogger("houndify")


class HoundifyClient:
    """
    Client for the Houndify text and voice query API.

    Args:
        client_id: Client ID from the Houndify dashboard. If not provided,
            will look for the HOUNDIFY_CLIENT_ID environment variable.
        client_key: Client key from the Houndify dashboard. If not provided,
            will look for the HOUNDIFY_CLIENT_KEY environment variable.
        text_url: Text query endpoint
        voice_url: Voice query endpoint
        timeout: Connect/read timeout in seconds
        request_info_in_body: Send RequestInfo as the body of text queries
        verbose: Enable debug logging of server traffic
        http_client: httpx.AsyncClient to use for text queries
        session: aiohttp.ClientSession to use for voice queries

    Sessions passed in are never closed by the client.

    Example:
        >>> async with HoundifyClient() as client:
        ...     client.enable_conversation_state()
        ...     body = await client.text_search(TextRequest(
        ...         query="what is the time",
        ...         user_id="exampleUser",
        ...         request_id=create_request_id(),
        ...     ))
        ...     print(parse_written_response(body))
    """

    def __init__(
        self,
        client_id: Optional[str] = None,
        client_key: Optional[str] = None,
        *,
        text_url: Optional[str] = None,
        voice_url: Optional[str] = None,
        timeout: Optional[float] = 30.0,
        request_info_in_body: bool = False,
        verbose: bool = False,
        http_client: Optional[httpx.AsyncClient] = None,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> None:
        client_id = client_id or os.environ.get(ENV_CLIENT_ID)
        client_key = client_key or os.environ.get(ENV_CLIENT_KEY)
        if not client_id or not client_key:
            raise InvalidCredentialsError(
                "Client ID and client key are required. Provide them as parameters or set "
                f"the {ENV_CLIENT_ID} and {ENV_CLIENT_KEY} environment variables."
            )

        self.client_key = client_key
        self.config = ClientConfig(
            client_id=client_id,
            text_url=text_url or os.environ.get(ENV_TEXT_URL, Endpoints.TEXT),
            voice_url=voice_url or os.environ.get(ENV_VOICE_URL, Endpoints.VOICE),
            timeout=timeout,
            request_info_in_body=request_info_in_body,
            verbose=verbose,
        )

        if verbose:
            logging.basicConfig(level=logging.DEBUG)
            logger.setLevel(logging.DEBUG)

        self._http_client = http_client
        self._owns_http_client = http_client is None
        self._session = session
        self._owns_session = session is None

        self._conversation_state_enabled = False
        self._conversation_state: Any = None

        logger.debug(f"Houndify client initialized for {self.config.text_url} and {self.config.voice_url}")

    @property
    def client_id(self) -> str:
        return self.config.client_id

    async def __aenter__(self) -> "HoundifyClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the HTTP sessions created by this client."""
        if self._http_client is not None and self._owns_http_client:
            await self._http_client.aclose()
            self._http_client = None
        if self._session is not None and self._owns_session:
            await self._session.close()
            self._session = None

    def _ensure_http_client(self) -> httpx.AsyncClient:
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=httpx.Timeout(self.config.timeout))
        return self._http_client

    def _ensure_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(
                    total=None,
                    sock_connect=self.config.timeout,
                    sock_read=self.config.timeout,
                ),
            )
        return self._session

    # Conversation state

    @property
    def conversation_state_enabled(self) -> bool:
        """Whether conversation state is sent and updated on each query."""
        return self._conversation_state_enabled

    def enable_conversation_state(self) -> None:
        """Send and update conversation state on future queries."""
        self._conversation_state_enabled = True

    def disable_conversation_state(self) -> None:
        """Stop sending conversation state. The stored state is kept."""
        self._conversation_state_enabled = False

    def clear_conversation_state(self) -> None:
        """Forget the current conversation state."""
        self._conversation_state = None

    def get_conversation_state(self) -> Any:
        """Return the current conversation state, e.g. to save it."""
        return self._conversation_state

    def set_conversation_state(self, state: Any) -> None:
        """Set the conversation state, e.g. to resume from a saved one."""
        self._conversation_state = state

    def _update_conversation_state(self, body: str) -> None:
        if not self._conversation_state_enabled:
            return
        try:
            state = parse_conversation_state(body)
        except HoundifyError as e:
            raise ConversationStateError(
                f"Unable to parse new conversation state from response: {e.message}",
                response_body=body,
            ) from e
        self._conversation_state = state

    # Queries

    async def text_search(self, request: TextRequest) -> str:
        """
        Run a text query.

        Args:
            request: The text query

        Returns:
            The raw JSON body of the server response

        Raises:
            InvalidCredentialsError: If the client key cannot be decoded
            RequestBuildError: If the request cannot be assembled
            TransportError: If the request cannot be sent
            ServerError: If the server answers with an error status
            ConversationStateError: If conversation state is enabled and
                the response does not carry a usable one
        """
        prepared = build_request(request, self)
        self._log_request(prepared)

        http_client = self._ensure_http_client()
        try:
            response = await http_client.request(
                prepared.method,
                prepared.url,
                headers=prepared.headers,
                content=prepared.content,
            )
        except httpx.HTTPError as e:
            logger.error(f"Text query failed: {e}")
            raise TransportError(f"Failed to send request: {e}") from e

        body = response.text
        self._log_response(response.status_code, response.headers, body)

        if response.status_code >= 400:
            raise ServerError(_error_message(body), status_code=response.status_code, response_body=body)

        self._update_conversation_state(body)
        return body

    async def voice_search(
        self,
        request: VoiceRequest,
        partial_transcripts: Optional[PartialTranscriptSink] = None,
    ) -> str:
        """
        Run a voice query.

        The audio is uploaded while the response is read, so partial
        transcripts arrive before the upload is finished. The sink is closed
        when this returns or raises, after every partial was delivered.

        Args:
            request: The voice query; ``audio_stream`` may be an AudioPipe
                that is still being written
            partial_transcripts: Receives partial transcripts

        Returns:
            The raw JSON final result

        Raises:
            InvalidCredentialsError: If the client key cannot be decoded
            RequestBuildError: If the request cannot be assembled
            TransportError: If the request cannot be sent
            StreamReadError: If reading the response fails
            ServerError: If the server answers with an error status
            EmptyResponseError: If the response has no final result
            ConversationStateError: If conversation state is enabled and
                the response does not carry a usable one
        """
        decoder = StreamingResponseDecoder(sink=partial_transcripts, verbose=self.config.verbose)
        pipe = request.audio_stream if isinstance(request.audio_stream, AudioPipe) else None
        try:
            prepared = build_request(request, self)
            self._log_request(prepared)
            body = await self._send_voice(prepared, decoder, pipe)
        finally:
            decoder.close_sink()
            if pipe is not None:
                pipe.close()

        if not body:
            raise EmptyResponseError("Empty response from Houndify server", response_body=body)

        self._update_conversation_state(body)
        return body

    async def _send_voice(
        self,
        prepared: PreparedRequest,
        decoder: StreamingResponseDecoder,
        pipe: Optional[AudioPipe],
    ) -> str:
        session = self._ensure_session()
        try:
            async with session.request(
                prepared.method,
                prepared.url,
                headers=prepared.headers,
                data=_request_body(prepared.content),
            ) as response:
                if response.status >= 400:
                    if pipe is not None:
                        pipe.close()
                    body = await response.text()
                    self._log_response(response.status, response.headers, body)
                    raise ServerError(_error_message(body), status_code=response.status, response_body=body)

                self._log_response(response.status, response.headers)
                body = await decoder.decode(response.content.iter_any())
                # End the upload before the response is released
                if pipe is not None:
                    pipe.close()
                return body
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"Voice query failed: {e}")
            raise TransportError(f"Failed to send request: {e}") from e

    # Logging

    def _log_request(self, prepared: PreparedRequest) -> None:
        if self.config.verbose:
            logger.debug(f"{prepared.method} {prepared.url} params={prepared.params}")
            logger.debug(f"Request headers: {prepared.headers}")

    def _log_response(self, status: int, headers: Any, body: Optional[str] = None) -> None:
        if self.config.verbose:
            logger.debug(f"Response status: {status}")
            logger.debug(f"Response headers: {dict(headers)}")
            if body is not None:
                logger.debug(body)


def _error_message(body: str) -> str:
    """Use the service's ErrorMessage when the error body carries one."""
    try:
        data = json.loads(body)
    except ValueError:
        return "Error response"
    if isinstance(data, dict) and isinstance(data.get("ErrorMessage"), str):
        return f"Error response: {data['ErrorMessage']}"
    return "Error response"


def _request_body(content: AudioStream) -> Any:
    """Pass buffers as-is; stream anything else as chunked transfer."""
    if content is None or isinstance(content, (bytes, bytearray)):
        return content
    return _stream_chunks(content)


async def _stream_chunks(stream: Any) -> AsyncIterator[bytes]:
    async for chunk in stream:
        yield chunk
