"""
Houndify SDK for Python.

Quick start:
    from houndify import HoundifyClient, TextRequest, create_request_id, parse_written_response

    async with HoundifyClient(client_id, client_key) as client:
        body = await client.text_search(TextRequest(
            query="what is the weather like in toronto",
            user_id="exampleUser",
            request_id=create_request_id(),
        ))
        print(parse_written_response(body))
"""

from houndify.client import HoundifyClient
from houndify.auth import AuthValues, generate_auth_values, escape_base64_url, unescape_base64_url
from houndify.request_info import RequestInfo, build_request_info
from houndify.request import (
    HoundRequest,
    TextRequest,
    VoiceRequest,
    PreparedRequest,
    build_request,
    create_request_id,
)
from houndify.streaming import StreamingResponseDecoder, classify_line
from houndify.channels import PartialTranscriptSink, PartialTranscriptChannel, CallbackSink
from houndify.audio import AudioPipe
from houndify.types import PartialTranscript, StreamMessage, StreamMessageKind
from houndify.server_response import (
    parse_written_response,
    parse_spoken_response,
    parse_conversation_state,
)
from houndify.config import ClientConfig, Endpoints
from houndify.exceptions import (
    HoundifyError,
    InvalidCredentialsError,
    SigningError,
    RequestBuildError,
    TransportError,
    StreamReadError,
    ServerError,
    MalformedResponseError,
    EmptyResponseError,
    QueryFailedError,
    ConversationStateError,
    AudioPipeClosedError,
    ChannelClosedError,
)

__version__ = "1.0.0"

__all__ = [
    # Client
    "HoundifyClient",
    "ClientConfig",
    "Endpoints",

    # Signing and metadata
    "AuthValues",
    "generate_auth_values",
    "escape_base64_url",
    "unescape_base64_url",
    "RequestInfo",
    "build_request_info",

    # Requests
    "HoundRequest",
    "TextRequest",
    "VoiceRequest",
    "PreparedRequest",
    "build_request",
    "create_request_id",

    # Streaming
    "StreamingResponseDecoder",
    "classify_line",
    "PartialTranscriptSink",
    "PartialTranscriptChannel",
    "CallbackSink",
    "AudioPipe",
    "PartialTranscript",
    "StreamMessage",
    "StreamMessageKind",

    # Responses
    "parse_written_response",
    "parse_spoken_response",
    "parse_conversation_state",

    # Exceptions
    "HoundifyError",
    "InvalidCredentialsError",
    "SigningError",
    "RequestBuildError",
    "TransportError",
    "StreamReadError",
    "ServerError",
    "MalformedResponseError",
    "EmptyResponseError",
    "QueryFailedError",
    "ConversationStateError",
    "AudioPipeClosedError",
    "ChannelClosedError",
]
