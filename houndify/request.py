"""
Houndify request types and request assembly.

``TextRequest`` and ``VoiceRequest`` share one assembly path,
``build_request``, which signs the request, builds its RequestInfo and
returns a transport-neutral ``PreparedRequest``.
"""

from __future__ import annotations

import json
import secrets
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, AsyncIterable, Dict, Optional, Union
from urllib.parse import quote, urlencode

from houndify.auth import AuthValues, generate_auth_values
from houndify.config import LANGUAGE_HEADERS, USER_AGENT, Headers
from houndify.exceptions import RequestBuildError
from houndify.request_info import RequestInfo, build_request_info

if TYPE_CHECKING:
    from houndify.client import HoundifyClient

AudioStream = Union[bytes, bytearray, AsyncIterable[bytes]]


def create_request_id() -> str:
    """Generate a request ID: 10 random bytes as upper-case hex."""
    return secrets.token_hex(10).upper()


@dataclass
class PreparedRequest:
    """A signed request, ready to hand to an HTTP transport."""
    method: str
    url: str
    headers: Dict[str, str]
    params: Dict[str, str] = field(default_factory=dict)
    content: Any = None
    request_info: RequestInfo = field(default_factory=dict)


@dataclass
class HoundRequest(ABC):
    """
    Fields shared by every Houndify request.

    Attributes:
        user_id: ID of the end user; any stable string
        request_id: Unique ID of this request, used against replays
        request_info_fields: Extra RequestInfo fields
        url: Endpoint override; the client's endpoint is used when empty
        headers: Extra HTTP headers, applied last
    """
    user_id: str = ""
    request_id: str = ""
    request_info_fields: Dict[str, Any] = field(default_factory=dict)
    url: Optional[str] = None
    headers: Dict[str, str] = field(default_factory=dict)

    # Whether RequestInfo may be sent as the request body
    supports_body_request_info = False

    @abstractmethod
    def endpoint(self, client: "HoundifyClient") -> str:
        """Return the URL this request is sent to."""

    def params(self) -> Dict[str, str]:
        return {}

    def body(self) -> Any:
        return None

    def auth_info(self, client: "HoundifyClient") -> AuthValues:
        return generate_auth_values(
            client.client_id,
            client.client_key,
            self.user_id,
            self.request_id,
        )


@dataclass
class TextRequest(HoundRequest):
    """
    A text query.

    Example:
        request = TextRequest(
            query="what time is it in london",
            user_id="exampleUser",
            request_id=create_request_id(),
        )
    """
    query: str = ""

    supports_body_request_info = True

    def endpoint(self, client: "HoundifyClient") -> str:
        return self.url or client.config.text_url

    def params(self) -> Dict[str, str]:
        return {"query": self.query}


@dataclass
class VoiceRequest(HoundRequest):
    """
    A voice query.

    ``audio_stream`` must already be in an encoding the service accepts. It
    may be a complete buffer or an async iterable of chunks (such as an
    ``AudioPipe``) that is still being written while the request runs.
    """
    audio_stream: AudioStream = b""

    def endpoint(self, client: "HoundifyClient") -> str:
        return self.url or client.config.voice_url

    def body(self) -> Any:
        return self.audio_stream


def build_request(hound_request: HoundRequest, client: "HoundifyClient") -> PreparedRequest:
    """
    Sign a request and attach its RequestInfo.

    RequestInfo goes in the ``Hound-Request-Info`` header, or, when the client
    is configured for it and the request type allows it, as the whole body
    with a ``Hound-Request-Info-Length`` header. Never both.

    Raises:
        InvalidCredentialsError: If the client key cannot be decoded
        RequestBuildError: If the URL or RequestInfo is unusable
    """
    url = hound_request.endpoint(client)
    if not url or not url.startswith(("http://", "https://")):
        raise RequestBuildError(f"Failed to build http request: invalid URL {url!r}")

    auth = hound_request.auth_info(client)

    headers: Dict[str, str] = {
        Headers.USER_AGENT: USER_AGENT,
        Headers.REQUEST_AUTH: auth.request_auth,
        Headers.CLIENT_AUTH: auth.client_auth,
    }

    fields = hound_request.request_info_fields or {}
    for field_name, header in LANGUAGE_HEADERS.items():
        value = fields.get(field_name)
        if value is not None:
            headers[header] = str(value)

    request_info = build_request_info(
        client.client_id,
        hound_request.request_id,
        auth.timestamp,
        fields,
        conversation_state_enabled=client.conversation_state_enabled,
        conversation_state=client.get_conversation_state(),
    )

    try:
        request_info_json = json.dumps(request_info, separators=(",", ":"))
    except (TypeError, ValueError) as e:
        raise RequestBuildError(f"Failed to create request info: {e}") from e

    content = hound_request.body()
    if client.config.request_info_in_body and hound_request.supports_body_request_info:
        content = request_info_json.encode("utf-8")
        headers[Headers.REQUEST_INFO_LENGTH] = str(len(content))
    else:
        headers[Headers.REQUEST_INFO] = request_info_json

    headers.update(hound_request.headers or {})

    params = hound_request.params()
    if params:
        separator = "&" if "?" in url else "?"
        url = f"{url}{separator}{urlencode(params, quote_via=quote)}"

    return PreparedRequest(
        method="POST",
        url=url,
        headers=headers,
        params=params,
        content=content,
        request_info=request_info,
    )
