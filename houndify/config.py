"""
Houndify Python SDK - Configuration

This module contains configuration classes, protocol constants and
defaults for the SDK.
"""

from dataclasses import dataclass
from typing import Optional

SDK_NAME = "Python"
SDK_VERSION = "1.0.0"

# Default user agent set by the SDK
USER_AGENT = "Houndify Python SDK"


class Endpoints:
    """Default Houndify endpoints."""

    TEXT = "https://api.houndify.com:443/v1/text"
    VOICE = "https://api.houndify.com:443/v1/audio"


class Headers:
    """HTTP header names used by the Houndify protocol."""

    USER_AGENT = "User-Agent"
    CLIENT_AUTH = "Hound-Client-Authentication"
    REQUEST_AUTH = "Hound-Request-Authentication"
    REQUEST_INFO = "Hound-Request-Info"
    REQUEST_INFO_LENGTH = "Hound-Request-Info-Length"
    INPUT_LANGUAGE_ENGLISH_NAME = "Hound-Input-Language-English-Name"
    INPUT_LANGUAGE_IETF_TAG = "Hound-Input-Language-IETF-Tag"


# RequestInfo fields that are also sent as headers
LANGUAGE_HEADERS = {
    "InputLanguageEnglishName": Headers.INPUT_LANGUAGE_ENGLISH_NAME,
    "InputLanguageIETFTag": Headers.INPUT_LANGUAGE_IETF_TAG,
}


class Formats:
    """``Format`` discriminator values sent by the Hound server."""

    PARTIAL_TRANSCRIPT = "HoundVoiceQueryPartialTranscript"
    # Misspelled by the server; still emitted, so it must keep matching.
    PARTIAL_TRANSCRIPT_LEGACY = "SoundHoundVoiceSearchParialTranscript"
    VOICE_SEARCH_RESULT = "SoundHoundVoiceSearchResult"

    PARTIALS = frozenset({PARTIAL_TRANSCRIPT, PARTIAL_TRANSCRIPT_LEGACY})


# Declared in every RequestInfo; the streaming decoder skips these markers.
OBJECT_BYTE_COUNT_PREFIX = True

# Environment variables read when values are not passed explicitly
ENV_CLIENT_ID = "HOUNDIFY_CLIENT_ID"
ENV_CLIENT_KEY = "HOUNDIFY_CLIENT_KEY"
ENV_TEXT_URL = "HOUNDIFY_TEXT_URL"
ENV_VOICE_URL = "HOUNDIFY_VOICE_URL"


@dataclass
class ClientConfig:
    """
    Configuration for the Houndify client.

    Attributes:
        client_id: Client ID from the Houndify dashboard
        text_url: Endpoint for text queries
        voice_url: Endpoint for voice queries
        timeout: Connect/read timeout in seconds (None disables it)
        request_info_in_body: Send RequestInfo as the body of text queries
            instead of the ``Hound-Request-Info`` header
        verbose: Log raw server traffic
    """
    client_id: str
    text_url: str = Endpoints.TEXT
    voice_url: str = Endpoints.VOICE
    timeout: Optional[float] = 30.0
    request_info_in_body: bool = False
    verbose: bool = False
