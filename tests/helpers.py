"""Test data shared across test modules."""

import json
from typing import Any, AsyncIterator, Optional

CLIENT_ID = "9M22RyQGeu4bk1ToWkjX4g=="
CLIENT_KEY = "vHSRCJhQa6cIzZ6hCrQHwcKDQbdyBuV6mqFXuBG9vAQe3MqjVIEheNDoaTP6n-DQSzhoBsOJwOP5IrWM2pF1fg=="

TEXT_URL = "http://test.com/v1/text"
VOICE_URL = "http://test.com/v1/audio"


def server_response(
    written: str = "It is 3:15 PM.",
    state: Any = None,
    status: str = "OK",
    error_message: Optional[str] = None,
    num_to_return: int = 1,
) -> str:
    """Build a terminal Houndify response body."""
    data = {
        "Format": "SoundHoundVoiceSearchResult",
        "FormatVersion": "1.0",
        "Status": status,
        "NumToReturn": num_to_return,
        "AllResults": [
            {
                "WrittenResponseLong": written,
                "SpokenResponseLong": written,
                "ConversationState": state,
            }
        ] if num_to_return else [],
    }
    if error_message is not None:
        data["ErrorMessage"] = error_message
    return json.dumps(data)


def partial_line(message: str, duration_ms: int = 500, done: bool = False, **extra: Any) -> str:
    data = {
        "Format": "SoundHoundVoiceSearchParialTranscript",
        "FormatVersion": "1.0",
        "PartialTranscript": message,
        "DurationMS": duration_ms,
        "Done": done,
    }
    data.update(extra)
    return json.dumps(data)


async def chunks_of(*parts: bytes) -> AsyncIterator[bytes]:
    for part in parts:
        yield part
