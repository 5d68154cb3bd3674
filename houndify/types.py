"""
Type definitions for the Houndify SDK.
"""

import re
from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


@dataclass
class PartialTranscript:
    """A partial transcript sent while a voice query is in progress."""
    # The text of the partial transcript
    message: str
    # Length of audio this partial transcript applies to
    duration: timedelta
    # If this is the last partial transcript
    done: bool
    # Set when the server has enough audio; None when the server did not say
    safe_to_stop_audio: Optional[bool] = None


class HoundServerMessage(BaseModel):
    """Fields common to every JSON message from the Hound server."""
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    format: str = Field(alias="Format")
    format_version: Optional[Any] = Field(default=None, alias="FormatVersion")


class HoundServerPartialTranscript(HoundServerMessage):
    """Partial transcript message as sent on the wire."""
    # null on the wire reads as the zero value
    partial_transcript: Optional[str] = Field(default="", alias="PartialTranscript")
    duration_ms: Optional[int] = Field(default=0, alias="DurationMS")
    done: Optional[bool] = Field(default=False, alias="Done")
    safe_to_stop_audio: Optional[bool] = Field(default=None, alias="SafeToStopAudio")

    def to_partial_transcript(self) -> PartialTranscript:
        return PartialTranscript(
            message=self.partial_transcript or "",
            duration=timedelta(milliseconds=self.duration_ms or 0),
            done=bool(self.done),
            safe_to_stop_audio=self.safe_to_stop_audio,
        )


class StreamMessageKind(str, Enum):
    """Kinds of lines found in a streaming response."""
    FRAME_LENGTH_MARKER = "frame_length_marker"
    PARTIAL_TRANSCRIPT = "partial_transcript"
    TERMINAL_RESULT = "terminal_result"
    UNRECOGNIZED = "unrecognized"


FRAME_MARKER_PATTERN = re.compile(r"^[+-]?\d+$")


@dataclass
class StreamMessage:
    """One classified line of a streaming response."""
    kind: StreamMessageKind
    line: str
    partial: Optional[PartialTranscript] = None
    # Why an UNRECOGNIZED line could not be used, for logging
    reason: Optional[str] = None

    @property
    def is_terminal(self) -> bool:
        return self.kind == StreamMessageKind.TERMINAL_RESULT
