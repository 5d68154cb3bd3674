"""
Houndify Python SDK - Exceptions

This module contains all custom exceptions used by the SDK.
"""

from typing import Any, Dict, Optional


class HoundifyError(Exception):
    """
    Base exception for all Houndify SDK errors.

    Attributes:
        message: Human-readable error message
        status_code: HTTP status code, when the error came from a response
        error_code: Short machine-readable error code
        response_body: Raw server response body, when one was received
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        error_code: Optional[str] = None,
        response_body: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.response_body = response_body

    def __str__(self) -> str:
        parts = [self.message]
        if self.status_code:
            parts.append(f"(HTTP {self.status_code})")
        if self.error_code:
            parts.append(f"[{self.error_code}]")
        return " ".join(parts)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message={self.message!r}, error_code={self.error_code!r})"

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "status_code": self.status_code,
            "error_code": self.error_code,
        }


class InvalidCredentialsError(HoundifyError):
    """
    Raised when the client credentials cannot be used.

    This occurs when:
    - The client ID or client key is missing
    - The client key is not valid URL-safe base64
    """

    def __init__(self, message: str = "Invalid client credentials") -> None:
        super().__init__(message, error_code="INVALID_CREDENTIALS")


class SigningError(HoundifyError):
    """Raised when the request signature cannot be computed."""

    def __init__(self, message: str = "Failed to sign request") -> None:
        super().__init__(message, error_code="SIGNING_ERROR")


class RequestBuildError(HoundifyError):
    """Raised when an outbound request cannot be assembled."""

    def __init__(self, message: str = "Failed to build request") -> None:
        super().__init__(message, error_code="REQUEST_BUILD_ERROR")


class TransportError(HoundifyError):
    """Raised when the request cannot be sent or the connection fails."""

    def __init__(self, message: str = "Failed to send request") -> None:
        super().__init__(message, error_code="TRANSPORT_ERROR")


class StreamReadError(HoundifyError):
    """Raised when reading the streaming response fails before end of input."""

    def __init__(self, message: str = "Error reading Houndify server response") -> None:
        super().__init__(message, error_code="STREAM_READ_ERROR")


class ServerError(HoundifyError):
    """
    Raised when the server answers with a failure status.

    The raw body is kept in ``response_body`` so the service's own error
    message can still be shown.
    """

    def __init__(
        self,
        message: str = "Error response",
        status_code: Optional[int] = None,
        response_body: Optional[str] = None,
    ) -> None:
        super().__init__(
            message,
            status_code=status_code,
            error_code="SERVER_ERROR",
            response_body=response_body,
        )


class MalformedResponseError(HoundifyError):
    """Raised when a terminal response is not valid JSON or lacks expected fields."""

    def __init__(self, message: str = "Failed to decode json", response_body: Optional[str] = None) -> None:
        super().__init__(message, error_code="MALFORMED_RESPONSE", response_body=response_body)


class EmptyResponseError(HoundifyError):
    """Raised when the server returned no results where one was expected."""

    def __init__(self, message: str = "No results to return", response_body: Optional[str] = None) -> None:
        super().__init__(message, error_code="EMPTY_RESPONSE", response_body=response_body)


class QueryFailedError(HoundifyError):
    """
    Raised when a terminal response reports a ``Status`` other than OK.

    The message is the ``ErrorMessage`` sent by the service.
    """

    def __init__(self, message: str = "Query failed", response_body: Optional[str] = None) -> None:
        super().__init__(message, error_code="QUERY_FAILED", response_body=response_body)


class ConversationStateError(HoundifyError):
    """
    Raised when a new conversation state cannot be taken from a response.

    The response itself may still be usable; it is available in
    ``response_body``.
    """

    def __init__(
        self,
        message: str = "Unable to parse new conversation state from response",
        response_body: Optional[str] = None,
    ) -> None:
        super().__init__(message, error_code="CONVERSATION_STATE_ERROR", response_body=response_body)


class AudioPipeClosedError(HoundifyError):
    """Raised when writing to an audio pipe that has been closed."""

    def __init__(self, message: str = "Audio pipe is closed") -> None:
        super().__init__(message, error_code="PIPE_CLOSED")


class ChannelClosedError(HoundifyError):
    """Raised when sending on a partial transcript channel that has been closed."""

    def __init__(self, message: str = "Partial transcript channel is closed") -> None:
        super().__init__(message, error_code="CHANNEL_CLOSED")
