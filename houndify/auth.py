"""Request signing for the Houndify API."""

import base64
import binascii
import hashlib
import hmac
import time
from dataclasses import dataclass
from typing import Optional

from houndify.exceptions import InvalidCredentialsError, SigningError


@dataclass(frozen=True)
class AuthValues:
    """Signed credentials for a single request."""
    client_auth: str
    request_auth: str
    timestamp: int


def unescape_base64_url(value: str) -> str:
    """Turn URL-safe base64 into the standard alphabet."""
    return value.replace("-", "+").replace("_", "/")


def escape_base64_url(value: str) -> str:
    """Turn standard base64 into the URL-safe alphabet."""
    return value.replace("+", "-").replace("/", "_")


def decode_client_key(client_key: str) -> bytes:
    """
    Decode a client key as shown on the Houndify dashboard.

    Raises:
        InvalidCredentialsError: If the key is not valid base64url
    """
    try:
        return base64.b64decode(unescape_base64_url(client_key), validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidCredentialsError(f"Failed to decode client key: {e}") from e


def generate_auth_values(
    client_id: str,
    client_key: str,
    user_id: str,
    request_id: str,
    timestamp: Optional[int] = None,
) -> AuthValues:
    """
    Sign a request.

    The signed message is ``"<user_id>;<request_id><timestamp>"``; there is
    no separator between the request ID and the timestamp.

    Args:
        client_id: Client ID
        client_key: Client key (URL-safe base64)
        user_id: ID of the end user
        request_id: Unique ID of this request
        timestamp: Seconds since epoch; defaults to now

    Returns:
        AuthValues with both authentication header values and the timestamp
        that was signed

    Raises:
        InvalidCredentialsError: If the client key cannot be decoded
        SigningError: If the HMAC cannot be computed
    """
    if timestamp is None:
        timestamp = int(time.time())

    key = decode_client_key(client_key)
    message = f"{user_id};{request_id}{timestamp}"

    try:
        digest = hmac.new(key, message.encode("utf-8"), hashlib.sha256).digest()
    except (TypeError, ValueError) as e:
        raise SigningError(f"Failed to sign request: {e}") from e

    signature = escape_base64_url(base64.b64encode(digest).decode("ascii"))

    return AuthValues(
        client_auth=f"{client_id};{timestamp};{signature}",
        request_auth=f"{user_id};{request_id}",
        timestamp=timestamp,
    )
