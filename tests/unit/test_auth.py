"""Unit tests for request signing."""

import base64
import hashlib
import hmac
from unittest.mock import patch

import pytest

from houndify.auth import (
    decode_client_key,
    escape_base64_url,
    generate_auth_values,
    unescape_base64_url,
)
from houndify.exceptions import InvalidCredentialsError

from tests.helpers import CLIENT_ID, CLIENT_KEY


class TestGenerateAuthValues:
    """Tests for generate_auth_values."""

    def test_header_formats(self):
        """Test both authentication values have the expected shape."""
        auth = generate_auth_values(CLIENT_ID, CLIENT_KEY, "TestUserID", "TestRequestID", timestamp=1500000000)

        assert auth.request_auth == "TestUserID;TestRequestID"
        client_id, timestamp, signature = auth.client_auth.split(";")
        assert client_id == CLIENT_ID
        assert timestamp == "1500000000"
        assert auth.timestamp == 1500000000
        assert "+" not in signature
        assert "/" not in signature

    def test_signature_matches_hmac(self):
        """Test the signature is HMAC-SHA256 over user;request+timestamp."""
        auth = generate_auth_values(CLIENT_ID, CLIENT_KEY, "user", "req", timestamp=42)

        key = base64.urlsafe_b64decode(CLIENT_KEY)
        digest = hmac.new(key, b"user;req42", hashlib.sha256).digest()
        expected = base64.urlsafe_b64encode(digest).decode()

        assert auth.client_auth == f"{CLIENT_ID};42;{expected}"

    def test_deterministic(self):
        """Test equal inputs give equal values."""
        first = generate_auth_values(CLIENT_ID, CLIENT_KEY, "user", "req", timestamp=100)
        second = generate_auth_values(CLIENT_ID, CLIENT_KEY, "user", "req", timestamp=100)

        assert first == second

    def test_request_id_changes_signature(self):
        """Test a different request ID changes both values."""
        first = generate_auth_values(CLIENT_ID, CLIENT_KEY, "user", "req-1", timestamp=100)
        second = generate_auth_values(CLIENT_ID, CLIENT_KEY, "user", "req-2", timestamp=100)

        assert first.request_auth != second.request_auth
        assert first.client_auth != second.client_auth

    def test_timestamp_changes_client_auth(self):
        """Test a different timestamp changes the client value only."""
        first = generate_auth_values(CLIENT_ID, CLIENT_KEY, "user", "req", timestamp=100)
        second = generate_auth_values(CLIENT_ID, CLIENT_KEY, "user", "req", timestamp=101)

        assert first.request_auth == second.request_auth
        assert first.client_auth.split(";")[2] != second.client_auth.split(";")[2]

    def test_default_timestamp_is_now(self):
        """Test the current time is signed when no timestamp is given."""
        with patch("houndify.auth.time.time", return_value=1700000000.75):
            auth = generate_auth_values(CLIENT_ID, CLIENT_KEY, "user", "req")

        assert auth.timestamp == 1700000000
        assert auth.client_auth.startswith(f"{CLIENT_ID};1700000000;")

    def test_invalid_client_key(self):
        """Test a key that is not base64 is rejected."""
        with pytest.raises(InvalidCredentialsError) as exc_info:
            generate_auth_values(CLIENT_ID, "not a key!", "user", "req", timestamp=1)

        assert exc_info.value.error_code == "INVALID_CREDENTIALS"


class TestBase64Url:
    """Tests for the base64url helpers."""

    def test_round_trip(self):
        """Test escape undoes unescape for URL-safe input."""
        assert escape_base64_url(unescape_base64_url(CLIENT_KEY)) == CLIENT_KEY

    def test_unescape(self):
        assert unescape_base64_url("a-b_c") == "a+b/c"

    def test_decode_client_key(self):
        """Test dashboard keys decode to raw bytes."""
        assert decode_client_key(CLIENT_KEY) == base64.urlsafe_b64decode(CLIENT_KEY)
