"""Shared pytest fixtures for testing."""

import httpx
import pytest

from houndify import HoundifyClient
from houndify.config import ENV_CLIENT_ID, ENV_CLIENT_KEY

from tests.helpers import CLIENT_ID, CLIENT_KEY, TEXT_URL


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep real credentials in the environment out of the tests."""
    monkeypatch.delenv(ENV_CLIENT_ID, raising=False)
    monkeypatch.delenv(ENV_CLIENT_KEY, raising=False)


@pytest.fixture
def client():
    """Client with test credentials and no transport."""
    return HoundifyClient(CLIENT_ID, CLIENT_KEY, text_url=TEXT_URL)


@pytest.fixture
def make_text_client():
    """
    Build a client whose text queries are answered by ``handler``.

    Every request the handler sees is appended to ``client.sent``.
    """

    def _make(handler, **kwargs):
        sent = []

        def record(request: httpx.Request) -> httpx.Response:
            sent.append(request)
            return handler(request)

        http_client = httpx.AsyncClient(transport=httpx.MockTransport(record))
        client = HoundifyClient(CLIENT_ID, CLIENT_KEY, text_url=TEXT_URL, http_client=http_client, **kwargs)
        client.sent = sent
        return client

    return _make
