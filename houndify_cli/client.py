"""Client factory for the CLI."""

from typing import Any, Dict

from houndify import HoundifyClient


def get_client(options: Dict[str, Any]) -> HoundifyClient:
    """Create a Houndify client from the global CLI options."""
    return HoundifyClient(
        options.get("client_id"),
        options.get("client_key"),
        verbose=options.get("verbose", False),
    )
