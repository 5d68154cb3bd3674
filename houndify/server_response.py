"""
Helpers for reading terminal Houndify server responses.

Both text and voice queries end with one JSON document shaped like::

    {"Status": "OK", "NumToReturn": 1, "AllResults": [{...}, ...]}
"""

import json
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from houndify.exceptions import (
    EmptyResponseError,
    MalformedResponseError,
    QueryFailedError,
)


class HoundServerResponse(BaseModel):
    """Top level of a terminal server response."""
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    status: str = Field(alias="Status")
    error_message: Optional[str] = Field(default=None, alias="ErrorMessage")
    num_to_return: int = Field(default=0, alias="NumToReturn")
    all_results: List[Dict[str, Any]] = Field(default_factory=list, alias="AllResults")

    @property
    def ok(self) -> bool:
        return self.status.lower() == "ok"


def parse_server_response(body: str) -> HoundServerResponse:
    """
    Parse a terminal response body.

    Raises:
        MalformedResponseError: If the body is not a JSON object with a Status
    """
    try:
        data = json.loads(body)
    except (TypeError, ValueError) as e:
        raise MalformedResponseError(f"Failed to decode json: {e}", response_body=body) from e

    if not isinstance(data, dict):
        raise MalformedResponseError("Failed to decode json: expected an object", response_body=body)

    try:
        return HoundServerResponse.model_validate(data)
    except ValidationError as e:
        raise MalformedResponseError(f"Unexpected response shape: {e.error_count()} invalid field(s)", response_body=body) from e


def first_result(body: str) -> Dict[str, Any]:
    """
    Return the first entry of ``AllResults`` of a successful response.

    Raises:
        MalformedResponseError: If the body cannot be parsed
        QueryFailedError: If ``Status`` is not OK
        EmptyResponseError: If the response holds no results
    """
    response = parse_server_response(body)

    if not response.ok:
        raise QueryFailedError(response.error_message or f"Query status {response.status}", response_body=body)

    if response.num_to_return < 1 or not response.all_results:
        raise EmptyResponseError(response_body=body)

    return response.all_results[0]


def parse_written_response(body: str) -> str:
    """Get ``WrittenResponseLong`` from the first result."""
    result = first_result(body)
    written = result.get("WrittenResponseLong")
    if not isinstance(written, str):
        raise MalformedResponseError("Missing WrittenResponseLong", response_body=body)
    return written


def parse_spoken_response(body: str) -> str:
    """Get ``SpokenResponseLong`` from the first result."""
    result = first_result(body)
    spoken = result.get("SpokenResponseLong")
    if not isinstance(spoken, str):
        raise MalformedResponseError("Missing SpokenResponseLong", response_body=body)
    return spoken


def parse_conversation_state(body: str) -> Any:
    """
    Get the new conversation state from the first result.

    The state is opaque; it may be None when the server did not send one.
    """
    return first_result(body).get("ConversationState")
