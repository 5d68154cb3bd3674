"""RequestInfo assembly."""

from typing import Any, Dict, Optional

from houndify.config import OBJECT_BYTE_COUNT_PREFIX, SDK_NAME, SDK_VERSION
from houndify.exceptions import RequestBuildError

RequestInfo = Dict[str, Any]


def build_request_info(
    client_id: str,
    request_id: str,
    timestamp: int,
    fields: Optional[Dict[str, Any]] = None,
    conversation_state_enabled: bool = False,
    conversation_state: Any = None,
) -> RequestInfo:
    """
    Build the RequestInfo document for one request.

    Caller fields set to None are dropped. ``ConversationState`` is always
    present, as null when conversation state is disabled. Reserved fields
    overwrite caller fields with the same name.

    Args:
        client_id: Client ID
        request_id: ID of this request
        timestamp: Timestamp that was signed for this request
        fields: Extra RequestInfo fields from the caller
        conversation_state_enabled: Whether to send the stored state
        conversation_state: The stored conversation state

    Returns:
        A new dictionary; ``fields`` is not modified

    Raises:
        RequestBuildError: If client_id or request_id is empty
    """
    if not client_id:
        raise RequestBuildError("Client ID is required")
    if not request_id:
        raise RequestBuildError("Request ID is required")

    request_info: RequestInfo = {
        key: value for key, value in (fields or {}).items() if value is not None
    }

    request_info["ConversationState"] = conversation_state if conversation_state_enabled else None

    request_info.update({
        "TimeStamp": timestamp,
        "ClientID": client_id,
        "RequestID": request_id,
        "SDK": SDK_NAME,
        "SDKVersion": SDK_VERSION,
        "PartialTranscriptsDesired": True,
        "ObjectByteCountPrefix": OBJECT_BYTE_COUNT_PREFIX,
    })
    return request_info
