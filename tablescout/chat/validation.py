from __future__ import annotations

from typing import Any

from .models import ROLES, ChatRequest, Message

INVALID_JSON = "Invalid request format. Please send valid JSON."
MESSAGES_REQUIRED = "Messages array is required and cannot be empty."
MESSAGE_SHAPE = "Each message must have a role and content."
MESSAGE_ROLE = "Message role must be user, assistant, or system."


class ChatRequestError(ValueError):
    """The request body is not a valid chat request (HTTP 400)."""


def parse_chat_request(payload: Any) -> ChatRequest:
    """Validate a decoded JSON body and build a ChatRequest.

    Error messages are fixed strings so the same bad payload always yields
    the same error.
    """
    if not isinstance(payload, dict):
        raise ChatRequestError(INVALID_JSON)

    raw_messages = payload.get("messages")
    if not isinstance(raw_messages, list) or not raw_messages:
        raise ChatRequestError(MESSAGES_REQUIRED)

    messages: list[Message] = []
    for item in raw_messages:
        if not isinstance(item, dict):
            raise ChatRequestError(MESSAGE_SHAPE)
        role, content = item.get("role"), item.get("content")
        if not role or not isinstance(content, str) or not content.strip():
            raise ChatRequestError(MESSAGE_SHAPE)
        if role not in ROLES:
            raise ChatRequestError(MESSAGE_ROLE)
        messages.append(Message(role=role, content=content))

    preferred = payload.get("preferredProvider")
    if not isinstance(preferred, str) or not preferred.strip():
        preferred = None

    return ChatRequest(messages=messages, preferred_provider=preferred)
