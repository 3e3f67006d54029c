from __future__ import annotations

import json
import logging
from abc import abstractmethod
from types import ModuleType
from typing import Any

from ..chat.models import Message
from ..tools.schemas import TOOL_DEFINITIONS
from .base import ProviderAdapter
from .config import DEFAULT_PROVIDER_CONFIG, ProviderConfig
from .models import ErrorKind, FirstResponse, ProviderError, ToolCall, ToolResult

logger = logging.getLogger(__name__)


def _error_code(exc: Exception) -> str:
    code = getattr(exc, "code", None)
    body = getattr(exc, "body", None)
    if not code and isinstance(body, dict):
        error = body.get("error") if isinstance(body.get("error"), dict) else body
        code = error.get("code") or error.get("type")
    return str(code or "")


def classify_sdk_error(exc: Exception, sdk: ModuleType) -> ErrorKind:
    """Map an OpenAI-compatible SDK exception to an ErrorKind.

    ``sdk`` is the SDK module (``openai`` or ``groq``); both expose the same
    exception hierarchy.
    """
    if isinstance(exc, sdk.APITimeoutError):
        return ErrorKind.timeout
    if isinstance(exc, sdk.RateLimitError):
        if _error_code(exc) == "insufficient_quota":
            return ErrorKind.quota_exceeded
        return ErrorKind.rate_limited
    if isinstance(exc, (sdk.AuthenticationError, sdk.PermissionDeniedError)):
        return ErrorKind.auth_failed
    if getattr(exc, "status_code", None) == 402:
        return ErrorKind.quota_exceeded
    return ErrorKind.unknown


def to_wire(conversation: list[Message]) -> list[dict[str, Any]]:
    return [{"role": m.role, "content": m.content} for m in conversation]


class ChatCompletionsAdapter(ProviderAdapter):
    """Adapter for backends with native function calling (OpenAI-style API).

    Tool intent arrives as structured ``tool_calls``; results go back as
    ``role="tool"`` messages keyed by ``tool_call_id``.
    """

    def __init__(self, model: str, api_key: str, config: ProviderConfig = DEFAULT_PROVIDER_CONFIG) -> None:
        self._model = model
        self._api_key = api_key
        self._config = config
        self._client: Any = None

    @abstractmethod
    def _create_client(self) -> Any:
        ...

    @abstractmethod
    def _classify(self, exc: Exception) -> ErrorKind:
        ...

    def _complete(self, messages: list[dict[str, Any]], **kwargs: Any) -> Any:
        if self._client is None:
            self._client = self._create_client()
        try:
            return self._client.chat.completions.create(
                model=self._model,
                messages=messages,
                temperature=self._config.temperature,
                max_tokens=self._config.max_tokens,
                **kwargs,
            )
        except Exception as e:
            raise ProviderError(
                f"{self.name} API call failed: {e}",
                kind=self._classify(e),
                provider=self.name,
            ) from e

    @staticmethod
    def _decode_tool_call(tool_call: Any) -> ToolCall:
        name = tool_call.function.name
        raw = tool_call.function.arguments or ""
        try:
            arguments = json.loads(raw) if raw.strip() else {}
            if not isinstance(arguments, dict):
                raise ValueError("arguments must be a JSON object")
        except ValueError as e:
            logger.warning("Undecodable arguments for %s: %r", name, raw)
            return ToolCall(
                id=tool_call.id,
                name=name,
                raw_arguments=raw,
                error=f"Could not parse arguments for {name}: {e}",
            )
        return ToolCall(id=tool_call.id, name=name, arguments=arguments, raw_arguments=raw)

    def begin_turn(self, conversation: list[Message]) -> FirstResponse:
        response = self._complete(
            to_wire(conversation),
            tools=TOOL_DEFINITIONS,
            tool_choice="auto",
        )
        if not response.choices:
            raise ProviderError(f"No response from {self.name}", provider=self.name)

        message = response.choices[0].message
        tool_calls = [self._decode_tool_call(tc) for tc in message.tool_calls or []]
        content = message.content or ""
        if not tool_calls and not content.strip():
            raise ProviderError(f"{self.name} returned an empty response", provider=self.name)
        return FirstResponse(content=content, tool_calls=tool_calls)

    def _generate_final(
        self,
        conversation: list[Message],
        first: FirstResponse,
        results: list[ToolResult],
    ) -> str:
        messages = to_wire(conversation)
        messages.append({
            "role": "assistant",
            "content": first.content or None,
            "tool_calls": [
                {
                    "id": call.id,
                    "type": "function",
                    "function": {"name": call.name, "arguments": call.raw_arguments or "{}"},
                }
                for call in first.tool_calls
            ],
        })
        for result in results:
            messages.append({
                "role": "tool",
                "tool_call_id": result.call_id,
                "content": json.dumps(result.payload, default=str),
            })

        response = self._complete(messages)
        if not response.choices:
            return ""
        return response.choices[0].message.content or ""
