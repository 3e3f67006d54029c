from __future__ import annotations

import logging
from typing import Any

import httpx

from ..chat.models import Message
from .base import ProviderAdapter
from .config import DEFAULT_PROVIDER_CONFIG, ProviderConfig
from .directives import has_sentinel, parse_directives, strip_directives
from .models import SEARCH_COMMUNITY, SEARCH_WEB, ErrorKind, FirstResponse, ProviderError, ToolResult
from .prompts import SEARCH_PROTOCOL_PROMPT, SYNTHESIS_PROMPT

logger = logging.getLogger(__name__)

_API_URL = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"


def classify_response(status: int, body: str) -> ErrorKind:
    lowered = body.lower()
    if status == 429:
        return ErrorKind.quota_exceeded if "quota" in lowered else ErrorKind.rate_limited
    if status in (401, 403) or "api_key_invalid" in lowered:
        return ErrorKind.auth_failed
    if status in (408, 504):
        return ErrorKind.timeout
    return ErrorKind.unknown


def _conversation_text(conversation: list[Message]) -> str:
    return "\n".join(f"{m.role}: {m.content}" for m in conversation if m.role != "system")


def _system_text(conversation: list[Message]) -> str:
    return "\n\n".join(m.content for m in conversation if m.role == "system")


def _truncate(text: str, limit: int) -> str:
    text = (text or "").strip()
    return text if len(text) <= limit else text[:limit] + "..."


def format_tool_result(result: ToolResult) -> str:
    header = f"[{result.call_id}] {result.name}"
    payload = result.payload

    if "error" in payload:
        return f"{header} failed: {payload['error']}\n  {payload.get('fallback', '')}".rstrip()

    if result.name == SEARCH_COMMUNITY:
        posts = payload.get("posts") or []
        if not posts:
            return f"{header}: no Reddit posts found"
        lines = [f"{header} Reddit Posts:"]
        for post in posts[:10]:
            lines.append(
                f"- {post.get('title', '')} ({post.get('score', 0)} upvotes, "
                f"{post.get('num_comments', 0)} comments) r/{post.get('subreddit', '')}"
            )
            lines.append(f"  {_truncate(post.get('selftext', ''), 200) or 'No description'}")
            lines.append(f"  {post.get('url', '')}")
        return "\n".join(lines)

    if result.name == SEARCH_WEB:
        items = payload.get("results") or []
        if not items:
            return f"{header}: no web results found"
        lines = [f"{header} Web Results:"]
        for item in items[:10]:
            lines.append(f"- {item.get('title', '')}")
            lines.append(f"  {_truncate(item.get('description', ''), 150)}")
            lines.append(f"  {item.get('url', '')}")
        return "\n".join(lines)

    return f"{header}: {payload}"


class GeminiAdapter(ProviderAdapter):
    """Gemini over its REST API, using the SEARCH_NEEDED text convention for tools."""

    name = "gemini"

    def __init__(self, config: ProviderConfig = DEFAULT_PROVIDER_CONFIG) -> None:
        self._config = config

    def _generate(self, prompt: str) -> str:
        try:
            response = httpx.post(
                _API_URL.format(model=self._config.gemini_model),
                params={"key": self._config.gemini_api_key},
                json={
                    "contents": [{"parts": [{"text": prompt}]}],
                    "generationConfig": {
                        "temperature": self._config.temperature,
                        "topK": 40,
                        "topP": 0.95,
                        "maxOutputTokens": self._config.max_tokens,
                    },
                },
                timeout=self._config.timeout,
            )
        except httpx.TimeoutException as e:
            raise ProviderError(f"Gemini request timed out: {e}", ErrorKind.timeout, self.name) from e
        except httpx.HTTPError as e:
            raise ProviderError(f"Gemini request failed: {e}", ErrorKind.unknown, self.name) from e

        if response.status_code != 200:
            raise ProviderError(
                f"Gemini API error: {response.status_code} - {response.text[:300]}",
                classify_response(response.status_code, response.text),
                self.name,
            )

        data: dict[str, Any] = response.json()
        candidates = data.get("candidates") or [{}]
        parts = (candidates[0].get("content") or {}).get("parts") or [{}]
        return parts[0].get("text") or ""

    def begin_turn(self, conversation: list[Message]) -> FirstResponse:
        prompt = (
            f"{_system_text(conversation)}\n\n{SEARCH_PROTOCOL_PROMPT}\n\n"
            f"Conversation:\n{_conversation_text(conversation)}\n\nAssistant:"
        )
        text = self._generate(prompt)

        if has_sentinel(text):
            directives = parse_directives(text)
            prose = strip_directives(text)
            if directives:
                calls = [d.to_tool_call(f"search-{i}") for i, d in enumerate(directives, 1)]
                logger.info("Gemini requested %d searches", len(calls))
                return FirstResponse(content=prose, tool_calls=calls)
            if not prose:
                raise ProviderError(
                    "Gemini asked to search but gave no usable search lines", provider=self.name,
                )
            return FirstResponse(content=prose)

        if not text.strip():
            raise ProviderError("Gemini returned an empty response", provider=self.name)
        return FirstResponse(content=text.strip())

    def _generate_final(
        self,
        conversation: list[Message],
        first: FirstResponse,
        results: list[ToolResult],
    ) -> str:
        prompt = SYNTHESIS_PROMPT.format(
            conversation=_conversation_text(conversation),
            results="\n\n".join(format_tool_result(r) for r in results),
        )
        return self._generate(prompt)
