"""
Chat orchestration: one request, end to end.

    messages ─▶ system prompt + topic guard ─▶ FailoverChain
                                                   │ per provider:
                                                   ▼
                 begin_turn ─▶ ToolExecutor.execute_all ─▶ finish_turn
                                                   │
                                                   ▼
                          ChatResponse(message, sources, provider)

Sources are collected from every tool result of the successful turn and
deduplicated in first-seen order. The incoming conversation is never
modified; the system instruction is prepended to a new list.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from ..llm.base import ProviderAdapter
from ..llm.models import NoProvidersConfigured
from ..llm.prompts import REFUSAL_MESSAGE, SYSTEM_PROMPT
from ..llm.registry import FailoverChain, ProviderRegistry
from ..tools.executor import ToolExecutor
from .models import ChatRequest, ChatResponse, Message
from .topic import conversation_is_food_related

logger = logging.getLogger(__name__)


@dataclass
class TurnOutcome:
    message: str
    sources: list[str] = field(default_factory=list)


def dedupe_sources(sources: list[str]) -> list[str]:
    return list(dict.fromkeys(s for s in sources if s))


class ChatOrchestrator:
    def __init__(self, registry: ProviderRegistry, executor: ToolExecutor) -> None:
        self._registry = registry
        self._chain = FailoverChain(registry)
        self._executor = executor

    @property
    def registry(self) -> ProviderRegistry:
        return self._registry

    def run_turn(self, adapter: ProviderAdapter, conversation: list[Message]) -> TurnOutcome:
        first = adapter.begin_turn(conversation)
        if not first.tool_calls:
            return TurnOutcome(message=first.content.strip())

        logger.info(
            "%s requested %d tool calls: %s",
            adapter.name, len(first.tool_calls), ", ".join(c.name for c in first.tool_calls),
        )
        results = self._executor.execute_all(first.tool_calls)
        message = adapter.finish_turn(conversation, first, results)
        return TurnOutcome(
            message=message,
            sources=[source for result in results for source in result.sources],
        )

    def respond(self, request: ChatRequest) -> ChatResponse:
        """Answer a validated chat request.

        Raises:
            NoProvidersConfigured: no provider credentials are present.
            ProviderError: every available provider failed.
        """
        if not self._registry.available_providers():
            raise NoProvidersConfigured("No AI providers are configured")

        if not conversation_is_food_related(request.messages):
            logger.info("Refusing off-topic conversation")
            return ChatResponse(message=REFUSAL_MESSAGE)

        conversation = [Message(role="system", content=SYSTEM_PROMPT), *request.messages]
        outcome, provider = self._chain.run(
            conversation, self.run_turn, preferred=request.preferred_provider,
        )

        sources = dedupe_sources(outcome.sources)
        logger.info("Responding via %s with %d sources", provider, len(sources))
        return ChatResponse(message=outcome.message, sources=sources or None, provider=provider)
