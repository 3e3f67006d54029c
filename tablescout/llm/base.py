"""
Common contract for LLM provider adapters.

A turn has at most two generation calls::

    begin_turn ── no tool calls ──────────────────────────────▶ done
         │
         └── tool calls ─▶ (caller executes tools) ─▶ finish_turn ─▶ done

``begin_turn`` raises ProviderError so the failover chain can move on.
``finish_turn`` never raises: once tools have run, some answer is always
returned, falling back to an apology.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from ..chat.models import Message
from .models import FirstResponse, ProviderError, ToolResult
from .prompts import APOLOGY_MESSAGE

logger = logging.getLogger(__name__)


class ProviderAdapter(ABC):
    name: str = ""

    @abstractmethod
    def begin_turn(self, conversation: list[Message]) -> FirstResponse:
        """First generation call; may request tools.

        Args:
            conversation: Full history, system instruction first.

        Raises:
            ProviderError: on any backend failure, with its ErrorKind set.
        """

    @abstractmethod
    def _generate_final(
        self,
        conversation: list[Message],
        first: FirstResponse,
        results: list[ToolResult],
    ) -> str:
        """Second generation call with the tool results attached."""

    def finish_turn(
        self,
        conversation: list[Message],
        first: FirstResponse,
        results: list[ToolResult],
    ) -> str:
        try:
            text = self._generate_final(conversation, first, results)
        except ProviderError as e:
            logger.warning("%s final response failed (%s): %s", self.name, e.kind.value, e)
            return APOLOGY_MESSAGE
        except Exception:
            logger.warning("%s final response failed", self.name, exc_info=True)
            return APOLOGY_MESSAGE
        return text.strip() or APOLOGY_MESSAGE
