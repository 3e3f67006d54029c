"""
Tool execution with a fixed time budget per call.

Every call produces exactly one ToolResult. Failures (timeouts, collaborator
errors, unknown tools, undecodable arguments) come back as error-shaped
results carrying a ``fallback`` sentence for the model to relay, and an
empty source list. Nothing here raises to the caller.
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FuturesTimeout
from typing import Any, Callable

from ..llm.models import SEARCH_COMMUNITY, SEARCH_WEB, ToolCall, ToolResult
from .config import DEFAULT_TOOL_CONFIG, ToolConfig
from .reddit import RedditClient
from .schemas import TOOL_LABELS
from .web_search import WebSearchClient

logger = logging.getLogger(__name__)

SearchFn = Callable[..., dict[str, Any]]


def error_result(call: ToolCall, message: str) -> ToolResult:
    label = TOOL_LABELS.get(call.name, "that source")
    return ToolResult(
        call_id=call.id,
        name=call.name,
        payload={
            "error": message,
            "fallback": (
                f"I'm having trouble accessing {label} right now, so this answer "
                "may be missing some up-to-date information."
            ),
        },
        sources=[],
    )


class ToolExecutor:
    def __init__(
        self,
        config: ToolConfig = DEFAULT_TOOL_CONFIG,
        search_community: SearchFn | None = None,
        search_web: SearchFn | None = None,
    ) -> None:
        self._config = config
        self._search_community = search_community or RedditClient(config).search
        self._search_web = search_web or WebSearchClient(config).search

    def _dispatch(self, call: ToolCall, timeout: float) -> dict[str, Any]:
        if call.error:
            raise ValueError(call.error)

        query = str(call.arguments.get("query") or "").strip()
        if not query:
            raise ValueError(f"{call.name} requires a non-empty 'query'")

        if call.name == SEARCH_COMMUNITY:
            subreddits = call.arguments.get("subreddits")
            if isinstance(subreddits, str):
                subreddits = [subreddits]
            return self._search_community(query, subreddits or None, timeout=timeout)

        if call.name == SEARCH_WEB:
            return self._search_web(query, call.arguments.get("focus"), timeout=timeout)

        raise ValueError(f"Unknown tool: {call.name}")

    def _run(self, call: ToolCall, timeout: float) -> ToolResult:
        start = time.monotonic()
        try:
            payload = self._dispatch(call, timeout)
            if not isinstance(payload, dict):
                raise TypeError(f"expected a dict result, got {type(payload).__name__}")
            sources = [str(s) for s in payload.get("sources") or [] if s]
        except Exception as e:
            logger.warning("Tool %s (%s) failed: %s", call.name, call.id, e)
            return error_result(call, f"Failed to execute {call.name}: {e}")

        logger.info(
            "Tool %s (%s) finished in %.1fs with %d sources",
            call.name, call.id, time.monotonic() - start, len(sources),
        )
        return ToolResult(call_id=call.id, name=call.name, payload=payload, sources=sources)

    def execute(self, call: ToolCall) -> ToolResult:
        return self.execute_all([call])[0]

    def execute_all(self, calls: list[ToolCall]) -> list[ToolResult]:
        """Run all calls concurrently; results are returned in call order.

        Each call's deadline starts when it is submitted. A call that misses
        it is abandoned (its thread is not waited on) and reported as a
        timeout; sibling calls are unaffected.
        """
        if not calls:
            return []

        budget = self._config.timeout
        pool = ThreadPoolExecutor(max_workers=len(calls), thread_name_prefix="tool")
        try:
            pending = [
                (call, time.monotonic() + budget, pool.submit(self._run, call, budget))
                for call in calls
            ]
            results: list[ToolResult] = []
            for call, deadline, future in pending:
                try:
                    results.append(future.result(timeout=max(0.0, deadline - time.monotonic())))
                except FuturesTimeout:
                    future.cancel()
                    logger.warning("Tool %s (%s) timed out after %.0fs", call.name, call.id, budget)
                    results.append(error_result(call, f"{call.name} timed out after {budget:.0f} seconds"))
            return results
        finally:
            pool.shutdown(wait=False, cancel_futures=True)
