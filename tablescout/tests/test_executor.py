from __future__ import annotations

import time
from unittest.mock import MagicMock

from tablescout.llm.models import ToolCall
from tablescout.tools.config import ToolConfig
from tablescout.tools.executor import ToolExecutor

FAST_CONFIG = ToolConfig(reddit_client_id="", reddit_client_secret="", brave_api_key="", timeout=0.3)


def _community_ok(query, subreddits=None, timeout=None):
    return {
        "posts": [{"title": "Best slice?", "url": "https://reddit.com/r/FoodNYC/1"}],
        "subreddits_searched": subreddits or ["food"],
        "sources": ["https://reddit.com/r/FoodNYC/1"],
    }


def _web_ok(query, focus=None, timeout=None):
    return {
        "results": [{"title": "Top pizza", "url": "https://example.com/pizza"}],
        "sources": ["https://example.com/pizza"],
    }


def _slow(*args, **kwargs):
    time.sleep(2)
    return {"sources": ["https://never.example"]}


def _executor(community=_community_ok, web=_web_ok) -> ToolExecutor:
    return ToolExecutor(FAST_CONFIG, search_community=community, search_web=web)


# ── Success ──────────────────────────────────────────────────────────────


def test_community_search_returns_sources():
    result = _executor().execute(ToolCall(id="c1", name="search_community", arguments={"query": "pizza"}))
    assert result.call_id == "c1"
    assert not result.failed
    assert result.sources == ["https://reddit.com/r/FoodNYC/1"]


def test_arguments_are_passed_with_timeout():
    web = MagicMock(side_effect=_web_ok)
    community = MagicMock(side_effect=_community_ok)
    executor = _executor(community=community, web=web)

    executor.execute(ToolCall(id="w1", name="search_web", arguments={"query": "pizza", "focus": "menu"}))
    executor.execute(ToolCall(id="c1", name="search_community", arguments={"query": "pizza", "subreddits": "FoodNYC"}))

    web.assert_called_once_with("pizza", "menu", timeout=0.3)
    community.assert_called_once_with("pizza", ["FoodNYC"], timeout=0.3)


def test_results_keep_call_order():
    calls = [
        ToolCall(id="a", name="search_web", arguments={"query": "pizza"}),
        ToolCall(id="b", name="search_community", arguments={"query": "pizza"}),
    ]
    results = _executor().execute_all(calls)
    assert [r.call_id for r in results] == ["a", "b"]


def test_no_calls_no_results():
    assert _executor().execute_all([]) == []


# ── Failures become error-shaped results ─────────────────────────────────


def test_unknown_tool_is_error_shaped():
    result = _executor().execute(ToolCall(id="x", name="search_yelp", arguments={"query": "pizza"}))
    assert result.failed
    assert "Unknown tool" in result.payload["error"]
    assert result.payload["fallback"].startswith("I'm having trouble accessing")
    assert result.sources == []


def test_collaborator_exception_is_error_shaped():
    def boom(*args, **kwargs):
        raise RuntimeError("Reddit API authentication failed")

    result = _executor(community=boom).execute(
        ToolCall(id="c1", name="search_community", arguments={"query": "pizza"})
    )
    assert result.failed
    assert "authentication failed" in result.payload["error"]
    assert "Reddit" in result.payload["fallback"]
    assert result.sources == []


def test_undecodable_arguments_are_error_shaped():
    web = MagicMock(side_effect=_web_ok)
    call = ToolCall(id="w1", name="search_web", raw_arguments="{bad", error="Could not parse arguments")
    result = _executor(web=web).execute(call)
    assert result.failed
    web.assert_not_called()


def test_missing_query_is_error_shaped():
    result = _executor().execute(ToolCall(id="w1", name="search_web", arguments={"focus": "menu"}))
    assert result.failed
    assert "query" in result.payload["error"]


# ── Time budget ──────────────────────────────────────────────────────────


def test_timeout_does_not_cancel_siblings():
    calls = [
        ToolCall(id="slow", name="search_community", arguments={"query": "pizza"}),
        ToolCall(id="fast", name="search_web", arguments={"query": "pizza"}),
    ]
    start = time.monotonic()
    results = _executor(community=_slow).execute_all(calls)
    elapsed = time.monotonic() - start

    slow, fast = results
    assert slow.failed
    assert "timed out" in slow.payload["error"]
    assert slow.sources == []
    assert not fast.failed
    assert fast.sources == ["https://example.com/pizza"]
    assert elapsed < 1.5


def test_non_dict_result_is_error_shaped():
    def nothing(*args, **kwargs):
        return None

    results = _executor(community=nothing).execute_all([
        ToolCall(id="c1", name="search_community", arguments={"query": "pizza"}),
        ToolCall(id="w1", name="search_web", arguments={"query": "pizza"}),
    ])

    community, web = results
    assert community.failed
    assert community.sources == []
    assert not web.failed
