from __future__ import annotations

import logging
from typing import Any

import httpx

from .config import DEFAULT_TOOL_CONFIG, ToolConfig

logger = logging.getLogger(__name__)

_BRAVE_URL = "https://api.search.brave.com/res/v1/web/search"

_FOCUS_TERMS = {
    "reviews": "reviews",
    "menu": "menu prices",
    "location": "address hours",
    "general": "",
}


def focused_query(query: str, focus: str | None) -> str:
    terms = _FOCUS_TERMS.get((focus or "general").lower(), "")
    if terms and terms not in query.lower():
        return f"{query} {terms}"
    return query


class WebSearchClient:
    def __init__(self, config: ToolConfig = DEFAULT_TOOL_CONFIG, count: int = 10) -> None:
        self._config = config
        self._count = count

    @property
    def configured(self) -> bool:
        return bool(self._config.brave_api_key)

    def search(
        self,
        query: str,
        focus: str | None = None,
        timeout: float = DEFAULT_TOOL_CONFIG.timeout,
    ) -> dict[str, Any]:
        """Run a Brave web search; raises on missing key or HTTP failure."""
        if not self.configured:
            raise RuntimeError("BRAVE_SEARCH_API_KEY is not configured")

        response = httpx.get(
            _BRAVE_URL,
            params={"q": focused_query(query, focus), "count": self._count},
            headers={
                "Accept": "application/json",
                "Accept-Encoding": "gzip",
                "X-Subscription-Token": self._config.brave_api_key,
            },
            timeout=timeout,
        )
        if response.status_code != 200:
            raise RuntimeError(
                f"Brave Search API error: {response.status_code} - {response.text[:200]}"
            )

        results = []
        for item in response.json().get("web", {}).get("results", []):
            results.append({
                "title": item.get("title", ""),
                "url": item.get("url", ""),
                "description": item.get("description", ""),
                "published": item.get("page_age") or item.get("age"),
            })

        logger.debug("Brave returned %d results for %r", len(results), query)
        return {
            "results": results,
            "sources": [r["url"] for r in results if r["url"]],
        }
