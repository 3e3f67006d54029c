from __future__ import annotations

from typing import Any

from ..llm.models import SEARCH_COMMUNITY, SEARCH_WEB

# OpenAI-style function definitions, shared by every function-calling provider.
TOOL_DEFINITIONS: list[dict[str, Any]] = [
    {
        "type": "function",
        "function": {
            "name": SEARCH_COMMUNITY,
            "description": (
                "Search Reddit for restaurant reviews and discussions. "
                "Great for authentic user opinions and experiences."
            ),
            "parameters": {
                "type": "object",
                "properties": {
                    "query": {
                        "type": "string",
                        "description": (
                            'Search query (e.g., "best pizza Brooklyn", '
                            '"Four Charles restaurant review")'
                        ),
                    },
                    "subreddits": {
                        "type": "array",
                        "items": {"type": "string"},
                        "description": "Specific subreddits to search (optional), e.g. FoodNYC, AskNYC",
                    },
                },
                "required": ["query"],
            },
        },
    },
    {
        "type": "function",
        "function": {
            "name": SEARCH_WEB,
            "description": (
                "Search the web for restaurant information, reviews, and "
                "recommendations from professional sources."
            ),
            "parameters": {
                "type": "object",
                "properties": {
                    "query": {
                        "type": "string",
                        "description": (
                            'Web search query (e.g., "Four Charles restaurant NYC review", '
                            '"best Mediterranean Flatiron")'
                        ),
                    },
                    "focus": {
                        "type": "string",
                        "enum": ["reviews", "menu", "location", "general"],
                        "description": "What aspect to focus the search on",
                    },
                },
                "required": ["query"],
            },
        },
    },
]

TOOL_LABELS = {
    SEARCH_COMMUNITY: "Reddit",
    SEARCH_WEB: "web search",
}
