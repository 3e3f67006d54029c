from __future__ import annotations

import logging
import re
import threading
import time
from typing import Any

import httpx

from .config import DEFAULT_TOOL_CONFIG, ToolConfig

logger = logging.getLogger(__name__)

_TOKEN_URL = "https://www.reddit.com/api/v1/access_token"
_SEARCH_URL = "https://oauth.reddit.com/r/{subreddit}/search.json"

BASE_SUBREDDITS = ["food", "FoodPorn", "restaurant", "Foodie"]
_MAX_SUBREDDITS = 8
_MAX_POSTS = 20
_TOKEN_BUFFER = 60  # seconds

_CITY_SUBREDDITS: dict[str, list[str]] = {
    "new york": ["nyc", "AskNYC", "FoodNYC"],
    "nyc": ["nyc", "AskNYC", "FoodNYC"],
    "manhattan": ["nyc", "AskNYC", "FoodNYC"],
    "brooklyn": ["Brooklyn", "FoodNYC"],
    "queens": ["Queens", "FoodNYC"],
    "los angeles": ["LosAngeles", "AskLosAngeles", "FoodLosAngeles"],
    "san francisco": ["sanfrancisco", "AskSF", "bayarea"],
    "chicago": ["chicago", "AskChicago", "chicagofood"],
    "dallas": ["Dallas", "dfw"],
    "houston": ["houston", "HoustonFood"],
    "austin": ["Austin", "austinfood"],
    "seattle": ["Seattle", "SeattleWA"],
    "boston": ["boston", "BostonFood"],
    "philadelphia": ["philadelphia", "philly"],
    "miami": ["Miami", "MiamiFL"],
    "atlanta": ["Atlanta", "AtlantaGA"],
    "denver": ["Denver"],
    "phoenix": ["phoenix"],
    "las vegas": ["vegas", "vegaslocals"],
    "portland": ["Portland", "askportland"],
    "nashville": ["nashville"],
}
_CITY_RE = re.compile(
    r"\b(" + "|".join(re.escape(c) for c in _CITY_SUBREDDITS) + r")\b",
    re.IGNORECASE,
)


def subreddits_for(query: str, requested: list[str] | None = None) -> list[str]:
    """Base food subreddits plus requested ones, or ones inferred from city names."""
    subreddits = list(BASE_SUBREDDITS)
    if requested:
        subreddits.extend(s.strip() for s in requested if s and s.strip())
    else:
        for city in _CITY_RE.findall(query):
            subreddits.extend(_CITY_SUBREDDITS[city.lower()])

    seen: set[str] = set()
    unique: list[str] = []
    for sub in subreddits:
        if sub.lower() not in seen:
            seen.add(sub.lower())
            unique.append(sub)
    return unique[:_MAX_SUBREDDITS]


class RedditClient:
    """Application-only OAuth client for Reddit search.

    The access token is cached as an immutable ``(token, expires_at)`` pair.
    Concurrent requests may both refresh an expired token; the last write
    wins.
    """

    def __init__(self, config: ToolConfig = DEFAULT_TOOL_CONFIG) -> None:
        self._config = config
        self._token: tuple[str, float] | None = None
        self._lock = threading.Lock()

    @property
    def configured(self) -> bool:
        return bool(self._config.reddit_client_id and self._config.reddit_client_secret)

    def _access_token(self, timeout: float) -> str:
        cached = self._token
        if cached and time.time() < cached[1]:
            return cached[0]

        response = httpx.post(
            _TOKEN_URL,
            data={"grant_type": "client_credentials"},
            auth=(self._config.reddit_client_id, self._config.reddit_client_secret),
            headers={"User-Agent": self._config.user_agent},
            timeout=timeout,
        )
        response.raise_for_status()
        data = response.json()
        token = data.get("access_token")
        if not token:
            raise RuntimeError("Reddit API authentication failed: no access token")

        expires_at = time.time() + float(data.get("expires_in", 3600)) - _TOKEN_BUFFER
        with self._lock:
            self._token = (token, expires_at)
        return token

    def _search_subreddit(
        self, subreddit: str, query: str, token: str, timeout: float,
    ) -> list[dict[str, Any]]:
        response = httpx.get(
            _SEARCH_URL.format(subreddit=subreddit),
            params={
                "q": query,
                "sort": "relevance",
                "limit": 10,
                "restrict_sr": "true",
                "t": "all",
            },
            headers={
                "Authorization": f"Bearer {token}",
                "User-Agent": self._config.user_agent,
            },
            timeout=timeout,
        )
        response.raise_for_status()

        posts = []
        for child in response.json().get("data", {}).get("children", []):
            data = child.get("data", {})
            posts.append({
                "title": data.get("title", ""),
                "selftext": data.get("selftext", ""),
                "score": data.get("score", 0),
                "num_comments": data.get("num_comments", 0),
                "url": f"https://reddit.com{data.get('permalink', '')}",
                "subreddit": data.get("subreddit", subreddit),
                "author": data.get("author", ""),
                "created_utc": data.get("created_utc"),
            })
        return posts

    def search(
        self,
        query: str,
        subreddits: list[str] | None = None,
        timeout: float = DEFAULT_TOOL_CONFIG.timeout,
    ) -> dict[str, Any]:
        if not self.configured:
            raise RuntimeError("Reddit credentials are not configured")

        deadline = time.monotonic() + timeout
        token = self._access_token(timeout)
        targets = subreddits_for(query, subreddits)

        posts: list[dict[str, Any]] = []
        searched: list[str] = []
        for subreddit in targets:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                logger.info("Reddit search budget spent after %d subreddits", len(searched))
                break
            try:
                posts.extend(self._search_subreddit(subreddit, query, token, remaining))
                searched.append(subreddit)
            except httpx.HTTPError as e:
                logger.debug("Subreddit r/%s not searchable: %s", subreddit, e)

        if not searched:
            raise RuntimeError(f"No subreddit could be searched for {query!r}")

        seen: set[tuple[str, str]] = set()
        unique: list[dict[str, Any]] = []
        for post in posts:
            key = (post["title"], post["author"])
            if key in seen or post["score"] <= 0 or post["num_comments"] <= 0:
                continue
            seen.add(key)
            unique.append(post)

        unique.sort(key=lambda p: p["score"], reverse=True)
        top = unique[:_MAX_POSTS]
        return {
            "posts": top,
            "subreddits_searched": searched,
            "sources": [p["url"] for p in top],
        }

