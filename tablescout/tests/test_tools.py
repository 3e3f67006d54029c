from __future__ import annotations

from unittest.mock import patch

import httpx
import pytest

from tablescout.tools.config import ToolConfig
from tablescout.tools.reddit import BASE_SUBREDDITS, RedditClient, subreddits_for
from tablescout.tools.web_search import WebSearchClient, focused_query

CONFIG = ToolConfig(
    reddit_client_id="id",
    reddit_client_secret="secret",
    brave_api_key="brave",
    timeout=5.0,
)


def _response(status: int, json: dict | None = None, text: str = "") -> httpx.Response:
    request = httpx.Request("GET", "https://example.test")
    if json is not None:
        return httpx.Response(status, json=json, request=request)
    return httpx.Response(status, text=text, request=request)


def _token(expires_in: int = 3600) -> httpx.Response:
    return _response(200, {"access_token": "tok", "expires_in": expires_in})


def _listing(*posts: dict) -> httpx.Response:
    return _response(200, {"data": {"children": [{"data": p} for p in posts]}})


def _post(title, score=10, comments=3, author="someone", permalink=None):
    return {
        "title": title,
        "score": score,
        "num_comments": comments,
        "author": author,
        "permalink": permalink or f"/r/FoodNYC/comments/{title.replace(' ', '_')}",
        "subreddit": "FoodNYC",
    }


# ── Subreddit selection ──────────────────────────────────────────────────


def test_requested_subreddits_appended_to_base():
    subs = subreddits_for("pizza", ["FoodNYC", "food"])
    assert subs == BASE_SUBREDDITS + ["FoodNYC"]


def test_city_names_infer_local_subreddits():
    subs = subreddits_for("best pizza in Brooklyn")
    assert "Brooklyn" in subs
    assert "FoodNYC" in subs


def test_subreddit_list_is_capped():
    subs = subreddits_for("food", [f"sub{i}" for i in range(20)])
    assert len(subs) == 8


# ── Reddit client ────────────────────────────────────────────────────────


class TestRedditClient:
    @patch("tablescout.tools.reddit.httpx.get")
    @patch("tablescout.tools.reddit.httpx.post")
    def test_filters_dedupes_and_sorts(self, mock_post, mock_get):
        mock_post.return_value = _token()
        mock_get.return_value = _listing(
            _post("Lucali", score=50),
            _post("Di Fara", score=80),
            _post("Lucali", score=50),
            _post("Downvoted", score=0),
            _post("No comments", comments=0),
        )

        result = RedditClient(CONFIG).search("pizza", ["FoodNYC"])

        titles = [p["title"] for p in result["posts"]]
        assert titles == ["Di Fara", "Lucali"]
        assert result["sources"] == [p["url"] for p in result["posts"]]
        assert result["sources"][0].startswith("https://reddit.com/r/FoodNYC/")
        assert mock_get.call_args.kwargs["headers"]["Authorization"] == "Bearer tok"

    @patch("tablescout.tools.reddit.httpx.get")
    @patch("tablescout.tools.reddit.httpx.post")
    def test_token_is_reused_until_expiry(self, mock_post, mock_get):
        mock_post.return_value = _token()
        mock_get.return_value = _listing(_post("Lucali"))
        client = RedditClient(CONFIG)

        client.search("pizza", ["FoodNYC"])
        client.search("ramen", ["FoodNYC"])

        mock_post.assert_called_once()

    @patch("tablescout.tools.reddit.httpx.get")
    @patch("tablescout.tools.reddit.httpx.post")
    def test_expired_token_is_refreshed(self, mock_post, mock_get):
        mock_post.return_value = _token(expires_in=30)
        mock_get.return_value = _listing(_post("Lucali"))
        client = RedditClient(CONFIG)

        client.search("pizza", ["FoodNYC"])
        client.search("ramen", ["FoodNYC"])

        assert mock_post.call_count == 2

    @patch("tablescout.tools.reddit.httpx.get")
    @patch("tablescout.tools.reddit.httpx.post")
    def test_unsearchable_subreddits_are_skipped(self, mock_post, mock_get):
        mock_post.return_value = _token()
        mock_get.side_effect = [_response(403, text="private")] + [_listing(_post("Lucali"))] * 10

        result = RedditClient(CONFIG).search("pizza", ["FoodNYC"])

        assert BASE_SUBREDDITS[0] not in result["subreddits_searched"]
        assert [p["title"] for p in result["posts"]] == ["Lucali"]

    @patch("tablescout.tools.reddit.httpx.get")
    @patch("tablescout.tools.reddit.httpx.post")
    def test_nothing_searchable_raises(self, mock_post, mock_get):
        mock_post.return_value = _token()
        mock_get.return_value = _response(500, text="down")

        with pytest.raises(RuntimeError):
            RedditClient(CONFIG).search("pizza")

    @patch("tablescout.tools.reddit.httpx.post")
    def test_missing_credentials_raise_without_network(self, mock_post):
        client = RedditClient(ToolConfig(reddit_client_id="", reddit_client_secret=""))

        with pytest.raises(RuntimeError):
            client.search("pizza")

        mock_post.assert_not_called()


# ── Web search ───────────────────────────────────────────────────────────


def test_focused_query_adds_terms_once():
    assert focused_query("Lucali Brooklyn", "menu") == "Lucali Brooklyn menu prices"
    assert focused_query("Lucali reviews", "reviews") == "Lucali reviews"
    assert focused_query("Lucali", None) == "Lucali"
    assert focused_query("Lucali", "location") == "Lucali address hours"


class TestWebSearchClient:
    @patch("tablescout.tools.web_search.httpx.get")
    def test_results_and_sources(self, mock_get):
        mock_get.return_value = _response(200, {"web": {"results": [
            {"title": "Lucali", "url": "https://example.com/lucali", "description": "Pies"},
            {"title": "No url", "url": "", "description": "?"},
        ]}})

        result = WebSearchClient(CONFIG).search("pizza Brooklyn", "reviews", timeout=2.0)

        assert result["sources"] == ["https://example.com/lucali"]
        assert len(result["results"]) == 2
        kwargs = mock_get.call_args.kwargs
        assert kwargs["params"]["q"] == "pizza Brooklyn reviews"
        assert kwargs["headers"]["X-Subscription-Token"] == "brave"
        assert kwargs["timeout"] == 2.0

    @patch("tablescout.tools.web_search.httpx.get")
    def test_http_error_raises(self, mock_get):
        mock_get.return_value = _response(429, text="slow down")

        with pytest.raises(RuntimeError, match="429"):
            WebSearchClient(CONFIG).search("pizza")

    @patch("tablescout.tools.web_search.httpx.get")
    def test_missing_key_raises_without_network(self, mock_get):
        with pytest.raises(RuntimeError):
            WebSearchClient(ToolConfig(brave_api_key="")).search("pizza")

        mock_get.assert_not_called()
