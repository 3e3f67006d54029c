from __future__ import annotations

from tablescout.llm.directives import (
    SearchDirective,
    parse_directives,
    parse_line,
    strip_directives,
)


# ── Line parsing ─────────────────────────────────────────────────────────


def test_reddit_line_with_subreddit():
    d = parse_line("REDDIT:Four Charles Prime Rib:FoodNYC")
    assert d == SearchDirective(type="search_community", query="Four Charles Prime Rib", target="FoodNYC")


def test_reddit_line_without_subreddit():
    d = parse_line("REDDIT:best pizza Brooklyn")
    assert d.query == "best pizza Brooklyn"
    assert d.target is None


def test_bracketed_fields_are_cleaned():
    d = parse_line("REDDIT:[ramen Seattle]:[r/Seattle]")
    assert d.query == "ramen Seattle"
    assert d.target == "Seattle"


def test_web_line_with_focus():
    d = parse_line("WEB:Four Charles NYC:menu")
    assert d.type == "search_web"
    assert d.target == "menu"


def test_web_line_invalid_focus_is_dropped():
    d = parse_line("WEB:Four Charles NYC:cheap")
    assert d.query == "Four Charles NYC"
    assert d.target is None


def test_tags_are_case_insensitive():
    assert parse_line("web: tacos austin").type == "search_web"


def test_unknown_tag_and_empty_query_are_skipped():
    assert parse_line("YELP:tacos austin") is None
    assert parse_line("REDDIT:   ") is None
    assert parse_line("just some prose") is None


# ── Block parsing ────────────────────────────────────────────────────────


def test_no_sentinel_means_no_directives():
    assert parse_directives("REDDIT:pizza Brooklyn") == []


def test_malformed_lines_do_not_fail_the_block():
    text = "\n".join([
        "SEARCH_NEEDED",
        "REDDIT:pizza Brooklyn:FoodNYC",
        "REDDIT:",
        "BING:pizza",
        "WEB:pizza Brooklyn reviews",
        "REDDIT:pizza Brooklyn:FoodNYC",
    ])
    directives = parse_directives(text)
    assert [d.type for d in directives] == ["search_community", "search_web"]


def test_directive_to_tool_call_arguments():
    community = parse_line("REDDIT:pizza Brooklyn:FoodNYC").to_tool_call("search-1")
    web = parse_line("WEB:pizza Brooklyn:reviews").to_tool_call("search-2")
    assert community.arguments == {"query": "pizza Brooklyn", "subreddits": ["FoodNYC"]}
    assert web.arguments == {"query": "pizza Brooklyn", "focus": "reviews"}
    assert web.id == "search-2"


def test_strip_directives_keeps_prose():
    text = "Let me look that up.\nSEARCH_NEEDED\nWEB:pizza Brooklyn"
    assert strip_directives(text) == "Let me look that up."
