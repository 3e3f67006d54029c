"""
Search directives emitted by providers without native function calling.

The model is instructed to answer with a block like::

    SEARCH_NEEDED
    REDDIT:Four Charles Prime Rib:FoodNYC
    WEB:Four Charles Prime Rib NYC reviews:menu

Each line after the sentinel is ``<TAG>:<query>[:<hint>]``. ``REDDIT`` lines
map to ``search_community`` (hint = subreddit), ``WEB`` lines map to
``search_web`` (hint = focus). Parsing is line-by-line and tolerant: lines
with an unknown tag, an empty query or an invalid hint are skipped or
stripped, never raised on.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from .models import SEARCH_COMMUNITY, SEARCH_WEB, ToolCall

SENTINEL = "SEARCH_NEEDED"

_TAGS = {
    "REDDIT": SEARCH_COMMUNITY,
    "COMMUNITY": SEARCH_COMMUNITY,
    "WEB": SEARCH_WEB,
}
WEB_FOCUS = ("reviews", "menu", "location", "general")

_LINE_RE = re.compile(r"^\s*[-*]?\s*([A-Za-z]+)\s*:(.*)$")
_SUBREDDIT_RE = re.compile(r"^(?:/?r/)?([A-Za-z0-9_]{2,21})$")


@dataclass(frozen=True)
class SearchDirective:
    type: str
    query: str
    target: str | None = None

    def to_tool_call(self, call_id: str) -> ToolCall:
        arguments: dict = {"query": self.query}
        if self.target and self.type == SEARCH_COMMUNITY:
            arguments["subreddits"] = [self.target]
        elif self.target:
            arguments["focus"] = self.target
        return ToolCall(id=call_id, name=self.type, arguments=arguments)


def has_sentinel(text: str) -> bool:
    return SENTINEL in (text or "")


def _clean(value: str) -> str:
    return value.strip().strip("[]\"'`").strip()


def parse_line(line: str) -> SearchDirective | None:
    match = _LINE_RE.match(line)
    if not match:
        return None
    tool = _TAGS.get(match.group(1).upper())
    if tool is None:
        return None

    query, _, hint = match.group(2).partition(":")
    query = _clean(query)
    if not query:
        return None

    target = _clean(hint) or None
    if target and tool == SEARCH_COMMUNITY:
        sub = _SUBREDDIT_RE.match(target)
        target = sub.group(1) if sub else None
    elif target:
        target = target.lower() if target.lower() in WEB_FOCUS else None

    return SearchDirective(type=tool, query=query, target=target)


def parse_directives(text: str) -> list[SearchDirective]:
    """Return every well-formed directive in ``text`` (empty without sentinel)."""
    if not has_sentinel(text):
        return []

    directives: list[SearchDirective] = []
    for line in text.splitlines():
        directive = parse_line(line)
        if directive is not None and directive not in directives:
            directives.append(directive)
    return directives


def strip_directives(text: str) -> str:
    """Remove the sentinel and directive lines, keeping any prose around them."""
    kept = [
        line for line in (text or "").splitlines()
        if SENTINEL not in line and parse_line(line) is None
    ]
    return "\n".join(kept).strip()
