from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

SEARCH_COMMUNITY = "search_community"
SEARCH_WEB = "search_web"


class ErrorKind(str, Enum):
    rate_limited = "rate_limited"
    quota_exceeded = "quota_exceeded"
    auth_failed = "auth_failed"
    timeout = "timeout"
    unknown = "unknown"


class ProviderError(Exception):
    """A provider backend failed; ``kind`` says how."""

    def __init__(
        self,
        message: str,
        kind: ErrorKind = ErrorKind.unknown,
        provider: str | None = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.provider = provider


class NoProvidersConfigured(Exception):
    pass


@dataclass(frozen=True)
class ToolCall:
    """One tool request emitted by a model turn.

    ``id`` is what the result is re-attached by. ``error`` is set when the
    request could not be decoded; the call is still executed (as a failure)
    so every call gets exactly one result.
    """

    id: str
    name: str
    arguments: dict[str, Any] = field(default_factory=dict)
    raw_arguments: str = ""
    error: str | None = None


@dataclass(frozen=True)
class ToolResult:
    call_id: str
    name: str
    payload: dict[str, Any]
    sources: list[str] = field(default_factory=list)

    @property
    def failed(self) -> bool:
        return "error" in self.payload


@dataclass(frozen=True)
class FirstResponse:
    content: str
    tool_calls: list[ToolCall] = field(default_factory=list)
