from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

Role = Literal["user", "assistant", "system"]
ROLES: tuple[str, ...] = ("user", "assistant", "system")


class Message(BaseModel):
    model_config = ConfigDict(frozen=True)

    role: Role
    content: str = Field(..., min_length=1)


class ChatRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    messages: list[Message] = Field(..., min_length=1)
    preferred_provider: str | None = Field(default=None, alias="preferredProvider")


class ChatResponse(BaseModel):
    message: str
    sources: list[str] | None = None
    provider: str | None = None


class ErrorResponse(BaseModel):
    error: str
    details: str | None = None
    timestamp: str
