from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from fastapi import Body, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .chat.models import ChatResponse, ErrorResponse
from .chat.orchestrator import ChatOrchestrator
from .chat.validation import INVALID_JSON, ChatRequestError, parse_chat_request
from .llm.models import ErrorKind, NoProvidersConfigured, ProviderError
from .llm.registry import ProviderRegistry
from .log import setup_logging
from .tools.executor import ToolExecutor

setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="TableScout Restaurant Assistant API", version="1.0.0")

_orchestrator = ChatOrchestrator(ProviderRegistry(), ToolExecutor())


def get_orchestrator() -> ChatOrchestrator:
    return _orchestrator


# ── Error mapping ────────────────────────────────────────────────────────

_STATUS_BY_KIND: dict[ErrorKind, tuple[int, str]] = {
    ErrorKind.rate_limited: (429, "Rate limit exceeded. Please try again in a moment."),
    ErrorKind.quota_exceeded: (402, "API quota exceeded. Please check your provider billing."),
    ErrorKind.auth_failed: (401, "Invalid API key. Please check your provider configuration."),
    ErrorKind.timeout: (408, "The request timed out. Please try again."),
    ErrorKind.unknown: (500, "An internal server error occurred. Please try again later."),
}


def error_response(status_code: int, error: str, details: str | None = None) -> JSONResponse:
    body = ErrorResponse(
        error=error,
        details=details,
        timestamp=datetime.now(timezone.utc).isoformat(),
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


@app.exception_handler(RequestValidationError)
async def invalid_body(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info("Rejected unparseable body on %s", request.url.path)
    return error_response(400, INVALID_JSON)


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/api/providers")
def providers(orchestrator: ChatOrchestrator = Depends(get_orchestrator)) -> dict:
    return {
        "providers": [
            {"name": d.name, "priority": d.priority}
            for d in orchestrator.registry.available_providers()
        ]
    }


# ── Chat endpoint ────────────────────────────────────────────────────────


@app.post(
    "/api/chat",
    response_model=ChatResponse,
    response_model_exclude_none=True,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def chat(
    payload: Any = Body(None),
    orchestrator: ChatOrchestrator = Depends(get_orchestrator),
):
    # 1. Validate before any provider is touched
    try:
        request = parse_chat_request(payload)
    except ChatRequestError as e:
        return error_response(400, str(e))

    logger.info("Chat request with %d messages", len(request.messages))

    # 2. Run the provider chain
    try:
        return orchestrator.respond(request)
    except NoProvidersConfigured as e:
        logger.error("Chat request failed: %s", e)
        return error_response(
            500,
            "No AI providers are configured. Please check your environment variables.",
            str(e),
        )
    except ProviderError as e:
        status_code, message = _STATUS_BY_KIND[e.kind]
        logger.error("Provider chain exhausted (%s via %s): %s", e.kind.value, e.provider, e)
        return error_response(status_code, message, str(e))
    except Exception as e:
        logger.exception("Chat request failed unexpectedly")
        return error_response(500, _STATUS_BY_KIND[ErrorKind.unknown][1], str(e))


@app.api_route(
    "/api/chat",
    methods=["GET", "HEAD", "PUT", "PATCH", "DELETE", "OPTIONS"],
    include_in_schema=False,
)
def chat_method_not_allowed() -> JSONResponse:
    response = error_response(405, "Method not allowed. Use POST to send chat messages.")
    response.headers["Allow"] = "POST"
    return response
