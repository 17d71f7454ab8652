"""FastAPI application for the chat resume API."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .... import __version__
from ....common.exception_handler import (
    format_exception_json,
    get_http_status_code,
    log_exception,
)
from ....config import settings, setup_logging
from ....core.domain.exceptions import ChatResumeError
from .routers import chat, components, documents, health, intent, rag, suggestions

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Initialize logging and storage directories on startup."""
    setup_logging(settings.log_level, log_file=settings.log_file, json_format=settings.log_json)
    settings.ensure_directories()

    logger.info("Chat resume API starting up (persona: %s)", settings.persona_name)
    logger.info("API docs available at /docs")
    logger.info("Debug mode: %s", "ENABLED" if settings.debug else "DISABLED")
    yield
    logger.info("Chat resume API shutting down...")


app = FastAPI(
    title="Chat Resume API",
    description=(
        "Conversational resume assistant. Answers questions from an uploaded "
        "knowledge base and surfaces interactive resume components."
    ),
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(chat.router)
app.include_router(rag.router)
app.include_router(intent.router)
app.include_router(components.router)
app.include_router(documents.router)
app.include_router(suggestions.router)


# =============================================================================
# Global Exception Handlers
# =============================================================================


@app.exception_handler(ChatResumeError)
async def chat_resume_error_handler(request: Request, exc: ChatResumeError) -> JSONResponse:
    """Handle all ChatResumeError exceptions with structured JSON response.

    Args:
        request: The incoming request.
        exc: The ChatResumeError exception.

    Returns:
        JSONResponse with structured error details.
    """
    status_code = get_http_status_code(exc)
    log_exception(
        exc,
        level=logging.WARNING if status_code < 500 else logging.ERROR,
        extra_context={"path": str(request.url.path), "method": request.method},
    )

    return JSONResponse(
        status_code=status_code,
        content=exc.to_dict(include_trace=settings.debug),
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle all unhandled exceptions with structured JSON response.

    Args:
        request: The incoming request.
        exc: The unhandled exception.

    Returns:
        JSONResponse with structured error details.
    """
    log_exception(exc, extra_context={"path": str(request.url.path), "method": request.method})

    return JSONResponse(
        status_code=get_http_status_code(exc),
        content=format_exception_json(exc, include_trace=settings.debug),
    )


# Export for uvicorn
__all__ = ["app"]
