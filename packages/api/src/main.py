# This project was developed with assistance from AI tools.
"""FastAPI application entry point."""

import logging
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import __version__
from .core.config import settings
from .inference.config import get_model_config, require_api_key
from .observability import flush_langfuse, log_observability_status
from .routes import chat, embed, health
from .schemas.error import ErrorResponse
from .services.relay import INVALID_REQUEST_MESSAGE

logger = logging.getLogger(__name__)


def check_provider_credentials() -> None:
    """Raise RuntimeError when the completion provider credential is missing.

    Logs the provider, model and endpoint once the credential is present.
    """
    require_api_key(settings.CHAT_MODEL_TIER)
    model_cfg = get_model_config(settings.CHAT_MODEL_TIER)
    logger.info(
        "Completion provider: %s (model=%s, endpoint=%s)",
        model_cfg["provider"],
        model_cfg["model_name"],
        model_cfg["endpoint"],
    )


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Application startup/shutdown lifecycle."""
    logger.info("Starting %s %s", settings.APP_NAME, __version__)
    check_provider_credentials()
    log_observability_status()
    if settings.DEBUG:
        from db import init_db

        await init_db()
    yield
    flush_langfuse()
    from db.database import db_service

    await db_service.dispose()


app = FastAPI(
    title="Dealer Chat API",
    description="Chat relay and embed loader for the dealership support widget",
    version=__version__,
    debug=settings.DEBUG,
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_HOSTS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "X-Customer-ID"],
)


def _request_id(request: Request) -> str:
    return request.headers.get("x-request-id", str(uuid.uuid4()))


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Render HTTPException as ``{"error": detail}``."""
    if exc.status_code >= 400:
        logger.info(
            "%s %s -> %d (request_id=%s)",
            request.method,
            request.url.path,
            exc.status_code,
            _request_id(request),
        )
    return _error(exc.status_code, str(exc.detail))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies are a 400, details stay in the log."""
    logger.warning(
        "Invalid request to %s (request_id=%s): %s",
        request.url.path,
        _request_id(request),
        exc.errors(),
    )
    return _error(400, INVALID_REQUEST_MESSAGE)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    """Catch-all for unhandled exceptions -- log and return 500."""
    logger.exception("Unhandled exception (request_id=%s)", _request_id(request))
    return _error(500, "An unexpected error occurred.")


# Include routers
app.include_router(health.router, prefix="/health", tags=["health"])
app.include_router(chat.router, prefix="/api", tags=["chat"])
app.include_router(embed.router, tags=["widget"])
