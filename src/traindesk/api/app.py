"""FastAPI application setup."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from traindesk import __version__
from traindesk.api.dependencies import close_database, init_database
from traindesk.api.models import Envelope
from traindesk.api.routes import health, registrations
from traindesk.approval import InvalidTransitionError
from traindesk.config import Settings
from traindesk.registrations import RegistrationNotFoundError, StoreError

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Awaitable, Callable

logger = logging.getLogger(__name__)

CORS_METHODS = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]
CORS_HEADERS = ["Content-Type", "Authorization", "X-Requested-With"]


def _preflight_headers(origin: str | None, allowed: tuple[str, ...]) -> dict[str, str]:
    """CORS headers for an OPTIONS answer; none for origins outside the allow list."""
    headers = {"Vary": "Origin"}
    if origin and (origin in allowed or "*" in allowed):
        headers.update(
            {
                "Access-Control-Allow-Origin": origin,
                "Access-Control-Allow-Credentials": "true",
                "Access-Control-Allow-Methods": ", ".join(CORS_METHODS),
                "Access-Control-Allow-Headers": ", ".join(CORS_HEADERS),
                "Access-Control-Max-Age": "600",
            }
        )
    return headers


def _format_validation_error(exc: RequestValidationError) -> str:
    """Render pydantic errors as one readable line."""
    parts = []
    for error in exc.errors():
        location = ".".join(str(p) for p in error.get("loc", ()) if p != "body")
        parts.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return "Invalid request: " + "; ".join(parts)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    settings: Settings = app.state.settings
    init_database(settings.database_url, store_retries=settings.store_retries)
    logger.info("TrainDesk API %s started", __version__)
    yield
    close_database()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    if settings is None:
        settings = Settings.from_env()

    app = FastAPI(
        title="TrainDesk API",
        description="Registration approvals for the training department",
        version=__version__,
        lifespan=lifespan,
    )

    # Store config for lifespan manager
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=True,
        allow_methods=CORS_METHODS,
        allow_headers=CORS_HEADERS,
    )

    # Added after CORSMiddleware so it wraps it: every OPTIONS gets an empty 200
    @app.middleware("http")
    async def answer_options(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        if request.method != "OPTIONS":
            return await call_next(request)
        return Response(
            status_code=status.HTTP_200_OK,
            headers=_preflight_headers(request.headers.get("origin"), settings.cors_origins),
        )

    # Expected failures are reported in the envelope with HTTP 200
    @app.exception_handler(RegistrationNotFoundError)
    async def registration_not_found_handler(
        _request: Request, exc: RegistrationNotFoundError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_200_OK,
            content=Envelope.error(str(exc)).model_dump(),
        )

    @app.exception_handler(InvalidTransitionError)
    async def invalid_transition_handler(
        _request: Request, exc: InvalidTransitionError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_200_OK,
            content=Envelope.error(str(exc)).model_dump(),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        _request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_200_OK,
            content=Envelope.error(_format_validation_error(exc)).model_dump(),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(_request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=Envelope.error(str(exc.detail)).model_dump(),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(StoreError)
    async def store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
        logger.error(
            "Store error on %s %s: %s",
            request.method,
            request.url.path,
            exc,
            exc_info=exc,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=Envelope.error("Internal server error").model_dump(),
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "Unhandled error on %s %s",
            request.method,
            request.url.path,
            exc_info=exc,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=Envelope.error("Internal server error").model_dump(),
        )

    app.include_router(health.router)
    app.include_router(registrations.router)

    return app
