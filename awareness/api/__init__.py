"""
REST API Layer for the Awareness Engine.

Provides:
- FastAPI application with CORS middleware
- Pattern analysis, level progression and coach endpoints
- API versioning under /api/v1 prefix
"""

from __future__ import annotations

import logging
import os

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from awareness.api.routes import router
from awareness.api.schemas import error_response
from awareness.lib.errors import INTERNAL_ERROR, NOT_FOUND, VALIDATION_ERROR
from awareness.lib.exceptions import ConfigurationError, ValidationError
from awareness.services.coach import ConsciousnessCoach

logger = logging.getLogger(__name__)

_ALLOWED_HEADERS: list[str] = [
    "Content-Type",
    "Accept",
    "Accept-Language",
    "X-Request-ID",
]


def create_app(coach: ConsciousnessCoach | None = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Includes:
    - CORS middleware with origins from AWARENESS_CORS_ORIGINS
    - Exception handlers mapping validation errors to 422 envelopes
    - API v1 router
    - Root-level health check for load balancer probes
    - Production: /docs and /redoc disabled

    Args:
        coach: Optional coach instance (built from the environment if omitted)

    Returns:
        Configured FastAPI application instance.
    """
    environment = os.getenv("AWARENESS_ENVIRONMENT", "development")
    is_production = environment == "production"

    app = FastAPI(
        title="Awareness Engine",
        description="Pattern insight for daily awareness tracking",
        version="0.1.0",
        docs_url=None if is_production else "/docs",
        redoc_url=None if is_production else "/redoc",
    )
    app.state.coach = coach or ConsciousnessCoach()

    # -------------------------------------------------------------------------
    # Exception handlers
    # -------------------------------------------------------------------------
    @app.exception_handler(ValidationError)
    async def validation_exception_handler(
        request: Request, exc: ValidationError,
    ) -> JSONResponse:
        logger.info("Rejected %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(
            status_code=422,
            content=error_response(VALIDATION_ERROR, str(exc)),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_exception_handler(
        request: Request, exc: RequestValidationError,
    ) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content=error_response(
                VALIDATION_ERROR,
                details={"errors": jsonable_encoder(exc.errors())},
            ),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException,
    ) -> JSONResponse:
        code = NOT_FOUND if exc.status_code == 404 else str(exc.status_code)
        message = None if exc.status_code == 404 else str(exc.detail)
        return JSONResponse(
            status_code=exc.status_code,
            content=error_response(code, message),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(
        request: Request, exc: Exception,
    ) -> JSONResponse:
        logger.exception(
            "Unhandled exception on %s %s", request.method, request.url.path,
        )
        return JSONResponse(
            status_code=500,
            content=error_response(INTERNAL_ERROR),
        )

    # -------------------------------------------------------------------------
    # CORS Middleware
    # -------------------------------------------------------------------------
    # Format: comma-separated list of origins. Default: none.
    cors_origins_env = os.getenv("AWARENESS_CORS_ORIGINS", "")
    cors_origins: list[str] = [
        origin.strip()
        for origin in cors_origins_env.split(",")
        if origin.strip()
    ]

    if is_production and "*" in cors_origins:
        raise ConfigurationError(
            "AWARENESS_CORS_ORIGINS contains wildcard '*' which is forbidden in production. "
            "Specify explicit origins instead."
        )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=_ALLOWED_HEADERS,
    )

    if cors_origins:
        logger.info("CORS enabled for origins: %s", cors_origins)
    else:
        logger.info("CORS: no origins configured (restrictive default)")

    app.include_router(router)

    @app.get("/health")
    async def root_health_check() -> dict[str, str]:
        """Root health check for infrastructure probes."""
        return {"status": "ok"}

    return app


__all__ = ["create_app", "router"]
