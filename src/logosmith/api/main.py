"""Logosmith Gateway — FastAPI Application.

This module defines the application factory, the REST routes, the error
handlers and the ``main()`` CLI function that launches the uvicorn server.

Architecture
------------
The application is stateless between requests:

- **Configuration** is a :class:`~logosmith.core.config.LogosmithConfig`
  built once by :func:`main` and passed into :func:`create_app`.
- **Provider access** goes through one shared
  :class:`~openai.AsyncOpenAI` client, created in the lifespan and wrapped
  by :class:`~logosmith.core.image_client.OpenAIImageClient`.
- **Generation** composes a prompt with
  :func:`~logosmith.api.prompt_builder.build_logo_prompt` and fans it out
  with :func:`~logosmith.core.fanout.generate_variations`.
- **Ingress guards** (CORS, rate limit, body cap, security headers) are
  installed by :func:`~logosmith.api.guards.install_guards`.

Endpoints
---------
========  ========================  ==================================
Method    Path                      Purpose
========  ========================  ==================================
GET       ``/api/health``           Liveness, timestamp, environment
POST      ``/api/generate-logo``    Generate logo variations
========  ========================  ==================================

Every error answers JSON ``{"success": false, "error": ..., "type": ...}``.
Any other ``/api`` path or method answers 404 through a catch-all route,
so it counts against the rate limit like the real endpoints.

Usage
-----
CLI (installed entry point)::

    logosmith

Direct invocation::

    python -m logosmith.api.main
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from logosmith import __version__
from logosmith.api.guards import PAYLOAD_TOO_LARGE, install_guards
from logosmith.api.models import GenerateLogoRequest
from logosmith.api.prompt_builder import build_logo_prompt
from logosmith.core.config import API_KEY_PREFIX, LogosmithConfig
from logosmith.core.errors import classify_failure
from logosmith.core.fanout import generate_variations
from logosmith.core.image_client import OpenAIImageClient, build_openai_client

logger = logging.getLogger(__name__)

AVAILABLE_ENDPOINTS = ["/api/health", "/api/generate-logo"]

# Methods answered by the /api catch-all route; OPTIONS is left to CORS.
UNKNOWN_ROUTE_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE"]

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def error_response(status_code: int, message: str, tag: str, **extra) -> JSONResponse:
    """Build the uniform JSON error body."""
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": message, "type": tag, **extra},
    )


def not_found_response() -> JSONResponse:
    return error_response(404, "Endpoint not found", "not_found", availableEndpoints=AVAILABLE_ENDPOINTS)


def _validation_message(exc: RequestValidationError) -> str:
    """Pick a readable message from the first validation error."""
    errors = exc.errors()
    if not errors:
        return "Invalid request body"
    first = errors[0]
    if first.get("type") == "value_error":
        # Our own validators: use the raw message without pydantic's prefix.
        return str(first.get("ctx", {}).get("error", first.get("msg")))
    if first.get("type") == "json_invalid":
        return "Request body must be valid JSON"
    if first.get("type") == "missing" and tuple(first.get("loc", ())) == ("body",):
        return "Prompt is required and must be a non-empty string"
    loc = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    return f"{loc}: {first.get('msg')}" if loc else str(first.get("msg"))


# ---------------------------------------------------------------------------
# Exception handlers.
# ---------------------------------------------------------------------------


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    message = _validation_message(exc)
    logger.info("Rejected %s %s: %s", request.method, request.url.path, message)
    return error_response(400, message, "validation_error")


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 404:
        return not_found_response()
    if exc.status_code == 413:
        return error_response(413, PAYLOAD_TOO_LARGE, "payload_too_large")
    return error_response(exc.status_code, str(exc.detail), "http_error")


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return error_response(500, "Internal server error", "internal_error")


async def catch_unhandled_errors(request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
    """Turn an exception escaping a route into the JSON 500 body.

    Installed innermost, so the response still passes through CORS and the
    security-header middleware.  The ``Exception`` handler stays registered
    for errors raised by the outer middleware themselves.
    """
    try:
        return await call_next(request)
    except Exception as exc:
        return await unhandled_exception_handler(request, exc)


# ---------------------------------------------------------------------------
# Application factory.
# ---------------------------------------------------------------------------


def create_app(config: LogosmithConfig) -> FastAPI:
    """Build the FastAPI application around a validated configuration.

    Args:
        config: Startup configuration; it carries the provider credential
            and every tunable used by the routes and guards.

    Returns:
        A ready-to-serve FastAPI application.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Create the shared provider client on startup and close it on shutdown.

        A client already placed on ``app.state`` (as tests do) is left alone.
        """
        owned = not hasattr(app.state, "openai_client")
        if owned:
            app.state.openai_client = build_openai_client(config)
        app.state.image_client = OpenAIImageClient.from_config(app.state.openai_client, config)
        logger.info("Image client ready (model=%s, variations=%d).", config.image_model, config.variation_count)

        yield

        if owned:
            await app.state.openai_client.close()
            logger.info("OpenAI client closed on shutdown.")

    app = FastAPI(
        title="Logosmith Gateway",
        description="Logo generation gateway in front of the OpenAI Images API.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.config = config

    app.middleware("http")(catch_unhandled_errors)
    install_guards(app, config)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    @app.get("/api/health")
    async def health() -> dict:
        """Return service status, the current UTC time and the environment."""
        return {
            "status": "OK",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "environment": config.environment,
            "version": __version__,
        }

    @app.post("/api/generate-logo", response_model=None)
    async def generate_logo(req: GenerateLogoRequest, request: Request) -> dict | JSONResponse:
        """Generate logo variations for a prompt.

        This endpoint:

        1. Receives a request already validated by :class:`GenerateLogoRequest`.
        2. Composes the provider prompt from the trimmed prompt and settings.
        3. Fans out ``variation_count`` concurrent provider calls.
        4. Returns the successful URLs in call order with success and
           failure counts, or a classified error when none succeeded.

        Returns:
            ``{"success": true, "images": [...], "count": n, "failedCount": m}``
            or a JSON error response.
        """
        subject = req.clean_prompt
        logger.info("Logo generation request: %s...", subject[:50])

        try:
            compiled = build_logo_prompt(subject, req.logo_settings)
            result = await generate_variations(
                request.app.state.image_client,
                compiled,
                count=config.variation_count,
                styles=config.style_variants,
            )
        except Exception as exc:
            kind = classify_failure(exc)
            logger.error(
                "Logo generation error (%s): %s",
                kind.tag,
                exc,
                exc_info=exc if kind.tag == "generation_error" else None,
            )
            return error_response(kind.status_code, kind.message, kind.tag)

        logger.info("Generated %d logos successfully", result.success_count)
        return {
            "success": True,
            "images": result.images,
            "count": result.success_count,
            "failedCount": result.failure_count,
        }

    @app.api_route("/api/{path:path}", methods=UNKNOWN_ROUTE_METHODS, include_in_schema=False)
    async def unknown_api_route(path: str) -> JSONResponse:
        """Answer unknown /api paths as a route so the rate limiter counts them."""
        logger.info("Unknown endpoint requested: /api/%s", path)
        return not_found_response()

    return app


# ---------------------------------------------------------------------------
# CLI entry point.
# ---------------------------------------------------------------------------


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT)


def load_config() -> LogosmithConfig:
    """Load configuration or exit with status 1 when it is invalid.

    Only field names and messages are logged.  Input values are withheld so
    a malformed credential never reaches the logs.
    """
    try:
        return LogosmithConfig()
    except ValidationError as e:
        logger.error("Invalid configuration:")
        for err in e.errors():
            field = ".".join(str(part) for part in err["loc"])
            logger.error("   - LOGOSMITH_%s: %s", field.upper(), err["msg"])
        logger.error(
            "Set LOGOSMITH_OPENAI_API_KEY in the environment or a .env file; "
            "the key should start with '%s'.",
            API_KEY_PREFIX,
        )
        raise SystemExit(1) from None


def main() -> None:
    """Validate configuration and launch the uvicorn ASGI server.

    Reads host and port from the configuration (``LOGOSMITH_SERVER_HOST``
    and ``LOGOSMITH_SERVER_PORT``).  Defaults to ``0.0.0.0:3001``.  The
    process exits with status 1 before listening if the provider key is
    missing or malformed.

    This function is registered as the ``logosmith`` console script in
    ``pyproject.toml``.
    """
    configure_logging()
    config = load_config()
    logging.getLogger().setLevel(config.log_level)

    import uvicorn

    app = create_app(config)
    logger.info("Logo API server starting on port %d", config.server_port)
    logger.info("OpenAI API configured: %s", bool(config.openai_api_key.get_secret_value()))
    logger.info("Environment: %s", config.environment)

    uvicorn.run(app, host=config.server_host, port=config.server_port, log_level=config.log_level.lower())


if __name__ == "__main__":
    main()
