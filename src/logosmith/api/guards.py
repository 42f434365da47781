"""Ingress guards: CORS, rate limiting, body-size cap and security headers.

All guards are installed by :func:`install_guards` when the application is
created.  Starlette runs the most recently added middleware first, so the
effective order for an incoming request is::

    security headers -> CORS -> body-size cap -> rate limiter -> route

:func:`~logosmith.api.main.create_app` adds one more middleware before the
guards, innermost, that turns unhandled route errors into the JSON 500 body
so that response still carries the CORS and security headers.

The rate limiter is :mod:`slowapi` with in-memory fixed-window counters
keyed by client address.  Its counters are the only state shared between
requests.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

from fastapi import FastAPI, HTTPException, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address
from starlette.datastructures import Headers
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from logosmith.core.config import LogosmithConfig

logger = logging.getLogger(__name__)

SECURITY_HEADERS: dict[str, str] = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "no-referrer",
    "Strict-Transport-Security": "max-age=15552000; includeSubDomains",
    "Cross-Origin-Opener-Policy": "same-origin",
    "Cross-Origin-Resource-Policy": "same-origin",
    "X-DNS-Prefetch-Control": "off",
    "X-Permitted-Cross-Domain-Policies": "none",
}

PAYLOAD_TOO_LARGE = "Request body too large"

CallNext = Callable[[Request], Awaitable[Response]]


def build_limiter(config: LogosmithConfig) -> Limiter:
    return Limiter(
        key_func=get_remote_address,
        application_limits=[config.rate_limit],
        headers_enabled=True,
        enabled=config.rate_limit_enabled,
    )


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> Response:
    """Answer a rejected request with 429 and the standard rate-limit headers.

    Kept synchronous because :class:`SlowAPIMiddleware` invokes the handler
    without awaiting it.
    """
    logger.warning("Rate limit exceeded for %s: %s", get_remote_address(request), exc.detail)
    response = JSONResponse(
        status_code=429,
        content={
            "success": False,
            "error": "Too many requests, please try again later.",
            "type": "too_many_requests",
            "retryAfter": exc.limit.limit.get_expiry(),
        },
    )
    return request.app.state.limiter._inject_headers(response, request.state.view_rate_limit)


class BodyTooLarge(HTTPException):
    def __init__(self) -> None:
        super().__init__(status_code=413, detail=PAYLOAD_TOO_LARGE)


def _payload_too_large() -> JSONResponse:
    return JSONResponse(
        status_code=413,
        content={"success": False, "error": PAYLOAD_TOO_LARGE, "type": "payload_too_large"},
    )


class BodySizeLimitMiddleware:
    """Reject request bodies larger than *max_bytes*.

    A declared ``Content-Length`` is checked before the app runs.  The bytes
    actually received are counted too, so a chunked body that carries no
    length is cut off with :class:`BodyTooLarge` as soon as it passes the cap.
    """

    def __init__(self, app: ASGIApp, max_bytes: int) -> None:
        self.app = app
        self.max_bytes = max_bytes

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        declared = Headers(scope=scope).get("content-length")
        if declared is not None:
            try:
                too_large = int(declared) > self.max_bytes
            except ValueError:
                response = JSONResponse(
                    status_code=400,
                    content={
                        "success": False,
                        "error": "Invalid Content-Length header",
                        "type": "validation_error",
                    },
                )
                await response(scope, receive, send)
                return
            if too_large:
                logger.warning("Rejected %s byte body on %s", declared, scope["path"])
                await _payload_too_large()(scope, receive, send)
                return

        received = 0

        async def limited_receive() -> Message:
            nonlocal received
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > self.max_bytes:
                    logger.warning("Rejected streamed body over %d bytes on %s", self.max_bytes, scope["path"])
                    raise BodyTooLarge()
            return message

        await self.app(scope, limited_receive, send)


async def security_headers(request: Request, call_next: CallNext) -> Response:
    response = await call_next(request)
    for name, value in SECURITY_HEADERS.items():
        response.headers.setdefault(name, value)
    return response


def install_guards(app: FastAPI, config: LogosmithConfig) -> None:
    """Attach every ingress guard to *app*.

    Args:
        app: The FastAPI application.
        config: Supplies the rate limit, body cap and CORS allow-list.
    """
    app.state.limiter = build_limiter(config)
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

    # Innermost first.
    app.add_middleware(SlowAPIMiddleware)
    app.add_middleware(BodySizeLimitMiddleware, max_bytes=config.max_body_bytes)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )
    app.middleware("http")(security_headers)
