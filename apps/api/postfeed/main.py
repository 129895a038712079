"""FastAPI application entrypoint.

Run with ``uvicorn postfeed.main:create_app --factory``.
"""

from __future__ import annotations

import logging
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from postfeed.context import build_context
from postfeed.core.config import Settings, get_settings
from postfeed.core.logging_safety import configure_logging
from postfeed.errors import ApiError
from postfeed.schemas.error import ErrorResponse, FieldMessage
from postfeed.routes import auth_router, images_router, posts_router, status_router

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"

# Every other route requires an authenticated caller.
_PUBLIC_PATHS: set[tuple[str, str]] = {
    ("POST", f"{API_PREFIX}/auth/signup"),
    ("POST", f"{API_PREFIX}/auth/login"),
}


def _validation_messages(exc: RequestValidationError) -> list[FieldMessage]:
    messages: list[FieldMessage] = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        text = str(error.get("msg", "Invalid value"))
        messages.append(FieldMessage(message=f"{location}: {text}" if location else text))
    return messages


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(title="Postfeed API", version="1.0.0")
    app.state.context = build_context(settings)

    @app.exception_handler(ApiError)
    async def handle_api_error(_, exc: ApiError) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=exc.payload.model_dump(mode="json", exclude_none=True),
        )

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        # Authentication is reported before input validity on protected routes.
        route = request.scope.get("route")
        route_path = getattr(route, "path", request.url.path)
        if (request.method.upper(), route_path) not in _PUBLIC_PATHS:
            identity = request.app.state.context.credentials.identify(request.headers.get("Authorization"))
            if identity is None:
                payload = ErrorResponse(code="UNAUTHENTICATED", message="Not authenticated!")
                return JSONResponse(status_code=401, content=payload.model_dump(exclude_none=True))

        payload = ErrorResponse(
            code="VALIDATION_FAILED",
            message="Invalid input.",
            data=_validation_messages(exc),
        )
        return JSONResponse(status_code=422, content=payload.model_dump(exclude_none=True))

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("request.failed method=%s path=%s", request.method, request.url.path)
        payload = ErrorResponse(code="INTERNAL_ERROR", message=str(exc) or "An error occurred")
        return JSONResponse(status_code=500, content=payload.model_dump(exclude_none=True))

    app.include_router(auth_router, prefix=API_PREFIX)
    app.include_router(posts_router, prefix=API_PREFIX)
    app.include_router(status_router, prefix=API_PREFIX)
    app.include_router(images_router, prefix=API_PREFIX)

    image_dir = Path(settings.image_dir)
    app.mount(f"/{image_dir.name or 'images'}", StaticFiles(directory=image_dir, check_dir=False), name="images")

    return app
