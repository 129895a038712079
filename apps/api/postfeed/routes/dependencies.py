"""Dependency wiring for routes."""

from __future__ import annotations

import logging
from typing import Annotated
from uuid import uuid4

from fastapi import Depends, Request, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from postfeed.context import AppContext
from postfeed.core.logging_safety import safe_log_identifier
from postfeed.schemas.auth import RequestContext
from postfeed.services.accounts import AccountService
from postfeed.services.posts import PostService

bearer_scheme = HTTPBearer(auto_error=False, scheme_name="bearerAuth")
logger = logging.getLogger(__name__)


def _request_correlation_id(request: Request) -> str:
    existing = getattr(request.state, "correlation_id", None)
    if isinstance(existing, str) and existing:
        return existing

    correlation_id = request.headers.get("X-Correlation-Id")
    if correlation_id:
        request.state.correlation_id = correlation_id
        return correlation_id

    generated = f"req-{uuid4()}"
    request.state.correlation_id = generated
    return generated


def get_app_context(request: Request) -> AppContext:
    return request.app.state.context


async def get_request_context(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Security(bearer_scheme)],
    app_context: Annotated[AppContext, Depends(get_app_context)],
) -> RequestContext:
    """Attach the caller identity when a valid bearer token is present.

    Never rejects: a missing or unusable token produces an anonymous context
    and only operations that require authentication fail downstream.
    """
    safe_correlation_id = safe_log_identifier(_request_correlation_id(request), prefix="cid")
    if credentials is None or not credentials.credentials:
        context = RequestContext()
        logger.debug(
            "auth.anonymous correlation_id=%s method=%s path=%s reason=no_bearer",
            safe_correlation_id,
            request.method,
            request.url.path,
        )
    else:
        principal = app_context.credentials.verify(credentials.credentials)
        context = RequestContext(principal=principal)
        if principal is None:
            logger.info(
                "auth.anonymous correlation_id=%s method=%s path=%s reason=token_verification_failed",
                safe_correlation_id,
                request.method,
                request.url.path,
            )
        else:
            logger.debug(
                "auth.accepted correlation_id=%s method=%s path=%s principal_id=%s",
                safe_correlation_id,
                request.method,
                request.url.path,
                safe_log_identifier(principal.principal_id, prefix="pid"),
            )

    return context


def get_account_service(app_context: Annotated[AppContext, Depends(get_app_context)]) -> AccountService:
    return AccountService(app_context.store, app_context.credentials, app_context.hasher)


def get_post_service(app_context: Annotated[AppContext, Depends(get_app_context)]) -> PostService:
    return PostService(
        app_context.store,
        app_context.images,
        page_size=app_context.settings.posts_per_page,
    )
