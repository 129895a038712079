"""Caller status routes."""

from typing import Annotated

from fastapi import APIRouter, Depends

from postfeed.routes.dependencies import get_account_service, get_request_context
from postfeed.schemas.auth import RequestContext
from postfeed.schemas.error import ErrorResponse
from postfeed.schemas.principal import Principal, StatusUpdateRequest
from postfeed.services.accounts import AccountService

router = APIRouter(prefix="/status", tags=["Status"])

_RESPONSES = {401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}}


@router.get("", response_model=Principal, responses=_RESPONSES)
async def get_status(
    context: Annotated[RequestContext, Depends(get_request_context)],
    service: Annotated[AccountService, Depends(get_account_service)],
) -> Principal:
    return service.get_status(context)


@router.put("", response_model=Principal, responses=_RESPONSES)
async def set_status(
    payload: StatusUpdateRequest,
    context: Annotated[RequestContext, Depends(get_request_context)],
    service: Annotated[AccountService, Depends(get_account_service)],
) -> Principal:
    return service.set_status(context, status=payload.status)
