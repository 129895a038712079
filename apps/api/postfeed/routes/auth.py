"""Registration and login routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from postfeed.routes.dependencies import get_account_service
from postfeed.schemas.auth import AuthData, LoginRequest
from postfeed.schemas.error import ErrorResponse
from postfeed.schemas.principal import Principal, RegisterRequest
from postfeed.services.accounts import AccountService

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post(
    "/signup",
    response_model=Principal,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
def register(
    payload: RegisterRequest,
    service: Annotated[AccountService, Depends(get_account_service)],
) -> Principal:
    return service.register(email=payload.email, name=payload.name, password=payload.password)


@router.post(
    "/login",
    response_model=AuthData,
    responses={401: {"model": ErrorResponse}},
)
def login(
    payload: LoginRequest,
    service: Annotated[AccountService, Depends(get_account_service)],
) -> AuthData:
    return service.login(email=payload.email, password=payload.password)
