"""Authentication schemas."""

from pydantic import BaseModel, Field


class AuthPrincipal(BaseModel):
    """Identity recovered from a verified session token."""

    principal_id: str = Field(min_length=1)
    email: str


class RequestContext(BaseModel):
    """Per-request caller context; ``principal`` is ``None`` for anonymous callers."""

    principal: AuthPrincipal | None = None


class LoginRequest(BaseModel):
    email: str
    password: str


class AuthData(BaseModel):
    token: str
    user_id: str
