"""Principal API schemas."""

from pydantic import BaseModel


class RegisterRequest(BaseModel):
    email: str
    name: str
    password: str


class Principal(BaseModel):
    """Public projection of a registered principal. The password hash is never part of it."""

    id: str
    email: str
    name: str
    status: str
    posts: list[str]


class StatusUpdateRequest(BaseModel):
    status: str
