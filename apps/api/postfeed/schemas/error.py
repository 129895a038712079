"""API error response schemas."""

from pydantic import BaseModel


class FieldMessage(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    code: str
    message: str
    data: list[FieldMessage] | None = None
