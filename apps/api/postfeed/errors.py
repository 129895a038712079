"""Application exception types."""

from postfeed.schemas.error import ErrorResponse, FieldMessage


class ApiError(Exception):
    """Structured API error whose code/data pair is surfaced verbatim at the boundary."""

    def __init__(
        self,
        status_code: int,
        code: str,
        message: str,
        data: list[FieldMessage] | None = None,
    ) -> None:
        self.status_code = status_code
        self.payload = ErrorResponse(code=code, message=message, data=data)
        super().__init__(message)


def validation_error(messages: list[str]) -> ApiError:
    return ApiError(
        status_code=422,
        code="VALIDATION_FAILED",
        message="Invalid input.",
        data=[FieldMessage(message=message) for message in messages],
    )


def not_found_error(message: str) -> ApiError:
    return ApiError(status_code=404, code="RESOURCE_NOT_FOUND", message=message)


__all__ = ["ApiError", "not_found_error", "validation_error"]
