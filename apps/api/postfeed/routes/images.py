"""Post image upload route."""

from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, Response, UploadFile, status

from postfeed.context import AppContext
from postfeed.domain.guard import require_authenticated
from postfeed.routes.dependencies import get_app_context, get_request_context
from postfeed.schemas.auth import RequestContext
from postfeed.schemas.error import ErrorResponse
from postfeed.schemas.post import ImageUploadResponse
from postfeed.services.posts import release_image

router = APIRouter(tags=["Images"])


@router.put(
    "/post-image",
    response_model=ImageUploadResponse,
    responses={201: {"model": ImageUploadResponse}, 401: {"model": ErrorResponse}},
)
async def upload_post_image(
    response: Response,
    context: Annotated[RequestContext, Depends(get_request_context)],
    app_context: Annotated[AppContext, Depends(get_app_context)],
    image: Annotated[UploadFile | None, File()] = None,
    old_path: Annotated[str | None, Form(alias="oldPath")] = None,
) -> ImageUploadResponse:
    require_authenticated(context)
    # Without a new file the previous image is kept.
    if image is None:
        return ImageUploadResponse(message="No file provided.")

    # The new upload is stored before the previous image is released.
    file_path = app_context.images.put(image.filename or "upload", await image.read())
    if old_path:
        release_image(app_context.images, old_path)
    response.status_code = status.HTTP_201_CREATED
    return ImageUploadResponse(message="File stored.", file_path=file_path)
