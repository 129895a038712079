"""Post routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query, status

from postfeed.routes.dependencies import get_post_service, get_request_context
from postfeed.schemas.auth import RequestContext
from postfeed.schemas.error import ErrorResponse
from postfeed.schemas.post import DeletePostResponse, Post, PostInput, PostPage
from postfeed.services.posts import PostService

router = APIRouter(prefix="/posts", tags=["Posts"])


@router.get(
    "",
    response_model=PostPage,
    responses={401: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def list_posts(
    context: Annotated[RequestContext, Depends(get_request_context)],
    service: Annotated[PostService, Depends(get_post_service)],
    page: Annotated[int | None, Query()] = None,
) -> PostPage:
    return service.list_posts(context, page=page)


@router.post(
    "",
    response_model=Post,
    status_code=status.HTTP_201_CREATED,
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def create_post(
    payload: PostInput,
    context: Annotated[RequestContext, Depends(get_request_context)],
    service: Annotated[PostService, Depends(get_post_service)],
) -> Post:
    return service.create_post(context, payload)


@router.get(
    "/{postId}",
    response_model=Post,
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def get_post(
    post_id: Annotated[str, Path(alias="postId")],
    context: Annotated[RequestContext, Depends(get_request_context)],
    service: Annotated[PostService, Depends(get_post_service)],
) -> Post:
    return service.get_post(context, post_id=post_id)


@router.put(
    "/{postId}",
    response_model=Post,
    responses={
        401: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
)
async def update_post(
    post_id: Annotated[str, Path(alias="postId")],
    payload: PostInput,
    context: Annotated[RequestContext, Depends(get_request_context)],
    service: Annotated[PostService, Depends(get_post_service)],
) -> Post:
    return service.update_post(context, post_id=post_id, payload=payload)


@router.delete(
    "/{postId}",
    response_model=DeletePostResponse,
    responses={401: {"model": ErrorResponse}, 403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def delete_post(
    post_id: Annotated[str, Path(alias="postId")],
    context: Annotated[RequestContext, Depends(get_request_context)],
    service: Annotated[PostService, Depends(get_post_service)],
) -> DeletePostResponse:
    return DeletePostResponse(deleted=service.delete_post(context, post_id=post_id))
