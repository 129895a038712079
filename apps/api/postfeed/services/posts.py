"""Post authoring and feed operations."""

from __future__ import annotations

import logging

from postfeed.adapters.storage import ImageStorage
from postfeed.core.logging_safety import safe_log_identifier
from postfeed.domain.guard import require_authenticated, require_owner
from postfeed.domain.pagination import DEFAULT_PAGE_SIZE, FeedPaginator
from postfeed.errors import ApiError, not_found_error, validation_error
from postfeed.repositories.memory import InMemoryStore, PostWithOwner
from postfeed.schemas.auth import RequestContext
from postfeed.schemas.post import Post, PostCreator, PostInput, PostPage

logger = logging.getLogger(__name__)

MIN_TITLE_LENGTH = 5
MIN_CONTENT_LENGTH = 5
# Clients send this literal when an edit keeps the current image.
UNCHANGED_IMAGE_SENTINEL = "undefined"


class PostService:
    def __init__(
        self,
        store: InMemoryStore,
        images: ImageStorage,
        *,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        self._store = store
        self._images = images
        self._paginator: FeedPaginator[PostWithOwner] = FeedPaginator(store, page_size=page_size)

    def create_post(self, context: RequestContext, payload: PostInput) -> Post:
        principal = require_authenticated(context)
        _validate_post_input(payload)

        owner = self._store.get_principal(principal.principal_id)
        if owner is None:
            raise not_found_error("Invalid User.")

        post = self._store.create_post(
            owner_id=owner.id,
            title=payload.title,
            content=payload.content,
            image_url=payload.image_url,
        )
        # Not transactional: a failure here leaves the post without a back-reference.
        owner.post_ids.append(post.id)
        self._store.save_principal(owner)

        logger.info(
            "post.created post_id=%s principal_id=%s",
            safe_log_identifier(post.id, prefix="post"),
            safe_log_identifier(owner.id, prefix="pid"),
        )
        return _to_post(PostWithOwner(post=post, owner=owner))

    def update_post(self, context: RequestContext, *, post_id: str, payload: PostInput) -> Post:
        require_authenticated(context)
        _validate_post_input(payload)

        joined = self._store.get_post_with_owner(post_id)
        if joined is None:
            raise not_found_error("Could not find post!")
        require_owner(context, joined.post.owner_id, message="Cannot edit post of another user!")

        post = joined.post
        post.title = payload.title
        post.content = payload.content
        if payload.image_url != UNCHANGED_IMAGE_SENTINEL:
            post.image_url = payload.image_url
        saved = self._store.save_post(post)

        logger.info("post.updated post_id=%s", safe_log_identifier(saved.id, prefix="post"))
        return _to_post(PostWithOwner(post=saved, owner=joined.owner))

    def delete_post(self, context: RequestContext, *, post_id: str) -> bool:
        principal = require_authenticated(context)

        post = self._store.get_post(post_id)
        if post is None:
            raise not_found_error("Could not find Post to delete.")
        require_owner(context, post.owner_id, message="Cannot delete post of another user!")

        deleted_count = self._store.delete_post(post.id)
        release_image(self._images, post.image_url)

        owner = self._store.get_principal(principal.principal_id)
        if owner is None:
            raise ApiError(status_code=500, code="INTERNAL_ERROR", message="Could not find and remove Post.")
        owner.post_ids = [existing for existing in owner.post_ids if existing != post.id]
        self._store.save_principal(owner)

        logger.info(
            "post.deleted post_id=%s principal_id=%s deleted_count=%s",
            safe_log_identifier(post.id, prefix="post"),
            safe_log_identifier(owner.id, prefix="pid"),
            deleted_count,
        )
        return deleted_count == 1

    def list_posts(self, context: RequestContext, *, page: int | None = None) -> PostPage:
        require_authenticated(context)
        try:
            feed_page = self._paginator.page(page)
        except ValueError as exc:
            raise validation_error(["Page must be a positive number."]) from exc

        return PostPage(
            posts=[_to_post(item) for item in feed_page.items],
            total_posts=feed_page.total,
        )

    def get_post(self, context: RequestContext, *, post_id: str) -> Post:
        require_authenticated(context)
        joined = self._store.get_post_with_owner(post_id)
        if joined is None:
            raise not_found_error("Could not find post!")
        return _to_post(joined)


def release_image(images: ImageStorage, ref: str | None) -> None:
    """Release an image without letting storage failures abort the caller."""
    if not ref:
        return
    try:
        images.clear(ref)
    except Exception:
        logger.exception("image.release_failed ref=%s", safe_log_identifier(ref, prefix="img"))


def _validate_post_input(payload: PostInput) -> None:
    errors: list[str] = []
    if len(payload.title) < MIN_TITLE_LENGTH:
        errors.append("Title needs to be longer.")
    if len(payload.content) < MIN_CONTENT_LENGTH:
        errors.append("Content needs to be longer.")
    if errors:
        raise validation_error(errors)


def _to_post(joined: PostWithOwner) -> Post:
    post = joined.post
    creator = None
    if joined.owner is not None:
        creator = PostCreator(id=joined.owner.id, name=joined.owner.name)
    return Post(
        id=post.id,
        title=post.title,
        content=post.content,
        image_url=post.image_url,
        creator=creator,
        created_at=post.created_at,
        updated_at=post.updated_at,
    )


__all__ = ["PostService", "UNCHANGED_IMAGE_SENTINEL", "release_image"]
