"""In-memory document store used by the API and tests."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from itertools import count
from threading import Lock
from uuid import uuid4

DEFAULT_PRINCIPAL_STATUS = "I am new!"


class DuplicateEmailError(ValueError):
    """Raised when a principal would reuse an already registered email."""


@dataclass(slots=True)
class PrincipalRecord:
    id: str
    email: str
    name: str
    password_hash: str
    created_at: datetime
    updated_at: datetime
    status: str = DEFAULT_PRINCIPAL_STATUS
    post_ids: list[str] = field(default_factory=list)


@dataclass(slots=True)
class PostRecord:
    id: str
    title: str
    content: str
    image_url: str
    owner_id: str
    created_at: datetime
    updated_at: datetime
    sequence: int = 0


@dataclass(slots=True)
class PostWithOwner:
    """A post joined with its owning principal; ``owner`` is ``None`` for dangling references."""

    post: PostRecord
    owner: PrincipalRecord | None


@dataclass(slots=True)
class InMemoryStore:
    """Simple, deterministic persistence layer.

    Records are handed out as copies, so callers mutate their own copy and
    persist it with an explicit ``save_*`` call, the same way a document
    store round-trip behaves. Writes across the two collections are not
    transactional.
    """

    principals: dict[str, PrincipalRecord] = field(default_factory=dict)
    posts: dict[str, PostRecord] = field(default_factory=dict)
    principal_write_count: int = 0
    post_write_count: int = 0
    principal_write_failure_message: str | None = None
    _sequence: count = field(default_factory=lambda: count(1), repr=False)
    _principal_lock: Lock = field(default_factory=Lock, repr=False)

    def create_principal(self, *, email: str, name: str, password_hash: str) -> PrincipalRecord:
        now = datetime.now(UTC)
        principal = PrincipalRecord(
            id=str(uuid4()),
            email=email,
            name=name,
            password_hash=password_hash,
            created_at=now,
            updated_at=now,
        )
        # Check and insert happen under one lock, like a unique index on email.
        with self._principal_lock:
            if any(record.email == email for record in self.principals.values()):
                raise DuplicateEmailError(email)
            return self.save_principal(principal)

    def get_principal(self, principal_id: str) -> PrincipalRecord | None:
        record = self.principals.get(str(principal_id))
        return _copy_principal(record) if record is not None else None

    def find_principal_by_email(self, email: str) -> PrincipalRecord | None:
        for record in self.principals.values():
            if record.email == email:
                return _copy_principal(record)
        return None

    def save_principal(self, principal: PrincipalRecord) -> PrincipalRecord:
        if self.principal_write_failure_message is not None:
            message = self.principal_write_failure_message
            self.principal_write_failure_message = None
            raise RuntimeError(message)

        stored = _copy_principal(principal)
        if stored.id in self.principals:
            stored.updated_at = datetime.now(UTC)
        self.principals[stored.id] = stored
        self.principal_write_count += 1
        return _copy_principal(stored)

    def create_post(self, *, owner_id: str, title: str, content: str, image_url: str) -> PostRecord:
        now = datetime.now(UTC)
        post = PostRecord(
            id=str(uuid4()),
            title=title,
            content=content,
            image_url=image_url,
            owner_id=str(owner_id),
            created_at=now,
            updated_at=now,
            sequence=next(self._sequence),
        )
        self.posts[post.id] = post
        self.post_write_count += 1
        return replace(post)

    def get_post(self, post_id: str) -> PostRecord | None:
        record = self.posts.get(str(post_id))
        return replace(record) if record is not None else None

    def get_post_with_owner(self, post_id: str) -> PostWithOwner | None:
        post = self.get_post(post_id)
        if post is None:
            return None
        return PostWithOwner(post=post, owner=self.get_principal(post.owner_id))

    def save_post(self, post: PostRecord) -> PostRecord:
        current = self.posts.get(post.id)
        if current is None:
            raise KeyError(f"Unknown post {post.id}")

        # Ownership and creation time are fixed at creation.
        stored = replace(
            post,
            owner_id=current.owner_id,
            created_at=current.created_at,
            sequence=current.sequence,
            updated_at=datetime.now(UTC),
        )
        self.posts[stored.id] = stored
        self.post_write_count += 1
        return replace(stored)

    def delete_post(self, post_id: str) -> int:
        """Remove a post and return the number of deleted documents."""
        removed = self.posts.pop(str(post_id), None)
        if removed is None:
            return 0
        self.post_write_count += 1
        return 1

    def count_posts(self) -> int:
        return len(self.posts)

    def list_posts_with_owners(self, *, skip: int, limit: int) -> list[PostWithOwner]:
        ordered = sorted(
            self.posts.values(),
            key=lambda record: (record.created_at, record.sequence),
            reverse=True,
        )
        return [
            PostWithOwner(post=replace(record), owner=self.get_principal(record.owner_id))
            for record in ordered[skip : skip + limit]
        ]


def _copy_principal(record: PrincipalRecord) -> PrincipalRecord:
    return replace(record, post_ids=list(record.post_ids))
