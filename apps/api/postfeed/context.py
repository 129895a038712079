"""Process-wide collaborators, built once at startup and passed explicitly."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from postfeed.adapters.auth import JwtTokenSigner
from postfeed.adapters.passwords import BcryptPasswordHasher, PasswordHasher
from postfeed.adapters.storage import ImageStorage, LocalImageStorage
from postfeed.core.config import Settings
from postfeed.domain.credentials import CredentialService
from postfeed.repositories.memory import InMemoryStore


@dataclass(slots=True)
class AppContext:
    settings: Settings
    store: InMemoryStore
    credentials: CredentialService
    hasher: PasswordHasher
    images: ImageStorage


def build_context(settings: Settings) -> AppContext:
    return AppContext(
        settings=settings,
        store=InMemoryStore(),
        credentials=CredentialService(
            JwtTokenSigner(settings.token_secret),
            ttl=timedelta(seconds=settings.token_ttl_seconds),
        ),
        hasher=BcryptPasswordHasher(rounds=settings.bcrypt_rounds),
        images=LocalImageStorage(settings.image_dir),
    )


__all__ = ["AppContext", "build_context"]
