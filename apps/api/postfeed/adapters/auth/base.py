"""Token signing interfaces."""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import Any


class TokenVerificationError(Exception):
    """Raised when a token cannot be verified or decoded."""


class TokenSigner(ABC):
    """Provider-neutral token primitive: sign a claim set, verify it back."""

    @abstractmethod
    def sign(self, claims: dict[str, Any], *, issued_at: datetime, ttl: timedelta) -> str:
        """Sign claims with an absolute expiry of ``issued_at + ttl``."""

    @abstractmethod
    def verify(self, token: str, *, now: datetime) -> dict[str, Any]:
        """Return verified claims or raise ``TokenVerificationError``."""


__all__ = ["TokenSigner", "TokenVerificationError"]
