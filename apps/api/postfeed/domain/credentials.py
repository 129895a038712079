"""Session token issuance and best-effort identity extraction."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime, timedelta
import logging

from postfeed.adapters.auth import TokenSigner, TokenVerificationError
from postfeed.schemas.auth import AuthPrincipal

logger = logging.getLogger(__name__)

DEFAULT_TOKEN_TTL = timedelta(hours=1)
_EMAIL_CLAIM = "email"
_PRINCIPAL_CLAIM = "userId"


def _utcnow() -> datetime:
    return datetime.now(UTC)


class CredentialService:
    """Issues signed identity tokens and verifies them without ever raising.

    Expiry is absolute: a token is valid until ``issued_at + ttl`` and is
    never refreshed. Any verification failure (bad signature, malformed
    payload, lapsed expiry) yields ``None`` so that an unusable token only
    produces an anonymous request context.
    """

    def __init__(
        self,
        signer: TokenSigner,
        *,
        ttl: timedelta = DEFAULT_TOKEN_TTL,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._signer = signer
        self._ttl = ttl
        self._clock = clock

    def issue(self, *, email: str, principal_id: str) -> str:
        claims = {_EMAIL_CLAIM: email, _PRINCIPAL_CLAIM: str(principal_id)}
        return self._signer.sign(claims, issued_at=self._clock(), ttl=self._ttl)

    def verify(self, token: str | None) -> AuthPrincipal | None:
        if not token:
            return None

        try:
            claims = self._signer.verify(token, now=self._clock())
        except TokenVerificationError as exc:
            logger.debug("token.rejected reason=%s", exc)
            return None

        principal_id = claims.get(_PRINCIPAL_CLAIM)
        email = claims.get(_EMAIL_CLAIM)
        if not isinstance(principal_id, str) or not principal_id.strip():
            return None
        if not isinstance(email, str):
            return None
        return AuthPrincipal(principal_id=principal_id.strip(), email=email)

    def identify(self, authorization: str | None) -> AuthPrincipal | None:
        """Resolve an ``Authorization`` header value into an identity, if any."""
        if not authorization:
            return None
        scheme, _, token = authorization.strip().partition(" ")
        if scheme.lower() != "bearer":
            return None
        return self.verify(token.strip())


__all__ = ["CredentialService", "DEFAULT_TOKEN_TTL"]
