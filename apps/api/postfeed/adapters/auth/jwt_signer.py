"""HS256 JSON Web Token signer backed by PyJWT."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any

import jwt

from postfeed.adapters.auth.base import TokenSigner, TokenVerificationError

ALGORITHM = "HS256"


class JwtTokenSigner(TokenSigner):
    """Signs and verifies compact JWTs with a shared secret."""

    def __init__(self, secret: str) -> None:
        if not secret:
            raise ValueError("Token secret must not be empty")
        self._secret = secret

    def sign(self, claims: dict[str, Any], *, issued_at: datetime, ttl: timedelta) -> str:
        payload = dict(claims)
        payload["exp"] = issued_at + ttl
        return jwt.encode(payload, self._secret, algorithm=ALGORITHM)

    def verify(self, token: str, *, now: datetime) -> dict[str, Any]:
        try:
            # Expiry is checked below against the injected clock.
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=[ALGORITHM],
                options={"require": ["exp"], "verify_exp": False},
            )
        except jwt.InvalidTokenError as exc:
            raise TokenVerificationError("Invalid bearer token") from exc

        expires_at = claims.get("exp")
        if not isinstance(expires_at, (int, float)) or isinstance(expires_at, bool):
            raise TokenVerificationError("Bearer token has a malformed expiry")
        if expires_at <= now.timestamp():
            raise TokenVerificationError("Bearer token has expired")
        return claims


__all__ = ["ALGORITHM", "JwtTokenSigner"]
