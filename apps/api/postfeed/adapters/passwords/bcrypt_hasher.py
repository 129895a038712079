"""One-way password hashing."""

from __future__ import annotations

from abc import ABC, abstractmethod

import bcrypt

# bcrypt only consumes the first 72 bytes of its input.
BCRYPT_MAX_PASSWORD_BYTES = 72


class PasswordHasher(ABC):
    _decoy_digest: str | None = None

    @abstractmethod
    def hash(self, plain: str) -> str:
        """Return a salted digest for ``plain``."""

    @abstractmethod
    def compare(self, plain: str, digest: str) -> bool:
        """Return whether ``plain`` matches ``digest``."""

    def compare_decoy(self, plain: str) -> bool:
        """Spend one comparison against a throwaway digest. Always ``False``.

        Used when there is no stored digest to check, so the caller takes
        as long as a real mismatch would.
        """
        if self._decoy_digest is None:
            self._decoy_digest = self.hash("decoy-password")
        self.compare(plain, self._decoy_digest)
        return False


class BcryptPasswordHasher(PasswordHasher):
    def __init__(self, rounds: int = 12) -> None:
        self._rounds = rounds

    def hash(self, plain: str) -> str:
        encoded = plain.encode("utf-8")
        if len(encoded) > BCRYPT_MAX_PASSWORD_BYTES:
            raise ValueError("Password exceeds the bcrypt input limit")
        return bcrypt.hashpw(encoded, bcrypt.gensalt(rounds=self._rounds)).decode("utf-8")

    def compare(self, plain: str, digest: str) -> bool:
        encoded = plain.encode("utf-8")
        if len(encoded) > BCRYPT_MAX_PASSWORD_BYTES:
            return False
        return bcrypt.checkpw(encoded, digest.encode("utf-8"))
