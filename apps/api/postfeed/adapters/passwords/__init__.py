"""Password hashing adapters."""

from .bcrypt_hasher import BCRYPT_MAX_PASSWORD_BYTES, BcryptPasswordHasher, PasswordHasher

__all__ = ["BCRYPT_MAX_PASSWORD_BYTES", "BcryptPasswordHasher", "PasswordHasher"]
