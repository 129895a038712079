"""Token signer adapters."""

from .base import TokenSigner, TokenVerificationError
from .jwt_signer import JwtTokenSigner

__all__ = [
    "JwtTokenSigner",
    "TokenSigner",
    "TokenVerificationError",
]
