"""Image byte-storage adapters."""

from .local import ImageStorage, LocalImageStorage

__all__ = ["ImageStorage", "LocalImageStorage"]
