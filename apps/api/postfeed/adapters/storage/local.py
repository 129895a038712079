"""Filesystem-backed image storage."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import UTC, datetime
import logging
from pathlib import Path, PurePath

from postfeed.core.logging_safety import safe_log_identifier

logger = logging.getLogger(__name__)


class ImageStorage(ABC):
    """Byte storage keyed by path."""

    @abstractmethod
    def put(self, filename: str, data: bytes) -> str:
        """Store ``data`` and return the reference to persist on posts."""

    @abstractmethod
    def clear(self, ref: str) -> None:
        """Release a stored image. Never raises."""


class LocalImageStorage(ImageStorage):
    """Stores images as ``<root>/<iso timestamp>-<original name>``.

    References are returned as ``<root name>/<file name>`` so they can be
    served from a static mount and handed back to ``clear`` unchanged.
    """

    def __init__(self, root: str | Path) -> None:
        self._root = Path(root)

    @property
    def root(self) -> Path:
        return self._root

    def put(self, filename: str, data: bytes) -> str:
        self._root.mkdir(parents=True, exist_ok=True)
        # Only the final path component of a client-supplied name is kept.
        base_name = PurePath(filename.replace("\\", "/")).name or "upload"
        stamp = datetime.now(UTC).strftime("%Y-%m-%dT%H-%M-%S.%fZ")
        stored_name = f"{stamp}-{base_name}"
        (self._root / stored_name).write_bytes(data)
        return f"{self._root.name}/{stored_name}"

    def clear(self, ref: str) -> None:
        safe_ref = safe_log_identifier(ref, prefix="img")
        target = self._resolve(ref)
        if target is None:
            logger.warning("image.clear_skipped ref=%s reason=outside_storage_root", safe_ref)
            return

        try:
            target.unlink()
        except FileNotFoundError:
            logger.warning("image.clear_skipped ref=%s reason=missing", safe_ref)
        except OSError:
            logger.exception("image.clear_failed ref=%s", safe_ref)
        else:
            logger.info("image.cleared ref=%s", safe_ref)

    def _resolve(self, ref: str) -> Path | None:
        name = PurePath(str(ref or "").replace("\\", "/")).name
        if not name:
            return None
        candidate = (self._root / name).resolve()
        if candidate.parent != self._root.resolve():
            return None
        return candidate
