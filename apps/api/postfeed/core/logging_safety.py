"""Utilities for safe structured logging fields."""

from __future__ import annotations

import hashlib
import logging
from typing import Any

_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def safe_log_identifier(value: Any, *, prefix: str) -> str:
    """Return a deterministic non-reversible token for log correlation fields."""
    text = str(value or "").strip()
    if not text:
        return f"{prefix}-missing"

    digest = hashlib.sha256(text.encode("utf-8")).hexdigest()[:12]
    return f"{prefix}-{digest}"


def safe_log_email(email: Any) -> str:
    """Hash the local part of an address and keep the domain for triage."""
    text = str(email or "").strip().lower()
    local, separator, domain = text.rpartition("@")
    if not separator or not local:
        return safe_log_identifier(text, prefix="email")
    return f"{safe_log_identifier(local, prefix='email')}@{domain}"


def configure_logging(level: str = "INFO") -> None:
    """Attach a single console handler to the root logger.

    Repeated calls (one per ``create_app`` in tests) only adjust the level.
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    if root.handlers:
        return

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(_LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    root.addHandler(handler)
