"""HTTP transport helpers."""

from __future__ import annotations

from .client import SAFE_METHODS, request

__all__ = ["SAFE_METHODS", "request"]
