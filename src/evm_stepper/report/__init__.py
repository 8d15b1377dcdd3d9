"""Report rendering package."""

from __future__ import annotations

from .trace import TraceReport

__all__ = ["TraceReport"]
