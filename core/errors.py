"""
core/errors.py — Exception types raised by Conduit itself.

Failures raised by user code (sources, decorators, listeners, continuation
thunks) are never wrapped; they propagate to the caller unchanged.
"""

from __future__ import annotations

from typing import Any, Optional


class ConduitError(Exception):
    """Base class for every error raised by Conduit."""


class CompositionError(ConduitError, TypeError):
    """
    Raised when a composer is handed something it cannot compose.

    Args:
        message: Human-readable description.
        position: Index of the offending decorator factory in registration
            order, or ``None`` when the source function is at fault.
        obj: The offending object.
    """

    def __init__(
        self,
        message: str,
        position: Optional[int] = None,
        obj: Any = None,
    ) -> None:
        self.position = position
        self.obj = obj
        super().__init__(message)
