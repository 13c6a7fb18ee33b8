"""Exceptions raised by the rule functions."""

from __future__ import annotations

from .enums import ErrorKind


class IntentRejected(RuntimeError):
    """Raised when an intent is not legal for the current state."""

    def __init__(self, kind: ErrorKind, detail: str | None = None) -> None:
        super().__init__(detail or kind.value)
        self.kind = kind
        self.detail = detail or kind.value


class InvariantViolation(RuntimeError):
    """Raised when the engine detects an impossible state."""


class CatalogError(ValueError):
    """Raised when a card catalog fails validation."""
