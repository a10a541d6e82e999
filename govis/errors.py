"""Domain-specific errors for govis."""

from __future__ import annotations

from typing import Optional


class GoVisError(Exception):
    """Base error for govis."""


class ParseFailure(GoVisError):
    """
    Raised when a Go source unit cannot be parsed.

    `unit` is the file (or pseudo file name) that failed, `scope` the package
    it belongs to when known.
    """

    def __init__(
        self,
        unit: str,
        message: str,
        scope: Optional[str] = None,
        lineno: Optional[int] = None,
    ) -> None:
        self.unit = unit
        self.message = message
        self.scope = scope
        self.lineno = lineno
        location = unit if lineno is None else f"{unit}:{lineno}"
        if scope:
            location = f"{location} (package {scope})"
        super().__init__(f"{location}: {message}")


class NoInputSpecified(GoVisError, ValueError):
    """Raised when no scope root directory was given."""
