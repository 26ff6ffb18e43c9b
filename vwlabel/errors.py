"""Exception and warning types raised by the label codec."""

from __future__ import annotations

from typing import Optional, Sequence


class VWLabelError(Exception):
    """Base class for label codec failures."""


class FormatError(VWLabelError, ValueError):
    """Raised when a textual label specification cannot be parsed."""

    def __init__(
        self,
        message: str,
        tokens: Optional[Sequence[str]] = None,
        line_number: Optional[int] = None,
    ) -> None:
        self.tokens = list(tokens) if tokens is not None else []
        self.line_number = line_number
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)


class CacheCorruptionError(VWLabelError):
    """Raised when a binary cache stream is shorter than its declared record."""

    def __init__(self, message: str, expected: int = 0, available: int = 0) -> None:
        self.expected = expected
        self.available = available
        super().__init__(message)


class SemanticWarning(UserWarning):
    """Accepted but suspicious label values (e.g. non-positive weight)."""


__all__ = ["VWLabelError", "FormatError", "CacheCorruptionError", "SemanticWarning"]
