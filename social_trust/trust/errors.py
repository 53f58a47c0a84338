from __future__ import annotations


class TrustScoreError(Exception):
    """Base class for trust engine errors."""


class InvalidInputError(TrustScoreError, ValueError):
    """Raised when an input cannot produce a meaningful score (NaN, negative age, ...)."""

    def __init__(self, field: str, reason: str) -> None:
        self.field = field
        self.reason = reason
        super().__init__(f"{field}: {reason}")
