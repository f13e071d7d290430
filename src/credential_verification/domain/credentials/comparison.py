"""Explicit outcome of comparing a secret digest with one stored hash."""

from __future__ import annotations

from enum import StrEnum


class ComparisonResult(StrEnum):
    """Per-candidate comparison outcome.

    ``UNAVAILABLE`` means the candidate's hasher cannot run here. Callers count it
    as a non-match and keep evaluating the remaining candidates.
    """

    MATCH = "match"
    MISMATCH = "mismatch"
    UNAVAILABLE = "unavailable"

    @property
    def is_match(self) -> bool:
        return self is ComparisonResult.MATCH
