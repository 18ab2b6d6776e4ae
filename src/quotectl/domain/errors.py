"""Errors raised by domain value objects and calculators.

Illegal states fail immediately at construction or at the offending
operation. Callers above the domain translate these into the
application error taxonomy (:mod:`quotectl.services.errors`).
"""

from __future__ import annotations


class DomainError(ValueError):
    """A domain invariant was violated (negative amount, bad range, ...)."""


class CurrencyMismatchError(DomainError):
    """Two Money values with different currencies were combined."""

    def __init__(self, left: str, right: str) -> None:
        super().__init__(f"Currency mismatch: {left} vs {right}")
        self.left = left
        self.right = right
