"""Discount-code resolution.

There is no discount-code registry yet: any non-empty code resolves to
one configured flat rate. The resolver is a protocol so a real lookup
can replace it without touching the use case.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Protocol

from quotectl.domain.percentage import Percentage

DEFAULT_CODE_RATE = Decimal(10)


class DiscountCodeResolver(Protocol):
    def resolve(self, code: str | None) -> Percentage | None: ...


class FlatRateDiscountResolver:
    """Resolve every non-empty code to the same percentage."""

    def __init__(self, rate: Decimal | int = DEFAULT_CODE_RATE) -> None:
        self._rate = Percentage(rate)

    @property
    def rate(self) -> Percentage:
        return self._rate

    def resolve(self, code: str | None) -> Percentage | None:
        if not code or not code.strip():
            return None
        return self._rate
