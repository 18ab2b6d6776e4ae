"""Percentage value object: a ratio in [0, 100] with two decimal places.

The same type is used for discounts and for tax rates. Composition is
bounded: adding past 100 or subtracting below 0 raises.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from quotectl.domain.errors import DomainError
from quotectl.domain.money import Money, Number, coerce_decimal, quantize_cents

_HUNDRED = Decimal(100)


@dataclass(frozen=True, slots=True)
class Percentage:
    """An immutable percentage between 0 and 100 inclusive."""

    value: Decimal

    def __post_init__(self) -> None:
        value = coerce_decimal(self.value, label="Percentage value")
        if value < 0:
            raise DomainError("Percentage cannot be negative")
        if value > _HUNDRED:
            raise DomainError("Percentage cannot exceed 100%")
        object.__setattr__(self, "value", quantize_cents(value).copy_abs())

    @classmethod
    def zero(cls) -> Percentage:
        return cls(Decimal(0))

    @classmethod
    def full(cls) -> Percentage:
        return cls(_HUNDRED)

    @classmethod
    def from_decimal(cls, fraction: Number) -> Percentage:
        """``0.15`` -> 15%."""
        return cls(coerce_decimal(fraction, label="Fraction") * _HUNDRED)

    @classmethod
    def from_fraction(cls, numerator: Number, denominator: Number) -> Percentage:
        """``1 / 4`` -> 25%."""
        den = coerce_decimal(denominator, label="Denominator")
        if den == 0:
            raise DomainError("Denominator cannot be zero")
        return cls(coerce_decimal(numerator, label="Numerator") / den * _HUNDRED)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Percentage:
        return cls(data["value"])

    def to_decimal(self) -> Decimal:
        """15% -> ``Decimal("0.15")``."""
        return self.value / _HUNDRED

    def apply_to(self, amount: Money) -> Money:
        return amount.multiply(self.to_decimal())

    def calculate_discount(self, amount: Money) -> Money:
        return amount.multiply(self.to_decimal())

    def calculate_remaining(self, amount: Money) -> Money:
        """Amount left after removing this percentage of *amount*."""
        return amount.subtract(self.calculate_discount(amount))

    def add(self, other: Percentage) -> Percentage:
        combined = self.value + other.value
        if combined > _HUNDRED:
            raise DomainError("Combined percentage cannot exceed 100%")
        return Percentage(combined)

    def subtract(self, other: Percentage) -> Percentage:
        result = self.value - other.value
        if result < 0:
            raise DomainError("Result cannot be negative")
        return Percentage(result)

    def is_zero(self) -> bool:
        return self.value == 0

    def is_full(self) -> bool:
        return self.value == _HUNDRED

    def __lt__(self, other: Percentage) -> bool:
        return self.value < other.value

    def __le__(self, other: Percentage) -> bool:
        return self.value <= other.value

    def __gt__(self, other: Percentage) -> bool:
        return self.value > other.value

    def __ge__(self, other: Percentage) -> bool:
        return self.value >= other.value

    def format(self) -> str:
        """``Decimal("8.50")`` -> ``"8.5%"``; ``Decimal("100.00")`` -> ``"100%"``."""
        text = f"{self.value:f}"
        if "." in text:
            text = text.rstrip("0").rstrip(".")
        return f"{text}%"

    def format_with_decimals(self, decimals: int = 2) -> str:
        return f"{self.value:.{decimals}f}%"

    def to_dict(self) -> dict[str, Any]:
        return {"value": self.value}

    def __str__(self) -> str:
        return self.format()
