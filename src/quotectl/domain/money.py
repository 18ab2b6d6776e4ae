"""Money value object: currency-tagged, non-negative decimal amounts.

INVARIANT: ``amount >= 0`` and is quantized to cents at construction.
Every operation returns a fresh Money, so each intermediate result is
re-rounded and no hidden precision is carried between steps.

Combining two Money values of different currencies raises
:class:`CurrencyMismatchError`; there is no conversion.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, TypeAlias

from quotectl.domain.errors import CurrencyMismatchError, DomainError

SUPPORTED_CURRENCIES: frozenset[str] = frozenset(
    {"USD", "EUR", "GBP", "CAD", "AUD", "JPY", "CHF", "CNY"}
)
DEFAULT_CURRENCY = "USD"

CENT = Decimal("0.01")

# en-US style symbols, matching how quotes are displayed to clients.
_SYMBOLS: dict[str, str] = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "CAD": "CA$",
    "AUD": "A$",
    "JPY": "¥",
    "CHF": "CHF ",
    "CNY": "CN¥",
}

Number: TypeAlias = Decimal | int | float | str


def coerce_decimal(value: Any, *, label: str = "Amount") -> Decimal:
    """Convert *value* to a finite Decimal.

    Floats are converted through ``str`` so ``0.1`` becomes ``Decimal("0.1")``
    rather than its binary expansion. Booleans are rejected.
    """
    if isinstance(value, bool):
        raise DomainError(f"{label} must be a valid number")
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int | float | str):
        try:
            result = Decimal(str(value).strip())
        except InvalidOperation as exc:
            raise DomainError(f"{label} must be a valid number") from exc
    else:
        raise DomainError(f"{label} must be a valid number")
    if result.is_nan():
        raise DomainError(f"{label} must be a valid number")
    if not result.is_finite():
        raise DomainError(f"{label} must be finite")
    return result


def quantize_cents(value: Decimal) -> Decimal:
    """Round half-up to two decimal places."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def _normalize_currency(currency: Any) -> str:
    if not currency or not isinstance(currency, str):
        raise DomainError("Currency is required")
    code = currency.strip().upper()
    if len(code) != 3:
        raise DomainError("Currency must be a 3-letter ISO code")
    if code not in SUPPORTED_CURRENCIES:
        raise DomainError(f"Currency {currency} is not supported")
    return code


@dataclass(frozen=True, slots=True)
class Money:
    """An immutable amount of money in a single currency.

    Attributes:
        amount: Non-negative Decimal, always quantized to cents.
        currency: Upper-case ISO-4217 code from :data:`SUPPORTED_CURRENCIES`.
    """

    amount: Decimal
    currency: str = DEFAULT_CURRENCY

    def __post_init__(self) -> None:
        amount = coerce_decimal(self.amount)
        if amount < 0:
            raise DomainError("Amount cannot be negative")
        object.__setattr__(self, "amount", quantize_cents(amount).copy_abs())
        object.__setattr__(self, "currency", _normalize_currency(self.currency))

    # --- Factories ---

    @classmethod
    def zero(cls, currency: str = DEFAULT_CURRENCY) -> Money:
        return cls(Decimal(0), currency)

    @classmethod
    def from_cents(cls, cents: int, currency: str = DEFAULT_CURRENCY) -> Money:
        """Build from an integer number of cents (``1050`` -> ``10.50``)."""
        return cls(coerce_decimal(cents, label="Cents") / 100, currency)

    @classmethod
    def total(cls, values: Iterable[Money], currency: str = DEFAULT_CURRENCY) -> Money:
        """Sum *values*, starting from zero in *currency*.

        Raises CurrencyMismatchError if any value is in another currency.
        """
        result = cls.zero(currency)
        for value in values:
            result = result.add(value)
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Money:
        return cls(data["amount"], data.get("currency", DEFAULT_CURRENCY))

    # --- Arithmetic ---

    def add(self, other: Money) -> Money:
        self._require_same_currency(other)
        return Money(self.amount + other.amount, self.currency)

    def subtract(self, other: Money) -> Money:
        """Subtract *other*; raises if the result would be negative."""
        self._require_same_currency(other)
        result = self.amount - other.amount
        if result < 0:
            raise DomainError("Result cannot be negative")
        return Money(result, self.currency)

    def subtract_or_zero(self, other: Money) -> Money:
        """Subtract *other*, clamping a shortfall to zero."""
        self._require_same_currency(other)
        return Money(max(self.amount - other.amount, Decimal(0)), self.currency)

    def multiply(self, factor: Number) -> Money:
        value = coerce_decimal(factor, label="Factor")
        if value < 0:
            raise DomainError("Factor cannot be negative")
        return Money(self.amount * value, self.currency)

    def divide(self, factor: Number) -> Money:
        value = coerce_decimal(factor, label="Factor")
        if value <= 0:
            raise DomainError("Factor must be greater than zero")
        return Money(self.amount / value, self.currency)

    __add__ = add
    __sub__ = subtract

    # --- Comparison ---

    def __lt__(self, other: Money) -> bool:
        self._require_same_currency(other)
        return self.amount < other.amount

    def __le__(self, other: Money) -> bool:
        self._require_same_currency(other)
        return self.amount <= other.amount

    def __gt__(self, other: Money) -> bool:
        self._require_same_currency(other)
        return self.amount > other.amount

    def __ge__(self, other: Money) -> bool:
        self._require_same_currency(other)
        return self.amount >= other.amount

    def is_zero(self) -> bool:
        return self.amount == 0

    # --- Conversion ---

    def to_cents(self) -> int:
        return int(self.amount * 100)

    def format(self) -> str:
        """Render as a display string, e.g. ``$1,234.50`` or ``€10.00``."""
        symbol = _SYMBOLS.get(self.currency, f"{self.currency} ")
        return f"{symbol}{self.amount:,.2f}"

    def to_dict(self) -> dict[str, Any]:
        return {"amount": self.amount, "currency": self.currency}

    def __str__(self) -> str:
        return self.format()

    def _require_same_currency(self, other: Money) -> None:
        if self.currency != other.currency:
            raise CurrencyMismatchError(self.currency, other.currency)
