"""Tiered (volume) pricing: quantity bands with a unit price each.

Resolution applies the rate of the *current* tier to the whole quantity;
it is not a graduated scheme where each band prices its own slice.

INVARIANT: a TierSchedule is sorted by ``min_quantity``, its bands never
overlap, and only the last band may be open-ended (``max_quantity=None``).
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from decimal import Decimal

from quotectl.domain.errors import DomainError
from quotectl.domain.money import Money, coerce_decimal


def _require_quantity(quantity: object, label: str = "Quantity") -> int:
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise DomainError(f"{label} must be an integer")
    if quantity < 0:
        raise DomainError(f"{label} cannot be negative")
    return quantity


@dataclass(frozen=True, slots=True)
class PricingTier:
    """One quantity band: ``[min_quantity, max_quantity]`` at ``unit_price``."""

    min_quantity: int
    max_quantity: int | None
    unit_price: Decimal
    id: str = ""
    name: str = ""

    def __post_init__(self) -> None:
        _require_quantity(self.min_quantity, "Tier minimum quantity")
        if self.max_quantity is not None:
            _require_quantity(self.max_quantity, "Tier maximum quantity")
            if self.max_quantity < self.min_quantity:
                raise DomainError("Tier maximum quantity cannot be below its minimum")
        price = coerce_decimal(self.unit_price, label="Tier unit price")
        if price < 0:
            raise DomainError("Tier unit price cannot be negative")
        object.__setattr__(self, "unit_price", price)

    @property
    def is_open_ended(self) -> bool:
        return self.max_quantity is None

    def contains(self, quantity: int) -> bool:
        if quantity < self.min_quantity:
            return False
        return self.max_quantity is None or quantity <= self.max_quantity


@dataclass(frozen=True, slots=True)
class TierResolution:
    """Outcome of resolving a quantity against a schedule."""

    quantity: int
    unit_price: Money
    total: Money
    tier: PricingTier | None = None

    @property
    def used_fallback(self) -> bool:
        return self.tier is None


class TierSchedule:
    """Validated, ordered sequence of pricing tiers."""

    __slots__ = ("_tiers",)

    def __init__(self, tiers: Iterable[PricingTier] = ()) -> None:
        ordered = tuple(sorted(tiers, key=lambda t: t.min_quantity))
        for current, following in zip(ordered, ordered[1:], strict=False):
            if current.max_quantity is None:
                raise DomainError("Only the last tier may be open-ended")
            if current.max_quantity >= following.min_quantity:
                raise DomainError(
                    f"Tiers overlap: {format_tier_range(current)} and "
                    f"{format_tier_range(following)}"
                )
        self._tiers = ordered

    @property
    def tiers(self) -> tuple[PricingTier, ...]:
        return self._tiers

    def __bool__(self) -> bool:
        return bool(self._tiers)

    def __len__(self) -> int:
        return len(self._tiers)

    def __iter__(self) -> Iterator[PricingTier]:
        return iter(self._tiers)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TierSchedule):
            return NotImplemented
        return self._tiers == other._tiers

    def __hash__(self) -> int:
        return hash(self._tiers)

    def __repr__(self) -> str:
        return f"TierSchedule({list(self._tiers)!r})"

    def find_tier(self, quantity: int) -> PricingTier | None:
        """Return the tier that prices *quantity*, or None for an empty schedule.

        Below the first band the first tier applies; beyond the last closed
        band the last tier applies; inside a gap the preceding tier applies.
        """
        _require_quantity(quantity)
        if not self._tiers:
            return None
        match = self._tiers[0]
        for tier in self._tiers:
            if tier.min_quantity > quantity:
                break
            match = tier
        return match

    def resolve(self, quantity: int, default_price: Money) -> TierResolution:
        """Unit price and line total for *quantity*.

        An empty schedule falls back to *default_price* for every unit.
        Tier prices are expressed in *default_price*'s currency.
        """
        tier = self.find_tier(quantity)
        if tier is None:
            unit_price = default_price
        else:
            unit_price = Money(tier.unit_price, default_price.currency)
        return TierResolution(
            quantity=quantity,
            unit_price=unit_price,
            total=unit_price.multiply(quantity),
            tier=tier,
        )

    def best_tier_for_quantity(self, quantity: int) -> PricingTier | None:
        """Cheapest tier whose band actually contains *quantity*, if any."""
        candidates = [t for t in self._tiers if t.contains(quantity)]
        if not candidates:
            return None
        return min(candidates, key=lambda t: t.unit_price)


def format_tier_range(tier: PricingTier) -> str:
    """``"1 - 10"`` for closed bands, ``"1,000+"`` for open-ended ones."""
    if tier.max_quantity is None:
        return f"{tier.min_quantity:,}+"
    return f"{tier.min_quantity:,} - {tier.max_quantity:,}"
