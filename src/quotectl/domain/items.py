"""PricingItem entity: a priced, quantified catalog line.

Items are immutable: ``update_quantity`` returns a new instance and the
discount helpers return Money. Identity is the ``id``.

INVARIANT: ``1 <= quantity <= MAX_ITEM_QUANTITY`` (guards against runaway
multiplication from bad input).
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Any

from quotectl.domain.category import Category, require_text
from quotectl.domain.errors import DomainError
from quotectl.domain.money import Money, coerce_decimal
from quotectl.domain.percentage import Percentage
from quotectl.domain.tiers import TierResolution, TierSchedule
from quotectl.domain.units import PricingType

ITEM_ID_MAX_LENGTH = 50
ITEM_NAME_MAX_LENGTH = 100
MAX_ITEM_QUANTITY = 10_000


def validate_item_quantity(quantity: Any) -> int:
    """Raise DomainError unless *quantity* is an integer in [1, 10000]."""
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise DomainError("Quantity must be an integer")
    if quantity < 1:
        raise DomainError("Quantity must be at least 1")
    if quantity > MAX_ITEM_QUANTITY:
        raise DomainError(f"Quantity cannot exceed {MAX_ITEM_QUANTITY:,}")
    return quantity


@dataclass(frozen=True, slots=True)
class PricingItem:
    """A catalog item with a base price, category, and requested quantity.

    Attributes:
        base_price: Flat (default) unit price; also the fallback when the
            item is tiered but has no tiers.
        unit: Billing unit label (``"Per Setup"``, ``"Per User"``, ...).
        pricing_type: Catalog pricing type; only ``TIERED`` consults *tiers*.
        quantity_source_fields: Client config fields whose values sum to the
            auto-calculated quantity (see :mod:`quotectl.domain.quantity`).
        quantity_multiplier: Factor applied to the summed config values.
        auto_add_trigger_fields: Client config fields that, when set, pull the
            item into a scenario (see :func:`~quotectl.domain.quantity.auto_add_items`).
    """

    id: str
    name: str = field(compare=False)
    description: str = field(compare=False)
    base_price: Money = field(compare=False)
    category: Category = field(compare=False)
    quantity: int = field(default=1, compare=False)
    unit: str = field(default="", compare=False)
    pricing_type: PricingType = field(default=PricingType.ONE_TIME, compare=False)
    tiers: TierSchedule = field(default_factory=TierSchedule, compare=False)
    quantity_source_fields: tuple[str, ...] = field(default=(), compare=False)
    quantity_multiplier: Decimal = field(default=Decimal(1), compare=False)
    auto_add_trigger_fields: tuple[str, ...] = field(default=(), compare=False)

    def __post_init__(self) -> None:
        require_text(self.id, "Pricing item ID", ITEM_ID_MAX_LENGTH)
        require_text(self.name, "Pricing item name", ITEM_NAME_MAX_LENGTH)
        validate_item_quantity(self.quantity)
        if not isinstance(self.base_price, Money):
            raise DomainError("Base price must be Money")
        multiplier = coerce_decimal(self.quantity_multiplier, label="Quantity multiplier")
        if multiplier < 0:
            raise DomainError("Quantity multiplier cannot be negative")
        object.__setattr__(self, "quantity_multiplier", multiplier)
        object.__setattr__(self, "pricing_type", PricingType(self.pricing_type))
        object.__setattr__(self, "quantity_source_fields", tuple(self.quantity_source_fields))
        object.__setattr__(self, "auto_add_trigger_fields", tuple(self.auto_add_trigger_fields))

    @property
    def currency(self) -> str:
        return self.base_price.currency

    @property
    def is_tiered(self) -> bool:
        """True when the item prices by tier *and* has a schedule to use."""
        return self.pricing_type is PricingType.TIERED and bool(self.tiers)

    @property
    def display_name(self) -> str:
        """``"Hosting (3x)"`` when quantity > 1, else the plain name."""
        if self.quantity > 1:
            return f"{self.name} ({self.quantity}x)"
        return self.name

    def get_total_price(self) -> Money:
        return self.base_price.multiply(self.quantity)

    def get_unit_price(self) -> Money:
        return self.base_price

    def resolve_price(self, quantity: int | None = None) -> TierResolution:
        """Tier-resolved unit price and total; flat base price when not tiered."""
        qty = self.quantity if quantity is None else quantity
        schedule = self.tiers if self.is_tiered else TierSchedule()
        return schedule.resolve(qty, self.base_price)

    def update_quantity(self, quantity: int) -> PricingItem:
        return replace(self, quantity=quantity)

    def apply_discount(self, discount: Percentage) -> Money:
        """Total price remaining after *discount*."""
        return discount.calculate_remaining(self.get_total_price())

    def calculate_discount_amount(self, discount: Percentage) -> Money:
        return discount.calculate_discount(self.get_total_price())

    def is_free(self) -> bool:
        return self.base_price.is_zero()

    def has_description(self) -> bool:
        return bool(self.description.strip())

    def belongs_to_category(self, category_id: str) -> bool:
        return self.category.id == category_id

    def has_same_price(self, other: PricingItem) -> bool:
        return self.base_price == other.base_price

    def is_more_expensive_than(self, other: PricingItem) -> bool:
        return self.base_price > other.base_price

    def is_less_expensive_than(self, other: PricingItem) -> bool:
        return self.base_price < other.base_price
