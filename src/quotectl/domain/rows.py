"""Selected-item rows and the per-row discount calculator.

A row is one selected catalog item with its own quantity, unit price,
discount, and free flag. The row calculator turns it into a before-discount
value and a final total:

* free rows total 0 with no discount math;
* the before-discount value is the tier-resolved total for tiered items,
  otherwise ``quantity x unit_price``;
* ``UNIT`` application discounts the row's unit price, clamps it at 0,
  then multiplies by quantity;
* ``TOTAL`` application (default) discounts the before-discount value.
  A fixed discount is per unit (``discount x quantity``), never a single
  flat amount.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import StrEnum
from typing import Any

from quotectl.domain.errors import DomainError
from quotectl.domain.items import PricingItem
from quotectl.domain.money import Money, coerce_decimal
from quotectl.domain.percentage import Percentage
from quotectl.domain.units import BillingBucket, BucketPolicy

_HUNDRED = Decimal(100)


class DiscountType(StrEnum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"


class DiscountApplication(StrEnum):
    """What a row discount is applied to."""

    UNIT = "unit"
    TOTAL = "total"


def effective_unit_price(item: PricingItem, quantity: int) -> Decimal:
    """Tier price for *quantity* on tiered items, else the base price."""
    return item.resolve_price(quantity).unit_price.amount


@dataclass(frozen=True, slots=True)
class SelectedItemRow:
    """One selected pricing item instance in a quote.

    Percentage discounts are clamped into [0, 100]; fixed discounts must
    be non-negative and are expressed in the item's currency.
    """

    item: PricingItem
    quantity: int
    unit_price: Decimal
    discount: Decimal = Decimal(0)
    discount_type: DiscountType = DiscountType.PERCENTAGE
    discount_application: DiscountApplication = DiscountApplication.TOTAL
    is_free: bool = False
    id: str = ""

    def __post_init__(self) -> None:
        if isinstance(self.quantity, bool) or not isinstance(self.quantity, int):
            raise DomainError("Row quantity must be an integer")
        if self.quantity < 0:
            raise DomainError("Row quantity cannot be negative")
        unit_price = coerce_decimal(self.unit_price, label="Unit price")
        if unit_price < 0:
            raise DomainError("Unit price cannot be negative")
        discount_type = DiscountType(self.discount_type)
        discount = coerce_decimal(self.discount, label="Discount")
        if discount_type is DiscountType.PERCENTAGE:
            discount = min(max(discount, Decimal(0)), _HUNDRED)
        elif discount < 0:
            raise DomainError("Fixed discount cannot be negative")
        object.__setattr__(self, "unit_price", unit_price)
        object.__setattr__(self, "discount", discount)
        object.__setattr__(self, "discount_type", discount_type)
        object.__setattr__(
            self, "discount_application", DiscountApplication(self.discount_application)
        )
        if not self.id:
            object.__setattr__(self, "id", self.item.id)

    @classmethod
    def for_item(
        cls, item: PricingItem, quantity: int | None = None, **kwargs: Any
    ) -> SelectedItemRow:
        """Row at the item's effective unit price (and quantity, unless given)."""
        qty = item.quantity if quantity is None else quantity
        return cls(
            item=item,
            quantity=qty,
            unit_price=effective_unit_price(item, qty),
            **kwargs,
        )

    @property
    def currency(self) -> str:
        return self.item.currency

    @property
    def category_id(self) -> str:
        return self.item.category.id


@dataclass(frozen=True, slots=True)
class RowTotals:
    """Computed values for one row."""

    row: SelectedItemRow
    before_discount: Money
    total: Money

    @property
    def discount(self) -> Money:
        """Reduction from the row discount (or the whole value for free rows)."""
        return self.before_discount.subtract_or_zero(self.total)

    @property
    def is_free(self) -> bool:
        return self.row.is_free


def row_subtotal(row: SelectedItemRow) -> Money:
    """Before-discount value of *row*: tier-resolved or flat."""
    if row.item.is_tiered:
        return row.item.resolve_price(row.quantity).total
    return Money(row.unit_price, row.currency).multiply(row.quantity)


def row_total(row: SelectedItemRow) -> Money:
    """Final value of *row* after its own discount, never negative."""
    if row.is_free:
        return Money.zero(row.currency)

    if row.discount_application is DiscountApplication.UNIT:
        unit_price = Money(row.unit_price, row.currency)
        if row.discount_type is DiscountType.PERCENTAGE:
            effective = Percentage(row.discount).calculate_remaining(unit_price)
        else:
            effective = unit_price.subtract_or_zero(Money(row.discount, row.currency))
        return effective.multiply(row.quantity)

    subtotal = row_subtotal(row)
    if row.discount_type is DiscountType.PERCENTAGE:
        discount = Percentage(row.discount).calculate_discount(subtotal)
    else:
        discount = Money(row.discount, row.currency).multiply(row.quantity)
    return subtotal.subtract_or_zero(discount)


def calculate_row(row: SelectedItemRow) -> RowTotals:
    return RowTotals(row=row, before_discount=row_subtotal(row), total=row_total(row))


def classify_row(row: SelectedItemRow, policy: BucketPolicy) -> BillingBucket:
    return policy.classify(row.category_id, row.item.unit)
