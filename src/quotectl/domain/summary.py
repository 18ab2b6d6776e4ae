"""Scenario summary: bucket totals, global discount, savings breakdown.

Rows are split into a one-time and a monthly bucket (see
:class:`~quotectl.domain.units.BucketPolicy`). Each bucket's subtotal is
the sum of its row totals; the global discount then applies per bucket
according to its scope:

=========  ===========  ===========
scope      one-time     monthly
=========  ===========  ===========
none       unchanged    unchanged
both       discounted   discounted
monthly    unchanged    discounted
onetime    discounted   unchanged
=========  ===========  ===========

A fixed global discount is subtracted once per discounted bucket.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from decimal import Decimal
from enum import StrEnum

from quotectl.domain.category import Category, sort_categories
from quotectl.domain.errors import DomainError
from quotectl.domain.money import DEFAULT_CURRENCY, Money, coerce_decimal, quantize_cents
from quotectl.domain.rows import (
    DiscountType,
    RowTotals,
    SelectedItemRow,
    calculate_row,
    classify_row,
)
from quotectl.domain.units import BillingBucket, BucketPolicy

logger = logging.getLogger(__name__)

_HUNDRED = Decimal(100)


class DiscountScope(StrEnum):
    """Which billing buckets a global discount reaches."""

    NONE = "none"
    BOTH = "both"
    MONTHLY = "monthly"
    ONE_TIME = "onetime"

    def covers(self, bucket: BillingBucket) -> bool:
        if self is DiscountScope.BOTH:
            return True
        if self is DiscountScope.MONTHLY:
            return bucket is BillingBucket.MONTHLY
        if self is DiscountScope.ONE_TIME:
            return bucket is BillingBucket.ONE_TIME
        return False


@dataclass(frozen=True, slots=True)
class GlobalDiscount:
    """Quote-wide discount applied after row discounts."""

    amount: Decimal = Decimal(0)
    type: DiscountType = DiscountType.PERCENTAGE
    scope: DiscountScope = DiscountScope.BOTH

    def __post_init__(self) -> None:
        amount = coerce_decimal(self.amount, label="Global discount")
        if amount < 0:
            raise DomainError("Global discount cannot be negative")
        object.__setattr__(self, "amount", amount)
        object.__setattr__(self, "type", DiscountType(self.type))
        object.__setattr__(self, "scope", DiscountScope(self.scope))

    @classmethod
    def none(cls) -> GlobalDiscount:
        return cls(Decimal(0), DiscountType.PERCENTAGE, DiscountScope.NONE)

    @property
    def is_active(self) -> bool:
        return self.amount > 0 and self.scope is not DiscountScope.NONE


def apply_global_discount(
    subtotal: Money, discount: GlobalDiscount, bucket: BillingBucket
) -> Money:
    """Discounted value of one bucket's *subtotal*, floored at zero."""
    if not discount.is_active or not discount.scope.covers(bucket):
        return subtotal
    if discount.type is DiscountType.PERCENTAGE:
        reduction = subtotal.multiply(discount.amount / _HUNDRED)
    else:
        reduction = Money(discount.amount, subtotal.currency)
    return subtotal.subtract_or_zero(reduction)


@dataclass(frozen=True, slots=True)
class CategorySubtotal:
    category: Category
    total: Money
    item_count: int


@dataclass(frozen=True, slots=True)
class SavingsBreakdown:
    """Where the difference between list value and final price came from.

    Attributes:
        original_total: Sum of every row's before-discount value.
        total_savings: ``original_total`` minus the discounted bucket totals.
        free_item_savings: Before-discount value of rows marked free.
        discount_savings: ``total_savings - free_item_savings``.
        row_discount_total: Reduction from per-row discounts (paid rows only).
        global_discount_total: Reduction from the global discount.
        savings_rate: ``total_savings / original_total`` as a percentage.
    """

    original_total: Money
    total_savings: Money
    free_item_savings: Money
    discount_savings: Money
    row_discount_total: Money
    global_discount_total: Money
    savings_rate: Decimal


@dataclass(frozen=True, slots=True)
class ScenarioSummary:
    one_time_subtotal: Money
    monthly_subtotal: Money
    one_time_total: Money
    monthly_total: Money
    yearly_total: Money
    total_project_cost: Money
    savings: SavingsBreakdown
    categories: tuple[CategorySubtotal, ...]
    rows: tuple[RowTotals, ...]
    global_discount: GlobalDiscount
    currency: str

    @property
    def item_count(self) -> int:
        return len(self.rows)


def _category_subtotals(
    totals: Sequence[RowTotals], categories: Iterable[Category], currency: str
) -> tuple[CategorySubtotal, ...]:
    known = {c.id: c for c in categories}
    grouped: dict[str, list[RowTotals]] = {}
    unknown: list[Category] = []
    for entry in totals:
        category = entry.row.item.category
        if category.id not in grouped:
            grouped[category.id] = []
            if category.id not in known:
                unknown.append(category)
        grouped[category.id].append(entry)

    ordered = [c for c in sort_categories(list(known.values())) if c.id in grouped]
    return tuple(
        CategorySubtotal(
            category=category,
            total=Money.total((e.total for e in grouped[category.id]), currency),
            item_count=len(grouped[category.id]),
        )
        for category in [*ordered, *unknown]
    )


def summarize_rows(
    rows: Iterable[SelectedItemRow],
    global_discount: GlobalDiscount | None = None,
    categories: Iterable[Category] = (),
    policy: BucketPolicy | None = None,
    currency: str | None = None,
) -> ScenarioSummary:
    """Compute the full scenario summary for *rows*.

    Every row must share one currency. When *currency* is omitted it is
    taken from the first row, or ``USD`` for an empty scenario.
    *categories* fixes the subtotal order; categories not listed there
    follow in the order their rows appear.
    """
    rows = list(rows)
    global_discount = global_discount or GlobalDiscount.none()
    policy = policy or BucketPolicy()
    if currency is None:
        currency = rows[0].currency if rows else DEFAULT_CURRENCY

    totals = [calculate_row(row) for row in rows]
    buckets: dict[BillingBucket, list[Money]] = {b: [] for b in BillingBucket}
    for entry in totals:
        buckets[classify_row(entry.row, policy)].append(entry.total)

    one_time_subtotal = Money.total(buckets[BillingBucket.ONE_TIME], currency)
    monthly_subtotal = Money.total(buckets[BillingBucket.MONTHLY], currency)
    one_time_total = apply_global_discount(
        one_time_subtotal, global_discount, BillingBucket.ONE_TIME
    )
    monthly_total = apply_global_discount(monthly_subtotal, global_discount, BillingBucket.MONTHLY)
    yearly_total = monthly_total.multiply(policy.months_per_year)

    original = Money.total((e.before_discount for e in totals), currency)
    final = one_time_total.add(monthly_total)
    total_savings = original.subtract_or_zero(final)
    free_savings = Money.total((e.before_discount for e in totals if e.is_free), currency)
    row_discounts = Money.total((e.discount for e in totals if not e.is_free), currency)
    global_savings = one_time_subtotal.subtract_or_zero(one_time_total).add(
        monthly_subtotal.subtract_or_zero(monthly_total)
    )
    if original.is_zero():
        savings_rate = Decimal("0.00")
    else:
        savings_rate = quantize_cents(total_savings.amount / original.amount * _HUNDRED)

    logger.debug(
        "summarized %d rows: one-time %s, monthly %s", len(totals), one_time_total, monthly_total
    )
    return ScenarioSummary(
        one_time_subtotal=one_time_subtotal,
        monthly_subtotal=monthly_subtotal,
        one_time_total=one_time_total,
        monthly_total=monthly_total,
        yearly_total=yearly_total,
        total_project_cost=one_time_total.add(yearly_total),
        savings=SavingsBreakdown(
            original_total=original,
            total_savings=total_savings,
            free_item_savings=free_savings,
            discount_savings=total_savings.subtract_or_zero(free_savings),
            row_discount_total=row_discounts,
            global_discount_total=global_savings,
            savings_rate=savings_rate,
        ),
        categories=_category_subtotals(totals, categories, currency),
        rows=tuple(totals),
        global_discount=global_discount,
        currency=currency,
    )
