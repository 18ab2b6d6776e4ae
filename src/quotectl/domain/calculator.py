"""PricingCalculator: stateless aggregate operations over pricing items.

Totals for a list of items are the sum of ``quantity x base_price``. The
sum starts from zero in the first item's currency, so a list mixing
currencies raises CurrencyMismatchError instead of silently converting.
"""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from decimal import Decimal

from quotectl.domain.errors import DomainError
from quotectl.domain.items import PricingItem
from quotectl.domain.money import DEFAULT_CURRENCY, Money, quantize_cents
from quotectl.domain.percentage import Percentage

_HUNDRED = Decimal(100)


@dataclass(frozen=True, slots=True)
class PricingCalculationResult:
    subtotal: Money
    total_discount: Money
    total: Money
    savings: Money
    savings_rate: Decimal


@dataclass(frozen=True, slots=True)
class ItemCalculationResult:
    item: PricingItem
    subtotal: Money
    discount: Money
    total: Money


def _currency_of(items: Sequence[PricingItem]) -> str:
    return items[0].currency if items else DEFAULT_CURRENCY


class PricingCalculator:
    """Pricing arithmetic for quotes; every method is a staticmethod."""

    @staticmethod
    def calculate_total(items: Sequence[PricingItem]) -> Money:
        return Money.total((item.get_total_price() for item in items), _currency_of(items))

    @staticmethod
    def calculate_subtotal(items: Sequence[PricingItem]) -> Money:
        return PricingCalculator.calculate_total(items)

    @staticmethod
    def apply_discount(total: Money, discount: Percentage) -> Money:
        return discount.calculate_remaining(total)

    @staticmethod
    def calculate_discount_amount(total: Money, discount: Percentage) -> Money:
        return discount.calculate_discount(total)

    @staticmethod
    def calculate_tax(subtotal: Money, tax_rate: Percentage) -> Money:
        return tax_rate.apply_to(subtotal)

    @staticmethod
    def calculate_total_with_tax(subtotal: Money, tax_rate: Percentage) -> Money:
        return subtotal.add(PricingCalculator.calculate_tax(subtotal, tax_rate))

    @staticmethod
    def calculate_pricing(
        items: Sequence[PricingItem],
        discount: Percentage | None = None,
        tax_rate: Percentage | None = None,
    ) -> PricingCalculationResult:
        """Subtotal, discount, and total for *items*.

        Tax is charged on the discounted amount:
        ``total = (subtotal - discount) + tax(subtotal - discount)``.
        """
        currency = _currency_of(items)
        subtotal = PricingCalculator.calculate_subtotal(items)
        if discount is not None:
            total_discount = PricingCalculator.calculate_discount_amount(subtotal, discount)
        else:
            total_discount = Money.zero(currency)
        after_discount = subtotal.subtract(total_discount)
        if tax_rate is not None:
            tax = PricingCalculator.calculate_tax(after_discount, tax_rate)
        else:
            tax = Money.zero(currency)

        if subtotal.is_zero():
            savings_rate = Decimal("0.00")
        else:
            savings_rate = quantize_cents(total_discount.amount / subtotal.amount * _HUNDRED)
        return PricingCalculationResult(
            subtotal=subtotal,
            total_discount=total_discount,
            total=after_discount.add(tax),
            savings=total_discount,
            savings_rate=savings_rate,
        )

    @staticmethod
    def calculate_item_pricing(
        items: Sequence[PricingItem],
        item_discounts: Mapping[str, Percentage] | None = None,
    ) -> list[ItemCalculationResult]:
        """Per-item subtotal and discount; items absent from the map get 0%."""
        item_discounts = item_discounts or {}
        results = []
        for item in items:
            subtotal = item.get_total_price()
            discount = item_discounts.get(item.id, Percentage.zero()).calculate_discount(subtotal)
            results.append(
                ItemCalculationResult(
                    item=item,
                    subtotal=subtotal,
                    discount=discount,
                    total=subtotal.subtract(discount),
                )
            )
        return results

    @staticmethod
    def calculate_average_price(items: Sequence[PricingItem]) -> Money:
        if not items:
            return Money.zero()
        return PricingCalculator.calculate_total(items).divide(len(items))

    @staticmethod
    def calculate_total_quantity(items: Sequence[PricingItem]) -> int:
        return sum(item.quantity for item in items)

    @staticmethod
    def calculate_bulk_savings(items: Sequence[PricingItem], bulk_discount: Percentage) -> Money:
        subtotal = PricingCalculator.calculate_subtotal(items)
        return PricingCalculator.calculate_discount_amount(subtotal, bulk_discount)

    @staticmethod
    def calculate_price_per_unit(item: PricingItem) -> Money:
        return item.get_unit_price()

    @staticmethod
    def calculate_item_total_cost(item: PricingItem, quantity: int) -> Money:
        if quantity <= 0:
            raise DomainError("Quantity must be greater than zero")
        return item.base_price.multiply(quantity)

    @staticmethod
    def calculate_item_percentages(items: Sequence[PricingItem]) -> dict[str, Decimal]:
        """Share of the overall total per item id; empty when the total is zero."""
        total = PricingCalculator.calculate_total(items)
        if total.is_zero():
            return {}
        return {
            item.id: quantize_cents(item.get_total_price().amount / total.amount * _HUNDRED)
            for item in items
        }

    @staticmethod
    def calculate_total_savings(
        items: Sequence[PricingItem], discounts: Sequence[Percentage]
    ) -> Money:
        """Discount from several percentages summed (capped at 100%), applied once.

        Discounts are additive, not compounded: 10% and 20% take 30% off.
        """
        combined = min(sum((d.value for d in discounts), Decimal(0)), _HUNDRED)
        subtotal = PricingCalculator.calculate_subtotal(items)
        return PricingCalculator.calculate_discount_amount(subtotal, Percentage(combined))

    @staticmethod
    def calculate_break_even_point(
        fixed_costs: Money, variable_cost_per_unit: Money, selling_price_per_unit: Money
    ) -> int:
        if selling_price_per_unit <= variable_cost_per_unit:
            raise DomainError("Selling price must be greater than variable cost")
        margin = selling_price_per_unit.subtract(variable_cost_per_unit)
        return math.ceil(fixed_costs.amount / margin.amount)

    @staticmethod
    def calculate_profit_margin(selling_price: Money, cost: Money) -> Percentage:
        """Margin as a share of the selling price; 0% when cost >= price."""
        if selling_price <= cost:
            return Percentage.zero()
        profit = selling_price.subtract(cost)
        return Percentage(min(profit.amount / selling_price.amount * _HUNDRED, _HUNDRED))
