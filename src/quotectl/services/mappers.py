"""Conversions between file records, domain objects, and output contracts."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from quotectl.domain.category import Category
from quotectl.domain.errors import DomainError
from quotectl.domain.items import PricingItem
from quotectl.domain.money import DEFAULT_CURRENCY, Money
from quotectl.domain.quantity import config_based_quantity
from quotectl.domain.rows import SelectedItemRow, classify_row, effective_unit_price
from quotectl.domain.summary import GlobalDiscount, ScenarioSummary
from quotectl.domain.tiers import PricingTier, TierSchedule
from quotectl.domain.units import BucketPolicy
from quotectl.services.contracts import (
    CategoryData,
    CategoryRecord,
    CategorySubtotalData,
    GlobalDiscountData,
    GlobalDiscountRecord,
    ItemRecord,
    PricingItemData,
    SavingsData,
    ScenarioSummaryData,
    SelectedRowRecord,
    SummaryRowData,
    TierData,
)

# --- Records -> domain ---


def category_from_record(record: CategoryRecord) -> Category:
    return Category(
        id=record.id, name=record.name, description=record.description, order=record.order
    )


def item_from_record(
    record: ItemRecord,
    categories: Mapping[str, Category],
    default_currency: str = DEFAULT_CURRENCY,
) -> PricingItem:
    """Build a PricingItem, resolving its category id against *categories*."""
    category = categories.get(record.category)
    if category is None:
        raise DomainError(f"Item {record.id} references unknown category {record.category}")
    return PricingItem(
        id=record.id,
        name=record.name,
        description=record.description,
        base_price=Money(record.base_price, record.currency or default_currency),
        category=category,
        quantity=record.quantity,
        unit=record.unit,
        pricing_type=record.pricing_type,
        tiers=TierSchedule(
            PricingTier(
                min_quantity=t.min_quantity,
                max_quantity=t.max_quantity,
                unit_price=t.unit_price,
                id=t.id,
                name=t.name,
            )
            for t in record.tiers
        ),
        quantity_source_fields=tuple(record.quantity_source_fields),
        quantity_multiplier=record.quantity_multiplier,
        auto_add_trigger_fields=tuple(record.auto_add_trigger_fields),
    )


def row_from_record(
    record: SelectedRowRecord, item: PricingItem, client_config: Mapping[str, Any]
) -> SelectedItemRow:
    """Build a row; a missing quantity comes from the client config.

    A missing unit price is the tier price for the row's quantity on tiered
    items, the base price otherwise.
    """
    if record.quantity is not None:
        quantity = record.quantity
    elif item.quantity_source_fields:
        quantity = config_based_quantity(item, client_config)
    else:
        quantity = item.quantity
    if record.unit_price is None:
        unit_price = effective_unit_price(item, quantity)
    else:
        unit_price = record.unit_price
    return SelectedItemRow(
        item=item,
        quantity=quantity,
        unit_price=unit_price,
        discount=record.discount,
        discount_type=record.discount_type,
        discount_application=record.discount_application,
        is_free=record.is_free,
        id=record.id,
    )


def global_discount_from_record(record: GlobalDiscountRecord) -> GlobalDiscount:
    return GlobalDiscount(amount=record.amount, type=record.type, scope=record.scope)


# --- Domain -> contracts ---


def category_to_data(category: Category) -> CategoryData:
    return CategoryData(
        id=category.id,
        name=category.name,
        description=category.description,
        order=category.order,
    )


def item_to_data(item: PricingItem) -> PricingItemData:
    return PricingItemData(
        id=item.id,
        name=item.name,
        description=item.description,
        base_price=item.base_price.amount,
        currency=item.currency,
        category=category_to_data(item.category),
        quantity=item.quantity,
        unit=item.unit,
        pricing_type=item.pricing_type,
        tiers=[
            TierData(
                min_quantity=t.min_quantity,
                max_quantity=t.max_quantity,
                unit_price=t.unit_price,
                name=t.name,
            )
            for t in item.tiers
        ],
    )


def summary_to_data(summary: ScenarioSummary, policy: BucketPolicy) -> ScenarioSummaryData:
    savings = summary.savings
    return ScenarioSummaryData(
        one_time_subtotal=summary.one_time_subtotal.amount,
        monthly_subtotal=summary.monthly_subtotal.amount,
        one_time_total=summary.one_time_total.amount,
        monthly_total=summary.monthly_total.amount,
        yearly_total=summary.yearly_total.amount,
        total_project_cost=summary.total_project_cost.amount,
        savings=SavingsData(
            original_total=savings.original_total.amount,
            total_savings=savings.total_savings.amount,
            free_item_savings=savings.free_item_savings.amount,
            discount_savings=savings.discount_savings.amount,
            row_discount_total=savings.row_discount_total.amount,
            global_discount_total=savings.global_discount_total.amount,
            savings_rate=savings.savings_rate,
        ),
        categories=[
            CategorySubtotalData(
                id=entry.category.id,
                name=entry.category.name,
                order=entry.category.order,
                total=entry.total.amount,
                item_count=entry.item_count,
            )
            for entry in summary.categories
        ],
        rows=[
            SummaryRowData(
                id=entry.row.id,
                item_id=entry.row.item.id,
                name=entry.row.item.name,
                category_id=entry.row.category_id,
                bucket=classify_row(entry.row, policy).value,
                quantity=entry.row.quantity,
                unit_price=entry.row.unit_price,
                before_discount=entry.before_discount.amount,
                total=entry.total.amount,
                is_free=entry.is_free,
            )
            for entry in summary.rows
        ],
        global_discount=GlobalDiscountData(
            amount=summary.global_discount.amount,
            type=summary.global_discount.type,
            scope=summary.global_discount.scope,
        ),
        item_count=summary.item_count,
        currency=summary.currency,
    )
