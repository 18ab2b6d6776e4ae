"""Tests for selected rows and the per-row discount calculator."""

from __future__ import annotations

from collections.abc import Callable
from decimal import Decimal

import pytest

from quotectl.domain.category import Category
from quotectl.domain.errors import DomainError
from quotectl.domain.items import PricingItem
from quotectl.domain.money import Money
from quotectl.domain.rows import (
    DiscountApplication,
    DiscountType,
    SelectedItemRow,
    calculate_row,
    classify_row,
    row_subtotal,
    row_total,
)
from quotectl.domain.tiers import PricingTier
from quotectl.domain.units import BillingBucket, BucketPolicy, PricingType

MakeItem = Callable[..., PricingItem]

UNIT = DiscountApplication.UNIT
TOTAL = DiscountApplication.TOTAL
PCT = DiscountType.PERCENTAGE
FIXED = DiscountType.FIXED


def _row(
    item: PricingItem, quantity: int, unit_price: int | str, **kwargs: object
) -> SelectedItemRow:
    return SelectedItemRow(
        item=item,
        quantity=quantity,
        unit_price=Decimal(str(unit_price)),
        **kwargs,  # type: ignore[arg-type]
    )


@pytest.fixture
def item(make_item: MakeItem) -> PricingItem:
    return make_item("widget", 10)


@pytest.fixture
def tiered_item(make_item: MakeItem) -> PricingItem:
    return make_item(
        "cards",
        9,
        pricing_type=PricingType.TIERED,
        tiers=[
            PricingTier(min_quantity=1, max_quantity=10, unit_price=Decimal(5)),
            PricingTier(min_quantity=11, max_quantity=None, unit_price=Decimal(4)),
        ],
    )


class TestSelectedItemRow:
    def test_defaults(self, item: PricingItem) -> None:
        row = _row(item, 2, 10)
        assert row.id == "widget"
        assert row.discount == 0
        assert row.discount_type is PCT
        assert row.discount_application is TOTAL
        assert row.is_free is False

    def test_explicit_id_kept(self, item: PricingItem) -> None:
        assert _row(item, 1, 10, id="row-7").id == "row-7"

    @pytest.mark.parametrize(("raw", "clamped"), [("150", "100"), ("-5", "0"), ("12.5", "12.5")])
    def test_percentage_discount_clamped(self, item: PricingItem, raw: str, clamped: str) -> None:
        assert _row(item, 1, 10, discount=Decimal(raw)).discount == Decimal(clamped)

    def test_negative_fixed_discount_rejected(self, item: PricingItem) -> None:
        with pytest.raises(DomainError, match="Fixed discount"):
            _row(item, 1, 10, discount=Decimal(-1), discount_type=FIXED)

    def test_negative_quantity_rejected(self, item: PricingItem) -> None:
        with pytest.raises(DomainError):
            _row(item, -1, 10)

    def test_negative_unit_price_rejected(self, item: PricingItem) -> None:
        with pytest.raises(DomainError):
            _row(item, 1, -1)

    def test_string_enums_accepted(self, item: PricingItem) -> None:
        row = _row(item, 1, 10, discount_type="fixed", discount_application="unit")
        assert row.discount_type is FIXED
        assert row.discount_application is UNIT

    def test_for_item_uses_base_price_and_quantity(self, make_item: MakeItem) -> None:
        row = SelectedItemRow.for_item(make_item("x", 25, quantity=3))
        assert row.unit_price == Decimal("25.00")
        assert row.quantity == 3

    def test_for_item_uses_tier_price(self, tiered_item: PricingItem) -> None:
        row = SelectedItemRow.for_item(tiered_item, 20, discount_application=UNIT)
        assert row.unit_price == Decimal(4)
        totals = calculate_row(row)
        assert totals.before_discount == Money(80)
        assert totals.total == Money(80)

    def test_for_item_unit_discount_on_tier_price(self, tiered_item: PricingItem) -> None:
        row = SelectedItemRow.for_item(
            tiered_item, 20, discount=Decimal(10), discount_application=UNIT
        )
        totals = calculate_row(row)
        assert totals.total == Money(72)
        assert totals.discount == Money(8)


class TestApplicationModes:
    def test_percentage_unit_mode(self, item: PricingItem) -> None:
        row = _row(item, 10, 10, discount=Decimal(10), discount_application=UNIT)
        assert row_total(row) == Money(90)

    def test_percentage_total_mode(self, item: PricingItem) -> None:
        row = _row(item, 10, 10, discount=Decimal(10), discount_application=TOTAL)
        assert row_total(row) == Money(90)

    def test_fixed_unit_mode(self, item: PricingItem) -> None:
        row = _row(
            item, 3, 10, discount=Decimal(5), discount_type=FIXED, discount_application=UNIT
        )
        assert row_total(row) == Money(15)

    def test_fixed_total_mode_is_per_unit(self, item: PricingItem) -> None:
        """A fixed discount under total application is discount x quantity, not a flat amount."""
        row = _row(
            item, 3, 10, discount=Decimal(5), discount_type=FIXED, discount_application=TOTAL
        )
        assert row_total(row) == Money(15)
        assert row_total(row) != Money(25)

    def test_modes_diverge_for_tiered_items(self, tiered_item: PricingItem) -> None:
        unit_row = _row(tiered_item, 11, 9, discount=Decimal(10), discount_application=UNIT)
        total_row = _row(tiered_item, 11, 9, discount=Decimal(10), discount_application=TOTAL)
        # unit mode discounts the row's own unit price: 9 * 0.9 * 11
        assert row_total(unit_row) == Money(Decimal("89.10"))
        # total mode discounts the tier-resolved value: 11 * 4 = 44, less 10%
        assert row_total(total_row) == Money(Decimal("39.60"))

    def test_fixed_unit_discount_clamps_unit_price(self, item: PricingItem) -> None:
        row = _row(
            item, 4, 10, discount=Decimal(15), discount_type=FIXED, discount_application=UNIT
        )
        assert row_total(row) == Money(0)

    def test_fixed_total_discount_clamps_at_zero(self, item: PricingItem) -> None:
        row = _row(item, 3, 10, discount=Decimal(15), discount_type=FIXED)
        assert row_total(row) == Money(0)

    def test_zero_quantity_totals_zero(self, item: PricingItem) -> None:
        assert row_total(_row(item, 0, 10, discount=Decimal(10))) == Money(0)


class TestSubtotalsAndFreeRows:
    def test_flat_subtotal_uses_row_unit_price(self, item: PricingItem) -> None:
        assert row_subtotal(_row(item, 3, 12)) == Money(36)

    def test_tiered_subtotal_uses_tiers(self, tiered_item: PricingItem) -> None:
        assert row_subtotal(_row(tiered_item, 10, 9)) == Money(50)

    def test_free_row(self, item: PricingItem) -> None:
        totals = calculate_row(_row(item, 2, 10, discount=Decimal(50), is_free=True))
        assert totals.total == Money(0)
        assert totals.before_discount == Money(20)
        assert totals.discount == Money(20)
        assert totals.is_free

    def test_row_totals_discount(self, item: PricingItem) -> None:
        totals = calculate_row(_row(item, 2, 10, discount=Decimal(25)))
        assert totals.before_discount == Money(20)
        assert totals.total == Money(15)
        assert totals.discount == Money(5)

    def test_uses_item_currency(self, make_item: MakeItem) -> None:
        row = _row(make_item("eu", 10, currency="EUR"), 2, 10)
        assert row_total(row) == Money(20, "EUR")

    def test_idempotent(self, tiered_item: PricingItem) -> None:
        row = _row(tiered_item, 11, 9, discount=Decimal(10))
        assert calculate_row(row) == calculate_row(row)


class TestClassifyRow:
    def test_setup_category(self, make_item: MakeItem) -> None:
        setup = Category(id="setup", name="Setup")
        row = _row(make_item("s", 1, category=setup), 1, 1)
        assert classify_row(row, BucketPolicy()) is BillingBucket.ONE_TIME

    def test_one_time_unit(self, make_item: MakeItem) -> None:
        row = _row(make_item("s", 1, unit="Per Project"), 1, 1)
        assert classify_row(row, BucketPolicy()) is BillingBucket.ONE_TIME

    def test_monthly(self, make_item: MakeItem) -> None:
        row = _row(make_item("s", 1, unit="Per User"), 1, 1)
        assert classify_row(row, BucketPolicy()) is BillingBucket.MONTHLY
