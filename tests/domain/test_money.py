"""Tests for the Money value object."""

from decimal import Decimal

import pytest

from quotectl.domain.errors import CurrencyMismatchError, DomainError
from quotectl.domain.money import Money


class TestConstruction:
    def test_rounds_to_cents(self) -> None:
        assert Money(Decimal("100.123456")).amount == Decimal("100.12")

    def test_rounds_half_up(self) -> None:
        assert Money(Decimal("0.005")).amount == Decimal("0.01")
        assert Money(Decimal("2.675")).amount == Decimal("2.68")

    def test_float_goes_through_str(self) -> None:
        assert Money(0.1).amount == Decimal("0.10")

    def test_rounding_idempotent(self) -> None:
        assert Money(Decimal("19.999")) == Money(Decimal("19.999"))
        assert Money(Money(Decimal("19.999")).amount).amount == Decimal("20.00")

    def test_default_currency_is_usd(self) -> None:
        assert Money(1).currency == "USD"

    def test_currency_normalized(self) -> None:
        assert Money(1, " eur ").currency == "EUR"

    def test_negative_rejected(self) -> None:
        with pytest.raises(DomainError, match="negative"):
            Money(Decimal("-0.01"))

    @pytest.mark.parametrize("value", ["abc", "NaN", "Infinity", True, None])
    def test_invalid_amount_rejected(self, value: object) -> None:
        with pytest.raises(DomainError):
            Money(value)  # type: ignore[arg-type]

    @pytest.mark.parametrize("currency", ["", "US", "XYZ", "DOLLARS"])
    def test_invalid_currency_rejected(self, currency: str) -> None:
        with pytest.raises(DomainError):
            Money(1, currency)

    def test_frozen(self) -> None:
        money = Money(1)
        with pytest.raises(AttributeError):
            money.amount = Decimal(2)  # type: ignore[misc]


class TestFactories:
    def test_zero(self) -> None:
        assert Money.zero("GBP") == Money(0, "GBP")
        assert Money.zero().is_zero()

    def test_from_cents(self) -> None:
        assert Money.from_cents(1050).amount == Decimal("10.50")

    def test_total_empty_is_zero(self) -> None:
        assert Money.total([], "EUR") == Money.zero("EUR")

    def test_total_sums(self) -> None:
        assert Money.total([Money(1), Money(Decimal("2.50"))]) == Money(Decimal("3.50"))

    def test_total_rejects_other_currency(self) -> None:
        with pytest.raises(CurrencyMismatchError):
            Money.total([Money(1, "EUR")], "USD")


class TestArithmetic:
    def test_add(self) -> None:
        assert Money(10).add(Money(Decimal("0.50"))) == Money(Decimal("10.50"))

    def test_operators(self) -> None:
        assert Money(10) + Money(5) == Money(15)
        assert Money(10) - Money(5) == Money(5)

    def test_subtract_to_zero(self) -> None:
        assert Money(10).subtract(Money(10)).is_zero()

    def test_subtract_below_zero_raises(self) -> None:
        with pytest.raises(DomainError, match="negative"):
            Money(5).subtract(Money(10))

    def test_subtract_or_zero_clamps(self) -> None:
        assert Money(5).subtract_or_zero(Money(10)) == Money(0)

    def test_multiply_rounds(self) -> None:
        assert Money(Decimal("10.00")).multiply(Decimal("0.333")).amount == Decimal("3.33")

    def test_multiply_negative_factor_raises(self) -> None:
        with pytest.raises(DomainError):
            Money(10).multiply(-1)

    def test_divide(self) -> None:
        assert Money(10).divide(3).amount == Decimal("3.33")

    @pytest.mark.parametrize("factor", [0, -2])
    def test_divide_by_non_positive_raises(self, factor: int) -> None:
        with pytest.raises(DomainError, match="greater than zero"):
            Money(10).divide(factor)

    def test_operations_return_new_instances(self) -> None:
        original = Money(10)
        original.add(Money(5))
        assert original == Money(10)


class TestCurrencySafety:
    @pytest.mark.parametrize(
        "op",
        [
            lambda a, b: a.add(b),
            lambda a, b: a.subtract(b),
            lambda a, b: a.subtract_or_zero(b),
            lambda a, b: a < b,
            lambda a, b: a >= b,
        ],
    )
    def test_mixed_currencies_raise(self, op) -> None:  # type: ignore[no-untyped-def]
        with pytest.raises(CurrencyMismatchError) as exc_info:
            op(Money(10, "USD"), Money(5, "EUR"))
        assert exc_info.value.left == "USD"
        assert exc_info.value.right == "EUR"

    def test_mismatch_is_a_domain_error(self) -> None:
        with pytest.raises(DomainError):
            Money(1, "USD").add(Money(1, "JPY"))


class TestComparison:
    def test_ordering(self) -> None:
        assert Money(1) < Money(2)
        assert Money(2) > Money(1)
        assert Money(2) <= Money(2)
        assert Money(2) >= Money(2)

    def test_equality_ignores_trailing_zeros(self) -> None:
        assert Money(Decimal("5")) == Money(Decimal("5.00"))

    def test_equality_includes_currency(self) -> None:
        assert Money(5, "USD") != Money(5, "EUR")


class TestConversion:
    def test_to_cents(self) -> None:
        assert Money(Decimal("10.57")).to_cents() == 1057

    def test_format_usd(self) -> None:
        assert Money(Decimal("1234.5")).format() == "$1,234.50"

    def test_format_other_currencies(self) -> None:
        assert Money(10, "EUR").format() == "€10.00"
        assert Money(10, "GBP").format() == "£10.00"

    def test_str_matches_format(self) -> None:
        assert str(Money(3)) == "$3.00"

    def test_dict_round_trip(self) -> None:
        money = Money(Decimal("12.34"), "CAD")
        assert Money.from_dict(money.to_dict()) == money
