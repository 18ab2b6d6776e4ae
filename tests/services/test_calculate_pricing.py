"""Tests for CalculatePricingUseCase."""

from __future__ import annotations

from collections.abc import Callable
from decimal import Decimal
from typing import Any

import pytest

from quotectl.domain.items import PricingItem
from quotectl.infrastructure.repositories.memory import InMemoryPricingRepository
from quotectl.services.calculate_pricing import CalculatePricingUseCase
from quotectl.services.contracts import CalculatePricingInput
from quotectl.services.discounts import FlatRateDiscountResolver
from quotectl.services.errors import ApplicationError, NotFoundError, ValidationError

MakeItem = Callable[..., PricingItem]


class SpyRepository(InMemoryPricingRepository):
    """Records every find_by_ids call."""

    def __init__(self, items: list[PricingItem]) -> None:
        super().__init__(items)
        self.calls: list[list[str]] = []

    async def find_by_ids(self, item_ids: list[str]) -> list[PricingItem]:
        self.calls.append(list(item_ids))
        return await super().find_by_ids(item_ids)


class BrokenRepository(InMemoryPricingRepository):
    async def find_by_ids(self, item_ids: list[str]) -> list[PricingItem]:
        raise RuntimeError("connection reset")


@pytest.fixture
def repo(make_item: MakeItem) -> SpyRepository:
    return SpyRepository([make_item("a", 100, name="Item A"), make_item("b", 50, name="Item B")])


def _input(**kwargs: Any) -> CalculatePricingInput:
    kwargs.setdefault("item_ids", ["a", "b"])
    return CalculatePricingInput(**kwargs)


class TestEndToEnd:
    async def test_two_items_no_discount_no_tax(self, repo: SpyRepository) -> None:
        output = await CalculatePricingUseCase(repo).execute(
            _input(quantities={"a": 2, "b": 3})
        )
        assert output.subtotal == Decimal(350)
        assert output.total == Decimal(350)
        assert output.discount == Decimal(0)
        assert output.tax == Decimal(0)
        assert [i.total for i in output.items] == [Decimal(200), Decimal(150)]
        assert output.items[0].quantity == 2
        assert output.currency == "USD"
        assert output.calculated_at

    async def test_missing_quantity_defaults_to_one(self, repo: SpyRepository) -> None:
        output = await CalculatePricingUseCase(repo).execute(_input())
        assert output.subtotal == Decimal(150)

    async def test_integral_float_quantity_accepted(self, repo: SpyRepository) -> None:
        output = await CalculatePricingUseCase(repo).execute(
            _input(item_ids=["a"], quantities={"a": 2.0})
        )
        assert output.items[0].quantity == 2

    async def test_discount_code_and_tax(self, repo: SpyRepository) -> None:
        use_case = CalculatePricingUseCase(repo, FlatRateDiscountResolver(20))
        output = await use_case.execute(
            _input(quantities={"a": 2, "b": 3}, discount_code="SPRING", tax_rate=Decimal("8.5"))
        )
        assert output.discount == Decimal(70)
        assert output.discount_rate == Decimal(20)
        assert output.tax == Decimal("23.80")
        assert output.tax_rate == Decimal("8.5")
        assert output.total == Decimal("303.80")

    async def test_default_code_rate_is_ten_percent(self, repo: SpyRepository) -> None:
        output = await CalculatePricingUseCase(repo).execute(
            _input(quantities={"a": 2, "b": 3}, discount_code="ANY")
        )
        assert output.discount == Decimal(35)
        assert output.total == Decimal(315)

    async def test_fetches_once(self, repo: SpyRepository) -> None:
        await CalculatePricingUseCase(repo).execute(_input())
        assert repo.calls == [["a", "b"]]


class TestValidation:
    @pytest.mark.parametrize(
        ("kwargs", "field"),
        [
            ({"item_ids": []}, "item_ids"),
            ({"item_ids": ["a", "  "]}, "item_ids"),
            ({"quantities": {"a": 0}}, "quantities"),
            ({"quantities": {"a": 10_001}}, "quantities"),
            ({"quantities": {"a": 1.5}}, "quantities"),
            ({"tax_rate": Decimal(150)}, "tax_rate"),
            ({"tax_rate": Decimal(-10)}, "tax_rate"),
            ({"discount_code": "   "}, "discount_code"),
        ],
    )
    async def test_rejected_before_repository_call(
        self, repo: SpyRepository, kwargs: dict[str, Any], field: str
    ) -> None:
        with pytest.raises(ValidationError) as exc_info:
            await CalculatePricingUseCase(repo).execute(_input(**kwargs))
        assert exc_info.value.field == field
        assert exc_info.value.code == "VALIDATION_ERROR"
        assert repo.calls == []

    async def test_message_format(self, repo: SpyRepository) -> None:
        with pytest.raises(ValidationError, match="Validation failed for item_ids"):
            await CalculatePricingUseCase(repo).execute(_input(item_ids=[]))

    async def test_configured_max_quantity(self, repo: SpyRepository) -> None:
        use_case = CalculatePricingUseCase(repo, max_quantity=5)
        with pytest.raises(ValidationError, match="cannot exceed 5"):
            await use_case.execute(_input(quantities={"a": 6}))


class TestFailures:
    async def test_not_found_names_missing_ids(self, make_item: MakeItem) -> None:
        repo = SpyRepository([make_item("a", 100)])
        with pytest.raises(NotFoundError) as exc_info:
            await CalculatePricingUseCase(repo).execute(_input())
        assert exc_info.value.ids == ["b"]
        assert "b" in exc_info.value.message
        assert exc_info.value.code == "NOT_FOUND"

    async def test_repository_failure_wrapped(self) -> None:
        with pytest.raises(ApplicationError) as exc_info:
            await CalculatePricingUseCase(BrokenRepository()).execute(_input())
        assert type(exc_info.value) is ApplicationError
        assert "Failed to fetch pricing items: connection reset" in exc_info.value.message
        assert isinstance(exc_info.value.__cause__, RuntimeError)

    async def test_mixed_currencies_wrapped(self, make_item: MakeItem) -> None:
        repo = SpyRepository([make_item("a", 1), make_item("b", 1, currency="EUR")])
        with pytest.raises(ApplicationError, match="Pricing calculation failed"):
            await CalculatePricingUseCase(repo).execute(_input())
