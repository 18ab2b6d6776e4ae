"""Tests for operation-specific Rich renderers."""

from __future__ import annotations

from decimal import Decimal

import pytest

from quotectl.infrastructure.repositories.memory import (
    InMemoryCategoryRepository,
    InMemoryPricingRepository,
)
from quotectl.output.renderers import render_quiet, render_result
from quotectl.services.contracts import ScenarioFile
from quotectl.services.quote import QuoteService
from quotectl.services.result import ServiceError, ServiceResult


@pytest.fixture
def service(
    pricing_repo: InMemoryPricingRepository, category_repo: InMemoryCategoryRepository
) -> QuoteService:
    return QuoteService(pricing_repo, category_repo)


def _summary_scenario() -> ScenarioFile:
    return ScenarioFile.model_validate(
        {
            "selected": [
                {"item_id": "setup-fee"},
                {"item_id": "hosting"},
                {"item_id": "support", "is_free": True},
            ],
            "global_discount": {"amount": 10, "scope": "both"},
        }
    )


class TestRenderCalculate:
    async def test_table_and_totals(self, service: QuoteService) -> None:
        result = await service.calculate(
            ["setup-fee", "hosting"], discount_code="X", tax_rate=None
        )
        output = render_result(result)
        assert "OK" in output
        assert "Setup Fee" in output
        assert "Cloud Hosting" in output
        assert "Subtotal" in output
        assert "$700.00" in output
        assert "Discount (10%)" in output
        assert "-$70.00" in output
        assert "$630.00" in output
        assert "Tax" not in output

    async def test_tax_row(self, service: QuoteService) -> None:
        result = await service.calculate(["hosting"], tax_rate=Decimal("8.5"))
        output = render_result(result)
        assert "Tax (8.5%)" in output
        assert "$17.00" in output

    async def test_verbose_shows_timestamp(self, service: QuoteService) -> None:
        result = await service.calculate(["hosting"])
        assert "calculated_at" in render_result(result, verbose=True)

    async def test_quiet(self, service: QuoteService) -> None:
        result = await service.calculate(["hosting"], quantities={"hosting": 3})
        assert render_quiet(result) == "$600.00"


class TestRenderItems:
    async def test_item_table(self, service: QuoteService) -> None:
        output = render_result(await service.list_items())
        assert "setup-fee" in output
        assert "Card Issuing" in output
        assert "from $4.00" in output
        assert "4 items" in output

    async def test_verbose_adds_pricing_column(self, service: QuoteService) -> None:
        output = render_result(await service.list_items(), verbose=True)
        assert "tiered" in output

    async def test_single_item_panel(self, service: QuoteService) -> None:
        output = render_result(await service.get_item("card-issuing"))
        assert "card-issuing" in output
        assert "category: Cards" in output
        assert "1 - 10: $5.00" in output
        assert "11+: $4.00" in output


class TestRenderSummary:
    async def test_totals_and_categories(self, service: QuoteService) -> None:
        output = render_result(await service.summarize(_summary_scenario()))
        assert "Setup" in output
        assert "Hosting" in output
        assert "One-time" in output
        assert "$450.00" in output  # 500 less 10%
        assert "$180.00" in output  # 200 less 10%
        assert "$2,160.00" in output
        assert "Total project cost" in output
        assert "$2,610.00" in output
        assert "Savings" in output

    async def test_verbose_rows_and_breakdown(self, service: QuoteService) -> None:
        output = render_result(await service.summarize(_summary_scenario()), verbose=True)
        assert "FREE" in output
        assert "monthly" in output
        assert "free_item_savings" in output
        assert "global_discount_total" in output

    async def test_quiet(self, service: QuoteService) -> None:
        assert render_quiet(await service.summarize(_summary_scenario())) == "$2,610.00"


class TestRenderError:
    def _error(self) -> ServiceResult:
        return ServiceResult(
            ok=False,
            op="get_item",
            error=ServiceError(
                code="NOT_FOUND",
                message="PricingItem with id ghost not found",
                detail={"entity": "PricingItem", "ids": ["ghost"]},
            ),
        )

    def test_message(self) -> None:
        output = render_result(self._error())
        assert "ERROR" in output
        assert "PricingItem with id ghost not found" in output
        assert "NOT_FOUND" not in output

    def test_verbose_shows_code_and_detail(self) -> None:
        output = render_result(self._error(), verbose=True)
        assert "code: NOT_FOUND" in output
        assert "entity: PricingItem" in output
