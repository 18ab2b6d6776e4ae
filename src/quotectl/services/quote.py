"""QuoteService: adapts the use cases to ServiceResult for the CLI.

Each operation catches ApplicationError and returns ``ok=False`` with the
error's code, so command code only ever inspects a ServiceResult.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from decimal import Decimal
from typing import Any

import structlog

from quotectl.domain.errors import CurrencyMismatchError, DomainError
from quotectl.domain.items import MAX_ITEM_QUANTITY
from quotectl.domain.quantity import auto_add_items
from quotectl.domain.summary import ScenarioSummary, summarize_rows
from quotectl.domain.units import BucketPolicy
from quotectl.services.calculate_pricing import CalculatePricingUseCase
from quotectl.services.contracts import (
    CalculatePricingInput,
    GetPricingItemByIdInput,
    GetPricingItemsInput,
    ScenarioFile,
    SelectedRowRecord,
)
from quotectl.services.discounts import DiscountCodeResolver
from quotectl.services.errors import (
    ApplicationError,
    BusinessRuleError,
    NotFoundError,
    ValidationError,
)
from quotectl.services.mappers import global_discount_from_record, row_from_record, summary_to_data
from quotectl.services.ports import CategoryRepository, PricingRepository
from quotectl.services.queries import GetPricingItemByIdUseCase, GetPricingItemsUseCase
from quotectl.services.result import ServiceResult

logger = structlog.get_logger(__name__)


class QuoteService:
    """Pricing operations over a pricing and a category repository."""

    def __init__(
        self,
        pricing: PricingRepository,
        categories: CategoryRepository,
        *,
        policy: BucketPolicy | None = None,
        discount_resolver: DiscountCodeResolver | None = None,
        max_quantity: int = MAX_ITEM_QUANTITY,
    ) -> None:
        self._pricing = pricing
        self._categories = categories
        self._policy = policy or BucketPolicy()
        self._discount_resolver = discount_resolver
        self._max_quantity = max_quantity

    async def calculate(
        self,
        item_ids: list[str],
        *,
        quantities: dict[str, int] | None = None,
        discount_code: str | None = None,
        tax_rate: Decimal | None = None,
    ) -> ServiceResult:
        async def run() -> dict[str, Any]:
            use_case = CalculatePricingUseCase(
                self._pricing, self._discount_resolver, max_quantity=self._max_quantity
            )
            output = await use_case.execute(
                CalculatePricingInput(
                    item_ids=item_ids,
                    quantities=quantities or {},
                    discount_code=discount_code,
                    tax_rate=tax_rate,
                )
            )
            return output.model_dump(mode="json")

        return await self._run("calculate", run)

    async def list_items(
        self, *, category_id: str | None = None, search_term: str | None = None
    ) -> ServiceResult:
        async def run() -> dict[str, Any]:
            output = await GetPricingItemsUseCase(self._pricing).execute(
                GetPricingItemsInput(category_id=category_id, search_term=search_term)
            )
            return output.model_dump(mode="json")

        return await self._run("list_items", run)

    async def get_item(self, item_id: str) -> ServiceResult:
        async def run() -> dict[str, Any]:
            output = await GetPricingItemByIdUseCase(self._pricing).execute(
                GetPricingItemByIdInput(item_id=item_id)
            )
            if output.item is None:
                raise NotFoundError("PricingItem", item_id)
            return output.item.model_dump(mode="json")

        return await self._run("get_item", run)

    async def summarize(self, scenario: ScenarioFile) -> ServiceResult:
        warnings: list[str] = []

        async def run() -> dict[str, Any]:
            summary = await self.build_summary(scenario)
            warnings.extend(_unsourced_quantity_warnings(scenario, summary))
            return summary_to_data(summary, self._policy).model_dump(mode="json")

        return await self._run("summarize", run, warnings)

    async def build_summary(self, scenario: ScenarioFile) -> ScenarioSummary:
        """Resolve scenario rows against the catalog and summarize them.

        Unless the scenario turns ``auto_add`` off, catalog items triggered by
        its config are appended as rows after the selected ones.

        Raises:
            NotFoundError: A selected row names an unknown item.
            BusinessRuleError: Rows mix currencies.
            ValidationError: A row or the global discount is invalid.
        """
        wanted = list(dict.fromkeys(record.item_id for record in scenario.selected))
        try:
            items = {item.id: item for item in await self._pricing.find_by_ids(wanted)}
            categories = await self._categories.find_all()
            catalog = await self._pricing.find_all() if scenario.auto_add else []
        except Exception as exc:
            raise ApplicationError(f"Failed to fetch catalog: {exc}") from exc
        missing = [item_id for item_id in wanted if item_id not in items]
        if missing:
            raise NotFoundError("PricingItem", missing)

        added = auto_add_items(wanted, catalog, scenario.config)
        if added:
            logger.debug("summary.auto_added", items=[item.id for item in added])
            items.update((item.id, item) for item in added)
        records = [*scenario.selected, *(SelectedRowRecord(item_id=item.id) for item in added)]

        try:
            rows = [
                row_from_record(record, items[record.item_id], scenario.config)
                for record in records
            ]
            return summarize_rows(
                rows,
                global_discount_from_record(scenario.global_discount),
                categories,
                self._policy,
            )
        except CurrencyMismatchError as exc:
            raise BusinessRuleError("single-currency", str(exc)) from exc
        except DomainError as exc:
            raise ValidationError("scenario", str(exc)) from exc

    async def _run(
        self,
        op: str,
        action: Callable[[], Awaitable[dict[str, Any]]],
        warnings: list[str] | None = None,
    ) -> ServiceResult:
        try:
            data = await action()
        except ApplicationError as exc:
            logger.debug("service.failed", op=op, code=exc.code, error=exc.message)
            return ServiceResult.from_error(op, exc)
        return ServiceResult(ok=True, op=op, data=data, warnings=list(warnings or ()))


def _unsourced_quantity_warnings(scenario: ScenarioFile, summary: ScenarioSummary) -> list[str]:
    """Config-driven rows whose scenario config sets none of their fields.

    Rows past the selected ones were auto-added and always take the
    config-driven quantity.
    """
    explicit = [record.quantity is not None for record in scenario.selected]
    explicit += [False] * (len(summary.rows) - len(explicit))
    warnings = []
    for has_quantity, entry in zip(explicit, summary.rows, strict=True):
        fields = entry.row.item.quantity_source_fields
        if not has_quantity and fields and not any(f in scenario.config for f in fields):
            warnings.append(
                f"{entry.row.item.id}: scenario config has no {', '.join(fields)}; quantity is 0"
            )
    return warnings
