"""CalculatePricingUseCase: price a set of catalog items by id.

Workflow: validate input, fetch items, verify every id was found, apply
quantities, resolve the discount code, run the calculator, map to the
output contract.

INVARIANT: ValidationError is raised before the repository is touched,
and neither it nor NotFoundError is ever wrapped.
"""

from __future__ import annotations

from decimal import Decimal

import structlog

from quotectl.domain.calculator import PricingCalculationResult, PricingCalculator
from quotectl.domain.items import MAX_ITEM_QUANTITY, PricingItem
from quotectl.domain.money import DEFAULT_CURRENCY
from quotectl.domain.percentage import Percentage
from quotectl.services._helpers import now_iso
from quotectl.services.contracts import (
    CalculatedItem,
    CalculatePricingInput,
    CalculatePricingOutput,
)
from quotectl.services.discounts import DiscountCodeResolver, FlatRateDiscountResolver
from quotectl.services.errors import ApplicationError, NotFoundError, ValidationError
from quotectl.services.ports import PricingRepository

logger = structlog.get_logger(__name__)


class CalculatePricingUseCase:
    def __init__(
        self,
        repository: PricingRepository,
        discount_resolver: DiscountCodeResolver | None = None,
        *,
        max_quantity: int = MAX_ITEM_QUANTITY,
    ) -> None:
        self._repository = repository
        self._discounts = discount_resolver or FlatRateDiscountResolver()
        self._max_quantity = max_quantity

    async def execute(self, data: CalculatePricingInput) -> CalculatePricingOutput:
        self._validate(data)
        try:
            items = await self._fetch(data.item_ids)
            self._require_all_found(items, data.item_ids)
            entities = [
                item.update_quantity(int(data.quantities.get(item.id) or 1)) for item in items
            ]
            discount = self._discounts.resolve(data.discount_code)
            tax_rate = Percentage(data.tax_rate) if data.tax_rate is not None else None
            result = PricingCalculator.calculate_pricing(entities, discount, tax_rate)
            output = self._to_output(result, entities, data)
        except ApplicationError:
            raise
        except Exception as exc:
            raise ApplicationError(f"Pricing calculation failed: {exc}") from exc

        logger.info(
            "pricing.calculated",
            item_count=len(entities),
            total=result.total,
            currency=output.currency,
        )
        return output

    def _validate(self, data: CalculatePricingInput) -> None:
        if not data.item_ids:
            raise ValidationError("item_ids", "At least one item ID is required")
        if any(not item_id or not item_id.strip() for item_id in data.item_ids):
            raise ValidationError("item_ids", "All item IDs must be non-empty")

        for item_id, quantity in data.quantities.items():
            if quantity < 1:
                raise ValidationError(
                    "quantities", f"Quantity for item {item_id} must be at least 1"
                )
            if quantity > self._max_quantity:
                raise ValidationError(
                    "quantities",
                    f"Quantity for item {item_id} cannot exceed {self._max_quantity:,}",
                )
            if isinstance(quantity, float) and not quantity.is_integer():
                raise ValidationError(
                    "quantities", f"Quantity for item {item_id} must be an integer"
                )

        if data.tax_rate is not None and not Decimal(0) <= data.tax_rate <= Decimal(100):
            raise ValidationError("tax_rate", "Tax rate must be between 0 and 100")

        if data.discount_code is not None and not data.discount_code.strip():
            raise ValidationError("discount_code", "Discount code cannot be empty")

    async def _fetch(self, item_ids: list[str]) -> list[PricingItem]:
        try:
            return await self._repository.find_by_ids(item_ids)
        except Exception as exc:
            logger.warning("pricing.repository_failed", error=str(exc))
            raise ApplicationError(f"Failed to fetch pricing items: {exc}") from exc

    @staticmethod
    def _require_all_found(items: list[PricingItem], requested: list[str]) -> None:
        found = {item.id for item in items}
        missing = [item_id for item_id in requested if item_id not in found]
        if missing:
            logger.info("pricing.items_missing", missing=missing)
            raise NotFoundError("PricingItem", missing)

    @staticmethod
    def _to_output(
        result: PricingCalculationResult,
        entities: list[PricingItem],
        data: CalculatePricingInput,
    ) -> CalculatePricingOutput:
        currency = entities[0].currency if entities else DEFAULT_CURRENCY
        after_discount = result.subtotal.subtract(result.total_discount)
        return CalculatePricingOutput(
            items=[
                CalculatedItem(
                    id=entity.id,
                    name=entity.name,
                    base_price=entity.base_price.amount,
                    quantity=entity.quantity,
                    total=entity.get_total_price().amount,
                    currency=entity.currency,
                )
                for entity in entities
            ],
            subtotal=result.subtotal.amount,
            discount=result.total_discount.amount,
            discount_rate=result.savings_rate,
            tax=result.total.subtract(after_discount).amount,
            tax_rate=data.tax_rate or Decimal(0),
            total=result.total.amount,
            currency=currency,
            calculated_at=now_iso(),
        )
