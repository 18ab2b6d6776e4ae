"""Read-only catalog use cases: list items, fetch one item by id."""

from __future__ import annotations

import structlog

from quotectl.domain.items import ITEM_ID_MAX_LENGTH, PricingItem
from quotectl.services.contracts import (
    GetPricingItemByIdInput,
    GetPricingItemByIdOutput,
    GetPricingItemsInput,
    GetPricingItemsOutput,
)
from quotectl.services.errors import ApplicationError, ValidationError
from quotectl.services.mappers import item_to_data
from quotectl.services.ports import PricingRepository

logger = structlog.get_logger(__name__)

SEARCH_TERM_MAX_LENGTH = 100


def _catalog_sort_key(item: PricingItem) -> tuple[int, str, str]:
    return (item.category.order, item.category.name, item.name)


class GetPricingItemsUseCase:
    """List catalog items, optionally filtered by category and name.

    Results are ordered by category order, category name, then item name.
    """

    def __init__(self, repository: PricingRepository) -> None:
        self._repository = repository

    async def execute(self, data: GetPricingItemsInput | None = None) -> GetPricingItemsOutput:
        data = data or GetPricingItemsInput()
        self._validate(data)
        try:
            items = sorted(await self._fetch(data), key=_catalog_sort_key)
            payload = [item_to_data(item) for item in items]
        except ApplicationError:
            raise
        except Exception as exc:
            raise ApplicationError(f"Failed to retrieve pricing items: {exc}") from exc
        logger.debug("items.listed", count=len(payload), category_id=data.category_id)
        return GetPricingItemsOutput(items=payload, total=len(payload))

    @staticmethod
    def _validate(data: GetPricingItemsInput) -> None:
        if data.category_id is not None and not data.category_id.strip():
            raise ValidationError("category_id", "Category ID cannot be empty")
        if data.search_term is not None:
            if not data.search_term.strip():
                raise ValidationError("search_term", "Search term cannot be empty")
            if len(data.search_term) > SEARCH_TERM_MAX_LENGTH:
                raise ValidationError(
                    "search_term",
                    f"Search term cannot exceed {SEARCH_TERM_MAX_LENGTH} characters",
                )

    async def _fetch(self, data: GetPricingItemsInput) -> list[PricingItem]:
        try:
            if data.category_id:
                items = await self._repository.find_by_category(data.category_id)
            elif data.search_term:
                return await self._repository.find_by_name(data.search_term.strip())
            else:
                return await self._repository.find_all()
        except Exception as exc:
            raise ApplicationError(f"Failed to fetch items from repository: {exc}") from exc
        if data.search_term:
            term = data.search_term.strip().lower()
            items = [item for item in items if term in item.name.lower()]
        return items


class GetPricingItemByIdUseCase:
    """Fetch one catalog item; ``item`` is None when the id is unknown."""

    def __init__(self, repository: PricingRepository) -> None:
        self._repository = repository

    async def execute(self, data: GetPricingItemByIdInput) -> GetPricingItemByIdOutput:
        self._validate(data)
        try:
            item = await self._repository.find_by_id(data.item_id)
        except Exception as exc:
            raise ApplicationError(f"Failed to fetch item from repository: {exc}") from exc
        return GetPricingItemByIdOutput(item=item_to_data(item) if item else None)

    @staticmethod
    def _validate(data: GetPricingItemByIdInput) -> None:
        if not data.item_id or not data.item_id.strip():
            raise ValidationError("item_id", "Item ID is required")
        if len(data.item_id) > ITEM_ID_MAX_LENGTH:
            raise ValidationError(
                "item_id", f"Item ID cannot exceed {ITEM_ID_MAX_LENGTH} characters"
            )
