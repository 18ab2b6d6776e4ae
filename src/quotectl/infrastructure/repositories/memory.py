"""Dict-backed repositories implementing the pricing and category ports.

Iteration order is insertion order; saving an existing id replaces it in
place.
"""

from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal

from quotectl.domain.category import Category
from quotectl.domain.items import PricingItem


class InMemoryPricingRepository:
    """Pricing items held in memory, keyed by id."""

    def __init__(self, items: Iterable[PricingItem] = ()) -> None:
        self._items: dict[str, PricingItem] = {item.id: item for item in items}

    async def find_by_id(self, item_id: str) -> PricingItem | None:
        return self._items.get(item_id)

    async def find_by_ids(self, item_ids: list[str]) -> list[PricingItem]:
        """Known items among *item_ids*, in request order, without duplicates."""
        seen: set[str] = set()
        found = []
        for item_id in item_ids:
            item = self._items.get(item_id)
            if item is not None and item_id not in seen:
                seen.add(item_id)
                found.append(item)
        return found

    async def find_all(self) -> list[PricingItem]:
        return list(self._items.values())

    async def find_by_category(self, category_id: str) -> list[PricingItem]:
        return [i for i in self._items.values() if i.belongs_to_category(category_id)]

    async def find_by_name(self, name: str) -> list[PricingItem]:
        needle = name.lower()
        return [i for i in self._items.values() if needle in i.name.lower()]

    async def find_by_price_range(
        self, min_price: Decimal, max_price: Decimal, currency: str
    ) -> list[PricingItem]:
        code = currency.upper()
        return [
            i
            for i in self._items.values()
            if i.currency == code and min_price <= i.base_price.amount <= max_price
        ]

    async def save(self, item: PricingItem) -> None:
        self._items[item.id] = item

    async def delete(self, item_id: str) -> None:
        self._items.pop(item_id, None)

    async def exists(self, item_id: str) -> bool:
        return item_id in self._items

    async def count(self) -> int:
        return len(self._items)

    async def count_by_category(self, category_id: str) -> int:
        return len(await self.find_by_category(category_id))


class InMemoryCategoryRepository:
    """Categories held in memory; ``find_all`` returns display order."""

    def __init__(self, categories: Iterable[Category] = ()) -> None:
        self._categories: dict[str, Category] = {c.id: c for c in categories}

    async def find_by_id(self, category_id: str) -> Category | None:
        return self._categories.get(category_id)

    async def find_all(self) -> list[Category]:
        return sorted(self._categories.values(), key=lambda c: c.sort_key)

    async def find_by_name(self, name: str) -> list[Category]:
        needle = name.lower()
        return [c for c in self._categories.values() if needle in c.name.lower()]

    async def save(self, category: Category) -> None:
        self._categories[category.id] = category

    async def delete(self, category_id: str) -> None:
        self._categories.pop(category_id, None)

    async def exists(self, category_id: str) -> bool:
        return category_id in self._categories

    async def is_name_unique(self, name: str, exclude_id: str | None = None) -> bool:
        """True unless another category already uses *name* (case-insensitive)."""
        key = name.strip().lower()
        return not any(
            c.name.strip().lower() == key and c.id != exclude_id
            for c in self._categories.values()
        )

    async def count(self) -> int:
        return len(self._categories)
