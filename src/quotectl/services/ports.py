"""Repository ports consumed by the use cases.

Implementations live in :mod:`quotectl.infrastructure.repositories`.
All methods are coroutines; the calculation itself stays synchronous.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Protocol

from quotectl.domain.category import Category
from quotectl.domain.items import PricingItem


class PricingRepository(Protocol):
    async def find_by_id(self, item_id: str) -> PricingItem | None: ...

    async def find_by_ids(self, item_ids: list[str]) -> list[PricingItem]: ...

    async def find_all(self) -> list[PricingItem]: ...

    async def find_by_category(self, category_id: str) -> list[PricingItem]: ...

    async def find_by_name(self, name: str) -> list[PricingItem]:
        """Items whose name contains *name*, case-insensitively."""
        ...

    async def find_by_price_range(
        self, min_price: Decimal, max_price: Decimal, currency: str
    ) -> list[PricingItem]: ...

    async def save(self, item: PricingItem) -> None: ...

    async def delete(self, item_id: str) -> None: ...

    async def exists(self, item_id: str) -> bool: ...

    async def count(self) -> int: ...

    async def count_by_category(self, category_id: str) -> int: ...


class CategoryRepository(Protocol):
    async def find_by_id(self, category_id: str) -> Category | None: ...

    async def find_all(self) -> list[Category]: ...

    async def find_by_name(self, name: str) -> list[Category]: ...

    async def save(self, category: Category) -> None: ...

    async def delete(self, category_id: str) -> None: ...

    async def exists(self, category_id: str) -> bool: ...

    async def is_name_unique(self, name: str, exclude_id: str | None = None) -> bool: ...

    async def count(self) -> int: ...
