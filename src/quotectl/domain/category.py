"""Category entity: ordered grouping of pricing items.

Categories sort by ``order`` first and ``name`` second; that sequence
drives both display and per-category summation. Identity is the ``id``.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any

from quotectl.domain.errors import DomainError

CATEGORY_ID_MAX_LENGTH = 50
CATEGORY_NAME_MAX_LENGTH = 100


def require_text(value: Any, label: str, max_length: int) -> None:
    if not value or not isinstance(value, str):
        raise DomainError(f"{label} is required")
    if not value.strip():
        raise DomainError(f"{label} cannot be empty")
    if len(value) > max_length:
        raise DomainError(f"{label} cannot exceed {max_length} characters")


@dataclass(frozen=True, slots=True)
class Category:
    """A named, ordered grouping of pricing items. Equality is by ``id``."""

    id: str
    name: str = field(compare=False)
    description: str = field(default="", compare=False)
    order: int = field(default=0, compare=False)

    def __post_init__(self) -> None:
        require_text(self.id, "Category ID", CATEGORY_ID_MAX_LENGTH)
        require_text(self.name, "Category name", CATEGORY_NAME_MAX_LENGTH)
        if isinstance(self.order, bool) or not isinstance(self.order, int):
            raise DomainError("Order must be an integer")
        if self.order < 0:
            raise DomainError("Order cannot be negative")

    @property
    def sort_key(self) -> tuple[int, str]:
        return (self.order, self.name)

    @property
    def display_name(self) -> str:
        """Name prefixed by its order (``"2. Hosting"``) when order > 0."""
        if self.order > 0:
            return f"{self.order}. {self.name}"
        return self.name

    def has_description(self) -> bool:
        return bool(self.description.strip())

    def comes_before(self, other: Category) -> bool:
        return self.sort_key < other.sort_key

    def comes_after(self, other: Category) -> bool:
        return self.sort_key > other.sort_key

    def update_name(self, name: str) -> Category:
        return replace(self, name=name)

    def update_description(self, description: str) -> Category:
        return replace(self, description=description)

    def update_order(self, order: int) -> Category:
        return replace(self, order=order)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "order": self.order,
        }


def sort_categories(categories: list[Category]) -> list[Category]:
    """Return *categories* in display order without mutating the input."""
    return sorted(categories, key=lambda c: c.sort_key)
