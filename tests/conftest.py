"""Shared pytest fixtures and test helpers for quotectl tests."""

from __future__ import annotations

import json
from collections.abc import Callable
from decimal import Decimal
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from quotectl.domain.category import Category
from quotectl.domain.items import PricingItem
from quotectl.domain.money import Money
from quotectl.domain.tiers import PricingTier, TierSchedule
from quotectl.domain.units import PricingType
from quotectl.infrastructure.repositories.memory import (
    InMemoryCategoryRepository,
    InMemoryPricingRepository,
)

SETUP = Category(id="setup", name="Setup", order=1)
HOSTING = Category(id="hosting", name="Hosting", order=2)
CARDS = Category(id="cards", name="Cards", order=3)

SAMPLE_CATALOG: dict[str, Any] = {
    "categories": [
        {"id": "hosting", "name": "Hosting", "order": 2},
        {"id": "setup", "name": "Setup", "order": 1},
        {"id": "cards", "name": "Cards", "order": 3},
    ],
    "items": [
        {
            "id": "setup-fee",
            "name": "Setup Fee",
            "description": "Initial environment configuration",
            "base_price": 500,
            "category": "setup",
            "unit": "Per Setup",
        },
        {
            "id": "hosting",
            "name": "Cloud Hosting",
            "base_price": 200,
            "category": "hosting",
            "unit": "Per Month",
            "pricing_type": "recurring",
        },
        {
            "id": "support",
            "name": "Support Plan",
            "base_price": 50,
            "category": "hosting",
            "unit": "Per User",
            "pricing_type": "recurring",
        },
        {
            "id": "card-issuing",
            "name": "Card Issuing",
            "base_price": 5,
            "category": "cards",
            "unit": "Per Card",
            "pricing_type": "tiered",
            "tiers": [
                {"min_quantity": 1, "max_quantity": 10, "unit_price": 5},
                {"min_quantity": 11, "unit_price": 4},
            ],
            "quantity_source_fields": ["debit_cards", "credit_cards"],
        },
    ],
}


def build_item(
    item_id: str = "item",
    base_price: Decimal | int | str = 100,
    *,
    quantity: int = 1,
    category: Category = HOSTING,
    currency: str = "USD",
    unit: str = "",
    pricing_type: PricingType = PricingType.ONE_TIME,
    tiers: list[PricingTier] | None = None,
    **kwargs: Any,
) -> PricingItem:
    """PricingItem with sensible defaults; ``name`` defaults to the id."""
    return PricingItem(
        id=item_id,
        name=kwargs.pop("name", item_id.title()),
        description=kwargs.pop("description", ""),
        base_price=Money(Decimal(str(base_price)), currency),
        category=category,
        quantity=quantity,
        unit=unit,
        pricing_type=pricing_type,
        tiers=TierSchedule(tiers or []),
        **kwargs,
    )


def volume_tiers() -> list[PricingTier]:
    """``1-10 @ 5``, ``11+ @ 4``."""
    return [
        PricingTier(min_quantity=1, max_quantity=10, unit_price=Decimal(5)),
        PricingTier(min_quantity=11, max_quantity=None, unit_price=Decimal(4)),
    ]


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def make_item() -> Callable[..., PricingItem]:
    return build_item


@pytest.fixture
def catalog_items() -> list[PricingItem]:
    """The SAMPLE_CATALOG items as domain objects."""
    return [
        build_item("setup-fee", 500, category=SETUP, unit="Per Setup", name="Setup Fee"),
        build_item(
            "hosting",
            200,
            unit="Per Month",
            pricing_type=PricingType.RECURRING,
            name="Cloud Hosting",
        ),
        build_item(
            "support",
            50,
            unit="Per User",
            pricing_type=PricingType.RECURRING,
            name="Support Plan",
        ),
        build_item(
            "card-issuing",
            5,
            category=CARDS,
            unit="Per Card",
            pricing_type=PricingType.TIERED,
            tiers=volume_tiers(),
            name="Card Issuing",
            quantity_source_fields=("debit_cards", "credit_cards"),
        ),
    ]


@pytest.fixture
def pricing_repo(catalog_items: list[PricingItem]) -> InMemoryPricingRepository:
    return InMemoryPricingRepository(catalog_items)


@pytest.fixture
def category_repo() -> InMemoryCategoryRepository:
    return InMemoryCategoryRepository([HOSTING, SETUP, CARDS])


@pytest.fixture
def catalog_file(tmp_path: Path) -> Path:
    """SAMPLE_CATALOG written as catalog.json in a temp directory."""
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps(SAMPLE_CATALOG), encoding="utf-8")
    return path


@pytest.fixture
def write_json(tmp_path: Path) -> Callable[[str, Any], Path]:
    """Write *data* as JSON to ``tmp_path / name`` and return the path."""

    def _write(name: str, data: Any) -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def _isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run in a temp CWD with no config discovery leaking in from the environment.

    Use via ``@pytest.mark.usefixtures("_isolated_cwd")`` on command test classes.
    """
    monkeypatch.chdir(tmp_path)
    for var in ("QUOTECTL_CONFIG", "QUOTECTL_CATALOG__PATH"):
        monkeypatch.delenv(var, raising=False)
