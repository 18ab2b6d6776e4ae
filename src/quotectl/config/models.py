"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, quotectl.toml only contains
overrides. An empty file (or none at all) is a valid configuration.
"""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, Field

from quotectl.domain.items import MAX_ITEM_QUANTITY
from quotectl.domain.money import DEFAULT_CURRENCY
from quotectl.domain.units import ONE_TIME_UNITS, SETUP_CATEGORY_ID, BucketPolicy


class PricingConfig(BaseModel):
    """[pricing] section."""

    model_config = {"frozen": True}

    default_currency: str = DEFAULT_CURRENCY
    max_quantity: int = Field(default=MAX_ITEM_QUANTITY, ge=1, le=MAX_ITEM_QUANTITY)


class BucketsConfig(BaseModel):
    """[buckets] section."""

    model_config = {"frozen": True}

    setup_category_ids: list[str] = Field(default_factory=lambda: [SETUP_CATEGORY_ID])
    one_time_units: list[str] = Field(default_factory=lambda: sorted(ONE_TIME_UNITS))
    months_per_year: int = Field(default=12, ge=1)

    def to_policy(self) -> BucketPolicy:
        return BucketPolicy(
            setup_category_ids=frozenset(self.setup_category_ids),
            one_time_units=frozenset(self.one_time_units),
            months_per_year=self.months_per_year,
        )


class DiscountsConfig(BaseModel):
    """[discounts] section."""

    model_config = {"frozen": True}

    code_rate: Decimal = Field(default=Decimal(10), ge=0, le=100)


class CatalogConfig(BaseModel):
    """[catalog] section."""

    model_config = {"frozen": True}

    path: str | None = None


class QuoteConfig(BaseModel):
    """Root configuration composing all sections."""

    model_config = {"frozen": True}

    pricing: PricingConfig = Field(default_factory=PricingConfig)
    buckets: BucketsConfig = Field(default_factory=BucketsConfig)
    discounts: DiscountsConfig = Field(default_factory=DiscountsConfig)
    catalog: CatalogConfig = Field(default_factory=CatalogConfig)
