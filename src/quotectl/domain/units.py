"""Pricing types, billing units, and one-time vs. monthly classification.

Billing unit strings come from the catalog in several spellings
(``"Per Setup"``, ``"per_setup"``, ``"onetime"``); they are normalized to
lower-case, space-separated words before classification.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import StrEnum


class PricingType(StrEnum):
    """How an item's price is expressed in the catalog."""

    ONE_TIME = "one_time"
    RECURRING = "recurring"
    PER_UNIT = "per_unit"
    TIERED = "tiered"


class BillingBucket(StrEnum):
    """Summary bucket a selected row is totalled into."""

    ONE_TIME = "one_time"
    MONTHLY = "monthly"


class UnitCategory(StrEnum):
    """Billing frequency family of a unit."""

    ONE_TIME = "one-time"
    MONTHLY_RECURRING = "monthly-recurring"
    TRANSACTION_BASED = "transaction-based"
    EVENT_ACTIVITY_BASED = "event-activity-based"
    UNKNOWN = "unknown"


ONE_TIME_UNITS: frozenset[str] = frozenset(
    {"per project", "per setup", "onetime", "per installation"}
)
MONTHLY_RECURRING_UNITS: frozenset[str] = frozenset({"per user"})
TRANSACTION_BASED_UNITS: frozenset[str] = frozenset({"per transaction"})
EVENT_ACTIVITY_BASED_UNITS: frozenset[str] = frozenset({"per card", "per item"})

SETUP_CATEGORY_ID = "setup"

_UNIT_CATEGORY_DESCRIPTIONS: dict[UnitCategory, str] = {
    UnitCategory.ONE_TIME: "Calculated once (setup fees, configurations, changes)",
    UnitCategory.MONTHLY_RECURRING: "Calculated per month (service fees, hosting, user access)",
    UnitCategory.TRANSACTION_BASED: (
        "Calculated per transaction or token (processing, API calls, SMS)"
    ),
    UnitCategory.EVENT_ACTIVITY_BASED: (
        "Calculated per event (card creation, deliveries, files, cases)"
    ),
    UnitCategory.UNKNOWN: "Unknown billing frequency",
}


def normalize_unit(unit: str) -> str:
    """``"Per_Setup"`` -> ``"per setup"``."""
    return re.sub(r"[\s_\-]+", " ", unit).strip().lower()


def unit_category(unit: str) -> UnitCategory:
    key = normalize_unit(unit)
    if key in ONE_TIME_UNITS:
        return UnitCategory.ONE_TIME
    if key in MONTHLY_RECURRING_UNITS:
        return UnitCategory.MONTHLY_RECURRING
    if key in TRANSACTION_BASED_UNITS:
        return UnitCategory.TRANSACTION_BASED
    if key in EVENT_ACTIVITY_BASED_UNITS:
        return UnitCategory.EVENT_ACTIVITY_BASED
    return UnitCategory.UNKNOWN


def unit_category_description(unit: str) -> str:
    return _UNIT_CATEGORY_DESCRIPTIONS[unit_category(unit)]


@dataclass(frozen=True)
class BucketPolicy:
    """Rules deciding whether a row is billed once or monthly.

    A row is one-time when its item's category id is one of
    *setup_category_ids* or its unit normalizes into *one_time_units*.
    Everything else is monthly.
    """

    setup_category_ids: frozenset[str] = field(
        default_factory=lambda: frozenset({SETUP_CATEGORY_ID})
    )
    one_time_units: frozenset[str] = ONE_TIME_UNITS
    months_per_year: int = 12

    def __post_init__(self) -> None:
        object.__setattr__(self, "setup_category_ids", frozenset(self.setup_category_ids))
        object.__setattr__(
            self,
            "one_time_units",
            frozenset(normalize_unit(u) for u in self.one_time_units),
        )

    def is_one_time_unit(self, unit: str) -> bool:
        return normalize_unit(unit) in self.one_time_units

    def classify(self, category_id: str, unit: str) -> BillingBucket:
        if category_id in self.setup_category_ids or self.is_one_time_unit(unit):
            return BillingBucket.ONE_TIME
        return BillingBucket.MONTHLY
