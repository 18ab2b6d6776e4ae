"""Quantities derived from a client configuration map.

An item may name client-config fields (``monthly_authorizations``,
``debit_cards``, ...) whose values drive its quantity. Numeric values are
summed, booleans count as 1 or 0, anything else is ignored. Items may also
name trigger fields that add them to a scenario outright.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from decimal import ROUND_FLOOR, Decimal
from typing import Any

from quotectl.domain.items import PricingItem

CLIENT_FIELD_LABELS: dict[str, str] = {
    "client_name": "Client Name",
    "project_name": "Project Name",
    "prepared_by": "Prepared By",
    "has_debit_cards": "Debit/Prepaid/Virtual Cards Enabled",
    "has_credit_cards": "Credit Cards Enabled",
    "debit_cards": "Number of Debit/Prepaid/Virtual Cards",
    "credit_cards": "Number of Credit Cards",
    "monthly_authorizations": "Monthly Authorizations",
    "monthly_settlements": "Monthly Settlements",
    "monthly_3ds": "Monthly 3DS Transactions",
    "monthly_sms": "Monthly SMS Messages",
    "monthly_notifications": "Monthly Notifications",
    "monthly_deliveries": "Monthly Deliveries",
}


def _config_value(value: Any) -> Decimal:
    if isinstance(value, bool):
        return Decimal(1) if value else Decimal(0)
    if isinstance(value, int | Decimal):
        return Decimal(value)
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(0)


def config_based_quantity(item: PricingItem, client_config: Mapping[str, Any]) -> int:
    """Quantity for *item* from *client_config*, or 1 when it has no source fields.

    The summed values are scaled by the item's multiplier and floored to a
    whole, non-negative quantity.
    """
    if not item.quantity_source_fields:
        return 1
    total = sum(
        (_config_value(client_config.get(name)) for name in item.quantity_source_fields),
        Decimal(0),
    )
    scaled = (total * item.quantity_multiplier).to_integral_value(rounding=ROUND_FLOOR)
    return max(0, int(scaled))


def quantity_source_description(
    item: PricingItem, labels: Mapping[str, str] = CLIENT_FIELD_LABELS
) -> str | None:
    """Human-readable origin of an auto-calculated quantity, or None."""
    if not item.quantity_source_fields:
        return None
    combined = " + ".join(
        labels.get(name, f"Dynamic Field ({name})") for name in item.quantity_source_fields
    )
    if item.quantity_multiplier == 1:
        return f"Automatically calculated from: {combined}"
    multiplier = f"{item.quantity_multiplier.normalize():f}"
    return f"Automatically calculated from: ({combined}) × {multiplier}"


def is_trigger_set(value: Any) -> bool:
    """True for ``True``, a number above zero, or a non-blank string."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int | float | Decimal):
        return value > 0
    if isinstance(value, str):
        return bool(value.strip())
    return False


def auto_add_items(
    selected: Iterable[str],
    catalog: Iterable[PricingItem],
    client_config: Mapping[str, Any],
) -> list[PricingItem]:
    """Catalog items that *client_config* pulls into a scenario.

    An item qualifies when any of its ``auto_add_trigger_fields`` is set
    (see :func:`is_trigger_set`). Ids in *selected* are skipped and each
    item is returned once, in catalog order.
    """
    seen = set(selected)
    added: list[PricingItem] = []
    for item in catalog:
        if item.id in seen:
            continue
        if any(is_trigger_set(client_config.get(f)) for f in item.auto_add_trigger_fields):
            seen.add(item.id)
            added.append(item)
    return added
