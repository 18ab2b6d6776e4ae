"""Command: price catalog items with an optional discount code and tax."""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING

import click

from quotectl.commands._base import DECIMAL, QuoteCommand

if TYPE_CHECKING:
    from quotectl.commands._context import AppContext


def parse_item_spec(spec: str) -> tuple[str, int | None]:
    """``"hosting=3"`` -> ``("hosting", 3)``; ``"hosting"`` -> ``("hosting", None)``."""
    item_id, sep, qty = spec.partition("=")
    if not sep:
        return item_id, None
    try:
        return item_id, int(qty)
    except ValueError:
        raise click.BadParameter(f"quantity in {spec!r} must be an integer") from None


@click.command(
    cls=QuoteCommand,
    examples=[
        "quotectl calculate setup-fee hosting=3",
        "quotectl calculate hosting=12 --tax-rate 8.5",
        "quotectl calculate setup-fee support=2 --discount-code LAUNCH",
        "quotectl --json calculate hosting=5",
    ],
)
@click.argument("items", nargs=-1, required=True)
@click.option("--discount-code", default=None, help="Discount code to apply.")
@click.option("--tax-rate", type=DECIMAL, default=None, help="Tax rate in percent (0-100).")
@click.pass_obj
def calculate(
    app: AppContext,
    items: tuple[str, ...],
    discount_code: str | None,
    tax_rate: Decimal | None,
) -> None:
    """Price ITEMS (each ``ID`` or ``ID=QTY``) from the catalog."""
    item_ids: list[str] = []
    quantities: dict[str, int] = {}
    for spec in items:
        item_id, quantity = parse_item_spec(spec)
        item_ids.append(item_id)
        if quantity is not None:
            quantities[item_id] = quantity

    app.run(
        "calculate",
        lambda svc: svc.calculate(
            item_ids,
            quantities=quantities,
            discount_code=discount_code,
            tax_rate=tax_rate,
        ),
    )
