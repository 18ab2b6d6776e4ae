"""Command group: browse the pricing catalog."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from quotectl.commands._base import QuoteGroup

if TYPE_CHECKING:
    from quotectl.commands._context import AppContext


@click.group(
    cls=QuoteGroup,
    examples=[
        "quotectl items list",
        "quotectl items list --category hosting",
        "quotectl items show hosting",
    ],
)
def items() -> None:
    """List and inspect catalog items."""


@items.command(
    name="list",
    examples=[
        "quotectl items list",
        "quotectl items list --category setup",
        "quotectl items list --search card",
        "quotectl -q items list --category hosting",
    ],
)
@click.option("--category", "category_id", default=None, help="Only items in this category.")
@click.option("--search", "search_term", default=None, help="Only items whose name matches.")
@click.pass_obj
def list_items(app: AppContext, category_id: str | None, search_term: str | None) -> None:
    """List catalog items in category order."""
    app.run(
        "list_items",
        lambda svc: svc.list_items(category_id=category_id, search_term=search_term),
    )


@items.command(examples=["quotectl items show hosting", "quotectl --json items show setup-fee"])
@click.argument("item_id")
@click.pass_obj
def show(app: AppContext, item_id: str) -> None:
    """Show one catalog item, including its price tiers."""
    app.run("get_item", lambda svc: svc.get_item(item_id))
