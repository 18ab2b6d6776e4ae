"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO). The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING, Any

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from quotectl.domain.money import DEFAULT_CURRENCY, Money
from quotectl.domain.tiers import PricingTier, format_tier_range
from quotectl.output.console import create_console, get_output, style_for_bucket

if TYPE_CHECKING:
    from rich.console import Console

    from quotectl.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode.

    Lists print one id per line; priced results print the bottom line only.
    """
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    data = result.data
    currency = str(data.get("currency", DEFAULT_CURRENCY))
    if result.op == "calculate":
        return _money(data["total"], currency)
    if result.op == "summarize":
        return _money(data["total_project_cost"], currency)
    items = data.get("items")
    if isinstance(items, list):
        return "\n".join(str(item["id"]) for item in items if isinstance(item, dict))
    if "id" in data:
        return str(data["id"])
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _money(value: Any, currency: str) -> str:
    return Money(Decimal(str(value)), currency).format()


def _rate(value: Any) -> str:
    text = f"{Decimal(str(value)):f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return f"{text}%"


def _status_line(console: Console, result: ServiceResult) -> None:
    label = Text("OK", style="quote.ok")
    op = Text(f"  {result.op}", style="quote.op")
    console.print(label, op, end="")
    console.print()


def _field(console: Console, key: str, value: Any, style: str = "") -> None:
    k = Text(f"  {key}: ", style="quote.key")
    if not style and (key == "id" or key.endswith("_id")):
        style = "quote.id"
    console.print(k, Text(str(value), style=style), end="")
    console.print()


def _totals_table(rows: list[tuple[str, str, str]]) -> Table:
    table = Table(show_header=False, box=None, pad_edge=False)
    table.add_column("Label", style="quote.key")
    table.add_column("Amount", justify="right")
    for label, amount, style in rows:
        table.add_row(label, Text(amount, style=style))
    return table


def _render_meta(console: Console, result: ServiceResult) -> None:
    if not result.meta:
        return
    console.print()
    console.print(Text("  meta:", style="dim"))
    for k, v in result.meta.items():
        console.print(f"    {k}: {v}")


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="quote.error")
    op = Text(f"  {result.op}", style="quote.op")
    console.print(label, op, Text(" — "), msg)
    if verbose and err:
        console.print(Text(f"  code: {err.code}", style="dim"))
        if err.detail:
            console.print(Text("  detail:", style="dim"))
            for k, v in err.detail.items():
                console.print(f"    {k}: {v}")


# ── Pricing renderers ─────────────────────────────────────────────────


def _render_calculate(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    currency = d["currency"]
    _status_line(console, result)

    table = Table(show_header=True, pad_edge=False, expand=False)
    table.add_column("ID", style="quote.id", no_wrap=True)
    table.add_column("Item", style="quote.name")
    table.add_column("Unit Price", justify="right")
    table.add_column("Qty", justify="right")
    table.add_column("Total", justify="right", style="quote.money")
    for item in d["items"]:
        table.add_row(
            item["id"],
            item["name"],
            _money(item["base_price"], item["currency"]),
            str(item["quantity"]),
            _money(item["total"], item["currency"]),
        )
    console.print(table)

    rows = [("Subtotal", _money(d["subtotal"], currency), "")]
    if d["discount"]:
        label = f"Discount ({_rate(d['discount_rate'])})"
        rows.append((label, f"-{_money(d['discount'], currency)}", "quote.savings"))
    if d["tax_rate"]:
        rows.append((f"Tax ({_rate(d['tax_rate'])})", _money(d["tax"], currency), ""))
    rows.append(("Total", _money(d["total"], currency), "quote.total"))
    console.print(_totals_table(rows))

    if verbose:
        _field(console, "calculated_at", d["calculated_at"])
        _render_meta(console, result)


def _render_item_table(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    items = result.data.get("items", [])
    table = Table(show_header=True, pad_edge=False, expand=False)
    table.add_column("ID", style="quote.id", no_wrap=True)
    table.add_column("Name", style="quote.name")
    table.add_column("Category")
    table.add_column("Unit")
    table.add_column("Price", justify="right", style="quote.money")
    if verbose:
        table.add_column("Pricing", style="dim")
    for item in items:
        price = _money(item["base_price"], item["currency"])
        if item.get("tiers"):
            lowest = min(t["unit_price"] for t in item["tiers"])
            price = f"from {_money(lowest, item['currency'])}"
        row = [item["id"], item["name"], item["category"]["name"], item.get("unit", ""), price]
        if verbose:
            row.append(str(item.get("pricing_type", "")))
        table.add_row(*row)
    console.print(table)
    console.print(f"\n{result.data.get('total', len(items))} items")


def _render_single_item(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    currency = d["currency"]
    lines = [
        f"category: {d['category']['name']}",
        f"price: {_money(d['base_price'], currency)}",
        f"pricing: {d.get('pricing_type', '')}",
    ]
    if d.get("unit"):
        lines.append(f"unit: {d['unit']}")
    for tier in d.get("tiers", []):
        band = format_tier_range(
            PricingTier(
                min_quantity=tier["min_quantity"],
                max_quantity=tier.get("max_quantity"),
                unit_price=Decimal(str(tier["unit_price"])),
            )
        )
        lines.append(f"  {band}: {_money(tier['unit_price'], currency)}")
    content = "\n".join(lines)
    if d.get("description"):
        content += f"\n\n{d['description'].strip()}"
    title = f"{d['id']} — {d['name']}"
    console.print(Panel(content, title=title, border_style="dim", expand=False))


def _render_summary(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    currency = d["currency"]
    savings = d["savings"]
    _status_line(console, result)

    if d["categories"]:
        table = Table(show_header=True, pad_edge=False, expand=False)
        table.add_column("Category", style="quote.name")
        table.add_column("Items", justify="right")
        table.add_column("Subtotal", justify="right", style="quote.money")
        for entry in d["categories"]:
            table.add_row(entry["name"], str(entry["item_count"]), _money(entry["total"], currency))
        console.print(table)

    if verbose and d["rows"]:
        rows_table = Table(show_header=True, pad_edge=False, expand=False)
        rows_table.add_column("Item", style="quote.name")
        rows_table.add_column("Bucket")
        rows_table.add_column("Qty", justify="right")
        rows_table.add_column("Before", justify="right")
        rows_table.add_column("Total", justify="right", style="quote.money")
        for row in d["rows"]:
            total = "FREE" if row["is_free"] else _money(row["total"], currency)
            rows_table.add_row(
                row["name"],
                Text(row["bucket"], style=style_for_bucket(row["bucket"])),
                str(row["quantity"]),
                _money(row["before_discount"], currency),
                Text(total, style="quote.free" if row["is_free"] else ""),
            )
        console.print(rows_table)

    rows = [
        ("One-time", _money(d["one_time_total"], currency), ""),
        ("Monthly", _money(d["monthly_total"], currency), ""),
        ("Yearly", _money(d["yearly_total"], currency), ""),
        ("Total project cost", _money(d["total_project_cost"], currency), "quote.total"),
    ]
    if savings["total_savings"]:
        rows.append(
            (
                f"Savings ({_rate(savings['savings_rate'])})",
                _money(savings["total_savings"], currency),
                "quote.savings",
            )
        )
    console.print(_totals_table(rows))

    if verbose:
        for key in (
            "original_total",
            "free_item_savings",
            "discount_savings",
            "row_discount_total",
            "global_discount_total",
        ):
            _field(console, key, _money(savings[key], currency))


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)
    if verbose:
        _render_meta(console, result)


_OP_RENDERERS: dict[str, Any] = {
    "calculate": _render_calculate,
    "list_items": _render_item_table,
    "get_item": _render_single_item,
    "summarize": _render_summary,
}
