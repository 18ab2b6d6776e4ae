"""Click base classes that add an on-demand ``--examples`` flag.

``--help`` stays short; ``quotectl calculate --examples`` prints sample
invocations and exits before any catalog is loaded. Also holds the
``DECIMAL`` parameter type for money and rate options.
"""

from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal, InvalidOperation
from typing import Any

import click


def _examples_option(examples: Sequence[str]) -> click.Option:
    def show(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value or ctx.resilient_parsing:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        for line in examples:
            click.echo(f"  {line}")
        ctx.exit(0)

    return click.Option(
        ["--examples"],
        is_flag=True,
        expose_value=False,
        is_eager=True,
        callback=show,
        help="Show usage examples.",
    )


class _ExamplesMixin:
    """Accept ``examples=[...]`` and register the eager flag when given."""

    params: list[click.Parameter]

    def _init_examples(self, examples: Sequence[str] | None) -> None:
        self.examples = tuple(examples or ())
        if self.examples:
            self.params.append(_examples_option(self.examples))


class QuoteCommand(_ExamplesMixin, click.Command):
    def __init__(self, *args: Any, examples: Sequence[str] | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._init_examples(examples)


class QuoteGroup(_ExamplesMixin, click.Group):
    """Group whose subcommands default to :class:`QuoteCommand`."""

    command_class = QuoteCommand

    def __init__(self, *args: Any, examples: Sequence[str] | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._init_examples(examples)


class DecimalParamType(click.ParamType):
    """Parse an option value straight to :class:`~decimal.Decimal`."""

    name = "decimal"

    def convert(
        self, value: Any, param: click.Parameter | None, ctx: click.Context | None
    ) -> Decimal:
        if isinstance(value, Decimal):
            return value
        try:
            result = Decimal(str(value).strip())
        except InvalidOperation:
            self.fail(f"{value!r} is not a valid number", param, ctx)
        if not result.is_finite():
            self.fail(f"{value!r} is not a finite number", param, ctx)
        return result


DECIMAL = DecimalParamType()
