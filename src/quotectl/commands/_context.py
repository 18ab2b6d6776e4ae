"""AppContext: shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``. Provides lazy catalog loading, QuoteService
construction, and centralized result emission (stdout/stderr routing
and exit codes).
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

import click

from quotectl.output.formatters import OutputSettings, format_result
from quotectl.services.errors import ApplicationError, InvalidInputError
from quotectl.services.result import ServiceResult

if TYPE_CHECKING:
    from quotectl.config.settings import QuoteSettings
    from quotectl.infrastructure.catalog import Catalog
    from quotectl.services.quote import QuoteService


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The catalog is read on first use so ``--help`` and ``--examples``
    never touch the filesystem.
    """

    def __init__(self, settings: QuoteSettings) -> None:
        self.settings = settings
        self._catalog: Catalog | None = None

        from quotectl.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def catalog(self) -> Catalog:
        """The configured catalog, loaded lazily.

        Raises:
            InvalidInputError: No catalog is configured or it cannot be read.
        """
        if self._catalog is None:
            from quotectl.infrastructure.catalog import load_catalog

            path = self.settings.catalog_path
            if path is None:
                raise InvalidInputError(
                    "catalog",
                    "no catalog configured (use --catalog, [catalog] path, or a catalog.json)",
                )
            self._catalog = load_catalog(path, self.settings.pricing.default_currency)
        return self._catalog

    def service(self) -> QuoteService:
        from quotectl.services.discounts import FlatRateDiscountResolver
        from quotectl.services.quote import QuoteService

        catalog = self.catalog
        return QuoteService(
            catalog.pricing_repository(),
            catalog.category_repository(),
            policy=self.settings.buckets.to_policy(),
            discount_resolver=FlatRateDiscountResolver(self.settings.discounts.code_rate),
            max_quantity=self.settings.pricing.max_quantity,
        )

    def run(self, op: str, call: Callable[[QuoteService], Awaitable[ServiceResult]]) -> None:
        """Build the service, await *call* on it, and emit the result.

        Catalog failures are reported under *op* like any other error.
        """
        try:
            service = self.service()
        except ApplicationError as exc:
            self.emit(ServiceResult.from_error(op, exc))
            return
        self.emit(asyncio.run(call(service)))

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings are emitted to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
