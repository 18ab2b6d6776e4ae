"""Command: summarize a saved scenario of selected rows."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from quotectl.commands._base import QuoteCommand
from quotectl.services.errors import ApplicationError
from quotectl.services.result import ServiceResult

if TYPE_CHECKING:
    from quotectl.commands._context import AppContext


@click.command(
    cls=QuoteCommand,
    examples=[
        "quotectl summarize scenario.json",
        "quotectl --json summarize scenario.toml",
        "quotectl -v summarize scenario.json",
    ],
)
@click.argument("scenario_file", type=click.Path(dir_okay=False, path_type=Path))
@click.pass_obj
def summarize(app: AppContext, scenario_file: Path) -> None:
    """One-time, monthly, yearly totals and savings for SCENARIO_FILE."""
    from quotectl.infrastructure.catalog import load_scenario

    try:
        scenario = load_scenario(scenario_file)
    except ApplicationError as exc:
        app.emit(ServiceResult.from_error("summarize", exc))
        return
    app.run("summarize", lambda svc: svc.summarize(scenario))
