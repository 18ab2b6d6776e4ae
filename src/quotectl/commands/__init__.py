"""Subcommand modules for quotectl.

Provides register_commands() which uses deferred imports to keep
``quotectl --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register the ``items`` group and the standalone commands on the root group."""
    from quotectl.commands.calculate import calculate
    from quotectl.commands.items import items
    from quotectl.commands.summarize import summarize

    cli.add_command(items)
    cli.add_command(calculate)
    cli.add_command(summarize)
