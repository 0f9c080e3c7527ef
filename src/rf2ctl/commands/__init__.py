"""Subcommand modules for rf2ctl.

Provides register_commands() which uses deferred imports to keep
``rf2ctl --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register the graph group and the standalone commands on the root CLI group."""
    from rf2ctl.commands.check import check
    from rf2ctl.commands.compare import compare
    from rf2ctl.commands.graph import graph

    cli.add_command(graph)
    cli.add_command(check)
    cli.add_command(compare)
