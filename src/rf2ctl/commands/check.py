"""Command: hierarchy health check."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from rf2ctl.commands._base import VIEW_CHOICE, Rf2Command
from rf2ctl.domain.types import Characteristic

if TYPE_CHECKING:
    from rf2ctl.commands._context import AppContext


@click.command(
    cls=Rf2Command,
    examples="""\
  rf2ctl check
  rf2ctl check --view stated
  rf2ctl check --errors-only
  rf2ctl --json check --view inferred""",
)
@click.option(
    "--view",
    type=VIEW_CHOICE,
    default=None,
    help="Check one view only (default: both).",
)
@click.option(
    "--min-severity",
    type=click.Choice(["warning", "error"]),
    default="warning",
    help="Hide issues below this severity.",
)
@click.option("--errors-only", is_flag=True, help="Shortcut for --min-severity error.")
@click.pass_obj
def check(app: AppContext, view: str | None, min_severity: str, errors_only: bool) -> None:
    """Check for parentless concepts and is-a cycles."""
    from rf2ctl.services.check import CheckService

    characteristic = Characteristic(view) if view else None
    threshold = "error" if errors_only else min_severity
    app.emit(CheckService(app.workspace).check(characteristic, min_severity=threshold))
