"""Command: compare stated groups against inferred groups."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from rf2ctl.commands._base import Rf2Command

if TYPE_CHECKING:
    from rf2ctl.commands._context import AppContext


@click.command(
    cls=Rf2Command,
    examples="""\
  rf2ctl compare
  rf2ctl compare --concept 73211009
  rf2ctl compare --top 50
  rf2ctl --json compare""",
)
@click.option("--concept", "concept_id", type=int, default=None, help="Compare one concept.")
@click.option("--top", type=int, default=None, help="Max unmatched groups listed.")
@click.pass_obj
def compare(app: AppContext, concept_id: int | None, top: int | None) -> None:
    """Find stated groups with no content-equal inferred group."""
    from rf2ctl.services.compare import CompareService

    app.emit(CompareService(app.workspace).compare(concept_id, top=top))
