"""Command group: concept graph queries."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from rf2ctl.commands._base import Rf2Group, view_option
from rf2ctl.services.graph import GraphService

if TYPE_CHECKING:
    from rf2ctl.commands._context import AppContext
    from rf2ctl.domain.types import Characteristic

_GRAPH_EXAMPLES = """\
  rf2ctl graph concept 73211009
  rf2ctl graph ancestor 73211009 138875005 --view inferred
  rf2ctl graph groups 73211009
  rf2ctl graph hash 73211009 1
  rf2ctl graph match 73211009 --group 1 --type 363698007
  rf2ctl graph equivalent 73211009 1 --type 363698007 --destination 113331007"""


@click.group(cls=Rf2Group, examples=_GRAPH_EXAMPLES)
@click.pass_obj
def graph(app: AppContext) -> None:
    """Query the stated and inferred concept graphs."""


@graph.command(
    examples="""\
  rf2ctl graph concept 73211009
  rf2ctl --json graph concept 73211009 --view inferred"""
)
@click.argument("concept_id", type=int)
@view_option()
@click.pass_obj
def concept(app: AppContext, concept_id: int, view: Characteristic) -> None:
    """Show a concept's parents and group summary."""
    app.emit(GraphService(app.workspace).concept(concept_id, view))


@graph.command(
    examples="""\
  rf2ctl graph ancestor 73211009 404684003
  rf2ctl -q graph ancestor 73211009 138875005 --view inferred"""
)
@click.argument("concept_id", type=int)
@click.argument("target_id", type=int)
@view_option()
@click.pass_obj
def ancestor(app: AppContext, concept_id: int, target_id: int, view: Characteristic) -> None:
    """Test whether TARGET_ID is an ancestor of CONCEPT_ID."""
    app.emit(GraphService(app.workspace).ancestor(concept_id, target_id, view))


@graph.command(
    examples="""\
  rf2ctl graph groups 73211009
  rf2ctl --json graph groups 73211009 --view inferred"""
)
@click.argument("concept_id", type=int)
@view_option()
@click.pass_obj
def groups(app: AppContext, concept_id: int, view: Characteristic) -> None:
    """List a concept's relationship groups with their content hashes."""
    app.emit(GraphService(app.workspace).groups(concept_id, view))


@graph.command(
    name="hash",
    examples="""\
  rf2ctl graph hash 73211009 1
  rf2ctl -q graph hash 73211009 2 --view inferred""",
)
@click.argument("concept_id", type=int)
@click.argument("group", type=int)
@view_option()
@click.pass_obj
def group_hash(app: AppContext, concept_id: int, group: int, view: Characteristic) -> None:
    """Compute the content hash of one relationship group."""
    app.emit(GraphService(app.workspace).group_hash(concept_id, group, view))


@graph.command(
    examples="""\
  rf2ctl graph match 73211009 --group 1
  rf2ctl graph match 73211009 --group 1 --type 363698007
  rf2ctl graph match 73211009 --group 1 --type 363698007 --destination 113331007
  rf2ctl graph match 73211009 --view inferred --group 1 --type 363698007 --ancestor 123037004"""
)
@click.argument("concept_id", type=int)
@click.option("--group", type=int, required=True, help="Relationship group (0 = ungrouped).")
@click.option("--type", "type_id", type=int, default=None, help="Attribute type id.")
@click.option("--destination", "destination_id", type=int, default=None, help="Exact destination.")
@click.option(
    "--ancestor",
    "ancestor_id",
    type=int,
    default=None,
    help="Destination must descend from this concept.",
)
@view_option()
@view_option(
    "--ancestor-view",
    "ancestor_view",
    help_text="View the --ancestor concept is resolved in.",
)
@click.pass_obj
def match(
    app: AppContext,
    concept_id: int,
    group: int,
    type_id: int | None,
    destination_id: int | None,
    ancestor_id: int | None,
    view: Characteristic,
    ancestor_view: Characteristic,
) -> None:
    """Filter a concept's relationships by group, type, and destination."""
    app.emit(
        GraphService(app.workspace).match(
            concept_id,
            view,
            group=group,
            type_id=type_id,
            destination_id=destination_id,
            ancestor_id=ancestor_id,
            ancestor_characteristic=ancestor_view,
        )
    )


@graph.command(
    examples="""\
  rf2ctl graph equivalent 73211009 1 --type 363698007 --destination 113331007
  rf2ctl --json graph equivalent 73211009 2 --type 116676008 --destination 72704001 \\
      --source inferred --target stated"""
)
@click.argument("concept_id", type=int)
@click.argument("group", type=int)
@click.option("--type", "type_id", type=int, required=True, help="Attribute type id.")
@click.option("--destination", "destination_id", type=int, required=True, help="Destination id.")
@view_option("--source", "source", help_text="View the group is hashed in.")
@view_option("--target", "target", default="inferred", help_text="View searched for a match.")
@click.pass_obj
def equivalent(
    app: AppContext,
    concept_id: int,
    group: int,
    type_id: int,
    destination_id: int,
    source: Characteristic,
    target: Characteristic,
) -> None:
    """Find a relationship's counterpart in a content-equal group of the other view."""
    app.emit(
        GraphService(app.workspace).equivalent(
            concept_id,
            group,
            type_id=type_id,
            destination_id=destination_id,
            source=source,
            target=target,
        )
    )
