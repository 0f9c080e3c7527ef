"""Concept — a node in one view's concept graph.

A concept owns its outgoing attribute relationships (any type) and its
direct is-a parents. Concepts only accumulate state: parents and
attributes are append-only and ``max_group_id`` never decreases.

INVARIANT: parents are only ever added from is-a relationships whose
source is this concept. The registry enforces this; nothing else calls
:meth:`Concept.add_parent`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator

    from rf2ctl.domain.relationship import Relationship


class Concept:
    """Graph node identified by its SCTID within one view."""

    __slots__ = ("id", "max_group_id", "_attributes", "_parents")

    def __init__(self, concept_id: int) -> None:
        self.id = concept_id
        self.max_group_id = 0
        self._parents: dict[int, Concept] = {}
        # Insertion-ordered set; the value is the destination endpoint.
        self._attributes: dict[Relationship, Concept] = {}

    def __repr__(self) -> str:
        return f"Concept({self.id})"

    def __lt__(self, other: Concept) -> bool:
        return self.id < other.id

    # ------------------------------------------------------------------
    # Construction (registry only)
    # ------------------------------------------------------------------

    def add_parent(self, parent: Concept) -> None:
        self._parents[parent.id] = parent

    def add_attribute(self, relationship: Relationship, destination: Concept) -> None:
        """Record *relationship* as an attribute, tracking the highest group."""
        self._attributes.setdefault(relationship, destination)
        if relationship.group > self.max_group_id:
            self.max_group_id = relationship.group

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def parents(self) -> list[Concept]:
        """Direct is-a parents, ascending by id."""
        return [self._parents[k] for k in sorted(self._parents)]

    @property
    def attributes(self) -> list[Relationship]:
        """All relationships sourced from this concept, in registration order."""
        return list(self._attributes)

    def destination_of(self, relationship: Relationship) -> Concept | None:
        """Return the destination endpoint of one of this concept's attributes."""
        return self._attributes.get(relationship)

    def group_ids(self) -> range:
        """Relationship groups 1..max_group_id (group 0 is ungrouped)."""
        return range(1, self.max_group_id + 1)

    def iter_ancestors(self) -> Iterator[Concept]:
        """Yield every concept reachable through ``parents``, each once.

        Iterative with a visited set, so it terminates on cyclic input.
        """
        visited: set[int] = set()
        stack = self.parents[::-1]
        while stack:
            node = stack.pop()
            if node.id in visited:
                continue
            visited.add(node.id)
            yield node
            stack.extend(node.parents[::-1])

    # ------------------------------------------------------------------
    # Ancestor query
    # ------------------------------------------------------------------

    def has_ancestor(self, target: Concept) -> bool:
        """Check whether *target* is reachable through the parents relation.

        *target* is matched by id, so it may come from the other view
        (a stated destination tested against inferred ancestry). Stops at
        concepts with no parents. A cycle is never followed twice; if
        *target* is not on it the answer is False.
        """
        return any(node.id == target.id for node in self.iter_ancestors())

    # ------------------------------------------------------------------
    # Group matching
    # ------------------------------------------------------------------

    def by_type_and_group(self, type_id: int, group: int) -> list[Relationship]:
        return [r for r in self._attributes if r.matches_type_and_group(type_id, group)]

    def by_type_group_destination(
        self,
        type_id: int,
        destination_id: int,
        group: int,
    ) -> list[Relationship]:
        return [
            r
            for r in self._attributes
            if r.matches_type_and_group(type_id, group) and r.destination_id == destination_id
        ]

    def by_group(self, group: int) -> list[Relationship]:
        return [r for r in self._attributes if r.matches_group(group)]

    def by_type_group_ancestor(
        self,
        type_id: int,
        group: int,
        stated_destination_ancestor: Concept,
    ) -> list[Relationship]:
        """Match on type and group, then on the destination's ancestry.

        The type/group filter runs first so the ancestor traversal only
        happens for relationships that already qualify.
        """
        first_pass = self.by_type_and_group(type_id, group)
        matches: list[Relationship] = []
        for rel in first_pass:
            destination = self.destination_of(rel)
            if destination is not None and destination.has_ancestor(stated_destination_ancestor):
                matches.append(rel)
        return matches
