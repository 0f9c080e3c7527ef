"""ConceptRegistry and ConceptGraphs — per-view concept universes.

One :class:`ConceptRegistry` per characteristic owns the id -> Concept
mapping for that view and wires up parents and attributes as
relationships are registered. :class:`ConceptGraphs` pairs a stated and
an inferred registry for one processing session; nothing is global, so
tests and parallel runs never share state.

Two-phase use: register everything, then query. Registries are not
thread-safe and do not guard against queries during registration.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from rf2ctl.domain.concept import Concept
from rf2ctl.domain.types import Characteristic

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from rf2ctl.domain.relationship import Relationship

logger = logging.getLogger(__name__)


class ConceptRegistry:
    """The concept graph of a single characteristic view."""

    def __init__(self, characteristic: Characteristic) -> None:
        self.characteristic = characteristic
        self._concepts: dict[int, Concept] = {}
        self._relationship_count = 0

    def __len__(self) -> int:
        return len(self._concepts)

    def __contains__(self, concept_id: object) -> bool:
        return concept_id in self._concepts

    def __iter__(self) -> Iterator[Concept]:
        return iter(self._concepts.values())

    @property
    def relationship_count(self) -> int:
        """Number of register() calls, duplicates included."""
        return self._relationship_count

    def _get_or_create(self, concept_id: int) -> Concept:
        concept = self._concepts.get(concept_id)
        if concept is None:
            concept = Concept(concept_id)
            self._concepts[concept_id] = concept
        return concept

    def register(self, relationship: Relationship) -> None:
        """Add *relationship* to this view, creating its endpoints on first sight.

        Is-a relationships also link the destination as a parent of the
        source. Every relationship is recorded as a source attribute.
        """
        source = self._get_or_create(relationship.source_id)
        destination = self._get_or_create(relationship.destination_id)
        if relationship.is_isa:
            source.add_parent(destination)
        source.add_attribute(relationship, destination)
        self._relationship_count += 1

    def get_concept(self, concept_id: int) -> Concept | None:
        return self._concepts.get(concept_id)

    def ensure_parents(self) -> list[Concept]:
        """Return every concept with no parent, ascending by id.

        A well-formed hierarchy has exactly one (the root). More than one
        is a defect in the source data; it is logged, not raised.
        """
        orphans = sorted(c for c in self._concepts.values() if not c.parents)
        if len(orphans) > 1:
            logger.warning(
                "%d concepts have no parent in the %s graph: %s",
                len(orphans),
                self.characteristic,
                ", ".join(str(c.id) for c in orphans[:20]),
            )
        else:
            logger.debug(
                "Parentless concepts in the %s graph: %s",
                self.characteristic,
                [c.id for c in orphans],
            )
        return orphans


class ConceptGraphs:
    """The stated and inferred registries of one processing session."""

    def __init__(self) -> None:
        self._registries: dict[Characteristic, ConceptRegistry] = {
            c: ConceptRegistry(c) for c in Characteristic
        }

    @property
    def stated(self) -> ConceptRegistry:
        return self._registries[Characteristic.STATED]

    @property
    def inferred(self) -> ConceptRegistry:
        return self._registries[Characteristic.INFERRED]

    def registry(self, characteristic: Characteristic) -> ConceptRegistry:
        return self._registries[Characteristic(characteristic)]

    def register(
        self,
        relationship: Relationship,
        characteristic: Characteristic | None = None,
    ) -> None:
        """Register into *characteristic*'s view (default: the relationship's own)."""
        target = characteristic or relationship.characteristic
        self.registry(target).register(relationship)

    def register_all(self, relationships: Iterable[Relationship]) -> int:
        """Register each relationship into its own view. Returns the count."""
        count = 0
        for rel in relationships:
            self.register(rel)
            count += 1
        logger.debug(
            "Registered %d relationships (stated concepts=%d, inferred concepts=%d)",
            count,
            len(self.stated),
            len(self.inferred),
        )
        return count

    def get_concept(self, concept_id: int, characteristic: Characteristic) -> Concept | None:
        return self.registry(characteristic).get_concept(concept_id)

    def ensure_parents(self, characteristic: Characteristic) -> list[Concept]:
        return self.registry(characteristic).ensure_parents()
