"""GraphService — ancestor, group matching, and group hashing queries.

Read-only queries over the loaded concept graphs. Every operation takes
the view (stated or inferred) it runs against; ``equivalent`` spans both.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from rf2ctl.domain.errors import HashEncodingError
from rf2ctl.domain.relationship import Relationship
from rf2ctl.domain.types import Characteristic
from rf2ctl.services.base import BaseService
from rf2ctl.services.result import (
    ENCODING_ERROR,
    INVALID_ARGUMENTS,
    NO_DATA,
    NO_MATCH,
    ServiceResult,
)
from rf2ctl.services.telemetry import (
    GROUPS_HASHED,
    RELATIONSHIPS_SCANNED,
    count,
    get_current_span,
    traced,
)

if TYPE_CHECKING:
    from rf2ctl.domain.concept import Concept


def _rels(relationships: list[Relationship]) -> list[dict[str, Any]]:
    return [r.to_dict() for r in relationships]


def _hashed_until(concept: Concept, last_group: int | None) -> int:
    """Non-empty groups a find_group search over *concept* hashed."""
    return sum(
        1
        for group in concept.group_ids()
        if (last_group is None or group <= last_group) and concept.by_group(group)
    )


class GraphService(BaseService):
    """Handles concept graph queries."""

    # ------------------------------------------------------------------
    # concept: summary of one node
    # ------------------------------------------------------------------

    @traced
    def concept(self, concept_id: int, characteristic: Characteristic) -> ServiceResult:
        """Summarise a concept: parents, attribute count, groups, depth."""
        op = "concept"
        concept = self._concept(op, concept_id, characteristic)
        if isinstance(concept, ServiceResult):
            return concept

        engine = self._workspace.engine(characteristic)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "id": concept.id,
                "characteristic": str(characteristic),
                "parents": [p.id for p in concept.parents],
                "attribute_count": len(concept.attributes),
                "ungrouped_count": len(concept.by_group(0)),
                "max_group_id": concept.max_group_id,
                "depth": engine.depth(concept.id),
            },
        )

    # ------------------------------------------------------------------
    # ancestor: transitive is-a test
    # ------------------------------------------------------------------

    @traced
    def ancestor(
        self,
        concept_id: int,
        target_id: int,
        characteristic: Characteristic,
    ) -> ServiceResult:
        """Test whether *target_id* is an ancestor of *concept_id*."""
        op = "ancestor"
        concept = self._concept(op, concept_id, characteristic)
        if isinstance(concept, ServiceResult):
            return concept
        target = self._concept(op, target_id, characteristic)
        if isinstance(target, ServiceResult):
            return target

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "concept_id": concept_id,
                "target_id": target_id,
                "characteristic": str(characteristic),
                "is_ancestor": concept.has_ancestor(target),
            },
        )

    # ------------------------------------------------------------------
    # groups: every relationship group with its content hash
    # ------------------------------------------------------------------

    @traced
    def groups(self, concept_id: int, characteristic: Characteristic) -> ServiceResult:
        """List groups 1..max_group_id of a concept with their content hashes."""
        op = "groups"
        concept = self._concept(op, concept_id, characteristic)
        if isinstance(concept, ServiceResult):
            return concept

        try:
            hashes = self._workspace.hasher.group_hashes(concept)
        except HashEncodingError as exc:
            return ServiceResult.failure(op, ENCODING_ERROR, str(exc), concept_id=concept_id)
        count(GROUPS_HASHED, len(hashes))

        items = [
            {
                "group": group,
                "hash": digest,
                "relationships": _rels(concept.by_group(group)),
            }
            for group, digest in hashes.items()
        ]
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "concept_id": concept_id,
                "characteristic": str(characteristic),
                "count": len(items),
                "items": items,
            },
        )

    # ------------------------------------------------------------------
    # group_hash: one group's content hash
    # ------------------------------------------------------------------

    @traced
    def group_hash(
        self,
        concept_id: int,
        group: int,
        characteristic: Characteristic,
    ) -> ServiceResult:
        """Compute the content hash of one relationship group."""
        op = "group_hash"
        concept = self._concept(op, concept_id, characteristic)
        if isinstance(concept, ServiceResult):
            return concept

        warnings: list[str] = []
        members = concept.by_group(group)
        if not members:
            warnings.append(f"Group {group} of concept {concept_id} has no relationships")
        try:
            digest = self._workspace.hasher.group_content_hash(concept, group)
        except HashEncodingError as exc:
            return ServiceResult.failure(op, ENCODING_ERROR, str(exc), concept_id=concept_id)
        count(GROUPS_HASHED)

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "concept_id": concept_id,
                "group": group,
                "characteristic": str(characteristic),
                "hash": digest,
                "size": len(members),
            },
            warnings=warnings,
        )

    # ------------------------------------------------------------------
    # match: the group matcher family
    # ------------------------------------------------------------------

    @traced
    def match(
        self,
        concept_id: int,
        characteristic: Characteristic,
        *,
        group: int,
        type_id: int | None = None,
        destination_id: int | None = None,
        ancestor_id: int | None = None,
        ancestor_characteristic: Characteristic = Characteristic.STATED,
    ) -> ServiceResult:
        """Filter a concept's attributes.

        - group only: every relationship in *group*.
        - type + group: same type and group.
        - type + group + destination: additionally exact destination.
        - type + group + ancestor: destination descends from *ancestor_id*,
          resolved in *ancestor_characteristic* (stated by default).
        """
        op = "match"
        concept = self._concept(op, concept_id, characteristic)
        if isinstance(concept, ServiceResult):
            return concept

        if type_id is None:
            if destination_id is not None or ancestor_id is not None:
                return ServiceResult.failure(
                    op,
                    INVALID_ARGUMENTS,
                    "destination_id and ancestor_id require type_id",
                )
            matches = concept.by_group(group)
            mode = "group"
        elif destination_id is not None and ancestor_id is not None:
            return ServiceResult.failure(
                op,
                INVALID_ARGUMENTS,
                "destination_id and ancestor_id are mutually exclusive",
            )
        elif destination_id is not None:
            matches = concept.by_type_group_destination(type_id, destination_id, group)
            mode = "type_group_destination"
        elif ancestor_id is not None:
            ancestor = self._concept(op, ancestor_id, ancestor_characteristic)
            if isinstance(ancestor, ServiceResult):
                return ancestor
            matches = concept.by_type_group_ancestor(type_id, group, ancestor)
            mode = "type_group_ancestor"
        else:
            matches = concept.by_type_and_group(type_id, group)
            mode = "type_group"

        span = get_current_span()
        if span:
            span.annotate("mode", mode)
            span.count(RELATIONSHIPS_SCANNED, len(concept.attributes))

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "concept_id": concept_id,
                "characteristic": str(characteristic),
                "mode": mode,
                "count": len(matches),
                "items": _rels(matches),
            },
        )

    # ------------------------------------------------------------------
    # equivalent: cross-view group equivalence
    # ------------------------------------------------------------------

    @traced
    def equivalent(
        self,
        concept_id: int,
        group: int,
        *,
        type_id: int,
        destination_id: int,
        source: Characteristic = Characteristic.STATED,
        target: Characteristic = Characteristic.INFERRED,
    ) -> ServiceResult:
        """Find the counterpart of a relationship in a content-equal group.

        Hashes *group* of the concept in the *source* view, then searches
        the same concept in the *target* view for a group with that hash
        and returns its relationships with *type_id* and *destination_id*.
        """
        op = "equivalent"
        source_concept = self._concept(op, concept_id, source)
        if isinstance(source_concept, ServiceResult):
            return source_concept
        target_concept = self._concept(op, concept_id, target)
        if isinstance(target_concept, ServiceResult):
            return target_concept

        if not source_concept.by_group(group):
            return ServiceResult.failure(
                op,
                NO_DATA,
                f"Group {group} of concept {concept_id} has no relationships "
                f"in the {source} graph",
                concept_id=concept_id,
                group=group,
            )

        hasher = self._workspace.hasher
        try:
            target_hash = hasher.group_content_hash(source_concept, group)
            matched_group = hasher.find_group(target_concept, target_hash)
        except HashEncodingError as exc:
            return ServiceResult.failure(op, ENCODING_ERROR, str(exc), concept_id=concept_id)
        count(GROUPS_HASHED, 1 + _hashed_until(target_concept, matched_group))

        if matched_group is None:
            return ServiceResult.failure(
                op,
                NO_MATCH,
                f"No {target} group of concept {concept_id} matches {source} group {group}",
                concept_id=concept_id,
                group=group,
                hash=target_hash,
            )

        matches = target_concept.by_type_group_destination(type_id, destination_id, matched_group)

        warnings: list[str] = []
        if not matches:
            warnings.append(
                f"An equivalent {target} group exists but has no relationship "
                f"with type {type_id} and destination {destination_id}"
            )
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "concept_id": concept_id,
                "source": str(source),
                "target": str(target),
                "group": group,
                "hash": target_hash,
                "matched_group": matched_group,
                "count": len(matches),
                "items": _rels(matches),
            },
            warnings=warnings,
        )
