"""CompareService — check stated relationship groups against inferred ones.

For every stated group (1..max_group_id) of a concept, the inferred view
should contain a group with identical content. Group numbers are ignored;
groups are compared by content hash only.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from rf2ctl.domain.errors import HashEncodingError
from rf2ctl.domain.types import Characteristic
from rf2ctl.services.base import BaseService
from rf2ctl.services.result import ENCODING_ERROR, ServiceResult
from rf2ctl.services.telemetry import GROUPS_HASHED, count, get_current_span, traced

if TYPE_CHECKING:
    from rf2ctl.domain.concept import Concept
    from rf2ctl.domain.hashing import GroupHasher


def _group_hashes(hasher: GroupHasher, concept: Concept) -> dict[int, str]:
    """Group number -> content hash for every non-empty group 1..max_group_id."""
    return {
        group: hasher.group_content_hash(concept, group)
        for group in concept.group_ids()
        if concept.by_group(group)
    }


class CompareService(BaseService):
    """Confirms classifier output against authored content."""

    @traced
    def compare(self, concept_id: int | None = None, *, top: int | None = None) -> ServiceResult:
        """Match each stated group to a content-equal inferred group.

        Args:
            concept_id: Compare one concept only (default: every stated concept).
            top: Cap on unmatched groups listed in the result.
        """
        op = "compare"
        if concept_id is not None:
            concept = self._concept(op, concept_id, Characteristic.STATED)
            if isinstance(concept, ServiceResult):
                return concept
            candidates = [concept]
        else:
            graphs = self._graphs(op)
            if isinstance(graphs, ServiceResult):
                return graphs
            candidates = sorted(graphs.stated)

        inferred = self._workspace.graphs.inferred
        hasher = self._workspace.hasher
        unmatched: list[dict[str, Any]] = []
        matched = 0
        compared = 0

        try:
            for stated_concept in candidates:
                stated_groups = _group_hashes(hasher, stated_concept)
                if not stated_groups:
                    continue
                inferred_concept = inferred.get_concept(stated_concept.id)
                inferred_groups = (
                    _group_hashes(hasher, inferred_concept) if inferred_concept is not None else {}
                )
                count(GROUPS_HASHED, len(stated_groups) + len(inferred_groups))
                inferred_hashes = set(inferred_groups.values())
                for group, digest in stated_groups.items():
                    compared += 1
                    if digest in inferred_hashes:
                        matched += 1
                        continue
                    unmatched.append(
                        {
                            "id": stated_concept.id,
                            "group": group,
                            "hash": digest,
                            "size": len(stated_concept.by_group(group)),
                            "in_inferred": inferred_concept is not None,
                        }
                    )
        except HashEncodingError as exc:
            return ServiceResult.failure(op, ENCODING_ERROR, str(exc))

        span = get_current_span()
        if span:
            span.annotate("concepts", len(candidates))

        listed = unmatched if top is None else unmatched[:top]
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "concepts": len(candidates),
                "groups_compared": compared,
                "matched": matched,
                "unmatched_count": len(unmatched),
                "count": len(listed),
                "items": listed,
            },
        )
