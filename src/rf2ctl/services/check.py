"""CheckService — structural health of the stated and inferred hierarchies.

Follows the linter pattern: report issues, never repair. Two categories:
- parentage: every concept except the root must have a parent.
- cycles: the is-a relation must be acyclic.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from rf2ctl.domain.types import Characteristic
from rf2ctl.services.base import BaseService
from rf2ctl.services.result import ServiceResult
from rf2ctl.services.telemetry import CONCEPTS_CHECKED, trace_span, traced

if TYPE_CHECKING:
    from rf2ctl.infrastructure.registry import ConceptRegistry

# ---------------------------------------------------------------------------
# Issue severity and category constants
# ---------------------------------------------------------------------------

SEVERITY_ERROR = "error"
SEVERITY_WARNING = "warning"

CAT_PARENTAGE = "parentage"
CAT_CYCLES = "cycles"

# Cap on ids listed per issue message; the full list stays in the issue data.
_MAX_IDS_IN_MESSAGE = 10


def _issue(
    category: str,
    severity: str,
    characteristic: Characteristic,
    kind: str,
    message: str,
    **extra: Any,
) -> dict[str, Any]:
    return {
        "category": category,
        "severity": severity,
        "characteristic": str(characteristic),
        "kind": kind,
        "message": message,
        **extra,
    }


def _id_list(ids: list[int]) -> str:
    shown = ", ".join(str(i) for i in ids[:_MAX_IDS_IN_MESSAGE])
    if len(ids) > _MAX_IDS_IN_MESSAGE:
        shown += f", ... (+{len(ids) - _MAX_IDS_IN_MESSAGE})"
    return shown


class CheckService(BaseService):
    """Reports hierarchy defects in the loaded release."""

    @traced
    def check(
        self,
        characteristic: Characteristic | None = None,
        *,
        min_severity: str = SEVERITY_WARNING,
    ) -> ServiceResult:
        """Check one view (or both) for parentless concepts and is-a cycles."""
        op = "check"
        graphs = self._graphs(op)
        if isinstance(graphs, ServiceResult):
            return graphs

        views = [Characteristic(characteristic)] if characteristic else list(Characteristic)
        issues: list[dict[str, Any]] = []
        summary: dict[str, dict[str, int]] = {}
        warnings: list[str] = []

        for view in views:
            registry = graphs.registry(view)
            if not len(registry):
                warnings.append(f"The {view} graph is empty")
                continue
            with trace_span(f"parentage.{view}") as span:
                if span is not None:
                    span.count(CONCEPTS_CHECKED, len(registry))
                issues.extend(self._check_parentage(registry))
            with trace_span(f"cycles.{view}"):
                issues.extend(self._check_cycles(view))
            summary[str(view)] = {
                "concepts": len(registry),
                "relationships": registry.relationship_count,
            }

        if min_severity == SEVERITY_ERROR:
            issues = [i for i in issues if i["severity"] == SEVERITY_ERROR]

        error_count = sum(1 for i in issues if i["severity"] == SEVERITY_ERROR)
        warning_count = sum(1 for i in issues if i["severity"] == SEVERITY_WARNING)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "issues": issues,
                "count": len(issues),
                "error_count": error_count,
                "warning_count": warning_count,
                "healthy": error_count == 0,
                "views": summary,
            },
            warnings=warnings,
        )

    # ------------------------------------------------------------------
    # Categories
    # ------------------------------------------------------------------

    def _check_parentage(self, registry: ConceptRegistry) -> list[dict[str, Any]]:
        """Compare the parentless concepts against the configured root."""
        view = registry.characteristic
        root_id = self._workspace.root_concept_id
        orphan_ids = [c.id for c in registry.ensure_parents()]
        issues: list[dict[str, Any]] = []

        if root_id not in registry:
            issues.append(
                _issue(
                    CAT_PARENTAGE,
                    SEVERITY_ERROR,
                    view,
                    "missing_root",
                    f"Root concept {root_id} is not in the {view} graph",
                    concept_ids=[root_id],
                )
            )
        elif root_id not in orphan_ids:
            issues.append(
                _issue(
                    CAT_PARENTAGE,
                    SEVERITY_ERROR,
                    view,
                    "root_has_parent",
                    f"Root concept {root_id} has a parent in the {view} graph",
                    concept_ids=[root_id],
                )
            )

        extra = [i for i in orphan_ids if i != root_id]
        if extra:
            issues.append(
                _issue(
                    CAT_PARENTAGE,
                    SEVERITY_WARNING,
                    view,
                    "missing_parent",
                    f"{len(extra)} concept(s) besides the root have no parent: {_id_list(extra)}",
                    concept_ids=extra,
                )
            )
        return issues

    def _check_cycles(self, view: Characteristic) -> list[dict[str, Any]]:
        engine = self._workspace.engine(view)
        return [
            _issue(
                CAT_CYCLES,
                SEVERITY_ERROR,
                view,
                "cyclic_hierarchy",
                f"Is-a cycle through {len(cycle)} concept(s): {_id_list(cycle)}",
                concept_ids=cycle,
            )
            for cycle in engine.find_cycles()
        ]
