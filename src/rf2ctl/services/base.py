"""BaseService — abstract foundation for all rf2ctl services.

Every service receives a :class:`Workspace` at construction time. The
Workspace provides the concept graphs, the group hasher, and the is-a
graph engines. Release files are loaded on the first service call that
needs them; load failures become ``INVALID_RELEASE`` results.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from rf2ctl.domain.errors import Rf2FormatError
from rf2ctl.domain.types import Characteristic
from rf2ctl.services.result import INVALID_RELEASE, NO_DATA, NOT_FOUND, ServiceResult
from rf2ctl.services.telemetry import ROWS_LOADED, trace_span

if TYPE_CHECKING:
    from rf2ctl.domain.concept import Concept
    from rf2ctl.infrastructure.registry import ConceptGraphs
    from rf2ctl.infrastructure.workspace import Workspace

logger = logging.getLogger(__name__)


class BaseService:
    """Abstract base for all service-layer classes.

    Lookup helpers return either the value or a ready-made failure
    ServiceResult, so operations can return early::

        concept = self._concept(op, concept_id, characteristic)
        if isinstance(concept, ServiceResult):
            return concept
    """

    def __init__(self, workspace: Workspace) -> None:
        self._workspace = workspace

    def _graphs(self, op: str) -> ConceptGraphs | ServiceResult:
        """Return the loaded graphs, or a failure result if loading failed.

        The first call reads the release files inside a ``load_release``
        span annotated with the concept count of each view.
        """
        if self._workspace.is_loaded:
            return self._workspace.graphs
        if not self._workspace.release_files():
            return ServiceResult.failure(
                op,
                NO_DATA,
                "No release files configured (use --release-dir, --stated/--inferred "
                "or rf2ctl.toml)",
            )
        try:
            with trace_span("load_release") as span:
                graphs = self._workspace.graphs
                if span is not None:
                    for characteristic in Characteristic:
                        registry = graphs.registry(characteristic)
                        span.annotate(f"{characteristic}_concepts", len(registry))
                        span.count(ROWS_LOADED, registry.relationship_count)
            return graphs
        except Rf2FormatError as exc:
            logger.debug("Release parse failed", exc_info=True)
            return ServiceResult.failure(
                op, INVALID_RELEASE, str(exc), path=exc.path, line=exc.line
            )
        except OSError as exc:
            return ServiceResult.failure(op, INVALID_RELEASE, f"Cannot read release file: {exc}")

    def _concept(
        self,
        op: str,
        concept_id: int,
        characteristic: Characteristic,
    ) -> Concept | ServiceResult:
        """Resolve *concept_id* in one view, or a NOT_FOUND result."""
        graphs = self._graphs(op)
        if isinstance(graphs, ServiceResult):
            return graphs
        concept = graphs.get_concept(concept_id, characteristic)
        if concept is None:
            return ServiceResult.failure(
                op,
                NOT_FOUND,
                f"Concept {concept_id} not found in the {characteristic} graph",
                concept_id=concept_id,
                characteristic=str(characteristic),
            )
        return concept
