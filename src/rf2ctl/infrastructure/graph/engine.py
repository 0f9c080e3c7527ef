"""GraphEngine — lazy-built NetworkX view of one registry's is-a hierarchy.

Built on first access, from concepts and their parents only (attribute
relationships are not edges here). Edges point child -> parent.
Queries that don't need whole-graph analysis never build it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import networkx as nx

if TYPE_CHECKING:
    from rf2ctl.infrastructure.registry import ConceptRegistry

type _Graph = nx.DiGraph


class GraphEngine:
    """Lazy-loading is-a graph backed by a :class:`ConceptRegistry`."""

    def __init__(self, registry: ConceptRegistry) -> None:
        self._registry = registry
        self._graph: _Graph | None = None

    @property
    def graph(self) -> _Graph:
        """Return the graph, building from the registry on first access."""
        if self._graph is None:
            self._graph = self._build_from_registry()
        return self._graph

    def invalidate(self) -> None:
        """Clear the cached graph, forcing rebuild on next access."""
        self._graph = None

    def _build_from_registry(self) -> _Graph:
        """Build a DiGraph with one node per concept and one edge per is-a link.

        Adds all concepts first so parentless, childless concepts are
        still visible to algorithms.
        """
        g: _Graph = nx.DiGraph()
        for concept in self._registry:
            g.add_node(concept.id, max_group_id=concept.max_group_id)
        for concept in self._registry:
            for parent in concept.parents:
                g.add_edge(concept.id, parent.id)
        return g

    def find_cycles(self) -> list[list[int]]:
        """Return each set of concepts caught in an is-a cycle, ids ascending.

        One entry per strongly connected component with more than one
        member, plus any concept that is its own parent.
        """
        g = self.graph
        cycles: list[list[int]] = []
        for component in nx.strongly_connected_components(g):
            if len(component) > 1:
                cycles.append(sorted(component))
        for node in nx.nodes_with_selfloops(g):
            cycles.append([node])
        return sorted(cycles)

    def depth(self, concept_id: int) -> int | None:
        """Shortest is-a distance from *concept_id* to a parentless concept.

        Returns None if the concept is not in the graph or only reaches
        a cycle.
        """
        g = self.graph
        if concept_id not in g:
            return None
        lengths = nx.single_source_shortest_path_length(g, concept_id)
        tops = [d for node, d in lengths.items() if g.out_degree(node) == 0]
        return min(tops) if tops else None
