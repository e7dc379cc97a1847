"""Condensation of a graph by its strongly connected components.

Each component becomes one vertex. An edge ``cu -> cv`` is added for every
ordered pair of distinct components joined by at least one original edge.
When several original edges join the same pair, only the first one met
(scanning vertices in index order, edges in insertion order) is kept, with
its weight; later ones are dropped without comparing weights. Edges inside
a component, self-loops included, are dropped.

The result is acyclic whenever the partition is the true SCC partition;
``Condenser.is_acyclic`` re-checks this independently.
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Set, Tuple

from citygraph.algorithms.topo import VisitState
from citygraph.graph.task_graph import Edge, TaskGraph
from citygraph.logging import get_logger

logger = get_logger(__name__)


def has_cycle(graph: TaskGraph) -> bool:
    """Return True if the directed graph contains a cycle.

    Three-color depth-first search with an explicit frame stack: reaching an
    in-progress vertex again means a back edge.
    """
    n = graph.vertex_count
    color = [VisitState.UNVISITED] * n

    for root in range(n):
        if color[root] != VisitState.UNVISITED:
            continue
        color[root] = VisitState.IN_PROGRESS
        work: List[Tuple[int, List[Edge], int]] = [(root, graph.get_edges(root), 0)]

        while work:
            u, edges, i = work[-1]
            if i < len(edges):
                work[-1] = (u, edges, i + 1)
                v = edges[i].to
                if color[v] == VisitState.IN_PROGRESS:
                    return True
                if color[v] == VisitState.UNVISITED:
                    color[v] = VisitState.IN_PROGRESS
                    work.append((v, graph.get_edges(v), 0))
                continue
            work.pop()
            color[u] = VisitState.FINISHED

    return False


class Condenser:
    """Builds and answers questions about a component condensation.

    Holds read-only references to the original graph and partition; owns the
    condensation graph it builds.
    """

    def __init__(
        self,
        graph: TaskGraph,
        components: Sequence[Sequence[int]],
        component_of: Sequence[int],
    ) -> None:
        """
        Args:
            graph: Original graph.
            components: Component index -> vertices in that component.
            component_of: Vertex -> component index.

        Raises:
            ValueError: If ``component_of`` does not cover every vertex or
                names a component that does not exist.
        """
        if len(component_of) != graph.vertex_count:
            raise ValueError(
                f"component_of has {len(component_of)} entries for a graph "
                f"with {graph.vertex_count} vertices."
            )
        for v, comp in enumerate(component_of):
            if not 0 <= comp < len(components):
                raise ValueError(f"Vertex {v} maps to unknown component {comp}.")

        self._graph = graph
        self._components = components
        self._component_of = component_of
        self._condensation: Optional[TaskGraph] = None

    def build(self) -> TaskGraph:
        """Build (or rebuild) the condensation graph and return it.

        The condensation is always directed and inherits the original
        graph's weight model.
        """
        num_components = len(self._components)
        condensation = TaskGraph(num_components, True, self._graph.weight_model)
        added: Set[Tuple[int, int]] = set()

        for u, v, w in self._graph.iter_edges():
            cu = self._component_of[u]
            cv = self._component_of[v]
            if cu == cv or (cu, cv) in added:
                continue
            condensation.add_edge(cu, cv, w)
            added.add((cu, cv))

        self._condensation = condensation
        logger.debug(
            f"Condensed {self._graph.vertex_count} vertices into "
            f"{num_components} components with {len(added)} inter-component edges"
        )
        return condensation

    @property
    def condensation(self) -> TaskGraph:
        """The graph produced by the last ``build()``.

        Raises:
            RuntimeError: If ``build()`` has not been called.
        """
        if self._condensation is None:
            raise RuntimeError("Must call build() first")
        return self._condensation

    @property
    def component_count(self) -> int:
        return len(self._components)

    def component_for_vertex(self, vertex: int) -> int:
        """Return the component index of an original vertex."""
        if not 0 <= vertex < len(self._component_of):
            raise ValueError(
                f"Vertex {vertex} is out of range [0, {len(self._component_of)})."
            )
        return self._component_of[vertex]

    def vertices_in_component(self, index: int) -> List[int]:
        """Return the original vertices of component ``index``, sorted."""
        if not 0 <= index < len(self._components):
            raise ValueError(
                f"Component {index} is out of range [0, {len(self._components)})."
            )
        return sorted(self._components[index])

    def is_acyclic(self) -> bool:
        """Independently verify that the condensation has no cycle.

        Raises:
            RuntimeError: If ``build()`` has not been called.
        """
        return not has_cycle(self.condensation)
