"""Strongly connected components (Tarjan's algorithm).

A single depth-first traversal assigns each vertex a discovery index and a
low-link value. Vertices go onto a component stack when first discovered;
when a vertex finishes with ``low == disc`` it is the root of a component and
the stack is popped down to it.

The traversal keeps its own work stack of ``(vertex, edges, next_edge)``
frames, so depth is limited by memory rather than the interpreter's
recursion limit. Frames are processed in exactly the order the recursive
formulation would process them.

Components are numbered in the order they close, which is a reverse
topological order of the condensation.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Dict, List, Tuple

from citygraph.algorithms.metrics import AlgorithmMetrics
from citygraph.graph.task_graph import Edge, TaskGraph
from citygraph.logging import get_logger

logger = get_logger(__name__)

_UNVISITED = -1


@dataclass(frozen=True)
class ComponentResult:
    """Partition of a graph's vertices into strongly connected components.

    Attributes:
        components: Components in closing order; each is a sorted vertex list.
        component_of: ``component_of[v]`` is the index of v's component.
        metrics: Timing and counters of the run that produced this result.
    """

    components: List[List[int]]
    component_of: List[int]
    metrics: AlgorithmMetrics

    @property
    def count(self) -> int:
        return len(self.components)

    def component(self, index: int) -> List[int]:
        """Return the sorted vertices of component ``index``."""
        if not 0 <= index < len(self.components):
            raise ValueError(
                f"Component {index} is out of range [0, {len(self.components)})."
            )
        return list(self.components[index])

    def component_for_vertex(self, v: int) -> int:
        if not 0 <= v < len(self.component_of):
            raise ValueError(
                f"Vertex {v} is out of range [0, {len(self.component_of)})."
            )
        return self.component_of[v]

    def size_summary(self) -> Dict[int, int]:
        """Map component size to the number of components of that size."""
        return dict(sorted(Counter(len(c) for c in self.components).items()))


def find_components(graph: TaskGraph) -> ComponentResult:
    """Partition ``graph`` into strongly connected components.

    Never fails: every graph, cyclic or not, has a component partition.
    Undirected graphs are treated through their stored (mirrored) edges, so
    each connected component comes out as one strongly connected component.

    Args:
        graph: Graph to analyze. Not modified.

    Returns:
        ComponentResult with components, the vertex-to-component mapping and
        the run's metrics (``dfs_visits``, ``edge_traversals``, ``stack_pops``).
    """
    n = graph.vertex_count
    disc = [_UNVISITED] * n
    low = [0] * n
    on_stack = [False] * n
    stack: List[int] = []
    component_of = [_UNVISITED] * n
    components: List[List[int]] = []
    metrics = AlgorithmMetrics()
    next_index = 0

    with metrics.timed():
        for root in range(n):
            if disc[root] != _UNVISITED:
                continue

            disc[root] = low[root] = next_index
            next_index += 1
            stack.append(root)
            on_stack[root] = True
            metrics.increment("dfs_visits")
            work: List[Tuple[int, List[Edge], int]] = [(root, graph.get_edges(root), 0)]

            while work:
                u, edges, i = work[-1]

                if i < len(edges):
                    work[-1] = (u, edges, i + 1)
                    v = edges[i].to
                    metrics.increment("edge_traversals")

                    if disc[v] == _UNVISITED:
                        # Tree edge: descend into v
                        disc[v] = low[v] = next_index
                        next_index += 1
                        stack.append(v)
                        on_stack[v] = True
                        metrics.increment("dfs_visits")
                        work.append((v, graph.get_edges(v), 0))
                    elif on_stack[v]:
                        # Edge into the active component
                        low[u] = min(low[u], disc[v])
                    continue

                # All edges of u examined
                work.pop()

                if low[u] == disc[u]:
                    index = len(components)
                    members: List[int] = []
                    while True:
                        w = stack.pop()
                        on_stack[w] = False
                        component_of[w] = index
                        members.append(w)
                        metrics.increment("stack_pops")
                        if w == u:
                            break
                    members.sort()
                    components.append(members)

                if work:
                    parent = work[-1][0]
                    low[parent] = min(low[parent], low[u])

    logger.debug(
        f"Found {len(components)} strongly connected components in graph with "
        f"{n} vertices ({metrics.elapsed_ms:.3f} ms)"
    )
    return ComponentResult(components, component_of, metrics)
