"""Topological ordering of directed acyclic graphs.

Two independent algorithms are provided:

- ``topological_sort_dfs``: depth-first post-order. Each vertex moves
  unvisited -> in-progress -> finished; an edge into an in-progress vertex is
  a back edge and aborts the sort.
- ``topological_sort_kahn``: in-degree counting with a FIFO queue of ready
  vertices. Fewer than ``n`` emitted vertices means a cycle.

Both return a `TopoResult` whose ``order`` is ``None`` when the graph has a
cycle. For the same acyclic input they may return different (equally valid)
orders. ``is_valid_order`` checks any order against the graph's edges.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from enum import IntEnum
from typing import Deque, List, Optional, Sequence, Tuple

from citygraph.algorithms.metrics import AlgorithmMetrics
from citygraph.graph.task_graph import Edge, TaskGraph
from citygraph.logging import get_logger

logger = get_logger(__name__)


class VisitState(IntEnum):
    """Per-vertex state during the depth-first sort."""

    UNVISITED = 0
    IN_PROGRESS = 1
    FINISHED = 2


@dataclass(frozen=True)
class TopoResult:
    """Outcome of one topological sort run.

    Attributes:
        order: Vertices in topological order, or None if a cycle was found.
        metrics: Timing and counters of the run.
        algorithm: ``"dfs"`` or ``"kahn"``.
    """

    order: Optional[List[int]]
    metrics: AlgorithmMetrics
    algorithm: str

    @property
    def is_dag(self) -> bool:
        return self.order is not None


def _require_directed(graph: TaskGraph) -> None:
    if not graph.is_directed:
        raise ValueError("Graph must be directed for topological sort")


def _finish_order(graph: TaskGraph, metrics: AlgorithmMetrics) -> Optional[List[int]]:
    # Vertices in depth-first completion order, or None on a back edge
    n = graph.vertex_count
    state = [VisitState.UNVISITED] * n
    finished: List[int] = []

    for root in range(n):
        if state[root] != VisitState.UNVISITED:
            continue

        state[root] = VisitState.IN_PROGRESS
        metrics.increment("dfs_visits")
        work: List[Tuple[int, List[Edge], int]] = [(root, graph.get_edges(root), 0)]

        while work:
            u, edges, i = work[-1]

            if i < len(edges):
                work[-1] = (u, edges, i + 1)
                v = edges[i].to
                metrics.increment("edge_traversals")

                if state[v] == VisitState.IN_PROGRESS:
                    logger.debug(f"Back edge {u}->{v}: graph has a cycle, no DFS order")
                    return None
                if state[v] == VisitState.UNVISITED:
                    state[v] = VisitState.IN_PROGRESS
                    metrics.increment("dfs_visits")
                    work.append((v, graph.get_edges(v), 0))
                continue

            work.pop()
            state[u] = VisitState.FINISHED
            finished.append(u)
            metrics.increment("stack_pushes")

    return finished


def topological_sort_dfs(graph: TaskGraph) -> TopoResult:
    """Order ``graph`` by reverse depth-first completion.

    Vertices are used as roots in index order and neighbors are explored in
    edge insertion order.

    Counters: ``dfs_visits``, ``edge_traversals``, ``stack_pushes`` and
    ``stack_pops``.

    Raises:
        ValueError: If the graph is undirected.
    """
    _require_directed(graph)
    metrics = AlgorithmMetrics()
    order: Optional[List[int]] = None

    with metrics.timed():
        finished = _finish_order(graph, metrics)
        if finished is not None:
            order = finished[::-1]
            metrics.increment("stack_pops", len(order))

    if order is not None:
        logger.debug(
            f"DFS topological order of {graph.vertex_count} vertices "
            f"({metrics.elapsed_ms:.3f} ms)"
        )
    return TopoResult(order, metrics, "dfs")


def topological_sort_kahn(graph: TaskGraph) -> TopoResult:
    """Order ``graph`` by repeatedly removing zero in-degree vertices.

    Ready vertices are seeded in index order and served first-in first-out.

    Counters: ``queue_adds``, ``queue_removes`` and ``degree_updates``.

    Raises:
        ValueError: If the graph is undirected.
    """
    _require_directed(graph)
    n = graph.vertex_count
    metrics = AlgorithmMetrics()
    order: List[int] = []

    with metrics.timed():
        in_degree = [0] * n
        for _, v, _ in graph.iter_edges():
            in_degree[v] += 1

        queue: Deque[int] = deque()
        for v in range(n):
            if in_degree[v] == 0:
                queue.append(v)
                metrics.increment("queue_adds")

        while queue:
            u = queue.popleft()
            order.append(u)
            metrics.increment("queue_removes")

            for edge in graph.get_edges(u):
                in_degree[edge.to] -= 1
                metrics.increment("degree_updates")
                if in_degree[edge.to] == 0:
                    queue.append(edge.to)
                    metrics.increment("queue_adds")

    if len(order) != n:
        logger.debug(
            f"Kahn sort emitted {len(order)} of {n} vertices: graph has a cycle"
        )
        return TopoResult(None, metrics, "kahn")

    logger.debug(f"Kahn topological order of {n} vertices ({metrics.elapsed_ms:.3f} ms)")
    return TopoResult(order, metrics, "kahn")


def is_valid_order(graph: TaskGraph, order: Optional[Sequence[int]]) -> bool:
    """Check that ``order`` is a topological order of ``graph``.

    The order must be a permutation of ``0..n-1`` and every edge ``u -> v``
    must have ``u`` strictly before ``v``. A missing order (None) is invalid.
    """
    if order is None or len(order) != graph.vertex_count:
        return False

    position = [-1] * graph.vertex_count
    for idx, v in enumerate(order):
        if not 0 <= v < graph.vertex_count or position[v] != -1:
            return False
        position[v] = idx

    return all(position[u] < position[v] for u, v, _ in graph.iter_edges())
