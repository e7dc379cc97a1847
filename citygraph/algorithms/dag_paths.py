"""Single-source shortest and longest paths over a DAG.

Both directions share one relaxation loop. Vertices are processed in a
depth-first topological order and every outgoing edge of a reached vertex is
relaxed once, giving O(V + E) time. A `RelaxPolicy` selects the direction:

- shortest: unreached sentinel ``+inf``, accept ``dist[u] + w < dist[v]``;
- longest: unreached sentinel ``-inf``, accept ``dist[u] + w > dist[v]``.

The only failure is a cyclic graph, reported by ``compute_*`` returning
False. Result accessors raise RuntimeError until a computation succeeds.

Counters: ``edge_relaxations`` (every attempt) and ``distance_updates``
(accepted relaxations only).
"""

from __future__ import annotations

import math
import operator
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Callable, Dict, List, NamedTuple, Optional, Union

from citygraph.algorithms.metrics import AlgorithmMetrics
from citygraph.algorithms.topo import topological_sort_dfs
from citygraph.graph.task_graph import TaskGraph
from citygraph.logging import get_logger

logger = get_logger(__name__)

Distance = Union[int, float]

_NO_PARENT = -1


class PathMode(IntEnum):
    """Direction of optimization for path computations."""

    SHORTEST = 1
    LONGEST = 2


@dataclass(frozen=True)
class RelaxPolicy:
    """Comparison sense and unreached sentinel for one path direction.

    Attributes:
        name: Human-readable direction name.
        unreached: Distance assigned to vertices not (yet) reached.
        better: ``better(candidate, current)`` is True when the candidate
            distance should replace the current one.
    """

    name: str
    unreached: float
    better: Callable[[Distance, Distance], bool]


SHORTEST = RelaxPolicy("shortest", math.inf, operator.lt)
LONGEST = RelaxPolicy("longest", -math.inf, operator.gt)

_POLICIES = {PathMode.SHORTEST: SHORTEST, PathMode.LONGEST: LONGEST}


class CriticalPath(NamedTuple):
    """The longest chain found: its vertices and total weight."""

    path: List[int]
    length: Distance


class DagPathSolver:
    """Path solver over a directed acyclic graph.

    One instance owns one set of result arrays. Computing again replaces the
    previous results; ``reset()`` discards them explicitly.
    """

    def __init__(self, graph: TaskGraph, mode: PathMode = PathMode.SHORTEST) -> None:
        """
        Args:
            graph: Directed graph to solve over. Not modified.
            mode: Shortest or longest paths.

        Raises:
            ValueError: If the graph is undirected.
        """
        if not graph.is_directed:
            raise ValueError("Graph must be directed")
        self._graph = graph
        self._mode = PathMode(mode)
        self._policy = _POLICIES[self._mode]
        self._metrics = AlgorithmMetrics()
        self._source: Optional[int] = None
        self._dist: Optional[List[Distance]] = None
        self._parent: Optional[List[int]] = None
        self._topo_order: Optional[List[int]] = None

    @property
    def mode(self) -> PathMode:
        return self._mode

    @property
    def policy(self) -> RelaxPolicy:
        return self._policy

    @property
    def metrics(self) -> AlgorithmMetrics:
        """Metrics of the most recent computation (empty before the first)."""
        return self._metrics

    @property
    def source(self) -> Optional[int]:
        """Source of the last computation; None for critical-path runs."""
        self._require_result()
        return self._source

    @property
    def topological_order(self) -> List[int]:
        self._require_result()
        assert self._topo_order is not None
        return list(self._topo_order)

    def reset(self) -> None:
        """Discard results and metrics so the instance can be reused."""
        self._metrics = AlgorithmMetrics()
        self._source = None
        self._dist = None
        self._parent = None
        self._topo_order = None

    #
    # Computation
    #
    def compute_from_source(self, source: int) -> bool:
        """Compute best distances from ``source`` to every vertex.

        Args:
            source: Start vertex.

        Returns:
            True on success; False if the graph has a cycle, in which case no
            result is available.

        Raises:
            ValueError: If ``source`` is out of range.
        """
        n = self._graph.vertex_count
        if not 0 <= source < n:
            raise ValueError(f"Source vertex {source} is out of range [0, {n}).")

        dist: List[Distance] = [self._policy.unreached] * n
        dist[source] = 0
        return self._run(dist, source)

    def _run(self, dist: List[Distance], source: Optional[int]) -> bool:
        self.reset()
        metrics = self._metrics
        parent = [_NO_PARENT] * self._graph.vertex_count

        with metrics.timed():
            topo = topological_sort_dfs(self._graph)
            if topo.order is not None:
                self._relax_in_order(topo.order, dist, parent)

        if topo.order is None:
            logger.debug(f"Cannot compute {self._policy.name} paths: graph has a cycle")
            return False

        self._source = source
        self._dist = dist
        self._parent = parent
        self._topo_order = topo.order
        logger.debug(
            f"Computed {self._policy.name} paths from "
            f"{'all vertices' if source is None else f'source {source}'} "
            f"with {metrics.counter('distance_updates')} updates "
            f"({metrics.elapsed_ms:.3f} ms)"
        )
        return True

    def _relax_in_order(
        self, order: List[int], dist: List[Distance], parent: List[int]
    ) -> None:
        unreached = self._policy.unreached
        better = self._policy.better
        metrics = self._metrics

        for u in order:
            if dist[u] == unreached:
                continue
            for edge in self._graph.get_edges(u):
                metrics.increment("edge_relaxations")
                candidate = dist[u] + edge.weight
                if better(candidate, dist[edge.to]):
                    dist[edge.to] = candidate
                    parent[edge.to] = u
                    metrics.increment("distance_updates")

    #
    # Result accessors
    #
    def _require_result(self) -> None:
        if self._dist is None:
            raise RuntimeError("Must call a compute method successfully first")

    def _check_vertex(self, vertex: int) -> None:
        n = self._graph.vertex_count
        if not 0 <= vertex < n:
            raise ValueError(f"Vertex {vertex} is out of range [0, {n}).")

    def get_distance(self, vertex: int) -> Distance:
        """Best distance to ``vertex``; the unreached sentinel if not reached."""
        self._require_result()
        self._check_vertex(vertex)
        assert self._dist is not None
        return self._dist[vertex]

    def is_reachable(self, vertex: int) -> bool:
        return self.get_distance(vertex) != self._policy.unreached

    def get_path(self, vertex: int) -> List[int]:
        """Vertices from the path's start to ``vertex``; empty if unreachable."""
        if not self.is_reachable(vertex):
            return []
        assert self._parent is not None
        path = []
        current = vertex
        while current != _NO_PARENT:
            path.append(current)
            current = self._parent[current]
        path.reverse()
        return path

    def get_all_distances(self) -> List[Distance]:
        """Copy of the distance array, indexed by vertex."""
        self._require_result()
        assert self._dist is not None
        return list(self._dist)

    def reachable_vertices(self) -> List[int]:
        self._require_result()
        unreached = self._policy.unreached
        assert self._dist is not None
        return [v for v, d in enumerate(self._dist) if d != unreached]


class ShortestPathSolver(DagPathSolver):
    """Minimum-cost paths from a single source."""

    def __init__(self, graph: TaskGraph) -> None:
        super().__init__(graph, PathMode.SHORTEST)

    def summary(self) -> Dict[str, Any]:
        """Statistics over reachable vertices other than the source.

        Returns:
            Dict with ``source``, ``reachable_vertices``, ``min_distance``,
            ``max_distance`` and ``avg_distance`` (zeros when nothing else is
            reachable).
        """
        self._require_result()
        others = [v for v in self.reachable_vertices() if v != self._source]
        distances = [self.get_distance(v) for v in others]
        return {
            "source": self._source,
            "reachable_vertices": len(others),
            "min_distance": min(distances) if distances else 0,
            "max_distance": max(distances) if distances else 0,
            "avg_distance": sum(distances) / len(distances) if distances else 0.0,
        }


class LongestPathSolver(DagPathSolver):
    """Maximum-cost paths, from one source or over the whole graph."""

    def __init__(self, graph: TaskGraph) -> None:
        super().__init__(graph, PathMode.LONGEST)

    def compute_critical_path(self) -> bool:
        """Compute the longest chain ending at every vertex.

        Every vertex starts at distance 0, so each vertex's distance is the
        weight of the longest chain ending there from any start.

        Returns:
            True on success; False if the graph has a cycle.
        """
        return self._run([0] * self._graph.vertex_count, None)

    def critical_path(self) -> CriticalPath:
        """Path to the reached vertex with the greatest distance.

        Vertices are scanned in index order and only a strictly greater
        distance replaces the current best, so ties go to the lowest index.
        An empty graph yields an empty path of length 0.
        """
        self._require_result()
        assert self._dist is not None
        best_vertex: Optional[int] = None
        best: Distance = 0
        for v, d in enumerate(self._dist):
            if d == self._policy.unreached:
                continue
            if best_vertex is None or d > best:
                best_vertex, best = v, d

        if best_vertex is None:
            return CriticalPath([], 0)
        return CriticalPath(self.get_path(best_vertex), best)
