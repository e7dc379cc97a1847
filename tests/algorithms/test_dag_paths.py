import math
import random

import pytest

from citygraph.algorithms.dag_paths import (
    LONGEST,
    SHORTEST,
    CriticalPath,
    DagPathSolver,
    LongestPathSolver,
    PathMode,
    ShortestPathSolver,
)
from citygraph.graph.task_graph import TaskGraph
from tests.algorithms.sample_graphs import build_graph


class TestShortestPaths:
    def test_small_dag(self, small_dag):
        solver = ShortestPathSolver(small_dag)

        assert solver.compute_from_source(0)
        assert solver.get_all_distances() == [0, 4, 3]
        assert solver.get_path(1) == [0, 2, 1]
        assert solver.get_path(0) == [0]
        assert solver.source == 0

    def test_unreachable_vertices(self, small_dag):
        solver = ShortestPathSolver(small_dag)
        assert solver.compute_from_source(2)

        assert not solver.is_reachable(0)
        assert solver.get_distance(0) == math.inf
        assert solver.get_path(0) == []
        assert solver.is_reachable(1)
        assert solver.get_distance(1) == 1
        assert solver.reachable_vertices() == [1, 2]

    def test_negative_weights(self):
        g = build_graph(3, [(0, 1, 4), (0, 2, 1), (2, 1, -6)])
        solver = ShortestPathSolver(g)

        assert solver.compute_from_source(0)
        assert solver.get_distance(1) == -5
        assert solver.get_path(1) == [0, 2, 1]

    def test_parallel_edges_take_cheapest(self):
        g = build_graph(2, [(0, 1, 7), (0, 1, 2), (0, 1, 5)])
        solver = ShortestPathSolver(g)

        assert solver.compute_from_source(0)
        assert solver.get_distance(1) == 2

    def test_summary(self, diamond):
        solver = ShortestPathSolver(diamond)
        solver.compute_from_source(0)

        assert solver.summary() == {
            "source": 0,
            "reachable_vertices": 3,
            "min_distance": 2,
            "max_distance": 5,
            "avg_distance": pytest.approx(4.0),
        }

    def test_summary_nothing_reachable(self, chain):
        solver = ShortestPathSolver(chain)
        solver.compute_from_source(3)

        summary = solver.summary()
        assert summary["reachable_vertices"] == 0
        assert summary["min_distance"] == 0
        assert summary["avg_distance"] == 0.0

    def test_triangle_inequality_holds(self):
        rng = random.Random(5)
        n = 30
        edges = []
        for _ in range(90):
            u, v = sorted(rng.sample(range(n), 2))
            edges.append((u, v, rng.randint(-3, 10)))
        g = build_graph(n, edges)
        solver = ShortestPathSolver(g)
        assert solver.compute_from_source(0)

        dist = solver.get_all_distances()
        for u, v, w in g.iter_edges():
            if solver.is_reachable(u):
                assert dist[v] <= dist[u] + w


class TestLongestPaths:
    def test_small_dag_from_source(self, small_dag):
        solver = LongestPathSolver(small_dag)

        assert solver.compute_from_source(0)
        assert solver.get_all_distances() == [0, 5, 3]
        assert solver.get_path(1) == [0, 1]

    def test_unreachable_uses_negative_sentinel(self, small_dag):
        solver = LongestPathSolver(small_dag)
        solver.compute_from_source(2)

        assert solver.get_distance(0) == -math.inf
        assert not solver.is_reachable(0)

    def test_chain_critical_path(self, chain):
        solver = LongestPathSolver(chain)

        assert solver.compute_critical_path()
        cp = solver.critical_path()
        assert cp == CriticalPath([0, 1, 2, 3], 9)
        assert len(cp.path) == 4
        assert solver.source is None

    def test_diamond_critical_path(self, diamond):
        solver = LongestPathSolver(diamond)

        assert solver.compute_critical_path()
        cp = solver.critical_path()
        assert cp.length == 6
        assert cp.path == [0, 2, 3]

    def test_critical_path_tie_goes_to_lowest_vertex(self):
        # 0 -> 1 (4) and 2 -> 3 (4): both chains have length 4
        g = build_graph(4, [(0, 1, 4), (2, 3, 4)])
        solver = LongestPathSolver(g)
        solver.compute_critical_path()

        assert solver.critical_path() == CriticalPath([0, 1], 4)

    def test_critical_path_without_edges(self):
        solver = LongestPathSolver(TaskGraph(3))
        solver.compute_critical_path()

        assert solver.critical_path() == CriticalPath([0], 0)

    def test_critical_path_of_empty_graph(self):
        solver = LongestPathSolver(TaskGraph(0))

        assert solver.compute_critical_path()
        assert solver.critical_path() == CriticalPath([], 0)

    def test_critical_path_after_single_source(self, diamond):
        solver = LongestPathSolver(diamond)
        solver.compute_from_source(1)

        assert solver.critical_path() == CriticalPath([1, 3], 3)

    def test_longest_inequality_holds(self):
        rng = random.Random(11)
        n = 30
        edges = []
        for _ in range(90):
            u, v = sorted(rng.sample(range(n), 2))
            edges.append((u, v, rng.randint(-3, 10)))
        g = build_graph(n, edges)
        solver = LongestPathSolver(g)
        assert solver.compute_from_source(0)

        dist = solver.get_all_distances()
        for u, v, w in g.iter_edges():
            if solver.is_reachable(u):
                assert dist[v] >= dist[u] + w


class TestSolverContract:
    @pytest.mark.parametrize("solver_cls", [ShortestPathSolver, LongestPathSolver])
    def test_cycle_reports_failure(self, solver_cls, triangle_cycle):
        solver = solver_cls(triangle_cycle)

        assert solver.compute_from_source(0) is False
        with pytest.raises(RuntimeError):
            solver.get_distance(0)

    def test_critical_path_on_cycle_fails(self, triangle_cycle):
        solver = LongestPathSolver(triangle_cycle)

        assert solver.compute_critical_path() is False
        with pytest.raises(RuntimeError):
            solver.critical_path()

    @pytest.mark.parametrize("solver_cls", [ShortestPathSolver, LongestPathSolver])
    def test_undirected_graph_rejected(self, solver_cls):
        with pytest.raises(ValueError, match="directed"):
            solver_cls(TaskGraph(2, directed=False))

    def test_accessors_before_compute_raise(self, chain):
        solver = ShortestPathSolver(chain)

        for call in (
            lambda: solver.get_distance(0),
            lambda: solver.is_reachable(0),
            lambda: solver.get_path(0),
            solver.get_all_distances,
            solver.summary,
            lambda: solver.source,
        ):
            with pytest.raises(RuntimeError):
                call()

    def test_invalid_vertices(self, chain):
        solver = ShortestPathSolver(chain)

        with pytest.raises(ValueError):
            solver.compute_from_source(4)
        solver.compute_from_source(0)
        with pytest.raises(ValueError):
            solver.get_distance(-1)

    def test_reset_clears_results(self, chain):
        solver = ShortestPathSolver(chain)
        solver.compute_from_source(0)
        solver.reset()

        with pytest.raises(RuntimeError):
            solver.get_all_distances()
        assert solver.metrics.counters == {}

    def test_recompute_replaces_previous_run(self, chain):
        solver = ShortestPathSolver(chain)
        solver.compute_from_source(0)
        first_metrics = solver.metrics
        solver.compute_from_source(2)

        assert solver.get_all_distances() == [math.inf, math.inf, 0, 2]
        assert solver.metrics is not first_metrics
        assert solver.metrics.counter("edge_relaxations") == 1

    def test_metrics_distinguish_attempts_and_updates(self):
        g = build_graph(3, [(0, 1, 1), (0, 2, 5), (1, 2, 1), (0, 2, 9)])
        solver = ShortestPathSolver(g)
        solver.compute_from_source(0)
        metrics = solver.metrics

        assert metrics.counter("edge_relaxations") == 4
        # 0->1, 0->2 (5), 1->2 (2); 0->2 (9) is rejected
        assert metrics.counter("distance_updates") == 3

    def test_solvers_share_graph_independently(self, small_dag):
        shortest = ShortestPathSolver(small_dag)
        longest = LongestPathSolver(small_dag)
        shortest.compute_from_source(0)
        longest.compute_from_source(0)

        assert shortest.get_distance(1) == 4
        assert longest.get_distance(1) == 5

    def test_generic_solver_modes(self, small_dag):
        solver = DagPathSolver(small_dag, PathMode.LONGEST)

        assert solver.policy is LONGEST
        assert solver.mode == PathMode.LONGEST
        assert DagPathSolver(small_dag).policy is SHORTEST
        assert SHORTEST.better(1, 2) and LONGEST.better(2, 1)

    def test_topological_order_exposed(self, chain):
        solver = LongestPathSolver(chain)
        solver.compute_critical_path()

        assert solver.topological_order == [0, 1, 2, 3]

    @pytest.mark.parametrize("solver_cls", [ShortestPathSolver, LongestPathSolver])
    def test_timer_stopped_even_when_cycle_found(self, solver_cls, triangle_cycle, chain):
        for graph in (triangle_cycle, chain):
            solver = solver_cls(graph)
            solver.compute_from_source(0)
            assert not solver.metrics.is_running
            assert solver.metrics.elapsed_ns >= 0
