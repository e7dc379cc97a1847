import random

import pytest

from citygraph.algorithms.topo import (
    VisitState,
    is_valid_order,
    topological_sort_dfs,
    topological_sort_kahn,
)
from citygraph.graph.task_graph import TaskGraph
from tests.algorithms.sample_graphs import build_graph

SORTS = [topological_sort_dfs, topological_sort_kahn]


def positions(order):
    return {v: i for i, v in enumerate(order)}


@pytest.mark.parametrize("sort", SORTS)
def test_sorts_chain(sort, chain):
    result = sort(chain)

    assert result.is_dag
    assert result.order == [0, 1, 2, 3]
    assert is_valid_order(chain, result.order)


@pytest.mark.parametrize("sort", SORTS)
def test_every_edge_goes_forward(sort, diamond):
    result = sort(diamond)
    pos = positions(result.order)

    for u, v, _ in diamond.iter_edges():
        assert pos[u] < pos[v]


@pytest.mark.parametrize("sort", SORTS)
def test_cycle_gives_no_order(sort, triangle_cycle):
    result = sort(triangle_cycle)

    assert result.order is None
    assert not result.is_dag


@pytest.mark.parametrize("sort", SORTS)
def test_self_loop_is_a_cycle(sort):
    assert sort(build_graph(2, [(0, 1, 1), (1, 1, 1)])).order is None


@pytest.mark.parametrize("sort", SORTS)
def test_undirected_graph_rejected(sort):
    with pytest.raises(ValueError, match="directed"):
        sort(TaskGraph(2, directed=False))


def test_dfs_and_kahn_orders_can_differ():
    # 0 -> 2, 1 -> 2: both 0,1,2 and 1,0,2 are valid
    g = build_graph(3, [(0, 2, 1), (1, 2, 1)])

    dfs = topological_sort_dfs(g).order
    kahn = topological_sort_kahn(g).order

    assert dfs == [1, 0, 2]
    assert kahn == [0, 1, 2]
    assert is_valid_order(g, dfs)
    assert is_valid_order(g, kahn)


def test_dfs_metrics(diamond):
    metrics = topological_sort_dfs(diamond).metrics

    assert metrics.counter("dfs_visits") == 4
    assert metrics.counter("edge_traversals") == 4
    assert metrics.counter("stack_pushes") == 4
    assert metrics.counter("stack_pops") == 4


def test_kahn_metrics(diamond):
    metrics = topological_sort_kahn(diamond).metrics

    assert metrics.counter("queue_adds") == 4
    assert metrics.counter("queue_removes") == 4
    assert metrics.counter("degree_updates") == 4


def test_kahn_metrics_on_cycle_stop_early():
    g = build_graph(3, [(0, 1, 1), (1, 2, 1), (2, 1, 1)])
    result = topological_sort_kahn(g)

    assert result.order is None
    assert result.metrics.counter("queue_removes") == 1


def test_is_valid_order_rejects_bad_orders(diamond):
    assert not is_valid_order(diamond, None)
    assert not is_valid_order(diamond, [0, 1, 2])
    assert not is_valid_order(diamond, [0, 1, 1, 3])
    assert not is_valid_order(diamond, [0, 3, 1, 2])
    assert not is_valid_order(diamond, [0, 1, 2, 7])
    assert is_valid_order(diamond, [0, 2, 1, 3])


def test_empty_graph_has_empty_order():
    assert topological_sort_dfs(TaskGraph(0)).order == []
    assert topological_sort_kahn(TaskGraph(0)).order == []


def test_deep_dag_does_not_hit_recursion_limit():
    n = 20000
    g = build_graph(n, [(i, i + 1, 1) for i in range(n - 1)])

    assert topological_sort_dfs(g).order == list(range(n))


def test_visit_state_values():
    assert VisitState.UNVISITED < VisitState.IN_PROGRESS < VisitState.FINISHED


@pytest.mark.parametrize("seed", range(6))
def test_random_dags_sorted_by_both(seed):
    rng = random.Random(seed)
    n = 25
    edges = []
    for _ in range(60):
        u, v = rng.sample(range(n), 2)
        edges.append((min(u, v), max(u, v), rng.randint(1, 5)))
    # Relabel so that index order is not already topological
    perm = list(range(n))
    rng.shuffle(perm)
    g = build_graph(n, [(perm[u], perm[v], w) for u, v, w in edges])

    for sort in SORTS:
        result = sort(g)
        assert is_valid_order(g, result.order)


@pytest.mark.parametrize("sort", [topological_sort_dfs, topological_sort_kahn])
def test_timer_stopped_on_success_and_cycle(sort, triangle_cycle, diamond):
    for graph in (triangle_cycle, diamond):
        metrics = sort(graph).metrics
        assert not metrics.is_running
        assert metrics.elapsed_ns >= 0
