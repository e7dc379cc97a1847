"""Graph conversion utilities between TaskGraph and NetworkX graphs.

Parallel edges survive the round trip because the multigraph variants are
used on the NetworkX side. Edge weights travel in the ``weight`` attribute
and the weight model tag in the graph attribute ``weight_model``.
"""

from typing import Optional, Union

import networkx as nx

from citygraph.config import DEFAULT_WEIGHT_MODEL
from citygraph.graph.task_graph import TaskGraph


def to_networkx(graph: TaskGraph) -> Union[nx.MultiDiGraph, nx.MultiGraph]:
    """Convert a TaskGraph to a NetworkX multigraph.

    Directed graphs become ``MultiDiGraph``; undirected graphs become
    ``MultiGraph`` with each undirected edge added once.

    Args:
        graph: The graph to convert.

    Returns:
        A NetworkX multigraph with nodes ``0..n-1``.
    """
    nx_graph = nx.MultiDiGraph() if graph.is_directed else nx.MultiGraph()
    nx_graph.graph["weight_model"] = graph.weight_model
    nx_graph.add_nodes_from(range(graph.vertex_count))

    if graph.is_directed:
        for u, v, w in graph.iter_edges():
            nx_graph.add_edge(u, v, weight=w)
        return nx_graph

    # Undirected records come in mirrored pairs; add each pair once.
    seen = {}
    for u, v, w in graph.iter_edges():
        mirror = (v, u, w)
        if seen.get(mirror, 0) > 0:
            seen[mirror] -= 1
            continue
        seen[(u, v, w)] = seen.get((u, v, w), 0) + 1
        nx_graph.add_edge(u, v, weight=w)
    return nx_graph


def from_networkx(
    nx_graph: nx.Graph,
    weight: str = "weight",
    default_weight: int = 1,
    weight_model: Optional[str] = None,
) -> TaskGraph:
    """Convert a NetworkX graph with nodes ``0..n-1`` to a TaskGraph.

    Args:
        nx_graph: Any NetworkX graph type.
        weight: Edge attribute holding the weight.
        default_weight: Weight used for edges without the attribute.
        weight_model: Tag for the result; defaults to the graph attribute
            ``weight_model`` or ``"edge"``.

    Returns:
        A TaskGraph with the same directedness, vertices and edges.

    Raises:
        ValueError: If the node labels are not exactly ``0..n-1``.
    """
    n = nx_graph.number_of_nodes()
    if set(nx_graph.nodes) != set(range(n)):
        raise ValueError("NetworkX graph nodes must be the integers 0..n-1.")

    if weight_model is None:
        weight_model = nx_graph.graph.get("weight_model", DEFAULT_WEIGHT_MODEL)

    graph = TaskGraph(n, nx_graph.is_directed(), weight_model)
    for u, v, data in nx_graph.edges(data=True):
        graph.add_edge(u, v, int(data.get(weight, default_weight)))
    return graph
