"""citygraph: dependency analysis for smart city task graphs.

citygraph finds cyclic dependency clusters in a weighted task graph,
condenses them into an acyclic graph, orders the result, and computes
shortest, longest and critical paths for timing analysis.

Primary API:
    TaskGraph - Weighted adjacency-list graph over vertices 0..n-1
    find_components() - Tarjan strongly connected components
    Condenser - Component condensation (always a DAG)
    topological_sort_dfs() / topological_sort_kahn() - DAG orderings
    TaskOrdering - Task phases derived from a component order
    ShortestPathSolver / LongestPathSolver - DAG path analysis
    analyze_graph() - Run every stage in order

Example:
    from citygraph import TaskGraph, analyze_graph

    g = TaskGraph(3)
    g.add_edge(0, 1, 5)
    g.add_edge(0, 2, 3)
    g.add_edge(2, 1, 1)

    result = analyze_graph(g, source=0)
    print(result.critical_path)
"""

from __future__ import annotations

from citygraph import cli, logging
from citygraph._version import __version__
from citygraph.algorithms import (
    AlgorithmMetrics,
    ComponentResult,
    Condenser,
    CriticalPath,
    DagPathSolver,
    LongestPathSolver,
    PathMode,
    ShortestPathSolver,
    TaskOrdering,
    TopoResult,
    find_components,
    is_valid_order,
    topological_sort_dfs,
    topological_sort_kahn,
)
from citygraph.graph import Edge, TaskGraph
from citygraph.graph.convert import from_networkx, to_networkx
from citygraph.graph.io import GraphData, load_graph, save_graph
from citygraph.pipeline import PipelineResult, analyze_graph

__all__ = [
    # Version
    "__version__",
    # Graph
    "Edge",
    "TaskGraph",
    "GraphData",
    "load_graph",
    "save_graph",
    "from_networkx",
    "to_networkx",
    # Algorithms
    "AlgorithmMetrics",
    "ComponentResult",
    "Condenser",
    "CriticalPath",
    "DagPathSolver",
    "LongestPathSolver",
    "PathMode",
    "ShortestPathSolver",
    "TaskOrdering",
    "TopoResult",
    "find_components",
    "is_valid_order",
    "topological_sort_dfs",
    "topological_sort_kahn",
    # Pipeline
    "PipelineResult",
    "analyze_graph",
    # Utilities
    "cli",
    "logging",
]
