"""Graph analysis algorithms: components, condensation, ordering, DAG paths."""

from citygraph.algorithms.condensation import Condenser, has_cycle
from citygraph.algorithms.dag_paths import (
    CriticalPath,
    DagPathSolver,
    LongestPathSolver,
    PathMode,
    RelaxPolicy,
    ShortestPathSolver,
)
from citygraph.algorithms.metrics import AlgorithmMetrics
from citygraph.algorithms.scc import ComponentResult, find_components
from citygraph.algorithms.task_order import TaskOrdering
from citygraph.algorithms.topo import (
    TopoResult,
    is_valid_order,
    topological_sort_dfs,
    topological_sort_kahn,
)

__all__ = [
    "AlgorithmMetrics",
    "ComponentResult",
    "Condenser",
    "CriticalPath",
    "DagPathSolver",
    "LongestPathSolver",
    "PathMode",
    "RelaxPolicy",
    "ShortestPathSolver",
    "TaskOrdering",
    "TopoResult",
    "find_components",
    "has_cycle",
    "is_valid_order",
    "topological_sort_dfs",
    "topological_sort_kahn",
]
