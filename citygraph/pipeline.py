"""End-to-end analysis of a task graph.

Runs the stages in dependency order:

1. strongly connected components of the original graph;
2. condensation into a DAG, with an independent acyclicity check;
3. depth-first and Kahn topological orders of the condensation;
4. task ordering derived from the depth-first component order;
5. shortest and longest paths from the source's component, and the
   critical path over the whole condensation.

Path analysis runs on the condensation, so it always succeeds even when the
original graph has cycles.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from citygraph.algorithms.condensation import Condenser
from citygraph.algorithms.dag_paths import (
    CriticalPath,
    LongestPathSolver,
    ShortestPathSolver,
)
from citygraph.algorithms.scc import ComponentResult, find_components
from citygraph.algorithms.task_order import TaskOrdering
from citygraph.algorithms.topo import (
    TopoResult,
    is_valid_order,
    topological_sort_dfs,
    topological_sort_kahn,
)
from citygraph.graph.task_graph import TaskGraph
from citygraph.logging import get_logger

logger = get_logger(__name__)


@dataclass
class PipelineResult:
    """Everything computed for one graph.

    Attributes:
        graph: The analyzed graph.
        source: Source vertex in the original graph.
        components: SCC partition of ``graph``.
        condenser: Condenser holding the condensation.
        condensation_is_dag: Result of the independent acyclicity check.
        dfs_order: Depth-first topological sort of the condensation.
        kahn_order: Kahn topological sort of the condensation.
        dfs_order_valid: Whether ``dfs_order`` passes ``is_valid_order``.
        kahn_order_valid: Whether ``kahn_order`` passes ``is_valid_order``.
        task_ordering: Task-level view of ``dfs_order`` (None if no order).
        source_component: Condensation vertex containing ``source``.
        shortest: Shortest paths from ``source_component``.
        longest: Longest paths from ``source_component``.
        critical: Solver holding the whole-graph critical path computation.
    """

    graph: TaskGraph
    source: int
    components: ComponentResult
    condenser: Condenser
    condensation_is_dag: bool
    dfs_order: TopoResult
    kahn_order: TopoResult
    dfs_order_valid: bool
    kahn_order_valid: bool
    source_component: int
    shortest: ShortestPathSolver
    longest: LongestPathSolver
    critical: LongestPathSolver
    task_ordering: Optional[TaskOrdering] = None

    @property
    def condensation(self) -> TaskGraph:
        return self.condenser.condensation

    @property
    def critical_path(self) -> CriticalPath:
        return self.critical.critical_path()


def analyze_graph(graph: TaskGraph, source: int = 0) -> PipelineResult:
    """Run the full analysis pipeline on ``graph``.

    Args:
        graph: Directed task graph.
        source: Source vertex used for single-source path analysis.

    Returns:
        PipelineResult with every stage's output.

    Raises:
        ValueError: If the graph is undirected, empty, or ``source`` is out
            of range.
    """
    if not graph.is_directed:
        raise ValueError("Pipeline analysis requires a directed graph")
    n = graph.vertex_count
    if not 0 <= source < n:
        raise ValueError(f"Source vertex {source} is out of range [0, {n}).")

    logger.debug(f"Analyzing {graph!r} from source {source}")

    components = find_components(graph)

    condenser = Condenser(graph, components.components, components.component_of)
    dag = condenser.build()
    condensation_is_dag = condenser.is_acyclic()
    if not condensation_is_dag:
        # Unreachable for a correct partition
        logger.error("Condensation is not acyclic; component partition is inconsistent")

    dfs_order = topological_sort_dfs(dag)
    kahn_order = topological_sort_kahn(dag)

    task_ordering = None
    if dfs_order.order is not None:
        task_ordering = TaskOrdering(dfs_order.order, components.components)

    source_component = condenser.component_for_vertex(source)

    shortest = ShortestPathSolver(dag)
    shortest.compute_from_source(source_component)

    critical = LongestPathSolver(dag)
    critical.compute_critical_path()

    longest = LongestPathSolver(dag)
    longest.compute_from_source(source_component)

    result = PipelineResult(
        graph=graph,
        source=source,
        components=components,
        condenser=condenser,
        condensation_is_dag=condensation_is_dag,
        dfs_order=dfs_order,
        kahn_order=kahn_order,
        dfs_order_valid=is_valid_order(dag, dfs_order.order),
        kahn_order_valid=is_valid_order(dag, kahn_order.order),
        source_component=source_component,
        shortest=shortest,
        longest=longest,
        critical=critical,
        task_ordering=task_ordering,
    )
    logger.debug(
        f"Analysis complete: {components.count} components, "
        f"{dag.edge_count} condensation edges, "
        f"critical path length {result.critical_path.length}"
    )
    return result
