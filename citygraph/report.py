"""Plain-text rendering of analysis results.

Every function here only reads public accessors of the algorithm results and
returns a string; nothing is printed. ``render_analysis`` assembles the full
report for one `PipelineResult`.
"""

from __future__ import annotations

from typing import Any, List, Optional

from citygraph.algorithms.condensation import Condenser
from citygraph.algorithms.dag_paths import DagPathSolver, LongestPathSolver
from citygraph.algorithms.metrics import AlgorithmMetrics
from citygraph.algorithms.scc import ComponentResult
from citygraph.algorithms.task_order import TaskOrdering
from citygraph.algorithms.topo import TopoResult
from citygraph.graph.task_graph import TaskGraph
from citygraph.pipeline import PipelineResult

_RULE = "=" * 50
_PATH_COL_WIDTH = 60


def format_table(
    headers: List[str],
    rows: List[List[Any]],
    min_width: int = 8,
    max_col_width: Optional[int] = None,
) -> str:
    """Format data as a simple ASCII table.

    Args:
        headers: Column headers.
        rows: Data rows.
        min_width: Minimum column width.
        max_col_width: Clip cells longer than this, ending with ``...``.

    Returns:
        Formatted table string, or an empty string when there are no rows.
    """
    if not rows:
        return ""

    def clip(val: Any) -> str:
        s = str(val)
        if max_col_width is not None and len(s) > max_col_width:
            return s[: max_col_width - 3] + "..."
        return s

    clipped_headers = [clip(h) for h in headers]
    clipped_rows = [[clip(item) for item in row] for row in rows]

    all_data = [clipped_headers] + clipped_rows
    col_widths = [
        max(max(len(row[col]) for row in all_data), min_width)
        for col in range(len(clipped_headers))
    ]

    def format_row(row_data: List[str]) -> str:
        return "   " + " | ".join(
            f"{item:<{col_widths[i]}}" for i, item in enumerate(row_data)
        )

    lines = [format_row(clipped_headers)]
    lines.append("   " + "-+-".join("-" * width for width in col_widths))
    lines.extend(format_row(row) for row in clipped_rows)
    return "\n".join(lines)


def _section(title: str) -> List[str]:
    return ["", _RULE, title, _RULE]


def format_graph_summary(graph: TaskGraph, source: int) -> str:
    return "\n".join(
        [
            "=== Graph Analysis ===",
            f"Vertices: {graph.vertex_count}",
            f"Edges: {graph.edge_count}",
            f"Directed: {graph.is_directed}",
            f"Weight Model: {graph.weight_model}",
            f"Source vertex: {source}",
        ]
    )


def format_metrics(metrics: AlgorithmMetrics) -> str:
    return metrics.report()


def format_components(result: ComponentResult) -> str:
    lines = ["=== Strongly Connected Components ===", f"Number of SCCs: {result.count}"]
    lines.extend(
        f"SCC {i} (size {len(comp)}): {comp}" for i, comp in enumerate(result.components)
    )
    sizes = ", ".join(f"{size}x{count}" for size, count in result.size_summary().items())
    lines.append(f"Size summary (size x count): {sizes or '-'}")
    lines.extend(["", format_metrics(result.metrics)])
    return "\n".join(lines)


def format_condensation(condenser: Condenser) -> str:
    dag = condenser.condensation
    lines = [
        "=== Condensation Graph (DAG) ===",
        f"Components: {dag.vertex_count}",
        f"Inter-component edges: {dag.edge_count}",
        "",
        "Component details:",
    ]
    for i in range(dag.vertex_count):
        lines.append(f"Component {i}: vertices {condenser.vertices_in_component(i)}")
        edges = dag.get_edges(i)
        if edges:
            lines.append(f"  Edges to: {edges}")
    lines.append("")
    lines.append(f"Is condensation a valid DAG? {condenser.is_acyclic()}")
    return "\n".join(lines)


def format_topological_order(result: TopoResult, valid: Optional[bool] = None) -> str:
    label = "DFS-based" if result.algorithm == "dfs" else "Kahn's"
    lines = [f"=== Topological Sort ({label} algorithm) ==="]
    if result.order is None:
        lines.append("ERROR: Graph contains a cycle (not a DAG)")
    else:
        lines.append(f"Topological order: {result.order}")
        lines.append(f"Number of vertices: {len(result.order)}")
        if valid is not None:
            lines.append(f"Valid topological order? {valid}")
    lines.extend(["", format_metrics(result.metrics)])
    return "\n".join(lines)


def format_task_order(ordering: TaskOrdering) -> str:
    groups = ordering.grouped_order()
    lines = [
        "=== Task Ordering (Derived from Component Order) ===",
        f"Total tasks: {sum(len(g) for g in groups)}",
        "",
        "Task execution order:",
    ]
    for step, (comp, group) in enumerate(zip(ordering.component_order, groups), start=1):
        lines.append(
            f"Step {step} - Component {comp} (SCC with {len(group)} tasks): {group}"
        )
    lines.append("")
    lines.append(f"Full task sequence: {ordering.task_order()}")
    return "\n".join(lines)


def _format_distance(value: Any) -> str:
    if value in (float("inf"), float("-inf")):
        return "unreachable"
    return str(value)


def format_paths(solver: DagPathSolver, title: str) -> str:
    """Distances, paths and metrics of a solved path computation."""
    lines = [f"=== {title} ==="]
    source = solver.source
    distances = solver.get_all_distances()

    rows = []
    for v, d in enumerate(distances):
        path = solver.get_path(v)
        rows.append([v, _format_distance(d), " -> ".join(map(str, path)) or "-"])
    lines.append(f"From source: {source}" if source is not None else "All vertices as start")
    lines.append(
        format_table(["Vertex", "Distance", "Path"], rows, max_col_width=_PATH_COL_WIDTH)
    )

    if isinstance(solver, LongestPathSolver):
        cp = solver.critical_path()
        lines.extend(["", "*** Critical Path ***", f"Path: {cp.path}", f"Length: {cp.length}"])

    lines.extend(["", format_metrics(solver.metrics)])
    return "\n".join(lines)


def render_analysis(result: PipelineResult) -> str:
    """Full human-readable report for one pipeline run."""
    parts: List[str] = [format_graph_summary(result.graph, result.source)]

    parts.extend(_section("STEP 1: Finding Strongly Connected Components"))
    parts.append(format_components(result.components))

    parts.extend(_section("STEP 2: Building Condensation Graph"))
    parts.append(format_condensation(result.condenser))

    parts.extend(_section("STEP 3: Topological Sorting of Components"))
    parts.append(format_topological_order(result.dfs_order, result.dfs_order_valid))
    if result.task_ordering is not None:
        parts.extend(["", format_task_order(result.task_ordering)])
    parts.extend(["", format_topological_order(result.kahn_order, result.kahn_order_valid)])

    parts.extend(_section("STEP 4: Shortest Paths in DAG"))
    parts.append(f"Original source vertex: {result.source}")
    parts.append(f"Condensation source component: {result.source_component}")
    parts.append(format_paths(result.shortest, "Shortest Paths"))
    parts.append(f"Summary: {result.shortest.summary()}")

    parts.extend(_section("STEP 5: Longest Paths (Critical Path Analysis)"))
    parts.append(format_paths(result.critical, "Longest Paths (critical path)"))
    parts.append("")
    parts.append(format_paths(result.longest, f"Longest Paths from {result.source_component}"))

    return "\n".join(parts)
