"""Graph primitives and helpers.

This package provides the task dependency graph type `TaskGraph` and helper
modules for networkx conversion (`convert`) and file ingestion (`io`).
"""

from citygraph.graph.task_graph import Edge, TaskGraph

__all__ = ["Edge", "TaskGraph"]
