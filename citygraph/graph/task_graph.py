"""Weighted task dependency graph with integer vertices.

`TaskGraph` stores, for each vertex ``0..n-1``, the ordered list of its
outgoing edges. Parallel edges and self-loops are kept as separate records.
Undirected graphs store each edge twice (once per direction) and report the
halved count from ``edge_count``.

Every algorithm in ``citygraph.algorithms`` reads a graph but never mutates it.
"""

from __future__ import annotations

from typing import Iterator, List, NamedTuple, Tuple

from citygraph.config import DEFAULT_WEIGHT_MODEL

Vertex = int
EdgeTuple = Tuple[Vertex, Vertex, int]


class Edge(NamedTuple):
    """Outgoing edge record: destination vertex and signed integer weight."""

    to: Vertex
    weight: int

    def __repr__(self) -> str:
        return f"->{self.to} (w={self.weight})"


class TaskGraph:
    """A weighted graph over vertices ``0..n-1`` with adjacency lists.

    This class enforces:
      - Vertex ids must lie in ``[0, n)``; anything else raises ValueError.
      - Edges are kept in insertion order per source vertex.
      - The vertex count is fixed at construction.

    Attributes:
        weight_model: Opaque tag describing how weights are meant
            (``"edge"`` or ``"node"``). Not interpreted by the algorithms.
    """

    def __init__(
        self,
        n: int,
        directed: bool = True,
        weight_model: str = DEFAULT_WEIGHT_MODEL,
    ) -> None:
        """Create an empty graph.

        Args:
            n: Number of vertices.
            directed: Whether edges are one-way.
            weight_model: Opaque weight interpretation tag.

        Raises:
            ValueError: If ``n`` is negative.
        """
        if n < 0:
            raise ValueError(f"Vertex count must be non-negative, got {n}.")
        self._n = n
        self._directed = directed
        self.weight_model = weight_model
        self._adj: List[List[Edge]] = [[] for _ in range(n)]

    def _check_vertex(self, v: Vertex) -> None:
        if not isinstance(v, int) or isinstance(v, bool) or not 0 <= v < self._n:
            raise ValueError(f"Vertex {v!r} is out of range [0, {self._n}).")

    #
    # Mutation
    #
    def add_edge(self, u: Vertex, v: Vertex, w: int) -> None:
        """Append an edge ``u -> v`` with weight ``w``.

        For undirected graphs the mirrored edge ``v -> u`` is appended too.

        Raises:
            ValueError: If either endpoint is out of range.
        """
        self._check_vertex(u)
        self._check_vertex(v)
        self._adj[u].append(Edge(v, w))
        if not self._directed:
            self._adj[v].append(Edge(u, w))

    #
    # Read accessors
    #
    def get_edges(self, u: Vertex) -> List[Edge]:
        """Return the outgoing edges of ``u`` in insertion order.

        The returned list is a copy; mutating it does not affect the graph.
        """
        self._check_vertex(u)
        return list(self._adj[u])

    def iter_edges(self) -> Iterator[EdgeTuple]:
        """Yield every stored edge record as ``(u, v, w)``.

        Undirected graphs yield both directions of each edge.
        """
        for u, edges in enumerate(self._adj):
            for edge in edges:
                yield u, edge.to, edge.weight

    @property
    def vertex_count(self) -> int:
        return self._n

    @property
    def edge_count(self) -> int:
        """Number of edges; undirected edges are counted once."""
        count = sum(len(edges) for edges in self._adj)
        return count if self._directed else count // 2

    @property
    def is_directed(self) -> bool:
        return self._directed

    def reverse(self) -> TaskGraph:
        """Return a new graph with every edge flipped; weights are preserved."""
        reversed_graph = TaskGraph(self._n, self._directed, self.weight_model)
        for u, edges in enumerate(self._adj):
            for edge in edges:
                reversed_graph._adj[edge.to].append(Edge(u, edge.weight))
        return reversed_graph

    def __len__(self) -> int:
        return self._n

    def __repr__(self) -> str:
        return (
            f"TaskGraph(n={self._n}, edges={self.edge_count}, "
            f"directed={self._directed}, weight_model={self.weight_model!r})"
        )

    def __str__(self) -> str:
        lines = [
            f"Graph: n={self._n}, edges={self.edge_count}, "
            f"directed={self._directed}, weightModel={self.weight_model}"
        ]
        for u, edges in enumerate(self._adj):
            lines.append(f"  {u}: {edges}")
        return "\n".join(lines)
