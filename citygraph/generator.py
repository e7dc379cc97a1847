"""Synthetic task graph generation.

Three shapes are produced, all directed with edge weights drawn uniformly
from ``[min_weight, max_weight]``:

- random graphs with a target density and, optionally, a planted cycle;
- DAGs whose edges only go from lower to higher vertex index;
- graphs made of planted strongly connected components (a ring per
  component plus random chords) joined by random inter-component edges.

``generate_standard_datasets`` writes the configured recipes as JSON files
under ``<output_dir>/<category>/<name>.json``.
"""

from __future__ import annotations

import random
from pathlib import Path
from typing import Dict, List, Optional, Set, Tuple, Union

from citygraph.config import DEFAULT_WEIGHT_MODEL, GENERATOR_CONFIG, GeneratorConfig
from citygraph.graph.io import GraphData, save_graph
from citygraph.graph.task_graph import TaskGraph
from citygraph.logging import get_logger
from citygraph.seed_manager import SeedManager

logger = get_logger(__name__)

EdgeTriple = Tuple[int, int, int]


def _validate_weights(min_weight: int, max_weight: int) -> None:
    if min_weight > max_weight:
        raise ValueError(
            f"min_weight ({min_weight}) must not exceed max_weight ({max_weight})"
        )


def _validate_density(density: float) -> None:
    if not 0.0 <= density <= 1.0:
        raise ValueError(f"density must be within [0, 1], got {density}")


def _build(n: int, edges: List[EdgeTriple], source: int) -> GraphData:
    graph = TaskGraph(n, True, DEFAULT_WEIGHT_MODEL)
    for u, v, w in edges:
        graph.add_edge(u, v, w)
    return GraphData(graph, source)


class DatasetGenerator:
    """Random task graph factory backed by one ``random.Random`` stream."""

    def __init__(self, rng: Optional[random.Random] = None, seed: Optional[int] = 42):
        """
        Args:
            rng: Random stream to draw from. Takes precedence over ``seed``.
            seed: Seed for a new stream when ``rng`` is not given.
        """
        self._rng = rng if rng is not None else random.Random(seed)

    def _weight(self, min_weight: int, max_weight: int) -> int:
        return self._rng.randint(min_weight, max_weight)

    def generate_graph(
        self,
        n: int,
        density: float,
        min_weight: int,
        max_weight: int,
        ensure_cycle: bool = False,
    ) -> GraphData:
        """Random directed graph without self-loops or parallel edges.

        Args:
            n: Number of vertices (at least 2 when ``ensure_cycle``).
            density: Fraction of the ``n * (n - 1)`` possible edges to create.
            min_weight: Smallest edge weight.
            max_weight: Largest edge weight.
            ensure_cycle: Plant a ring over 2-5 distinct random vertices first.

        Returns:
            GraphData with a random source vertex.
        """
        _validate_weights(min_weight, max_weight)
        _validate_density(density)
        if n < 1 or (ensure_cycle and n < 2):
            raise ValueError(f"Not enough vertices ({n}) for the requested graph")

        rng = self._rng
        source = rng.randrange(n)
        edges: List[EdgeTriple] = []
        seen: Set[Tuple[int, int]] = set()

        if ensure_cycle:
            cycle_size = rng.randint(2, min(5, n))
            ring = rng.sample(range(n), cycle_size)
            for i, u in enumerate(ring):
                v = ring[(i + 1) % cycle_size]
                edges.append((u, v, self._weight(min_weight, max_weight)))
                seen.add((u, v))

        target = int(n * (n - 1) * density)
        while len(edges) < target:
            u = rng.randrange(n)
            v = rng.randrange(n)
            if u == v or (u, v) in seen:
                continue
            edges.append((u, v, self._weight(min_weight, max_weight)))
            seen.add((u, v))

        return _build(n, edges, source)

    def generate_dag(
        self, n: int, density: float, min_weight: int, max_weight: int
    ) -> GraphData:
        """Random DAG: a shuffled sample of the forward pairs ``u < v``.

        The source is vertex 0.
        """
        _validate_weights(min_weight, max_weight)
        _validate_density(density)
        if n < 1:
            raise ValueError(f"Not enough vertices ({n}) for the requested graph")

        candidates = [
            (u, v, self._weight(min_weight, max_weight))
            for u in range(n)
            for v in range(u + 1, n)
        ]
        self._rng.shuffle(candidates)
        target = int(len(candidates) * density)
        return _build(n, candidates[:target], 0)

    def generate_multiple_sccs(
        self,
        num_sccs: int,
        min_scc_size: int,
        max_scc_size: int,
        inter_scc_density: float,
        min_weight: int,
        max_weight: int,
    ) -> GraphData:
        """Graph with planted strongly connected components.

        Components occupy consecutive vertex ranges. Inter-component edges
        may create larger merged components when they close a loop.

        The source is the first vertex of the first component.
        """
        _validate_weights(min_weight, max_weight)
        _validate_density(inter_scc_density)
        if num_sccs < 1 or min_scc_size < 1 or min_scc_size > max_scc_size:
            raise ValueError("Invalid component count or size range")

        rng = self._rng
        groups: List[List[int]] = []
        edges: List[EdgeTriple] = []
        next_vertex = 0

        for _ in range(num_sccs):
            size = rng.randint(min_scc_size, max_scc_size)
            group = list(range(next_vertex, next_vertex + size))
            next_vertex += size
            groups.append(group)

            if size > 1:
                for j, u in enumerate(group):
                    edges.append((u, group[(j + 1) % size], self._weight(min_weight, max_weight)))

            # A few chords inside the component
            for u in group:
                if rng.random() < 0.3:
                    v = rng.choice(group)
                    if u != v:
                        edges.append((u, v, self._weight(min_weight, max_weight)))

        for i, src_group in enumerate(groups):
            for j, dst_group in enumerate(groups):
                if i != j and rng.random() < inter_scc_density:
                    edges.append(
                        (
                            rng.choice(src_group),
                            rng.choice(dst_group),
                            self._weight(min_weight, max_weight),
                        )
                    )

        return _build(next_vertex, edges, groups[0][0])


def generate_standard_datasets(
    output_dir: Union[str, Path],
    config: GeneratorConfig = GENERATOR_CONFIG,
) -> Dict[str, Path]:
    """Generate every configured dataset recipe as a JSON file.

    Args:
        output_dir: Root directory; files go to ``<category>/<name>.json``.
        config: Generator configuration (master seed and recipes).

    Returns:
        Mapping of dataset name to written path, in recipe order.
    """
    output_dir = Path(output_dir)
    seeds = SeedManager(config.master_seed)
    written: Dict[str, Path] = {}

    for recipe in config.recipes:
        generator = DatasetGenerator(seeds.dataset_rng(recipe.name))
        if recipe.kind == "dag":
            data = generator.generate_dag(**recipe.params)
        elif recipe.kind == "graph":
            data = generator.generate_graph(**recipe.params)
        elif recipe.kind == "multi_scc":
            data = generator.generate_multiple_sccs(**recipe.params)
        else:
            raise ValueError(f"Unknown dataset kind '{recipe.kind}' in recipe {recipe.name}")

        path = save_graph(
            data.graph, output_dir / recipe.category / f"{recipe.name}.json", data.source
        )
        written[recipe.name] = path
        logger.info(
            f"Generated {path} (n={data.graph.vertex_count}, edges={data.graph.edge_count})"
        )

    return written
