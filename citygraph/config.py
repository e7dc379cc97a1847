"""Configuration classes for citygraph components."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple

# Weight model tag stored on graphs when a description does not name one.
DEFAULT_WEIGHT_MODEL = "edge"

# Dataset analyzed by ``citygraph analyze`` when no path is given.
DEFAULT_DATASET = "data/tasks.json"


@dataclass(frozen=True)
class DatasetRecipe:
    """One named dataset produced by the generator.

    Attributes:
        name: File stem of the dataset (``<category>/<name>.json``).
        category: Size bucket (``small``, ``medium`` or ``large``).
        kind: Generator entry point: ``dag``, ``graph`` or ``multi_scc``.
        params: Keyword arguments forwarded to the generator method.
    """

    name: str
    category: str
    kind: str
    params: Dict[str, Any] = field(default_factory=dict)


def _standard_recipes() -> List[DatasetRecipe]:
    return [
        DatasetRecipe(
            "small1_dag", "small", "dag",
            {"n": 8, "density": 0.3, "min_weight": 1, "max_weight": 10},
        ),
        DatasetRecipe(
            "small2_cycle", "small", "graph",
            {"n": 7, "density": 0.25, "min_weight": 1, "max_weight": 8, "ensure_cycle": True},
        ),
        DatasetRecipe(
            "small3_multi_scc", "small", "multi_scc",
            {"num_sccs": 3, "min_scc_size": 2, "max_scc_size": 3,
             "inter_scc_density": 0.4, "min_weight": 1, "max_weight": 5},
        ),
        DatasetRecipe(
            "medium1_sparse_dag", "medium", "dag",
            {"n": 15, "density": 0.2, "min_weight": 1, "max_weight": 15},
        ),
        DatasetRecipe(
            "medium2_dense_cycles", "medium", "graph",
            {"n": 12, "density": 0.4, "min_weight": 2, "max_weight": 12, "ensure_cycle": True},
        ),
        DatasetRecipe(
            "medium3_scc_connected", "medium", "multi_scc",
            {"num_sccs": 4, "min_scc_size": 3, "max_scc_size": 5,
             "inter_scc_density": 0.3, "min_weight": 1, "max_weight": 10},
        ),
        DatasetRecipe(
            "large1_sparse_dag", "large", "dag",
            {"n": 35, "density": 0.15, "min_weight": 1, "max_weight": 20},
        ),
        DatasetRecipe(
            "large2_dense_cycles", "large", "graph",
            {"n": 30, "density": 0.25, "min_weight": 1, "max_weight": 15, "ensure_cycle": True},
        ),
        DatasetRecipe(
            "large3_complex_scc", "large", "multi_scc",
            {"num_sccs": 8, "min_scc_size": 3, "max_scc_size": 7,
             "inter_scc_density": 0.2, "min_weight": 1, "max_weight": 12},
        ),
    ]


@dataclass
class GeneratorConfig:
    """Configuration for synthetic dataset generation."""

    # Master seed; each dataset derives its own seed from it
    master_seed: int = 42

    recipes: List[DatasetRecipe] = field(default_factory=_standard_recipes)


@dataclass
class BenchmarkConfig:
    """Configuration for the batch benchmark harness."""

    # Sub-directories of the data directory, scanned in this order
    categories: Tuple[str, ...] = ("small", "medium", "large")

    # Glob matched inside each category directory
    dataset_glob: str = "*.json"

    data_dir: str = "data"
    report_name: str = "benchmark_report.txt"

    # Width of the dataset name column in the text report
    name_width: int = 30


# Global configuration instances
GENERATOR_CONFIG = GeneratorConfig()
BENCHMARK_CONFIG = BenchmarkConfig()
