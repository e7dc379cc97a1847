"""Reading and writing task graph descriptions.

A description is a mapping with the following keys::

    {
      "directed": true,
      "n": 8,
      "edges": [{"u": 0, "v": 1, "w": 3}, ...],
      "source": 4,             # optional, default 0
      "weight_model": "edge"   # optional, default "edge"
    }

Files may be JSON (``.json``) or YAML (``.yaml`` / ``.yml``). Edge order in
the description becomes adjacency order in the resulting graph.
"""

from __future__ import annotations

import json
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any, Dict, List, NamedTuple, Union

import jsonschema
import yaml

from citygraph.config import DEFAULT_WEIGHT_MODEL
from citygraph.graph.task_graph import TaskGraph
from citygraph.logging import get_logger

logger = get_logger(__name__)

_JSON_SUFFIXES = {".json"}
_YAML_SUFFIXES = {".yaml", ".yml"}


class GraphData(NamedTuple):
    """A loaded graph together with its designated source vertex."""

    graph: TaskGraph
    source: int


def _require_int(value: Any, what: str) -> int:
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{what} must be an integer, got {value!r}")
    return value


@lru_cache(maxsize=1)
def _graph_schema() -> Dict[str, Any]:
    with (
        resources.files("citygraph.schemas")
        .joinpath("graph.json")
        .open("r", encoding="utf-8")
    ) as f:
        return json.load(f)


def _check_shape(data: Any) -> None:
    # Early checks give friendlier messages than the schema errors
    if not isinstance(data, dict):
        raise ValueError("Graph description must be a mapping at top level.")
    for key in ("directed", "n", "edges"):
        if key not in data:
            raise ValueError(f"Graph description is missing required key '{key}'")

    if not isinstance(data["directed"], bool):
        raise ValueError(f"'directed' must be a boolean, got {data['directed']!r}")
    _require_int(data["n"], "'n'")
    _require_int(data.get("source", 0), "'source'")
    weight_model = data.get("weight_model", DEFAULT_WEIGHT_MODEL)
    if not isinstance(weight_model, str):
        raise ValueError(f"'weight_model' must be a string, got {weight_model!r}")

    edges = data["edges"]
    if not isinstance(edges, list):
        raise ValueError("'edges' must be a list")
    for idx, entry in enumerate(edges):
        if not isinstance(entry, dict):
            raise ValueError(f"Edge #{idx} must be a mapping with 'u', 'v' and 'w'")
        missing = [k for k in ("u", "v", "w") if k not in entry]
        if missing:
            raise ValueError(f"Edge #{idx} is missing {', '.join(missing)}")
        for k in ("u", "v", "w"):
            _require_int(entry[k], f"Edge #{idx} '{k}'")


def validate_graph_dict(data: Any) -> None:
    """Check ``data`` against the packaged ``graph.json`` schema.

    Unknown keys, at top level or on an edge, are rejected.

    Raises:
        ValueError: If the description does not match the schema.
    """
    _check_shape(data)
    try:
        jsonschema.validate(data, _graph_schema())
    except jsonschema.ValidationError as exc:
        location = "/".join(str(p) for p in exc.absolute_path) or "<root>"
        raise ValueError(f"Invalid graph description at {location}: {exc.message}") from exc


def graph_from_dict(data: Dict[str, Any]) -> GraphData:
    """Build a graph from a parsed description.

    Args:
        data: Mapping in the documented description format.

    Returns:
        GraphData with the constructed graph and source vertex.

    Raises:
        ValueError: If the description fails validation or an edge endpoint
            or the source is out of range.
    """
    validate_graph_dict(data)

    n = data["n"]
    graph = TaskGraph(n, data["directed"], data.get("weight_model", DEFAULT_WEIGHT_MODEL))
    for entry in data["edges"]:
        graph.add_edge(entry["u"], entry["v"], entry["w"])

    source = data.get("source", 0)
    if n > 0 and not 0 <= source < n:
        raise ValueError(f"Source vertex {source} is out of range [0, {n}).")

    return GraphData(graph, source)


def graph_to_dict(graph: TaskGraph, source: int = 0) -> Dict[str, Any]:
    """Return the description mapping for ``graph``.

    Undirected edges are emitted once, from the record stored at the lower
    position of the pair, so that loading the result reproduces the graph.
    """
    edges: List[Dict[str, int]] = []
    if graph.is_directed:
        edges = [{"u": u, "v": v, "w": w} for u, v, w in graph.iter_edges()]
    else:
        # Each undirected edge is stored as two records; skip the mirror.
        pending: Dict[tuple, int] = {}
        for u, v, w in graph.iter_edges():
            mirror = (v, u, w)
            if pending.get(mirror, 0) > 0:
                pending[mirror] -= 1
                continue
            pending[(u, v, w)] = pending.get((u, v, w), 0) + 1
            edges.append({"u": u, "v": v, "w": w})

    return {
        "directed": graph.is_directed,
        "n": graph.vertex_count,
        "edges": edges,
        "source": source,
        "weight_model": graph.weight_model,
    }


def load_graph(path: Union[str, Path]) -> GraphData:
    """Load a graph description file.

    Args:
        path: Path to a ``.json``, ``.yaml`` or ``.yml`` file.

    Returns:
        GraphData with the graph and its source vertex.

    Raises:
        OSError: If the file cannot be read.
        ValueError: If the suffix is unsupported or the content is malformed.
    """
    path = Path(path)
    suffix = path.suffix.lower()
    text = path.read_text(encoding="utf-8")

    if suffix in _JSON_SUFFIXES:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ValueError(f"Invalid JSON in {path}: {exc}") from exc
    elif suffix in _YAML_SUFFIXES:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {path}: {exc}") from exc
    else:
        raise ValueError(
            f"Unsupported graph file type '{path.suffix}' (expected .json, .yaml or .yml)"
        )

    graph_data = graph_from_dict(data)
    logger.info(
        f"Loaded graph from {path}: n={graph_data.graph.vertex_count}, "
        f"edges={graph_data.graph.edge_count}, source={graph_data.source}"
    )
    return graph_data


def save_graph(graph: TaskGraph, path: Union[str, Path], source: int = 0) -> Path:
    """Write ``graph`` as a description file; format follows the suffix.

    Parent directories are created as needed.

    Returns:
        The path written.
    """
    path = Path(path)
    data = graph_to_dict(graph, source)
    suffix = path.suffix.lower()
    path.parent.mkdir(parents=True, exist_ok=True)

    if suffix in _JSON_SUFFIXES:
        path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    elif suffix in _YAML_SUFFIXES:
        path.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")
    else:
        raise ValueError(
            f"Unsupported graph file type '{path.suffix}' (expected .json, .yaml or .yml)"
        )

    logger.debug(f"Wrote graph to {path} (n={graph.vertex_count}, edges={len(data['edges'])})")
    return path
