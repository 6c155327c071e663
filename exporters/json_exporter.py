"""JSON exporters for module graphs and crate manifests (machine-friendly format)."""

import json
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from graph.crates import ROOT_CRATE_PATH, crate_dependencies, virtual_path
from graph.model import ModuleGraph


def to_json(
    graph: ModuleGraph,
    root: Path,
    base: Optional[Path] = None,
    indent: int = 2,
    include_unexpanded: bool = True,
) -> str:
    """
    Convert a module graph to JSON format.

    Args:
        graph: The module graph to export.
        root: Crate source directory for relative paths.
        base: Optional base path for relative path display.
        indent: JSON indentation level.
        include_unexpanded: If True, include declarations left unexpanded.

    Returns:
        JSON string representation of the graph.
    """
    if base is None:
        base = root

    nodes: List[str] = sorted(_get_path_str(node, base, root) for node in graph.nodes)

    # Edges stay in document order
    edges: List[Dict[str, Any]] = []
    for source, name, target in graph.iter_modules():
        edges.append({
            "source": _get_path_str(source, base, root),
            "module": name,
            "target": _get_path_str(target, base, root),
        })

    if include_unexpanded:
        for source, name in graph.iter_unexpanded():
            edges.append({
                "source": _get_path_str(source, base, root),
                "module": name,
                "unexpanded": True,
            })

    data: Dict[str, Any] = {
        "root": _get_path_str(graph.root, base, root) if graph.root is not None else None,
        "nodes": nodes,
        "edges": edges,
    }

    return json.dumps(data, indent=indent)


def to_manifest(outputs: Mapping[str, str], indent: int = 2) -> str:
    """
    Describe how the analysis engine mounts the flattened crates.

    Args:
        outputs: Component name -> output file name, in processing order.
        indent: JSON indentation level.

    Returns:
        JSON with one entry per crate (file, virtual path, dependencies)
        and the root crate that depends on all of them. Dependencies on
        crates that were not packed are left out.
    """
    crates: List[Dict[str, Any]] = []
    for name, file_name in outputs.items():
        deps = crate_dependencies(name, outputs)
        crates.append({
            "name": name,
            "file": file_name,
            "virtual_path": virtual_path(name),
            "dependencies": deps,
        })

    data: Dict[str, Any] = {
        "root": {
            "virtual_path": ROOT_CRATE_PATH,
            "dependencies": list(outputs),
        },
        "crates": crates,
    }

    return json.dumps(data, indent=indent)


def _get_path_str(path: Path, base: Path, root: Path) -> str:
    """Get the string representation of a path."""
    try:
        rel_path = path.resolve().relative_to(base.resolve())
        return str(rel_path).replace("\\", "/")
    except ValueError:
        try:
            rel_path = path.resolve().relative_to(root.resolve())
            return str(rel_path).replace("\\", "/")
        except ValueError:
            return str(path).replace("\\", "/")
