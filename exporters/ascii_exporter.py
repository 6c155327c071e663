"""ASCII tree-style exporter for module graphs."""

from pathlib import Path
from typing import List, Optional, Set, Tuple

from graph.model import ModuleGraph


# Unicode tree characters
UNICODE_BRANCH = "├── "
UNICODE_LAST = "└── "
UNICODE_VERTICAL = "│   "
UNICODE_SPACE = "    "

# ASCII fallback characters
ASCII_BRANCH = "|-- "
ASCII_LAST = "\\-- "
ASCII_VERTICAL = "|   "
ASCII_SPACE = "    "


def to_ascii(
    graph: ModuleGraph,
    root: Path,
    base: Optional[Path] = None,
    style: str = "tree",
    include_unexpanded: bool = True,
) -> str:
    """
    Convert a module graph to an ASCII tree rooted at the crate root.

    Args:
        graph: The module graph to export.
        root: Directory used for relative paths (usually the crate's `src`).
        base: Optional base path for relative path display.
        style: Output style - "tree" (Unicode) or "ascii" (pure ASCII).
        include_unexpanded: If True, show declarations left unexpanded.

    Returns:
        ASCII tree string, empty if the graph has no root.
    """
    if base is None:
        base = root

    if graph.root is None:
        return ""

    # Select character set based on style
    if style == "ascii":
        chars = (ASCII_BRANCH, ASCII_LAST, ASCII_VERTICAL, ASCII_SPACE)
    else:
        chars = (UNICODE_BRANCH, UNICODE_LAST, UNICODE_VERTICAL, UNICODE_SPACE)

    lines: List[str] = [_get_display_path(graph.root, base, root)]
    _render_children(
        graph=graph,
        node=graph.root,
        base=base,
        root=root,
        prefix="",
        chars=chars,
        visited={graph.root},
        lines=lines,
        include_unexpanded=include_unexpanded,
    )
    return "\n".join(lines)


def _render_children(
    graph: ModuleGraph,
    node: Path,
    base: Path,
    root: Path,
    prefix: str,
    chars: Tuple[str, str, str, str],
    visited: Set[Path],
    lines: List[str],
    include_unexpanded: bool = True,
) -> None:
    """
    Recursively render the modules inlined into a node.

    Args:
        graph: The module graph.
        node: File whose modules are rendered.
        base: Base path for display.
        root: Crate source directory.
        prefix: Current line prefix for indentation.
        chars: Character set (branch, last, vertical, space).
        visited: Files on the current branch (to detect cycles).
        lines: Output lines list (modified in place).
        include_unexpanded: If True, show unexpanded declarations.
    """
    branch, last, vertical, space = chars

    children = graph.get_children(node)
    unexpanded = graph.get_unexpanded(node) if include_unexpanded else []
    total_items = len(children) + len(unexpanded)
    item_index = 0

    for name, child in children:
        item_index += 1
        child_is_last = item_index == total_items
        connector = last if child_is_last else branch

        display_path = _get_display_path(child, base, root)
        is_cycle = child in visited
        cycle_marker = " [*]" if is_cycle else ""
        lines.append(f"{prefix}{connector}mod {name} ({display_path}){cycle_marker}")

        if is_cycle:
            continue

        visited.add(child)
        _render_children(
            graph=graph,
            node=child,
            base=base,
            root=root,
            prefix=prefix + (space if child_is_last else vertical),
            chars=chars,
            visited=visited,
            lines=lines,
            include_unexpanded=include_unexpanded,
        )
        visited.discard(child)

    for name in unexpanded:
        item_index += 1
        connector = last if item_index == total_items else branch
        lines.append(f"{prefix}{connector}mod {name} [NOT EXPANDED]")


def _get_display_path(node: Path, base: Path, root: Path) -> str:
    """Get the display path for a node."""
    try:
        # Try relative to base first
        rel_path = node.resolve().relative_to(base.resolve())
        return str(rel_path).replace("\\", "/")
    except ValueError:
        try:
            # Fall back to relative to root
            rel_path = node.resolve().relative_to(root.resolve())
            return str(rel_path).replace("\\", "/")
        except ValueError:
            return str(node).replace("\\", "/")
