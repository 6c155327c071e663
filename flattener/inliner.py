"""Recursive module inliner that flattens a crate into one source text."""

import logging
from pathlib import Path
from typing import FrozenSet, List, Optional, Union

from graph.model import ModuleGraph
from .errors import InlineError, ModuleCycleError, ModuleReadError, UnresolvedModuleError
from .parser import IDLE, iter_source_lines, scan_line
from .resolver import folder_module_path, resolve_module_path


logger = logging.getLogger(__name__)

# Modules the crate root may expand before declarations pass through as-is.
DEFAULT_BUDGET = 4000

# Budget granted to every child file, independent of what the parent has left.
CHILD_BUDGET = 10000


def inline_module(
    root_file: Union[str, Path],
    budget: int = DEFAULT_BUDGET,
    graph: Optional[ModuleGraph] = None,
) -> str:
    """
    Flatten a crate by inlining every out-of-line module into its parent.

    Each `mod name;` line is replaced by `mod name {`, the (recursively
    flattened) contents of the module's file, and a closing `}`. All other
    lines are copied through unchanged.

    Args:
        root_file: The crate root, usually `lib.rs`.
        budget: How many declarations in the root file may be expanded.
                Declarations past the budget are copied through verbatim.
                Child files always get `CHILD_BUDGET`.
        graph: Optional graph that records every inlined module.

    Returns:
        The flattened source text.

    Raises:
        InlineError: A module file could not be read, resolved, or would be
                     inlined into itself.
        UnsupportedVisibilityError: A `pub(in path) mod` declaration was found.
    """
    root_file = Path(root_file)
    if graph is not None:
        graph.set_root(root_file)

    output: List[str] = []
    _inline_file(output, root_file, budget, 0, frozenset(), graph)
    return "".join(output)


def _read_source(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ModuleReadError(str(path)) from e


def _resolve(path: Path) -> Path:
    # Symlink loops raise RuntimeError before Python 3.13.
    try:
        return path.resolve()
    except (OSError, RuntimeError) as e:
        raise ModuleReadError(str(path)) from e


def _inline_file(
    output: List[str],
    path: Path,
    budget: int,
    depth: int,
    ancestors: FrozenSet[Path],
    graph: Optional[ModuleGraph],
) -> None:
    """Append the flattened contents of `path` to `output`."""
    source = _read_source(path)
    ancestors = ancestors | {_resolve(path)}
    if graph is not None and not graph.mark_expanded(path):
        # Already recorded through another branch.
        graph = None
    state = IDLE

    for line in iter_source_lines(source):
        state, decl = scan_line(state, line)

        if decl is None:
            output.append(line + "\n")
            continue

        if budget == 0:
            logger.warning("Expansion budget exhausted in %s, keeping: %s", path, line)
            if graph is not None:
                graph.add_unexpanded(path, decl.name)
            output.append(line + "\n")
            continue

        budget -= 1
        logger.debug("%s mod found: %s", ">" * depth, line)
        if decl.explicit_path is not None:
            logger.debug("explicit path found: %s", decl.explicit_path)

        child = resolve_module_path(path, decl)
        if child is None:
            raise UnresolvedModuleError(
                str(folder_module_path(path, decl)),
                [str(path)],
            )
        try:
            resolved = _resolve(child)
        except InlineError as e:
            e.push(path)
            raise
        if resolved in ancestors:
            raise ModuleCycleError(str(child), [str(path)])

        if graph is not None:
            graph.add_module(path, decl.name, child)

        output.append(decl.header() + "\n")
        try:
            _inline_file(output, child, CHILD_BUDGET, depth + 1, ancestors, graph)
        except InlineError as e:
            e.push(path)
            raise
        output.append("}\n")
