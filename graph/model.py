"""Graph data model recording which module files were inlined where."""

from pathlib import Path
from typing import Dict, Iterator, List, Optional, Set, Tuple


class ModuleGraph:
    """
    A directed graph of module files.

    Nodes are file paths, and edges represent 'parent file -> module file'
    relationships labelled with the module name. Edges keep document order.
    Declarations left unexpanded (budget exhausted) are tracked separately.
    """

    def __init__(self):
        self._root: Optional[Path] = None
        self._nodes: Set[Path] = set()
        self._edges: Dict[Path, List[Tuple[str, Path]]] = {}
        self._unexpanded: Dict[Path, List[str]] = {}  # source -> module names
        self._expanded: Set[Path] = set()

    @property
    def root(self) -> Optional[Path]:
        """The crate root file, once set."""
        return self._root

    @property
    def nodes(self) -> Set[Path]:
        """Return all nodes in the graph."""
        return self._nodes.copy()

    @property
    def edges(self) -> Dict[Path, List[Tuple[str, Path]]]:
        """Return adjacency list representation of edges."""
        return {k: list(v) for k, v in self._edges.items()}

    @property
    def unexpanded(self) -> Dict[Path, List[str]]:
        """Return unexpanded declarations (source -> module names)."""
        return {k: list(v) for k, v in self._unexpanded.items()}

    def set_root(self, node: Path) -> None:
        """Mark the crate root file."""
        self._root = node
        self._nodes.add(node)

    def add_module(self, source: Path, name: str, target: Path) -> None:
        """
        Record that module `name` declared in `source` was inlined from `target`.

        Automatically adds both nodes to the graph.
        """
        self._nodes.add(source)
        self._nodes.add(target)
        self._edges.setdefault(source, []).append((name, target))

    def add_unexpanded(self, source: Path, name: str) -> None:
        """
        Record a declaration that was copied through without inlining.

        Args:
            source: The file containing the declaration.
            name: The module name.
        """
        self._nodes.add(source)
        self._unexpanded.setdefault(source, []).append(name)

    def mark_expanded(self, source: Path) -> bool:
        """
        Claim a file whose declarations are about to be recorded.

        A file inlined from several places has the same modules each time,
        so only its first expansion should be recorded.

        Returns:
            True the first time a file is marked, False afterwards.
        """
        if source in self._expanded:
            return False
        self._expanded.add(source)
        self._nodes.add(source)
        return True

    def get_children(self, source: Path) -> List[Tuple[str, Path]]:
        """Get the (module name, file) pairs inlined into the source file."""
        return list(self._edges.get(source, []))

    def get_unexpanded(self, source: Path) -> List[str]:
        """Get the module names left unexpanded in the source file."""
        return list(self._unexpanded.get(source, []))

    def has_unexpanded(self) -> bool:
        """Check if any declaration was left unexpanded."""
        return bool(self._unexpanded)

    def iter_modules(self) -> Iterator[Tuple[Path, str, Path]]:
        """Iterate over all edges as (source, name, target) tuples."""
        for source, children in self._edges.items():
            for name, target in children:
                yield source, name, target

    def iter_unexpanded(self) -> Iterator[Tuple[Path, str]]:
        """Iterate over all unexpanded declarations as (source, name) tuples."""
        for source, names in self._unexpanded.items():
            for name in names:
                yield source, name

    def module_count(self) -> int:
        """Number of modules inlined."""
        return sum(len(children) for children in self._edges.values())

    def __len__(self) -> int:
        """Return the number of nodes in the graph."""
        return len(self._nodes)

    def __contains__(self, node: Path) -> bool:
        """Check if a node is in the graph."""
        return node in self._nodes

    def __repr__(self) -> str:
        unexpanded_count = sum(len(names) for names in self._unexpanded.values())
        return f"ModuleGraph(nodes={len(self._nodes)}, modules={self.module_count()}, unexpanded={unexpanded_count})"
