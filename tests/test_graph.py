"""Tests for graph data models."""

from pathlib import Path

from graph.crates import ROOT_CRATE_PATH, crate_dependencies, virtual_path
from graph.model import ModuleGraph


class TestModuleGraph:
    """Tests for ModuleGraph class."""

    def test_empty_graph(self):
        """Test empty graph initialization."""
        graph = ModuleGraph()
        assert len(graph) == 0
        assert graph.root is None
        assert graph.nodes == set()
        assert graph.edges == {}
        assert graph.module_count() == 0

    def test_set_root(self):
        """Test marking the crate root."""
        graph = ModuleGraph()
        root = Path("src/lib.rs")

        graph.set_root(root)

        assert graph.root == root
        assert root in graph

    def test_add_module(self):
        """Test adding inlined modules."""
        graph = ModuleGraph()
        source = Path("src/lib.rs")
        target = Path("src/io/mod.rs")

        graph.add_module(source, "io", target)

        assert len(graph) == 2
        assert source in graph
        assert target in graph
        assert graph.get_children(source) == [("io", target)]

    def test_children_keep_document_order(self):
        """Test that children are returned in insertion order."""
        graph = ModuleGraph()
        source = Path("src/lib.rs")

        graph.add_module(source, "zeta", Path("src/zeta.rs"))
        graph.add_module(source, "alpha", Path("src/alpha.rs"))

        assert [name for name, _ in graph.get_children(source)] == ["zeta", "alpha"]

    def test_iter_modules(self):
        """Test iterating over edges."""
        graph = ModuleGraph()
        edges = [
            (Path("lib.rs"), "a", Path("a.rs")),
            (Path("lib.rs"), "b", Path("b.rs")),
            (Path("b.rs"), "c", Path("b/c.rs")),
        ]

        for source, name, target in edges:
            graph.add_module(source, name, target)

        assert list(graph.iter_modules()) == edges
        assert graph.module_count() == 3

    def test_unexpanded_declarations(self):
        """Test tracking declarations left unexpanded."""
        graph = ModuleGraph()
        source = Path("src/lib.rs")

        graph.add_unexpanded(source, "late")
        graph.add_unexpanded(source, "later")

        assert source in graph
        assert graph.has_unexpanded()
        assert graph.get_unexpanded(source) == ["late", "later"]
        assert list(graph.iter_unexpanded()) == [(source, "late"), (source, "later")]

    def test_mark_expanded(self):
        """Test that a file can be claimed for recording only once."""
        graph = ModuleGraph()
        source = Path("src/shared.rs")

        assert graph.mark_expanded(source) is True
        assert graph.mark_expanded(source) is False
        assert source in graph

    def test_properties_return_copies(self):
        """Test that modifying returned collections leaves the graph alone."""
        graph = ModuleGraph()
        source = Path("src/lib.rs")
        graph.add_module(source, "a", Path("src/a.rs"))
        graph.add_unexpanded(source, "b")

        graph.edges[source].append(("x", Path("x.rs")))
        graph.unexpanded[source].append("y")
        graph.get_children(source).clear()

        assert graph.get_children(source) == [("a", Path("src/a.rs"))]
        assert graph.get_unexpanded(source) == ["b"]

    def test_repr(self):
        """Test string representation."""
        graph = ModuleGraph()
        graph.add_module(Path("lib.rs"), "a", Path("a.rs"))

        assert "nodes=2" in repr(graph)
        assert "modules=1" in repr(graph)
        assert "unexpanded=0" in repr(graph)


class TestCrateGraph:
    """Tests for the synthetic crate graph."""

    def test_virtual_path(self):
        """Test the mount path of a flattened crate."""
        assert virtual_path("std") == "/std/src/lib.rs"

    def test_dependencies(self):
        """Test the library crate dependencies."""
        all_crates = {"std", "alloc", "core"}

        assert crate_dependencies("std", all_crates) == ["core", "alloc"]
        assert crate_dependencies("alloc", all_crates) == ["core"]
        assert crate_dependencies("core", all_crates) == []

    def test_dependencies_limited_to_available(self):
        """Test that crates not packed are left out."""
        assert crate_dependencies("std", {"std", "core"}) == ["core"]
        assert crate_dependencies("proc_macro", {"proc_macro", "core"}) == []

    def test_root_crate_path(self):
        """Test the user crate's mount path."""
        assert ROOT_CRATE_PATH == "/my_crate/main.rs"
