"""Tests for sysroot discovery and the pack driver."""

import json
import subprocess
import tempfile
from pathlib import Path

import pytest

from flattener.builder import build_component, pack_components
from flattener.config import PackConfig
from flattener.discovery import component_root, discover_sysroot, output_file_name
from flattener.errors import SysrootError, UnresolvedModuleError


LIBRARY = Path("lib", "rustlib", "src", "rust", "library")


def _make_sysroot(root: Path, crates: dict) -> None:
    """Create `<crate>/src/<file>` trees under a fake sysroot."""
    for crate, files in crates.items():
        for rel, content in files.items():
            path = root / LIBRARY / crate / "src" / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")


def _standard_crates() -> dict:
    return {
        "std": {"lib.rs": "pub mod io;\n", "io/mod.rs": "pub fn read() -> u8 { 1 }\n"},
        "alloc": {"lib.rs": "pub mod vec;\n", "vec.rs": "pub struct Vec;\n"},
        "core": {"lib.rs": "pub mod mem;\n", "mem.rs": "pub fn swap() { }\n"},
    }


class TestDiscovery:
    """Tests for locating the sysroot and component roots."""

    def test_discover_sysroot(self, monkeypatch):
        """Test that the trimmed `rustc --print sysroot` output is used."""
        calls = []

        def fake_run(cmd, **kwargs):
            calls.append(cmd)
            return subprocess.CompletedProcess(cmd, 0, stdout="/opt/rust\n", stderr="")

        monkeypatch.setattr(subprocess, "run", fake_run)

        assert discover_sysroot("my-rustc") == Path("/opt/rust")
        assert calls == [["my-rustc", "--print", "sysroot"]]

    def test_missing_compiler(self, monkeypatch):
        """Test that a missing compiler is a SysrootError."""
        def fake_run(cmd, **kwargs):
            raise FileNotFoundError(cmd[0])

        monkeypatch.setattr(subprocess, "run", fake_run)

        with pytest.raises(SysrootError):
            discover_sysroot()

    def test_failing_compiler(self, monkeypatch):
        """Test that a non-zero exit is a SysrootError."""
        def fake_run(cmd, **kwargs):
            raise subprocess.CalledProcessError(1, cmd, output="", stderr="error: no toolchain")

        monkeypatch.setattr(subprocess, "run", fake_run)

        with pytest.raises(SysrootError, match="no toolchain"):
            discover_sysroot()

    def test_empty_output(self, monkeypatch):
        """Test that blank output is a SysrootError."""
        def fake_run(cmd, **kwargs):
            return subprocess.CompletedProcess(cmd, 0, stdout="\n", stderr="")

        monkeypatch.setattr(subprocess, "run", fake_run)

        with pytest.raises(SysrootError):
            discover_sysroot()

    def test_component_root(self):
        """Test the location of a component's lib.rs."""
        expected = Path("/opt/rust/lib/rustlib/src/rust/library/core/src/lib.rs")

        assert component_root("/opt/rust", "core") == expected

    def test_output_file_name(self):
        """Test the output naming convention."""
        assert output_file_name("alloc") == "fake_alloc.rs"


class TestBuildComponent:
    """Tests for flattening a single component."""

    def test_build(self):
        """Test flattening without stripping."""
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            (root / "lib.rs").write_text("mod a;\n", encoding="utf-8")
            (root / "a.rs").write_text("fn f() -> u8 { 1 }\n", encoding="utf-8")

            component = build_component(root / "lib.rs", "demo", output_dir=root / "out")

            assert component.text == "mod a {\nfn f() -> u8 { 1 }\n}\n"
            assert component.output == root / "out" / "fake_demo.rs"
            assert component.graph.module_count() == 1
            assert not component.output.exists()

    def test_build_stripped(self):
        """Test flattening with body stripping."""
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            (root / "lib.rs").write_text("mod a;\n", encoding="utf-8")
            (root / "a.rs").write_text("fn f() -> u8 { 1 }\n", encoding="utf-8")

            component = build_component(root / "lib.rs", "demo", strip_bodies=True)

            assert component.text == "mod a {\nfn f() -> u8 { loop {} }\n}\n"


class TestPackComponents:
    """Tests for the full pack run."""

    def test_pack_writes_outputs_and_manifest(self):
        """Test that every component and the manifest are written."""
        with tempfile.TemporaryDirectory() as tmpdir:
            sysroot = Path(tmpdir) / "sysroot"
            out = Path(tmpdir) / "www"
            _make_sysroot(sysroot, _standard_crates())

            packed = pack_components(PackConfig(sysroot=sysroot, output_dir=out))

            assert [c.name for c in packed] == ["std", "alloc", "core"]
            std = (out / "fake_std.rs").read_text(encoding="utf-8")
            assert std == "pub mod io {\npub fn read() -> u8 { 1 }\n}\n"
            assert (out / "fake_alloc.rs").exists()
            assert (out / "fake_core.rs").exists()

            manifest = json.loads((out / "crates.json").read_text(encoding="utf-8"))
            assert [crate["file"] for crate in manifest["crates"]] == [
                "fake_std.rs", "fake_alloc.rs", "fake_core.rs",
            ]

    def test_pack_strip_bodies(self):
        """Test that stripping applies to every component."""
        with tempfile.TemporaryDirectory() as tmpdir:
            sysroot = Path(tmpdir) / "sysroot"
            out = Path(tmpdir) / "www"
            _make_sysroot(sysroot, _standard_crates())

            pack_components(PackConfig(
                sysroot=sysroot,
                output_dir=out,
                strip_bodies=True,
                manifest=None,
            ))

            assert "loop {}" in (out / "fake_std.rs").read_text(encoding="utf-8")
            assert "fn swap() { loop {} }" in (out / "fake_core.rs").read_text(encoding="utf-8")
            assert not (out / "crates.json").exists()

    def test_failure_writes_nothing(self):
        """Test that a failing component leaves no partial outputs."""
        crates = _standard_crates()
        crates["core"] = {"lib.rs": "pub mod missing;\n"}
        with tempfile.TemporaryDirectory() as tmpdir:
            sysroot = Path(tmpdir) / "sysroot"
            out = Path(tmpdir) / "www"
            _make_sysroot(sysroot, crates)

            with pytest.raises(UnresolvedModuleError):
                pack_components(PackConfig(sysroot=sysroot, output_dir=out))

            assert not out.exists()

    def test_write_failure_leaves_no_outputs(self):
        """Test that a failed write removes the files already staged."""
        with tempfile.TemporaryDirectory() as tmpdir:
            sysroot = Path(tmpdir) / "sysroot"
            out = Path(tmpdir) / "www"
            _make_sysroot(sysroot, _standard_crates())
            # A directory in the way makes the second staged write fail.
            (out / "fake_alloc.rs.tmp").mkdir(parents=True)

            with pytest.raises(OSError):
                pack_components(PackConfig(sysroot=sysroot, output_dir=out))

            assert sorted(p.name for p in out.iterdir()) == ["fake_alloc.rs.tmp"]

    def test_discovers_sysroot_when_not_given(self, monkeypatch):
        """Test that rustc is asked for the sysroot when none is configured."""
        with tempfile.TemporaryDirectory() as tmpdir:
            sysroot = Path(tmpdir) / "sysroot"
            out = Path(tmpdir) / "www"
            _make_sysroot(sysroot, {"core": {"lib.rs": "pub struct Marker;\n"}})

            def fake_run(cmd, **kwargs):
                return subprocess.CompletedProcess(cmd, 0, stdout=f"{sysroot}\n", stderr="")

            monkeypatch.setattr(subprocess, "run", fake_run)

            packed = pack_components(PackConfig(components=["core"], output_dir=out))

            assert packed[0].source == component_root(sysroot, "core")
            assert (out / "fake_core.rs").read_text(encoding="utf-8") == "pub struct Marker;\n"
