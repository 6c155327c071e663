"""The synthetic crate graph the analysis engine builds from flattened files."""

from typing import Collection, List


# Dependencies between the library crates as the analysis engine wires them.
CRATE_DEPENDENCIES = {
    "std": ("core", "alloc"),
    "alloc": ("core",),
    "core": (),
}

# The user's crate, which depends on every library crate.
ROOT_CRATE_PATH = "/my_crate/main.rs"


def virtual_path(crate: str) -> str:
    """Path under which the analysis engine mounts a flattened crate."""
    return f"/{crate}/src/lib.rs"


def crate_dependencies(crate: str, available: Collection[str]) -> List[str]:
    """Dependencies of `crate` restricted to the crates in `available`."""
    return [dep for dep in CRATE_DEPENDENCIES.get(crate, ()) if dep in available]
