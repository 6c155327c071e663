"""Toolchain discovery: locating the sysroot and its library crates."""

import logging
import subprocess
from pathlib import Path
from typing import Union

from .errors import SysrootError


logger = logging.getLogger(__name__)

DEFAULT_COMPONENTS = ("std", "alloc", "core")

# Where rust-src places the library crates under a sysroot.
LIBRARY_SRC = Path("lib", "rustlib", "src", "rust", "library")


def discover_sysroot(rustc: str = "rustc") -> Path:
    """
    Ask the active toolchain for its sysroot.

    Args:
        rustc: The compiler executable to run.

    Returns:
        The sysroot directory reported by `rustc --print sysroot`.

    Raises:
        SysrootError: The compiler is missing, failed, or printed nothing.
    """
    try:
        result = subprocess.run(
            [rustc, "--print", "sysroot"],
            capture_output=True,
            text=True,
            check=True,
        )
    except FileNotFoundError as e:
        raise SysrootError(f"'{rustc}' not found; pass --sysroot explicitly") from e
    except subprocess.CalledProcessError as e:
        raise SysrootError(f"'{rustc} --print sysroot' failed: {e.stderr.strip()}") from e

    sysroot = result.stdout.strip()
    if not sysroot:
        raise SysrootError(f"'{rustc} --print sysroot' printed no path")

    logger.info("Using sysroot %s", sysroot)
    return Path(sysroot)


def component_root(sysroot: Union[str, Path], component: str) -> Path:
    """Root source file (`src/lib.rs`) of a library crate in the sysroot."""
    return Path(sysroot) / LIBRARY_SRC / component / "src" / "lib.rs"


def output_file_name(component: str) -> str:
    """Name of the flattened file written for a component."""
    return f"fake_{component}.rs"
