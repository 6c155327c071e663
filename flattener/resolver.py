"""Path resolution for mapping module declarations to their source files."""

from pathlib import Path
from typing import List, Optional

from .parser import ModuleDeclaration


# File names whose child modules live beside them rather than in a
# directory named after the file.
DIRECTORY_OWNER_NAMES = {"lib", "mod"}


def module_search_dir(current_file: Path) -> Path:
    """
    Directory in which the children of `current_file` are looked up.

    `lib.rs` and `mod.rs` own their directory; any other `foo.rs` keeps its
    children under `foo/`.
    """
    if current_file.stem in DIRECTORY_OWNER_NAMES:
        return current_file.parent
    return current_file.parent / current_file.stem


def candidate_paths(current_file: Path, decl: ModuleDeclaration) -> List[Path]:
    """
    List the files a declaration may refer to, in precedence order.

    Args:
        current_file: The file containing the declaration.
        decl: The module declaration.

    Returns:
        The explicit path alone if the declaration carries one, otherwise
        the same-level file followed by the folder-style `mod.rs`.
    """
    if decl.explicit_path is not None:
        return [current_file.parent / decl.explicit_path]

    search_dir = module_search_dir(current_file)
    return [
        search_dir / f"{decl.name}.rs",
        folder_module_path(current_file, decl),
    ]


def folder_module_path(current_file: Path, decl: ModuleDeclaration) -> Path:
    """Folder-style location `<search dir>/<name>/mod.rs` of a module."""
    return module_search_dir(current_file) / decl.name / "mod.rs"


def resolve_module_path(current_file: Path, decl: ModuleDeclaration) -> Optional[Path]:
    """
    Resolve a module declaration to the file holding its contents.

    Tries, in order:
    1. The `#[path]` override, relative to the current file's directory.
       It is returned without checking that it exists.
    2. `<name>.rs` in the search directory.
    3. `<name>/mod.rs` in the search directory.

    Args:
        current_file: The file containing the declaration.
        decl: The module declaration.

    Returns:
        Resolved Path, or None if no candidate file exists.
    """
    candidates = candidate_paths(current_file, decl)

    if decl.explicit_path is not None:
        return candidates[0]

    for candidate in candidates:
        try:
            if candidate.is_file():
                return candidate
        except OSError:
            continue

    return None
