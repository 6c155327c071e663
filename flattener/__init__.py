"""Flattener module for inlining crate module trees and stubbing function bodies."""

from .errors import (
    FlattenError,
    InlineError,
    ModuleReadError,
    UnresolvedModuleError,
    ModuleCycleError,
    UnsupportedVisibilityError,
)
from .discovery import discover_sysroot, component_root
from .parser import ModuleDeclaration, scan_line
from .resolver import resolve_module_path
from .inliner import inline_module
from .stripper import strip_function_bodies
from .config import PackConfig, load_config
from .builder import build_component, pack_components

__all__ = [
    "FlattenError",
    "InlineError",
    "ModuleReadError",
    "UnresolvedModuleError",
    "ModuleCycleError",
    "UnsupportedVisibilityError",
    "discover_sysroot",
    "component_root",
    "ModuleDeclaration",
    "scan_line",
    "resolve_module_path",
    "inline_module",
    "strip_function_bodies",
    "PackConfig",
    "load_config",
    "build_component",
    "pack_components",
]
