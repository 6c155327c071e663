"""Error types raised while flattening a crate."""

from typing import List, Optional


class FlattenError(Exception):
    """Base class for every error raised by the flattener."""


class InlineError(FlattenError):
    """
    Failure to inline a module file.

    Attributes:
        unresolved_module: Path of the file that could not be read or found.
        module_stack: Paths of the files being inlined when the failure
                      happened, innermost first. Each enclosing file appends
                      itself while the error propagates, so the root file
                      ends up last.
    """

    def __init__(self, unresolved_module: str, module_stack: Optional[List[str]] = None):
        self.unresolved_module = unresolved_module
        self.module_stack: List[str] = list(module_stack or [])
        super().__init__(unresolved_module)

    def push(self, path) -> None:
        """Record an enclosing file on the way out."""
        self.module_stack.append(str(path))

    def describe(self) -> str:
        return "module file"

    def __str__(self) -> str:
        message = f"{self.describe()}: {self.unresolved_module}"
        if self.module_stack:
            message += " (included from " + " <- ".join(self.module_stack) + ")"
        return message


class ModuleReadError(InlineError):
    """A module file exists on the search path but could not be read."""

    def describe(self) -> str:
        return "cannot read module file"


class UnresolvedModuleError(InlineError):
    """No candidate file exists for a module declaration."""

    def describe(self) -> str:
        return "cannot resolve module"


class ModuleCycleError(InlineError):
    """A module resolves to a file that is already being inlined."""

    def describe(self) -> str:
        return "module cycle through"


class UnsupportedVisibilityError(FlattenError):
    """`pub(in path) mod name;` declarations are not supported."""

    def __init__(self, line: str):
        self.line = line
        super().__init__(f"pub(in ...) visibility is not supported: {line}")


class SysrootError(FlattenError):
    """The toolchain sysroot could not be determined."""


class ConfigError(FlattenError):
    """A configuration file is missing, malformed, or has invalid values."""
