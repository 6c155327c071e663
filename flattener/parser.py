"""
Heuristic line scanner for Rust module declarations.

This is not a Rust lexer. It looks at one line at a time, strips `//`
comments without regard to string literals, and recognises out-of-line
module declarations (`mod name;`) by prefix matching. Known blind spots:

- `//` inside a string literal is treated as the start of a comment.
- Only lines that carry a comment are whitespace-trimmed, so an indented
  `mod name;` with no trailing comment is not recognised.
- A declaration must sit on a single line and end with `;`.
- Block comments are not tracked.
"""

import re
from dataclasses import dataclass
from typing import Iterator, Optional, Tuple, Union

from .errors import UnsupportedVisibilityError


VISIBILITY_PREFIXES = ("", "pub ", "pub(crate) ", "pub(self) ", "pub(super) ")

_PATH_ATTRIBUTE_RE = re.compile(r'^#\[path = "(?P<path>[^"]*)"\]')
_PATH_SCOPED_MOD_RE = re.compile(r"^pub\(in [^)]*\) mod ")
_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


@dataclass(frozen=True)
class ModuleDeclaration:
    """An out-of-line `mod name;` declaration."""

    visibility_prefix: str
    name: str
    explicit_path: Optional[str] = None

    def header(self) -> str:
        """Opening line of the inline block that replaces the declaration."""
        return f"{self.visibility_prefix}mod {self.name} {{"


@dataclass(frozen=True)
class Idle:
    """Nothing pending."""


@dataclass(frozen=True)
class PendingPathOverride:
    """A `#[path = "..."]` attribute applies to the next declaration."""

    path: str


@dataclass(frozen=True)
class InAttribute:
    """Inside a multi-line attribute; `path` is any override seen before it."""

    path: Optional[str] = None


ScanState = Union[Idle, PendingPathOverride, InAttribute]

IDLE = Idle()


def iter_source_lines(source: str) -> Iterator[str]:
    """
    Split source text into lines.

    Only `\\n` separates lines; a trailing `\\r` is dropped and a final
    newline does not produce an extra empty line.
    """
    lines = source.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    for line in lines:
        if line.endswith("\r"):
            line = line[:-1]
        yield line


def strip_line_comment(line: str) -> str:
    """
    Remove a trailing `//` comment.

    When a comment is removed the remaining code is trimmed; otherwise the
    line is returned unchanged.
    """
    code, sep, _ = line.partition("//")
    if sep:
        return code.strip()
    return line


def _pending_path(state: ScanState) -> Optional[str]:
    if isinstance(state, (PendingPathOverride, InAttribute)):
        return state.path
    return None


def scan_line(state: ScanState, line: str) -> Tuple[ScanState, Optional[ModuleDeclaration]]:
    """
    Advance the scanner over one line.

    Args:
        state: State carried over from the previous line.
        line: Raw source line, without its newline.

    Returns:
        The state for the next line and the module declaration found on
        this line, if any.

    Raises:
        UnsupportedVisibilityError: The line declares a `pub(in path)` module.
    """
    code = strip_line_comment(line)
    if not code.strip():
        return state, None

    match = _PATH_ATTRIBUTE_RE.match(code)
    if match:
        path = match.group("path")
        if isinstance(state, InAttribute):
            return InAttribute(path), None
        return PendingPathOverride(path), None

    if code.startswith("#["):
        if not code.endswith("]"):
            return InAttribute(_pending_path(state)), None
        return state, None

    if isinstance(state, InAttribute):
        if code.endswith("]"):
            if state.path is not None:
                return PendingPathOverride(state.path), None
            return IDLE, None
        return state, None

    return IDLE, parse_module_declaration(code, _pending_path(state))


def parse_module_declaration(
    code: str,
    explicit_path: Optional[str] = None,
) -> Optional[ModuleDeclaration]:
    """
    Match a comment-stripped line against the supported `mod name;` forms.

    Args:
        code: Line with any trailing comment removed.
        explicit_path: Path override taken from a preceding `#[path]`.

    Returns:
        The declaration, or None if the line is not one.
    """
    if not code.endswith(";"):
        return None
    body = code[:-1]

    if _PATH_SCOPED_MOD_RE.match(body):
        raise UnsupportedVisibilityError(code)

    for prefix in VISIBILITY_PREFIXES:
        keyword = prefix + "mod "
        if not body.startswith(keyword):
            continue
        name = body[len(keyword):]
        if name.startswith("r#"):
            name = name[2:]
        if not _IDENTIFIER_RE.match(name):
            return None
        return ModuleDeclaration(
            visibility_prefix=prefix,
            name=name,
            explicit_path=explicit_path,
        )

    return None
