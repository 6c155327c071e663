"""Configuration for a pack run, loadable from YAML, TOML or JSON."""

import dataclasses
import json
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

import yaml

from .discovery import DEFAULT_COMPONENTS
from .errors import ConfigError
from .inliner import DEFAULT_BUDGET


DEFAULT_OUTPUT_DIR = Path("www")
DEFAULT_MANIFEST = "crates.json"


@dataclass
class PackConfig:
    """
    Settings for flattening the library crates of a toolchain.

    Attributes:
        sysroot: Toolchain sysroot. None means ask `rustc`.
        rustc: Compiler executable used to discover the sysroot.
        output_dir: Directory receiving `fake_<component>.rs` files.
        components: Library crates to flatten, in processing order.
        budget: Expansion budget for each crate root.
        strip_bodies: Replace function bodies with stubs after flattening.
        manifest: File name of the crate manifest, or None to skip it.
    """

    sysroot: Optional[Path] = None
    rustc: str = "rustc"
    output_dir: Path = DEFAULT_OUTPUT_DIR
    components: Tuple[str, ...] = DEFAULT_COMPONENTS
    budget: int = DEFAULT_BUDGET
    strip_bodies: bool = False
    manifest: Optional[str] = DEFAULT_MANIFEST

    def __post_init__(self):
        if self.sysroot is not None:
            self.sysroot = Path(self.sysroot)
        self.output_dir = Path(self.output_dir)
        if isinstance(self.components, str):
            self.components = (self.components,)
        self.components = tuple(self.components)
        if not self.components:
            raise ConfigError("at least one component is required")
        for component in self.components:
            if not isinstance(component, str) or not component:
                raise ConfigError(f"component names must be non-empty strings, got {component!r}")
        if not isinstance(self.strip_bodies, bool):
            raise ConfigError(f"strip_bodies must be true or false, got {self.strip_bodies!r}")
        if not isinstance(self.budget, int) or isinstance(self.budget, bool) or self.budget < 0:
            raise ConfigError(f"budget must be a non-negative integer, got {self.budget!r}")

    def with_overrides(self, **overrides: Any) -> "PackConfig":
        """Return a copy with every override that is not None applied."""
        changes = {key: value for key, value in overrides.items() if value is not None}
        return dataclasses.replace(self, **changes)


def _parse_text(content: str, suffix: str) -> Any:
    if suffix in {".yaml", ".yml"}:
        return yaml.safe_load(content)
    elif suffix == ".toml":
        return tomllib.loads(content)
    elif suffix == ".json":
        return json.loads(content)
    raise ConfigError(f"unsupported config format '{suffix}'")


def load_config(path: Union[str, Path]) -> PackConfig:
    """
    Load a PackConfig from a configuration file.

    Args:
        path: A `.yaml`, `.yml`, `.toml` or `.json` file whose top level is
              a mapping of PackConfig field names.

    Returns:
        The loaded configuration.

    Raises:
        ConfigError: The file cannot be read or parsed, or holds unknown
                     keys or invalid values.
    """
    path = Path(path)
    suffix = path.suffix.lower()

    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"cannot read config file {path}: {e}") from e

    try:
        data = _parse_text(content, suffix)
    except (yaml.YAMLError, tomllib.TOMLDecodeError, json.JSONDecodeError) as e:
        raise ConfigError(f"cannot parse config file {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"config file {path} must contain a mapping")

    return config_from_mapping(data)


def config_from_mapping(data: Dict[str, Any]) -> PackConfig:
    """Build a PackConfig from a plain mapping, rejecting unknown keys."""
    known = {f.name for f in dataclasses.fields(PackConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"unknown config keys: {', '.join(unknown)}")
    try:
        return PackConfig(**data)
    except TypeError as e:
        raise ConfigError(f"invalid config value: {e}") from e
