"""Pack driver that flattens library crates and writes the results."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from exporters.json_exporter import to_manifest
from graph.model import ModuleGraph
from .config import PackConfig
from .discovery import component_root, discover_sysroot, output_file_name
from .inliner import DEFAULT_BUDGET, inline_module
from .stripper import strip_function_bodies


logger = logging.getLogger(__name__)

STAGING_SUFFIX = ".tmp"


@dataclass
class PackedComponent:
    """A flattened crate, ready to be written."""

    name: str
    source: Path
    output: Path
    text: str
    graph: ModuleGraph


def build_component(
    source: Path,
    name: str,
    budget: int = DEFAULT_BUDGET,
    strip_bodies: bool = False,
    output_dir: Optional[Path] = None,
) -> PackedComponent:
    """
    Flatten one crate in memory.

    Args:
        source: The crate's root file.
        name: Component name, used for the output file name.
        budget: Expansion budget for the root file.
        strip_bodies: If True, stub out function bodies after flattening.
        output_dir: Directory the output will be written to.

    Returns:
        The packed component. Nothing is written yet.
    """
    graph = ModuleGraph()
    text = inline_module(source, budget=budget, graph=graph)
    if strip_bodies:
        text = strip_function_bodies(text)

    output = Path(output_dir or ".") / output_file_name(name)
    logger.info("Flattened %s: %d modules, %d bytes", name, graph.module_count(), len(text))
    return PackedComponent(name=name, source=source, output=output, text=text, graph=graph)


def pack_components(config: PackConfig) -> List[PackedComponent]:
    """
    Flatten every configured component and write the outputs.

    All components are flattened before anything is written, and outputs
    are staged under temporary names until every write has succeeded, so a
    failure leaves no partial outputs behind.

    Args:
        config: The pack settings.

    Returns:
        The packed components, in configuration order.

    Raises:
        FlattenError: Sysroot discovery or flattening failed.
        OSError: The outputs could not be written.
    """
    sysroot = config.sysroot if config.sysroot is not None else discover_sysroot(config.rustc)

    packed: List[PackedComponent] = []
    for name in config.components:
        source = component_root(sysroot, name)
        logger.info("Flattening %s from %s", name, source)
        packed.append(build_component(
            source=source,
            name=name,
            budget=config.budget,
            strip_bodies=config.strip_bodies,
            output_dir=config.output_dir,
        ))

    files: List[Tuple[Path, str]] = [(c.output, c.text) for c in packed]
    if config.manifest:
        outputs: Dict[str, str] = {c.name: c.output.name for c in packed}
        files.append((config.output_dir / config.manifest, to_manifest(outputs) + "\n"))

    config.output_dir.mkdir(parents=True, exist_ok=True)
    _write_staged(files)
    return packed


def _write_staged(files: List[Tuple[Path, str]]) -> None:
    """
    Write every file under a temporary name, then move them all into place.

    If any write fails the temporary files are removed and no target is
    touched.
    """
    staged: List[Tuple[Path, Path]] = []
    try:
        for target, text in files:
            temp = target.with_name(target.name + STAGING_SUFFIX)
            temp.write_text(text, encoding="utf-8")
            staged.append((temp, target))
    except OSError:
        for temp, _ in staged:
            temp.unlink(missing_ok=True)
        raise

    for temp, target in staged:
        os.replace(temp, target)
        logger.info("Wrote %s", target)
