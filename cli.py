#!/usr/bin/env python3
"""
Crate Flattener CLI

Flattens the module tree of Rust library crates into single source files,
optionally stubbing out function bodies, for use as virtual files by an
in-browser analysis engine.
"""

import argparse
import dataclasses
import logging
import sys
from pathlib import Path
from typing import List, Optional

from exporters import to_ascii, to_json
from flattener.builder import PackedComponent, build_component, pack_components
from flattener.config import PackConfig, load_config
from flattener.discovery import DEFAULT_COMPONENTS
from flattener.errors import FlattenError


def parse_args(args=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="crate-flatten",
        description="Flatten Rust library crates into single files with all modules inlined.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  crate-flatten                               # std, alloc, core from rustc's sysroot into ./www
  crate-flatten --sysroot ~/.rustup/toolchains/stable-x86_64-unknown-linux-gnu
  crate-flatten --components core --strip-bodies --output-dir out/
  crate-flatten --config pack.yaml            # Settings from a YAML/TOML/JSON file
  crate-flatten --file src/lib.rs -o flat.rs  # Flatten a single crate root
  crate-flatten --file src/lib.rs --report ascii > /dev/null
        """,
    )

    # Component mode
    parser.add_argument(
        "--sysroot",
        type=str,
        default=None,
        help="Toolchain sysroot (default: ask 'rustc --print sysroot')",
    )

    parser.add_argument(
        "--rustc",
        type=str,
        default=None,
        help="Compiler used to discover the sysroot (default: rustc)",
    )

    parser.add_argument(
        "--output-dir",
        type=str,
        default=None,
        help="Directory for fake_<component>.rs files (default: www)",
    )

    parser.add_argument(
        "--components",
        nargs="+",
        default=None,
        help=f"Library crates to flatten (default: {' '.join(DEFAULT_COMPONENTS)})",
    )

    parser.add_argument(
        "--no-manifest",
        action="store_true",
        help="Do not write the crate manifest next to the outputs",
    )

    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Configuration file (.yaml, .yml, .toml or .json)",
    )

    # Single-file mode
    parser.add_argument(
        "--file",
        type=str,
        default=None,
        help="Flatten this crate root instead of the sysroot components",
    )

    parser.add_argument(
        "-o", "--output",
        type=str,
        default=None,
        help="Output file for --file (default: stdout)",
    )

    # Shared options
    parser.add_argument(
        "--budget",
        type=int,
        default=None,
        help="Modules the crate root may expand (default: 4000)",
    )

    parser.add_argument(
        "--strip-bodies",
        action="store_true",
        default=None,
        help="Replace function bodies with '{ loop {} }'",
    )

    parser.add_argument(
        "--report",
        choices=["ascii", "json"],
        default=None,
        help="Print the inlined module tree of each crate",
    )

    parser.add_argument(
        "--ascii-style",
        choices=["tree", "ascii"],
        default="tree",
        help="ASCII report style: 'tree' (Unicode) or 'ascii' (pure ASCII)",
    )

    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log every module as it is inlined",
    )
    verbosity.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Only log warnings and errors",
    )

    return parser.parse_args(args)


def setup_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Configure root logging for a CLI run."""
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s", force=True)


def render_report(component: PackedComponent, report_format: str, ascii_style: str = "tree") -> str:
    """Render the module graph of a packed component."""
    src_dir = component.source.parent
    if report_format == "json":
        return to_json(component.graph, src_dir)
    return to_ascii(component.graph, src_dir, style=ascii_style)


def _build_config(parsed) -> PackConfig:
    config = load_config(parsed.config) if parsed.config else PackConfig()
    config = config.with_overrides(
        sysroot=parsed.sysroot,
        rustc=parsed.rustc,
        output_dir=parsed.output_dir,
        components=parsed.components,
        budget=parsed.budget,
        strip_bodies=parsed.strip_bodies,
    )
    if parsed.no_manifest:
        config = dataclasses.replace(config, manifest=None)
    return config


def _run_single_file(parsed, config: PackConfig) -> int:
    root_file = Path(parsed.file)
    if not root_file.is_file():
        print(f"Error: '{parsed.file}' is not a file", file=sys.stderr)
        return 1

    component = build_component(
        source=root_file,
        name=root_file.stem,
        budget=config.budget,
        strip_bodies=config.strip_bodies,
    )

    report_stream = sys.stdout
    if parsed.output:
        try:
            output_path = Path(parsed.output)
            output_path.write_text(component.text, encoding="utf-8")
            print(f"Output written to: {output_path}", file=sys.stderr)
        except OSError as e:
            print(f"Error writing output: {e}", file=sys.stderr)
            return 1
    else:
        sys.stdout.write(component.text)
        report_stream = sys.stderr

    if parsed.report:
        print(render_report(component, parsed.report, parsed.ascii_style), file=report_stream)

    return 0


def main(args: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parsed = parse_args(args)
    setup_logging(parsed.verbose, parsed.quiet)

    try:
        config = _build_config(parsed)

        if parsed.file:
            return _run_single_file(parsed, config)

        packed = pack_components(config)
    except FlattenError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error writing output: {e}", file=sys.stderr)
        return 1

    for component in packed:
        print(f"Output written to: {component.output}", file=sys.stderr)
        if parsed.report:
            print(render_report(component, parsed.report, parsed.ascii_style))

    return 0


if __name__ == "__main__":
    sys.exit(main())
