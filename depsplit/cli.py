"""
Command-line interface for depsplit

Usage:
    depsplit [options] <input_file>

Splits one Python module into per-dependency modules plus a reassembled entry
file, all written next to the input file.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from depsplit import __version__
from depsplit.config import GroupNaming, load_config
from depsplit.errors import SplitterError
from depsplit.reporting import RichOutputManager
from depsplit.splitting import DependencySplitter

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="depsplit",
        usage="%(prog)s [options] <input_file>",
        description="Split a Python module into modules grouped by the imports their functions use",
    )

    parser.add_argument("paths", nargs="*", metavar="input_file", help="Python file to split")

    parser.add_argument("--config", "-c", type=str, help="Path to configuration file")

    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose output and debug logging",
    )

    parser.add_argument(
        "--no-rich",
        action="store_true",
        help="Disable rich terminal output (use plain text)",
    )

    parser.add_argument(
        "--no-format",
        action="store_true",
        help="Write generated files without running the formatter",
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show the planned split without writing any file",
    )

    parser.add_argument("--entry-name", help="Name of the entry-point function (default: main)")

    parser.add_argument(
        "--group-naming",
        choices=[n.value for n in GroupNaming],
        help="Derive group names from the imports used, or number them",
    )

    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    return parser


def build_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """Turn command-line options into a configuration override mapping."""
    overrides: Dict[str, Any] = {}
    if args.entry_name:
        overrides.setdefault("classification", {})["entry_function_name"] = args.entry_name
    if args.group_naming:
        overrides.setdefault("classification", {})["group_naming"] = args.group_naming
    if args.no_format:
        overrides.setdefault("formatter", {})["enabled"] = False
    return overrides


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if len(args.paths) != 1:
        parser.print_usage(sys.stderr)
        return 0

    setup_logging(args.verbose)
    output = RichOutputManager(use_rich=not args.no_rich)

    try:
        config = load_config(args.config, overrides=build_overrides(args))
        splitter = DependencySplitter(config)
        result = splitter.split_file(Path(args.paths[0]), dry_run=args.dry_run)
    except SplitterError as e:
        logger.debug("Split failed", exc_info=True)
        print(f"Error [{e.category.name}]: {e}", file=sys.stderr)
        return 1

    output.print_split_result(result)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
