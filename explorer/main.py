"""Entry point for the test explorer collection parser.

Reads the captured output of a pytest discovery run, extracts the embedded
discovery report, and prints (or writes) the suite/test tree as JSON or YAML
for the explorer UI.
"""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

from explorer.config import OUTPUT_FORMATS, ExplorerConfig
from explorer.discovery.collection_parser import CollectionResult, parse_test_suites
from explorer.discovery.payload import DiscoveryParseError
from explorer.reporting.tree_writer import build_report, dump_report, write_report


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Build a test explorer tree from pytest discovery output"
    )
    parser.add_argument(
        "--input",
        type=Path,
        default=None,
        help="Path to the captured discovery output (default: read stdin)",
    )
    parser.add_argument(
        "--cwd",
        type=str,
        default=None,
        help="Working directory of the discovery run (default: current directory)",
    )
    parser.add_argument(
        "--format",
        choices=list(OUTPUT_FORMATS),
        default=None,
        help="Output format (default: from config, json)",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Path to write the report file (default: stdout)",
    )
    parser.add_argument(
        "--config-file",
        type=Path,
        default=None,
        help="Path to the explorer JSON config file",
    )
    parser.add_argument(
        "--write-config",
        action="store_true",
        default=False,
        help="Write the effective config (including --format) to --config-file and exit",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        default=False,
        help="Suppress the summary and warnings on stderr",
    )
    return parser.parse_args(argv)


def _read_input(path: Path | None) -> str:
    """Read discovery output from *path*, or stdin when no path is given.

    Undecodable bytes (e.g. binary prints from tests) are replaced.  The
    markers are ASCII and the report is emitted as UTF-8, so neither is
    affected.
    """
    if path is None:
        raw = getattr(sys.stdin, "buffer", None)
        if raw is None:
            return sys.stdin.read()
        return raw.read().decode("utf-8", errors="replace")
    return path.read_text(encoding="utf-8", errors="replace")


def _print_summary(result: CollectionResult) -> None:
    for dropped in result.dropped_ids:
        print(f"Warning: test id has no module part, skipped: {dropped}",
              file=sys.stderr)
    module_count = sum(1 for node in result.suites if node.type == "suite")
    print(
        f"Discovered {result.test_count} tests in {module_count} files "
        f"({len(result.errors)} errors)",
        file=sys.stderr,
    )


def _write_config(config: ExplorerConfig, fmt: str | None) -> int:
    """Persist the effective settings so later runs can drop the flags."""
    if config.path is None:
        print("Error: --write-config requires --config-file", file=sys.stderr)
        return 1
    config.set_config(output_format=fmt)
    path = config.save()
    print(f"Config written to: {path}", file=sys.stderr)
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    config = ExplorerConfig(args.config_file)
    fmt = args.format or config.output_format

    if args.write_config:
        return _write_config(config, args.format)

    cwd = os.path.abspath(args.cwd) if args.cwd else os.getcwd()

    try:
        content = _read_input(args.input)
    except FileNotFoundError:
        print(f"Error: Discovery output not found: {args.input}", file=sys.stderr)
        return 1

    try:
        result = parse_test_suites(content, cwd, config)
    except DiscoveryParseError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if not args.quiet:
        _print_summary(result)

    report = build_report(result)
    if args.output is not None:
        write_report(report, args.output, fmt)
        if not args.quiet:
            print(f"Report written to: {args.output}", file=sys.stderr)
    else:
        sys.stdout.write(dump_report(report, fmt))
    return 0


if __name__ == "__main__":
    sys.exit(main())
