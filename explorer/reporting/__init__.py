"""Explorer tree reporting: JSON and YAML output."""

from explorer.reporting.tree_writer import build_report, dump_report, write_report

__all__ = [
    "build_report",
    "dump_report",
    "write_report",
]
