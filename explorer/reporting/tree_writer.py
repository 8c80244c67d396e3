"""Report generation for discovered test trees.

Serializes a ``CollectionResult`` into the mapping consumed by the explorer
UI (``suites`` forest plus ``errors``), as JSON or YAML.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml

from explorer.config import OUTPUT_FORMATS
from explorer.discovery.collection_parser import CollectionResult


def build_report(result: CollectionResult) -> dict[str, Any]:
    """Build the report mapping for *result*.

    Returns:
        Dict with ``suites`` (nested node dicts) and ``errors``
        (``{id, message}`` dicts).
    """
    return result.to_dict()


def dump_report(report: dict[str, Any], fmt: str = "json") -> str:
    """Render *report* as a string in the given format.

    Raises:
        ValueError: If *fmt* is not a supported output format.
    """
    if fmt == "json":
        return json.dumps(report, indent=2) + "\n"
    if fmt == "yaml":
        return yaml.dump(
            report,
            default_flow_style=False,
            sort_keys=False,
            allow_unicode=True,
        )
    raise ValueError(
        f"Unknown output format: {fmt} (expected one of {', '.join(OUTPUT_FORMATS)})"
    )


def write_json(report: dict[str, Any], path: Path) -> None:
    """Write the report as a JSON file.

    Args:
        report: Report mapping from ``build_report``.
        path: File path to write the JSON report to.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(report, f, indent=2)
        f.write("\n")


def write_yaml(report: dict[str, Any], path: Path) -> None:
    """Write the report as a YAML file.

    Args:
        report: Report mapping from ``build_report``.
        path: File path to write the YAML report to.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        yaml.dump(
            report,
            f,
            default_flow_style=False,
            sort_keys=False,
            allow_unicode=True,
        )


def write_report(report: dict[str, Any], path: Path, fmt: str = "json") -> None:
    """Write *report* to *path* in the given format."""
    if fmt == "yaml":
        write_yaml(report, path)
    elif fmt == "json":
        write_json(report, path)
    else:
        raise ValueError(f"Unknown output format: {fmt}")
