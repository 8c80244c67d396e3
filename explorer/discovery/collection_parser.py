"""Turn captured pytest discovery output into a suite/test forest.

Tests are grouped first by their (absolute) module path, then recursively
by the ``::`` segments within each module.  Collection errors are
aggregated per file and appended to the forest as placeholder leaves so the
broken files stay visible in the explorer.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any

from explorer.config import ExplorerConfig
from explorer.discovery.payload import (
    DiscoveryResult,
    PayloadParseError,
    RawError,
    extract_payload,
    parse_discovery_result,
)
from explorer.discovery.test_ids import (
    TestRecord,
    normalize_test_id,
    resolve_path,
    split_module,
)
from explorer.tree.builder import TestCaseSplit, build_tree, group_by
from explorer.tree.nodes import Node, TestInfo, TestSuiteInfo, collect_test_ids


@dataclass(frozen=True)
class AggregatedError:
    """All collection error messages reported for one file."""

    file: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"id": self.file, "message": self.message}


@dataclass
class CollectionResult:
    """Forest of discovered suites plus per-file collection errors."""

    suites: list[Node] = field(default_factory=list)
    errors: list[dict[str, str]] = field(default_factory=list)
    dropped_ids: list[str] = field(default_factory=list)

    @property
    def test_count(self) -> int:
        """Number of runnable tests in the forest."""
        return len(collect_test_ids(self.suites))

    def to_dict(self) -> dict[str, Any]:
        return {
            "suites": [node.to_dict() for node in self.suites],
            "errors": [dict(e) for e in self.errors],
        }


def parse_test_suites(
    content: str,
    cwd: str,
    config: ExplorerConfig | None = None,
) -> CollectionResult:
    """Parse captured discovery output into suites and collection errors.

    Args:
        content: Full text printed by the discovery run.
        cwd: Working directory of the run; relative error files are
            resolved against it.  Test ids resolve against the report's
            ``rootdir`` instead.
        config: Optional settings for the marker pair and message separator.

    Returns:
        The collection result.  Test ids without a ``::`` separator are not
        part of the forest and are listed in ``dropped_ids``.

    Raises:
        MarkerNotFoundError: If the report markers are missing.
        PayloadParseError: If the report is not valid JSON, or its test ids
            nest deeper than the interpreter recursion limit.
    """
    config = config or ExplorerConfig()
    payload = extract_payload(content, config.begin_marker, config.end_marker)
    discovery = parse_discovery_result(payload, default_rootdir=cwd)

    records, dropped = _split_tests(discovery)
    try:
        suites: list[Node] = [
            _module_suite(module_path, tests)
            for module_path, tests in group_by(records, lambda r: r.module_path).items()
        ]
    except RecursionError as e:
        raise PayloadParseError("Test ids in discovery report are nested too deeply") from e

    aggregated = aggregate_errors(discovery.errors, cwd, config.message_separator)
    error_leaves: list[Node] = [
        TestInfo(id=e.file, label=os.path.basename(e.file), file=e.file)
        for e in aggregated
    ]

    return CollectionResult(
        suites=suites + error_leaves,
        errors=[e.to_dict() for e in aggregated],
        dropped_ids=dropped,
    )


def _split_tests(discovery: DiscoveryResult) -> tuple[list[TestRecord], list[str]]:
    """Normalize and split every raw test, separating unattributable ids."""
    records: list[TestRecord] = []
    dropped: list[str] = []
    for raw in discovery.tests:
        test_id = normalize_test_id(raw.id)
        if not test_id:
            continue
        record = split_module(test_id, raw.line, discovery.rootdir)
        if record is None:
            dropped.append(raw.id)
            continue
        records.append(record)
    return records, dropped


def _module_suite(module_path: str, tests: list[TestRecord]) -> TestSuiteInfo:
    return TestSuiteInfo(
        id=module_path,
        label=os.path.basename(module_path),
        file=module_path,
        tooltip=module_path,
        children=build_tree([
            TestCaseSplit(
                id_head=t.module_path,
                id_tail=t.test_path,
                line=t.line,
                path=module_path,
            )
            for t in tests
        ]),
    )


def aggregate_errors(
    errors: list[RawError],
    cwd: str,
    separator: str | None = None,
) -> list[AggregatedError]:
    """Merge collection errors into one entry per reported file.

    Files keep their first-seen order and messages their original order,
    joined with *separator* (``os.linesep`` by default).
    """
    separator = os.linesep if separator is None else separator
    return [
        AggregatedError(
            file=resolve_path(cwd, file),
            message=separator.join(e.message for e in file_errors),
        )
        for file, file_errors in group_by(errors, lambda e: e.file).items()
    ]
