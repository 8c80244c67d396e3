"""Extraction of the discovery report embedded in captured pytest output.

The discovery plugin prints a JSON report between two marker lines::

    ==DISCOVERED TESTS BEGIN==
    {"tests": [{"id": "a/b.py::test_x", "line": 3}], "errors": [], "rootdir": "/repo"}
    ==DISCOVERED TESTS END==

Anything outside the markers (pytest banners, warnings, plugin chatter) is
ignored.  The envelope is validated before decoding: a missing marker raises
``MarkerNotFoundError`` instead of slicing the text at bogus offsets.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

DISCOVERED_TESTS_START_MARK = "==DISCOVERED TESTS BEGIN=="
DISCOVERED_TESTS_END_MARK = "==DISCOVERED TESTS END=="


class DiscoveryParseError(ValueError):
    """Base class for failures to read a discovery report."""


class MarkerNotFoundError(DiscoveryParseError):
    """The begin/end marker pair is missing or out of order."""


class PayloadParseError(DiscoveryParseError):
    """The text between the markers is not a valid discovery report."""


@dataclass(frozen=True)
class RawTest:
    """One ``{id, line}`` entry as reported by the discovery plugin."""

    id: str
    line: int | None = None


@dataclass(frozen=True)
class RawError:
    """One ``{file, message}`` collection error."""

    file: str
    message: str = ""


@dataclass(frozen=True)
class DiscoveryResult:
    """Decoded discovery report."""

    rootdir: str
    tests: list[RawTest] = field(default_factory=list)
    errors: list[RawError] = field(default_factory=list)


def extract_payload(
    content: str,
    begin_marker: str = DISCOVERED_TESTS_START_MARK,
    end_marker: str = DISCOVERED_TESTS_END_MARK,
) -> str:
    """Return the text strictly between the begin and end markers.

    Args:
        content: Full captured output of the discovery run.
        begin_marker: Literal line opening the report.
        end_marker: Literal line closing the report.

    Raises:
        MarkerNotFoundError: If either marker is missing, or no end marker
            follows the begin marker.
    """
    start = content.find(begin_marker)
    if start < 0:
        raise MarkerNotFoundError(f"Discovery output has no '{begin_marker}' marker")
    start += len(begin_marker)
    end = content.find(end_marker, start)
    if end < 0:
        raise MarkerNotFoundError(
            f"Discovery output has no '{end_marker}' marker after '{begin_marker}'"
        )
    return content[start:end]


def _as_list(data: dict[str, Any], key: str) -> list[Any]:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise PayloadParseError(
            f"Discovery report field '{key}' must be a list, got {type(value).__name__}"
        )
    return value


def parse_discovery_result(payload: str, default_rootdir: str) -> DiscoveryResult:
    """Decode the JSON report extracted by ``extract_payload``.

    Missing ``tests`` and ``errors`` default to empty lists and a missing
    ``rootdir`` defaults to *default_rootdir*.  Test entries without a
    string ``id`` and error entries without a string ``file`` are skipped.

    Raises:
        PayloadParseError: If *payload* is not JSON or not a report object.
    """
    try:
        data = json.loads(payload)
    except json.JSONDecodeError as e:
        raise PayloadParseError(f"Invalid JSON in discovery report: {e}") from e

    if not isinstance(data, dict):
        raise PayloadParseError(
            f"Discovery report must be a JSON object, got {type(data).__name__}"
        )

    tests: list[RawTest] = []
    for entry in _as_list(data, "tests"):
        if not isinstance(entry, dict) or not isinstance(entry.get("id"), str):
            continue
        line = entry.get("line")
        tests.append(RawTest(id=entry["id"], line=line if isinstance(line, int) else None))

    errors: list[RawError] = []
    for entry in _as_list(data, "errors"):
        if not isinstance(entry, dict) or not isinstance(entry.get("file"), str):
            continue
        message = entry.get("message")
        errors.append(RawError(
            file=entry["file"],
            message="" if message is None else str(message),
        ))

    rootdir = data.get("rootdir")
    if not isinstance(rootdir, str) or not rootdir:
        rootdir = default_rootdir

    return DiscoveryResult(rootdir=rootdir, tests=tests, errors=errors)
