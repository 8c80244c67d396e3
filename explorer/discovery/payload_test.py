"""Tests for discovery report extraction."""

from __future__ import annotations

import json

import pytest

from explorer.discovery.payload import (
    DISCOVERED_TESTS_END_MARK,
    DISCOVERED_TESTS_START_MARK,
    DiscoveryParseError,
    MarkerNotFoundError,
    PayloadParseError,
    RawError,
    RawTest,
    extract_payload,
    parse_discovery_result,
)


def _wrap(payload: str) -> str:
    return (
        "============ test session starts ============\n"
        f"{DISCOVERED_TESTS_START_MARK}\n{payload}\n{DISCOVERED_TESTS_END_MARK}\n"
        "========= 3 tests collected in 0.01s ========\n"
    )


class TestExtractPayload:
    """Tests for locating the report between the markers."""

    def test_extracts_text_between_markers(self):
        """Only the text between the markers is returned."""
        content = _wrap('{"tests": []}')
        assert extract_payload(content).strip() == '{"tests": []}'

    def test_markers_on_same_line(self):
        """Markers need not be on separate lines."""
        content = f"noise{DISCOVERED_TESTS_START_MARK}{{}}{DISCOVERED_TESTS_END_MARK}noise"
        assert extract_payload(content) == "{}"

    def test_missing_begin_marker(self):
        """No begin marker raises MarkerNotFoundError."""
        with pytest.raises(MarkerNotFoundError, match="BEGIN"):
            extract_payload(f"{{}}\n{DISCOVERED_TESTS_END_MARK}")

    def test_missing_end_marker(self):
        """No end marker raises MarkerNotFoundError."""
        with pytest.raises(MarkerNotFoundError, match="END"):
            extract_payload(f"{DISCOVERED_TESTS_START_MARK}\n{{}}")

    def test_end_marker_before_begin_marker(self):
        """An end marker preceding the begin marker does not count."""
        content = f"{DISCOVERED_TESTS_END_MARK}\n{DISCOVERED_TESTS_START_MARK}\n{{}}"
        with pytest.raises(MarkerNotFoundError):
            extract_payload(content)

    def test_empty_text(self):
        """Empty output has no report."""
        with pytest.raises(MarkerNotFoundError):
            extract_payload("")

    def test_custom_markers(self):
        """Custom markers are honoured."""
        assert extract_payload("<<[1]>>", begin_marker="<<", end_marker=">>") == "[1]"

    def test_marker_error_is_value_error(self):
        """Marker errors share the DiscoveryParseError / ValueError base."""
        with pytest.raises(ValueError):
            extract_payload("nothing here")
        assert issubclass(MarkerNotFoundError, DiscoveryParseError)


class TestParseDiscoveryResult:
    """Tests for decoding the JSON report."""

    def test_full_report(self):
        """All three fields are decoded."""
        payload = json.dumps({
            "tests": [{"id": "a/b.py::test_1", "line": 3}],
            "errors": [{"file": "c.py", "message": "boom"}],
            "rootdir": "/repo",
        })
        result = parse_discovery_result(payload, default_rootdir="/cwd")
        assert result.rootdir == "/repo"
        assert result.tests == [RawTest(id="a/b.py::test_1", line=3)]
        assert result.errors == [RawError(file="c.py", message="boom")]

    def test_absent_fields_default_to_empty(self):
        """Missing tests/errors give empty lists, missing rootdir the default."""
        result = parse_discovery_result("{}", default_rootdir="/cwd")
        assert result.tests == []
        assert result.errors == []
        assert result.rootdir == "/cwd"

    def test_null_fields_default_to_empty(self):
        """JSON null for tests/errors is treated as empty."""
        result = parse_discovery_result(
            '{"tests": null, "errors": null, "rootdir": "/r"}', default_rootdir="/cwd",
        )
        assert result.tests == []
        assert result.errors == []

    def test_invalid_json(self):
        """Malformed JSON raises PayloadParseError chained from the decoder."""
        with pytest.raises(PayloadParseError) as excinfo:
            parse_discovery_result("{ invalid json }", default_rootdir="/cwd")
        assert isinstance(excinfo.value.__cause__, json.JSONDecodeError)

    def test_empty_payload(self):
        """An empty marker block is not valid JSON."""
        with pytest.raises(PayloadParseError):
            parse_discovery_result("\n", default_rootdir="/cwd")

    def test_non_object_payload(self):
        """A JSON array is not a report."""
        with pytest.raises(PayloadParseError, match="object"):
            parse_discovery_result("[]", default_rootdir="/cwd")

    def test_tests_not_a_list(self):
        """A non-list tests field is rejected."""
        with pytest.raises(PayloadParseError, match="tests"):
            parse_discovery_result('{"tests": "a.py::t"}', default_rootdir="/cwd")

    def test_entries_without_id_are_skipped(self):
        """Test entries lacking a string id are ignored."""
        payload = json.dumps({
            "tests": [{"line": 1}, "a.py::t", {"id": 5}, {"id": "a.py::ok", "line": 2}],
        })
        result = parse_discovery_result(payload, default_rootdir="/cwd")
        assert [t.id for t in result.tests] == ["a.py::ok"]

    def test_missing_line_is_none(self):
        """A test entry without a line has line None."""
        result = parse_discovery_result('{"tests": [{"id": "a.py::t"}]}', "/cwd")
        assert result.tests[0].line is None

    def test_error_message_coerced_to_string(self):
        """Non-string error messages are stringified; missing ones are empty."""
        payload = json.dumps({
            "errors": [{"file": "a.py", "message": 42}, {"file": "b.py"}],
        })
        result = parse_discovery_result(payload, "/cwd")
        assert result.errors == [
            RawError(file="a.py", message="42"),
            RawError(file="b.py", message=""),
        ]

    def test_order_preserved(self):
        """Tests keep their report order."""
        ids = ["z.py::t", "a.py::t", "m.py::t"]
        payload = json.dumps({"tests": [{"id": i, "line": n} for n, i in enumerate(ids)]})
        result = parse_discovery_result(payload, "/cwd")
        assert [t.id for t in result.tests] == ids
