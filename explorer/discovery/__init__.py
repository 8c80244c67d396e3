"""Discovery report extraction and pytest node id handling."""

from explorer.discovery.payload import (
    DISCOVERED_TESTS_END_MARK,
    DISCOVERED_TESTS_START_MARK,
    DiscoveryParseError,
    DiscoveryResult,
    MarkerNotFoundError,
    PayloadParseError,
    extract_payload,
    parse_discovery_result,
)
from explorer.discovery.test_ids import normalize_test_id, split_first_segment, split_module

__all__ = [
    "DISCOVERED_TESTS_END_MARK",
    "DISCOVERED_TESTS_START_MARK",
    "DiscoveryParseError",
    "DiscoveryResult",
    "MarkerNotFoundError",
    "PayloadParseError",
    "extract_payload",
    "normalize_test_id",
    "parse_discovery_result",
    "split_first_segment",
    "split_module",
]
