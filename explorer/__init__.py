"""Test explorer tree built from pytest discovery output."""

from explorer.discovery.collection_parser import CollectionResult, parse_test_suites
from explorer.discovery.payload import (
    DiscoveryParseError,
    MarkerNotFoundError,
    PayloadParseError,
)
from explorer.tree.nodes import TestInfo, TestSuiteInfo

__all__ = [
    "CollectionResult",
    "DiscoveryParseError",
    "MarkerNotFoundError",
    "PayloadParseError",
    "TestInfo",
    "TestSuiteInfo",
    "parse_test_suites",
]
