"""Suite/test node model and the recursive tree builder."""

from explorer.tree.builder import TestCaseSplit, build_tree, group_by
from explorer.tree.nodes import (
    Node,
    TestInfo,
    TestSuiteInfo,
    collect_test_ids,
    find_node,
    iter_nodes,
)

__all__ = [
    "Node",
    "TestCaseSplit",
    "TestInfo",
    "TestSuiteInfo",
    "build_tree",
    "collect_test_ids",
    "find_node",
    "group_by",
    "iter_nodes",
]
