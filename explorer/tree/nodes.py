"""Suite and test nodes of the test explorer tree.

A discovery run is rendered as a forest: one ``TestSuiteInfo`` per test
module, nested suites per class (or other ``::`` scope), and ``TestInfo``
leaves for individual tests.  Every node's ``id`` is the composite
``::``-joined path from the forest root, which is also the key test result
reporters use to correlate outcomes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator, Union


@dataclass(frozen=True)
class TestInfo:
    """A leaf node representing one executable test.

    Placeholder leaves emitted for files that failed to collect carry no
    ``line`` and no ``tooltip``.
    """

    __test__ = False

    id: str
    label: str
    file: str
    line: int | None = None
    tooltip: str | None = None

    @property
    def type(self) -> str:
        return "test"

    def to_dict(self) -> dict[str, Any]:
        """Render the node as a plain mapping, omitting unset fields."""
        data: dict[str, Any] = {
            "type": self.type,
            "id": self.id,
            "label": self.label,
            "file": self.file,
        }
        if self.line is not None:
            data["line"] = self.line
        if self.tooltip is not None:
            data["tooltip"] = self.tooltip
        return data


@dataclass(frozen=True)
class TestSuiteInfo:
    """A grouping node (test module or nested scope) with ordered children."""

    __test__ = False

    id: str
    label: str
    file: str
    tooltip: str
    children: list[Node] = field(default_factory=list)

    @property
    def type(self) -> str:
        return "suite"

    def to_dict(self) -> dict[str, Any]:
        """Render the suite and all of its descendants as plain mappings."""
        return {
            "type": self.type,
            "id": self.id,
            "label": self.label,
            "file": self.file,
            "tooltip": self.tooltip,
            "children": [child.to_dict() for child in self.children],
        }


Node = Union[TestSuiteInfo, TestInfo]


def iter_nodes(forest: list[Node]) -> Iterator[Node]:
    """Walk every node of *forest* depth-first, parents before children."""
    for node in forest:
        yield node
        if isinstance(node, TestSuiteInfo):
            yield from iter_nodes(node.children)


def find_node(forest: list[Node], node_id: str) -> Node | None:
    """Return the node whose composite id is *node_id*, or None."""
    for node in iter_nodes(forest):
        if node.id == node_id:
            return node
    return None


def collect_test_ids(forest: list[Node]) -> list[str]:
    """Collect the ids of all runnable tests in tree order.

    Placeholder leaves for collection errors have no tooltip and are skipped.
    """
    return [
        node.id
        for node in iter_nodes(forest)
        if isinstance(node, TestInfo) and node.tooltip is not None
    ]
