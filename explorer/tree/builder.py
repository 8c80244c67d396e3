"""Recursive grouping of ``::``-separated test ids into a node tree.

Each level of the tree consumes one ``::`` segment of the remaining id.
Tests whose remaining id has no further separator become leaves at the
current level; the rest are grouped by their next segment into nested
suites.  Leaves always precede suites at the same level, and both keep the
order in which they first appear in the input.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Hashable, Iterable, TypeVar

from explorer.discovery.test_ids import SEPARATOR, split_first_segment
from explorer.tree.nodes import Node, TestInfo, TestSuiteInfo

T = TypeVar("T")
K = TypeVar("K", bound=Hashable)


@dataclass(frozen=True)
class TestCaseSplit:
    """A test id split into the part already placed in the tree and the rest."""

    __test__ = False

    id_head: str
    id_tail: str
    line: int | None
    path: str


def group_by(items: Iterable[T], key: Callable[[T], K]) -> dict[K, list[T]]:
    """Group *items* by *key*, keeping keys in first-occurrence order.

    Items keep their relative input order within each group.
    """
    groups: dict[K, list[T]] = {}
    for item in items:
        groups.setdefault(key(item), []).append(item)
    return groups


def build_tree(tests: list[TestCaseSplit]) -> list[Node]:
    """Build the ordered list of child nodes for one level of the tree."""
    if not tests:
        return []
    partitioned = group_by(tests, lambda t: SEPARATOR in t.id_tail)
    first_level_tests: list[Node] = _to_first_level_tests(partitioned.get(False, []))
    suites: list[Node] = _to_suites(partitioned.get(True, []))
    return first_level_tests + suites


def _to_first_level_tests(tests: list[TestCaseSplit]) -> list[TestInfo]:
    result: list[TestInfo] = []
    for test in tests:
        test_id = f"{test.id_head}{SEPARATOR}{test.id_tail}"
        result.append(TestInfo(
            id=test_id,
            label=test.id_tail,
            file=test.path,
            line=test.line,
            tooltip=test_id,
        ))
    return result


def _to_suites(tests: list[TestCaseSplit]) -> list[TestSuiteInfo]:
    # Each entry pairs the consumed segment name with the shortened split.
    descended = [_descend(test) for test in tests]
    grouped = group_by(descended, lambda pair: pair[1].id_head)

    suites: list[TestSuiteInfo] = []
    for suite_id, members in grouped.items():
        name, first = members[0]
        suites.append(TestSuiteInfo(
            id=suite_id,
            label=name,
            file=first.path,
            tooltip=suite_id,
            children=build_tree([split for _, split in members]),
        ))
    return suites


def _descend(test: TestCaseSplit) -> tuple[str, TestCaseSplit]:
    """Move the first segment of ``id_tail`` onto ``id_head``."""
    name, rest = split_first_segment(test.id_tail)
    return name, TestCaseSplit(
        id_head=f"{test.id_head}{SEPARATOR}{name}",
        id_tail=rest,
        line=test.line,
        path=test.path,
    )
