"""Pytest collectors for specs and containers.

A `SpecCollector` instantiates a spec class and discovers its root
scope; a `ContainerCollector` discovers a single container. Discovery
happens inside `collect`, which pytest calls once per session, so the
declarative block of every container runs exactly once.
"""

from re import compile as regexp
from typing import TYPE_CHECKING

import pytest

from pytest_nest.container import TestContainer

from .case import CaseItem

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator
    from typing import Any

if TYPE_CHECKING:
    from pytest_nest.container import TestNode
    from pytest_nest.spec import Spec

#: Colons forming part of a `::` run, the separator of pytest node ids.
NODEID_SEPARATOR_PATTERN = regexp(r':(?=:)|(?<=:):')

#: Replacement keeping display names selectable by node id.
NODEID_COLON_ESCAPE = r'\\:'


def node_name(name: str) -> str:
    """Escape the node id separator inside a display name.

    pytest splits node ids on `::`, so a display name containing it
    could not be selected from the command line. Every colon adjacent
    to another colon is prefixed with a backslash, so `a::b` becomes
    `a\\:\\:b`, which selects the node when passed as is.

    Args:
        name: Display name of a test case or container.

    Returns:
        Name usable as a pytest node name.
    """
    return NODEID_SEPARATOR_PATTERN.sub(NODEID_COLON_ESCAPE, name)


def make_nodes(parent: pytest.Collector,
               nodes: 'Iterable[TestNode]') -> 'Iterator[pytest.Item | pytest.Collector]':
    """Map tree nodes to pytest nodes under a parent collector.

    Args:
        parent: Collector owning the resulting pytest nodes.
        nodes: Test cases and containers in declaration order.

    Yields:
        A `ContainerCollector` per container and a `CaseItem` per case.
    """
    for node in nodes:
        if isinstance(node, TestContainer):
            yield ContainerCollector.from_parent(parent, name=node_name(node.name), container=node)
        else:
            yield CaseItem.from_parent(parent, name=node_name(node.name), case=node)


class SpecCollector(pytest.Collector):
    """Pytest collector for a `Spec` subclass."""

    def __init__(self, *, spec_class: type['Spec'], **kwargs: 'Any') -> None:
        """Initialize a spec collector.

        Args:
            spec_class: Concrete spec class to instantiate.
            **kwargs: Keyword pytest.Collector arguments.
        """
        super().__init__(**kwargs)

        self.spec_class = spec_class

    def collect(self) -> 'Iterable[pytest.Item | pytest.Collector]':
        """Instantiate the spec and collect its top-level nodes."""
        spec = self.spec_class()

        yield from make_nodes(self, spec.discover())


class ContainerCollector(pytest.Collector):
    """Pytest collector for a `TestContainer`."""

    def __init__(self, *, container: TestContainer, **kwargs: 'Any') -> None:
        """Initialize a container collector.

        Args:
            container: Container to discover.
            **kwargs: Keyword pytest.Collector arguments.
        """
        super().__init__(**kwargs)

        self.container = container

    def collect(self) -> 'Iterable[pytest.Item | pytest.Collector]':
        """Discover the container and collect its children."""
        yield from make_nodes(self, self.container.discover())
