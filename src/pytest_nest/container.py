"""Test containers: the interior nodes of a discovered tree.

A container groups related test cases and nested containers for
hierarchical display and execution order. Its children are not known
when it is declared; they are produced by a discovery function that
runs the declarative block of the container on demand.

Deferring discovery means that side effects inside a container body
happen when the runner is ready to execute tests in that container,
not when the spec is constructed.
"""

from collections.abc import Callable
from logging import getLogger
from typing import Any, TypeAlias
from warnings import warn

from pytest_nest.case import TestCase
from pytest_nest.errors import RediscoveryWarning

logger = getLogger(__name__)

#: A node of the tree is either a leaf test case or a container.
TestNode: TypeAlias = 'TestCase | TestContainer'

#: Deferred producer of the immediate children of a container.
Discovery: TypeAlias = Callable[[], tuple[TestNode, ...]]


class TestContainer:
    """Group of test cases and nested containers.

    Attributes:
        display_name: Name of the container shown in reports.
        spec: The spec declaring this container (back-reference only).
        discovery: Deferred function returning the immediate children.
    """

    __test__ = False

    def __init__(self, display_name: str, spec: Any,  # noqa: ANN401
                 discovery: 'Discovery') -> None:
        """Initialize a container without running its body.

        Args:
            display_name: Name of the container shown in reports.
            spec: The spec declaring this container.
            discovery: Function producing the ordered children.
        """
        self.display_name = display_name
        self.spec = spec
        self.discovery = discovery

        self.discoveries = 0

    def __repr__(self) -> str:
        """Debug representation."""
        return f'<{type(self).__name__} {self.display_name!r}>'

    @property
    def name(self) -> str:
        """Display name of the container."""
        return self.display_name

    def discover(self) -> tuple['TestNode', ...]:
        """Run the discovery function and return the immediate children.

        Every call re-runs the declarative block of the container, so
        callers should discover a container at most once per run. A
        repeated discovery still proceeds but emits a warning.

        Returns:
            Ordered tuple of test cases and nested containers.

        Raises:
            DuplicateNameError: If the block registers a name twice.
            Any exception raised by the declarative block itself.
        """
        self.discoveries += 1
        if self.discoveries > 1:
            warn(
                f'Container {self.display_name!r} is discovered {self.discoveries} times; '
                'its body side effects are repeated',
                category=RediscoveryWarning,
                stacklevel=2,
            )

        logger.debug('Discovering container %r', self.display_name)
        children = tuple(self.discovery())
        logger.debug('Container %r has %d children', self.display_name, len(children))

        return children
