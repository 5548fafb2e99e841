"""Specs: the owning declaration units of test trees.

A spec declares its top-level containers and test cases in `define`,
which receives the root scope. Nested blocks are declared through
scope registration and only run when their container is discovered.
"""

from abc import ABC, abstractmethod
from inspect import getsourcefile
from logging import getLogger
from typing import TYPE_CHECKING, ClassVar

from pytest_nest.scope import TestScope

if TYPE_CHECKING:
    from collections.abc import Callable

if TYPE_CHECKING:
    from pytest_nest.config import TestCaseConfig
    from pytest_nest.container import TestNode

logger = getLogger(__name__)


class Spec(ABC):
    """Base class for test specifications.

    Attributes:
        scope_factory: Callable creating the root scope passed to `define`.
        default_config: Configuration of cases registered without one.
    """

    scope_factory: ClassVar['Callable[[], TestScope]'] = TestScope
    default_config: ClassVar['TestCaseConfig | None'] = None

    @abstractmethod
    def define(self, scope: TestScope) -> None:
        """Declare the top-level containers and test cases.

        Args:
            scope: Root scope of the spec.
        """

    @property
    def name(self) -> str:
        """Name of the spec."""
        return type(self).__name__

    @property
    def filename(self) -> str | None:
        """Source file declaring the spec class, if it can be resolved."""
        try:
            return getsourcefile(type(self))
        except TypeError:
            return None

    def discover(self) -> tuple['TestNode', ...]:
        """Run `define` on a fresh root scope and return its children."""
        logger.debug('Discovering spec %r', self.name)

        scope = type(self).scope_factory()
        self.define(scope)

        return scope.children
