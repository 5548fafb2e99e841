"""Test cases: the leaves of a discovered tree.

A test case couples a display name and an executable body with its
configuration. The configuration may be refined any number of times
while the tree is being declared; once the case is handed over for
execution it is frozen and further refinement fails.
"""

from logging import getLogger
from typing import TYPE_CHECKING, Any

from pytest_nest.activation import is_active_by_tags
from pytest_nest.config import TestCaseConfig
from pytest_nest.errors import ErrorContext, FrozenTestCaseError
from pytest_nest.models import SchemaModel
from pytest_nest.settings import TagFilters

if TYPE_CHECKING:
    from collections.abc import Callable

if TYPE_CHECKING:
    from pytest_nest.config import ConfigPatch

logger = getLogger(__name__)


class TestCase:
    """An actual test case, that is, a unit of code under test.

    A test case always lives inside a scope: either the root scope of a
    spec or the scope of a `TestContainer`. Its display name is unique
    within that scope only.

    Attributes:
        display_name: Name of the test shown in reports.
        spec: The spec declaring this test (back-reference only).
        test: Zero-argument body of the test.
        line: Best-effort source line of the declaration, `0` if unknown.
    """

    __test__ = False

    def __init__(self, display_name: str, spec: Any,  # noqa: ANN401
                 test: 'Callable[[], object]', line: int,
                 config: TestCaseConfig | None = None) -> None:
        """Initialize a test case.

        Args:
            display_name: Name of the test shown in reports.
            spec: The spec declaring this test.
            test: Zero-argument body of the test.
            line: Source line of the declaration.
            config: Initial configuration; defaults are used when omitted.
        """
        self.display_name = display_name
        self.spec = spec
        self.test = test
        self.line = line

        self._config = config if config is not None else TestCaseConfig()
        self._frozen = False

    def __repr__(self) -> str:
        """Debug representation."""
        return f'<{type(self).__name__} {self.display_name!r} line={self.line}>'

    @property
    def name(self) -> str:
        """Display name of the test case."""
        return self.display_name

    @property
    def config(self) -> TestCaseConfig:
        """Current configuration."""
        return self._config

    @config.setter
    def config(self, value: TestCaseConfig) -> None:
        self._ensure_mutable()
        self._config = value

    @property
    def frozen(self) -> bool:
        """Whether the case has been handed over for execution."""
        return self._frozen

    def reconfigure(self, patch: 'ConfigPatch | None' = None, **fields: Any) -> TestCaseConfig:  # noqa: ANN401
        """Refine the configuration in place.

        Fields present in the patch (or given as keywords) replace the
        current values; everything else is kept as is.

        Args:
            patch: Optional partial configuration.
            **fields: Optional field values, applied after the patch.

        Returns:
            The refined configuration.

        Raises:
            FrozenTestCaseError: If the case is already frozen.
            ValidationError: If a field value is invalid.
        """
        self._ensure_mutable()
        self._config = self._config.override(patch, **fields)

        return self._config

    def freeze(self) -> TestCaseConfig:
        """Finish the declaration phase and return the final configuration."""
        if not self._frozen:
            logger.debug('Freezing test case %r', self.display_name)
            self._frozen = True

        return self._config

    def is_active(self, filters: TagFilters | None = None) -> bool:
        """Check whether the case is eligible to run.

        Args:
            filters: Tag filters; read from the environment when omitted.

        Returns:
            True if the case is enabled and accepted by the tag filters.
        """
        return self._config.enabled and self.is_active_according_to_tags(filters)

    def is_active_according_to_tags(self, filters: TagFilters | None = None) -> bool:
        """Check the case tags against the tag filters.

        Args:
            filters: Tag filters; read from the environment when omitted.

        Returns:
            True if the tags are accepted by the filters.
        """
        if filters is None:
            filters = TagFilters()

        return is_active_by_tags(self._config.tags, filters)

    def _ensure_mutable(self) -> None:
        """Reject configuration changes after the case was frozen."""
        if self._frozen:
            raise FrozenTestCaseError(
                f'Cannot reconfigure test case {self.display_name!r} after execution started',
                context=ErrorContext(
                    filename=getattr(self.spec, 'filename', None),
                    line_num=self.line,
                ),
            )


class TestCaseContext(SchemaModel):
    """Run context passed to interceptors."""

    __test__ = False

    spec: Any
    test_case: TestCase
