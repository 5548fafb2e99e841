"""Pytest items executing discovered test cases."""

from logging import getLogger
from typing import TYPE_CHECKING

import pytest

from pytest_nest.tree import run_test

if TYPE_CHECKING:
    from typing import Any

if TYPE_CHECKING:
    from pytest_nest.case import TestCase
    from pytest_nest.settings import TagFilters

logger = getLogger(__name__)


class CaseItem(pytest.Item):
    """Pytest item executing a single test case.

    Inactive cases are skipped: disabled cases and cases rejected by
    the tag filters never run their body.
    """

    def __init__(self, *, case: 'TestCase', **kwargs: 'Any') -> None:
        """Initialize a pytest item backed by a test case.

        Args:
            case: Discovered test case.
            **kwargs: Keyword pytest.Item arguments.
        """
        super().__init__(**kwargs)

        self.case = case

    @property
    def filters(self) -> 'TagFilters | None':
        """Tag filters resolved for the session, if the plugin configured them."""
        return getattr(self.config, 'nest_filters', None)

    def setup(self) -> None:
        """Skip the case when it is not eligible to run."""
        if not self.case.config.enabled:
            logger.debug('Skipping disabled test case %r', self.nodeid)
            pytest.skip('test case is disabled')

        if not self.case.is_active_according_to_tags(self.filters):
            logger.debug('Skipping test case %r filtered by tags', self.nodeid)
            pytest.skip('test case is filtered out by tags')

    def runtest(self) -> None:
        """Execute the test case."""
        run_test(self.case)

    def reportinfo(self) -> tuple['Any', int | None, str]:
        """Report the source location of the test case."""
        line = self.case.line - 1 if self.case.line else None

        return self.path, line, self.name
