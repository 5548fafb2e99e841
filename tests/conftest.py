"""Tests configurations and fixtures."""

import os
from typing import TYPE_CHECKING

import pytest

from pytest_nest.scope import TestScope
from pytest_nest.spec import Spec

if TYPE_CHECKING:
    from pytest_mock import MockerFixture

pytest_plugins = ('pytester',)


class EmptySpec(Spec):
    """Spec without top-level declarations, used as a back-reference."""

    def define(self, scope: TestScope) -> None:
        """Declare nothing."""


@pytest.fixture
def spec() -> Spec:
    """Provide a spec instance to attach test cases and containers to."""
    return EmptySpec()


@pytest.fixture
def scope() -> TestScope:
    """Provide an empty root scope."""
    return TestScope()


@pytest.fixture
def clean_env(mocker: 'MockerFixture') -> None:
    """Remove tag filter variables from the environment for one test.

    The environment is restored after the test, including any variables
    set by the test itself.
    """
    mocker.patch.dict(os.environ, {
        key: value
        for key, value in os.environ.items()
        if not key.startswith('NEST_TAGS_')
    }, clear=True)


@pytest.fixture
def nest_pytester(pytester: pytest.Pytester, mocker: 'MockerFixture',
                  clean_env: None) -> pytest.Pytester:
    """Provide a pytester with only the pytest-nest plugin enabled.

    Entry point autoloading is disabled so that the plugin is loaded
    exactly once through `-p`, whether or not the package is installed.
    """
    mocker.patch.dict(os.environ, {'PYTEST_DISABLE_PLUGIN_AUTOLOAD': '1'})
    return pytester
