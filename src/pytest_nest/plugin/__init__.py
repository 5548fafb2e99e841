"""Pytest plugin for collecting and executing nested test specs.

This module integrates `pytest-nest` with pytest by:
- registering tag filter command-line options;
- resolving the tag filters once per session;
- collecting `Spec` subclasses declared in test modules.

Containers of a spec become pytest collectors and test cases become
pytest items. Each container is discovered exactly once, when pytest
collects it.
"""

from inspect import isabstract, isclass
from typing import TYPE_CHECKING

import pytest

from pytest_nest.settings import TagFilters
from pytest_nest.spec import Spec

from .spec import SpecCollector

if TYPE_CHECKING:
    from typing import Any

if TYPE_CHECKING:
    from _pytest.config import Config
    from _pytest.config.argparsing import Parser
    from _pytest.python import PyCollector


def pytest_addoption(parser: 'Parser') -> None:
    """Register pytest command-line options for pytest-nest.

    Args:
        parser: Pytest argument parser.
    """
    group = parser.getgroup('nest', 'nested test specs')
    group.addoption(
        '--nest-tags-include',
        action='store',
        dest='nest_tags_include',
        default=None,
        help=(
            'Comma-separated tags; when given, only test cases carrying '
            'one of them run. Overrides NEST_TAGS_INCLUDE.'
        ),
    )
    group.addoption(
        '--nest-tags-exclude',
        action='store',
        dest='nest_tags_exclude',
        default=None,
        help=(
            'Comma-separated tags; test cases carrying one of them are '
            'skipped. Overrides NEST_TAGS_EXCLUDE.'
        ),
    )


def pytest_configure(config: 'Config') -> None:
    """Resolve the tag filters for the session.

    Command-line options win over the environment; the result is
    attached to the pytest configuration object as `config.nest_filters`.

    Args:
        config: Pytest configuration object.
    """
    overrides = {
        name: value
        for name, value in (
            ('include', config.getoption('nest_tags_include', default=None)),
            ('exclude', config.getoption('nest_tags_exclude', default=None)),
        )
        if value is not None
    }

    config.nest_filters = TagFilters(**overrides)  # type: ignore[attr-defined]


@pytest.hookimpl(tryfirst=True)
def pytest_pycollect_makeitem(collector: 'PyCollector', name: str,
                              obj: 'Any') -> SpecCollector | None:  # noqa: ANN401
    """Collect concrete `Spec` subclasses declared in a test module.

    Specs imported from other modules are ignored so that each spec is
    collected only where it is declared.

    Args:
        collector: Module or class collector being populated.
        name: Attribute name of the candidate object.
        obj: Candidate object.

    Returns:
        A `SpecCollector` for spec classes, otherwise `None`.
    """
    if not isclass(obj) or not issubclass(obj, Spec) or isabstract(obj):
        return None

    if obj.__module__ != collector.module.__name__:
        return None

    return SpecCollector.from_parent(
        collector,
        name=name,
        spec_class=obj,
    )
