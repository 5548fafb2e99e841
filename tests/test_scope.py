"""Tests for registration scopes."""

from inspect import currentframe, getsourcelines
from typing import TYPE_CHECKING

import pytest

from pytest_nest.case import TestCase
from pytest_nest.config import TestCaseConfig
from pytest_nest.container import TestContainer
from pytest_nest.errors import DuplicateNameError
from pytest_nest.scope import UNKNOWN_LINE, TestScope
from tests.examples.scopes import LeakyScope, ShouldScope

if TYPE_CHECKING:
    from pytest_mock import MockerFixture

    from pytest_nest.spec import Spec


class FeatureScope(TestScope):
    """Scope subtype adding its own registration vocabulary."""

    def scenario(self, name: str, spec: 'Spec') -> TestCase:
        """Register an empty case."""
        return self.register_case(f'Scenario: {name}', spec, lambda: None)


def test_register_case(scope: TestScope, spec: 'Spec') -> None:
    """Build and register a new case."""
    def body() -> None:
        pass

    config = TestCaseConfig(invocations=2)
    case = scope.register_case('adds', spec, body, config)

    assert isinstance(case, TestCase)
    assert case.name == 'adds'
    assert case.spec is spec
    assert case.test is body
    assert case.config is config
    assert scope.children == (case,)


def test_register_case_source_line(scope: TestScope, spec: 'Spec') -> None:
    """Report the line of the registering call."""
    line = currentframe().f_lineno + 1  # type: ignore[union-attr]
    case = scope.register_case('adds', spec, lambda: None)

    assert case.line == line


def test_register_container_source_line(scope: TestScope, spec: 'Spec', mocker: 'MockerFixture') -> None:
    """Report the line of a container declaration in duplicate errors."""
    scope.register_container('group', spec, TestScope, mocker.Mock())

    with pytest.raises(DuplicateNameError) as error:
        line = currentframe().f_lineno + 1  # type: ignore[union-attr]
        scope.register_container('group', spec, TestScope, mocker.Mock())

    assert error.value.context is not None
    assert error.value.context['line_num'] == line


def test_source_line_fallback(scope: TestScope, spec: 'Spec', mocker: 'MockerFixture') -> None:
    """Degrade to an unknown line when no frame is available."""
    mocker.patch('pytest_nest.scope.currentframe', return_value=None)

    case = scope.register_case('adds', spec, lambda: None)

    assert case.line == UNKNOWN_LINE


def test_source_line_skips_dsl_modules(spec: 'Spec') -> None:
    """Report the line of the user call behind a DSL helper."""
    scope = ShouldScope()

    line = currentframe().f_lineno + 1  # type: ignore[union-attr]
    case = scope.should('add numbers', spec)

    assert case.name == 'should add numbers'
    assert case.line == line


def test_source_line_points_at_unregistered_helpers(spec: 'Spec') -> None:
    """Report the helper line when its module is not declared internal."""
    scope = LeakyScope()

    line = currentframe().f_lineno + 1  # type: ignore[union-attr]
    case = scope.should('add numbers', spec)

    assert case.line != line
    assert case.line == getsourcelines(LeakyScope.should)[1] + 2


def test_register_default_config_from_spec(scope: TestScope, spec: 'Spec', mocker: 'MockerFixture') -> None:
    """Use the spec-wide default configuration when none is given."""
    default = TestCaseConfig(threads=3)
    mocker.patch.object(type(spec), 'default_config', default)

    case = scope.register_case('adds', spec, lambda: None)

    assert case.config is default


def test_register_default_config(scope: TestScope) -> None:
    """Use a default configuration for specs without one."""
    case = scope.register_case('adds', object(), lambda: None)

    assert case.config == TestCaseConfig()


def test_register_case_requires_body(scope: TestScope, spec: 'Spec') -> None:
    """Reject new cases without a body."""
    with pytest.raises(TypeError, match=r"^Test case 'adds' requires a body$"):
        scope.register_case('adds', spec)  # type: ignore[call-overload]


def test_register_container_requires_block(scope: TestScope, spec: 'Spec') -> None:
    """Reject new containers without a block."""
    with pytest.raises(TypeError, match=r"^Test container 'group' requires a block$"):
        scope.register_container('group', spec)  # type: ignore[call-overload]


def test_register_prebuilt_nodes(scope: TestScope, spec: 'Spec') -> None:
    """Register pre-built cases and containers in declaration order."""
    case = TestCase('adds', spec, lambda: None, 3)
    container = TestContainer('group', spec, tuple)

    assert scope.register_container(container) is container
    assert scope.register_case(case) is case

    assert scope.children == (container, case)
    assert scope.names == ('group', 'adds')


def test_children_snapshot_is_immutable(scope: TestScope, spec: 'Spec') -> None:
    """Return a snapshot that does not change with later registrations."""
    scope.register_case('first', spec, lambda: None)
    children = scope.children

    scope.register_case('second', spec, lambda: None)

    assert isinstance(children, tuple)
    assert len(children) == 1
    assert len(scope.children) == 2


@pytest.mark.parametrize('first, second', (
    pytest.param('case', 'case', id='case and case'),
    pytest.param('case', 'container', id='case and container'),
    pytest.param('container', 'case', id='container and case'),
    pytest.param('container', 'container', id='container and container'),
))
def test_duplicate_names_rejected(scope: TestScope, spec: 'Spec', first: str, second: str) -> None:
    """Reject siblings sharing a display name, whatever their kind."""
    def register(kind: str) -> None:
        if kind == 'case':
            scope.register_case('same', spec, lambda: None)
        else:
            scope.register_container('same', spec, TestScope, lambda inner: None)

    register(first)
    before = scope.children

    with pytest.raises(DuplicateNameError, match=r"same name inside the same scope: 'same'") as error:
        register(second)

    assert error.value.name == 'same'
    assert scope.children == before


def test_duplicate_prebuilt_case_rejected(scope: TestScope, spec: 'Spec') -> None:
    """Reject a pre-built case colliding with an existing sibling."""
    scope.register_case('same', spec, lambda: None)

    with pytest.raises(DuplicateNameError) as error:
        scope.register_case(TestCase('same', spec, lambda: None, 42))

    assert error.value.context is not None
    assert error.value.context['line_num'] == 42
    assert error.value.siblings == ('same',)


def test_same_names_in_different_scopes(spec: 'Spec') -> None:
    """Allow the same display names in different scopes."""
    first, second = TestScope(), TestScope()

    for scope in (first, second):
        scope.register_case('case', spec, lambda: None)
        scope.register_container('group', spec, TestScope, lambda inner: None)

    assert first.names == second.names == ('case', 'group')


def test_duplicate_names_in_nested_scope(scope: TestScope, spec: 'Spec') -> None:
    """Raise for nested duplicates when the container is discovered."""
    def block(inner: TestScope) -> None:
        inner.register_case('same', spec, lambda: None)
        inner.register_case('same', spec, lambda: None)

    container = scope.register_container('group', spec, TestScope, block)

    with pytest.raises(DuplicateNameError) as error:
        container.discover()

    assert error.value.context is not None
    assert error.value.context['path'] == ('group',)


def test_container_block_receives_scope_subtype(scope: TestScope, spec: 'Spec') -> None:
    """Run the container block against a scope built by the factory."""
    received: list[TestScope] = []

    def block(inner: FeatureScope) -> None:
        received.append(inner)
        inner.scenario('login', spec)

    container = scope.register_container('Feature: auth', spec, FeatureScope, block)
    children = container.discover()

    assert len(received) == 1
    assert isinstance(received[0], FeatureScope)
    assert received[0].path == ('Feature: auth',)
    assert [child.name for child in children] == ['Scenario: login']


def test_container_default_scope_factory(spec: 'Spec') -> None:
    """Use the class of the registering scope when no factory is given."""
    received: list[TestScope] = []

    scope = FeatureScope()
    container = scope.register_container('group', spec, None, received.append)  # type: ignore[call-overload]
    container.discover()

    assert type(received[0]) is FeatureScope


def test_many_siblings_keep_unique_names(scope: TestScope, spec: 'Spec') -> None:
    """Register a large generated scope and still reject a duplicate."""
    count = 20000

    for index in range(count):
        scope.register_case(f'case {index}', spec, lambda: None)

    with pytest.raises(DuplicateNameError, match=r"'case 12345'"):
        scope.register_case('case 12345', spec, lambda: None)

    with pytest.raises(DuplicateNameError):
        scope.register_container('case 0', spec, TestScope, lambda inner: None)

    assert len(scope.children) == count
    assert scope.names[-1] == f'case {count - 1}'

    scope.register_container('group', spec, TestScope, lambda inner: None)

    assert len(scope.children) == count + 1
