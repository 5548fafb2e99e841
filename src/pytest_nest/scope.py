"""Registration scopes used while declarative blocks execute.

A scope collects the children declared by one block: the root block
of a spec or the body of a container. DSL styles extend `TestScope`
and use the subclass as the receiver of their blocks, adding their
own vocabulary on top of the registration methods defined here.
"""

from inspect import currentframe
from logging import getLogger
from typing import TYPE_CHECKING, Any, ClassVar, TypeVar, overload

from pytest_nest.case import TestCase
from pytest_nest.config import TestCaseConfig
from pytest_nest.container import TestContainer
from pytest_nest.errors import DuplicateNameError, ErrorContext

if TYPE_CHECKING:
    from collections.abc import Callable

if TYPE_CHECKING:
    from pytest_nest.container import TestNode

logger = getLogger(__name__)

T = TypeVar('T', bound='TestScope')

#: Line reported when no declaration frame can be located.
UNKNOWN_LINE = 0


class TestScope:
    """Builder accumulating the children of one declarative block.

    Display names must be unique among the children of a scope; the
    same name may be reused freely in other scopes.

    Attributes:
        internal_modules: Module prefixes whose frames are skipped when
            looking up the source line of a declaration. DSL styles add
            their own modules so that the reported line points at the
            user's block rather than at the DSL helper.
        path: Names of the containers enclosing this scope.
    """

    __test__ = False

    internal_modules: ClassVar[tuple[str, ...]] = ('pytest_nest',)

    def __init__(self) -> None:
        """Initialize an empty scope."""
        self.path: tuple[str, ...] = ()
        self._children: list[TestNode] = []
        self._names: set[str] = set()

    @property
    def children(self) -> tuple['TestNode', ...]:
        """Children registered so far, in declaration order."""
        return tuple(self._children)

    @property
    def names(self) -> tuple[str, ...]:
        """Display names registered so far, in declaration order."""
        return tuple(child.name for child in self._children)

    @overload
    def register_case(self, case: TestCase, /) -> TestCase:
        ...  # pragma: no cover

    @overload
    def register_case(self, name: str, spec: Any,  # noqa: ANN401
                      test: 'Callable[[], object]',
                      config: TestCaseConfig | None = None) -> TestCase:
        ...  # pragma: no cover

    def register_case(self, case: TestCase | str, spec: Any = None,  # noqa: ANN401
                      test: 'Callable[[], object] | None' = None,
                      config: TestCaseConfig | None = None) -> TestCase:
        """Register a test case.

        Either registers a pre-built case, or builds a new one from a
        name, spec, body and optional configuration. When no
        configuration is given, the `default_config` of the spec is used
        if it has one.

        Args:
            case: A pre-built case or the display name of a new one.
            spec: The spec declaring the new case.
            test: Zero-argument body of the new case.
            config: Optional configuration of the new case.

        Returns:
            The registered test case.

        Raises:
            DuplicateNameError: If the name is already used in this scope.
            TypeError: If a new case is requested without a body.
        """
        if isinstance(case, TestCase):
            self._add(case, case.line)
            return case

        if test is None:
            raise TypeError(f'Test case {case!r} requires a body')

        if config is None:
            config = getattr(spec, 'default_config', None)
        if config is None:
            config = TestCaseConfig()

        instance = TestCase(case, spec, test, self.find_line(), config)
        self._add(instance, instance.line)

        return instance

    @overload
    def register_container(self, container: TestContainer, /) -> TestContainer:
        ...  # pragma: no cover

    @overload
    def register_container(self, name: str, spec: Any,  # noqa: ANN401
                           scope_factory: 'Callable[[], T]',
                           init: 'Callable[[T], object]') -> TestContainer:
        ...  # pragma: no cover

    def register_container(self, container: TestContainer | str, spec: Any = None,  # noqa: ANN401
                           scope_factory: 'Callable[[], TestScope] | None' = None,
                           init: 'Callable[[Any], object] | None' = None) -> TestContainer:
        """Register a test container.

        Either registers a pre-built container, or declares a new one
        whose discovery creates a scope with `scope_factory`, runs `init`
        against it and returns the children it registered. The block is
        not executed here.

        Args:
            container: A pre-built container or the display name of a new one.
            spec: The spec declaring the new container.
            scope_factory: Callable creating the scope for the block;
                defaults to the class of this scope.
            init: Declarative block of the new container.

        Returns:
            The registered container.

        Raises:
            DuplicateNameError: If the name is already used in this scope.
            TypeError: If a new container is requested without a block.
        """
        if isinstance(container, TestContainer):
            self._add(container, self.find_line())
            return container

        if init is None:
            raise TypeError(f'Test container {container!r} requires a block')

        factory = scope_factory or type(self)
        name = container
        path = (*self.path, name)

        def discovery() -> tuple['TestNode', ...]:
            scope = factory()
            scope.path = path
            init(scope)
            return scope.children

        instance = TestContainer(name, spec, discovery)
        self._add(instance, self.find_line())

        return instance

    def find_line(self) -> int:
        """Locate the source line of the declaration being registered.

        Walks the call stack outwards and returns the line of the first
        frame that does not belong to an internal module. The result is
        best effort: rewritten or optimized call stacks may yield an
        approximate line, and `0` is returned when nothing is found.

        Returns:
            Line number of the declaration, or `0`.
        """
        frame = currentframe()
        try:
            while frame is not None:
                if not self._is_internal(frame.f_globals.get('__name__', '')):
                    return frame.f_lineno
                frame = frame.f_back
        finally:
            del frame

        return UNKNOWN_LINE

    def _is_internal(self, module: str) -> bool:
        """Check whether a module belongs to the registration machinery."""
        return any(
            module == prefix or module.startswith(f'{prefix}.')
            for prefix in self.internal_modules
        )

    def _add(self, child: 'TestNode', line: int) -> None:
        """Append a child, enforcing unique display names."""
        if child.name in self._names:
            spec = getattr(child, 'spec', None)
            raise DuplicateNameError(
                child.name,
                siblings=self.names,
                context=ErrorContext(
                    filename=getattr(spec, 'filename', None),
                    line_num=line,
                    path=self.path,
                ),
            )

        logger.debug('Registered %s %r under %r', type(child).__name__, child.name, self.path)
        self._children.append(child)
        self._names.add(child.name)
