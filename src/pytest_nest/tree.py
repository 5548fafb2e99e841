"""Depth-first traversal and reference execution of discovered trees.

`walk` materializes a tree one level at a time, discovering every
container exactly once. `run_test` executes a single case according to
its frozen configuration: the body runs once per invocation, wrapped by
the interceptor chain.

Containers are never pruned by tag filters: every container is
discovered, and activation is decided per test case.
"""

from functools import partial
from logging import getLogger
from typing import TYPE_CHECKING

from pytest_nest.case import TestCase, TestCaseContext
from pytest_nest.container import TestContainer

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Iterator, Sequence

if TYPE_CHECKING:
    from pytest_nest.config import Interceptor
    from pytest_nest.container import TestNode

logger = getLogger(__name__)


def walk(nodes: 'Iterable[TestNode]',
         path: tuple[str, ...] = ()) -> 'Iterator[tuple[tuple[str, ...], TestCase]]':
    """Traverse a tree depth first, yielding its test cases.

    Each container is discovered exactly once, when the traversal
    reaches it.

    Args:
        nodes: Top-level nodes, for example the result of `Spec.discover`.
        path: Names of the containers enclosing `nodes`.

    Yields:
        Pairs of the enclosing container names and a test case.
    """
    for node in nodes:
        if isinstance(node, TestContainer):
            yield from walk(node.discover(), (*path, node.name))
        else:
            yield path, node


def chain(interceptors: 'Sequence[Interceptor]', context: TestCaseContext,
          body: 'Callable[[], None]') -> 'Callable[[], None]':
    """Wrap a body with interceptors, the first one outermost.

    Args:
        interceptors: Interceptors in declaration order.
        context: Run context passed to every interceptor.
        body: The underlying test body.

    Returns:
        A zero-argument callable running the whole chain.
    """
    call = body
    for interceptor in reversed(interceptors):
        call = partial(interceptor, context, call)

    return call


def run_test(case: TestCase) -> None:
    """Execute a test case according to its configuration.

    The case is frozen first; its body then runs `invocations` times,
    each time through the interceptor chain. Thread count and timeout
    are left to the surrounding runner.

    Args:
        case: Test case to execute.

    Raises:
        Any exception raised by the body or an interceptor.
    """
    config = case.freeze()
    context = TestCaseContext(spec=case.spec, test_case=case)

    def body() -> None:
        case.test()

    call = chain(config.interceptors, context, body)
    for invocation in range(config.invocations):
        logger.debug('Running %r, invocation %d of %d', case.name, invocation + 1, config.invocations)
        call()
