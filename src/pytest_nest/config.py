"""Test case configuration and its incremental refinement.

A `TestCaseConfig` is a total snapshot: every field always holds a
resolved value. Refinement is expressed with a `ConfigPatch` whose
fields are all optional; applying a patch produces a new configuration
in which present fields win and absent fields pass through unchanged.
"""

from collections.abc import Callable, Iterable
from datetime import timedelta
from typing import TYPE_CHECKING, Any, TypeAlias

from pydantic import Field, PositiveInt, field_validator

from pytest_nest.models import SchemaModel
from pytest_nest.tags import Tag

if TYPE_CHECKING:
    from typing import Self

#: An interceptor wraps the execution of a test body. It receives the run
#: context (a `TestCaseContext`) and a continuation that runs the underlying
#: body and any inner interceptors; not calling the continuation suppresses
#: the body.
Interceptor: TypeAlias = Callable[[Any, Callable[[], None]], None]


def _coerce_tags(value: Any) -> Any:  # noqa: ANN401
    """Accept plain strings wherever tags are expected."""
    if isinstance(value, (str, Tag)):
        return frozenset((value,))

    if isinstance(value, Iterable):
        return frozenset(value)

    return value


class TestCaseConfig(SchemaModel):
    """Configuration used when running a test case.

    The configuration is immutable; use `override` to derive a refined
    copy.
    """

    __test__ = False

    enabled: bool = Field(
        default=True,
        title='Enabled',
        description='Disabled test cases are never executed.',
    )

    invocations: PositiveInt = Field(
        default=1,
        title='Invocations',
        description='Number of times the test body is invoked.',
    )

    timeout: timedelta | None = Field(
        default=None,
        title='Timeout',
        description='Maximum duration of the test; `None` leaves it unspecified.',
    )

    threads: PositiveInt = Field(
        default=1,
        title='Threads',
        description='Number of threads the executor may use for invocations.',
    )

    tags: frozenset[Tag] = Field(
        default_factory=frozenset,
        title='Tags',
        description='Labels matched against the include and exclude tag filters.',
    )

    interceptors: tuple[Interceptor, ...] = Field(
        default=(),
        title='Interceptors',
        description='Callables wrapping the test body, outermost first.',
    )

    @field_validator('tags', mode='before')
    @classmethod
    def coerce_tags(cls, value: Any) -> Any:  # noqa: ANN401
        """Normalize a single tag, a string, or an iterable of them."""
        return _coerce_tags(value)

    def override(self, patch: 'ConfigPatch | None' = None, **fields: Any) -> 'Self':  # noqa: ANN401
        """Return a copy refined by a patch and/or explicit field values.

        Keyword fields are applied after the patch, so they win over it.
        Fields given as `None` are treated as absent.

        Args:
            patch: Optional partial configuration.
            **fields: Optional field values, as accepted by `ConfigPatch`.

        Returns:
            A new configuration with every field resolved.
        """
        if fields:
            patch = (patch or ConfigPatch()).merge(ConfigPatch(**fields))

        if patch is None:
            return self

        return type(self)(**{**dict(self), **patch.present()})


class ConfigPatch(SchemaModel):
    """Partial configuration used to refine a `TestCaseConfig`.

    Every field is optional; `None` means that the field is absent and
    the refined configuration keeps its current value.
    """

    enabled: bool | None = None
    invocations: PositiveInt | None = None
    timeout: timedelta | None = None
    threads: PositiveInt | None = None
    tags: frozenset[Tag] | None = None
    interceptors: tuple[Interceptor, ...] | None = None

    @field_validator('tags', mode='before')
    @classmethod
    def coerce_tags(cls, value: Any) -> Any:  # noqa: ANN401
        """Normalize a single tag, a string, or an iterable of them."""
        return _coerce_tags(value)

    def present(self) -> dict[str, Any]:
        """Return the fields that carry a value."""
        return {
            name: value
            for name, value in self
            if value is not None
        }

    def merge(self, other: 'ConfigPatch') -> 'Self':
        """Combine two patches; fields present in `other` win."""
        return type(self)(**{**self.present(), **other.present()})


def override(current: TestCaseConfig, patch: ConfigPatch) -> TestCaseConfig:
    """Refine a configuration with a patch.

    Each field of the result is taken from the patch when present there,
    otherwise from the current configuration.

    Args:
        current: Configuration to refine.
        patch: Partial configuration.

    Returns:
        A new, fully resolved configuration.
    """
    return current.override(patch)
