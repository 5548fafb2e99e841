"""Process-wide tag filter settings.

Tag filters are read from the environment:

- `NEST_TAGS_INCLUDE`: only cases carrying one of these tags run;
- `NEST_TAGS_EXCLUDE`: cases carrying one of these tags never run.

Both variables hold comma-separated identifiers. Entries are trimmed
and empty entries are dropped, so an absent, empty or blank variable
means "no filter" for that side.
"""

from collections.abc import Iterable
from typing import Annotated, Any

from pydantic import Field, field_validator
from pydantic_settings import NoDecode, SettingsConfigDict

from pytest_nest.models import SettingsModel

TAGS_SEPARATOR = ','
TAGS_ENV_PREFIX = 'NEST_TAGS_'


def parse_tags(raw: str | Iterable[str] | None) -> tuple[str, ...]:
    """Split and normalize a tag filter value.

    Args:
        raw: Comma-separated string, sequence of identifiers, or `None`.

    Returns:
        Ordered tuple of non-empty, whitespace-trimmed identifiers.
    """
    if raw is None:
        return ()

    if isinstance(raw, str):
        raw = raw.split(TAGS_SEPARATOR)

    return tuple(
        item
        for value in raw
        if (item := str(value).strip())
    )


class TagFilters(SettingsModel):
    """Include and exclude tag filters.

    Instances are cheap to build; activation checks build a fresh one
    for every evaluation so that environment changes apply immediately.
    """

    model_config = SettingsConfigDict(env_prefix=TAGS_ENV_PREFIX)

    include: Annotated[tuple[str, ...], NoDecode] = Field(
        default=(),
        title='Included tags',
        description='When not empty, only cases tagged with one of these run.',
    )

    exclude: Annotated[tuple[str, ...], NoDecode] = Field(
        default=(),
        title='Excluded tags',
        description='Cases tagged with one of these never run.',
    )

    @field_validator('include', 'exclude', mode='before')
    @classmethod
    def split_tags(cls, value: Any) -> tuple[str, ...]:  # noqa: ANN401
        """Accept comma-separated strings as well as sequences."""
        return parse_tags(value)
