"""Tag activation policy.

Decides whether a test case is eligible to run given its tags and the
include/exclude tag filters. Exclusion always wins; an empty inclusion
filter accepts everything that is not excluded.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

if TYPE_CHECKING:
    from pytest_nest.settings import TagFilters
    from pytest_nest.tags import Tag


def is_active_by_tags(tags: 'Iterable[Tag | str]', filters: 'TagFilters') -> bool:
    """Evaluate the tag filters against a set of tags.

    Tags are compared by their string form.

    Args:
        tags: Tags of a test case.
        filters: Include and exclude filters.

    Returns:
        True if the tags are accepted by the filters.
    """
    names = {str(tag) for tag in tags}

    if names.intersection(filters.exclude):
        return False

    if not filters.include:
        return True

    return bool(names.intersection(filters.include))
