"""Discovery and configuration core for nested test specifications.

The `pytest_nest` package builds hierarchical trees of test containers
and test cases from declarative nested blocks, and integrates them with
pytest.

Key features:
- lazy discovery: container bodies run only when the container is
  discovered, never when it is declared;
- registration scopes enforcing unique names among siblings;
- incremental, order-independent test case configuration;
- tag-based activation driven by include and exclude filters.
"""

from .case import TestCase, TestCaseContext
from .config import ConfigPatch, TestCaseConfig, override
from .container import TestContainer
from .errors import DuplicateNameError, FrozenTestCaseError, NestError, RediscoveryWarning
from .scope import TestScope
from .settings import TagFilters
from .spec import Spec
from .tags import Tag

__all__ = (
    'ConfigPatch',
    'DuplicateNameError',
    'FrozenTestCaseError',
    'NestError',
    'RediscoveryWarning',
    'Spec',
    'Tag',
    'TagFilters',
    'TestCase',
    'TestCaseConfig',
    'TestCaseContext',
    'TestContainer',
    'TestScope',
    'override',
)
