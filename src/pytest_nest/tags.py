"""Tags used to classify test cases.

A tag is an opaque label. Two tags are the same tag when their string
forms are equal, regardless of the concrete tag class, so that tags
declared in code can be matched against identifiers read from the
environment.
"""

from typing import Any

from pydantic import Field, model_validator

from pytest_nest.models import SchemaModel


class Tag(SchemaModel):
    """Classification label attached to a test case.

    Tags may be created directly::

        slow = Tag('slow')

    or declared as subclasses, in which case the class name is used::

        class Database(Tag):
            pass
    """

    name: str = Field(
        min_length=1,
        title='Tag identifier',
        description='Identifier compared against tag filters.',
    )

    def __init__(self, name: str | None = None, **data: Any) -> None:  # noqa: ANN401
        """Initialize a tag with an optional positional name."""
        if name is not None:
            data['name'] = name

        super().__init__(**data)

    @model_validator(mode='before')
    @classmethod
    def default_name(cls, data: Any) -> Any:  # noqa: ANN401
        """Use the class name for subclass tags declared without a name."""
        if isinstance(data, str):
            return {'name': data}

        if isinstance(data, dict) and data.get('name') is None:
            return {**data, 'name': cls.__name__}

        return data

    def __str__(self) -> str:
        """String representation used for identity and filtering."""
        return self.name

    def __repr__(self) -> str:
        """Debug representation."""
        return f'{type(self).__name__}({self.name!r})'

    def __eq__(self, other: object) -> bool:
        """Compare tags by their string form."""
        if isinstance(other, Tag):
            return str(self) == str(other)

        return NotImplemented

    def __hash__(self) -> int:
        """Hash consistent with string-form equality."""
        return hash(str(self))
