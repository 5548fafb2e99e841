"""Core exception hierarchy.

This module defines base error and warning types used across the library
to report registration conflicts, lifecycle violations and repeated
discovery in a structured and extensible way.
"""

from os import linesep
from typing import Any, TypedDict

from yaml import dump

SNIPPET_ELLIPSIS = f' ...{linesep}'
SNIPPET_INDENT = 2

FORMAT_FILENAME = '<unknown source>'
FORMAT_INDENT = 4


class ErrorContext(TypedDict, total=False):
    """Container describing contextual information for error formatting.

    All fields are optional; the formatter adapts output based on
    provided values.
    """

    #: Name of the source file where the error occurred.
    filename: str | None

    #: Line number in the source file (1-based, as reported by frames).
    line_num: int | None

    #: Names of the containers enclosing the failing element.
    path: tuple[str, ...] | None

    #: Plain description of the failing element.
    element: dict[str, Any] | None


class ErrorFormatter:
    """Utility class for formatting tree-related errors.

    This formatter produces human-readable error messages with optional
    source location and a YAML snippet describing the failing element.
    """

    @classmethod
    def format(cls, message: str, context: ErrorContext | None = None) -> str:
        """Format an error message using contextual information.

        Args:
            message: Base human-readable error message.
            context: Optional error context with location and data.

        Returns:
            A fully formatted error message suitable for display.
        """
        if not context:
            return message

        message += linesep
        message += cls.get_location_string(context, indent=FORMAT_INDENT)
        message += cls.get_snippet_string(context, indent=FORMAT_INDENT * 2)

        return message

    @classmethod
    def get_location_string(cls, context: ErrorContext, *,
                            indent: str | int | None = None) -> str:
        """Format source and tree location information.

        Args:
            context: Error context containing location metadata.
            indent: Optional indentation (string or number of spaces).

        Returns:
            A formatted location string including filename, line
            and scope path when available.
        """
        indent = cls._ensure_indent(indent)

        filename = context.get('filename')
        if not filename:
            filename = FORMAT_FILENAME

        message = f'{indent}in "{filename}"'
        if line_num := context.get('line_num'):
            message += f', line {line_num}'
        message += linesep

        if path := context.get('path'):
            message += f'{indent}under {" / ".join(path)}{linesep}'

        return message

    @classmethod
    def get_snippet_string(cls, context: ErrorContext, *,
                           indent: str | int | None = None) -> str:
        """Generate a formatted snippet illustrating the failing element.

        Args:
            context: Error context containing element data.
            indent: Optional indentation (string or number of spaces).

        Returns:
            A formatted multi-line snippet string, or an empty string
            if no element is available.
        """
        indent = cls._ensure_indent(indent)

        if not (element := context.get('element')):
            return ''

        snippet = f'{indent}{SNIPPET_ELLIPSIS}'
        snippet += cls._make_indent(dump(element, indent=SNIPPET_INDENT, sort_keys=False), indent)
        snippet += linesep

        return snippet

    @staticmethod
    def _make_indent(value: str, indent: str) -> str:
        """Apply indentation to a multi-line string.

        Empty or whitespace-only lines are omitted.

        Args:
            value: Original multi-line string.
            indent: Indentation prefix.

        Returns:
            Indented string.
        """
        if not indent:
            return value

        return linesep.join(
            f'{indent}{line}'
            for line in value.splitlines()
            if line.strip()
        )

    @staticmethod
    def _ensure_indent(indent: str | int | None = None) -> str:
        """Normalize indentation input.

        Args:
            indent: Indentation as string or number of spaces.

        Returns:
            A string consisting of spaces or the provided string.
        """
        if isinstance(indent, int) and indent > 0:
            return ' ' * indent

        if isinstance(indent, str):
            return indent

        return ''


class RediscoveryWarning(UserWarning):
    """Warning emitted when a container is discovered more than once.

    Discovery re-runs the declarative block, so side effects performed
    by the block happen again. The runner is expected to discover each
    container at most once per run.
    """


class NestError(Exception, ErrorFormatter):
    """Base exception for all pytest-nest errors.

    All custom exceptions raised by the library inherit from this class
    to allow unified error handling by callers.
    """

    def __init__(self, message: str, *,
                 context: ErrorContext | None = None) -> None:
        """Initialize an error.

        Args:
            message: Human-readable error description.
            context: Error context containing optional location data.
        """
        self.message = message
        self.context = context

        super().__init__(message)

    def __str__(self) -> str:
        """String representation."""
        return self.format(self.message, self.context)


class DuplicateNameError(NestError):
    """Error raised when two siblings in one scope share a display name.

    The error is raised at registration time; the offending child is
    not added to the scope.
    """

    def __init__(self, name: str, *,
                 siblings: tuple[str, ...] = (),
                 context: ErrorContext | None = None) -> None:
        """Initialize a duplicate name error.

        Args:
            name: The display name that is already registered.
            siblings: Names registered in the scope so far.
            context: Error context containing optional location data.
        """
        self.name = name
        self.siblings = siblings

        if context is not None and siblings:
            context = ErrorContext({
                **context,
                'element': {'name': name, 'siblings': list(siblings)},
            })

        super().__init__(
            f'Cannot add two tests with the same name inside the same scope: {name!r}',
            context=context,
        )


class FrozenTestCaseError(NestError):
    """Error raised when a frozen test case is reconfigured.

    A test case is frozen when it is handed over for execution; from
    that point its configuration is an immutable snapshot.
    """
