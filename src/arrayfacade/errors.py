"""
Error types raised by ArrayFacade operations.

Every error derives from FacadeError and from the closest builtin exception,
so callers may catch either the library-specific or the generic type.

All errors are raised at the point of the illegal operation.
Nothing is retried internally.
"""

from typing import Iterable, List


class FacadeError(Exception):
    """Base class for all ArrayFacade errors."""
    pass


class TypeMismatchError(FacadeError, TypeError):
    """Raised when an argument or resolved value has an unexpected kind."""
    pass


class PathNotFoundError(FacadeError, LookupError):
    """
    Raised when a segment of a dotted path is absent.

    Properties:
        segment: The path segment that could not be resolved
        available: Keys/properties present at that level (for diagnostics)
    """

    def __init__(self, segment: str, available: Iterable = ()):
        self.segment = segment
        self.available = [str(k) for k in available]
        if self.available:
            message = f"Property {segment} not found, only have {', '.join(self.available)}"
        else:
            message = f"Property {segment} not found, value has no properties"
        super().__init__(message)


class DuplicateKeyError(FacadeError, ValueError):
    """Raised by key_by() with uniqueness enforcement when a key repeats."""

    def __init__(self, key):
        self.key = key
        super().__init__(f"Key is not unique: {key!r}")


class ReferentialIntegrityError(FacadeError, ValueError):
    """Raised by to_graph() when elements reference parents that are not part of the list."""

    def __init__(self, missing_ids: List):
        self.missing_ids = list(missing_ids)
        super().__init__(
            "Elements are referenced as parent but are not part of the list: "
            + ", ".join(str(i) for i in self.missing_ids)
        )


class CyclicGraphError(FacadeError, ValueError):
    """Raised by to_graph() when the parent references contain a cycle."""

    def __init__(self, ids: List):
        self.ids = list(ids)
        super().__init__("Cycle detected in parent references: " + ", ".join(str(i) for i in self.ids))


class EmptyOptionalError(FacadeError, LookupError):
    """Raised when get() is called on an empty Optional."""
    pass
