"""
Optional: a container for a single value that may be absent.

Used as the return type of every operation that can legitimately have
no result (head of an empty facade, find without match, sum of nothing).
"""

from __future__ import annotations

from typing import Any, Callable

from arrayfacade.errors import EmptyOptionalError


_ABSENT = object()


class Optional:
    """
    Holds either exactly one value or nothing.

    Note that a present value may itself be None (Optional.of(None)).
    Use of_nullable() to treat None as absent.

    Examples:
        Optional.of(4711).get() == 4711
        Optional.empty().or_else(0) == 0
    """

    __slots__ = ("_value",)

    def __init__(self, value: Any = _ABSENT):
        self._value = value

    @classmethod
    def of(cls, value: Any) -> Optional:
        return cls(value)

    @classmethod
    def of_nullable(cls, value: Any) -> Optional:
        return cls() if value is None else cls(value)

    @classmethod
    def empty(cls) -> Optional:
        return cls()

    def is_present(self) -> bool:
        return self._value is not _ABSENT

    def is_empty(self) -> bool:
        return self._value is _ABSENT

    def get(self) -> Any:
        """
        Return the held value.

        Raises:
            EmptyOptionalError: If no value is present
        """
        if self._value is _ABSENT:
            raise EmptyOptionalError("No value present")
        return self._value

    def or_else(self, default: Any) -> Any:
        return default if self._value is _ABSENT else self._value

    def map(self, fn: Callable[[Any], Any]) -> Optional:
        if self._value is _ABSENT:
            return self
        return Optional.of(fn(self._value))

    def __bool__(self) -> bool:
        return self.is_present()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Optional):
            return NotImplemented
        return self._value is other._value or self._value == other._value

    __hash__ = None

    def __repr__(self) -> str:
        if self._value is _ABSENT:
            return "Optional.empty()"
        return f"Optional.of({self._value!r})"
