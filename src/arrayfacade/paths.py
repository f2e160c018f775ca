"""
Path resolution over heterogeneous nested structures.

A path is a dot-separated string such as "parent.type.id".
Resolution walks the segments against nested values, one level at a time.

Every value that can be walked exposes the Gettable capability:
    - has_key(key): does the key exist at this level?
    - get_key(key): the value stored under the key
    - available_keys(): all keys at this level (for error messages)

ArrayFacade implements Gettable directly. Mappings, sequences and plain
objects are wrapped once in an adapter by as_gettable(). Scalars are not
gettable; descending into one is a TypeMismatchError.

Segments that look like integers ("0", "-1") also match int keys and
sequence indices, so "rows.0.name" works on lists of records.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from typing import Any, Callable, Iterable, List, Protocol, runtime_checkable

from arrayfacade.errors import PathNotFoundError, TypeMismatchError


INT_SEGMENT_RE = re.compile(r"^-?\d+$", re.ASCII)

_SCALAR_TYPES = (str, bytes, bytearray, int, float, complex, bool, type(None))


@runtime_checkable
class Gettable(Protocol):
    """Anything that can answer key existence and key lookup."""

    def has_key(self, key: Any) -> bool: ...

    def get_key(self, key: Any) -> Any: ...

    def available_keys(self) -> Iterable: ...


class MappingAccess:
    """Gettable adapter for dicts and other mappings."""

    __slots__ = ("_mapping",)

    def __init__(self, mapping: Mapping):
        self._mapping = mapping

    def has_key(self, key: Any) -> bool:
        return key in self._mapping

    def get_key(self, key: Any) -> Any:
        return self._mapping[key]

    def available_keys(self) -> Iterable:
        return self._mapping.keys()


class SequenceAccess:
    """Gettable adapter for lists and tuples (integer keys only)."""

    __slots__ = ("_sequence",)

    def __init__(self, sequence: Sequence):
        self._sequence = sequence

    def has_key(self, key: Any) -> bool:
        if not isinstance(key, int) or isinstance(key, bool):
            return False
        return -len(self._sequence) <= key < len(self._sequence)

    def get_key(self, key: Any) -> Any:
        return self._sequence[key]

    def available_keys(self) -> Iterable:
        return range(len(self._sequence))


class AttributeAccess:
    """Gettable adapter for plain objects, dataclasses, named tuples and slotted classes."""

    __slots__ = ("_obj",)

    def __init__(self, obj: Any):
        self._obj = obj

    def has_key(self, key: Any) -> bool:
        if not isinstance(key, str) or key.startswith("_"):
            return False
        fields = getattr(type(self._obj), "_fields", None)
        if fields is not None:
            return key in fields
        return hasattr(self._obj, key)

    def get_key(self, key: Any) -> Any:
        return getattr(self._obj, key)

    def available_keys(self) -> Iterable:
        fields = getattr(type(self._obj), "_fields", None)
        if fields is not None:
            return list(fields)
        if hasattr(self._obj, "__dict__"):
            return [k for k in vars(self._obj) if not k.startswith("_")]
        slots = getattr(type(self._obj), "__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        return [s for s in slots if not s.startswith("_")]


def as_gettable(value: Any) -> Gettable | None:
    """Return a Gettable view of value, or None for scalars."""
    if isinstance(value, Gettable):
        return value
    if isinstance(value, Mapping):
        return MappingAccess(value)
    if isinstance(value, _SCALAR_TYPES):
        return None
    if hasattr(type(value), "_fields"):
        # named tuples are records, not sequences
        return AttributeAccess(value)
    if isinstance(value, Sequence):
        return SequenceAccess(value)
    if hasattr(value, "__dict__") or hasattr(type(value), "__slots__"):
        return AttributeAccess(value)
    return None


def split_path(path: str) -> List[str]:
    if not isinstance(path, str):
        raise TypeMismatchError(f"Expected path string but got {type(path).__name__}")
    return path.split(".")


def candidate_keys(segment: str) -> List[Any]:
    """Keys a segment may match: the string itself, plus its int value when numeric."""
    keys: List[Any] = [segment]
    if INT_SEGMENT_RE.match(segment):
        keys.append(int(segment))
    return keys


def _step(value: Any, segment: str) -> Any:
    """Descend one level, raising on failure."""
    gettable = as_gettable(value)
    if gettable is None:
        raise TypeMismatchError(
            f"Failed to access property {segment} of value of type {type(value).__name__}"
        )
    for key in candidate_keys(segment):
        if gettable.has_key(key):
            return gettable.get_key(key)
    raise PathNotFoundError(segment, gettable.available_keys())


def property_of(path: str) -> Callable[[Any], Any]:
    """
    Build an accessor for a dotted path.

    Example:
        property_of("a.b")({"a": {"b": 1}}) == 1

    The returned function raises:
        PathNotFoundError: A segment is absent (names segment and alternatives)
        TypeMismatchError: A scalar is reached before the path ends
    """
    segments = split_path(path)

    if len(segments) == 1:
        segment = segments[0]
        return lambda element: _step(element, segment)

    def resolve(element: Any) -> Any:
        value = element
        for segment in segments:
            value = _step(value, segment)
        return value

    return resolve


def resolve_path(element: Any, path: str) -> Any:
    return property_of(path)(element)


def contains_path(element: Any, path: str) -> bool:
    """Walk path like property_of() but return False instead of raising."""
    value = element
    for segment in split_path(path):
        gettable = as_gettable(value)
        if gettable is None:
            return False
        for key in candidate_keys(segment):
            if gettable.has_key(key):
                value = gettable.get_key(key)
                break
        else:
            return False
    return True


def matches(expected: Mapping) -> Callable[[Any], bool]:
    """
    Build a partial-match predicate.

    Each key of expected is a path into the candidate; each resolved value
    must equal the expected value structurally: nested ArrayFacades compare
    equal to the dicts and lists they hold. A missing path is a mismatch.
    """
    from arrayfacade.facade import plain_value

    expectations = [(str(path), property_of(str(path)), value) for path, value in expected.items()]

    def predicate(actual: Any) -> bool:
        for path, accessor, expected_value in expectations:
            if not contains_path(actual, path):
                return False
            if plain_value(accessor(actual)) != plain_value(expected_value):
                return False
        return True

    return predicate
