"""
ArrayFacade: an ordered, mixed-key collection with a functional API.

Wraps an insertion-ordered dict whose keys are strings or integers and
offers lodash-style operators on top of it (map, filter, group_by,
sort_by, to_graph, ...).

KEY POLICY:
    - map, flat_map, filter (default), partition, uniq, sort_by, reverse,
      concat, chunk and the set operations always produce sequential keys
      0..n-1, whatever the keys of the source were.
    - map_values, filter(preserve_keys=True), union and group_by/key_by
      keep or derive meaningful keys.
    - slice keeps string keys and renumbers integer keys.

MUTATION:
    Every operator returns a new ArrayFacade. Only push(), pop(),
    item assignment/deletion and walk() change the receiver.

Iterating an ArrayFacade yields its values (like a list), so
    matching, rest = facade.partition(...)
works as expected. Use items() or keys() to see the keys.
"""

from __future__ import annotations

import json
import numbers
import random
import warnings
from collections.abc import Iterable, Mapping
from functools import cmp_to_key
from typing import Any, Callable, Dict, Iterator, List, Tuple

from arrayfacade import paths
from arrayfacade.errors import DuplicateKeyError, TypeMismatchError
from arrayfacade.optional import Optional
from arrayfacade.selectors import Selector, identity, to_iteratee, to_predicate


Key = Any  # str | int


def _check_key(key: Any) -> None:
    if isinstance(key, bool) or not isinstance(key, (str, int)):
        raise TypeMismatchError(f"Expected string or int as key but got {type(key).__name__}")


def _group_key(value: Any) -> Key:
    """Keys are strings or ints; anything else is converted with str()."""
    if isinstance(value, bool) or not isinstance(value, (str, int)):
        return str(value)
    return value


def _require_number(value: Any) -> Any:
    if isinstance(value, bool) or not isinstance(value, numbers.Number):
        raise TypeMismatchError(f"Expected numeric value but got {type(value).__name__}")
    return value


def _splice(value: Any) -> List | None:
    """Values to splice for a collection-like value, None for scalars."""
    if isinstance(value, ArrayFacade):
        return list(value._elements.values())
    if isinstance(value, Mapping):
        return list(value.values())
    if isinstance(value, (str, bytes, bytearray)):
        return None
    if isinstance(value, Iterable):
        return list(value)
    return None


def _values_of(collection: Any) -> List:
    values = _splice(collection)
    if values is None:
        raise TypeMismatchError(f"Expected collection but got {type(collection).__name__}")
    return values


def _items_of(collection: Any) -> List[Tuple[Key, Any]]:
    if isinstance(collection, ArrayFacade):
        return list(collection._elements.items())
    if isinstance(collection, Mapping):
        return list(collection.items())
    return list(enumerate(_values_of(collection)))


def _strict_equal(left: Any, right: Any) -> bool:
    """Deep equality that also requires identical types (1 != '1', 1 != True)."""
    if type(left) is not type(right):
        return False
    if isinstance(left, ArrayFacade):
        return left.equals(right)
    if isinstance(left, Mapping):
        if len(left) != len(right):
            return False
        return all(
            lk == rk and _strict_equal(lv, rv)
            for (lk, lv), (rk, rv) in zip(left.items(), right.items())
        )
    if isinstance(left, (list, tuple)):
        return len(left) == len(right) and all(_strict_equal(l, r) for l, r in zip(left, right))
    return left == right


def _compare(left: Tuple, right: Tuple) -> int:
    for l, r in zip(left, right):
        if l == r:
            continue
        if l > r:
            return 1
        if l < r:
            return -1
    return 0


class ArrayFacade:
    """
    Ordered key -> value collection with a functional, lodash-like API.

    Construct with ArrayFacade.of(), of_element() or of_empty().

    Selectors:
        Iteratees accept a callable (value[, key]) or a dotted path string.
        Predicates additionally accept a partial-match mapping:
            facade.filter({"type.id": 3})
    """

    __slots__ = ("_elements",)

    def __init__(self, elements: Dict[Key, Any] | None = None):
        self._elements: Dict[Key, Any] = {} if elements is None else elements

    # -- Construction ---------------------------------------------------

    @classmethod
    def of(cls, collection: Any) -> ArrayFacade:
        """
        Wrap a list, tuple, mapping, ArrayFacade or other iterable.

        The facade gets its own copy of the top-level storage.

        Raises:
            TypeMismatchError: For scalars, strings or invalid mapping keys
        """
        if isinstance(collection, ArrayFacade):
            return cls(dict(collection._elements))
        if isinstance(collection, Mapping):
            for key in collection:
                _check_key(key)
            return cls(dict(collection))
        if isinstance(collection, (set, frozenset)):
            warnings.warn("Wrapping an unordered set; element order is arbitrary", UserWarning)
            return cls._from_values(collection)
        if isinstance(collection, (str, bytes, bytearray)) or not isinstance(collection, Iterable):
            raise TypeMismatchError(
                f"Expected list, mapping or ArrayFacade but got {type(collection).__name__}"
            )
        return cls._from_values(collection)

    @classmethod
    def of_element(cls, element: Any) -> ArrayFacade:
        return cls({0: element})

    @classmethod
    def of_empty(cls) -> ArrayFacade:
        return cls({})

    @classmethod
    def _from_values(cls, values: Iterable) -> ArrayFacade:
        return cls(dict(enumerate(values)))

    identity = staticmethod(identity)

    # -- Collection protocol --------------------------------------------

    def __getitem__(self, key: Key) -> Any:
        _check_key(key)
        return self._elements[key]

    def __setitem__(self, key: Key, value: Any) -> None:
        _check_key(key)
        self._elements[key] = value

    def __delitem__(self, key: Key) -> None:
        _check_key(key)
        del self._elements[key]

    def __len__(self) -> int:
        return len(self._elements)

    def __iter__(self) -> Iterator[Any]:
        return iter(self._elements.values())

    def __contains__(self, value: Any) -> bool:
        return self.includes(value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ArrayFacade):
            return NotImplemented
        return self.equals(other)

    __hash__ = None

    def __repr__(self) -> str:
        return f"ArrayFacade({self._elements!r})"

    def __str__(self) -> str:
        return json.dumps(self.to_plain(), indent=4, default=str)

    def count(self) -> int:
        return len(self._elements)

    def is_empty(self) -> bool:
        return not self._elements

    def contains_key(self, key: Key) -> bool:
        _check_key(key)
        return key in self._elements

    def is_set(self, key: Key) -> bool:
        """Whether key exists and its value is not None."""
        return self.contains_key(key) and self._elements[key] is not None

    def get(self, key: Key) -> Optional:
        if self.contains_key(key):
            return Optional.of(self._elements[key])
        return Optional.empty()

    def items(self) -> List[Tuple[Key, Any]]:
        return list(self._elements.items())

    def keys(self) -> ArrayFacade:
        return ArrayFacade._from_values(self._elements.keys())

    def values(self) -> ArrayFacade:
        return ArrayFacade._from_values(self._elements.values())

    def includes(self, value: Any) -> bool:
        return value in self._elements.values()

    def index_of(self, value: Any) -> Optional:
        for position, element in enumerate(self._elements.values()):
            if element == value:
                return Optional.of(position)
        return Optional.empty()

    def equals(self, other: ArrayFacade) -> bool:
        """Same keys in the same order, values strictly (type-aware) equal."""
        if not isinstance(other, ArrayFacade):
            return False
        return _strict_equal(self._elements, other._elements)

    def to_dict(self) -> Dict[Key, Any]:
        return dict(self._elements)

    def to_list(self) -> List[Any]:
        return list(self._elements.values())

    def to_plain(self) -> Any:
        """
        Nested plain structure for generic serializers.

        Facades with sequential keys become lists, others dicts.
        Nested facades, mappings and lists are converted recursively.
        """
        return plain_value(self)

    # Gettable capability used by the path resolver

    def has_key(self, key: Any) -> bool:
        return isinstance(key, (str, int)) and not isinstance(key, bool) and key in self._elements

    def get_key(self, key: Any) -> Any:
        return self._elements[key]

    def available_keys(self) -> Iterable:
        return self._elements.keys()

    def is_sequential(self) -> bool:
        return all(key == position for position, key in enumerate(self._elements))

    # -- Mutation ---------------------------------------------------------

    def push(self, element: Any) -> None:
        """Append under the next integer key (largest int key + 1, or 0)."""
        int_keys = [k for k in self._elements if isinstance(k, int)]
        self._elements[max(int_keys) + 1 if int_keys else 0] = element

    def pop(self) -> Optional:
        if not self._elements:
            return Optional.empty()
        _, value = self._elements.popitem()
        return Optional.of(value)

    def walk(self, callback: Callable) -> ArrayFacade:
        """
        Visit every (value, key) IN PLACE.

        A non-None return value of callback replaces the value under that
        key. Nested mutable values may also be changed directly.
        Unlike the other operators this mutates and returns the receiver.
        """
        if not callable(callback):
            raise TypeMismatchError(f"Expected callable but got {type(callback).__name__}")
        fn = to_iteratee(callback)
        for key in list(self._elements):
            result = fn(self._elements[key], key)
            if result is not None:
                self._elements[key] = result
        return self

    # -- Mapping operators --------------------------------------------------

    def map(self, iteratee: Selector) -> ArrayFacade:
        """Apply iteratee to (value, key); result has sequential keys."""
        fn = to_iteratee(iteratee)
        return ArrayFacade._from_values(fn(v, k) for k, v in self._elements.items())

    def map_values(self, iteratee: Selector) -> ArrayFacade:
        """Apply iteratee to (value, key); keys are preserved exactly."""
        fn = to_iteratee(iteratee)
        return ArrayFacade({k: fn(v, k) for k, v in self._elements.items()})

    def flat_map(self, iteratee: Selector | None = None) -> ArrayFacade:
        """
        Map and flatten one level.

        Collections returned by iteratee are spliced in order, other
        non-None results are appended, None contributes nothing.
        Strings count as scalars.
        """
        fn = to_iteratee(iteratee)
        flattened: List[Any] = []
        for key, value in self._elements.items():
            result = fn(value, key)
            spliced = _splice(result)
            if spliced is not None:
                flattened.extend(spliced)
            elif result is not None:
                flattened.append(result)
        return ArrayFacade._from_values(flattened)

    # -- Selection ------------------------------------------------------------

    def filter(self, predicate: Selector, preserve_keys: bool = False) -> ArrayFacade:
        fn = to_predicate(predicate)
        kept = [(k, v) for k, v in self._elements.items() if fn(v, k)]
        if preserve_keys:
            return ArrayFacade(dict(kept))
        return ArrayFacade._from_values(v for _, v in kept)

    def partition(self, predicate: Selector) -> ArrayFacade:
        """Return [matching, non_matching], each in original relative order."""
        fn = to_predicate(predicate)
        positive: List[Any] = []
        negative: List[Any] = []
        for key, value in self._elements.items():
            (positive if fn(value, key) else negative).append(value)
        return ArrayFacade._from_values(
            [ArrayFacade._from_values(positive), ArrayFacade._from_values(negative)]
        )

    def find(self, predicate: Selector) -> Optional:
        fn = to_predicate(predicate)
        for key, value in self._elements.items():
            if fn(value, key):
                return Optional.of(value)
        return Optional.empty()

    def find_by_key(self, predicate: Selector) -> Optional:
        """Return the first value whose key satisfies predicate(key[, value])."""
        fn = to_predicate(predicate)
        for key, value in self._elements.items():
            if fn(key, value):
                return Optional.of(value)
        return Optional.empty()

    def some(self, predicate: Selector) -> bool:
        fn = to_predicate(predicate)
        return any(fn(v, k) for k, v in self._elements.items())

    def every(self, predicate: Selector) -> bool:
        fn = to_predicate(predicate)
        return all(fn(v, k) for k, v in self._elements.items())

    def head(self) -> Optional:
        """The element under key 0, if any."""
        return self.get(0)

    def get_random(self) -> Optional:
        if not self._elements:
            return Optional.empty()
        return Optional.of(random.choice(list(self._elements.values())))

    def get_random_list(self, count: int) -> ArrayFacade:
        """Up to count elements drawn at distinct positions."""
        values = list(self._elements.values())
        if len(values) <= count:
            return ArrayFacade._from_values(values)
        return ArrayFacade._from_values(random.sample(values, count))

    def contains_path(self, path: str) -> bool:
        return paths.contains_path(self, path)

    # -- Grouping -------------------------------------------------------------

    def group_by(self, iteratee: Selector) -> ArrayFacade:
        """
        Bucket elements by iteratee result.

        Buckets appear in first-encounter order and are themselves
        facades holding elements in original relative order.
        Results that are not str or int become str() keys, so True and
        False group under "True" and "False" and None under "None".
        """
        fn = to_iteratee(iteratee)
        buckets: Dict[Key, List[Any]] = {}
        for key, value in self._elements.items():
            buckets.setdefault(_group_key(fn(value, key)), []).append(value)
        return ArrayFacade({k: ArrayFacade._from_values(v) for k, v in buckets.items()})

    def key_by(self, iteratee: Selector, check_unique: bool = False) -> ArrayFacade:
        """
        Map key -> last element producing that key.

        Raises:
            DuplicateKeyError: If check_unique is set and a key repeats
        """
        fn = to_iteratee(iteratee)
        result: Dict[Key, Any] = {}
        for key, value in self._elements.items():
            group = _group_key(fn(value, key))
            if check_unique and group in result:
                raise DuplicateKeyError(group)
            result[group] = value
        return ArrayFacade(result)

    def group_by_object(
        self,
        key_object_path: str,
        key_object_id_field: str,
        value_field: str,
        remove_key_from_values: bool = True,
    ) -> ArrayFacade:
        """See arrayfacade.graph.group_by_object()."""
        from arrayfacade.graph import group_by_object

        return group_by_object(
            self, key_object_path, key_object_id_field, value_field, remove_key_from_values
        )

    def to_graph(
        self, id_key: str = "id", parent_path: str = "parent", children_key: str = "children"
    ) -> ArrayFacade:
        """See arrayfacade.graph.to_graph()."""
        from arrayfacade.graph import to_graph

        return to_graph(self, id_key, parent_path, children_key)

    # -- Ordering -------------------------------------------------------------

    def sort_by(self, *iteratees: Selector) -> ArrayFacade:
        """
        Stable multi-key sort.

        The first iteratee with a non-equal comparison decides; ties fall
        through to the next one. The receiver is not modified.

        Raises:
            TypeMismatchError: If resolved values cannot be ordered
        """
        fns = [to_iteratee(it) for it in iteratees] or [identity]
        decorated = [
            (tuple(fn(v, k) for fn in fns), v) for k, v in self._elements.items()
        ]
        try:
            decorated.sort(key=cmp_to_key(lambda l, r: _compare(l[0], r[0])))
        except TypeError as e:
            raise TypeMismatchError(f"Cannot compare sort values: {e}") from e
        return ArrayFacade._from_values(v for _, v in decorated)

    def reverse(self) -> ArrayFacade:
        """Reverse order; keys are renumbered 0..n-1."""
        return ArrayFacade._from_values(reversed(list(self._elements.values())))

    # -- Uniqueness and set operations ------------------------------------------

    def uniq(self) -> ArrayFacade:
        unique: List[Any] = []
        for value in self._elements.values():
            if value not in unique:
                unique.append(value)
        return ArrayFacade._from_values(unique)

    def uniq_by(self, iteratee: Selector) -> ArrayFacade:
        fn = to_iteratee(iteratee)
        seen: List[Any] = []
        unique: List[Any] = []
        for key, value in self._elements.items():
            criterion = fn(value, key)
            if criterion not in seen:
                seen.append(criterion)
                unique.append(value)
        return ArrayFacade._from_values(unique)

    def intersection(self, other: Any) -> ArrayFacade:
        others = _values_of(other)
        return ArrayFacade._from_values(v for v in self._elements.values() if v in others)

    def intersection_by(self, other: Any, iteratee: Selector) -> ArrayFacade:
        fn = to_iteratee(iteratee)
        criteria = [fn(v, k) for k, v in _items_of(other)]
        return ArrayFacade._from_values(
            v for k, v in self._elements.items() if fn(v, k) in criteria
        )

    def difference(self, other: Any) -> ArrayFacade:
        others = _values_of(other)
        return ArrayFacade._from_values(v for v in self._elements.values() if v not in others)

    def difference_by(self, other: Any, iteratee: Selector) -> ArrayFacade:
        fn = to_iteratee(iteratee)
        criteria = [fn(v, k) for k, v in _items_of(other)]
        return ArrayFacade._from_values(
            v for k, v in self._elements.items() if fn(v, k) not in criteria
        )

    def difference_with(self, other: Any, comparator: Callable[[Any, Any], int]) -> ArrayFacade:
        """comparator(a, b) returns 0 when a and b are considered equal."""
        if not callable(comparator):
            raise TypeMismatchError(f"Expected callable but got {type(comparator).__name__}")
        others = _values_of(other)
        return ArrayFacade._from_values(
            v for v in self._elements.values() if all(comparator(v, o) != 0 for o in others)
        )

    # -- Aggregation ------------------------------------------------------------

    def sum(self) -> Optional:
        return self.sum_by(identity)

    def sum_by(self, iteratee: Selector) -> Optional:
        """
        Sum of iteratee results, empty Optional for an empty facade.

        Raises:
            TypeMismatchError: If a result is not numeric
        """
        fn = to_iteratee(iteratee)
        if not self._elements:
            return Optional.empty()
        total = 0
        for key, value in self._elements.items():
            total += _require_number(fn(value, key))
        return Optional.of(total)

    def max(self) -> Optional:
        if not self._elements:
            return Optional.empty()
        try:
            return Optional.of(max(self._elements.values()))
        except TypeError as e:
            raise TypeMismatchError(f"Cannot compare values: {e}") from e

    def min_by(self, iteratee: Selector) -> Optional:
        """
        Element with the smallest iteratee result (first one on ties).

        Raises:
            TypeMismatchError: If a result is not numeric
        """
        fn = to_iteratee(iteratee)
        best = Optional.empty()
        best_value = None
        for key, value in self._elements.items():
            criterion = _require_number(fn(value, key))
            if best.is_empty() or criterion < best_value:
                best = Optional.of(value)
                best_value = criterion
        return best

    # -- Slicing and combining ------------------------------------------------

    def slice(self, offset: int, length: int | None = None) -> ArrayFacade:
        """
        Extract a section.

        A negative offset starts that far from the end. A positive length
        takes up to that many elements, a negative one stops that far from
        the end, None takes everything up to the end.
        String keys are kept, integer keys are renumbered.
        """
        items = list(self._elements.items())
        n = len(items)
        start = max(n + offset, 0) if offset < 0 else min(offset, n)
        if length is None:
            end = n
        elif length < 0:
            end = max(n + length, start)
        else:
            end = min(start + length, n)
        return ArrayFacade(_renumber(items[start:end]))

    def chunk(self, size: int) -> ArrayFacade:
        """
        Split into consecutive facades of at most size elements.

        Raises:
            ValueError: If size is not positive
        """
        if size <= 0:
            raise ValueError(f"Chunk size must be positive, got {size}")
        values = list(self._elements.values())
        return ArrayFacade._from_values(
            ArrayFacade._from_values(values[i:i + size]) for i in range(0, len(values), size)
        )

    def concat(self, *values: Any) -> ArrayFacade:
        """
        Append values in argument order.

        Facades, lists and other iterables are spliced. Mappings are records
        and strings are scalars; both are appended as single elements.
        """
        result = list(self._elements.values())
        for value in values:
            spliced = None if isinstance(value, Mapping) else _splice(value)
            if spliced is None:
                result.append(value)
            else:
                result.extend(spliced)
        return ArrayFacade._from_values(result)

    def union(self, other: Any) -> ArrayFacade:
        """Key-preserving merge; the receiver's keys win on collision."""
        result = dict(self._elements)
        for key, value in _items_of(other):
            _check_key(key)
            result.setdefault(key, value)
        return ArrayFacade(result)

    def join(self, glue: str, last_glue: str | None = None) -> str:
        parts = [str(v) for v in self._elements.values()]
        if last_glue is None or len(parts) < 2:
            return glue.join(parts)
        return glue.join(parts[:-1]) + last_glue + parts[-1]


def _renumber(items: List[Tuple[Key, Any]]) -> Dict[Key, Any]:
    result: Dict[Key, Any] = {}
    next_index = 0
    for key, value in items:
        if isinstance(key, int):
            result[next_index] = value
            next_index += 1
        else:
            result[key] = value
    return result


def plain_value(value: Any) -> Any:
    if isinstance(value, ArrayFacade):
        if value.is_sequential():
            return [plain_value(v) for v in value._elements.values()]
        return {k: plain_value(v) for k, v in value._elements.items()}
    if isinstance(value, Mapping):
        return {k: plain_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [plain_value(v) for v in value]
    return value
