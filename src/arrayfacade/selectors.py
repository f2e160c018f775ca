"""
Selector normalisation.

Operators accept a Selector wherever they need an iteratee or a predicate:

    Selector = Callable | str | Mapping

    - Callable: invoked with (value, key), or just (value) when it only
      takes a single positional argument
    - str: dotted path shorthand, resolved with property_of()
    - Mapping: partial-match shorthand (predicates only), see matches()

Each operator normalises its selector exactly once, at entry, into a
callable with the uniform signature fn(value, key).
"""

from __future__ import annotations

import inspect
from collections.abc import Mapping
from typing import Any, Callable, Union

from arrayfacade.errors import TypeMismatchError
from arrayfacade.paths import matches, property_of


Selector = Union[Callable[..., Any], str, Mapping]

Iteratee = Callable[[Any, Any], Any]


def identity(value: Any, *ignored: Any) -> Any:
    return value


def _accepts_key(fn: Callable) -> bool:
    """Whether fn can be called with two positional arguments."""
    if isinstance(fn, type):
        return False
    try:
        signature = inspect.signature(fn)
    except (TypeError, ValueError):
        # builtins without a signature get the value only
        return False
    positional = 0
    for param in signature.parameters.values():
        if param.kind == inspect.Parameter.VAR_POSITIONAL:
            return True
        if param.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD):
            positional += 1
    return positional >= 2


def _adapt(fn: Callable) -> Iteratee:
    if _accepts_key(fn):
        return fn
    return lambda value, key=None: fn(value)


def _from_path(path: str) -> Iteratee:
    accessor = property_of(path)
    return lambda value, key=None: accessor(value)


def to_iteratee(selector: Selector | None) -> Iteratee:
    """
    Normalise an iteratee selector (callable or path string).

    Raises:
        TypeMismatchError: If selector is neither None, a string nor callable
    """
    if selector is None:
        return identity
    if isinstance(selector, str):
        return _from_path(selector)
    if callable(selector):
        return _adapt(selector)
    raise TypeMismatchError(f"Expected string or callable but got {type(selector).__name__}")


def to_predicate(selector: Selector) -> Iteratee:
    """
    Normalise a predicate selector (callable, path string or partial record).

    Raises:
        TypeMismatchError: If selector is none of the accepted kinds
    """
    if isinstance(selector, Mapping):
        predicate = matches(selector)
        return lambda value, key=None: predicate(value)
    if isinstance(selector, str):
        return _from_path(selector)
    if callable(selector):
        return _adapt(selector)
    raise TypeMismatchError(
        f"Expected mapping, string or callable but got {type(selector).__name__}"
    )
