"""
ArrayFacade Package

Functional, lodash-style operations over an ordered, mixed-key collection.

LAYERS:
------------------------
    - paths / selectors: dotted path resolution and selector shorthands
    - facade: the ArrayFacade container and its operators
    - graph: hierarchies built from flat record lists
    - serialization: plain / JSON / YAML conversion

Every operator returns a new ArrayFacade.
Only push, pop, item assignment and walk mutate in place.
"""

from arrayfacade.errors import (
    CyclicGraphError,
    DuplicateKeyError,
    EmptyOptionalError,
    FacadeError,
    PathNotFoundError,
    ReferentialIntegrityError,
    TypeMismatchError,
)
from arrayfacade.facade import ArrayFacade
from arrayfacade.graph import analyze_graph, group_by_object, to_graph
from arrayfacade.optional import Optional
from arrayfacade.paths import contains_path, matches, property_of

__version__ = "0.1.0"

__all__ = [
    "ArrayFacade",
    "Optional",
    "to_graph",
    "group_by_object",
    "analyze_graph",
    "property_of",
    "contains_path",
    "matches",
    "FacadeError",
    "TypeMismatchError",
    "PathNotFoundError",
    "DuplicateKeyError",
    "ReferentialIntegrityError",
    "CyclicGraphError",
    "EmptyOptionalError",
]
