"""
Graph builder: turns flat record lists into hierarchies.

    - to_graph(): assemble a forest from parent references
    - group_by_object(): group records under an embedded key object
    - analyze_graph(): read-only diagnostics for a built forest

Records are mappings (dicts) or ArrayFacades. They are never modified;
every node of a result is a shallow copy of its source record.

to_graph() works on an explicit stack, so the depth of a hierarchy is
bounded by memory rather than by the interpreter's recursion limit.
Cycles fail fast with CyclicGraphError.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from arrayfacade.errors import CyclicGraphError, ReferentialIntegrityError, TypeMismatchError
from arrayfacade.facade import ArrayFacade
from arrayfacade.paths import candidate_keys, contains_path, property_of, resolve_path, split_path


_MISSING = object()


def _copy_record(record: Any) -> Any:
    if isinstance(record, ArrayFacade):
        return ArrayFacade.of(record)
    if isinstance(record, Mapping):
        return dict(record)
    raise TypeMismatchError(f"Expected mapping or ArrayFacade record but got {type(record).__name__}")


def _find_key(record: Any, segment: str) -> Any:
    """The actual key matching segment in record, or _MISSING."""
    for key in candidate_keys(segment):
        if isinstance(record, ArrayFacade):
            if record.has_key(key):
                return key
        elif key in record:
            return key
    return _MISSING


def _without_path(record: Any, segments: List[str]) -> Any:
    """Copy of record with the value at segments removed (copies along the path)."""
    copy = _copy_record(record)
    key = _find_key(copy, segments[0])
    if key is _MISSING:
        return copy
    if len(segments) == 1:
        del copy[key]
    elif isinstance(copy[key], (Mapping, ArrayFacade)):
        copy[key] = _without_path(copy[key], segments[1:])
    return copy


def _parent_id(record: Any, parent_path: str, id_key: str) -> Any:
    """Id of the referenced parent, None for roots (null or absent reference)."""
    if not contains_path(record, parent_path):
        return None
    parent = resolve_path(record, parent_path)
    if parent is None:
        return None
    return resolve_path(parent, id_key)


def to_graph(
    elements: Any,
    id_key: str = "id",
    parent_path: str = "parent",
    children_key: str = "children",
) -> ArrayFacade:
    """
    Assemble records into a forest using their parent references.

    Example:
        to_graph([
            {"id": 1, "parent": {"id": 2}},
            {"id": 2, "parent": None},
            {"id": 3, "parent": {"id": 1}},
        ])
        =
        [
            {"id": 2, "children": [
                {"id": 1, "children": [
                    {"id": 3, "children": []}
                ]}
            ]}
        ]

    Args:
        elements: Records (list, mapping or ArrayFacade of records)
        id_key: Path of a record's own (hashable) id, also applied to the parent object
        parent_path: Path of the parent reference (an object holding id_key)
        children_key: Key under which each node receives its children

    Returns:
        ArrayFacade of root nodes. Each node is a copy of its record without
        the parent reference, plus an ArrayFacade of children (possibly empty).

    Raises:
        ReferentialIntegrityError: A parent id is not among the records' ids
        CyclicGraphError: The parent references contain a cycle
    """
    records = ArrayFacade.of(elements).to_list()
    if not records:
        return ArrayFacade.of_empty()

    id_of = property_of(id_key)
    own_ids = [id_of(record) for record in records]
    parent_ids = [_parent_id(record, parent_path, id_key) for record in records]

    # Referential integrity before building anything
    known_ids = set(own_ids)
    missing: List[Any] = []
    for parent_id in parent_ids:
        if parent_id is not None and parent_id not in known_ids and parent_id not in missing:
            missing.append(parent_id)
    if missing:
        raise ReferentialIntegrityError(missing)

    children_by_parent: Dict[Any, List[int]] = {}
    for index, parent_id in enumerate(parent_ids):
        if parent_id is not None:
            children_by_parent.setdefault(parent_id, []).append(index)

    segments = split_path(parent_path)
    attached = set()
    forest: List[Any] = []
    stack: List[Tuple[Any, int, Tuple]] = []

    for index, parent_id in enumerate(parent_ids):
        if parent_id is None:
            node = _without_path(records[index], segments)
            forest.append(node)
            stack.append((node, index, ()))
            attached.add(index)

    while stack:
        node, position, ancestors = stack.pop()
        node_id = own_ids[position]
        if node_id in ancestors:
            raise CyclicGraphError(list(ancestors) + [node_id])
        lineage = ancestors + (node_id,)

        children: List[Any] = []
        for index in children_by_parent.get(node_id, []):
            child = _without_path(records[index], segments)
            children.append(child)
            stack.append((child, index, lineage))
            attached.add(index)
        node[children_key] = ArrayFacade.of(children)

    # Records whose ancestor chain never reaches a root form a cycle
    detached = [own_ids[i] for i in range(len(records)) if i not in attached]
    if detached:
        raise CyclicGraphError(detached)

    return ArrayFacade.of(forest)


def group_by_object(
    elements: Any,
    key_object_path: str,
    key_object_id_field: str,
    value_field: str,
    remove_key_from_values: bool = True,
) -> ArrayFacade:
    """
    Variant of group_by where the key is an embedded object, not a scalar.

    Example:
        group_by_object([
            {"id": "o1", "type": {"id": "t1"}},
            {"id": "o2", "type": {"id": "t1"}},
            {"id": "o3", "type": {"id": "t2"}},
            {"id": "o4", "type": None},
        ], "type", "id", "objects")
        =
        [
            {"id": "t1", "objects": [{"id": "o1"}, {"id": "o2"}]},
            {"id": "t2", "objects": [{"id": "o3"}]},
            {"id": None, "objects": [{"id": "o4", "type": None}]},
        ]

    Key objects are deduplicated by key_object_id_field (first occurrence
    wins) and appear in first-encounter order. Records with a missing or
    empty key object are collected in a trailing bucket with a None id.
    """
    facade = ArrayFacade.of(elements)
    key_of = property_of(key_object_path)
    id_of = property_of(key_object_id_field)
    segments = split_path(key_object_path)

    def key_object(item: Any) -> Any:
        return key_of(item) if contains_path(item, key_object_path) else None

    with_key, without_key = facade.partition(lambda item: bool(key_object(item)))

    buckets: List[Any] = []
    seen_ids: List[Any] = []
    for item in with_key:
        current = key_object(item)
        current_id = id_of(current)
        if current_id in seen_ids:
            continue
        seen_ids.append(current_id)

        values = with_key.filter(lambda other: id_of(key_object(other)) == current_id)
        if remove_key_from_values:
            values = values.map(lambda value: _without_path(value, segments))

        bucket = _copy_record(current)
        bucket[value_field] = values
        buckets.append(bucket)

    if not without_key.is_empty():
        buckets.append({key_object_id_field: None, value_field: without_key})

    return ArrayFacade.of(buckets)


@dataclass
class GraphReport:
    """Read-only diagnostics for a forest built by to_graph()."""

    total_nodes: int = 0
    root_count: int = 0
    max_depth: int = 0
    leaf_ids: List[Any] = field(default_factory=list)
    nodes_per_depth: Dict[int, int] = field(default_factory=dict)
    widest_node: Optional[Any] = None

    warnings: List[str] = field(default_factory=list)

    def add_warning(self, msg: str) -> None:
        """Add a warning to the report."""
        if msg not in self.warnings:
            self.warnings.append(msg)


def analyze_graph(
    forest: ArrayFacade,
    id_key: str = "id",
    children_key: str = "children",
    max_depth_warning: int = 10,
) -> GraphReport:
    """
    Measure a forest: node counts, depth, leaves and fan-out.

    Returns a GraphReport with metrics and warnings.
    """
    report = GraphReport()
    id_of = property_of(id_key)
    roots = ArrayFacade.of(forest).to_list()
    report.root_count = len(roots)

    widest = -1
    stack = [(root, 1) for root in reversed(roots)]
    while stack:
        node, depth = stack.pop()
        report.total_nodes += 1
        report.max_depth = max(report.max_depth, depth)
        report.nodes_per_depth[depth] = report.nodes_per_depth.get(depth, 0) + 1

        children = resolve_path(node, children_key) if contains_path(node, children_key) else None
        child_list = ArrayFacade.of(children).to_list() if children else []
        if not child_list:
            report.leaf_ids.append(id_of(node))
        if len(child_list) > widest:
            widest = len(child_list)
            report.widest_node = id_of(node)
        for child in reversed(child_list):
            stack.append((child, depth + 1))

    if report.root_count == 0:
        report.add_warning("Forest is empty")
    if report.max_depth > max_depth_warning:
        report.add_warning(f"Deep hierarchy: max depth {report.max_depth}")
    if report.root_count > 1:
        report.add_warning(f"Multiple roots: {report.root_count} trees in forest")

    return report
