"""
Tests for the graph builder.

Tests verify that:
    - to_graph builds a forest in input order
    - Referential integrity is checked before building
    - Cycles fail fast instead of recursing forever
    - Input records are never modified
    - group_by_object groups under embedded key objects
    - analyze_graph measures a forest
"""

import pytest

from arrayfacade import ArrayFacade as A
from arrayfacade.errors import CyclicGraphError, ReferentialIntegrityError, TypeMismatchError
from arrayfacade.graph import analyze_graph, group_by_object, to_graph


def build_sample_records():
    return [
        {"id": 1, "parent": None},
        {"id": 2, "parent": {"id": 3}},
        {"id": 3, "parent": None},          # second root
        {"id": 4, "parent": {"id": 2}},     # second level
        {"id": 5, "parent": {"id": 1}},
    ]


def count_descendants(node):
    return sum(1 + count_descendants(child) for child in node["children"])


class TestToGraph:
    """Test forest assembly."""

    def test_two_roots(self):
        g = A.of(build_sample_records()).to_graph("id", "parent", "children")
        assert g.count() == 2
        assert g[0]["children"][0]["id"] == 5
        assert g[1]["children"][0]["children"][0]["id"] == 4

    def test_descendant_counts(self):
        g = to_graph(build_sample_records())
        assert [count_descendants(root) for root in g] == [1, 2]

    def test_parent_reference_removed(self):
        g = to_graph(build_sample_records())
        assert "parent" not in g[0]
        assert "parent" not in g[1]["children"][0]

    def test_leaves_have_empty_children(self):
        g = to_graph(build_sample_records())
        leaf = g[0]["children"][0]
        assert isinstance(leaf["children"], A)
        assert leaf["children"].is_empty()

    def test_children_keep_input_order(self):
        records = [
            {"id": "root", "parent": None},
            {"id": "b", "parent": {"id": "root"}},
            {"id": "a", "parent": {"id": "root"}},
        ]
        g = to_graph(records)
        assert g[0]["children"].map("id").to_list() == ["b", "a"]

    def test_input_not_mutated(self):
        records = build_sample_records()
        to_graph(records)
        assert records == build_sample_records()

    def test_absent_parent_is_root(self):
        g = to_graph([{"id": 1}, {"id": 2, "parent": {"id": 1}}])
        assert g.count() == 1
        assert g[0]["children"][0]["id"] == 2

    def test_custom_keys_and_nested_parent_path(self):
        records = [
            {"key": "a", "meta": {"up": None, "label": "A"}},
            {"key": "b", "meta": {"up": {"key": "a"}, "label": "B"}},
        ]
        g = to_graph(records, id_key="key", parent_path="meta.up", children_key="sub")
        assert g[0]["sub"][0]["key"] == "b"
        assert g[0]["sub"][0]["meta"] == {"label": "B"}
        assert records[1]["meta"]["up"] == {"key": "a"}

    def test_facade_records(self):
        records = A.of([A.of({"id": 1, "parent": None}), A.of({"id": 2, "parent": A.of({"id": 1})})])
        g = to_graph(records)
        assert g[0]["children"][0]["id"] == 2
        assert not g[0].contains_key("parent")

    def test_empty(self):
        assert to_graph([]).is_empty()

    def test_deep_chain_does_not_recurse(self):
        """A chain deeper than the recursion limit still builds."""
        depth = 3000
        records = [{"id": 0, "parent": None}] + [
            {"id": i, "parent": {"id": i - 1}} for i in range(1, depth)
        ]
        node = to_graph(records)[0]
        levels = 1
        while not node["children"].is_empty():
            node = node["children"][0]
            levels += 1
        assert levels == depth

    def test_non_record_elements(self):
        with pytest.raises(TypeMismatchError):
            to_graph([1, 2])


class TestToGraphErrors:
    """Test failure modes."""

    def test_missing_parent(self):
        records = build_sample_records() + [{"id": 6, "parent": {"id": 99}}]
        with pytest.raises(ReferentialIntegrityError) as excinfo:
            to_graph(records)
        assert excinfo.value.missing_ids == [99]
        assert "99" in str(excinfo.value)

    def test_detached_cycle(self):
        records = [
            {"id": 1, "parent": None},
            {"id": 2, "parent": {"id": 3}},
            {"id": 3, "parent": {"id": 2}},
        ]
        with pytest.raises(CyclicGraphError) as excinfo:
            to_graph(records)
        assert sorted(excinfo.value.ids) == [2, 3]

    def test_self_parent(self):
        with pytest.raises(CyclicGraphError):
            to_graph([{"id": 1, "parent": {"id": 1}}])

    def test_duplicate_id_cycle(self):
        """A node whose id repeats on its own ancestor chain."""
        records = [
            {"id": 1, "parent": None},
            {"id": 1, "parent": {"id": 1}},
        ]
        with pytest.raises(CyclicGraphError):
            to_graph(records)


class TestGroupByObject:
    """Test grouping under embedded key objects."""

    def build_items(self):
        return [
            {"id": "o1", "type": {"id": "t1"}},
            {"id": "o2", "type": {"id": "t1"}},
            {"id": "o3", "type": {"id": "t2"}},
        ]

    def test_groups(self):
        result = A.of(self.build_items()).group_by_object("type", "id", "objects")
        assert result.count() == 2
        assert result[0]["id"] == "t1"
        assert result[0]["objects"].to_list() == [{"id": "o1"}, {"id": "o2"}]
        assert result[1]["objects"].to_list() == [{"id": "o3"}]

    def test_keep_key_objects(self):
        result = group_by_object(self.build_items(), "type", "id", "objects", remove_key_from_values=False)
        assert result[0]["objects"][0] == {"id": "o1", "type": {"id": "t1"}}

    def test_items_without_key(self):
        items = self.build_items() + [{"id": "o4", "type": None}, {"id": "o5", "type": {}}, {"id": "o6"}]
        result = group_by_object(items, "type", "id", "objects")
        assert result.count() == 3
        last = result[2]
        assert last["id"] is None
        assert last["objects"].map("id").to_list() == ["o4", "o5", "o6"]

    def test_key_objects_not_mutated(self):
        items = self.build_items()
        group_by_object(items, "type", "id", "objects")
        assert items[0] == {"id": "o1", "type": {"id": "t1"}}
        assert "objects" not in items[0]["type"]

    def test_empty(self):
        assert group_by_object([], "type", "id", "objects").is_empty()


class TestAnalyzeGraph:
    """Test forest diagnostics."""

    def test_metrics(self):
        report = analyze_graph(to_graph(build_sample_records()))
        assert report.root_count == 2
        assert report.total_nodes == 5
        assert report.max_depth == 3
        assert report.leaf_ids == [5, 4]
        assert report.nodes_per_depth == {1: 2, 2: 2, 3: 1}

    def test_warnings(self):
        report = analyze_graph(A.of_empty())
        assert "Forest is empty" in report.warnings

        report = analyze_graph(to_graph(build_sample_records()), max_depth_warning=2)
        assert any("Deep hierarchy" in w for w in report.warnings)
