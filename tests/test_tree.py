"""Tests for the plain-tree helpers."""

import math

import pytest

from ambientstate.tree import (
    MISSING,
    build_partial,
    deep_copy,
    deep_equal,
    deep_merge,
    get_nested_value,
    iter_paths,
    with_ancestors,
)


class TestDeepCopy:
    def test_no_shared_references(self):
        src = {"a": {"b": [1, {"c": 2}]}}
        copy = deep_copy(src)
        assert copy == src
        copy["a"]["b"][1]["c"] = 99
        assert src["a"]["b"][1]["c"] == 2

    def test_tuples_become_lists(self):
        assert deep_copy({"t": (1, 2)}) == {"t": [1, 2]}

    def test_rejects_non_serializable(self):
        with pytest.raises(TypeError):
            deep_copy({"fn": lambda: None})
        with pytest.raises(TypeError):
            deep_copy({"s": {1, 2}})

    def test_rejects_non_str_keys(self):
        with pytest.raises(TypeError, match="keys must be str"):
            deep_copy({1: "x"})


class TestDeepMerge:
    def test_keeps_keys_absent_from_source(self):
        target = {"a": 1, "b": {"c": 2, "d": 3}}
        merged = deep_merge(target, {"b": {"c": 20}})
        assert merged == {"a": 1, "b": {"c": 20, "d": 3}}

    def test_arrays_replace(self):
        assert deep_merge({"a": [9]}, {"a": [1, 2]}) == {"a": [1, 2]}

    def test_none_replaces(self):
        assert deep_merge({"a": {"b": 1}}, {"a": None}) == {"a": None}

    def test_dict_over_scalar_replaces(self):
        assert deep_merge({"a": 1}, {"a": {"b": 2}}) == {"a": {"b": 2}}

    def test_inputs_untouched(self):
        target = {"a": {"b": 1}}
        source = {"a": {"c": [1]}}
        merged = deep_merge(target, source)
        merged["a"]["c"].append(2)
        assert target == {"a": {"b": 1}}
        assert source == {"a": {"c": [1]}}

    def test_non_dict_source_returns_copy(self):
        target = {"a": 1}
        merged = deep_merge(target, None)
        assert merged == target
        assert merged is not target


class TestDeepEqual:
    def test_key_order_ignored(self):
        assert deep_equal({"a": 1, "b": 2}, {"b": 2, "a": 1})

    def test_nested_difference(self):
        assert not deep_equal({"a": {"b": [1, 2]}}, {"a": {"b": [1, 3]}})

    def test_nan_equals_nan(self):
        assert deep_equal({"x": math.nan}, {"x": math.nan})

    def test_bool_is_not_number(self):
        assert not deep_equal(True, 1)
        assert not deep_equal(0, False)

    def test_int_float(self):
        assert deep_equal(1, 1.0)

    def test_missing_is_not_none(self):
        assert not deep_equal(MISSING, None)
        assert deep_equal(MISSING, MISSING)

    def test_list_vs_dict(self):
        assert not deep_equal([], {})


class TestGetNestedValue:
    TREE = {"settings": {"background": {"color": "#000"}}, "items": [{"id": "a"}], "nil": None}

    def test_resolves_path(self):
        assert get_nested_value(self.TREE, "settings.background.color") == "#000"

    def test_missing_segment(self):
        assert get_nested_value(self.TREE, "settings.nope.color") is None

    def test_through_scalar(self):
        assert get_nested_value(self.TREE, "settings.background.color.x") is None

    def test_through_none(self):
        assert get_nested_value(self.TREE, "nil.x") is None

    def test_list_index(self):
        assert get_nested_value(self.TREE, "items.0.id") == "a"
        assert get_nested_value(self.TREE, "items.5.id") is None
        assert get_nested_value(self.TREE, "items.-1.id") is None

    def test_empty_path_returns_tree(self):
        assert get_nested_value(self.TREE, "") is self.TREE

    def test_malformed_input(self):
        assert get_nested_value(self.TREE, None) is None
        assert get_nested_value(None, "a.b") is None
        assert get_nested_value(42, "a") is None

    def test_custom_default(self):
        assert get_nested_value(self.TREE, "nope", MISSING) is MISSING
        assert get_nested_value(self.TREE, "nil", MISSING) is None


class TestPaths:
    def test_iter_paths(self):
        partial = {"settings": {"background": {"color": "#000"}}}
        assert list(iter_paths(partial)) == [
            "settings",
            "settings.background",
            "settings.background.color",
        ]

    def test_lists_are_leaves(self):
        assert list(iter_paths({"a": [{"b": 1}]})) == ["a"]

    def test_with_ancestors(self):
        assert with_ancestors(["a.b.c", "a.d"]) == ["a", "a.b", "a.b.c", "a.d"]

    def test_build_partial(self):
        assert build_partial("a.b", 1) == {"a": {"b": 1}}
        assert build_partial("", {"x": 1}) == {"x": 1}
