"""Tests for structural equality and change counting."""

import copy as _copy
import typing as _typing

import kdiff.tree as tree


class TestDeepEqual:
    """Tests for deep_equal."""

    def test_map_key_order_ignored(self) -> None:
        assert tree.deep_equal({"a": 1, "b": 2}, {"b": 2, "a": 1})

    def test_list_order_matters(self) -> None:
        assert not tree.deep_equal([1, 2], [2, 1])

    def test_bool_never_equals_number(self) -> None:
        assert not tree.deep_equal(True, 1)
        assert not tree.deep_equal(0, False)
        assert tree.deep_equal(True, True)

    def test_numbers(self) -> None:
        assert tree.deep_equal(1, 1.0)
        assert not tree.deep_equal(1, 2)

    def test_shape_mismatch(self) -> None:
        assert not tree.deep_equal({"a": 1}, [1])
        assert not tree.deep_equal([], {})
        assert not tree.deep_equal({"a": 1}, {"a": 1, "b": None})


class TestCountChanges:
    """Tests for count_changes."""

    def test_equal_trees(self, deployment: dict[str, _typing.Any]) -> None:
        assert tree.count_changes(deployment, _copy.deepcopy(deployment)) == 0

    def test_changed_leaf(self, deployment: dict[str, _typing.Any]) -> None:
        after = _copy.deepcopy(deployment)
        after["spec"]["replicas"] = 3
        assert tree.count_changes(deployment, after) == 1

    def test_appended_list_element(self, deployment: dict[str, _typing.Any]) -> None:
        after = _copy.deepcopy(deployment)
        after["spec"]["template"]["spec"]["containers"].append({"name": "sidecar"})
        assert tree.count_changes(deployment, after) == 1

    def test_removed_key(self, deployment: dict[str, _typing.Any]) -> None:
        after = _copy.deepcopy(deployment)
        del after["spec"]["replicas"]
        assert tree.count_changes(deployment, after) == 1

    def test_bool_to_number_is_a_change(self) -> None:
        assert tree.count_changes({"paused": True}, {"paused": 1}) == 1

    def test_each_leaf_counts_once(self, deployment: dict[str, _typing.Any]) -> None:
        """A new subtree counts once; separate leaves count separately."""
        after = _copy.deepcopy(deployment)
        after["spec"]["replicas"] = 2
        after["spec"]["template"]["spec"]["containers"][0]["image"] = "nginx:2.0"
        after["metadata"]["annotations"] = {"a": "1", "b": "2"}
        assert tree.count_changes(deployment, after) == 3
