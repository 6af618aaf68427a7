import pytest

from ensemble.dependency_graph import collect_component_ids, dependency_map, topological_sort
from ensemble.domain import ComponentSpec, component_ref, param_ref
from ensemble.errors import CyclicDependency, UnknownComponent


def test_collects_ids_from_args_and_kwargs():
    spec = ComponentSpec(
        dict,
        ([component_ref("a"), {"nested": (component_ref("b"), param_ref("p"))}], component_ref("a")),
        {"c": {component_ref("c")}},
    )

    assert collect_component_ids(spec) == {"a", "b", "c"}


def test_lookalike_values_are_not_references():
    spec = ComponentSpec(dict, (["comp-ref", "a"], ("comp-ref", "b"), {"component_id": "c"}))

    assert collect_component_ids(spec) == frozenset()


def test_dependency_map_preserves_specification_order():
    specs = {
        "b": ComponentSpec(list, ([component_ref("a")],)),
        "a": ComponentSpec(list),
    }

    assert list(dependency_map(specs).items()) == [("b", {"a"}), ("a", frozenset())]


def test_dependency_map_rejects_unknown_ids():
    specs = {"b": ComponentSpec(list, ([component_ref("a"), component_ref("z")],))}

    with pytest.raises(UnknownComponent) as excinfo:
        dependency_map(specs)

    assert excinfo.value.component_id == "b"
    assert excinfo.value.unknown_ids == {"a", "z"}


def test_sort_places_dependencies_first():
    assert topological_sort({"a": {"b"}, "b": {"c"}, "c": set()}) == ["c", "b", "a"]


def test_ties_broken_by_insertion_order():
    dependencies = {"x": set(), "top": {"y", "x"}, "y": set(), "z": set()}

    assert topological_sort(dependencies) == ["x", "y", "top", "z"]


def test_node_becoming_ready_precedes_later_inserted_ready_nodes():
    dependencies = {"late": set(), "a": {"b"}, "b": set()}

    assert topological_sort(dependencies) == ["late", "b", "a"]


def test_empty_graph():
    assert topological_sort({}) == []


def test_edges_to_unknown_nodes_are_ignored():
    assert topological_sort({"a": {"ghost"}, "b": {"a"}}) == ["a", "b"]


def test_two_node_cycle():
    with pytest.raises(CyclicDependency, match="Cyclic dependency between components: 'a' -> 'b' -> 'a'"):
        topological_sort({"a": {"b"}, "b": {"a"}})


def test_self_dependency_is_a_cycle():
    with pytest.raises(CyclicDependency) as excinfo:
        topological_sort({"ok": set(), "me": {"me"}})

    assert excinfo.value.remaining == ["me"]
    assert excinfo.value.cycle == ["me", "me"]


def test_cycle_reported_without_dependents_outside_it():
    with pytest.raises(CyclicDependency) as excinfo:
        topological_sort({"user": {"a"}, "a": {"b"}, "b": {"a"}, "free": set()})

    assert excinfo.value.remaining == ["user", "a", "b"]
    assert excinfo.value.cycle == ["a", "b", "a"]
