import pytest

from ensemble.domain import (
    ComponentRef,
    ComponentSpec,
    ParamRef,
    component,
    component_ref,
    is_reference,
    param_ref,
    to_component_spec,
)
from ensemble.errors import InvalidArgument
from ensemble.parameters import lookup_parameter


def test_component_ref_carries_id():
    ref = component_ref("db")

    assert isinstance(ref, ComponentRef)
    assert ref.component_id == "db"
    assert ref == component_ref("db")


def test_param_ref_carries_path():
    ref = param_ref("smtp", "port")

    assert isinstance(ref, ParamRef)
    assert ref.path == ("smtp", "port")


def test_param_ref_requires_path():
    with pytest.raises(InvalidArgument, match="non-empty path"):
        param_ref()

    with pytest.raises(InvalidArgument):
        ParamRef([])


def test_references_are_distinguished_from_lookalike_data():
    assert is_reference(component_ref("a"))
    assert is_reference(param_ref("a"))
    assert not is_reference(("comp-ref", "a"))
    assert not is_reference({"component_id": "a"})
    assert component_ref("a") != param_ref("a")


def test_component_helper():
    spec = component(dict, 1, 2, key=component_ref("k"))

    assert spec == ComponentSpec(dict, (1, 2), {"key": component_ref("k")})


def test_sequence_entries_are_normalised():
    assert to_component_spec("a", [list, 1, 2]) == ComponentSpec(list, (1, 2))
    assert to_component_spec("a", (list,)) == ComponentSpec(list)


def test_component_spec_entries_are_validated():
    with pytest.raises(InvalidArgument, match="not callable"):
        to_component_spec("a", ComponentSpec(42))


def test_lookup_follows_mappings_and_sequences():
    parameters = {"servers": [{"host": "a"}, {"host": "b"}], "flag": False}

    assert lookup_parameter(parameters, param_ref("servers", 1, "host")) == "b"
    assert lookup_parameter(parameters, param_ref("servers", -1, "host")) == "b"
    assert lookup_parameter(parameters, param_ref("flag")) is False


@pytest.mark.parametrize(
    "path",
    [("missing",), ("servers", 2), ("servers", "0"), ("servers", 0, "host", "x"), ("name", 0)],
)
def test_lookup_of_missing_path_raises(path):
    parameters = {"servers": [{"host": "a"}], "name": "abc"}

    with pytest.raises(InvalidArgument, match="no parameter provided"):
        lookup_parameter(parameters, ParamRef(path))
