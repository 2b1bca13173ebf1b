import pytest

from orchestrator.errors import ArgumentError, ParseError
from orchestrator.models import AttributeNames, ModuleBindingSpec
from orchestrator.parser import build_specs, parse_declaration
from orchestrator.tree import Node


def make_node(**attributes):
    return Node(tag="div", attributes={key.replace("_", "-"): value for key, value in attributes.items()})


def test_single_binding_reads_sibling_attributes():
    node = make_node(data_module="widgets.clock:Clock", data_options='{"tz": "UTC"}', data_conditions="media:{(min-width:40em)}")
    specs = parse_declaration(node)
    assert specs == [
        ModuleBindingSpec(path="widgets.clock:Clock", options='{"tz": "UTC"}', conditions="media:{(min-width:40em)}")
    ]


def test_single_binding_without_siblings():
    specs = parse_declaration(make_node(data_module="widgets.clock:Clock"))
    assert len(specs) == 1
    assert specs[0].options is None
    assert specs[0].conditions is None


def test_absent_declaration_is_treated_as_empty_path():
    specs = parse_declaration(Node(tag="div"))
    assert [spec.path for spec in specs] == [""]


def test_object_form_preserves_order():
    node = make_node(data_module='[{"path":"x","options":{"a":1}},{"path":"y","conditions":"c"}]')
    specs = parse_declaration(node)
    assert specs == [
        ModuleBindingSpec(path="x", options={"a": 1}),
        ModuleBindingSpec(path="y", conditions="c"),
    ]


def test_object_form_ignores_sibling_attributes():
    node = make_node(data_module='[{"path":"x"}]', data_options='{"b": 2}', data_conditions="never")
    assert parse_declaration(node) == [ModuleBindingSpec(path="x")]


def test_tuple_form_string_in_second_position_is_conditions():
    specs = parse_declaration(make_node(data_module='[["x","c",{"a":1}]]'))
    assert specs == [ModuleBindingSpec(path="x", conditions="c", options={"a": 1})]


def test_tuple_form_object_in_second_position_is_options():
    specs = parse_declaration(make_node(data_module='[["x",{"a":1},"c"],["y"]]'))
    assert specs == [
        ModuleBindingSpec(path="x", options={"a": 1}, conditions="c"),
        ModuleBindingSpec(path="y"),
    ]


def test_empty_array_yields_no_bindings():
    assert parse_declaration(make_node(data_module="[]")) == []


def test_malformed_json_raises_in_strict_mode():
    with pytest.raises(ParseError):
        parse_declaration(make_node(data_module='[{"path": "x"'))


def test_malformed_json_degrades_in_lenient_mode():
    assert parse_declaration(make_node(data_module='[{"path": "x"'), strict=False) == []


def test_bad_entries_raise_in_strict_mode():
    with pytest.raises(ParseError):
        parse_declaration(make_node(data_module='[{"path":"x"},{"options":{}}]'))
    with pytest.raises(ParseError):
        parse_declaration(make_node(data_module='[["x",1,2,3]]'))


def test_bad_entries_are_skipped_in_lenient_mode():
    node = make_node(data_module='[["x"],"y",["z",{"a":1},5]]')
    specs = parse_declaration(node, strict=False)
    assert [spec.path for spec in specs] == ["x"]


def test_custom_attribute_names():
    names = AttributeNames(module="bind", options="bind-options", conditions="bind-when", priority="bind-priority")
    node = Node(tag="div", attributes={"bind": "a:A", "bind-when": "ready", "data-module": "ignored:B"})
    specs = parse_declaration(node, names)
    assert specs == [ModuleBindingSpec(path="a:A", conditions="ready")]


def test_build_specs_accepts_single_or_list():
    assert build_specs({"path": "a:A"}) == [ModuleBindingSpec(path="a:A")]
    spec = ModuleBindingSpec(path="b:B", conditions="c")
    assert build_specs([{"path": "a:A"}, spec]) == [ModuleBindingSpec(path="a:A"), spec]
    assert build_specs(None) == []


def test_build_specs_rejects_invalid_configuration():
    with pytest.raises(ArgumentError):
        build_specs([{"options": {}}])
    with pytest.raises(ArgumentError):
        build_specs("a:A")
    assert build_specs([{"options": {}}, {"path": "a:A"}], strict=False) == [ModuleBindingSpec(path="a:A")]
