import pytest

from orchestrator.tree import Node, load_document, query_by_attribute

DOCUMENT = """
tag: html
children:
  - tag: body
    attributes: {id: page, data-module: layout.Page}
    children:
      - tag: nav
        attributes: {data-module: ui.Menu}
      - tag: main
        children:
          - tag: div
            attributes: {id: chart, data-module: charts.Line, data-priority: 2}
      - tag: footer
"""


def test_load_document_from_yaml_builds_parent_links():
    root = load_document(DOCUMENT)
    body = root.children[0]
    assert body.parent is root
    assert [child.tag for child in body.children] == ["nav", "main", "footer"]
    assert body.children[1].children[0].get_attribute("data-priority") == "2"


def test_query_by_attribute_is_document_order_and_excludes_context():
    root = load_document(DOCUMENT)
    found = query_by_attribute(root, "data-module")
    assert [node.tag for node in found] == ["body", "nav", "div"]
    body = found[0]
    assert [node.tag for node in query_by_attribute(body, "data-module")] == ["nav", "div"]


def test_path_includes_ids():
    root = load_document(DOCUMENT)
    chart = query_by_attribute(root, "data-priority")[0]
    assert chart.path() == "/html/body#page/main/div#chart"


def test_nodes_compare_by_identity():
    assert Node(tag="div") != Node(tag="div")
    node = Node(tag="div")
    assert {node: 1}[node] == 1


def test_append_moves_child():
    first, second, child = Node(tag="a"), Node(tag="b"), Node(tag="c")
    first.append(child)
    second.append(child)
    assert first.children == []
    assert child.parent is second


def test_attribute_helpers():
    node = Node(tag="div")
    assert node.get_attribute("data-module") is None
    node.set_attribute("data-module", "x.Y")
    assert node.get_attribute("data-module") == "x.Y"
    node.remove_attribute("data-module")
    node.remove_attribute("data-module")
    assert node.get_attribute("data-module") is None


def test_load_document_rejects_invalid_payload():
    with pytest.raises(ValueError):
        load_document({"tag": "div", "children": "nope"})
