import pytest

from controllers.selectors import contains, matches
from orchestrator.tree import Node


@pytest.fixture
def node():
    return Node(tag="div", attributes={"id": "main", "class": "card  wide", "data-module": "ui.Card", "role": "region"})


@pytest.mark.parametrize("selector", [
    "div", "*", "#main", ".card", ".wide.card", "div#main.card", "[data-module]",
    "[data-module=ui.Card]", '[role="region"]', "[role='region']", "span, div", "div[role=region]",
])
def test_matching_selectors(node, selector):
    assert matches(node, selector)


@pytest.mark.parametrize("selector", ["span", "#other", ".narrow", "[data-priority]", "[role=banner]", "div.card.narrow"])
def test_non_matching_selectors(node, selector):
    assert not matches(node, selector)


@pytest.mark.parametrize("selector", ["div > span", "div,", "##x"])
def test_unsupported_selectors(node, selector):
    with pytest.raises(ValueError):
        matches(node, selector)


def test_contains():
    root = Node(tag="body")
    child = root.append(Node(tag="div"))
    leaf = child.append(Node(tag="span"))
    assert contains(root, leaf)
    assert contains(leaf, leaf)
    assert not contains(leaf, root)
    assert not contains(Node(tag="body"), leaf)
