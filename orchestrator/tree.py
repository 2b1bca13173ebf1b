"""In-memory node tree scanned by the module loader."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator

from .models import NodeDocument, coerce_document


@dataclass(eq=False)
class Node:
    """Tree node carrying string attributes and child nodes."""

    tag: str
    attributes: dict[str, str] = field(default_factory=dict)
    parent: Node | None = field(default=None, repr=False)
    children: list[Node] = field(default_factory=list, repr=False)

    def get_attribute(self, name: str) -> str | None:
        return self.attributes.get(name)

    def set_attribute(self, name: str, value: str) -> None:
        self.attributes[name] = value

    def remove_attribute(self, name: str) -> None:
        self.attributes.pop(name, None)

    def append(self, child: Node) -> Node:
        """Attach ``child`` as last child and return it."""
        if child.parent is not None:
            child.parent.children.remove(child)
        child.parent = self
        self.children.append(child)
        return child

    def iter_descendants(self) -> Iterator[Node]:
        """Yield all descendants in document (pre-)order, excluding self."""
        stack = list(reversed(self.children))
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def path(self) -> str:
        label = self.tag
        node_id = self.get_attribute("id")
        if node_id:
            label = f"{label}#{node_id}"
        if self.parent is None:
            return f"/{label}"
        return f"{self.parent.path()}/{label}"


def query_by_attribute(context: Node, attribute: str) -> list[Node]:
    """Return the descendants of ``context`` carrying ``attribute``, in document order."""
    return [node for node in context.iter_descendants() if node.get_attribute(attribute) is not None]


def build_tree(document: NodeDocument, parent: Node | None = None) -> Node:
    """Materialize a NodeDocument into Node objects."""
    node = Node(tag=document.tag, attributes=dict(document.attributes))
    if parent is not None:
        parent.append(node)
    for child in document.children:
        build_tree(child, node)
    return node


def load_document(value: Any) -> Node:
    """Load a tree from a mapping, YAML/JSON text, bytes or a Path."""
    return build_tree(coerce_document(value))


__all__ = ["Node", "build_tree", "load_document", "query_by_attribute"]
