from typing import Any, Callable, List, Optional, Protocol


class TargetNode(Protocol):
    """
    Protocol for an addressable node of the host tree.
    Nodes are compared and hashed by identity, so two distinct nodes with
    equal attributes are still two nodes.
    Examples:
        node.get_attribute('data-module')   # 'widgets.clock:Clock' or None
        node.parent                         # enclosing node or None
    """
    @property
    def tag(self) -> str: ...
    @property
    def parent(self) -> Optional["TargetNode"]: ...
    def get_attribute(self, name: str) -> Optional[str]: ...


class BindingSpec(Protocol):
    """Protocol for one parsed module binding, before activation."""
    @property
    def path(self) -> str: ...
    @property
    def options(self) -> Any: ...
    @property
    def conditions(self) -> Optional[str]: ...


class TreeQuery(Protocol):
    """
    Protocol for the tree-query collaborator.
    Returns every node under ``context`` carrying ``attribute``, in document order.
    """
    def __call__(self, context: TargetNode, attribute: str) -> List[TargetNode]: ...


# Resolves a module path to a factory called as factory(element=..., options=...)
ModuleResolver = Callable[[str], Callable[..., Any]]

# Evaluates a conditions expression for a node: (expression, node) -> allowed
ConditionEvaluator = Callable[[str, TargetNode], bool]


class Controller(Protocol):
    """
    Protocol for a node lifecycle wrapper, as consumed by the module loader.
    Implementations must be constructible from (node, raw_priority) and
    expose a type-level ``has_processed(node)`` check.
    """
    @classmethod
    def has_processed(cls, element: TargetNode) -> bool: ...

    @property
    def priority(self) -> float: ...
    @property
    def element(self) -> TargetNode: ...
    def load(self, specs: List[BindingSpec]) -> None: ...
    def destroy(self) -> None: ...
    def matches_selector(self, selector: Optional[str], context: Optional[TargetNode] = None) -> bool: ...
