"""
node_controller.py
------------------
Lifecycle wrapper for one node and all the modules bound to it.

The NodeController type also remembers which nodes have been wrapped
(``NodeController.has_processed``) so a node is never processed twice
while a controller for it is alive. The marker is released once the
last live controller wrapping the node is destroyed.
"""

from __future__ import annotations

import logging
import math
from typing import Any, ClassVar, Iterable, List, Optional, Union
from weakref import WeakKeyDictionary, WeakSet

from controllers.agents import agent_for
from controllers.interfaces import BindingSpec, ConditionEvaluator, ModuleResolver, TargetNode
from controllers.module_controller import ModuleController, resolve_module
from controllers.selectors import contains, matches

logger = logging.getLogger(__name__)

Priority = Union[int, float]


def coerce_priority(raw: Any) -> Priority:
    """Read a priority attribute; anything missing or malformed is 0."""
    if raw is None or isinstance(raw, bool):
        return 0
    if isinstance(raw, (int, float)):
        value: Priority = raw
    else:
        text = str(raw).strip()
        try:
            value = int(text)
        except ValueError:
            try:
                value = float(text)
            except ValueError:
                return 0
    if isinstance(value, float) and not math.isfinite(value):
        return 0
    return value


class NodeController:
    """Owns the module controllers activated for a single node."""

    # node -> live controllers wrapping it
    _owners: ClassVar["WeakKeyDictionary[Any, WeakSet[NodeController]]"] = WeakKeyDictionary()

    def __init__(self, element: TargetNode, priority: Any = None, *,
                 resolver: ModuleResolver = resolve_module,
                 evaluator: Optional[ConditionEvaluator] = None) -> None:
        self._element = element
        self._priority = coerce_priority(priority)
        self._resolver = resolver
        self._evaluator = evaluator
        self._module_controllers: List[ModuleController] = []
        NodeController._owners.setdefault(element, WeakSet()).add(self)

    @classmethod
    def has_processed(cls, element: TargetNode) -> bool:
        return bool(NodeController._owners.get(element))

    @property
    def priority(self) -> Priority:
        return self._priority

    @property
    def element(self) -> TargetNode:
        return self._element

    def load(self, specs: Iterable[BindingSpec]) -> None:
        """Create a module controller per binding and request activation, in order."""
        for spec in specs:
            module_controller = ModuleController(
                spec.path,
                self._element,
                spec.options,
                agent_for(spec.conditions, self._element, self._evaluator),
                self._resolver,
            )
            self._module_controllers.append(module_controller)
            module_controller.load()

    def destroy(self) -> None:
        """Unload every module (last bound first) and release the node."""
        while self._module_controllers:
            self._module_controllers.pop().unload()
        owners = NodeController._owners.get(self._element)
        if owners is not None:
            owners.discard(self)
            if not owners:
                del NodeController._owners[self._element]
        logger.debug("Released node %r", self._element)

    def matches_selector(self, selector: Optional[str], context: Optional[TargetNode] = None) -> bool:
        if context is not None and not contains(context, self._element):
            return False
        if selector is None:
            return True
        return matches(self._element, selector)

    def get_module_controllers(self, path: Optional[str] = None) -> List[ModuleController]:
        if path is None:
            return list(self._module_controllers)
        return [mc for mc in self._module_controllers if mc.path == path]

    def are_all_modules_active(self) -> bool:
        return all(mc.is_active for mc in self._module_controllers)

    def execute(self, method: str, *args: Any, **kwargs: Any) -> List[Any]:
        """Call ``method`` on every active module that defines it."""
        results = []
        for mc in self._module_controllers:
            if mc.is_active and callable(getattr(mc.instance, method, None)):
                results.append(mc.execute(method, *args, **kwargs))
        return results

    def __repr__(self) -> str:
        return f"NodeController({self._element!r}, priority={self._priority})"
