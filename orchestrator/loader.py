"""
loader.py
---------
Registry and lifecycle manager for node controllers.

The ModuleLoader discovers annotated nodes in a tree, wraps each one in a
node controller, activates them in priority order and keeps every live
controller in its registry until it is explicitly destroyed.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Sequence, Type, Union

from controllers.interfaces import ConditionEvaluator, ModuleResolver, TargetNode, TreeQuery
from controllers.module_controller import resolve_module
from controllers.node_controller import NodeController

from .errors import ArgumentError
from .models import LoaderOptions, coerce_loader_options
from .parser import build_specs, parse_declaration
from .scheduler import schedule
from .tree import query_by_attribute

logger = logging.getLogger(__name__)


class ModuleLoader:
    """Owns the registry of active node controllers."""

    def __init__(
        self,
        options: Union[LoaderOptions, dict, str, None] = None,
        *,
        tree_query: TreeQuery = query_by_attribute,
        controller_type: Type[NodeController] = NodeController,
        resolver: ModuleResolver = resolve_module,
        evaluator: Optional[ConditionEvaluator] = None,
    ) -> None:
        self.options = coerce_loader_options(options)
        self._tree_query = tree_query
        self._controller_type = controller_type
        self._resolver = resolver
        self._evaluator = evaluator
        self._controllers: list[NodeController] = []

    def __len__(self) -> int:
        return len(self._controllers)

    @property
    def strict(self) -> bool:
        return self.options.strict

    def is_wrapped(self, node: TargetNode) -> bool:
        """Whether a live controller in this registry wraps ``node``."""
        return any(controller.element is node for controller in self._controllers)

    def scan(self, context: Optional[TargetNode]) -> list[NodeController]:
        """
        Bind every annotated node under ``context`` that is not bound yet.
        Returns the newly created controllers, in registry order.
        """
        if context is None:
            if self.strict:
                raise ArgumentError('scan(context): "context" is a required parameter.')
            logger.warning("scan() called without a context, nothing to do")
            return []

        attributes = self.options.attributes
        candidates = self._tree_query(context, attributes.module)
        if not candidates:
            return []

        # parse everything first so a ParseError leaves no half-created batch
        seen = {id(controller.element) for controller in self._controllers}
        pending = []
        for element in candidates:
            if id(element) in seen or self._controller_type.has_processed(element):
                continue
            seen.add(id(element))
            pending.append((element, parse_declaration(element, attributes, self.strict)))

        controllers = []
        specs_by_controller = {}
        for element, specs in pending:
            controller = self._create(element, element.get_attribute(attributes.priority))
            controllers.append(controller)
            specs_by_controller[id(controller)] = specs

        # registered before activation so a failing module leaves them destroyable
        self._controllers.extend(controllers)
        for controller in schedule(controllers):
            specs = specs_by_controller[id(controller)]
            logger.debug("Loading %d binding(s) on %r (priority %s)", len(specs), controller.element, controller.priority)
            controller.load(specs)

        logger.info("Scan bound %d new node(s), %d skipped", len(controllers), len(candidates) - len(controllers))
        return controllers

    def bind(self, node: TargetNode, configs: Any) -> Optional[NodeController]:
        """
        Bind ``node`` to the given module configuration(s) directly,
        without reading declarations from the node.
        """
        if not configs:
            return None
        if self.is_wrapped(node) or self._controller_type.has_processed(node):
            if self.strict:
                raise ArgumentError(f"bind(node, configs): {node!r} is already bound.")
            logger.warning("Node %r is already bound, ignoring bind()", node)
            return None
        try:
            specs = build_specs(configs, self.strict)
        except ArgumentError:
            if self.strict:
                raise
            logger.warning("Ignoring unusable binding configuration %r", configs)
            return None
        if not specs:
            return None

        controller = self._create(node)
        self._controllers.append(controller)
        controller.load(specs)
        logger.info("Bound %d module(s) to %r", len(specs), node)
        return controller

    def query(self, selector: Optional[str] = None, context: Optional[TargetNode] = None,
              single: bool = False) -> Union[list[NodeController], NodeController, None]:
        """
        Return registered controllers matching ``selector`` within ``context``.
        With neither given, returns a copy of the whole registry.
        With ``single``, returns the first match or None.
        """
        if selector is None and context is None:
            if single:
                return self._controllers[0] if self._controllers else None
            return list(self._controllers)

        results = []
        for controller in self._controllers:
            if controller.matches_selector(selector, context):
                if single:
                    return controller
                results.append(controller)
        return None if single else results

    def destroy(self, controllers: Sequence[NodeController]) -> bool:
        """
        Remove the given controllers from the registry and destroy them.
        Unknown controllers are skipped. Returns True only if every one was
        destroyed; registered ones are destroyed even when it returns False.
        """
        destroyed = 0
        for controller in controllers:
            index = next((i for i, existing in enumerate(self._controllers) if existing is controller), None)
            if index is None:
                logger.debug("Controller %r is not registered, skipping", controller)
                continue
            del self._controllers[index]
            controller.destroy()
            destroyed += 1
        return destroyed == len(controllers)

    def _create(self, element: TargetNode, priority: Any = None) -> NodeController:
        return self._controller_type(element, priority, resolver=self._resolver, evaluator=self._evaluator)


__all__ = ["ModuleLoader"]
