"""
Loading agents decide when a module binding may actually start.

Two interchangeable variants share one call contract:
    Immediate        - always open; bindings start as soon as they load.
    ConditionGated   - closed until its conditions expression is satisfied.

Condition expressions are opaque here. A ConditionGated agent is opened
either by ``update(True)`` from outside or by ``refresh()`` when an evaluator
was supplied.
"""

from __future__ import annotations

import logging
from typing import Callable, Literal, Optional, Union

from controllers.interfaces import ConditionEvaluator, TargetNode

logger = logging.getLogger(__name__)

AgentCallback = Callable[[bool], None]


class Immediate:
    """Agent that always allows activation."""

    kind: Literal["immediate"] = "immediate"

    @property
    def allows_activation(self) -> bool:
        return True

    def watch(self, callback: AgentCallback) -> None:
        # state never changes, nothing to notify
        return None

    def destroy(self) -> None:
        return None

    def __repr__(self) -> str:
        return "Immediate()"


IMMEDIATE = Immediate()


class ConditionGated:
    """Agent that opens once ``expression`` holds for ``element``."""

    kind: Literal["condition"] = "condition"

    def __init__(self, expression: str, element: TargetNode, evaluator: Optional[ConditionEvaluator] = None) -> None:
        self.expression = expression
        self.element = element
        self._evaluator = evaluator
        self._state = False
        self._destroyed = False
        self._callbacks: list[AgentCallback] = []
        if evaluator is not None:
            self._state = bool(evaluator(expression, element))

    @property
    def allows_activation(self) -> bool:
        return self._state

    @property
    def destroyed(self) -> bool:
        return self._destroyed

    def watch(self, callback: AgentCallback) -> None:
        if not self._destroyed:
            self._callbacks.append(callback)

    def update(self, state: bool) -> None:
        """Set the gate state and notify watchers if it changed."""
        if self._destroyed or bool(state) == self._state:
            return
        self._state = bool(state)
        logger.debug("Conditions %r now %s", self.expression, "met" if self._state else "unmet")
        for callback in list(self._callbacks):
            callback(self._state)

    def refresh(self) -> bool:
        """Re-evaluate the expression with the evaluator, if any."""
        if self._evaluator is not None:
            self.update(self._evaluator(self.expression, self.element))
        return self._state

    def destroy(self) -> None:
        """Cancel the gate; pending activations will never fire."""
        self._destroyed = True
        self._callbacks.clear()

    def __repr__(self) -> str:
        return f"ConditionGated({self.expression!r}, open={self._state})"


LoadingAgent = Union[Immediate, ConditionGated]


def agent_for(conditions: Optional[str], element: TargetNode, evaluator: Optional[ConditionEvaluator] = None) -> LoadingAgent:
    """Pick the agent variant for a binding from its conditions field."""
    if conditions:
        return ConditionGated(conditions, element, evaluator)
    return IMMEDIATE
