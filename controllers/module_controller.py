"""
module_controller.py
--------------------
Binds one module path to one node.

A ModuleController holds the module path, the options for the module and
the loading agent that gates its activation. Once the agent opens, the path
is resolved to a factory and the factory is called with the node and the
options. Options written as text are read as YAML (so JSON works too) and
mappings are handed over as Box objects for dot access.
"""

from __future__ import annotations

import importlib
import logging
from typing import Any, Callable, Mapping

import yaml
from box import Box

from controllers.agents import IMMEDIATE, LoadingAgent
from controllers.interfaces import ModuleResolver, TargetNode

logger = logging.getLogger(__name__)


class ModuleResolutionError(Exception):
    """Raised when a module path cannot be turned into a factory."""
    def __init__(self, path: str, message: str = "Module could not be resolved"):
        self.path = path
        self.message = f"{message}: {path!r}"
        super().__init__(self.message)


def resolve_module(path: str) -> Callable[..., Any]:
    """
    Import the factory named by ``path``.
    Accepts ``package.module:attribute`` or ``package.module.attribute``.
    """
    if not path:
        raise ModuleResolutionError(path, "Empty module path")
    if ":" in path:
        module_name, _, attr_path = path.partition(":")
    else:
        module_name, _, attr_path = path.rpartition(".")
    if not module_name or not attr_path:
        raise ModuleResolutionError(path, "Module path needs a module and an attribute")
    try:
        target: Any = importlib.import_module(module_name)
        for attr in attr_path.split("."):
            target = getattr(target, attr)
    except (ImportError, AttributeError) as exc:
        raise ModuleResolutionError(path, str(exc)) from exc
    if not callable(target):
        raise ModuleResolutionError(path, "Resolved object is not callable")
    return target


def coerce_options(options: Any) -> Any:
    """Normalize module options: text is parsed, mappings become Box."""
    if isinstance(options, (str, bytes)):
        text = options.decode() if isinstance(options, bytes) else options
        try:
            options = yaml.safe_load(text)
        except yaml.YAMLError:
            logger.warning("Options are not valid YAML/JSON, passing raw text: %r", text)
            return text
    if isinstance(options, Mapping):
        return Box(options)
    return options


class ModuleController:
    """Lifecycle of one module bound to one node."""

    def __init__(self, path: str, element: TargetNode, options: Any = None,
                 agent: LoadingAgent = IMMEDIATE, resolver: ModuleResolver = resolve_module) -> None:
        self.path = path
        self.element = element
        self.options = coerce_options(options)
        self.agent = agent
        self._resolver = resolver
        self._instance: Any = None
        self._loaded = False

    @property
    def is_active(self) -> bool:
        return self._instance is not None

    @property
    def instance(self) -> Any:
        return self._instance

    def load(self) -> None:
        """Request activation; starts now or whenever the agent opens."""
        if self._loaded:
            return
        self._loaded = True
        self.agent.watch(self._on_agent_change)
        if self.agent.allows_activation:
            self._start()
        else:
            logger.debug("Module %r waiting on %r", self.path, self.agent)

    def unload(self) -> bool:
        """Cancel the agent and tear down the module. Returns True if it was active."""
        self.agent.destroy()
        self._loaded = False
        return self._stop()

    def execute(self, method: str, *args: Any, **kwargs: Any) -> Any:
        """Call ``method`` on the live module instance."""
        if self._instance is None:
            raise RuntimeError(f"Module {self.path!r} is not active")
        return getattr(self._instance, method)(*args, **kwargs)

    def _on_agent_change(self, allowed: bool) -> None:
        if allowed:
            self._start()
        else:
            self._stop()

    def _start(self) -> None:
        if self._instance is not None:
            return
        try:
            factory = self._resolver(self.path)
        except ModuleResolutionError as exc:
            logger.error("Failed to load module %r: %s", self.path, exc.message)
            return
        self._instance = factory(element=self.element, options=self.options)
        logger.info("Module %r started", self.path)

    def _stop(self) -> bool:
        instance, self._instance = self._instance, None
        if instance is None:
            return False
        for teardown in ("destroy", "unload"):
            method = getattr(instance, teardown, None)
            if callable(method):
                method()
                break
        logger.info("Module %r stopped", self.path)
        return True

    def __repr__(self) -> str:
        return f"ModuleController({self.path!r}, active={self.is_active})"
