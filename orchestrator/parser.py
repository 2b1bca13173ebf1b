"""
Declaration parser.

Turns the module attribute of a node into an ordered list of
ModuleBindingSpec. Three spellings are understood:

    single    data-module="widgets.clock:Clock"
              (options and conditions read from their own attributes)
    object    data-module='[{"path": "a:A", "options": {...}, "conditions": "..."}]'
    tuple     data-module='[["a:A", "conditions", {...}], ["b:B", {...}]]'

In the tuple form a string in second position is the conditions and the
third position holds the options; otherwise the second position holds the
options and the third the conditions.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping, Optional, Sequence

from pydantic import ValidationError

from controllers.interfaces import TargetNode

from .errors import ArgumentError, ParseError
from .models import AttributeNames, ModuleBindingSpec

logger = logging.getLogger(__name__)


def parse_declaration(element: TargetNode, attributes: Optional[AttributeNames] = None, strict: bool = True) -> list[ModuleBindingSpec]:
    """Parse the binding declaration of ``element``."""
    attributes = attributes or AttributeNames()
    config = element.get_attribute(attributes.module) or ""

    if not config.startswith("["):
        return [
            ModuleBindingSpec(
                path=config,
                options=element.get_attribute(attributes.options),
                conditions=element.get_attribute(attributes.conditions),
            )
        ]

    try:
        entries = json.loads(config)
    except json.JSONDecodeError as exc:
        if strict:
            raise ParseError(f'"{attributes.module}" attribute contains malformed JSON: {exc}') from exc
        logger.warning("Ignoring malformed %s declaration on %r: %s", attributes.module, element, exc)
        return []

    if not isinstance(entries, list) or not entries:
        return []

    object_form = isinstance(entries[0], Mapping)
    specs = []
    for index, entry in enumerate(entries):
        try:
            specs.append(_object_entry(entry) if object_form else _tuple_entry(entry))
        except ParseError as exc:
            if strict:
                raise
            logger.warning("Skipping binding %d on %r: %s", index, element, exc.message)
    return specs


def _object_entry(entry: Any) -> ModuleBindingSpec:
    if not isinstance(entry, Mapping):
        raise ParseError(f"Expected a binding object, got {entry!r}")
    try:
        return ModuleBindingSpec.model_validate(entry)
    except ValidationError as exc:
        raise ParseError(f"Invalid binding object {entry!r}") from exc


def _tuple_entry(entry: Any) -> ModuleBindingSpec:
    if not isinstance(entry, list) or not 1 <= len(entry) <= 3:
        raise ParseError(f"Expected a [path, ...] list of 1 to 3 items, got {entry!r}")
    path, second, third = (entry + [None, None])[:3]
    if isinstance(second, str):
        conditions, options = second, third
    else:
        options, conditions = second, third
    try:
        return ModuleBindingSpec(path=path, options=options, conditions=conditions)
    except ValidationError as exc:
        raise ParseError(f"Invalid binding list {entry!r}") from exc


def build_specs(configs: Any, strict: bool = True) -> list[ModuleBindingSpec]:
    """
    Build specs from programmatic configuration.
    Accepts one mapping/ModuleBindingSpec or a sequence of them.
    """
    if configs is None:
        return []
    if isinstance(configs, (Mapping, ModuleBindingSpec)):
        configs = [configs]
    elif not isinstance(configs, Sequence) or isinstance(configs, (str, bytes)):
        raise ArgumentError(f"Unsupported binding configuration {configs!r}")

    specs = []
    for config in configs:
        try:
            specs.append(ModuleBindingSpec.model_validate(config))
        except ValidationError as exc:
            if strict:
                raise ArgumentError(f"Invalid binding configuration {config!r}") from exc
            logger.warning("Dropping invalid binding configuration %r", config)
    return specs


__all__ = ["build_specs", "parse_declaration"]
