"""Pydantic models for bindings, loader configuration and serialized trees."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator


class ModuleBindingSpec(BaseModel):
    """One module-to-node binding before activation."""

    path: str
    options: Any = None
    conditions: Optional[str] = None


class AttributeNames(BaseModel):
    """Attribute keys under which declarations are read from a node."""

    model_config = ConfigDict(frozen=True)

    module: str = Field(default="data-module", min_length=1)
    options: str = Field(default="data-options", min_length=1)
    conditions: str = Field(default="data-conditions", min_length=1)
    priority: str = Field(default="data-priority", min_length=1)


class LoaderOptions(BaseModel):
    """Configuration handed to a ModuleLoader at construction."""

    model_config = ConfigDict(frozen=True)

    attributes: AttributeNames = Field(default_factory=AttributeNames)
    strict: bool = Field(default=True, description="Raise ArgumentError/ParseError instead of degrading")

    def merge(self, patch: Mapping[str, Any]) -> LoaderOptions:
        """Return new options with ``patch`` applied (attributes merged key by key)."""
        payload = self.model_dump(mode="python")
        patch = dict(patch)
        attributes = patch.pop("attributes", None)
        if attributes:
            payload["attributes"].update(attributes)
        payload.update(patch)
        return LoaderOptions.model_validate(payload)


class NodeDocument(BaseModel):
    """Serialized form of a node tree."""

    tag: str = "node"
    attributes: dict[str, str] = Field(default_factory=dict)
    children: list[NodeDocument] = Field(default_factory=list)

    @field_validator("attributes", mode="before")
    @classmethod
    def _stringify_attributes(cls, value: Any) -> Any:
        # attributes are always text on a node; structured values become JSON
        if not isinstance(value, Mapping):
            return value
        result = {}
        for key, item in value.items():
            if item is None:
                continue
            result[str(key)] = item if isinstance(item, str) else json.dumps(item)
        return result


# ---------------------------------------------------------------------------
# helpers


def coerce_loader_options(value: Any) -> LoaderOptions:
    """Normalize supported inputs into a LoaderOptions instance."""
    if value is None:
        return LoaderOptions()
    if isinstance(value, LoaderOptions):
        return value
    payload = _coerce_payload(value, "loader options")
    try:
        return LoaderOptions.model_validate(payload)
    except ValidationError as exc:
        raise ValueError("Invalid loader options payload") from exc


def coerce_document(value: Any) -> NodeDocument:
    """Normalize supported inputs into a NodeDocument instance."""
    if isinstance(value, NodeDocument):
        return value
    payload = _coerce_payload(value, "document")
    try:
        return NodeDocument.model_validate(payload)
    except ValidationError as exc:
        raise ValueError("Invalid document payload") from exc


def _coerce_payload(value: Any, what: str) -> Mapping[str, Any]:
    if isinstance(value, Mapping):
        return value
    if isinstance(value, (str, bytes)):
        payload = _load_text_payload(value)
    elif isinstance(value, Path):
        payload = _load_text_payload(value.read_text())
    else:
        raise TypeError(f"Unsupported value for {what}")
    if not isinstance(payload, Mapping):
        raise ValueError(f"Invalid {what} payload: expected a mapping")
    return payload


def _load_text_payload(raw: str | bytes) -> Any:
    """Interpret raw text as YAML first, falling back to JSON."""
    text = raw.decode() if isinstance(raw, bytes) else raw
    try:
        return yaml.safe_load(text) or {}
    except yaml.YAMLError:
        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise ValueError("Text is neither YAML nor JSON") from exc


__all__ = [
    "AttributeNames",
    "LoaderOptions",
    "ModuleBindingSpec",
    "NodeDocument",
    "coerce_document",
    "coerce_loader_options",
]
