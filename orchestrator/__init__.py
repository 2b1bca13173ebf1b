"""Declarative module binding: parse node declarations and manage their controllers."""

from .errors import ArgumentError, BindingError, ParseError
from .loader import ModuleLoader
from .models import AttributeNames, LoaderOptions, ModuleBindingSpec, NodeDocument, coerce_loader_options
from .parser import build_specs, parse_declaration
from .scheduler import schedule
from .tree import Node, build_tree, load_document, query_by_attribute

__all__ = [
    "ArgumentError",
    "AttributeNames",
    "BindingError",
    "LoaderOptions",
    "ModuleBindingSpec",
    "ModuleLoader",
    "Node",
    "NodeDocument",
    "ParseError",
    "build_specs",
    "build_tree",
    "coerce_loader_options",
    "load_document",
    "parse_declaration",
    "query_by_attribute",
    "schedule",
]
