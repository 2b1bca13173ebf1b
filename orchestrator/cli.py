"""
This file is the entry point for the 'nodebind' command-line tool.
Run 'nodebind' in your shell to scan a document tree or parse a declaration.
"""
import json
import logging
from pathlib import Path
from types import SimpleNamespace
from typing import Optional

import typer
from rich.markup import escape
from rich.table import Table

from common.app_setup import monkeypatch_print, print_and_log, print_error, setup_logging
from controllers.module_controller import resolve_module

from .errors import BindingError
from .loader import ModuleLoader
from .models import coerce_loader_options
from .parser import parse_declaration
from .scheduler import schedule
from .tree import Node, load_document

app = typer.Typer(add_completion=False, help="Scan node trees for module bindings and show how they activate.")


@app.callback()
def main(
    log_file: Optional[Path] = typer.Option(None, help="Write logs to this file instead of ~/.nodebind/log.txt"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug messages to the console"),
):
    if verbose:
        setup_logging(app_name="nodebind", console=True, loglevel=logging.DEBUG)
    else:
        setup_logging(app_name="nodebind", logfile=str(log_file) if log_file else None)
    monkeypatch_print()


def _placeholder_resolver(path: str):
    """Stand-in resolver used when modules are not imported."""
    return SimpleNamespace


def _load_options(config: Optional[Path], lenient: bool):
    options = coerce_loader_options(config)
    if lenient:
        options = options.merge({"strict": False})
    return options


@app.command()
def scan(
    document: Path = typer.Argument(..., exists=True, dir_okay=False, help="YAML or JSON document tree"),
    config: Optional[Path] = typer.Option(None, exists=True, dir_okay=False, help="Loader options file (YAML/JSON)"),
    lenient: bool = typer.Option(False, "--lenient", help="Degrade malformed declarations instead of failing"),
    import_modules: bool = typer.Option(False, "--import-modules/--no-import-modules", help="Import and start the bound modules"),
):
    """Scan DOCUMENT and print the activation order of its annotated nodes."""
    try:
        options = _load_options(config, lenient)
        root = load_document(document)
        loader = ModuleLoader(options, resolver=resolve_module if import_modules else _placeholder_resolver)
        controllers = loader.scan(root)
    except (BindingError, ValueError, TypeError) as e:
        print_error(f"Scan failed: {e}")
        raise typer.Exit(1)

    if not controllers:
        print_and_log("No annotated nodes found.")
        return

    table = Table(title=f"Activation order ({len(controllers)} nodes)")
    table.add_column("#", justify="right")
    table.add_column("Node")
    table.add_column("Priority", justify="right")
    table.add_column("Modules")
    for position, controller in enumerate(schedule(controllers), start=1):
        modules = ", ".join(
            f"{mc.path}{'' if mc.is_active else ' (pending)'}" for mc in controller.get_module_controllers()
        )
        table.add_row(str(position), escape(controller.element.path()), str(controller.priority), escape(modules))
    print(table)
    print_and_log(f"Bound {len(controllers)} node(s).")


@app.command()
def parse(
    declaration: str = typer.Argument(..., help="Value of the module attribute"),
    options: Optional[str] = typer.Option(None, help="Options attribute (single-binding form only)"),
    conditions: Optional[str] = typer.Option(None, help="Conditions attribute (single-binding form only)"),
    lenient: bool = typer.Option(False, "--lenient", help="Return no bindings instead of failing on malformed input"),
):
    """Parse a single DECLARATION and print the resulting bindings as JSON."""
    loader_options = coerce_loader_options(None)
    names = loader_options.attributes
    attributes = {names.module: declaration}
    if options is not None:
        attributes[names.options] = options
    if conditions is not None:
        attributes[names.conditions] = conditions
    try:
        specs = parse_declaration(Node(tag="node", attributes=attributes), names, strict=not lenient)
    except BindingError as e:
        print_error(f"Parse failed: {e.message}")
        raise typer.Exit(1)
    typer.echo(json.dumps([spec.model_dump() for spec in specs], indent=2))


if __name__ == "__main__":
    app()
