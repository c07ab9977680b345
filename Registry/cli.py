"""Framework registry CLI.

This command-line interface inspects the object types an application knows about and checks input files.

Subcommands:
- registry: List the object types registered in an application
- dump: Print the parameters (with defaults and documentation) of an object type
- check: Build the objects described by a TOML input file and report them

Example usage:
    # List the object types of the base framework application
    python -m Registry registry --app Framework

    # Show the parameters of the generated mesh
    python -m Registry dump GeneratedMesh

    # Build an input file (initializing the mesh) and print the object graph
    python -m Registry check --input path/to/input.toml --init-mesh
"""

import argparse
import logging
from pathlib import Path
from typing import Sequence

from rich.console import Console
from rich.table import Table

from config import load_input_config
from lib.loggingutils import log_global, setup_logging

from .app import AppFactory, app_factory
from .parameters import ParamEnum

console: Console = Console()
logger: logging.Logger = logging.getLogger(__name__)

_DEFAULT_APP: str = "Framework"


def _registry(args: argparse.Namespace, apps: AppFactory) -> None:
    """List registered object types."""
    app = apps.create_app(args.app)
    table = Table(title=f"Object types registered in '{app.name}'")
    table.add_column("Type")
    table.add_column("Class")
    for type_name in app.factory.registered_types():
        cls = app.factory.get_class(type_name)
        table.add_row(type_name, f"{cls.__module__}.{cls.__qualname__}")
    console.print(table)


def _dump(args: argparse.Namespace, apps: AppFactory) -> None:
    """Print the public parameters of an object type."""
    app = apps.create_app(args.app)
    params = app.factory.get_valid_params(args.type)

    table = Table(title=f"Parameters of '{args.type}'")
    table.add_column("Name")
    table.add_column("Type")
    table.add_column("Default")
    table.add_column("Required")
    table.add_column("Description")
    for name, param in params.public_items():
        if isinstance(param.value, ParamEnum):
            type_name = f"enum({' '.join(param.value.choices)})"
        else:
            type_name = param.type_name
        default = str(param.value) if param.is_valid else "-"
        table.add_row(name, type_name, default, "yes" if param.required else "", param.doc)
    console.print(table)


def _check(args: argparse.Namespace, apps: AppFactory) -> None:
    """Build the objects of an input file."""
    cfg = load_input_config(args.input)
    app_name = args.app or cfg.app or _DEFAULT_APP
    log_global(logger, logging.INFO, "Checking input '%s' with application '%s'.", args.input, app_name)

    app = apps.create_app(app_name, cfg.app_args)
    mesh, problem = app.build_from_input(cfg)
    if args.init_mesh:
        problem.init()

    table = Table(title=f"Objects built from '{args.input.name}'")
    table.add_column("Name")
    table.add_column("Type")
    table.add_column("Details")
    table.add_row(mesh.name, mesh.type, repr(mesh))
    table.add_row(problem.name, problem.type, f"solve={problem.solve}")
    for uo in problem.user_objects:
        table.add_row(uo.name, uo.type, "execute_on=" + ",".join(sorted(uo.execute_on)))
    console.print(table)


def main(argv: Sequence[str] | None = None, apps: AppFactory = app_factory) -> None:
    """Registry CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Framework object registry: list, dump, check",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("--verbose", action="store_true", help="Enable verbose logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    # registry
    reg = subparsers.add_parser("registry", help="List registered object types")
    reg.add_argument("--app", default=_DEFAULT_APP, help="Registered application name")
    reg.set_defaults(func=_registry)

    # dump
    dump = subparsers.add_parser("dump", help="Print the parameters of an object type")
    dump.add_argument("type", help="Registered object type")
    dump.add_argument("--app", default=_DEFAULT_APP, help="Registered application name")
    dump.set_defaults(func=_dump)

    # check
    check = subparsers.add_parser("check", help="Build the objects of an input file")
    check.add_argument("--input", "-i", type=Path, required=True, help="TOML input file")
    check.add_argument("--app", help="Registered application name (overrides the input file)")
    check.add_argument("--init-mesh", action="store_true", help="Also build the dolfinx mesh")
    check.set_defaults(func=_check)

    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    try:
        args.func(args, apps)
    except Exception as e:
        log_global(logger, logging.ERROR, "Error during CLI execution: %s", e)
        raise SystemExit(1)
