"""CLI entry point for permiflow.

Invoked as::

    permiflow [OPTIONS] COMMAND [ARGS]...

or during development::

    python -m permiflow.cli.main

Commands
--------
- check     Check whether a role grants a permission key
- roles     List the roles declared in a config
- validate  Build the evaluator from a config and report errors
- version   Show version information
"""
from __future__ import annotations

import sys
from pathlib import Path
from typing import TYPE_CHECKING

import click
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from permiflow.errors import PermiflowError

if TYPE_CHECKING:
    from permiflow.evaluator import AccessEvaluator

console = Console()
err_console = Console(stderr=True)

_DEFAULT_CONFIG = Path("permiflow.yaml")

_config_option = click.option(
    "--config",
    "-c",
    "config_path",
    default=str(_DEFAULT_CONFIG),
    show_default=True,
    type=click.Path(exists=True, dir_okay=False),
    help="Path to a permiflow YAML config.",
)


def _load(config_path: str) -> AccessEvaluator:
    from permiflow.config.loader import load_evaluator

    try:
        return load_evaluator(Path(config_path))
    except PermiflowError as exc:
        err_console.print(f"[red]Config error:[/red] {exc}")
        sys.exit(1)


# ---------------------------------------------------------------------------
# Root command group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="permiflow")
def cli() -> None:
    """Permiflow CLI — role-based access checks from a YAML config."""


# ---------------------------------------------------------------------------
# version
# ---------------------------------------------------------------------------


@cli.command(name="version")
def version_command() -> None:
    """Show detailed version information."""
    from permiflow import __version__

    console.print(
        Panel(
            f"[bold]permiflow[/bold]  v[cyan]{__version__}[/cyan]\n"
            "Role-based access-control resolution engine.",
            title="Version",
            border_style="blue",
        )
    )


# ---------------------------------------------------------------------------
# check
# ---------------------------------------------------------------------------


@cli.command(name="check")
@_config_option
@click.option("--role", "-r", required=True, help="Role name to check.")
@click.option(
    "--permission",
    "-p",
    required=True,
    help="Permission key, e.g. 'user:123:read'.",
)
def check_command(config_path: str, role: str, permission: str) -> None:
    """Check whether a role grants a permission key."""
    evaluator = _load(config_path)
    decision = evaluator.explain_access(role, permission)

    status_str = "[green]ALLOWED[/green]" if decision.allowed else "[red]DENIED[/red]"
    console.print(Panel(status_str, title="Access Check", border_style="blue"))
    console.print(f"  Role:       [cyan]{role}[/cyan]")
    console.print(f"  Permission: [cyan]{permission}[/cyan]")
    console.print(f"  Reason:     {decision.describe()}")

    sys.exit(0 if decision.allowed else 1)


# ---------------------------------------------------------------------------
# roles
# ---------------------------------------------------------------------------


@cli.command(name="roles")
@_config_option
def roles_command(config_path: str) -> None:
    """List roles with their grants, denies and parents."""
    evaluator = _load(config_path)

    table = Table(title="Roles", box=box.SIMPLE)
    table.add_column("Role", style="cyan")
    table.add_column("Active")
    table.add_column("Granted", style="green")
    table.add_column("Denied", style="red")
    table.add_column("Inherits", style="magenta")

    for role in evaluator.list_roles():
        table.add_row(
            role.name,
            "yes" if role.is_active else "[red]no[/red]",
            ", ".join(sorted(role.permissions)),
            ", ".join(sorted(role.denied_permissions)),
            ", ".join(parent.name for parent in role.inherited_roles),
        )

    console.print(table)
    console.print(
        f"  Roles: [cyan]{len(evaluator.role_names)}[/cyan]  "
        f"Permissions: [cyan]{len(evaluator.registry)}[/cyan]"
    )


# ---------------------------------------------------------------------------
# validate
# ---------------------------------------------------------------------------


@cli.command(name="validate")
@_config_option
def validate_command(config_path: str) -> None:
    """Validate a config by building its evaluator."""
    evaluator = _load(config_path)
    console.print(
        Panel(
            f"[green]VALID[/green]  {config_path}\n"
            f"  Roles: {len(evaluator.role_names)}  "
            f"Permissions: {len(evaluator.registry)}",
            title="Config Validation",
            border_style="green",
        )
    )


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    cli()
