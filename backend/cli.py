"""
CRUD API CLI.

Command-line interface for database setup, inspecting the relationship
registry and running cascades by hand.
"""

from typing import List

import typer
from rich.console import Console
from rich.table import Table

from crud_api.models import Base, MODEL_MAP
from crud_api.services.cascade import CascadeError, CascadeResult, CascadeService
from crud_api.services.registry import REGISTRY
from shared.config.constants import AuditFields
from shared.config.logging import setup_logging
from shared.infrastructure.db import engine, get_db_context

app = typer.Typer(
    name="crud-api",
    help="CRUD API management CLI",
    add_completion=False,
)
console = Console()


def _print_counts(result: CascadeResult, title: str) -> None:
    table = Table(title=title)
    table.add_column("Entity", style="cyan")
    table.add_column("Records", justify="right")
    for entity, count in result.counts.items():
        table.add_row(entity, str(count))
    console.print(table)


def _require_entity(entity: str) -> None:
    if entity not in REGISTRY:
        console.print(f"[red]✗ Unknown entity '{entity}'[/red]")
        raise typer.Exit(1)


# =============================================================================
# Database Commands
# =============================================================================

@app.command()
def init_db():
    """Create all tables."""
    Base.metadata.create_all(bind=engine)
    console.print(f"[green]✓ {len(Base.metadata.tables)} tables created/verified[/green]")


# =============================================================================
# Registry Commands
# =============================================================================

@app.command()
def registry(
    check: bool = typer.Option(False, "--check", help="Validate the table against the models"),
):
    """Show the relationship table."""
    table = Table(title="Relationship registry")
    table.add_column("Entity", style="cyan")
    table.add_column("Referenced by")

    for entity in REGISTRY.entities():
        groups = REGISTRY.dependents_of(entity)
        refs = ", ".join(f"{g.source}({'|'.join(g.fields)})" for g in groups)
        table.add_row(entity, refs or "[dim]-[/dim]")
    console.print(table)

    if check:
        problems = REGISTRY.validate(MODEL_MAP)
        if problems:
            for problem in problems:
                console.print(f"[red]✗ {problem}[/red]")
            raise typer.Exit(1)
        console.print("[green]✓ Registry matches the models[/green]")


# =============================================================================
# Cascade Commands
# =============================================================================

@app.command()
def count(
    entity: str = typer.Argument(..., help="Entity name, e.g. Chat_group"),
    ids: List[int] = typer.Option(..., "--id", help="Root record id (repeatable)"),
):
    """Show what deleting the given records would take along."""
    _require_entity(entity)
    with get_db_context() as db:
        result = CascadeService(db).count(entity, {"id": ids})

    if not result.found:
        console.print(f"[yellow]{result.message}[/yellow]")
        raise typer.Exit(1)
    _print_counts(result, f"Dependents of {entity} {ids}")


@app.command()
def delete(
    entity: str = typer.Argument(..., help="Entity name"),
    ids: List[int] = typer.Option(..., "--id", help="Root record id (repeatable)"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
):
    """Hard delete records and everything that references them."""
    _require_entity(entity)
    with get_db_context() as db:
        service = CascadeService(db)
        warning = service.count(entity, {"id": ids})
        if not warning.found:
            console.print(f"[yellow]{warning.message}[/yellow]")
            raise typer.Exit(1)

        _print_counts(warning, f"Deleting {entity} {ids} also removes")
        if not yes and not typer.confirm("Proceed?"):
            console.print("[yellow]Aborted[/yellow]")
            raise typer.Exit(1)

        try:
            result = service.hard_delete(entity, {"id": ids})
        except CascadeError as e:
            console.print(f"[red]✗ Delete failed: {e.message}[/red]")
            raise typer.Exit(1)

    _print_counts(result, "Deleted")
    console.print(f"[green]✓ {result.message}[/green]")


@app.command()
def soft_delete(
    entity: str = typer.Argument(..., help="Entity name"),
    ids: List[int] = typer.Option(..., "--id", help="Root record id (repeatable)"),
    actor: int = typer.Option(..., "--actor", help="Acting user id recorded in updated_by"),
):
    """Mark records and everything that references them as deleted."""
    _require_entity(entity)
    values = {AuditFields.IS_DELETED: True, AuditFields.UPDATED_BY: actor}
    with get_db_context() as db:
        try:
            result = CascadeService(db).soft_delete(entity, {"id": ids}, values)
        except CascadeError as e:
            console.print(f"[red]✗ Soft delete failed: {e.message}[/red]")
            raise typer.Exit(1)

    if not result.found:
        console.print(f"[yellow]{result.message}[/yellow]")
        raise typer.Exit(1)
    _print_counts(result, "Soft deleted")
    console.print(f"[green]✓ {result.message}[/green]")


# =============================================================================
# Info
# =============================================================================

@app.command()
def version():
    """Show version information."""
    import platform

    console.print("[bold]CRUD API[/bold]")
    console.print("Version: 0.1.0")
    console.print(f"Python: {platform.python_version()}")


@app.callback()
def main():
    setup_logging()


if __name__ == "__main__":
    app()
