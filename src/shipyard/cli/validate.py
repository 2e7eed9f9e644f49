"""Validation CLI command."""

from __future__ import annotations

import click
from rich.console import Console

from shipyard.cli.main import Context, pass_context

console = Console()


@click.command()
@pass_context
def validate(ctx: Context) -> None:
    """
    Validate resource declarations.

    Checks that every file decodes, every reference resolves and the
    dependencies are free of cycles.

    Examples:

        shipyard -c ./stack validate
    """
    from shipyard.core.errors import ShipyardError
    from shipyard.core.graph import build_graph
    from shipyard.core.resolver import ReferenceResolver

    errors: list[str] = []

    console.print("[bold]Loading config...[/bold]")
    try:
        config = ctx.config
        console.print(f"  [green]✓[/green] Config loaded: {len(config)} resources")
    except click.ClickException as e:
        console.print(f"  [red]✗[/red] Config failed to load: {e.message}")
        raise SystemExit(1)

    console.print("[bold]Checking references...[/bold]")
    reference_errors = ReferenceResolver(config).validate_all()
    if reference_errors:
        for err in reference_errors:
            errors.append(err)
            console.print(f"  [red]✗[/red] {err}")
    else:
        console.print("  [green]✓[/green] All references resolvable")

    if not reference_errors:
        console.print("[bold]Building dependency graph...[/bold]")
        try:
            graph = build_graph(config)
            console.print(
                f"  [green]✓[/green] Graph built: {len(graph)} nodes, {len(graph.edges())} edges"
            )
        except ShipyardError as e:
            errors.append(str(e))
            console.print(f"  [red]✗[/red] {e}")

    console.print("\n[bold]Validation Summary[/bold]")
    console.print(f"  Errors: {len(errors)}")

    if errors:
        console.print("\n[red bold]Validation failed[/red bold]")
        for err in errors:
            console.print(f"  [red]•[/red] {err}")
        raise SystemExit(1)

    console.print("\n[green bold]Validation passed[/green bold]")
