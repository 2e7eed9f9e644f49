"""Main CLI entry point for shipyard."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import click
from rich.console import Console
from rich.logging import RichHandler

from shipyard import __version__
from shipyard.core.schema import ResourceType

console = Console()

DEFAULT_CONFIG = "."


class Context:
    """CLI context object passed to commands."""

    def __init__(self) -> None:
        self.config_path: Path | None = None
        self.verbose: bool = False
        self._config: Any = None

    @property
    def config(self) -> Any:
        """Lazy-load config."""
        if self._config is None:
            from shipyard.config.loader import ConfigLoader
            from shipyard.core.errors import ShipyardError

            if not (self.config_path and self.config_path.is_dir()):
                raise click.ClickException(f"Config folder not found: {self.config_path}")
            try:
                self._config = ConfigLoader().load_folder(self.config_path)
            except ShipyardError as e:
                raise click.ClickException(str(e)) from e
        return self._config


pass_context = click.make_pass_decorator(Context, ensure=True)


def configure_logging(verbose: bool) -> None:
    """Send shipyard log records through rich."""
    logger = logging.getLogger("shipyard")
    logger.handlers.clear()
    if verbose:
        logger.addHandler(RichHandler(console=Console(stderr=True), show_path=False))
        logger.setLevel(logging.DEBUG)
    else:
        logger.setLevel(logging.WARNING)


@click.group()
@click.version_option(version=__version__, prog_name="shipyard")
@click.option(
    "-c",
    "--config",
    type=click.Path(exists=False, file_okay=False, path_type=Path),
    default=DEFAULT_CONFIG,
    envvar="SHIPYARD_CONFIG",
    show_envvar=True,
    help="Folder containing the blueprint and resource files",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output")
@pass_context
def cli(ctx: Context, config: Path, verbose: bool) -> None:
    """
    Shipyard - Declarative local infrastructure.

    Validate resource declarations and compute the order
    in which they are applied.
    """
    ctx.config_path = config
    ctx.verbose = verbose
    configure_logging(verbose)


# Import and register subcommands
from shipyard.cli.graph import diagram, order
from shipyard.cli.validate import validate

cli.add_command(diagram)
cli.add_command(order)
cli.add_command(validate)


@cli.command()
@pass_context
def info(ctx: Context) -> None:
    """Show blueprint and resource summary."""
    from rich.table import Table

    try:
        config = ctx.config
    except click.ClickException as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)

    console.print(f"\n[bold]Shipyard v{__version__}[/bold]\n")

    if config.blueprint:
        console.print("[bold cyan]Blueprint[/bold cyan]")
        console.print(f"  Title: {config.blueprint.title or '-'}")
        console.print(f"  Author: {config.blueprint.author or '-'}")
        console.print(f"  Slug: {config.blueprint.slug or '-'}")

    console.print("\n[bold cyan]Resource Summary[/bold cyan]")
    console.print(f"  Path: {ctx.config_path}")
    console.print(f"  Total resources: {config.resource_count()}")

    if len(config) > 0:
        table = Table(title="Resources by Type")
        table.add_column("Type", style="cyan")
        table.add_column("Count", justify="right")

        for rtype in ResourceType:
            count = len(config.by_type(rtype))
            if count > 0:
                table.add_row(rtype.value, str(count))

        console.print(table)


@cli.command()
@click.option(
    "--type",
    "-t",
    "resource_type",
    type=click.Choice([t.value for t in ResourceType]),
    help="Filter to a resource type",
)
@pass_context
def resources(ctx: Context, resource_type: str | None) -> None:
    """List all declared resources."""
    from rich.table import Table

    from shipyard.core.status import Status

    try:
        config = ctx.config
    except click.ClickException as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)

    items = config.by_type(resource_type) if resource_type else list(config)
    if not items:
        console.print("[yellow]No resources declared[/yellow]")
        return

    table = Table(title="Resources")
    table.add_column("Address", style="cyan")
    table.add_column("Type")
    table.add_column("Status")
    table.add_column("Depends On")

    for resource in items:
        status_style = {
            Status.APPLIED: "green",
            Status.FAILED: "red",
            Status.PENDING_MODIFICATION: "yellow",
        }.get(resource.status, "dim")
        table.add_row(
            resource.address,
            resource.type.value,
            f"[{status_style}]{resource.status.value}[/{status_style}]",
            ", ".join(resource.depends_on) or "-",
        )

    console.print(table)


if __name__ == "__main__":
    cli()
