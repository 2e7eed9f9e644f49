"""Apply order and diagram CLI commands."""

from __future__ import annotations

import json
from pathlib import Path

import click
from rich.console import Console

from shipyard.cli.main import Context, pass_context

console = Console()


def _load_graph(ctx: Context):
    from shipyard.core.errors import ShipyardError
    from shipyard.core.graph import build_graph

    try:
        return build_graph(ctx.config)
    except click.ClickException as e:
        console.print(f"[red]Error:[/red] {e.message}")
        raise SystemExit(1)
    except ShipyardError as e:
        console.print(f"[red]Graph error:[/red] {e}")
        raise SystemExit(1)


@click.command()
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format",
)
@pass_context
def order(ctx: Context, output_format: str) -> None:
    """
    Print the order in which resources are applied.

    Examples:

        # One address per line
        shipyard order

        # Order, edges and status as JSON
        shipyard order --format json
    """
    graph = _load_graph(ctx)

    if output_format == "json":
        click.echo(json.dumps(graph.to_dict(), indent=2))
        return

    for resource in graph.topological_order():
        click.echo(resource.address)


@click.command()
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(["mermaid", "dot"]),
    default="mermaid",
    help="Output format",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write to a file instead of stdout",
)
@pass_context
def diagram(ctx: Context, output_format: str, output: Path | None) -> None:
    """
    Generate a dependency diagram.

    Examples:

        shipyard diagram --format dot -o resources.dot
    """
    from shipyard.generators import generate_dot, generate_mermaid

    graph = _load_graph(ctx)

    if output_format == "dot":
        content = generate_dot(graph)
    else:
        blueprint = ctx.config.blueprint
        content = generate_mermaid(graph, title=blueprint.title if blueprint else None)

    if output is None:
        click.echo(content)
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(content)
    console.print(f"[green]✓[/green] Generated {output}")
