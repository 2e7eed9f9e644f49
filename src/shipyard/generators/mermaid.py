"""Mermaid diagram generation."""

from __future__ import annotations

from collections import defaultdict
from typing import TYPE_CHECKING

from shipyard.core.status import Status
from shipyard.generators.dot import node_ids

if TYPE_CHECKING:
    from shipyard.core.graph import ResourceGraph
    from shipyard.core.schema import Resource


def quote(label: str) -> str:
    """Escape a label for use inside a quoted Mermaid node text."""
    return label.replace('"', "#quot;")


def generate_mermaid(graph: ResourceGraph, title: str | None = None) -> str:
    """
    Generate Mermaid flowchart diagram.

    Returns Markdown with embedded Mermaid diagram.
    """
    ids = node_ids(graph)
    lines = [f"# {title or 'Resource Dependencies'}", "", "```mermaid", "flowchart LR"]

    groups: dict[str, list[Resource]] = defaultdict(list)
    for resource in graph.nodes():
        groups[resource.type.value].append(resource)

    for group, resources in sorted(groups.items()):
        lines.append(f"    subgraph {group}")
        for resource in resources:
            lines.append(f'        {ids[resource.address]}["{quote(resource.name)}"]')
        lines.append("    end")

    lines.append("")
    lines.append("    %% Dependencies")
    for dependency, dependent in graph.edges():
        # Dashed while the dependency still has to be applied
        if graph.get(dependency).status == Status.APPLIED:
            arrow = "-->"
        else:
            arrow = "-.->"
        lines.append(f"    {ids[dependency]} {arrow} {ids[dependent]}")

    lines.append("```")
    lines.append("")
    lines.append("## Legend")
    lines.append("")
    lines.append("- `-->` Dependency applied")
    lines.append("- `-.->` Dependency pending")

    return "\n".join(lines)
