"""Graphviz DOT diagram generation."""

from __future__ import annotations

from collections import defaultdict
from typing import TYPE_CHECKING

from shipyard.core.status import Status

if TYPE_CHECKING:
    from shipyard.core.graph import ResourceGraph
    from shipyard.core.schema import Resource

STATUS_COLORS = {
    Status.PENDING_CREATION: "lightgray",
    Status.APPLIED: "lightgreen",
    Status.PENDING_MODIFICATION: "lightyellow",
    Status.FAILED: "lightpink",
}


def node_ids(graph: ResourceGraph) -> dict[str, str]:
    """Map each address to an identifier built from its registration position."""
    return {resource.address: f"n{i}" for i, resource in enumerate(graph.nodes())}


def quote(label: str) -> str:
    """Escape a label for use inside a double-quoted DOT string."""
    return label.replace("\\", "\\\\").replace('"', '\\"')


def generate_dot(graph: ResourceGraph) -> str:
    """
    Generate Graphviz DOT diagram.

    Can be rendered with: dot -Tpng resources.dot -o resources.png
    """
    ids = node_ids(graph)
    lines = [
        "digraph Resources {",
        "    rankdir=LR;",
        "    node [shape=box, style=filled];",
        "",
    ]

    # Group resources by type
    groups: dict[str, list[Resource]] = defaultdict(list)
    for resource in graph.nodes():
        groups[resource.type.value].append(resource)

    for group, resources in sorted(groups.items()):
        lines.append(f"    subgraph cluster_{group} {{")
        lines.append(f'        label="{group}";')
        lines.append("        style=dashed;")
        lines.append("        color=gray;")
        lines.append("")

        for resource in resources:
            fillcolor = STATUS_COLORS[resource.status]
            lines.append(
                f'        {ids[resource.address]} [label="{quote(resource.name)}", fillcolor={fillcolor}];'
            )

        lines.append("    }")
        lines.append("")

    lines.append("    // Dependencies")
    for dependency, dependent in graph.edges():
        lines.append(f"    {ids[dependency]} -> {ids[dependent]};")

    lines.append("}")

    return "\n".join(lines)
