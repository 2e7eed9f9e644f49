"""
Shipyard - Declarative local infrastructure with dependency ordering.

This package provides tools for:
- Declaring networks, clusters, containers, helm releases and other resources
- Addressing resources as ``type.name`` and resolving references between them
- Building a cycle-free dependency graph and a deterministic apply order
- Tracking the provisioning status of each resource
- Generating dependency diagrams (Mermaid, Graphviz)
"""

__version__ = "0.1.0"

from shipyard.core.graph import GraphBuilder, ResourceGraph, build_graph
from shipyard.core.registry import Config
from shipyard.core.resolver import ReferenceResolver

__all__ = [
    "__version__",
    "Config",
    "GraphBuilder",
    "ReferenceResolver",
    "ResourceGraph",
    "build_graph",
]
