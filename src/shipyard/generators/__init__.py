"""Generators for dependency diagrams."""

from shipyard.generators.dot import generate_dot
from shipyard.generators.mermaid import generate_mermaid

__all__ = [
    "generate_dot",
    "generate_mermaid",
]
