"""Core domain models for resource dependencies."""

from shipyard.core.errors import (
    DependencyCycleError,
    MalformedAddressError,
    ResourceExistsError,
    ResourceNotFoundError,
    ShipyardError,
)
from shipyard.core.graph import GraphBuilder, ResourceGraph, build_graph
from shipyard.core.registry import Config
from shipyard.core.resolver import ReferenceResolver
from shipyard.core.schema import Resource, ResourceType, new_resource, parse_address
from shipyard.core.status import Status

__all__ = [
    "Config",
    "DependencyCycleError",
    "GraphBuilder",
    "MalformedAddressError",
    "ReferenceResolver",
    "Resource",
    "ResourceExistsError",
    "ResourceGraph",
    "ResourceNotFoundError",
    "ResourceType",
    "ShipyardError",
    "Status",
    "build_graph",
    "new_resource",
    "parse_address",
]
