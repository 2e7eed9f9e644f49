"""Registry of declared resources."""

from __future__ import annotations

import logging
from typing import Any, Iterator

from shipyard.core.errors import (
    MalformedAddressError,
    ResourceExistsError,
    ResourceNotFoundError,
)
from shipyard.core.schema import (
    Blueprint,
    Network,
    Resource,
    ResourceType,
    new_resource,
    parse_address,
)

logger = logging.getLogger(__name__)

WAN_NAME = "wan"
WAN_SUBNET = "10.200.0.0/16"


class Config:
    """
    Ordered collection of resources plus an optional blueprint.

    Resources are addressed as ``type.name`` and each address may only be
    registered once. Insertion order is kept and used as the tie-break
    when ordering independent resources.
    """

    def __init__(self, blueprint: Blueprint | None = None) -> None:
        self.blueprint = blueprint
        self._resources: list[Resource] = []
        # address -> Resource
        self._address_index: dict[str, Resource] = {}
        # address -> registration position
        self._position_index: dict[str, int] = {}

    @classmethod
    def new(cls) -> Config:
        """Create a config holding the reserved wan network."""
        config = cls()
        config.add_resource(Network(name=WAN_NAME, subnet=WAN_SUBNET))
        return config

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Config:
        """
        Create a config from plain data.

        Expects ``{"blueprint": {...}, "resources": [{"type": ..., "name": ..., ...}]}``.
        """
        blueprint_data = data.get("blueprint")
        config = cls(Blueprint(**blueprint_data) if blueprint_data else None)
        for item in data.get("resources", []):
            attributes = dict(item)
            resource_type = attributes.pop("type")
            name = attributes.pop("name")
            config.add_resource(new_resource(resource_type, name, **attributes))
        return config

    def add_resource(self, resource: Resource) -> None:
        """
        Append a resource.

        Raises:
            ResourceExistsError: if the address is already registered
        """
        address = resource.address
        if address in self._address_index:
            raise ResourceExistsError(address)

        self._position_index[address] = len(self._resources)
        self._resources.append(resource)
        self._address_index[address] = resource
        logger.debug("Registered %s", address)

    def find_resource(self, address: str) -> Resource:
        """
        Find a resource by its ``type.name`` address.

        e.g. to find a cluster named k3s: ``config.find_resource("cluster.k3s")``

        Raises:
            MalformedAddressError: if the address is not ``type.name``
            ResourceNotFoundError: if nothing is registered at the address
        """
        resource_type, name = parse_address(address)
        resource = self._address_index.get(f"{resource_type}.{name}")
        if resource is None:
            raise ResourceNotFoundError(address)
        return resource

    def get(self, address: str) -> Resource | None:
        """Find a resource, returning None when it is missing or malformed."""
        try:
            return self.find_resource(address)
        except (MalformedAddressError, ResourceNotFoundError):
            return None

    def index_of(self, address: str) -> int:
        """Registration position of a resource."""
        try:
            return self._position_index[address]
        except KeyError:
            raise ResourceNotFoundError(address) from None

    def resource_count(self) -> int:
        return len(self._resources)

    def by_type(self, resource_type: ResourceType | str) -> list[Resource]:
        """Get all resources of a type, in registration order."""
        resource_type = ResourceType(resource_type)
        return [r for r in self._resources if r.type == resource_type]

    def types(self) -> set[ResourceType]:
        """Get all resource types present."""
        return {r.type for r in self._resources}

    @property
    def resources(self) -> list[Resource]:
        """Copy of the resource list in registration order."""
        return list(self._resources)

    def __len__(self) -> int:
        return len(self._resources)

    def __iter__(self) -> Iterator[Resource]:
        return iter(self._resources)

    def __contains__(self, address: str) -> bool:
        return self.get(address) is not None

    def __repr__(self) -> str:
        return f"Config({len(self)} resources)"
