"""Resolution of declared resource references."""

from __future__ import annotations

import logging

from shipyard.core.errors import MalformedAddressError, ResourceNotFoundError
from shipyard.core.registry import Config
from shipyard.core.schema import Resource

logger = logging.getLogger(__name__)


class ReferenceResolver:
    """
    Resolves ``type.name`` addresses into registered resources.

    ``depends_on`` entries become graph edges; reference attributes such as a
    container's ``network`` are only resolvable on demand via
    :meth:`resolve_attribute`. Lookups never fall back to bare names, the
    type segment is always required.
    """

    def __init__(self, config: Config) -> None:
        self._config = config

    def lookup(self, address: str, referenced_by: str | None = None) -> Resource:
        """
        Get the resource registered at an address.

        Raises:
            MalformedAddressError: if the address is not ``type.name``
            ResourceNotFoundError: if nothing is registered at the address
        """
        try:
            return self._config.find_resource(address)
        except ResourceNotFoundError:
            raise ResourceNotFoundError(address, referenced_by) from None
        except MalformedAddressError:
            raise MalformedAddressError(address, referenced_by) from None

    def dependencies(self, resource: Resource) -> list[Resource]:
        """Resolve the ``depends_on`` list of one resource, in declared order."""
        resolved: list[Resource] = []
        seen: set[str] = set()
        for address in resource.depends_on:
            dependency = self.lookup(address, referenced_by=resource.address)
            if dependency.address in seen:
                continue
            seen.add(dependency.address)
            resolved.append(dependency)
        return resolved

    def resolve(self) -> dict[str, list[Resource]]:
        """
        Resolve the dependencies of every registered resource.

        Returns a mapping of resource address to its resolved dependencies,
        in registration order. Fails on the first unresolvable entry; no
        partial result is returned.
        """
        resolved = {resource.address: self.dependencies(resource) for resource in self._config}
        logger.debug(
            "Resolved %d dependencies across %d resources",
            sum(len(deps) for deps in resolved.values()),
            len(resolved),
        )
        return resolved

    def resolve_attribute(self, resource: Resource, field: str) -> Resource | None:
        """
        Resolve a reference attribute, e.g. a container's ``network``.

        Returns None when the attribute is unset.
        """
        if field not in resource.reference_fields:
            raise ValueError(f"{resource.address} has no reference attribute '{field}'")
        address = getattr(resource, field)
        if not address:
            return None
        return self.lookup(address, referenced_by=resource.address)

    def validate_all(self) -> list[str]:
        """
        Validate all references can be resolved.

        Returns list of error messages (empty if all valid).
        """
        errors = []
        for resource in self._config:
            for address in resource.depends_on:
                try:
                    self.lookup(address, referenced_by=resource.address)
                except (MalformedAddressError, ResourceNotFoundError) as e:
                    errors.append(str(e))
            for field, address in resource.references().items():
                try:
                    self.lookup(address, referenced_by=f"{resource.address}.{field}")
                except (MalformedAddressError, ResourceNotFoundError) as e:
                    errors.append(str(e))
        return errors
