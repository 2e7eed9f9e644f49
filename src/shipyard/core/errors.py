"""Exceptions raised by the resource registry, resolver and graph builder."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from shipyard.core.status import Status


class ShipyardError(Exception):
    """Base class for all shipyard errors."""

    pass


class ResourceNotFoundError(ShipyardError):
    """Raised when an address has no matching resource."""

    def __init__(self, address: str, referenced_by: str | None = None) -> None:
        self.address = address
        self.referenced_by = referenced_by
        if referenced_by:
            message = f"Resource not found: {address} (referenced by {referenced_by})"
        else:
            message = f"Resource not found: {address}"
        super().__init__(message)


class ResourceExistsError(ShipyardError):
    """Raised when a resource address is already taken."""

    def __init__(self, address: str) -> None:
        self.address = address
        super().__init__(f"Resource already exists: {address}")


class WANExistsError(ResourceExistsError):
    """Raised when a configuration redeclares the reserved wan network."""

    def __init__(self, address: str = "network.wan") -> None:
        self.address = address
        ShipyardError.__init__(
            self, f"The wan network is reserved and can not be redeclared: {address}"
        )


class MalformedAddressError(ShipyardError):
    """Raised when an address does not split into exactly two non-empty segments."""

    def __init__(self, raw: str, referenced_by: str | None = None) -> None:
        self.raw = raw
        self.referenced_by = referenced_by
        message = f"Malformed resource address '{raw}', expected 'type.name'"
        if referenced_by:
            message = f"{message} (referenced by {referenced_by})"
        super().__init__(message)


class DependencyCycleError(ShipyardError):
    """Raised when the declared dependencies form a cycle.

    ``cycle`` is the closed path of addresses, e.g. ``["container.a",
    "container.b", "container.a"]``.
    """

    def __init__(self, cycle: list[str]) -> None:
        self.cycle = list(cycle)
        super().__init__(f"Dependency cycle detected: {' -> '.join(self.cycle)}")

    @property
    def edge(self) -> tuple[str, str]:
        """The edge that closes the cycle, as (dependency, dependent)."""
        return self.cycle[-2], self.cycle[-1]


class InvalidTransitionError(ShipyardError):
    """Raised when a status change is not in the transition table."""

    def __init__(self, address: str, current: Status, target: Status) -> None:
        self.address = address
        self.current = current
        self.target = target
        super().__init__(
            f"Invalid status transition for {address}: {current.value} -> {target.value}"
        )


class UnknownResourceTypeError(ShipyardError):
    """Raised when a type tag has no registered resource variant."""

    def __init__(self, resource_type: str) -> None:
        self.resource_type = resource_type
        super().__init__(f"Unknown resource type: {resource_type}")


class ConfigLoadError(ShipyardError):
    """Raised when a configuration file can not be read or decoded."""

    def __init__(self, message: str, file: str | None = None) -> None:
        self.file = file
        if file:
            message = f"{file}: {message}"
        super().__init__(message)
