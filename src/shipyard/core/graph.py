"""Dependency graph over registered resources."""

from __future__ import annotations

import heapq
import logging
from typing import Any, Iterator

from shipyard.core.errors import DependencyCycleError, ResourceNotFoundError
from shipyard.core.registry import Config
from shipyard.core.resolver import ReferenceResolver
from shipyard.core.schema import Resource
from shipyard.core.status import Status

logger = logging.getLogger(__name__)


class ResourceGraph:
    """
    Directed acyclic graph of resources.

    An edge ``dependency -> dependent`` means the dependency must be applied
    before the dependent starts. The graph is a derived view of the
    ``depends_on`` lists; rebuild it when the config changes.
    """

    def __init__(self, resources: list[Resource], dependencies: dict[str, list[str]]) -> None:
        self._nodes: dict[str, Resource] = {r.address: r for r in resources}
        self._position: dict[str, int] = {address: i for i, address in enumerate(self._nodes)}
        # dependent -> dependencies, declared order
        self._dependencies: dict[str, tuple[str, ...]] = {
            address: tuple(dependencies.get(address, ())) for address in self._nodes
        }
        # dependency -> dependents, registration order
        dependents: dict[str, list[str]] = {address: [] for address in self._nodes}
        for address in self._nodes:
            for dependency in self._dependencies[address]:
                dependents[dependency].append(address)
        self._dependents: dict[str, tuple[str, ...]] = {
            address: tuple(items) for address, items in dependents.items()
        }
        self._order: list[str] | None = None

    def _node(self, address: str) -> Resource:
        try:
            return self._nodes[address]
        except KeyError:
            raise ResourceNotFoundError(address) from None

    def get(self, address: str) -> Resource | None:
        return self._nodes.get(address)

    def nodes(self) -> list[Resource]:
        """All resources, in registration order."""
        return list(self._nodes.values())

    def edges(self) -> list[tuple[str, str]]:
        """All edges as (dependency, dependent) address pairs."""
        return sorted(
            (
                (dependency, dependent)
                for dependent, dependencies in self._dependencies.items()
                for dependency in dependencies
            ),
            key=lambda e: (self._position[e[0]], self._position[e[1]]),
        )

    def dependencies(self, address: str) -> list[Resource]:
        """Direct dependencies of a resource."""
        self._node(address)
        return [self._nodes[a] for a in self._dependencies[address]]

    def dependents(self, address: str) -> list[Resource]:
        """Resources that directly depend on a resource."""
        self._node(address)
        return [self._nodes[a] for a in self._dependents[address]]

    def ancestors(self, address: str) -> list[Resource]:
        """All transitive dependencies of a resource, in topological order."""
        self._node(address)
        seen: set[str] = set()
        stack = list(self._dependencies[address])
        while stack:
            current = stack.pop()
            if current in seen:
                continue
            seen.add(current)
            stack.extend(self._dependencies[current])
        return [r for r in self.topological_order() if r.address in seen]

    def topological_order(self) -> list[Resource]:
        """
        Resources ordered so every dependency precedes its dependents.

        Uses Kahn's algorithm; among resources that are ready at the same
        time the earliest registered goes first, so the order is stable
        across runs for the same input.
        """
        if self._order is None:
            indegree = {address: len(deps) for address, deps in self._dependencies.items()}
            ready = [self._position[a] for a, degree in indegree.items() if degree == 0]
            heapq.heapify(ready)
            addresses = list(self._nodes)
            order: list[str] = []

            while ready:
                address = addresses[heapq.heappop(ready)]
                order.append(address)
                for dependent in self._dependents[address]:
                    indegree[dependent] -= 1
                    if indegree[dependent] == 0:
                        heapq.heappush(ready, self._position[dependent])

            if len(order) != len(self._nodes):
                cycle = GraphBuilder._find_cycle(
                    self.nodes(), {a: list(d) for a, d in self._dependencies.items()}
                )
                raise DependencyCycleError(cycle or [a for a in addresses if a not in order])
            self._order = order

        return [self._nodes[a] for a in self._order]

    def ready(self) -> list[Resource]:
        """
        Resources that can be applied now.

        A resource is ready when it is not applied yet and every one of its
        dependencies reports ``applied``. Failed resources are not ready.
        """
        return [
            r
            for r in self.topological_order()
            if r.status in (Status.PENDING_CREATION, Status.PENDING_MODIFICATION)
            and all(self._nodes[d].status == Status.APPLIED for d in self._dependencies[r.address])
        ]

    def to_dict(self) -> dict[str, Any]:
        return {
            "order": [r.address for r in self.topological_order()],
            "edges": [{"from": a, "to": b} for a, b in self.edges()],
            "resources": {
                r.address: {
                    "type": r.type.value,
                    "status": r.status.value,
                    "depends_on": list(self._dependencies[r.address]),
                }
                for r in self.nodes()
            },
        }

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[Resource]:
        return iter(self.topological_order())

    def __contains__(self, address: str) -> bool:
        return address in self._nodes


class GraphBuilder:
    """
    Builds a :class:`ResourceGraph` from a populated config.

    Building is read-only: the config and its resources are never modified,
    whether or not the build succeeds.
    """

    def __init__(self, config: Config) -> None:
        self._config = config
        self._resolver = ReferenceResolver(config)

    def build(self) -> ResourceGraph:
        """
        Resolve every dependency and check the result is acyclic.

        Raises:
            ResourceNotFoundError: if a ``depends_on`` entry is not registered
            MalformedAddressError: if a ``depends_on`` entry is not ``type.name``
            DependencyCycleError: if the dependencies form a cycle
        """
        resources = self._config.resources
        resolved = self._resolver.resolve()
        dependencies = {
            address: [d.address for d in deps] for address, deps in resolved.items()
        }

        cycle = self._find_cycle(resources, dependencies)
        if cycle:
            raise DependencyCycleError(cycle)

        graph = ResourceGraph(resources, dependencies)
        logger.debug("Built graph with %d nodes and %d edges", len(graph), len(graph.edges()))
        return graph

    @staticmethod
    def _find_cycle(
        resources: list[Resource], dependencies: dict[str, list[str]]
    ) -> list[str] | None:
        """
        Depth-first search along dependency -> dependent edges.

        Returns the first cycle found as a closed path of addresses, visiting
        resources in registration order.
        """
        dependents: dict[str, list[str]] = {r.address: [] for r in resources}
        for r in resources:
            for dependency in dependencies[r.address]:
                dependents[dependency].append(r.address)

        visited: set[str] = set()
        for root in dependents:
            if root in visited:
                continue
            path: list[str] = [root]
            on_path: set[str] = {root}
            stack: list[Iterator[str]] = [iter(dependents[root])]
            visited.add(root)

            while stack:
                child = next(stack[-1], None)
                if child is None:
                    stack.pop()
                    on_path.discard(path.pop())
                    continue
                if child in on_path:
                    return path[path.index(child):] + [child]
                if child in visited:
                    continue
                visited.add(child)
                path.append(child)
                on_path.add(child)
                stack.append(iter(dependents[child]))

        return None


def build_graph(config: Config) -> ResourceGraph:
    """Build the dependency graph for a config."""
    return GraphBuilder(config).build()
