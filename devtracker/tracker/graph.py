"""
Component dependency graph.

Built once from configuration and shared read-only by every consumer.
graph.dependencies_of("A") == ("B", "C") means A depends on B and C.
Reverse edges are derived by inverting the table; nothing is persisted.
"""

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Sequence

from devtracker.lib import constants

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Blocker:
    """A dependency that is not yet in a satisfied status."""
    name: str
    status: str

    def to_dict(self) -> dict:
        return {"name": self.name, "status": self.status}


@dataclass(frozen=True)
class Readiness:
    """Whether all direct dependencies are satisfied."""
    ready: bool
    blockers: list[Blocker] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"ready": self.ready, "blockers": [b.to_dict() for b in self.blockers]}


class DependencyGraph:
    """Immutable directed graph of component -> prerequisites."""

    def __init__(self, dependencies: Mapping[str, Sequence[str]], components: Sequence[str] = ()):
        """
        Args:
            dependencies: Component name -> ordered prerequisite names
            components: Declaration order of all components. Names that only
                appear in the dependency table are appended after these.
        """
        order: list[str] = []
        for name in components:
            if name not in order:
                order.append(name)
        for name, deps in dependencies.items():
            if name not in order:
                order.append(name)
            for dep in deps:
                if dep not in order:
                    order.append(dep)

        edges = {}
        for name in order:
            deps = []
            for dep in dependencies.get(name, ()):
                if dep not in deps:
                    deps.append(dep)
            edges[name] = tuple(deps)

        self._nodes = tuple(order)
        self._edges = MappingProxyType(edges)

        cycle = self.find_cycle()
        if cycle:
            logger.warning(f"[GRAPH] Dependency cycle detected: {' -> '.join(cycle)}")

    @classmethod
    def from_config(cls, config) -> "DependencyGraph":
        return cls(config.dependencies, config.components)

    @property
    def nodes(self) -> tuple[str, ...]:
        return self._nodes

    @property
    def has_edges(self) -> bool:
        return any(self._edges.values())

    def edges(self) -> list[tuple[str, str]]:
        """All (dependency, dependent) pairs in declaration order."""
        return [(dep, name) for name in self._nodes for dep in self._edges[name]]

    def dependencies_of(self, name: str) -> tuple[str, ...]:
        return self._edges.get(name, ())

    def dependents_of(self, name: str) -> tuple[str, ...]:
        return tuple(n for n in self._nodes if name in self._edges[n])

    def roots(self) -> list[str]:
        """Components with no dependencies."""
        return [n for n in self._nodes if not self._edges[n]]

    def sinks(self) -> list[str]:
        """Components nothing depends on."""
        return [n for n in self._nodes if not self.dependents_of(n)]

    def readiness(self, name: str, components: Mapping) -> Readiness:
        """Check whether name's direct dependencies are all satisfied.

        Args:
            name: Component to check
            components: Mapping of name -> record with a .status attribute

        Returns:
            Readiness with blockers in declaration order. A dependency with
            no record is reported with status "Unknown".
        """
        blockers = []
        for dep in self.dependencies_of(name):
            record = components.get(dep)
            status = record.status if record is not None else constants.UNKNOWN_STATUS
            if status not in constants.SATISFIED_STATUSES:
                blockers.append(Blocker(name=dep, status=status))
        return Readiness(ready=not blockers, blockers=blockers)

    def find_cycle(self) -> list[str] | None:
        """Return one cycle as [a, b, ..., a], or None if the graph is acyclic."""
        visiting: set[str] = set()
        done: set[str] = set()
        stack: list[str] = []

        def visit(node: str) -> list[str] | None:
            visiting.add(node)
            stack.append(node)
            for dep in self._edges.get(node, ()):
                if dep in visiting:
                    return stack[stack.index(dep):] + [dep]
                if dep not in done:
                    found = visit(dep)
                    if found:
                        return found
            stack.pop()
            visiting.discard(node)
            done.add(node)
            return None

        for node in self._nodes:
            if node not in done:
                found = visit(node)
                if found:
                    return found
        return None
