"""ASCII rendering of the dependency graph, prerequisites above dependents."""

from typing import Mapping

from devtracker.lib import constants
from devtracker.tracker.graph import DependencyGraph

STATUS_SYMBOLS = {
    constants.COMPLETED: "✅",
    constants.IN_PROGRESS: "🔄",
    constants.BLOCKED: "🚫",
    constants.REVIEW: "👀",
    constants.NOT_STARTED: "⏳",
}
UNKNOWN_SYMBOL = "❓"


def status_symbol(status: str) -> str:
    return STATUS_SYMBOLS.get(status, UNKNOWN_SYMBOL)


def render_tree(graph: DependencyGraph, components: Mapping) -> list[str]:
    """One line per component, dependents indented under their prerequisite.

    Each component is printed once, under the first prerequisite that reaches
    it. Components only reachable through a cycle are listed at the top level
    afterwards.
    """
    lines: list[str] = []
    seen: set[str] = set()

    def visit(name: str, level: int) -> None:
        if name in seen:
            return
        seen.add(name)
        component = components.get(name)
        status = component.status if component else constants.UNKNOWN_STATUS
        pct = component.completion_percentage if component else 0
        lines.append(f"{'  ' * level}{status_symbol(status)} {name} ({pct}%)")
        for dependent in graph.dependents_of(name):
            visit(dependent, level + 1)

    for root in graph.roots():
        visit(root, 0)
    for name in graph.nodes:
        visit(name, 0)
    return lines
