"""Graphviz DOT rendering of the dependency graph."""

from typing import Mapping

from devtracker.tracker.graph import DependencyGraph

# Upper bound (exclusive) -> fill color. 100% falls through to COMPLETE_COLOR.
PROGRESS_COLORS = [
    (25, "tomato"),
    (50, "gold"),
    (75, "lightblue"),
    (100, "palegreen"),
]
COMPLETE_COLOR = "limegreen"


def progress_color(percentage: int) -> str:
    for bound, color in PROGRESS_COLORS:
        if percentage < bound:
            return color
    return COMPLETE_COLOR


def _quote(name: str) -> str:
    return '"' + name.replace('"', '\\"') + '"'


def render_dot(graph: DependencyGraph, components: Mapping, title: str = "DependencyGraph") -> str:
    """Render nodes labelled with progress and edges dependency -> dependent.

    components maps name -> Component; names in the graph without a record
    are drawn at 0%.
    """
    lines = [
        f"digraph {_quote(title)} {{",
        "  rankdir=LR;",
        '  node [shape=box, style="rounded,filled", fontname="Arial"];',
        "",
    ]

    names = list(components)
    names.extend(n for n in graph.nodes if n not in components)
    for name in names:
        component = components.get(name)
        pct = component.completion_percentage if component else 0
        label = _quote(f"{name}\\n{pct}%")
        lines.append(f'  {_quote(name)} [label={label}, fillcolor="{progress_color(pct)}"];')

    lines.append("")
    for dependency, dependent in graph.edges():
        lines.append(f"  {_quote(dependency)} -> {_quote(dependent)};")

    lines.append("}")
    return "\n".join(lines) + "\n"
