"""
dt dependencies - Per-component dependency analysis and ASCII graph.
"""

from devtracker.context import TrackerContext
from devtracker.report.tree import render_tree


def _describe(analysis: dict, name: str) -> str:
    entry = analysis.get(name)
    if entry is None:
        return f"{name} (not tracked)"
    return f"{name} ({entry['status']}, {entry['progress']}%)"


def cmd_dependencies(args, ctx: TrackerContext) -> int:
    """Show what each component needs, what needs it, and whether it can proceed."""
    if not args.tree_only:
        analysis = ctx.engine.dependency_analysis()
        for name, entry in analysis.items():
            print(f"[{name}] - {entry['status']} ({entry['progress']}%)")

            if entry["dependencies"]:
                print("  Depends on:")
                for dep in entry["dependencies"]:
                    print(f"    - {_describe(analysis, dep)}")
            else:
                print("  No dependencies")

            if entry["dependents"]:
                print("  Required by:")
                for dep in entry["dependents"]:
                    print(f"    - {_describe(analysis, dep)}")
            else:
                print("  Not required by any component")

            print(f"  Ready to proceed: {'Yes' if entry['readyToProceed'] else 'No'}")
            if entry["blockers"]:
                print("  Blockers:")
                for blocker in entry["blockers"]:
                    print(f"    - {blocker['name']} ({blocker['status']})")
            print()

    print("Dependency Graph:")
    for line in render_tree(ctx.graph, ctx.components.all()):
        print(line)

    cycle = ctx.graph.find_cycle()
    if cycle:
        print()
        print(f"WARNING: dependency cycle {' -> '.join(cycle)}")
    return 0
