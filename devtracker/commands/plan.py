"""
dt plan - Development plan: where things stand and what to do next.
"""

from devtracker.context import TrackerContext
from devtracker.lib.timestamps import parse_timestamp


def _date(value: str | None) -> str:
    parsed = parse_timestamp(value)
    return parsed.date().isoformat() if parsed else "-"


def cmd_plan(args, ctx: TrackerContext) -> int:
    """Print status groups, upcoming milestones, critical path and recommendations."""
    engine = ctx.engine
    records = ctx.components.all()

    print("=== CURRENT STATUS ===")
    print()
    for status, names in engine.status_groups().items():
        if not names:
            continue
        print(f"{status}:")
        for name in names:
            print(f"  - {name} ({records[name].completion_percentage}%)")
        print()

    print("=== UPCOMING MILESTONES ===")
    print()
    upcoming = engine.upcoming_milestones()
    if not upcoming:
        print("No upcoming milestones with target dates.")
        print()
    for entry in upcoming:
        print(f"[{_date(entry['targetDate'])}] {entry['milestone']} ({entry['progress']}% complete)")
        members = ctx.milestones.get(entry["milestone"]).components
        for member in members:
            component = records.get(member)
            if component is not None:
                print(f"  - {member} ({component.status}, {component.completion_percentage}%)")
        print()

    print("=== CRITICAL PATH ===")
    print()
    path = engine.critical_path()
    if not path:
        print("No dependencies found in project.")
    else:
        print("The following components are on the critical path:")
        for i, name in enumerate(path):
            component = records.get(name)
            state = f"{component.status}, {component.completion_percentage}%" if component else "not tracked"
            arrow = " ->" if i < len(path) - 1 else ""
            print(f"  {name} ({state}){arrow}")
    print()

    print("=== RECOMMENDATIONS ===")
    print()
    plan = engine.recommendations()

    if plan.blocked:
        print("1. Resolve blockers:")
        for blocker in plan.blocked:
            print(f"  - Unblock {blocker['component']}:")
            for issue in blocker["issues"]:
                print(f"      * {issue}")
        print()

    if plan.ready:
        print("2. Focus on these components next:")
        for entry in plan.ready:
            tag = " [CRITICAL]" if entry["critical"] else ""
            print(f"  - {entry['component']} ({entry['status']}, {entry['progress']}%){tag}")
        print()

    focus = plan.milestone_focus
    if focus.milestone:
        print(f'3. Focus on completing the "{focus.milestone}" milestone ({focus.progress}% complete):')
        for entry in focus.components:
            print(f"  - {entry['component']} ({entry['status']}, {entry['progress']}%)")
        print()

    if not (plan.blocked or plan.ready or focus.milestone):
        print("Nothing to recommend.")
    return 0
