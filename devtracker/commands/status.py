"""
dt status - Component status table and open issues.
"""

from devtracker.context import TrackerContext
from devtracker.lib.timestamps import parse_timestamp

HEADERS = ["Component", "Status", "Phase", "Progress", "Last Updated"]


def format_table(rows: list[list[str]]) -> list[str]:
    """Left-aligned columns padded to the widest cell plus two spaces."""
    widths = [max(len(str(row[i])) for row in rows) for i in range(len(rows[0]))]
    return ["".join(str(cell).ljust(widths[i] + 2) for i, cell in enumerate(row)).rstrip() for row in rows]


def _format_updated(value: str) -> str:
    parsed = parse_timestamp(value)
    return parsed.strftime("%Y-%m-%d %H:%M") if parsed else (value or "-")


def cmd_status(args, ctx: TrackerContext) -> int:
    """Show every component and the open issues across the project."""
    rows = [HEADERS, ["-" * len(h) for h in HEADERS]]
    for component in ctx.components.all().values():
        rows.append([
            component.name,
            component.status,
            component.phase,
            f"{component.completion_percentage}%",
            _format_updated(component.last_updated),
        ])

    print(f"{ctx.config.project}: component status")
    print("=" * 60)
    print()
    for line in format_table(rows):
        print(line)

    overall = ctx.engine.overall_progress()
    print()
    print(f"Overall progress: {overall}%" if overall is not None else "Overall progress: n/a")

    open_issues = ctx.engine.aggregate_issues()["open"]
    if open_issues:
        print()
        print("Open Issues:")
        for i, issue in enumerate(open_issues, 1):
            print(f"  {i}. [{issue['component']}] {issue['content']}")

    return 0
