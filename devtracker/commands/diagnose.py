"""
dt diagnose - Write the diagnostic report and dependency graph.
"""

from devtracker.context import TrackerContext
from devtracker.report.artifacts import write_dependency_dot, write_diagnostic_report


def cmd_diagnose(args, ctx: TrackerContext) -> int:
    """Generate reports/diagnostic-<timestamp>.json and print the summary."""
    reports_dir = ctx.config.reports_dir
    recent = args.recent if args.recent is not None else ctx.config.recent_activity_limit

    path = write_diagnostic_report(ctx.engine, reports_dir, recent)
    summary = ctx.engine.summary()

    print(f"Report generated at: {path}")
    print()
    overall = summary["overallProgress"]
    print(f"Overall Progress: {overall}%" if overall is not None else "Overall Progress: n/a")
    print(f"Components:       {summary['componentCount']}")
    print(f"Milestones:       {summary['completedMilestones']}/{summary['totalMilestones']} completed")
    if summary["readyForProduction"]:
        print("Ready for production")

    print()
    print("Status Breakdown:")
    for status, count in summary["statusBreakdown"].items():
        if count:
            print(f"  - {status}: {count}")

    if summary["blockers"]:
        print()
        print("Blockers:")
        for blocker in summary["blockers"]:
            print(f"  - {blocker['component']}:")
            for issue in blocker["issues"]:
                print(f"      * {issue}")

    if not args.no_graph:
        dot_path = write_dependency_dot(ctx.engine, reports_dir, title=ctx.config.project)
        print()
        print(f"Dependency graph saved to: {dot_path}")
        print(f"  Render with: dot -Tpng {dot_path} -o {dot_path.with_suffix('.png')}")

    return 0
