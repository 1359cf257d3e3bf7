"""
dt sync - Record a component's progress estimated from its git repository.
"""

from pathlib import Path

from devtracker.context import TrackerContext
from devtracker.git.progress import estimate_progress


def cmd_sync(args, ctx: TrackerContext) -> int:
    """Estimate progress from --repo and record it against args.component."""
    name = args.component
    ctx.components.get(name)

    repo = Path(args.repo).expanduser() if args.repo else ctx.config.root
    estimate = estimate_progress(repo)

    print(f"{name}: {estimate.implemented_files}/{estimate.total_files} implementation files "
          f"-> {estimate.percentage}%")
    if args.dry_run:
        print("Dry run, nothing recorded.")
        return 0

    result = ctx.components.update_progress(name, estimate.percentage, estimate.details)
    print(f"Updated {name} progress to {result.component.completion_percentage}%")
    if result.follow_up:
        print(f"  Status set to {result.follow_up}.")
    return 0
