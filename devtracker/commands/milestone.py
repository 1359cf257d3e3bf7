"""
dt milestone - List, create, update and complete milestones.

    dt milestone list
    dt milestone create "Beta" --components BingoFlash,BingoBackend --target 2025-06-30
    dt milestone update "Beta" --add BingoCore --status "In Progress"
    dt milestone complete "Beta"
"""

from devtracker.context import TrackerContext
from devtracker.lib import constants
from devtracker.lib.prompts import Prompter
from devtracker.lib.timestamps import parse_timestamp
from devtracker.tracker.models import (
    AddMember,
    AddMilestoneNote,
    RemoveMember,
    ReplaceMembers,
    SetMilestoneStatus,
    SetTargetDate,
    parse_target_date,
)


def _split_names(value: str | None) -> list[str]:
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


def _format_date(value: str | None) -> str:
    parsed = parse_timestamp(value)
    return parsed.date().isoformat() if parsed else "none"


def _confirm_incomplete(ctx: TrackerContext, name: str, prompter: Prompter) -> bool:
    """Warn when completing a milestone whose members are not done."""
    progress = ctx.milestones.calculate_progress(name)
    if progress >= 100:
        return True
    prompter.notify(f"Warning: Milestone is only {progress}% complete.")
    return prompter.confirm("Mark as completed anyway?")


def cmd_milestone_list(args, ctx: TrackerContext) -> int:
    milestones = ctx.milestones.all()
    if not milestones:
        print("No milestones found.")
        return 0

    for milestone in milestones.values():
        progress = ctx.milestones.calculate_progress(milestone.name)
        print(f"[{milestone.name}] - {milestone.status} ({progress}%)")
        if milestone.target_date:
            print(f"  Target: {_format_date(milestone.target_date)}")
        if milestone.completed_at:
            print(f"  Completed: {_format_date(milestone.completed_at)}")
        if milestone.components:
            print("  Components:")
            for member in milestone.components:
                component = ctx.components.find(member)
                if component is None:
                    print(f"    - {member} (not tracked)")
                else:
                    print(f"    - {member} ({component.status}, {component.completion_percentage}%)")
        if getattr(args, "notes", False) and milestone.notes:
            print("  Notes:")
            for note in milestone.notes:
                print(f"    - {note.content}")
        print()
    return 0


def cmd_milestone_create(args, ctx: TrackerContext) -> int:
    target, ok = parse_target_date(args.target)
    if not ok:
        print(f"WARNING: Invalid date format '{args.target}'. Using no target date.")

    milestone = ctx.milestones.create(args.name, _split_names(args.components), target_date=target)
    members = ", ".join(milestone.components) or "no components"
    print(f'Milestone "{milestone.name}" created ({members}).')
    return 0


def cmd_milestone_update(args, ctx: TrackerContext) -> int:
    name = args.name
    prompter = ctx.components.prompter
    ctx.milestones.get(name)

    updates = []
    if args.target is not None:
        target, ok = parse_target_date(args.target)
        if not ok:
            print(f"ERROR: Invalid date format '{args.target}'. No changes made.")
            return 1
        updates.append(SetTargetDate(target))
    if args.replace is not None:
        updates.append(ReplaceMembers(tuple(_split_names(args.replace))))
    for component in args.add or []:
        updates.append(AddMember(component))
    for component in args.remove or []:
        updates.append(RemoveMember(component))
    if args.note:
        updates.append(AddMilestoneNote(args.note))
    if args.status:
        if args.status == constants.COMPLETED and not _confirm_incomplete(ctx, name, prompter):
            print("No changes made.")
            return 1
        updates.append(SetMilestoneStatus(args.status))

    if not updates:
        print("ERROR: Nothing to update. Use --status, --target, --add, --remove, --replace or --note.")
        return 2

    milestone = ctx.milestones.update(name, *updates)
    print(f'Milestone "{name}" updated: {milestone.status}, target {_format_date(milestone.target_date)}, '
          f"components {', '.join(milestone.components) or 'none'}.")
    return 0


def cmd_milestone_complete(args, ctx: TrackerContext) -> int:
    name = args.name
    prompter = ctx.components.prompter
    milestone = ctx.milestones.get(name)
    if milestone.status == constants.COMPLETED:
        print(f'Milestone "{name}" is already completed.')
        return 0

    if not _confirm_incomplete(ctx, name, prompter):
        print("No changes made.")
        return 1

    ctx.milestones.complete(name)
    print(f'Milestone "{name}" completed.')
    return 0
