"""
dt log - Record development activity for one component.

Non-interactive use passes one action flag:

    dt log BingoBackend --status "In Progress"
    dt log BingoBackend --progress 60 --details "API routes done"
    dt log BingoBackend --issue "Auth tokens expire early"
    dt log BingoBackend --resolve 1 --resolution "Fixed clock skew"

Without an action flag the operator is walked through a menu.
"""

from devtracker.context import TrackerContext
from devtracker.lib.errors import IndexOutOfRange
from devtracker.lib.prompts import Prompter
from devtracker.tracker.components import ChangeResult

ACTIONS = [
    "Update Status",
    "Update Phase",
    "Update Progress",
    "Add Note",
    "Report Issue",
    "Resolve Issue",
]


def open_issue_index(component, number: int) -> int:
    """Map a 1-based open-issue number (as listed to the operator) to its list index.

    Raises:
        IndexOutOfRange: number does not name an open issue
    """
    positions = [i for i, issue in enumerate(component.issues) if not issue.resolved]
    if number < 1 or number > len(positions):
        raise IndexOutOfRange(component.name, number, len(positions))
    return positions[number - 1]


def _report(result: ChangeResult, message: str) -> None:
    if not result.applied:
        print("No changes made.")
        return
    print(message)
    if result.off_path:
        print(f"  Note: {result.component.status} is outside the usual lifecycle")
    if result.follow_up:
        print(f"  Status set to {result.follow_up}.")


def _run_flags(args, ctx: TrackerContext, name: str) -> int | None:
    """Apply the first action flag given. Returns None when there is none."""
    tracker = ctx.components
    details = args.details or ""

    if args.status:
        result = tracker.update_status(name, args.status, details)
        _report(result, f"Status updated to {args.status}.")
        return 0 if result.applied else 1
    if args.phase:
        _report(tracker.update_phase(name, args.phase, details), f"Phase updated to {args.phase}.")
        return 0
    if args.progress is not None:
        result = tracker.update_progress(name, args.progress, details)
        _report(result, f"Progress updated to {result.component.completion_percentage}%.")
        return 0
    if args.note:
        _report(tracker.add_note(name, args.note), "Note added.")
        return 0
    if args.issue:
        _report(tracker.add_issue(name, args.issue), "Issue reported.")
        return 0
    if args.resolve is not None:
        index = open_issue_index(tracker.get(name), args.resolve)
        _report(tracker.resolve_issue(name, index, args.resolution or ""), "Issue resolved.")
        return 0
    return None


def _run_menu(ctx: TrackerContext, name: str, prompter: Prompter) -> int:
    tracker = ctx.components
    config = ctx.config
    action = prompter.choose("Select action:", ACTIONS)

    if action == "Update Status":
        current = tracker.get(name).status
        suggested = tracker.next_statuses(name)
        if suggested:
            print(f"Usual next status: {', '.join(suggested)}")
            default = config.statuses.index(suggested[0]) + 1
        else:
            default = config.statuses.index(current) + 1 if current in config.statuses else 1
        status = prompter.choose("Select new status:", config.statuses, default)
        details = prompter.ask("Details (optional)")
        result = tracker.update_status(name, status, details)
        _report(result, f"Status updated to {status}.")
        return 0 if result.applied else 1

    if action == "Update Phase":
        current = tracker.get(name).phase
        default = config.phases.index(current) + 1 if current in config.phases else 1
        phase = prompter.choose("Select new phase:", config.phases, default)
        details = prompter.ask("Details (optional)")
        _report(tracker.update_phase(name, phase, details), f"Phase updated to {phase}.")
        return 0

    if action == "Update Progress":
        value = prompter.ask("Enter completion percentage (0-100)", "0")
        details = prompter.ask("Details (optional)")
        result = tracker.update_progress(name, value, details)
        _report(result, f"Progress updated to {result.component.completion_percentage}%.")
        return 0

    if action == "Add Note":
        text = prompter.ask("Enter note")
        if not text:
            print("No note entered. No changes made.")
            return 0
        _report(tracker.add_note(name, text), "Note added.")
        return 0

    if action == "Report Issue":
        text = prompter.ask("Describe the issue")
        if not text:
            print("No issue entered. No changes made.")
            return 0
        _report(tracker.add_issue(name, text), "Issue reported.")
        return 0

    # Resolve Issue
    component = tracker.get(name)
    open_issues = component.open_issues
    if not open_issues:
        print("No open issues to resolve.")
        return 0
    # Numbered labels keep issues with identical text apart
    labels = [f"{n}. {issue.content}" for n, issue in enumerate(open_issues, 1)]
    choice = prompter.choose("Select issue to resolve:", labels)
    number = labels.index(choice) + 1
    resolution = prompter.ask("Resolution details (optional)")
    index = open_issue_index(component, number)
    _report(tracker.resolve_issue(name, index, resolution), "Issue resolved.")
    return 0


def cmd_log(args, ctx: TrackerContext) -> int:
    """Record one change for args.component."""
    prompter = ctx.components.prompter
    name = args.component
    component = ctx.components.get(name)

    rc = _run_flags(args, ctx, name)
    if rc is not None:
        return rc

    if not args.interactive:
        print("ERROR: No action given. Use --status, --phase, --progress, --note, --issue or --resolve.")
        return 2

    print(f"Logging development for {name}")
    print(f"  Status:   {component.status}")
    print(f"  Phase:    {component.phase}")
    print(f"  Progress: {component.completion_percentage}%")
    return _run_menu(ctx, name, prompter)
