#!/usr/bin/env python3
"""dt CLI entrypoint."""

import argparse
import logging
import sys

from devtracker.commands import dependencies as cmd_dependencies_module
from devtracker.commands import diagnose as cmd_diagnose_module
from devtracker.commands import history as cmd_history_module
from devtracker.commands import log as cmd_log_module
from devtracker.commands import milestone as cmd_milestone_module
from devtracker.commands import plan as cmd_plan_module
from devtracker.commands import status as cmd_status_module
from devtracker.commands import sync as cmd_sync_module
from devtracker.context import TrackerContext
from devtracker.lib.config import resolve_root
from devtracker.lib.errors import ConfigError, TrackerError
from devtracker.lib.prompts import AutoPrompter, ConsolePrompter, Prompter
from devtracker.lib.validate import ValidationError

logger = logging.getLogger(__name__)


def get_prompter(args) -> Prompter:
    """--yes answers every question yes, --no-input answers no."""
    if args.yes:
        return AutoPrompter(assume_yes=True)
    if args.no_input:
        return AutoPrompter(assume_yes=False)
    return ConsolePrompter()


def get_context(args) -> TrackerContext:
    return TrackerContext.load(resolve_root(args.root), prompter=get_prompter(args))


def cmd_status(args):
    return cmd_status_module.cmd_status(args, get_context(args))


def cmd_log(args):
    return cmd_log_module.cmd_log(args, get_context(args))


def cmd_diagnose(args):
    return cmd_diagnose_module.cmd_diagnose(args, get_context(args))


def cmd_dependencies(args):
    return cmd_dependencies_module.cmd_dependencies(args, get_context(args))


def cmd_milestone_list(args):
    return cmd_milestone_module.cmd_milestone_list(args, get_context(args))


def cmd_milestone_create(args):
    return cmd_milestone_module.cmd_milestone_create(args, get_context(args))


def cmd_milestone_update(args):
    return cmd_milestone_module.cmd_milestone_update(args, get_context(args))


def cmd_milestone_complete(args):
    return cmd_milestone_module.cmd_milestone_complete(args, get_context(args))


def cmd_plan(args):
    return cmd_plan_module.cmd_plan(args, get_context(args))


def cmd_history(args):
    return cmd_history_module.cmd_history(args, get_context(args))


def cmd_sync(args):
    return cmd_sync_module.cmd_sync(args, get_context(args))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='dt', description='Development progress tracker')
    parser.add_argument('--root', '-r', help='Tracker root directory (default: $DEVTRACKER_ROOT or cwd)')
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable debug logging')
    answers = parser.add_mutually_exclusive_group()
    answers.add_argument('--yes', '-y', action='store_true', help='Answer yes to every confirmation')
    answers.add_argument('--no-input', action='store_true', help='Never prompt; answer no to confirmations')
    subparsers = parser.add_subparsers(dest='command', required=True)

    # dt status
    p_status = subparsers.add_parser('status', help='Show component status table')
    p_status.set_defaults(func=cmd_status)

    # dt log
    p_log = subparsers.add_parser('log', help='Record development activity for a component')
    p_log.add_argument('component', help='Component name')
    actions = p_log.add_mutually_exclusive_group()
    actions.add_argument('--status', '-s', help='Set status')
    actions.add_argument('--phase', help='Set phase')
    actions.add_argument('--progress', '-p', help='Set completion percentage (0-100)')
    actions.add_argument('--note', '-n', help='Add a note')
    actions.add_argument('--issue', '-i', help='Report an issue')
    actions.add_argument('--resolve', type=int, metavar='N', help='Resolve open issue number N (as listed)')
    p_log.add_argument('--details', '-d', help='Details recorded with status/phase/progress changes')
    p_log.add_argument('--resolution', help='Resolution recorded with --resolve')
    p_log.set_defaults(func=cmd_log)

    # dt diagnose
    p_diagnose = subparsers.add_parser('diagnose', help='Write diagnostic report and dependency graph')
    p_diagnose.add_argument('--recent', type=int, help='Recent activity entries to include')
    p_diagnose.add_argument('--no-graph', action='store_true', help='Skip writing the DOT graph')
    p_diagnose.set_defaults(func=cmd_diagnose)

    # dt dependencies
    p_deps = subparsers.add_parser('dependencies', help='Show dependency analysis')
    p_deps.add_argument('--tree-only', action='store_true', help='Only print the ASCII graph')
    p_deps.set_defaults(func=cmd_dependencies)

    # dt milestone
    p_milestone = subparsers.add_parser('milestone', help='Manage milestones')
    p_milestone.set_defaults(func=cmd_milestone_list)
    milestone_sub = p_milestone.add_subparsers(dest='milestone_cmd')

    # dt milestone list
    p_ms_list = milestone_sub.add_parser('list', help='List milestones with progress')
    p_ms_list.add_argument('--notes', action='store_true', help='Include milestone notes')
    p_ms_list.set_defaults(func=cmd_milestone_list)

    # dt milestone create
    p_ms_create = milestone_sub.add_parser('create', help='Create a milestone')
    p_ms_create.add_argument('name', help='Milestone name')
    p_ms_create.add_argument('--components', '-c', help='Comma-separated member components')
    p_ms_create.add_argument('--target', '-t', help='Target date (ISO, e.g. 2025-06-30)')
    p_ms_create.set_defaults(func=cmd_milestone_create)

    # dt milestone update
    p_ms_update = milestone_sub.add_parser('update', help='Update a milestone')
    p_ms_update.add_argument('name', help='Milestone name')
    p_ms_update.add_argument('--status', '-s', help='Set milestone status')
    p_ms_update.add_argument('--target', '-t', help='Set target date ("none" clears it)')
    p_ms_update.add_argument('--add', action='append', metavar='COMPONENT', help='Add a member component')
    p_ms_update.add_argument('--remove', action='append', metavar='COMPONENT', help='Remove a member component')
    p_ms_update.add_argument('--replace', metavar='A,B', help='Replace all member components')
    p_ms_update.add_argument('--note', '-n', help='Add a note')
    p_ms_update.set_defaults(func=cmd_milestone_update)

    # dt milestone complete
    p_ms_complete = milestone_sub.add_parser('complete', help='Mark a milestone completed')
    p_ms_complete.add_argument('name', help='Milestone name')
    p_ms_complete.set_defaults(func=cmd_milestone_complete)

    # dt plan
    p_plan = subparsers.add_parser('plan', help='Show development plan and recommendations')
    p_plan.set_defaults(func=cmd_plan)

    # dt history
    p_history = subparsers.add_parser('history', help='Show recent activity')
    p_history.add_argument('component', nargs='?', help='Only show this component or milestone')
    p_history.add_argument('--limit', '-l', type=int, help='Maximum entries to show')
    p_history.add_argument('--since', help='Only entries since (1h, 1d, 1w, or ISO timestamp)')
    p_history.add_argument('--no-color', action='store_true', help='Disable colored output')
    p_history.set_defaults(func=cmd_history)

    # dt sync
    p_sync = subparsers.add_parser('sync', help='Estimate component progress from git')
    p_sync.add_argument('component', help='Component name')
    p_sync.add_argument('--repo', help='Repository path (default: tracker root)')
    p_sync.add_argument('--dry-run', action='store_true', help='Print the estimate without recording it')
    p_sync.set_defaults(func=cmd_sync)

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    args.interactive = not (args.yes or args.no_input)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        return args.func(args)
    except (ConfigError, ValidationError) as e:
        print(f"ERROR: {e}")
        return 2
    except TrackerError as e:
        logger.debug(f"[CLI] {type(e).__name__}: {e}")
        print(f"ERROR: {e}")
        return 1


if __name__ == '__main__':
    sys.exit(main())
