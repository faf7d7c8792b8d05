"""
Command-line interface for hookdef.

Usage:
    hookdef                         # same as "hookdef update"
    hookdef update                  # sync settings files with .claude/hooks/*.py
    hookdef remove                  # remove every managed hook from the settings files
    hookdef init --scope=local      # write a starter declaration file, then update
    hookdef --global-settings=PATH  # use another user-wide settings document

Declaration files and the settings they feed:
    .claude/hooks/hooks.py        -> .claude/settings.json
    .claude/hooks/hooks.local.py  -> .claude/settings.local.json
    .claude/hooks/hooks.user.py   -> ~/.claude/settings.json
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from .config import HookdefConfig, load_config
from .hooks.types import ExitCode
from .logger import configure_logging, logger
from .settings.scopes import HOOK_FILES, HOOKS_DIR, ScopeOutcome, ScopeSync

# name -> (import, entries per event)
STARTER_HANDLERS = {
    "log-tool-use": (
        "log_pre_tool_use_events, log_post_tool_use_events",
        {"PreToolUse": ["log_pre_tool_use_events()"], "PostToolUse": ["log_post_tool_use_events()"]},
    ),
    "block-env": (
        "block_env_files",
        {"PreToolUse": ["block_env_files"]},
    ),
    "log-stop": (
        "log_stop_events, log_subagent_stop_events",
        {"Stop": ["log_stop_events()"], "SubagentStop": ["log_subagent_stop_events()"]},
    ),
    "log-notification": (
        "log_notification_events",
        {"Notification": ["log_notification_events()"]},
    ),
}
DEFAULT_STARTER_HANDLERS = ["log-tool-use", "block-env"]
EVENT_ORDER = ["PreToolUse", "PostToolUse", "Notification", "Stop", "SubagentStop"]


def render_declaration(handlers: List[str]) -> str:
    """
    Render a starter declaration file using the given ready-made handlers.

    Args:
        handlers: Keys of STARTER_HANDLERS

    Returns:
        Python source of the declaration file
    """
    imports = []
    by_event = {}
    for name in handlers:
        names, entries = STARTER_HANDLERS[name]
        if names not in imports:
            imports.append(names)
        for event, items in entries.items():
            for item in items:
                if item not in by_event.setdefault(event, []):
                    by_event[event].append(item)

    lines = ['"""Hooks for this project. Run `hookdef` after editing this file."""', ""]
    lines.append("from hookdef import define_hooks")
    if imports:
        lines.append(f"from hookdef.handlers import {', '.join(imports)}")
    lines += ["", "hooks = define_hooks({"]
    for event in EVENT_ORDER:
        if event in by_event:
            lines.append(f'    "{event}": [{", ".join(by_event[event])}],')
    lines += ["})", ""]
    return "\n".join(lines)


def handle_init(args, sync: ScopeSync) -> int:
    """Write a starter declaration file and sync settings."""
    hook_file = Path(args.project_dir).resolve() / HOOKS_DIR / HOOK_FILES[args.scope]
    if hook_file.exists() and not args.force:
        logger.error(f"{hook_file} already exists. Use --force to overwrite it.")
        return ExitCode.ERROR

    handlers = args.handler or DEFAULT_STARTER_HANDLERS
    hook_file.parent.mkdir(parents=True, exist_ok=True)
    hook_file.write_text(render_declaration(handlers), encoding="utf-8")
    logger.info(f"Created {hook_file}")

    if args.no_update:
        return ExitCode.SUCCESS
    return summarize(sync.update())


def summarize(outcomes: List[ScopeOutcome]) -> int:
    """Return the exit code for a pass: an error if any scope failed."""
    failed = [o for o in outcomes if o.failed]
    for outcome in failed:
        logger.error(f"Could not process {outcome.scope.name} hooks: {outcome.error}")
    return ExitCode.ERROR if failed else ExitCode.SUCCESS


def _common_options() -> argparse.ArgumentParser:
    """Options accepted both before and after the subcommand."""
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--global-settings",
        type=str,
        default=argparse.SUPPRESS,
        help="User-wide settings file (default: ~/.claude/settings.json)"
    )
    common.add_argument(
        "--project-dir",
        type=str,
        default=argparse.SUPPRESS,
        help="Project root containing .claude/ (default: current directory)"
    )
    common.add_argument(
        "-v", "--verbose",
        action="store_true",
        default=argparse.SUPPRESS,
        help="Show debug output"
    )
    return common


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hookdef",
        description="Sync Python-declared hooks into the host's settings files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        parents=[_common_options()],
        epilog="""
Examples:
  hookdef                               # update all settings files
  hookdef remove                        # remove managed hooks everywhere
  hookdef update -v                     # show debug output
  hookdef init --scope=local --handler=log-stop
  hookdef --global-settings=/tmp/settings.json
        """
    )
    # Subcommand options are suppressed unless given, so these stay the defaults
    parser.set_defaults(global_settings=None, project_dir=".", verbose=False)
    common = _common_options()

    subparsers = parser.add_subparsers(dest="command", help="Operation (default: update)")
    subparsers.add_parser("update", parents=[common], help="Regenerate managed hooks in all settings files")
    subparsers.add_parser("remove", parents=[common], help="Remove managed hooks from all settings files")

    init_parser = subparsers.add_parser("init", parents=[common], help="Create a starter hook declaration file")
    init_parser.add_argument(
        "--scope",
        choices=list(HOOK_FILES),
        default="project",
        help="Which declaration file to create (default: project)"
    )
    init_parser.add_argument(
        "--handler",
        action="append",
        choices=list(STARTER_HANDLERS),
        help="Ready-made handler to include; repeatable (default: log-tool-use, block-env)"
    )
    init_parser.add_argument(
        "--force",
        action="store_true",
        help="Overwrite an existing declaration file"
    )
    init_parser.add_argument(
        "--no-update",
        action="store_true",
        help="Only write the file, do not update settings"
    )
    return parser


def run(argv: Optional[List[str]] = None, config: Optional[HookdefConfig] = None) -> int:
    """Parse arguments, run the requested operation and return the exit code."""
    args = build_parser().parse_args(argv)

    if config is None:
        try:
            config = load_config()
        except ValueError as e:
            configure_logging("INFO")
            logger.error(str(e))
            return ExitCode.ERROR

    configure_logging("DEBUG" if args.verbose else (config.log_level or "INFO"))

    if args.global_settings:
        config.global_settings_path = Path(args.global_settings).expanduser()

    project_dir = Path(args.project_dir)
    if not project_dir.is_dir():
        logger.error(f"Project directory does not exist: {project_dir}")
        return ExitCode.ERROR

    sync = ScopeSync(project_dir, config)
    command = args.command or "update"

    if command == "init":
        return handle_init(args, sync)
    if command == "remove":
        return summarize(sync.remove())
    return summarize(sync.update())


def main(argv: Optional[List[str]] = None) -> None:
    """Console entry point for ``hookdef``."""
    try:
        code = run(argv)
    except KeyboardInterrupt:
        logger.info("Interrupted")
        code = ExitCode.ERROR
    sys.exit(int(code))
