"""Command-line interface for nrpecheck."""

import argparse
import json
import sys
from datetime import date

from nrpecheck import __version__
from nrpecheck.core import (
    CHECKS,
    ConfigError,
    Context,
    Output,
    filter_checks,
    find_check,
    load_settings,
    run_check,
)
from nrpecheck.core.logging import LEVELS, read_entries


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="nrpecheck",
        description="NRPE health checks for conntrackd and named",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"nrpecheck {__version__}",
    )
    parser.add_argument(
        "--format",
        choices=["plain", "json"],
        default="plain",
        help="Output format (default: plain)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # list command
    list_parser = subparsers.add_parser("list", help="List available checks")
    list_parser.add_argument(
        "--tag",
        "-t",
        action="append",
        dest="tags",
        help="Filter by tag (can be specified multiple times)",
    )

    # run command
    run_parser = subparsers.add_parser(
        "run",
        help="Run a check",
        usage="nrpecheck run CHECK [ARGS ...]",
    )
    run_parser.add_argument("check", help="Check name to run")

    # show command
    show_parser = subparsers.add_parser("show", help="Show check details")
    show_parser.add_argument("check", help="Check name to show")

    # doctor command
    subparsers.add_parser("doctor", help="Check availability of the external tools")

    # logs command
    logs_parser = subparsers.add_parser("logs", help="Show log entries of a check")
    logs_parser.add_argument("check", help="Check name")
    logs_parser.add_argument(
        "--date",
        type=date.fromisoformat,
        help="Day to show (YYYY-MM-DD, default: today)",
    )
    logs_parser.add_argument(
        "--level",
        choices=list(LEVELS),
        default="debug",
        help="Minimum level to show (default: debug)",
    )
    logs_parser.add_argument(
        "--limit",
        type=int,
        help="Maximum number of entries",
    )
    logs_parser.add_argument(
        "--results",
        action="store_true",
        help="Only show the final result of each run",
    )

    return parser


def cmd_list(args: argparse.Namespace) -> int:
    """List available checks."""
    checks = filter_checks(tags=args.tags)

    if not checks:
        print("No checks found.")
        return 0

    for check in checks:
        if args.format == "json":
            print(json.dumps({
                "name": check.name,
                "tags": list(check.tags),
                "brief": check.brief,
            }))
        else:
            print(f"{check.name:20} {check.brief}")

    return 0


def cmd_run(args: argparse.Namespace) -> int:
    """Run a check."""
    check = find_check(args.check)
    if check is None:
        print(f"Check not found: {args.check}", file=sys.stderr)
        return 1

    return run_check(check, args.args, output=Output(format=args.format))


def cmd_show(args: argparse.Namespace) -> int:
    """Show check details."""
    check = find_check(args.check)
    if check is None:
        print(f"Check not found: {args.check}", file=sys.stderr)
        return 1

    if args.format == "json":
        print(json.dumps({
            "name": check.name,
            "command": check.command,
            "tags": list(check.tags),
            "brief": check.brief,
            "requires": check.tool,
            "privilege": check.privilege,
        }, indent=2))
    else:
        print(f"Name:      {check.name}")
        print(f"Command:   {check.command}")
        print(f"Tags:      {', '.join(check.tags)}")
        print(f"Brief:     {check.brief}")
        print(f"Requires:  {check.tool}")
        print(f"Privilege: {check.privilege}")

    return 0


def cmd_doctor(args: argparse.Namespace) -> int:
    """Check availability of the external tools."""
    context = Context()
    try:
        settings = load_settings(context)
    except ConfigError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 1

    tool_status: dict[str, dict[str, object]] = {}
    for check in CHECKS:
        binary = settings.binary(check.tool)
        tool_status[check.tool] = {"path": binary, "available": context.file_exists(binary)}

    missing_tools = [t for t, status in tool_status.items() if not status["available"]]
    privileged = context.is_privileged()

    if args.format == "json":
        print(json.dumps({
            "config": settings.path,
            "log_dir": str(settings.log_dir) if settings.log_dir else None,
            "privileged": privileged,
            "tools": tool_status,
            "missing_tools": missing_tools,
        }, indent=2))
    else:
        print("=== nrpecheck doctor ===\n")

        print(f"Config:     {settings.path or '(defaults)'}")
        print(f"Log dir:    {settings.log_dir or '(logging disabled)'}")
        print(f"Privileged: {'yes' if privileged else 'no'}")
        print()

        print("Required tools:")
        for tool, status in sorted(tool_status.items()):
            mark = "✓" if status["available"] else "✗ MISSING"
            print(f"  {tool} ({status['path']}): {mark}")
        print()

        if missing_tools:
            print(f"⚠ {len(missing_tools)} missing tool(s): {', '.join(missing_tools)}")
        else:
            print("✓ All required tools available")

    return 1 if missing_tools else 0


def cmd_logs(args: argparse.Namespace) -> int:
    """Show log entries of a check."""
    check = find_check(args.check)
    if check is None:
        print(f"Check not found: {args.check}", file=sys.stderr)
        return 1

    try:
        settings = load_settings(Context())
    except ConfigError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 1

    if settings.log_dir is None:
        print("Logging is disabled (no log_dir configured).", file=sys.stderr)
        return 1

    entries = read_entries(
        settings.log_dir,
        check.name,
        day=args.date,
        min_level=args.level,
        results_only=args.results,
        limit=args.limit,
    )

    for entry in entries:
        if args.format == "json":
            print(json.dumps(entry))
        else:
            extra = {
                k: v for k, v in entry.items()
                if k not in ("time", "level", "check", "event")
            }
            details = " ".join(f"{k}={v}" for k, v in extra.items())
            print(f"{entry.get('time', '')} {entry.get('level', '').upper():7} "
                  f"{entry.get('event', '')} {details}".rstrip())

    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    if argv is None:
        argv = sys.argv[1:]

    # Everything after "run CHECK" belongs to the check, including -h
    check_args: list[str] = []
    if "run" in argv:
        split = argv.index("run") + 2
        argv, check_args = argv[:split], argv[split:]

    parser = create_parser()
    args = parser.parse_args(argv)
    args.args = check_args

    if args.command is None:
        parser.print_help()
        return 0

    commands = {
        "list": cmd_list,
        "run": cmd_run,
        "show": cmd_show,
        "doctor": cmd_doctor,
        "logs": cmd_logs,
    }

    return commands[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
