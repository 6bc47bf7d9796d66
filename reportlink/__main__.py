"""CLI entry point for reportlink."""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

from reportlink.colors import COLOR_POLICIES
from reportlink.config import FilterConfig
from reportlink.logging_setup import configure as configure_logging


def _build_parser() -> argparse.ArgumentParser:
    # Shared global options, inherited by every subcommand
    global_opts = argparse.ArgumentParser(add_help=False)
    global_opts.add_argument("--format", "-f", choices=["human", "json"],
                             default=None, help="Output format (default: auto-detect)")
    global_opts.add_argument("--grace", type=float, metavar="SECONDS", default=None,
                             help="Seconds a report keeps accepting lines (default: 1)")
    global_opts.add_argument("--colors", choices=COLOR_POLICIES, default=None,
                             help="Row color policy for report popups")
    global_opts.add_argument("--max-reports", type=int, metavar="N", default=None,
                             help="Keep only the N most recent finished reports")
    global_opts.add_argument("--roster", metavar="FILE",
                             help="JSON object mapping player name to class")
    global_opts.add_argument("--ascii", action="store_true",
                             help="Force ASCII output (no Unicode box drawing)")
    global_opts.add_argument("--color", action="store_true",
                             help="Force color output (for piping to less -R)")
    global_opts.add_argument("--log-level", metavar="LEVEL",
                             help="Log level for diagnostics on stderr (default: WARNING)")

    parser = argparse.ArgumentParser(
        prog="reportlink",
        description="Collapse damage meter reports in chat logs into clickable links",
        parents=[global_opts],
    )
    parser.add_argument("--version", action="version", version="reportlink 0.1.0")

    sub = parser.add_subparsers(dest="command")

    p_replay = sub.add_parser("replay", parents=[global_opts],
                              help="Show the chat log as it would be displayed")
    p_replay.add_argument("log", help="Chat log (JSONL)")

    p_reports = sub.add_parser("reports", parents=[global_opts],
                               help="List reports captured from the log")
    p_reports.add_argument("log", help="Chat log (JSONL)")

    p_show = sub.add_parser("show", parents=[global_opts],
                            help="Open a report link as a popup")
    p_show.add_argument("log", help="Chat log (JSONL)")
    p_show.add_argument("ref", help="Report id, link payload, or full link")

    return parser


def _get_format(args) -> str:
    """Determine output format from args + TTY detection."""
    if args.format:
        return args.format
    if not sys.stdout.isatty():
        return "json"
    return "human"


def main():
    parser = _build_parser()

    # Bare `reportlink <log>` is a replay
    known_commands = {"replay", "reports", "show"}
    argv = sys.argv[1:]
    if argv and argv[0] not in known_commands and not argv[0].startswith("-"):
        argv = ["replay"] + argv

    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return

    configure_logging(args.log_level)

    from reportlink.formatters.human import init as init_human, detect_ascii
    ascii_mode = args.ascii or detect_ascii()
    init_human(ascii_mode=ascii_mode, force_color=args.color)
    from reportlink.formatters.human import console

    fmt = _get_format(args)

    try:
        config = FilterConfig.from_env(
            grace_period=args.grace,
            color_policy=args.colors,
            max_reports=args.max_reports,
        )
    except ValueError as e:
        console.print(f"[red]{e}[/]")
        sys.exit(1)

    log_path = Path(args.log)
    if not log_path.is_file():
        console.print(f"[red]No chat log at '{args.log}'[/]")
        sys.exit(1)

    roster = None
    if args.roster:
        from reportlink.chatlog import load_roster
        try:
            roster = load_roster(Path(args.roster))
        except (OSError, ValueError) as e:
            console.print(f"[red]Cannot read roster '{args.roster}': {e}[/]")
            sys.exit(1)

    if args.command == "replay":
        from reportlink.commands.replay import cmd_replay
        data = cmd_replay(log_path, config=config, roster=roster)
        if fmt == "json":
            from reportlink.formatters.json import format_json
            format_json(data)
        else:
            from reportlink.formatters.human import format_replay
            format_replay(data)
        return

    if args.command == "reports":
        from reportlink.commands.reports import cmd_reports
        data = cmd_reports(log_path, config=config)
        if fmt == "json":
            from reportlink.formatters.json import format_json
            format_json(data)
        else:
            from reportlink.formatters.human import format_reports
            format_reports(data)
        return

    if args.command == "show":
        from reportlink.commands.reports import cmd_show
        data = cmd_show(log_path, args.ref, config=config, roster=roster)
        if fmt == "json":
            from reportlink.formatters.json import format_json
            format_json(data)
        else:
            from reportlink.formatters.human import format_popup
            format_popup(data)
        if not data["rows"]:
            sys.exit(1)
        return


if __name__ == "__main__":
    main()
