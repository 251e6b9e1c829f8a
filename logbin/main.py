#!/usr/bin/env python3
"""
LogBin - Main Entry Point

Watch a channel in the terminal UI, pipe lines into a channel, or mint a
new channel name.
"""
import argparse
import logging
import sys
from dataclasses import replace
from typing import List, Optional

from rich.console import Console

from logbin import __version__
from logbin.config import ClientConfig, load_config
from logbin.session import MIN_CHANNEL_LENGTH, SessionContext, generate_channel_name, parse_key_list
from logbin.util import setup_file_logging

console = Console()
err_console = Console(stderr=True)


def create_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="logbin",
        description="LogBin - live, shareable log channels",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  logbin watch quiet-harbor-4821                 # Watch a channel on the default server
  logbin watch "https://host/quiet-harbor-4821?filter=error"
  logbin watch quiet-harbor-4821 --msg message --time ts
  tail -f app.log | logbin send quiet-harbor-4821
  logbin new                                     # Print a fresh channel URL
        """
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"LogBin v{__version__}"
    )

    parser.add_argument(
        "--env-file",
        help="Read settings from this .env file"
    )

    subparsers = parser.add_subparsers(
        dest="command",
        help="Available commands",
        required=True
    )

    watch_parser = subparsers.add_parser("watch", help="Watch a channel live")
    watch_parser.add_argument(
        "target", nargs="?",
        help="Channel name or full channel URL (omit for the landing screen)"
    )
    watch_parser.add_argument("--filter", help="Initial search text")
    watch_parser.add_argument("--msg", help="Message field names, comma separated")
    watch_parser.add_argument("--meta", help="Meta fields to display, comma separated")
    watch_parser.add_argument("--time", help="Time field names, comma separated")

    send_parser = subparsers.add_parser("send", help="Send records to a channel")
    send_parser.add_argument("target", help="Channel name or full channel URL")
    send_parser.add_argument(
        "--message", "-m", action="append",
        help="Record to send (repeatable); stdin is read when omitted"
    )

    subparsers.add_parser("new", help="Print the URL of a fresh channel")

    return parser


def build_session(args: argparse.Namespace, config: ClientConfig) -> SessionContext:
    """Resolve the target and apply command line overrides"""
    session = SessionContext.from_target(args.target, config.server)

    subscription = session.subscription
    if getattr(args, "msg", None) is not None:
        subscription = replace(subscription, msg_keys=parse_key_list(args.msg))
    if getattr(args, "meta", None) is not None:
        subscription = replace(subscription, meta_keys=parse_key_list(args.meta))
    if getattr(args, "time", None) is not None:
        subscription = replace(subscription, time_keys=parse_key_list(args.time))
    session = replace(session, subscription=subscription)

    if getattr(args, "filter", None) is not None:
        session = session.with_filter(args.filter)
    return session


def run_watch(session: SessionContext, config: ClientConfig) -> int:
    # Imported here so `send` and `new` don't pay for loading Textual
    from logbin.UI import run_app

    run_app(session, config)
    return 0


def run_send(session: SessionContext, messages: Optional[List[str]]) -> int:
    from logbin.ingest import IngestClient

    if not session.channel_url:
        err_console.print("[red]A channel name is required[/red]")
        return 2
    if len(session.channel) < MIN_CHANNEL_LENGTH:
        err_console.print(
            f"[yellow]Channel names shorter than {MIN_CHANNEL_LENGTH} characters are rejected by the server[/yellow]"
        )

    client = IngestClient(session.channel_url)
    lines = messages if messages else sys.stdin
    sent, failed = client.send_lines(lines)

    err_console.print(f"Sent {sent} record(s) to {session.channel_url}")
    if failed:
        err_console.print(f"[red]{failed} record(s) failed, see the log file for details[/red]")
        return 1
    return 0


def run_new(config: ClientConfig) -> int:
    session = SessionContext(server=config.server, channel=generate_channel_name())
    console.print(session.channel_url, markup=False, highlight=False)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    config = load_config(args.env_file)
    log_file = setup_file_logging(config.log_dir, config.log_level)
    logger = logging.getLogger("logbin.main")
    logger.info(f"Starting {args.command}, logging to {log_file}")

    try:
        if args.command == "watch":
            try:
                session = build_session(args, config)
            except ValueError as e:
                parser.error(str(e))
            return run_watch(session, config)
        elif args.command == "send":
            try:
                session = build_session(args, config)
            except ValueError as e:
                parser.error(str(e))
            return run_send(session, args.message)
        elif args.command == "new":
            return run_new(config)
        else:
            parser.print_help()
            return 1

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as e:
        logger.error(f"Unexpected error: {e}", exc_info=True)
        err_console.print(f"[red]Error: {e}[/red]")
        return 1


if __name__ == "__main__":
    sys.exit(main())
