"""Command-line interface for Project Timer.

Project Timer gives an AI assistant a `project_timer` tool for timing named
tasks, and shows a notification whenever a timer starts or stops.

CONCEPTS:
---------
- TIMER:  A task name with a start time. Started and stopped by the
          assistant through the MCP tool; kept in a JSON file until stopped.

- EVENTS: Start/stop notifications streamed over HTTP to any listener
          (a browser page or `project-timer listen`). Best-effort only.
"""

import argparse
import asyncio
import logging
import sys
from datetime import datetime, timezone

import httpx
from rich.console import Console
from rich.logging import RichHandler
from rich.markdown import Markdown
from rich.table import Table

from project_timer import __version__
from project_timer.config import settings
from project_timer.notifications.events import TimerStartedEvent
from project_timer.notifications.listener import listen, show_toast, toast_for_event
from project_timer.timers import TimerStore, format_duration, format_timestamp

# stdout belongs to the MCP stdio transport
console = Console(stderr=True)

# Help text shown when no command is given
WELCOME_TEXT = f"""
# Project Timer v{__version__}

Named task timers for AI assistants, with desktop notifications.

## Quick Start

```bash
project-timer serve                       # Run the MCP server (stdio)
project-timer listen                      # Show toasts for timer events
project-timer list                        # Show running timers
```

Add `project-timer serve` as an MCP server in your assistant's config,
then ask it to "start a timer for design review".
"""


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.WARNING
    fmt = "%(name)s: %(message)s" if verbose else "%(message)s"
    logging.basicConfig(
        level=level,
        format=fmt,
        handlers=[RichHandler(rich_tracebacks=True, console=console, show_path=verbose)],
    )


def cmd_serve(args: argparse.Namespace) -> None:
    """Run the MCP server with the notification stream."""
    from project_timer.service import TimerService

    if args.port is not None:
        settings.events_port = args.port
    if args.no_notifications:
        settings.notifications_enabled = False

    service = TimerService(settings)
    try:
        asyncio.run(service.run())
    except KeyboardInterrupt:
        pass


def cmd_listen(args: argparse.Namespace) -> None:
    """Show a toast for every timer event."""
    url = args.url or settings.get_events_url()
    console.print(f"[dim]Listening on {url} (Ctrl+C to stop)[/dim]")

    try:
        asyncio.run(listen(url, lambda event: toast_for_event(console, event)))
    except KeyboardInterrupt:
        return
    except httpx.HTTPError as e:
        console.print(f"[red]Could not reach the notification stream at {url}: {e}[/red]")
        console.print("[dim]Is `project-timer serve` running?[/dim]")
        sys.exit(1)

    console.print("[yellow]Notification stream closed[/yellow]")


def cmd_list(args: argparse.Namespace) -> None:
    """List running timers."""
    store = TimerStore(settings.get_timers_file())
    timers = store.load()

    if not timers:
        console.print("[dim]No timers running[/dim]")
        return

    now = datetime.now(timezone.utc)
    table = Table(title="Running Timers")
    table.add_column("Task", style="cyan")
    table.add_column("Started")
    table.add_column("Elapsed", style="green")

    for name, started in sorted(timers.items(), key=lambda item: item[1]):
        elapsed_ms = (now - started).total_seconds() * 1000
        table.add_row(name, format_timestamp(started), format_duration(int(elapsed_ms)))

    console.print(table)


def cmd_toast(args: argparse.Namespace) -> None:
    """Show a notification without touching any timer."""
    task = args.task_name.strip()
    if not task:
        show_toast(console, "Enter a task name first", "error")
        sys.exit(1)

    if args.action == "start":
        toast_for_event(console, TimerStartedEvent(task_name=task))
    else:
        show_toast(console, f"Timer stopped: {task}", "info")


def cmd_version(args: argparse.Namespace) -> None:
    """Show version information."""
    console.print(f"Project Timer v{__version__}")
    console.print(f"Timers file: {settings.get_timers_file()}")
    console.print(f"Events URL: {settings.get_events_url()}")


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="project-timer",
        description="Named task timers for AI assistants, with desktop notifications.",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging"
    )
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    # serve
    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the MCP server over stdio",
        description="Run the MCP server over stdio, with the notification stream alongside."
    )
    serve_parser.add_argument(
        "--port", type=int, default=None,
        help=f"Notification stream port (default: {settings.events_port})"
    )
    serve_parser.add_argument(
        "--no-notifications",
        action="store_true",
        help="Do not serve the notification stream"
    )
    serve_parser.set_defaults(func=cmd_serve)

    # listen
    listen_parser = subparsers.add_parser(
        "listen",
        help="Show toasts for timer events",
        description="Connect to a running server's notification stream and show each event."
    )
    listen_parser.add_argument(
        "--url",
        help="Event stream URL (default: from settings)"
    )
    listen_parser.set_defaults(func=cmd_listen)

    # list
    list_parser = subparsers.add_parser(
        "list",
        help="Show running timers",
    )
    list_parser.set_defaults(func=cmd_list)

    # toast
    toast_parser = subparsers.add_parser(
        "toast",
        help="Show a test notification",
        description="Show a start/stop notification locally. No timer is started or stopped."
    )
    toast_parser.add_argument(
        "action",
        choices=["start", "stop"],
        help="Kind of notification"
    )
    toast_parser.add_argument(
        "task_name",
        help="Task name to show"
    )
    toast_parser.set_defaults(func=cmd_toast)

    # version
    version_parser = subparsers.add_parser(
        "version",
        help="Show version information",
    )
    version_parser.set_defaults(func=cmd_version)

    return parser


def main(argv: list[str] | None = None) -> None:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    # No command given - show welcome
    if args.command is None:
        console.print(Markdown(WELCOME_TEXT))
        sys.exit(0)

    args.func(args)
    sys.exit(0)


if __name__ == "__main__":
    main()
