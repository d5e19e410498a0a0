"""Terminal listener for timer notifications.

Connects to the event stream and shows a toast for every start and stop,
the same way the browser page does. Malformed frames are ignored.
"""

import logging
from collections.abc import Callable

import httpx
from rich.console import Console
from rich.panel import Panel

from project_timer.notifications.events import TimerStartedEvent, TimerStoppedEvent, parse_event

logger = logging.getLogger(__name__)

# Toast colors by kind
TOAST_STYLES = {
    "success": "green",
    "error": "red",
    "info": "blue",
}


def show_toast(console: Console, message: str, kind: str = "info") -> None:
    """Render a toast-style message.

    Args:
        console: Console to print to
        message: Text of the toast
        kind: One of "success", "error" or "info"
    """
    style = TOAST_STYLES.get(kind, TOAST_STYLES["info"])
    console.print(Panel(message, border_style=style, expand=False))


def toast_for_event(console: Console, event: TimerStartedEvent | TimerStoppedEvent) -> None:
    """Render the toast for a notification event."""
    if isinstance(event, TimerStartedEvent):
        show_toast(console, f"Timer started: {event.task_name}", "success")
    else:
        show_toast(console, f"Timer stopped: {event.task_name} ({event.formatted})", "info")


def parse_frame_line(line: str) -> TimerStartedEvent | TimerStoppedEvent | None:
    """Extract an event from one line of the stream.

    Returns:
        The event for a well-formed ``data:`` line, None for anything else
    """
    if not line.startswith("data:"):
        return None
    return parse_event(line[len("data:"):].strip())


async def listen(
    url: str,
    on_event: Callable[[TimerStartedEvent | TimerStoppedEvent], None],
    client: httpx.AsyncClient | None = None,
) -> None:
    """Consume the event stream until the server closes it.

    Args:
        url: Event stream URL
        on_event: Called for every well-formed event
        client: HTTP client to use (a new one is created if omitted)

    Raises:
        httpx.HTTPError: If the stream cannot be opened
    """
    owns_client = client is None
    if client is None:
        client = httpx.AsyncClient(timeout=httpx.Timeout(10.0, read=None))

    try:
        async with client.stream("GET", url, headers={"Accept": "text/event-stream"}) as response:
            response.raise_for_status()
            logger.info(f"Listening for timer notifications on {url}")
            async for line in response.aiter_lines():
                event = parse_frame_line(line)
                if event is not None:
                    on_event(event)
    finally:
        if owns_client:
            await client.aclose()
