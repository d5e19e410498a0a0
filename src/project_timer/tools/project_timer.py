"""Tool: Project Timer

Starts and stops named timers so an assistant can track how long is spent
on design work, client calls, writing, etc. Results are plain text meant to
be read back to the user.
"""

import logging
from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from typing import Literal

from project_timer.notifications.broadcaster import NotificationBroadcaster
from project_timer.notifications.events import TimerStartedEvent, TimerStoppedEvent
from project_timer.timers import TimerStore, format_duration, format_timestamp

logger = logging.getLogger(__name__)

TimerAction = Literal["start", "stop"]

TOOL_NAME = "project_timer"

TOOL_DESCRIPTION = (
    "Start or stop a timer for a named task to track how long is spent on it. "
    'Call with action "start" when work on a task begins and with action "stop" '
    "and the same taskName when it ends; stopping reports the elapsed time. "
    "Starting a task that is already running restarts its timer."
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ProjectTimerTool:
    """Start/stop state machine for named timers.

    Each task name is either inactive or active. ``start`` makes it active
    (overwriting any earlier start), ``stop`` reports the elapsed time and
    makes it inactive again. Every transition is persisted before it is
    broadcast to notification listeners.
    """

    def __init__(
        self,
        store: TimerStore,
        broadcaster: NotificationBroadcaster | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        """Initialize the tool.

        Args:
            store: Where active timers are persisted.
            broadcaster: Receives start/stop events; None disables notifications.
            clock: Returns the current time as an aware datetime.
        """
        self._store = store
        self._broadcaster = broadcaster
        self._clock = clock

    @property
    def name(self) -> str:
        return TOOL_NAME

    @property
    def description(self) -> str:
        return TOOL_DESCRIPTION

    def run(self, action: TimerAction, task_name: str) -> str:
        """Dispatch an action.

        Args:
            action: "start" or "stop"
            task_name: Name of the task, e.g. "Sunny Side Cafe hero image"

        Returns:
            Message describing the outcome

        Raises:
            ValueError: If the action is not recognised
        """
        if action == "start":
            return self.start(task_name)
        if action == "stop":
            return self.stop(task_name)
        raise ValueError(f"Unknown timer action: {action!r}")

    def start(self, task_name: str) -> str:
        """Start timing a task.

        Args:
            task_name: Name of the task to track

        Returns:
            Confirmation with the start time
        """
        started_at = self._clock()
        previous = self._store.set(task_name, started_at)
        if previous is not None:
            logger.info(f"Restarted timer for {task_name!r} (was running since {format_timestamp(previous)})")
        else:
            logger.info(f"Started timer for {task_name!r}")

        self._notify(TimerStartedEvent(task_name=task_name))

        return "\n".join([
            f'Timer started for: "{task_name}"',
            f"Start time: {format_timestamp(started_at)}",
            f'Call {TOOL_NAME} with action "stop" and the same taskName when you\'re done.',
        ])

    def stop(self, task_name: str) -> str:
        """Stop timing a task.

        Args:
            task_name: Name of the task to stop

        Returns:
            Start, stop and elapsed time, or a note that no timer was running
        """
        started_at = self._store.remove(task_name)
        if started_at is None:
            logger.info(f"No active timer for {task_name!r}")
            return f'No active timer found for "{task_name}". Did you start one first?'

        stopped_at = self._clock()
        elapsed_ms = max(0, (stopped_at - started_at) // timedelta(milliseconds=1))
        friendly = format_duration(elapsed_ms)

        logger.info(f"Stopped timer for {task_name!r} after {friendly}")

        self._notify(TimerStoppedEvent(task_name=task_name, formatted=friendly))

        return "\n".join([
            f'Timer stopped for: "{task_name}"',
            "",
            f"Start:   {format_timestamp(started_at)}",
            f"Stop:    {format_timestamp(stopped_at)}",
            f"Elapsed: {elapsed_ms} ms ({friendly})",
        ])

    def _notify(self, event: TimerStartedEvent | TimerStoppedEvent) -> None:
        if self._broadcaster is not None:
            self._broadcaster.broadcast(event)
