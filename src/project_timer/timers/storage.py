"""JSON file storage for active timers.

The whole collection of active timers lives in a single JSON object
mapping task name to start time. It is read fresh on every operation
and rewritten in full on every change.
"""

import json
import logging
from contextlib import nullcontext
from datetime import datetime, timezone
from pathlib import Path
from typing import ContextManager

from filelock import FileLock
from pydantic import TypeAdapter, ValidationError

logger = logging.getLogger(__name__)

# Accepts ISO-8601 strings as well as epoch-millisecond integers
_TIMERS_ADAPTER = TypeAdapter(dict[str, datetime])


def format_timestamp(moment: datetime) -> str:
    """Format a point in time the way it is stored and reported.

    Args:
        moment: Timezone-aware or naive (assumed UTC) datetime

    Returns:
        ISO-8601 UTC string like "2024-02-16T22:50:56.789Z"
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def format_duration(milliseconds: int) -> str:
    """Format milliseconds into a human-readable duration string.

    Args:
        milliseconds: Elapsed time in milliseconds

    Returns:
        Formatted string like "1 hour, 2 minutes, 30 seconds"
    """
    if milliseconds < 0:
        milliseconds = 0

    total_seconds = milliseconds // 1000
    hours = total_seconds // 3600
    minutes = (total_seconds % 3600) // 60
    seconds = total_seconds % 60

    parts = []
    for value, unit in ((hours, "hour"), (minutes, "minute")):
        if value > 0:
            parts.append(f"{value} {unit}{'s' if value != 1 else ''}")
    if seconds > 0 or not parts:
        parts.append(f"{seconds} second{'s' if seconds != 1 else ''}")

    return ", ".join(parts)


class TimerStore:
    """JSON file-based storage for active timers.

    Example:
        store = TimerStore("/path/to/timers.json")
        timers = store.load()
        timers["Design review"] = datetime.now(timezone.utc)
        store.save(timers)

    There is no locking unless ``use_lock`` is set, in which case the
    read-modify-write helpers hold a ``FileLock`` on ``<file>.lock``.
    """

    def __init__(self, path: str | Path, use_lock: bool = False) -> None:
        """Initialize the timer storage.

        Args:
            path: Path to the JSON storage file.
            use_lock: Serialize read-modify-write helpers across processes.
        """
        self._path = Path(path)
        self._lock: FileLock | None = None
        if use_lock:
            self._lock = FileLock(str(self._path.with_suffix(".lock")))

    @property
    def path(self) -> Path:
        """Get the storage file path."""
        return self._path

    def _locked(self) -> ContextManager:
        return self._lock if self._lock is not None else nullcontext()

    def load(self) -> dict[str, datetime]:
        """Load all active timers.

        A missing or unreadable file counts as "no active timers".

        Returns:
            Mapping of task name to start time (UTC).
        """
        if not self._path.exists():
            logger.debug(f"No timers file at {self._path}")
            return {}

        try:
            content = self._path.read_text(encoding="utf-8")
            if not content.strip():
                return {}
            timers = _TIMERS_ADAPTER.validate_json(content)
        except (UnicodeDecodeError, ValidationError) as e:
            logger.warning(f"Ignoring unreadable timers file {self._path}: {e}")
            return {}

        # Naive timestamps were written as UTC
        return {
            name: started if started.tzinfo else started.replace(tzinfo=timezone.utc)
            for name, started in timers.items()
        }

    def save(self, timers: dict[str, datetime]) -> None:
        """Overwrite the storage file with the given timers.

        Args:
            timers: Mapping of task name to start time.

        Raises:
            OSError: If the file cannot be written.
        """
        self._path.parent.mkdir(parents=True, exist_ok=True)
        data = {name: format_timestamp(started) for name, started in timers.items()}
        content = json.dumps(data, indent=2, ensure_ascii=False)
        self._path.write_text(content, encoding="utf-8")
        logger.debug(f"Saved {len(timers)} active timers to {self._path}")

    def get(self, task_name: str) -> datetime | None:
        """Get the start time of an active timer.

        Args:
            task_name: The task to look up.

        Returns:
            The start time if the timer is active, None otherwise.
        """
        return self.load().get(task_name)

    def set(self, task_name: str, started_at: datetime) -> datetime | None:
        """Start (or restart) a timer.

        Args:
            task_name: The task to time.
            started_at: When the timer started.

        Returns:
            The discarded start time if the task was already running.
        """
        with self._locked():
            timers = self.load()
            previous = timers.get(task_name)
            timers[task_name] = started_at
            self.save(timers)
        return previous

    def remove(self, task_name: str) -> datetime | None:
        """Remove an active timer.

        Args:
            task_name: The task to stop.

        Returns:
            The start time if the timer was active, None otherwise.
            The file is left untouched when nothing was removed.
        """
        with self._locked():
            timers = self.load()
            started = timers.pop(task_name, None)
            if started is not None:
                self.save(timers)
        return started
