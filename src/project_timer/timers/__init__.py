"""Active timer storage for Project Timer.

Provides the JSON-backed timer store and duration formatting.
"""

from project_timer.timers.storage import TimerStore, format_duration, format_timestamp

__all__ = ["TimerStore", "format_duration", "format_timestamp"]
