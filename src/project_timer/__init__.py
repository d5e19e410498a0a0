"""Project Timer - named task timers for AI assistants over MCP."""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("project-timer")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"

from project_timer.timers import TimerStore, format_duration
from project_timer.tools.project_timer import ProjectTimerTool

__all__ = ["TimerStore", "format_duration", "ProjectTimerTool"]
