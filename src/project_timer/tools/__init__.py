"""Assistant-facing tools."""

from project_timer.tools.project_timer import ProjectTimerTool, TOOL_NAME

__all__ = ["ProjectTimerTool", "TOOL_NAME"]
