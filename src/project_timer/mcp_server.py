"""MCP server exposing the project timer tool.

The SDK handles the protocol, parameter validation and the stdio
transport; this module only declares the tool's schema and routes calls
to :class:`~project_timer.tools.ProjectTimerTool`.
"""

from typing import Annotated

from mcp.server.fastmcp import FastMCP
from pydantic import Field

from project_timer.tools.project_timer import (
    TOOL_DESCRIPTION,
    TOOL_NAME,
    ProjectTimerTool,
    TimerAction,
)


def create_mcp_server(tool: ProjectTimerTool, name: str = "project-timer") -> FastMCP:
    """Create an MCP server with the project timer tool registered.

    Args:
        tool: Handler that performs the start/stop actions.
        name: Server name reported to clients.

    Returns:
        Configured FastMCP server (not yet running).
    """
    mcp = FastMCP(name)

    @mcp.tool(name=TOOL_NAME, description=TOOL_DESCRIPTION)
    async def project_timer(
        action: Annotated[
            TimerAction,
            Field(description='What to do: "start" begins timing, "stop" ends it'),
        ],
        taskName: Annotated[
            str,
            Field(min_length=1, description='The name of the task, e.g. "Sunny Side Cafe hero image"'),
        ],
    ) -> str:
        return tool.run(action, taskName)

    return mcp
