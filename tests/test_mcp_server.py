"""Tests for the MCP server registration."""

import pytest
from mcp.server.fastmcp.exceptions import ToolError

from project_timer.mcp_server import create_mcp_server
from project_timer.timers import TimerStore
from project_timer.tools import ProjectTimerTool


def _text(result) -> str:
    """Extract the text of a call_tool result across SDK versions."""
    if isinstance(result, tuple):
        result = result[0]
    return "\n".join(block.text for block in result)


@pytest.fixture
def store(tmp_path):
    return TimerStore(tmp_path / "timers.json")


@pytest.fixture
def mcp(store):
    return create_mcp_server(ProjectTimerTool(store), name="project-timer-test")


class TestToolSchema:
    """The tool is advertised with the expected schema."""

    @pytest.mark.asyncio
    async def test_single_tool(self, mcp):
        """Exactly one tool named project_timer is registered."""
        tools = await mcp.list_tools()
        assert [tool.name for tool in tools] == ["project_timer"]

    @pytest.mark.asyncio
    async def test_parameters(self, mcp):
        """action is an enum, taskName a non-empty string, both required."""
        tool = (await mcp.list_tools())[0]
        schema = tool.inputSchema

        assert set(schema["required"]) == {"action", "taskName"}
        assert schema["properties"]["action"]["enum"] == ["start", "stop"]
        assert schema["properties"]["taskName"]["type"] == "string"
        assert schema["properties"]["taskName"]["minLength"] == 1


class TestToolCalls:
    """Calls through the MCP server reach the timer tool."""

    @pytest.mark.asyncio
    async def test_start_then_stop(self, mcp, store):
        """start persists the timer and stop reports and removes it."""
        started = _text(await mcp.call_tool("project_timer", {"action": "start", "taskName": "Design review"}))
        assert started.startswith('Timer started for: "Design review"')
        assert "Design review" in store.load()

        stopped = _text(await mcp.call_tool("project_timer", {"action": "stop", "taskName": "Design review"}))
        assert stopped.startswith('Timer stopped for: "Design review"')
        assert "Elapsed:" in stopped
        assert store.load() == {}

    @pytest.mark.asyncio
    async def test_stop_unknown_is_not_an_error(self, mcp):
        """Stopping a task with no timer returns normal text."""
        text = _text(await mcp.call_tool("project_timer", {"action": "stop", "taskName": "Nothing"}))
        assert text == 'No active timer found for "Nothing". Did you start one first?'

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "arguments",
        [
            {"action": "pause", "taskName": "Writing"},
            {"action": "start", "taskName": ""},
            {"action": "start"},
        ],
    )
    async def test_invalid_arguments_rejected(self, mcp, store, arguments):
        """Schema violations never reach the tool."""
        with pytest.raises(ToolError):
            await mcp.call_tool("project_timer", arguments)
        assert store.load() == {}
