"""Project timer service.

Runs the MCP server over stdio and the notification event stream together
in one event loop.
"""

import logging

from project_timer.config import Settings, settings as default_settings
from project_timer.mcp_server import create_mcp_server
from project_timer.notifications import EventsServer, NotificationBroadcaster
from project_timer.timers import TimerStore
from project_timer.tools import ProjectTimerTool

logger = logging.getLogger(__name__)


class TimerService:
    """Wires the timer store, broadcaster, events server and MCP server."""

    def __init__(self, config: Settings | None = None) -> None:
        """Initialize the service.

        Args:
            config: Settings to use (defaults to the global settings).
        """
        self.config = config or default_settings
        self.store = TimerStore(
            self.config.get_timers_file(),
            use_lock=self.config.lock_timers_file,
        )
        self.broadcaster = NotificationBroadcaster(queue_size=self.config.events_queue_size)
        self.events_server = EventsServer(
            self.broadcaster,
            host=self.config.events_host,
            port=self.config.events_port,
            path=self.config.events_path,
        )
        self.tool = ProjectTimerTool(self.store, self.broadcaster)
        self.mcp = create_mcp_server(self.tool, name=self.config.server_name)

    async def start_notifications(self) -> bool:
        """Start the event stream if enabled.

        Returns:
            True if listeners can connect.
        """
        if not self.config.notifications_enabled:
            self.broadcaster.disable("turned off in settings")
            return False
        return await self.events_server.start()

    async def run(self) -> None:
        """Serve MCP over stdio until the client disconnects."""
        logger.info(f"Timers stored in {self.store.path}")
        await self.start_notifications()
        try:
            await self.mcp.run_stdio_async()
        finally:
            await self.events_server.stop()
            logger.info("Project timer service stopped")
