"""HTTP event stream for timer notifications.

Serves ``GET /events`` as ``text/event-stream`` with unrestricted CORS so a
browser page (or ``project-timer listen``) can show toasts when timers start
and stop. The server runs under uvicorn inside the caller's event loop.
"""

import asyncio
import logging
import socket
from collections.abc import AsyncIterator

import uvicorn
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import StreamingResponse
from starlette.routing import Route

from project_timer.notifications.broadcaster import NotificationBroadcaster, Subscriber

logger = logging.getLogger(__name__)


async def stream_events(
    broadcaster: NotificationBroadcaster,
    handle: Subscriber,
) -> AsyncIterator[str]:
    """Yield frames queued for a subscriber until the connection closes.

    The subscriber is unregistered when the generator is closed or cancelled.
    """
    try:
        while True:
            yield await handle.get()
    finally:
        broadcaster.unsubscribe(handle)


def create_app(broadcaster: NotificationBroadcaster, path: str = "/events") -> Starlette:
    """Build the event stream application.

    Args:
        broadcaster: Source of notification frames.
        path: HTTP path of the stream endpoint.

    Returns:
        Starlette application.
    """

    async def events(request: Request) -> StreamingResponse:
        handle = broadcaster.subscribe()
        return StreamingResponse(
            stream_events(broadcaster, handle),
            media_type="text/event-stream",
            headers={"Cache-Control": "no-cache", "Connection": "keep-alive"},
        )

    return Starlette(
        routes=[Route(path, events, methods=["GET"])],
        middleware=[
            Middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["GET"]),
        ],
    )


def bind_socket(host: str, port: int) -> socket.socket | None:
    """Bind a listening socket for the event stream.

    Args:
        host: Interface to bind.
        port: Port to bind.

    Returns:
        The bound socket, or None if the address is unavailable.
    """
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    try:
        sock.bind((host, port))
    except OSError as e:
        sock.close()
        logger.debug(f"Could not bind {host}:{port}: {e}")
        return None
    sock.set_inheritable(True)
    return sock


class EventsServer:
    """Runs the event stream next to the MCP server.

    If the port is already taken the broadcaster is disabled and the
    server does not start; timers keep working without notifications.

    Example:
        server = EventsServer(broadcaster, port=3001)
        await server.start()
        ...
        await server.stop()
    """

    def __init__(
        self,
        broadcaster: NotificationBroadcaster,
        host: str = "127.0.0.1",
        port: int = 3001,
        path: str = "/events",
    ) -> None:
        """Initialize the events server.

        Args:
            broadcaster: Broadcaster whose subscribers this server feeds.
            host: Interface to bind.
            port: Port to bind.
            path: HTTP path of the stream endpoint.
        """
        self._broadcaster = broadcaster
        self._host = host
        self._port = port
        self._path = path
        self._server: uvicorn.Server | None = None
        self._task: asyncio.Task | None = None

    @property
    def is_running(self) -> bool:
        """Check if the server task is active."""
        return self._task is not None and not self._task.done()

    @property
    def is_serving(self) -> bool:
        """Check if the server has finished starting up and accepts connections."""
        return self.is_running and self._server is not None and self._server.started

    @property
    def url(self) -> str:
        """URL listeners connect to."""
        return f"http://{self._host}:{self._port}{self._path}"

    async def start(self) -> bool:
        """Start serving in the background.

        Returns:
            True if the server started, False if notifications were disabled.
        """
        sock = bind_socket(self._host, self._port)
        if sock is None:
            self._broadcaster.disable(f"{self._host}:{self._port} is already in use")
            return False

        config = uvicorn.Config(
            create_app(self._broadcaster, self._path),
            log_config=None,
            log_level="warning",
            lifespan="off",
        )
        self._server = uvicorn.Server(config)
        self._task = asyncio.create_task(
            self._server.serve(sockets=[sock]),
            name="events_server",
        )
        logger.info(f"Timer notifications available at {self.url}")
        return True

    async def stop(self) -> None:
        """Stop the server and wait for it to exit."""
        if self._server is None or self._task is None:
            return
        self._server.should_exit = True
        # Open streams never end on their own
        self._server.force_exit = True
        try:
            await self._task
        finally:
            self._server = None
            self._task = None
