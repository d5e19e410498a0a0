"""Desktop notifications for timer starts and stops.

Events are fanned out by a broadcaster to every client connected to the
HTTP event stream. Delivery is best-effort: timers work the same whether
or not anyone is listening.

Example:
    from project_timer.notifications import EventsServer, NotificationBroadcaster

    broadcaster = NotificationBroadcaster()
    server = EventsServer(broadcaster, port=3001)
    await server.start()
"""

from project_timer.notifications.broadcaster import NotificationBroadcaster, Subscriber
from project_timer.notifications.events import (
    NotificationEvent,
    TimerStartedEvent,
    TimerStoppedEvent,
    encode_frame,
    parse_event,
)
from project_timer.notifications.server import EventsServer, create_app

__all__ = [
    # Broadcaster
    "NotificationBroadcaster",
    "Subscriber",
    # Events
    "NotificationEvent",
    "TimerStartedEvent",
    "TimerStoppedEvent",
    "encode_frame",
    "parse_event",
    # Server
    "EventsServer",
    "create_app",
]
