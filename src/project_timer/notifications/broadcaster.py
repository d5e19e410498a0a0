"""Fan-out of timer notifications to connected stream listeners.

Each open event-stream connection owns one subscriber handle, a bounded
queue of encoded frames that the connection drains. Broadcasting only
enqueues, so it never blocks the tool call that triggered it.
"""

import asyncio
import logging
import threading

from project_timer.notifications.events import (
    TimerStartedEvent,
    TimerStoppedEvent,
    encode_frame,
)

logger = logging.getLogger(__name__)

Subscriber = asyncio.Queue


class NotificationBroadcaster:
    """Registry of stream subscribers with best-effort delivery.

    There is no acknowledgement and no backlog: a subscriber only sees
    events broadcast while it is registered.

    Example:
        broadcaster = NotificationBroadcaster()
        handle = broadcaster.subscribe()
        broadcaster.broadcast(TimerStartedEvent(task_name="Design review"))
        frame = await handle.get()
        broadcaster.unsubscribe(handle)
    """

    def __init__(self, queue_size: int = 100) -> None:
        """Initialize the broadcaster.

        Args:
            queue_size: Maximum undelivered frames held per subscriber.
        """
        self._queue_size = queue_size
        self._subscribers: list[Subscriber] = []
        self._lock = threading.Lock()
        self._disabled_reason: str | None = None

    @property
    def enabled(self) -> bool:
        """Whether broadcasts are delivered."""
        return self._disabled_reason is None

    @property
    def subscriber_count(self) -> int:
        """Number of currently registered subscribers."""
        with self._lock:
            return len(self._subscribers)

    def disable(self, reason: str) -> None:
        """Turn broadcasts into no-ops.

        Args:
            reason: Why notifications are unavailable, logged once.
        """
        if self._disabled_reason is None:
            logger.warning(f"Timer notifications disabled: {reason}")
        self._disabled_reason = reason

    def subscribe(self) -> Subscriber:
        """Register a new subscriber.

        Returns:
            Queue that receives encoded event-stream frames.
        """
        handle: Subscriber = asyncio.Queue(maxsize=self._queue_size)
        with self._lock:
            self._subscribers.append(handle)
            count = len(self._subscribers)
        logger.debug(f"Subscriber connected ({count} total)")
        return handle

    def unsubscribe(self, handle: Subscriber) -> None:
        """Remove a subscriber. Unknown handles are ignored."""
        with self._lock:
            try:
                self._subscribers.remove(handle)
            except ValueError:
                return
            count = len(self._subscribers)
        logger.debug(f"Subscriber disconnected ({count} remaining)")

    def broadcast(self, event: TimerStartedEvent | TimerStoppedEvent) -> int:
        """Push an event to every subscriber, in registration order.

        Args:
            event: The event to send.

        Returns:
            Number of subscribers the event was queued for.
        """
        if not self.enabled:
            return 0

        frame = encode_frame(event)
        with self._lock:
            targets = list(self._subscribers)

        delivered = 0
        for handle in targets:
            try:
                handle.put_nowait(frame)
            except asyncio.QueueFull:
                logger.warning(f"Dropping {event.type} event for a subscriber that is not keeping up")
                continue
            delivered += 1

        logger.debug(f"Broadcast {event.type} event for {event.task_name!r} to {delivered} subscriber(s)")
        return delivered
