"""Type definitions for timer notification events.

Events are pushed to listeners as JSON, e.g.
``{"type": "start", "taskName": "Design review"}``.
"""

import logging
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

logger = logging.getLogger(__name__)


class _BaseEvent(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    task_name: str = Field(..., alias="taskName", description="Name of the timed task")

    def to_json(self) -> str:
        """Serialize the event using its wire field names."""
        return self.model_dump_json(by_alias=True)


class TimerStartedEvent(_BaseEvent):
    """A timer was started."""

    type: Literal["start"] = "start"


class TimerStoppedEvent(_BaseEvent):
    """A timer was stopped.

    Attributes:
        formatted: Human-readable elapsed time, e.g. "1 minute, 5 seconds".
    """

    type: Literal["stop"] = "stop"
    formatted: str = Field(..., description="Human-readable elapsed time")


NotificationEvent = Annotated[
    Union[TimerStartedEvent, TimerStoppedEvent],
    Field(discriminator="type"),
]

_EVENT_ADAPTER: TypeAdapter[NotificationEvent] = TypeAdapter(NotificationEvent)


def encode_frame(event: TimerStartedEvent | TimerStoppedEvent) -> str:
    """Encode an event as one event-stream frame."""
    return f"data: {event.to_json()}\n\n"


def parse_event(payload: str) -> TimerStartedEvent | TimerStoppedEvent | None:
    """Parse a JSON payload into an event.

    Args:
        payload: Raw JSON text from a ``data:`` line

    Returns:
        The event, or None if the payload is malformed or of an unknown type
    """
    try:
        return _EVENT_ADAPTER.validate_json(payload)
    except ValidationError:
        logger.debug(f"Discarding malformed notification payload: {payload!r}")
        return None
