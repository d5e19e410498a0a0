"""Tests for the terminal notification listener."""

import httpx
import pytest
from rich.console import Console

from project_timer.notifications import TimerStartedEvent, TimerStoppedEvent
from project_timer.notifications.listener import listen, parse_frame_line, show_toast, toast_for_event


def _console() -> Console:
    return Console(record=True, width=80, force_terminal=False)


class TestParseFrameLine:
    """Tests for parse_frame_line()."""

    def test_data_line(self):
        """A data line carrying a valid event is parsed."""
        event = parse_frame_line('data: {"type":"start","taskName":"Writing"}')
        assert event == TimerStartedEvent(task_name="Writing")

    def test_data_without_space(self):
        """The space after the colon is optional."""
        event = parse_frame_line('data:{"type":"stop","taskName":"Writing","formatted":"5 seconds"}')
        assert event == TimerStoppedEvent(task_name="Writing", formatted="5 seconds")

    @pytest.mark.parametrize("line", ["", ": keep-alive", "event: message", "data: {oops"])
    def test_other_lines_ignored(self, line):
        """Blank, comment, non-data and malformed lines yield nothing."""
        assert parse_frame_line(line) is None


class TestToasts:
    """Tests for toast rendering."""

    def test_start_toast(self):
        """Start events show the task name."""
        console = _console()
        toast_for_event(console, TimerStartedEvent(task_name="Design review"))
        assert "Timer started: Design review" in console.export_text()

    def test_stop_toast(self):
        """Stop events show the task name and duration."""
        console = _console()
        toast_for_event(console, TimerStoppedEvent(task_name="Design review", formatted="2 minutes"))
        assert "Timer stopped: Design review (2 minutes)" in console.export_text()

    def test_unknown_kind_falls_back(self):
        """Unknown toast kinds render like info toasts."""
        console = _console()
        show_toast(console, "Hello", "shiny")
        assert "Hello" in console.export_text()


class TestListen:
    """Tests for consuming the event stream."""

    @pytest.mark.asyncio
    async def test_delivers_valid_events_only(self):
        """Valid frames reach the callback; malformed ones are skipped."""
        body = (
            'data: {"type":"start","taskName":"Writing"}\n\n'
            "data: not-json\n\n"
            ": comment\n\n"
            'data: {"type":"stop","taskName":"Writing","formatted":"1 second"}\n\n'
        )

        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/events"
            return httpx.Response(200, text=body, headers={"content-type": "text/event-stream"})

        received = []
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            await listen("http://localhost:3001/events", received.append, client=client)

        assert received == [
            TimerStartedEvent(task_name="Writing"),
            TimerStoppedEvent(task_name="Writing", formatted="1 second"),
        ]

    @pytest.mark.asyncio
    async def test_http_error_raises(self):
        """A non-2xx response is reported to the caller."""
        transport = httpx.MockTransport(lambda request: httpx.Response(404))

        async with httpx.AsyncClient(transport=transport) as client:
            with pytest.raises(httpx.HTTPStatusError):
                await listen("http://localhost:3001/events", lambda event: None, client=client)
