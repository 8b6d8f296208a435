"""Tests for the realtime chat server and client."""

from datetime import UTC, datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
import socketio

from src.chat import server
from src.chat.client import ChatClient, format_time, render_location_message, render_message
from src.chat.messages import (
    generate_location_message,
    generate_message,
    is_coordinate,
    is_real_string,
    location_url,
)


def _millis(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)


class TestMessages:
    """Tests for message payload builders."""

    def test_generate_message(self):
        before = _millis(datetime.now(UTC))
        message = generate_message("Jen", "Some message")

        assert message["from"] == "Jen"
        assert message["text"] == "Some message"
        assert before <= message["createdAt"] <= _millis(datetime.now(UTC))

    def test_generate_location_message(self):
        message = generate_location_message("Admin", 15, 19)

        assert message["from"] == "Admin"
        assert message["url"] == "https://www.google.com/maps?q=15,19"
        assert isinstance(message["createdAt"], int)

    def test_location_url_keeps_decimals(self):
        assert location_url(48.8584, 2.2945) == "https://www.google.com/maps?q=48.8584,2.2945"

    def test_is_real_string(self):
        assert is_real_string("hi")
        assert not is_real_string("   ")
        assert not is_real_string(98)
        assert not is_real_string(None)

    def test_is_coordinate(self):
        assert is_coordinate(1)
        assert is_coordinate(-12.5)
        assert not is_coordinate("1")
        assert not is_coordinate(True)


@pytest.fixture
def emit():
    with patch.object(server.sio, "emit", new_callable=AsyncMock) as mock_emit:
        yield mock_emit


class TestServer:
    """Tests for socket event handlers."""

    @pytest.mark.asyncio
    async def test_connect_greets_and_announces(self, emit):
        await server.connect("sid-1", {})

        assert emit.await_count == 2
        welcome, joined = emit.await_args_list
        assert welcome.args[0] == "newMessage"
        assert welcome.args[1]["from"] == "Admin"
        assert welcome.args[1]["text"] == "Welcome to the chat app"
        assert welcome.kwargs == {"to": "sid-1"}
        assert joined.args[1]["text"] == "New user joined"
        assert joined.kwargs == {"skip_sid": "sid-1"}

    @pytest.mark.asyncio
    async def test_create_message_is_relayed_to_others(self, emit):
        ack = await server.createMessage("sid-1", {"from": "Andrew", "text": "hello"})

        assert ack is None
        emit.assert_awaited_once()
        event, payload = emit.await_args.args
        assert event == "newMessage"
        assert payload["from"] == "Andrew"
        assert payload["text"] == "hello"
        assert isinstance(payload["createdAt"], int)
        assert emit.await_args.kwargs == {"skip_sid": "sid-1"}

    @pytest.mark.asyncio
    async def test_create_message_without_sender_uses_default(self, emit):
        await server.createMessage("sid-1", {"text": "hello"})
        assert emit.await_args.args[1]["from"] == "User"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("data", [{"text": ""}, {"text": "   "}, {"from": "x"}, "hello", None])
    async def test_create_message_rejects_blank_text(self, emit, data):
        ack = await server.createMessage("sid-1", data)

        assert ack == "Message text is required"
        emit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_create_location_message(self, emit):
        ack = await server.createLocationMessage("sid-2", {"latitude": 1, "longitude": 2})

        assert ack is None
        event, payload = emit.await_args.args
        assert event == "newLocationMessage"
        assert payload["from"] == "User"
        assert payload["url"] == "https://www.google.com/maps?q=1,2"
        assert emit.await_args.kwargs == {"skip_sid": "sid-2"}

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "data", [{}, {"latitude": 1}, {"latitude": "1", "longitude": "2"}, [1, 2]]
    )
    async def test_create_location_message_rejects_bad_coordinates(self, emit, data):
        ack = await server.createLocationMessage("sid-2", data)

        assert ack == "Latitude and longitude are required"
        emit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_disconnect_emits_nothing(self, emit):
        await server.disconnect("sid-1")
        emit.assert_not_awaited()


class TestRendering:
    """Tests for client-side message templates."""

    def test_format_time(self):
        moment = datetime(2024, 5, 1, 15, 7, tzinfo=UTC)
        assert format_time(_millis(moment), UTC) == "3:07 pm"

    def test_format_time_midnight_and_noon(self):
        assert format_time(_millis(datetime(2024, 5, 1, 0, 5, tzinfo=UTC)), UTC) == "12:05 am"
        assert format_time(_millis(datetime(2024, 5, 1, 12, 0, tzinfo=UTC)), UTC) == "12:00 pm"

    def test_format_time_in_timezone(self):
        moment = datetime(2024, 5, 1, 15, 7, tzinfo=UTC)
        tz = timezone(timedelta(hours=-5))
        assert format_time(_millis(moment), tz) == "10:07 am"

    def test_format_time_defaults_to_local_time(self):
        moment = datetime(2024, 5, 1, 15, 7, tzinfo=UTC)
        local = moment.astimezone()
        hour = local.hour % 12 or 12
        expected = f"{hour}:{local.minute:02d} {'am' if local.hour < 12 else 'pm'}"
        assert format_time(_millis(moment)) == expected

    def test_render_message(self):
        created = _millis(datetime(2024, 5, 1, 9, 30, tzinfo=UTC))
        line = render_message({"from": "Jen", "text": "hi there", "createdAt": created}, UTC)
        assert line == "Jen 9:30 am: hi there"

    def test_render_message_does_not_escape(self):
        created = _millis(datetime(2024, 5, 1, 9, 30, tzinfo=UTC))
        line = render_message({"from": "Jen", "text": "<b>&</b>", "createdAt": created})
        assert line.endswith("<b>&</b>")

    def test_render_location_message(self):
        created = _millis(datetime(2024, 5, 1, 21, 0, tzinfo=UTC))
        url = "https://www.google.com/maps?q=1,2"
        line = render_location_message({"from": "User", "url": url, "createdAt": created}, UTC)
        assert line == f"User 9:00 pm: My current location {url}"


class TestChatClient:
    """Tests for the terminal client against a mocked socket."""

    @pytest.fixture
    def sio(self):
        sio = MagicMock()
        sio.call = AsyncMock(return_value=None)
        sio.connect = AsyncMock()
        sio.disconnect = AsyncMock()
        return sio

    def test_registers_handlers(self, sio):
        client = ChatClient(sio=sio)
        events = [c.args[0] for c in sio.on.call_args_list]
        assert events == ["connect", "disconnect", "newMessage", "newLocationMessage"]
        assert client.sio is sio

    def test_default_socket_has_its_transport_installed(self):
        import aiohttp

        client = ChatClient()
        assert isinstance(client.sio, socketio.AsyncClient)
        assert aiohttp.ClientSession

    @pytest.mark.asyncio
    async def test_incoming_messages_are_rendered(self, sio):
        lines = []
        client = ChatClient(sio=sio, output=lines.append, tz=UTC)
        created = _millis(datetime(2024, 5, 1, 9, 30, tzinfo=UTC))

        await client.on_new_message({"from": "Admin", "text": "Welcome", "createdAt": created})
        await client.on_new_location_message(
            {"from": "User", "url": "https://www.google.com/maps?q=1,2", "createdAt": created}
        )

        assert lines == [
            "Admin 9:30 am: Welcome",
            "User 9:30 am: My current location https://www.google.com/maps?q=1,2",
        ]

    @pytest.mark.asyncio
    async def test_send_message(self, sio):
        client = ChatClient(name="Jen", sio=sio)
        await client.handle_line("  hello  ")
        sio.call.assert_awaited_once_with("createMessage", {"from": "Jen", "text": "hello"})

    @pytest.mark.asyncio
    async def test_send_location(self, sio):
        client = ChatClient(sio=sio)
        await client.handle_line("/location 48.85 2.29")
        sio.call.assert_awaited_once_with(
            "createLocationMessage", {"latitude": 48.85, "longitude": 2.29}
        )

    @pytest.mark.asyncio
    async def test_bad_location_command(self, sio):
        client = ChatClient(sio=sio)
        assert await client.handle_line("/location north") == (
            "usage: /location <latitude> <longitude>"
        )
        sio.call.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_blank_line_sends_nothing(self, sio):
        client = ChatClient(sio=sio)
        assert await client.handle_line("   ") is None
        sio.call.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_server_error_is_returned(self, sio):
        sio.call.return_value = "Message text is required"
        client = ChatClient(sio=sio)
        assert await client.handle_line("hi") == "Message text is required"
