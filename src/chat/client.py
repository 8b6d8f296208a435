"""Terminal chat client.

Connects to the chat server, prints incoming messages through templates and
sends each typed line as a message. ``/location <lat> <lng>`` shares a
location instead.
"""

import argparse
import asyncio
import logging
from collections.abc import Callable
from datetime import datetime
from typing import Any

import socketio
from jinja2 import Environment

logger = logging.getLogger(__name__)

_templates = Environment(autoescape=False)

MESSAGE_TEMPLATE = _templates.from_string("{{ sender }} {{ created_at }}: {{ text }}")
LOCATION_MESSAGE_TEMPLATE = _templates.from_string(
    "{{ sender }} {{ created_at }}: My current location {{ url }}"
)


def format_time(created_at: int, tz=None) -> str:
    """Format epoch milliseconds like ``3:07 pm``, in local time unless ``tz`` is given."""
    moment = datetime.fromtimestamp(created_at / 1000).astimezone(tz)
    hour = moment.hour % 12 or 12
    return f"{hour}:{moment.minute:02d} {'am' if moment.hour < 12 else 'pm'}"


def render_message(message: dict[str, Any], tz=None) -> str:
    """Render a ``newMessage`` payload."""
    return MESSAGE_TEMPLATE.render(
        {
            "sender": message.get("from", ""),
            "text": message.get("text", ""),
            "created_at": format_time(message["createdAt"], tz),
        }
    )


def render_location_message(message: dict[str, Any], tz=None) -> str:
    """Render a ``newLocationMessage`` payload."""
    return LOCATION_MESSAGE_TEMPLATE.render(
        {
            "sender": message.get("from", ""),
            "url": message.get("url", ""),
            "created_at": format_time(message["createdAt"], tz),
        }
    )


class ChatClient:
    """Socket.IO chat client that hands rendered lines to ``output``."""

    def __init__(
        self,
        name: str = "User",
        output: Callable[[str], None] = print,
        sio: socketio.AsyncClient | None = None,
        tz=None,
    ):
        self.name = name
        self.output = output
        self.tz = tz
        self.sio = sio or socketio.AsyncClient()
        self.sio.on("connect", self.on_connect)
        self.sio.on("disconnect", self.on_disconnect)
        self.sio.on("newMessage", self.on_new_message)
        self.sio.on("newLocationMessage", self.on_new_location_message)

    async def on_connect(self) -> None:
        logger.info("connected to server")

    async def on_disconnect(self, *args: Any) -> None:
        logger.info("disconnected from server")

    async def on_new_message(self, message: dict[str, Any]) -> None:
        self.output(render_message(message, self.tz))

    async def on_new_location_message(self, message: dict[str, Any]) -> None:
        self.output(render_location_message(message, self.tz))

    async def connect(self, url: str) -> None:
        await self.sio.connect(url)

    async def disconnect(self) -> None:
        await self.sio.disconnect()

    async def send_message(self, text: str) -> str | None:
        """Send a chat message and wait for the server's acknowledgement."""
        return await self.sio.call("createMessage", {"from": self.name, "text": text})

    async def send_location(self, latitude: float, longitude: float) -> str | None:
        """Share a location and wait for the server's acknowledgement."""
        return await self.sio.call(
            "createLocationMessage", {"latitude": latitude, "longitude": longitude}
        )

    async def handle_line(self, line: str) -> str | None:
        """Interpret one line of user input."""
        line = line.strip()
        if not line:
            return None
        if line.startswith("/location"):
            parts = line.split()
            try:
                latitude, longitude = float(parts[1]), float(parts[2])
            except (IndexError, ValueError):
                return "usage: /location <latitude> <longitude>"
            return await self.send_location(latitude, longitude)
        return await self.send_message(line)


async def run(url: str, name: str) -> None:
    client = ChatClient(name=name)
    await client.connect(url)
    loop = asyncio.get_running_loop()
    try:
        while True:
            line = await loop.run_in_executor(None, input)
            error = await client.handle_line(line)
            if error:
                print(error)
    except (EOFError, KeyboardInterrupt):
        pass
    finally:
        await client.disconnect()


def main() -> None:
    parser = argparse.ArgumentParser(description="Terminal chat client")
    parser.add_argument("--url", default="http://localhost:8001")
    parser.add_argument("--name", default="User")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO)
    asyncio.run(run(args.url, args.name))


if __name__ == "__main__":
    main()
