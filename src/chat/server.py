"""Socket.IO chat server.

Every event is relayed to all other connected sockets; nothing is stored.

Client -> server events:
- ``createMessage`` ``{from, text}``
- ``createLocationMessage`` ``{latitude, longitude}``

Server -> client events:
- ``newMessage`` ``{from, text, createdAt}``
- ``newLocationMessage`` ``{from, url, createdAt}``
"""

from __future__ import annotations

import logging
from typing import Any

import socketio

from src.chat.messages import (
    ADMIN,
    DEFAULT_SENDER,
    generate_location_message,
    generate_message,
    is_coordinate,
    is_real_string,
)
from src.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()


def _cors_origins() -> list[str] | str:
    origins = settings.chat_cors_origins
    return "*" if "*" in origins else origins


sio = socketio.AsyncServer(
    async_mode="asgi",
    cors_allowed_origins=_cors_origins(),
    logger=False,
    engineio_logger=False,
)


@sio.event
async def connect(sid: str, environ: dict[str, Any], auth: Any | None = None):
    logger.info("Chat client connected: %s", sid)
    await sio.emit("newMessage", generate_message(ADMIN, "Welcome to the chat app"), to=sid)
    await sio.emit("newMessage", generate_message(ADMIN, "New user joined"), skip_sid=sid)


@sio.event
async def disconnect(sid: str, reason: Any = None):
    logger.info("Chat client disconnected: %s", sid)


@sio.event
async def createMessage(sid: str, data: Any):  # noqa: N802
    """Relay a chat message.

    The return value is the acknowledgement sent back to the emitter:
    ``None`` on success, an error string otherwise.
    """
    if not isinstance(data, dict) or not is_real_string(data.get("text")):
        logger.debug("Rejected message from %s: %r", sid, data)
        return "Message text is required"

    sender = data.get("from")
    if not is_real_string(sender):
        sender = DEFAULT_SENDER

    await sio.emit("newMessage", generate_message(sender, data["text"]), skip_sid=sid)
    return None


@sio.event
async def createLocationMessage(sid: str, data: Any):  # noqa: N802
    """Relay a geolocation as a map link."""
    if (
        not isinstance(data, dict)
        or not is_coordinate(data.get("latitude"))
        or not is_coordinate(data.get("longitude"))
    ):
        logger.debug("Rejected location from %s: %r", sid, data)
        return "Latitude and longitude are required"

    payload = generate_location_message(DEFAULT_SENDER, data["latitude"], data["longitude"])
    await sio.emit("newLocationMessage", payload, skip_sid=sid)
    return None
