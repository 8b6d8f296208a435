"""Message payloads exchanged over the chat socket."""

from datetime import UTC, datetime
from typing import Any

ADMIN = "Admin"
DEFAULT_SENDER = "User"


def now_millis() -> int:
    """Current time as epoch milliseconds."""
    return int(datetime.now(UTC).timestamp() * 1000)


def generate_message(from_: str, text: str) -> dict[str, Any]:
    """Build a ``newMessage`` payload."""
    return {"from": from_, "text": text, "createdAt": now_millis()}


def location_url(latitude: float, longitude: float) -> str:
    """Map link for a pair of coordinates."""
    return f"https://www.google.com/maps?q={latitude},{longitude}"


def generate_location_message(from_: str, latitude: float, longitude: float) -> dict[str, Any]:
    """Build a ``newLocationMessage`` payload."""
    return {
        "from": from_,
        "url": location_url(latitude, longitude),
        "createdAt": now_millis(),
    }


def is_real_string(value: Any) -> bool:
    """Check for a string with at least one non-whitespace character."""
    return isinstance(value, str) and bool(value.strip())


def is_coordinate(value: Any) -> bool:
    """Check for a numeric coordinate (booleans excluded)."""
    return isinstance(value, int | float) and not isinstance(value, bool)
