# This project was developed with assistance from AI tools.
"""Client-side message log entries and their storage encoding.

Timestamps carry millisecond precision and serialize as
``YYYY-MM-DDTHH:MM:SS.mmmZ`` so a stored log reloads exactly.
"""

import json
import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Literal

Sender = Literal["user", "bot"]


def now_ms() -> datetime:
    """Current UTC time truncated to milliseconds."""
    now = datetime.now(UTC)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


def format_timestamp(value: datetime) -> str:
    """ISO-8601 in UTC with millisecond precision and a ``Z`` suffix."""
    value = value.astimezone(UTC)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def parse_timestamp(value: str) -> datetime:
    if not isinstance(value, str):
        raise ValueError(f"Timestamp must be a string, got {type(value).__name__}")
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


@dataclass
class ClientMessage:
    content: str
    sender: Sender
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    timestamp: datetime = field(default_factory=now_ms)

    @property
    def display_time(self) -> str:
        """Local wall-clock time for the message bubble, e.g. ``09:41 AM``."""
        return self.timestamp.astimezone().strftime("%I:%M %p")

    def to_dict(self) -> dict[str, str]:
        return {
            "id": self.id,
            "content": self.content,
            "sender": self.sender,
            "timestamp": format_timestamp(self.timestamp),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ClientMessage":
        sender = data["sender"]
        if sender not in ("user", "bot"):
            raise ValueError(f"Unknown sender {sender!r}")
        return cls(
            id=str(data["id"]),
            content=str(data["content"]),
            sender=sender,
            timestamp=parse_timestamp(data["timestamp"]),
        )


def serialize_messages(messages: list[ClientMessage]) -> str:
    return json.dumps([m.to_dict() for m in messages])


def deserialize_messages(raw: str) -> list[ClientMessage]:
    """Inverse of :func:`serialize_messages`.

    Raises:
        ValueError: The payload is not a JSON list of message objects.
    """
    data = json.loads(raw)
    if not isinstance(data, list):
        raise ValueError("Stored messages must be a JSON list")
    try:
        return [ClientMessage.from_dict(item) for item in data]
    except (KeyError, TypeError) as exc:
        raise ValueError(f"Malformed stored message: {exc}") from exc
