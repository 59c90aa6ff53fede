# This project was developed with assistance from AI tools.
"""Dealership chat widget client."""

from collections.abc import Callable, Mapping
from typing import Any

import httpx

from .config import Theme, WidgetConfig
from .messages import ClientMessage, deserialize_messages, serialize_messages
from .storage import CONVERSATION_ID_KEY, MESSAGES_KEY, FileStorage, MemoryStorage, Storage
from .widget import ChatWidget

__version__ = "0.1.0"


def create_chat_widget(
    config: WidgetConfig | Mapping[str, Any],
    *,
    storage: Storage | None = None,
    http_client: httpx.AsyncClient | None = None,
    on_scroll_to_bottom: Callable[[int], None] | None = None,
) -> ChatWidget:
    """Mount a widget. A plain mapping is validated into a ``WidgetConfig``."""
    if not isinstance(config, WidgetConfig):
        config = WidgetConfig.model_validate(config)
    return ChatWidget(
        config,
        storage=storage,
        http_client=http_client,
        on_scroll_to_bottom=on_scroll_to_bottom,
    )


__all__ = [
    "CONVERSATION_ID_KEY",
    "ChatWidget",
    "ClientMessage",
    "FileStorage",
    "MESSAGES_KEY",
    "MemoryStorage",
    "Storage",
    "Theme",
    "WidgetConfig",
    "create_chat_widget",
    "deserialize_messages",
    "serialize_messages",
]
