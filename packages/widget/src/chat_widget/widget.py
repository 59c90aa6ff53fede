# This project was developed with assistance from AI tools.
"""Chat UI component state.

``ChatWidget`` owns everything the rendered widget shows: whether the
window is open, the message log, the pending input and the in-flight
flag. Rendering is the host's business; it reads these attributes and
calls ``toggle()``, ``set_input()`` and ``submit()``.
"""

import asyncio
import json
import logging
from collections.abc import Callable

import httpx

from .config import WidgetConfig
from .messages import ClientMessage, deserialize_messages, serialize_messages
from .storage import CONVERSATION_ID_KEY, MESSAGES_KEY, MemoryStorage, Storage

logger = logging.getLogger(__name__)

WELCOME_MESSAGE = "Hello! How can I help you today?"
MISSING_RESPONSE_MESSAGE = "Sorry, I could not process your message."
SEND_ERROR_MESSAGE = "Sorry, there was an error sending your message. Please try again."

REQUEST_TIMEOUT = 30.0


class ChatWidget:
    def __init__(
        self,
        config: WidgetConfig,
        *,
        storage: Storage | None = None,
        http_client: httpx.AsyncClient | None = None,
        on_scroll_to_bottom: Callable[[int], None] | None = None,
    ) -> None:
        self.config = config
        self._storage = storage if storage is not None else MemoryStorage()
        self._http_client = http_client
        self._on_scroll_to_bottom = on_scroll_to_bottom

        self.is_open = False
        self.is_sending = False
        self.input_value = ""
        self.scroll_offset = 0

        self._messages: list[ClientMessage] = self._load_messages()
        self.conversation_id: str | None = self._storage.get_item(CONVERSATION_ID_KEY)

    # -- state --

    @property
    def messages(self) -> list[ClientMessage]:
        return list(self._messages)

    @property
    def container_id(self) -> str | None:
        return self.config.container_id

    def style_variables(self) -> dict[str, str]:
        """CSS custom properties the host applies to the widget root."""
        color = self.config.theme.primary_color
        return {"--primary-color": color} if color else {}

    def set_input(self, text: str) -> None:
        self.input_value = text

    def toggle(self) -> None:
        self.is_open = not self.is_open
        if not self.is_open:
            return
        if not self._messages:
            self._append(ClientMessage(content=WELCOME_MESSAGE, sender="bot"))
        self._schedule_scroll()

    # -- sending --

    def resolve_api_url(self) -> str:
        if self.config.base_url:
            return str(httpx.URL(self.config.base_url).join(self.config.api_url))
        return self.config.api_url

    async def submit(self, text: str | None = None) -> ClientMessage | None:
        """Send one user turn through the relay.

        Returns the bot message appended to the log, or None when nothing
        was sent (blank input, or a previous call still outstanding).
        Transport, status and decoding failures become an error message in
        the log and are never raised.
        """
        content = self.input_value if text is None else text
        if not content.strip() or self.is_sending:
            return None

        self._append(ClientMessage(content=content, sender="user"))
        self.input_value = ""
        self.is_sending = True
        try:
            reply = await self._send(content)
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as exc:
            logger.error("Failed to send message: %s", exc)
            reply = SEND_ERROR_MESSAGE
        finally:
            self.is_sending = False

        bot_message = ClientMessage(content=reply, sender="bot")
        self._append(bot_message)
        return bot_message

    async def _send(self, content: str) -> str:
        payload = {
            "message": content,
            "customerDomain": self.config.customer_domain,
            "conversationId": self.conversation_id,
        }
        headers = {"X-Customer-ID": self.config.customer_domain or ""}
        url = self.resolve_api_url()

        if self._http_client is not None:
            response = await self._http_client.post(url, json=payload, headers=headers)
        else:
            async with httpx.AsyncClient(timeout=REQUEST_TIMEOUT) as client:
                response = await client.post(url, json=payload, headers=headers)

        response.raise_for_status()
        data = response.json()
        if not isinstance(data, dict):
            raise ValueError("Relay returned a non-object body")

        returned_id = data.get("conversationId")
        if returned_id and not self.conversation_id:
            self.conversation_id = str(returned_id)
            self._storage.set_item(CONVERSATION_ID_KEY, self.conversation_id)

        reply = data.get("response")
        if not reply:
            return MISSING_RESPONSE_MESSAGE
        return reply if isinstance(reply, str) else str(reply)

    # -- persistence --

    def _load_messages(self) -> list[ClientMessage]:
        raw = self._storage.get_item(MESSAGES_KEY)
        if not raw:
            return []
        try:
            return deserialize_messages(raw)
        except (json.JSONDecodeError, ValueError) as exc:
            logger.warning("Ignoring stored chat messages: %s", exc)
            return []

    def _append(self, message: ClientMessage) -> None:
        self._messages.append(message)
        self._storage.set_item(MESSAGES_KEY, serialize_messages(self._messages))
        self._schedule_scroll()

    # -- scrolling --

    def _schedule_scroll(self) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self._scroll_to_bottom()
            return
        loop.call_soon(self._scroll_to_bottom)

    def _scroll_to_bottom(self) -> None:
        self.scroll_offset = len(self._messages)
        if self._on_scroll_to_bottom is not None:
            self._on_scroll_to_bottom(self.scroll_offset)
