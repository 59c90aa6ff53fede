# This project was developed with assistance from AI tools.
"""Conversation relay -- one chat turn between a site visitor and the model.

Flow per turn: validate the customer domain against the allow-list, resolve
or create the conversation, persist the user message, send the last
``CONTEXT_WINDOW`` messages plus the system prompt and the new turn to the
completion provider, persist the reply, and return it.

Turns on the same conversation are serialized with an in-process lock keyed
by conversation id, so history reads and appends never interleave within a
worker. Separate worker processes are not coordinated.
"""

import asyncio
import logging
from collections.abc import AsyncIterator, Iterable, Sequence
from contextlib import asynccontextmanager
from dataclasses import dataclass

from db import Conversation, Message, MessageSender
from sqlalchemy.ext.asyncio import AsyncSession

from ..assistant import get_assistant_profile
from ..core.config import settings
from ..inference.client import get_completion
from .conversation import append_message, create_conversation, get_conversation

logger = logging.getLogger(__name__)

UNAUTHORIZED_DOMAIN_MESSAGE = (
    "Unauthorized domain. Please sign up for our service to use this feature."
)
CONVERSATION_NOT_FOUND_MESSAGE = "Failed to create or find conversation"
PROCESSING_FAILED_MESSAGE = "Failed to process message"
INVALID_REQUEST_MESSAGE = "Invalid request data"

# Bot turns are replayed to the model as "system" messages, not "assistant".
ROLE_BY_SENDER: dict[MessageSender, str] = {
    MessageSender.USER: "user",
    MessageSender.BOT: "system",
}


class UnauthorizedDomainError(Exception):
    """Raised when the caller's domain is absent or not on the allow-list."""


class ConversationNotFoundError(Exception):
    """Raised when a supplied conversation id does not resolve."""


@dataclass(frozen=True)
class RelayResult:
    response: str
    conversation_id: str


class ConversationLocks:
    """Per-conversation asyncio locks, discarded once nobody holds or awaits them."""

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}
        self._users: dict[str, int] = {}

    def __len__(self) -> int:
        return len(self._locks)

    @asynccontextmanager
    async def hold(self, conversation_id: str) -> AsyncIterator[None]:
        lock = self._locks.setdefault(conversation_id, asyncio.Lock())
        self._users[conversation_id] = self._users.get(conversation_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[conversation_id] -= 1
            if self._users[conversation_id] == 0:
                del self._users[conversation_id]
                del self._locks[conversation_id]


_locks = ConversationLocks()


def is_allowed_domain(customer_domain: str | None, allowed: Iterable[str] | None = None) -> bool:
    """Exact, case-sensitive membership test against the allow-list."""
    if not customer_domain:
        return False
    return customer_domain in (settings.ALLOWED_DOMAINS if allowed is None else allowed)


def build_context(
    history: Sequence[Message],
    message: str,
    system_prompt: str,
    window: int = 10,
) -> list[dict[str, str]]:
    """Assemble provider messages: system prompt, last *window* turns, new user turn."""
    turns = [{"role": ROLE_BY_SENDER[m.sender], "content": m.content} for m in history]
    recent = turns[-window:] if window > 0 else []
    return [
        {"role": "system", "content": system_prompt},
        *recent,
        {"role": "user", "content": message},
    ]


async def _run_turn(
    session: AsyncSession,
    conversation: Conversation,
    message: str,
    customer_domain: str,
) -> RelayResult:
    history = list(conversation.messages)

    await append_message(session, conversation.id, message, MessageSender.USER)
    await session.commit()

    profile = get_assistant_profile(customer_domain)
    context = build_context(
        history,
        message,
        profile.render_system_prompt(customer_domain),
        window=settings.CONTEXT_WINDOW,
    )

    reply = await get_completion(
        context,
        settings.CHAT_MODEL_TIER,
        session_id=conversation.id,
    )
    if not reply:
        logger.warning("Empty completion for conversation %s, using fallback", conversation.id)
        reply = profile.fallback_response

    await append_message(session, conversation.id, reply, MessageSender.BOT)
    await session.commit()

    return RelayResult(response=reply, conversation_id=conversation.id)


async def relay_message(
    session: AsyncSession,
    *,
    message: str,
    customer_domain: str | None,
    conversation_id: str | None = None,
) -> RelayResult:
    """Run one chat turn and return the assistant's reply.

    Raises:
        UnauthorizedDomainError: Domain missing or not allow-listed. Nothing is written.
        ConversationNotFoundError: ``conversation_id`` given but unknown.
    """
    if not is_allowed_domain(customer_domain):
        logger.warning("Rejected chat request from unauthorized domain %r", customer_domain)
        raise UnauthorizedDomainError(customer_domain)

    if conversation_id:
        async with _locks.hold(conversation_id):
            conversation = await get_conversation(session, conversation_id)
            if conversation is None:
                logger.warning("Conversation %s not found", conversation_id)
                raise ConversationNotFoundError(conversation_id)
            if conversation.customer_domain != customer_domain:
                logger.warning(
                    "Conversation %s belongs to %s but was resumed from %s",
                    conversation.id,
                    conversation.customer_domain,
                    customer_domain,
                )
            logger.info(
                "Resuming conversation %s (%d messages)",
                conversation.id,
                len(conversation.messages),
            )
            return await _run_turn(session, conversation, message, customer_domain)

    conversation = await create_conversation(session, customer_domain)
    async with _locks.hold(conversation.id):
        return await _run_turn(session, conversation, message, customer_domain)
