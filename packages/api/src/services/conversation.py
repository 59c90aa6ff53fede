# This project was developed with assistance from AI tools.
"""Conversation store -- data access for conversations and their messages.

Callers own the transaction; these helpers only add and flush so the
relay decides when a write becomes durable.
"""

import logging

from db import Conversation, Message, MessageSender
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

logger = logging.getLogger(__name__)


async def get_conversation(session: AsyncSession, conversation_id: str) -> Conversation | None:
    """Return the conversation with its messages loaded, or None if unknown."""
    stmt = (
        select(Conversation)
        .where(Conversation.id == conversation_id)
        .options(selectinload(Conversation.messages))
    )
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def create_conversation(session: AsyncSession, customer_domain: str) -> Conversation:
    """Insert a new, empty conversation for *customer_domain*."""
    conversation = Conversation(customer_domain=customer_domain, messages=[])
    session.add(conversation)
    await session.flush()
    logger.info("Created conversation %s for %s", conversation.id, customer_domain)
    return conversation


async def append_message(
    session: AsyncSession,
    conversation_id: str,
    content: str,
    sender: MessageSender,
) -> Message:
    """Append a message to a conversation and flush it."""
    message = Message(conversation_id=conversation_id, content=content, sender=sender)
    session.add(message)
    await session.flush()
    return message
