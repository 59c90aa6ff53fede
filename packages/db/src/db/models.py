# This project was developed with assistance from AI tools.
"""
Dealer chat -- domain models

A conversation belongs to one customer domain and owns an ordered list of
messages authored by the site visitor (``user``) or the assistant (``bot``).
"""

import uuid
from datetime import UTC, datetime

from sqlalchemy import Column, DateTime, Enum, ForeignKey, String, Text
from sqlalchemy.orm import relationship

from .database import Base
from .enums import MessageSender


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(UTC)


class Conversation(Base):
    """Chat session between a site visitor and the assistant."""

    __tablename__ = "conversations"

    id = Column(String(36), primary_key=True, default=_new_id)
    customer_domain = Column(String(255), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    messages = relationship(
        "Message",
        back_populates="conversation",
        cascade="all, delete-orphan",
        order_by="Message.created_at",
    )

    def __repr__(self):
        return f"<Conversation(id={self.id}, domain='{self.customer_domain}')>"


class Message(Base):
    """Single turn of dialogue. Immutable once written."""

    __tablename__ = "messages"

    id = Column(String(36), primary_key=True, default=_new_id)
    conversation_id = Column(
        String(36), ForeignKey("conversations.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    content = Column(Text, nullable=False)
    sender = Column(
        Enum(
            MessageSender,
            name="message_sender",
            native_enum=False,
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
    )
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    conversation = relationship("Conversation", back_populates="messages")

    def __repr__(self):
        return f"<Message(id={self.id}, sender='{self.sender}')>"
