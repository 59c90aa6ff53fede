# This project was developed with assistance from AI tools.
"""Model and DatabaseService tests against in-memory SQLite."""

import pytest
import pytest_asyncio
from sqlalchemy import select, text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import selectinload
from sqlalchemy.pool import StaticPool

from db import Base, Conversation, DatabaseService, Message, MessageSender


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session(engine):
    factory = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session


def test_conversation_relationships():
    """Conversation should expose an ordered messages relationship."""
    rel_names = {r.key for r in Conversation.__mapper__.relationships}
    assert rel_names == {"messages"}
    assert Message.__mapper__.relationships["conversation"].mapper.class_ is Conversation


async def test_ids_are_generated_uuids(session):
    conversation = Conversation(customer_domain="toyota.com")
    session.add(conversation)
    await session.flush()
    assert len(conversation.id) == 36
    assert conversation.created_at is not None


async def test_messages_load_in_insertion_order(session):
    conversation = Conversation(customer_domain="honda.com")
    session.add(conversation)
    await session.flush()
    for i in range(5):
        sender = MessageSender.USER if i % 2 == 0 else MessageSender.BOT
        session.add(Message(conversation_id=conversation.id, content=f"m{i}", sender=sender))
        await session.flush()
    await session.commit()
    session.expunge_all()

    result = await session.execute(
        select(Conversation)
        .where(Conversation.id == conversation.id)
        .options(selectinload(Conversation.messages))
    )
    loaded = result.scalar_one()
    assert [m.content for m in loaded.messages] == ["m0", "m1", "m2", "m3", "m4"]
    assert loaded.messages[1].sender is MessageSender.BOT


async def test_sender_is_stored_as_lowercase_value(session):
    conversation = Conversation(customer_domain="ford.com")
    session.add(conversation)
    await session.flush()
    session.add(Message(conversation_id=conversation.id, content="hi", sender=MessageSender.USER))
    await session.commit()

    raw = await session.execute(text("SELECT sender FROM messages"))
    assert raw.scalar() == "user"


async def test_health_check_reports_dialect(engine):
    service = DatabaseService(engine=engine)
    healthy, message = await service.health_check()
    assert healthy is True
    assert message == "SQLite connection OK"


async def test_health_check_reports_failure():
    broken = create_async_engine("sqlite+aiosqlite:////nonexistent-dir/nope/db.sqlite")
    service = DatabaseService(engine=broken)
    healthy, message = await service.health_check()
    assert healthy is False
    assert "failed" in message
    await broken.dispose()


async def test_create_all_builds_schema_on_empty_engine():
    """should create the conversation tables used by debug-mode startup."""
    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    service = DatabaseService(engine)

    await service.create_all()
    async with engine.connect() as conn:
        result = await conn.execute(text("SELECT name FROM sqlite_master WHERE type='table'"))
        tables = {row[0] for row in result}
    await service.dispose()

    assert set(Base.metadata.tables) <= tables
