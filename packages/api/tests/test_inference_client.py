# This project was developed with assistance from AI tools.
"""Tests for the OpenAI-compatible completion client."""

import textwrap
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from openai import AsyncOpenAI

from src.core.config import settings
from src.inference import client as client_mod
from src.inference import config as config_mod
from src.inference.client import _get_client, clear_client_cache, get_completion


@pytest.fixture(autouse=True)
def _test_config(tmp_path, monkeypatch):
    cfg = tmp_path / "models.yaml"
    cfg.write_text(
        textwrap.dedent("""\
        providers:
          local:
            endpoint: http://localhost:8000/v1
            api_key: tk-test
        models:
          chat:
            provider: local
            model_name: test-model
            temperature: 0.7
            max_tokens: 150
        """)
    )
    monkeypatch.setattr(config_mod, "_CONFIG_PATH", cfg)
    monkeypatch.setattr(config_mod, "_cached_config", None)
    monkeypatch.setattr(config_mod, "_cached_mtime", 0.0)
    monkeypatch.setattr(settings, "LANGFUSE_PUBLIC_KEY", None)
    monkeypatch.setattr(settings, "LANGFUSE_SECRET_KEY", None)
    clear_client_cache()
    yield
    clear_client_cache()


def _fake_client(choices):
    fake = MagicMock()
    fake.chat.completions.create = AsyncMock(return_value=SimpleNamespace(choices=choices))
    return fake


def _choice(content):
    return SimpleNamespace(message=SimpleNamespace(content=content))


async def test_get_completion_uses_model_settings(monkeypatch):
    """should send model name, temperature and max_tokens from models.yaml."""
    fake = _fake_client([_choice("Sure thing.")])
    monkeypatch.setattr(client_mod, "_get_client", lambda tier: fake)
    messages = [{"role": "user", "content": "Hi"}]

    reply = await get_completion(messages, "chat", session_id="conv-1")

    assert reply == "Sure thing."
    fake.chat.completions.create.assert_awaited_once_with(
        model="test-model",
        messages=messages,
        temperature=0.7,
        max_tokens=150,
    )


async def test_kwargs_override_model_settings(monkeypatch):
    fake = _fake_client([_choice("ok")])
    monkeypatch.setattr(client_mod, "_get_client", lambda tier: fake)

    await get_completion([], "chat", max_tokens=20)

    assert fake.chat.completions.create.await_args.kwargs["max_tokens"] == 20


async def test_no_choices_returns_none(monkeypatch):
    fake = _fake_client([])
    monkeypatch.setattr(client_mod, "_get_client", lambda tier: fake)

    assert await get_completion([], "chat") is None


async def test_session_id_sent_as_langfuse_metadata_when_tracing(monkeypatch):
    """should tag the generation with the conversation id when LangFuse is on."""
    monkeypatch.setattr(settings, "LANGFUSE_PUBLIC_KEY", "pk-lf-test")
    monkeypatch.setattr(settings, "LANGFUSE_SECRET_KEY", "sk-lf-test")
    fake = _fake_client([_choice("ok")])
    monkeypatch.setattr(client_mod, "_get_client", lambda tier: fake)

    await get_completion([], "chat", session_id="conv-9")

    assert fake.chat.completions.create.await_args.kwargs["metadata"] == {
        "langfuse_session_id": "conv-9"
    }


async def test_provider_errors_propagate(monkeypatch):
    fake = MagicMock()
    fake.chat.completions.create = AsyncMock(side_effect=RuntimeError("boom"))
    monkeypatch.setattr(client_mod, "_get_client", lambda tier: fake)

    with pytest.raises(RuntimeError, match="boom"):
        await get_completion([], "chat")


def test_client_is_cached_per_tier():
    first = _get_client("chat")
    assert _get_client("chat") is first
    assert isinstance(first, AsyncOpenAI)
    assert str(first.base_url).startswith("http://localhost:8000/v1")
    assert first.max_retries == 0


def test_clear_client_cache_builds_new_client():
    first = _get_client("chat")
    clear_client_cache()
    assert _get_client("chat") is not first
