# This project was developed with assistance from AI tools.
"""Thin OpenAI-compatible LLM client.

Wraps the openai Python SDK with configurable base_url so it works
against any OpenAI-compatible endpoint (Together AI, OpenAI, vLLM, etc.).
When LangFuse tracing is configured the drop-in ``langfuse.openai`` client
is used instead, so every completion is recorded as a generation.
"""

import logging
from typing import Any

from openai import AsyncOpenAI

from ..observability import is_tracing_enabled
from .config import get_model_config

logger = logging.getLogger(__name__)

# Per-tier client cache (avoids re-creating HTTP connections)
_clients: dict[str, AsyncOpenAI] = {}

# Generation parameters that may be set per model in models.yaml
_GENERATION_KEYS = ("temperature", "max_tokens")


def _client_class() -> type[AsyncOpenAI]:
    if is_tracing_enabled():
        from langfuse.openai import AsyncOpenAI as TracedAsyncOpenAI

        return TracedAsyncOpenAI
    return AsyncOpenAI


def _get_client(tier: str) -> AsyncOpenAI:
    """Return a cached AsyncOpenAI client for the given model tier."""
    if tier not in _clients:
        model_cfg = get_model_config(tier)
        _clients[tier] = _client_class()(
            base_url=model_cfg["endpoint"],
            api_key=model_cfg.get("api_key") or "not-needed",
            max_retries=0,
        )
    return _clients[tier]


def clear_client_cache() -> None:
    """Clear cached clients (useful after config reload)."""
    _clients.clear()


async def get_completion(
    messages: list[dict[str, str]],
    tier: str = "chat",
    *,
    session_id: str | None = None,
    **kwargs: Any,
) -> str | None:
    """Get a non-streaming completion from the specified model tier.

    Generation parameters default to the tier's ``temperature`` /
    ``max_tokens`` from models.yaml; explicit kwargs win. Returns the first
    choice's content, or ``None`` when the provider returned no choices.
    """
    client = _get_client(tier)
    model_cfg = get_model_config(tier)

    params = {key: model_cfg[key] for key in _GENERATION_KEYS if key in model_cfg}
    params.update(kwargs)
    if session_id and is_tracing_enabled():
        params["metadata"] = {"langfuse_session_id": session_id}

    response = await client.chat.completions.create(
        model=model_cfg["model_name"],
        messages=messages,
        **params,
    )
    if not response.choices:
        logger.warning("Completion for tier %s returned no choices", tier)
        return None
    return response.choices[0].message.content
