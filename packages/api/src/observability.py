# This project was developed with assistance from AI tools.
"""LangFuse observability integration.

Completion calls are traced through the ``langfuse.openai`` drop-in client
(see ``inference/client.py``). The LangFuse SDK is initialised from the
LANGFUSE_* environment variables; the conversation id is attached to each
generation as ``langfuse_session_id`` so a whole chat shows up as one session.

Tracing is active when LANGFUSE_PUBLIC_KEY and LANGFUSE_SECRET_KEY are set,
degrades gracefully (no-op + warning) when not configured, and never blocks
the conversation on a tracing error.
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


def is_tracing_enabled() -> bool:
    """Return True when both LangFuse keys are set."""
    from .core.config import settings

    return bool(settings.LANGFUSE_PUBLIC_KEY and settings.LANGFUSE_SECRET_KEY)


def flush_langfuse() -> None:
    """Flush pending LangFuse events.  No-op if unconfigured."""
    if not is_tracing_enabled():
        return
    try:
        from langfuse import get_client

        get_client().flush()
    except Exception:
        logger.debug("LangFuse flush failed", exc_info=True)


def log_observability_status() -> None:
    """Log whether LangFuse tracing is active or disabled. Call at startup."""
    from .core.config import settings

    if is_tracing_enabled():
        logger.warning(
            "LangFuse tracing: ACTIVE (host=%s)",
            settings.LANGFUSE_HOST or "https://cloud.langfuse.com",
        )
    else:
        logger.warning("LangFuse tracing: DISABLED (keys not configured)")
