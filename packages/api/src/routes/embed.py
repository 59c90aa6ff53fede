# This project was developed with assistance from AI tools.
"""Embed loader endpoint -- ``<script src=".../chat-widget.js">`` on a dealer site."""

from fastapi import APIRouter, Response

from ..core.config import settings
from ..services.embed import render_embed_script

router = APIRouter()


@router.get("/chat-widget.js", include_in_schema=False)
async def embed_loader() -> Response:
    """Return the loader script with a per-load container id. Never cached."""
    script = render_embed_script(
        api_url=settings.WIDGET_API_URL,
        stylesheet_url=settings.WIDGET_STYLESHEET_URL,
        bundle_url=settings.WIDGET_BUNDLE_URL,
        primary_color=settings.WIDGET_PRIMARY_COLOR,
    )
    return Response(
        content=script,
        media_type="application/javascript",
        headers={"Cache-Control": "no-store"},
    )
