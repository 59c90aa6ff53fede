# This project was developed with assistance from AI tools.
"""Tests for the embed loader script and its endpoint."""

import json
import re

import pytest
from fastapi.testclient import TestClient

from src.core.config import settings
from src.main import app
from src.services.embed import CONTAINER_ID_PREFIX, new_container_id, render_embed_script

CONTAINER_ID_RE = re.compile(r'"(chat-widget-[0-9a-z]{9})"')


@pytest.fixture
def client():
    return TestClient(app)


def test_new_container_id_format():
    container_id = new_container_id()
    assert container_id.startswith(CONTAINER_ID_PREFIX)
    assert re.fullmatch(r"chat-widget-[0-9a-z]{9}", container_id)


def test_render_wires_factory_config():
    """should hand createChatWidget the container, api url, hostname and color."""
    script = render_embed_script(
        api_url="/api/chat",
        stylesheet_url="/chat-widget.css",
        bundle_url="/chat-widget-bundle.js",
        primary_color="#ff0000",
        container_id="chat-widget-abc123xyz",
    )

    assert "window.location.hostname" in script
    assert "window.ChatWidget.createChatWidget" in script
    assert 'var widgetId = "chat-widget-abc123xyz";' in script
    assert 'style.href = "/chat-widget.css";' in script
    assert 'script.src = "/chat-widget-bundle.js";' in script
    assert 'apiUrl: "/api/chat"' in script
    assert "customerId: customerDomain" in script
    assert 'primaryColor: "#ff0000"' in script
    assert "console.error('Chat widget failed to load properly')" in script


def test_render_escapes_values():
    script = render_embed_script(
        api_url='/api/chat"; alert(1); "',
        stylesheet_url="/a.css",
        bundle_url="/b.js",
        primary_color="#000",
        container_id="chat-widget-000000000",
    )
    assert json.dumps('/api/chat"; alert(1); "') in script


def test_endpoint_serves_javascript_uncached(client):
    resp = client.get("/chat-widget.js")

    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("application/javascript")
    assert resp.headers["cache-control"] == "no-store"
    assert json.dumps(settings.WIDGET_PRIMARY_COLOR) in resp.text
    assert json.dumps(settings.WIDGET_API_URL) in resp.text


def test_endpoint_uses_fresh_container_id_per_load(client):
    first = CONTAINER_ID_RE.search(client.get("/chat-widget.js").text).group(1)
    second = CONTAINER_ID_RE.search(client.get("/chat-widget.js").text).group(1)
    assert first != second


def test_endpoint_uses_configured_color(client, monkeypatch):
    monkeypatch.setattr(settings, "WIDGET_PRIMARY_COLOR", "#123456")
    assert 'primaryColor: "#123456"' in client.get("/chat-widget.js").text
