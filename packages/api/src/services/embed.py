# This project was developed with assistance from AI tools.
"""Embed loader script served to dealership sites.

The loader creates a container element, pulls in the widget stylesheet and
bundle, and hands the bundle's ``createChatWidget`` factory a config built
from the host page. Each render gets a fresh container id so several embeds
on one page never collide.
"""

import json
import secrets
import string

CONTAINER_ID_PREFIX = "chat-widget-"
_BASE36 = string.digits + string.ascii_lowercase

_LOADER_TEMPLATE = string.Template(
    """\
(function() {
  // Customer identifier is the host page's domain
  var customerDomain = window.location.hostname;
  var widgetId = $container_id;

  var container = document.createElement('div');
  container.id = widgetId;
  document.body.appendChild(container);

  var style = document.createElement('link');
  style.rel = 'stylesheet';
  style.href = $stylesheet_url;
  document.head.appendChild(style);

  var script = document.createElement('script');
  script.src = $bundle_url;
  script.async = true;
  script.onload = function() {
    var factory = window.ChatWidget && window.ChatWidget.createChatWidget;
    if (typeof factory === 'function') {
      factory({
        containerId: widgetId,
        apiUrl: $api_url,
        customerId: customerDomain,
        theme: {
          primaryColor: $primary_color
        }
      });
    } else {
      console.error('Chat widget failed to load properly');
    }
  };
  document.body.appendChild(script);
})();
"""
)


def new_container_id(length: int = 9) -> str:
    """Return ``chat-widget-`` followed by *length* random base36 characters."""
    return CONTAINER_ID_PREFIX + "".join(secrets.choice(_BASE36) for _ in range(length))


def render_embed_script(
    *,
    api_url: str,
    stylesheet_url: str,
    bundle_url: str,
    primary_color: str,
    container_id: str | None = None,
) -> str:
    """Render the loader JavaScript. String values are JSON-encoded for safe embedding."""
    return _LOADER_TEMPLATE.substitute(
        container_id=json.dumps(container_id or new_container_id()),
        stylesheet_url=json.dumps(stylesheet_url),
        bundle_url=json.dumps(bundle_url),
        api_url=json.dumps(api_url),
        primary_color=json.dumps(primary_color),
    )
