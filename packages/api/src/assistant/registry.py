# This project was developed with assistance from AI tools.
"""Assistant registry -- loads assistant profiles from YAML.

Each profile is a YAML file in config/assistants/. The default profile is
named by ``settings.DEFAULT_ASSISTANT``; a file named after a customer
domain (``toyota.com.yaml``) overrides it for that domain, so the persona and
business rules can be changed per customer without code changes.

Profiles are reloaded when their file's mtime changes. If a reload fails
(bad YAML or a malformed section), the last valid profile is kept and a
warning is logged.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

_ASSISTANTS_CONFIG_DIR = Path(__file__).resolve().parents[4] / "config" / "assistants"

DOMAIN_PLACEHOLDER = "{customer_domain}"
DEFAULT_FALLBACK_RESPONSE = "Sorry, I could not generate a response."

# Profile cache: name -> (profile, mtime)
_profiles: dict[str, tuple["AssistantProfile", float]] = {}


@dataclass(frozen=True)
class AssistantProfile:
    """Persona and prompt template for one assistant."""

    name: str
    system_prompt: str
    fallback_response: str = DEFAULT_FALLBACK_RESPONSE

    def render_system_prompt(self, customer_domain: str) -> str:
        """Return the system prompt with the customer domain filled in."""
        return self.system_prompt.replace(DOMAIN_PLACEHOLDER, customer_domain).strip()


def load_assistant_config(name: str) -> dict[str, Any]:
    """Load a single assistant's YAML config."""
    config_path = _ASSISTANTS_CONFIG_DIR / f"{name}.yaml"
    if not config_path.exists():
        raise FileNotFoundError(f"Assistant config not found: {config_path}")
    return yaml.safe_load(config_path.read_text())


def _build_profile(name: str, config: Any) -> AssistantProfile:
    if not isinstance(config, dict):
        raise ValueError(f"Assistant config '{name}' must be a mapping")
    system_prompt = config.get("system_prompt")
    if not system_prompt or not isinstance(system_prompt, str):
        raise ValueError(f"Assistant config '{name}' is missing 'system_prompt'")
    meta = config.get("assistant") or {}
    if not isinstance(meta, dict):
        raise ValueError(f"Assistant config '{name}' has a non-mapping 'assistant' section")
    fallback = config.get("fallback_response") or DEFAULT_FALLBACK_RESPONSE
    if not isinstance(fallback, str):
        raise ValueError(f"Assistant config '{name}' 'fallback_response' must be text")
    return AssistantProfile(
        name=str(meta.get("name", name)),
        system_prompt=system_prompt,
        fallback_response=fallback,
    )


def get_profile(name: str) -> AssistantProfile:
    """Return the named profile, rebuilding it when the YAML file changes."""
    config_path = _ASSISTANTS_CONFIG_DIR / f"{name}.yaml"

    try:
        current_mtime = config_path.stat().st_mtime
    except FileNotFoundError:
        if name in _profiles:
            logger.warning("Assistant config disappeared for %s, using cached profile", name)
            return _profiles[name][0]
        raise

    if name in _profiles:
        cached_profile, cached_mtime = _profiles[name]
        if current_mtime <= cached_mtime:
            return cached_profile

    try:
        profile = _build_profile(name, load_assistant_config(name))
        _profiles[name] = (profile, current_mtime)
        logger.info("Loaded assistant config for %s", name)
        return profile
    except (yaml.YAMLError, ValueError) as exc:
        if name in _profiles:
            logger.warning(
                "Failed to reload assistant config for %s (%s), keeping last valid profile",
                name,
                exc,
            )
            # Update mtime to avoid retrying every call
            _profiles[name] = (_profiles[name][0], current_mtime)
            return _profiles[name][0]
        raise


def get_assistant_profile(customer_domain: str) -> AssistantProfile:
    """Return the profile for *customer_domain*, falling back to the default."""
    from ..core.config import settings

    if (_ASSISTANTS_CONFIG_DIR / f"{customer_domain}.yaml").exists():
        return get_profile(customer_domain)
    return get_profile(settings.DEFAULT_ASSISTANT)


def clear_assistant_cache() -> None:
    """Clear all cached profiles (useful for testing)."""
    _profiles.clear()


def list_assistants() -> list[str]:
    """Return names of all available profiles (based on YAML files on disk)."""
    if not _ASSISTANTS_CONFIG_DIR.exists():
        return []
    return sorted(p.stem for p in _ASSISTANTS_CONFIG_DIR.glob("*.yaml"))
