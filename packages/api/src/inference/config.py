# This project was developed with assistance from AI tools.
"""Completion provider configuration.

config/models.yaml has two sections. ``providers`` holds connection details
(endpoint, credential) per OpenAI-compatible backend; ``models`` holds the
named model entries the app asks for (``chat``), each pointing at a provider
and carrying its generation parameters. ``get_model_config`` returns the two
merged, so callers see one flat dict.

``${ENV_VAR:-default}`` placeholders are resolved on load and the file is
re-read when its mtime changes.
"""

import logging
import os
import re
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

# pydantic-settings reads .env into Settings only; placeholders need os.environ.
load_dotenv()

logger = logging.getLogger(__name__)

_CONFIG_PATH = Path(__file__).resolve().parents[4] / "config" / "models.yaml"
_cached_config: dict[str, Any] | None = None
_cached_mtime: float = 0.0

_PLACEHOLDER = re.compile(r"\$\{(\w+)(?::-(.*?))?\}")

REQUIRED_PROVIDER_FIELDS = {"endpoint"}
REQUIRED_MODEL_FIELDS = {"provider", "model_name"}


def _expand(node: Any) -> Any:
    """Resolve ``${VAR:-default}`` in every string leaf of a parsed YAML tree."""
    if isinstance(node, str):
        return _PLACEHOLDER.sub(lambda m: os.environ.get(m.group(1), m.group(2) or ""), node)
    if isinstance(node, dict):
        return {key: _expand(value) for key, value in node.items()}
    if isinstance(node, list):
        return [_expand(value) for value in node]
    return node


def _require_mapping(config: dict[str, Any], section: str) -> dict[str, Any]:
    entries = config.get(section)
    if not entries or not isinstance(entries, dict):
        raise ValueError(f"models.yaml must contain a non-empty '{section}' section")
    for name, entry in entries.items():
        if not isinstance(entry, dict):
            raise ValueError(f"{section}.{name} must be a mapping")
    return entries


def _validate_config(config: Any) -> None:
    if not isinstance(config, dict):
        raise ValueError("models.yaml must be a mapping")

    providers = _require_mapping(config, "providers")
    for name, provider in providers.items():
        missing = REQUIRED_PROVIDER_FIELDS - provider.keys()
        if missing:
            raise ValueError(f"Provider '{name}' is missing required fields: {missing}")

    for name, model in _require_mapping(config, "models").items():
        missing = REQUIRED_MODEL_FIELDS - model.keys()
        if missing:
            raise ValueError(f"Model '{name}' is missing required fields: {missing}")
        if model["provider"] not in providers:
            raise ValueError(f"Model '{name}' references unknown provider '{model['provider']}'")
        max_tokens = model.get("max_tokens")
        if max_tokens is not None and (not isinstance(max_tokens, int) or max_tokens <= 0):
            raise ValueError(f"Model '{name}' max_tokens must be a positive integer")
        temperature = model.get("temperature")
        if temperature is not None and not 0 <= float(temperature) <= 2:
            raise ValueError(f"Model '{name}' temperature must be between 0 and 2")


def load_config(path: Path | None = None) -> dict[str, Any]:
    """Parse, expand and validate models.yaml."""
    config_path = path or _CONFIG_PATH
    if not config_path.exists():
        raise FileNotFoundError(f"Model config not found: {config_path}")

    config = _expand(yaml.safe_load(config_path.read_text()))
    _validate_config(config)
    return config


def get_config(path: Path | None = None) -> dict[str, Any]:
    """Return the cached config, re-reading the file when its mtime moves forward."""
    global _cached_config, _cached_mtime  # noqa: PLW0603
    config_path = path or _CONFIG_PATH

    try:
        mtime = config_path.stat().st_mtime
    except FileNotFoundError:
        if _cached_config is None:
            raise
        logger.warning("Model config %s disappeared, using cached copy", config_path)
        return _cached_config

    if _cached_config is None or mtime > _cached_mtime:
        logger.info("Loading model config from %s", config_path)
        _cached_config = load_config(config_path)
        _cached_mtime = mtime

        # Clients hold endpoint and key; drop them so the next call rebuilds.
        from .client import clear_client_cache

        clear_client_cache()

    return _cached_config


def get_model_config(tier: str, path: Path | None = None) -> dict[str, Any]:
    """Return the model entry *tier* merged over its provider's settings."""
    config = get_config(path)
    models = config["models"]
    if tier not in models:
        raise KeyError(f"Unknown model tier '{tier}'. Available: {list(models)}")
    model = models[tier]
    return {**config["providers"][model["provider"]], **model}


def require_api_key(tier: str, path: Path | None = None) -> None:
    """Fail fast when the provider credential for *tier* is not configured.

    Raises:
        RuntimeError: If the resolved ``api_key`` is empty or missing.
    """
    model_cfg = get_model_config(tier, path)
    if not model_cfg.get("api_key"):
        env_hint = model_cfg.get("api_key_env", f"API key for provider '{model_cfg['provider']}'")
        raise RuntimeError(f"{env_hint} is not configured")
