# This project was developed with assistance from AI tools.
"""Tests for assistant profile loading."""

import os
import textwrap

import pytest

from src.assistant import registry
from src.assistant.registry import (
    AssistantProfile,
    clear_assistant_cache,
    get_assistant_profile,
    get_profile,
    list_assistants,
)


@pytest.fixture(autouse=True)
def _clear_cache():
    clear_assistant_cache()
    yield
    clear_assistant_cache()


@pytest.fixture
def assistants_dir(tmp_path, monkeypatch):
    monkeypatch.setattr(registry, "_ASSISTANTS_CONFIG_DIR", tmp_path)
    return tmp_path


def _write_profile(directory, name, prompt, fallback=None):
    body = f"assistant:\n  name: {name}\nsystem_prompt: |\n  {prompt}\n"
    if fallback:
        body += f"fallback_response: {fallback!r}\n"
    path = directory / f"{name}.yaml"
    path.write_text(body)
    return path


# -- Shipped profile --


def test_default_profile_is_shipped():
    assert "dealership-support" in list_assistants()


def test_default_prompt_renders_customer_domain():
    """should fill the domain into the persona line and keep the booking rules."""
    profile = get_assistant_profile("toyota.com")
    prompt = profile.render_system_prompt("toyota.com")

    assert prompt.startswith("You are a friendly and helpful customer support assistant for toyota.com.")
    assert "{customer_domain}" not in prompt
    assert "Vehicle make and model" in prompt
    assert "Write in plain text only" in prompt
    assert profile.fallback_response == "Sorry, I could not generate a response."


# -- Overrides and reload --


def test_domain_profile_overrides_default(assistants_dir, monkeypatch):
    from src.core.config import settings

    monkeypatch.setattr(settings, "DEFAULT_ASSISTANT", "base")
    _write_profile(assistants_dir, "base", "Default for {customer_domain}")
    _write_profile(assistants_dir, "honda.com", "Honda desk for {customer_domain}")

    assert get_assistant_profile("honda.com").name == "honda.com"
    assert get_assistant_profile("ford.com").name == "base"
    assert get_assistant_profile("honda.com").render_system_prompt("honda.com") == (
        "Honda desk for honda.com"
    )


def test_profile_reloads_on_mtime_change(assistants_dir):
    path = _write_profile(assistants_dir, "support", "first")
    assert get_profile("support").system_prompt.strip() == "first"

    _write_profile(assistants_dir, "support", "second")
    stat = path.stat()
    os.utime(path, (stat.st_atime, stat.st_mtime + 10))

    assert get_profile("support").system_prompt.strip() == "second"


def test_broken_reload_keeps_last_valid_profile(assistants_dir):
    path = _write_profile(assistants_dir, "support", "valid prompt")
    first = get_profile("support")

    path.write_text("system_prompt: [unclosed\n")
    stat = path.stat()
    os.utime(path, (stat.st_atime, stat.st_mtime + 10))

    assert get_profile("support") is first


@pytest.mark.parametrize(
    "body",
    [
        "assistant: oops\nsystem_prompt: |\n  new prompt\n",
        "assistant: [a, b]\nsystem_prompt: new prompt\n",
        "system_prompt: new prompt\nfallback_response: [not, text]\n",
        "- just\n- a list\n",
    ],
)
def test_malformed_reload_keeps_last_valid_profile(assistants_dir, body, caplog):
    """should keep serving the cached profile when the new file has the wrong shape."""
    path = _write_profile(assistants_dir, "support", "valid prompt")
    first = get_profile("support")

    path.write_text(body)
    stat = path.stat()
    os.utime(path, (stat.st_atime, stat.st_mtime + 10))

    assert get_profile("support") is first
    assert "keeping last valid profile" in caplog.text


def test_null_assistant_section_uses_file_name(assistants_dir):
    (assistants_dir / "bare.yaml").write_text("assistant:\nsystem_prompt: hello\n")
    assert get_profile("bare").name == "bare"


def test_missing_system_prompt_is_rejected(assistants_dir):
    (assistants_dir / "empty.yaml").write_text(
        textwrap.dedent("""\
        assistant:
          name: empty
        """)
    )
    with pytest.raises(ValueError, match="system_prompt"):
        get_profile("empty")


def test_unknown_profile_raises(assistants_dir):
    with pytest.raises(FileNotFoundError):
        get_profile("nope")


def test_fallback_response_is_configurable(assistants_dir):
    _write_profile(assistants_dir, "custom", "prompt", fallback="Please call us instead.")
    assert get_profile("custom").fallback_response == "Please call us instead."


def test_render_strips_surrounding_whitespace():
    profile = AssistantProfile(name="x", system_prompt="\n  Hi {customer_domain}  \n")
    assert profile.render_system_prompt("bmw.com") == "Hi bmw.com"
