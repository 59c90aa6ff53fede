# This project was developed with assistance from AI tools.
"""Assistant profiles -- persona and system prompt per customer domain."""

from .registry import AssistantProfile, get_assistant_profile, list_assistants

__all__ = ["AssistantProfile", "get_assistant_profile", "list_assistants"]
