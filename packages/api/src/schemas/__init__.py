# This project was developed with assistance from AI tools.
"""Request/response schemas."""

from .chat import ChatRequest, ChatResponse
from .error import ErrorResponse
from .health import HealthItem

__all__ = ["ChatRequest", "ChatResponse", "ErrorResponse", "HealthItem"]
