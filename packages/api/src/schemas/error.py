# This project was developed with assistance from AI tools.
"""Error response schema shared by every endpoint."""

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Single-key error body, e.g. ``{"error": "Invalid request data"}``."""

    error: str = Field(description="Human-readable, client-safe error message.")
