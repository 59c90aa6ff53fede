# This project was developed with assistance from AI tools.
"""
Domain enums for chat conversations.

Shared by SQLAlchemy models (db package) and Pydantic schemas (api package).
"""

import enum


class MessageSender(str, enum.Enum):
    USER = "user"
    BOT = "bot"
