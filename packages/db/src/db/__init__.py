# This project was developed with assistance from AI tools.
__version__ = "0.1.0"

from .database import Base, DatabaseService, SessionLocal, get_db, get_db_service, init_db
from .enums import MessageSender
from .models import Conversation, Message

__all__ = [
    "Base",
    "DatabaseService",
    "SessionLocal",
    "get_db",
    "get_db_service",
    "init_db",
    "__version__",
    # Enums
    "MessageSender",
    # Models
    "Conversation",
    "Message",
]
