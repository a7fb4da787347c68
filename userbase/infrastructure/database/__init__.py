from .base import Base
from .session import get_engine, get_session_factory, reset_engine, session_scope
from .models import UserModel

__all__ = [
    "Base",
    "get_engine",
    "get_session_factory",
    "reset_engine",
    "session_scope",
    "UserModel",
]
