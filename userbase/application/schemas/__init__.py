from .user import UserCreate, UserUpdate

__all__ = [
    "UserCreate",
    "UserUpdate",
]
