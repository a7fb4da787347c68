from .persistable import Persistable
from .user import User

__all__ = [
    "Persistable",
    "User",
]
