from .user import FIND_BY_THE_USERS_NAME, UserModel

__all__ = [
    "FIND_BY_THE_USERS_NAME",
    "UserModel",
]
