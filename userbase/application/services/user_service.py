"""Application service (use case) for User operations."""

import logging

from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
)

from userbase.application.interfaces import UserRepository
from userbase.application.schemas import UserCreate, UserUpdate
from userbase.domain.entities import User
from userbase.domain.exceptions import DuplicateIdentityError, EntityNotFoundError

logger = logging.getLogger(__name__)


class UserService:
    """Orchestrates user business logic. Depends on the repository port (DI).

    This is the transaction boundary where an identity collision is handled:
    the repository reports it and the service regenerates and retries, up to
    ``identity_retries`` attempts in total.
    """

    def __init__(self, repository: UserRepository, identity_retries: int = 3):
        self._repository = repository
        self._identity_retries = max(1, identity_retries)

    async def get_user(self, user_id: int) -> User:
        user = await self._repository.get_by_id(user_id)
        if user is None:
            raise EntityNotFoundError("User", user_id)
        return user

    async def find_by_username(self, username: str) -> User | None:
        return await self._repository.find_by_the_users_name(username)

    async def list_users(self, skip: int = 0, limit: int = 100) -> list[User]:
        return await self._repository.get_all(skip=skip, limit=limit)

    async def register_user(self, data: UserCreate) -> User:
        user = User(
            username=data.username,
            firstname=data.firstname,
            lastname=data.lastname,
        )
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self._identity_retries),
            retry=retry_if_exception_type(DuplicateIdentityError),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
        return await retrying(self._repository.save, user)

    async def update_user(self, user_id: int, data: UserUpdate) -> User:
        user = await self.get_user(user_id)
        user.update(
            username=data.username,
            firstname=data.firstname,
            lastname=data.lastname,
        )
        return await self._repository.save(user)

    async def delete_user(self, user_id: int) -> bool:
        exists = await self._repository.get_by_id(user_id)
        if exists is None:
            raise EntityNotFoundError("User", user_id)
        return await self._repository.delete(user_id)
