"""Unit tests for the UserService."""

from dataclasses import replace

import pytest

from userbase.application.interfaces import UserRepository
from userbase.application.schemas import UserCreate, UserUpdate
from userbase.application.services import UserService
from userbase.domain.entities import User
from userbase.domain.exceptions import (
    DuplicateEntityError,
    DuplicateIdentityError,
    EntityNotFoundError,
)
from userbase.domain.identity import assign_identity
from userbase.domain.proxy import EntityProxy, reference_to


class FakeUserRepository(UserRepository):
    """In-memory fake repository for unit testing.

    ``ids`` scripts the identity generator so collisions can be forced.
    """

    def __init__(self, ids: list[int] | None = None):
        self._users: dict[int, User] = {}
        self._ids = iter(ids) if ids is not None else None
        self.save_calls = 0

    def _generator(self):
        if self._ids is None:
            return None
        return lambda: next(self._ids)

    async def get_by_id(self, user_id: int) -> User | None:
        stored = self._users.get(user_id)
        return replace(stored) if stored else None

    def get_reference(self, user_id: int) -> EntityProxy:
        return reference_to(User, user_id)

    async def initialize(self, reference: EntityProxy) -> User:
        user = await self.get_by_id(reference.id)
        if user is None:
            raise EntityNotFoundError("User", reference.id)
        reference.initialize(user)
        return user

    async def find_by_the_users_name(self, username: str) -> User | None:
        for user in self._users.values():
            if user.username == username:
                return replace(user)
        return None

    async def get_all(self, skip: int = 0, limit: int = 100) -> list[User]:
        users = [replace(u) for u in self._users.values()]
        return users[skip : skip + limit]

    async def count(self) -> int:
        return len(self._users)

    async def save(self, user: User) -> User:
        self.save_calls += 1
        if not user.is_new:
            if user.id not in self._users:
                raise EntityNotFoundError("User", user.id)
            self._users[user.id] = replace(user)
            return user
        identity = assign_identity(user, self._generator())
        if identity in self._users:
            user.id = None
            raise DuplicateIdentityError("User", identity)
        if any(u.username == user.username for u in self._users.values()):
            user.id = None
            raise DuplicateEntityError("User", "username", str(user.username))
        self._users[identity] = replace(user)
        return user

    async def delete(self, user_id: int) -> bool:
        return self._users.pop(user_id, None) is not None


@pytest.fixture
def service() -> UserService:
    return UserService(FakeUserRepository())


@pytest.mark.asyncio
async def test_register_user_assigns_identity(service: UserService):
    user = await service.register_user(
        UserCreate(username="ada", firstname="Ada", lastname="Lovelace")
    )
    assert user.id is not None
    assert not user.is_new
    assert await service.get_user(user.id) == user


@pytest.mark.asyncio
async def test_register_user_regenerates_identity_after_collision():
    repo = FakeUserRepository(ids=[1, 1, 2])
    service = UserService(repo, identity_retries=3)

    first = await service.register_user(UserCreate(username="ada"))
    second = await service.register_user(UserCreate(username="grace"))

    assert first.id == 1
    assert second.id == 2
    assert repo.save_calls == 3


@pytest.mark.asyncio
async def test_register_user_gives_up_after_configured_attempts():
    repo = FakeUserRepository(ids=[5, 5, 5, 5])
    service = UserService(repo, identity_retries=2)
    await service.register_user(UserCreate(username="ada"))

    with pytest.raises(DuplicateIdentityError) as exc_info:
        await service.register_user(UserCreate(username="grace"))

    assert exc_info.value.identity == 5
    assert exc_info.value.field == "id"
    assert repo.save_calls == 3


@pytest.mark.asyncio
async def test_duplicate_username_is_not_retried():
    repo = FakeUserRepository()
    service = UserService(repo, identity_retries=5)
    await service.register_user(UserCreate(username="ada"))

    with pytest.raises(DuplicateEntityError) as exc_info:
        await service.register_user(UserCreate(username="ada"))

    assert not isinstance(exc_info.value, DuplicateIdentityError)
    assert exc_info.value.field == "username"
    assert repo.save_calls == 2


@pytest.mark.asyncio
async def test_get_user_not_found(service: UserService):
    with pytest.raises(EntityNotFoundError):
        await service.get_user(999)


@pytest.mark.asyncio
async def test_find_by_username(service: UserService):
    created = await service.register_user(UserCreate(username="ada"))
    assert await service.find_by_username("ada") == created
    assert await service.find_by_username("nobody") is None


@pytest.mark.asyncio
async def test_update_user_keeps_identity(service: UserService):
    created = await service.register_user(UserCreate(username="ada", firstname="Ada"))
    updated = await service.update_user(created.id, UserUpdate(lastname="King"))
    assert updated.id == created.id
    assert updated.firstname == "Ada"
    assert updated.lastname == "King"


@pytest.mark.asyncio
async def test_list_users(service: UserService):
    await service.register_user(UserCreate(username="a"))
    await service.register_user(UserCreate(username="b"))
    assert len(await service.list_users()) == 2
    assert len(await service.list_users(skip=1)) == 1


@pytest.mark.asyncio
async def test_delete_user(service: UserService):
    created = await service.register_user(UserCreate(username="ada"))
    assert await service.delete_user(created.id) is True
    with pytest.raises(EntityNotFoundError):
        await service.delete_user(created.id)
