"""Abstract repository interface (port) for User persistence."""

from abc import ABC, abstractmethod

from userbase.domain.entities import User
from userbase.domain.proxy import EntityProxy


class UserRepository(ABC):
    """Port for user persistence — implemented in the infrastructure layer."""

    @abstractmethod
    async def get_by_id(self, user_id: int) -> User | None:
        """Retrieve a single user by its ID."""
        ...

    @abstractmethod
    def get_reference(self, user_id: int) -> EntityProxy:
        """Return a lazy reference to a user without touching storage."""
        ...

    @abstractmethod
    async def initialize(self, reference: EntityProxy) -> User:
        """Load the user behind a reference and attach it."""
        ...

    @abstractmethod
    async def find_by_the_users_name(self, username: str) -> User | None:
        """Look a user up by exact username match."""
        ...

    @abstractmethod
    async def get_all(self, skip: int = 0, limit: int = 100) -> list[User]:
        """Retrieve a paginated list of users."""
        ...

    @abstractmethod
    async def count(self) -> int:
        """Number of stored users."""
        ...

    @abstractmethod
    async def save(self, user: User) -> User:
        """Insert a new user (assigning its ID) or update an existing one."""
        ...

    @abstractmethod
    async def delete(self, user_id: int) -> bool:
        """Delete a user. Returns True if deleted, False if not found."""
        ...
