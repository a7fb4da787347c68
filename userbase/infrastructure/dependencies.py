"""Wires infrastructure to the application layer."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from userbase.config import get_settings
from userbase.application.services import UserService
from userbase.infrastructure.database.session import session_scope
from userbase.infrastructure.database.repositories import SQLAlchemyUserRepository


@asynccontextmanager
async def user_service_scope() -> AsyncIterator[UserService]:
    """Provides a UserService bound to one session/transaction."""
    settings = get_settings()
    async with session_scope() as session:
        repository = SQLAlchemyUserRepository(session)
        yield UserService(repository, identity_retries=settings.identity_retries)
