"""Concrete repository implementation for User backed by SQLAlchemy."""

import logging
from collections.abc import Callable

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import FlushError

from userbase.application.interfaces import UserRepository
from userbase.domain.entities import User
from userbase.domain.exceptions import (
    DuplicateEntityError,
    DuplicateIdentityError,
    EntityNotFoundError,
)
from userbase.domain.identity import IdentityGenerator, assign_identity
from userbase.domain.proxy import EntityProxy, reference_to
from userbase.infrastructure.database.models import FIND_BY_THE_USERS_NAME, UserModel
from userbase.infrastructure.database.named_queries import get_named_query

logger = logging.getLogger(__name__)

# YDB has no SAVEPOINT statement.
_DIALECTS_WITHOUT_SAVEPOINTS = frozenset({"yql"})


class SQLAlchemyUserRepository(UserRepository):
    """Implements the UserRepository port using SQLAlchemy async sessions.

    New users get their identity here, right before the insert. A collision
    with an existing id is reported as ``DuplicateIdentityError``. Only the
    failed statement is undone, so earlier work in the same transaction
    survives. Retrying is up to the caller.
    """

    def __init__(self, session: AsyncSession, id_generator: IdentityGenerator | None = None):
        self._session = session
        self._id_generator = id_generator

    def _to_entity(self, model: UserModel) -> User:
        """Map ORM model → domain entity."""
        return User(
            id=model.id,
            username=model.username,
            firstname=model.firstname,
            lastname=model.lastname,
        )

    def _to_model(self, entity: User) -> UserModel:
        """Map domain entity → ORM model (for creation)."""
        return UserModel(
            id=entity.id,
            username=entity.username,
            firstname=entity.firstname,
            lastname=entity.lastname,
        )

    async def get_by_id(self, user_id: int) -> User | None:
        result = await self._session.get(UserModel, user_id)
        return self._to_entity(result) if result else None

    def get_reference(self, user_id: int) -> EntityProxy:
        return reference_to(User, user_id)

    async def initialize(self, reference: EntityProxy) -> User:
        if reference.is_initialized:
            return reference.unwrap()
        user = await self.get_by_id(reference.id)
        if user is None:
            raise EntityNotFoundError("User", reference.id)
        reference.initialize(user)
        return user

    async def find_by_the_users_name(self, username: str) -> User | None:
        query = get_named_query(FIND_BY_THE_USERS_NAME)
        result = await self._session.execute(query.statement(), query.bind(username))
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_all(self, skip: int = 0, limit: int = 100) -> list[User]:
        stmt = select(UserModel).order_by(UserModel.id).offset(skip).limit(limit)
        result = await self._session.execute(stmt)
        return [self._to_entity(row) for row in result.scalars().all()]

    async def count(self) -> int:
        result = await self._session.execute(select(func.count()).select_from(UserModel))
        return result.scalar_one()

    async def save(self, user: User) -> User:
        if user.is_new:
            return await self._insert(user)
        return await self._update(user)

    def _supports_savepoints(self) -> bool:
        return self._session.get_bind().dialect.name not in _DIALECTS_WITHOUT_SAVEPOINTS

    async def _flush_isolated(self, stage: Callable[[], None]) -> None:
        """Apply ``stage`` and flush it so that a failure undoes only that change.

        Runs inside a SAVEPOINT where the dialect has them. Elsewhere a failed
        flush rolls back the whole session transaction.
        """
        if self._supports_savepoints():
            async with self._session.begin_nested():
                stage()
                await self._session.flush()
            return
        stage()
        try:
            await self._session.flush()
        except (FlushError, IntegrityError):
            await self._session.rollback()
            raise

    async def _insert(self, user: User) -> User:
        identity = assign_identity(user, self._id_generator)
        model = self._to_model(user)
        try:
            if not self._supports_savepoints() and await self._identity_taken(identity):
                raise DuplicateIdentityError("User", identity)
            await self._flush_isolated(lambda: self._session.add(model))
        except DuplicateIdentityError:
            user.id = None
            logger.warning("Generated identity %s is already stored", identity)
            raise
        except FlushError:
            # Another instance with this id is already in the session.
            user.id = None
            logger.warning("Generated identity %s collides within the session", identity)
            raise DuplicateIdentityError("User", identity) from None
        except IntegrityError as exc:
            user.id = None
            if await self._identity_taken(identity):
                logger.warning("Generated identity %s is already stored", identity)
                raise DuplicateIdentityError("User", identity) from exc
            raise DuplicateEntityError("User", "username", str(user.username)) from exc
        logger.debug("Inserted %s", user)
        return user

    async def _update(self, user: User) -> User:
        model = await self._session.get(UserModel, user.id)
        if model is None:
            raise EntityNotFoundError("User", user.id)

        def stage() -> None:
            model.username = user.username
            model.firstname = user.firstname
            model.lastname = user.lastname

        try:
            await self._flush_isolated(stage)
        except IntegrityError as exc:
            raise DuplicateEntityError("User", "username", str(user.username)) from exc
        return self._to_entity(model)

    async def _identity_taken(self, identity: int) -> bool:
        stmt = select(func.count()).select_from(UserModel).where(UserModel.id == identity)
        result = await self._session.execute(stmt)
        return result.scalar_one() > 0

    async def delete(self, user_id: int) -> bool:
        model = await self._session.get(UserModel, user_id)
        if model is None:
            return False
        await self._session.delete(model)
        await self._session.flush()
        return True
