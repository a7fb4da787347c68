"""SQLAlchemy ORM model for the User entity."""

from sqlalchemy import BigInteger, String, bindparam, select
from sqlalchemy.orm import Mapped, mapped_column

from userbase.domain.identity import generate_identity
from userbase.infrastructure.database.base import Base
from userbase.infrastructure.database.named_queries import named_query

FIND_BY_THE_USERS_NAME = "User.findByTheUsersName"


@named_query(
    FIND_BY_THE_USERS_NAME,
    lambda user: select(user).where(user.username == bindparam("p1")),
)
class UserModel(Base):
    """ORM model — maps to the 'users' table.

    The primary key is never auto-incremented by the database; rows that
    arrive without an id get one from the random identity generator.
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(
        BigInteger,
        primary_key=True,
        autoincrement=False,
        default=generate_identity,
    )
    username: Mapped[str | None] = mapped_column(String(255), unique=True, nullable=True)
    firstname: Mapped[str | None] = mapped_column(String(255), nullable=True)
    lastname: Mapped[str | None] = mapped_column(String(255), nullable=True)

    def __repr__(self) -> str:
        return f"<UserModel(id={self.id}, username='{self.username}')>"
