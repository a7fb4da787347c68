"""Domain entity — pure Python business object, no framework dependencies."""

from dataclasses import dataclass

from userbase.domain.entities.persistable import Persistable


@dataclass(eq=False)
class User(Persistable):
    """Sample user record.

    Identity is assigned by the persistence layer on first insert; the
    username is unique in storage, names are free-form.
    """

    id: int | None = None
    username: str | None = None
    firstname: str | None = None
    lastname: str | None = None

    @classmethod
    def new_unsaved(cls, firstname: str | None, lastname: str | None) -> "User":
        """Build a user from names only, without an identity."""
        return cls(firstname=firstname, lastname=lastname)

    def update(
        self,
        username: str | None = None,
        firstname: str | None = None,
        lastname: str | None = None,
    ) -> None:
        """Update mutable fields; the identity is left untouched."""
        if username is not None:
            self.username = username
        if firstname is not None:
            self.firstname = firstname
        if lastname is not None:
            self.lastname = lastname
