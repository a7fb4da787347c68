"""Base class for entities identified by a generated primary key."""

from userbase.domain.identity import entity_equals, entity_hash, get_user_class, is_new


class Persistable:
    """Mixin giving an entity identity-based equality, hashing and ``is_new``.

    Subclasses declare an ``id`` attribute (``None`` until persisted).
    """

    id: int | None

    @property
    def is_new(self) -> bool:
        return is_new(self)

    def __eq__(self, other: object) -> bool:
        return entity_equals(self, other)

    def __hash__(self) -> int:
        return entity_hash(self)

    def __str__(self) -> str:
        cls = get_user_class(self)
        return f"Entity of type {cls.__module__}.{cls.__qualname__} with id: {self.id}"
