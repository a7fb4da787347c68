"""Domain-specific exceptions — framework-independent."""


class EntityNotFoundError(Exception):
    """Raised when a requested entity does not exist."""

    def __init__(self, entity_type: str, entity_id: int | str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} with id '{entity_id}' not found")


class DuplicateEntityError(Exception):
    """Raised when attempting to create a duplicate entity."""

    def __init__(self, entity_type: str, field: str, value: str):
        self.entity_type = entity_type
        self.field = field
        self.value = value
        super().__init__(f"{entity_type} with {field}='{value}' already exists")


class DuplicateIdentityError(DuplicateEntityError):
    """Raised when storage rejects an insert because the generated id is taken.

    Generated identities are never checked in-process, so a collision only
    shows up as a primary-key violation. Callers at the transaction boundary
    may regenerate the id and retry; the repository itself never does.
    """

    def __init__(self, entity_type: str, identity: int):
        self.identity = identity
        super().__init__(entity_type, "id", str(identity))


class LazyInitializationError(Exception):
    """Raised when an uninitialized proxy is asked for more than its identity."""

    def __init__(self, entity_type: str, entity_id: int | str | None):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(
            f"Proxy for {entity_type} with id '{entity_id}' is not initialized"
        )


class UnknownNamedQueryError(KeyError):
    """Raised when a named query has not been registered."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"No named query registered as '{name}'")
