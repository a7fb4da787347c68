"""Lazy references to entities.

A reference knows its entity type and identity but nothing else until it is
initialized with the loaded entity. Proxy classes are generated on demand,
one per entity class, and advertise the class they stand in for through
``__proxied_class__`` so identity comparison sees through them.
"""

from functools import lru_cache
from typing import Any

from userbase.domain.exceptions import LazyInitializationError
from userbase.domain.identity import entity_equals, entity_hash


class EntityProxy:
    """Base for generated proxy classes. Use ``reference_to`` to build one."""

    __proxied_class__: type
    __slots__ = ("_id", "_target")

    def __init__(self, identity: int):
        object.__setattr__(self, "_id", identity)
        object.__setattr__(self, "_target", None)

    @property
    def id(self) -> int:
        return self._id

    @property
    def is_new(self) -> bool:
        return False

    @property
    def is_initialized(self) -> bool:
        return self._target is not None

    def initialize(self, target: Any) -> None:
        """Attach the loaded entity; it must be of the proxied type and identity."""
        if not isinstance(target, self.__proxied_class__):
            raise TypeError(
                f"Expected {self.__proxied_class__.__name__}, got {type(target).__name__}"
            )
        if target.id != self._id:
            raise ValueError(
                f"Loaded entity id {target.id} does not match reference id {self._id}"
            )
        object.__setattr__(self, "_target", target)

    def unwrap(self) -> Any:
        """Return the loaded entity."""
        if self._target is None:
            raise LazyInitializationError(self.__proxied_class__.__name__, self._id)
        return self._target

    def __getattr__(self, name: str) -> Any:
        # Only reached for names not defined on the proxy itself.
        if name.startswith("__"):
            raise AttributeError(name)
        return getattr(self.unwrap(), name)

    def __setattr__(self, name: str, value: Any) -> None:
        if name == "id":
            raise AttributeError("The identity of a reference cannot be changed")
        setattr(self.unwrap(), name, value)

    def __eq__(self, other: object) -> bool:
        return entity_equals(self, other)

    def __hash__(self) -> int:
        return entity_hash(self)

    def __str__(self) -> str:
        if self.is_initialized:
            return str(self._target)
        return repr(self)

    def __repr__(self) -> str:
        state = "initialized" if self.is_initialized else "uninitialized"
        return f"<{type(self).__name__} id={self._id} ({state})>"


@lru_cache(maxsize=None)
def proxy_class_for(entity_cls: type) -> type[EntityProxy]:
    """Generate (once) the proxy class standing in for ``entity_cls``."""
    return type(
        f"{entity_cls.__name__}Proxy",
        (EntityProxy,),
        {
            "__proxied_class__": entity_cls,
            "__slots__": (),
            "__module__": entity_cls.__module__,
        },
    )


def reference_to(entity_cls: type, identity: int) -> EntityProxy:
    """Build an uninitialized reference to the ``entity_cls`` row ``identity``."""
    if identity is None:
        raise ValueError("A reference requires an identity")
    return proxy_class_for(entity_cls)(identity)
