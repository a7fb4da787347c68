"""Named, parameterised queries declared on ORM models.

A named query is registered next to the model it reads, under a dotted name
such as ``User.findByTheUsersName``. Its statement is built lazily, once the
model is fully mapped. Positional parameters bind in order: the first
argument fills ``bindparam("p1")``, the second ``bindparam("p2")`` and so on.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, TypeVar

from sqlalchemy.sql import Executable

from userbase.domain.exceptions import UnknownNamedQueryError

_ModelT = TypeVar("_ModelT", bound=type)

_REGISTRY: dict[str, "NamedQuery"] = {}


@dataclass
class NamedQuery:
    name: str
    model: type
    build: Callable[[type], Executable]
    _statement: Executable | None = field(default=None, init=False, repr=False)

    def statement(self) -> Executable:
        if self._statement is None:
            self._statement = self.build(self.model)
        return self._statement

    @staticmethod
    def bind(*args: Any) -> dict[str, Any]:
        """Map positional arguments onto ``p1``, ``p2``, ... bind parameters."""
        return {f"p{position}": value for position, value in enumerate(args, start=1)}


def named_query(name: str, build: Callable[[type], Executable]) -> Callable[[_ModelT], _ModelT]:
    """Class decorator registering a named query for the decorated model."""

    def register(model: _ModelT) -> _ModelT:
        if name in _REGISTRY and _REGISTRY[name].model is not model:
            raise ValueError(f"Named query '{name}' is already registered")
        query = NamedQuery(name=name, model=model, build=build)
        _REGISTRY[name] = query
        model.__named_queries__ = {**getattr(model, "__named_queries__", {}), name: query}
        return model

    return register


def get_named_query(name: str) -> NamedQuery:
    try:
        return _REGISTRY[name]
    except KeyError:
        raise UnknownNamedQueryError(name) from None


def registered_names() -> list[str]:
    return sorted(_REGISTRY)
