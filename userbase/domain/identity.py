"""Identity rules for persisted entities.

Covers the whole life of a primary key on the domain side:

* generating a new one (``RandomIdGenerator`` / ``assign_identity``),
* telling saved and unsaved entities apart (``is_new``),
* comparing and hashing entities by identity (``entity_equals`` /
  ``entity_hash``), including lazy proxies that stand in for the real type.

Generated ids are random signed 64-bit integers drawn from a per-thread
source. They are not checked for collisions in-process; the storage primary
key constraint rejects duplicates and the repository reports them as
``DuplicateIdentityError``.
"""

import random
import threading
from typing import Any, Protocol

MIN_IDENTITY = -(2**63)
MAX_IDENTITY = 2**63 - 1

HASH_SEED = 17
HASH_MULTIPLIER = 31


class IdentityGenerator(Protocol):
    """Produces a primary key for an entity about to be inserted."""

    def __call__(self) -> int: ...


class RandomIdGenerator:
    """Uniform random ids over the full signed 64-bit range.

    Each thread draws from its own ``random.Random`` so concurrent inserts
    share no mutable state and never take a lock.
    """

    def __init__(self) -> None:
        self._local = threading.local()

    def _source(self) -> random.Random:
        source = getattr(self._local, "source", None)
        if source is None:
            source = random.Random()
            self._local.source = source
        return source

    def __call__(self) -> int:
        return self._source().randint(MIN_IDENTITY, MAX_IDENTITY)


default_generator = RandomIdGenerator()


def generate_identity() -> int:
    """Draw an id from the shared default generator (ORM column default)."""
    return default_generator()


def is_new(entity: Any) -> bool:
    """True while the entity has no identity, i.e. has never been persisted."""
    return entity.id is None


def assign_identity(entity: Any, generator: IdentityGenerator | None = None) -> int:
    """Give an unsaved entity its identity and return it.

    Called once by the persistence layer right before the first insert.
    An identity that is already assigned is never replaced.
    """
    if not is_new(entity):
        raise ValueError(
            f"{get_user_class(entity).__name__} already has identity {entity.id}"
        )
    identity = (generator or default_generator)()
    entity.id = identity
    return identity


def get_user_class(obj: Any) -> type:
    """Return the conceptual type of ``obj``, looking through proxy classes.

    Proxy types advertise the class they stand in for via ``__proxied_class__``.
    """
    cls = type(obj)
    return getattr(cls, "__proxied_class__", None) or cls


def entity_equals(a: Any, b: Any) -> bool:
    """Identity-based equality shared by entities and their proxies.

    Only reference equality can make an unsaved entity equal to anything.
    """
    if a is b:
        return True
    if a is None or b is None:
        return False
    if get_user_class(a) is not get_user_class(b):
        return False
    if a.id is None:
        return False
    return a.id == b.id


def entity_hash(entity: Any) -> int:
    """Hash consistent with ``entity_equals``; unsaved entities share a bucket."""
    hash_code = HASH_SEED
    if entity.id is not None:
        hash_code += hash(entity.id) * HASH_MULTIPLIER
    return hash_code
