"""Short opaque identifiers for every created entity."""

from __future__ import annotations

import secrets
import string
from collections.abc import Callable

DEFAULT_ID_LENGTH = 13

_ALPHABET = string.digits + string.ascii_lowercase

IdFactory = Callable[[], str]


def generate_id(length: int = DEFAULT_ID_LENGTH) -> str:
    """Return a random base36 token of exactly ``length`` characters.

    Uniqueness is practical, not guaranteed: collisions are not checked.
    """

    if length <= 0:
        raise ValueError("length must be positive")
    return "".join(secrets.choice(_ALPHABET) for _ in range(length))


def id_factory(length: int = DEFAULT_ID_LENGTH) -> IdFactory:
    return lambda: generate_id(length)
