"""
Opaque identifiers for games and player keys.

Identifiers are 8 characters drawn from upper case letters and digits. The source is seeded so that a
given seed always yields the same sequence of identifiers.
"""

import random
import threading
from string import ascii_uppercase, digits
from typing import Callable, Optional

from gameserver.core.exceptions import IdExhaustedError

ID_LENGTH = 8
ID_ALPHABET = ascii_uppercase + digits

Id = str


def is_valid_id(value: str) -> bool:
    return len(value) == ID_LENGTH and all(char in ID_ALPHABET for char in value)


class IdGenerator:
    """Seeded source of identifiers. Never hands out the same identifier twice."""

    def __init__(self, seed: int, max_attempts: int = 1000) -> None:
        self._rng = random.Random(seed)
        self._issued: set[Id] = set()
        self._max_attempts = max_attempts
        self._lock = threading.Lock()

    def next_id(self, taken: Optional[Callable[[Id], bool]] = None) -> Id:
        """
        Draw the next identifier.
        ----
        `taken` lets the caller reject identifiers already in use elsewhere (e.g. by a restored game).
        Raises IdExhaustedError when no fresh identifier was found within the allowed number of draws.
        """
        with self._lock:
            for _ in range(self._max_attempts):
                candidate = "".join(self._rng.choices(ID_ALPHABET, k=ID_LENGTH))
                if candidate in self._issued or (taken is not None and taken(candidate)):
                    continue
                self._issued.add(candidate)
                return candidate
        raise IdExhaustedError(
            f"No unused identifier found after {self._max_attempts} attempts."
        )
