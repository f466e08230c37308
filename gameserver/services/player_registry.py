"""Players known to the server. Only registered players may join games."""

import logging
import threading
from dataclasses import dataclass
from typing import Protocol

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Player:
    name: str


class PlayerRegistry(Protocol):
    """What the session registry needs to know about players. Read only."""

    def is_registered(self, name: str) -> bool:
        """Has a player with this name registered?"""
        ...

    def list_registered(self) -> list[Player]:
        """All registered players, in registration order."""
        ...


class InMemoryPlayerRegistry:
    def __init__(self) -> None:
        self._players: dict[str, Player] = {}
        self._lock = threading.Lock()

    def register(self, player: Player) -> Player:
        """Register a player. Registering the same name twice keeps the first registration."""
        with self._lock:
            if player.name in self._players:
                return self._players[player.name]
            self._players[player.name] = player
        logger.info(f"Registered player {player.name!r}")
        return player

    def is_registered(self, name: str) -> bool:
        return name in self._players

    def list_registered(self) -> list[Player]:
        return list(self._players.values())
