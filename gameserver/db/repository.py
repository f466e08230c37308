"""Protocol for storing event logs (SQLAlchemy implementation in sql_repository.py, in-memory one in memory_repository.py)"""

from typing import Protocol

from gameserver.core.ids import Id
from gameserver.games.events import EventLog, GamesEvent


class EventStore(Protocol):
    """Persistence of game histories. Events come back in exactly the order they were appended."""

    def create_log(self, log: EventLog) -> None:
        """Store the log of a new game."""
        ...

    def append(self, game_id: Id, event: GamesEvent) -> None:
        """Add one event at the end of an existing log."""
        ...

    def load(self, game_id: Id) -> EventLog | None:
        """Get a game's log, if it exists."""
        ...

    def game_ids(self) -> list[Id]:
        """Ids of all stored games, in creation order."""
        ...
