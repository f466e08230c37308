"""Implementation of EventStore keeping everything in a dictionary"""

import threading

from gameserver.core.exceptions import UnknownGameError
from gameserver.core.ids import Id
from gameserver.games.events import EventLog, GamesEvent


class InMemoryEventStore:
    def __init__(self) -> None:
        self._logs: dict[Id, EventLog] = {}
        self._lock = threading.Lock()

    def create_log(self, log: EventLog) -> None:
        with self._lock:
            self._logs[log.game_id] = log

    def append(self, game_id: Id, event: GamesEvent) -> None:
        with self._lock:
            if game_id not in self._logs:
                raise UnknownGameError(f"No stored log for game {game_id!r}.")
            self._logs[game_id] = self._logs[game_id].append(event)

    def load(self, game_id: Id) -> EventLog | None:
        return self._logs.get(game_id)

    def game_ids(self) -> list[Id]:
        return list(self._logs.keys())

    def clear(self) -> None:
        with self._lock:
            self._logs.clear()
