"""Implementation of EventStore using SQLAlchemy"""

import logging
import threading

from sqlalchemy import func, select
from sqlalchemy.orm import sessionmaker

from gameserver.core.exceptions import UnknownGameError
from gameserver.core.ids import Id
from gameserver.db.schema import DBEvent
from gameserver.games.events import (
    EventLog,
    GamesEvent,
    event_from_record,
    event_to_record,
)

logger = logging.getLogger(__name__)


class SQLEventStore:
    """
    Events stored one row each, numbered per game from 0 (the creation of the game).
    ----
    The store is shared by every game of a registry, so it is called from many threads. Each operation runs in
    its own session and transaction (committed on success, rolled back on error), and operations are serialized
    so that reading the last sequence number and writing the next one cannot interleave.
    """

    def __init__(self, session_factory: sessionmaker) -> None:
        self.session_factory = session_factory
        self._lock = threading.Lock()

    def create_log(self, log: EventLog) -> None:
        with self._lock, self.session_factory.begin() as db:
            for sequence, event in enumerate(log.events):
                db.add(self._to_row(log.game_id, sequence, event))
        logger.info(f"Stored new log for game {log.game_id} ({len(log)} event(s))")

    def append(self, game_id: Id, event: GamesEvent) -> None:
        with self._lock, self.session_factory.begin() as db:
            last = db.scalar(
                select(func.max(DBEvent.sequence)).where(DBEvent.game_id == game_id)
            )
            if last is None:
                raise UnknownGameError(f"No stored log for game {game_id!r}.")
            db.add(self._to_row(game_id, last + 1, event))

    def load(self, game_id: Id) -> EventLog | None:
        query = (
            select(DBEvent)
            .where(DBEvent.game_id == game_id)
            .order_by(DBEvent.sequence)
        )
        with self._lock, self.session_factory() as db:
            events = tuple(self._to_event(row) for row in db.scalars(query).all())
        if not events:
            return None
        return EventLog(game_id, events)

    def game_ids(self) -> list[Id]:
        query = select(DBEvent.game_id).where(DBEvent.sequence == 0).order_by(DBEvent.id)
        with self._lock, self.session_factory() as db:
            return list(db.scalars(query).all())

    def _to_row(self, game_id: Id, sequence: int, event: GamesEvent) -> DBEvent:
        record = event_to_record(event)
        return DBEvent(
            game_id=game_id,
            sequence=sequence,
            event_type=record["type"],
            payload=record,
        )

    def _to_event(self, row: DBEvent) -> GamesEvent:
        """Convert SQLAlchemy row back to a domain event."""
        return event_from_record(row.payload)
