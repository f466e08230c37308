"""
Registry of running game sessions.

Each game is a pair (event log, aggregate). Every change is a transaction on one game: read the current pair,
validate, append an event, fold it into the aggregate, publish the new pair. Pairs are immutable and replaced
wholesale, so readers always see either the old or the new pair, never something in between.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Self

from gameserver.bautzen.zoc import UnitLocation
from gameserver.core.config import Config
from gameserver.core.exceptions import (
    AlreadyJoinedError,
    GameError,
    GameFullError,
    GameNotFullError,
    MalformedEventError,
    PlayerNotRegisteredError,
    UnknownGameError,
    UnknownPlayerError,
)
from gameserver.core.ids import Id, IdGenerator
from gameserver.core.shared_types import GameType, Status
from gameserver.db.repository import EventStore
from gameserver.games.aggregate import DEFAULT_CAPACITY, Aggregate, apply, replay
from gameserver.games.events import (
    EventLog,
    GamesEvent,
    GameStarted,
    PlayerJoined,
    PlayerLeft,
    PlayerReJoined,
    validate_event,
)
from gameserver.services.player_registry import PlayerRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GameSession:
    log: EventLog
    aggregate: Aggregate


@dataclass(frozen=True)
class PlayerState:
    player_key: Id
    player_name: str


@dataclass(frozen=True)
class Redirect:
    """The game is full: the player's state lives at `location`, the per-title view of the game."""

    location: str
    player_state: PlayerState


def player_path(game_type: GameType, game_id: Id, player_key: Id) -> str:
    return f"/games/{game_type}/{game_id}/players/{player_key}"


class SessionRegistry:
    def __init__(
        self,
        players: PlayerRegistry,
        ids: IdGenerator,
        game_type: GameType = GameType.BAUTZEN_1945,
        capacity: int = DEFAULT_CAPACITY,
        store: Optional[EventStore] = None,
        keys: Optional[IdGenerator] = None,
    ) -> None:
        self.players = players
        self.game_type = game_type
        self.capacity = capacity
        self.store = store
        self._ids = ids
        self._keys = keys or ids
        self._sessions: dict[Id, GameSession] = {}
        self._game_ids: tuple[Id, ...] = ()
        self._game_locks: dict[Id, threading.Lock] = {}
        # Guards the map itself (adding games). Each game has its own lock for its transactions.
        self._lock = threading.Lock()

    @classmethod
    def from_config(
        cls, players: PlayerRegistry, store: Optional[EventStore] = None
    ) -> Self:
        """
        Registry set up from Config.
        ----
        With Config.PERSIST and no explicit store, games are written to the configured database and the games
        already stored there are restored.
        """
        ids = IdGenerator(Config.SEED, Config.ID_ATTEMPTS)
        game_type = GameType(Config.GAME_TYPE)
        if store is None and Config.PERSIST:
            # Importing the database module connects to it
            from gameserver.db.database import get_event_store

            return cls.restore(get_event_store(), players, ids, game_type, Config.CAPACITY)
        return cls(players, ids, game_type=game_type, capacity=Config.CAPACITY, store=store)

    @classmethod
    def restore(
        cls,
        store: EventStore,
        players: PlayerRegistry,
        ids: IdGenerator,
        game_type: GameType = GameType.BAUTZEN_1945,
        capacity: int = DEFAULT_CAPACITY,
    ) -> Self:
        """Rebuild every stored game by replaying its log. New events keep being written to `store`."""
        registry = cls(players, ids, game_type=game_type, capacity=capacity, store=store)
        for game_id in store.game_ids():
            log = store.load(game_id)
            if log is None:
                continue
            registry._publish_new(GameSession(log, replay(log, capacity)))
        logger.info(f"Restored {len(registry._game_ids)} game(s) from store")
        return registry

    # --- Games ---
    def create_game(self) -> Id:
        """Open a new, empty game and return its id."""
        with self._lock:
            game_id = self._ids.next_id(taken=self._sessions.__contains__)
            log = EventLog.new(game_id)
            if self.store is not None:
                self.store.create_log(log)
            self._publish_new(GameSession(log, replay(log, self.capacity)))
        logger.info(f"Created game {game_id}")
        return game_id

    def list_games(self) -> list[Id]:
        """Ids of all games, in creation order."""
        return list(self._game_ids)

    def get_game(self, game_id: Id) -> Aggregate:
        return self._fetch_session(game_id).aggregate

    def events(self, game_id: Id) -> tuple[GamesEvent, ...]:
        return self._fetch_session(game_id).log.events

    def start_game(self, game_id: Id, deployment: Iterable[UnitLocation] = ()) -> None:
        """Start a full game with the scenario's units in place."""

        def build(session: GameSession) -> GamesEvent:
            if session.aggregate.status != Status.FULL:
                raise GameNotFullError(
                    f"Cannot start game {game_id}. status: {session.aggregate.status}"
                )
            return GameStarted(game_id, tuple(deployment))

        self._transact(game_id, build)
        logger.info(f"Started game {game_id}")

    # --- Players ---
    def join_game(self, game_id: Id, player_name: str) -> Id:
        """Give a registered player a slot in the game and return the key identifying them in it."""

        def build(session: GameSession) -> GamesEvent:
            aggregate = session.aggregate
            if not self.players.is_registered(player_name):
                raise PlayerNotRegisteredError(f"Player {player_name!r} is not registered.")
            if player_name in aggregate.players:
                raise AlreadyJoinedError(
                    f"Player {player_name!r} already joined game {game_id}."
                )
            if aggregate.is_full or aggregate.status == Status.STARTED:
                raise GameFullError(f"Game {game_id} is not accepting new players.")
            used_keys = {
                slot.player_key
                for slot in (*aggregate.players.values(), *aggregate.departed.values())
            }
            player_key = self._keys.next_id(taken=used_keys.__contains__)
            return PlayerJoined(game_id, aggregate.free_sides[0], player_key, player_name)

        event = self._transact(game_id, build)
        logger.info(f"Player {player_name!r} joined game {game_id} as {event.side}")
        return event.player_key

    def leave_game(self, game_id: Id, player_key: Id) -> None:
        def build(session: GameSession) -> GamesEvent:
            found = session.aggregate.player_by_key(player_key)
            if found is None:
                raise UnknownPlayerError(f"No player with key {player_key} in game {game_id}.")
            name, slot = found
            return PlayerLeft(game_id, slot.side, player_key, name)

        event = self._transact(game_id, build)
        logger.info(f"Player {event.player_name!r} left game {game_id}")

    def rejoin_game(
        self,
        game_id: Id,
        player_name: str,
        missed_events: Iterable[GamesEvent] = (),
    ) -> Id:
        """
        Bring back a player who left, in the slot they held, together with the events they missed.
        ----
        The missed events are folded right after the player is back in, before anything appended later.
        """

        def build(session: GameSession) -> GamesEvent:
            aggregate = session.aggregate
            if player_name in aggregate.players:
                raise AlreadyJoinedError(
                    f"Player {player_name!r} is still in game {game_id}."
                )
            slot = aggregate.departed.get(player_name)
            if slot is None:
                raise UnknownPlayerError(
                    f"Player {player_name!r} never held a slot in game {game_id}."
                )
            if aggregate.is_full or slot.side not in aggregate.free_sides:
                raise GameFullError(f"The slot of {player_name!r} in game {game_id} was taken.")
            event = PlayerReJoined(
                game_id, slot.side, slot.player_key, player_name, tuple(missed_events)
            )
            validate_event(game_id, event)
            back = apply(
                aggregate, PlayerJoined(game_id, slot.side, slot.player_key, player_name)
            )
            self._check_missed_events(back, event.missed_events)
            return event

        event = self._transact(game_id, build)
        logger.info(
            f"Player {player_name!r} rejoined game {game_id} ({len(event.missed_events)} missed event(s))"
        )
        return event.player_key

    def get_player_state(self, game_id: Id, player_key: Id) -> PlayerState | Redirect:
        """
        State of a player in a game.
        ----
        Once the game is full the state is only served from the per-title view, so a Redirect to it is returned.
        """
        aggregate = self._fetch_session(game_id).aggregate
        found = aggregate.player_by_key(player_key)
        if found is None:
            raise UnknownPlayerError(f"No player with key {player_key} in game {game_id}.")
        state = PlayerState(player_key, found[0])
        if aggregate.status == Status.OPEN:
            return state
        return Redirect(player_path(self.game_type, game_id, player_key), state)

    # --- Internal helpers ---
    def _fetch_session(self, game_id: Id) -> GameSession:
        session = self._sessions.get(game_id)
        if session is None:
            raise UnknownGameError(f"Game with {game_id=} not found.")
        return session

    def _check_missed_events(
        self, aggregate: Aggregate, missed_events: Iterable[GamesEvent]
    ) -> None:
        """
        Missed events obey the same rules as events appended directly: each is checked against the game as
        it stands after the events before it.
        """
        for missed in missed_events:
            match missed:
                case PlayerJoined(side=side, player_key=key, player_name=name):
                    used_keys = {
                        slot.player_key
                        for slot in (*aggregate.players.values(), *aggregate.departed.values())
                    }
                    if not self.players.is_registered(name):
                        raise MalformedEventError(f"Missed join of unregistered player {name!r}.")
                    if name in aggregate.players:
                        raise MalformedEventError(f"Missed join of {name!r}, who already has a slot.")
                    if key in used_keys:
                        raise MalformedEventError(f"Missed join of {name!r} reuses key {key}.")
                    if aggregate.is_full or aggregate.status == Status.STARTED:
                        raise MalformedEventError(f"Missed join of {name!r} into a full game.")
                    if side not in aggregate.free_sides:
                        raise MalformedEventError(f"Missed join of {name!r} on taken side {side}.")
                case PlayerLeft(side=side, player_key=key, player_name=name):
                    slot = aggregate.players.get(name)
                    if slot is None or slot.player_key != key or slot.side != side:
                        raise MalformedEventError(f"Missed leave of {name!r}, who holds no such slot.")
                case GameStarted():
                    if aggregate.status != Status.FULL:
                        raise MalformedEventError(
                            f"Missed start of a game that was not full. status: {aggregate.status}"
                        )
            aggregate = apply(aggregate, missed)

    def _publish_new(self, session: GameSession) -> None:
        """Add a game to the map. Caller holds self._lock (or owns the registry exclusively)."""
        game_id = session.log.game_id
        self._game_locks[game_id] = threading.Lock()
        self._sessions[game_id] = session
        self._game_ids = self._game_ids + (game_id,)

    def _transact(
        self, game_id: Id, build: Callable[[GameSession], GamesEvent]
    ) -> GamesEvent:
        """
        Atomically: build the next event from the current session (build validates and may raise), append it,
        fold it into the aggregate and publish the result. Returns the appended event.
        """
        lock = self._game_locks.get(game_id)
        if lock is None:
            raise UnknownGameError(f"Game with {game_id=} not found.")
        with lock:
            session = self._sessions[game_id]
            try:
                event = build(session)
                log = session.log.append(event)
            except GameError as e:
                logger.warning(f"Rejected change to game {game_id}: {e.code}: {e}")
                raise
            aggregate = apply(session.aggregate, event)
            if self.store is not None:
                self.store.append(game_id, event)
            self._sessions[game_id] = GameSession(log, aggregate)
        return event
