"""
Domain events of a game session, and the append-only log holding them.

The log is the authoritative history of a game: its state is whatever folding the events in order yields
(see gameserver/games/aggregate.py).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Self

from gameserver.bautzen.position import Position
from gameserver.bautzen.units import GameUnit, Nation, UnitType
from gameserver.bautzen.zoc import UnitLocation
from gameserver.core.exceptions import MalformedEventError
from gameserver.core.ids import Id
from gameserver.core.shared_types import Side


@dataclass(frozen=True)
class NewGameCreated:
    game_id: Id


@dataclass(frozen=True)
class PlayerJoined:
    game_id: Id
    side: Side
    player_key: Id
    player_name: str


@dataclass(frozen=True)
class GameStarted:
    game_id: Id
    # Scenario set up: units and where they stand, in the order rules should scan them
    deployment: tuple[UnitLocation, ...] = ()


@dataclass(frozen=True)
class PlayerLeft:
    game_id: Id
    side: Side
    player_key: Id
    player_name: str


@dataclass(frozen=True)
class PlayerReJoined:
    """
    A player came back. `missed_events` happened while they were away and get replayed at the point of rejoining.
    ----
    NOTE missed events never contain another PlayerReJoined. The type cannot prevent it, EventLog.append rejects it.
    """

    game_id: Id
    side: Side
    player_key: Id
    player_name: str
    missed_events: tuple[GamesEvent, ...] = ()


GamesEvent = NewGameCreated | PlayerJoined | GameStarted | PlayerLeft | PlayerReJoined


def validate_event(game_id: Id, event: GamesEvent) -> None:
    """Structural checks an event must pass before it may be appended to the log of `game_id`."""
    if event.game_id != game_id:
        raise MalformedEventError(
            f"Event for game {event.game_id!r} cannot go in the log of game {game_id!r}."
        )
    if not isinstance(event, PlayerReJoined):
        return
    for missed in event.missed_events:
        if isinstance(missed, PlayerReJoined):
            raise MalformedEventError(
                f"Rejoin of {event.player_name!r} embeds another rejoin. Rejoins do not nest."
            )
        if isinstance(missed, NewGameCreated):
            raise MalformedEventError("A game cannot be created while a player is away.")
        if missed.game_id != game_id:
            raise MalformedEventError(
                f"Missed event for game {missed.game_id!r} cannot go in the log of game {game_id!r}."
            )


@dataclass(frozen=True)
class EventLog:
    """Ordered, append-only history of one game. Appending returns a new log, the original is never touched."""

    game_id: Id
    events: tuple[GamesEvent, ...] = field(default_factory=tuple)

    @classmethod
    def new(cls, game_id: Id) -> Self:
        """A log holding only the creation of the game."""
        return cls(game_id, (NewGameCreated(game_id),))

    def append(self, event: GamesEvent) -> EventLog:
        validate_event(self.game_id, event)
        if isinstance(event, NewGameCreated) and self.events:
            raise MalformedEventError(f"Game {self.game_id!r} was already created.")
        return EventLog(self.game_id, self.events + (event,))

    def __len__(self) -> int:
        return len(self.events)

    def __iter__(self):
        return iter(self.events)


def append(log: EventLog, event: GamesEvent) -> EventLog:
    return log.append(event)


# --- Records: plain, JSON compatible dicts (used for persistence) ---
def event_to_record(event: GamesEvent) -> dict[str, Any]:
    record: dict[str, Any] = {"type": type(event).__name__, "game_id": event.game_id}
    match event:
        case NewGameCreated():
            pass
        case GameStarted(deployment=deployment):
            record["deployment"] = [_unit_location_to_record(ul) for ul in deployment]
        case PlayerReJoined():
            record.update(_slot_record(event))
            record["missed_events"] = [event_to_record(e) for e in event.missed_events]
        case PlayerJoined() | PlayerLeft():
            record.update(_slot_record(event))
    return record


def event_from_record(record: dict[str, Any]) -> GamesEvent:
    try:
        event_type = record["type"]
        game_id = record["game_id"]
        match event_type:
            case "NewGameCreated":
                return NewGameCreated(game_id)
            case "GameStarted":
                return GameStarted(
                    game_id,
                    tuple(_unit_location_from_record(ul) for ul in record.get("deployment", [])),
                )
            case "PlayerJoined":
                return PlayerJoined(game_id, *_slot_from_record(record))
            case "PlayerLeft":
                return PlayerLeft(game_id, *_slot_from_record(record))
            case "PlayerReJoined":
                return PlayerReJoined(
                    game_id,
                    *_slot_from_record(record),
                    missed_events=tuple(
                        event_from_record(missed) for missed in record.get("missed_events", [])
                    ),
                )
    except (KeyError, ValueError, TypeError) as e:
        raise MalformedEventError(f"Cannot read event record {record!r}: {e}") from e
    raise MalformedEventError(f"Unknown event type {record.get('type')!r}.")


def _slot_record(event: PlayerJoined | PlayerLeft | PlayerReJoined) -> dict[str, str]:
    return {
        "side": event.side.value,
        "player_key": event.player_key,
        "player_name": event.player_name,
    }


def _slot_from_record(record: dict[str, Any]) -> tuple[Side, Id, str]:
    return Side(record["side"]), record["player_key"], record["player_name"]


def _unit_location_to_record(unit_location: UnitLocation) -> dict[str, Any]:
    unit, pos = unit_location
    return {
        "name": unit.name,
        "nation": unit.nation.value,
        "unit_type": unit.unit_type.value,
        "strength": unit.strength,
        "q": pos.q,
        "r": pos.r,
    }


def _unit_location_from_record(record: dict[str, Any]) -> UnitLocation:
    unit = GameUnit(
        name=record["name"],
        nation=Nation(record["nation"]),
        unit_type=UnitType(record["unit_type"]),
        strength=int(record["strength"]),
    )
    return unit, Position(int(record["q"]), int(record["r"]))


def flatten(events: Iterable[GamesEvent]) -> list[GamesEvent]:
    """The events in timeline order, with missed events spliced in right after the rejoin carrying them."""
    timeline: list[GamesEvent] = []
    for event in events:
        timeline.append(event)
        if isinstance(event, PlayerReJoined):
            timeline.extend(event.missed_events)
    return timeline
