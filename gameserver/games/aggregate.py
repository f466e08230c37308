"""
Current state of a game, rebuilt from its event log.

`replay` is a left fold of `apply` over the events: no clock, no randomness, no outside state. The same log
always gives the same Aggregate.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from functools import reduce
from typing import Iterable, Optional

from gameserver.bautzen.zoc import UnitLocation
from gameserver.core.exceptions import MalformedEventError
from gameserver.core.ids import Id
from gameserver.core.shared_types import Side, Status
from gameserver.games.events import (
    GamesEvent,
    GameStarted,
    NewGameCreated,
    PlayerJoined,
    PlayerLeft,
    PlayerReJoined,
)

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 2

PlayerName = str


@dataclass(frozen=True)
class PlayerSlot:
    player_key: Id
    side: Side


@dataclass(frozen=True)
class Aggregate:
    game_id: Optional[Id] = None
    players: dict[PlayerName, PlayerSlot] = field(default_factory=dict)
    # Players who left, with the slot they held (so they can come back to it)
    departed: dict[PlayerName, PlayerSlot] = field(default_factory=dict)
    capacity: int = DEFAULT_CAPACITY
    status: Status = Status.OPEN
    units: tuple[UnitLocation, ...] = ()

    @property
    def is_full(self) -> bool:
        return len(self.players) >= self.capacity

    @property
    def free_sides(self) -> list[Side]:
        taken = {slot.side for slot in self.players.values()}
        return [side for side in Side if side not in taken]

    def player_by_key(self, player_key: Id) -> Optional[tuple[PlayerName, PlayerSlot]]:
        return next(
            ((name, slot) for name, slot in self.players.items() if slot.player_key == player_key),
            None,
        )


def empty_aggregate(capacity: int = DEFAULT_CAPACITY) -> Aggregate:
    return Aggregate(capacity=capacity)


def _status_for(players: dict[PlayerName, PlayerSlot], capacity: int, current: Status) -> Status:
    if current == Status.STARTED:
        return Status.STARTED
    return Status.FULL if len(players) >= capacity else Status.OPEN


def _take_slot(aggregate: Aggregate, name: PlayerName, slot: PlayerSlot) -> Aggregate:
    players = {**aggregate.players, name: slot}
    departed = {n: s for n, s in aggregate.departed.items() if n != name}
    return replace(
        aggregate,
        players=players,
        departed=departed,
        status=_status_for(players, aggregate.capacity, aggregate.status),
    )


def apply(aggregate: Aggregate, event: GamesEvent) -> Aggregate:
    """One step of the fold: the state after `event`, given the state before it."""
    match event:
        case NewGameCreated(game_id=game_id):
            return replace(aggregate, game_id=game_id)

        case PlayerJoined(side=side, player_key=key, player_name=name):
            return _take_slot(aggregate, name, PlayerSlot(key, side))

        case PlayerLeft(player_name=name):
            slot = aggregate.players.get(name)
            if slot is None:
                return aggregate
            players = {n: s for n, s in aggregate.players.items() if n != name}
            return replace(
                aggregate,
                players=players,
                departed={**aggregate.departed, name: slot},
                status=_status_for(players, aggregate.capacity, aggregate.status),
            )

        case GameStarted(deployment=deployment):
            return replace(aggregate, status=Status.STARTED, units=tuple(deployment))

        case PlayerReJoined(side=side, player_key=key, player_name=name, missed_events=missed):
            # back in first, then catch up on what happened meanwhile, in place in the timeline
            rejoined = _take_slot(aggregate, name, PlayerSlot(key, side))
            if any(isinstance(e, PlayerReJoined) for e in missed):
                raise MalformedEventError(
                    f"Rejoin of {name!r} embeds another rejoin. Rejoins do not nest."
                )
            return reduce(apply, missed, rejoined)

    raise MalformedEventError(f"Not a game event: {event!r}")


def replay(events: Iterable[GamesEvent], capacity: int = DEFAULT_CAPACITY) -> Aggregate:
    """Fold the events, oldest first, starting from an empty game."""
    aggregate = reduce(apply, events, empty_aggregate(capacity))
    logger.debug(
        f"Replayed game {aggregate.game_id}: {len(aggregate.players)} player(s), status {aggregate.status}"
    )
    return aggregate
