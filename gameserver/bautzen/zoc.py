"""
Zone of control.

Every unit exerts a zone of control on the six hexes around it. A hex is in the zone of control of a side
when a unit of that side stands next to it.
"""

from dataclasses import dataclass
from typing import Iterable

from gameserver.bautzen.position import Position
from gameserver.bautzen.units import GameUnit
from gameserver.core.shared_types import Side

UnitLocation = tuple[GameUnit, Position]


@dataclass(frozen=True)
class Free:
    pass


@dataclass(frozen=True)
class InZoC:
    side: Side


FREE = Free()

ZoC = Free | InZoC


def in_zoc_of(pos: Position, side: Side, unit_location: UnitLocation) -> bool:
    """Does the unit (an enemy of `side`) exert its zone of control on `pos`?"""
    unit, location = unit_location
    return unit.side != side and pos in location.neighbours()


def in_zoc(side: Side, units: Iterable[UnitLocation], pos: Position) -> ZoC:
    """
    Is `pos` in an enemy zone of control, from the point of view of `side`?
    ----
    Units are scanned in the given order and the first one exerting its zone of control decides the result.
    Callers rely on that order, do not replace it with nearest-unit or per-side aggregation.
    """
    for unit_location in units:
        if in_zoc_of(pos, side, unit_location):
            return InZoC(unit_location[0].side)
    return FREE
