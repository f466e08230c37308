"""Cost of moving units across the map, built on terrain, zone of control and the cost algebra."""

from typing import Sequence

from gameserver.bautzen.cost import IMPOSSIBLE, ZERO, Cost, combine
from gameserver.bautzen.position import Position
from gameserver.bautzen.terrain import TerrainMap
from gameserver.bautzen.zoc import Free, UnitLocation, in_zoc
from gameserver.core.shared_types import Side


def step_cost(
    terrain: TerrainMap,
    side: Side,
    units: Sequence[UnitLocation],
    origin: Position,
    target: Position,
) -> Cost:
    """
    Cost for a unit of `side` to move from `origin` into the adjacent hex `target`.
    ----
    * non adjacent hexes, hexes held by an enemy unit and impassable terrain cannot be entered
    * moving directly from one enemy zone of control into another is not allowed
    * otherwise the cost is the one of the terrain entered
    """
    if not origin.is_adjacent(target):
        return IMPOSSIBLE

    if any(unit.side != side and location == target for unit, location in units):
        return IMPOSSIBLE

    leaving_zoc = not isinstance(in_zoc(side, units, origin), Free)
    entering_zoc = not isinstance(in_zoc(side, units, target), Free)
    if leaving_zoc and entering_zoc:
        return IMPOSSIBLE

    return terrain.movement_cost(target)


def path_cost(
    terrain: TerrainMap,
    side: Side,
    units: Sequence[UnitLocation],
    path: Sequence[Position],
) -> Cost:
    """Total cost of following `path` (starting hex first). A path of one hex costs nothing."""
    total = ZERO
    for origin, target in zip(path, path[1:]):
        total = combine(total, step_cost(terrain, side, units, origin, target))
        if total.is_impossible:
            break
    return total
