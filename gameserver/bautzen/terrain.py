"""
Terrain of the map: what kind of ground each hex holds and what it costs to enter it.

Hexes outside the map are UNKNOWN rather than an error, so every lookup stays a total function.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Mapping, Self

from gameserver.bautzen.cost import IMPOSSIBLE, ZERO, Cost, Half, One, Two
from gameserver.bautzen.position import Position


class TerrainKind(Enum):
    CLEAR = "clear"
    ROAD = "road"
    ROUGH = "rough"
    WOOD = "wood"
    VILLAGE = "village"
    CITY = "city"
    HILL = "hill"
    LAKE = "lake"
    UNKNOWN = "unknown"


# Characters used to draw a map as text rows (see TerrainMap.from_rows)
CHAR_TO_TERRAIN: dict[str, TerrainKind] = {
    ".": TerrainKind.CLEAR,
    "=": TerrainKind.ROAD,
    "r": TerrainKind.ROUGH,
    "w": TerrainKind.WOOD,
    "v": TerrainKind.VILLAGE,
    "c": TerrainKind.CITY,
    "^": TerrainKind.HILL,
    "~": TerrainKind.LAKE,
}

# Cost of entering a hex of the given kind
TERRAIN_COST: dict[TerrainKind, Cost] = {
    TerrainKind.CLEAR: One(ZERO, "clear"),
    TerrainKind.ROAD: Half(ZERO, "road"),
    TerrainKind.ROUGH: Two(ZERO, "rough"),
    TerrainKind.WOOD: Two(ZERO, "wood"),
    TerrainKind.VILLAGE: Two(ZERO, "village"),
    TerrainKind.CITY: One(ZERO, "city"),
    TerrainKind.HILL: Two(ZERO, "hill"),
    TerrainKind.LAKE: IMPOSSIBLE,
    TerrainKind.UNKNOWN: IMPOSSIBLE,
}


@dataclass(frozen=True)
class TerrainMap:
    cells: Mapping[Position, TerrainKind] = field(default_factory=dict)

    @classmethod
    def from_rows(cls, rows: Iterable[str]) -> Self:
        """
        Build a map from text rows, one character per hex.
        ----
        Row index is the `r` coordinate, character index the `q` coordinate. Spaces are skipped (no hex there).

        ex) ["..=", ".w~"] gives clear hexes at (0,0), (1,0), (0,1), a road at (2,0), a wood at (1,1)
        and a lake at (2,1).
        """
        cells: dict[Position, TerrainKind] = {}
        for r, row in enumerate(rows):
            for q, char in enumerate(row):
                if char == " ":
                    continue
                cells[Position(q, r)] = CHAR_TO_TERRAIN.get(char, TerrainKind.UNKNOWN)
        return cls(cells)

    def terrain_at(self, pos: Position) -> TerrainKind:
        return self.cells.get(pos, TerrainKind.UNKNOWN)

    def movement_cost(self, pos: Position) -> Cost:
        """Cost of entering `pos`."""
        return TERRAIN_COST[self.terrain_at(pos)]

    def is_on_map(self, pos: Position) -> bool:
        return pos in self.cells
