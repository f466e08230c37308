"""
A hex on the map

(placed in its own module as terrain, units and zone-of-control rules all need to import it)

Axial coordinates: `q` grows to the east, `r` grows to the south-east. The implicit third cube coordinate is
`s = -q - r`.
"""

from __future__ import annotations

from dataclasses import dataclass

# The six axial offsets of the hexes sharing an edge with a given hex, clockwise starting east.
HEX_DIRECTIONS: tuple[tuple[int, int], ...] = (
    (1, 0),
    (1, -1),
    (0, -1),
    (-1, 0),
    (-1, 1),
    (0, 1),
)


@dataclass(frozen=True)
class Position:
    q: int
    r: int

    @property
    def s(self) -> int:
        return -self.q - self.r

    def neighbours(self) -> set[Position]:
        """The six hexes sharing an edge with this one. Pure geometry: map bounds are the terrain's business."""
        return {Position(self.q + dq, self.r + dr) for dq, dr in HEX_DIRECTIONS}

    def distance(self, other: Position) -> int:
        """Number of hex steps between two positions."""
        return (
            abs(self.q - other.q) + abs(self.r - other.r) + abs(self.s - other.s)
        ) // 2

    def is_adjacent(self, other: Position) -> bool:
        return self.distance(other) == 1


def neighbours(pos: Position) -> set[Position]:
    return pos.neighbours()
