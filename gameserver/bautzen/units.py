"""Nations, and the units they field, for Bautzen 1945"""

from dataclasses import dataclass
from enum import Enum

from gameserver.core.shared_types import Side


class Nation(Enum):
    GERMAN = "german"
    POLISH = "polish"
    SOVIET = "soviet"

    @property
    def side(self) -> Side:
        return NATION_SIDE[self]


NATION_SIDE: dict[Nation, Side] = {
    Nation.GERMAN: Side.AXIS,
    Nation.POLISH: Side.ALLIES,
    Nation.SOVIET: Side.ALLIES,
}


class UnitType(Enum):
    INFANTRY = "infantry"
    ARMOR = "armor"
    MECHANIZED = "mechanized"
    ARTILLERY = "artillery"
    HQ = "hq"


@dataclass(frozen=True)
class GameUnit:
    name: str
    nation: Nation
    unit_type: UnitType
    strength: int = 1

    @property
    def side(self) -> Side:
        return self.nation.side
