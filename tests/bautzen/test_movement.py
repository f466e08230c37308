"""Unit tests for gameserver/bautzen/movement.py"""

from fractions import Fraction

import pytest

from gameserver.bautzen.cost import IMPOSSIBLE, ZERO, Half, One, Two
from gameserver.bautzen.movement import path_cost, step_cost
from gameserver.bautzen.position import Position
from gameserver.bautzen.terrain import TerrainMap
from gameserver.bautzen.units import GameUnit, Nation, UnitType
from gameserver.core.shared_types import Side

SOVIET_RIFLES = GameUnit("5 Gd", Nation.SOVIET, UnitType.INFANTRY, 3)


@pytest.fixture
def terrain() -> TerrainMap:
    return TerrainMap.from_rows(
        [
            "....",
            ".=w~",
        ]
    )


@pytest.mark.parametrize(
    "origin, target, expected",
    [
        (Position(0, 0), Position(0, 1), One(ZERO)),
        (Position(0, 1), Position(1, 1), Half(ZERO)),
        (Position(1, 1), Position(2, 1), Two(ZERO)),
        (Position(2, 1), Position(3, 1), IMPOSSIBLE),  # lake
        (Position(0, 0), Position(-1, 0), IMPOSSIBLE),  # off the map
        (Position(0, 0), Position(1, 1), IMPOSSIBLE),  # not adjacent
        (Position(0, 0), Position(0, 0), IMPOSSIBLE),  # not a move
    ],
)
def test_step_cost_from_terrain(
    terrain: TerrainMap, origin: Position, target: Position, expected
) -> None:
    assert step_cost(terrain, Side.AXIS, [], origin, target) == expected


def test_cannot_enter_enemy_hex(terrain: TerrainMap) -> None:
    units = [(SOVIET_RIFLES, Position(1, 0))]
    assert step_cost(terrain, Side.AXIS, units, Position(0, 0), Position(1, 0)) == IMPOSSIBLE
    # friendly units do not block
    assert step_cost(terrain, Side.ALLIES, units, Position(0, 0), Position(1, 0)) == One(ZERO)


def test_entering_zoc_is_allowed_but_not_zoc_to_zoc(terrain: TerrainMap) -> None:
    units = [(SOVIET_RIFLES, Position(2, 0))]
    # (0, 0) is two hexes away from the Soviet unit, (1, 0) and (1, 1) are next to it
    assert step_cost(terrain, Side.AXIS, units, Position(0, 0), Position(1, 0)) == One(ZERO)
    assert step_cost(terrain, Side.AXIS, units, Position(1, 0), Position(1, 1)) == IMPOSSIBLE
    # the Soviet side is not bothered by its own zone of control
    assert step_cost(terrain, Side.ALLIES, units, Position(1, 0), Position(1, 1)) == Half(ZERO)


def test_path_cost(terrain: TerrainMap) -> None:
    path = [Position(0, 0), Position(0, 1), Position(1, 1), Position(2, 1)]
    cost = path_cost(terrain, Side.AXIS, [], path)
    assert cost.total == Fraction(7, 2)
    assert [step.reason for step in cost.steps()] == ["clear", "road", "wood"]


def test_path_through_impassable_hex(terrain: TerrainMap) -> None:
    path = [Position(1, 1), Position(2, 1), Position(3, 1), Position(3, 0)]
    assert path_cost(terrain, Side.AXIS, [], path) == IMPOSSIBLE


def test_single_hex_path_is_free(terrain: TerrainMap) -> None:
    assert path_cost(terrain, Side.AXIS, [], [Position(0, 0)]) == ZERO
    assert path_cost(terrain, Side.AXIS, [], []) == ZERO
