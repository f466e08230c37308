"""Unit tests for gameserver/db/sql_repository.py"""

from concurrent.futures import ThreadPoolExecutor

import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker

from gameserver.bautzen.position import Position
from gameserver.bautzen.units import GameUnit, Nation, UnitType
from gameserver.core.exceptions import UnknownGameError
from gameserver.core.ids import IdGenerator
from gameserver.core.shared_types import Side, Status
from gameserver.db.sql_repository import SQLEventStore
from gameserver.games.events import (
    EventLog,
    GameStarted,
    PlayerJoined,
    PlayerLeft,
    PlayerReJoined,
)
from gameserver.services.player_registry import InMemoryPlayerRegistry
from gameserver.services.session_registry import SessionRegistry

GAME_ID = "GAME0001"


def test_create_and_load_log(session_factory: sessionmaker) -> None:
    store = SQLEventStore(session_factory)
    log = EventLog.new(GAME_ID).append(PlayerJoined(GAME_ID, Side.AXIS, "KEYALICE", "Alice"))
    store.create_log(log)

    assert store.load(GAME_ID) == log
    assert store.game_ids() == [GAME_ID]


def test_load_unknown_game(session_factory: sessionmaker) -> None:
    """Should return None if the id matches nothing in the database."""
    store = SQLEventStore(session_factory)
    assert store.load("NOSUCHID") is None

    store.create_log(EventLog.new(GAME_ID))
    assert store.load("NOSUCHID") is None


def test_append_keeps_order_and_nesting(session_factory: sessionmaker) -> None:
    store = SQLEventStore(session_factory)
    log = EventLog.new(GAME_ID)
    store.create_log(log)

    deployment = ((GameUnit("Brandenburg Pz", Nation.GERMAN, UnitType.ARMOR, 4), Position(3, 4)),)
    events = [
        PlayerJoined(GAME_ID, Side.AXIS, "KEYALICE", "Alice"),
        PlayerJoined(GAME_ID, Side.ALLIES, "KEYBOB00", "Bob"),
        PlayerLeft(GAME_ID, Side.ALLIES, "KEYBOB00", "Bob"),
        PlayerReJoined(
            GAME_ID,
            Side.ALLIES,
            "KEYBOB00",
            "Bob",
            (PlayerLeft(GAME_ID, Side.AXIS, "KEYALICE", "Alice"), GameStarted(GAME_ID, deployment)),
        ),
    ]
    for event in events:
        store.append(GAME_ID, event)
        log = log.append(event)

    assert store.load(GAME_ID) == log


def test_append_to_unknown_game(session_factory: sessionmaker) -> None:
    store = SQLEventStore(session_factory)
    with pytest.raises(UnknownGameError):
        store.append(GAME_ID, PlayerJoined(GAME_ID, Side.AXIS, "KEYALICE", "Alice"))
    # nothing was written, the store is still usable
    assert store.game_ids() == []


def test_failed_write_is_rolled_back(session_factory: sessionmaker) -> None:
    store = SQLEventStore(session_factory)
    store.create_log(EventLog.new(GAME_ID))

    # same game id again: sequence 0 is already taken
    with pytest.raises(IntegrityError):
        store.create_log(EventLog.new(GAME_ID))

    event = PlayerJoined(GAME_ID, Side.AXIS, "KEYALICE", "Alice")
    store.append(GAME_ID, event)
    assert store.load(GAME_ID) == EventLog.new(GAME_ID).append(event)
    assert store.game_ids() == [GAME_ID]


def test_game_ids_in_creation_order(session_factory: sessionmaker) -> None:
    store = SQLEventStore(session_factory)
    for game_id in ["ZZZZ0001", "AAAA0002", "MMMM0003"]:
        store.create_log(EventLog.new(game_id))
    store.append("ZZZZ0001", PlayerJoined("ZZZZ0001", Side.AXIS, "KEYALICE", "Alice"))
    assert store.game_ids() == ["ZZZZ0001", "AAAA0002", "MMMM0003"]


def test_registry_restored_from_database(
    session_factory: sessionmaker, players: InMemoryPlayerRegistry
) -> None:
    """Games survive the registry: replaying the stored logs gives back the same games."""
    store = SQLEventStore(session_factory)
    registry = SessionRegistry(players, IdGenerator(seed=5), store=store)
    game_id = registry.create_game()
    registry.join_game(game_id, "Alice")
    bob_key = registry.join_game(game_id, "Bob")
    registry.leave_game(game_id, bob_key)
    registry.rejoin_game(game_id, "Bob")

    restored = SessionRegistry.restore(store, players, IdGenerator(seed=6))
    assert restored.list_games() == [game_id]
    assert restored.events(game_id) == registry.events(game_id)
    assert restored.get_game(game_id) == registry.get_game(game_id)


def test_concurrent_games_write_through(
    session_factory: sessionmaker, players: InMemoryPlayerRegistry
) -> None:
    """Games played on many threads at once all end up in the database, each log in order."""
    store = SQLEventStore(session_factory)
    registry = SessionRegistry(players, IdGenerator(seed=8), store=store)

    def play(_: int) -> str:
        game_id = registry.create_game()
        registry.join_game(game_id, "Alice")
        registry.join_game(game_id, "Bob")
        return game_id

    with ThreadPoolExecutor(max_workers=8) as pool:
        game_ids = list(pool.map(play, range(30)))

    assert len(set(game_ids)) == 30
    assert sorted(store.game_ids()) == sorted(game_ids)
    for game_id in game_ids:
        assert registry.get_game(game_id).status == Status.FULL
        assert store.load(game_id).events == registry.events(game_id)
