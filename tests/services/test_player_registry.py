"""Unit tests for gameserver/services/player_registry.py"""

from gameserver.services.player_registry import InMemoryPlayerRegistry, Player


def test_register_and_list() -> None:
    registry = InMemoryPlayerRegistry()
    assert registry.list_registered() == []
    assert not registry.is_registered("Alice")

    registry.register(Player("Alice"))
    registry.register(Player("Bob"))

    assert registry.is_registered("Alice")
    assert registry.list_registered() == [Player("Alice"), Player("Bob")]


def test_register_twice_keeps_one_entry() -> None:
    registry = InMemoryPlayerRegistry()
    first = registry.register(Player("Alice"))
    second = registry.register(Player("Alice"))
    assert first == second
    assert registry.list_registered() == [Player("Alice")]
