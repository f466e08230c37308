"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures/variables required for testing multiple layers.
"""

from typing import Generator

import pytest
from sqlalchemy import StaticPool, create_engine
from sqlalchemy.orm import sessionmaker

from gameserver.core.ids import IdGenerator
from gameserver.db.schema import Base
from gameserver.services.player_registry import InMemoryPlayerRegistry, Player
from gameserver.services.session_registry import SessionRegistry

TEST_SEED = 42

# Setup an in-memory SQLite database for testing
DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autoflush=False, bind=engine)


@pytest.fixture
def session_factory() -> Generator[sessionmaker, None, None]:
    """Sessions on a test database. Tables are removed at teardown to make unit tests of repository independent of each other."""
    Base.metadata.create_all(bind=engine)
    try:
        yield TestingSessionLocal
    finally:
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def ids() -> IdGenerator:
    return IdGenerator(TEST_SEED)


@pytest.fixture
def players() -> InMemoryPlayerRegistry:
    """Alice and Bob are registered."""
    registry = InMemoryPlayerRegistry()
    registry.register(Player("Alice"))
    registry.register(Player("Bob"))
    return registry


@pytest.fixture
def registry(players: InMemoryPlayerRegistry, ids: IdGenerator) -> SessionRegistry:
    return SessionRegistry(players, ids)
