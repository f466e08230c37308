"""Generate database session"""

from typing import Generator

from sqlalchemy import StaticPool, create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import Session, sessionmaker

from gameserver.core.config import Config
from gameserver.db.schema import Base
from gameserver.db.sql_repository import SQLEventStore


def _engine_options(url: str) -> dict:
    """An in-memory SQLite database lives in one connection, shared by every thread."""
    parsed = make_url(url)
    if parsed.get_backend_name() == "sqlite" and parsed.database in (None, "", ":memory:"):
        return {"connect_args": {"check_same_thread": False}, "poolclass": StaticPool}
    return {}


engine = create_engine(Config.DATABASE_URL, **_engine_options(Config.DATABASE_URL))
SessionLocal = sessionmaker(autoflush=False, bind=engine)

# Ensure all tables are created
Base.metadata.create_all(bind=engine)


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_event_store() -> SQLEventStore:
    """Event store on the configured database."""
    return SQLEventStore(SessionLocal)
