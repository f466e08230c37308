"""Process configuration, read from the environment with sensible defaults."""

import logging
import os
from typing import Optional


class Config:
    DATABASE_URL = os.environ.get("GAMESERVER_DATABASE_URL") or "sqlite:///:memory:"
    SEED = int(os.environ.get("GAMESERVER_SEED", "42"))
    GAME_TYPE = os.environ.get("GAMESERVER_GAME_TYPE", "Bautzen1945")
    CAPACITY = int(os.environ.get("GAMESERVER_CAPACITY", "2"))
    LOG_LEVEL = os.environ.get("GAMESERVER_LOG_LEVEL", "INFO")
    # Write games through to DATABASE_URL and restore them at startup
    PERSIST = os.environ.get("GAMESERVER_PERSIST", "").lower() in ("1", "true", "yes")
    # Draws allowed before the id source gives up on finding an unused id
    ID_ATTEMPTS = int(os.environ.get("GAMESERVER_ID_ATTEMPTS", "1000"))


def configure_logging(level: Optional[str] = None) -> None:
    """Set up root logging for a process hosting the service. Never called on import."""
    logging.basicConfig(
        level=(level or Config.LOG_LEVEL).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
