"""
Type definitions used across layers
"""

from enum import StrEnum


class Side(StrEnum):
    AXIS = "Axis"
    ALLIES = "Allies"


class GameType(StrEnum):
    """Titles served. The value is the tag used in per-title paths."""

    BAUTZEN_1945 = "Bautzen1945"
    ACQUIRE = "Acquire"


class Status(StrEnum):
    OPEN = "open"
    FULL = "full"
    STARTED = "started"
