"""Requests and Response models"""

from pydantic import BaseModel, field_validator

from gameserver.core.exceptions import InvalidRequestError
from gameserver.core.ids import is_valid_id
from gameserver.core.shared_types import Side, Status

PlayerName = str


def _validate_id(value: str) -> str:
    if not is_valid_id(value):
        raise InvalidRequestError(
            f"Cannot interpret {value!r} as an id: expected 8 upper case letters or digits."
        )
    return value


def _validate_name(value: str) -> str:
    if not value.strip():
        raise InvalidRequestError("Player name cannot be empty.")
    return value.strip()


# --- REQUEST MODELS ---
class RegisterPlayerRequest(BaseModel):
    player_name: str

    @field_validator("player_name")
    @classmethod
    def validate_player_name(cls, value: str) -> str:
        return _validate_name(value)


class GetGameRequest(BaseModel):
    game_id: str

    @field_validator("game_id")
    @classmethod
    def validate_game_id(cls, value: str) -> str:
        return _validate_id(value)


class JoinGameRequest(BaseModel):
    game_id: str
    player_name: str

    @field_validator("game_id")
    @classmethod
    def validate_game_id(cls, value: str) -> str:
        return _validate_id(value)

    @field_validator("player_name")
    @classmethod
    def validate_player_name(cls, value: str) -> str:
        return _validate_name(value)


class PlayerRequest(BaseModel):
    """Addresses one player in one game: used to get their state or to have them leave."""

    game_id: str
    player_key: str

    @field_validator(*["game_id", "player_key"])
    @classmethod
    def validate_ids(cls, value: str) -> str:
        return _validate_id(value)


# --- RESPONSE MODELS ---
class PlayerListResponse(BaseModel):
    players: list[PlayerName]


class GameResponse(BaseModel):
    game_id: str
    players: dict[PlayerName, Side]
    capacity: int
    status: Status


class GameListResponse(BaseModel):
    game_ids: list[str]


class PlayerKeyResponse(BaseModel):
    game_id: str
    player_key: str


class PlayerStateResponse(BaseModel):
    player_key: str
    player_name: PlayerName


class RedirectResponse(BaseModel):
    location: str
    player_state: PlayerStateResponse
