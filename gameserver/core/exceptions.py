"""
Exceptions raised across layers.

Every concrete error carries a `code` naming its place in the taxonomy the HTTP layer maps to a 4xx response.
"""


class GameError(Exception):
    """Top-level exception for anything the service refuses to do."""

    code = "GameError"


class InvalidRequestError(GameError):
    code = "InvalidRequest"


# --- Lookups ---
class RepositoryError(GameError):
    code = "RepositoryError"


class UnknownGameError(RepositoryError):
    code = "UnknownGame"


class UnknownPlayerError(RepositoryError):
    code = "UnknownPlayer"


# --- Joining a game ---
class JoinError(GameError):
    code = "JoinError"


class PlayerNotRegisteredError(JoinError):
    code = "PlayerNotRegistered"


class AlreadyJoinedError(JoinError):
    code = "AlreadyJoined"


class GameFullError(JoinError):
    code = "GameFull"


# --- Event log and ids ---
class MalformedEventError(GameError):
    code = "MalformedEvent"


class GameNotFullError(GameError):
    code = "GameNotFull"


class IdExhaustedError(GameError):
    code = "IdExhausted"
