"""Orchestration of communication from API router to the player and session registries (and the reverse direction)."""

from gameserver.api.models import (
    GameListResponse,
    GameResponse,
    GetGameRequest,
    JoinGameRequest,
    PlayerKeyResponse,
    PlayerListResponse,
    PlayerRequest,
    PlayerStateResponse,
    RedirectResponse,
    RegisterPlayerRequest,
)
from gameserver.core.ids import Id
from gameserver.services.player_registry import InMemoryPlayerRegistry, Player
from gameserver.services.session_registry import (
    PlayerState,
    Redirect,
    SessionRegistry,
)


class GameService:
    """Orchestration of layers for game sessions."""

    def __init__(self, registry: SessionRegistry, players: InMemoryPlayerRegistry) -> None:
        self.registry = registry
        self.players = players

    # -- API routes logic ---
    def register_player(self, request: RegisterPlayerRequest) -> PlayerListResponse:
        """New player signs up. Returns the list of registered players."""
        self.players.register(Player(request.player_name))
        return self.list_players()

    def list_players(self) -> PlayerListResponse:
        return PlayerListResponse(
            players=[player.name for player in self.players.list_registered()]
        )

    def create_game(self) -> GameResponse:
        game_id = self.registry.create_game()
        return self._create_game_response(game_id)

    def list_games(self) -> GameListResponse:
        return GameListResponse(game_ids=self.registry.list_games())

    def get_game(self, request: GetGameRequest) -> GameResponse:
        return self._create_game_response(request.game_id)

    def join_game(self, request: JoinGameRequest) -> PlayerKeyResponse:
        player_key = self.registry.join_game(request.game_id, request.player_name)
        return PlayerKeyResponse(game_id=request.game_id, player_key=player_key)

    def get_player_state(self, request: PlayerRequest) -> PlayerStateResponse | RedirectResponse:
        """
        Player's view of a game.
        ----
        The HTTP layer turns a RedirectResponse into a "303 See Other" to its location, with the player state as body.
        """
        result = self.registry.get_player_state(request.game_id, request.player_key)
        if isinstance(result, Redirect):
            return RedirectResponse(
                location=result.location,
                player_state=self._player_state_response(result.player_state),
            )
        return self._player_state_response(result)

    def leave_game(self, request: PlayerRequest) -> GameResponse:
        self.registry.leave_game(request.game_id, request.player_key)
        return self._create_game_response(request.game_id)

    # -- Internal helpers --
    def _create_game_response(self, game_id: Id) -> GameResponse:
        aggregate = self.registry.get_game(game_id)
        return GameResponse(
            game_id=game_id,
            players={name: slot.side for name, slot in aggregate.players.items()},
            capacity=aggregate.capacity,
            status=aggregate.status,
        )

    def _player_state_response(self, state: PlayerState) -> PlayerStateResponse:
        return PlayerStateResponse(player_key=state.player_key, player_name=state.player_name)
