from typing import Optional

from . import ranking
from .store import SessionStore


class GameLifecycle:
    """Entry point used by HTTP routes, socket handlers and CLI commands.

    Holds no game state itself; every call goes through the store handle it
    was built with and returns plain dict snapshots.
    """

    def __init__(self, store: SessionStore, leaderboard_limit: int = 3, efficiency_decimals: int = 2):
        self.store = store
        self.leaderboard_limit = leaderboard_limit
        self.efficiency_decimals = efficiency_decimals

    # Players are registered by a separate collaborator; exposed here so the
    # API and the simulation share one store handle.
    def register_player(self, name: str) -> dict:
        return self.store.create_player(name).to_dict()

    def get_player(self, player_id: int) -> dict:
        return self.store.get_player(player_id).to_dict()

    def create_session(self, player_id: int) -> dict:
        self.store.get_player(player_id)
        return self.store.create_session(player_id).to_dict()

    def join_session(self, game_id: str, player_id: int) -> dict:
        self.store.get_player(player_id)
        return self.store.join_session(game_id, player_id).to_dict()

    def make_move(self, game_id: str, player_id: int, row: int, col: int) -> dict:
        self.store.get_player(player_id)
        return self.store.apply_move(game_id, player_id, row, col).to_dict()

    def get_session(self, game_id: str) -> dict:
        return self.store.get_session(game_id).to_dict()

    def list_moves(self, game_id: str) -> list:
        return [m.to_dict() for m in self.store.list_moves(game_id)]

    def list_sessions(self, status: str) -> list:
        return [g.to_dict() for g in self.store.list_sessions_by_status(status)]

    def list_player_sessions(self, player_id: int) -> list:
        self.store.get_player(player_id)
        return [g.to_dict() for g in self.store.list_sessions_for_player(player_id)]

    def leaderboard(self, order_by: str, limit: Optional[int] = None) -> list:
        entries = ranking.leaderboard(
            self.store.session,
            order_by=order_by,
            limit=self.leaderboard_limit if limit is None else limit,
            decimals=self.efficiency_decimals,
        )
        return [e.to_dict() for e in entries]

    def close(self) -> None:
        self.store.close()
