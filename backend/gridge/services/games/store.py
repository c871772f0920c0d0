"""Durable game sessions and their atomic mutations.

Every mutation is one short transaction scoped to a single game row (plus the
winner's player row). The game row is read with ``SELECT ... FOR UPDATE`` and
written back through the mapper's version counter, so a writer holding a stale
snapshot updates no row and the flush raises ``StaleDataError``. That writer is
rolled back and its request is re-validated against the committed state.
"""

import logging
from contextlib import contextmanager
from typing import Callable, List, Optional

from sqlalchemy import or_, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm.exc import StaleDataError

from gridge.models import (
    Game,
    Move,
    Player,
    STATUS_DRAWN,
    STATUS_IN_PROGRESS,
    STATUS_WAITING,
    STATUS_WON,
    STATUSES,
    generate_game_id,
)
from . import grid as grid_logic
from .errors import (
    CellOccupied,
    GameError,
    InvalidState,
    NameConflict,
    NotFound,
    NotYourTurn,
    OutOfBounds,
    SelfJoin,
    StoreUnavailable,
)


def check_joinable(game: Optional[Game], player_id: int) -> None:
    if game is None:
        raise NotFound('Game not found')
    if game.status != STATUS_WAITING:
        raise InvalidState('Game is not in waiting state')
    if game.player1_id == player_id:
        raise SelfJoin()


def check_move(game: Optional[Game], player_id: int, row: int, col: int) -> None:
    """Raise the first rule a move would break, in a fixed order.

    Cell checks come before the turn check: a caller that lost a race for
    the same cell gets CellOccupied.
    """
    if game is None:
        raise NotFound('Game not found')
    if game.status != STATUS_IN_PROGRESS:
        raise InvalidState('Game is not in progress')
    if not grid_logic.is_in_bounds(row, col):
        raise OutOfBounds()
    if not grid_logic.is_legal_move(game.grid, row, col):
        raise CellOccupied()
    if game.current_turn_player_id != player_id:
        raise NotYourTurn()


class SessionStore:
    def __init__(self, session, logger: Optional[logging.Logger] = None):
        self.session = session
        self.logger = logger or logging.getLogger(__name__)

    # ---- players ----

    def create_player(self, name: str) -> Player:
        player = Player(name=name)
        try:
            self.session.add(player)
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            raise NameConflict() from exc
        except SQLAlchemyError as exc:
            self.session.rollback()
            self.logger.error(f"[store-error] create_player name={name!r}: {exc}")
            raise StoreUnavailable() from exc
        self.logger.info(f"[player] registered id={player.id} name={name!r}")
        return player

    def get_player(self, player_id: int) -> Player:
        player = self.session.get(Player, player_id)
        if player is None:
            raise NotFound('Player not found')
        return player

    # ---- sessions ----

    def create_session(self, first_player_id: int) -> Game:
        game = Game(
            id=generate_game_id(),
            player1_id=first_player_id,
            current_turn_player_id=first_player_id,
            status=STATUS_WAITING,
            grid=grid_logic.empty_grid(),
            move_count=0,
        )
        with self._transaction(game.id):
            self.session.add(game)
        self.logger.info(f"[create] game={game.id} player={first_player_id}")
        return game

    def join_session(self, game_id: str, second_player_id: int) -> Game:
        def revalidate(fresh):
            check_joinable(fresh, second_player_id)

        with self._transaction(game_id, revalidate):
            game = self._load_for_update(game_id)
            check_joinable(game, second_player_id)
            game.player2_id = second_player_id
            game.status = STATUS_IN_PROGRESS
            self.session.flush()
        self.logger.info(f"[join] game={game_id} player={second_player_id}")
        return game

    def apply_move(self, game_id: str, player_id: int, row: int, col: int) -> Game:
        def revalidate(fresh):
            check_move(fresh, player_id, row, col)

        with self._transaction(game_id, revalidate):
            game = self._load_for_update(game_id)
            check_move(game, player_id, row, col)

            mark = game.mark_for(player_id)
            new_grid = grid_logic.apply_mark(game.grid, row, col, mark)
            move_number = game.move_count + 1

            game.grid = new_grid
            game.move_count = move_number
            if grid_logic.has_winning_line(new_grid, mark):
                status = STATUS_WON
                game.winner_id = player_id
                game.current_turn_player_id = None
            elif grid_logic.is_board_full(new_grid):
                status = STATUS_DRAWN
                game.current_turn_player_id = None
            else:
                status = STATUS_IN_PROGRESS
                game.current_turn_player_id = game.other_player_id(player_id)
            game.status = status

            # The version-checked UPDATE of the game row happens here
            self.session.flush()

            self.session.add(Move(
                game_id=game.id,
                player_id=player_id,
                row=row,
                col=col,
                move_number=move_number,
            ))
            if status == STATUS_WON:
                self.session.execute(
                    update(Player)
                    .where(Player.id == player_id)
                    .values(
                        wins=Player.wins + 1,
                        moves_in_wins=Player.moves_in_wins + move_number,
                    )
                    .execution_options(synchronize_session=False)
                )

        self.logger.info(
            f"[move] game={game_id} player={player_id} cell=({row},{col}) number={move_number} status={status}"
        )
        if status == STATUS_WON:
            self.logger.info(f"[win] game={game_id} winner={player_id} moves={move_number}")
        return game

    def get_session(self, game_id: str) -> Game:
        game = self.session.get(Game, game_id, populate_existing=True)
        if game is None:
            raise NotFound('Game not found')
        return game

    def list_sessions_by_status(self, status: str) -> List[Game]:
        if status not in STATUSES:
            raise ValueError(f'unknown status {status!r}')
        stmt = (
            select(Game)
            .where(Game.status == status)
            .order_by(Game.updated_at.desc(), Game.created_at.desc())
        )
        return list(self.session.execute(stmt).scalars())

    def list_sessions_for_player(self, player_id: int) -> List[Game]:
        stmt = (
            select(Game)
            .where(or_(Game.player1_id == player_id, Game.player2_id == player_id))
            .order_by(Game.updated_at.desc(), Game.created_at.desc())
        )
        return list(self.session.execute(stmt).scalars())

    def list_moves(self, game_id: str) -> List[Move]:
        self.get_session(game_id)
        stmt = select(Move).where(Move.game_id == game_id).order_by(Move.move_number)
        return list(self.session.execute(stmt).scalars())

    def close(self) -> None:
        remove = getattr(self.session, 'remove', None)
        if remove is not None:
            remove()
        else:
            self.session.close()

    # ---- internals ----

    def _load_for_update(self, game_id: str) -> Optional[Game]:
        stmt = (
            select(Game)
            .where(Game.id == game_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return self.session.execute(stmt).scalar_one_or_none()

    @contextmanager
    def _transaction(self, game_id: str, revalidate: Optional[Callable[[Optional[Game]], None]] = None):
        try:
            yield
            self.session.commit()
        except GameError:
            self.session.rollback()
            raise
        except (StaleDataError, IntegrityError) as exc:
            # Lost the compare-and-swap, or a racing writer took the same move number
            self.session.rollback()
            self.logger.info(f"[conflict] game={game_id} changed by a concurrent commit, re-validating")
            if revalidate is not None:
                revalidate(self.session.get(Game, game_id, populate_existing=True))
            raise StoreUnavailable('Game was modified concurrently, try again') from exc
        except SQLAlchemyError as exc:
            self.session.rollback()
            self.logger.error(f"[store-error] game={game_id}: {exc}")
            raise StoreUnavailable() from exc
