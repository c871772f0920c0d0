from datetime import datetime, timezone
import uuid

from gridge import db
from gridge.services.games import grid as grid_logic


STATUS_WAITING = 'waiting'
STATUS_IN_PROGRESS = 'in_progress'
STATUS_WON = 'won'
STATUS_DRAWN = 'drawn'
STATUSES = (STATUS_WAITING, STATUS_IN_PROGRESS, STATUS_WON, STATUS_DRAWN)
TERMINAL_STATUSES = (STATUS_WON, STATUS_DRAWN)


def _utcnow():
    return datetime.now(timezone.utc)


def generate_game_id():
    """Opaque, collision-resistant session token."""
    return str(uuid.uuid4())


class Player(db.Model):
    __tablename__ = 'player'
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(64), unique=True, nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=_utcnow, nullable=False)
    # Aggregates; only ever changed together by a winning move
    wins = db.Column(db.Integer, default=0, nullable=False)
    moves_in_wins = db.Column(db.Integer, default=0, nullable=False)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'wins': self.wins,
            'moves_in_wins': self.moves_in_wins,
        }


class Game(db.Model):
    __tablename__ = 'game'
    id = db.Column(db.String(36), primary_key=True, default=generate_game_id)
    player1_id = db.Column(db.Integer, db.ForeignKey('player.id'), nullable=False, index=True)
    player2_id = db.Column(db.Integer, db.ForeignKey('player.id'), nullable=True, index=True)
    current_turn_player_id = db.Column(db.Integer, db.ForeignKey('player.id'), nullable=True)
    status = db.Column(db.String(16), default=STATUS_WAITING, nullable=False, index=True)  # waiting, in_progress, won, drawn
    winner_id = db.Column(db.Integer, db.ForeignKey('player.id'), nullable=True)
    grid_json = db.Column('grid', db.Text, nullable=False, default=lambda: grid_logic.dumps(grid_logic.empty_grid()))
    move_count = db.Column(db.Integer, default=0, nullable=False)
    created_at = db.Column(db.DateTime, default=_utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=_utcnow, onupdate=_utcnow, nullable=False)
    # Bumped on every UPDATE; a stale writer's UPDATE matches no row
    version_id = db.Column(db.Integer, nullable=False)

    player1 = db.relationship('Player', foreign_keys=[player1_id])
    player2 = db.relationship('Player', foreign_keys=[player2_id])

    __mapper_args__ = {'version_id_col': version_id}

    @property
    def grid(self):
        return grid_logic.loads(self.grid_json)

    @grid.setter
    def grid(self, value):
        self.grid_json = grid_logic.dumps(value)

    @property
    def is_terminal(self):
        return self.status in TERMINAL_STATUSES

    def mark_for(self, player_id):
        """Mark number of a seated player, or None if not seated."""
        if player_id == self.player1_id:
            return grid_logic.FIRST_MARK
        if self.player2_id is not None and player_id == self.player2_id:
            return grid_logic.SECOND_MARK
        return None

    def other_player_id(self, player_id):
        return self.player2_id if player_id == self.player1_id else self.player1_id

    def to_dict(self):
        grid = self.grid
        line = None
        if self.status == STATUS_WON and self.winner_id is not None:
            found = grid_logic.winning_line(grid, self.mark_for(self.winner_id))
            line = [list(cell) for cell in found] if found else None
        return {
            'id': self.id,
            'status': self.status,
            'player1_id': self.player1_id,
            'player2_id': self.player2_id,
            'player1': {'id': self.player1.id, 'name': self.player1.name} if self.player1 else None,
            'player2': {'id': self.player2.id, 'name': self.player2.name} if self.player2 else None,
            'current_turn_player_id': None if self.is_terminal else self.current_turn_player_id,
            'winner_id': self.winner_id if self.status == STATUS_WON else None,
            'grid': grid_logic.grid_to_rows(grid),
            'move_count': self.move_count,
            'winning_line': line,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }


class Move(db.Model):
    __tablename__ = 'move'
    __table_args__ = (
        db.UniqueConstraint('game_id', 'move_number', name='uq_move_game_move_number'),
    )
    id = db.Column(db.Integer, primary_key=True)
    game_id = db.Column(db.String(36), db.ForeignKey('game.id'), nullable=False, index=True)
    player_id = db.Column(db.Integer, db.ForeignKey('player.id'), nullable=False)
    row = db.Column(db.Integer, nullable=False)
    col = db.Column(db.Integer, nullable=False)
    move_number = db.Column(db.Integer, nullable=False)
    created_at = db.Column(db.DateTime, default=_utcnow, nullable=False)

    def to_dict(self):
        return {
            'game_id': self.game_id,
            'player_id': self.player_id,
            'row': self.row,
            'col': self.col,
            'move_number': self.move_number,
        }
