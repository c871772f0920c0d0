"""create player, game and move tables

Revision ID: 3c9a1f2e7b44
Revises:
Create Date: 2026-10-19 00:00:00
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3c9a1f2e7b44'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'player',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=64), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('wins', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('moves_in_wins', sa.Integer(), nullable=False, server_default='0'),
    )
    with op.batch_alter_table('player') as batch_op:
        batch_op.create_index('ix_player_name', ['name'], unique=True)

    op.create_table(
        'game',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('player1_id', sa.Integer(), sa.ForeignKey('player.id'), nullable=False),
        sa.Column('player2_id', sa.Integer(), sa.ForeignKey('player.id'), nullable=True),
        sa.Column('current_turn_player_id', sa.Integer(), sa.ForeignKey('player.id'), nullable=True),
        sa.Column('status', sa.String(length=16), nullable=False),
        sa.Column('winner_id', sa.Integer(), sa.ForeignKey('player.id'), nullable=True),
        sa.Column('grid', sa.Text(), nullable=False),
        sa.Column('move_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.Column('version_id', sa.Integer(), nullable=False),
    )
    with op.batch_alter_table('game') as batch_op:
        batch_op.create_index('ix_game_player1_id', ['player1_id'])
        batch_op.create_index('ix_game_player2_id', ['player2_id'])
        batch_op.create_index('ix_game_status', ['status'])

    op.create_table(
        'move',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('game_id', sa.String(length=36), sa.ForeignKey('game.id'), nullable=False),
        sa.Column('player_id', sa.Integer(), sa.ForeignKey('player.id'), nullable=False),
        sa.Column('row', sa.Integer(), nullable=False),
        sa.Column('col', sa.Integer(), nullable=False),
        sa.Column('move_number', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('game_id', 'move_number', name='uq_move_game_move_number'),
    )
    with op.batch_alter_table('move') as batch_op:
        batch_op.create_index('ix_move_game_id', ['game_id'])


def downgrade():
    op.drop_table('move')
    op.drop_table('game')
    op.drop_table('player')
