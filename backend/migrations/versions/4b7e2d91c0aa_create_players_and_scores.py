"""create players and scores

Revision ID: 4b7e2d91c0aa
Revises:
Create Date: 2026-10-19 00:00:00

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '4b7e2d91c0aa'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'players',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('username', sa.String(length=20), nullable=False),
        sa.Column('password_hash', sa.String(length=128), nullable=False),
        sa.Column('access_token', sa.String(length=128), nullable=False),
        sa.Column('team_member', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('achievements', sa.Text(), nullable=False, server_default='[]'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_players_username', 'players', ['username'], unique=True)

    op.create_table(
        'scores',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('player_id', sa.String(length=36), nullable=False),
        sa.Column('game_mode', sa.String(length=32), nullable=False),
        sa.Column('score', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('death_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('timestamp', sa.BigInteger(), nullable=False),
        sa.Column('verified', sa.Integer(), nullable=False, server_default='0'),
        sa.ForeignKeyConstraint(['player_id'], ['players.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('player_id', 'game_mode', name='uq_scores_player_mode'),
    )
    op.create_index('ix_scores_player_id', 'scores', ['player_id'], unique=False)
    op.create_index('ix_scores_game_mode', 'scores', ['game_mode'], unique=False)


def downgrade():
    op.drop_index('ix_scores_game_mode', table_name='scores')
    op.drop_index('ix_scores_player_id', table_name='scores')
    op.drop_table('scores')
    op.drop_index('ix_players_username', table_name='players')
    op.drop_table('players')
