"""create highscore and word tables

Revision ID: 4b7e9c21d0a1
Revises:
Create Date: 2026-10-19 00:00:00
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '4b7e9c21d0a1'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'highscore',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('username', sa.String(length=64), nullable=False),
        sa.Column('score', sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    with op.batch_alter_table('highscore') as batch_op:
        batch_op.create_index('ix_highscore_username', ['username'], unique=True)

    op.create_table(
        'word',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('word', sa.String(length=64), nullable=False),
        sa.Column('tip', sa.String(length=256), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('word'),
    )


def downgrade():
    op.drop_table('word')
    with op.batch_alter_table('highscore') as batch_op:
        batch_op.drop_index('ix_highscore_username')
    op.drop_table('highscore')
