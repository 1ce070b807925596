"""add_timer_stats_and_contact_messages

Revision ID: 8b2e4f6a1c93
Revises: 3f1a9c2d7e10
Create Date: 2026-10-19 15:40:07.118230

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '8b2e4f6a1c93'
down_revision: Union[str, Sequence[str], None] = '3f1a9c2d7e10'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Timer solves may be saved outside any session
    op.alter_column('timer_solves', 'session_id', existing_type=sa.Integer(), nullable=True)
    op.add_column('timer_solves', sa.Column('inspection_time', sa.Integer(), nullable=True))

    op.create_table(
        'user_event_stats',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('event', sa.String(), nullable=False),
        sa.Column('best_single', sa.BigInteger(), nullable=True),
        sa.Column('best_ao5', sa.BigInteger(), nullable=True),
        sa.Column('best_ao12', sa.BigInteger(), nullable=True),
        sa.Column('recent_ao5', sa.BigInteger(), nullable=True),
        sa.Column('recent_ao12', sa.BigInteger(), nullable=True),
        sa.Column('total_solves', sa.Integer(), nullable=False),
        sa.Column('first_solve_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('last_solve_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('last_calculated', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'event', name='unique_user_event_stats')
    )
    op.create_index(op.f('ix_user_event_stats_id'), 'user_event_stats', ['id'], unique=False)
    op.create_index(op.f('ix_user_event_stats_user_id'), 'user_event_stats', ['user_id'], unique=False)

    op.create_table(
        'contact_messages',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('subject', sa.String(), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('wca_id', sa.String(), nullable=True),
        sa.Column('user_id', sa.Integer(), nullable=True),
        sa.Column('status', sa.Enum('new', 'read', 'replied', 'resolved', name='contactstatus'), nullable=False),
        sa.Column('is_read', sa.Boolean(), nullable=False),
        sa.Column('admin_notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_contact_messages_id'), 'contact_messages', ['id'], unique=False)
    op.create_index(op.f('ix_contact_messages_email'), 'contact_messages', ['email'], unique=False)
    op.create_index(op.f('ix_contact_messages_status'), 'contact_messages', ['status'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_contact_messages_status'), table_name='contact_messages')
    op.drop_index(op.f('ix_contact_messages_email'), table_name='contact_messages')
    op.drop_index(op.f('ix_contact_messages_id'), table_name='contact_messages')
    op.drop_table('contact_messages')
    sa.Enum(name='contactstatus').drop(op.get_bind(), checkfirst=True)

    op.drop_index(op.f('ix_user_event_stats_user_id'), table_name='user_event_stats')
    op.drop_index(op.f('ix_user_event_stats_id'), table_name='user_event_stats')
    op.drop_table('user_event_stats')

    op.drop_column('timer_solves', 'inspection_time')
    # Solves saved without a session have to go before the column can be NOT NULL again
    op.execute("DELETE FROM timer_solves WHERE session_id IS NULL")
    op.alter_column('timer_solves', 'session_id', existing_type=sa.Integer(), nullable=False)
