"""create_challenge_room_tables

Revision ID: 3f1a9c2d7e10
Revises:
Create Date: 2026-10-19 10:12:41.304512

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '3f1a9c2d7e10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('wca_id', sa.String(), nullable=False),
        sa.Column('wca_user_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=True),
        sa.Column('country_iso2', sa.String(length=2), nullable=True),
        sa.Column('avatar', sa.String(), nullable=True),
        sa.Column('gender', sa.String(), nullable=True),
        sa.Column('access_token', sa.String(), nullable=True),
        sa.Column('role', sa.Enum('admin', 'user', name='userrole'), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('hide_profile', sa.Boolean(), nullable=False),
        sa.Column('hide_challenge_stats', sa.Boolean(), nullable=False),
        sa.Column('is_deleted', sa.Boolean(), nullable=False),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('last_login_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_users_id'), 'users', ['id'], unique=False)
    op.create_index(op.f('ix_users_wca_id'), 'users', ['wca_id'], unique=True)
    op.create_index(op.f('ix_users_wca_user_id'), 'users', ['wca_user_id'], unique=False)
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=False)
    op.create_index(op.f('ix_users_is_deleted'), 'users', ['is_deleted'], unique=False)

    op.create_table(
        'challenge_rooms',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('room_code', sa.String(length=16), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('description', sa.String(), nullable=True),
        sa.Column('event', sa.String(), nullable=False),
        sa.Column('format', sa.Enum('ao5', 'ao12', name='roomformat'), nullable=False),
        sa.Column('created_by', sa.Integer(), nullable=False),
        sa.Column('scrambles', sa.JSON(), nullable=False),
        sa.Column('status', sa.Enum('active', 'expired', name='roomstatus'), nullable=False),
        sa.Column('is_public', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('participant_count', sa.Integer(), nullable=False),
        sa.Column('completed_count', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['created_by'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_challenge_rooms_id'), 'challenge_rooms', ['id'], unique=False)
    op.create_index(op.f('ix_challenge_rooms_room_code'), 'challenge_rooms', ['room_code'], unique=True)
    op.create_index(op.f('ix_challenge_rooms_event'), 'challenge_rooms', ['event'], unique=False)
    op.create_index(op.f('ix_challenge_rooms_created_by'), 'challenge_rooms', ['created_by'], unique=False)
    op.create_index(op.f('ix_challenge_rooms_status'), 'challenge_rooms', ['status'], unique=False)
    op.create_index(op.f('ix_challenge_rooms_expires_at'), 'challenge_rooms', ['expires_at'], unique=False)

    op.create_table(
        'room_participants',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('room_id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('solves_completed', sa.Integer(), nullable=False),
        sa.Column('total_solves', sa.Integer(), nullable=False),
        sa.Column('dnf_count', sa.Integer(), nullable=False),
        sa.Column('is_completed', sa.Boolean(), nullable=False),
        sa.Column('best_single', sa.BigInteger(), nullable=True),
        sa.Column('average', sa.BigInteger(), nullable=True),
        sa.Column('final_rank', sa.Integer(), nullable=True),
        sa.Column('was_deleted_when_joined', sa.Boolean(), nullable=False),
        sa.Column('joined_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['room_id'], ['challenge_rooms.id'], ),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('room_id', 'user_id', name='unique_room_participant')
    )
    op.create_index(op.f('ix_room_participants_id'), 'room_participants', ['id'], unique=False)
    op.create_index(op.f('ix_room_participants_room_id'), 'room_participants', ['room_id'], unique=False)
    op.create_index(op.f('ix_room_participants_user_id'), 'room_participants', ['user_id'], unique=False)

    op.create_table(
        'room_solves',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('room_id', sa.Integer(), nullable=False),
        sa.Column('participant_id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('solve_number', sa.Integer(), nullable=False),
        sa.Column('scramble', sa.String(), nullable=False),
        sa.Column('event', sa.String(), nullable=False),
        sa.Column('time', sa.BigInteger(), nullable=False),
        sa.Column('penalty', sa.Enum('none', '+2', 'DNF', name='penalty'), nullable=False),
        sa.Column('final_time', sa.BigInteger(), nullable=False),
        sa.Column('comment', sa.Text(), nullable=True),
        sa.Column('solve_date', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(['room_id'], ['challenge_rooms.id'], ),
        sa.ForeignKeyConstraint(['participant_id'], ['room_participants.id'], ),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('participant_id', 'solve_number', name='unique_participant_solve_number')
    )
    op.create_index(op.f('ix_room_solves_id'), 'room_solves', ['id'], unique=False)
    op.create_index(op.f('ix_room_solves_room_id'), 'room_solves', ['room_id'], unique=False)
    op.create_index(op.f('ix_room_solves_participant_id'), 'room_solves', ['participant_id'], unique=False)
    op.create_index(op.f('ix_room_solves_user_id'), 'room_solves', ['user_id'], unique=False)

    op.create_table(
        'timer_sessions',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('event', sa.String(), nullable=False),
        sa.Column('description', sa.String(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('solve_count', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_timer_sessions_id'), 'timer_sessions', ['id'], unique=False)
    op.create_index(op.f('ix_timer_sessions_user_id'), 'timer_sessions', ['user_id'], unique=False)

    op.create_table(
        'timer_solves',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('session_id', sa.Integer(), nullable=False),
        sa.Column('event', sa.String(), nullable=False),
        sa.Column('scramble', sa.String(), nullable=False),
        sa.Column('time', sa.BigInteger(), nullable=False),
        # Type already created with room_solves
        sa.Column('penalty', postgresql.ENUM('none', '+2', 'DNF', name='penalty', create_type=False), nullable=False),
        sa.Column('final_time', sa.BigInteger(), nullable=False),
        sa.Column('comment', sa.Text(), nullable=True),
        sa.Column('solve_date', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
        sa.ForeignKeyConstraint(['session_id'], ['timer_sessions.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_timer_solves_id'), 'timer_solves', ['id'], unique=False)
    op.create_index(op.f('ix_timer_solves_user_id'), 'timer_solves', ['user_id'], unique=False)
    op.create_index(op.f('ix_timer_solves_session_id'), 'timer_solves', ['session_id'], unique=False)


def downgrade() -> None:
    op.drop_table('timer_solves')
    op.drop_table('timer_sessions')
    op.drop_table('room_solves')
    op.drop_table('room_participants')
    op.drop_table('challenge_rooms')
    op.drop_table('users')

    bind = op.get_bind()
    for enum_name in ('penalty', 'roomstatus', 'roomformat', 'userrole'):
        sa.Enum(name=enum_name).drop(bind, checkfirst=True)
