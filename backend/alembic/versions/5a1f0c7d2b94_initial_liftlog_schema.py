"""initial liftlog schema: users, auth sessions, workouts, templates, weight

Revision ID: 5a1f0c7d2b94
Revises:
Create Date: 2026-10-19 10:12:04.118552

"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# enum types are created with their tables and dropped explicitly in downgrade
workout_status = sa.Enum('COMPLETED', 'DRAFT', 'CANCELLED', name='workout_status')
goal_type = sa.Enum('lose', 'gain', name='goal_type')


# revision identifiers, used by Alembic.
revision: str = '5a1f0c7d2b94'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # 1) users + server-side sessions
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('username', sa.String(length=120), nullable=False),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP')),
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_username', 'users', ['username'], unique=True)

    op.create_table(
        'auth_sessions',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('token', sa.String(length=64), nullable=False),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP')),
    )
    op.create_index('ix_auth_sessions_user_id', 'auth_sessions', ['user_id'])
    op.create_index('ix_auth_sessions_token', 'auth_sessions', ['token'], unique=True)

    # 2) templates (global, shared by all users)
    op.create_table(
        'session_templates',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=120), nullable=False, unique=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('is_default', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP')),
    )

    op.create_table(
        'template_exercises',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('template_id', sa.Integer(), sa.ForeignKey('session_templates.id', ondelete='CASCADE'), nullable=False),
        sa.Column('exercise_name', sa.String(length=120), nullable=False),
        sa.Column('default_sets', sa.Integer(), nullable=True),
        sa.Column('default_reps', sa.Integer(), nullable=True),
        sa.Column('target_rep_range', sa.String(length=20), nullable=True),
        sa.Column('default_weight', sa.Float(), nullable=True),
        sa.Column('muscle_groups', sa.String(length=255), nullable=True),
        sa.Column('order_index', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('rest_seconds', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP')),
    )
    op.create_index('ix_template_exercises_template_id', 'template_exercises', ['template_id'])

    # 3) workouts + exercises (sets live in a JSON column)
    op.create_table(
        'workouts',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('template_id', sa.Integer(), sa.ForeignKey('session_templates.id', ondelete='SET NULL'), nullable=True),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('duration_minutes', sa.Integer(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('status', workout_status, nullable=False, server_default='COMPLETED'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP')),
    )
    op.create_index('ix_workouts_user_id', 'workouts', ['user_id'])
    op.create_index('ix_workouts_template_id', 'workouts', ['template_id'])
    op.create_index('ix_workouts_date', 'workouts', ['date'])

    op.create_table(
        'exercises',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('workout_id', sa.Integer(), sa.ForeignKey('workouts.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('sets', sa.JSON(), nullable=False),
        sa.Column('rest_seconds', sa.Integer(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('order_index', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.UniqueConstraint('workout_id', 'order_index', name='uq_exercises_workout_order'),
    )
    op.create_index('ix_exercises_workout_id', 'exercises', ['workout_id'])
    op.create_index('ix_exercises_name', 'exercises', ['name'])

    # 4) body weight tracking
    op.create_table(
        'weight_entries',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('weight', sa.Float(), nullable=False),
        sa.Column('date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP')),
    )
    op.create_index('ix_weight_entries_user_id', 'weight_entries', ['user_id'])

    op.create_table(
        'weight_goals',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('target_weight', sa.Float(), nullable=False),
        sa.Column('goal_type', goal_type, nullable=False),
        sa.Column('target_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP')),
    )
    op.create_index('ix_weight_goals_user_id', 'weight_goals', ['user_id'])


def downgrade() -> None:
    op.drop_index('ix_weight_goals_user_id', table_name='weight_goals')
    op.drop_table('weight_goals')
    op.drop_index('ix_weight_entries_user_id', table_name='weight_entries')
    op.drop_table('weight_entries')

    op.drop_index('ix_exercises_name', table_name='exercises')
    op.drop_index('ix_exercises_workout_id', table_name='exercises')
    op.drop_table('exercises')
    op.drop_index('ix_workouts_date', table_name='workouts')
    op.drop_index('ix_workouts_template_id', table_name='workouts')
    op.drop_index('ix_workouts_user_id', table_name='workouts')
    op.drop_table('workouts')

    op.drop_index('ix_template_exercises_template_id', table_name='template_exercises')
    op.drop_table('template_exercises')
    op.drop_table('session_templates')

    op.drop_index('ix_auth_sessions_token', table_name='auth_sessions')
    op.drop_index('ix_auth_sessions_user_id', table_name='auth_sessions')
    op.drop_table('auth_sessions')
    op.drop_index('ix_users_username', table_name='users')
    op.drop_index('ix_users_id', table_name='users')
    op.drop_table('users')

    # enum types last, once nothing references them
    goal_type.drop(op.get_bind(), checkfirst=True)
    workout_status.drop(op.get_bind(), checkfirst=True)
