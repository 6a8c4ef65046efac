"""Initial schema: identities, catalog, attendance, lessons, billing, applications

Revision ID: 0001_initial
Revises:
Create Date: 2024-10-01 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001_initial'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamp():
    return sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False)


def upgrade() -> None:
    """Create every table of the back office."""
    op.create_table(
        'roles',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
    )
    op.create_index('ix_roles_id', 'roles', ['id'])
    op.create_index('ix_roles_name', 'roles', ['name'], unique=True)

    op.create_table(
        'courses',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        _timestamp(),
    )
    op.create_index('ix_courses_id', 'courses', ['id'])
    op.create_index('ix_courses_name', 'courses', ['name'], unique=True)

    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('first_name', sa.String(), nullable=False),
        sa.Column('last_name', sa.String(), nullable=False),
        sa.Column('phone', sa.String(), nullable=False),
        sa.Column('username', sa.String(), nullable=True),
        sa.Column('password_hash', sa.String(), nullable=True),
        sa.Column('address', sa.String(), nullable=True),
        sa.Column('specialty', sa.String(), nullable=True),
        sa.Column('salary', sa.Numeric(10, 2), nullable=True),
        sa.Column('percent', sa.Numeric(5, 2), nullable=True),
        sa.Column('role_id', sa.Integer(), sa.ForeignKey('roles.id'), nullable=False),
        sa.Column('course_id', sa.Integer(), sa.ForeignKey('courses.id', ondelete='SET NULL'), nullable=True),
        _timestamp(),
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_phone', 'users', ['phone'], unique=True)
    op.create_index('ix_users_username', 'users', ['username'], unique=True)
    op.create_index('ix_users_role_id', 'users', ['role_id'])

    op.create_table(
        'archived_users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('original_user_id', sa.Integer(), nullable=True),
        sa.Column('first_name', sa.String(), nullable=False),
        sa.Column('last_name', sa.String(), nullable=False),
        sa.Column('phone', sa.String(), nullable=False),
        sa.Column('username', sa.String(), nullable=True),
        sa.Column('password_hash', sa.String(), nullable=True),
        sa.Column('address', sa.String(), nullable=True),
        sa.Column('specialty', sa.String(), nullable=True),
        sa.Column('salary', sa.Numeric(10, 2), nullable=True),
        sa.Column('percent', sa.Numeric(5, 2), nullable=True),
        sa.Column('course_id', sa.Integer(), nullable=True),
        sa.Column('role_id', sa.Integer(), sa.ForeignKey('roles.id'), nullable=False),
        sa.Column('archived_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_archived_users_id', 'archived_users', ['id'])
    op.create_index('ix_archived_users_phone', 'archived_users', ['phone'])

    op.create_table(
        'groups',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('price', sa.Numeric(10, 2), nullable=False),
        sa.Column('start_time', sa.String(5), nullable=True),
        sa.Column('end_time', sa.String(5), nullable=True),
        sa.Column('days_of_week', sa.JSON(), nullable=False),
        sa.Column('status', sa.String(), nullable=False),
        _timestamp(),
        sa.Column('course_id', sa.Integer(), sa.ForeignKey('courses.id', ondelete='CASCADE'), nullable=False),
        sa.Column('teacher_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.UniqueConstraint('name', 'course_id', name='uq_group_name_course'),
    )
    op.create_index('ix_groups_id', 'groups', ['id'])
    op.create_index('ix_groups_name', 'groups', ['name'])
    op.create_index('ix_groups_status', 'groups', ['status'])
    op.create_index('ix_groups_course_id', 'groups', ['course_id'])
    op.create_index('ix_groups_teacher_id', 'groups', ['teacher_id'])

    op.create_table(
        'group_students',
        sa.Column('group_id', sa.Integer(), sa.ForeignKey('groups.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), primary_key=True),
    )

    op.create_table(
        'attendance',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('group_id', sa.Integer(), sa.ForeignKey('groups.id', ondelete='CASCADE'), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('status', sa.String(), nullable=False),
        sa.Column('grade', sa.Integer(), nullable=True),
        sa.Column('marked_by_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        _timestamp(),
        sa.UniqueConstraint('user_id', 'group_id', 'date', name='uq_attendance_user_group_date'),
    )
    op.create_index('ix_attendance_id', 'attendance', ['id'])
    op.create_index('ix_attendance_user_id', 'attendance', ['user_id'])
    op.create_index('ix_attendance_group_id', 'attendance', ['group_id'])
    op.create_index('ix_attendance_date', 'attendance', ['date'])

    op.create_table(
        'teacher_attendance',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('teacher_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('group_id', sa.Integer(), sa.ForeignKey('groups.id', ondelete='CASCADE'), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('status', sa.String(), nullable=False),
        sa.Column('marked_by_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        _timestamp(),
        sa.UniqueConstraint('teacher_id', 'group_id', 'date', name='uq_teacher_attendance_key'),
    )
    op.create_index('ix_teacher_attendance_id', 'teacher_attendance', ['id'])
    op.create_index('ix_teacher_attendance_teacher_id', 'teacher_attendance', ['teacher_id'])
    op.create_index('ix_teacher_attendance_group_id', 'teacher_attendance', ['group_id'])

    op.create_table(
        'lessons',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('lesson_name', sa.String(), nullable=False),
        sa.Column('lesson_number', sa.Integer(), nullable=False),
        sa.Column('lesson_date', sa.DateTime(), nullable=False),
        sa.Column('lesson_day', sa.Date(), nullable=False),
        sa.Column('end_date', sa.DateTime(), nullable=False),
        sa.Column('group_id', sa.Integer(), sa.ForeignKey('groups.id', ondelete='CASCADE'), nullable=False),
        _timestamp(),
        sa.UniqueConstraint('group_id', 'lesson_day', name='uq_lesson_group_day'),
    )
    op.create_index('ix_lessons_id', 'lessons', ['id'])
    op.create_index('ix_lessons_group_id', 'lessons', ['group_id'])
    op.create_index('ix_lessons_lesson_day', 'lessons', ['lesson_day'])

    op.create_table(
        'payments',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('amount', sa.Numeric(10, 2), nullable=False),
        sa.Column('paid', sa.Boolean(), nullable=False),
        sa.Column('month_for', sa.String(7), nullable=False),
        sa.Column('payment_type', sa.String(), nullable=False),
        _timestamp(),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('group_id', sa.Integer(), sa.ForeignKey('groups.id', ondelete='CASCADE'), nullable=False),
        sa.Column('course_id', sa.Integer(), sa.ForeignKey('courses.id', ondelete='CASCADE'), nullable=True),
    )
    op.create_index('ix_payments_id', 'payments', ['id'])
    op.create_index('ix_payments_month_for', 'payments', ['month_for'])
    op.create_index('ix_payments_user_id', 'payments', ['user_id'])
    op.create_index('ix_payments_group_id', 'payments', ['group_id'])

    op.create_table(
        'applications',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('first_name', sa.String(), nullable=False),
        sa.Column('last_name', sa.String(), nullable=False),
        sa.Column('phone', sa.String(), nullable=False),
        sa.Column('status', sa.Boolean(), nullable=False),
        sa.Column('is_contacted', sa.Boolean(), nullable=False),
        _timestamp(),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('group_id', sa.Integer(), sa.ForeignKey('groups.id', ondelete='SET NULL'), nullable=True),
        sa.Column('course_id', sa.Integer(), sa.ForeignKey('courses.id', ondelete='SET NULL'), nullable=True),
    )
    op.create_index('ix_applications_id', 'applications', ['id'])
    op.create_index('ix_applications_phone', 'applications', ['phone'])


def downgrade() -> None:
    """Drop every table, children first."""
    for table in (
        'applications', 'payments', 'lessons', 'teacher_attendance', 'attendance',
        'group_students', 'groups', 'archived_users', 'users', 'courses', 'roles',
    ):
        op.drop_table(table)
