"""initial tables: users, assignments, submissions

Revision ID: 0001
Revises: 
Create Date: 2025-09-10

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0001'
down_revision = None
branch_labels = None
depends_on = None

def upgrade():
    # enums храним строкой + CHECK, одинаково для SQLite и Postgres
    user_role = sa.Enum('professor', 'student', name='user_role', native_enum=False, create_constraint=True)
    submission_status = sa.Enum('submitted', 'late', 'graded', name='submission_status',
                                native_enum=False, create_constraint=True)

    op.create_table('users',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('role', user_role, nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_role', 'users', ['role'])

    op.create_table('assignments',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('deadline', sa.DateTime(), nullable=False),
        sa.Column('instructions', sa.Text(), nullable=True),
        sa.Column('created_by', sa.String(length=36), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_assignments_created_by', 'assignments', ['created_by'])
    op.create_index('ix_assignments_deadline', 'assignments', ['deadline'])

    op.create_table('submissions',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('assignment_id', sa.String(length=36), sa.ForeignKey('assignments.id', ondelete='CASCADE'), nullable=False),
        sa.Column('student_id', sa.String(length=36), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('repo_link', sa.Text(), nullable=False),
        sa.Column('submitted_at', sa.DateTime(), nullable=False),
        sa.Column('status', submission_status, nullable=False),
        sa.UniqueConstraint('assignment_id', 'student_id', name='uq_submission_assignment_student'),
    )
    op.create_index('ix_submissions_assignment_id', 'submissions', ['assignment_id'])
    op.create_index('ix_submissions_student_id', 'submissions', ['student_id'])
    op.create_index('ix_submissions_submitted_at', 'submissions', ['submitted_at'])

def downgrade():
    op.drop_index('ix_submissions_submitted_at', table_name='submissions')
    op.drop_index('ix_submissions_student_id', table_name='submissions')
    op.drop_index('ix_submissions_assignment_id', table_name='submissions')
    op.drop_table('submissions')
    op.drop_index('ix_assignments_deadline', table_name='assignments')
    op.drop_index('ix_assignments_created_by', table_name='assignments')
    op.drop_table('assignments')
    op.drop_index('ix_users_role', table_name='users')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
