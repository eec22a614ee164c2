"""Initial migration - create all tables

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-16

Creates all database tables for the Climate Champion Portal:
- students: Registered students with unique email and password hash
- submissions: Uploaded PDFs with their optional score
- settings: Singleton row holding the leaderboard visibility flag

Also creates indexes for common query patterns.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = '001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # ── Students Table ────────────────────────────────────────
    op.create_table(
        'students',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('email', sa.String(320), nullable=False),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('school', sa.Text(), nullable=False),
        sa.Column('student_class', sa.Text(), nullable=False),
        sa.Column('age', sa.Integer(), nullable=False),
        sa.Column('password_hash', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(),
                  server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint('email', name='uq_students_email'),
        sa.CheckConstraint('age >= 5 AND age <= 25', name='ck_students_age_range'),
    )

    # ── Submissions Table ─────────────────────────────────────
    op.create_table(
        'submissions',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('student_id', sa.String(36),
                  sa.ForeignKey('students.id'), nullable=False),
        sa.Column('file_name', sa.Text(), nullable=False),
        sa.Column('original_name', sa.Text(), nullable=False),
        sa.Column('uploaded_at', sa.DateTime(),
                  server_default=sa.func.now(), nullable=False),
        sa.Column('score', sa.Integer(), nullable=True),
        sa.CheckConstraint('score IS NULL OR (score >= 0 AND score <= 100)',
                           name='ck_submissions_score_range'),
    )

    op.create_index('ix_submissions_student_id', 'submissions', ['student_id'])
    op.create_index('ix_submissions_uploaded_at', 'submissions', ['uploaded_at'])

    # ── Settings Table ────────────────────────────────────────
    # Fixed primary key keeps the singleton unique
    op.create_table(
        'settings',
        sa.Column('key', sa.String(32), primary_key=True),
        sa.Column('leaderboard_visible', sa.Boolean(), nullable=False,
                  server_default=sa.false()),
    )


def downgrade() -> None:
    """Drop all tables in reverse dependency order."""
    op.drop_table('settings')
    op.drop_index('ix_submissions_uploaded_at', table_name='submissions')
    op.drop_index('ix_submissions_student_id', table_name='submissions')
    op.drop_table('submissions')
    op.drop_table('students')
