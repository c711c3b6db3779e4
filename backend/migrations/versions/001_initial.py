"""Initial migration - create the students table

Revision ID: 001_initial
Revises: None
Create Date: 2024-01-15

Creates the single table of the student manager:
- students: student records with a unique lowercased email

Also creates indexes for the search and filter queries
(email, last/first name, major).
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
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('first_name', sa.Text(), nullable=False),
        sa.Column('last_name', sa.Text(), nullable=False),
        sa.Column('email', sa.Text(), nullable=False, unique=True),
        sa.Column('age', sa.Integer(), nullable=False),
        sa.Column('gpa', sa.Float(), nullable=False),
        sa.Column('major', sa.Text(), nullable=False),
        sa.Column('phone_number', sa.Text(), nullable=True),
        sa.Column('enrollment_date', sa.Date(), nullable=False),
    )

    # Indexes for search and filter queries
    op.create_index('idx_student_email', 'students', ['email'])
    op.create_index('idx_student_name', 'students', ['last_name', 'first_name'])
    op.create_index('idx_student_major', 'students', ['major'])


def downgrade() -> None:
    """Drop indexes, then the table."""
    op.drop_index('idx_student_major', table_name='students')
    op.drop_index('idx_student_name', table_name='students')
    op.drop_index('idx_student_email', table_name='students')
    op.drop_table('students')
