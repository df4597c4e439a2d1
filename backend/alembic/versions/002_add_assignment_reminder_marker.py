"""Add last_notification_type to assignments

Revision ID: 002
Revises: 001
Create Date: 2026-10-19 12:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '002'
down_revision = '001'
branch_labels = None
depends_on = None


def upgrade() -> None:
    # Ключ последнего отправленного окна напоминаний (h_minus_3 ... h_plus_3)
    op.add_column('assignments', sa.Column('last_notification_type', sa.String(), nullable=True))
    # Выборка планировщика: незавершённые задания по дате дедлайна
    op.create_index('ix_assignments_deadline', 'assignments', ['deadline'])


def downgrade() -> None:
    op.drop_index('ix_assignments_deadline', table_name='assignments')
    op.drop_column('assignments', 'last_notification_type')
