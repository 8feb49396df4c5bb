"""create_projects_events

Revision ID: 001
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


EVENT_STATUS = sa.Enum(
    'to_do', 'in_progress', 'done', 'on_hold', 'cancelled',
    name='event_status',
)


def upgrade() -> None:
    """Upgrade schema."""
    bind = op.get_bind()
    inspector = sa.inspect(bind)
    
    if not inspector.has_table('projects'):
        op.create_table('projects',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('spreadsheet_id', sa.String(length=255), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=True),
        sa.Column('phase', sa.String(length=255), nullable=True),
        sa.Column('category', sa.String(length=255), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_projects_id'), 'projects', ['id'], unique=False)
        op.create_index(op.f('ix_projects_spreadsheet_id'), 'projects', ['spreadsheet_id'], unique=True)
    
    if not inspector.has_table('events'):
        op.create_table('events',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('event_uid', sa.String(length=36), nullable=False),
        sa.Column('sheet_row_id', sa.String(length=255), nullable=True),
        sa.Column('title', sa.String(length=500), nullable=True),
        sa.Column('status', EVENT_STATUS, nullable=True),
        sa.Column('priority', sa.String(length=50), nullable=True),
        sa.Column('owner', sa.String(length=255), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('start_time', sa.DateTime(timezone=True), nullable=True),
        sa.Column('end_time', sa.DateTime(timezone=True), nullable=True),
        sa.Column('category', sa.String(length=255), nullable=True),
        sa.Column('project_id', sa.Integer(), nullable=True),
        sa.Column('spreadsheet_id', sa.String(length=255), nullable=True),
        sa.Column('sheet_gid', sa.String(length=255), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['project_id'], ['projects.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_events_id'), 'events', ['id'], unique=False)
        op.create_index(op.f('ix_events_event_uid'), 'events', ['event_uid'], unique=True)
        op.create_index(op.f('ix_events_project_id'), 'events', ['project_id'], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    bind = op.get_bind()
    inspector = sa.inspect(bind)
    
    if inspector.has_table('events'):
        op.drop_index(op.f('ix_events_project_id'), table_name='events')
        op.drop_index(op.f('ix_events_event_uid'), table_name='events')
        op.drop_index(op.f('ix_events_id'), table_name='events')
        op.drop_table('events')
        EVENT_STATUS.drop(bind, checkfirst=True)
    
    if inspector.has_table('projects'):
        op.drop_index(op.f('ix_projects_spreadsheet_id'), table_name='projects')
        op.drop_index(op.f('ix_projects_id'), table_name='projects')
        op.drop_table('projects')
