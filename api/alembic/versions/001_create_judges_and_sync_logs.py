"""create_judges_and_sync_logs

Revision ID: 001
Revises: 
Create Date: 2026-10-17 09:12:40.118204

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    bind = op.get_bind()
    inspector = sa.inspect(bind)

    if not inspector.has_table('judges'):
        op.create_table('judges',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('courtlistener_id', sa.String(length=100), nullable=True),
        sa.Column('courtlistener_data', sa.JSON(), nullable=True),
        sa.Column('court_name', sa.String(length=255), nullable=True),
        sa.Column('jurisdiction', sa.String(length=20), nullable=True),
        sa.Column('appointed_date', sa.Date(), nullable=True),
        sa.Column('education', sa.Text(), nullable=True),
        sa.Column('bio', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        # UNIQUE requerido por INSERT ... ON CONFLICT ("courtlistener_id")
        sa.UniqueConstraint('courtlistener_id')
        )
        op.create_index(op.f('ix_judges_id'), 'judges', ['id'], unique=False)
        op.create_index(op.f('ix_judges_name'), 'judges', ['name'], unique=False)
        op.create_index(op.f('ix_judges_jurisdiction'), 'judges', ['jurisdiction'], unique=False)
        op.create_index(op.f('ix_judges_updated_at'), 'judges', ['updated_at'], unique=False)

    if not inspector.has_table('sync_logs'):
        op.create_table('sync_logs',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('sync_id', sa.String(length=100), nullable=False),
        sa.Column('sync_type', sa.String(length=50), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('options', sa.JSON(), nullable=True),
        sa.Column('result', sa.JSON(), nullable=True),
        sa.Column('error_message', sa.Text(), nullable=True),
        sa.Column('started_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('duration_ms', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.CheckConstraint("status IN ('started', 'completed', 'failed')", name='ck_sync_logs_status'),
        sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_sync_logs_id'), 'sync_logs', ['id'], unique=False)
        op.create_index(op.f('ix_sync_logs_sync_id'), 'sync_logs', ['sync_id'], unique=True)
        op.create_index(op.f('ix_sync_logs_status'), 'sync_logs', ['status'], unique=False)
        op.create_index(op.f('ix_sync_logs_started_at'), 'sync_logs', ['started_at'], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    bind = op.get_bind()
    inspector = sa.inspect(bind)

    if inspector.has_table('sync_logs'):
        op.drop_table('sync_logs')
    if inspector.has_table('judges'):
        op.drop_table('judges')
