"""Initial collection schema

Revision ID: 3f2c9a1d7b40
Revises:
Create Date: 2026-10-18 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3f2c9a1d7b40'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table('data_source',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.String(length=128), nullable=False),
        sa.Column('name', sa.String(length=128), nullable=False),
        sa.Column('url', sa.String(length=512), nullable=True),
        sa.Column('category', sa.String(length=32), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('data_source', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_data_source_user_id'), ['user_id'], unique=False)

    op.create_table('collected_item',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('user_id', sa.String(length=128), nullable=False),
        sa.Column('title', sa.String(length=256), nullable=True),
        sa.Column('category', sa.String(length=32), nullable=False),
        sa.Column('organization', sa.String(length=256), nullable=True),
        sa.Column('url', sa.String(length=1024), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('prize', sa.String(length=256), nullable=True),
        sa.Column('location', sa.String(length=256), nullable=True),
        sa.Column('deadline_text', sa.String(length=256), nullable=True),
        sa.Column('deadline', sa.Date(), nullable=True),
        sa.Column('quality_score', sa.Integer(), nullable=True),
        sa.Column('status', sa.String(length=32), nullable=True),
        sa.Column('collected_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('collected_item', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_collected_item_user_id'), ['user_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_collected_item_title'), ['title'], unique=False)
        batch_op.create_index(batch_op.f('ix_collected_item_category'), ['category'], unique=False)
        batch_op.create_index(batch_op.f('ix_collected_item_url'), ['url'], unique=False)
        batch_op.create_index(batch_op.f('ix_collected_item_status'), ['status'], unique=False)
        batch_op.create_index(batch_op.f('ix_collected_item_collected_at'), ['collected_at'], unique=False)

    op.create_table('collection_schedule',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.String(length=128), nullable=False),
        sa.Column('frequency', sa.String(length=16), nullable=True),
        sa.Column('time', sa.String(length=5), nullable=False),
        sa.Column('timezone', sa.String(length=64), nullable=True),
        sa.Column('day_of_week', sa.Integer(), nullable=True),
        sa.Column('enabled', sa.Boolean(), nullable=True),
        sa.Column('last_run', sa.DateTime(), nullable=True),
        sa.Column('next_run', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('collection_schedule', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_collection_schedule_user_id'), ['user_id'], unique=True)
        batch_op.create_index(batch_op.f('ix_collection_schedule_next_run'), ['next_run'], unique=False)

    op.create_table('export_history',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('user_id', sa.String(length=128), nullable=False),
        sa.Column('filename', sa.String(length=256), nullable=False),
        sa.Column('format', sa.String(length=16), nullable=True),
        sa.Column('items_count', sa.Integer(), nullable=True),
        sa.Column('status', sa.String(length=32), nullable=True),
        sa.Column('local_path', sa.String(length=1024), nullable=True),
        sa.Column('drive_file_id', sa.String(length=128), nullable=True),
        sa.Column('drive_view_link', sa.String(length=1024), nullable=True),
        sa.Column('drive_download_link', sa.String(length=1024), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('export_history', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_export_history_user_id'), ['user_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_export_history_created_at'), ['created_at'], unique=False)

    op.create_table('drive_session',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('tokens', sa.JSON(), nullable=False),
        sa.Column('user_info', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('expires_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('drive_session', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_drive_session_expires_at'), ['expires_at'], unique=False)


def downgrade():
    with op.batch_alter_table('drive_session', schema=None) as batch_op:
        batch_op.drop_index(batch_op.f('ix_drive_session_expires_at'))
    op.drop_table('drive_session')

    with op.batch_alter_table('export_history', schema=None) as batch_op:
        batch_op.drop_index(batch_op.f('ix_export_history_created_at'))
        batch_op.drop_index(batch_op.f('ix_export_history_user_id'))
    op.drop_table('export_history')

    with op.batch_alter_table('collection_schedule', schema=None) as batch_op:
        batch_op.drop_index(batch_op.f('ix_collection_schedule_next_run'))
        batch_op.drop_index(batch_op.f('ix_collection_schedule_user_id'))
    op.drop_table('collection_schedule')

    with op.batch_alter_table('collected_item', schema=None) as batch_op:
        batch_op.drop_index(batch_op.f('ix_collected_item_collected_at'))
        batch_op.drop_index(batch_op.f('ix_collected_item_status'))
        batch_op.drop_index(batch_op.f('ix_collected_item_url'))
        batch_op.drop_index(batch_op.f('ix_collected_item_category'))
        batch_op.drop_index(batch_op.f('ix_collected_item_title'))
        batch_op.drop_index(batch_op.f('ix_collected_item_user_id'))
    op.drop_table('collected_item')

    with op.batch_alter_table('data_source', schema=None) as batch_op:
        batch_op.drop_index(batch_op.f('ix_data_source_user_id'))
    op.drop_table('data_source')
