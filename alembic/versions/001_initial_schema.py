"""initial_schema

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '001_initial_schema'
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        'bases',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('location', sa.String(length=255), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_bases_id', 'bases', ['id'])
    op.create_index('ix_bases_name', 'bases', ['name'], unique=True)

    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('username', sa.String(length=100), nullable=False),
        sa.Column('hashed_password', sa.String(length=255), nullable=False),
        sa.Column('role', sa.Enum('ADMIN', 'COMMANDER', 'LOGISTICS', name='userrole'), nullable=False),
        sa.Column('base_id', sa.Integer(), sa.ForeignKey('bases.id'), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_username', 'users', ['username'], unique=True)
    op.create_index('ix_users_base_id', 'users', ['base_id'])

    op.create_table(
        'assets',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('serial_number', sa.String(length=100), nullable=True, unique=True),
        sa.Column('description', sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_assets_id', 'assets', ['id'])

    op.create_table(
        'base_assets',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('base_id', sa.Integer(), sa.ForeignKey('bases.id'), nullable=False),
        sa.Column('asset_id', sa.Integer(), sa.ForeignKey('assets.id'), nullable=False),
        sa.Column('available_qty', sa.Integer(), nullable=False),
        sa.Column('assigned_qty', sa.Integer(), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint('base_id', 'asset_id', name='uq_base_assets_base_asset'),
        sa.CheckConstraint('available_qty >= 0', name='ck_base_assets_available_non_negative'),
        sa.CheckConstraint('assigned_qty >= 0', name='ck_base_assets_assigned_non_negative'),
    )
    op.create_index('ix_base_assets_id', 'base_assets', ['id'])
    op.create_index('ix_base_assets_base_id', 'base_assets', ['base_id'])
    op.create_index('ix_base_assets_asset_id', 'base_assets', ['asset_id'])

    op.create_table(
        'purchases',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('base_id', sa.Integer(), sa.ForeignKey('bases.id'), nullable=False),
        sa.Column('asset_id', sa.Integer(), sa.ForeignKey('assets.id'), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column(
            'status',
            sa.Enum('PENDING', 'APPROVED', 'REJECTED', name='purchasestatus'),
            nullable=False,
        ),
        sa.Column('created_by', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('approved_by', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        *_timestamps(),
        sa.CheckConstraint('quantity > 0', name='ck_purchases_quantity_positive'),
    )
    op.create_index('ix_purchases_id', 'purchases', ['id'])
    op.create_index('ix_purchases_base_id', 'purchases', ['base_id'])
    op.create_index('ix_purchases_asset_id', 'purchases', ['asset_id'])
    op.create_index('ix_purchases_status', 'purchases', ['status'])

    op.create_table(
        'transfer_requests',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('asset_id', sa.Integer(), sa.ForeignKey('assets.id'), nullable=False),
        sa.Column('from_base', sa.Integer(), sa.ForeignKey('bases.id'), nullable=False),
        sa.Column('to_base', sa.Integer(), sa.ForeignKey('bases.id'), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column(
            'status',
            sa.Enum('REQUESTED', 'COMPLETED', 'REJECTED', name='transferstatus'),
            nullable=False,
        ),
        sa.Column('requested_by', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('approved_by', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        *_timestamps(),
        sa.CheckConstraint('quantity > 0', name='ck_transfer_requests_quantity_positive'),
        sa.CheckConstraint('from_base <> to_base', name='ck_transfer_requests_distinct_bases'),
    )
    op.create_index('ix_transfer_requests_id', 'transfer_requests', ['id'])
    op.create_index('ix_transfer_requests_asset_id', 'transfer_requests', ['asset_id'])
    op.create_index('ix_transfer_requests_from_base', 'transfer_requests', ['from_base'])
    op.create_index('ix_transfer_requests_to_base', 'transfer_requests', ['to_base'])
    op.create_index('ix_transfer_requests_status', 'transfer_requests', ['status'])

    op.create_table(
        'personnel',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('rank', sa.String(length=100), nullable=True),
        sa.Column('service_number', sa.String(length=100), nullable=False),
        sa.Column('base_id', sa.Integer(), sa.ForeignKey('bases.id'), nullable=False),
        sa.Column('assigned_unit', sa.String(length=255), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_personnel_id', 'personnel', ['id'])
    op.create_index('ix_personnel_service_number', 'personnel', ['service_number'], unique=True)
    op.create_index('ix_personnel_base_id', 'personnel', ['base_id'])

    op.create_table(
        'assignments',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('base_id', sa.Integer(), sa.ForeignKey('bases.id'), nullable=False),
        sa.Column('asset_id', sa.Integer(), sa.ForeignKey('assets.id'), nullable=False),
        sa.Column('assignee_type', sa.Enum('USER', 'PERSONNEL', name='assigneetype'), nullable=False),
        sa.Column('assignee_user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('assignee_personnel_id', sa.Integer(), sa.ForeignKey('personnel.id'), nullable=True),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('assigned_by', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        *_timestamps(),
        sa.CheckConstraint('quantity > 0', name='ck_assignments_quantity_positive'),
        sa.CheckConstraint(
            '(assignee_user_id IS NOT NULL AND assignee_personnel_id IS NULL) OR '
            '(assignee_user_id IS NULL AND assignee_personnel_id IS NOT NULL)',
            name='ck_assignments_single_assignee',
        ),
    )
    op.create_index('ix_assignments_id', 'assignments', ['id'])
    op.create_index('ix_assignments_base_id', 'assignments', ['base_id'])
    op.create_index('ix_assignments_asset_id', 'assignments', ['asset_id'])

    op.create_table(
        'audit_logs',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), nullable=True),
        sa.Column('role', sa.String(length=50), nullable=True),
        sa.Column('action', sa.String(length=100), nullable=False),
        sa.Column('target', sa.String(length=255), nullable=True),
        sa.Column('details', sa.JSON(), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_audit_logs_id', 'audit_logs', ['id'])
    op.create_index('ix_audit_logs_user_id', 'audit_logs', ['user_id'])
    op.create_index('ix_audit_logs_action', 'audit_logs', ['action'])


def downgrade() -> None:
    op.drop_table('audit_logs')
    op.drop_table('assignments')
    op.drop_table('personnel')
    op.drop_table('transfer_requests')
    op.drop_table('purchases')
    op.drop_table('base_assets')
    op.drop_table('assets')
    op.drop_table('users')
    op.drop_table('bases')
    sa.Enum(name='assigneetype').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='transferstatus').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='purchasestatus').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='userrole').drop(op.get_bind(), checkfirst=True)
