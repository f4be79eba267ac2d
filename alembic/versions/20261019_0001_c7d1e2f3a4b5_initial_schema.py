"""initial schema

Revision ID: c7d1e2f3a4b5
Revises:
Create Date: 2026-10-19

Creates every table of the marketplace:
  tenants, cities, permissions, roles, role_permissions, users,
  otp_records, refresh_sessions, kyc_submissions,
  service_categories, services, bookings, payments,
  blacklisted_ips, blocked_emails, audit_logs

Seeds the four permissions (USER_READ, USER_WRITE, KYC_APPROVE,
SYSTEM_SECURITY). Roles and the first admin account come from
`python -m app.seed`.
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql
import uuid

revision = 'c7d1e2f3a4b5'
down_revision = None
branch_labels = None
depends_on = None

ENUM_TYPES = [
    ('account_type', ('customer', 'service-provider-independent', 'service-provider-business', 'admin')),
    ('account_status', ('ACTIVE', 'PENDING', 'SUSPENDED', 'BLOCKED', 'BLACKLISTED')),
    ('permission_name', ('USER_READ', 'USER_WRITE', 'KYC_APPROVE', 'SYSTEM_SECURITY')),
    ('otp_purpose', ('signup', 'signin')),
    ('kyc_status', ('PENDING', 'APPROVED', 'REJECTED')),
    ('booking_status', ('PENDING', 'CONFIRMED', 'IN_PROGRESS', 'COMPLETED', 'CANCELLED')),
    ('payment_status', ('PENDING', 'PROCESSING', 'COMPLETED', 'FAILED', 'REFUNDED')),
]


def _enum(name):
    values = dict(ENUM_TYPES)[name]
    return postgresql.ENUM(*values, name=name, create_type=False)


def _uuid_pk():
    return sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True, nullable=False)


def _timestamp(name):
    return sa.Column(name, sa.TIMESTAMP(timezone=True), server_default=sa.text('now()'), nullable=False)


def upgrade() -> None:
    bind = op.get_bind()
    for name, values in ENUM_TYPES:
        postgresql.ENUM(*values, name=name).create(bind, checkfirst=True)

    op.create_table(
        'tenants',
        _uuid_pk(),
        sa.Column('name', sa.String(150), nullable=False, unique=True),
        sa.Column('subdomain', sa.String(100), nullable=True),
        sa.Column('is_active', sa.Boolean(), server_default='true', nullable=False),
        _timestamp('created_at'),
    )
    op.create_index('ix_tenants_subdomain', 'tenants', ['subdomain'])

    op.create_table(
        'cities',
        _uuid_pk(),
        sa.Column('name', sa.String(150), nullable=False),
        sa.Column('region', sa.String(150), nullable=True),
        _timestamp('created_at'),
    )
    op.create_index('ix_cities_region', 'cities', ['region'])

    op.create_table(
        'permissions',
        _uuid_pk(),
        sa.Column('name', _enum('permission_name'), nullable=False, unique=True),
        sa.Column('description', sa.String(255), nullable=True),
        _timestamp('created_at'),
    )

    op.create_table(
        'roles',
        _uuid_pk(),
        sa.Column('name', sa.String(100), nullable=False, unique=True),
        sa.Column('description', sa.String(255), nullable=True),
        _timestamp('created_at'),
        _timestamp('updated_at'),
    )

    op.create_table(
        'role_permissions',
        sa.Column('role_id', postgresql.UUID(as_uuid=True),
                  sa.ForeignKey('roles.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('permission_id', postgresql.UUID(as_uuid=True),
                  sa.ForeignKey('permissions.id', ondelete='CASCADE'), primary_key=True),
    )

    op.create_table(
        'users',
        _uuid_pk(),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('name', sa.String(150), nullable=True),
        sa.Column('hashed_password', sa.String(), nullable=False),
        sa.Column('account_type', _enum('account_type'), nullable=False),
        sa.Column('account_status', _enum('account_status'), nullable=False),
        sa.Column('role_id', postgresql.UUID(as_uuid=True),
                  sa.ForeignKey('roles.id', ondelete='SET NULL'), nullable=True),
        sa.Column('tenant_id', postgresql.UUID(as_uuid=True),
                  sa.ForeignKey('tenants.id', ondelete='SET NULL'), nullable=True),
        sa.Column('city_id', postgresql.UUID(as_uuid=True),
                  sa.ForeignKey('cities.id', ondelete='SET NULL'), nullable=True),
        sa.Column('email_verified_at', sa.TIMESTAMP(timezone=True), nullable=True),
        _timestamp('created_at'),
        _timestamp('updated_at'),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_role_id', 'users', ['role_id'])
    op.create_index('ix_users_tenant_id', 'users', ['tenant_id'])
    op.create_index('ix_users_city_id', 'users', ['city_id'])

    op.create_table(
        'otp_records',
        _uuid_pk(),
        sa.Column('user_id', postgresql.UUID(as_uuid=True),
                  sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('code', sa.String(6), nullable=False),
        sa.Column('purpose', _enum('otp_purpose'), nullable=False),
        sa.Column('is_used', sa.Boolean(), server_default='false', nullable=False),
        sa.Column('expires_at', sa.TIMESTAMP(timezone=True), nullable=False),
        _timestamp('created_at'),
    )
    op.create_index('ix_otp_records_user_id', 'otp_records', ['user_id'])
    op.create_index('ix_otp_records_created_at', 'otp_records', ['created_at'])

    op.create_table(
        'refresh_sessions',
        _uuid_pk(),
        sa.Column('user_id', postgresql.UUID(as_uuid=True),
                  sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('token_hash', sa.String(), nullable=False),
        sa.Column('expires_at', sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column('revoked', sa.Boolean(), server_default='false', nullable=False),
        _timestamp('created_at'),
    )
    op.create_index('ix_refresh_sessions_user_id', 'refresh_sessions', ['user_id'])

    op.create_table(
        'kyc_submissions',
        _uuid_pk(),
        sa.Column('user_id', postgresql.UUID(as_uuid=True),
                  sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('document_type', sa.String(100), nullable=False),
        sa.Column('document_url', sa.String(500), nullable=False),
        sa.Column('status', _enum('kyc_status'), nullable=False),
        sa.Column('reviewed_by', postgresql.UUID(as_uuid=True),
                  sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('review_notes', sa.Text(), nullable=True),
        _timestamp('created_at'),
        _timestamp('updated_at'),
    )
    op.create_index('ix_kyc_submissions_user_id', 'kyc_submissions', ['user_id'])

    op.create_table(
        'service_categories',
        _uuid_pk(),
        sa.Column('name', sa.String(100), nullable=False, unique=True),
        sa.Column('description', sa.String(255), nullable=True),
        _timestamp('created_at'),
    )

    op.create_table(
        'services',
        _uuid_pk(),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('category_id', postgresql.UUID(as_uuid=True),
                  sa.ForeignKey('service_categories.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('provider_id', postgresql.UUID(as_uuid=True),
                  sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('price', sa.Numeric(10, 2), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('images', sa.JSON(), nullable=True),
        sa.Column('city_id', postgresql.UUID(as_uuid=True),
                  sa.ForeignKey('cities.id', ondelete='SET NULL'), nullable=True),
        sa.Column('is_active', sa.Boolean(), server_default='true', nullable=False),
        _timestamp('created_at'),
        _timestamp('updated_at'),
    )
    op.create_index('ix_services_category_id', 'services', ['category_id'])
    op.create_index('ix_services_provider_id', 'services', ['provider_id'])
    op.create_index('ix_services_city_id', 'services', ['city_id'])

    op.create_table(
        'bookings',
        _uuid_pk(),
        sa.Column('service_id', postgresql.UUID(as_uuid=True),
                  sa.ForeignKey('services.id', ondelete='CASCADE'), nullable=False),
        sa.Column('customer_id', postgresql.UUID(as_uuid=True),
                  sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('provider_id', postgresql.UUID(as_uuid=True),
                  sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('schedule', sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column('address', sa.Text(), nullable=False),
        sa.Column('city_id', postgresql.UUID(as_uuid=True),
                  sa.ForeignKey('cities.id', ondelete='SET NULL'), nullable=True),
        sa.Column('status', _enum('booking_status'), nullable=False),
        _timestamp('created_at'),
        _timestamp('updated_at'),
    )
    op.create_index('ix_bookings_service_id', 'bookings', ['service_id'])
    op.create_index('ix_bookings_customer_id', 'bookings', ['customer_id'])
    op.create_index('ix_bookings_provider_id', 'bookings', ['provider_id'])

    op.create_table(
        'payments',
        _uuid_pk(),
        sa.Column('booking_id', postgresql.UUID(as_uuid=True),
                  sa.ForeignKey('bookings.id', ondelete='CASCADE'), nullable=False),
        sa.Column('amount', sa.Numeric(10, 2), nullable=False),
        sa.Column('currency', sa.String(3), server_default='USD', nullable=False),
        sa.Column('status', _enum('payment_status'), nullable=False),
        sa.Column('payment_intent_id', sa.String(150), nullable=True),
        sa.Column('transaction_id', sa.String(150), nullable=True),
        _timestamp('created_at'),
        _timestamp('updated_at'),
    )
    op.create_index('ix_payments_booking_id', 'payments', ['booking_id'], unique=True)
    op.create_index('ix_payments_transaction_id', 'payments', ['transaction_id'])

    op.create_table(
        'blacklisted_ips',
        _uuid_pk(),
        sa.Column('ip_address', sa.String(45), nullable=False, unique=True),
        sa.Column('reason', sa.String(255), nullable=True),
        _timestamp('created_at'),
    )

    op.create_table(
        'blocked_emails',
        _uuid_pk(),
        sa.Column('email', sa.String(255), nullable=False, unique=True),
        sa.Column('reason', sa.String(255), nullable=True),
        _timestamp('created_at'),
    )

    op.create_table(
        'audit_logs',
        _uuid_pk(),
        sa.Column('admin_id', postgresql.UUID(as_uuid=True),
                  sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('action', sa.String(100), nullable=False),
        sa.Column('target_type', sa.String(50), nullable=True),
        sa.Column('target_id', sa.String(100), nullable=True),
        sa.Column('details', sa.JSON(), nullable=True),
        _timestamp('created_at'),
    )
    op.create_index('ix_audit_logs_admin_id', 'audit_logs', ['admin_id'])
    op.create_index('ix_audit_logs_action', 'audit_logs', ['action'])
    op.create_index('ix_audit_logs_target_id', 'audit_logs', ['target_id'])
    op.create_index('ix_audit_logs_created_at', 'audit_logs', ['created_at'])

    # ── Seed permissions ───────────────────────────────────────────────────
    op.bulk_insert(
        sa.table(
            'permissions',
            sa.column('id',          postgresql.UUID(as_uuid=True)),
            sa.column('name',        _enum('permission_name')),
            sa.column('description', sa.String()),
        ),
        [
            {'id': uuid.uuid4(), 'name': 'USER_READ',       'description': 'View users, roles and dashboards'},
            {'id': uuid.uuid4(), 'name': 'USER_WRITE',      'description': 'Change users, roles and reference data'},
            {'id': uuid.uuid4(), 'name': 'KYC_APPROVE',     'description': 'Review KYC submissions'},
            {'id': uuid.uuid4(), 'name': 'SYSTEM_SECURITY', 'description': 'Manage IP and email blocklists'},
        ],
    )


def downgrade() -> None:
    for table in (
        'audit_logs', 'blocked_emails', 'blacklisted_ips', 'payments', 'bookings',
        'services', 'service_categories', 'kyc_submissions', 'refresh_sessions',
        'otp_records', 'users', 'role_permissions', 'roles', 'permissions',
        'cities', 'tenants',
    ):
        op.drop_table(table)

    bind = op.get_bind()
    for name, values in reversed(ENUM_TYPES):
        postgresql.ENUM(*values, name=name).drop(bind, checkfirst=True)
