"""Initial Emperium City GRS schema

Revision ID: 20260301_000001
Revises: None
Create Date: 2026-03-01

Creates every table and seeds the default complaint categories.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '20260301_000001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    """Create all tables."""
    op.create_table(
        'units',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('unit_no', sa.String(20), nullable=False),
        sa.Column('particulars', sa.String(50), nullable=False, server_default='Vacant'),
        sa.Column('billing_area', sa.Numeric(precision=10, scale=2), nullable=True),
        sa.Column('area_unit', sa.String(20), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_units_unit_no', 'units', ['unit_no'], unique=True)

    op.create_table(
        'employees',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('mobile', sa.String(30), nullable=True),
        sa.Column('role', sa.String(20), nullable=False, server_default='employee'),
        sa.Column('department', sa.String(100), nullable=True),
        sa.Column('reporting_manager_id', sa.Integer(), nullable=True),
        sa.Column('password_hash', sa.String(255), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['reporting_manager_id'], ['employees.id'], name='fk_employees_reporting_manager_id'),
    )
    op.create_index('ix_employees_email', 'employees', ['email'], unique=True)

    op.create_table(
        'customers',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('unit_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('mobile1', sa.String(30), nullable=True),
        sa.Column('mobile2', sa.String(30), nullable=True),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('password_hash', sa.String(255), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['unit_id'], ['units.id'], name='fk_customers_unit_id'),
    )
    op.create_index('ix_customers_unit_id', 'customers', ['unit_id'])
    op.create_index('ix_customers_email', 'customers', ['email'])

    op.create_table(
        'tenants',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('unit_id', sa.Integer(), nullable=False),
        sa.Column('customer_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('mobile1', sa.String(30), nullable=True),
        sa.Column('mobile2', sa.String(30), nullable=True),
        sa.Column('tenancy_start', sa.Date(), nullable=True),
        sa.Column('tenancy_expiry', sa.Date(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['unit_id'], ['units.id'], name='fk_tenants_unit_id'),
        sa.ForeignKeyConstraint(['customer_id'], ['customers.id'], name='fk_tenants_customer_id'),
    )
    op.create_index('ix_tenants_unit_id', 'tenants', ['unit_id'])
    op.create_index('ix_tenants_customer_id', 'tenants', ['customer_id'])

    categories = op.create_table(
        'complaint_categories',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('icon', sa.String(50), nullable=True),
        sa.Column('sort_order', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.PrimaryKeyConstraint('id'),
    )

    sub_categories = op.create_table(
        'complaint_sub_categories',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('category_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('sort_order', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(
            ['category_id'],
            ['complaint_categories.id'],
            name='fk_complaint_sub_categories_category_id',
            ondelete='CASCADE',
        ),
    )
    op.create_index('ix_complaint_sub_categories_category_id', 'complaint_sub_categories', ['category_id'])

    op.create_table(
        'complaints',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('complaint_no', sa.String(30), nullable=False),
        sa.Column('unit_id', sa.Integer(), nullable=False),
        sa.Column('customer_id', sa.Integer(), nullable=True),
        sa.Column('category_id', sa.Integer(), nullable=False),
        sa.Column('sub_category_id', sa.Integer(), nullable=True),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('photo_data', sa.Text(), nullable=True),
        sa.Column('priority', sa.String(32), nullable=False, server_default='Normal'),
        sa.Column('status', sa.String(32), nullable=False, server_default='Open'),
        sa.Column('assigned_to_employee_id', sa.Integer(), nullable=True),
        sa.Column('assigned_by_employee_id', sa.Integer(), nullable=True),
        sa.Column('assigned_at', sa.DateTime(), nullable=True),
        sa.Column('visit_date', sa.Date(), nullable=True),
        sa.Column('visit_time', sa.String(20), nullable=True),
        sa.Column('started_at', sa.DateTime(), nullable=True),
        sa.Column('resolved_by_employee_id', sa.Integer(), nullable=True),
        sa.Column('resolved_at', sa.DateTime(), nullable=True),
        sa.Column('resolution_notes', sa.Text(), nullable=True),
        sa.Column('resolution_photo_data', sa.Text(), nullable=True),
        sa.Column('closed_at', sa.DateTime(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['unit_id'], ['units.id'], name='fk_complaints_unit_id'),
        sa.ForeignKeyConstraint(['customer_id'], ['customers.id'], name='fk_complaints_customer_id'),
        sa.ForeignKeyConstraint(['category_id'], ['complaint_categories.id'], name='fk_complaints_category_id'),
        sa.ForeignKeyConstraint(['sub_category_id'], ['complaint_sub_categories.id'], name='fk_complaints_sub_category_id'),
        sa.ForeignKeyConstraint(['assigned_to_employee_id'], ['employees.id'], name='fk_complaints_assigned_to'),
        sa.ForeignKeyConstraint(['assigned_by_employee_id'], ['employees.id'], name='fk_complaints_assigned_by'),
        sa.ForeignKeyConstraint(['resolved_by_employee_id'], ['employees.id'], name='fk_complaints_resolved_by'),
    )
    op.create_index('ix_complaints_complaint_no', 'complaints', ['complaint_no'], unique=True)
    op.create_index('ix_complaints_unit_id', 'complaints', ['unit_id'])
    op.create_index('ix_complaints_customer_id', 'complaints', ['customer_id'])
    op.create_index('ix_complaints_status', 'complaints', ['status'])
    op.create_index('ix_complaints_assigned_to_employee_id', 'complaints', ['assigned_to_employee_id'])
    op.create_index('ix_complaints_visit_date', 'complaints', ['visit_date'])

    op.create_table(
        'internal_complaints',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('complaint_no', sa.String(30), nullable=False),
        sa.Column('reported_by_employee_id', sa.Integer(), nullable=False),
        sa.Column('category', sa.String(100), nullable=False),
        sa.Column('sub_category', sa.String(100), nullable=True),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('photo_data', sa.Text(), nullable=True),
        sa.Column('priority', sa.String(32), nullable=False, server_default='Normal'),
        sa.Column('status', sa.String(32), nullable=False, server_default='Pending'),
        sa.Column('assigned_to_employee_id', sa.Integer(), nullable=True),
        sa.Column('assigned_at', sa.DateTime(), nullable=True),
        sa.Column('resolved_by_employee_id', sa.Integer(), nullable=True),
        sa.Column('resolved_at', sa.DateTime(), nullable=True),
        sa.Column('resolution_notes', sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['reported_by_employee_id'], ['employees.id'], name='fk_internal_complaints_reported_by'),
        sa.ForeignKeyConstraint(['assigned_to_employee_id'], ['employees.id'], name='fk_internal_complaints_assigned_to'),
        sa.ForeignKeyConstraint(['resolved_by_employee_id'], ['employees.id'], name='fk_internal_complaints_resolved_by'),
    )
    op.create_index('ix_internal_complaints_complaint_no', 'internal_complaints', ['complaint_no'], unique=True)
    op.create_index('ix_internal_complaints_reported_by_employee_id', 'internal_complaints', ['reported_by_employee_id'])
    op.create_index('ix_internal_complaints_assigned_to_employee_id', 'internal_complaints', ['assigned_to_employee_id'])
    op.create_index('ix_internal_complaints_status', 'internal_complaints', ['status'])

    for table in ('kyc_documents', 'kyc_document_history'):
        extra = [sa.Column('remarks', sa.Text(), nullable=True)] if table == 'kyc_document_history' else []
        constraints = (
            [sa.UniqueConstraint('entity_type', 'entity_id', 'doc_type', name='uq_kyc_documents_entity_doc')]
            if table == 'kyc_documents'
            else []
        )
        op.create_table(
            table,
            sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
            sa.Column('entity_type', sa.String(20), nullable=False),
            sa.Column('entity_id', sa.Integer(), nullable=False),
            sa.Column('doc_type', sa.String(50), nullable=False),
            sa.Column('file_name', sa.String(255), nullable=True),
            sa.Column('file_data', sa.Text(), nullable=False),
            *extra,
            sa.Column('version', sa.Integer(), nullable=False, server_default='1'),
            sa.Column('uploaded_by_employee_id', sa.Integer(), nullable=True),
            sa.Column('uploaded_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
            sa.PrimaryKeyConstraint('id'),
            sa.ForeignKeyConstraint(['uploaded_by_employee_id'], ['employees.id'], name=f'fk_{table}_uploaded_by'),
            *constraints,
        )
        op.create_index(f'ix_{table}_entity_id', table, ['entity_id'])

    op.create_table(
        'vehicles',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('unit_id', sa.Integer(), nullable=False),
        sa.Column('customer_id', sa.Integer(), nullable=True),
        sa.Column('tenant_id', sa.Integer(), nullable=True),
        sa.Column('vehicle_number', sa.String(20), nullable=False),
        sa.Column('vehicle_type', sa.String(30), nullable=False, server_default='Car'),
        sa.Column('make', sa.String(100), nullable=True),
        sa.Column('model', sa.String(100), nullable=True),
        sa.Column('color', sa.String(50), nullable=True),
        sa.Column('rc_file_name', sa.String(255), nullable=True),
        sa.Column('rc_file_data', sa.Text(), nullable=True),
        sa.Column('registered_by_employee_id', sa.Integer(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('registered_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['unit_id'], ['units.id'], name='fk_vehicles_unit_id'),
        sa.ForeignKeyConstraint(['customer_id'], ['customers.id'], name='fk_vehicles_customer_id'),
        sa.ForeignKeyConstraint(['tenant_id'], ['tenants.id'], name='fk_vehicles_tenant_id'),
        sa.ForeignKeyConstraint(['registered_by_employee_id'], ['employees.id'], name='fk_vehicles_registered_by'),
    )
    op.create_index('ix_vehicles_unit_id', 'vehicles', ['unit_id'])
    op.create_index('ix_vehicles_customer_id', 'vehicles', ['customer_id'])
    op.create_index('ix_vehicles_vehicle_number', 'vehicles', ['vehicle_number'])

    op.create_table(
        'employee_leaves',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('employee_id', sa.Integer(), nullable=False),
        sa.Column('leave_date', sa.Date(), nullable=False),
        sa.Column('leave_type', sa.String(20), nullable=False, server_default='Full Day'),
        sa.Column('reason', sa.Text(), nullable=True),
        sa.Column('status', sa.String(32), nullable=False, server_default='Pending'),
        sa.Column('reviewed_by_employee_id', sa.Integer(), nullable=True),
        sa.Column('reviewed_at', sa.DateTime(), nullable=True),
        sa.Column('review_remarks', sa.Text(), nullable=True),
        sa.Column('applied_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['employee_id'], ['employees.id'], name='fk_employee_leaves_employee_id'),
        sa.ForeignKeyConstraint(['reviewed_by_employee_id'], ['employees.id'], name='fk_employee_leaves_reviewed_by'),
    )
    op.create_index('ix_employee_leaves_employee_id', 'employee_leaves', ['employee_id'])
    op.create_index('ix_employee_leaves_leave_date', 'employee_leaves', ['leave_date'])
    op.create_index('ix_employee_leaves_status', 'employee_leaves', ['status'])

    op.create_table(
        'notifications',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('recipient_type', sa.String(20), nullable=False),
        sa.Column('recipient_id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('type', sa.String(20), nullable=False, server_default='info'),
        sa.Column('complaint_id', sa.Integer(), nullable=True),
        sa.Column('is_read', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['complaint_id'], ['complaints.id'], name='fk_notifications_complaint_id'),
    )
    op.create_index('ix_notifications_recipient_id', 'notifications', ['recipient_id'])

    op.create_table(
        'audit_logs',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('action', sa.String(50), nullable=False),
        sa.Column('entity_type', sa.String(50), nullable=False),
        sa.Column('entity_id', sa.Integer(), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('actor_type', sa.String(20), nullable=False),
        sa.Column('actor_id', sa.Integer(), nullable=True),
        sa.Column('actor_name', sa.String(200), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_audit_logs_action', 'audit_logs', ['action'])
    op.create_index('ix_audit_logs_created_at', 'audit_logs', ['created_at'])

    op.create_table(
        'property_history',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('unit_id', sa.Integer(), nullable=False),
        sa.Column('event_type', sa.String(30), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('changed_by_employee_id', sa.Integer(), nullable=True),
        sa.Column('changed_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['unit_id'], ['units.id'], name='fk_property_history_unit_id'),
        sa.ForeignKeyConstraint(['changed_by_employee_id'], ['employees.id'], name='fk_property_history_changed_by'),
    )
    op.create_index('ix_property_history_unit_id', 'property_history', ['unit_id'])

    _seed_categories(categories, sub_categories)


def _seed_categories(categories, sub_categories) -> None:
    from services.seed_service import DEFAULT_CATEGORIES

    bind = op.get_bind()
    for order, (name, icon, subs) in enumerate(DEFAULT_CATEGORIES, start=1):
        result = bind.execute(
            categories.insert().values(name=name, icon=icon, sort_order=order, is_active=True)
        )
        category_id = result.inserted_primary_key[0]
        if subs:
            op.bulk_insert(
                sub_categories,
                [
                    {'category_id': category_id, 'name': sub, 'sort_order': i, 'is_active': True}
                    for i, sub in enumerate(subs, start=1)
                ],
            )


def downgrade() -> None:
    """Drop all tables."""
    for table in (
        'property_history',
        'audit_logs',
        'notifications',
        'employee_leaves',
        'vehicles',
        'kyc_document_history',
        'kyc_documents',
        'internal_complaints',
        'complaints',
        'complaint_sub_categories',
        'complaint_categories',
        'tenants',
        'customers',
        'employees',
        'units',
    ):
        op.drop_table(table)
