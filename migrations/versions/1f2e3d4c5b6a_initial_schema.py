"""initial schema

Revision ID: 1f2e3d4c5b6a
Revises:
Create Date: 2025-02-10 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '1f2e3d4c5b6a'
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    ]


def upgrade():
    op.create_table('permissions',
        sa.Column('permission_id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('module', sa.String(length=50), nullable=False),
        sa.Column('action', sa.String(length=20), nullable=False),
        sa.Column('description', sa.String(length=255), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('permission_id'),
        sa.UniqueConstraint('name'),
        sa.UniqueConstraint('module', 'action', name='uq_permissions_module_action')
    )

    op.create_table('roles',
        sa.Column('role_id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('slug', sa.String(length=120), nullable=False),
        sa.Column('description', sa.String(length=255), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('role_id'),
        sa.UniqueConstraint('name'),
        sa.UniqueConstraint('slug')
    )

    op.create_table('role_permissions',
        sa.Column('role_id', sa.String(length=36), nullable=False),
        sa.Column('permission_id', sa.String(length=36), nullable=False),
        sa.ForeignKeyConstraint(['permission_id'], ['permissions.permission_id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['role_id'], ['roles.role_id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('role_id', 'permission_id')
    )

    op.create_table('admins',
        sa.Column('admin_id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=50), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=20), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('is_super_admin', sa.Boolean(), nullable=False),
        sa.Column('last_login', sa.DateTime(), nullable=True),
        sa.Column('reset_password_token', sa.String(length=255), nullable=True),
        sa.Column('reset_password_expire', sa.DateTime(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('admin_id'),
        sa.UniqueConstraint('email')
    )

    op.create_table('admin_roles',
        sa.Column('admin_id', sa.String(length=36), nullable=False),
        sa.Column('role_id', sa.String(length=36), nullable=False),
        sa.ForeignKeyConstraint(['admin_id'], ['admins.admin_id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['role_id'], ['roles.role_id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('admin_id', 'role_id')
    )

    op.create_table('admin_permissions',
        sa.Column('admin_id', sa.String(length=36), nullable=False),
        sa.Column('permission_id', sa.String(length=36), nullable=False),
        sa.ForeignKeyConstraint(['admin_id'], ['admins.admin_id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['permission_id'], ['permissions.permission_id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('admin_id', 'permission_id')
    )

    op.create_table('users',
        sa.Column('user_id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=50), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=10), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('user_type', sa.String(length=20), nullable=False),
        sa.Column('address', sa.String(length=255), nullable=True),
        sa.Column('dob', sa.Date(), nullable=True),
        sa.Column('gender', sa.String(length=10), nullable=True),
        sa.Column('avatar', sa.String(length=500), nullable=True),
        sa.Column('is_blocked', sa.Boolean(), nullable=False),
        sa.Column('is_verified', sa.Boolean(), nullable=False),
        sa.Column('last_login', sa.DateTime(), nullable=True),
        sa.Column('reset_password_token', sa.String(length=255), nullable=True),
        sa.Column('reset_password_expire', sa.DateTime(), nullable=True),
        sa.Column('created_by', sa.String(length=36), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['created_by'], ['admins.admin_id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('user_id'),
        sa.UniqueConstraint('email'),
        sa.UniqueConstraint('phone')
    )

    op.create_table('property_categories',
        sa.Column('category_id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('slug', sa.String(length=120), nullable=False),
        sa.Column('description', sa.String(length=255), nullable=True),
        sa.Column('icon', sa.String(length=100), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('sort_order', sa.Integer(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('category_id'),
        sa.UniqueConstraint('name'),
        sa.UniqueConstraint('slug')
    )

    op.create_table('property_features',
        sa.Column('feature_id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('slug', sa.String(length=120), nullable=False),
        sa.Column('description', sa.String(length=255), nullable=True),
        sa.Column('icon', sa.String(length=100), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('feature_id'),
        sa.UniqueConstraint('name'),
        sa.UniqueConstraint('slug')
    )

    op.create_table('property_amenities',
        sa.Column('amenity_id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('slug', sa.String(length=120), nullable=False),
        sa.Column('description', sa.String(length=255), nullable=True),
        sa.Column('icon', sa.String(length=100), nullable=True),
        sa.Column('category', sa.String(length=50), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('amenity_id'),
        sa.UniqueConstraint('name'),
        sa.UniqueConstraint('slug')
    )

    op.create_table('properties',
        sa.Column('property_id', sa.String(length=36), nullable=False),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('property_code', sa.String(length=20), nullable=False),
        sa.Column('owner_id', sa.String(length=36), nullable=True),
        sa.Column('category_id', sa.String(length=36), nullable=False),
        sa.Column('property_type', sa.String(length=20), nullable=False),
        sa.Column('listing_type', sa.String(length=10), nullable=False),
        sa.Column('monthly_rent', sa.Float(), nullable=True),
        sa.Column('sale_price', sa.Float(), nullable=True),
        sa.Column('security_deposit', sa.Float(), nullable=True),
        sa.Column('maintenance_charge', sa.Float(), nullable=True),
        sa.Column('area', sa.Float(), nullable=False),
        sa.Column('area_unit', sa.String(length=10), nullable=False),
        sa.Column('bedroom', sa.Integer(), nullable=True),
        sa.Column('bathroom', sa.Integer(), nullable=True),
        sa.Column('balcony', sa.Integer(), nullable=True),
        sa.Column('bhk', sa.String(length=20), nullable=True),
        sa.Column('floor_no', sa.Integer(), nullable=True),
        sa.Column('total_floors', sa.Integer(), nullable=True),
        sa.Column('furnish_type', sa.String(length=20), nullable=True),
        sa.Column('available_from', sa.Date(), nullable=True),
        sa.Column('available_for', sa.String(length=20), nullable=True),
        sa.Column('city', sa.String(length=100), nullable=False),
        sa.Column('state', sa.String(length=100), nullable=False),
        sa.Column('locality', sa.String(length=150), nullable=False),
        sa.Column('landmark', sa.String(length=150), nullable=True),
        sa.Column('zipcode', sa.String(length=6), nullable=False),
        sa.Column('full_address', sa.String(length=500), nullable=False),
        sa.Column('latitude', sa.Float(), nullable=True),
        sa.Column('longitude', sa.Float(), nullable=True),
        sa.Column('images', sa.JSON(), nullable=False),
        sa.Column('documents', sa.JSON(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('is_featured', sa.Boolean(), nullable=False),
        sa.Column('is_verified', sa.Boolean(), nullable=False),
        sa.Column('verification_status', sa.String(length=20), nullable=False),
        sa.Column('rejection_reason', sa.Text(), nullable=True),
        sa.Column('views', sa.Integer(), nullable=False),
        sa.Column('inquiries', sa.Integer(), nullable=False),
        sa.Column('verified_by', sa.String(length=36), nullable=True),
        sa.Column('verified_at', sa.DateTime(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['category_id'], ['property_categories.category_id']),
        sa.ForeignKeyConstraint(['owner_id'], ['users.user_id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['verified_by'], ['admins.admin_id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('property_id'),
        sa.UniqueConstraint('property_code')
    )

    op.create_table('property_feature_links',
        sa.Column('property_id', sa.String(length=36), nullable=False),
        sa.Column('feature_id', sa.String(length=36), nullable=False),
        sa.ForeignKeyConstraint(['feature_id'], ['property_features.feature_id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['property_id'], ['properties.property_id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('property_id', 'feature_id')
    )

    op.create_table('property_amenity_links',
        sa.Column('property_id', sa.String(length=36), nullable=False),
        sa.Column('amenity_id', sa.String(length=36), nullable=False),
        sa.ForeignKeyConstraint(['amenity_id'], ['property_amenities.amenity_id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['property_id'], ['properties.property_id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('property_id', 'amenity_id')
    )

    op.create_table('staff',
        sa.Column('staff_id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=20), nullable=False),
        sa.Column('role_id', sa.String(length=36), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('avatar', sa.String(length=500), nullable=True),
        sa.Column('hire_date', sa.Date(), nullable=True),
        sa.Column('salary', sa.Float(), nullable=True),
        sa.Column('address', sa.String(length=255), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['role_id'], ['roles.role_id']),
        sa.PrimaryKeyConstraint('staff_id'),
        sa.UniqueConstraint('email'),
        sa.UniqueConstraint('phone')
    )

    op.create_table('tasks',
        sa.Column('task_id', sa.String(length=36), nullable=False),
        sa.Column('staff_id', sa.String(length=36), nullable=False),
        sa.Column('property_id', sa.String(length=36), nullable=True),
        sa.Column('task_type', sa.String(length=20), nullable=False),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('priority', sa.String(length=10), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('due_date', sa.DateTime(), nullable=False),
        sa.Column('completed_at', sa.DateTime(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_by', sa.String(length=36), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['created_by'], ['admins.admin_id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['property_id'], ['properties.property_id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['staff_id'], ['staff.staff_id']),
        sa.PrimaryKeyConstraint('task_id')
    )

    op.create_table('performance_logs',
        sa.Column('log_id', sa.String(length=36), nullable=False),
        sa.Column('staff_id', sa.String(length=36), nullable=False),
        sa.Column('task_id', sa.String(length=36), nullable=True),
        sa.Column('score', sa.Integer(), nullable=False),
        sa.Column('performance_date', sa.DateTime(), nullable=False),
        sa.Column('remarks', sa.Text(), nullable=True),
        sa.Column('logged_by', sa.String(length=36), nullable=True),
        *_timestamps(),
        sa.CheckConstraint('score >= 0 AND score <= 100', name='ck_performance_logs_score_range'),
        sa.ForeignKeyConstraint(['logged_by'], ['admins.admin_id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['staff_id'], ['staff.staff_id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['task_id'], ['tasks.task_id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('log_id')
    )

    op.create_table('subscription_plans',
        sa.Column('plan_id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('price', sa.Float(), nullable=False),
        sa.Column('duration_days', sa.Integer(), nullable=False),
        sa.Column('visit_credits', sa.Integer(), nullable=False),
        sa.Column('features', sa.JSON(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('is_popular', sa.Boolean(), nullable=False),
        sa.Column('sort_order', sa.Integer(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('plan_id'),
        sa.UniqueConstraint('name')
    )

    op.create_table('payments',
        sa.Column('payment_id', sa.String(length=40), nullable=False),
        sa.Column('user_id', sa.String(length=36), nullable=True),
        sa.Column('user_type', sa.String(length=20), nullable=False),
        sa.Column('plan_id', sa.String(length=36), nullable=True),
        sa.Column('amount', sa.Float(), nullable=False),
        sa.Column('currency', sa.String(length=3), nullable=False),
        sa.Column('payment_method', sa.String(length=20), nullable=False),
        sa.Column('transaction_id', sa.String(length=255), nullable=True),
        sa.Column('gateway_response', sa.JSON(), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('invoice_url', sa.String(length=500), nullable=True),
        sa.Column('refund_amount', sa.Float(), nullable=False),
        sa.Column('refund_reason', sa.Text(), nullable=True),
        sa.Column('refunded_at', sa.DateTime(), nullable=True),
        sa.Column('processed_by', sa.String(length=36), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['plan_id'], ['subscription_plans.plan_id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['processed_by'], ['admins.admin_id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['user_id'], ['users.user_id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('payment_id')
    )

    op.create_table('user_subscriptions',
        sa.Column('subscription_id', sa.String(length=36), nullable=False),
        sa.Column('user_id', sa.String(length=36), nullable=False),
        sa.Column('plan_id', sa.String(length=36), nullable=True),
        sa.Column('start_date', sa.DateTime(), nullable=False),
        sa.Column('end_date', sa.DateTime(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('remaining_credits', sa.Integer(), nullable=False),
        sa.Column('total_credits', sa.Integer(), nullable=False),
        sa.Column('payment_id', sa.String(length=40), nullable=True),
        sa.Column('auto_renewal', sa.Boolean(), nullable=False),
        sa.Column('cancelled_at', sa.DateTime(), nullable=True),
        sa.Column('cancelled_by', sa.String(length=36), nullable=True),
        sa.Column('cancellation_reason', sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['cancelled_by'], ['admins.admin_id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['payment_id'], ['payments.payment_id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['plan_id'], ['subscription_plans.plan_id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['user_id'], ['users.user_id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('subscription_id')
    )

    op.create_table('settings',
        sa.Column('setting_id', sa.String(length=36), nullable=False),
        sa.Column('key', sa.String(length=255), nullable=False),
        sa.Column('value', sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('setting_id'),
        sa.UniqueConstraint('key')
    )


def downgrade():
    op.drop_table('settings')
    op.drop_table('user_subscriptions')
    op.drop_table('payments')
    op.drop_table('subscription_plans')
    op.drop_table('performance_logs')
    op.drop_table('tasks')
    op.drop_table('staff')
    op.drop_table('property_amenity_links')
    op.drop_table('property_feature_links')
    op.drop_table('properties')
    op.drop_table('property_amenities')
    op.drop_table('property_features')
    op.drop_table('property_categories')
    op.drop_table('users')
    op.drop_table('admin_permissions')
    op.drop_table('admin_roles')
    op.drop_table('admins')
    op.drop_table('role_permissions')
    op.drop_table('roles')
    op.drop_table('permissions')
