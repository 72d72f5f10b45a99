"""create health map schema

Revision ID: 001
Revises:
Create Date: 2026-10-19 12:00:00.000000

Users and profiles, assessment definitions and attempts, per-dimension
results, reports, purchases, discount codes, organization tracking and the
Stripe-backed package entitlement tables.
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '001'
down_revision = None
branch_labels = None
depends_on = None


def _id():
    return sa.Column('id', sa.String(length=32), nullable=False)


def _created_at():
    return sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False)


def _updated_at():
    return sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False)


def upgrade() -> None:
    op.create_table(
        'user',
        _id(),
        sa.Column('name', sa.String(), nullable=True),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('email_verified', sa.DateTime(timezone=True), nullable=True),
        sa.Column('image', sa.String(), nullable=True),
        sa.Column('password', sa.String(), nullable=True),
        _created_at(),
        _updated_at(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_user_email'), 'user', ['email'], unique=True)

    op.create_table(
        'profile',
        _id(),
        sa.Column('user_id', sa.String(length=32), nullable=False),
        sa.Column('first_name', sa.String(), nullable=True),
        sa.Column('last_name', sa.String(), nullable=True),
        sa.Column('date_of_birth', sa.DateTime(), nullable=True),
        sa.Column('gender', sa.String(), nullable=True),
        sa.Column('height', sa.Integer(), nullable=True),
        sa.Column('weight', sa.Integer(), nullable=True),
        sa.Column('activity_level', sa.String(), nullable=True),
        sa.Column('medical_conditions', sa.Text(), nullable=True),
        sa.Column('allergies', sa.Text(), nullable=True),
        sa.Column('medications', sa.Text(), nullable=True),
        sa.Column('emergency_contact_name', sa.String(), nullable=True),
        sa.Column('emergency_contact_phone', sa.String(), nullable=True),
        _created_at(),
        _updated_at(),
        sa.ForeignKeyConstraint(['user_id'], ['user.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id'),
    )

    op.create_table(
        'assessment',
        _id(),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('version', sa.String(length=32), nullable=False, server_default='1.0'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('free_results_limit', sa.Integer(), nullable=True, server_default='3'),
        sa.Column('paid_report_price', sa.Integer(), nullable=True),
        sa.Column('estimated_duration', sa.Integer(), nullable=True),
        _created_at(),
        _updated_at(),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table(
        'health_dimension',
        _id(),
        sa.Column('assessment_id', sa.String(length=32), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('display_order', sa.Integer(), nullable=False),
        sa.Column('color', sa.String(length=32), nullable=True),
        sa.Column('icon', sa.String(length=64), nullable=True),
        _created_at(),
        sa.ForeignKeyConstraint(['assessment_id'], ['assessment.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_health_dimension_assessment_id'), 'health_dimension', ['assessment_id'])

    op.create_table(
        'assessment_question',
        _id(),
        sa.Column('assessment_id', sa.String(length=32), nullable=False),
        sa.Column('dimension_id', sa.String(length=32), nullable=True),
        sa.Column('question_text', sa.Text(), nullable=False),
        sa.Column('question_type', sa.String(length=32), nullable=False),
        sa.Column('display_order', sa.Integer(), nullable=False),
        sa.Column('is_required', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('weight', sa.Integer(), nullable=True, server_default='1'),
        _created_at(),
        sa.ForeignKeyConstraint(['assessment_id'], ['assessment.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['dimension_id'], ['health_dimension.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_assessment_question_assessment_id'), 'assessment_question', ['assessment_id'])

    op.create_table(
        'question_option',
        _id(),
        sa.Column('question_id', sa.String(length=32), nullable=False),
        sa.Column('option_text', sa.String(), nullable=False),
        sa.Column('option_value', sa.Integer(), nullable=False),
        sa.Column('display_order', sa.Integer(), nullable=False),
        _created_at(),
        sa.ForeignKeyConstraint(['question_id'], ['assessment_question.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_question_option_question_id'), 'question_option', ['question_id'])

    op.create_table(
        'organization_tracking',
        _id(),
        sa.Column('organization_name', sa.String(), nullable=False),
        sa.Column('contact_email', sa.String(), nullable=False),
        sa.Column('contact_name', sa.String(), nullable=True),
        sa.Column('assessment_id', sa.String(length=32), nullable=False),
        sa.Column('tracking_code', sa.String(length=64), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('total_participants', sa.Integer(), nullable=True, server_default='0'),
        sa.Column('completed_assessments', sa.Integer(), nullable=True, server_default='0'),
        _created_at(),
        _updated_at(),
        sa.ForeignKeyConstraint(['assessment_id'], ['assessment.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_organization_tracking_tracking_code'), 'organization_tracking', ['tracking_code'], unique=True)

    op.create_table(
        'user_assessment',
        _id(),
        sa.Column('user_id', sa.String(length=32), nullable=False),
        sa.Column('assessment_id', sa.String(length=32), nullable=False),
        sa.Column('organization_tracking_id', sa.String(length=32), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='in_progress'),
        sa.Column('started_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('total_score', sa.Integer(), nullable=True),
        sa.Column('percentage_complete', sa.Integer(), nullable=True, server_default='0'),
        _created_at(),
        _updated_at(),
        sa.ForeignKeyConstraint(['user_id'], ['user.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['assessment_id'], ['assessment.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['organization_tracking_id'], ['organization_tracking.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_user_assessment_user_status', 'user_assessment', ['user_id', 'status'])

    op.create_table(
        'user_response',
        _id(),
        sa.Column('user_assessment_id', sa.String(length=32), nullable=False),
        sa.Column('question_id', sa.String(length=32), nullable=False),
        sa.Column('option_id', sa.String(length=32), nullable=True),
        sa.Column('response_value', sa.Integer(), nullable=True),
        sa.Column('response_text', sa.Text(), nullable=True),
        _created_at(),
        sa.ForeignKeyConstraint(['user_assessment_id'], ['user_assessment.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['question_id'], ['assessment_question.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['option_id'], ['question_option.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_user_response_user_assessment_id'), 'user_response', ['user_assessment_id'])

    op.create_table(
        'assessment_result',
        _id(),
        sa.Column('user_assessment_id', sa.String(length=32), nullable=False),
        sa.Column('dimension_id', sa.String(length=32), nullable=False),
        sa.Column('score', sa.Integer(), nullable=False),
        sa.Column('percentage_score', sa.Integer(), nullable=False),
        sa.Column('level', sa.String(length=20), nullable=True),
        sa.Column('interpretation', sa.Text(), nullable=True),
        sa.Column('recommendations', sa.Text(), nullable=True),
        _created_at(),
        sa.ForeignKeyConstraint(['user_assessment_id'], ['user_assessment.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['dimension_id'], ['health_dimension.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_assessment_result_user_assessment_id'), 'assessment_result', ['user_assessment_id'])

    op.create_table(
        'report',
        _id(),
        sa.Column('user_assessment_id', sa.String(length=32), nullable=False),
        sa.Column('report_type', sa.String(length=20), nullable=False),
        sa.Column('report_data', sa.Text(), nullable=False),
        sa.Column('report_url', sa.String(), nullable=True),
        sa.Column('is_generated', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('generated_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('delivery_method', sa.String(length=20), nullable=True),
        sa.Column('delivered_at', sa.DateTime(timezone=True), nullable=True),
        _created_at(),
        sa.ForeignKeyConstraint(['user_assessment_id'], ['user_assessment.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_report_user_assessment_id'), 'report', ['user_assessment_id'])

    op.create_table(
        'discount_code',
        _id(),
        sa.Column('code', sa.String(length=64), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('discount_type', sa.String(length=20), nullable=False),
        sa.Column('discount_value', sa.Integer(), nullable=False),
        sa.Column('max_uses', sa.Integer(), nullable=True),
        sa.Column('current_uses', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('valid_from', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.Column('valid_until', sa.DateTime(timezone=True), nullable=True),
        sa.Column('applicable_products', sa.Text(), nullable=True),
        sa.Column('created_by', sa.String(length=32), nullable=True),
        _created_at(),
        _updated_at(),
        sa.ForeignKeyConstraint(['created_by'], ['user.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_discount_code_code'), 'discount_code', ['code'], unique=True)

    op.create_table(
        'purchase',
        _id(),
        sa.Column('user_id', sa.String(length=32), nullable=False),
        sa.Column('user_assessment_id', sa.String(length=32), nullable=True),
        sa.Column('discount_code_id', sa.String(length=32), nullable=True),
        sa.Column('product_type', sa.String(length=50), nullable=False),
        sa.Column('original_price', sa.Integer(), nullable=False),
        sa.Column('discount_amount', sa.Integer(), nullable=True, server_default='0'),
        sa.Column('final_price', sa.Integer(), nullable=False),
        sa.Column('payment_status', sa.String(length=20), nullable=False, server_default='pending'),
        sa.Column('payment_provider', sa.String(length=50), nullable=True),
        sa.Column('payment_id', sa.String(), nullable=True),
        _created_at(),
        _updated_at(),
        sa.ForeignKeyConstraint(['user_id'], ['user.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_assessment_id'], ['user_assessment.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['discount_code_id'], ['discount_code.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_purchase_user_id'), 'purchase', ['user_id'])

    op.create_table(
        'stripe_customer',
        _id(),
        sa.Column('user_id', sa.String(length=32), nullable=True),
        sa.Column('organization_tracking_id', sa.String(length=32), nullable=True),
        sa.Column('stripe_customer_id', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('name', sa.String(), nullable=True),
        sa.Column('customer_type', sa.String(length=20), nullable=False),
        sa.Column('default_payment_method_id', sa.String(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        _created_at(),
        _updated_at(),
        sa.ForeignKeyConstraint(['user_id'], ['user.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['organization_tracking_id'], ['organization_tracking.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('stripe_customer_id'),
    )

    op.create_table(
        'report_package',
        _id(),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('package_type', sa.String(length=20), nullable=False),
        sa.Column('report_count', sa.Integer(), nullable=True),
        sa.Column('price_per_report', sa.Integer(), nullable=True),
        sa.Column('total_price', sa.Integer(), nullable=False),
        sa.Column('discount_percentage', sa.Integer(), nullable=True, server_default='0'),
        sa.Column('validity_days', sa.Integer(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('target_customer_type', sa.String(length=20), nullable=False),
        sa.Column('stripe_price_id', sa.String(), nullable=True),
        sa.Column('features', sa.Text(), nullable=True),
        _created_at(),
        _updated_at(),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table(
        'stripe_payment',
        _id(),
        sa.Column('stripe_customer_id', sa.String(length=32), nullable=False),
        sa.Column('stripe_payment_intent_id', sa.String(), nullable=False),
        sa.Column('stripe_charge_id', sa.String(), nullable=True),
        sa.Column('amount', sa.Integer(), nullable=False),
        sa.Column('currency', sa.String(length=3), nullable=False, server_default='usd'),
        sa.Column('payment_status', sa.String(length=20), nullable=False),
        sa.Column('payment_method', sa.String(length=50), nullable=True),
        sa.Column('payment_method_id', sa.String(), nullable=True),
        sa.Column('receipt_url', sa.String(), nullable=True),
        sa.Column('failure_reason', sa.Text(), nullable=True),
        sa.Column('refund_amount', sa.Integer(), nullable=True, server_default='0'),
        sa.Column('refund_reason', sa.Text(), nullable=True),
        sa.Column('metadata', sa.Text(), nullable=True),
        _created_at(),
        _updated_at(),
        sa.ForeignKeyConstraint(['stripe_customer_id'], ['stripe_customer.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('stripe_payment_intent_id'),
    )

    op.create_table(
        'package_purchase',
        _id(),
        sa.Column('stripe_customer_id', sa.String(length=32), nullable=False),
        sa.Column('report_package_id', sa.String(length=32), nullable=False),
        sa.Column('stripe_payment_id', sa.String(length=32), nullable=True),
        sa.Column('discount_code_id', sa.String(length=32), nullable=True),
        sa.Column('original_price', sa.Integer(), nullable=False),
        sa.Column('discount_amount', sa.Integer(), nullable=True, server_default='0'),
        sa.Column('final_price', sa.Integer(), nullable=False),
        sa.Column('reports_remaining', sa.Integer(), nullable=False),
        sa.Column('total_reports', sa.Integer(), nullable=False),
        sa.Column('purchase_status', sa.String(length=20), nullable=False, server_default='active'),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('purchased_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        _created_at(),
        _updated_at(),
        sa.ForeignKeyConstraint(['stripe_customer_id'], ['stripe_customer.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['report_package_id'], ['report_package.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['stripe_payment_id'], ['stripe_payment.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['discount_code_id'], ['discount_code.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table(
        'purchased_report',
        _id(),
        sa.Column('package_purchase_id', sa.String(length=32), nullable=False),
        sa.Column('user_assessment_id', sa.String(length=32), nullable=False),
        sa.Column('report_id', sa.String(length=32), nullable=True),
        sa.Column('report_status', sa.String(length=20), nullable=False, server_default='pending'),
        sa.Column('assigned_to', sa.String(), nullable=True),
        sa.Column('assigned_by', sa.String(length=32), nullable=True),
        sa.Column('generated_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('delivered_at', sa.DateTime(timezone=True), nullable=True),
        _created_at(),
        _updated_at(),
        sa.ForeignKeyConstraint(['package_purchase_id'], ['package_purchase.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_assessment_id'], ['user_assessment.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['report_id'], ['report.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['assigned_by'], ['user.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_purchased_report_package_purchase_id'), 'purchased_report', ['package_purchase_id'])

    op.create_table(
        'organization_invite',
        _id(),
        sa.Column('organization_tracking_id', sa.String(length=32), nullable=False),
        sa.Column('package_purchase_id', sa.String(length=32), nullable=True),
        sa.Column('invite_code', sa.String(length=64), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('invited_by', sa.String(length=32), nullable=False),
        sa.Column('invite_status', sa.String(length=20), nullable=False, server_default='pending'),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('accepted_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('accepted_by', sa.String(length=32), nullable=True),
        _created_at(),
        _updated_at(),
        sa.ForeignKeyConstraint(['organization_tracking_id'], ['organization_tracking.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['package_purchase_id'], ['package_purchase.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['invited_by'], ['user.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['accepted_by'], ['user.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('invite_code'),
    )


def downgrade() -> None:
    op.drop_table('organization_invite')
    op.drop_index(op.f('ix_purchased_report_package_purchase_id'), table_name='purchased_report')
    op.drop_table('purchased_report')
    op.drop_table('package_purchase')
    op.drop_table('stripe_payment')
    op.drop_table('report_package')
    op.drop_table('stripe_customer')
    op.drop_index(op.f('ix_purchase_user_id'), table_name='purchase')
    op.drop_table('purchase')
    op.drop_index(op.f('ix_discount_code_code'), table_name='discount_code')
    op.drop_table('discount_code')
    op.drop_index(op.f('ix_report_user_assessment_id'), table_name='report')
    op.drop_table('report')
    op.drop_index(op.f('ix_assessment_result_user_assessment_id'), table_name='assessment_result')
    op.drop_table('assessment_result')
    op.drop_index(op.f('ix_user_response_user_assessment_id'), table_name='user_response')
    op.drop_table('user_response')
    op.drop_index('idx_user_assessment_user_status', table_name='user_assessment')
    op.drop_table('user_assessment')
    op.drop_index(op.f('ix_organization_tracking_tracking_code'), table_name='organization_tracking')
    op.drop_table('organization_tracking')
    op.drop_index(op.f('ix_question_option_question_id'), table_name='question_option')
    op.drop_table('question_option')
    op.drop_index(op.f('ix_assessment_question_assessment_id'), table_name='assessment_question')
    op.drop_table('assessment_question')
    op.drop_index(op.f('ix_health_dimension_assessment_id'), table_name='health_dimension')
    op.drop_table('health_dimension')
    op.drop_table('assessment')
    op.drop_table('profile')
    op.drop_index(op.f('ix_user_email'), table_name='user')
    op.drop_table('user')
