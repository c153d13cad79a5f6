"""Create villa onboarding tables.

Revision ID: 5a1f0c2d9e3b
Revises:
Create Date: 2026-10-18

Villa record, stage bundles (owner, contract, bank), stage collections
(OTA credentials, documents, staff, facilities, photos) and the progress
tables: onboarding progress with legacy flags, versioned stage progress and
field progress.
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = '5a1f0c2d9e3b'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    """Create onboarding tables."""
    op.create_table(
        'villas',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('villa_name', sa.String(200), nullable=False),
        sa.Column('address', sa.String(400), nullable=True),
        sa.Column('city', sa.String(120), nullable=True),
        sa.Column('country', sa.String(120), nullable=True),
        sa.Column('zip_code', sa.String(30), nullable=True),
        sa.Column('latitude', sa.Float(), nullable=True),
        sa.Column('longitude', sa.Float(), nullable=True),
        sa.Column('bedrooms', sa.Integer(), nullable=True),
        sa.Column('bathrooms', sa.Integer(), nullable=True),
        sa.Column('max_guests', sa.Integer(), nullable=True),
        sa.Column('property_size', sa.Float(), nullable=True),
        sa.Column('plot_size', sa.Float(), nullable=True),
        sa.Column('year_built', sa.Integer(), nullable=True),
        sa.Column('renovation_year', sa.Integer(), nullable=True),
        sa.Column('property_type', sa.String(40), nullable=True),
        sa.Column('villa_style', sa.String(40), nullable=True),
        sa.Column('location_type', sa.String(120), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('short_description', sa.Text(), nullable=True),
        sa.Column('property_email', sa.String(320), nullable=True),
        sa.Column('property_website', sa.Text(), nullable=True),
        sa.Column('google_maps_link', sa.Text(), nullable=True),
        sa.Column('google_coordinates', sa.String(120), nullable=True),
        sa.Column('old_rates_card_link', sa.Text(), nullable=True),
        sa.Column('i_cal_calendar_link', sa.Text(), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='DRAFT'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('tags', postgresql.JSONB(), nullable=True),
        sa.Column('created_by', sa.String(160), nullable=True),
        sa.Column('updated_by', sa.String(160), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True),
                  server_default=sa.text('NOW()'), nullable=False),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True),
                  server_default=sa.text('NOW()'), nullable=False),
    )

    op.create_table(
        'owners',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('villa_id', postgresql.UUID(as_uuid=True),
                  sa.ForeignKey('villas.id', ondelete='CASCADE'), nullable=False, unique=True),
        sa.Column('owner_type', sa.String(20), nullable=True),
        sa.Column('first_name', sa.String(120), nullable=True),
        sa.Column('last_name', sa.String(120), nullable=True),
        sa.Column('email', sa.String(320), nullable=True),
        sa.Column('phone', sa.String(60), nullable=True),
        sa.Column('phone_country_code', sa.String(8), nullable=True),
        sa.Column('phone_dial_code', sa.String(8), nullable=True),
        sa.Column('alternative_phone', sa.String(60), nullable=True),
        sa.Column('alternative_phone_country_code', sa.String(8), nullable=True),
        sa.Column('alternative_phone_dial_code', sa.String(8), nullable=True),
        sa.Column('nationality', sa.String(80), nullable=True),
        sa.Column('passport_number', sa.String(80), nullable=True),
        sa.Column('id_number', sa.String(80), nullable=True),
        sa.Column('address', sa.String(400), nullable=True),
        sa.Column('city', sa.String(120), nullable=True),
        sa.Column('country', sa.String(120), nullable=True),
        sa.Column('zip_code', sa.String(30), nullable=True),
        sa.Column('company_name', sa.String(200), nullable=True),
        sa.Column('company_address', sa.String(400), nullable=True),
        sa.Column('company_tax_id', sa.String(80), nullable=True),
        sa.Column('company_vat', sa.String(80), nullable=True),
        sa.Column('manager_name', sa.String(160), nullable=True),
        sa.Column('manager_email', sa.String(320), nullable=True),
        sa.Column('manager_phone', sa.String(60), nullable=True),
        sa.Column('manager_phone_country_code', sa.String(8), nullable=True),
        sa.Column('manager_phone_dial_code', sa.String(8), nullable=True),
        sa.Column('preferred_language', sa.String(10), nullable=True),
        sa.Column('communication_preference', sa.String(20), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('property_email', sa.String(320), nullable=True),
        sa.Column('property_website', sa.Text(), nullable=True),
        sa.Column('created_by', sa.String(160), nullable=True),
        sa.Column('updated_by', sa.String(160), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True),
                  server_default=sa.text('NOW()'), nullable=False),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True),
                  server_default=sa.text('NOW()'), nullable=False),
    )

    op.create_table(
        'contractual_details',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('villa_id', postgresql.UUID(as_uuid=True),
                  sa.ForeignKey('villas.id', ondelete='CASCADE'), nullable=False, unique=True),
        sa.Column('contract_start_date', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('contract_end_date', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('contract_type', sa.String(20), nullable=True),
        sa.Column('commission_rate', sa.Float(), nullable=True),
        sa.Column('management_fee', sa.Float(), nullable=True),
        sa.Column('marketing_fee', sa.Float(), nullable=True),
        sa.Column('payment_terms', sa.Text(), nullable=True),
        sa.Column('payment_schedule', sa.String(20), nullable=True),
        sa.Column('minimum_stay_nights', sa.Integer(), nullable=True),
        sa.Column('cancellation_policy', sa.String(20), nullable=True),
        sa.Column('check_in_time', sa.String(20), nullable=True),
        sa.Column('check_out_time', sa.String(20), nullable=True),
        sa.Column('insurance_provider', sa.String(160), nullable=True),
        sa.Column('insurance_policy_number', sa.String(160), nullable=True),
        sa.Column('insurance_expiry', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('special_terms', sa.Text(), nullable=True),
        sa.Column('payout_day1', sa.Integer(), nullable=True),
        sa.Column('payout_day2', sa.Integer(), nullable=True),
        sa.Column('dbd_number', sa.String(80), nullable=True),
        sa.Column('payment_through_ipl', sa.Boolean(), nullable=True),
        sa.Column('vat_payment_terms', sa.Text(), nullable=True),
        sa.Column('vat_registration_number', sa.String(120), nullable=True),
        sa.Column('created_by', sa.String(160), nullable=True),
        sa.Column('updated_by', sa.String(160), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True),
                  server_default=sa.text('NOW()'), nullable=False),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True),
                  server_default=sa.text('NOW()'), nullable=False),
    )

    op.create_table(
        'bank_details',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('villa_id', postgresql.UUID(as_uuid=True),
                  sa.ForeignKey('villas.id', ondelete='CASCADE'), nullable=False, unique=True),
        sa.Column('account_holder_name', sa.String(200), nullable=True),
        sa.Column('bank_name', sa.String(200), nullable=True),
        sa.Column('account_number', sa.String(80), nullable=True),
        sa.Column('iban', sa.String(34), nullable=True),
        sa.Column('swift_code', sa.String(11), nullable=True),
        sa.Column('branch_name', sa.String(200), nullable=True),
        sa.Column('branch_code', sa.String(80), nullable=True),
        sa.Column('branch_address', sa.String(400), nullable=True),
        sa.Column('bank_address', sa.String(400), nullable=True),
        sa.Column('bank_country', sa.String(120), nullable=True),
        sa.Column('currency', sa.String(8), nullable=True),
        sa.Column('account_type', sa.String(40), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('is_verified', sa.Boolean(), nullable=True),
        sa.Column('routing_number', sa.String(40), nullable=True),
        sa.Column('tax_id', sa.String(80), nullable=True),
        sa.Column('created_by', sa.String(160), nullable=True),
        sa.Column('updated_by', sa.String(160), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True),
                  server_default=sa.text('NOW()'), nullable=False),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True),
                  server_default=sa.text('NOW()'), nullable=False),
    )

    op.create_table(
        'ota_credentials',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('villa_id', postgresql.UUID(as_uuid=True),
                  sa.ForeignKey('villas.id', ondelete='CASCADE'), nullable=False),
        sa.Column('platform', sa.String(40), nullable=False),
        sa.Column('username', sa.String(160), nullable=True),
        sa.Column('password', sa.String(160), nullable=True),
        sa.Column('property_id', sa.String(160), nullable=True),
        sa.Column('api_key', sa.String(160), nullable=True),
        sa.Column('api_secret', sa.String(160), nullable=True),
        sa.Column('listing_url', sa.Text(), nullable=True),
        sa.Column('account_url', sa.Text(), nullable=True),
        sa.Column('property_url', sa.Text(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_by', sa.String(160), nullable=True),
        sa.Column('updated_by', sa.String(160), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True),
                  server_default=sa.text('NOW()'), nullable=False),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True),
                  server_default=sa.text('NOW()'), nullable=False),
    )

    op.create_table(
        'villa_documents',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('villa_id', postgresql.UUID(as_uuid=True),
                  sa.ForeignKey('villas.id', ondelete='CASCADE'), nullable=False),
        sa.Column('document_type', sa.String(120), nullable=True),
        sa.Column('category', sa.String(120), nullable=True),
        sa.Column('filename', sa.String(260), nullable=True),
        sa.Column('original_name', sa.String(260), nullable=True),
        sa.Column('mime_type', sa.String(120), nullable=True),
        sa.Column('size', sa.Float(), nullable=True),
        sa.Column('share_point_url', sa.Text(), nullable=True),
        sa.Column('share_point_file_id', sa.String(160), nullable=True),
        sa.Column('share_point_path', sa.String(400), nullable=True),
        sa.Column('uploaded_at', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('is_required', sa.Boolean(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('validated', sa.Boolean(), nullable=True),
        sa.Column('validated_at', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('validated_by', sa.String(160), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_by', sa.String(160), nullable=True),
        sa.Column('updated_by', sa.String(160), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True),
                  server_default=sa.text('NOW()'), nullable=False),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True),
                  server_default=sa.text('NOW()'), nullable=False),
    )

    op.create_table(
        'staff',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('villa_id', postgresql.UUID(as_uuid=True),
                  sa.ForeignKey('villas.id', ondelete='CASCADE'), nullable=False),
        sa.Column('first_name', sa.String(120), nullable=False),
        sa.Column('last_name', sa.String(120), nullable=False),
        sa.Column('nickname', sa.String(120), nullable=True),
        sa.Column('email', sa.String(320), nullable=True),
        sa.Column('phone', sa.String(60), nullable=False),
        sa.Column('phone_country_code', sa.String(8), nullable=True),
        sa.Column('phone_dial_code', sa.String(8), nullable=True),
        sa.Column('id_number', sa.String(120), nullable=True),
        sa.Column('passport_number', sa.String(120), nullable=True),
        sa.Column('nationality', sa.String(80), nullable=True),
        sa.Column('date_of_birth', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('marital_status', sa.Boolean(), nullable=True),
        sa.Column('position', sa.String(40), nullable=True),
        sa.Column('department', sa.String(40), nullable=True),
        sa.Column('employment_type', sa.String(20), nullable=True),
        sa.Column('start_date', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('end_date', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('salary', sa.Float(), nullable=True),
        sa.Column('salary_frequency', sa.String(20), nullable=True),
        sa.Column('currency', sa.String(8), nullable=True),
        sa.Column('number_of_day_salary', sa.Integer(), nullable=True),
        sa.Column('service_charge', sa.Float(), nullable=True),
        sa.Column('total_income', sa.Float(), nullable=True),
        sa.Column('total_net_income', sa.Float(), nullable=True),
        sa.Column('other_deductions', sa.Float(), nullable=True),
        sa.Column('has_accommodation', sa.Boolean(), nullable=True),
        sa.Column('has_transport', sa.Boolean(), nullable=True),
        sa.Column('has_health_insurance', sa.Boolean(), nullable=True),
        sa.Column('has_work_insurance', sa.Boolean(), nullable=True),
        sa.Column('food_allowance', sa.Boolean(), nullable=True),
        sa.Column('transportation', sa.String(160), nullable=True),
        sa.Column('emergency_contacts', postgresql.JSONB(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_by', sa.String(160), nullable=True),
        sa.Column('updated_by', sa.String(160), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True),
                  server_default=sa.text('NOW()'), nullable=False),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True),
                  server_default=sa.text('NOW()'), nullable=False),
    )

    op.create_table(
        'facility_checklists',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('villa_id', postgresql.UUID(as_uuid=True),
                  sa.ForeignKey('villas.id', ondelete='CASCADE'), nullable=False),
        sa.Column('category', sa.String(120), nullable=False),
        sa.Column('subcategory', sa.String(120), nullable=True),
        sa.Column('item_name', sa.String(200), nullable=False),
        sa.Column('is_available', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('quantity', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('condition', sa.String(20), nullable=False, server_default='good'),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('specifications', sa.Text(), nullable=True),
        sa.Column('photo_url', sa.Text(), nullable=True),
        sa.Column('product_link', sa.Text(), nullable=True),
        sa.Column('checked_by', sa.String(160), nullable=True),
        sa.Column('last_checked_at', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('created_by', sa.String(160), nullable=True),
        sa.Column('updated_by', sa.String(160), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True),
                  server_default=sa.text('NOW()'), nullable=False),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True),
                  server_default=sa.text('NOW()'), nullable=False),
    )

    op.create_table(
        'photos',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('villa_id', postgresql.UUID(as_uuid=True),
                  sa.ForeignKey('villas.id', ondelete='CASCADE'), nullable=False),
        sa.Column('url', sa.Text(), nullable=True),
        sa.Column('caption', sa.String(400), nullable=True),
        sa.Column('category', sa.String(120), nullable=True),
        sa.Column('subcategory', sa.String(120), nullable=True),
        sa.Column('is_main', sa.Boolean(), nullable=True),
        sa.Column('sort_order', sa.Integer(), nullable=True),
        sa.Column('filename', sa.String(260), nullable=True),
        sa.Column('original_name', sa.String(260), nullable=True),
        sa.Column('mime_type', sa.String(160), nullable=True),
        sa.Column('size', sa.Float(), nullable=True),
        sa.Column('share_point_file_id', sa.String(200), nullable=True),
        sa.Column('share_point_path', sa.String(400), nullable=True),
        sa.Column('file_url', sa.Text(), nullable=True),
        sa.Column('thumbnail_url', sa.Text(), nullable=True),
        sa.Column('alt_text', sa.String(260), nullable=True),
        sa.Column('created_by', sa.String(160), nullable=True),
        sa.Column('updated_by', sa.String(160), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True),
                  server_default=sa.text('NOW()'), nullable=False),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True),
                  server_default=sa.text('NOW()'), nullable=False),
    )

    op.create_table(
        'onboarding_progress',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('villa_id', postgresql.UUID(as_uuid=True),
                  sa.ForeignKey('villas.id', ondelete='CASCADE'), nullable=False, unique=True),
        sa.Column('current_step', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('status', sa.String(20), nullable=False, server_default='IN_PROGRESS'),
        sa.Column('villa_info_completed', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('owner_details_completed', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('contractual_details_completed', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('bank_details_completed', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('ota_credentials_completed', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('documents_uploaded', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('staff_config_completed', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('facilities_completed', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('photos_uploaded', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('review_completed', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('review_notes', sa.Text(), nullable=True),
        sa.Column('agreed_to_terms', sa.Boolean(), nullable=True),
        sa.Column('data_accuracy_confirmed', sa.Boolean(), nullable=True),
        sa.Column('completed_at', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('created_by', sa.String(160), nullable=True),
        sa.Column('updated_by', sa.String(160), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True),
                  server_default=sa.text('NOW()'), nullable=False),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True),
                  server_default=sa.text('NOW()'), nullable=False),
    )

    op.create_table(
        'onboarding_step_progress',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('villa_id', postgresql.UUID(as_uuid=True),
                  sa.ForeignKey('villas.id', ondelete='CASCADE'), nullable=False),
        sa.Column('step_number', sa.Integer(), nullable=False),
        sa.Column('step_name', sa.String(40), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='not-started'),
        sa.Column('version', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('started_at', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('completed_at', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('skipped_at', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('last_updated_at', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True),
                  server_default=sa.text('NOW()'), nullable=False),
        sa.UniqueConstraint('villa_id', 'step_number', name='uq_step_progress_villa_step'),
    )

    op.create_table(
        'step_field_progress',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('step_progress_id', postgresql.UUID(as_uuid=True),
                  sa.ForeignKey('onboarding_step_progress.id', ondelete='CASCADE'), nullable=False),
        sa.Column('field_name', sa.String(120), nullable=False),
        sa.Column('field_type', sa.String(20), nullable=False, server_default='null'),
        sa.Column('value', postgresql.JSONB(), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='not-started'),
        sa.Column('is_required', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('started_at', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('completed_at', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('last_modified_at', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.UniqueConstraint('step_progress_id', 'field_name', name='uq_field_progress_step_field'),
    )

    # Child tables are always read by villa
    for table in ('ota_credentials', 'villa_documents', 'staff', 'facility_checklists',
                  'photos', 'onboarding_step_progress'):
        op.create_index(f'ix_{table}_villa_id', table, ['villa_id'])
    op.create_index(
        'ix_step_field_progress_step_progress_id',
        'step_field_progress',
        ['step_progress_id']
    )


def downgrade() -> None:
    """Drop onboarding tables."""
    op.drop_index('ix_step_field_progress_step_progress_id', table_name='step_field_progress')
    for table in ('ota_credentials', 'villa_documents', 'staff', 'facility_checklists',
                  'photos', 'onboarding_step_progress'):
        op.drop_index(f'ix_{table}_villa_id', table_name=table)

    for table in ('step_field_progress', 'onboarding_step_progress', 'onboarding_progress',
                  'photos', 'facility_checklists', 'staff', 'villa_documents',
                  'ota_credentials', 'bank_details', 'contractual_details', 'owners', 'villas'):
        op.drop_table(table)
