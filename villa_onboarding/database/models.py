"""SQLAlchemy models for all database tables."""

import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import (
    JSON,
    TIMESTAMP,
    Boolean,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from villa_onboarding.core.database import Base


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Villa(Base):
    """The property being onboarded; holds the stage 1 bundle."""

    __tablename__ = "villas"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    villa_name: Mapped[str] = mapped_column(String(200), nullable=False)
    address: Mapped[str | None] = mapped_column(String(400), nullable=True)
    city: Mapped[str | None] = mapped_column(String(120), nullable=True)
    country: Mapped[str | None] = mapped_column(String(120), nullable=True)
    zip_code: Mapped[str | None] = mapped_column(String(30), nullable=True)
    latitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    longitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    bedrooms: Mapped[int | None] = mapped_column(Integer, nullable=True)
    bathrooms: Mapped[int | None] = mapped_column(Integer, nullable=True)
    max_guests: Mapped[int | None] = mapped_column(Integer, nullable=True)
    property_size: Mapped[float | None] = mapped_column(Float, nullable=True)
    plot_size: Mapped[float | None] = mapped_column(Float, nullable=True)
    year_built: Mapped[int | None] = mapped_column(Integer, nullable=True)
    renovation_year: Mapped[int | None] = mapped_column(Integer, nullable=True)
    property_type: Mapped[str | None] = mapped_column(String(40), nullable=True)
    villa_style: Mapped[str | None] = mapped_column(String(40), nullable=True)
    location_type: Mapped[str | None] = mapped_column(String(120), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    short_description: Mapped[str | None] = mapped_column(Text, nullable=True)
    property_email: Mapped[str | None] = mapped_column(String(320), nullable=True)
    property_website: Mapped[str | None] = mapped_column(Text, nullable=True)
    google_maps_link: Mapped[str | None] = mapped_column(Text, nullable=True)
    google_coordinates: Mapped[str | None] = mapped_column(String(120), nullable=True)
    old_rates_card_link: Mapped[str | None] = mapped_column(Text, nullable=True)
    i_cal_calendar_link: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="DRAFT"
    )  # DRAFT | ACTIVE | INACTIVE | ARCHIVED
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    tags: Mapped[list | None] = mapped_column(JSON, nullable=True)
    created_by: Mapped[str | None] = mapped_column(String(160), nullable=True)
    updated_by: Mapped[str | None] = mapped_column(String(160), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), default=utc_now, onupdate=utc_now
    )

    # Relationships
    owner: Mapped["Owner | None"] = relationship(
        "Owner", back_populates="villa", uselist=False, cascade="all, delete-orphan"
    )
    contractual_details: Mapped["ContractualDetails | None"] = relationship(
        "ContractualDetails", back_populates="villa", uselist=False, cascade="all, delete-orphan"
    )
    bank_details: Mapped["BankDetails | None"] = relationship(
        "BankDetails", back_populates="villa", uselist=False, cascade="all, delete-orphan"
    )
    onboarding_progress: Mapped["OnboardingProgress | None"] = relationship(
        "OnboardingProgress", back_populates="villa", uselist=False, cascade="all, delete-orphan"
    )
    ota_credentials: Mapped[list["OtaCredential"]] = relationship(
        "OtaCredential", back_populates="villa", cascade="all, delete-orphan"
    )
    documents: Mapped[list["VillaDocument"]] = relationship(
        "VillaDocument", back_populates="villa", cascade="all, delete-orphan"
    )
    staff: Mapped[list["Staff"]] = relationship(
        "Staff", back_populates="villa", cascade="all, delete-orphan"
    )
    facilities: Mapped[list["FacilityChecklist"]] = relationship(
        "FacilityChecklist", back_populates="villa", cascade="all, delete-orphan"
    )
    photos: Mapped[list["Photo"]] = relationship(
        "Photo", back_populates="villa", cascade="all, delete-orphan"
    )
    step_progress: Mapped[list["OnboardingStepProgress"]] = relationship(
        "OnboardingStepProgress", back_populates="villa", cascade="all, delete-orphan"
    )


class Owner(Base):
    """Stage 2: owner identity, one per villa."""

    __tablename__ = "owners"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    villa_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("villas.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    owner_type: Mapped[str | None] = mapped_column(String(20), nullable=True)
    first_name: Mapped[str | None] = mapped_column(String(120), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(120), nullable=True)
    email: Mapped[str | None] = mapped_column(String(320), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(60), nullable=True)
    phone_country_code: Mapped[str | None] = mapped_column(String(8), nullable=True)
    phone_dial_code: Mapped[str | None] = mapped_column(String(8), nullable=True)
    alternative_phone: Mapped[str | None] = mapped_column(String(60), nullable=True)
    alternative_phone_country_code: Mapped[str | None] = mapped_column(String(8), nullable=True)
    alternative_phone_dial_code: Mapped[str | None] = mapped_column(String(8), nullable=True)
    nationality: Mapped[str | None] = mapped_column(String(80), nullable=True)
    passport_number: Mapped[str | None] = mapped_column(String(80), nullable=True)
    id_number: Mapped[str | None] = mapped_column(String(80), nullable=True)
    address: Mapped[str | None] = mapped_column(String(400), nullable=True)
    city: Mapped[str | None] = mapped_column(String(120), nullable=True)
    country: Mapped[str | None] = mapped_column(String(120), nullable=True)
    zip_code: Mapped[str | None] = mapped_column(String(30), nullable=True)
    company_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    company_address: Mapped[str | None] = mapped_column(String(400), nullable=True)
    company_tax_id: Mapped[str | None] = mapped_column(String(80), nullable=True)
    company_vat: Mapped[str | None] = mapped_column(String(80), nullable=True)
    manager_name: Mapped[str | None] = mapped_column(String(160), nullable=True)
    manager_email: Mapped[str | None] = mapped_column(String(320), nullable=True)
    manager_phone: Mapped[str | None] = mapped_column(String(60), nullable=True)
    manager_phone_country_code: Mapped[str | None] = mapped_column(String(8), nullable=True)
    manager_phone_dial_code: Mapped[str | None] = mapped_column(String(8), nullable=True)
    preferred_language: Mapped[str | None] = mapped_column(String(10), nullable=True)
    communication_preference: Mapped[str | None] = mapped_column(String(20), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    property_email: Mapped[str | None] = mapped_column(String(320), nullable=True)
    property_website: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_by: Mapped[str | None] = mapped_column(String(160), nullable=True)
    updated_by: Mapped[str | None] = mapped_column(String(160), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), default=utc_now, onupdate=utc_now
    )

    villa: Mapped["Villa"] = relationship("Villa", back_populates="owner")


class ContractualDetails(Base):
    """Stage 3: contractual terms, one per villa."""

    __tablename__ = "contractual_details"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    villa_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("villas.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    contract_start_date: Mapped[datetime | None] = mapped_column(TIMESTAMP(timezone=True), nullable=True)
    contract_end_date: Mapped[datetime | None] = mapped_column(TIMESTAMP(timezone=True), nullable=True)
    contract_type: Mapped[str | None] = mapped_column(String(20), nullable=True)
    commission_rate: Mapped[float | None] = mapped_column(Float, nullable=True)
    management_fee: Mapped[float | None] = mapped_column(Float, nullable=True)
    marketing_fee: Mapped[float | None] = mapped_column(Float, nullable=True)
    payment_terms: Mapped[str | None] = mapped_column(Text, nullable=True)
    payment_schedule: Mapped[str | None] = mapped_column(String(20), nullable=True)
    minimum_stay_nights: Mapped[int | None] = mapped_column(Integer, nullable=True)
    cancellation_policy: Mapped[str | None] = mapped_column(String(20), nullable=True)
    check_in_time: Mapped[str | None] = mapped_column(String(20), nullable=True)
    check_out_time: Mapped[str | None] = mapped_column(String(20), nullable=True)
    insurance_provider: Mapped[str | None] = mapped_column(String(160), nullable=True)
    insurance_policy_number: Mapped[str | None] = mapped_column(String(160), nullable=True)
    insurance_expiry: Mapped[datetime | None] = mapped_column(TIMESTAMP(timezone=True), nullable=True)
    special_terms: Mapped[str | None] = mapped_column(Text, nullable=True)
    payout_day1: Mapped[int | None] = mapped_column(Integer, nullable=True)
    payout_day2: Mapped[int | None] = mapped_column(Integer, nullable=True)
    dbd_number: Mapped[str | None] = mapped_column(String(80), nullable=True)
    payment_through_ipl: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    vat_payment_terms: Mapped[str | None] = mapped_column(Text, nullable=True)
    vat_registration_number: Mapped[str | None] = mapped_column(String(120), nullable=True)
    created_by: Mapped[str | None] = mapped_column(String(160), nullable=True)
    updated_by: Mapped[str | None] = mapped_column(String(160), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), default=utc_now, onupdate=utc_now
    )

    villa: Mapped["Villa"] = relationship("Villa", back_populates="contractual_details")


class BankDetails(Base):
    """Stage 4: banking details, one per villa."""

    __tablename__ = "bank_details"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    villa_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("villas.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    account_holder_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    bank_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    account_number: Mapped[str | None] = mapped_column(String(80), nullable=True)
    iban: Mapped[str | None] = mapped_column(String(34), nullable=True)
    swift_code: Mapped[str | None] = mapped_column(String(11), nullable=True)
    branch_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    branch_code: Mapped[str | None] = mapped_column(String(80), nullable=True)
    branch_address: Mapped[str | None] = mapped_column(String(400), nullable=True)
    bank_address: Mapped[str | None] = mapped_column(String(400), nullable=True)
    bank_country: Mapped[str | None] = mapped_column(String(120), nullable=True)
    currency: Mapped[str | None] = mapped_column(String(8), nullable=True)
    account_type: Mapped[str | None] = mapped_column(String(40), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_verified: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    routing_number: Mapped[str | None] = mapped_column(String(40), nullable=True)
    tax_id: Mapped[str | None] = mapped_column(String(80), nullable=True)
    created_by: Mapped[str | None] = mapped_column(String(160), nullable=True)
    updated_by: Mapped[str | None] = mapped_column(String(160), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), default=utc_now, onupdate=utc_now
    )

    villa: Mapped["Villa"] = relationship("Villa", back_populates="bank_details")


class OtaCredential(Base):
    """Stage 5: one distribution-channel account per platform."""

    __tablename__ = "ota_credentials"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    villa_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("villas.id", ondelete="CASCADE"), nullable=False, index=True
    )
    platform: Mapped[str] = mapped_column(String(40), nullable=False)
    username: Mapped[str | None] = mapped_column(String(160), nullable=True)
    password: Mapped[str | None] = mapped_column(String(160), nullable=True)
    property_id: Mapped[str | None] = mapped_column(String(160), nullable=True)
    api_key: Mapped[str | None] = mapped_column(String(160), nullable=True)
    api_secret: Mapped[str | None] = mapped_column(String(160), nullable=True)
    listing_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    account_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    property_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_by: Mapped[str | None] = mapped_column(String(160), nullable=True)
    updated_by: Mapped[str | None] = mapped_column(String(160), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), default=utc_now, onupdate=utc_now
    )

    villa: Mapped["Villa"] = relationship("Villa", back_populates="ota_credentials")


class VillaDocument(Base):
    """Stage 6: document metadata; binaries live in external storage."""

    __tablename__ = "villa_documents"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    villa_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("villas.id", ondelete="CASCADE"), nullable=False, index=True
    )
    document_type: Mapped[str | None] = mapped_column(String(120), nullable=True)
    category: Mapped[str | None] = mapped_column(String(120), nullable=True)
    filename: Mapped[str | None] = mapped_column(String(260), nullable=True)
    original_name: Mapped[str | None] = mapped_column(String(260), nullable=True)
    mime_type: Mapped[str | None] = mapped_column(String(120), nullable=True)
    size: Mapped[float | None] = mapped_column(Float, nullable=True)
    share_point_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    share_point_file_id: Mapped[str | None] = mapped_column(String(160), nullable=True)
    share_point_path: Mapped[str | None] = mapped_column(String(400), nullable=True)
    uploaded_at: Mapped[datetime | None] = mapped_column(TIMESTAMP(timezone=True), nullable=True)
    is_required: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    validated: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    validated_at: Mapped[datetime | None] = mapped_column(TIMESTAMP(timezone=True), nullable=True)
    validated_by: Mapped[str | None] = mapped_column(String(160), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_by: Mapped[str | None] = mapped_column(String(160), nullable=True)
    updated_by: Mapped[str | None] = mapped_column(String(160), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), default=utc_now, onupdate=utc_now
    )

    villa: Mapped["Villa"] = relationship("Villa", back_populates="documents")


class Staff(Base):
    """Stage 7: a staff member working at the villa."""

    __tablename__ = "staff"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    villa_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("villas.id", ondelete="CASCADE"), nullable=False, index=True
    )
    first_name: Mapped[str] = mapped_column(String(120), nullable=False)
    last_name: Mapped[str] = mapped_column(String(120), nullable=False)
    nickname: Mapped[str | None] = mapped_column(String(120), nullable=True)
    email: Mapped[str | None] = mapped_column(String(320), nullable=True)
    phone: Mapped[str] = mapped_column(String(60), nullable=False)
    phone_country_code: Mapped[str | None] = mapped_column(String(8), nullable=True)
    phone_dial_code: Mapped[str | None] = mapped_column(String(8), nullable=True)
    id_number: Mapped[str | None] = mapped_column(String(120), nullable=True)
    passport_number: Mapped[str | None] = mapped_column(String(120), nullable=True)
    nationality: Mapped[str | None] = mapped_column(String(80), nullable=True)
    date_of_birth: Mapped[datetime | None] = mapped_column(TIMESTAMP(timezone=True), nullable=True)
    marital_status: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    position: Mapped[str | None] = mapped_column(String(40), nullable=True)
    department: Mapped[str | None] = mapped_column(String(40), nullable=True)
    employment_type: Mapped[str | None] = mapped_column(String(20), nullable=True)
    start_date: Mapped[datetime | None] = mapped_column(TIMESTAMP(timezone=True), nullable=True)
    end_date: Mapped[datetime | None] = mapped_column(TIMESTAMP(timezone=True), nullable=True)
    salary: Mapped[float | None] = mapped_column(Float, nullable=True)
    salary_frequency: Mapped[str | None] = mapped_column(String(20), nullable=True)
    currency: Mapped[str | None] = mapped_column(String(8), nullable=True)
    number_of_day_salary: Mapped[int | None] = mapped_column(Integer, nullable=True)
    service_charge: Mapped[float | None] = mapped_column(Float, nullable=True)
    total_income: Mapped[float | None] = mapped_column(Float, nullable=True)
    total_net_income: Mapped[float | None] = mapped_column(Float, nullable=True)
    other_deductions: Mapped[float | None] = mapped_column(Float, nullable=True)
    has_accommodation: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    has_transport: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    has_health_insurance: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    has_work_insurance: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    food_allowance: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    transportation: Mapped[str | None] = mapped_column(String(160), nullable=True)
    emergency_contacts: Mapped[list | None] = mapped_column(JSON, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_by: Mapped[str | None] = mapped_column(String(160), nullable=True)
    updated_by: Mapped[str | None] = mapped_column(String(160), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), default=utc_now, onupdate=utc_now
    )

    villa: Mapped["Villa"] = relationship("Villa", back_populates="staff")


class FacilityChecklist(Base):
    """Stage 8: one amenity checklist item."""

    __tablename__ = "facility_checklists"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    villa_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("villas.id", ondelete="CASCADE"), nullable=False, index=True
    )
    category: Mapped[str] = mapped_column(String(120), nullable=False)
    subcategory: Mapped[str | None] = mapped_column(String(120), nullable=True)
    item_name: Mapped[str] = mapped_column(String(200), nullable=False)
    is_available: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    condition: Mapped[str] = mapped_column(
        String(20), nullable=False, default="good"
    )  # new | good | fair | poor
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    specifications: Mapped[str | None] = mapped_column(Text, nullable=True)
    photo_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    product_link: Mapped[str | None] = mapped_column(Text, nullable=True)
    checked_by: Mapped[str | None] = mapped_column(String(160), nullable=True)
    last_checked_at: Mapped[datetime | None] = mapped_column(TIMESTAMP(timezone=True), nullable=True)
    created_by: Mapped[str | None] = mapped_column(String(160), nullable=True)
    updated_by: Mapped[str | None] = mapped_column(String(160), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), default=utc_now, onupdate=utc_now
    )

    villa: Mapped["Villa"] = relationship("Villa", back_populates="facilities")


class Photo(Base):
    """Stage 9: photo metadata; binaries live in external storage."""

    __tablename__ = "photos"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    villa_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("villas.id", ondelete="CASCADE"), nullable=False, index=True
    )
    url: Mapped[str | None] = mapped_column(Text, nullable=True)
    caption: Mapped[str | None] = mapped_column(String(400), nullable=True)
    category: Mapped[str | None] = mapped_column(String(120), nullable=True)
    subcategory: Mapped[str | None] = mapped_column(String(120), nullable=True)
    is_main: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    sort_order: Mapped[int | None] = mapped_column(Integer, nullable=True)
    filename: Mapped[str | None] = mapped_column(String(260), nullable=True)
    original_name: Mapped[str | None] = mapped_column(String(260), nullable=True)
    mime_type: Mapped[str | None] = mapped_column(String(160), nullable=True)
    size: Mapped[float | None] = mapped_column(Float, nullable=True)
    share_point_file_id: Mapped[str | None] = mapped_column(String(200), nullable=True)
    share_point_path: Mapped[str | None] = mapped_column(String(400), nullable=True)
    file_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    thumbnail_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    alt_text: Mapped[str | None] = mapped_column(String(260), nullable=True)
    created_by: Mapped[str | None] = mapped_column(String(160), nullable=True)
    updated_by: Mapped[str | None] = mapped_column(String(160), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), default=utc_now, onupdate=utc_now
    )

    villa: Mapped["Villa"] = relationship("Villa", back_populates="photos")


class OnboardingProgress(Base):
    """Overall onboarding state, legacy flags and the stage 10 acknowledgement."""

    __tablename__ = "onboarding_progress"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    villa_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("villas.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    current_step: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="IN_PROGRESS"
    )  # IN_PROGRESS | COMPLETED

    # Legacy completion flags, written only by the flag synchronizer
    villa_info_completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    owner_details_completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    contractual_details_completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    bank_details_completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    ota_credentials_completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    documents_uploaded: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    staff_config_completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    facilities_completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    photos_uploaded: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    review_completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # Stage 10 data
    review_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    agreed_to_terms: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    data_accuracy_confirmed: Mapped[bool | None] = mapped_column(Boolean, nullable=True)

    completed_at: Mapped[datetime | None] = mapped_column(TIMESTAMP(timezone=True), nullable=True)
    created_by: Mapped[str | None] = mapped_column(String(160), nullable=True)
    updated_by: Mapped[str | None] = mapped_column(String(160), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), default=utc_now, onupdate=utc_now
    )

    villa: Mapped["Villa"] = relationship("Villa", back_populates="onboarding_progress")


class OnboardingStepProgress(Base):
    """Per-stage lifecycle and optimistic-concurrency version."""

    __tablename__ = "onboarding_step_progress"
    __table_args__ = (
        UniqueConstraint("villa_id", "step_number", name="uq_step_progress_villa_step"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    villa_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("villas.id", ondelete="CASCADE"), nullable=False, index=True
    )
    step_number: Mapped[int] = mapped_column(Integer, nullable=False)
    step_name: Mapped[str] = mapped_column(String(40), nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="not-started"
    )  # not-started | in-progress | completed | skipped
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    started_at: Mapped[datetime | None] = mapped_column(TIMESTAMP(timezone=True), nullable=True)
    completed_at: Mapped[datetime | None] = mapped_column(TIMESTAMP(timezone=True), nullable=True)
    skipped_at: Mapped[datetime | None] = mapped_column(TIMESTAMP(timezone=True), nullable=True)
    last_updated_at: Mapped[datetime | None] = mapped_column(TIMESTAMP(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), default=utc_now
    )

    villa: Mapped["Villa"] = relationship("Villa", back_populates="step_progress")
    fields: Mapped[list["StepFieldProgress"]] = relationship(
        "StepFieldProgress", back_populates="step_progress", cascade="all, delete-orphan"
    )


class StepFieldProgress(Base):
    """Status and last value of one field within a stage."""

    __tablename__ = "step_field_progress"
    __table_args__ = (
        UniqueConstraint("step_progress_id", "field_name", name="uq_field_progress_step_field"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    step_progress_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("onboarding_step_progress.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    field_name: Mapped[str] = mapped_column(String(120), nullable=False)
    field_type: Mapped[str] = mapped_column(
        String(20), nullable=False, default="null"
    )  # string | number | boolean | json | null
    value: Mapped[Any] = mapped_column(JSON, nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="not-started")
    is_required: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    started_at: Mapped[datetime | None] = mapped_column(TIMESTAMP(timezone=True), nullable=True)
    completed_at: Mapped[datetime | None] = mapped_column(TIMESTAMP(timezone=True), nullable=True)
    last_modified_at: Mapped[datetime | None] = mapped_column(TIMESTAMP(timezone=True), nullable=True)

    step_progress: Mapped["OnboardingStepProgress"] = relationship(
        "OnboardingStepProgress", back_populates="fields"
    )
