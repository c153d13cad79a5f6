"""Typed payload models for each onboarding stage and collection entity.

Models accept the canonical camelCase keys produced by the alias
canonicalizer and expose snake_case attributes matching the database
columns. Every field is optional at the model level so partial (draft) saves
validate; final-submit requirements are enforced by ``validation``.
"""

from typing import Any, Dict, List, Optional, Type

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from villa_onboarding.contracts import enums
from villa_onboarding.contracts.fields import (
    Boolean,
    Email,
    Integer,
    Number,
    RichText,
    String8,
    String10,
    String11,
    String20,
    String30,
    String34,
    String40,
    String60,
    String80,
    String120,
    String160,
    String200,
    String260,
    String400,
    StringList,
    Timestamp,
    Url,
    enum_of,
)


class PayloadModel(BaseModel):
    """Base for payload models: camelCase input, snake_case attributes."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        extra="ignore",
        allow_inf_nan=False,
        use_enum_values=True,
    )

    skipped: Boolean = None

    @classmethod
    def input_keys(cls) -> Dict[str, str]:
        """Map accepted input key -> attribute name."""
        return {
            (field.alias or name): name for name, field in cls.model_fields.items()
        }


# ---------------------------------------------------------------------------
# Scalar stages
# ---------------------------------------------------------------------------


class VillaInfoPayload(PayloadModel):
    villa_name: String200 = None
    address: String400 = None
    city: String120 = None
    country: String120 = None
    zip_code: String30 = None
    latitude: Number = None
    longitude: Number = None
    bedrooms: Integer = None
    bathrooms: Integer = None
    max_guests: Integer = None
    property_size: Number = None
    plot_size: Number = None
    year_built: Integer = None
    renovation_year: Integer = None
    property_type: enum_of(enums.PropertyType) = None
    villa_style: enum_of(enums.VillaStyle) = None
    location_type: String120 = None
    description: RichText = None
    short_description: RichText = None
    property_email: Email = None
    property_website: Url = None
    google_maps_link: Url = None
    google_coordinates: String120 = None
    old_rates_card_link: Url = None
    i_cal_calendar_link: Url = Field(default=None, alias="iCalCalendarLink")
    status: enum_of(enums.VillaStatus) = None
    is_active: Boolean = None
    tags: StringList = None


class OwnerDetailsPayload(PayloadModel):
    owner_type: enum_of(enums.OwnerType) = None
    first_name: String120 = None
    last_name: String120 = None
    email: Email = None
    phone: String60 = None
    phone_country_code: String8 = None
    phone_dial_code: String8 = None
    alternative_phone: String60 = None
    alternative_phone_country_code: String8 = None
    alternative_phone_dial_code: String8 = None
    nationality: String80 = None
    passport_number: String80 = None
    id_number: String80 = None
    address: String400 = None
    city: String120 = None
    country: String120 = None
    zip_code: String30 = None
    company_name: String200 = None
    company_address: String400 = None
    company_tax_id: String80 = None
    company_vat: String80 = None
    manager_name: String160 = None
    manager_email: Email = None
    manager_phone: String60 = None
    manager_phone_country_code: String8 = None
    manager_phone_dial_code: String8 = None
    preferred_language: String10 = None
    communication_preference: enum_of(enums.CommunicationPreference) = None
    notes: RichText = None
    property_email: Email = None
    property_website: Url = None


class ContractualDetailsPayload(PayloadModel):
    contract_start_date: Timestamp = None
    contract_end_date: Timestamp = None
    contract_type: enum_of(enums.ContractType) = None
    commission_rate: Number = None
    management_fee: Number = None
    marketing_fee: Number = None
    payment_terms: RichText = None
    payment_schedule: enum_of(enums.PaymentSchedule) = None
    minimum_stay_nights: Integer = None
    cancellation_policy: enum_of(enums.CancellationPolicy) = None
    check_in_time: String20 = None
    check_out_time: String20 = None
    insurance_provider: String160 = None
    insurance_policy_number: String160 = None
    insurance_expiry: Timestamp = None
    special_terms: RichText = None
    payout_day1: Integer = None
    payout_day2: Integer = None
    dbd_number: String80 = None
    payment_through_ipl: Boolean = Field(default=None, alias="paymentThroughIPL")
    vat_payment_terms: RichText = None
    vat_registration_number: String120 = None


class BankDetailsPayload(PayloadModel):
    account_holder_name: String200 = None
    bank_name: String200 = None
    account_number: String80 = None
    iban: String34 = None
    swift_code: String11 = None
    branch_name: String200 = None
    branch_code: String80 = None
    branch_address: String400 = None
    bank_address: String400 = None
    bank_country: String120 = None
    currency: String8 = None
    account_type: String40 = None
    notes: RichText = None
    is_verified: Boolean = None
    routing_number: String40 = None
    tax_id: String80 = None


class ReviewPayload(PayloadModel):
    review_notes: RichText = None
    agreed_to_terms: Boolean = None
    data_accuracy_confirmed: Boolean = None


# ---------------------------------------------------------------------------
# Collection stages: entities are validated one by one by the persister
# ---------------------------------------------------------------------------

# Items stay untyped here so one malformed entry only fails itself
EntityList = Optional[List[Any]]


class OtaCredentialsPayload(PayloadModel):
    platforms: EntityList = None


class DocumentsPayload(PayloadModel):
    documents: EntityList = None


class StaffConfigPayload(PayloadModel):
    staff: EntityList = None


class FacilitiesPayload(PayloadModel):
    facilities: EntityList = None


class PhotosPayload(PayloadModel):
    photos: EntityList = None
    bedrooms: EntityList = None


STEP_PAYLOAD_MODELS: Dict[int, Type[PayloadModel]] = {
    1: VillaInfoPayload,
    2: OwnerDetailsPayload,
    3: ContractualDetailsPayload,
    4: BankDetailsPayload,
    5: OtaCredentialsPayload,
    6: DocumentsPayload,
    7: StaffConfigPayload,
    8: FacilitiesPayload,
    9: PhotosPayload,
    10: ReviewPayload,
}


# ---------------------------------------------------------------------------
# Collection entities
# ---------------------------------------------------------------------------


class EntityModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        extra="ignore",
        allow_inf_nan=False,
        use_enum_values=True,
    )

    @classmethod
    def input_keys(cls) -> Dict[str, str]:
        return {
            (field.alias or name): name for name, field in cls.model_fields.items()
        }


class OtaCredentialEntity(EntityModel):
    platform: enum_of(enums.OtaPlatform) = None
    username: String160 = None
    password: String160 = None
    property_id: String160 = None
    api_key: String160 = None
    api_secret: String160 = None
    listing_url: Url = None
    account_url: Url = None
    property_url: Url = None
    is_active: Boolean = None


class DocumentEntity(EntityModel):
    document_type: String120 = Field(default=None, alias="type")
    category: String120 = None
    filename: String260 = None
    original_name: String260 = None
    mime_type: String120 = None
    size: Number = None
    share_point_url: Url = None
    share_point_file_id: String160 = None
    share_point_path: String400 = None
    uploaded_at: Timestamp = None
    is_required: Boolean = None
    is_active: Boolean = None
    validated: Boolean = None
    validated_at: Timestamp = None
    validated_by: String160 = None
    description: RichText = None
    notes: RichText = None


class EmergencyContact(EntityModel):
    first_name: String120 = None
    last_name: String120 = None
    phone: String60 = None
    phone_country_code: String8 = None
    phone_dial_code: String8 = None
    email: Email = None
    relationship: String40 = None


class StaffEntity(EntityModel):
    first_name: String120 = None
    last_name: String120 = None
    nickname: String120 = None
    email: Email = None
    phone: String60 = None
    phone_country_code: String8 = None
    phone_dial_code: String8 = None
    id_number: String120 = None
    passport_number: String120 = None
    nationality: String80 = None
    date_of_birth: Timestamp = None
    marital_status: Boolean = None
    position: enum_of(enums.StaffPosition) = None
    department: enum_of(enums.StaffDepartment) = None
    employment_type: enum_of(enums.EmploymentType) = None
    start_date: Timestamp = None
    end_date: Timestamp = None
    salary: Number = None
    salary_frequency: enum_of(enums.SalaryFrequency) = None
    currency: String8 = None
    number_of_day_salary: Integer = None
    service_charge: Number = None
    total_income: Number = None
    total_net_income: Number = None
    other_deductions: Number = None
    has_accommodation: Boolean = None
    has_transport: Boolean = None
    has_health_insurance: Boolean = None
    has_work_insurance: Boolean = None
    food_allowance: Boolean = None
    transportation: String160 = None
    emergency_contacts: Optional[List[EmergencyContact]] = None
    notes: RichText = None


class FacilityEntity(EntityModel):
    category: String120 = None
    subcategory: String120 = None
    item_name: String200 = None
    is_available: Boolean = None
    quantity: Integer = None
    condition: String40 = None
    notes: RichText = None
    specifications: RichText = None
    photo_url: Url = None
    product_link: Url = None
    checked_by: String160 = None
    last_checked_at: Timestamp = None


class PhotoEntity(EntityModel):
    url: Url = None
    caption: String400 = None
    category: String120 = None
    subcategory: String120 = None
    is_main: Boolean = None
    order: Integer = None
    sort_order: Integer = None
    filename: String260 = None
    original_name: String260 = None
    mime_type: String160 = None
    size: Number = None
    share_point_file_id: String200 = None
    share_point_path: String400 = None
    file_url: Url = None
    thumbnail_url: Url = None
    alt_text: String260 = None


ENTITY_MODELS: Dict[str, Type[EntityModel]] = {
    "platforms": OtaCredentialEntity,
    "documents": DocumentEntity,
    "staff": StaffEntity,
    "facilities": FacilityEntity,
    "photos": PhotoEntity,
}

# Entity fields that must carry a value for the entity to be stored
ENTITY_REQUIRED_FIELDS: Dict[str, tuple] = {
    "platforms": ("platform",),
    "documents": (),
    "staff": ("firstName", "lastName", "phone"),
    "facilities": ("category", "itemName"),
    "photos": (),
}
