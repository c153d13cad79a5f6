"""Enumerated values accepted by the onboarding payloads."""

from enum import Enum


class PropertyType(str, Enum):
    VILLA = "VILLA"
    APARTMENT = "APARTMENT"
    PENTHOUSE = "PENTHOUSE"
    TOWNHOUSE = "TOWNHOUSE"
    CHALET = "CHALET"
    BUNGALOW = "BUNGALOW"
    ESTATE = "ESTATE"
    HOUSE = "HOUSE"


class VillaStyle(str, Enum):
    MODERN = "MODERN"
    TRADITIONAL = "TRADITIONAL"
    MEDITERRANEAN = "MEDITERRANEAN"
    CONTEMPORARY = "CONTEMPORARY"
    BALINESE = "BALINESE"
    MINIMALIST = "MINIMALIST"
    LUXURY = "LUXURY"
    RUSTIC = "RUSTIC"


class VillaStatus(str, Enum):
    DRAFT = "DRAFT"
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    ARCHIVED = "ARCHIVED"


class OwnerType(str, Enum):
    INDIVIDUAL = "INDIVIDUAL"
    COMPANY = "COMPANY"


class CommunicationPreference(str, Enum):
    EMAIL = "EMAIL"
    PHONE = "PHONE"
    WHATSAPP = "WHATSAPP"
    SMS = "SMS"


class ContractType(str, Enum):
    EXCLUSIVE = "EXCLUSIVE"
    NON_EXCLUSIVE = "NON_EXCLUSIVE"
    SEASONAL = "SEASONAL"
    LONG_TERM = "LONG_TERM"


class PaymentSchedule(str, Enum):
    WEEKLY = "WEEKLY"
    BIWEEKLY = "BIWEEKLY"
    MONTHLY = "MONTHLY"
    QUARTERLY = "QUARTERLY"
    ANNUALLY = "ANNUALLY"


class CancellationPolicy(str, Enum):
    FLEXIBLE = "FLEXIBLE"
    MODERATE = "MODERATE"
    STRICT = "STRICT"
    SUPER_STRICT = "SUPER_STRICT"
    NON_REFUNDABLE = "NON_REFUNDABLE"


class OtaPlatform(str, Enum):
    BOOKING_COM = "BOOKING_COM"
    AIRBNB = "AIRBNB"
    VRBO = "VRBO"
    EXPEDIA = "EXPEDIA"
    AGODA = "AGODA"
    HOTELS_COM = "HOTELS_COM"
    TRIPADVISOR = "TRIPADVISOR"
    MARRIOTT_HOMES_VILLAS = "MARRIOTT_HOMES_VILLAS"
    HOMEAWAY = "HOMEAWAY"
    FLIPKEY = "FLIPKEY"
    DIRECT = "DIRECT"


class StaffPosition(str, Enum):
    VILLA_MANAGER = "VILLA_MANAGER"
    HOUSEKEEPER = "HOUSEKEEPER"
    GARDENER = "GARDENER"
    POOL_MAINTENANCE = "POOL_MAINTENANCE"
    SECURITY = "SECURITY"
    CHEF = "CHEF"
    DRIVER = "DRIVER"
    CONCIERGE = "CONCIERGE"
    MAINTENANCE = "MAINTENANCE"
    OTHER = "OTHER"


class StaffDepartment(str, Enum):
    MANAGEMENT = "MANAGEMENT"
    HOUSEKEEPING = "HOUSEKEEPING"
    MAINTENANCE = "MAINTENANCE"
    SECURITY = "SECURITY"
    HOSPITALITY = "HOSPITALITY"
    ADMINISTRATION = "ADMINISTRATION"


class EmploymentType(str, Enum):
    FULL_TIME = "FULL_TIME"
    PART_TIME = "PART_TIME"
    CONTRACT = "CONTRACT"
    SEASONAL = "SEASONAL"
    FREELANCE = "FREELANCE"


class SalaryFrequency(str, Enum):
    HOURLY = "HOURLY"
    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    BIWEEKLY = "BIWEEKLY"
    MONTHLY = "MONTHLY"
    ANNUALLY = "ANNUALLY"


class FacilityCondition(str, Enum):
    NEW = "new"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


# Position drives the department and employment type a new staff row gets
DEPARTMENT_BY_POSITION = {
    StaffPosition.VILLA_MANAGER: StaffDepartment.MANAGEMENT,
    StaffPosition.HOUSEKEEPER: StaffDepartment.HOUSEKEEPING,
    StaffPosition.GARDENER: StaffDepartment.MAINTENANCE,
    StaffPosition.POOL_MAINTENANCE: StaffDepartment.MAINTENANCE,
    StaffPosition.SECURITY: StaffDepartment.SECURITY,
    StaffPosition.CHEF: StaffDepartment.HOSPITALITY,
    StaffPosition.DRIVER: StaffDepartment.HOSPITALITY,
    StaffPosition.CONCIERGE: StaffDepartment.HOSPITALITY,
    StaffPosition.MAINTENANCE: StaffDepartment.MAINTENANCE,
    StaffPosition.OTHER: StaffDepartment.ADMINISTRATION,
}

EMPLOYMENT_TYPE_BY_POSITION = {
    StaffPosition.VILLA_MANAGER: EmploymentType.FULL_TIME,
    StaffPosition.HOUSEKEEPER: EmploymentType.FULL_TIME,
    StaffPosition.GARDENER: EmploymentType.PART_TIME,
    StaffPosition.POOL_MAINTENANCE: EmploymentType.CONTRACT,
    StaffPosition.SECURITY: EmploymentType.FULL_TIME,
    StaffPosition.CHEF: EmploymentType.FULL_TIME,
    StaffPosition.DRIVER: EmploymentType.PART_TIME,
    StaffPosition.CONCIERGE: EmploymentType.FULL_TIME,
    StaffPosition.MAINTENANCE: EmploymentType.CONTRACT,
    StaffPosition.OTHER: EmploymentType.FULL_TIME,
}
