"""Alias canonicalization of client payloads.

Clients send the same fact under different key names depending on which form
(or which version of a form) produced the payload. Each canonical field owns a
priority-ordered alias list; the canonical name is always tried first and the
first present key wins, even when later aliases are also present.
"""

from collections.abc import Mapping
from typing import Any, Dict, List, Tuple

# Canonical field -> aliases in priority order. Fields without aliases are
# listed so that the stage's canonical key set is declared in one place.
STEP_FIELD_ALIASES: Dict[int, Dict[str, Tuple[str, ...]]] = {
    1: {
        "villaName": ("name",),
        "address": ("villaAddress",),
        "city": ("villaCity",),
        "country": ("villaCountry",),
        "zipCode": ("villaPostalCode", "postalCode", "zip"),
        "latitude": (),
        "longitude": (),
        "bedrooms": (),
        "bathrooms": (),
        "maxGuests": (),
        "propertySize": ("villaArea",),
        "plotSize": ("landArea",),
        "yearBuilt": (),
        "renovationYear": (),
        "propertyType": ("type",),
        "villaStyle": (),
        "locationType": ("location",),
        "description": (),
        "shortDescription": (),
        "propertyEmail": (),
        "propertyWebsite": (),
        "googleMapsLink": (),
        "googleCoordinates": (),
        "oldRatesCardLink": (),
        "iCalCalendarLink": (),
        "status": (),
        "isActive": (),
        "tags": (),
        "skipped": (),
    },
    2: {
        "ownerType": (),
        "firstName": ("ownerFirstName",),
        "lastName": ("ownerLastName",),
        "email": ("ownerEmail",),
        "phone": ("ownerPhone",),
        "phoneCountryCode": (),
        "phoneDialCode": (),
        "alternativePhone": (),
        "alternativePhoneCountryCode": (),
        "alternativePhoneDialCode": (),
        "nationality": (),
        "passportNumber": (),
        "idNumber": ("idCard",),
        "address": ("ownerAddress",),
        "city": ("ownerCity",),
        "country": ("ownerCountry",),
        "zipCode": ("ownerZipCode",),
        "companyName": (),
        "companyAddress": (),
        "companyTaxId": (),
        "companyVat": (),
        "managerName": (),
        "managerEmail": (),
        "managerPhone": (),
        "managerPhoneCountryCode": (),
        "managerPhoneDialCode": (),
        "preferredLanguage": (),
        "communicationPreference": (),
        "notes": (),
        "propertyEmail": (),
        "propertyWebsite": (),
        "skipped": (),
    },
    3: {
        "contractStartDate": ("contractSignatureDate",),
        "contractEndDate": ("contractRenewalDate",),
        "contractType": (),
        "commissionRate": ("serviceCharge",),
        "managementFee": (),
        "marketingFee": (),
        "paymentTerms": (),
        "paymentSchedule": (),
        "minimumStayNights": (),
        "cancellationPolicy": (),
        "checkInTime": (),
        "checkOutTime": (),
        "insuranceProvider": (),
        "insurancePolicyNumber": (),
        "insuranceExpiry": (),
        "specialTerms": (),
        "payoutDay1": (),
        "payoutDay2": (),
        "dbdNumber": (),
        "paymentThroughIPL": (),
        "vatPaymentTerms": (),
        "vatRegistrationNumber": (),
        "skipped": (),
    },
    4: {
        "accountHolderName": (),
        "bankName": (),
        "accountNumber": ("bankAccountNumber",),
        "iban": (),
        "swiftCode": (),
        "branchName": (),
        "branchCode": (),
        "branchAddress": (),
        "bankAddress": (),
        "bankCountry": (),
        "currency": (),
        "accountType": (),
        "notes": (),
        "isVerified": (),
        "routingNumber": (),
        "taxId": (),
        "skipped": (),
    },
    5: {"platforms": (), "skipped": ()},
    6: {"documents": (), "skipped": ()},
    7: {"staff": (), "skipped": ()},
    8: {"facilities": (), "skipped": ()},
    9: {"photos": (), "bedrooms": (), "skipped": ()},
    10: {
        "reviewNotes": (),
        "agreedToTerms": (),
        "dataAccuracyConfirmed": (),
        "skipped": (),
    },
}

# Aliases applied to each entity inside a collection stage
ENTITY_FIELD_ALIASES: Dict[str, Dict[str, Tuple[str, ...]]] = {
    "platforms": {},
    "documents": {"type": ("documentType",)},
    "staff": {
        "salary": ("baseSalary",),
        "idNumber": ("idCard",),
        "otherDeductions": ("otherDeduct",),
        "hasWorkInsurance": ("workInsurance",),
        "hasHealthInsurance": ("healthInsurance",),
    },
    "facilities": {"isAvailable": ("available",)},
    "photos": {},
}

# Required-on-final-submit subsets; stages 5-10 have none
REQUIRED_FIELDS_BY_STEP: Dict[int, Tuple[str, ...]] = {
    1: ("villaName", "address", "city", "country", "bedrooms", "bathrooms", "maxGuests", "propertyType"),
    2: ("firstName", "lastName", "email", "phone", "address", "city", "country"),
    3: ("contractStartDate", "contractType", "commissionRate"),
    4: ("accountHolderName", "bankName", "accountNumber"),
}


def canonical_fields(step: int) -> List[str]:
    """Return the canonical field names declared for a stage."""
    return list(STEP_FIELD_ALIASES.get(step, {}))


def required_fields(step: int) -> Tuple[str, ...]:
    return REQUIRED_FIELDS_BY_STEP.get(step, ())


def _canonicalize(aliases: Dict[str, Tuple[str, ...]], data: Any) -> Dict[str, Any]:
    if not isinstance(data, Mapping):
        return {}

    output: Dict[str, Any] = {}
    consumed = set()

    for field, field_aliases in aliases.items():
        search_keys = (field,) + tuple(field_aliases)
        consumed.update(search_keys)
        for key in search_keys:
            if key in data:
                output[field] = data[key]
                break

    for key, value in data.items():
        if key not in consumed:
            output[key] = value

    return output


def canonicalize_step_data(step: int, data: Any) -> Dict[str, Any]:
    """Map client key names onto the canonical field set of a stage.

    Args:
        step: Stage ordinal
        data: Raw client payload; anything other than a mapping yields {}

    Returns:
        Dict with canonical keys; keys with no alias mapping pass through
    """
    return _canonicalize(STEP_FIELD_ALIASES.get(step, {}), data)


def canonicalize_entity(collection: str, data: Any) -> Dict[str, Any]:
    """Map entity-level aliases inside a collection (staff, facilities, ...)."""
    return _canonicalize(ENTITY_FIELD_ALIASES.get(collection, {}), data)
